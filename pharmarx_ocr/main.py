from __future__ import annotations

import logging

from fastapi import FastAPI

from pharmarx_ocr.api.dependencies import build_ocr_service
from pharmarx_ocr.api.routes import router
from pharmarx_ocr.core.config import settings
from pharmarx_ocr.core.logging import configure_logging
from pharmarx_ocr.db.init_db import init_db
from pharmarx_ocr.db.session import SessionLocal, engine


def create_app() -> FastAPI:
    configure_logging(settings.log_level, json_logs=settings.app_env == "prod")
    app = FastAPI(title="PharmaRx OCR Service", version="0.1.0")
    app.include_router(router)

    @app.get("/")
    async def root():
        return {
            "message": "Welcome to the PharmaRx OCR API",
            "docs": "/docs",
            "health": "/health",
        }

    @app.on_event("startup")
    async def _startup() -> None:
        logging.getLogger(__name__).info("startup", extra={"ocr_provider": settings.ocr_provider})
        app.state.ocr_service = build_ocr_service(settings)
        app.state.session_factory = SessionLocal
        await init_db(engine)

    return app


app = create_app()
