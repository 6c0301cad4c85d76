from __future__ import annotations

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pharmarx_ocr.core.config import Settings
from pharmarx_ocr.core.gcp_config import load_ocr_config
from pharmarx_ocr.ocr.factory import get_recognition_client
from pharmarx_ocr.pipeline.pipeline import OCRService


def build_ocr_service(settings: Settings) -> OCRService:
    """Construct the process-wide OCR handle; raises ConfigurationError on bad config."""
    config = load_ocr_config(settings)
    return OCRService(get_recognition_client(config), config)


def get_ocr_service(request: Request) -> OCRService:
    return request.app.state.ocr_service


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Session factory for work that outlives the request (background OCR)."""
    return request.app.state.session_factory
