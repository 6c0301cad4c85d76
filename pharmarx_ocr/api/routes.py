from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pharmarx_ocr.api.dependencies import get_ocr_service, get_session_factory
from pharmarx_ocr.core.enums import OCRStatus
from pharmarx_ocr.db.models import PrescriptionOrder
from pharmarx_ocr.db.session import get_session
from pharmarx_ocr.ocr.base_ocr import OCRProcessingRequest
from pharmarx_ocr.pipeline.pipeline import OCRService
from pharmarx_ocr.schemas import ApiResponse, HealthStatus, OCRStatusResponse

logger = logging.getLogger(__name__)
router = APIRouter()


def _respond(status_code: int, body: ApiResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


def _error(status_code: int, message: str) -> JSONResponse:
    return _respond(status_code, ApiResponse(success=False, error=message))


async def _process_ocr_async(
    service: OCRService,
    request: OCRProcessingRequest,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    try:
        async with session_factory() as session:
            await service.process_image_and_update_order(request, session)
    except Exception:
        logger.exception("ocr_background_task_failed", extra={"order_id": request.order_id})


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/orders/{order_id}/process-ocr")
async def process_ocr(
    order_id: str,
    background_tasks: BackgroundTasks,
    session: AsyncSession = Depends(get_session),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    service: OCRService = Depends(get_ocr_service),
) -> JSONResponse:
    logger.info("ocr_requested", extra={"order_id": order_id})

    order = await session.get(PrescriptionOrder, order_id)
    if order is None:
        return _error(404, "Order not found")

    if not order.original_image_url:
        return _error(400, "No image URL found for this order")

    if order.ocr_status == OCRStatus.PROCESSING.value:
        return _error(409, "OCR processing already in progress for this order")

    if order.ocr_status == OCRStatus.COMPLETED.value:
        return _respond(
            200,
            ApiResponse(
                success=True,
                data=OCRStatusResponse(
                    order_id=order_id,
                    status=OCRStatus.COMPLETED,
                    extracted_text=order.extracted_text,
                    processed_at=order.ocr_processed_at,
                ),
                message="OCR already completed for this order",
            ),
        )

    validation = service.validate_image_for_ocr(order.original_image_url)
    if not validation.is_valid:
        return _error(400, f"Invalid image for OCR: {', '.join(validation.errors)}")

    order.ocr_status = OCRStatus.PROCESSING.value
    order.updated_at = datetime.now(timezone.utc)
    await session.commit()

    background_tasks.add_task(
        _process_ocr_async,
        service,
        OCRProcessingRequest(order_id=order_id, image_url=order.original_image_url),
        session_factory,
    )

    return _respond(
        202,
        ApiResponse(
            success=True,
            data=OCRStatusResponse(order_id=order_id, status=OCRStatus.PROCESSING),
            message="OCR processing started",
        ),
    )


@router.get("/orders/{order_id}/ocr-status")
async def get_ocr_status(
    order_id: str,
    session: AsyncSession = Depends(get_session),
) -> JSONResponse:
    order = await session.get(PrescriptionOrder, order_id)
    if order is None:
        return _error(404, "Order not found")

    confidence = float(order.ocr_confidence) if order.ocr_confidence is not None else None
    return _respond(
        200,
        ApiResponse(
            success=True,
            data=OCRStatusResponse(
                order_id=order_id,
                status=OCRStatus(order.ocr_status or OCRStatus.PENDING.value),
                extracted_text=order.extracted_text,
                confidence=confidence,
                error=order.ocr_error,
                processed_at=order.ocr_processed_at,
            ),
        ),
    )


@router.get("/ocr/health")
async def ocr_health(service: OCRService = Depends(get_ocr_service)) -> JSONResponse:
    if await service.health_check():
        return _respond(
            200,
            ApiResponse(
                success=True,
                data=HealthStatus(status="healthy"),
                message="OCR service is operational",
            ),
        )
    return _error(503, "OCR service is unavailable")
