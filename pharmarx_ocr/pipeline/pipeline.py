"""OCR processing workflow: validate → recognize (with retry) → normalize.

`OCRService` is built once at application startup and handed to request
handlers. Nothing in `process_image` or `health_check` raises: every
failure ends up as a result value.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from pharmarx_ocr.core.enums import OCRStatus
from pharmarx_ocr.core.exceptions import ConfigurationError
from pharmarx_ocr.core.gcp_config import ConfigValidation, OCRConfig, validate_ocr_config
from pharmarx_ocr.db.models import PrescriptionOrder
from pharmarx_ocr.ocr.base_ocr import (
    Annotation,
    OCRProcessingRequest,
    OCRProcessingResult,
    RecognitionClient,
)
from pharmarx_ocr.ocr.errors import RecognitionError
from pharmarx_ocr.pipeline.normalizer import failure, normalize
from pharmarx_ocr.pipeline.retry import call_with_retry
from pharmarx_ocr.validation.validator import validate_image_for_ocr, validate_request

logger = logging.getLogger(__name__)


class OCRService:
    def __init__(self, client: RecognitionClient, config: OCRConfig) -> None:
        validation = validate_ocr_config(config)
        if not validation.is_valid:
            logger.error("ocr_config_invalid", extra={"errors": validation.errors})
            raise ConfigurationError(
                f"OCR configuration invalid: {', '.join(validation.errors)}",
                details={"errors": validation.errors},
            )

        self._client = client
        self._config = config
        logger.info(
            "ocr_service_initialized",
            extra={
                "max_retries": config.retry.max_retries,
                "retry_delay_ms": config.retry.retry_delay_ms,
            },
        )

    # ------------------------------------------------------------------ #
    #  Public entry points                                                #
    # ------------------------------------------------------------------ #

    async def process_image(self, request: OCRProcessingRequest) -> OCRProcessingResult:
        errors = validate_request(request)
        if errors:
            logger.warning("ocr_request_invalid", extra={"errors": errors})
            return failure(", ".join(errors))

        logger.info("ocr_started", extra={"order_id": request.order_id})

        try:
            annotations = await call_with_retry(
                self._detect_text,
                request.image_url,
                config=self._config.retry,
            )
        except RecognitionError as exc:
            logger.error(
                "ocr_failed",
                extra={"order_id": request.order_id, "error_kind": exc.kind, "error": exc.message},
            )
            return failure(exc.message)
        except Exception as exc:
            logger.exception("ocr_unexpected_error", extra={"order_id": request.order_id})
            return failure(str(exc) or "Unknown OCR processing error")

        result = normalize(annotations)
        if result.success:
            logger.info(
                "ocr_complete",
                extra={
                    "order_id": request.order_id,
                    "chars": len(result.extracted_text or ""),
                    "confidence": result.confidence,
                },
            )
        else:
            logger.warning("ocr_no_text", extra={"order_id": request.order_id, "error": result.error})
        return result

    async def health_check(self) -> bool:
        try:
            await self._client.get_service_identity()
            return True
        except Exception as exc:
            logger.error("ocr_health_check_failed", extra={"error": str(exc)})
            return False

    def validate_image_for_ocr(self, image_url: str | None) -> ConfigValidation:
        return validate_image_for_ocr(image_url)

    async def process_image_and_update_order(
        self,
        request: OCRProcessingRequest,
        session: AsyncSession,
    ) -> None:
        """Run OCR for an order and store the outcome on its row."""
        order_id = request.order_id
        try:
            result = await self.process_image(request)
            order = await session.get(PrescriptionOrder, order_id)
            if order is None:
                raise ValueError(f"Order {order_id} not found")

            order.ocr_processed_at = result.processed_at
            order.updated_at = datetime.now(timezone.utc)
            if result.success:
                order.ocr_status = OCRStatus.COMPLETED.value
                order.extracted_text = result.extracted_text
                order.ocr_confidence = result.confidence
                order.ocr_error = None
            else:
                order.ocr_status = OCRStatus.FAILED.value
                order.ocr_error = result.error
            await session.commit()

            logger.info(
                "order_ocr_updated",
                extra={"order_id": order_id, "ocr_status": order.ocr_status},
            )

        except Exception as exc:
            logger.exception("order_ocr_update_failed", extra={"order_id": order_id})
            await self._mark_failed(session, order_id, str(exc) or "Unknown error during OCR processing")

    # ------------------------------------------------------------------ #
    #  Internals                                                          #
    # ------------------------------------------------------------------ #

    async def _detect_text(self, image_url: str) -> list[Annotation] | None:
        # Classification happens here so the retry loop only sees tagged errors.
        try:
            return await self._client.detect_text(image_url)
        except RecognitionError:
            raise
        except Exception as exc:
            raise RecognitionError.from_exception(exc) from exc

    async def _mark_failed(self, session: AsyncSession, order_id: str, message: str) -> None:
        try:
            await session.rollback()
            order = await session.get(PrescriptionOrder, order_id)
            if order is None:
                return
            now = datetime.now(timezone.utc)
            order.ocr_status = OCRStatus.FAILED.value
            order.ocr_error = message
            order.ocr_processed_at = now
            order.updated_at = now
            await session.commit()
        except Exception:
            logger.exception("order_ocr_failure_not_recorded", extra={"order_id": order_id})
