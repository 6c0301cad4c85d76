from __future__ import annotations

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel

from pharmarx_ocr.core.enums import OCRStatus

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool
    data: T | None = None
    error: str | None = None
    message: str | None = None


class OCRStatusResponse(BaseModel):
    order_id: str
    status: OCRStatus
    extracted_text: str | None = None
    confidence: float | None = None
    error: str | None = None
    processed_at: datetime | None = None


class HealthStatus(BaseModel):
    status: str
