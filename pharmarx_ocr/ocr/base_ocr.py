from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Annotation:
    text: str | None
    confidence: float | None = None  # 0.0 to 1.0


@dataclass(frozen=True)
class OCRProcessingRequest:
    order_id: str
    image_url: str  # any scheme; image or PDF


@dataclass(frozen=True)
class OCRProcessingResult:
    success: bool
    processed_at: datetime
    extracted_text: str | None = None
    confidence: float | None = None
    error: str | None = None


class RecognitionClient:
    async def detect_text(self, image_url: str) -> list[Annotation] | None:
        raise NotImplementedError

    async def get_service_identity(self) -> str:
        raise NotImplementedError
