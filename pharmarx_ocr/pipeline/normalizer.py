"""Map raw recognition output to an OCRProcessingResult."""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from pharmarx_ocr.confidence.confidence import compute_confidence
from pharmarx_ocr.ocr.base_ocr import Annotation, OCRProcessingResult

NO_TEXT_DETECTED = "No text detected"
EMPTY_TEXT_EXTRACTED = "Empty text extracted"
MALFORMED_RESPONSE = "Malformed recognition response"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def failure(message: str) -> OCRProcessingResult:
    return OCRProcessingResult(success=False, error=message, processed_at=_now())


def normalize(annotations: Sequence[Annotation] | None) -> OCRProcessingResult:
    # An empty list and an annotation without text are reported differently.
    if not annotations:
        return failure(NO_TEXT_DETECTED)

    if isinstance(annotations, (str, bytes)) or not isinstance(annotations, Sequence):
        return failure(MALFORMED_RESPONSE)

    first = annotations[0]
    if not isinstance(first, Annotation):
        return failure(MALFORMED_RESPONSE)

    if not isinstance(first.text, str) or not first.text.strip():
        return failure(EMPTY_TEXT_EXTRACTED)

    return OCRProcessingResult(
        success=True,
        extracted_text=first.text,
        confidence=compute_confidence(annotations),
        processed_at=_now(),
    )
