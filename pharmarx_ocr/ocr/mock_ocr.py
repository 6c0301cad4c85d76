from __future__ import annotations

from pharmarx_ocr.ocr.base_ocr import Annotation, RecognitionClient


class MockRecognitionClient(RecognitionClient):
    async def detect_text(self, image_url: str) -> list[Annotation] | None:
        # Mock OCR for development/testing
        return [
            Annotation(
                text="Rx: Amoxicillin 500mg\nTake one capsule twice daily\nQty: 20\nRefills: 0",
                confidence=0.92,
            ),
        ]

    async def get_service_identity(self) -> str:
        return "mock-project"
