from __future__ import annotations

from pharmarx_ocr.core.config import settings
from pharmarx_ocr.core.gcp_config import OCRConfig
from pharmarx_ocr.ocr.base_ocr import RecognitionClient
from pharmarx_ocr.ocr.mock_ocr import MockRecognitionClient


def get_recognition_client(config: OCRConfig) -> RecognitionClient:
    """Return the configured recognition client.

    OCR_PROVIDER options:
        mock          : fixed prescription text (dev/test, no credentials needed)
        google_vision : VisionRecognitionClient (Google Cloud Vision API)
    """
    provider = settings.ocr_provider.lower().strip()

    if provider == "mock":
        return MockRecognitionClient()

    if provider == "google_vision":
        from pharmarx_ocr.ocr.engines import VisionRecognitionClient
        return VisionRecognitionClient(credentials=config.credentials)

    raise ValueError(f"Unknown OCR_PROVIDER={settings.ocr_provider!r}")
