"""Google Cloud Vision recognition client."""
from __future__ import annotations

import asyncio
import logging

import google.auth
from google.cloud import vision
from google.oauth2 import service_account

from pharmarx_ocr.core.exceptions import OCRServiceError
from pharmarx_ocr.core.gcp_config import GCPCredentials
from pharmarx_ocr.ocr.base_ocr import Annotation, RecognitionClient
from pharmarx_ocr.ocr.errors import RecognitionError, kind_from_code

logger = logging.getLogger(__name__)

_SCOPES = ["https://www.googleapis.com/auth/cloud-vision"]
_TOKEN_URI = "https://oauth2.googleapis.com/token"


class VisionRecognitionClient(RecognitionClient):
    """Recognition client backed by Google Cloud Vision TEXT_DETECTION.

    The blocking Vision client is created on first use and called from the
    default executor. Every upstream failure leaves this class as a
    `RecognitionError` carrying the classified kind and the upstream message.

    Config (via .env):
        OCR_PROVIDER=google_vision
        GOOGLE_APPLICATION_CREDENTIALS=/path/to/key.json
        # or FIREBASE_CLIENT_EMAIL + FIREBASE_PRIVATE_KEY
        GOOGLE_CLOUD_PROJECT_ID=...
    """

    def __init__(self, credentials: GCPCredentials | None = None) -> None:
        self._credentials = credentials or GCPCredentials()
        self._client = None

    def _resolve_credentials(self):
        """Return (google credentials or None for ADC, project id or None)."""
        creds = self._credentials
        if creds.has_key_file:
            sa = service_account.Credentials.from_service_account_file(
                creds.key_filename, scopes=_SCOPES
            )
            return sa, creds.project_id or sa.project_id

        if creds.has_inline_credentials:
            info = {
                "type": "service_account",
                "client_email": creds.client_email,
                "private_key": creds.private_key,
                "token_uri": _TOKEN_URI,
            }
            if creds.project_id:
                info["project_id"] = creds.project_id
            sa = service_account.Credentials.from_service_account_info(info, scopes=_SCOPES)
            return sa, creds.project_id or sa.project_id

        adc, project = google.auth.default(scopes=_SCOPES)
        return adc, creds.project_id or project

    def _get_client(self):
        if self._client is None:
            google_creds, _ = self._resolve_credentials()
            self._client = vision.ImageAnnotatorClient(credentials=google_creds)
        return self._client

    async def detect_text(self, image_url: str) -> list[Annotation] | None:
        loop = asyncio.get_event_loop()
        try:
            return await loop.run_in_executor(None, self._call_vision, image_url)
        except RecognitionError:
            raise
        except Exception as exc:
            raise RecognitionError.from_exception(exc) from exc

    def _call_vision(self, image_url: str) -> list[Annotation] | None:
        client = self._get_client()
        image = vision.Image(source=vision.ImageSource(image_uri=image_url))
        response = client.text_detection(image=image)

        if response is None:
            return None

        # Per-image failures come back inside an otherwise successful response
        if response.error.message:
            raise RecognitionError(
                kind_from_code(response.error.code),
                response.error.message,
                details={"code": response.error.code},
            )

        annotations = [
            # proto3 reports an unset float as 0.0
            Annotation(text=a.description, confidence=a.confidence or None)
            for a in response.text_annotations
        ]
        logger.info("vision_text_detection_complete", extra={"annotations": len(annotations)})
        return annotations

    async def get_service_identity(self) -> str:
        loop = asyncio.get_event_loop()
        _, project_id = await loop.run_in_executor(None, self._resolve_credentials)
        if not project_id:
            raise OCRServiceError("Unable to resolve Google Cloud project id")
        return project_id
