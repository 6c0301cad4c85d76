from __future__ import annotations

from urllib.parse import urlparse

from pharmarx_ocr.core.gcp_config import ConfigValidation
from pharmarx_ocr.ocr.base_ocr import OCRProcessingRequest

_ALLOWED_SCHEMES = {"http", "https", "data"}
_SUPPORTED_DATA_TYPES = ("data:image/jpeg", "data:image/jpg", "data:image/png", "data:application/pdf")
_SUPPORTED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".pdf")


def validate_request(request: OCRProcessingRequest | None) -> list[str]:
    """Presence-only check run before any recognition call.

    Malformed URLs are left for the recognition service to reject.
    """
    if request is None:
        return ["Request is required"]

    errors: list[str] = []
    if not isinstance(request.order_id, str) or not request.order_id.strip():
        errors.append("Order ID is required")
    if not isinstance(request.image_url, str) or not request.image_url.strip():
        errors.append("Image URL is required")
    return errors


def validate_image_for_ocr(image_url: str | None) -> ConfigValidation:
    """Stricter URL check applied by the HTTP trigger before queueing OCR."""
    if not image_url or not image_url.strip():
        return ConfigValidation(is_valid=False, errors=["Image URL is required"])

    try:
        parsed = urlparse(image_url)
    except ValueError:
        return ConfigValidation(is_valid=False, errors=["Invalid image URL format"])

    if not parsed.scheme:
        return ConfigValidation(is_valid=False, errors=["Invalid image URL format"])

    errors: list[str] = []
    scheme = parsed.scheme.lower()
    if scheme not in _ALLOWED_SCHEMES:
        errors.append("Image URL must use HTTP, HTTPS, or data URI protocol")
    elif scheme != "data" and not parsed.netloc:
        return ConfigValidation(is_valid=False, errors=["Invalid image URL format"])

    if scheme == "data":
        if not image_url.lower().startswith(_SUPPORTED_DATA_TYPES):
            errors.append("Data URI must be in JPG, PNG, or PDF format")
    elif not parsed.path.lower().endswith(_SUPPORTED_EXTENSIONS):
        errors.append("Image must be in JPG, PNG, or PDF format")

    return ConfigValidation(is_valid=not errors, errors=errors)
