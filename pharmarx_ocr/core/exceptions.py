"""Domain exceptions for the OCR service."""
from __future__ import annotations


class OCRServiceError(Exception):
    """Base error for the OCR service."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(OCRServiceError):
    """Raised when the OCR configuration fails validation."""
