"""OCR configuration: retry policy plus Google Cloud credentials.

Credential precedence:
    GOOGLE_APPLICATION_CREDENTIALS             -> service account key file
    FIREBASE_CLIENT_EMAIL + FIREBASE_PRIVATE_KEY -> inline service account
    neither                                    -> Application Default Credentials
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from pharmarx_ocr.core.config import Settings

logger = logging.getLogger(__name__)

MIN_RETRIES = 1
MAX_RETRIES = 10
MIN_RETRY_DELAY_MS = 0
MAX_RETRY_DELAY_MS = 10_000


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 3      # total attempts, not additional retries
    retry_delay_ms: int = 1000


@dataclass(frozen=True)
class GCPCredentials:
    project_id: str | None = None
    key_filename: str | None = None
    client_email: str | None = None
    private_key: str | None = None

    @property
    def has_key_file(self) -> bool:
        return bool(self.key_filename)

    @property
    def has_inline_credentials(self) -> bool:
        return bool(self.client_email and self.private_key)


@dataclass(frozen=True)
class OCRConfig:
    retry: RetryConfig = field(default_factory=RetryConfig)
    credentials: GCPCredentials = field(default_factory=GCPCredentials)


@dataclass(frozen=True)
class ConfigValidation:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def load_gcp_credentials(settings: Settings) -> GCPCredentials:
    if settings.google_application_credentials:
        key_filename = os.path.abspath(settings.google_application_credentials)
        logger.info("gcp_credentials_from_file", extra={"key_filename": key_filename})
        return GCPCredentials(
            project_id=settings.google_cloud_project_id,
            key_filename=key_filename,
        )

    if settings.firebase_client_email and settings.firebase_private_key:
        logger.info("gcp_credentials_from_env")
        return GCPCredentials(
            project_id=settings.google_cloud_project_id,
            client_email=settings.firebase_client_email,
            private_key=settings.firebase_private_key.replace("\\n", "\n"),
        )

    logger.info("gcp_credentials_adc")
    return GCPCredentials(project_id=settings.google_cloud_project_id)


def load_ocr_config(settings: Settings) -> OCRConfig:
    return OCRConfig(
        retry=RetryConfig(
            max_retries=settings.gcv_max_retries,
            retry_delay_ms=settings.gcv_retry_delay,
        ),
        credentials=load_gcp_credentials(settings),
    )


def validate_ocr_config(config: OCRConfig) -> ConfigValidation:
    errors: list[str] = []

    if not MIN_RETRIES <= config.retry.max_retries <= MAX_RETRIES:
        errors.append(f"maxRetries must be between {MIN_RETRIES} and {MAX_RETRIES}")

    if not MIN_RETRY_DELAY_MS <= config.retry.retry_delay_ms <= MAX_RETRY_DELAY_MS:
        errors.append(
            f"retryDelay must be between {MIN_RETRY_DELAY_MS}ms and {MAX_RETRY_DELAY_MS}ms"
        )

    creds = config.credentials
    if not creds.has_key_file and not creds.has_inline_credentials:
        # ADC may still be available on GCP runtimes
        logger.warning("gcp_credentials_missing_using_adc")

    return ConfigValidation(is_valid=not errors, errors=errors)
