"""Request, image-URL and configuration validation tests."""
from __future__ import annotations

import pytest

from pharmarx_ocr.core.config import Settings
from pharmarx_ocr.core.gcp_config import (
    GCPCredentials,
    OCRConfig,
    RetryConfig,
    load_ocr_config,
    validate_ocr_config,
)
from pharmarx_ocr.ocr.base_ocr import OCRProcessingRequest
from pharmarx_ocr.validation.validator import validate_image_for_ocr, validate_request


# ---------------------------------------------------------------------------
# validate_request
# ---------------------------------------------------------------------------

def test_validate_request_accepts_any_url_shape() -> None:
    # Only presence is checked here; malformed URLs fail downstream.
    request = OCRProcessingRequest(order_id="o-1", image_url="not really a url")
    assert validate_request(request) == []


def test_validate_request_requires_fields() -> None:
    errors = validate_request(OCRProcessingRequest(order_id=" ", image_url=""))
    assert errors == ["Order ID is required", "Image URL is required"]


def test_validate_request_none() -> None:
    assert validate_request(None) == ["Request is required"]


# ---------------------------------------------------------------------------
# validate_image_for_ocr
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "url",
    [
        "https://example.com/image.jpg",
        "https://storage.googleapis.com/bucket/image.png",
        "http://localhost:3000/test.pdf",
        "https://example.com/scan.JPEG",
        "data:image/png;base64,iVBORw0KGgo=",
        "data:application/pdf;base64,JVBERi0=",
    ],
)
def test_validate_image_accepts_supported_urls(url: str) -> None:
    result = validate_image_for_ocr(url)
    assert result.is_valid is True
    assert result.errors == []


def test_validate_image_requires_url() -> None:
    result = validate_image_for_ocr("   ")
    assert result.is_valid is False
    assert result.errors == ["Image URL is required"]


def test_validate_image_rejects_unparseable_url() -> None:
    result = validate_image_for_ocr("invalid-url")
    assert result.is_valid is False
    assert result.errors == ["Invalid image URL format"]


def test_validate_image_rejects_ftp() -> None:
    result = validate_image_for_ocr("ftp://example.com/image.jpg")
    assert result.is_valid is False
    assert "Image URL must use HTTP, HTTPS, or data URI protocol" in result.errors


def test_validate_image_rejects_unsupported_extension() -> None:
    result = validate_image_for_ocr("https://example.com/image.gif")
    assert result.is_valid is False
    assert result.errors == ["Image must be in JPG, PNG, or PDF format"]


def test_validate_image_rejects_unsupported_data_uri() -> None:
    result = validate_image_for_ocr("data:image/gif;base64,R0lGODlh")
    assert result.is_valid is False
    assert result.errors == ["Data URI must be in JPG, PNG, or PDF format"]


# ---------------------------------------------------------------------------
# validate_ocr_config / load_ocr_config
# ---------------------------------------------------------------------------

def test_validate_config_defaults_are_valid() -> None:
    assert validate_ocr_config(OCRConfig()).is_valid is True


@pytest.mark.parametrize("max_retries", [0, 11])
def test_validate_config_rejects_retry_bounds(max_retries: int) -> None:
    result = validate_ocr_config(OCRConfig(retry=RetryConfig(max_retries=max_retries)))
    assert result.is_valid is False
    assert result.errors == ["maxRetries must be between 1 and 10"]


@pytest.mark.parametrize("delay", [-1, 10_001])
def test_validate_config_rejects_delay_bounds(delay: int) -> None:
    result = validate_ocr_config(OCRConfig(retry=RetryConfig(retry_delay_ms=delay)))
    assert result.is_valid is False
    assert result.errors == ["retryDelay must be between 0ms and 10000ms"]


def test_validate_config_zero_delay_allowed() -> None:
    assert validate_ocr_config(OCRConfig(retry=RetryConfig(retry_delay_ms=0))).is_valid is True


def _settings(**overrides) -> Settings:
    values = dict(
        database_url="postgresql+asyncpg://localhost/test",
        google_application_credentials=None,
        firebase_client_email=None,
        firebase_private_key=None,
        google_cloud_project_id=None,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_load_config_reads_retry_settings() -> None:
    config = load_ocr_config(_settings(gcv_max_retries=5, gcv_retry_delay=250))
    assert config.retry == RetryConfig(max_retries=5, retry_delay_ms=250)


def test_load_config_prefers_key_file() -> None:
    config = load_ocr_config(
        _settings(
            google_application_credentials="/secrets/key.json",
            firebase_client_email="svc@example.iam.gserviceaccount.com",
            firebase_private_key="key",
        )
    )
    assert config.credentials.key_filename == "/secrets/key.json"
    assert config.credentials.client_email is None


def test_load_config_unescapes_inline_private_key() -> None:
    config = load_ocr_config(
        _settings(
            firebase_client_email="svc@example.iam.gserviceaccount.com",
            firebase_private_key="-----BEGIN-----\\nabc\\n-----END-----",
            google_cloud_project_id="pharmarx-prod",
        )
    )
    creds = config.credentials
    assert creds.has_inline_credentials
    assert creds.private_key == "-----BEGIN-----\nabc\n-----END-----"
    assert creds.project_id == "pharmarx-prod"


def test_load_config_defaults_to_adc() -> None:
    assert load_ocr_config(_settings()).credentials == GCPCredentials()


@pytest.mark.parametrize("url", ["file:///scans/rx.jpg", "localhost:3000/rx.jpg"])
def test_validate_image_reports_protocol_before_format(url: str) -> None:
    result = validate_image_for_ocr(url)
    assert result.is_valid is False
    assert result.errors == ["Image URL must use HTTP, HTTPS, or data URI protocol"]


def test_validate_image_mailto_reports_protocol() -> None:
    result = validate_image_for_ocr("mailto:a")
    assert "Image URL must use HTTP, HTTPS, or data URI protocol" in result.errors
    assert "Invalid image URL format" not in result.errors


def test_validate_image_http_without_host_is_invalid_format() -> None:
    result = validate_image_for_ocr("http:/rx.jpg")
    assert result.errors == ["Invalid image URL format"]
