"""Retry controller tests against real coroutine functions."""
from __future__ import annotations

import pytest

from pharmarx_ocr.core.gcp_config import RetryConfig
from pharmarx_ocr.ocr.errors import ErrorKind, RecognitionError
from pharmarx_ocr.pipeline.retry import call_with_retry

CONFIG = RetryConfig(max_retries=3, retry_delay_ms=0)


class FlakyRecognizer:
    """Raises the queued errors in order, then returns the annotation text."""

    def __init__(self, *errors: Exception) -> None:
        self.errors = list(errors)
        self.calls: list[str] = []

    async def detect(self, image_url: str) -> str:
        self.calls.append(image_url)
        if self.errors:
            raise self.errors.pop(0)
        return "Rx: Aspirin 81mg daily"


@pytest.mark.asyncio
async def test_coroutine_function_is_awaited_and_result_returned() -> None:
    recognizer = FlakyRecognizer()
    result = await call_with_retry(recognizer.detect, "https://example.com/rx.jpg", config=CONFIG)

    assert result == "Rx: Aspirin 81mg daily"
    assert recognizer.calls == ["https://example.com/rx.jpg"]


@pytest.mark.asyncio
async def test_transient_errors_retried_until_success() -> None:
    unavailable = RecognitionError(ErrorKind.UNAVAILABLE, "Service temporarily unavailable")
    recognizer = FlakyRecognizer(unavailable, unavailable)

    result = await call_with_retry(recognizer.detect, "https://example.com/rx.jpg", config=CONFIG)

    assert result == "Rx: Aspirin 81mg daily"
    assert len(recognizer.calls) == 3


@pytest.mark.asyncio
async def test_last_transient_error_reraised_after_max_retries() -> None:
    errors = [RecognitionError(ErrorKind.DEADLINE_EXCEEDED, f"Deadline exceeded #{i}") for i in range(4)]
    recognizer = FlakyRecognizer(*errors)

    with pytest.raises(RecognitionError) as info:
        await call_with_retry(recognizer.detect, "https://example.com/rx.jpg", config=CONFIG)

    assert info.value.message == "Deadline exceeded #2"
    assert len(recognizer.calls) == 3


@pytest.mark.asyncio
async def test_terminal_error_not_retried() -> None:
    recognizer = FlakyRecognizer(RecognitionError(ErrorKind.PERMISSION_DENIED, "The caller does not have permission"))

    with pytest.raises(RecognitionError) as info:
        await call_with_retry(recognizer.detect, "https://example.com/rx.jpg", config=CONFIG)

    assert info.value.kind is ErrorKind.PERMISSION_DENIED
    assert len(recognizer.calls) == 1
