"""Log rendering tests."""
from __future__ import annotations

import json
import logging

import pytest
import structlog

from pharmarx_ocr.core.logging import configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


def test_extra_fields_rendered_as_key_value(capsys, restore_root_logger) -> None:
    configure_logging("INFO")
    logging.getLogger("pharmarx_ocr.test").info("ocr_started", extra={"order_id": "order-9"})

    out = capsys.readouterr().out
    assert "event='ocr_started'" in out
    assert "order_id='order-9'" in out
    assert "level='info'" in out


def test_json_rendering(capsys, restore_root_logger) -> None:
    configure_logging("INFO", json_logs=True)
    logging.getLogger("pharmarx_ocr.test").warning("ocr_no_text", extra={"error": "No text detected"})

    line = capsys.readouterr().out.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["event"] == "ocr_no_text"
    assert payload["error"] == "No text detected"
    assert payload["logger"] == "pharmarx_ocr.test"


def test_level_filters_records(capsys, restore_root_logger) -> None:
    configure_logging("WARNING")
    logging.getLogger("pharmarx_ocr.test").info("ocr_started")
    assert capsys.readouterr().out == ""
