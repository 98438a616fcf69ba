import json
import logging
import sys

from flipforge.adapters.logging_utils import JsonLogFormatter


def _record(msg, context=None, exc_info=None):
    record = logging.LogRecord("flipforge.test", logging.WARNING, __file__, 1, msg, None, exc_info)
    if context is not None:
        record.context = context
    return record


def test_context_fields_are_flattened():
    line = JsonLogFormatter().format(_record("export failed", {"status": 502, "path": "/api/export"}))
    payload = json.loads(line)
    assert payload["message"] == "export failed"
    assert payload["level"] == "WARNING"
    assert payload["app"] == "flipforge"
    assert payload["status"] == 502
    assert payload["path"] == "/api/export"


def test_context_cannot_clobber_base_keys():
    payload = json.loads(JsonLogFormatter().format(_record("real", {"message": "fake", "level": "DEBUG"})))
    assert payload["message"] == "real"
    assert payload["level"] == "WARNING"
    assert payload["ctx_message"] == "fake"
    assert payload["ctx_level"] == "DEBUG"


def test_exception_text_included():
    try:
        raise ValueError("boom")
    except ValueError:
        exc_info = sys.exc_info()
    payload = json.loads(JsonLogFormatter().format(_record("failed", exc_info=exc_info)))
    assert "ValueError: boom" in payload["exc"]
