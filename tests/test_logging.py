"""Tests for settings, logging setup and validation log helpers."""

import logging

import pydantic
import pytest
import structlog
from opentelemetry import trace
from rich.logging import RichHandler

from valuecheck import logging_config
from valuecheck.application.evaluator import check_value
from valuecheck.config import Settings, settings
from valuecheck.domain.types import UNDEFINED, SemanticType
from valuecheck.logging_config import setup_logging
from valuecheck.logging_utils import log_rejected_request, log_validation_error


@pytest.fixture(name="restore_logging")
def restore_logging_fixture():
    """Put the root logger and structlog back the way the test found them."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture(name="clean_env")
def clean_env_fixture(monkeypatch):
    for name in ("DEBUG", "LOG_LEVEL", "LOG_TO_FILE", "LOG_DIR", "SLEEP_FALLBACK_MS"):
        monkeypatch.delenv(f"VALUECHECK_{name}", raising=False)
    return monkeypatch


def test_settings_defaults(clean_env):
    config = Settings(_env_file=None)
    assert config.debug is False
    assert config.log_level is None
    assert config.effective_log_level == "INFO"
    assert config.sleep_fallback_ms == 1000


def test_settings_read_prefixed_environment(clean_env):
    clean_env.setenv("VALUECHECK_LOG_LEVEL", " debug ")
    clean_env.setenv("VALUECHECK_SLEEP_FALLBACK_MS", "250")

    config = Settings(_env_file=None)
    assert config.log_level == "DEBUG"
    assert config.sleep_fallback_ms == 250


def test_debug_mode_lowers_effective_level(clean_env):
    assert Settings(_env_file=None, debug=True).effective_log_level == "DEBUG"
    config = Settings(_env_file=None, debug=True, log_level="warning")
    assert config.effective_log_level == "WARNING"


@pytest.mark.parametrize(
    "field, value", [("log_level", "LOUD"), ("sleep_fallback_ms", 0)]
)
def test_settings_reject_invalid_values(clean_env, field, value):
    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None, **{field: value})


def test_setup_logging_writes_to_file_outside_debug(
    restore_logging, monkeypatch, tmp_path
):
    monkeypatch.setattr(settings, "debug", False)
    monkeypatch.setattr(settings, "log_dir", str(tmp_path / "logs"))

    setup_logging("warning")

    handlers = restore_logging.handlers
    assert any(isinstance(h, RichHandler) for h in handlers)
    assert any(isinstance(h, logging.FileHandler) for h in handlers)
    assert (tmp_path / "logs" / "valuecheck.log").exists()
    assert restore_logging.level == logging.WARNING


def test_setup_logging_console_only_in_debug(restore_logging, monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "debug", True)
    monkeypatch.setattr(settings, "log_to_file", False)
    monkeypatch.setattr(settings, "log_dir", str(tmp_path))

    setup_logging()

    assert not any(
        isinstance(h, logging.FileHandler) for h in restore_logging.handlers
    )
    assert restore_logging.level == logging.DEBUG


def test_trace_context_is_added_for_recording_spans(monkeypatch):
    span_context = trace.SpanContext(trace_id=1, span_id=2, is_remote=False)

    class RecordingSpan:
        def is_recording(self):
            return True

        def get_span_context(self):
            return span_context

    monkeypatch.setattr(logging_config.trace, "get_current_span", RecordingSpan)

    event = logging_config._add_trace_context(None, "info", {"event": "x"})
    assert event["trace_id"] == "0x" + "0" * 31 + "1"
    assert event["span_id"] == "0x" + "0" * 15 + "2"


def test_trace_context_is_skipped_without_span():
    event = logging_config._add_trace_context(None, "info", {"event": "x"})
    assert event == {"event": "x"}


def test_validation_errors_are_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="validation"):
        log_validation_error("age", 12, "gte rule check failed")

    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.getMessage() == (
        "Validation failed for field 'age': gte rule check failed"
    )
    assert record.value == "12"


@pytest.mark.parametrize("field", ["password", "X-Auth-Token", "api_key"])
def test_sensitive_values_are_redacted(caplog, field):
    with caplog.at_level(logging.WARNING, logger="validation"):
        log_validation_error(field, "hunter2", "check failed")

    assert caplog.records[-1].value == "[REDACTED]"
    assert "hunter2" not in caplog.text


def test_logged_values_are_summarized(caplog):
    with caplog.at_level(logging.WARNING, logger="validation"):
        log_validation_error("name", UNDEFINED, "value must not be undefined")
        log_validation_error("bio", "x" * 500, "lte rule check failed")

    assert caplog.records[0].value == "<undefined>"
    assert len(caplog.records[1].value) == 100


def test_rejected_requests_are_logged(caplog):
    with caplog.at_level(logging.INFO, logger="validation"):
        log_rejected_request(["id", "name"], "id: gte rule check failed")

    record = caplog.records[-1]
    assert record.levelno == logging.INFO
    assert record.fields == ["id", "name"]


def test_library_events_go_through_stdlib_logging(capsys, caplog):
    """Nothing reaches stdout unless the application routes it there."""
    check_value("hunter2", SemanticType.STRING, {"gte": 1})
    assert not check_value("", SemanticType.STRING, {"gte": 1}, throw_on_failure=False)
    assert capsys.readouterr().out == ""

    with caplog.at_level(logging.DEBUG, logger="valuecheck"):
        check_value(42, SemanticType.NUMBER)
    assert "check_value started" in caplog.text
    assert capsys.readouterr().out == ""
