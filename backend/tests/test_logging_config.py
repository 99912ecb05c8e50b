"""
Tests for structured logging
"""
import json
import logging
import sys

from sitetags.core.config import Settings
from sitetags.core.logging_config import ContextualFormatter, LoggingConfig
from sitetags.main import create_app


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("sitetags.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_extra_fields():
    out = json.loads(ContextualFormatter().format(_record("Site 'x' added", site="x")))

    assert out["message"] == "Site 'x' added"
    assert out["level"] == "INFO"
    assert out["logger"] == "sitetags.test"
    assert out["site"] == "x"


def test_formatter_includes_request_context():
    LoggingConfig.set_context(request_id="abc", path="/api/sites")
    try:
        out = json.loads(ContextualFormatter().format(_record("hello")))
    finally:
        LoggingConfig.clear_context()

    assert out["request_id"] == "abc"
    assert out["path"] == "/api/sites"
    assert "request_id" not in json.loads(ContextualFormatter().format(_record("after")))


def test_formatter_stringifies_unserializable_extra():
    out = json.loads(ContextualFormatter().format(_record("x", thing=object())))
    assert out["thing"].startswith("<object object")


def test_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("failed")
        record.exc_info = sys.exc_info()

    out = json.loads(ContextualFormatter().format(record))
    assert "ValueError: boom" in out["exception"]


def test_log_metrics_count_levels():
    logger = LoggingConfig.get_logger("sitetags.test_metrics")
    LoggingConfig.reset_metrics()

    logger.warning("careful")
    logger.error("broken")

    metrics = LoggingConfig.get_metrics()
    assert metrics["WARNING"] >= 1
    assert metrics["ERROR"] >= 1


def _console_formatter() -> logging.Formatter:
    handlers = [h for h in logging.getLogger().handlers if type(h) is logging.StreamHandler]
    return handlers[0].formatter


def test_create_app_applies_injected_logging_settings():
    try:
        create_app(settings=Settings(_env_file=None, log_level="ERROR", log_format="json"))
        assert logging.getLogger("sitetags").level == logging.ERROR
        assert isinstance(_console_formatter(), ContextualFormatter)

        create_app(settings=Settings(
            _env_file=None,
            log_level="DEBUG",
            log_format="text",
            log_module_levels='{"sitetags.registry": "WARNING"}',
        ))
        assert logging.getLogger("sitetags").level == logging.DEBUG
        assert logging.getLogger("sitetags.registry").level == logging.WARNING
        assert not isinstance(_console_formatter(), ContextualFormatter)
    finally:
        LoggingConfig.configure(Settings(_env_file=None, log_format="text"), force=True)
        logging.getLogger("sitetags.registry").setLevel(logging.NOTSET)
