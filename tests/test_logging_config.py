"""Tests for logging configuration."""

import json
import logging

from mealcart.logging_config import (
    ContextualFormatter,
    LoggingContext,
    configure_logging,
    get_logger,
    meal_plan_id_ctx,
    request_id_ctx,
)


def _record(message: str) -> logging.LogRecord:
    return logging.LogRecord("mealcart.test", logging.INFO, __file__, 1, message, None, None)


def test_context_restored_after_block():
    """Test context variables are reset when the block exits."""
    with LoggingContext(request_id="req-1", meal_plan_id="plan-1"):
        assert request_id_ctx.get() == "req-1"
        assert meal_plan_id_ctx.get() == "plan-1"

    assert request_id_ctx.get() is None
    assert meal_plan_id_ctx.get() is None


def test_contextual_formatter_includes_context():
    """Test the text format shows the short request ID and the plan."""
    with LoggingContext(request_id="0123456789abcdef", meal_plan_id="plan-1"):
        line = ContextualFormatter().format(_record("hello"))

    assert "[req=01234567, plan=plan-1]" in line
    assert line.endswith("| hello")


def test_json_log_file(tmp_path, monkeypatch):
    """Test JSON lines with context are written to the log file."""
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    log_file = tmp_path / "mealcart.log"
    configure_logging("INFO", json_format=True, log_file=str(log_file))
    root_logger = logging.getLogger()

    try:
        with LoggingContext(meal_plan_id="plan-1"):
            get_logger("mealcart.test").warning("Unit mismatch")
    finally:
        for handler in root_logger.handlers[:]:
            handler.flush()
            if isinstance(handler, logging.FileHandler):
                root_logger.removeHandler(handler)
                handler.close()

    record = json.loads(log_file.read_text().splitlines()[-1])
    assert record["message"] == "Unit mismatch"
    assert record["level"] == "WARNING"
    assert record["logger"] == "mealcart.test"
    assert record["meal_plan_id"] == "plan-1"
