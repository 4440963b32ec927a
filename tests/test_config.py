"""Tests for settings loading and the stdlib → loguru logging bridge."""

import logging

from loguru import logger

from medbill.core.config import Settings
from medbill.core.logging_config import setup_logging


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ROUND_OFF_METHOD", raising=False)
        s = Settings(_env_file=None)
        assert s.ROUND_OFF_METHOD == "round"
        assert s.GST_RATES == [0, 5, 12, 18, 28]
        assert s.CURRENCY_SYMBOL == "₹"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ROUND_OFF_METHOD", "floor")
        monkeypatch.setenv("GST_RATES", "[0, 3, 5]")
        s = Settings(_env_file=None)
        assert s.ROUND_OFF_METHOD == "floor"
        assert s.GST_RATES == [0, 3, 5]

    def test_lowercase_alias(self, monkeypatch):
        monkeypatch.setenv("app_name", "counter-2")
        assert Settings(_env_file=None).APP_NAME == "counter-2"


class TestLogging:

    def test_stdlib_records_reach_loguru(self):
        setup_logging("DEBUG")
        captured = []
        sink_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
        try:
            logging.getLogger("invoice_totals").warning("Invoice totals unavailable: %s", "boom")
        finally:
            logger.remove(sink_id)

        assert [r["message"] for r in captured] == ["Invoice totals unavailable: boom"]
        assert captured[0]["level"].name == "WARNING"
