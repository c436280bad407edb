# tests/test_logger.py
"""Unit tests for per-logger level overrides."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging
import pytest
from unittest.mock import patch
from parking_telemetry.utils import logger as logger_module
from parking_telemetry.utils.logger import parse_level_overrides


class TestLevelOverrides:
    def test_parses_entries(self):
        assert parse_level_overrides("sqlalchemy.engine=info, parking_telemetry.services.live_status=DEBUG,") == {
            "sqlalchemy.engine": "INFO",
            "parking_telemetry.services.live_status": "DEBUG",
        }

    def test_empty(self):
        assert parse_level_overrides("") == {}
        assert parse_level_overrides(None) == {}

    @pytest.mark.parametrize("raw", ["sqlalchemy.engine", "=DEBUG", "x=LOUD"])
    def test_rejects_bad_entries(self, raw):
        with pytest.raises(ValueError):
            parse_level_overrides(raw)

    def test_overrides_applied_on_configure(self):
        root = logging.getLogger()
        handlers = list(root.handlers)
        try:
            with patch.object(logger_module, "_configured", False), \
                 patch.object(logger_module.settings, "LOG_LEVEL_OVERRIDES", "tests.override.target=ERROR"):
                logger_module.get_logger("tests.override.target")
            assert logging.getLogger("tests.override.target").level == logging.ERROR
        finally:
            for handler in root.handlers[len(handlers):]:
                root.removeHandler(handler)
                handler.close()
            logging.getLogger("tests.override.target").setLevel(logging.NOTSET)
