"""
SDK Logging Tests

Diagnostic logger: name detection, structured fields, file output.

Run: python -m pytest test/test_sdk_logging.py -v
"""

import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from sdk.logging import configureLogging, getLogger, resetLogging
from sdk.logging.logger import StructuredFormatter


def flush(logger):
    for handler in logger.handlers:
        handler.flush()


class NamedComponent:
    def __init__(self):
        self.log = getLogger()


class TestGetLogger:
    """Logger creation"""

    def test_auto_detects_class(self):
        component = NamedComponent()
        assert component.log.name.endswith("NamedComponent")

    def test_explicit_name_cached(self):
        assert getLogger("chronicle.test") is getLogger("chronicle.test")

    def test_no_propagation(self):
        assert getLogger("chronicle.test").propagate is False

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            configureLogging(level="LOUD")


class TestFileOutput:
    """Rotating file handler and structured fields"""

    def test_structured_fields_written(self, tempDir):
        resetLogging()
        configureLogging(logDir=str(tempDir), console=False, level="DEBUG")
        log = getLogger("chronicle.core.test")

        log.info("Compacted", kept=3, expired=1)
        log.debug("Plain message")
        flush(log)

        text = (tempDir / "chronicle.log").read_text(encoding="utf-8")
        assert "chronicle.core.test - INFO - Compacted [kept=3, expired=1]" in text
        assert "DEBUG - Plain message" in text

    def test_level_threshold(self, tempDir):
        resetLogging()
        configureLogging(logDir=str(tempDir), console=False, level="WARNING")
        log = getLogger("quiet.test")

        log.info("hidden")
        log.warning("shown")
        flush(log)

        text = (tempDir / "quiet.log").read_text(encoding="utf-8")
        assert "hidden" not in text
        assert "shown" in text


class TestStructuredFormatter:
    """Formatter does not mutate records"""

    def test_restores_message(self):
        formatter = StructuredFormatter('%(message)s')
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
        record.kept = 2

        assert formatter.format(record) == "hello [kept=2]"
        assert record.msg == "hello"
