"""Tests for the logging helpers."""

import io
import logging

import pytest

from .lib import get_logger, parse_level, setup_logging


class TestGetLogger:
    """Tests for get_logger."""

    @pytest.mark.unit
    def test_default_name(self):
        """Unnamed loggers use the package name."""
        assert get_logger().name == "genui"

    @pytest.mark.unit
    def test_custom_name(self):
        """Named loggers keep their name."""
        assert get_logger("cli").name == "cli"


class TestParseLevel:
    """Tests for level name resolution."""

    @pytest.mark.unit
    def test_names_are_case_insensitive(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("WARNING") == logging.WARNING

    @pytest.mark.unit
    def test_int_passthrough(self):
        assert parse_level(logging.ERROR) == logging.ERROR

    @pytest.mark.unit
    def test_unknown_name_uses_default(self):
        assert parse_level("loud") == logging.INFO
        assert parse_level(None, default=logging.DEBUG) == logging.DEBUG


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.mark.unit
    def test_does_not_raise(self):
        """Repeated configuration is harmless."""
        stream = io.StringIO()
        setup_logging("debug", stream=stream)
        setup_logging(logging.INFO, stream=stream)
