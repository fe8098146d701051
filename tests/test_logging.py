"""
Tests for logging configuration module.
"""

import pytest
import logging
from io import StringIO

from atomcascade.core.logging_config import setup_logging, get_logger


def test_setup_logging_default():
    """Test setting up logging with default parameters."""
    stream = StringIO()
    setup_logging(level="INFO", stream=stream)

    logger = logging.getLogger("atomcascade.test")
    logger.info("Test message")

    output = stream.getvalue()
    assert "Test message" in output
    assert "INFO" in output


def test_setup_logging_custom_level():
    """Test setting up logging with custom level."""
    stream = StringIO()
    setup_logging(level="DEBUG", stream=stream)

    logger = logging.getLogger("atomcascade.test")
    logger.debug("Debug message")

    assert "Debug message" in stream.getvalue()


def test_setup_logging_filters_below_level():
    """Test that messages below the configured level are dropped."""
    stream = StringIO()
    setup_logging(level="WARNING", stream=stream)

    logger = logging.getLogger("atomcascade.test")
    logger.info("Hidden message")
    logger.warning("Visible message")

    output = stream.getvalue()
    assert "Hidden message" not in output
    assert "Visible message" in output


def test_setup_logging_custom_format():
    """Test setting up logging with custom format."""
    stream = StringIO()
    custom_format = "%(levelname)s - %(message)s"
    setup_logging(level="INFO", format_string=custom_format, stream=stream)

    logger = logging.getLogger("atomcascade.test")
    logger.info("Test message")

    assert "INFO - Test message" in stream.getvalue()


def test_get_logger():
    """Test getting a logger instance."""
    logger = get_logger("test.module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "atomcascade.test.module"


def test_logger_hierarchy():
    """Test that loggers follow proper hierarchy."""
    parent_logger = get_logger("cascade")
    child_logger = get_logger("cascade.propagation")

    assert child_logger.parent is parent_logger


def test_get_logger_qualified_name():
    """Test that package-qualified names are not prefixed twice."""
    assert get_logger("atomcascade.cascade") is get_logger("cascade")
    assert get_logger("atomcascade").name == "atomcascade"


def test_setup_logging_lowercase_level():
    """Test that level names are case-insensitive."""
    stream = StringIO()
    setup_logging(level="warning", stream=stream)

    logging.getLogger("atomcascade.test").warning("Lowercase level")
    assert "Lowercase level" in stream.getvalue()


def test_setup_logging_unknown_level():
    """Test rejection of unknown level names."""
    with pytest.raises(ValueError, match="Unknown logging level"):
        setup_logging(level="VERBOSE")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
