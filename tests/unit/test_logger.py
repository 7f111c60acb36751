"""Unit tests for logger configuration."""

import io

import pytest
from loguru import logger as _logger

from datasource_provisioner.config import LoggingConfig
from datasource_provisioner.logger import get_logger, logger as app_logger, setup_logger


@pytest.fixture(autouse=True)
def restore_handlers():
    """Remove handlers added by a test."""
    yield
    _logger.remove()


def make_logging_config(tmp_path, **overrides) -> LoggingConfig:
    """Logging settings writing under ``tmp_path``."""
    values = {"file_path": str(tmp_path / "logs" / "provisioner.log")}
    values.update(overrides)
    return LoggingConfig(**values)


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_file_handler_writes(self, tmp_path):
        """Test messages reach the configured log file."""
        config = make_logging_config(tmp_path, console_enabled=False, level="DEBUG")

        handler_ids = setup_logger(config)
        _logger.debug("Opened pool 0")
        _logger.remove()  # Flushes the enqueued file handler

        assert len(handler_ids) == 1
        content = (tmp_path / "logs" / "provisioner.log").read_text()
        assert "Opened pool 0" in content
        assert "DEBUG" in content

    def test_log_file_override(self, tmp_path):
        """Test the log_file argument replaces the configured path."""
        config = make_logging_config(tmp_path, console_enabled=False)
        override = tmp_path / "other" / "custom.log"

        setup_logger(config, log_file=str(override))
        _logger.info("Custom file")
        _logger.remove()

        assert "Custom file" in override.read_text()

    def test_level_override(self, tmp_path):
        """Test the level argument filters lower messages."""
        config = make_logging_config(tmp_path, console_enabled=False)
        log_file = tmp_path / "logs" / "provisioner.log"

        setup_logger(config, level="warning")
        _logger.info("hidden")
        _logger.warning("shown")
        _logger.remove()

        content = log_file.read_text()
        assert "shown" in content
        assert "hidden" not in content

    def test_console_only(self, tmp_path):
        """Test only the console handler is added when file logging is off."""
        config = make_logging_config(tmp_path, file_enabled=False)

        handler_ids = setup_logger(config)

        assert len(handler_ids) == 1
        assert not (tmp_path / "logs" / "provisioner.log").exists()

    def test_all_handlers_disabled(self, tmp_path):
        """Test no handler is added when both sinks are disabled."""
        config = make_logging_config(tmp_path, file_enabled=False, console_enabled=False)
        assert setup_logger(config) == []


class TestLoggingConfig:
    """Tests for LoggingConfig validation."""

    def test_level_is_uppercased(self, tmp_path):
        """Test log levels are case-insensitive."""
        assert make_logging_config(tmp_path, level="debug").level == "DEBUG"

    def test_invalid_level(self, tmp_path):
        """Test unknown log levels are rejected."""
        with pytest.raises(ValueError):
            make_logging_config(tmp_path, level="VERBOSE")

    def test_log_directory_is_created(self, tmp_path):
        """Test the log file's directory is created on load."""
        make_logging_config(tmp_path)
        assert (tmp_path / "logs").is_dir()


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_binds_name(self):
        """Test the bound name appears in records."""
        output = io.StringIO()
        _logger.add(output, format="{extra[name]} {message}")

        get_logger("datasource_provisioner.storage").info("bound")

        assert "datasource_provisioner.storage bound" in output.getvalue()

    def test_get_logger_without_name(self):
        """Test an unnamed logger is the shared logger."""
        assert get_logger() is app_logger
