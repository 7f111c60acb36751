"""
Logging configuration for datasource provisioning.

Uses loguru with a console handler and a rotating, compressed file handler.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

from datasource_provisioner.config import LoggingConfig, get_config


def setup_logger(
    log_config: Optional[LoggingConfig] = None,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> list[int]:
    """Replace loguru's default handler with the configured ones.

    Args:
        log_config: Logging settings; the global configuration when omitted
        level: Override for the configured log level
        log_file: Override for the configured log file path

    Returns:
        Ids of the handlers that were added
    """
    log_config = log_config or get_config().logging
    level = (level or log_config.level).upper()
    log_file = log_file or log_config.file_path

    _logger.remove()
    handler_ids = []

    if log_config.console_enabled:
        handler_ids.append(
            _logger.add(
                sys.stderr,
                format=log_config.format,
                level=level,
                colorize=True,
                backtrace=True,
                diagnose=False,
            )
        )

    if log_config.file_enabled:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            _logger.add(
                log_file,
                format=log_config.format,
                level=level,
                rotation=log_config.rotation,
                retention=log_config.retention,
                compression="zip",
                encoding="utf-8",
                enqueue=True,  # Thread-safe logging
                backtrace=True,
                # Pool URLs and credentials live in local variables
                diagnose=False,
            )
        )

    return handler_ids


def get_logger(name: Optional[str] = None):
    """Get a logger bound to a module name.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Logger instance
    """
    if name:
        return _logger.bind(name=name)
    return _logger


logger = _logger

__all__ = [
    "setup_logger",
    "get_logger",
    "logger",
]
