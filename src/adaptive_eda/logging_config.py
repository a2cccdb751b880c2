"""
Logging setup for the adaptive-eda command line.

Library modules only create loggers. The CLI calls setup_logging() once to
attach three handlers:

    console      messages from every module, INFO (DEBUG with --verbose)
    file         rotating log under ~/.adaptive_eda/logs, on unless
                 ``[logging] enabled = false``
    debug_chart  the ASCII charts emitted by run(..., debug_render=True) on the
                 "adaptive_eda.debug" logger, printed bare to stderr

Chart records do not propagate, so they never reach the console formatter
or the log file.
"""

import logging
import logging.config
import os
import sys

from pathlib import Path
from typing import Any

from adaptive_eda.constants import (
    DEFAULT_LOG_BACKUP_COUNT,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_FILE,
    DEFAULT_LOG_MAX_BYTES,
)

DEBUG_CHART_LOGGER = "adaptive_eda.debug"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_logging_configured = False


def get_log_path() -> Path:
    """Return the log file path, creating its directory if needed."""
    os.makedirs(DEFAULT_LOG_DIR, mode=0o700, exist_ok=True)
    return DEFAULT_LOG_DIR / DEFAULT_LOG_FILE


def _file_settings() -> tuple[bool, str]:
    """
    Read the ``[logging]`` table of the config file.

    Returns:
        (enabled, level) for the file handler
    """
    from adaptive_eda.config import load_config

    settings = load_config().get("logging", {})
    if not isinstance(settings, dict):
        settings = {}
    return bool(settings.get("enabled", True)), str(
        settings.get("level", "DEBUG")
    ).upper()


def _build_logging_config(
    verbose: bool = False,
    console_format: str = "%(levelname)s: %(message)s",
) -> dict[str, Any]:
    """
    Build the dictConfig dictionary for the CLI.

    Args:
        verbose: Lower the console handler to DEBUG
        console_format: Format string for the console handler

    Returns:
        Dictionary suitable for logging.config.dictConfig()
    """
    file_enabled, file_level = _file_settings()

    root_handlers = ["console"]
    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": "DEBUG" if verbose else "INFO",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
        "debug_chart": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "bare",
            "stream": "ext://sys.stderr",
        },
    }

    if file_enabled:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": file_level,
            "formatter": "file",
            "filename": str(get_log_path()),
            "maxBytes": DEFAULT_LOG_MAX_BYTES,
            "backupCount": DEFAULT_LOG_BACKUP_COUNT,
            "encoding": "utf-8",
        }
        root_handlers.append("file")

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": console_format},
            "file": {"format": FILE_FORMAT},
            "bare": {"format": "%(message)s"},
        },
        "handlers": handlers,
        "loggers": {
            DEBUG_CHART_LOGGER: {
                "handlers": ["debug_chart"],
                "level": "INFO",
                "propagate": False,
            },
        },
        "root": {"level": "DEBUG", "handlers": root_handlers},
    }


def setup_logging(
    *,
    verbose: bool = False,
    console_format: str = "%(levelname)s: %(message)s",
) -> None:
    """
    Configure logging for the adaptive-eda command line.

    Only the first call has an effect. If the handlers cannot be built, for
    example an unknown ``[logging] level`` or an unwritable log directory,
    console-only logging is set up and a warning is written to stderr.

    Args:
        verbose: Lower the console handler to DEBUG
        console_format: Format string for the console handler
    """
    global _logging_configured

    if _logging_configured:
        return

    try:
        logging.config.dictConfig(
            _build_logging_config(verbose=verbose, console_format=console_format)
        )
    except (OSError, ValueError) as e:
        sys.stderr.write(f"WARNING: Failed to configure logging: {e}\n")
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format=console_format,
        )

    _logging_configured = True
