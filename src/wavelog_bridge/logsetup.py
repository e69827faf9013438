"""Logging configuration shared by the CLI commands."""

from __future__ import annotations

import logging
import os
import sys
import time

from wavelog_bridge import config as config_module

LOG_LEVEL_ENV_VAR = "WAVELOG_BRIDGE_LOG_LEVEL"
LOG_FILENAME = "wavelog-bridge.log"

_LOG_LEVEL_ALIASES: dict[str, int] = {
    "critical": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def resolve_log_level(candidate: str | None) -> int:
    """Map a level name (or number) to a logging level; ERROR when unset.

    Raises ``ValueError`` for names that are not recognised.
    """
    for value in (candidate, os.getenv(LOG_LEVEL_ENV_VAR)):
        if not value:
            continue
        stripped = value.strip()
        if not stripped:
            continue
        lower = stripped.lower()
        if lower in _LOG_LEVEL_ALIASES:
            return _LOG_LEVEL_ALIASES[lower]
        if stripped.isdigit():
            return int(stripped)
        raise ValueError(f"Invalid log level '{stripped}'")
    return logging.ERROR


def configure_logging(level_name: str | None) -> None:
    """Install stdout and file handlers on the root logger."""
    invalid_level: str | None = None
    try:
        level = resolve_log_level(level_name)
    except ValueError:
        level = logging.ERROR
        invalid_level = level_name or os.getenv(LOG_LEVEL_ENV_VAR)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    )
    handlers: list[logging.Handler] = [stream_handler]

    try:
        log_dir = config_module.get_logs_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8")
        file_formatter = logging.Formatter(
            "%(asctime)sZ %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
        file_formatter.converter = time.gmtime
        file_handler.setFormatter(file_formatter)
        handlers.append(file_handler)
    except OSError:
        # If we can't create the log directory or file, continue without file logging.
        pass

    logging.basicConfig(level=level, handlers=handlers, force=True)

    if invalid_level is not None:
        logging.getLogger(__name__).error(
            "Invalid log level '%s'. Defaulting to 'error'.", invalid_level
        )
