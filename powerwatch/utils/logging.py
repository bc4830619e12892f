"""
Project-wide logging setup for powerwatch.

Every status line goes to the console and, when a log file is given, is
appended to that file as well. Level and format come from Settings:
- POWERWATCH_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
- POWERWATCH_LOG_FORMAT: text|json (default: text)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from pythonjsonlogger import jsonlogger

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def _get_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _build_formatter(fmt: str) -> logging.Formatter:
    if fmt.lower() == "json":
        return jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "name": "logger"},
        )
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(
    level: Union[str, int] = "INFO",
    fmt: str = "text",
    log_file: Optional[Union[str, Path]] = None,
    force: bool = False,
    *,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Configure root logging for console and optional file output.

    If a handler is already present and force is False, this is a no-op.
    The log file is opened in append mode; an OSError opening it propagates
    so the caller can refuse to start without a writable log sink.
    """
    target_logger = logger or logging.getLogger()
    if target_logger.handlers and not force:
        return

    # Build the file handler first so a bad path leaves logging untouched
    file_handler: Optional[logging.Handler] = None
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")

    if force:
        for h in list(target_logger.handlers):
            target_logger.removeHandler(h)
            h.close()

    target_logger.setLevel(_get_level(level))
    formatter = _build_formatter(fmt)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    target_logger.addHandler(handler)

    if file_handler is not None:
        file_handler.setFormatter(formatter)
        target_logger.addHandler(file_handler)

    # asyncssh is chatty at INFO about every connection it opens
    logging.getLogger("asyncssh").setLevel(logging.WARNING)
