"""
Console and file logging for CLI runs.

Library modules only call ``logging.getLogger(__name__)``. The CLI builds
one ScoringLogger, which puts a shared handler on the root logger so every
module's records come out in the same ``time | level | file:line | message``
layout, and which keeps the warnings and errors it was given for a summary.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..config import get_log_dir

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(filename)s:%(lineno)d | %(message)s"


class MillisecondsFormatter(logging.Formatter):
    """``2024-03-13 04:10:00,123`` timestamps regardless of datefmt."""

    def formatTime(self, record, datefmt=None):  # noqa: N802 - logging.Formatter API
        stamp = datetime.fromtimestamp(record.created).strftime(datefmt or "%Y-%m-%d %H:%M:%S")
        return f"{stamp},{int(record.msecs):03d}"


def _with_fields(message: str, fields: dict) -> str:
    """``"Scored week"`` + ``{"entries": 7}`` -> ``"Scored week [entries=7]"``."""
    if not fields:
        return message
    pairs = " ".join(f"{key}={value}" for key, value in fields.items())
    return f"{message} [{pairs}]"


class ScoringLogger:
    """Root logging setup plus a tracked warning/error log for one CLI run."""

    def __init__(
        self,
        name: str = "sadhana_scoring",
        log_level: str = "INFO",
        log_file: Optional[str] = None,
        log_dir: Optional[Path] = None,
    ):
        """
        Args:
            name: Logger used for this object's own messages
            log_level: DEBUG, INFO, WARNING or ERROR (unknown names mean INFO)
            log_file: File name to also log to, at DEBUG
            log_dir: Directory for ``log_file`` (defaults to ``<data dir>/logs``)
        """
        level = getattr(logging, str(log_level).upper(), logging.INFO)
        formatter = MillisecondsFormatter(LOG_FORMAT)

        root = logging.getLogger()
        root.setLevel(level)
        root.handlers.clear()
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(level)
        stderr_handler.setFormatter(formatter)
        root.addHandler(stderr_handler)

        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.warnings: list[dict] = []
        self.errors: list[dict] = []

        if log_file:
            directory = log_dir or get_log_dir()
            directory.mkdir(parents=True, exist_ok=True)
            log_path = directory / log_file
            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
            self.info(f"Logging to file: {log_path}")

    def _track(self, bucket: list, message: str, fields: dict, exception: Optional[Exception] = None) -> None:
        record = {"message": message, "timestamp": datetime.now().isoformat(), "data": fields}
        if bucket is self.errors:
            record["exception"] = str(exception) if exception else None
        bucket.append(record)

    def debug(self, message: str, **fields):
        self.logger.debug(_with_fields(message, fields), stacklevel=2)

    def info(self, message: str, **fields):
        self.logger.info(_with_fields(message, fields), stacklevel=2)

    def warning(self, message: str, **fields):
        """Log and remember a warning."""
        message = _with_fields(message, fields)
        self.logger.warning(message, stacklevel=2)
        self._track(self.warnings, message, fields)

    def error(self, message: str, exception: Optional[Exception] = None, **fields):
        """Log and remember an error; the traceback is attached when ``exception`` is given."""
        if exception is not None:
            message = f"{message} | Exception: {exception}"
        message = _with_fields(message, fields)
        self.logger.error(message, exc_info=exception, stacklevel=2)
        self._track(self.errors, message, fields, exception)

    def get_summary(self) -> dict:
        return {"warnings": len(self.warnings), "errors": len(self.errors)}
