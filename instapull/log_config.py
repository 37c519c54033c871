"""
Logging Setup
=============
One place to attach handlers to the "instapull" logger tree.

Modules never configure logging themselves; they only do
logging.getLogger("instapull.<module>"). The CLI and the server call
LogConfig once at startup.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import Settings

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Debug: time only, no level column
DEBUG_FORMAT = "%(asctime)s %(name)s %(message)s"
DEBUG_DATE_FORMAT = "%H:%M:%S"

ROOT_LOGGER = "instapull"

# Third-party loggers that are noisy at DEBUG
NOISY_LOGGERS = ("uvicorn.access",)


def _level(name: str) -> int:
    return getattr(logging, str(name).upper(), logging.INFO)


class LogConfig:
    """
    Usage:
        LogConfig.configure(level="DEBUG", filename="instapull.log")
        LogConfig.from_settings(Settings.from_env(), debug=args.debug)
    """

    @classmethod
    def configure(
        cls,
        level: str = "INFO",
        format: Optional[str] = None,
        date_format: Optional[str] = None,
        filename: Optional[str] = None,
        console: bool = True,
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
    ) -> logging.Logger:
        """
        Replace the handlers of the instapull logger.

        Args:
            level: DEBUG, INFO, WARNING, ERROR or CRITICAL
            format: Record format (default: DEFAULT_FORMAT)
            date_format: Timestamp format
            filename: Rotating log file, None for no file
            console: Write to stderr
            max_bytes: Rotation threshold
            backup_count: Rotated files kept

        Returns:
            The "instapull" logger
        """
        root = logging.getLogger(ROOT_LOGGER)
        root.setLevel(_level(level))
        root.handlers.clear()

        formatter = logging.Formatter(
            format or DEFAULT_FORMAT,
            datefmt=date_format or DEFAULT_DATE_FORMAT,
        )

        if console:
            stream = logging.StreamHandler(sys.stderr)
            stream.setFormatter(formatter)
            root.addHandler(stream)

        if filename:
            rotating = RotatingFileHandler(
                filename,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            rotating.setFormatter(formatter)
            root.addHandler(rotating)

        root.propagate = False
        return root

    @classmethod
    def configure_debug(cls, filename: Optional[str] = None) -> logging.Logger:
        """DEBUG level, compact format; strategy failures become visible."""
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
        return cls.configure(
            level="DEBUG",
            format=DEBUG_FORMAT,
            date_format=DEBUG_DATE_FORMAT,
            filename=filename,
        )

    @classmethod
    def from_settings(cls, settings: Settings, debug: bool = False) -> logging.Logger:
        if debug:
            return cls.configure_debug()
        return cls.configure(level=settings.log_level)
