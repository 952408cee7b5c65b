"""Logging setup with Rich console output."""

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from src.core.config.settings import LoggingSettings, get_settings

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_console: Console | None = None


def _build_console_handler(settings: LoggingSettings) -> logging.Handler:
    if settings.use_rich:
        return RichHandler(
            console=get_console(),
            show_path=False,
            show_time=True,
            rich_tracebacks=True,
            markup=False,
        )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(settings.format))
    return handler


def setup_logging(settings: LoggingSettings | None = None) -> None:
    """Configure the root logger.

    Replaces any handlers already installed on the root logger, so calling it
    again (e.g. after the CLI loaded a config file) re-applies the level and
    destinations.

    Args:
        settings: Logging settings. Uses global settings if not provided.
    """
    if settings is None:
        settings = get_settings().logging

    level = getattr(logging, settings.level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_build_console_handler(settings))

    if settings.file:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        root_logger.addHandler(file_handler)

    # GitPython is chatty at DEBUG
    logging.getLogger("git").setLevel(max(level, logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """Get a logger, configuring logging on first use.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)


def get_console() -> Console:
    """Get the shared stderr Rich console."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console
