"""
Color Analyzer Structured Logging
Centralized logging configuration using loguru.

Log lines go to stderr so that CLI output written to stdout (JSON reports,
tables) stays machine-readable.
"""
import sys
from typing import Any, Dict, Optional, TextIO

from loguru import logger

from coloranalyzer.config import config

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message} | {extra}"

_configured = False


def _stderr_sink(message) -> None:
    # resolved per write so a replaced sys.stderr is honored
    sys.stderr.write(message)


def configure_logging(level: Optional[str] = None, sink: TextIO = None) -> None:
    """
    Replace loguru's default handler with the analyzer's structured sink.

    Args:
        level: Minimum level name (default from config)
        sink: Writable stream (default: the current sys.stderr)
    """
    global _configured
    logger.remove()
    logger.add(
        sink or _stderr_sink,
        format=LOG_FORMAT,
        level=(level or config.LOG_LEVEL).upper(),
        serialize=False
    )
    _configured = True


class StructuredLogger:
    """Structured logger for the color analysis pipeline."""

    def __init__(self, **context: Any):
        """Initialize with context values bound to every record."""
        self._context = context

    def bind(self, **context: Any) -> "StructuredLogger":
        """Return a logger carrying additional context (analysis id, stage...)."""
        return StructuredLogger(**{**self._context, **context})

    def _log(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        payload = {**self._context, **(extra or {})}
        if payload:
            logger.bind(**payload).log(level, message)
        else:
            logger.log(level, message)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("INFO", message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("WARNING", message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("ERROR", message, extra)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log("DEBUG", message, extra)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create global logger instance."""
    global _logger
    if _logger is None:
        if not _configured:
            configure_logging()
        _logger = StructuredLogger()
    return _logger
