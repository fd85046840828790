"""Logging configuration and the debug-gated logger used by the pipeline."""

from __future__ import annotations

import logging
import sys
from typing import Any, Mapping, Optional

import orjson

PREFIX = "summary_assistant"


def configure_logging(log_level: str = "INFO", debug_mode: bool = False) -> None:
    """Configure process logging.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        debug_mode: Force DEBUG level for the application loggers
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    if debug_mode:
        logging.getLogger(PREFIX).setLevel(logging.DEBUG)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


class SummaryLogger:
    """
    Two-level logger: debug output only in debug mode, errors always.

    Error context can hold article text or request details, so it is dropped
    unless debug mode is on.
    """

    def __init__(self, debug_mode: bool = False, logger: Optional[logging.Logger] = None):
        self.debug_mode = debug_mode
        self._logger = logger or logging.getLogger(PREFIX)

    def debug(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        if self.debug_mode:
            self._logger.debug(self._format(message, context))

    def error(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self._logger.error(self._format(message, context if self.debug_mode else None))

    @staticmethod
    def _format(message: str, context: Optional[Mapping[str, Any]]) -> str:
        if not context:
            return message
        encoded = orjson.dumps(dict(context), default=str).decode()
        return f"{message} | Context: {encoded}"
