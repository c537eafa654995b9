"""Logging setup for entry points.

Library modules never configure logging; they only do
``logger = logging.getLogger(__name__)``. Scripts and the CLI call
``setup_logging(...)`` once.
"""

from __future__ import annotations

import logging
from pathlib import Path

__all__ = ["setup_logging", "coerce_level"]

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


class _ColorFormatter(logging.Formatter):
    """Colors the level name only; used for the console handler."""
    _RESET = "\033[0m"
    _LEVEL_COLOR: dict[int, str] = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self._LEVEL_COLOR.get(record.levelno)
        if not color:
            return super().format(record)

        original = record.levelname
        record.levelname = f"{color}{original}{self._RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def coerce_level(level: int | str) -> int:
    """Accept ``logging.INFO``, ``"info"`` or ``"20"``."""
    if isinstance(level, int):
        return level

    s = str(level).strip().upper()
    if not s:
        raise ValueError("Empty logging level")
    if s.isdigit():
        return int(s)

    value = logging.getLevelName(s)
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return value


def setup_logging(
    level: int | str = "WARNING",
    *,
    fmt: str = DEFAULT_FORMAT,
    datefmt: str = "%Y-%m-%d %H:%M:%S",
    log_file: str | Path | None = None,
    colored: bool = False,
) -> None:
    """Configure the root logger with a console and an optional file handler.

    Uses ``force=True`` so repeated calls replace earlier handlers.
    """
    handlers: list[logging.Handler] = []

    console = logging.StreamHandler()
    formatter_cls = _ColorFormatter if colored else logging.Formatter
    console.setFormatter(formatter_cls(fmt=fmt, datefmt=datefmt))
    handlers.append(console)

    if log_file is not None:
        p = Path(log_file)
        p.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(p, encoding="utf-8")
        fh.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
        handlers.append(fh)

    logging.basicConfig(level=coerce_level(level), handlers=handlers, force=True)
