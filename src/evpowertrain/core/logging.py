"""Structured logging utilities.

Records are emitted as one JSON object per line on stderr so that
stdout stays free for CLI results. Every record carries ``level``,
``message``, ``timestamp`` and ``logger``; keyword arguments passed to a
level method are merged in as extra keys.
"""

from __future__ import annotations

import json
import sys
import time
from contextlib import contextmanager
from typing import Any, Iterator, TextIO

LEVELS = {"DEBUG": 0, "INFO": 1, "WARN": 2, "ERROR": 3}

_default_level = "INFO"


def _level_value(level: str) -> int:
    try:
        return LEVELS[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level {level!r}, expected one of {sorted(LEVELS)}") from None


def _jsonable(value: Any) -> Any:
    # numpy scalars and arrays from traces and snapshots
    if hasattr(value, "tolist"):
        return value.tolist()
    return str(value)


class StructuredLogger:
    """JSON-lines logger with a per-instance level threshold."""

    def __init__(
        self,
        name: str,
        output: TextIO | None = None,
        min_level: str | None = None,
    ) -> None:
        self.name = name
        self.output = output
        self._min_level = _level_value(min_level or _default_level)

    def set_level(self, level: str) -> None:
        self._min_level = _level_value(level)

    def is_enabled(self, level: str) -> bool:
        """Whether records at ``level`` would be emitted."""
        return _level_value(level) >= self._min_level

    def _log(self, level: str, message: str, **data: Any) -> None:
        if not self.is_enabled(level):
            return
        record = {
            "level": level,
            "message": message,
            "timestamp": time.time(),
            "logger": self.name,
            **data,
        }
        # stderr is looked up per record so pytest's capsys sees it
        print(json.dumps(record, default=_jsonable), file=self.output or sys.stderr)

    def debug(self, message: str, **data: Any) -> None:
        self._log("DEBUG", message, **data)

    def info(self, message: str, **data: Any) -> None:
        self._log("INFO", message, **data)

    def warn(self, message: str, **data: Any) -> None:
        self._log("WARN", message, **data)

    def error(self, message: str, **data: Any) -> None:
        self._log("ERROR", message, **data)

    @contextmanager
    def timer(self, operation: str) -> Iterator[dict[str, Any]]:
        """Time a block and log ``"<operation> completed"`` at DEBUG.

        The yielded dict is merged into the completion record, so the block
        can attach results such as tick counts:

            with logger.timer("run_fixed_step") as summary:
                trace = run_fixed_step(engine, 600, 0.2, 1.0)
                summary["n_ticks"] = len(trace)
        """
        summary: dict[str, Any] = {}
        start = time.perf_counter()
        try:
            yield summary
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            self.debug(f"{operation} completed", elapsed_ms=elapsed_ms, **summary)


_loggers: dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """Get or create the cached logger for ``name`` (typically ``__name__``)."""
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]


def set_log_level(level: str) -> None:
    """Set minimum log level for existing and future loggers.

    Args:
        level: One of DEBUG, INFO, WARN, ERROR (case-insensitive).

    Raises:
        ValueError: If ``level`` is not a known level name.
    """
    global _default_level
    _level_value(level)
    _default_level = level.upper()
    for logger in _loggers.values():
        logger.set_level(level)
