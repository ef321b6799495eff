"""Utility helpers for polinet."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "polinet"

ParamSource = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


def get_logger() -> logging.Logger:
    """Return a module-level logger configured with rich if not already."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)
    return logger


logger = get_logger()


def set_log_level(level: str) -> None:
    """Allow callers (e.g. CLI) to adjust logging verbosity at runtime."""

    level_value = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level_value)


def merge_params(*sources: ParamSource) -> Dict[str, str]:
    """Merge query parameter sources into a new dict.

    Each source is either a mapping (a previously merged parameter set is
    just a dict) or an iterable of ``(key, value)`` pairs. When a key shows
    up more than once, the value from the later source wins. Values are
    coerced to ``str`` since they end up in a query string anyway.
    """
    result: Dict[str, str] = {}
    for source in sources:
        items = source.items() if isinstance(source, Mapping) else source
        for key, value in items:
            result[str(key)] = str(value)
    return result


@dataclass
class RateLimiter:
    """Simple token bucket rate limiter."""

    rate: float = 5.0
    capacity: int = 5

    def __post_init__(self) -> None:  # pragma: no cover - trivial
        self._lock = threading.Lock()
        self._tokens = float(self.capacity)
        self._timestamp = time.perf_counter()

    def wait(self) -> None:
        with self._lock:
            now = time.perf_counter()
            elapsed = now - self._timestamp
            self._timestamp = now
            self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
            if self._tokens < 1:
                sleep_for = (1 - self._tokens) / self.rate
                time.sleep(max(0, sleep_for))
                self._tokens = 0
                self._timestamp = time.perf_counter()
            self._tokens -= 1


console = Console()


__all__ = [
    "LOGGER_NAME",
    "RateLimiter",
    "console",
    "get_logger",
    "logger",
    "merge_params",
    "set_log_level",
]
