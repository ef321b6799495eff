"""Exception hierarchy for polinet."""

from __future__ import annotations

from typing import Optional


class PolinetError(RuntimeError):
    pass


class HTTPError(PolinetError):
    """A request finished with a non-success status (or never got one)."""

    def __init__(self, url: str, status: Optional[int], status_text: str = "") -> None:
        self.url = url
        self.status = status
        self.status_text = status_text
        super().__init__(f"Failed GET request to {url}: {status} {status_text}".rstrip())


class DecodeError(PolinetError):
    """A response body was not JSON, or not the JSON shape we expected."""


class PersistenceError(PolinetError):
    """Reading or writing a checkpoint failed."""


class ConfigError(PolinetError):
    pass


__all__ = ["PolinetError", "HTTPError", "DecodeError", "PersistenceError", "ConfigError"]
