"""HTTP client with retries and throttling."""

from __future__ import annotations

import os
import time
from typing import Any, Dict, Mapping, Optional

import requests

from .errors import DecodeError, HTTPError
from .utils import RateLimiter, logger

DEFAULT_HEADERS = {
    "User-Agent": os.getenv("POLINET_USER_AGENT", "polinet/1.0 (+https://example.com/contact)"),
}

RETRY_STATUSES = {429, 500, 502, 503, 504}


def build_url(url: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Return ``url`` with ``params`` serialized into its query string."""
    return requests.Request("GET", url, params=dict(params or {})).prepare().url


class HTTPClient:
    def __init__(
        self,
        rate_limiter: RateLimiter | None = None,
        max_retries: int = 3,
        backoff: float = 0.5,
        timeout: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.rate_limiter = rate_limiter or RateLimiter()
        self.max_retries = max_retries
        self.backoff = backoff
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)

    def get(self, url: str, params: Optional[Mapping[str, Any]] = None) -> requests.Response:
        final_url = build_url(url, params)
        logger.info("Sending request: %s", final_url)
        resp: requests.Response | None = None
        for attempt in range(max(self.max_retries, 1)):
            self.rate_limiter.wait()
            try:
                resp = self.session.get(final_url, timeout=self.timeout)
            except requests.RequestException as exc:
                raise HTTPError(final_url, None, str(exc)) from exc
            if resp.ok:
                return resp
            if resp.status_code in RETRY_STATUSES and attempt + 1 < self.max_retries:
                sleep_for = self.backoff * (2**attempt)
                logger.warning("HTTP %s returned %s, retrying in %.2fs", final_url, resp.status_code, sleep_for)
                time.sleep(sleep_for)
                continue
            break
        assert resp is not None
        raise HTTPError(final_url, resp.status_code, resp.reason or "")

    def get_json(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        resp = self.get(url, params=params)
        try:
            return resp.json()
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON response from {resp.url or url}") from exc


__all__ = ["HTTPClient", "HTTPError", "DecodeError", "DEFAULT_HEADERS", "build_url"]
