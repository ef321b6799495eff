"""Paged fetching of MediaWiki API results.

MediaWiki splits large result sets into pages. Every page that has a
successor carries a ``continue`` object whose keys (``plcontinue``,
``blcontinue``, ``gblcontinue``...) have to be echoed back as request
parameters to obtain the next page. :func:`collect` drives that loop and
accumulates whatever items the caller extracts from each page.

A failed page does not raise: the loop logs the failure and returns the
items gathered so far. Harvesting is best effort, so a short result is
preferred over losing the pages that did arrive.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, TypeVar

from .errors import DecodeError, HTTPError
from .http import HTTPClient
from .schemas import Continuation
from .utils import logger, merge_params

T = TypeVar("T")
G = TypeVar("G")

Params = Dict[str, str]
Decoder = Callable[[Any], T]


class HasContinuation(Protocol):
    continuation: Optional[Continuation]


def fetch_page(http: HTTPClient, base_url: str, params: Mapping[str, str], decode: Decoder[T]) -> T:
    """Fetch one page and decode it, raising ``HTTPError`` or ``DecodeError``."""
    payload = http.get_json(base_url, params=params)
    try:
        return decode(payload)
    except DecodeError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise DecodeError(f"Unexpected response shape from {base_url}: {exc!r}") from exc


def collect(
    http: HTTPClient,
    base_url: str,
    initial_params: Mapping[str, str],
    decode: Decoder[T],
    extract_items: Callable[[T], List[G]],
    extract_next_params: Optional[Callable[[T], Optional[Params]]] = None,
) -> List[G]:
    """Fetch pages until the continuation runs out or a page fails.

    Without ``extract_next_params`` exactly one page is requested.
    """
    results: List[G] = []
    params: Params = dict(initial_params)
    request_number = 0

    while True:
        request_number += 1
        logger.info("Sending request %d to %s", request_number, base_url)
        try:
            page = fetch_page(http, base_url, params, decode)
        except (HTTPError, DecodeError) as exc:
            logger.error("Stopping pagination after %d request(s): %s", request_number, exc)
            break
        results.extend(extract_items(page))

        if extract_next_params is None:
            break
        next_params = extract_next_params(page)
        if next_params is None:
            break
        params = next_params

    return results


def next_page_params(
    initial_params: Mapping[str, str], token_key: str
) -> Callable[[HasContinuation], Optional[Params]]:
    """Build a continuation extractor for ``token_key``.

    The next request is always the initial parameters plus the token (and
    the generic ``continue`` marker when the server sent one), so nothing
    from earlier pages leaks into later requests.
    """

    def extract(page: HasContinuation) -> Optional[Params]:
        continuation = page.continuation
        token = continuation.get(token_key) if continuation else None
        if not token:
            return None
        override = {token_key: token}
        marker = continuation.get("continue")
        if marker is not None:
            override["continue"] = marker
        return merge_params(initial_params, override)

    return extract


__all__ = ["collect", "fetch_page", "next_page_params"]
