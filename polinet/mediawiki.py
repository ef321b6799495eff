"""MediaWiki Action API operations shared by Wikidata and Wikipedia."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .batching import MAX_BATCH_SIZE
from .errors import DecodeError, HTTPError
from .http import HTTPClient
from .pagination import collect, fetch_page, next_page_params
from .schemas import LinkResult, ParseResponse, QueryResponse
from .utils import logger, merge_params

BASE_PARAMS: Dict[str, str] = {"format": "json", "formatversion": "2"}
MAIN_NAMESPACE = "0"


class MediaWikiClient:
    def __init__(self, http: HTTPClient, api_url: str) -> None:
        self.http = http
        self.api_url = api_url

    def get_backlinks(self, title: str) -> List[str]:
        """Titles of main-namespace pages linking to ``title`` (``list=backlinks``)."""
        params = merge_params(
            BASE_PARAMS,
            {
                "action": "query",
                "list": "backlinks",
                "bllimit": "max",
                "blnamespace": MAIN_NAMESPACE,
                "bltitle": title,
            },
        )
        return collect(
            self.http,
            self.api_url,
            params,
            QueryResponse.from_json,
            lambda page: page.backlinks,
            next_page_params(params, "blcontinue"),
        )

    def get_backlink_pages(self, title: str) -> List[str]:
        """Same pages as :meth:`get_backlinks`, but through ``generator=backlinks``."""
        params = merge_params(
            BASE_PARAMS,
            {
                "action": "query",
                "generator": "backlinks",
                "gbllimit": "max",
                "gblnamespace": MAIN_NAMESPACE,
                "gbltitle": title,
            },
        )
        return collect(
            self.http,
            self.api_url,
            params,
            QueryResponse.from_json,
            lambda page: [p.title for p in page.pages if not p.missing],
            next_page_params(params, "gblcontinue"),
        )

    def get_links(self, titles: Sequence[str], valid_links: Optional[Sequence[str]] = None) -> List[LinkResult]:
        """Links on each of ``titles`` (``prop=links``).

        ``valid_links`` asks the API to only report links to those titles. A
        title may appear in several results when its links span pages.
        """
        if len(titles) > MAX_BATCH_SIZE:
            raise ValueError(f"Too many titles ({len(titles)}), max is {MAX_BATCH_SIZE}")
        params = merge_params(
            BASE_PARAMS,
            {
                "action": "query",
                "prop": "links",
                "pllimit": "max",
                "titles": "|".join(titles),
            },
        )
        if valid_links:
            params = merge_params(params, {"pltitles": "|".join(valid_links)})
        return collect(
            self.http,
            self.api_url,
            params,
            QueryResponse.from_json,
            lambda page: [LinkResult(title=p.title, links=p.links) for p in page.pages],
            next_page_params(params, "plcontinue"),
        )

    def get_wikitext(self, title: str) -> Optional[str]:
        params = merge_params(
            BASE_PARAMS,
            {"action": "parse", "prop": "wikitext", "page": title},
        )
        try:
            return fetch_page(self.http, self.api_url, params, ParseResponse.from_json).wikitext
        except (HTTPError, DecodeError) as exc:
            logger.error("Could not fetch wikitext for %s: %s", title, exc)
            return None


__all__ = ["BASE_PARAMS", "MediaWikiClient"]
