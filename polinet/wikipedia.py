"""Wikipedia link extraction."""

from __future__ import annotations

import re
from typing import List, Optional

from .config import WIKIPEDIA_API_URL
from .http import HTTPClient
from .mediawiki import MediaWikiClient

FOOTER_PATTERN = re.compile(r"==\s*External links\s*==", re.IGNORECASE)


def normalize_title(target: str) -> str:
    """Turn a wikilink target into the page title the API would report."""
    title = target.split("|", 1)[0].split("#", 1)[0]
    title = " ".join(title.replace("_", " ").split())
    if not title:
        return ""
    return title[0].upper() + title[1:]


def parse_links(wikitext: str, end_index: Optional[int] = None) -> List[str]:
    """Return the targets of ``[[...]]`` links starting before ``end_index``."""
    links: List[str] = []
    if end_index is None:
        end_index = len(wikitext)
    start = 0
    while start < len(wikitext):
        open_idx = wikitext.find("[[", start)
        if open_idx == -1 or open_idx >= end_index:
            break
        close_idx = wikitext.find("]]", open_idx)
        if close_idx == -1:
            break
        title = normalize_title(wikitext[open_idx + 2 : close_idx])
        if title:
            links.append(title)
        start = close_idx + 2
    return links


class WikipediaClient(MediaWikiClient):
    def __init__(self, http: HTTPClient, api_url: str = WIKIPEDIA_API_URL) -> None:
        super().__init__(http, api_url)

    def get_links_without_footer(self, title: str) -> List[str]:
        """Links in the article body, ignoring the "External links" section onward."""
        wikitext = self.get_wikitext(title)
        if not wikitext:
            return []
        footer = FOOTER_PATTERN.search(wikitext)
        return parse_links(wikitext, footer.start() if footer else None)


__all__ = ["WikipediaClient", "normalize_title", "parse_links"]
