"""Wikidata entity lookups."""

from __future__ import annotations

from typing import List, Sequence

from .batching import MAX_BATCH_SIZE
from .config import WIKIDATA_API_URL
from .http import HTTPClient
from .mediawiki import BASE_PARAMS, MediaWikiClient
from .pagination import collect
from .schemas import Entity, EntityResponse
from .utils import merge_params


class WikidataClient(MediaWikiClient):
    def __init__(self, http: HTTPClient, api_url: str = WIKIDATA_API_URL, language: str = "en") -> None:
        super().__init__(http, api_url)
        self.language = language

    def get_entities(self, entity_ids: Sequence[str]) -> List[Entity]:
        """Labels and claims for up to ``MAX_BATCH_SIZE`` ids (``action=wbgetentities``)."""
        if len(entity_ids) > MAX_BATCH_SIZE:
            raise ValueError(f"Too many ids ({len(entity_ids)}), max is {MAX_BATCH_SIZE}")
        if not entity_ids:
            return []
        params = merge_params(
            BASE_PARAMS,
            {
                "action": "wbgetentities",
                "languages": self.language,
                "props": "labels|claims",
                "ids": "|".join(entity_ids),
            },
        )
        # wbgetentities answers a batch in a single page
        return collect(self.http, self.api_url, params, EntityResponse.from_json, lambda page: page.entities)


__all__ = ["WikidataClient"]
