"""Typed records for decoded API pages and the political graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .errors import DecodeError


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise DecodeError(f"Expected an object for {what}, got {type(value).__name__}")
    return value


def _check_api_error(payload: Mapping[str, Any]) -> None:
    error = payload.get("error")
    if error:
        info = error.get("info", error) if isinstance(error, Mapping) else error
        raise DecodeError(f"API returned an error: {info}")


@dataclass(frozen=True)
class Continuation:
    """Continuation tokens of one page, keyed by request parameter name."""

    tokens: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        return self.tokens.get(key)

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> Optional["Continuation"]:
        raw = payload.get("continue")
        if not raw:
            return None
        raw = _require_mapping(raw, "continue")
        return cls(tokens={str(key): str(value) for key, value in raw.items()})


@dataclass
class QueryPage:
    title: str
    links: List[str] = field(default_factory=list)
    missing: bool = False


@dataclass
class QueryResponse:
    """One decoded ``action=query`` page."""

    pages: List[QueryPage] = field(default_factory=list)
    backlinks: List[str] = field(default_factory=list)
    continuation: Optional[Continuation] = None

    @classmethod
    def from_json(cls, payload: Any) -> "QueryResponse":
        payload = _require_mapping(payload, "query response")
        _check_api_error(payload)
        query = _require_mapping(payload.get("query", {}), "query")
        pages = [
            QueryPage(
                title=page["title"],
                links=[link["title"] for link in page.get("links", [])],
                missing=bool(page.get("missing", False)),
            )
            for page in query.get("pages", [])
        ]
        backlinks = [page["title"] for page in query.get("backlinks", [])]
        return cls(pages=pages, backlinks=backlinks, continuation=Continuation.from_json(payload))


@dataclass(frozen=True)
class Snak:
    """The value part of a claim or qualifier; only ids and times matter here."""

    value_id: Optional[str] = None
    time: Optional[str] = None

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Snak":
        datavalue = payload.get("datavalue")
        if not datavalue:
            # somevalue / novalue snaks carry no datavalue
            return cls()
        value = datavalue.get("value")
        if isinstance(value, Mapping):
            return cls(value_id=value.get("id"), time=value.get("time"))
        return cls()


@dataclass
class Claim:
    value: Snak
    qualifiers: Dict[str, List[Snak]] = field(default_factory=dict)

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Claim":
        payload = _require_mapping(payload, "claim")
        qualifiers = {
            pid: [Snak.from_json(snak) for snak in snaks]
            for pid, snaks in (payload.get("qualifiers") or {}).items()
        }
        return cls(value=Snak.from_json(payload.get("mainsnak", {})), qualifiers=qualifiers)


@dataclass
class Entity:
    id: str
    labels: Dict[str, str] = field(default_factory=dict)
    claims: Dict[str, List[Claim]] = field(default_factory=dict)

    def label(self, language: str = "en") -> Optional[str]:
        return self.labels.get(language)

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> "Entity":
        payload = _require_mapping(payload, "entity")
        labels = {lang: data["value"] for lang, data in (payload.get("labels") or {}).items()}
        claims = {
            pid: [Claim.from_json(claim) for claim in claim_list]
            for pid, claim_list in (payload.get("claims") or {}).items()
        }
        return cls(id=payload["id"], labels=labels, claims=claims)


@dataclass
class EntityResponse:
    """One decoded ``action=wbgetentities`` page."""

    entities: List[Entity] = field(default_factory=list)
    continuation: Optional[Continuation] = None

    @classmethod
    def from_json(cls, payload: Any) -> "EntityResponse":
        payload = _require_mapping(payload, "entity response")
        _check_api_error(payload)
        raw_entities = _require_mapping(payload.get("entities", {}), "entities")
        entities = [
            Entity.from_json(entity)
            for entity in raw_entities.values()
            if "missing" not in entity
        ]
        return cls(entities=entities, continuation=Continuation.from_json(payload))


@dataclass
class ParseResponse:
    wikitext: str

    @classmethod
    def from_json(cls, payload: Any) -> "ParseResponse":
        payload = _require_mapping(payload, "parse response")
        _check_api_error(payload)
        wikitext = payload["parse"]["wikitext"]
        if isinstance(wikitext, Mapping):
            # formatversion=1 nests the text under "*"
            wikitext = wikitext["*"]
        return cls(wikitext=str(wikitext))


@dataclass
class LinkResult:
    """A page title and the links found on one page of results for it."""

    title: str
    links: List[str]


class Party(str, Enum):
    REPUBLICAN = "republican"
    DEMOCRATIC = "democratic"


@dataclass(frozen=True)
class Politician:
    name: str
    party: Party

    def dict(self) -> Dict[str, str]:
        return {"name": self.name, "party": self.party.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Politician":
        return cls(name=data["name"], party=Party(data["party"]))


@dataclass(frozen=True)
class Edge:
    from_: str
    to: str

    def dict(self) -> Dict[str, str]:
        return {"from": self.from_, "to": self.to}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Edge":
        return cls(from_=data["from"], to=data["to"])


__all__ = [
    "Claim",
    "Continuation",
    "Edge",
    "Entity",
    "EntityResponse",
    "LinkResult",
    "ParseResponse",
    "Party",
    "Politician",
    "QueryPage",
    "QueryResponse",
    "Snak",
]
