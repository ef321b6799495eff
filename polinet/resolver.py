"""Resolve Wikidata entities into politicians."""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .config import DEFAULT_VOCABULARY, POINT_IN_TIME, START_TIME, Vocabulary
from .schemas import Claim, Entity, Party, Politician

DEFAULT_TIME_PROPERTIES: Tuple[str, ...] = (START_TIME, POINT_IN_TIME)

# Wikidata times look like "+2021-01-03T00:00:00Z"; month/day are "00" for
# year or month precision.
WIKIDATA_TIME = re.compile(r"^(?P<sign>[+-]?)(?P<year>\d+)-(?P<month>\d{2})-(?P<day>\d{2})T(?P<hms>\d{2}:\d{2}:\d{2})")

SortableTime = Tuple[int, int, int, str]


def parse_time(value: Optional[str]) -> Optional[SortableTime]:
    if not value:
        return None
    match = WIKIDATA_TIME.match(value)
    if not match:
        return None
    year = int(match.group("year"))
    if match.group("sign") == "-":
        year = -year
    return (year, int(match.group("month")), int(match.group("day")), match.group("hms"))


def claim_time(claim: Claim, time_property_ids: Sequence[str] = DEFAULT_TIME_PROPERTIES) -> Optional[SortableTime]:
    for pid in time_property_ids:
        for snak in claim.qualifiers.get(pid, []):
            parsed = parse_time(snak.time)
            if parsed is not None:
                return parsed
    return parse_time(claim.value.time)


def matches_attribute(entity: Entity, property_id: str, expected_value_id: str) -> bool:
    return any(claim.value.value_id == expected_value_id for claim in entity.claims.get(property_id, []))


def resolve_latest_qualified_value(
    entity: Entity,
    position_property_id: str,
    qualifier_property_id: str,
    time_property_ids: Sequence[str] = DEFAULT_TIME_PROPERTIES,
) -> Optional[str]:
    """Return the ``qualifier_property_id`` value of the most recent qualifying claim.

    Claims are compared by :func:`claim_time` with a strict ``>``, so on a
    tie (or when dates are missing) the first claim encountered is kept.
    """
    latest: Optional[Claim] = None
    latest_time: Optional[SortableTime] = None
    for claim in entity.claims.get(position_property_id, []):
        if not claim.qualifiers.get(qualifier_property_id):
            continue
        current_time = claim_time(claim, time_property_ids)
        if latest is None:
            latest, latest_time = claim, current_time
        elif current_time is not None and (latest_time is None or current_time > latest_time):
            latest, latest_time = claim, current_time
    if latest is None:
        return None
    return latest.qualifiers[qualifier_property_id][0].value_id


class EntityResolver:
    def __init__(self, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> None:
        self.vocabulary = vocabulary

    def is_match(self, entity: Entity) -> bool:
        return all(
            matches_attribute(entity, predicate.property_id, predicate.value_id)
            for predicate in self.vocabulary.predicates
        )

    def resolve_party(self, entity: Entity) -> Optional[Party]:
        vocab = self.vocabulary
        party_id = resolve_latest_qualified_value(
            entity,
            vocab.position_property_id,
            vocab.party_qualifier_id,
            vocab.time_property_ids,
        )
        if party_id is None:
            return None
        return vocab.parties.get(party_id)

    def to_politician(self, entity: Entity) -> Optional[Politician]:
        name = entity.label(self.vocabulary.language)
        if not name or not self.is_match(entity):
            return None
        party = self.resolve_party(entity)
        if party is None:
            return None
        return Politician(name=name, party=party)

    def resolve_politicians(self, entities: Iterable[Entity]) -> List[Politician]:
        politicians = []
        for entity in entities:
            politician = self.to_politician(entity)
            if politician is not None:
                politicians.append(politician)
        return politicians


__all__ = [
    "EntityResolver",
    "claim_time",
    "matches_attribute",
    "parse_time",
    "resolve_latest_qualified_value",
]
