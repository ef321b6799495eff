from polinet.config import AttributePredicate, Vocabulary
from polinet.resolver import (
    EntityResolver,
    matches_attribute,
    parse_time,
    resolve_latest_qualified_value,
)
from polinet.schemas import Entity, Party

REPUBLICAN = "Q29468"
DEMOCRATIC = "Q29552"


def snak(value_id=None, time=None):
    value = {}
    if value_id:
        value["id"] = value_id
    if time:
        value["time"] = time
    return {"datavalue": {"value": value}}


def position(party=None, start=None, position_id="Q4416090"):
    claim = {"mainsnak": snak(position_id), "qualifiers": {}}
    if party:
        claim["qualifiers"]["P4100"] = [snak(party)]
    if start:
        claim["qualifiers"]["P580"] = [snak(time=start)]
    return claim


def make_entity(positions=(), occupations=("Q82955",), label="Alice"):
    payload = {
        "id": "Q1",
        "labels": {"en": {"language": "en", "value": label}} if label else {},
        "claims": {
            "P106": [{"mainsnak": snak(occupation)} for occupation in occupations],
            "P39": list(positions),
        },
    }
    return Entity.from_json(payload)


def test_matches_attribute():
    entity = make_entity(occupations=("Q40348", "Q82955"))
    assert matches_attribute(entity, "P106", "Q82955")
    assert not matches_attribute(entity, "P106", "Q33999")
    assert not matches_attribute(entity, "P27", "Q30")


def test_latest_qualified_value_picks_most_recent():
    entity = make_entity(
        [
            position(DEMOCRATIC, "+2013-01-03T00:00:00Z"),
            position(REPUBLICAN, "+2021-01-03T00:00:00Z"),
            position(DEMOCRATIC, "+2017-01-03T00:00:00Z"),
        ]
    )
    assert resolve_latest_qualified_value(entity, "P39", "P4100") == REPUBLICAN


def test_latest_qualified_value_tie_keeps_first():
    entity = make_entity(
        [
            position(DEMOCRATIC, "+2021-01-01T00:00:00Z"),
            position(REPUBLICAN, "+2021-01-01T00:00:00Z"),
        ]
    )
    assert resolve_latest_qualified_value(entity, "P39", "P4100") == DEMOCRATIC


def test_claims_without_qualifier_are_ignored():
    entity = make_entity(
        [
            position(None, "+2023-01-03T00:00:00Z"),
            position(DEMOCRATIC, "+2001-01-03T00:00:00Z"),
        ]
    )
    assert resolve_latest_qualified_value(entity, "P39", "P4100") == DEMOCRATIC
    assert resolve_latest_qualified_value(make_entity([position(None)]), "P39", "P4100") is None


def test_dated_claim_beats_undated_one():
    entity = make_entity([position(DEMOCRATIC), position(REPUBLICAN, "+1999-01-03T00:00:00Z")])
    assert resolve_latest_qualified_value(entity, "P39", "P4100") == REPUBLICAN


def test_parse_time_handles_precision_placeholders():
    assert parse_time("+2021-00-00T00:00:00Z") < parse_time("+2021-01-03T00:00:00Z")
    assert parse_time("-0044-03-15T00:00:00Z")[0] == -44
    assert parse_time("garbage") is None


def test_to_politician():
    resolver = EntityResolver()
    politician = resolver.to_politician(make_entity([position(REPUBLICAN, "+2021-01-03T00:00:00Z")]))
    assert politician.name == "Alice"
    assert politician.party is Party.REPUBLICAN


def test_to_politician_drops_incomplete_entities():
    resolver = EntityResolver()
    with_party = [position(DEMOCRATIC, "+2021-01-03T00:00:00Z")]
    assert resolver.to_politician(make_entity(with_party, label=None)) is None
    assert resolver.to_politician(make_entity(with_party, occupations=("Q40348",))) is None
    assert resolver.to_politician(make_entity([position(None)])) is None
    assert resolver.to_politician(make_entity([position("Q12345", "+2021-01-03T00:00:00Z")])) is None


def test_custom_vocabulary():
    vocabulary = Vocabulary(
        predicates=(AttributePredicate("P106", "Q40348"),),
        parties={"Q12345": Party.DEMOCRATIC},
    )
    resolver = EntityResolver(vocabulary)
    entity = make_entity([position("Q12345", "+2021-01-03T00:00:00Z")], occupations=("Q40348",))
    assert resolver.resolve_politicians([entity])[0].party is Party.DEMOCRATIC


def test_resolve_party_maps_known_ids_only():
    resolver = EntityResolver()
    assert resolver.resolve_party(make_entity([position(DEMOCRATIC, "+2021-01-03T00:00:00Z")])) is Party.DEMOCRATIC
    assert resolver.resolve_party(make_entity([position("Q12345", "+2021-01-03T00:00:00Z")])) is None
    assert resolver.resolve_party(make_entity()) is None
