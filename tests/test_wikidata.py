import pytest

from polinet.http import HTTPClient
from polinet.wikidata import WikidataClient


class DummyHTTP(HTTPClient):
    def __init__(self, payloads):
        self.payloads = list(payloads)
        self.calls = []

    def get_json(self, url, params=None):
        self.calls.append((url, dict(params or {})))
        return self.payloads.pop(0)


def test_get_entities_parses_labels_and_claims():
    payload = {
        "entities": {
            "Q1": {
                "id": "Q1",
                "labels": {"en": {"language": "en", "value": "Alice"}},
                "claims": {
                    "P39": [
                        {
                            "mainsnak": {"datavalue": {"value": {"id": "Q4416090"}}},
                            "qualifiers": {
                                "P4100": [{"datavalue": {"value": {"id": "Q29552"}}}],
                                "P580": [{"snaktype": "somevalue"}],
                            },
                        }
                    ]
                },
            },
            "Q404": {"id": "Q404", "missing": ""},
        }
    }
    http = DummyHTTP([payload])
    client = WikidataClient(http)
    entities = client.get_entities(["Q1", "Q404"])
    assert [entity.id for entity in entities] == ["Q1"]
    claim = entities[0].claims["P39"][0]
    assert entities[0].label() == "Alice"
    assert claim.qualifiers["P4100"][0].value_id == "Q29552"
    assert claim.qualifiers["P580"][0].time is None
    params = http.calls[0][1]
    assert params["action"] == "wbgetentities"
    assert params["ids"] == "Q1|Q404"
    assert params["props"] == "labels|claims"


def test_get_entities_enforces_batch_cap():
    client = WikidataClient(DummyHTTP([]))
    with pytest.raises(ValueError):
        client.get_entities([f"Q{i}" for i in range(51)])


def test_get_backlinks_follows_continuation():
    http = DummyHTTP(
        [
            {"continue": {"blcontinue": "0|123", "continue": "-||"}, "query": {"backlinks": [{"title": "Q1"}]}},
            {"query": {"backlinks": [{"title": "Q2"}]}},
        ]
    )
    client = WikidataClient(http)
    assert client.get_backlinks("Q65089999") == ["Q1", "Q2"]
    assert http.calls[1][1]["blcontinue"] == "0|123"
    assert http.calls[1][1]["bltitle"] == "Q65089999"


def test_get_backlink_pages_uses_generator():
    http = DummyHTTP(
        [
            {
                "continue": {"gblcontinue": "0|9", "continue": "gblcontinue||"},
                "query": {"pages": [{"title": "Q1"}, {"title": "Q2", "missing": True}]},
            },
            {},
        ]
    )
    client = WikidataClient(http)
    assert client.get_backlink_pages("Q65089999") == ["Q1"]
    assert http.calls[0][1]["generator"] == "backlinks"
    assert http.calls[1][1]["gblcontinue"] == "0|9"
