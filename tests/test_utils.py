from polinet.utils import merge_params


def test_later_source_wins():
    merged = merge_params({"a": "1", "k": "old"}, {"k": "new"})
    assert merged == {"a": "1", "k": "new"}


def test_merge_accepts_pairs_and_does_not_mutate():
    base = {"format": "json", "titles": "A"}
    merged = merge_params(base, [("titles", "B"), ("pllimit", "max")])
    assert merged == {"format": "json", "titles": "B", "pllimit": "max"}
    assert base == {"format": "json", "titles": "A"}
    assert merged is not base


def test_merge_nothing():
    assert merge_params() == {}
