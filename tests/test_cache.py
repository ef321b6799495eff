import json

import pytest

from polinet.cache import JSONFileStore, MemoryStore, load_or_compute
from polinet.errors import PersistenceError
from polinet.schemas import Party, Politician


def test_producer_runs_once():
    store = MemoryStore()
    calls = []

    def producer():
        calls.append(1)
        return ["Q1", "Q2"]

    first = load_or_compute(store, "x", producer)
    second = load_or_compute(store, "x", producer)
    assert first == second == ["Q1", "Q2"]
    assert len(calls) == 1


def test_records_are_serialized_and_restored():
    store = MemoryStore()
    politicians = [Politician("Alice", Party.DEMOCRATIC)]
    load_or_compute(store, "p", lambda: politicians, serialize=Politician.dict, deserialize=Politician.from_dict)
    assert store.get("p") == [{"name": "Alice", "party": "democratic"}]
    restored = load_or_compute(
        store,
        "p",
        lambda: [],
        serialize=Politician.dict,
        deserialize=Politician.from_dict,
    )
    assert restored == politicians


def test_file_store_writes_one_file_per_checkpoint(tmp_path):
    store = JSONFileStore(str(tmp_path / "checkpoints"))
    load_or_compute(store, "c117-candidates", lambda: ["Q1"])
    path = tmp_path / "checkpoints" / "c117-candidates.json"
    assert json.loads(path.read_text(encoding="utf-8")) == ["Q1"]
    assert load_or_compute(store, "c117-candidates", lambda: ["other"]) == ["Q1"]


def test_corrupt_checkpoint_is_recomputed_and_overwritten(tmp_path):
    store = JSONFileStore(str(tmp_path))
    path = tmp_path / "edges.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_or_compute(store, "edges", lambda: ["fresh"]) == ["fresh"]
    assert json.loads(path.read_text(encoding="utf-8")) == ["fresh"]


def test_malformed_records_are_a_cache_miss():
    store = MemoryStore()
    store.put("p", [{"name": "Alice"}])
    result = load_or_compute(
        store,
        "p",
        lambda: [Politician("Bob", Party.REPUBLICAN)],
        serialize=Politician.dict,
        deserialize=Politician.from_dict,
    )
    assert result == [Politician("Bob", Party.REPUBLICAN)]


def test_write_failure_still_returns_data():
    class BrokenStore:
        def get(self, key):
            raise PersistenceError("unreadable")

        def put(self, key, value):
            raise PersistenceError("read-only")

    assert load_or_compute(BrokenStore(), "x", lambda: [1, 2]) == [1, 2]


def test_failed_write_leaves_no_temp_file(tmp_path):
    store = JSONFileStore(str(tmp_path))
    assert len(load_or_compute(store, "x", lambda: [object()])) == 1
    assert list(tmp_path.iterdir()) == []


def test_keys_are_not_rewritten(tmp_path):
    store = JSONFileStore(str(tmp_path))
    assert store.path_for("a_b") == str(tmp_path / "a_b.json")
    for key in ("a/b", "../escape", "", ".hidden"):
        with pytest.raises(PersistenceError):
            store.path_for(key)


def test_invalid_key_is_a_cache_miss(tmp_path):
    store = JSONFileStore(str(tmp_path))
    assert load_or_compute(store, "a/b", lambda: ["fresh"]) == ["fresh"]
    assert list(tmp_path.iterdir()) == []
