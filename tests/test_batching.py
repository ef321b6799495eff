import pytest

from polinet.batching import MAX_BATCH_SIZE, chunked, run_batched, validate_batch_size
from polinet.errors import ConfigError


def test_run_batched_preserves_order_and_chunk_sizes():
    values = list(range(1, 128))
    sizes = []

    def identity(batch):
        sizes.append(len(batch))
        return list(batch)

    assert run_batched(values, 50, identity) == values
    assert sizes == [50, 50, 27]


def test_handler_may_return_nothing():
    seen = []
    assert run_batched(["a", "b", "c"], 2, lambda batch: seen.append(list(batch))) == []
    assert seen == [["a", "b"], ["c"]]


def test_empty_input_never_calls_handler():
    def handler(batch):  # pragma: no cover - must not run
        raise AssertionError("called")

    assert run_batched([], 10, handler) == []


def test_chunked_rejects_zero():
    with pytest.raises(ValueError):
        list(chunked([1, 2], 0))


def test_validate_batch_size():
    assert validate_batch_size(MAX_BATCH_SIZE) == MAX_BATCH_SIZE
    with pytest.raises(ConfigError):
        validate_batch_size(MAX_BATCH_SIZE + 1)
    with pytest.raises(ConfigError):
        validate_batch_size(0)
