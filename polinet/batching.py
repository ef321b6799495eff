"""Sequential batching of API work."""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional, Sequence, TypeVar

from .errors import ConfigError
from .utils import logger

T = TypeVar("T")
G = TypeVar("G")

# Hard limit on titles/ids per request enforced by the MediaWiki APIs.
MAX_BATCH_SIZE = 50


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    """Yield contiguous slices of ``items`` of length ``size`` (last may be shorter)."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def run_batched(
    items: Sequence[T],
    batch_size: int,
    handler: Callable[[Sequence[T]], Optional[List[G]]],
) -> List[G]:
    """Apply ``handler`` to each batch in order and concatenate the results.

    Each handler call runs to completion before the next batch is started.
    A handler returning ``None`` contributes nothing.
    """
    results: List[G] = []
    total = -(-len(items) // batch_size) if batch_size > 0 else 0
    for batch_number, batch in enumerate(chunked(items, batch_size), start=1):
        logger.info("Doing batch %d/%d (%d values)", batch_number, total, len(batch))
        batch_results = handler(batch)
        if batch_results:
            results.extend(batch_results)
    return results


def validate_batch_size(batch_size: int, max_batch_size: int = MAX_BATCH_SIZE) -> int:
    if batch_size < 1:
        raise ConfigError(f"batch size must be at least 1, got {batch_size}")
    if batch_size > max_batch_size:
        raise ConfigError(f"batch size ({batch_size}) should be at most MAX_BATCH_SIZE ({max_batch_size})")
    return batch_size


__all__ = ["MAX_BATCH_SIZE", "chunked", "run_batched", "validate_batch_size"]
