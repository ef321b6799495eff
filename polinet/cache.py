"""Checkpoint storage for computed datasets."""

from __future__ import annotations

import contextlib
import json
import os
import re
from typing import Any, Callable, Dict, List, Optional, Protocol, TypeVar

from .errors import PersistenceError
from .utils import logger

T = TypeVar("T")

CHECKPOINT_KEY_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def check_checkpoint_key(key: str) -> str:
    """Return ``key`` unchanged if it can be used as a file name as-is."""
    if not CHECKPOINT_KEY_PATTERN.match(key):
        raise PersistenceError(
            f"Invalid checkpoint key {key!r}: use letters, digits, '.', '_' or '-', starting with a letter or digit"
        )
    return key


class DatasetStore(Protocol):
    def get(self, key: str) -> Optional[Any]:
        ...

    def put(self, key: str, value: Any) -> None:
        ...


class JSONFileStore:
    """One JSON document per checkpoint, stored as ``<directory>/<key>.json``."""

    def __init__(self, directory: str | None = None) -> None:
        self.directory = directory or os.path.join(os.getcwd(), ".polinet-cache")

    def path_for(self, key: str) -> str:
        return os.path.join(self.directory, f"{check_checkpoint_key(key)}.json")

    def get(self, key: str) -> Optional[Any]:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Could not read checkpoint {path}: {exc}") from exc

    def put(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        tmp_path = f"{path}.tmp"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as fh:
                json.dump(value, fh, ensure_ascii=False)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as exc:
            with contextlib.suppress(OSError):
                os.remove(tmp_path)
            raise PersistenceError(f"Could not write checkpoint {path}: {exc}") from exc


class MemoryStore:
    """In-memory store useful for testing."""

    def __init__(self) -> None:
        self._store: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._store.get(key)
        return None if raw is None else json.loads(raw)

    def put(self, key: str, value: Any) -> None:
        # round-trip through JSON so tests see what a file store would return
        self._store[key] = json.dumps(value)

    def __contains__(self, key: str) -> bool:
        return key in self._store


def load_or_compute(
    store: DatasetStore,
    checkpoint_id: str,
    producer: Callable[[], List[T]],
    serialize: Callable[[T], Any] | None = None,
    deserialize: Callable[[Any], T] | None = None,
) -> List[T]:
    """Return the dataset stored under ``checkpoint_id``, computing it on a miss.

    A readable, well-formed checkpoint short-circuits ``producer`` entirely.
    Otherwise the producer's list is stored (replacing whatever was there)
    and returned as-is, even if storing it fails.
    """
    cached = _load(store, checkpoint_id, deserialize)
    if cached is not None:
        logger.info("Loaded %d records from checkpoint %s", len(cached), checkpoint_id)
        return cached

    logger.info("Checkpoint %s missing, computing", checkpoint_id)
    data = producer()
    records = [serialize(item) for item in data] if serialize else list(data)
    try:
        store.put(checkpoint_id, records)
        logger.info("Saved %d records to checkpoint %s", len(records), checkpoint_id)
    except PersistenceError as exc:
        logger.error("Could not save checkpoint %s: %s", checkpoint_id, exc)
    return data


def _load(
    store: DatasetStore,
    checkpoint_id: str,
    deserialize: Callable[[Any], T] | None,
) -> Optional[List[T]]:
    try:
        raw = store.get(checkpoint_id)
    except PersistenceError as exc:
        logger.warning("Treating checkpoint %s as missing: %s", checkpoint_id, exc)
        return None
    if raw is None:
        return None
    if not isinstance(raw, list):
        logger.warning("Checkpoint %s is not a list, ignoring it", checkpoint_id)
        return None
    if deserialize is None:
        return raw
    try:
        return [deserialize(record) for record in raw]
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Checkpoint %s has malformed records (%s), ignoring it", checkpoint_id, exc)
        return None


__all__ = [
    "CHECKPOINT_KEY_PATTERN",
    "DatasetStore",
    "JSONFileStore",
    "MemoryStore",
    "check_checkpoint_key",
    "load_or_compute",
]
