"""Seed-if-empty collection manager.

Every domain resource (alerts, notifications, projects, services, identity
users, audit events) is a single JSON list stored under one key. Reading a
collection that is absent or empty writes its canonical seed data first,
exactly once; after that the stored list is returned as-is.

Mutations are whole-collection read-modify-write round trips. The store
offers no compare-and-swap, so each round trip runs under a lock keyed by
collection key. The locks are process-scoped: two workers sharing one
SQLite file can still race.
"""

from __future__ import annotations

import threading
from typing import Callable, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from organizeit.errors import MalformedInput, NotFound
from organizeit.log import logger
from organizeit.models import load_collection
from organizeit.store.kv import KeyValueStore

M = TypeVar("M", bound=BaseModel)

_key_locks: dict[str, threading.RLock] = {}
_key_locks_guard = threading.Lock()


def key_lock(key: str) -> threading.RLock:
    with _key_locks_guard:
        lock = _key_locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _key_locks[key] = lock
        return lock


class StateCollection(Generic[M]):
    """A stored list of records of one type, seeded on first observation.

    Args:
        store: Backing key-value store.
        key: Collection key, e.g. "alerts:current".
        seed: Returns the canonical example list. Called at most once per
            empty observation, so it may stamp relative timestamps.
        model: Record type every element is validated against.
        label: Human name used in NotFound messages.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        seed: Callable[[], list[dict]],
        model: type[M],
        label: str = "Item",
    ) -> None:
        self._store = store
        self._key = key
        self._seed = seed
        self._model = model
        self._label = label
        self._lock = key_lock(key)

    @property
    def key(self) -> str:
        return self._key

    def read(self) -> list[dict]:
        """Return the stored collection, seeding it if absent or empty."""
        with self._lock:
            return self._read_or_seed()

    def _read_or_seed(self) -> list[dict]:
        value = self._store.get(self._key)
        if not value:
            value = self._seed()
            items = load_collection(self._model, self._key, value)
            self._store.set(self._key, items)
            logger.info("Seeded %s with %d records", self._key, len(items))
            return items
        return load_collection(self._model, self._key, value)

    def find(self, item_id: str) -> dict:
        """Return the element with the given id. Raises NotFound."""
        for item in self.read():
            if item.get("id") == item_id:
                return item
        raise NotFound(f"{self._label} not found", detail=f"{self._label} '{item_id}' does not exist")

    def create(self, build: Callable[[list[dict]], dict], *, prepend: bool = False) -> dict:
        """Append (or prepend) a new element built from the current collection.

        `build` receives the current items so it can derive a fresh id.
        The new element is built from caller input, so a schema mismatch
        there is MalformedInput and the collection is left untouched.
        """
        with self._lock:
            items = self._read_or_seed()
            new_item = build(items)
            try:
                self._model.model_validate(new_item)
            except ValidationError as exc:
                fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
                raise MalformedInput(f"Invalid fields: {fields}", detail=str(exc)) from exc
            if prepend:
                updated = [new_item] + items
            else:
                updated = items + [new_item]
            updated = load_collection(self._model, self._key, updated)
            self._store.set(self._key, updated)
            created = updated[0] if prepend else updated[-1]
            logger.debug("Created %s in %s", created.get("id"), self._key)
            return created

    def update(self, item_id: str, mutate: Callable[[dict], None]) -> dict:
        """Apply `mutate` to the element with `item_id` in place and persist.

        Raises NotFound (collection untouched) if no element matches.
        """
        with self._lock:
            items = self._read_or_seed()
            for index, item in enumerate(items):
                if item.get("id") == item_id:
                    break
            else:
                raise NotFound(f"{self._label} not found", detail=f"{self._label} '{item_id}' does not exist")

            mutate(item)
            updated = load_collection(self._model, self._key, items)
            self._store.set(self._key, updated)
            logger.debug("Updated %s in %s", item_id, self._key)
            return updated[index]
