"""Service health board. Read-only: the seeded list is what callers see."""

from __future__ import annotations

import time

from organizeit.clock import Clock
from organizeit.state import open_collection
from organizeit.store.kv import KeyValueStore


class ServiceHealthBoard:
    def __init__(self, store: KeyValueStore, *, clock: Clock = time.time) -> None:
        self._services = open_collection("services", store, clock)

    def list(self) -> dict:
        services = self._services.read()
        return {"services": services, "count": len(services)}

