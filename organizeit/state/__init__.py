"""Stored domain collections and their seed data.

Collection keys and record types live here so every component addresses
the same key for the same resource.
"""

from __future__ import annotations

import time
from typing import Callable, NamedTuple

from pydantic import BaseModel

from organizeit.clock import Clock, now_ms
from organizeit.models import Alert, AuditEvent, IdentityUser, Notification, Project, ServiceHealth
from organizeit.state import seeds
from organizeit.state.collection import StateCollection
from organizeit.store.kv import KeyValueStore


class CollectionSpec(NamedTuple):
    key: str
    seed: Callable[[int], list[dict]]
    model: type[BaseModel]
    label: str


COLLECTIONS: dict[str, CollectionSpec] = {
    "alerts": CollectionSpec("alerts:current", seeds.seed_alerts, Alert, "Alert"),
    "notifications": CollectionSpec("notifications:current", seeds.seed_notifications, Notification, "Notification"),
    "projects": CollectionSpec("projects:current", seeds.seed_projects, Project, "Project"),
    "services": CollectionSpec("services:health", seeds.seed_services, ServiceHealth, "Service"),
    "identity_users": CollectionSpec("identity:users", seeds.seed_identity_users, IdentityUser, "User"),
    "audit_events": CollectionSpec("audit:events", seeds.seed_audit_events, AuditEvent, "Audit event"),
}


def open_collection(name: str, store: KeyValueStore, clock: Clock = time.time) -> StateCollection:
    """Open one of the named collections on the given store."""
    spec = COLLECTIONS[name]
    return StateCollection(
        store,
        spec.key,
        seed=lambda: spec.seed(now_ms(clock)),
        model=spec.model,
        label=spec.label,
    )


__all__ = ["COLLECTIONS", "CollectionSpec", "StateCollection", "open_collection"]
