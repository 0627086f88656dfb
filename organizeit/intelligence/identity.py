"""Identity directory, audit trail, user profiles and per-user dashboards.

Real credential checks belong to the external identity provider; the only
sign-in handled here is the built-in demo account.
"""

from __future__ import annotations

import time

from organizeit.clock import HOUR_MS, MINUTE_MS, Clock, iso_from_ms, now_ms
from organizeit.errors import AuthRequired, MalformedInput, NotFound
from organizeit.log import logger
from organizeit.models import UserProfile, dump, load_record
from organizeit.state import open_collection
from organizeit.store.kv import KeyValueStore

DEMO_EMAIL = "demo@organizeit.com"
DEMO_PASSWORD = "demo123"
DEMO_USER_ID = "demo-user-id"
DEMO_TOKEN = "demo-token"


def profile_key(user_id: str) -> str:
    return f"user_profile:{user_id}"


class IdentityService:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        default_audit_limit: int = 50,
        max_audit_limit: int = 1000,
        clock: Clock = time.time,
    ) -> None:
        self._store = store
        self._users = open_collection("identity_users", store, clock)
        self._audit = open_collection("audit_events", store, clock)
        self._default_limit = default_audit_limit
        self._max_limit = max_audit_limit
        self._clock = clock

    # ------------------------------------------------------------------
    # Directory + audit
    # ------------------------------------------------------------------

    def users(self) -> dict:
        users = self._users.read()
        return {
            "users": users,
            "total": len(users),
            "active": sum(1 for u in users if u.get("status") == "Active"),
        }

    def audit_events(self, limit: int | None = None) -> dict:
        if limit is None:
            limit = self._default_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1 or limit > self._max_limit:
            raise MalformedInput(f"limit must be an integer between 1 and {self._max_limit}")
        events = self._audit.read()
        return {
            "events": events[:limit],
            "total": len(events),
            "limit": limit,
            "last_updated": iso_from_ms(now_ms(self._clock)),
        }

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def profile(self, user_id: str) -> dict:
        key = profile_key(user_id)
        value = self._store.get(key)
        if value is None:
            raise NotFound("User not found", detail=f"User '{user_id}' does not exist")
        return load_record(UserProfile, key, value)

    def demo_sign_in(self, email: str, password: str) -> dict:
        """Sign in the built-in demo account, (re)writing its profile."""
        if not email or not password:
            raise MalformedInput("email and password are required")
        if email != DEMO_EMAIL or password != DEMO_PASSWORD:
            logger.info("Rejected sign-in for %s (only the demo account is handled locally)", email)
            raise AuthRequired("Invalid credentials")

        profile = dump(UserProfile(
            id=DEMO_USER_ID,
            email=DEMO_EMAIL,
            name="Demo User",
            role="System Administrator",
            department="IT Operations",
            created_at="2024-01-01T00:00:00.000+00:00",
            last_login=iso_from_ms(now_ms(self._clock)),
            preferences={"theme": "light", "notifications": True, "dashboard_layout": "default"},
        ))
        self._store.set(profile_key(DEMO_USER_ID), profile)
        logger.info("Demo user signed in")
        return {
            "user": profile,
            "session": {"access_token": DEMO_TOKEN},
            "message": "Demo login successful",
        }

    # ------------------------------------------------------------------
    # Per-user dashboard
    # ------------------------------------------------------------------

    def user_dashboard(self, user_id: str) -> dict:
        """Join the stored profile with fixed synthetic metrics and activities."""
        profile = self.profile(user_id)
        current = now_ms(self._clock)

        metrics = {
            "tasks_completed": 47,
            "tasks_pending": 12,
            "projects_active": 3,
            "efficiency_score": 92,
            "last_activity": iso_from_ms(current - 15 * MINUTE_MS),
            "weekly_hours": 38.5,
            "alerts_assigned": 2,
            "cost_savings_contributed": 15400,
        }
        activities = [
            {
                "id": "ACT-001",
                "type": "task_completed",
                "title": "Resolved database performance issue",
                "timestamp": iso_from_ms(current - 2 * HOUR_MS),
                "impact": "High",
                "project": "Cloud Migration Phase 2",
            },
            {
                "id": "ACT-002",
                "type": "cost_optimization",
                "title": "Implemented auto-scaling for dev environment",
                "timestamp": iso_from_ms(current - 6 * HOUR_MS),
                "impact": "Medium",
                "savings": 2400,
            },
            {
                "id": "ACT-003",
                "type": "security_patch",
                "title": "Applied security patches to 8 servers",
                "timestamp": iso_from_ms(current - 24 * HOUR_MS),
                "impact": "High",
                "compliance": "SOC2",
            },
        ]

        dashboard = {
            "user": profile,
            "metrics": metrics,
            "recent_activities": activities,
            "last_updated": iso_from_ms(current),
        }
        self._store.set(f"user_dashboard:{user_id}", dashboard)
        return dashboard
