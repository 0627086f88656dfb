"""Alert lifecycle over the alerts:current collection.

Statuses are Active, Investigating, Acknowledged and Resolved. There is no
transition table: any status may move to any other, including reopening a
Resolved alert. A resolution note, once written, is never cleared.
"""

from __future__ import annotations

import random
import time

from organizeit.clock import Clock, iso_from_ms, now_ms
from organizeit.log import logger
from organizeit.models import AlertCreate, AlertStatusUpdate, dump, parse_input
from organizeit.state import open_collection
from organizeit.store.kv import KeyValueStore


class AlertLifecycle:
    """Create, list and re-status alerts."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        rng: random.Random | None = None,
        clock: Clock = time.time,
    ) -> None:
        self._alerts = open_collection("alerts", store, clock)
        self._rng = rng or random.Random()
        self._clock = clock

    def list(self) -> dict:
        alerts = self._alerts.read()
        return {"alerts": alerts, "count": len(alerts)}

    def get(self, alert_id: str) -> dict:
        return self._alerts.find(alert_id)

    def create(self, payload: dict) -> dict:
        """Create an Active alert. Caller fields win over defaults, except `id` and `status`."""
        fields = dump(parse_input(AlertCreate, payload))
        fields.pop("id", None)
        fields.pop("status", None)

        def build(existing: list[dict]) -> dict:
            taken = {a.get("id") for a in existing}
            current = now_ms(self._clock)
            alert_id = f"ALT-{current}-{self._rng.randrange(1000)}"
            while alert_id in taken:
                alert_id = f"ALT-{current}-{self._rng.randrange(1000)}"
            alert = {
                "id": alert_id,
                "timestamp": iso_from_ms(current),
                "status": "Active",
                "severity": "Medium",
                "description": "",
                "service": "",
                "assignee": "",
                "environment": "Production",
            }
            alert.update(fields)
            alert["id"] = alert_id
            return alert

        alert = self._alerts.create(build, prepend=True)
        logger.info("Alert %s created (%s): %s", alert["id"], alert["severity"], alert["title"])
        return {"alert": alert, "message": "Alert created successfully"}

    def update_status(self, alert_id: str, payload: dict) -> dict:
        """Move an alert to any status; optionally attach a resolution note."""
        update = parse_input(AlertStatusUpdate, payload)
        stamp = iso_from_ms(now_ms(self._clock))

        def mutate(alert: dict) -> None:
            alert["status"] = update.status
            alert["updated_at"] = stamp
            if update.resolution:
                alert["resolution"] = update.resolution

        alert = self._alerts.update(alert_id, mutate)
        logger.info("Alert %s -> %s", alert_id, update.status)
        return {"alert": alert, "message": "Alert updated successfully"}
