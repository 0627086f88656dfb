"""Tests for alert creation and status transitions."""

import re

import pytest

from organizeit.errors import MalformedInput, NotFound
from organizeit.intelligence.alerts import AlertLifecycle
from organizeit.models import ALERT_STATUSES


@pytest.fixture
def alerts(store, clock, rng):
    return AlertLifecycle(store, rng=rng, clock=clock)


class TestSeededAlerts:
    def test_three_seeded(self, alerts):
        result = alerts.list()
        assert result["count"] == 3
        assert [a["status"] for a in result["alerts"]] == ["Active", "Investigating", "Acknowledged"]

    def test_seed_ids_share_seed_time(self, alerts, clock):
        stamp = int(clock() * 1000)
        ids = [a["id"] for a in alerts.list()["alerts"]]
        assert ids == [f"ALT-{stamp}-001", f"ALT-{stamp}-002", f"ALT-{stamp}-003"]


class TestCreate:
    def test_defaults(self, alerts, clock):
        created = alerts.create({"title": "Disk full"})
        assert created["message"] == "Alert created successfully"
        alert = created["alert"]
        assert re.fullmatch(rf"ALT-{int(clock() * 1000)}-\d{{1,3}}", alert["id"])
        assert alert["status"] == "Active"
        assert alert["severity"] == "Medium"
        assert alert["environment"] == "Production"

    def test_new_alert_is_first(self, alerts):
        alert = alerts.create({"title": "Disk full", "severity": "Critical"})["alert"]
        listed = alerts.list()
        assert listed["count"] == 4
        assert listed["alerts"][0]["id"] == alert["id"]

    def test_status_and_id_cannot_be_supplied(self, alerts):
        alert = alerts.create({"title": "x", "status": "Resolved", "id": "MINE"})["alert"]
        assert alert["status"] == "Active"
        assert alert["id"] != "MINE"

    def test_extra_fields_kept(self, alerts):
        alert = alerts.create({"title": "x", "impact": "Checkout latency"})["alert"]
        assert alerts.get(alert["id"])["impact"] == "Checkout latency"

    def test_ids_unique_under_frozen_clock(self, alerts):
        ids = {alerts.create({"title": f"alert {i}"})["alert"]["id"] for i in range(60)}
        assert len(ids) == 60

    @pytest.mark.parametrize("payload", [
        {},
        {"title": ""},
        {"title": "x", "severity": "Urgent"},
        None,
        ["title"],
    ])
    def test_malformed_leaves_store_untouched(self, alerts, store, payload):
        before = alerts.list()["alerts"]
        with pytest.raises(MalformedInput):
            alerts.create(payload)
        assert store.get("alerts:current") == before


class TestUpdateStatus:
    @pytest.mark.parametrize("status", ALERT_STATUSES)
    def test_any_status_reachable(self, alerts, status):
        alert_id = alerts.list()["alerts"][2]["id"]
        result = alerts.update_status(alert_id, {"status": status})
        assert result["alert"]["status"] == status
        assert result["message"] == "Alert updated successfully"
        assert "updated_at" in result["alert"]

    def test_reopen_resolved(self, alerts):
        alert_id = alerts.list()["alerts"][0]["id"]
        alerts.update_status(alert_id, {"status": "Resolved", "resolution": "Pool resized"})
        reopened = alerts.update_status(alert_id, {"status": "Active"})["alert"]
        assert reopened["status"] == "Active"
        # Resolution notes are never cleared
        assert reopened["resolution"] == "Pool resized"

    def test_unknown_id(self, alerts, store):
        before = alerts.list()["alerts"]
        with pytest.raises(NotFound):
            alerts.update_status("ALT-missing", {"status": "Resolved"})
        assert store.get("alerts:current") == before
        assert alerts.list()["count"] == 3

    @pytest.mark.parametrize("payload", [{}, {"status": "Closed"}, {"status": None}])
    def test_invalid_status(self, alerts, payload):
        alert_id = alerts.list()["alerts"][0]["id"]
        with pytest.raises(MalformedInput):
            alerts.update_status(alert_id, payload)
        assert alerts.get(alert_id)["status"] == "Active"


@pytest.mark.parametrize("payload", [
    {"title": "x", "timestamp": 123},
    {"title": "x", "resolution": ["not", "text"]},
    {"title": "x", "updated_at": {"at": "now"}},
])
def test_mistyped_extra_field_is_malformed(alerts, store, payload):
    before = alerts.list()["alerts"]
    with pytest.raises(MalformedInput):
        alerts.create(payload)
    assert store.get("alerts:current") == before
