"""Tests for projects, notifications and the service health board."""

import pytest

from organizeit.errors import MalformedInput, NotFound
from organizeit.intelligence.notifications import NotificationService
from organizeit.intelligence.projects import ProjectService, _next_project_id
from organizeit.intelligence.service_health import ServiceHealthBoard


# --- Projects ---

class TestProjects:
    @pytest.fixture
    def projects(self, store, clock):
        return ProjectService(store, clock=clock)

    def test_seeded(self, projects):
        result = projects.list()
        assert result["count"] == 3
        assert [p["id"] for p in result["projects"]] == ["PROJ-001", "PROJ-002", "PROJ-003"]

    def test_create_defaults(self, projects):
        created = projects.create({"name": "Zero Trust Rollout"})
        assert created["message"] == "Project created successfully"
        project = created["project"]
        assert project["id"] == "PROJ-004"
        assert project["status"] == "Planning"
        assert project["progress"] == 0
        assert project["spent"] == 0
        assert project["created_at"].startswith("2025-06-15T12:00:00")

    def test_caller_fields_win(self, projects):
        project = projects.create({
            "name": "Data Lake",
            "status": "In Progress",
            "progress": 40,
            "budget": 1000,
            "lead": "ana@company.com",
        })["project"]
        assert project["status"] == "In Progress"
        assert project["progress"] == 40
        assert project["lead"] == "ana@company.com"

    @pytest.mark.parametrize("supplied,expected", [(150, 100), (-5, 0), (100, 100), (0, 0), (33.5, 33.5)])
    def test_progress_clamped(self, projects, supplied, expected):
        assert projects.create({"name": "p", "progress": supplied})["project"]["progress"] == expected

    def test_spent_may_exceed_budget(self, projects):
        project = projects.create({"name": "p", "budget": 100, "spent": 500})["project"]
        assert project["spent"] > project["budget"]

    @pytest.mark.parametrize("payload", [{}, {"name": ""}, {"name": "p", "status": "Paused"}, {"name": "p", "budget": -1}])
    def test_malformed(self, projects, store, payload):
        projects.list()
        before = store.get("projects:current")
        with pytest.raises(MalformedInput):
            projects.create(payload)
        assert store.get("projects:current") == before

    def test_sequential_ids_unique(self, projects):
        ids = [projects.create({"name": f"p{i}"})["project"]["id"] for i in range(5)]
        assert ids == ["PROJ-004", "PROJ-005", "PROJ-006", "PROJ-007", "PROJ-008"]

    def test_next_id_skips_past_highest_suffix(self):
        existing = [{"id": "PROJ-001"}, {"id": "PROJ-010"}, {"id": "custom"}]
        assert _next_project_id(existing) == "PROJ-011"
        assert _next_project_id([]) == "PROJ-001"
        assert _next_project_id([{"id": "a"}, {"id": "b"}]) == "PROJ-003"


# --- Notifications ---

class TestNotifications:
    @pytest.fixture
    def notifications(self, store, clock):
        return NotificationService(store, clock=clock)

    def test_counts(self, notifications):
        result = notifications.list()
        assert result["total_count"] == 6
        assert result["unread_count"] == 4
        assert result["last_updated"].startswith("2025-06-15T12:00:00")

    def test_mark_read(self, notifications):
        result = notifications.mark_read("NOT-001")
        assert result["message"] == "Notification marked as read"
        assert result["notification"]["read"] is True
        assert "read_at" in result["notification"]
        assert notifications.list()["unread_count"] == 3

    def test_mark_read_twice_is_harmless(self, notifications):
        notifications.mark_read("NOT-003")
        assert notifications.list()["unread_count"] == 4

    def test_unknown(self, notifications, store):
        notifications.list()
        before = store.get("notifications:current")
        with pytest.raises(NotFound):
            notifications.mark_read("NOT-999")
        assert store.get("notifications:current") == before


# --- Service health ---

def test_service_health(store):
    result = ServiceHealthBoard(store).list()
    assert result["count"] == 5
    assert {s["status"] for s in result["services"]} == {"healthy", "degraded", "warning"}


@pytest.mark.parametrize("payload", [
    {"name": "x", "team_size": "five"},
    {"name": "x", "start_date": 20250101},
    {"name": "x", "created_at": ["yesterday"]},
])
def test_project_mistyped_extra_field_is_malformed(store, clock, payload):
    projects = ProjectService(store, clock=clock)
    before = projects.list()["projects"]
    with pytest.raises(MalformedInput):
        projects.create(payload)
    assert store.get("projects:current") == before
