"""Project collaboration board."""

from __future__ import annotations

import time

from organizeit.clock import Clock, iso_from_ms, now_ms
from organizeit.log import logger
from organizeit.models import ProjectCreate, dump, parse_input
from organizeit.state import open_collection
from organizeit.store.kv import KeyValueStore


def _next_project_id(existing: list[dict]) -> str:
    """PROJ-NNN, one past the highest numeric suffix (or the count, whichever is larger)."""
    highest = len(existing)
    for project in existing:
        parts = str(project.get("id", "")).split("-")
        if len(parts) == 2 and parts[0] == "PROJ" and parts[1].isdigit():
            highest = max(highest, int(parts[1]))
    return f"PROJ-{highest + 1:03d}"


class ProjectService:
    def __init__(self, store: KeyValueStore, *, clock: Clock = time.time) -> None:
        self._projects = open_collection("projects", store, clock)
        self._clock = clock

    def list(self) -> dict:
        projects = self._projects.read()
        return {"projects": projects, "count": len(projects)}

    def create(self, payload: dict) -> dict:
        """Create a project. Caller fields override the Planning/0% defaults.

        `spent` is not checked against `budget`.
        """
        fields = {k: v for k, v in dump(parse_input(ProjectCreate, payload)).items() if v is not None}
        fields.pop("id", None)
        if "progress" in fields:
            fields["progress"] = min(100, max(0, fields["progress"]))

        def build(existing: list[dict]) -> dict:
            project = {
                "id": _next_project_id(existing),
                "created_at": iso_from_ms(now_ms(self._clock)),
                "progress": 0,
                "spent": 0,
                "status": "Planning",
            }
            project.update(fields)
            return project

        project = self._projects.create(build)
        logger.info("Project %s created: %s", project["id"], project["name"])
        return {"project": project, "message": "Project created successfully"}
