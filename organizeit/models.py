"""Record types for everything OrganizeIT persists.

Values coming out of the key-value store are untyped JSON. Every
collection read and write goes through these models so a stored value
with the wrong shape fails loudly (CorruptRecord) instead of leaking a
half-populated dict to callers. Models allow extra fields: authored seed
data carries attributes (impact, details, ...) that the core never reads
but must round-trip unchanged.
"""

from __future__ import annotations

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from organizeit.errors import CorruptRecord, MalformedInput

Number = int | float

AlertSeverity = Literal["Low", "Medium", "High", "Critical"]
AlertStatus = Literal["Active", "Investigating", "Acknowledged", "Resolved"]
ProjectStatus = Literal["Planning", "In Progress", "Completed", "Blocked"]
AuditStatus = Literal["success", "blocked", "failed"]

ALERT_STATUSES: tuple[str, ...] = ("Active", "Investigating", "Acknowledged", "Resolved")


class Record(BaseModel):
    """Base for stored entities: unknown keys are kept, not dropped."""
    model_config = ConfigDict(extra="allow")


# ---------------------------------------------------------------------------
# Stored entities
# ---------------------------------------------------------------------------

class MetricSnapshot(Record):
    system_health: Number = Field(ge=95, le=100)
    monthly_spend: Number
    carbon_footprint: Number = Field(ge=30)
    active_projects: int
    uptime: Number = Field(ge=99, le=100)
    mttd: Number = Field(ge=5)
    mttr: Number = Field(ge=15)
    alerts_count: int = Field(ge=0)
    timestamp: str
    last_updated: int


class Alert(Record):
    id: str
    severity: AlertSeverity
    title: str
    description: str = ""
    service: str = ""
    status: AlertStatus
    timestamp: str
    assignee: str = ""
    environment: str = "Production"
    resolution: str | None = None
    updated_at: str | None = None


class Notification(Record):
    id: str
    type: str
    title: str
    message: str
    timestamp: str
    read: bool = False
    severity: str = "info"
    action_url: str = ""
    source: str = ""
    read_at: str | None = None


class Project(Record):
    id: str
    name: str
    description: str = ""
    status: ProjectStatus = "Planning"
    priority: str = "Medium"
    progress: Number = Field(default=0, ge=0, le=100)
    budget: Number = 0
    spent: Number = 0
    team_size: int = 0
    start_date: str | None = None
    end_date: str | None = None
    lead: str = ""
    category: str = ""
    created_at: str | None = None


class ServiceHealth(Record):
    id: str
    name: str
    status: str
    uptime: Number
    response_time: Number
    last_incident: str | None = None
    environment: str = "Production"


class IdentityUser(Record):
    id: str
    name: str
    email: str
    role: str
    department: str
    status: str = "Active"
    last_login: str | None = None
    created_at: str | None = None
    permissions: list[str] = Field(default_factory=list)
    mfa_enabled: bool = False


class Preferences(BaseModel):
    theme: str = "light"
    notifications: bool = True
    dashboard_layout: str = "default"


class UserProfile(Record):
    id: str
    email: str
    name: str
    role: str = "User"
    department: str = "IT"
    created_at: str
    last_login: str | None = None
    preferences: Preferences = Field(default_factory=Preferences)


class AuditEvent(Record):
    id: str
    event_type: str
    user_id: str | None
    user_email: str = ""
    action: str
    resource: str
    timestamp: str
    status: AuditStatus


class ChatRecord(Record):
    user_id: str
    message: str
    context: str
    timestamp: str
    type: Literal["user", "bot"]
    suggestions: list[str] | None = None


# ---------------------------------------------------------------------------
# Write payloads (validated before anything touches the store)
# ---------------------------------------------------------------------------

class AlertCreate(Record):
    severity: AlertSeverity = "Medium"
    title: str = Field(min_length=1, max_length=500)
    description: str = Field(default="", max_length=5000)
    service: str = Field(default="", max_length=256)
    assignee: str = Field(default="", max_length=256)
    environment: str = Field(default="Production", max_length=64)


class AlertStatusUpdate(BaseModel):
    status: AlertStatus
    resolution: str | None = Field(default=None, max_length=5000)


class ProjectCreate(Record):
    name: str = Field(min_length=1, max_length=500)
    status: ProjectStatus | None = None
    progress: Number | None = None
    budget: Number | None = Field(default=None, ge=0)
    spent: Number | None = Field(default=None, ge=0)


# ---------------------------------------------------------------------------
# Boundary helpers
# ---------------------------------------------------------------------------

M = TypeVar("M", bound=BaseModel)

_adapters: dict[type, TypeAdapter] = {}


def _list_adapter(model: type[M]) -> TypeAdapter:
    adapter = _adapters.get(model)
    if adapter is None:
        adapter = TypeAdapter(list[model])  # type: ignore[valid-type]
        _adapters[model] = adapter
    return adapter


def dump(record: BaseModel) -> dict:
    """Serialise a record, keeping only the fields that were actually set."""
    return record.model_dump(mode="json", exclude_unset=True)


def load_collection(model: type[M], key: str, value: Any) -> list[dict]:
    """Validate a stored collection. Raises CorruptRecord on mismatch."""
    if not isinstance(value, list):
        raise CorruptRecord(f"Stored value at {key!r} is not a list")
    try:
        records = _list_adapter(model).validate_python(value)
    except ValidationError as exc:
        raise CorruptRecord(f"Stored collection {key!r} failed validation", detail=str(exc)) from exc
    return [dump(r) for r in records]


def load_record(model: type[M], key: str, value: Any) -> dict:
    """Validate a single stored record. Raises CorruptRecord on mismatch."""
    try:
        return dump(model.model_validate(value))
    except ValidationError as exc:
        raise CorruptRecord(f"Stored record {key!r} failed validation", detail=str(exc)) from exc


def parse_input(model: type[M], payload: Any) -> M:
    """Validate a caller-supplied payload. Raises MalformedInput on mismatch."""
    if not isinstance(payload, dict):
        raise MalformedInput("Request body must be a JSON object")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) or "body" for err in exc.errors())
        raise MalformedInput(f"Invalid fields: {fields}", detail=str(exc)) from exc
