"""Domain models for the studio booking engine."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone
from enum import StrEnum

from pydantic import BaseModel, Field, computed_field, model_validator

from studio_scheduler.domain.bindings import UNASSIGNED, BindingChoice, ResourceBinding
from studio_scheduler.domain.errors import InvalidInterval
from studio_scheduler.domain.intervals import TimeInterval, WallTime


class BookingStatus(StrEnum):
    PLANNING = "planning"
    TENTATIVE = "tentative"
    CONFIRMED = "confirmed"


class ResourceKind(StrEnum):
    ROOM = "room"
    EDITOR = "editor"


class BookingLogType(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    STATUS_CHANGED = "status_changed"
    CONFLICT_OVERRIDDEN = "conflict_overridden"
    DELETED = "deleted"


class SeriesPolicy(StrEnum):
    SKIP_CONFLICTS = "skip_conflicts"
    ABORT_ON_CONFLICT = "abort_on_conflict"
    CREATE_ALL = "create_all"


class SeriesOutcomeKind(StrEnum):
    CREATED = "created"
    SKIPPED = "skipped"
    ABORTED = "aborted"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Registry records (read-only to the engine)
# ---------------------------------------------------------------------------


class Room(BaseModel):
    id: int
    name: str
    room_type: str
    capacity: int | None = None
    is_active: bool = True
    ignore_conflict: bool = False


class Editor(BaseModel):
    id: int
    name: str
    editor_type: str
    phone: str | None = None
    email: str | None = None
    is_active: bool = True
    ignore_conflict: bool = False


class Customer(BaseModel):
    id: int
    name: str
    is_active: bool = True


class Project(BaseModel):
    id: int
    customer_id: int
    name: str
    project_type: str | None = None


class Contact(BaseModel):
    id: int
    customer_id: int
    name: str
    phone: str | None = None
    email: str | None = None


class EditorLeave(BaseModel):
    """Inclusive calendar-date range during which an editor is unavailable."""

    id: str = Field(default_factory=_new_id)
    editor_id: int
    from_date: date
    to_date: date
    reason: str | None = None

    @model_validator(mode="after")
    def _from_not_after_to(self) -> EditorLeave:
        if self.from_date > self.to_date:
            raise ValueError("from_date must not be after to_date")
        return self

    def covers(self, on_date: date) -> bool:
        return self.from_date <= on_date <= self.to_date


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


class BookingDraft(BaseModel):
    """A validated, resolved booking that has not been committed yet."""

    tenant_id: int
    room: ResourceBinding = UNASSIGNED
    editor: ResourceBinding = UNASSIGNED
    customer_id: int
    project_id: int
    contact_id: int | None = None
    booking_date: date
    planned: TimeInterval
    actual_from_time: WallTime | None = None
    actual_to_time: WallTime | None = None
    break_hours: int = Field(default=0, ge=0)
    status: BookingStatus = BookingStatus.PLANNING
    notes: str | None = None

    @model_validator(mode="after")
    def _actual_ordering(self) -> BookingDraft:
        if (
            self.actual_from_time is not None
            and self.actual_to_time is not None
            and self.actual_from_time >= self.actual_to_time
        ):
            raise InvalidInterval(self.actual_from_time, self.actual_to_time)
        return self

    @computed_field
    @property
    def total_hours(self) -> float:
        return self.planned.hours


class Booking(BookingDraft):
    id: str = Field(default_factory=_new_id)
    series_id: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class BookingLogEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    booking_id: str
    timestamp: datetime = Field(default_factory=_utcnow)
    type: BookingLogType
    payload: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Conflict verdicts
# ---------------------------------------------------------------------------


class ConflictCandidate(BaseModel):
    tenant_id: int
    room: ResourceBinding = UNASSIGNED
    editor: ResourceBinding = UNASSIGNED
    booking_date: date | None = None
    interval: TimeInterval | None = None
    exclude_booking_id: str | None = None


class ConflictEntry(BaseModel):
    resource_kind: ResourceKind
    conflicting_booking_id: str
    from_time: time
    to_time: time
    message: str


class ConflictVerdict(BaseModel):
    checked: bool = True
    has_conflict: bool = False
    conflicts: list[ConflictEntry] = Field(default_factory=list)
    editor_on_leave: bool = False
    leave_info: EditorLeave | None = None

    @property
    def blocked(self) -> bool:
        """True when a human has to acknowledge this verdict before committing."""
        return self.has_conflict or self.editor_on_leave


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CheckConflictsRequest(BaseModel):
    """Conflict pre-check from a possibly half-filled booking form."""

    tenant_id: int
    room_type: BindingChoice | None = None
    room_id: int | None = None
    editor_type: BindingChoice | None = None
    editor_id: int | None = None
    booking_date: date | None = None
    from_time: time | None = None
    to_time: time | None = None
    exclude_booking_id: str | None = None


class BookingRequest(BaseModel):
    tenant_id: int
    room_type: BindingChoice | None = None
    room_id: int | None = None
    client_room_name: str | None = None
    client_room_type: str | None = None
    client_room_capacity: int | None = None
    editor_type: BindingChoice | None = None
    editor_id: int | None = None
    client_editor_name: str | None = None
    client_editor_type: str | None = None
    client_editor_phone: str | None = None
    client_editor_email: str | None = None
    customer_id: int
    project_id: int
    contact_id: int | None = None
    booking_date: date
    from_time: WallTime
    to_time: WallTime
    actual_from_time: WallTime | None = None
    actual_to_time: WallTime | None = None
    break_hours: int = Field(default=0, ge=0)
    status: BookingStatus = BookingStatus.PLANNING
    notes: str | None = None
    repeat_days: int = Field(default=0, ge=0)
    override_conflicts: bool = False
    series_policy: SeriesPolicy | None = None


ROOM_FIELDS = frozenset(
    {
        "room_type",
        "room_id",
        "client_room_name",
        "client_room_type",
        "client_room_capacity",
    }
)
EDITOR_FIELDS = frozenset(
    {
        "editor_type",
        "editor_id",
        "client_editor_name",
        "client_editor_type",
        "client_editor_phone",
        "client_editor_email",
    }
)


class BookingPatch(BaseModel):
    """Partial update. Only fields present in the payload are applied.

    Sending any room (or editor) field replaces the whole room (or editor)
    binding, so the discriminator has to be sent along with it.
    """

    room_type: BindingChoice | None = None
    room_id: int | None = None
    client_room_name: str | None = None
    client_room_type: str | None = None
    client_room_capacity: int | None = None
    editor_type: BindingChoice | None = None
    editor_id: int | None = None
    client_editor_name: str | None = None
    client_editor_type: str | None = None
    client_editor_phone: str | None = None
    client_editor_email: str | None = None
    customer_id: int | None = None
    project_id: int | None = None
    contact_id: int | None = None
    booking_date: date | None = None
    from_time: WallTime | None = None
    to_time: WallTime | None = None
    actual_from_time: WallTime | None = None
    actual_to_time: WallTime | None = None
    break_hours: int | None = Field(default=None, ge=0)
    status: BookingStatus | None = None
    notes: str | None = None
    override_conflicts: bool = False


class StatusChangeRequest(BaseModel):
    status: BookingStatus


class ActualTimesRequest(BaseModel):
    actual_from_time: WallTime | None = None
    actual_to_time: WallTime | None = None


class SeriesDateOutcome(BaseModel):
    booking_date: date
    outcome: SeriesOutcomeKind
    verdict: ConflictVerdict
    booking_id: str | None = None


class SeriesResult(BaseModel):
    series_id: str
    policy: SeriesPolicy
    bookings: list[Booking] = Field(default_factory=list)
    outcomes: list[SeriesDateOutcome] = Field(default_factory=list)
