"""Domain events emitted during the booking lifecycle."""

from __future__ import annotations

from pydantic import BaseModel

from studio_scheduler.domain.models import BookingStatus


class BookingEvent(BaseModel):
    """Common base; subscribing to it receives every booking event."""

    booking_id: str


class BookingCreated(BookingEvent):
    """Fired when a new Booking is committed."""

    series_id: str | None = None


class BookingUpdated(BookingEvent):
    """Fired after an edit is committed."""

    changed_fields: list[str]
    rechecked: bool


class BookingStatusChanged(BookingEvent):
    old_status: BookingStatus
    new_status: BookingStatus


class ConflictOverridden(BookingEvent):
    """Fired when a booking is committed despite a blocked verdict."""

    conflicting_booking_ids: list[str]
    editor_on_leave: bool


class BookingDeleted(BookingEvent):
    pass
