"""Booking-log handlers, wired to the event bus at application startup."""

from __future__ import annotations

import logging

from studio_scheduler.domain.bus import EventBus
from studio_scheduler.domain.events import (
    BookingCreated,
    BookingDeleted,
    BookingEvent,
    BookingStatusChanged,
    BookingUpdated,
    ConflictOverridden,
)
from studio_scheduler.domain.models import BookingLogEntry, BookingLogType
from studio_scheduler.repos.memory import BookingLogRepository, BookingRepository

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Writes the booking log in response to lifecycle events."""

    def __init__(
        self,
        bus: EventBus,
        booking_repo: BookingRepository,
        log_repo: BookingLogRepository,
    ) -> None:
        self.bus = bus
        self.booking_repo = booking_repo
        self.log_repo = log_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(BookingCreated, self.on_booking_created)
        self.bus.subscribe(BookingUpdated, self.on_booking_updated)
        self.bus.subscribe(BookingStatusChanged, self.on_status_changed)
        self.bus.subscribe(ConflictOverridden, self.on_conflict_overridden)
        self.bus.subscribe(BookingDeleted, self.on_booking_deleted)
        self.bus.subscribe(BookingEvent, self.on_any_event)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_booking_created(self, event: BookingCreated) -> None:
        stored = self.booking_repo.get(event.booking_id)
        if stored is None:
            return

        payload = {
            "booking_date": stored.booking_date.isoformat(),
            "interval": stored.planned.label(),
            "status": stored.status.value,
        }
        if event.series_id:
            payload["series_id"] = event.series_id
        self.log_repo.add(
            BookingLogEntry(
                booking_id=event.booking_id,
                type=BookingLogType.CREATED,
                payload=payload,
            )
        )

    def on_booking_updated(self, event: BookingUpdated) -> None:
        self.log_repo.add(
            BookingLogEntry(
                booking_id=event.booking_id,
                type=BookingLogType.UPDATED,
                payload={
                    "changed_fields": event.changed_fields,
                    "rechecked": event.rechecked,
                },
            )
        )

    def on_status_changed(self, event: BookingStatusChanged) -> None:
        self.log_repo.add(
            BookingLogEntry(
                booking_id=event.booking_id,
                type=BookingLogType.STATUS_CHANGED,
                payload={"from": event.old_status.value, "to": event.new_status.value},
            )
        )

    def on_conflict_overridden(self, event: ConflictOverridden) -> None:
        self.log_repo.add(
            BookingLogEntry(
                booking_id=event.booking_id,
                type=BookingLogType.CONFLICT_OVERRIDDEN,
                payload={
                    "conflicting_booking_ids": event.conflicting_booking_ids,
                    "editor_on_leave": event.editor_on_leave,
                },
            )
        )
        logger.warning(
            "Booking %s committed over %d conflict(s) (editor on leave=%s)",
            event.booking_id,
            len(event.conflicting_booking_ids),
            event.editor_on_leave,
        )

    def on_booking_deleted(self, event: BookingDeleted) -> None:
        self.log_repo.add(
            BookingLogEntry(booking_id=event.booking_id, type=BookingLogType.DELETED)
        )

    def on_any_event(self, event: BookingEvent) -> None:
        logger.info(
            "Booking %s: %s",
            event.booking_id,
            event.model_dump(mode="json", exclude={"booking_id"}) or type(event).__name__,
        )
