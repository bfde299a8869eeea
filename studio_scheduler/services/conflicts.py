"""Service for detecting double-bookings of rooms and editors."""

from __future__ import annotations

import logging

from studio_scheduler.domain.bindings import SystemResource
from studio_scheduler.domain.intervals import TimeInterval, overlaps
from studio_scheduler.domain.models import (
    Booking,
    ConflictCandidate,
    ConflictEntry,
    ConflictVerdict,
    ResourceKind,
)
from studio_scheduler.repos.memory import (
    BookingRepository,
    LeaveRepository,
    ResourceRegistry,
)
from studio_scheduler.services.leaves import is_on_leave

logger = logging.getLogger(__name__)


def find_conflicts(interval: TimeInterval, existing: list[Booking]) -> list[Booking]:
    """Return existing bookings whose planned interval overlaps *interval*.

    Exact boundary touches (end == start) are NOT considered conflicts.
    """
    return [booking for booking in existing if overlaps(interval, booking.planned)]


class ConflictDetector:
    """Pure query over existing bookings and leaves. Never raises."""

    def __init__(
        self,
        registry: ResourceRegistry,
        booking_repo: BookingRepository,
        leave_repo: LeaveRepository,
    ) -> None:
        self.registry = registry
        self.booking_repo = booking_repo
        self.leave_repo = leave_repo

    def check(self, candidate: ConflictCandidate) -> ConflictVerdict:
        bound = [
            (kind, binding)
            for kind, binding in (
                (ResourceKind.ROOM, candidate.room),
                (ResourceKind.EDITOR, candidate.editor),
            )
            if isinstance(binding, SystemResource)
        ]
        if not bound or candidate.booking_date is None or candidate.interval is None:
            return ConflictVerdict(checked=False)

        conflicts: list[ConflictEntry] = []
        for kind, binding in bound:
            if self._ignores_conflicts(kind, binding):
                continue
            existing = self.booking_repo.find_by_resource_and_date(
                candidate.tenant_id,
                kind,
                binding.resource_id,
                candidate.booking_date,
                exclude_id=candidate.exclude_booking_id,
            )
            for other in find_conflicts(candidate.interval, existing):
                conflicts.append(self._entry(kind, binding, other))

        verdict = ConflictVerdict(has_conflict=bool(conflicts), conflicts=conflicts)

        if isinstance(candidate.editor, SystemResource):
            leave = is_on_leave(
                candidate.editor.resource_id, candidate.booking_date, self.leave_repo
            )
            if leave is not None:
                verdict.editor_on_leave = True
                verdict.leave_info = leave

        if verdict.blocked:
            logger.info(
                "Conflict check for tenant %s on %s %s: %d conflict(s), editor on leave=%s",
                candidate.tenant_id,
                candidate.booking_date,
                candidate.interval.label(),
                len(conflicts),
                verdict.editor_on_leave,
            )
        return verdict

    def _ignores_conflicts(self, kind: ResourceKind, binding: SystemResource) -> bool:
        # The registry record is authoritative; the binding's copy may be stale.
        resource = self.registry.get_resource(kind, binding.resource_id)
        if resource is None:
            return binding.ignore_conflict
        return resource.ignore_conflict

    def _entry(
        self, kind: ResourceKind, binding: SystemResource, other: Booking
    ) -> ConflictEntry:
        resource = self.registry.get_resource(kind, binding.resource_id)
        name = resource.name if resource is not None else f"#{binding.resource_id}"
        return ConflictEntry(
            resource_kind=kind,
            conflicting_booking_id=other.id,
            from_time=other.planned.from_time,
            to_time=other.planned.to_time,
            message=(
                f"{kind.value.capitalize()} {name} is already booked "
                f"{other.planned.label()} on {other.booking_date.isoformat()}"
            ),
        )
