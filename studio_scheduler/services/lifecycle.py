"""Service for creating, editing and transitioning bookings.

Every write goes through the same sequence: validate the raw input, resolve
system resources against the registry, run the conflict check (only when a
scheduling field is involved), then commit and publish a domain event.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, time, timezone

from studio_scheduler.domain.bindings import (
    ClientSupplied,
    SystemResource,
    Unassigned,
    build_binding,
    lenient_binding,
)
from studio_scheduler.domain.bus import EventBus
from studio_scheduler.domain.errors import (
    BookingNotFound,
    ConflictRejected,
    ReferentialMismatch,
    UnknownResource,
)
from studio_scheduler.domain.events import (
    BookingCreated,
    BookingDeleted,
    BookingStatusChanged,
    BookingUpdated,
    ConflictOverridden,
)
from studio_scheduler.domain.intervals import TimeInterval, interval_or_none
from studio_scheduler.domain.models import (
    EDITOR_FIELDS,
    ROOM_FIELDS,
    Booking,
    BookingDraft,
    BookingPatch,
    BookingRequest,
    BookingStatus,
    CheckConflictsRequest,
    ConflictCandidate,
    ConflictVerdict,
    ResourceKind,
    SeriesDateOutcome,
    SeriesOutcomeKind,
    SeriesPolicy,
    SeriesResult,
)
from studio_scheduler.repos.memory import (
    BookingRepository,
    LeaveRepository,
    ResourceRegistry,
)
from studio_scheduler.services.conflicts import ConflictDetector
from studio_scheduler.services.series import expand

logger = logging.getLogger(__name__)

Binding = Unassigned | SystemResource | ClientSupplied

# Changing any of these re-runs the conflict check on edit.
SCHEDULING_FIELDS = frozenset({"room", "editor", "booking_date", "planned"})

# Sent as null in a patch, these mean "leave unchanged".
_NON_NULLABLE_PATCH_FIELDS = frozenset(
    {"customer_id", "project_id", "booking_date", "from_time", "to_time", "break_hours", "status"}
)

_PLAIN_PATCH_FIELDS = (
    "customer_id",
    "project_id",
    "contact_id",
    "booking_date",
    "actual_from_time",
    "actual_to_time",
    "break_hours",
    "status",
    "notes",
)


def _room_binding(src: BookingRequest | BookingPatch) -> Binding:
    return build_binding(
        "room",
        src.room_type,
        src.room_id,
        {
            "name": src.client_room_name,
            "type": src.client_room_type,
            "capacity": src.client_room_capacity,
        },
    )


def _editor_binding(src: BookingRequest | BookingPatch) -> Binding:
    return build_binding(
        "editor",
        src.editor_type,
        src.editor_id,
        {
            "name": src.client_editor_name,
            "type": src.client_editor_type,
            "phone": src.client_editor_phone,
            "email": src.client_editor_email,
        },
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def candidate_for(draft: BookingDraft, exclude_booking_id: str | None = None) -> ConflictCandidate:
    return ConflictCandidate(
        tenant_id=draft.tenant_id,
        room=draft.room,
        editor=draft.editor,
        booking_date=draft.booking_date,
        interval=draft.planned,
        exclude_booking_id=exclude_booking_id,
    )


class BookingService:
    """Entry point for every booking operation exposed over HTTP."""

    def __init__(
        self,
        bus: EventBus,
        registry: ResourceRegistry,
        booking_repo: BookingRepository,
        leave_repo: LeaveRepository,
        series_policy: SeriesPolicy = SeriesPolicy.SKIP_CONFLICTS,
    ) -> None:
        self.bus = bus
        self.registry = registry
        self.booking_repo = booking_repo
        self.leave_repo = leave_repo
        self.series_policy = series_policy
        self.detector = ConflictDetector(registry, booking_repo, leave_repo)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, booking_id: str) -> Booking:
        booking = self.booking_repo.get(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        return booking

    def check(self, candidate: ConflictCandidate) -> ConflictVerdict:
        return self.detector.check(candidate)

    def check_request(self, request: CheckConflictsRequest) -> ConflictVerdict:
        """Conflict pre-check that tolerates half-filled forms."""
        candidate = ConflictCandidate(
            tenant_id=request.tenant_id,
            room=lenient_binding(request.room_type, request.room_id),
            editor=lenient_binding(request.editor_type, request.editor_id),
            booking_date=request.booking_date,
            interval=interval_or_none(request.from_time, request.to_time),
            exclude_booking_id=request.exclude_booking_id,
        )
        return self.detector.check(candidate)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def resolve(self, kind: ResourceKind, binding: Binding) -> Binding:
        """Attach the registry's current ignore flag to a system binding."""
        if not isinstance(binding, SystemResource):
            return binding
        resource = self.registry.get_resource(kind, binding.resource_id)
        if resource is None or not resource.is_active:
            raise UnknownResource(kind.value, binding.resource_id)
        return SystemResource(
            resource_id=binding.resource_id,
            ignore_conflict=resource.ignore_conflict,
        )

    def check_references(
        self, customer_id: int, project_id: int, contact_id: int | None
    ) -> None:
        customer = self.registry.get_customer(customer_id)
        if customer is None or not customer.is_active:
            raise ReferentialMismatch(f"customer {customer_id} does not exist or is inactive")
        project = self.registry.get_project(project_id)
        if project is None or project.customer_id != customer_id:
            raise ReferentialMismatch(
                f"project {project_id} does not belong to customer {customer_id}"
            )
        if contact_id is not None:
            contact = self.registry.get_contact(contact_id)
            if contact is None or contact.customer_id != customer_id:
                raise ReferentialMismatch(
                    f"contact {contact_id} does not belong to customer {customer_id}"
                )

    def build_draft(self, request: BookingRequest) -> BookingDraft:
        planned = TimeInterval(from_time=request.from_time, to_time=request.to_time)
        room = self.resolve(ResourceKind.ROOM, _room_binding(request))
        editor = self.resolve(ResourceKind.EDITOR, _editor_binding(request))
        self.check_references(request.customer_id, request.project_id, request.contact_id)
        return BookingDraft(
            tenant_id=request.tenant_id,
            room=room,
            editor=editor,
            customer_id=request.customer_id,
            project_id=request.project_id,
            contact_id=request.contact_id,
            booking_date=request.booking_date,
            planned=planned,
            actual_from_time=request.actual_from_time,
            actual_to_time=request.actual_to_time,
            break_hours=request.break_hours,
            status=request.status,
            notes=request.notes,
        )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(self, request: BookingRequest) -> Booking | SeriesResult:
        """Create one booking, or a daily series when ``repeat_days > 0``."""
        draft = self.build_draft(request)
        if request.repeat_days > 0:
            if request.override_conflicts:
                policy = SeriesPolicy.CREATE_ALL
            else:
                policy = request.series_policy or self.series_policy
            return self.create_series(draft, request.repeat_days, policy)

        verdict = self.check(candidate_for(draft))
        if verdict.blocked and not request.override_conflicts:
            raise ConflictRejected(verdict)
        return self._commit(draft, verdict)

    def create_series(
        self, base: BookingDraft, repeat_days: int, policy: SeriesPolicy
    ) -> SeriesResult:
        """Check and commit each date of a repeat request independently.

        ``policy`` decides what happens to blocked dates:
        ``skip_conflicts`` commits the clear dates and reports the rest,
        ``abort_on_conflict`` commits nothing if any date is blocked,
        ``create_all`` commits every date and records the overrides.
        """
        series_id = str(uuid.uuid4())
        checked = [
            (draft, self.check(candidate_for(draft))) for draft in expand(base, repeat_days)
        ]
        result = SeriesResult(series_id=series_id, policy=policy)

        blocked_dates = [d.booking_date for d, v in checked if v.blocked]
        if policy == SeriesPolicy.ABORT_ON_CONFLICT and blocked_dates:
            logger.warning(
                "Series %s aborted: %d of %d date(s) blocked",
                series_id,
                len(blocked_dates),
                len(checked),
            )
            result.outcomes = [
                SeriesDateOutcome(
                    booking_date=draft.booking_date,
                    outcome=SeriesOutcomeKind.ABORTED,
                    verdict=verdict,
                )
                for draft, verdict in checked
            ]
            return result

        for draft, verdict in checked:
            if verdict.blocked and policy == SeriesPolicy.SKIP_CONFLICTS:
                logger.warning("Series %s: skipping blocked date %s", series_id, draft.booking_date)
                result.outcomes.append(
                    SeriesDateOutcome(
                        booking_date=draft.booking_date,
                        outcome=SeriesOutcomeKind.SKIPPED,
                        verdict=verdict,
                    )
                )
                continue
            booking = self._commit(draft, verdict, series_id=series_id)
            result.bookings.append(booking)
            result.outcomes.append(
                SeriesDateOutcome(
                    booking_date=draft.booking_date,
                    outcome=SeriesOutcomeKind.CREATED,
                    verdict=verdict,
                    booking_id=booking.id,
                )
            )
        return result

    def _commit(
        self,
        draft: BookingDraft,
        verdict: ConflictVerdict,
        series_id: str | None = None,
    ) -> Booking:
        booking = Booking(**dict(draft), series_id=series_id)
        self.booking_repo.add(booking)
        self.bus.publish(BookingCreated(booking_id=booking.id, series_id=series_id))
        if verdict.blocked:
            self._publish_override(booking.id, verdict)
        return booking

    def _publish_override(self, booking_id: str, verdict: ConflictVerdict) -> None:
        self.bus.publish(
            ConflictOverridden(
                booking_id=booking_id,
                conflicting_booking_ids=[c.conflicting_booking_id for c in verdict.conflicts],
                editor_on_leave=verdict.editor_on_leave,
            )
        )

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def update(self, booking_id: str, patch: BookingPatch) -> Booking:
        """Apply a partial edit.

        The conflict check is re-run (excluding the booking itself) only
        when room, editor, date or planned interval actually change.
        """
        booking = self.get(booking_id)
        fields = {
            name
            for name in patch.model_fields_set - {"override_conflicts"}
            if not (name in _NON_NULLABLE_PATCH_FIELDS and getattr(patch, name) is None)
        }

        changes: dict[str, object] = {}
        if fields & ROOM_FIELDS:
            changes["room"] = self.resolve(ResourceKind.ROOM, _room_binding(patch))
        if fields & EDITOR_FIELDS:
            changes["editor"] = self.resolve(ResourceKind.EDITOR, _editor_binding(patch))
        if fields & {"from_time", "to_time"}:
            changes["planned"] = TimeInterval(
                from_time=patch.from_time if "from_time" in fields else booking.planned.from_time,
                to_time=patch.to_time if "to_time" in fields else booking.planned.to_time,
            )
        for name in _PLAIN_PATCH_FIELDS:
            if name in fields:
                changes[name] = getattr(patch, name)

        changed = sorted(
            name for name, value in changes.items() if getattr(booking, name) != value
        )
        if not changed:
            return booking

        if {"customer_id", "project_id", "contact_id"} & set(changed):
            self.check_references(
                changes.get("customer_id", booking.customer_id),
                changes.get("project_id", booking.project_id),
                changes.get("contact_id", booking.contact_id),
            )

        updated = Booking(
            **{
                **dict(booking),
                **{name: changes[name] for name in changed},
                "updated_at": _utcnow(),
            }
        )

        rechecked = bool(SCHEDULING_FIELDS & set(changed))
        verdict = ConflictVerdict(checked=False)
        if rechecked:
            verdict = self.check(candidate_for(updated, exclude_booking_id=booking.id))
            if verdict.blocked and not patch.override_conflicts:
                raise ConflictRejected(verdict)

        self.booking_repo.add(updated)
        self.bus.publish(
            BookingUpdated(booking_id=booking.id, changed_fields=changed, rechecked=rechecked)
        )
        if "status" in changed:
            self.bus.publish(
                BookingStatusChanged(
                    booking_id=booking.id,
                    old_status=booking.status,
                    new_status=updated.status,
                )
            )
        if verdict.blocked:
            self._publish_override(booking.id, verdict)
        return updated

    def change_status(self, booking_id: str, status: BookingStatus) -> Booking:
        """Move between planning, tentative and confirmed in any direction."""
        booking = self.get(booking_id)
        if booking.status == status:
            return booking
        updated = booking.model_copy(update={"status": status, "updated_at": _utcnow()})
        self.booking_repo.add(updated)
        self.bus.publish(
            BookingStatusChanged(
                booking_id=booking.id, old_status=booking.status, new_status=status
            )
        )
        return updated

    def record_actual(
        self, booking_id: str, actual_from_time: time | None, actual_to_time: time | None
    ) -> Booking:
        """Record what really happened. Never affects conflict detection."""
        booking = self.get(booking_id)
        updated = Booking(
            **{
                **dict(booking),
                "actual_from_time": actual_from_time,
                "actual_to_time": actual_to_time,
                "updated_at": _utcnow(),
            }
        )
        self.booking_repo.add(updated)
        self.bus.publish(
            BookingUpdated(
                booking_id=booking.id,
                changed_fields=["actual_from_time", "actual_to_time"],
                rechecked=False,
            )
        )
        return updated

    def delete(self, booking_id: str) -> None:
        self.get(booking_id)
        self.booking_repo.delete(booking_id)
        self.bus.publish(BookingDeleted(booking_id=booking_id))
