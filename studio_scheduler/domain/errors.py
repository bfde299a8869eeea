"""Errors raised at the booking boundary.

All of these are recoverable by the caller: fix the input and resubmit.
They subclass ``Exception`` rather than ``ValueError`` so that pydantic
validators let them through unwrapped.
"""

from __future__ import annotations

from datetime import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from studio_scheduler.domain.models import ConflictVerdict


class BookingError(Exception):
    """Base class for every booking validation failure."""

    code = "booking_error"


class InvalidInterval(BookingError):
    code = "invalid_interval"

    def __init__(self, from_time: time, to_time: time) -> None:
        self.from_time = from_time
        self.to_time = to_time
        super().__init__(
            f"from_time {from_time:%H:%M} must be before to_time {to_time:%H:%M}"
        )


class InvalidBinding(BookingError):
    code = "invalid_binding"


class UnknownResource(BookingError):
    code = "unknown_resource"

    def __init__(self, kind: str, resource_id: int) -> None:
        self.kind = kind
        self.resource_id = resource_id
        super().__init__(f"{kind} {resource_id} does not exist or is inactive")


class ReferentialMismatch(BookingError):
    code = "referential_mismatch"


class BookingNotFound(BookingError):
    code = "booking_not_found"

    def __init__(self, booking_id: str) -> None:
        self.booking_id = booking_id
        super().__init__("Booking not found")


class ConflictRejected(BookingError):
    """A commit was attempted over a blocked verdict without an override."""

    code = "conflict"

    def __init__(self, verdict: ConflictVerdict) -> None:
        self.verdict = verdict
        super().__init__(
            f"Booking collides with {len(verdict.conflicts)} existing booking(s)"
            + (" and the editor is on leave" if verdict.editor_on_leave else "")
        )
