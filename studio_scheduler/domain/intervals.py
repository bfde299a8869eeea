"""Half-open time-of-day intervals on a single booking date."""

from __future__ import annotations

from datetime import time
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, model_validator

from studio_scheduler.domain.errors import InvalidInterval


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def _require_naive(value: time) -> time:
    if value.tzinfo is not None:
        raise ValueError("time must be a wall-clock time without a UTC offset")
    return value


# Booking times are local to the studio; offsets are rejected at the boundary.
WallTime = Annotated[time, AfterValidator(_require_naive)]


class TimeInterval(BaseModel):
    """``[from_time, to_time)`` as same-day wall-clock times.

    Cross-midnight ranges are not representable: ``from_time`` must be
    strictly before ``to_time``.
    """

    model_config = ConfigDict(frozen=True)

    from_time: WallTime
    to_time: WallTime

    @model_validator(mode="after")
    def _from_before_to(self) -> TimeInterval:
        if self.from_time >= self.to_time:
            raise InvalidInterval(self.from_time, self.to_time)
        return self

    @property
    def duration_minutes(self) -> int:
        return _minutes(self.to_time) - _minutes(self.from_time)

    @property
    def hours(self) -> float:
        return round(self.duration_minutes / 60, 2)

    def overlaps(self, other: TimeInterval) -> bool:
        return overlaps(self, other)

    def label(self) -> str:
        return f"{self.from_time:%H:%M}-{self.to_time:%H:%M}"


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    """Return True if the two intervals share any instant.

    Touching endpoints (``a.to_time == b.from_time``) are NOT an overlap.
    """
    return a.from_time < b.to_time and b.from_time < a.to_time


def interval_or_none(from_time: time | None, to_time: time | None) -> TimeInterval | None:
    """Build an interval, returning None for missing, offset-carrying or inverted bounds."""
    if from_time is None or to_time is None:
        return None
    if from_time.tzinfo is not None or to_time.tzinfo is not None:
        return None
    try:
        return TimeInterval(from_time=from_time, to_time=to_time)
    except InvalidInterval:
        return None
