"""Tests for the time-of-day interval model."""

from __future__ import annotations

from datetime import time, timedelta, timezone

import pytest
from pydantic import ValidationError

from studio_scheduler.domain.errors import InvalidInterval
from studio_scheduler.domain.intervals import TimeInterval, interval_or_none, overlaps


def _iv(start: str, end: str) -> TimeInterval:
    return TimeInterval(from_time=time.fromisoformat(start), to_time=time.fromisoformat(end))


def test_overlap_is_symmetric():
    intervals = [
        _iv("09:00", "13:00"),
        _iv("12:00", "14:00"),
        _iv("13:00", "15:00"),
        _iv("10:00", "11:00"),
        _iv("16:00", "18:00"),
    ]
    for a in intervals:
        for b in intervals:
            assert overlaps(a, b) == overlaps(b, a)


def test_partial_overlap():
    assert overlaps(_iv("09:00", "13:00"), _iv("12:00", "14:00"))


def test_contained_interval_overlaps():
    assert overlaps(_iv("09:00", "18:00"), _iv("10:00", "11:00"))


def test_touching_endpoints_do_not_overlap():
    """A booking ending at 13:00 and one starting at 13:00 share no instant."""
    assert not overlaps(_iv("09:00", "13:00"), _iv("13:00", "15:00"))
    assert not _iv("13:00", "15:00").overlaps(_iv("09:00", "13:00"))


def test_disjoint_intervals():
    assert not overlaps(_iv("08:00", "09:00"), _iv("10:00", "11:00"))


def test_inverted_interval_raises():
    with pytest.raises(InvalidInterval):
        _iv("13:00", "09:00")


def test_zero_length_interval_raises():
    with pytest.raises(InvalidInterval, match="must be before"):
        _iv("09:00", "09:00")


def test_duration_and_hours():
    interval = _iv("09:00", "13:30")
    assert interval.duration_minutes == 270
    assert interval.hours == 4.5
    assert interval.label() == "09:00-13:30"


def test_interval_or_none_tolerates_bad_input():
    assert interval_or_none(None, time(10)) is None
    assert interval_or_none(time(10), None) is None
    assert interval_or_none(time(12), time(10)) is None
    assert interval_or_none(time(10), time(12)) == _iv("10:00", "12:00")


IST = timezone(timedelta(hours=5, minutes=30))


def test_interval_rejects_times_with_utc_offset():
    with pytest.raises(ValidationError, match="without a UTC offset"):
        TimeInterval(
            from_time=time(9, 0, tzinfo=timezone.utc),
            to_time=time(13, 0, tzinfo=timezone.utc),
        )


def test_interval_rejects_mixed_naive_and_offset_bounds():
    with pytest.raises(ValidationError):
        TimeInterval(from_time=time(12, 0, tzinfo=timezone.utc), to_time=time(14, 0))


def test_interval_or_none_treats_offset_bounds_as_missing():
    assert interval_or_none(time(12, 0, tzinfo=IST), time(14, 0, tzinfo=IST)) is None
    assert interval_or_none(time(12, 0, tzinfo=timezone.utc), time(14, 0)) is None
    assert interval_or_none(time(12, 0), time(14, 0, tzinfo=IST)) is None
