"""Service for expanding a repeat request into consecutive daily bookings."""

from __future__ import annotations

from datetime import datetime

from dateutil.rrule import DAILY, rrule

from studio_scheduler.domain.models import BookingDraft


def series_dates(start: datetime, repeat_days: int) -> list[datetime]:
    return list(rrule(DAILY, dtstart=start, count=repeat_days + 1))


def expand(base: BookingDraft, repeat_days: int) -> list[BookingDraft]:
    """Return ``repeat_days + 1`` drafts on consecutive calendar days.

    The first draft is *base* itself; every following draft is an exact copy
    with only ``booking_date`` moved forward by one day. No conflict checking
    happens here: each draft is checked on its own by the caller.
    """
    if repeat_days < 0:
        raise ValueError("repeat_days must be non-negative")

    start = datetime.combine(base.booking_date, datetime.min.time())
    drafts = [base]
    for dt in series_dates(start, repeat_days)[1:]:
        drafts.append(base.model_copy(update={"booking_date": dt.date()}))
    return drafts
