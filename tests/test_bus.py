"""Tests for event dispatch."""

from __future__ import annotations

import pytest

from studio_scheduler.domain.bus import EventBus
from studio_scheduler.domain.events import BookingCreated, BookingDeleted, BookingEvent


def test_specific_handlers_run_before_base_handlers():
    bus = EventBus()
    seen: list[str] = []
    bus.subscribe(BookingEvent, lambda e: seen.append(f"any:{e.booking_id}"))
    bus.subscribe(BookingCreated, lambda e: seen.append(f"created:{e.booking_id}"))

    bus.publish(BookingCreated(booking_id="b1"))
    bus.publish(BookingDeleted(booking_id="b1"))

    assert seen == ["created:b1", "any:b1", "any:b1"]


def test_handlers_for_same_type_keep_registration_order():
    bus = EventBus()
    seen: list[int] = []
    bus.subscribe(BookingDeleted, lambda e: seen.append(1))
    bus.subscribe(BookingDeleted, lambda e: seen.append(2))

    bus.publish(BookingDeleted(booking_id="b1"))

    assert seen == [1, 2]


def test_handler_error_reaches_publisher():
    bus = EventBus()

    def boom(event):
        raise RuntimeError("log store unavailable")

    bus.subscribe(BookingDeleted, boom)

    with pytest.raises(RuntimeError):
        bus.publish(BookingDeleted(booking_id="b1"))
