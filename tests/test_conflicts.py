"""Tests for the conflict-detection service."""

from __future__ import annotations

from datetime import date, time

import pytest

from studio_scheduler.domain.bindings import ClientSupplied, SystemResource, Unassigned
from studio_scheduler.domain.intervals import TimeInterval
from studio_scheduler.domain.models import (
    Booking,
    ConflictCandidate,
    Editor,
    EditorLeave,
    ResourceKind,
    Room,
)
from studio_scheduler.repos.memory import (
    BookingRepository,
    LeaveRepository,
    ResourceRegistry,
)
from studio_scheduler.services.conflicts import ConflictDetector, find_conflicts

DAY = date(2025, 12, 4)
R101 = 101
LOUNGE = 102
E5 = 5


def _iv(start: str, end: str) -> TimeInterval:
    return TimeInterval(from_time=time.fromisoformat(start), to_time=time.fromisoformat(end))


@pytest.fixture()
def env():
    """Fresh registry + stores + detector for each test."""
    registry = ResourceRegistry()
    registry.add_room(Room(id=R101, name="R101", room_type="editing"))
    registry.add_room(Room(id=LOUNGE, name="Lounge", room_type="lounge", ignore_conflict=True))
    registry.add_editor(Editor(id=E5, name="E5", editor_type="video"))
    booking_repo = BookingRepository()
    leave_repo = LeaveRepository()

    class Env:
        pass

    e = Env()
    e.registry = registry
    e.booking_repo = booking_repo
    e.leave_repo = leave_repo
    e.detector = ConflictDetector(registry, booking_repo, leave_repo)
    return e


def _make_booking(**overrides) -> Booking:
    defaults = dict(
        tenant_id=1,
        room=SystemResource(resource_id=R101),
        customer_id=1,
        project_id=1,
        booking_date=DAY,
        planned=_iv("09:00", "13:00"),
    )
    defaults.update(overrides)
    return Booking(**defaults)


def _candidate(**overrides) -> ConflictCandidate:
    defaults = dict(
        tenant_id=1,
        room=SystemResource(resource_id=R101),
        booking_date=DAY,
        interval=_iv("12:00", "14:00"),
    )
    defaults.update(overrides)
    return ConflictCandidate(**defaults)


# ---------------------------------------------------------------------------
# find_conflicts
# ---------------------------------------------------------------------------


def test_find_conflicts_exact_boundary_no_conflict():
    existing = [_make_booking(planned=_iv("09:00", "10:00"))]
    assert find_conflicts(_iv("10:00", "11:00"), existing) == []


def test_find_conflicts_partial_overlap():
    existing = [_make_booking(planned=_iv("09:00", "10:30"))]
    conflicts = find_conflicts(_iv("10:00", "11:00"), existing)
    assert len(conflicts) == 1
    assert conflicts[0].planned.from_time == time(9, 0)


# ---------------------------------------------------------------------------
# Room conflicts
# ---------------------------------------------------------------------------


def test_overlapping_room_booking_conflicts(env):
    """R101 booked 09:00–13:00; a 12:00–14:00 candidate collides once."""
    existing = _make_booking()
    env.booking_repo.add(existing)

    verdict = env.detector.check(_candidate())

    assert verdict.checked is True
    assert verdict.has_conflict is True
    assert len(verdict.conflicts) == 1
    entry = verdict.conflicts[0]
    assert entry.resource_kind == ResourceKind.ROOM
    assert entry.conflicting_booking_id == existing.id
    assert entry.from_time == time(9, 0)
    assert entry.to_time == time(13, 0)
    assert "09:00-13:00" in entry.message
    assert verdict.editor_on_leave is False


def test_adjacent_room_booking_does_not_conflict(env):
    env.booking_repo.add(_make_booking())

    verdict = env.detector.check(_candidate(interval=_iv("13:00", "15:00")))

    assert verdict.checked is True
    assert verdict.has_conflict is False
    assert verdict.conflicts == []


def test_every_overlap_is_reported(env):
    first = _make_booking(planned=_iv("09:00", "11:00"))
    second = _make_booking(planned=_iv("11:00", "13:00"))
    env.booking_repo.add(first)
    env.booking_repo.add(second)

    verdict = env.detector.check(_candidate(interval=_iv("10:00", "12:00")))

    assert [c.conflicting_booking_id for c in verdict.conflicts] == [first.id, second.id]


def test_other_tenant_and_other_date_are_ignored(env):
    env.booking_repo.add(_make_booking(tenant_id=2))
    env.booking_repo.add(_make_booking(booking_date=date(2025, 12, 5)))

    verdict = env.detector.check(_candidate())

    assert verdict.has_conflict is False


def test_other_room_is_ignored(env):
    env.booking_repo.add(_make_booking(room=SystemResource(resource_id=LOUNGE)))

    assert env.detector.check(_candidate()).has_conflict is False


# ---------------------------------------------------------------------------
# Ignore-conflict flag
# ---------------------------------------------------------------------------


def test_ignore_flag_suppresses_any_number_of_overlaps(env):
    for _ in range(3):
        env.booking_repo.add(_make_booking(room=SystemResource(resource_id=LOUNGE)))

    verdict = env.detector.check(_candidate(room=SystemResource(resource_id=LOUNGE)))

    assert verdict.checked is True
    assert verdict.has_conflict is False


def test_ignore_flag_is_read_from_registry_not_binding(env):
    env.booking_repo.add(_make_booking())
    env.booking_repo.add(_make_booking(room=SystemResource(resource_id=LOUNGE)))

    stale_ignore = _candidate(room=SystemResource(resource_id=R101, ignore_conflict=True))
    stale_strict = _candidate(room=SystemResource(resource_id=LOUNGE, ignore_conflict=False))

    assert env.detector.check(stale_ignore).has_conflict is True
    assert env.detector.check(stale_strict).has_conflict is False


def test_unknown_resource_falls_back_to_binding_flag(env):
    env.booking_repo.add(_make_booking(room=SystemResource(resource_id=999)))

    verdict = env.detector.check(_candidate(room=SystemResource(resource_id=999)))

    assert verdict.has_conflict is True
    assert "#999" in verdict.conflicts[0].message


# ---------------------------------------------------------------------------
# Self-exclusion and client-supplied resources
# ---------------------------------------------------------------------------


def test_recheck_excludes_booking_itself(env):
    existing = _make_booking()
    env.booking_repo.add(existing)

    verdict = env.detector.check(
        _candidate(interval=existing.planned, exclude_booking_id=existing.id)
    )

    assert verdict.has_conflict is False


def test_client_supplied_resources_are_never_checked(env):
    paramount = ClientSupplied(name="Paramount Studios", type="editing")
    env.booking_repo.add(_make_booking(room=paramount))
    env.booking_repo.add(_make_booking(room=paramount, editor=ClientSupplied(name="Zara")))

    both_client = env.detector.check(
        _candidate(room=paramount, editor=ClientSupplied(name="Zara"))
    )
    assert both_client.checked is False
    assert both_client.has_conflict is False

    with_system_editor = env.detector.check(
        _candidate(room=paramount, editor=SystemResource(resource_id=E5))
    )
    assert with_system_editor.checked is True
    assert with_system_editor.conflicts == []


# ---------------------------------------------------------------------------
# Editor conflicts and leave
# ---------------------------------------------------------------------------


def test_room_and_editor_conflicts_are_both_reported(env):
    env.booking_repo.add(_make_booking(editor=SystemResource(resource_id=E5)))

    verdict = env.detector.check(_candidate(editor=SystemResource(resource_id=E5)))

    kinds = sorted(c.resource_kind for c in verdict.conflicts)
    assert kinds == [ResourceKind.EDITOR, ResourceKind.ROOM]


def test_editor_conflict_without_room(env):
    other_room = _make_booking(
        room=SystemResource(resource_id=LOUNGE), editor=SystemResource(resource_id=E5)
    )
    env.booking_repo.add(other_room)

    verdict = env.detector.check(
        _candidate(room=Unassigned(), editor=SystemResource(resource_id=E5))
    )

    assert verdict.has_conflict is True
    assert verdict.conflicts[0].resource_kind == ResourceKind.EDITOR
    assert verdict.conflicts[0].message.startswith("Editor E5")


def test_editor_on_leave_without_double_booking(env):
    """E5 on leave 10–12 Dec; a booking on the 11th is clear but unavailable."""
    leave = EditorLeave(
        editor_id=E5,
        from_date=date(2025, 12, 10),
        to_date=date(2025, 12, 12),
        reason="Medical leave",
    )
    env.leave_repo.add(leave)

    verdict = env.detector.check(
        _candidate(
            room=Unassigned(),
            editor=SystemResource(resource_id=E5),
            booking_date=date(2025, 12, 11),
        )
    )

    assert verdict.has_conflict is False
    assert verdict.editor_on_leave is True
    assert verdict.leave_info == leave
    assert verdict.blocked is True


def test_leave_range_is_inclusive(env):
    env.leave_repo.add(
        EditorLeave(editor_id=E5, from_date=date(2025, 12, 10), to_date=date(2025, 12, 12))
    )
    editor = SystemResource(resource_id=E5)

    on_last_day = env.detector.check(_candidate(editor=editor, booking_date=date(2025, 12, 12)))
    day_after = env.detector.check(_candidate(editor=editor, booking_date=date(2025, 12, 13)))

    assert on_last_day.editor_on_leave is True
    assert day_after.editor_on_leave is False


def test_leave_reported_even_when_editor_ignores_conflicts(env):
    env.registry.add_editor(Editor(id=6, name="Floater", editor_type="video", ignore_conflict=True))
    env.leave_repo.add(EditorLeave(editor_id=6, from_date=DAY, to_date=DAY))

    verdict = env.detector.check(_candidate(editor=SystemResource(resource_id=6)))

    assert verdict.editor_on_leave is True


# ---------------------------------------------------------------------------
# Incomplete input
# ---------------------------------------------------------------------------


def test_missing_interval_is_unchecked(env):
    env.booking_repo.add(_make_booking())

    verdict = env.detector.check(_candidate(interval=None))

    assert verdict.checked is False
    assert verdict.has_conflict is False


def test_missing_date_is_unchecked(env):
    verdict = env.detector.check(_candidate(booking_date=None))
    assert verdict.checked is False


def test_no_system_resources_is_unchecked(env):
    verdict = env.detector.check(_candidate(room=Unassigned()))
    assert verdict.checked is False
    assert verdict.editor_on_leave is False
