"""Demo fixture loader: a small studio with rooms, editors and December bookings.

Loading is idempotent: nothing happens if the registry already holds rooms.
It is a development aid and is never run unless explicitly enabled.
"""

from __future__ import annotations

import logging
from datetime import date, time

from studio_scheduler.domain.bindings import ClientSupplied, SystemResource
from studio_scheduler.domain.intervals import TimeInterval
from studio_scheduler.domain.models import (
    Booking,
    BookingStatus,
    Contact,
    Customer,
    Editor,
    EditorLeave,
    Project,
    Room,
)
from studio_scheduler.repos.memory import (
    BookingRepository,
    LeaveRepository,
    ResourceRegistry,
)

logger = logging.getLogger(__name__)

DEMO_TENANT_ID = 1

_ROOMS = [
    Room(id=1, name="Studio A", room_type="editing", capacity=2),
    Room(id=2, name="Studio B", room_type="editing", capacity=3),
    Room(id=3, name="Sound Room", room_type="sound", capacity=1),
    Room(id=4, name="VFX Lab", room_type="vfx", capacity=4),
    Room(id=5, name="Music Room", room_type="music", capacity=2),
    Room(id=6, name="Dubbing Theater", room_type="dubbing", capacity=6),
    Room(id=7, name="Mixing Suite", room_type="mixing", capacity=2),
]

_EDITORS = [
    Editor(id=1, name="Rahul Gupta", editor_type="video", phone="9876543220"),
    Editor(id=2, name="Priya Desai", editor_type="audio", phone="9876543221"),
    Editor(id=3, name="Arjun Singh", editor_type="vfx", phone="9876543222"),
    Editor(id=4, name="Divya Nair", editor_type="colorist", phone="9876543223"),
    Editor(id=5, name="Sanjay Reddy", editor_type="di", phone="9876543224"),
]

_CUSTOMERS = [
    Customer(id=1, name="Bollywood Productions"),
    Customer(id=2, name="Digital Stories"),
    Customer(id=3, name="Epic Entertainment"),
    Customer(id=4, name="Creative Minds"),
]

_PROJECTS = [
    Project(id=1, customer_id=1, name="Action Movie - 2025", project_type="movie"),
    Project(id=2, customer_id=2, name="Web Series - Season 1", project_type="web_series"),
    Project(id=3, customer_id=3, name="Ad Campaign - Spring", project_type="ad"),
    Project(id=4, customer_id=1, name="Movie Teaser Pack", project_type="teaser"),
    Project(id=5, customer_id=2, name="Serial - Daily Episodes", project_type="serial"),
    Project(id=6, customer_id=4, name="Brand Film", project_type="ad"),
]

_CONTACTS = [
    Contact(id=1, customer_id=1, name="Rajesh Kumar"),
    Contact(id=2, customer_id=1, name="Priya Singh"),
    Contact(id=3, customer_id=2, name="Amit Verma"),
    Contact(id=4, customer_id=3, name="Neha Sharma"),
    Contact(id=5, customer_id=4, name="Vikram Patel"),
]

_LEAVES = [
    EditorLeave(editor_id=1, from_date=date(2025, 12, 25), to_date=date(2025, 12, 31), reason="Holiday break"),
    EditorLeave(editor_id=2, from_date=date(2025, 12, 15), to_date=date(2025, 12, 17), reason="Personal leave"),
    EditorLeave(editor_id=3, from_date=date(2025, 12, 10), to_date=date(2025, 12, 12), reason="Medical leave"),
]


def _system(resource_id: int) -> SystemResource:
    return SystemResource(resource_id=resource_id)


def _booking(
    day: int,
    start: str,
    end: str,
    customer_id: int,
    project_id: int,
    contact_id: int,
    status: BookingStatus,
    notes: str,
    room=None,
    editor=None,
) -> Booking:
    extra = {}
    if room is not None:
        extra["room"] = room
    if editor is not None:
        extra["editor"] = editor
    return Booking(
        tenant_id=DEMO_TENANT_ID,
        customer_id=customer_id,
        project_id=project_id,
        contact_id=contact_id,
        booking_date=date(2025, 12, day),
        planned=TimeInterval(
            from_time=time.fromisoformat(start), to_time=time.fromisoformat(end)
        ),
        status=status,
        notes=notes,
        **extra,
    )


def _bookings() -> list[Booking]:
    confirmed, tentative, planning = (
        BookingStatus.CONFIRMED,
        BookingStatus.TENTATIVE,
        BookingStatus.PLANNING,
    )
    return [
        _booking(4, "09:00", "13:00", 1, 1, 1, confirmed, "Main editing session", _system(1), _system(1)),
        _booking(4, "14:00", "18:00", 2, 2, 3, confirmed, "Audio mixing", _system(2), _system(2)),
        _booking(4, "08:00", "10:00", 3, 3, 4, planning, "Quick VFX consultation", _system(3), _system(3)),
        _booking(4, "10:30", "12:30", 4, 6, 5, tentative, "Color correction work", _system(4), _system(4)),
        _booking(4, "15:00", "17:00", 1, 4, 1, planning, "Music selection session", _system(5), _system(5)),
        _booking(5, "10:00", "15:00", 1, 1, 2, tentative, "VFX work", _system(3), _system(3)),
        _booking(5, "16:00", "20:00", 3, 3, 4, planning, "Color grading", _system(4), _system(4)),
        _booking(6, "09:00", "12:00", 2, 5, 3, confirmed, "Music composition", _system(5), _system(5)),
        _booking(6, "14:00", "18:00", 4, 6, 5, confirmed, "Dubbing session", _system(6), _system(2)),
        _booking(7, "10:00", "16:00", 1, 4, 1, tentative, "Teaser editing", _system(1), _system(1)),
        _booking(8, "09:00", "17:00", 2, 2, 3, planning, "Full day editing session", _system(2), _system(3)),
        _booking(
            9, "10:00", "14:00", 3, 3, 4, confirmed, "Client provided editing suite",
            room=ClientSupplied(name="Paramount Studios", type="editing"),
            editor=_system(4),
        ),
        _booking(
            10, "11:00", "15:00", 4, 6, 5, tentative, "Client's audio specialist",
            room=_system(7),
            editor=ClientSupplied(
                name="Kavya Sharma",
                type="audio",
                phone="9988776655",
                email="kavya.sharma@freelance.com",
            ),
        ),
        _booking(
            11, "09:00", "13:00", 1, 4, 1, planning, "Client's VFX studio and artist",
            room=ClientSupplied(name="Silverscreen Productions", type="vfx"),
            editor=ClientSupplied(name="Aditya Patel", type="vfx", phone="9911223344"),
        ),
        _booking(
            13, "10:00", "12:00", 3, 3, 4, planning, "Client facility, editor TBD",
            room=ClientSupplied(name="Dream Studios Mumbai", type="sound"),
        ),
    ]


def load_demo_fixtures(
    registry: ResourceRegistry,
    booking_repo: BookingRepository,
    leave_repo: LeaveRepository,
) -> bool:
    """Populate the stores with demo data. Returns False if already loaded."""
    if registry.has_rooms():
        return False

    for room in _ROOMS:
        registry.add_room(room)
    for editor in _EDITORS:
        registry.add_editor(editor)
    for customer in _CUSTOMERS:
        registry.add_customer(customer)
    for project in _PROJECTS:
        registry.add_project(project)
    for contact in _CONTACTS:
        registry.add_contact(contact)
    for leave in _LEAVES:
        leave_repo.add(leave)
    bookings = _bookings()
    for booking in bookings:
        booking_repo.add(booking)

    logger.info(
        "Loaded demo fixtures: %d rooms, %d editors, %d bookings",
        len(_ROOMS),
        len(_EDITORS),
        len(bookings),
    )
    return True
