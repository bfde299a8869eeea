"""In-memory stores standing in for the externally owned persistence layer."""

from __future__ import annotations

from datetime import date

from studio_scheduler.domain.bindings import SystemResource
from studio_scheduler.domain.models import (
    Booking,
    BookingLogEntry,
    Contact,
    Customer,
    Editor,
    EditorLeave,
    Project,
    ResourceKind,
    Room,
)


class ResourceRegistry:
    """Read-only lookups for rooms, editors, customers, projects and contacts."""

    def __init__(self) -> None:
        self._rooms: dict[int, Room] = {}
        self._editors: dict[int, Editor] = {}
        self._customers: dict[int, Customer] = {}
        self._projects: dict[int, Project] = {}
        self._contacts: dict[int, Contact] = {}

    def add_room(self, room: Room) -> None:
        self._rooms[room.id] = room

    def add_editor(self, editor: Editor) -> None:
        self._editors[editor.id] = editor

    def add_customer(self, customer: Customer) -> None:
        self._customers[customer.id] = customer

    def add_project(self, project: Project) -> None:
        self._projects[project.id] = project

    def add_contact(self, contact: Contact) -> None:
        self._contacts[contact.id] = contact

    def get_room(self, room_id: int) -> Room | None:
        return self._rooms.get(room_id)

    def get_editor(self, editor_id: int) -> Editor | None:
        return self._editors.get(editor_id)

    def get_resource(self, kind: ResourceKind, resource_id: int) -> Room | Editor | None:
        if kind == ResourceKind.ROOM:
            return self.get_room(resource_id)
        return self.get_editor(resource_id)

    def get_customer(self, customer_id: int) -> Customer | None:
        return self._customers.get(customer_id)

    def get_project(self, project_id: int) -> Project | None:
        return self._projects.get(project_id)

    def get_contact(self, contact_id: int) -> Contact | None:
        return self._contacts.get(contact_id)

    def has_rooms(self) -> bool:
        return bool(self._rooms)

    def clear(self) -> None:
        self._rooms.clear()
        self._editors.clear()
        self._customers.clear()
        self._projects.clear()
        self._contacts.clear()


class BookingRepository:
    """Dict-backed store for Booking instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Booking] = {}

    def add(self, booking: Booking) -> None:
        self._store[booking.id] = booking

    def get(self, booking_id: str) -> Booking | None:
        return self._store.get(booking_id)

    def list_all(self) -> list[Booking]:
        return list(self._store.values())

    def list_for_tenant(
        self, tenant_id: int, booking_date: date | None = None
    ) -> list[Booking]:
        return sorted(
            [
                b
                for b in self._store.values()
                if b.tenant_id == tenant_id
                and (booking_date is None or b.booking_date == booking_date)
            ],
            key=lambda b: (b.booking_date, b.planned.from_time),
        )

    def list_series(self, series_id: str) -> list[Booking]:
        """Return every booking generated by one repeat request."""
        return sorted(
            [b for b in self._store.values() if b.series_id == series_id],
            key=lambda b: b.booking_date,
        )

    def find_by_resource_and_date(
        self,
        tenant_id: int,
        kind: ResourceKind,
        resource_id: int,
        booking_date: date,
        exclude_id: str | None = None,
    ) -> list[Booking]:
        """Bookings in *tenant_id* holding the given system resource on a date."""
        found = []
        for booking in self._store.values():
            if booking.id == exclude_id:
                continue
            if booking.tenant_id != tenant_id or booking.booking_date != booking_date:
                continue
            binding = booking.room if kind == ResourceKind.ROOM else booking.editor
            if isinstance(binding, SystemResource) and binding.resource_id == resource_id:
                found.append(booking)
        return sorted(found, key=lambda b: b.planned.from_time)

    def delete(self, booking_id: str) -> None:
        self._store.pop(booking_id, None)


class LeaveRepository:
    """List-backed store for EditorLeave records."""

    def __init__(self) -> None:
        self._leaves: list[EditorLeave] = []

    def add(self, leave: EditorLeave) -> None:
        self._leaves.append(leave)

    def list_for_editor(self, editor_id: int) -> list[EditorLeave]:
        return sorted(
            [lv for lv in self._leaves if lv.editor_id == editor_id],
            key=lambda lv: lv.from_date,
        )

    def find_by_editor_and_date(self, editor_id: int, on_date: date) -> list[EditorLeave]:
        return [lv for lv in self.list_for_editor(editor_id) if lv.covers(on_date)]


class BookingLogRepository:
    """List-backed audit trail of booking lifecycle entries."""

    def __init__(self) -> None:
        self._entries: list[BookingLogEntry] = []

    def add(self, entry: BookingLogEntry) -> None:
        self._entries.append(entry)

    def list_for_booking(self, booking_id: str) -> list[BookingLogEntry]:
        return sorted(
            [e for e in self._entries if e.booking_id == booking_id],
            key=lambda e: e.timestamp,
        )
