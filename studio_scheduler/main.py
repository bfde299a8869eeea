"""FastAPI application — entry point for the studio booking service."""

from __future__ import annotations

from datetime import date

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from studio_scheduler.config import configure_logging, load_settings
from studio_scheduler.domain.bus import EventBus
from studio_scheduler.domain.errors import BookingError, BookingNotFound, ConflictRejected
from studio_scheduler.domain.handlers import HandlerRegistry
from studio_scheduler.domain.models import (
    ActualTimesRequest,
    Booking,
    BookingLogEntry,
    BookingPatch,
    BookingRequest,
    CheckConflictsRequest,
    ConflictVerdict,
    EditorLeave,
    SeriesResult,
    StatusChangeRequest,
)
from studio_scheduler.repos.fixtures import load_demo_fixtures
from studio_scheduler.repos.memory import (
    BookingLogRepository,
    BookingRepository,
    LeaveRepository,
    ResourceRegistry,
)
from studio_scheduler.services.leaves import is_on_leave
from studio_scheduler.services.lifecycle import BookingService

settings = load_settings()
configure_logging(settings)

app = FastAPI(title="Studio Booking Service")

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
registry = ResourceRegistry()
booking_repo = BookingRepository()
leave_repo = LeaveRepository()
log_repo = BookingLogRepository()

handler_registry = HandlerRegistry(bus=event_bus, booking_repo=booking_repo, log_repo=log_repo)
booking_service = BookingService(
    bus=event_bus,
    registry=registry,
    booking_repo=booking_repo,
    leave_repo=leave_repo,
    series_policy=settings.series_policy,
)

if settings.load_fixtures:
    load_demo_fixtures(registry, booking_repo, leave_repo)


# ── Error mapping ─────────────────────────────────────────────────────


@app.exception_handler(BookingError)
def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    content: dict = {"detail": str(exc), "code": exc.code}
    if isinstance(exc, BookingNotFound):
        status_code = 404
    elif isinstance(exc, ConflictRejected):
        status_code = 409
        content["verdict"] = exc.verdict.model_dump(mode="json")
    else:
        status_code = 422
    return JSONResponse(status_code=status_code, content=content)


# ── Routes ────────────────────────────────────────────────────────────


@app.post("/bookings/check-conflicts", response_model=ConflictVerdict)
def check_conflicts(payload: CheckConflictsRequest) -> ConflictVerdict:
    """Report collisions for a (possibly incomplete) candidate booking."""
    return booking_service.check_request(payload)


@app.post("/bookings", response_model=Booking | SeriesResult, status_code=201)
def create_booking(payload: BookingRequest) -> Booking | SeriesResult:
    """Create a booking, or one booking per day when ``repeat_days > 0``."""
    return booking_service.create(payload)


@app.get("/bookings", response_model=list[Booking])
def list_bookings(tenant_id: int, booking_date: date | None = None) -> list[Booking]:
    return booking_repo.list_for_tenant(tenant_id, booking_date)


@app.get("/bookings/{booking_id}", response_model=Booking)
def get_booking(booking_id: str) -> Booking:
    return booking_service.get(booking_id)


@app.patch("/bookings/{booking_id}", response_model=Booking)
def update_booking(booking_id: str, patch: BookingPatch) -> Booking:
    """Edit a booking; scheduling changes are re-checked for conflicts."""
    return booking_service.update(booking_id, patch)


@app.post("/bookings/{booking_id}/status", response_model=Booking)
def change_status(booking_id: str, body: StatusChangeRequest) -> Booking:
    return booking_service.change_status(booking_id, body.status)


@app.post("/bookings/{booking_id}/actual", response_model=Booking)
def record_actual_times(booking_id: str, body: ActualTimesRequest) -> Booking:
    return booking_service.record_actual(
        booking_id, body.actual_from_time, body.actual_to_time
    )


@app.delete("/bookings/{booking_id}", status_code=204)
def delete_booking(booking_id: str) -> None:
    booking_service.delete(booking_id)


@app.get("/bookings/{booking_id}/log", response_model=list[BookingLogEntry])
def get_booking_log(booking_id: str) -> list[BookingLogEntry]:
    """Return the lifecycle log for a booking (kept after deletion)."""
    return log_repo.list_for_booking(booking_id)


@app.get("/editors/{editor_id}/leave", response_model=EditorLeave | None)
def get_editor_leave(editor_id: int, on: date) -> EditorLeave | None:
    """Return the leave record covering *on*, or null."""
    return is_on_leave(editor_id, on, leave_repo)
