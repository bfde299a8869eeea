"""Service for querying the editor leave calendar."""

from __future__ import annotations

from datetime import date

from studio_scheduler.domain.models import EditorLeave
from studio_scheduler.repos.memory import LeaveRepository


def is_on_leave(
    editor_id: int, on_date: date, leave_repo: LeaveRepository
) -> EditorLeave | None:
    """Return the leave record covering *on_date*, or None.

    Ranges are inclusive at both ends. Leave records for one editor are not
    expected to overlap; if they do, the earliest-starting match wins.
    """
    matches = leave_repo.find_by_editor_and_date(editor_id, on_date)
    return matches[0] if matches else None
