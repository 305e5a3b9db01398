"""Active timetable result and manual-edit reconciliation.

One result is kept (row id 1). Manual overrides happen in a per-user edit
session: ``begin_edit`` snapshots the stored timetable, edits go to a working
copy, ``save_edit`` writes the copy back and audits faculty/room changes,
``cancel_edit`` throws the copy away.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.core.exceptions import AppError
from app.models.timetable import TimetableEditSession, TimetableResult
from app.schemas.dataset import CourseRecord
from app.schemas.timetable import EntryChange, TimetableEntry, TimetableResultPayload
from app.services.audit import log_activity
from app.services.sessions import SessionContext

logger = logging.getLogger(__name__)

RESULT_ID = 1


class NoTimetableError(AppError):
    def __init__(self):
        super().__init__("No timetable has been generated yet", status_code=404)


class NoEditSessionError(AppError):
    def __init__(self):
        super().__init__("Manual override mode is not active", status_code=409)


class StaleEditError(AppError):
    def __init__(self):
        super().__init__(
            "The timetable changed after this edit started. Cancel the edit and start again.",
            status_code=409,
        )


def _entries(raw: Sequence[dict]) -> list[TimetableEntry]:
    return [TimetableEntry.model_validate(item) for item in raw]


def _dump_entries(entries: Sequence[TimetableEntry]) -> list[dict]:
    return [entry.model_dump() for entry in entries]


def find_entry(entries: Sequence[TimetableEntry], day: str, time: str) -> TimetableEntry | None:
    return next((entry for entry in entries if entry.day == day and entry.time == time), None)


def diff_timetables(original: Sequence[TimetableEntry], edited: Sequence[TimetableEntry]) -> list[str]:
    changes: list[str] = []
    for before in original:
        after = find_entry(edited, before.day, before.time)
        if after is None:
            continue
        if before.faculty != after.faculty:
            changes.append(
                f"Changed {after.course} at {after.day} {after.time} from {before.faculty} to {after.faculty}."
            )
        if before.room != after.room:
            changes.append(f"Moved {after.course} at {after.day} {after.time} from {before.room} to {after.room}.")
    return changes


def apply_entry_change(
    entries: Sequence[TimetableEntry],
    change: EntryChange,
    courses: Sequence[CourseRecord],
) -> list[TimetableEntry]:
    """Return a copy of ``entries`` with one cell field replaced.

    ``courseCode`` is derived: a course change looks the code up by course
    name and clears it when nothing matches.
    """
    updated: list[TimetableEntry] = []
    for entry in entries:
        if entry.day != change.day or entry.time != change.time:
            updated.append(entry.model_copy())
            continue
        values = {change.field: change.value}
        if change.field == "course":
            course = next((item for item in courses if item.name == change.value), None)
            values["courseCode"] = course.code if course is not None else ""
        updated.append(entry.model_copy(update=values))
    return updated


def load_result(db: Session) -> TimetableResultPayload | None:
    record = db.get(TimetableResult, RESULT_ID)
    if record is None:
        return None
    return TimetableResultPayload(
        timetable=_entries(record.timetable),
        conflicts=record.conflicts,
        report=record.report,
    )


def require_result(db: Session) -> TimetableResultPayload:
    result = load_result(db)
    if result is None:
        raise NoTimetableError()
    return result


def save_result(db: Session, payload: TimetableResultPayload, *, user_id: str | None) -> TimetableResult:
    data = payload.model_dump()
    record = db.get(TimetableResult, RESULT_ID)
    if record is None:
        record = TimetableResult(id=RESULT_ID)
        db.add(record)
    record.timetable = data["timetable"]
    record.conflicts = data["conflicts"]
    record.report = data["report"]
    record.updated_by_id = user_id
    return record


def clear_result(db: Session) -> bool:
    record = db.get(TimetableResult, RESULT_ID)
    if record is None:
        return False
    db.delete(record)
    discard_edit_sessions(db)
    return True


def discard_edit_sessions(db: Session) -> int:
    """Drop every working copy; used when the stored result is replaced wholesale."""
    return db.query(TimetableEditSession).delete()


def begin_edit(db: Session, *, actor: SessionContext) -> TimetableEditSession:
    result = require_result(db)
    snapshot = _dump_entries(result.timetable)
    session = db.get(TimetableEditSession, actor.user_id)
    if session is None:
        session = TimetableEditSession(user_id=actor.user_id)
        db.add(session)
    session.original = snapshot
    session.entries = [dict(item) for item in snapshot]
    db.flush()
    return session


def require_edit_session(db: Session, *, actor: SessionContext) -> TimetableEditSession:
    session = db.get(TimetableEditSession, actor.user_id)
    if session is None:
        raise NoEditSessionError()
    return session


def working_entries(db: Session, *, actor: SessionContext) -> list[TimetableEntry]:
    """Entries the user currently sees: the edit copy when editing, else the stored result."""
    session = db.get(TimetableEditSession, actor.user_id)
    if session is not None:
        return _entries(session.entries)
    result = load_result(db)
    return result.timetable if result is not None else []


def update_edit_entry(
    db: Session,
    *,
    actor: SessionContext,
    change: EntryChange,
    courses: Sequence[CourseRecord],
) -> TimetableEditSession:
    session = require_edit_session(db, actor=actor)
    entries = _entries(session.entries)
    if find_entry(entries, change.day, change.time) is None:
        logger.info("Manual edit skipped: no class at %s %s", change.day, change.time)
        return session
    session.entries = _dump_entries(apply_entry_change(entries, change, courses))
    return session


def save_edit(db: Session, *, actor: SessionContext) -> tuple[TimetableResultPayload, list[str]]:
    session = require_edit_session(db, actor=actor)
    result = require_result(db)
    original = _entries(session.original)
    if original != result.timetable:
        # Another editor saved since begin_edit.
        logger.info("Manual edit rejected: stale snapshot | user_id=%s", actor.user_id)
        raise StaleEditError()
    edited = _entries(session.entries)
    changes = diff_timetables(original, edited)

    if changes:
        log_activity(
            db,
            actor=actor,
            action="timetable.update",
            entity_type="timetable_result",
            entity_id=str(RESULT_ID),
            details={
                "summary": f"Made {len(changes)} change(s): {' '.join(changes)}",
                "changes": changes,
            },
        )

    saved = TimetableResultPayload(timetable=edited, conflicts=result.conflicts, report=result.report)
    save_result(db, saved, user_id=actor.user_id)
    db.delete(session)
    return saved, changes


def cancel_edit(db: Session, *, actor: SessionContext) -> TimetableResultPayload:
    session = require_edit_session(db, actor=actor)
    db.delete(session)
    return require_result(db)
