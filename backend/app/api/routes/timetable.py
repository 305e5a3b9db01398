import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_session, get_db, require_roles
from app.core.exceptions import ResourceNotFoundError
from app.models.user import UserRole
from app.schemas.materials import CourseMaterialOutline, MaterialKind
from app.schemas.timetable import (
    DEFAULT_DAYS,
    LUNCH_SLOT,
    TIME_SLOTS,
    CellRef,
    EditSaveOut,
    EditSessionOut,
    EntryChange,
    GridCell,
    GridRow,
    TimetableGridOut,
    TimetableResultPayload,
)
from app.services.audit import log_activity
from app.services.course_materials import build_outline
from app.services.dataset import load_courses
from app.services.sessions import SessionContext
from app.services.timetable_store import (
    RESULT_ID,
    begin_edit,
    cancel_edit,
    clear_result,
    find_entry,
    require_edit_session,
    require_result,
    save_edit,
    update_edit_entry,
    working_entries,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _edit_out(session) -> EditSessionOut:
    return EditSessionOut.model_validate({"original": session.original, "entries": session.entries})


@router.get("/result", response_model=TimetableResultPayload)
def get_result(
    current: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> TimetableResultPayload:
    return require_result(db)


@router.delete("/result")
def delete_result(
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> dict:
    cleared = clear_result(db)
    if cleared:
        log_activity(db, actor=current, action="timetable.clear", entity_type="timetable_result", entity_id=str(RESULT_ID))
    db.commit()
    return {"success": True, "cleared": cleared}


@router.get("/grid", response_model=TimetableGridOut)
def get_grid(
    days: list[str] | None = Query(default=None),
    current: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> TimetableGridOut:
    result = require_result(db)
    columns = days or list(DEFAULT_DAYS)
    entries = working_entries(db, actor=current)
    rows = [
        GridRow(
            time=slot,
            is_lunch_break=slot == LUNCH_SLOT,
            cells=[
                GridCell(day=day, entry=None if slot == LUNCH_SLOT else find_entry(entries, day, slot))
                for day in columns
            ],
        )
        for slot in TIME_SLOTS
    ]
    return TimetableGridOut(days=columns, rows=rows, conflict_count=len(result.conflicts))


@router.get("/edit", response_model=EditSessionOut)
def get_edit_session(
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> EditSessionOut:
    return _edit_out(require_edit_session(db, actor=current))


@router.post("/edit", response_model=EditSessionOut)
def start_edit(
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> EditSessionOut:
    session = begin_edit(db, actor=current)
    db.commit()
    logger.info("Manual override started | user_id=%s | entries=%s", current.user_id, len(session.entries))
    return _edit_out(session)


@router.patch("/edit/entries", response_model=EditSessionOut)
def edit_entry(
    payload: EntryChange,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> EditSessionOut:
    session = update_edit_entry(db, actor=current, change=payload, courses=load_courses(db))
    db.commit()
    return _edit_out(session)


@router.post("/edit/save", response_model=EditSaveOut)
def save_edit_session(
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> EditSaveOut:
    result, changes = save_edit(db, actor=current)
    db.commit()
    logger.info("Manual override saved | user_id=%s | changes=%s", current.user_id, len(changes))
    return EditSaveOut(result=result, changes=changes)


@router.post("/edit/cancel", response_model=TimetableResultPayload)
def cancel_edit_session(
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> TimetableResultPayload:
    result = cancel_edit(db, actor=current)
    db.commit()
    return result


@router.post("/attendance")
def mark_attendance(
    payload: CellRef,
    current: SessionContext = Depends(require_roles(UserRole.admin, UserRole.faculty)),
    db: Session = Depends(get_db),
) -> dict:
    entry = find_entry(require_result(db).timetable, payload.day, payload.time)
    if entry is None:
        raise ResourceNotFoundError("Timetable entry", f"{payload.day} {payload.time}")

    message = f"Attendance marked for course {entry.course} ({entry.courseCode}) taught by {entry.faculty}."
    log_activity(
        db,
        actor=current,
        action="timetable.attendance",
        entity_type="timetable_entry",
        entity_id=f"{entry.day} {entry.time}",
        details={"summary": message, "course": entry.course, "courseCode": entry.courseCode, "faculty": entry.faculty},
    )
    db.commit()
    return {"success": True, "message": message}


@router.get("/materials", response_model=CourseMaterialOutline)
def get_course_materials(
    day: str = Query(min_length=1),
    time: str = Query(min_length=1),
    kind: MaterialKind = Query(default="slides"),
    current: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> CourseMaterialOutline:
    entry = find_entry(require_result(db).timetable, day, time)
    if entry is None:
        raise ResourceNotFoundError("Timetable entry", f"{day} {time}")
    return build_outline(entry, kind)
