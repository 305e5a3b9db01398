from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_session, get_db, require_roles
from app.models.course import Course
from app.models.user import UserRole
from app.schemas.dataset import CourseCreate, CourseRecord, ImportSummary
from app.services.audit import log_activity
from app.services.dataset import available_programs, load_courses, next_position, replace_records
from app.services.sessions import SessionContext

router = APIRouter()


@router.get("/", response_model=list[CourseRecord])
def list_courses(
    current: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> list[CourseRecord]:
    return load_courses(db)


@router.get("/programs", response_model=list[str])
def list_programs(current: SessionContext = Depends(get_current_session), db: Session = Depends(get_db)) -> list[str]:
    return available_programs(load_courses(db))


@router.post("/", response_model=CourseRecord, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseCreate,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> CourseRecord:
    existing = db.execute(select(Course).where(Course.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Course code already exists")
    if payload.id and db.get(Course, payload.id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Course id already exists")
    course = Course(**payload.model_dump(exclude_none=True), position=next_position(db, Course))
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@router.put("/import", response_model=ImportSummary)
def import_courses(
    payload: list[CourseRecord],
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> ImportSummary:
    ids = [item.id for item in payload]
    codes = [item.code for item in payload]
    if len(set(ids)) != len(ids):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duplicate course ids in import")
    if len(set(codes)) != len(codes):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duplicate course codes in import")
    replaced = replace_records(db, Course, [item.model_dump() for item in payload])
    log_activity(
        db,
        actor=current,
        action="dataset.import",
        entity_type="course",
        details={"imported": len(payload), "replaced": replaced},
    )
    db.commit()
    return ImportSummary(entity_type="course", imported=len(payload), replaced=replaced)


@router.delete("/{course_id}")
def delete_course(
    course_id: str,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> dict:
    course = db.get(Course, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    db.delete(course)
    db.commit()
    return {"success": True}
