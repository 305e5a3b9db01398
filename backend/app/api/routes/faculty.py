from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_session, get_db, require_roles
from app.models.faculty import Faculty
from app.models.user import UserRole
from app.schemas.dataset import FacultyCreate, FacultyRecord, ImportSummary
from app.services.audit import log_activity
from app.services.dataset import load_faculty, next_position, replace_records
from app.services.sessions import SessionContext

router = APIRouter()


@router.get("/", response_model=list[FacultyRecord])
def list_faculty(
    current: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> list[FacultyRecord]:
    return load_faculty(db)


@router.post("/", response_model=FacultyRecord, status_code=status.HTTP_201_CREATED)
def create_faculty(
    payload: FacultyCreate,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> FacultyRecord:
    if payload.id and db.get(Faculty, payload.id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Faculty id already exists")
    faculty = Faculty(**payload.model_dump(exclude_none=True), position=next_position(db, Faculty))
    db.add(faculty)
    db.commit()
    db.refresh(faculty)
    return faculty


@router.put("/import", response_model=ImportSummary)
def import_faculty(
    payload: list[FacultyRecord],
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> ImportSummary:
    ids = [item.id for item in payload]
    if len(set(ids)) != len(ids):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duplicate faculty ids in import")
    replaced = replace_records(db, Faculty, [item.model_dump() for item in payload])
    log_activity(
        db,
        actor=current,
        action="dataset.import",
        entity_type="faculty",
        details={"imported": len(payload), "replaced": replaced},
    )
    db.commit()
    return ImportSummary(entity_type="faculty", imported=len(payload), replaced=replaced)


@router.delete("/{faculty_id}")
def delete_faculty(
    faculty_id: str,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> dict:
    faculty = db.get(Faculty, faculty_id)
    if faculty is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Faculty not found")
    db.delete(faculty)
    db.commit()
    return {"success": True}
