from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_session, get_db, require_roles
from app.models.student import Student
from app.models.user import UserRole
from app.schemas.dataset import ImportSummary, StudentCreate, StudentRecord
from app.services.audit import log_activity
from app.services.dataset import load_students, next_position, replace_records
from app.services.sessions import SessionContext

router = APIRouter()


@router.get("/", response_model=list[StudentRecord])
def list_students(
    current: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> list[StudentRecord]:
    return load_students(db)


@router.post("/", response_model=StudentRecord, status_code=status.HTTP_201_CREATED)
def create_student(
    payload: StudentCreate,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> StudentRecord:
    if payload.id and db.get(Student, payload.id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Student id already exists")
    data = payload.model_dump(exclude_none=True)
    student = Student(**data, position=next_position(db, Student))
    db.add(student)
    db.commit()
    db.refresh(student)
    return student


@router.put("/import", response_model=ImportSummary)
def import_students(
    payload: list[StudentRecord],
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> ImportSummary:
    ids = [item.id for item in payload]
    if len(set(ids)) != len(ids):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duplicate student ids in import")
    replaced = replace_records(db, Student, [item.model_dump() for item in payload])
    log_activity(
        db,
        actor=current,
        action="dataset.import",
        entity_type="student",
        details={"imported": len(payload), "replaced": replaced},
    )
    db.commit()
    return ImportSummary(entity_type="student", imported=len(payload), replaced=replaced)


@router.delete("/{student_id}")
def delete_student(
    student_id: str,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> dict:
    student = db.get(Student, student_id)
    if student is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Student not found")
    db.delete(student)
    db.commit()
    return {"success": True}
