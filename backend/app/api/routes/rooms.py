from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_session, get_db, require_roles
from app.models.room import Room
from app.models.user import UserRole
from app.schemas.dataset import ImportSummary, RoomCreate, RoomRecord
from app.services.audit import log_activity
from app.services.dataset import load_rooms, next_position, replace_records
from app.services.sessions import SessionContext

router = APIRouter()


@router.get("/", response_model=list[RoomRecord])
def list_rooms(current: SessionContext = Depends(get_current_session), db: Session = Depends(get_db)) -> list[RoomRecord]:
    return load_rooms(db)


@router.post("/", response_model=RoomRecord, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> RoomRecord:
    existing = db.execute(select(Room).where(Room.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room name already exists")
    if payload.id and db.get(Room, payload.id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room id already exists")
    room = Room(**payload.model_dump(exclude_none=True), position=next_position(db, Room))
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


@router.put("/import", response_model=ImportSummary)
def import_rooms(
    payload: list[RoomRecord],
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> ImportSummary:
    ids = [item.id for item in payload]
    if len(set(ids)) != len(ids):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duplicate room ids in import")
    replaced = replace_records(db, Room, [item.model_dump() for item in payload])
    log_activity(
        db,
        actor=current,
        action="dataset.import",
        entity_type="room",
        details={"imported": len(payload), "replaced": replaced},
    )
    db.commit()
    return ImportSummary(entity_type="room", imported=len(payload), replaced=replaced)


@router.delete("/{room_id}")
def delete_room(
    room_id: str,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> dict:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    db.delete(room)
    db.commit()
    return {"success": True}
