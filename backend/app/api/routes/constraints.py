from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_session, get_db, require_roles
from app.models.user import UserRole
from app.schemas.planning import Constraints
from app.services.audit import log_activity
from app.services.dataset import load_constraints, save_constraints
from app.services.sessions import SessionContext

router = APIRouter()


@router.get("/constraints", response_model=Constraints)
def get_constraints(
    current: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> Constraints:
    return load_constraints(db)


@router.put("/constraints", response_model=Constraints)
def update_constraints(
    payload: Constraints,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> Constraints:
    saved = save_constraints(db, payload, user_id=current.user_id)
    log_activity(db, actor=current, action="constraints.update", entity_type="constraints", entity_id="1")
    db.commit()
    return saved
