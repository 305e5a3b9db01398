from datetime import timedelta
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_session, get_db
from app.core.config import get_settings
from app.core.security import create_access_token, get_password_hash, verify_password
from app.models.user import User
from app.schemas.user import SessionOut, Token, UserCreate, UserLogin, UserOut
from app.services.audit import log_activity
from app.services.sessions import SessionContext, open_session, revoke_session

settings = get_settings()
router = APIRouter()
logger = logging.getLogger(__name__)


def _user_by_email(db: Session, email: str) -> User | None:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, db: Session = Depends(get_db)) -> UserOut:
    if _user_by_email(db, payload.email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = User(
        name=payload.name,
        email=payload.email,
        hashed_password=get_password_hash(payload.password),
        role=payload.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered") from exc

    db.refresh(user)
    return user


@router.post("/login", response_model=Token)
def login(payload: UserLogin, db: Session = Depends(get_db)) -> Token:
    user = _user_by_email(db, payload.email)
    if user is None or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")
    if payload.role and payload.role != user.role:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Role does not match user account")

    ttl = timedelta(minutes=settings.access_token_expire_minutes)
    session = open_session(db, user=user, ttl=ttl)
    db.commit()
    logger.info("Session opened | user_id=%s | role=%s | session_id=%s", user.id, user.role.value, session.id)

    access_token = create_access_token(user.id, session_id=session.id, expires_delta=ttl)
    return Token(access_token=access_token, token_type="bearer", session_id=session.id, user=UserOut.model_validate(user))


@router.get("/me", response_model=SessionOut)
def me(current: SessionContext = Depends(get_current_session)) -> SessionOut:
    return SessionOut(
        session_id=current.session_id,
        role=current.role,
        expires_at=current.expires_at,
        user=UserOut.model_validate(current.user),
    )


@router.post("/logout")
def logout(current: SessionContext = Depends(get_current_session), db: Session = Depends(get_db)) -> dict:
    revoke_session(db, session_id=current.session_id)
    log_activity(db, actor=current, action="auth.logout", entity_type="session", entity_id=current.session_id)
    db.commit()
    return {"success": True}
