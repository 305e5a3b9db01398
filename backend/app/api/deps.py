from collections.abc import Callable, Generator, Iterable
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.security import decode_token
from app.db.session import SessionLocal
from app.models.user import UserRole
from app.services.generator import GeminiTimetableGenerator, TimetableGenerator
from app.services.sessions import SessionContext, resolve_session

security = HTTPBearer()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def get_timetable_generator() -> TimetableGenerator:
    # Shared across requests; owns the HTTP connection pool.
    return GeminiTimetableGenerator(get_settings())


def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> SessionContext:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(credentials.credentials)
    except JWTError as exc:
        raise credentials_exception from exc

    user_id = payload.get("sub")
    session_id = payload.get("sid")
    if user_id is None or session_id is None:
        raise credentials_exception

    context = resolve_session(db, session_id=session_id, user_id=user_id)
    if context is None:
        raise credentials_exception
    return context


def require_roles(*roles: UserRole) -> Callable[[SessionContext], SessionContext]:
    allowed_roles: Iterable[UserRole] = set(roles)

    def role_checker(current: SessionContext = Depends(get_current_session)) -> SessionContext:
        if current.role not in allowed_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current

    return role_checker
