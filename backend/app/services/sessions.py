"""Server-side login sessions.

A :class:`SessionContext` is opened at login, resolved for every
authenticated request and revoked at logout. Nothing about the session lives
in ambient global state; routes receive it through a dependency.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.models.user import User, UserRole
from app.models.user_session import UserSession


@dataclass(frozen=True)
class SessionContext:
    session_id: str
    user: User
    role: UserRole
    expires_at: datetime

    @property
    def user_id(self) -> str:
        return self.user.id


def open_session(db: Session, *, user: User, ttl: timedelta) -> UserSession:
    record = UserSession(
        user_id=user.id,
        role=user.role,
        expires_at=datetime.now(timezone.utc) + ttl,
    )
    db.add(record)
    db.flush()
    return record


def resolve_session(db: Session, *, session_id: str, user_id: str) -> SessionContext | None:
    record = db.get(UserSession, session_id)
    if record is None or record.user_id != user_id or record.revoked_at is not None:
        return None
    if _as_aware(record.expires_at) <= datetime.now(timezone.utc):
        return None
    user = db.get(User, user_id)
    if user is None or not user.is_active:
        return None
    return SessionContext(session_id=record.id, user=user, role=record.role, expires_at=_as_aware(record.expires_at))


def revoke_session(db: Session, *, session_id: str) -> bool:
    record = db.get(UserSession, session_id)
    if record is None or record.revoked_at is not None:
        return False
    record.revoked_at = datetime.now(timezone.utc)
    return True


def _as_aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
