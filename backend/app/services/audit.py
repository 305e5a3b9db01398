from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog
from app.services.sessions import SessionContext


def log_activity(
    db: Session,
    *,
    actor: SessionContext | None,
    action: str,
    entity_type: str | None = None,
    entity_id: str | None = None,
    details: dict | None = None,
) -> ActivityLog:
    record = ActivityLog(
        user_id=actor.user_id if actor is not None else None,
        user_name=actor.user.name if actor is not None else None,
        role=actor.role.value if actor is not None else None,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details or {},
    )
    db.add(record)
    return record
