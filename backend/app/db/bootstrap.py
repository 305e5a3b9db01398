from __future__ import annotations

import logging

from sqlalchemy import inspect

from app.db.base import Base
from app.db.session import engine
import app.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "users": {"id", "email", "role"},
    "user_sessions": {"id", "user_id", "revoked_at"},
    "students": {"id", "elective_choices"},
    "faculty": {"id", "name", "workload"},
    "courses": {"id", "code", "program"},
    "rooms": {"id", "name"},
    "timetable_results": {"id", "timetable", "conflicts", "report"},
}


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    missing = missing_schema_columns()
    if missing:
        logger.warning("Database schema is missing columns: %s. Run `alembic upgrade head`.", missing)


def missing_schema_columns(connection=None) -> dict[str, list[str]]:
    if connection is None:
        with engine.connect() as owned:
            return missing_schema_columns(owned)

    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing: dict[str, list[str]] = {}
    for table_name, columns in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            missing[table_name] = sorted(columns)
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        absent = sorted(columns - existing)
        if absent:
            missing[table_name] = absent
    return missing
