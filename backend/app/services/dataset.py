from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from app.models.course import Course
from app.models.faculty import Faculty
from app.models.planning import SchedulingConstraints, SimulationScenario
from app.models.room import Room
from app.models.student import Student
from app.schemas.dataset import CourseRecord, FacultyRecord, RoomRecord, StudentRecord
from app.schemas.planning import Constraints, Scenario


def _ordered(db: Session, model) -> list:
    # Import order matters: elective forecasts pick students in list order.
    return list(db.execute(select(model).order_by(model.position, model.id)).scalars())


def next_position(db: Session, model) -> int:
    current = db.execute(select(func.max(model.position))).scalar_one_or_none()
    return 0 if current is None else current + 1


def load_students(db: Session) -> list[StudentRecord]:
    return [StudentRecord.model_validate(item) for item in _ordered(db, Student)]


def load_faculty(db: Session) -> list[FacultyRecord]:
    return [FacultyRecord.model_validate(item) for item in _ordered(db, Faculty)]


def load_courses(db: Session) -> list[CourseRecord]:
    return [CourseRecord.model_validate(item) for item in _ordered(db, Course)]


def load_rooms(db: Session) -> list[RoomRecord]:
    return [RoomRecord.model_validate(item) for item in _ordered(db, Room)]


def available_programs(courses: list[CourseRecord]) -> list[str]:
    return list(dict.fromkeys(course.program for course in courses if course.program))


def replace_records(db: Session, model, rows: list[dict]) -> int:
    """Swap the whole collection for ``rows``; returns how many were removed."""
    removed = db.execute(delete(model)).rowcount or 0
    db.flush()
    for position, row in enumerate(rows):
        if row.get("id") is None:
            row.pop("id", None)
        db.add(model(**row, position=position))
    return removed


def load_constraints(db: Session) -> Constraints:
    record = db.get(SchedulingConstraints, 1)
    if record is None:
        return Constraints()
    return Constraints.model_validate(record.payload)


def save_constraints(db: Session, constraints: Constraints, *, user_id: str | None) -> Constraints:
    record = db.get(SchedulingConstraints, 1)
    payload = constraints.model_dump(mode="json")
    if record is None:
        db.add(SchedulingConstraints(id=1, payload=payload, updated_by_id=user_id))
    else:
        record.payload = payload
        record.updated_by_id = user_id
    return constraints


def load_scenario(db: Session) -> Scenario:
    record = db.get(SimulationScenario, 1)
    if record is None:
        return Scenario()
    return Scenario.model_validate(record.payload)


def save_scenario(db: Session, scenario: Scenario, *, user_id: str | None) -> Scenario:
    record = db.get(SimulationScenario, 1)
    payload = scenario.model_dump(mode="json")
    if record is None:
        db.add(SimulationScenario(id=1, payload=payload, updated_by_id=user_id))
    else:
        record.payload = payload
        record.updated_by_id = user_id
    return scenario
