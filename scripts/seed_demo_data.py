"""Seed a small demo dataset for Timetable Ace.

Run:
  PYTHONPATH=backend python scripts/seed_demo_data.py

Existing students, faculty, courses and rooms are replaced. Demo users are
created once; pass SEED_RESET_PASSWORDS=true to reset their passwords.
"""

from __future__ import annotations

import os

from sqlalchemy import func, select

from app.core.security import get_password_hash
from app.db.bootstrap import init_db
from app.db.session import SessionLocal
from app.models.course import Course
from app.models.faculty import Faculty
from app.models.room import Room
from app.models.student import Student
from app.models.user import User, UserRole
from app.schemas.planning import Constraints
from app.services.dataset import replace_records, save_constraints

DEFAULT_PASSWORD = os.getenv("SEED_DEFAULT_PASSWORD", "TimetableAce123!")
RESET_PASSWORDS = os.getenv("SEED_RESET_PASSWORDS", "false").strip().lower() in {"1", "true", "yes", "on"}

USERS = [
    {"name": "Priya Raman", "email": "admin@university.edu", "role": UserRole.admin},
    {"name": "Dr. Alan Turing", "email": "turing@university.edu", "role": UserRole.faculty},
    {"name": "Asha Menon", "email": "asha@university.edu", "role": UserRole.student},
]

FACULTY = [
    {"id": "F001", "name": "Dr. Alan Turing", "department": "Computer Science", "workload": 12},
    {"id": "F002", "name": "Dr. Grace Hopper", "department": "Computer Science", "workload": 10},
    {"id": "F003", "name": "Dr. Maria Montessori", "department": "Education", "workload": 8},
    {"id": "F004", "name": "Dr. Lev Vygotsky", "department": "Education", "workload": 9},
]

COURSES = [
    {"id": "C001", "code": "CS101", "name": "Data Structures", "program": "B.Tech CSE"},
    {"id": "C002", "code": "CS102", "name": "Discrete Mathematics", "program": "B.Tech CSE"},
    {"id": "C003", "code": "CS201", "name": "Operating Systems", "program": "B.Tech CSE"},
    {"id": "C004", "code": "ED101", "name": "Educational Psychology", "program": "B.Ed"},
    {"id": "C005", "code": "ED102", "name": "Curriculum Design", "program": "B.Ed"},
]

ROOMS = [
    {"id": "R001", "name": "Room 101", "capacity": 60, "type": "lecture"},
    {"id": "R002", "name": "Room 102", "capacity": 45, "type": "lecture"},
    {"id": "R003", "name": "Lab 1", "capacity": 30, "type": "lab"},
]

STUDENTS = [
    {"id": "S001", "name": "Asha Menon", "program": "B.Tech CSE", "elective_choices": ["CS101", "CS102"]},
    {"id": "S002", "name": "Ben Okafor", "program": "B.Tech CSE", "elective_choices": ["CS102", "CS201"]},
    {"id": "S003", "name": "Chen Wei", "program": "B.Tech CSE", "elective_choices": ["CS201"]},
    {"id": "S004", "name": "Dana Levi", "program": "B.Ed", "elective_choices": ["ED101", "ED102"]},
    {"id": "S005", "name": "Elif Kaya", "program": "B.Ed", "elective_choices": ["ED101"]},
]

CONSTRAINTS = {
    "maxClassesPerDayPerFaculty": 4,
    "programSpecific": {
        "teachingPractice": {"program": "B.Ed", "day": "Wednesday", "startTime": "09:00", "endTime": "12:00"},
    },
}


def upsert_user(session, *, name: str, email: str, role: UserRole) -> User:
    existing = session.execute(select(User).where(func.lower(User.email) == email.lower())).scalar_one_or_none()
    if existing is None:
        existing = User(name=name, email=email.lower(), hashed_password=get_password_hash(DEFAULT_PASSWORD), role=role)
        session.add(existing)
    else:
        existing.name = name
        existing.role = role
        existing.is_active = True
        if RESET_PASSWORDS:
            existing.hashed_password = get_password_hash(DEFAULT_PASSWORD)
    session.flush()
    return existing


def main() -> None:
    init_db()
    with SessionLocal() as session:
        admin = None
        for profile in USERS:
            user = upsert_user(session, **profile)
            if profile["role"] == UserRole.admin:
                admin = user

        replace_records(session, Student, [dict(row) for row in STUDENTS])
        replace_records(session, Faculty, [dict(row) for row in FACULTY])
        replace_records(session, Course, [dict(row) for row in COURSES])
        replace_records(session, Room, [dict(row) for row in ROOMS])
        save_constraints(session, Constraints.model_validate(CONSTRAINTS), user_id=admin.id if admin else None)
        session.commit()

    print("Demo data seeded successfully.")
    print(f"Students: {len(STUDENTS)} | Faculty: {len(FACULTY)} | Courses: {len(COURSES)} | Rooms: {len(ROOMS)}")
    print("")
    print("Login credentials for seeded users (all use same password):")
    print(f"  Password: {DEFAULT_PASSWORD}")
    for profile in USERS:
        print(f"  {profile['role'].value.title():<8} {profile['email']}")


if __name__ == "__main__":
    main()
