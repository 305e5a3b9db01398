import os

# Keep the app's own engine off disk; tests swap the session factory below.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")
os.environ.setdefault("GEMINI_API_KEY", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db, get_timetable_generator
from app.db.base import Base
from app.main import app
from app.schemas.timetable import GenerateTimetableOutput, SuggestFacultyOutput
from app.services.generation_guard import generation_guard


class FakeGenerator:
    """Stands in for the hosted model; records every request it receives."""

    def __init__(self):
        self.output: GenerateTimetableOutput | None = GenerateTimetableOutput()
        self.error: Exception | None = None
        self.suggestion = SuggestFacultyOutput(facultyName="Dr. Alan Turing", justification="Has capacity.")
        self.requests = []
        self.suggestion_requests = []

    def generate(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.output

    def suggest_faculty(self, request):
        self.suggestion_requests.append(request)
        if self.error is not None:
            raise self.error
        return self.suggestion


@pytest.fixture()
def fake_generator():
    return FakeGenerator()


@pytest.fixture()
def db_session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(db_session_factory):
    session = db_session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session_factory, fake_generator):
    def override_get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_timetable_generator] = lambda: fake_generator

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    if generation_guard.busy:
        generation_guard.release()


def register_user(client, *, role: str, email: str, name: str = "Test User", password: str = "password123"):
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    return response.json()


def login_headers(client, *, email: str, password: str = "password123", role: str | None = None) -> dict[str, str]:
    payload = {"email": email, "password": password}
    if role:
        payload["role"] = role
    response = client.post("/api/auth/login", json=payload)
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def admin_headers(client):
    register_user(client, role="admin", email="admin@example.com", name="Ada Admin")
    return login_headers(client, email="admin@example.com")


@pytest.fixture()
def faculty_headers(client):
    register_user(client, role="faculty", email="faculty@example.com", name="Dr. Alan Turing")
    return login_headers(client, email="faculty@example.com")


@pytest.fixture()
def student_headers(client):
    register_user(client, role="student", email="student@example.com", name="Sam Student")
    return login_headers(client, email="student@example.com")


SAMPLE_STUDENTS = [
    {"id": "S1", "name": "Asha", "program": "B.Tech CSE", "electiveChoices": ["CS501", "CS502"]},
    {"id": "S2", "name": "Ben", "program": "B.Tech CSE", "electiveChoices": ["CS101"]},
    {"id": "S3", "name": "Chen", "program": "B.Ed", "electiveChoices": []},
    {"id": "S4", "name": "Dana", "program": "B.Ed", "electiveChoices": ["ED201", "ED202"]},
]
SAMPLE_FACULTY = [
    {"id": "F1", "name": "Dr. Alan Turing", "workload": 12},
    {"id": "F2", "name": "Dr. Grace Hopper", "workload": 10},
]
SAMPLE_COURSES = [
    {"id": "C1", "code": "CS101", "name": "Data Structures", "program": "B.Tech CSE"},
    {"id": "C2", "code": "ED201", "name": "Educational Psychology", "program": "B.Ed"},
]
SAMPLE_ROOMS = [
    {"id": "R1", "name": "Room 101", "capacity": 60, "type": "lecture"},
    {"id": "R2", "name": "Lab 1", "capacity": 30, "type": "lab"},
]

SAMPLE_TIMETABLE = [
    {
        "day": "Monday",
        "time": "09:00 - 10:00",
        "course": "Data Structures",
        "courseCode": "CS101",
        "faculty": "Dr. Alan Turing",
        "room": "Room 101",
    },
    {
        "day": "Tuesday",
        "time": "10:00 - 11:00",
        "course": "Educational Psychology",
        "courseCode": "ED201",
        "faculty": "Dr. Grace Hopper",
        "room": "Lab 1",
    },
]


def seed_dataset(client, headers):
    for path, rows in (
        ("/api/students/import", SAMPLE_STUDENTS),
        ("/api/faculty/import", SAMPLE_FACULTY),
        ("/api/courses/import", SAMPLE_COURSES),
        ("/api/rooms/import", SAMPLE_ROOMS),
    ):
        response = client.put(path, json=rows, headers=headers)
        assert response.status_code == 200, response.text


def generate_sample_timetable(client, headers, fake_generator):
    fake_generator.output = GenerateTimetableOutput.coerce(
        {"timetable": SAMPLE_TIMETABLE, "conflicts": [], "report": "All good."}
    )
    response = client.post("/api/timetable/generate", json={}, headers=headers)
    assert response.status_code == 200, response.text
    assert response.json()["success"] is True
    return response.json()
