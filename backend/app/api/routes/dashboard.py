from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_session, get_db
from app.schemas.dashboard import DashboardSummary, RecordCounts
from app.services.dataset import (
    available_programs,
    load_constraints,
    load_courses,
    load_faculty,
    load_rooms,
    load_scenario,
    load_students,
)
from app.services.sessions import SessionContext
from app.services.simulation import describe_program_constraints, describe_scenario
from app.services.timetable_store import load_result

router = APIRouter()


@router.get("/dashboard/summary", response_model=DashboardSummary)
def dashboard_summary(
    current: SessionContext = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> DashboardSummary:
    faculty = load_faculty(db)
    courses = load_courses(db)
    scenario = load_scenario(db)
    constraints = load_constraints(db)
    program_notice = describe_program_constraints(constraints)
    result = load_result(db)

    return DashboardSummary(
        counts=RecordCounts(
            students=len(load_students(db)),
            faculty=len(faculty),
            courses=len(courses),
            rooms=len(load_rooms(db)),
        ),
        available_programs=available_programs(courses),
        simulation_active=scenario.is_active,
        simulation_description=describe_scenario(scenario, faculty, courses),
        program_constraint_active=bool(program_notice),
        program_constraint_description=program_notice,
        has_timetable=result is not None,
        conflict_count=len(result.conflicts) if result is not None else 0,
    )
