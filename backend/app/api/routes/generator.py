import logging
from time import perf_counter

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_timetable_generator, require_roles
from app.models.user import UserRole
from app.schemas.timetable import (
    GenerateTimetableRequest,
    GenerationOutcome,
    SuggestFacultyInput,
    SuggestFacultyOutcome,
    SuggestFacultyRequest,
)
from app.services.audit import log_activity
from app.services.dataset import (
    load_constraints,
    load_courses,
    load_faculty,
    load_rooms,
    load_scenario,
    load_students,
)
from app.services.generation_guard import generation_guard
from app.services.generation_request import build_generation_request, run_generation, to_json
from app.services.generator import TimetableGenerator
from app.services.sessions import SessionContext
from app.services.simulation import simulate_scenario
from app.services.timetable_store import RESULT_ID, discard_edit_sessions, load_result, save_result, working_entries

router = APIRouter()
logger = logging.getLogger(__name__)

COURSE_NOT_FOUND_ERROR = "Course not found"


@router.post("/timetable/generate", response_model=GenerationOutcome)
def generate_timetable(
    payload: GenerateTimetableRequest,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
    generator: TimetableGenerator = Depends(get_timetable_generator),
) -> GenerationOutcome:
    with generation_guard.hold():
        started = perf_counter()
        scenario = load_scenario(db)
        courses = load_courses(db)
        simulated = simulate_scenario(load_faculty(db), load_rooms(db), load_students(db), courses, scenario)
        existing = load_result(db)
        request = build_generation_request(
            simulated,
            courses,
            load_constraints(db),
            programs=payload.programs,
            days=payload.days,
            existing_timetable=existing.timetable if existing is not None else None,
        )
        logger.info(
            "TIMETABLE GENERATION START | user_id=%s | programs=%s | days=%s | simulation=%s | existing=%s",
            current.user_id,
            ",".join(request.programs) or "all",
            ",".join(request.days),
            scenario.is_active,
            existing is not None,
        )

        outcome = run_generation(generator, request)
        outcome.simulation_active = scenario.is_active
        wall_ms = int((perf_counter() - started) * 1000)

        if not outcome.success:
            logger.warning(
                "TIMETABLE GENERATION FAILED | user_id=%s | wall_ms=%s | error=%s",
                current.user_id,
                wall_ms,
                outcome.error,
            )
            return outcome

        save_result(db, outcome.data, user_id=current.user_id)
        discard_edit_sessions(db)
        log_activity(
            db,
            actor=current,
            action="timetable.generate",
            entity_type="timetable_result",
            entity_id=str(RESULT_ID),
            details={
                "programs": request.programs,
                "days": request.days,
                "entries": len(outcome.data.timetable),
                "conflicts": len(outcome.data.conflicts),
                "simulation_active": scenario.is_active,
            },
        )
        db.commit()
        logger.info(
            "TIMETABLE GENERATION COMPLETE | user_id=%s | entries=%s | conflicts=%s | wall_ms=%s",
            current.user_id,
            len(outcome.data.timetable),
            len(outcome.data.conflicts),
            wall_ms,
        )
        return outcome


@router.post("/timetable/suggest-faculty", response_model=SuggestFacultyOutcome)
def suggest_faculty(
    payload: SuggestFacultyRequest,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
    generator: TimetableGenerator = Depends(get_timetable_generator),
) -> SuggestFacultyOutcome:
    course = next((item for item in load_courses(db) if item.name == payload.course), None)
    if course is None:
        return SuggestFacultyOutcome(success=False, error=COURSE_NOT_FOUND_ERROR)

    entries = working_entries(db, actor=current)
    request = SuggestFacultyInput(
        course=to_json(course.model_dump(mode="json", exclude_none=True)),
        facultyData=to_json([item.model_dump(mode="json", exclude_none=True) for item in load_faculty(db)]),
        timetable=to_json([entry.model_dump() for entry in entries]),
    )
    try:
        suggestion = generator.suggest_faculty(request)
    except Exception as exc:
        logger.exception("Faculty suggestion failed | user_id=%s | course=%s", current.user_id, course.code)
        message = getattr(exc, "message", None) or str(exc) or "An unknown error occurred."
        return SuggestFacultyOutcome(success=False, error=f"AI Suggestion Failed: {message}")

    logger.info(
        "Faculty suggestion | user_id=%s | course=%s | slot=%s %s | faculty=%s",
        current.user_id,
        course.code,
        payload.day,
        payload.time,
        suggestion.facultyName,
    )
    return SuggestFacultyOutcome(success=True, data=suggestion)
