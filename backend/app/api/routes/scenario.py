from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_roles
from app.models.user import UserRole
from app.schemas.planning import Scenario, ScenarioPreview
from app.services.audit import log_activity
from app.services.dataset import load_courses, load_faculty, load_rooms, load_scenario, load_students, save_scenario
from app.services.sessions import SessionContext
from app.services.simulation import describe_scenario, simulate_scenario

router = APIRouter()


@router.get("/scenario", response_model=Scenario)
def get_scenario(
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> Scenario:
    return load_scenario(db)


@router.put("/scenario", response_model=Scenario)
def update_scenario(
    payload: Scenario,
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> Scenario:
    saved = save_scenario(db, payload, user_id=current.user_id)
    log_activity(
        db,
        actor=current,
        action="scenario.update",
        entity_type="scenario",
        entity_id="1",
        details={"active": payload.is_active},
    )
    db.commit()
    return saved


@router.delete("/scenario", response_model=Scenario)
def reset_scenario(
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> Scenario:
    saved = save_scenario(db, Scenario(), user_id=current.user_id)
    log_activity(db, actor=current, action="scenario.reset", entity_type="scenario", entity_id="1")
    db.commit()
    return saved


@router.get("/scenario/preview", response_model=ScenarioPreview)
def preview_scenario(
    current: SessionContext = Depends(require_roles(UserRole.admin)),
    db: Session = Depends(get_db),
) -> ScenarioPreview:
    scenario = load_scenario(db)
    faculty = load_faculty(db)
    courses = load_courses(db)
    simulated = simulate_scenario(faculty, load_rooms(db), load_students(db), courses, scenario)
    return ScenarioPreview(
        scenario=scenario,
        is_active=scenario.is_active,
        description=describe_scenario(scenario, faculty, courses),
        faculty_count=len(simulated.faculty),
        room_count=len(simulated.rooms),
        student_count=len(simulated.students),
        modified_students=simulated.modified_student_ids,
    )
