from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.course import Course  # noqa: F401
from app.models.faculty import Faculty  # noqa: F401
from app.models.planning import SchedulingConstraints, SimulationScenario  # noqa: F401
from app.models.room import Room  # noqa: F401
from app.models.student import Student  # noqa: F401
from app.models.timetable import TimetableEditSession, TimetableResult  # noqa: F401
from app.models.user import User, UserRole  # noqa: F401
from app.models.user_session import UserSession  # noqa: F401
