"""What-if scenario simulation.

The simulator works on copies of the canonical dataset and never writes back:
every generation request gets a freshly perturbed view of faculty, rooms and
students, and the stored records stay exactly as imported.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
from collections.abc import Sequence

from app.schemas.dataset import CourseRecord, FacultyRecord, RoomRecord, StudentRecord
from app.schemas.planning import Constraints, Scenario

logger = logging.getLogger(__name__)


@dataclass
class SimulatedDataset:
    faculty: list[FacultyRecord]
    rooms: list[RoomRecord]
    students: list[StudentRecord]
    modified_student_ids: list[str] = field(default_factory=list)


def simulate_scenario(
    faculty: Sequence[FacultyRecord],
    rooms: Sequence[RoomRecord],
    students: Sequence[StudentRecord],
    courses: Sequence[CourseRecord],
    scenario: Scenario,
) -> SimulatedDataset:
    on_leave = set(scenario.facultyOnLeave)
    unavailable = set(scenario.unavailableRooms)

    simulated_faculty = [member.model_copy(deep=True) for member in faculty if member.id not in on_leave]
    simulated_rooms = [room.model_copy(deep=True) for room in rooms if room.id not in unavailable]
    simulated_students = [student.model_copy(deep=True) for student in students]

    forecast = scenario.facultyWorkload
    if forecast.facultyId:
        simulated_faculty = apply_workload_forecast(simulated_faculty, forecast.facultyId, forecast.newWorkload)

    modified: list[str] = []
    popularity = scenario.studentPopularity
    if popularity.courseId and popularity.increase > 0:
        modified = apply_elective_forecast(simulated_students, courses, popularity.courseId, popularity.increase)

    return SimulatedDataset(
        faculty=simulated_faculty,
        rooms=simulated_rooms,
        students=simulated_students,
        modified_student_ids=modified,
    )


def apply_workload_forecast(
    faculty: list[FacultyRecord],
    key: str,
    new_workload: int,
) -> list[FacultyRecord]:
    """Rewrite the workload of the faculty identified by ``key``.

    An id match wins. Otherwise ``key`` is treated as a display name, which is
    how forecasts were keyed before ids were accepted; every member sharing
    that name is rewritten.
    """
    by_id = [member for member in faculty if member.id == key]
    targets = by_id or [member for member in faculty if member.name == key]
    if not targets:
        logger.info("Workload forecast skipped: no faculty matches %r", key)
        return faculty
    if not by_id and len(targets) > 1:
        logger.warning("Workload forecast %r matches %d faculty by name; all are rewritten", key, len(targets))

    target_ids = {id(member) for member in targets}
    return [
        member.model_copy(update={"workload": new_workload}) if id(member) in target_ids else member
        for member in faculty
    ]


def apply_elective_forecast(
    students: list[StudentRecord],
    courses: Sequence[CourseRecord],
    course_id: str,
    increase: float,
) -> list[str]:
    """Move ``increase`` percent of the cohort onto ``course_id`` in place.

    ``students`` must already be copies. Returns the ids of the students that
    were changed, in input order.
    """
    course = next((item for item in courses if item.id == course_id), None)
    if course is None:
        logger.info("Elective forecast skipped: course %s not found", course_id)
        return []

    increase_count = math.floor(len(students) * (increase / 100))
    eligible = [student for student in students if course.code not in student.elective_choices]
    selected = eligible[:increase_count]
    for student in selected:
        # Replace the last choice so the number of electives stays the same.
        if student.elective_choices:
            student.elective_choices.pop()
        student.elective_choices.append(course.code)
    return [student.id for student in selected]


def describe_scenario(
    scenario: Scenario,
    faculty: Sequence[FacultyRecord],
    courses: Sequence[CourseRecord],
) -> str:
    parts: list[str] = []
    if scenario.facultyOnLeave:
        parts.append(f"Faculty on leave: {len(scenario.facultyOnLeave)}")
    if scenario.unavailableRooms:
        parts.append(f"Unavailable rooms: {len(scenario.unavailableRooms)}")

    popularity = scenario.studentPopularity
    if popularity.courseId:
        course = next((item for item in courses if item.id == popularity.courseId), None)
        if course is not None:
            parts.append(f"Forecast: {course.code} demand +{_format_number(popularity.increase)}%")

    forecast = scenario.facultyWorkload
    if forecast.facultyId:
        member = next(
            (item for item in faculty if item.id == forecast.facultyId),
            None,
        ) or next((item for item in faculty if item.name == forecast.facultyId), None)
        if member is not None:
            parts.append(f"Forecast: {_short_name(member.name)} load to {forecast.newWorkload} hrs")
    return ". ".join(parts)


def describe_program_constraints(constraints: Constraints) -> str:
    teaching = constraints.programSpecific.teachingPractice
    field_work = constraints.programSpecific.fieldWork
    parts: list[str] = []
    if teaching.is_active:
        parts.append(
            f"Teaching Practice ({teaching.program}) is scheduled every {teaching.day} "
            f"from {teaching.startTime} to {teaching.endTime}."
        )
    if field_work.is_active:
        start = field_work.startDate.strftime("%b %d")
        end = field_work.endDate.strftime("%b %d, %Y")
        parts.append(f"{field_work.activityType} for {field_work.program} is scheduled from {start} to {end}.")
    return " ".join(parts)


def _short_name(name: str) -> str:
    # "Dr. Jane Doe" -> "Jane"; single-word names are shown whole.
    tokens = name.split()
    return tokens[1] if len(tokens) > 1 else name


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
