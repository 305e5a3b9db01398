import json

from app.core.exceptions import GenerationError
from app.schemas.dataset import CourseRecord, FacultyRecord, RoomRecord, StudentRecord
from app.schemas.planning import Constraints
from app.schemas.timetable import (
    DEFAULT_DAYS,
    MISSING_REPORT_TEXT,
    GenerateTimetableInput,
    GenerateTimetableOutput,
    TimetableEntry,
)
from app.services.generation_request import (
    EMPTY_ERROR,
    EMPTY_FOR_PROGRAMS_ERROR,
    NO_RESPONSE_ERROR,
    build_generation_request,
    interpret_generation_result,
    run_generation,
    to_json,
)
from app.services.simulation import SimulatedDataset

ENTRY = {
    "day": "Monday",
    "time": "09:00 - 10:00",
    "course": "Data Structures",
    "courseCode": "CS101",
    "faculty": "Dr. Alan Turing",
    "room": "Room 101",
}


def _request(**overrides):
    values = {
        "studentData": "[]",
        "facultyData": "[]",
        "courseData": '[{"id":"C1"}]',
        "roomData": "[]",
        "constraints": "{}",
    }
    values.update(overrides)
    return GenerateTimetableInput(**values)


def test_to_json_is_compact_and_keeps_unicode():
    assert to_json({"name": "Zoë", "items": [1, 2]}) == '{"name":"Zoë","items":[1,2]}'


def test_build_request_serializes_simulated_dataset():
    simulated = SimulatedDataset(
        faculty=[FacultyRecord(id="F1", name="Dr. Alan Turing", workload=12)],
        rooms=[RoomRecord(id="R1", name="Room 101")],
        students=[StudentRecord(id="S1", electiveChoices=["CS101"])],
    )
    courses = [CourseRecord(id="C1", code="CS101", name="Data Structures")]

    request = build_generation_request(simulated, courses, Constraints(), programs=["B.Tech CSE"])

    assert json.loads(request.studentData) == [{"id": "S1", "electiveChoices": ["CS101"]}]
    assert json.loads(request.facultyData) == [{"id": "F1", "name": "Dr. Alan Turing", "workload": 12}]
    assert request.courseData == '[{"id":"C1","code":"CS101","name":"Data Structures"}]'
    assert json.loads(request.roomData) == [{"id": "R1", "name": "Room 101"}]
    assert json.loads(request.constraints)["programSpecific"]["teachingPractice"]["program"] == ""
    assert request.programs == ["B.Tech CSE"]
    assert request.days == DEFAULT_DAYS
    assert request.existingTimetable is None


def test_build_request_forwards_existing_timetable_even_when_empty():
    simulated = SimulatedDataset(faculty=[], rooms=[], students=[])

    empty = build_generation_request(simulated, [], Constraints(), existing_timetable=[])
    assert empty.existingTimetable == "[]"
    assert empty.courseData == "[]"

    filled = build_generation_request(
        simulated, [], Constraints(), days=["Saturday"], existing_timetable=[TimetableEntry(**ENTRY)]
    )
    assert json.loads(filled.existingTimetable) == [ENTRY]
    assert filled.days == ["Saturday"]


def test_interpret_missing_result():
    outcome = interpret_generation_result(_request(), None)
    assert outcome.success is False
    assert outcome.error == NO_RESPONSE_ERROR


def test_interpret_non_empty_timetable_is_success():
    result = GenerateTimetableOutput.coerce({"timetable": [ENTRY], "conflicts": [], "report": "ok"})
    outcome = interpret_generation_result(_request(), result)
    assert outcome.success is True
    assert outcome.data.timetable[0].courseCode == "CS101"
    assert outcome.data.report == "ok"


def test_interpret_empty_timetable_for_programs_uses_report_or_default():
    with_report = GenerateTimetableOutput(timetable=[], report="No rooms left.")
    outcome = interpret_generation_result(_request(programs=["B.Ed"]), with_report)
    assert outcome.success is False
    assert outcome.error == "No rooms left."

    without_report = GenerateTimetableOutput(timetable=[], report="")
    outcome = interpret_generation_result(_request(programs=["B.Ed"]), without_report)
    assert outcome.error == EMPTY_FOR_PROGRAMS_ERROR


def test_interpret_clear_the_board():
    result = GenerateTimetableOutput(timetable=[], report="Nothing to schedule.")
    outcome = interpret_generation_result(_request(courseData=" [] "), result)
    assert outcome.success is True
    assert outcome.data.timetable == []


def test_interpret_empty_timetable_with_existing_board_fails():
    result = GenerateTimetableOutput(timetable=[], report="")
    outcome = interpret_generation_result(_request(courseData="[]", existingTimetable="[]"), result)
    assert outcome.success is False
    assert outcome.error == EMPTY_ERROR

    outcome = interpret_generation_result(_request(), result)
    assert outcome.error == EMPTY_ERROR


def test_coerce_fills_defaults_and_drops_garbage():
    result = GenerateTimetableOutput.coerce(
        {"timetable": [ENTRY, "junk", {"day": "Tuesday", "time": 10}], "conflicts": "nope", "report": "  "}
    )
    assert len(result.timetable) == 2
    assert result.timetable[1].time == "10"
    assert result.timetable[1].course == ""
    assert result.conflicts == []
    assert result.report == MISSING_REPORT_TEXT
    assert GenerateTimetableOutput.coerce(None).timetable == []


class _RaisingGenerator:
    def __init__(self, error):
        self.error = error

    def generate(self, request):
        raise self.error

    def suggest_faculty(self, request):
        raise self.error


def test_run_generation_normalizes_failures():
    outcome = run_generation(_RaisingGenerator(GenerationError("Timetable generation failed: quota")), _request())
    assert outcome.success is False
    assert outcome.error == "AI Generation Failed: Timetable generation failed: quota"

    outcome = run_generation(_RaisingGenerator(RuntimeError("")), _request())
    assert outcome.error == "AI Generation Failed: An unknown error occurred."
