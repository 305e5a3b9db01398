from datetime import date

from app.schemas.dataset import CourseRecord, FacultyRecord, RoomRecord, StudentRecord
from app.schemas.planning import Constraints, Scenario
from app.services.simulation import (
    apply_workload_forecast,
    describe_program_constraints,
    describe_scenario,
    simulate_scenario,
)


def _faculty():
    return [
        FacultyRecord(id="F1", name="Dr. Alan Turing", workload=12),
        FacultyRecord(id="F2", name="Dr. Grace Hopper", workload=10),
        FacultyRecord(id="F3", name="Dr. Ada Lovelace", workload=8),
    ]


def _rooms():
    return [RoomRecord(id="R1", name="Room 101"), RoomRecord(id="R2", name="Lab 1")]


def _courses():
    return [
        CourseRecord(id="C1", code="CS101", name="Data Structures", program="B.Tech CSE"),
        CourseRecord(id="C2", code="ED201", name="Educational Psychology", program="B.Ed"),
    ]


def _students(count=10):
    return [StudentRecord(id=f"S{index}", electiveChoices=["X1", "X2"]) for index in range(count)]


def test_inactive_scenario_returns_equal_copies():
    faculty, rooms, students = _faculty(), _rooms(), _students(3)
    simulated = simulate_scenario(faculty, rooms, students, _courses(), Scenario())

    assert simulated.faculty == faculty
    assert simulated.rooms == rooms
    assert simulated.students == students
    assert simulated.modified_student_ids == []
    assert simulated.students[0] is not students[0]


def test_leave_and_room_filters_preserve_order():
    scenario = Scenario(facultyOnLeave=["F2", "missing"], unavailableRooms=["R1"])
    simulated = simulate_scenario(_faculty(), _rooms(), [], _courses(), scenario)

    assert [member.id for member in simulated.faculty] == ["F1", "F3"]
    assert [room.id for room in simulated.rooms] == ["R2"]


def test_elective_boost_replaces_last_choice_of_first_eligible_students():
    students = _students(10)
    students[0] = StudentRecord(id="S0", electiveChoices=["CS101"])
    students[2] = StudentRecord(id="S2", electiveChoices=[])
    scenario = Scenario(studentPopularity={"courseId": "C1", "increase": 30})

    simulated = simulate_scenario([], [], students, _courses(), scenario)

    # floor(10 * 0.3) = 3 picks from the students not already taking CS101.
    assert simulated.modified_student_ids == ["S1", "S2", "S3"]
    by_id = {student.id: student for student in simulated.students}
    assert by_id["S1"].elective_choices == ["X1", "CS101"]
    assert by_id["S2"].elective_choices == ["CS101"]
    assert by_id["S4"].elective_choices == ["X1", "X2"]
    assert students[1].elective_choices == ["X1", "X2"]


def test_elective_boost_floors_and_skips_unknown_course():
    students = _students(3)
    small = simulate_scenario([], [], students, _courses(), Scenario(studentPopularity={"courseId": "C1", "increase": 50}))
    assert small.modified_student_ids == ["S0"]

    unknown = simulate_scenario([], [], students, _courses(), Scenario(studentPopularity={"courseId": "C9", "increase": 50}))
    assert unknown.modified_student_ids == []
    assert unknown.students == students


def test_elective_boost_on_large_cohort_changes_exact_share():
    students = _students(100)
    scenario = Scenario(studentPopularity={"courseId": "C1", "increase": 20})

    simulated = simulate_scenario([], [], students, _courses(), scenario)

    assert len(simulated.modified_student_ids) == 20
    assert simulated.modified_student_ids == [f"S{index}" for index in range(20)]
    assert all(len(student.elective_choices) == 2 for student in simulated.students)
    assert sum("CS101" in student.elective_choices for student in simulated.students) == 20


def test_elective_boost_keeps_duplicate_choices():
    student = StudentRecord(id="S1", electiveChoices=["X1", "X1"])
    simulated = simulate_scenario(
        [], [], [student], _courses(), Scenario(studentPopularity={"courseId": "C1", "increase": 100})
    )
    assert simulated.students[0].elective_choices == ["X1", "CS101"]


def test_workload_forecast_prefers_id_then_name():
    faculty = _faculty()
    by_id = apply_workload_forecast(faculty, "F2", 4)
    assert [member.workload for member in by_id] == [12, 4, 8]

    by_name = apply_workload_forecast(faculty, "Dr. Ada Lovelace", 2)
    assert [member.workload for member in by_name] == [12, 10, 2]

    untouched = apply_workload_forecast(faculty, "Nobody", 1)
    assert [member.workload for member in untouched] == [12, 10, 8]


def test_workload_forecast_is_idempotent():
    faculty = _faculty() + [FacultyRecord(id="F9", name="Jane Doe", workload=4)]
    scenario = Scenario(facultyWorkload={"facultyId": "Jane Doe", "newWorkload": 10})

    once = simulate_scenario(faculty, [], [], _courses(), scenario)
    twice = simulate_scenario(once.faculty, [], [], _courses(), scenario)

    assert twice.faculty == once.faculty
    assert [member.workload for member in once.faculty] == [12, 10, 8, 10]
    assert faculty[3].workload == 4


def test_workload_forecast_rewrites_every_name_match():
    faculty = [FacultyRecord(id="A", name="Dr. Sam Lee", workload=5), FacultyRecord(id="B", name="Dr. Sam Lee", workload=6)]
    updated = apply_workload_forecast(faculty, "Dr. Sam Lee", 9)
    assert [member.workload for member in updated] == [9, 9]


def test_workload_forecast_runs_after_leave_filter():
    scenario = Scenario(facultyOnLeave=["F1"], facultyWorkload={"facultyId": "F1", "newWorkload": 1})
    simulated = simulate_scenario(_faculty(), [], [], _courses(), scenario)
    assert [member.id for member in simulated.faculty] == ["F2", "F3"]
    assert all(member.workload != 1 for member in simulated.faculty)


def test_describe_scenario():
    scenario = Scenario(
        facultyOnLeave=["F1"],
        unavailableRooms=["R1", "R2"],
        studentPopularity={"courseId": "C1", "increase": 25},
        facultyWorkload={"facultyId": "F2", "newWorkload": 6},
    )
    assert describe_scenario(scenario, _faculty(), _courses()) == (
        "Faculty on leave: 1. Unavailable rooms: 2. Forecast: CS101 demand +25%. Forecast: Grace load to 6 hrs"
    )
    assert describe_scenario(Scenario(), _faculty(), _courses()) == ""


def test_describe_program_constraints():
    constraints = Constraints.model_validate(
        {
            "programSpecific": {
                "teachingPractice": {"program": "B.Ed", "day": "Wednesday", "startTime": "09:00", "endTime": "12:00"},
                "fieldWork": {"program": "B.Ed", "startDate": "2025-03-03", "endDate": "2025-03-14"},
            },
            "maxClassesPerDay": 6,
        }
    )
    assert constraints.programSpecific.fieldWork.startDate == date(2025, 3, 3)
    assert describe_program_constraints(constraints) == (
        "Teaching Practice (B.Ed) is scheduled every Wednesday from 09:00 to 12:00. "
        "Field Work for B.Ed is scheduled from Mar 03 to Mar 14, 2025."
    )
    assert describe_program_constraints(Constraints()) == ""
