from pydantic import BaseModel


class RecordCounts(BaseModel):
    students: int
    faculty: int
    courses: int
    rooms: int


class DashboardSummary(BaseModel):
    counts: RecordCounts
    available_programs: list[str]
    simulation_active: bool
    simulation_description: str
    program_constraint_active: bool
    program_constraint_description: str
    has_timetable: bool
    conflict_count: int
