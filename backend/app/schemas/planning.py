from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.timetable import SELECTABLE_DAYS


class StudentPopularityForecast(BaseModel):
    courseId: str | None = None
    increase: float = Field(default=0, ge=0, le=1000)


class FacultyWorkloadForecast(BaseModel):
    # Historically keyed by faculty display name; ids are accepted as well.
    facultyId: str | None = None
    newWorkload: int = Field(default=0, ge=0, le=200)


class Scenario(BaseModel):
    facultyOnLeave: list[str] = Field(default_factory=list, max_length=1000)
    unavailableRooms: list[str] = Field(default_factory=list, max_length=1000)
    studentPopularity: StudentPopularityForecast = Field(default_factory=StudentPopularityForecast)
    facultyWorkload: FacultyWorkloadForecast = Field(default_factory=FacultyWorkloadForecast)

    @field_validator("facultyOnLeave", "unavailableRooms")
    @classmethod
    def normalize_ids(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(item.strip() for item in value if item.strip()))

    @property
    def is_active(self) -> bool:
        return bool(
            self.facultyOnLeave
            or self.unavailableRooms
            or self.studentPopularity.courseId
            or self.facultyWorkload.facultyId
        )


class TeachingPracticeBlock(BaseModel):
    program: str = ""
    day: str = ""
    startTime: str = ""
    endTime: str = ""

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        day = value.strip()
        if day and day not in SELECTABLE_DAYS:
            raise ValueError("Invalid day value")
        return day

    @property
    def is_active(self) -> bool:
        return bool(self.program and self.day)


class FieldWorkBlock(BaseModel):
    program: str = ""
    startDate: date | None = None
    endDate: date | None = None
    activityType: str = "Field Work"

    @property
    def is_active(self) -> bool:
        return bool(self.program and self.startDate and self.endDate)


class ProgramSpecificConstraints(BaseModel):
    model_config = ConfigDict(extra="allow")

    teachingPractice: TeachingPracticeBlock = Field(default_factory=TeachingPracticeBlock)
    fieldWork: FieldWorkBlock = Field(default_factory=FieldWorkBlock)


class Constraints(BaseModel):
    """Scheduling constraints forwarded to the generator.

    Only ``programSpecific`` is interpreted locally; every other key is kept
    verbatim so institutions can add free-form rules without a schema change.
    """

    model_config = ConfigDict(extra="allow")

    programSpecific: ProgramSpecificConstraints = Field(default_factory=ProgramSpecificConstraints)


class ScenarioPreview(BaseModel):
    scenario: Scenario
    is_active: bool
    description: str
    faculty_count: int
    room_count: int
    student_count: int
    modified_students: list[str]
