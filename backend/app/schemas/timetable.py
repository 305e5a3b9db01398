from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
SELECTABLE_DAYS = DEFAULT_DAYS + ["Saturday"]

LUNCH_SLOT = "12:00 - 01:00 (Lunch Break)"
TIME_SLOTS = [
    "09:00 - 10:00",
    "10:00 - 11:00",
    "11:00 - 12:00",
    LUNCH_SLOT,
    "02:00 - 03:00",
    "03:00 - 04:00",
    "04:00 - 05:00",
]

MISSING_REPORT_TEXT = "The AI model failed to generate a report, but the timetable (if any) is provided."

EditableField = Literal["course", "faculty", "room"]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


class TimetableEntry(BaseModel):
    day: str = ""
    time: str = ""
    course: str = ""
    courseCode: str = ""
    faculty: str = ""
    room: str = ""

    @field_validator("day", "time", "course", "courseCode", "faculty", "room", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _as_text(value)


class Conflict(BaseModel):
    type: str = ""
    description: str = ""
    involved: list[str] = Field(default_factory=list)

    @field_validator("type", "description", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _as_text(value)

    @field_validator("involved", mode="before")
    @classmethod
    def coerce_involved(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [_as_text(item) for item in value if item is not None]


class TimetableResultPayload(BaseModel):
    timetable: list[TimetableEntry] = Field(default_factory=list)
    conflicts: list[Conflict] = Field(default_factory=list)
    report: str = ""


class GenerateTimetableOutput(TimetableResultPayload):
    report: str = MISSING_REPORT_TEXT

    @classmethod
    def coerce(cls, raw: Any) -> "GenerateTimetableOutput":
        """Build an output from whatever the model sent back.

        Malformed fields fall back to empty defaults instead of failing the
        whole generation; list items that are not objects are dropped.
        """
        if not isinstance(raw, dict):
            raw = {}
        report = raw.get("report")
        return cls(
            timetable=_coerce_items(raw.get("timetable"), TimetableEntry),
            conflicts=_coerce_items(raw.get("conflicts"), Conflict),
            report=report if isinstance(report, str) and report.strip() else MISSING_REPORT_TEXT,
        )


def _coerce_items(value: Any, model: type[BaseModel]) -> list:
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if not isinstance(item, dict):
            continue
        try:
            items.append(model.model_validate(item))
        except ValidationError:
            continue
    return items


class GenerateTimetableInput(BaseModel):
    studentData: str
    facultyData: str
    courseData: str
    roomData: str
    constraints: str
    programs: list[str] = Field(default_factory=list)
    days: list[str] = Field(default_factory=lambda: list(DEFAULT_DAYS))
    existingTimetable: str | None = None


class GenerationOutcome(BaseModel):
    success: bool
    data: TimetableResultPayload | None = None
    error: str | None = None
    simulation_active: bool = False


class GenerateTimetableRequest(BaseModel):
    programs: list[str] = Field(default_factory=list, max_length=50)
    days: list[str] = Field(default_factory=list, max_length=6)

    @field_validator("programs")
    @classmethod
    def normalize_programs(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(item.strip() for item in value if item.strip()))

    @field_validator("days")
    @classmethod
    def validate_days(cls, value: list[str]) -> list[str]:
        days = list(dict.fromkeys(item.strip() for item in value if item.strip()))
        invalid = [day for day in days if day not in SELECTABLE_DAYS]
        if invalid:
            raise ValueError(f"Invalid day value(s): {', '.join(invalid)}")
        return days


class SuggestFacultyInput(BaseModel):
    course: str
    facultyData: str
    timetable: str


class SuggestFacultyOutput(BaseModel):
    facultyName: str
    justification: str = ""


class SuggestFacultyRequest(BaseModel):
    day: str
    time: str
    course: str = Field(min_length=1, max_length=200)


class SuggestFacultyOutcome(BaseModel):
    success: bool
    data: SuggestFacultyOutput | None = None
    error: str | None = None


class EntryChange(BaseModel):
    day: str = Field(min_length=1)
    time: str = Field(min_length=1)
    field: EditableField
    value: str = Field(max_length=200)


class EditSessionOut(BaseModel):
    original: list[TimetableEntry]
    entries: list[TimetableEntry]


class EditSaveOut(BaseModel):
    result: TimetableResultPayload
    changes: list[str]


class CellRef(BaseModel):
    day: str = Field(min_length=1)
    time: str = Field(min_length=1)


class GridCell(BaseModel):
    day: str
    entry: TimetableEntry | None = None


class GridRow(BaseModel):
    time: str
    is_lunch_break: bool
    cells: list[GridCell]


class TimetableGridOut(BaseModel):
    days: list[str]
    rows: list[GridRow]
    conflict_count: int
