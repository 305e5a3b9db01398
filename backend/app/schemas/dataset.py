from pydantic import BaseModel, Field, field_validator

RECORD_CONFIG = {"from_attributes": True, "populate_by_name": True}


def _strip_required(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        raise ValueError("Value cannot be empty")
    return trimmed


def _strip_optional(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


class StudentRecord(BaseModel):
    id: str = Field(min_length=1, max_length=36)
    name: str | None = Field(default=None, max_length=200)
    program: str | None = Field(default=None, max_length=100)
    elective_choices: list[str] = Field(default_factory=list, alias="electiveChoices", max_length=50)

    model_config = RECORD_CONFIG

    @field_validator("elective_choices")
    @classmethod
    def normalize_elective_choices(cls, value: list[str]) -> list[str]:
        # Duplicates are kept; elective forecasts only replace the last choice.
        return [code.strip() for code in value if code.strip()]


class FacultyRecord(BaseModel):
    id: str = Field(min_length=1, max_length=36)
    name: str = Field(min_length=1, max_length=200)
    workload: int = Field(default=0, ge=0, le=200)
    email: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=200)

    model_config = RECORD_CONFIG

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("email", "department")
    @classmethod
    def normalize_optional_text(cls, value: str | None) -> str | None:
        return _strip_optional(value)


class CourseRecord(BaseModel):
    id: str = Field(min_length=1, max_length=36)
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    program: str | None = Field(default=None, max_length=100)

    model_config = RECORD_CONFIG

    @field_validator("code", "name")
    @classmethod
    def normalize_required_text(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("program")
    @classmethod
    def normalize_program(cls, value: str | None) -> str | None:
        return _strip_optional(value)


class RoomRecord(BaseModel):
    id: str = Field(min_length=1, max_length=36)
    name: str = Field(min_length=1, max_length=100)
    capacity: int | None = Field(default=None, ge=1, le=5000)
    type: str | None = Field(default=None, max_length=50)

    model_config = RECORD_CONFIG


class StudentCreate(StudentRecord):
    id: str | None = Field(default=None, min_length=1, max_length=36)


class FacultyCreate(FacultyRecord):
    id: str | None = Field(default=None, min_length=1, max_length=36)


class CourseCreate(CourseRecord):
    id: str | None = Field(default=None, min_length=1, max_length=36)


class RoomCreate(RoomRecord):
    id: str | None = Field(default=None, min_length=1, max_length=36)


class ImportSummary(BaseModel):
    entity_type: str
    imported: int
    replaced: int
