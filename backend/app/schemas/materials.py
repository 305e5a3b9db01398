from typing import Literal

from pydantic import BaseModel, Field

MaterialKind = Literal["slides", "notes"]


class MaterialSection(BaseModel):
    heading: str
    body: str = ""
    bullets: list[str] = Field(default_factory=list)


class CourseMaterialOutline(BaseModel):
    kind: MaterialKind
    course: str
    course_code: str
    faculty: str
    title: str
    template: str
    agenda: list[str]
    sections: list[MaterialSection]
    closing: str
    file_name: str
