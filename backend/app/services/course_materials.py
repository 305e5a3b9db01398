"""Lecture material outlines for a scheduled class.

Content comes from templates registered per course code or course name.
Courses without their own template get the generic outline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import re

from app.schemas.materials import CourseMaterialOutline, MaterialKind, MaterialSection
from app.schemas.timetable import TimetableEntry

GENERIC_TEMPLATE = "generic"
CLOSING_SLIDE = "Thank You & Questions?"


@dataclass(frozen=True)
class MaterialTemplate:
    name: str
    agenda: list[str]
    slides: list[MaterialSection]
    notes: list[MaterialSection]
    keys: tuple[str, ...] = field(default_factory=tuple)


_registry: dict[str, MaterialTemplate] = {}


def _key(value: str) -> str:
    return value.strip().casefold()


def register_template(template: MaterialTemplate) -> None:
    for key in template.keys:
        _registry[_key(key)] = template


def resolve_template(course_name: str, course_code: str = "") -> MaterialTemplate:
    for candidate in (course_code, course_name):
        if candidate and _key(candidate) in _registry:
            return _registry[_key(candidate)]
    return GENERIC


def safe_file_stem(course_name: str) -> str:
    return re.sub(r"[^a-z0-9]", "_", course_name, flags=re.IGNORECASE).lower()


def build_outline(entry: TimetableEntry, kind: MaterialKind) -> CourseMaterialOutline:
    template = resolve_template(entry.course, entry.courseCode)
    suffix = "slides.pptx" if kind == "slides" else "notes.pdf"
    return CourseMaterialOutline(
        kind=kind,
        course=entry.course,
        course_code=entry.courseCode,
        faculty=entry.faculty,
        title=entry.course,
        template=template.name,
        agenda=list(template.agenda),
        sections=[section.model_copy(deep=True) for section in (template.slides if kind == "slides" else template.notes)],
        closing=CLOSING_SLIDE if kind == "slides" else f"{entry.course} | Faculty: {entry.faculty}",
        file_name=f"{safe_file_stem(entry.course)}_{suffix}",
    )


GENERIC = MaterialTemplate(
    name=GENERIC_TEMPLATE,
    agenda=[
        "Introduction to the Topic",
        "Core Concept 1: Detailed Explanation",
        "Core Concept 2: Detailed Explanation",
        "Practical Applications and Case Studies",
        "Summary and Q&A",
    ],
    slides=[
        MaterialSection(
            heading="Core Concept 1",
            body=(
                "A detailed explanation of the first major concept of the lecture, with definitions, "
                "diagrams and illustrative examples."
            ),
        ),
        MaterialSection(
            heading="Practical Applications",
            body=(
                "Real-world examples, case studies or problems where the discussed concepts are applied, "
                "showing the relevance of the material in a professional context."
            ),
        ),
    ],
    notes=[
        MaterialSection(
            heading="Introduction to the Topic",
            body=(
                "These notes cover the fundamental concepts, key principles and practical applications of "
                "the subject. Review them before each class."
            ),
        ),
        MaterialSection(
            heading="Key Concept A: In-depth Analysis",
            body=(
                "Formal definitions, historical context and foundational theories, with the key terminology "
                "and the relationships between sub-concepts."
            ),
        ),
        MaterialSection(
            heading="Practical Application: Case Study",
            body=(
                "A worked case study that applies the theory to a practical problem in the field."
            ),
        ),
    ],
)

DATA_STRUCTURES = MaterialTemplate(
    name="data-structures",
    keys=("Data Structures",),
    agenda=[
        "What are Data Structures?",
        "Arrays vs. Linked Lists",
        "Understanding Big O Notation",
        "Overview of Stacks & Queues",
    ],
    slides=[
        MaterialSection(
            heading="Arrays vs. Linked Lists",
            bullets=[
                "Arrays store elements in contiguous memory locations.",
                "Arrays give O(1) random access by index.",
                "Arrays are inefficient for insertions/deletions in the middle (O(n)).",
                "Linked lists store nodes with pointers to the next node.",
                "Linked lists are slow for access (O(n)), as the list must be traversed.",
                "Linked lists insert/delete at the ends in O(1).",
            ],
        ),
        MaterialSection(
            heading="Big O Notation",
            body=(
                "Describes how the run time or space requirements of an algorithm grow as the input size grows."
            ),
            bullets=[
                "O(1) - Constant Time: Accessing an array element.",
                "O(log n) - Logarithmic Time: Binary search.",
                "O(n) - Linear Time: Searching an unsorted list.",
                "O(n^2) - Quadratic Time: Bubble sort.",
            ],
        ),
    ],
    notes=[
        MaterialSection(
            heading="1. What is a Data Structure?",
            body=(
                "A data structure is a specialized format for organizing, processing, retrieving and storing "
                "data so that it can be accessed and updated efficiently."
            ),
        ),
        MaterialSection(
            heading="2. The Array",
            body="A collection of items of the same type stored at contiguous memory locations.",
            bullets=[
                "Access Time (by index): O(1).",
                "Search Time (unsorted): O(n).",
                "Insertion/Deletion: O(n), since subsequent elements must shift.",
            ],
        ),
        MaterialSection(
            heading="3. The Linked List",
            body="Nodes holding data and a pointer to the next node, not stored contiguously.",
            bullets=[
                "Access Time: O(n).",
                "Insertion/Deletion (at ends): O(1).",
                "Dynamic Size: grows and shrinks as needed.",
            ],
        ),
    ],
)

register_template(DATA_STRUCTURES)
