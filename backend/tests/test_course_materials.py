from app.schemas.materials import MaterialSection
from app.schemas.timetable import TimetableEntry
from app.services.course_materials import (
    GENERIC,
    MaterialTemplate,
    build_outline,
    register_template,
    resolve_template,
    safe_file_stem,
)


def _entry(course="Data Structures", code="CS101"):
    return TimetableEntry(day="Monday", time="09:00 - 10:00", course=course, courseCode=code, faculty="Dr. Alan Turing")


def test_safe_file_stem():
    assert safe_file_stem("Data Structures & Algorithms (II)") == "data_structures___algorithms__ii_"


def test_templates_resolve_by_code_then_name_case_insensitively():
    assert resolve_template("data structures").name == "data-structures"
    assert resolve_template("Unknown", "").name == GENERIC.name

    register_template(
        MaterialTemplate(
            name="thermo",
            keys=("ME210",),
            agenda=["Laws of Thermodynamics"],
            slides=[MaterialSection(heading="Entropy")],
            notes=[],
        )
    )
    assert resolve_template("Anything", "me210").name == "thermo"


def test_notes_outline_names_faculty_in_closing():
    outline = build_outline(_entry(), "notes")
    assert outline.kind == "notes"
    assert outline.file_name == "data_structures_notes.pdf"
    assert outline.closing == "Data Structures | Faculty: Dr. Alan Turing"
    assert outline.sections[0].heading == "1. What is a Data Structure?"


def test_outline_sections_are_copies():
    outline = build_outline(_entry("History", "HI100"), "slides")
    outline.sections[0].bullets.append("mutated")
    assert GENERIC.slides[0].bullets == []
