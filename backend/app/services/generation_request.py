from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel

from app.schemas.dataset import CourseRecord
from app.schemas.planning import Constraints
from app.schemas.timetable import (
    DEFAULT_DAYS,
    GenerateTimetableInput,
    GenerateTimetableOutput,
    GenerationOutcome,
    TimetableEntry,
    TimetableResultPayload,
)
from app.services.simulation import SimulatedDataset

if TYPE_CHECKING:
    from app.services.generator import TimetableGenerator

logger = logging.getLogger(__name__)

NO_RESPONSE_ERROR = "AI model failed to return a valid response object."
EMPTY_FOR_PROGRAMS_ERROR = (
    "AI failed to generate a schedule for the selected program(s). "
    "The returned timetable was empty and no report was provided."
)
EMPTY_ERROR = "AI failed to generate a schedule. The returned timetable was empty and no report was provided."
UNKNOWN_ERROR = "An unknown error occurred."


def to_json(value) -> str:
    """Serialize like ``JSON.stringify``: compact separators, unicode kept."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _records_json(records: Sequence[BaseModel]) -> str:
    return to_json([record.model_dump(mode="json", by_alias=True, exclude_none=True) for record in records])


def build_generation_request(
    simulated: SimulatedDataset,
    courses: Sequence[CourseRecord],
    constraints: Constraints,
    *,
    programs: Sequence[str] = (),
    days: Sequence[str] = (),
    existing_timetable: Sequence[TimetableEntry] | None = None,
) -> GenerateTimetableInput:
    """Assemble the generator payload.

    ``existing_timetable`` is forwarded whenever a result is stored, even an
    empty one, so the generator treats it as authoritative instead of
    starting from scratch. ``None`` means there is nothing to preserve.
    """
    return GenerateTimetableInput(
        studentData=_records_json(simulated.students),
        facultyData=_records_json(simulated.faculty),
        courseData=_records_json(courses),
        roomData=_records_json(simulated.rooms),
        constraints=to_json(constraints.model_dump(mode="json")),
        programs=list(programs),
        days=list(days) if days else list(DEFAULT_DAYS),
        existingTimetable=_records_json(existing_timetable) if existing_timetable is not None else None,
    )


def interpret_generation_result(
    request: GenerateTimetableInput,
    result: GenerateTimetableOutput | None,
) -> GenerationOutcome:
    if result is None:
        return GenerationOutcome(success=False, error=NO_RESPONSE_ERROR)

    if result.timetable:
        return GenerationOutcome(success=True, data=_as_payload(result))

    if request.programs:
        return GenerationOutcome(success=False, error=result.report or EMPTY_FOR_PROGRAMS_ERROR)

    # Business rule: an empty answer is only a success when the caller asked
    # to schedule nothing over an empty board ("clear the board").
    if _is_empty_array(request.courseData) and request.existingTimetable is None:
        return GenerationOutcome(success=True, data=_as_payload(result))

    return GenerationOutcome(success=False, error=result.report or EMPTY_ERROR)


def run_generation(generator: "TimetableGenerator", request: GenerateTimetableInput) -> GenerationOutcome:
    try:
        result = generator.generate(request)
    except Exception as exc:
        logger.exception("External timetable generator failed")
        return GenerationOutcome(success=False, error=f"AI Generation Failed: {_error_text(exc)}")
    return interpret_generation_result(request, result)


def _as_payload(result: GenerateTimetableOutput) -> TimetableResultPayload:
    return TimetableResultPayload(timetable=result.timetable, conflicts=result.conflicts, report=result.report)


def _is_empty_array(value: str) -> bool:
    return value.strip() == "[]"


def _error_text(exc: Exception) -> str:
    message = getattr(exc, "message", None) or str(exc)
    return message or UNKNOWN_ERROR
