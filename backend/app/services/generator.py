"""External timetable generator.

Scheduling itself is delegated to a hosted language model. Everything in the
application talks to it through :class:`TimetableGenerator`, so tests and
alternative backends only need ``generate`` and ``suggest_faculty``.
"""
from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from time import perf_counter
from typing import Any, Protocol

import requests

from app.core.config import Settings
from app.core.exceptions import AppError, ConfigurationError, GenerationError
from app.schemas.timetable import (
    LUNCH_SLOT,
    TIME_SLOTS,
    GenerateTimetableInput,
    GenerateTimetableOutput,
    SuggestFacultyInput,
    SuggestFacultyOutput,
)

logger = logging.getLogger(__name__)


class TimetableGenerator(Protocol):
    def generate(self, request: GenerateTimetableInput) -> GenerateTimetableOutput | None:
        ...

    def suggest_faculty(self, request: SuggestFacultyInput) -> SuggestFacultyOutput:
        ...


GENERATION_PROMPT = """You are a master scheduler AI. Your task is to generate a conflict-free, weekly academic timetable and then immediately write a detailed analysis report on the schedule you just created.

You will be given the following data as JSON strings:
- Student Data: {studentData}
- Faculty Data: {facultyData}
- ALL Course Data: {courseData}
- Room Data: {roomData}
- Scheduling Constraints: {constraints}
- Programs to Schedule For (optional): {programs}
- Days to Schedule For (optional): {days}
- Existing Timetable (optional, for modification): {existingTimetable}

The timetable runs for {slot_count} time slots per day: {slots}.
The default days are Monday to Friday (5 days). If the 'days' array is provided, only schedule classes on those specific days.

Grid layout: rows are time slots, columns are days, and each cell holds the course information for that day and time slot.

Diversified scheduling:
- Every time slot except the lunch break must have a class scheduled.
- Use many different courses and distribute them evenly across days and time slots; do not repeat the same course in every slot.
- The lunch break ({lunch}) is the only exception and must remain empty.

Step 1: generate the timetable, following these rules precisely.
1. Filter courses by program: if a programs array is provided, schedule ONLY the courses associated with those programs. If it is empty, schedule ALL courses from the course data.
2. Modify, don't erase: if an existing timetable is provided, treat it as the source of truth. Add the newly requested courses to it and do not remove or alter existing entries unless that is strictly necessary to resolve a high-priority conflict for a course you are adding.
3. No double bookings (highest priority): a faculty member, a student group (based on enrolled courses) or a room cannot be in two places at once.
4. Constraint adherence: enforce faculty availability, room capacity, course requirements such as labs, and program-specific time blocks such as teaching practice and field work. The constraints carry a currentDate for evaluating date ranges.
5. Dense schedule: fill as many slots as possible for the requested courses and days. An empty timetable is a failure unless no courses were requested.
6. Conflict logging: if a conflict is unavoidable, schedule one class and record the other in the conflicts array instead of leaving the slot empty.
7. Day-specific scheduling: only place new classes on the requested days.

Step 2: write the analysis report in the report field. It must include:
1. Summary of changes (what was added when modifying an existing timetable).
2. Constraint adherence verification for the newly added classes.
3. Faculty workload analysis: hours assigned to key faculty members versus their expected workload.
4. Resource utilization analysis: overall room utilization percentage and peak/off-peak hours.
5. Actionable recommendations.

Fallback protocol: if none of the requested courses can be scheduled because of a fundamental contradiction, return the existing timetable unmodified (if provided), otherwise leave the timetable array empty, and explain the exact reason in the report. Do not error out.

Output: a single JSON object with the keys timetable, conflicts and report.
- timetable: array of objects with day, time (one of the time slots above), course, courseCode, faculty and room.
- conflicts: array of objects with type, description and involved (array of identifiers).
- report: string.
"""

SUGGESTION_PROMPT = """You are an academic scheduling assistant. Recommend the single best faculty member to teach the course below in the current timetable.

Course: {course}
Faculty Data: {facultyData}
Current Timetable: {timetable}

Prefer faculty whose expertise matches the course, who have spare workload capacity, and who are not already teaching in the same day and time slot. Respond with a JSON object with the keys facultyName (exactly as it appears in the faculty data) and justification (one or two sentences).
"""


def prepare_constraints(raw_constraints: str, *, now: datetime | None = None) -> str:
    """Inject ``currentDate`` so date-range constraints can be evaluated."""
    constraints = json.loads(raw_constraints) if raw_constraints.strip() else {}
    if not isinstance(constraints, dict):
        raise GenerationError("Constraints must be a JSON object")
    constraints["currentDate"] = (now or datetime.now(timezone.utc)).isoformat()
    return json.dumps(constraints, indent=2, ensure_ascii=False)


def render_generation_prompt(request: GenerateTimetableInput, *, now: datetime | None = None) -> str:
    return GENERATION_PROMPT.format(
        studentData=request.studentData,
        facultyData=request.facultyData,
        courseData=request.courseData,
        roomData=request.roomData,
        constraints=prepare_constraints(request.constraints, now=now),
        programs=json.dumps(request.programs, ensure_ascii=False),
        days=json.dumps(request.days, ensure_ascii=False),
        existingTimetable=request.existingTimetable or "None provided.",
        slot_count=len(TIME_SLOTS),
        slots=", ".join(f'"{slot}"' for slot in TIME_SLOTS),
        lunch=LUNCH_SLOT,
    )


def render_suggestion_prompt(request: SuggestFacultyInput) -> str:
    return SUGGESTION_PROMPT.format(
        course=request.course,
        facultyData=request.facultyData,
        timetable=request.timetable,
    )


def parse_model_json(text: str) -> Any:
    content = text.strip()
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else ""
    if content.endswith("```"):
        content = content[:-3]
    return json.loads(content.strip())


class GeminiTimetableGenerator:
    def __init__(self, settings: Settings, *, session: requests.Session | None = None) -> None:
        self._settings = settings
        self._http = session or requests.Session()

    @property
    def endpoint(self) -> str:
        base = self._settings.gemini_api_base_url.rstrip("/")
        return f"{base}/models/{self._settings.gemini_model}:generateContent"

    def generate(self, request: GenerateTimetableInput) -> GenerateTimetableOutput | None:
        try:
            raw = self._complete(render_generation_prompt(request))
        except AppError as exc:
            raise GenerationError(f"Timetable generation failed: {exc.message}", details=exc.details) from exc
        return GenerateTimetableOutput.coerce(raw)

    def suggest_faculty(self, request: SuggestFacultyInput) -> SuggestFacultyOutput:
        raw = self._complete(render_suggestion_prompt(request))
        if not isinstance(raw, dict) or not str(raw.get("facultyName") or "").strip():
            raise GenerationError("AI model did not name a faculty member.")
        return SuggestFacultyOutput(
            facultyName=str(raw["facultyName"]).strip(),
            justification=str(raw.get("justification") or ""),
        )

    def _complete(self, prompt: str) -> Any:
        if not self._settings.gemini_configured:
            raise ConfigurationError("GEMINI_API_KEY is not configured")

        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }
        started = perf_counter()
        try:
            response = self._http.post(
                self.endpoint,
                headers={"Content-Type": "application/json", "x-goog-api-key": self._settings.gemini_api_key},
                json=body,
                timeout=self._settings.generation_timeout_seconds,
            )
        except requests.RequestException as exc:
            raise GenerationError(f"Could not reach the AI service: {exc}") from exc

        elapsed_ms = int((perf_counter() - started) * 1000)
        logger.info(
            "GEMINI CALL | model=%s | status=%s | prompt_chars=%s | wall_ms=%s",
            self._settings.gemini_model,
            response.status_code,
            len(prompt),
            elapsed_ms,
        )
        if response.status_code >= 400:
            raise GenerationError(
                f"AI service returned HTTP {response.status_code}: {response.text[:300]}",
                details={"status_code": response.status_code},
            )

        try:
            payload = response.json()
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise GenerationError("AI model returned no output.") from exc

        try:
            return parse_model_json(text)
        except ValueError as exc:
            raise GenerationError(f"AI model returned invalid JSON: {exc}") from exc
