from datetime import datetime, timezone
import json

import pytest
import requests

from app.api.deps import get_timetable_generator
from app.core.config import Settings
from app.core.exceptions import ConfigurationError, GenerationError
from app.schemas.timetable import MISSING_REPORT_TEXT, GenerateTimetableInput, SuggestFacultyInput
from app.services.generator import (
    GeminiTimetableGenerator,
    parse_model_json,
    prepare_constraints,
    render_generation_prompt,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no body")
        return self._payload


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def _model_reply(content) -> FakeResponse:
    text = content if isinstance(content, str) else json.dumps(content)
    return FakeResponse(payload={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def _settings(**overrides):
    values = {"gemini_api_key": "test-key", "gemini_model": "gemini-1.5-flash", "generation_timeout_seconds": 5}
    values.update(overrides)
    return Settings(**values)


def _request():
    return GenerateTimetableInput(
        studentData="[]",
        facultyData='[{"id":"F1","name":"Dr. Alan Turing"}]',
        courseData='[{"id":"C1","code":"CS101","name":"Data Structures"}]',
        roomData="[]",
        constraints='{"maxClassesPerDay":6}',
    )


def test_prepare_constraints_injects_current_date():
    now = datetime(2025, 1, 6, 8, 30, tzinfo=timezone.utc)
    rendered = json.loads(prepare_constraints('{"maxClassesPerDay":6}', now=now))
    assert rendered == {"maxClassesPerDay": 6, "currentDate": "2025-01-06T08:30:00+00:00"}

    with pytest.raises(GenerationError):
        prepare_constraints("[1, 2]")


def test_generation_prompt_embeds_every_input():
    prompt = render_generation_prompt(_request())
    assert '[{"id":"C1","code":"CS101","name":"Data Structures"}]' in prompt
    assert '"currentDate"' in prompt
    assert '"Monday", "Tuesday"' in prompt
    assert "12:00 - 01:00 (Lunch Break)" in prompt
    assert "None provided." in prompt


def test_parse_model_json_strips_code_fences():
    assert parse_model_json('```json\n{"a": 1}\n```') == {"a": 1}
    assert parse_model_json('  {"a": 2} ') == {"a": 2}


def test_generate_posts_to_gemini_and_coerces_reply():
    http = FakeHttp(
        _model_reply(
            {
                "timetable": [
                    {
                        "day": "Monday",
                        "time": "09:00 - 10:00",
                        "course": "Data Structures",
                        "courseCode": "CS101",
                        "faculty": "Dr. Alan Turing",
                        "room": "Room 101",
                    }
                ],
                "conflicts": [{"type": "room", "description": "Double booked", "involved": ["Room 101"]}],
            }
        )
    )
    generator = GeminiTimetableGenerator(_settings(), session=http)

    result = generator.generate(_request())

    assert result.timetable[0].courseCode == "CS101"
    assert result.conflicts[0].involved == ["Room 101"]
    assert result.report == MISSING_REPORT_TEXT

    url, kwargs = http.calls[0]
    assert url == "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent"
    assert kwargs["headers"]["x-goog-api-key"] == "test-key"
    assert kwargs["json"]["generationConfig"]["responseMimeType"] == "application/json"
    assert kwargs["timeout"] == 5


def test_generate_without_api_key_reports_a_generation_failure():
    http = FakeHttp()
    generator = GeminiTimetableGenerator(_settings(gemini_api_key=None), session=http)
    with pytest.raises(GenerationError) as excinfo:
        generator.generate(_request())
    assert excinfo.value.message == "Timetable generation failed: GEMINI_API_KEY is not configured"
    assert isinstance(excinfo.value.__cause__, ConfigurationError)
    assert http.calls == []

    with pytest.raises(ConfigurationError):
        generator.suggest_faculty(SuggestFacultyInput(course="{}", facultyData="[]", timetable="[]"))


@pytest.mark.parametrize(
    ("http", "fragment"),
    [
        (FakeHttp(error=requests.ConnectionError("refused")), "Could not reach the AI service"),
        (FakeHttp(FakeResponse(status_code=429, text="quota exceeded")), "HTTP 429"),
        (FakeHttp(FakeResponse(payload={"candidates": []})), "AI model returned no output."),
        (FakeHttp(_model_reply("not json at all")), "invalid JSON"),
    ],
)
def test_generate_wraps_transport_and_payload_failures(http, fragment):
    generator = GeminiTimetableGenerator(_settings(), session=http)
    with pytest.raises(GenerationError) as excinfo:
        generator.generate(_request())
    assert excinfo.value.message.startswith("Timetable generation failed: ")
    assert fragment in excinfo.value.message


def test_suggest_faculty():
    http = FakeHttp(_model_reply({"facultyName": " Dr. Grace Hopper ", "justification": "Lowest load."}))
    generator = GeminiTimetableGenerator(_settings(), session=http)
    request = SuggestFacultyInput(course='{"code":"CS101"}', facultyData="[]", timetable="[]")

    suggestion = generator.suggest_faculty(request)
    assert suggestion.facultyName == "Dr. Grace Hopper"
    assert suggestion.justification == "Lowest load."

    http.response = _model_reply({"justification": "No name"})
    with pytest.raises(GenerationError):
        generator.suggest_faculty(request)


def test_generator_dependency_reuses_one_client():
    first = get_timetable_generator()
    assert isinstance(first, GeminiTimetableGenerator)
    assert get_timetable_generator() is first
