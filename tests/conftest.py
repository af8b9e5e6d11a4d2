"""Shared fixtures: fake Gemini models and sample question sets."""

import json
from types import SimpleNamespace

import pytest
from google.ai import generativelanguage as glm
from google.generativeai.types.generation_types import GenerateContentResponse

from trivia_quiz.config import AppConfig
from trivia_quiz.models import Question


SAMPLE_QUESTIONS = [
    {
        "question": "¿Cuál es la capital de Colombia?",
        "options": ["Medellín", "Bogotá", "Cali", "Cartagena"],
        "correctOption": 1,
    },
    {
        "question": "¿Qué río es el más largo de Colombia?",
        "options": ["Cauca", "Atrato", "Magdalena"],
        "correctOption": 2,
    },
    {
        "question": "¿En qué año se independizó Colombia?",
        "options": ["1810", "1819", "1821", "1830"],
        "correctOption": 0,
    },
]


def envelope(text):
    """REST-shaped generateContent response carrying `text`."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def sdk_response(text):
    """Attribute-style response, like the SDK's GenerateContentResponse."""
    part = SimpleNamespace(text=text)
    content = SimpleNamespace(parts=[part])
    return SimpleNamespace(candidates=[SimpleNamespace(content=content)])


def proto_response(part):
    """Real SDK response wrapping a single candidate with one part."""
    raw = glm.GenerateContentResponse(
        candidates=[glm.Candidate(content=glm.Content(parts=[part]))]
    )
    return GenerateContentResponse.from_response(raw)


class FakeModel:
    """Stands in for genai.GenerativeModel; records every call."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def generate_content_async(self, contents, generation_config=None):
        self.calls.append({"contents": contents, "generation_config": generation_config})
        if self.error is not None:
            raise self.error
        return self.response


class FakeModelFactory:
    def __init__(self, model):
        self.model = model
        self.created = []

    def __call__(self, model_name, api_key):
        self.created.append((model_name, api_key))
        return self.model


@pytest.fixture
def app_config(tmp_path, monkeypatch):
    """Config isolated from the real environment and .env file."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    return AppConfig(prompt="Lista de 3 preguntas", env_path=tmp_path / ".env")


@pytest.fixture
def sample_text():
    return json.dumps(SAMPLE_QUESTIONS)


@pytest.fixture
def sample_questions():
    return [Question.from_dict(d) for d in SAMPLE_QUESTIONS]


def recount_score(state):
    """Score recomputed from the recorded answers."""
    return sum(
        1 for q, a in zip(state.questions, state.selected_answers) if a == q.correct_option
    )
