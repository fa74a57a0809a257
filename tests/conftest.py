import json

import pytest
from fastapi.testclient import TestClient

from quiz_engine.main import app, get_model_client


def build_quiz(count=5, summary=True):
    quiz = {
        "subject": "Biology",
        "topicName": "Photosynthesis",
        "questions": [
            {
                "id": i + 1,
                "question": f"Question {i + 1}?",
                "options": ["A", "B", "C", "D"],
                "answer": i % 4,
                "explanation": "Because.",
            }
            for i in range(count)
        ],
    }
    if summary:
        quiz["summary"] = "Test what you know about how plants make food."
    return quiz


class StubClient:
    """Stands in for GeminiClient; replies come from ``responses`` keyed by model."""

    def __init__(self, responses=None, default=None):
        self.responses = responses or {}
        self.default = default
        self.calls = []

    def generate(self, model_name, prompt, attachment=None):
        self.calls.append((model_name, prompt, attachment))
        reply = self.responses.get(model_name, self.default)
        if isinstance(reply, Exception):
            raise reply
        if reply is None:
            raise RuntimeError(f"no stubbed reply for {model_name}")
        return reply


@pytest.fixture
def quiz_factory():
    return build_quiz


@pytest.fixture
def stub_factory():
    return StubClient


@pytest.fixture
def quiz():
    return build_quiz()


@pytest.fixture
def stub(quiz):
    return StubClient(default=json.dumps(quiz))


@pytest.fixture
def client(stub):
    app.dependency_overrides[get_model_client] = lambda: stub
    yield TestClient(app)
    app.dependency_overrides.clear()
