# backend/tests/conftest.py
from types import SimpleNamespace

import pytest

from app import create_app
from config import RelayConfig


class FakeRecognizer:
    """Records requests and answers with canned results."""

    def __init__(self, results=None, error=None):
        self.results = [["hello there"], ["general kenobi", "general canobi"]] if results is None else results
        self.error = error
        self.requests = []

    def recognize(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.results


def gemini_response(*texts):
    parts = [SimpleNamespace(text=t) for t in texts]
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


class FakeGenerator:
    def __init__(self, response=None, error=None):
        self.response = gemini_response("Alex: So what is it?", "Sam: Let me explain.") if response is None else response
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def relay_config(tmp_path):
    return RelayConfig(api_key="test-key", upload_folder=tmp_path / "uploads")


@pytest.fixture
def recognizer():
    return FakeRecognizer()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def app(relay_config, recognizer, generator):
    app = create_app(relay_config, recognizer=recognizer, generator=generator)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
