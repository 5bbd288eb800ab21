import pytest
from fastapi.testclient import TestClient

from app import app
from config import Settings, get_settings


@pytest.fixture
def settings():
    return Settings(api_key="test-key", api_key_source="API_KEY", model="gemini-test-model")


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


class GeminiStub:
    """Records every ask_gemini call and answers with a canned text."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def __call__(self, contents, model_name=None, api_key=None, **kwargs):
        self.calls.append({"contents": contents, "model_name": model_name, "api_key": api_key, **kwargs})
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def gemini_stub():
    return GeminiStub
