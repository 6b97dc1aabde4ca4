import json
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from adapters.factory import reset_adapters


class FakeTokenSource:
    configured = True

    def __init__(self, token: str = "test-token"):
        self._token = token
        self.calls = 0

    async def token(self) -> str:
        self.calls += 1
        return self._token


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content.decode())


class FakeGeminiModels:
    def __init__(self, text: str | None = None, error: Exception | None = None):
        self.text = text
        self.error = error
        self.calls: list[dict] = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


def fake_gemini_client(models: FakeGeminiModels):
    return SimpleNamespace(aio=SimpleNamespace(models=models))


@pytest.fixture
def token_source():
    return FakeTokenSource()


@pytest.fixture(autouse=True)
def _fresh_adapters():
    reset_adapters()
    yield
    reset_adapters()


@pytest.fixture
def client():
    from main import app

    return TestClient(app)
