"""Shared pytest fixtures for all tests."""

import json

import pytest

from scriptalchemist import monitoring
from scriptalchemist.settings import ProviderConfig

ENV_KEYS = [
    "AI_PROVIDER",
    "AI_API_KEY",
    "AI_API_URL",
    "AI_MODEL",
    "AI_TIMEOUT",
    "GEMINI_API_KEY",
    "API_KEY",
    "ANALYSIS_STRICT",
]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep real keys and the user's settings file out of every test."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SCRIPTALCHEMIST_SETTINGS", str(tmp_path / "settings.yaml"))
    monkeypatch.setattr(monitoring, "_default", monitoring.Telemetry())
    yield


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        if text is None:
            text = json.dumps(body) if body is not None else ""
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class FakeSession:
    """Stands in for requests.Session; records every post() call.

    ``responses`` items are FakeResponse objects or exceptions to raise.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.calls.append({"url": url, "headers": headers or {}, "json": json, "timeout": timeout})
        if not self.responses:
            raise AssertionError("FakeSession received an unexpected request")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def fake_session():
    def _make(*responses):
        return FakeSession(responses)
    return _make


@pytest.fixture
def make_config():
    def _make(provider="openai", api_key="sk-test-1234567890", api_url=None, model=None):
        return ProviderConfig(provider=provider, api_key=api_key, api_url=api_url, model=model)
    return _make


SAMPLE_ANALYSIS = {
    "hookStrategy": "curiosity gap with numeric claim",
    "pacing": "fast",
    "tone": "energetic",
    "targetAudience": "aspiring entrepreneurs",
    "structure": [{"sectionName": "Hook", "description": "Opens with the $10,000 result"}],
    "keyElements": ["direct address"],
}


@pytest.fixture
def sample_analysis_dict():
    return json.loads(json.dumps(SAMPLE_ANALYSIS))


class FakeAdapter:
    """Minimal LLMAdapter stand-in returning canned answers in order."""

    supports_response_schema = False

    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = []

    def generate_from_prompt(self, prompt, json_mode=False, response_schema=None):
        self.calls.append({"prompt": prompt, "json_mode": json_mode, "response_schema": response_schema})
        item = self.answers.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def fake_adapter():
    return FakeAdapter
