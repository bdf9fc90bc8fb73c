import pytest
import requests

from conftest import FakeResponse
from scriptalchemist.adapters import (
    AnthropicAdapter,
    CustomAPIAdapter,
    GeminiRESTAdapter,
    OpenAIAdapter,
    get_llm_adapter,
)
from scriptalchemist.errors import ConfigurationError, ProviderError, TransportError
from scriptalchemist.monitoring import get_collector


def test_openai_builds_chat_request(make_config, fake_session):
    session = fake_session(FakeResponse(body={"choices": [{"message": {"content": "hello"}}]}))
    adapter = OpenAIAdapter(make_config("openai"), session=session)

    assert adapter.generate_from_prompt("Write something") == "hello"

    call = session.calls[0]
    assert call["url"] == "https://api.openai.com/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer sk-test-1234567890"
    assert call["json"] == {"model": "gpt-4o-mini", "messages": [{"role": "user", "content": "Write something"}]}


def test_openai_json_mode_adds_system_message_and_format(make_config, fake_session):
    session = fake_session(FakeResponse(body={"choices": [{"message": {"content": "{}"}}]}))
    adapter = OpenAIAdapter(make_config("openai", model="gpt-4o"), session=session)

    adapter.generate_from_prompt("Give JSON", json_mode=True)

    body = session.calls[0]["json"]
    assert body["model"] == "gpt-4o"
    assert body["response_format"] == {"type": "json_object"}
    assert body["messages"][0]["role"] == "system"
    assert "valid JSON only" in body["messages"][0]["content"]
    assert body["messages"][1] == {"role": "user", "content": "Give JSON"}


def test_anthropic_request_shape(make_config, fake_session):
    session = fake_session(
        FakeResponse(body={"content": [{"text": "plain"}]}),
        FakeResponse(body={"content": [{"text": "{}"}]}),
    )
    adapter = AnthropicAdapter(make_config("anthropic"), session=session)

    assert adapter.generate_from_prompt("hi") == "plain"
    adapter.generate_from_prompt("json please", json_mode=True)

    first, second = session.calls
    assert first["url"] == "https://api.anthropic.com/v1/messages"
    assert first["headers"]["x-api-key"] == "sk-test-1234567890"
    assert first["headers"]["anthropic-version"] == "2023-06-01"
    assert first["json"]["max_tokens"] == 8192
    assert first["json"]["model"] == "claude-3-5-sonnet-20241022"
    assert "system" not in first["json"]
    assert "JSON" in second["json"]["system"]
    assert second["json"]["messages"] == [{"role": "user", "content": "json please"}]


def test_gemini_rest_request_shape(make_config, fake_session):
    body = {"candidates": [{"content": {"parts": [{"text": "gemini says"}]}}]}
    session = fake_session(FakeResponse(body=body), FakeResponse(body=body))
    adapter = GeminiRESTAdapter(make_config("gemini", api_key="g-key"), session=session)

    assert adapter.generate_from_prompt("p") == "gemini says"
    adapter.generate_from_prompt("p", json_mode=True)

    first, second = session.calls
    assert first["url"] == (
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.0-flash-exp:generateContent?key=g-key"
    )
    assert first["json"] == {"contents": [{"parts": [{"text": "p"}]}], "generationConfig": {}}
    assert second["json"]["generationConfig"] == {"responseMimeType": "application/json"}


def test_custom_posts_generic_envelope(make_config, fake_session):
    session = fake_session(FakeResponse(body={"response": "ok"}))
    adapter = CustomAPIAdapter(make_config("custom", api_url="https://llm.example.test/v1/run"), session=session)

    assert adapter.generate_from_prompt("prompt text", json_mode=True) == "ok"

    call = session.calls[0]
    assert call["url"] == "https://llm.example.test/v1/run"
    assert call["headers"]["Authorization"] == "Bearer sk-test-1234567890"
    assert call["json"] == {
        "prompt": "prompt text",
        "json_mode": True,
        "messages": [{"role": "user", "content": "prompt text"}],
        "model": "default",
    }


@pytest.mark.parametrize(
    "body",
    [
        {"response": "X"},
        {"content": "X"},
        {"text": "X"},
        {"message": {"content": "X"}},
        {"choices": [{"message": {"content": "X"}}]},
        {"choices": [{"text": "X"}]},
    ],
)
def test_custom_resolves_each_known_field(body, make_config, fake_session):
    session = fake_session(FakeResponse(body=body))
    adapter = CustomAPIAdapter(make_config("custom", api_url="https://llm.example.test"), session=session)
    assert adapter.generate_from_prompt("p") == "X"


def test_custom_field_priority_and_fallback(make_config, fake_session):
    import json

    unknown = {"output": {"value": "X"}, "id": 7}
    session = fake_session(
        FakeResponse(body={"text": "third", "content": "second", "response": ""}),
        FakeResponse(body=unknown),
    )
    adapter = CustomAPIAdapter(make_config("custom", api_url="https://llm.example.test"), session=session)

    # empty "response" is skipped, "content" beats "text"
    assert adapter.generate_from_prompt("p") == "second"
    assert json.loads(adapter.generate_from_prompt("p")) == unknown


@pytest.mark.parametrize("provider", ["openai", "anthropic", "gemini", "custom"])
def test_missing_api_key_fails_before_any_request(provider, make_config, fake_session):
    session = fake_session()
    adapter = get_llm_adapter(make_config(provider, api_key="", api_url="https://x.test"), session=session)

    with pytest.raises(ConfigurationError):
        adapter.generate_from_prompt("p")
    assert session.calls == []
    assert get_collector().get_counters().get(f"{provider}_requests") is None


def test_custom_requires_url(make_config, fake_session):
    session = fake_session()
    adapter = CustomAPIAdapter(make_config("custom"), session=session)
    with pytest.raises(ConfigurationError, match="URL"):
        adapter.generate_from_prompt("p")
    assert session.calls == []


def test_provider_error_message_is_extracted(make_config, fake_session):
    session = fake_session(FakeResponse(status_code=401, body={"error": {"message": "Incorrect API key provided"}}))
    adapter = OpenAIAdapter(make_config("openai"), session=session)

    with pytest.raises(ProviderError) as exc_info:
        adapter.generate_from_prompt("p")
    assert str(exc_info.value) == "Incorrect API key provided"
    assert exc_info.value.status_code == 401
    assert exc_info.value.provider == "openai"


def test_provider_error_falls_back_to_status_and_body(make_config, fake_session):
    session = fake_session(FakeResponse(status_code=502, body=None, text="Bad Gateway"))
    adapter = AnthropicAdapter(make_config("anthropic"), session=session)

    with pytest.raises(ProviderError, match=r"\(502\): Bad Gateway"):
        adapter.generate_from_prompt("p")


def test_custom_http_error_uses_raw_body(make_config, fake_session):
    session = fake_session(FakeResponse(status_code=500, body={"error": {"message": "boom"}}))
    adapter = CustomAPIAdapter(make_config("custom", api_url="https://llm.example.test"), session=session)

    with pytest.raises(ProviderError) as exc_info:
        adapter.generate_from_prompt("p")
    assert str(exc_info.value).startswith("Custom API request failed (500): ")
    assert "boom" in str(exc_info.value)


def test_custom_network_failure_has_distinct_message(make_config, fake_session):
    session = fake_session(requests.ConnectionError("Failed to establish a new connection"))
    adapter = CustomAPIAdapter(make_config("custom", api_url="https://llm.example.test"), session=session)

    with pytest.raises(TransportError, match="cannot reach the API server"):
        adapter.generate_from_prompt("p")


def test_builtin_provider_network_failure(make_config, fake_session):
    session = fake_session(requests.ConnectionError("connection refused"))
    adapter = GeminiRESTAdapter(make_config("gemini"), session=session)

    with pytest.raises(TransportError, match="Gemini API request could not be sent"):
        adapter.generate_from_prompt("p")
    assert get_collector().get_counters()["gemini_errors"] == 1


def test_unexpected_response_shape(make_config, fake_session):
    session = fake_session(FakeResponse(body={"choices": []}))
    adapter = OpenAIAdapter(make_config("openai"), session=session)

    with pytest.raises(ProviderError, match="unexpected response shape"):
        adapter.generate_from_prompt("p")


def test_factory_selects_variant_and_rejects_unknown(make_config, fake_session):
    session = fake_session()
    assert isinstance(get_llm_adapter(make_config("OpenAI"), session=session), OpenAIAdapter)
    assert isinstance(get_llm_adapter(make_config("anthropic"), session=session), AnthropicAdapter)
    assert isinstance(get_llm_adapter(make_config("gemini"), session=session), GeminiRESTAdapter)
    assert isinstance(get_llm_adapter(make_config("custom"), session=session), CustomAPIAdapter)

    with pytest.raises(ConfigurationError, match="Unsupported AI provider: mistral"):
        get_llm_adapter(make_config("mistral"))


def test_request_timeout_is_passed_through(fake_session):
    from scriptalchemist.settings import ProviderConfig

    session = fake_session(FakeResponse(body={"choices": [{"message": {"content": "x"}}]}))
    adapter = OpenAIAdapter(ProviderConfig(provider="openai", api_key="k", timeout=12.5), session=session)
    adapter.generate_from_prompt("p")
    assert session.calls[0]["timeout"] == 12.5
