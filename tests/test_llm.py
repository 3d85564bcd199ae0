import json

import httpx
import pytest

from conftest import make_settings
from ode_tutor.services.llm import (
    GoogleProvider,
    OpenRouterProvider,
    ProviderAPIError,
    ProviderConfigError,
    build_provider,
)


def _openrouter(handler, api_key="sk-or-test") -> OpenRouterProvider:
    return OpenRouterProvider(
        api_key=api_key,
        model="openai/gpt-4o-mini",
        url="https://openrouter.ai/api/v1/chat/completions",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


def test_build_provider_defaults_to_google():
    provider = build_provider(make_settings())

    assert isinstance(provider, GoogleProvider)
    assert provider.name == "google"


def test_build_provider_selects_openrouter():
    provider = build_provider(make_settings(ai_provider="OpenRouter"))

    assert isinstance(provider, OpenRouterProvider)
    assert provider.name == "openrouter"


def test_provider_selection_from_environment(monkeypatch):
    monkeypatch.setenv("AI_PROVIDER", "openrouter")

    assert build_provider(make_settings()).name == "openrouter"


@pytest.mark.anyio
async def test_openrouter_sends_single_user_message():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"choices": [{"message": {"role": "assistant", "content": "בדקו את הסימן."}}]},
        )

    text = await _openrouter(handler).generate_hint("PROMPT")

    assert text == "בדקו את הסימן."
    assert seen["url"] == "https://openrouter.ai/api/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-or-test"
    assert seen["body"] == {
        "model": "openai/gpt-4o-mini",
        "messages": [{"role": "user", "content": "PROMPT"}],
    }


@pytest.mark.anyio
async def test_openrouter_non_success_raises_with_status_and_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, text="Insufficient credits")

    with pytest.raises(ProviderAPIError) as excinfo:
        await _openrouter(handler).generate_hint("PROMPT")

    assert excinfo.value.status_code == 402
    assert excinfo.value.body == "Insufficient credits"
    assert str(excinfo.value) == "OpenRouter API error: 402 Insufficient credits"


@pytest.mark.anyio
async def test_openrouter_without_key_fails_before_any_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(ProviderConfigError):
        await _openrouter(handler, api_key=None).generate_hint("PROMPT")


class _FakeMessage:
    def __init__(self, content):
        self.content = content


class _FakeChatModel:
    def __init__(self, content):
        self._content = content
        self.prompts = []

    async def ainvoke(self, prompt):
        self.prompts.append(prompt)
        return _FakeMessage(self._content)


@pytest.mark.anyio
async def test_google_returns_message_text(monkeypatch):
    provider = GoogleProvider(api_key="g-key", model="gemini-2.5-flash", timeout=5.0)
    fake = _FakeChatModel("נכון!")
    monkeypatch.setattr(provider, "_create_llm", lambda: fake)

    assert await provider.generate_hint("PROMPT") == "נכון!"
    assert fake.prompts == ["PROMPT"]


@pytest.mark.anyio
async def test_google_joins_text_parts(monkeypatch):
    provider = GoogleProvider(api_key="g-key", model="gemini-2.5-flash", timeout=5.0)
    fake = _FakeChatModel([{"type": "text", "text": "חלק א. "}, "חלק ב."])
    monkeypatch.setattr(provider, "_create_llm", lambda: fake)

    assert await provider.generate_hint("PROMPT") == "חלק א. חלק ב."


@pytest.mark.anyio
async def test_google_model_is_created_once(monkeypatch):
    provider = GoogleProvider(api_key="g-key", model="gemini-2.5-flash", timeout=5.0)
    created = []

    def factory():
        created.append(1)
        return _FakeChatModel("ok")

    monkeypatch.setattr(provider, "_create_llm", factory)

    await provider.generate_hint("one")
    await provider.generate_hint("two")

    assert created == [1]


@pytest.mark.anyio
async def test_google_without_key_raises_config_error():
    provider = GoogleProvider(api_key=None, model="gemini-2.5-flash", timeout=5.0)

    with pytest.raises(ProviderConfigError):
        await provider.generate_hint("PROMPT")
