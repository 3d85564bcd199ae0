from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from ode_tutor.core.config import Settings
from ode_tutor.main import create_app, create_hosted_app


class FakeProvider:
    """Records every prompt instead of calling a real backend."""

    def __init__(self, name: str = "google", reply: str = "נכון! המשיכו לשלב הבא.") -> None:
        self.name = name
        self.reply = reply
        self.prompts: list[str] = []

    async def generate_hint(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


class FailingProvider:
    name = "openrouter"

    def __init__(self, exc: Exception) -> None:
        self.exc = exc
        self.calls = 0

    async def generate_hint(self, prompt: str) -> str:
        self.calls += 1
        raise self.exc


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def hint_body(**overrides) -> dict:
    body = {
        "userInput": "6 ו-2",
        "currentStep": 1,
        "problemData": {
            "correctAnswer": "λ=6,4",
            "fullSolution": "x(t) = -C₁e^{6t} + C₂e^{4t} + C₃te^{4t} - e^{3t}",
        },
        "conversationHistory": [],
    }
    body.update(overrides)
    return body


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "AI_PROVIDER",
        "GOOGLE_API_KEY",
        "OPENROUTER_API_KEY",
        "MAX_ATTEMPTS",
        "STATIC_ROOT",
        "ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def static_root(tmp_path: Path) -> Path:
    (tmp_path / "index.html").write_text("<h1>תרגיל</h1>", encoding="utf-8")
    (tmp_path / "app.js").write_text("console.log('hi');", encoding="utf-8")
    (tmp_path / "data.bin").write_bytes(b"\x00\x01")
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "logo.svg").write_text("<svg/>", encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(static_root: Path) -> Settings:
    return make_settings(static_root=static_root)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def client(settings: Settings, provider: FakeProvider) -> TestClient:
    return TestClient(create_app(settings, provider=provider))


@pytest.fixture
def hosted_client(settings: Settings, provider: FakeProvider) -> TestClient:
    return TestClient(create_hosted_app(settings, provider=provider))
