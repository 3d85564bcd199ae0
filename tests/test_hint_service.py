import pytest

from conftest import FakeProvider, hint_body
from ode_tutor.schemas.hint import HintRequest
from ode_tutor.services.hint import (
    attempt_limit_notice,
    attempt_limit_reply,
    generate_hint,
    reveal_if_exhausted,
)

NOTICE = "הסתיימה מכסת 10 ניסיונות. להלן הפתרון המלא:\n\n"


def _history(n: int) -> list[dict]:
    return [{"user": f"ניסיון {i}", "ai": f"רמז {i}"} for i in range(n)]


def test_notice_text():
    assert attempt_limit_notice(10) == NOTICE


@pytest.mark.parametrize("length", [0, 1, 9])
def test_gate_passes_below_limit(length):
    assert attempt_limit_reply([None] * length, "solution", 10) is None


@pytest.mark.parametrize("length", [10, 11, 25])
def test_gate_reveals_solution_at_or_above_limit(length):
    assert attempt_limit_reply([None] * length, "solution", 10) == NOTICE + "solution"


@pytest.mark.anyio
async def test_generate_hint_reveals_without_calling_provider():
    provider = FakeProvider()
    body = HintRequest.model_validate(
        hint_body(conversationHistory=_history(10), currentStep=4, userInput="עזרה")
    )

    response = await generate_hint(body, provider=provider, max_attempts=10)

    assert response.hint == NOTICE + body.problem_data.full_solution
    assert response.provider is None
    assert provider.prompts == []


@pytest.mark.anyio
async def test_generate_hint_calls_provider_once_with_compiled_prompt():
    provider = FakeProvider(name="openrouter", reply="נסו לפתח לפי העמודה הראשונה.")
    body = HintRequest.model_validate(hint_body(conversationHistory=_history(2)))

    response = await generate_hint(body, provider=provider, max_attempts=10)

    assert response.hint == "נסו לפתח לפי העמודה הראשונה."
    assert response.provider == "openrouter"
    assert len(provider.prompts) == 1
    prompt = provider.prompts[0]
    assert "## Current Step: 1" in prompt
    assert "λ=6,4" in prompt
    assert "6 ו-2" in prompt
    assert prompt.index("ניסיון 0") < prompt.index("רמז 0") < prompt.index("ניסיון 1")


@pytest.mark.anyio
async def test_generate_hint_respects_custom_limit():
    provider = FakeProvider()
    body = HintRequest.model_validate(hint_body(conversationHistory=_history(3)))

    response = await generate_hint(body, provider=provider, max_attempts=3)

    assert response.hint.startswith("הסתיימה מכסת 3 ניסיונות.")
    assert provider.prompts == []


def test_reveal_reads_only_history_and_solution():
    payload = {
        "currentStep": "not a number",
        "problemData": {"fullSolution": "SOLUTION"},
        "conversationHistory": [None] * 10,
    }

    response = reveal_if_exhausted(payload, max_attempts=10)

    assert response is not None
    assert response.hint == NOTICE + "SOLUTION"
    assert response.provider is None


@pytest.mark.parametrize(
    "payload",
    [
        hint_body(conversationHistory=_history(9)),
        {"conversationHistory": _history(10)},
        {"conversationHistory": "ten", "problemData": {"fullSolution": "S"}},
        ["not", "an", "object"],
    ],
)
def test_reveal_defers_to_full_validation(payload):
    assert reveal_if_exhausted(payload, max_attempts=10) is None
