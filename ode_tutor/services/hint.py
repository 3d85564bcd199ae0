"""
ode_tutor/services/hint.py

The hint pipeline shared by both HTTP transports:

    attempt-limit gate → prompt builder → provider → HintResponse

Nothing here knows about HTTP; the routes handle status codes and the error
envelope.
"""

from collections.abc import Sized

from pydantic import ValidationError

from ode_tutor.core.logging import get_logger
from ode_tutor.schemas.hint import HintRequest, HintResponse, RevealRequest
from ode_tutor.services.hint_prompt import compile_hint_prompt
from ode_tutor.services.llm import HintProvider

logger = get_logger(__name__)


def attempt_limit_notice(max_attempts: int) -> str:
    """Hebrew preface shown above the revealed solution ("the N-attempt quota is used up")."""
    return f"הסתיימה מכסת {max_attempts} ניסיונות. להלן הפתרון המלא:\n\n"


def attempt_limit_reply(history: Sized, full_solution: str, max_attempts: int) -> str | None:
    """Return the full-solution reveal once the attempt quota is used up, else ``None``."""
    if len(history) >= max_attempts:
        return attempt_limit_notice(max_attempts) + full_solution
    return None


def reveal_if_exhausted(payload: object, max_attempts: int) -> HintResponse | None:
    """Apply the attempt-limit gate to a raw, not yet validated request body.

    Only ``conversationHistory`` and ``problemData.fullSolution`` are read, so
    the reveal does not depend on the step or the student input. Returns
    ``None`` when the limit is not reached or those two fields are unusable;
    full validation then reports the problem.
    """
    try:
        gate = RevealRequest.model_validate(payload)
    except ValidationError:
        return None

    reveal = attempt_limit_reply(
        gate.conversation_history,
        gate.problem_data.full_solution,
        max_attempts,
    )
    if reveal is None:
        return None

    logger.info(
        "hint_attempt_limit_reached",
        attempts=len(gate.conversation_history),
        limit=max_attempts,
    )
    return HintResponse(hint=reveal)


async def generate_hint(
    body: HintRequest,
    *,
    provider: HintProvider,
    max_attempts: int,
) -> HintResponse:
    """Run one hint request through the pipeline.

    Raises whatever the provider raises; the caller owns error reporting.
    """
    reveal = attempt_limit_reply(
        body.conversation_history,
        body.problem_data.full_solution,
        max_attempts,
    )
    if reveal is not None:
        logger.info(
            "hint_attempt_limit_reached",
            attempts=len(body.conversation_history),
            limit=max_attempts,
        )
        return HintResponse(hint=reveal)

    prompt = compile_hint_prompt(
        current_step=body.current_step,
        expected_answer=body.problem_data.correct_answer,
        student_input=body.user_input,
        history=body.conversation_history,
        max_attempts=max_attempts,
    )

    hint = await provider.generate_hint(prompt)
    return HintResponse(hint=hint, provider=provider.name)
