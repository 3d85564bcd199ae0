"""
ode_tutor/schemas/hint.py

Pydantic models for POST /api/ai-hint.

The widget sends camelCase keys (``userInput``, ``currentStep`` …); the models
use snake_case attributes with camelCase aliases so both the browser contract
and the Python code read naturally. Unknown keys are ignored.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ode_tutor.core.config import ProviderName
from ode_tutor.services.ode_problem import STEP_COUNT


class ConversationTurn(BaseModel):
    """One earlier exchange replayed by the client: the student's answer and the tutor's reply."""

    model_config = ConfigDict(extra="ignore")

    user: str
    ai: str


class ProblemData(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    correct_answer: str = Field(..., alias="correctAnswer")
    full_solution: str = Field(..., alias="fullSolution")


class HintRequest(BaseModel):
    """Request body for POST /api/ai-hint."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    user_input: str = Field(..., alias="userInput", description="The student's latest answer")
    current_step: int = Field(
        ...,
        alias="currentStep",
        ge=1,
        le=STEP_COUNT,
        description="Which step of the exercise the student is working on",
    )
    problem_data: ProblemData = Field(..., alias="problemData")
    conversation_history: list[ConversationTurn] = Field(
        default_factory=list,
        alias="conversationHistory",
        description="All earlier attempts, oldest first; its length is the attempt count",
    )


class RevealProblemData(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    full_solution: str = Field(..., alias="fullSolution")


class RevealRequest(BaseModel):
    """The two fields the attempt-limit gate reads.

    Checked before ``HintRequest`` so that an exhausted student still gets the
    solution even if the rest of the body (step, input, turn shape) is off.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    problem_data: RevealProblemData = Field(..., alias="problemData")
    conversation_history: list[Any] = Field(default_factory=list, alias="conversationHistory")


class HintResponse(BaseModel):
    """Successful reply. ``provider`` is absent when the attempt limit short-circuits the call."""

    hint: str
    provider: ProviderName | None = None


class ErrorResponse(BaseModel):
    error: str
    provider: ProviderName
    details: str


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str
    provider: ProviderName
