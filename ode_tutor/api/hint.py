"""
ode_tutor/api/hint.py

POST /api/ai-hint — one tutoring turn.

Flow:
  1. Read the raw body and parse it as JSON, whatever the Content-Type
     (the widget may post ``text/plain`` to avoid a preflight).
  2. Attempt-limit gate: after MAX_ATTEMPTS turns, reveal the full solution.
     Only the history and ``problemData.fullSolution`` have to be usable here.
  3. Validate the full body (HintRequest).
  4. Compile the tutor prompt (Jinja2) and ask the configured provider.
  5. Return ``{hint, provider}``, or the 500 error envelope on any failure
     (the widget only distinguishes success from failure).
"""

import json

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from ode_tutor.core.config import ProviderName, Settings
from ode_tutor.core.logging import get_logger
from ode_tutor.schemas.hint import ErrorResponse, HintRequest, HintResponse
from ode_tutor.services.hint import generate_hint, reveal_if_exhausted
from ode_tutor.services.llm import HintProvider

logger = get_logger(__name__)

router = APIRouter()

# "Error processing the request. Please try again."
USER_FACING_ERROR = "שגיאה בעיבוד הבקשה. נסו שוב."

_REQUEST_BODY_DOC = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": HintRequest.model_json_schema(by_alias=True)}},
    }
}


def get_settings_from_app(request: Request) -> Settings:
    return request.app.state.settings


def get_provider(request: Request) -> HintProvider:
    """FastAPI dependency that retrieves the provider built at startup."""
    return request.app.state.provider


def error_response(provider: ProviderName, details: str) -> JSONResponse:
    envelope = ErrorResponse(error=USER_FACING_ERROR, provider=provider, details=details)
    return JSONResponse(
        content=envelope.model_dump(),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def describe_validation_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request body"


@router.post(
    "/ai-hint",
    response_model=HintResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
    openapi_extra=_REQUEST_BODY_DOC,
    summary="Get a tutoring hint for the student's latest answer",
)
async def ai_hint(
    request: Request,
    settings: Settings = Depends(get_settings_from_app),
    provider: HintProvider = Depends(get_provider),
):
    raw = await request.body()
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
        logger.warning("hint_request_invalid_json", error=str(exc), body_length=len(raw))
        return error_response(settings.ai_provider, f"Invalid JSON body: {exc}")

    reveal = reveal_if_exhausted(payload, settings.max_attempts)
    if reveal is not None:
        return reveal

    try:
        body = HintRequest.model_validate(payload)
    except ValidationError as exc:
        details = describe_validation_errors(exc)
        logger.warning("hint_request_invalid", details=details)
        return error_response(settings.ai_provider, details)

    logger.info(
        "hint_request",
        current_step=body.current_step,
        attempts=len(body.conversation_history),
        input_length=len(body.user_input),
        provider=settings.ai_provider,
    )

    try:
        return await generate_hint(body, provider=provider, max_attempts=settings.max_attempts)
    except Exception as exc:
        logger.error(
            "hint_request_failed",
            provider=settings.ai_provider,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return error_response(settings.ai_provider, str(exc))
