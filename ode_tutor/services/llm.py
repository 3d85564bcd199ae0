"""
ode_tutor/services/llm.py

Hint providers: the remote text-generation backends behind the tutor.

Two interchangeable variants share one capability, ``generate_hint(prompt)``:
  - GoogleProvider:     Gemini via Langchain's ``ChatGoogleGenerativeAI``
  - OpenRouterProvider: OpenRouter chat-completions over plain HTTPS (httpx)

Which one runs is decided once, from ``Settings.ai_provider``, by
``build_provider``. Callers only ever see the extracted text, never a
provider-specific response shape.

Rules:
    - API keys come from settings and are never logged.
    - No retries and no failover between providers: a failed call is raised
      to the route, which turns it into the error envelope.
"""

from typing import ClassVar, Protocol

import httpx

from ode_tutor.core.config import ProviderName, Settings
from ode_tutor.core.logging import get_logger

logger = get_logger(__name__)


class ProviderError(Exception):
    """Base class for failures talking to a hint provider."""


class ProviderConfigError(ProviderError):
    """Raised when the selected provider is missing its API key."""


class ProviderAPIError(ProviderError):
    """Raised when a provider answers with a non-success HTTP status."""

    def __init__(self, provider: str, status_code: int, body: str) -> None:
        self.provider = provider
        self.status_code = status_code
        self.body = body
        super().__init__(f"{provider} API error: {status_code} {body}")


class HintProvider(Protocol):
    """Anything that can turn a prompt into hint text."""

    name: ProviderName

    async def generate_hint(self, prompt: str) -> str: ...


def _content_to_text(content: object) -> str:
    """Flatten a Langchain message ``content`` (str or list of parts) into plain text."""
    if isinstance(content, list):
        return "".join(
            str(part.get("text", "")) if isinstance(part, dict) else str(part)
            for part in content
        )
    return str(content)


class GoogleProvider:
    """Gemini through Langchain. The chat model is created on first use."""

    name: ClassVar[ProviderName] = "google"

    def __init__(self, *, api_key: str | None, model: str, timeout: float) -> None:
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._llm = None

    def _create_llm(self):
        if not self._api_key:
            raise ProviderConfigError(
                "No Google API key configured. Set GOOGLE_API_KEY in .env"
            )

        from langchain_google_genai import ChatGoogleGenerativeAI

        logger.info("llm_init", provider=self.name, model=self._model)
        return ChatGoogleGenerativeAI(
            model=self._model,
            google_api_key=self._api_key,
            timeout=self._timeout,
            max_retries=0,
        )

    async def generate_hint(self, prompt: str) -> str:
        if self._llm is None:
            self._llm = self._create_llm()

        logger.info("provider_call_start", provider=self.name, prompt_length=len(prompt))
        message = await self._llm.ainvoke(prompt)
        text = _content_to_text(getattr(message, "content", message))
        logger.info("provider_call_success", provider=self.name, hint_length=len(text))
        return text


class OpenRouterProvider:
    """OpenRouter's OpenAI-compatible chat-completions endpoint, called directly."""

    name: ClassVar[ProviderName] = "openrouter"

    def __init__(
        self,
        *,
        api_key: str | None,
        model: str,
        url: str,
        timeout: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def generate_hint(self, prompt: str) -> str:
        if not self._api_key:
            raise ProviderConfigError(
                "No OpenRouter API key configured. Set OPENROUTER_API_KEY in .env"
            )

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
        }

        logger.info("provider_call_start", provider=self.name, prompt_length=len(prompt))
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(self._url, headers=headers, json=payload)

        if not response.is_success:
            logger.error(
                "provider_http_error",
                provider=self.name,
                status_code=response.status_code,
            )
            raise ProviderAPIError("OpenRouter", response.status_code, response.text)

        data = response.json()
        text = data["choices"][0]["message"]["content"]
        logger.info("provider_call_success", provider=self.name, hint_length=len(text))
        return text


def _build_google(settings: Settings) -> HintProvider:
    return GoogleProvider(
        api_key=settings.google_api_key,
        model=settings.google_model,
        timeout=settings.provider_timeout_seconds,
    )


def _build_openrouter(settings: Settings) -> HintProvider:
    return OpenRouterProvider(
        api_key=settings.openrouter_api_key,
        model=settings.openrouter_model,
        url=settings.openrouter_url,
        timeout=settings.provider_timeout_seconds,
    )


_PROVIDER_BUILDERS = {
    "google": _build_google,
    "openrouter": _build_openrouter,
}


def build_provider(settings: Settings) -> HintProvider:
    """Create the provider selected by ``settings.ai_provider``.

    Adding a backend means adding a class with ``name`` + ``generate_hint``
    and registering its builder above.
    """
    provider = _PROVIDER_BUILDERS[settings.ai_provider](settings)
    logger.info("provider_selected", provider=provider.name)
    return provider
