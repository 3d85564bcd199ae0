"""
ode_tutor/core/config.py

Application settings loaded from environment variables / .env file.
Uses Pydantic Settings v2 so the provider choice and its credentials are read
once at process start and handed to the rest of the app as one immutable
value, instead of being looked up in ``os.environ`` on every request.

Usage:
    from ode_tutor.core.config import get_settings
    settings = get_settings()
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["google", "openrouter"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # ── LLM provider ──────────────────────────────────────────────────────────
    ai_provider: ProviderName = Field(
        default="google",
        description="Which backend generates hints: 'google' (Gemini) or 'openrouter'",
    )
    google_api_key: str | None = Field(default=None, description="Google Gemini API key")
    openrouter_api_key: str | None = Field(default=None, description="OpenRouter API key")

    google_model: str = Field(default="gemini-2.5-flash")
    openrouter_model: str = Field(default="openai/gpt-4o-mini")
    openrouter_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions")
    provider_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound on a single provider call",
    )

    # ── Tutoring policy ───────────────────────────────────────────────────────
    max_attempts: int = Field(
        default=10,
        ge=1,
        description="History length at which the full solution is revealed",
    )

    # ── HTTP surface ──────────────────────────────────────────────────────────
    hosted_origin: str = Field(
        default="https://shir-openu.github.io",
        description="The single origin allowed to call the hosted handler",
    )
    static_root: Path = Field(
        default_factory=Path.cwd,
        description="Directory the local server serves static files from",
    )
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=1, le=65535)

    # ── Application ───────────────────────────────────────────────────────────
    environment: Literal["development", "production"] = Field(
        default="development",
        description="Runtime environment; controls log format and debug features",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum level in production; development always logs DEBUG",
    )
    app_version: str = Field(default="0.1.0")

    # ── Validators ────────────────────────────────────────────────────────────
    @field_validator("ai_provider", mode="before")
    @classmethod
    def normalize_provider(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("hosted_origin")
    @classmethod
    def origin_has_no_trailing_slash(cls, v: str) -> str:
        # Browsers send the Origin header without a trailing slash.
        return v.rstrip("/")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def provider_display_name(self) -> str:
        if self.ai_provider == "openrouter":
            return "OpenRouter GPT-4o-mini"
        return "Google Gemini 2.5 Flash"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return (and cache) the application settings singleton.

    The cache means settings are validated once at first call.
    Use `get_settings.cache_clear()` in tests to reload from a fresh environment.
    """
    return Settings()
