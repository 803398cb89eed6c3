"""Application settings and CORS configuration."""

import json
import os
from functools import lru_cache
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=(".env"), env_file_encoding="utf-8")

    # App
    APP_NAME: str = "Smart Meeting Assistant"
    ENVIRONMENT: str = "development"  # development | production | test

    # CORS
    # Accept list or CSV/JSON string from env; normalized to list[str] by validators
    CORS_ORIGINS: list[str] | str = [
        "http://localhost:5000",
        "http://127.0.0.1:5000",
    ]
    ALLOW_CREDENTIALS: bool = True

    # Generation provider configuration
    LLM_PROVIDER: Literal["gemini", "azure_openai"] = "gemini"
    GEMINI_API_KEY: str | None = None
    AZURE_OPENAI_ENDPOINT: str | None = None
    AZURE_OPENAI_API_KEY: str | None = None
    AZURE_OPENAI_API_VERSION: str | None = None
    TEXT_MODEL: str = "gemini-2.5-flash-lite"

    # Defaults merged under each stage's own generation parameters
    GENERATION_MAX_TOKENS: int = 2000
    GENERATION_TEMPERATURE: float = 0.0

    # Session cache for Understanding results
    SESSION_CACHE_TTL_SECONDS: int = 30 * 60
    SESSION_CACHE_MAX_ENTRIES: int = 1024

    # Recovery extractor hardening
    EXTRACTOR_MAX_INPUT_CHARS: int = 200_000
    EXTRACTOR_MAX_CANDIDATES: int = 50_000

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: object) -> list[str]:
        """Allow list, CSV string, or JSON array string for CORS origins."""
        if isinstance(v, list):
            return [str(i).strip() for i in v]
        if isinstance(v, str):
            s = v.strip()
            if not s:
                return []
            if s.startswith("["):
                try:
                    parsed = json.loads(s)
                except json.JSONDecodeError as e:
                    raise ValueError(
                        "CORS_ORIGINS must be a CSV list or JSON array string"
                    ) from e
                if not isinstance(parsed, list):
                    raise ValueError("CORS_ORIGINS JSON must be a list")
                return [str(i).strip() for i in parsed]
            # CSV fallback
            return [i.strip() for i in s.split(",") if i.strip()]
        raise ValueError("Invalid CORS_ORIGINS type; expected str or list[str]")

    @field_validator("SESSION_CACHE_TTL_SECONDS", "SESSION_CACHE_MAX_ENTRIES")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Session cache settings must be positive")
        return v

    @model_validator(mode="after")
    def _validate_cors_credentials(self) -> "Settings":
        """Ensure wildcard origins are not used when credentials are allowed."""
        # Normalize in case the union allows a stray string at runtime
        if isinstance(self.CORS_ORIGINS, str):
            self.CORS_ORIGINS = self.assemble_cors_origins(self.CORS_ORIGINS)
        if self.ALLOW_CREDENTIALS and any(
            o.strip() == "*" for o in (self.CORS_ORIGINS or [])
        ):
            raise ValueError(
                "CORS configuration error: ALLOW_CREDENTIALS=True but "
                "CORS_ORIGINS contains '*'. Use explicit origins when credentials "
                "are allowed."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env not in {"development", "production", "test"}:
        raise ValueError("ENVIRONMENT must be 'development', 'production', or 'test'")

    if env == "production":
        env_file = ".env.prod"
    elif env == "development":
        env_file = ".env.dev"
    else:
        # test environment - no env file needed, use defaults
        env_file = ""

    # pydantic-settings accepts a runtime-only `_env_file` kwarg; a missing file
    # is simply skipped, so local runs work with environment variables alone.
    return Settings(_env_file=env_file or None)  # type: ignore[call-arg]
