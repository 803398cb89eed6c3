"""Centralized model factory for the meeting generation client.

Single source of truth for building the pydantic-ai model behind
``PydanticAIGenerationClient``. Gemini is the default provider; Azure OpenAI is
used when ``LLM_PROVIDER=azure_openai`` and its credentials are present.

Usage:
    from services.ai.model_factory import get_text_model

    model = get_text_model()  # Returns pydantic-ai Model
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from pydantic_ai.models import Model
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.providers.openai import OpenAIProvider

from core.config import get_settings
from services.ai.exceptions import GenerationConfigurationError


# OpenAI reasoning models that support reasoning_effort parameter
REASONING_MODELS = {
    "gpt-5-mini",
    "gpt-5-nano",
    "o1-mini",
    "o1-preview",
    "o1",
    "o3-mini",
}


if TYPE_CHECKING:
    from httpx import AsyncClient

logger = logging.getLogger(__name__)


def _normalize_azure_endpoint(endpoint: str) -> str:
    """Normalize Azure OpenAI endpoint.

    Azure endpoints are typically provided as `https://{resource}.openai.azure.com/`.
    Trailing slashes can lead to `//openai/...` URLs, which Azure may treat as a
    different path and return 404.
    """
    return endpoint.rstrip("/")


def _is_azure_provider() -> bool:
    """Check if Azure OpenAI should be used based on configuration."""
    return get_settings().LLM_PROVIDER == "azure_openai"


def _validate_azure_credentials() -> bool:
    """Validate that Azure OpenAI credentials are properly configured."""
    settings = get_settings()
    if (
        not settings.AZURE_OPENAI_ENDPOINT
        or not settings.AZURE_OPENAI_API_KEY
        or not settings.AZURE_OPENAI_API_VERSION
    ):
        logger.warning(
            "LLM_PROVIDER=azure_openai but credentials missing, falling back to Gemini"
        )
        return False
    return True


def _validate_gemini_credentials() -> bool:
    """Validate that Gemini API key is configured."""
    if not get_settings().GEMINI_API_KEY:
        logger.warning("Gemini API key not configured")
        return False
    return True


def is_generation_configured() -> bool:
    """Whether any provider has usable credentials (no model is built)."""
    settings = get_settings()
    azure_ready = bool(
        settings.AZURE_OPENAI_ENDPOINT
        and settings.AZURE_OPENAI_API_KEY
        and settings.AZURE_OPENAI_API_VERSION
    )
    if settings.LLM_PROVIDER == "azure_openai" and azure_ready:
        return True
    return bool(settings.GEMINI_API_KEY)


def _create_azure_model(
    model_name: str,
    http_client: AsyncClient | None = None,
) -> Model:
    """Create an Azure OpenAI model with the specified deployment name.

    For reasoning models (o1, o3, gpt-5 series), automatically applies
    low reasoning effort for faster, more cost-effective responses.
    """
    settings = get_settings()

    from openai import AsyncAzureOpenAI

    # AZURE_OPENAI_ENDPOINT is validated in _validate_azure_credentials
    azure_endpoint = _normalize_azure_endpoint(settings.AZURE_OPENAI_ENDPOINT or "")
    azure_client = AsyncAzureOpenAI(
        azure_endpoint=azure_endpoint,
        api_key=settings.AZURE_OPENAI_API_KEY,
        api_version=settings.AZURE_OPENAI_API_VERSION,
        http_client=http_client,
    )

    provider = OpenAIProvider(openai_client=azure_client)

    if model_name in REASONING_MODELS:
        logger.info("Applying low reasoning effort for reasoning model: %s", model_name)
        # reasoning_effort is a newer parameter not in TypedDict yet
        return OpenAIChatModel(  # type: ignore[call-overload,no-any-return]
            model_name,
            provider=provider,
            settings={"openai_reasoning_effort": "low"},
        )

    return OpenAIChatModel(model_name, provider=provider)


def _create_gemini_model(
    model_name: str,
    http_client: AsyncClient | None = None,
) -> Model:
    """Create a Google Gemini model with the specified model name."""
    settings = get_settings()
    provider = GoogleProvider(
        api_key=settings.GEMINI_API_KEY,
        http_client=http_client,
    )
    return cast(Model, GoogleModel(model_name, provider=provider))


def get_text_model(http_client: AsyncClient | None = None) -> Model:
    """Get the text model used by every meeting stage.

    Args:
        http_client: Optional HTTP client for custom retry logic.

    Returns:
        A pydantic-ai Model configured for the selected provider.

    Raises:
        GenerationConfigurationError: if no provider has credentials.
    """
    settings = get_settings()

    if _is_azure_provider() and _validate_azure_credentials():
        logger.info("Using Azure OpenAI text model: %s", settings.TEXT_MODEL)
        return _create_azure_model(settings.TEXT_MODEL, http_client)

    # Fallback to Gemini - validate credentials
    if not _validate_gemini_credentials():
        raise GenerationConfigurationError(
            "No valid LLM provider configured. Either set Azure OpenAI "
            "credentials (AZURE_OPENAI_ENDPOINT + AZURE_OPENAI_API_KEY) "
            "or Gemini credentials (GEMINI_API_KEY)."
        )

    logger.info("Using Gemini text model: %s", settings.TEXT_MODEL)
    return _create_gemini_model(settings.TEXT_MODEL, http_client)
