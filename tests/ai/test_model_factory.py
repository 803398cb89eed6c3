"""Tests for the generation model factory."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from pydantic_ai import models

from services.ai.exceptions import GenerationConfigurationError


# Block any real model requests in tests
models.ALLOW_MODEL_REQUESTS = False


def _azure_settings(mock_settings: MagicMock, model: str = "gpt-4o-mini") -> None:
    mock_settings.return_value.LLM_PROVIDER = "azure_openai"
    mock_settings.return_value.TEXT_MODEL = model
    mock_settings.return_value.AZURE_OPENAI_ENDPOINT = "https://test.openai.azure.com/"
    mock_settings.return_value.AZURE_OPENAI_API_KEY = "test-key"
    mock_settings.return_value.AZURE_OPENAI_API_VERSION = "2024-10-21"


class TestNormalizeAzureEndpoint:
    def test_strips_trailing_slashes(self) -> None:
        from services.ai.model_factory import _normalize_azure_endpoint

        assert (
            _normalize_azure_endpoint("https://x.openai.azure.com//")
            == "https://x.openai.azure.com"
        )


class TestValidateAzureCredentials:
    @patch("services.ai.model_factory.get_settings")
    def test_returns_true_with_valid_credentials(
        self, mock_settings: MagicMock
    ) -> None:
        _azure_settings(mock_settings)

        from services.ai.model_factory import _validate_azure_credentials

        assert _validate_azure_credentials() is True

    @patch("services.ai.model_factory.get_settings")
    def test_missing_api_version_is_invalid(
        self, mock_settings: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        _azure_settings(mock_settings)
        mock_settings.return_value.AZURE_OPENAI_API_VERSION = None

        from services.ai.model_factory import _validate_azure_credentials

        assert _validate_azure_credentials() is False
        assert "credentials missing" in caplog.text.lower()


class TestIsGenerationConfigured:
    @patch("services.ai.model_factory.get_settings")
    def test_false_without_any_credentials(self, mock_settings: MagicMock) -> None:
        mock_settings.return_value.LLM_PROVIDER = "gemini"
        mock_settings.return_value.GEMINI_API_KEY = None
        mock_settings.return_value.AZURE_OPENAI_ENDPOINT = None
        mock_settings.return_value.AZURE_OPENAI_API_KEY = None
        mock_settings.return_value.AZURE_OPENAI_API_VERSION = None

        from services.ai.model_factory import is_generation_configured

        assert is_generation_configured() is False

    @patch("services.ai.model_factory.get_settings")
    def test_true_with_gemini_key(self, mock_settings: MagicMock) -> None:
        mock_settings.return_value.LLM_PROVIDER = "gemini"
        mock_settings.return_value.GEMINI_API_KEY = "test-gemini-key"

        from services.ai.model_factory import is_generation_configured

        assert is_generation_configured() is True

    @patch("services.ai.model_factory.get_settings")
    def test_true_with_azure_credentials(self, mock_settings: MagicMock) -> None:
        _azure_settings(mock_settings)
        mock_settings.return_value.GEMINI_API_KEY = None

        from services.ai.model_factory import is_generation_configured

        assert is_generation_configured() is True


class TestGetTextModel:
    @patch("services.ai.model_factory.get_settings")
    def test_returns_azure_model_when_configured(
        self, mock_settings: MagicMock
    ) -> None:
        _azure_settings(mock_settings)

        from services.ai.model_factory import get_text_model

        model = get_text_model()
        assert "OpenAI" in type(model).__name__

    @patch("services.ai.model_factory.get_settings")
    def test_returns_gemini_model_by_default(self, mock_settings: MagicMock) -> None:
        mock_settings.return_value.LLM_PROVIDER = "gemini"
        mock_settings.return_value.TEXT_MODEL = "gemini-2.5-flash-lite"
        mock_settings.return_value.GEMINI_API_KEY = "test-gemini-key"

        from services.ai.model_factory import get_text_model

        model = get_text_model()
        assert "Google" in type(model).__name__

    @patch("services.ai.model_factory._validate_azure_credentials")
    @patch("services.ai.model_factory.get_settings")
    def test_falls_back_to_gemini_on_invalid_azure_credentials(
        self, mock_settings: MagicMock, mock_validate: MagicMock
    ) -> None:
        mock_validate.return_value = False
        mock_settings.return_value.LLM_PROVIDER = "azure_openai"
        mock_settings.return_value.TEXT_MODEL = "gemini-2.5-flash-lite"
        mock_settings.return_value.GEMINI_API_KEY = "test-gemini-key"

        from services.ai.model_factory import get_text_model

        assert "Google" in type(get_text_model()).__name__

    @patch("services.ai.model_factory.get_settings")
    def test_raises_when_nothing_configured(self, mock_settings: MagicMock) -> None:
        mock_settings.return_value.LLM_PROVIDER = "gemini"
        mock_settings.return_value.GEMINI_API_KEY = None

        from services.ai.model_factory import get_text_model

        with pytest.raises(GenerationConfigurationError) as exc_info:
            get_text_model()
        assert exc_info.value.error_code == "not_configured"
