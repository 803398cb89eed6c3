"""Generation client backed by a pydantic-ai text agent."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, cast

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from services.ai.exceptions import GenerationServiceError
from services.ai.model_factory import get_text_model, is_generation_configured


logger = logging.getLogger(__name__)


GENERATION_SYSTEM_PROMPT = """
You are a meeting analysis assistant. Follow the task instructions exactly and
respond only with the JSON document requested, without commentary.
"""


class PydanticAIGenerationClient:
    """Turn a prompt into raw model text.

    The agent is created lazily so the application can start (and tests can
    import it) without provider credentials. Any failure of the model call is
    re-raised as ``GenerationServiceError``; the text itself is returned
    untouched for the recovery extractor.
    """

    def __init__(
        self,
        model: Model | None = None,
        default_parameters: Mapping[str, Any] | None = None,
    ) -> None:
        self._model = model
        self._agent: Agent[None, str] | None = None
        self._default_parameters = dict(default_parameters or {})

    def _get_agent(self) -> Agent[None, str]:
        if self._agent is None:
            model = self._model or get_text_model()
            self._agent = Agent(
                model,
                output_type=str,
                system_prompt=GENERATION_SYSTEM_PROMPT,
            )
        return self._agent

    def is_configured(self) -> bool:
        return self._model is not None or is_generation_configured()

    async def generate(
        self, prompt: str, parameters: Mapping[str, Any] | None = None
    ) -> str:
        # Configuration errors surface before the call and keep their own code.
        agent = self._get_agent()
        model_settings = cast(
            ModelSettings, {**self._default_parameters, **(parameters or {})}
        )
        try:
            result = await agent.run(prompt, model_settings=model_settings)
        except Exception as e:
            logger.error(
                "Generation call failed (%s): %s", e.__class__.__name__, e
            )
            raise GenerationServiceError(
                f"Failed to generate text: {e.__class__.__name__}"
            ) from e

        text = result.output
        logger.debug(
            "Generation returned %d chars for a %d char prompt", len(text), len(prompt)
        )
        return text
