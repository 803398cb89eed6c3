"""FastAPI dependency providing the process-wide meeting orchestrator."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from core.config import Settings, get_settings
from services.ai.generation import PydanticAIGenerationClient
from services.ai.interfaces import GenerationClientProtocol
from services.ai.json_recovery import StructuredOutputExtractor
from services.meeting.orchestrator import MeetingOrchestrator
from services.meeting.session_cache import SessionCache
from services.meeting.stages import (
    ActionStage,
    FollowUpStage,
    QAStage,
    UnderstandingStage,
)


def build_meeting_orchestrator(
    settings: Settings, client: GenerationClientProtocol | None = None
) -> MeetingOrchestrator:
    """Wire stages, extractor and session cache from settings."""
    if client is None:
        client = PydanticAIGenerationClient(
            default_parameters={
                "max_tokens": settings.GENERATION_MAX_TOKENS,
                "temperature": settings.GENERATION_TEMPERATURE,
            }
        )
    extractor = StructuredOutputExtractor(
        max_input_chars=settings.EXTRACTOR_MAX_INPUT_CHARS,
        max_candidates=settings.EXTRACTOR_MAX_CANDIDATES,
    )
    return MeetingOrchestrator(
        understanding=UnderstandingStage(client, extractor),
        action=ActionStage(client, extractor),
        follow_up=FollowUpStage(client, extractor),
        qa=QAStage(client, extractor),
        cache=SessionCache(
            ttl_seconds=settings.SESSION_CACHE_TTL_SECONDS,
            max_entries=settings.SESSION_CACHE_MAX_ENTRIES,
        ),
    )


@lru_cache
def get_meeting_orchestrator() -> MeetingOrchestrator:
    """One orchestrator (and so one session cache) per process."""
    return build_meeting_orchestrator(get_settings())


MeetingService = Annotated[MeetingOrchestrator, Depends(get_meeting_orchestrator)]
