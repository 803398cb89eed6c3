"""Meeting pipeline orchestrator.

Sequences the stages in dependency order (Understanding -> Action ->
Follow-Up; Q&A only needs Understanding), aggregates results and owns the
session cache of Understanding records.
"""

from __future__ import annotations

import logging
import secrets
import string
import time

from schemas.meeting import (
    ActionRecord,
    FollowUpRecord,
    MeetingMetadata,
    MeetingResults,
    ProcessMeetingResponse,
    QAAnswer,
    UnderstandingRecord,
)
from services.meeting.interfaces import SessionStoreProtocol
from services.meeting.post_processing import suggest_questions
from services.meeting.stages import (
    ActionStage,
    FollowUpStage,
    QAStage,
    UnderstandingStage,
    require_text,
)


logger = logging.getLogger(__name__)

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
SESSION_SUFFIX_LENGTH = 9


def generate_session_id() -> str:
    """``session_<epoch ms>_<9 random base36 chars>``; unique with high probability."""
    suffix = "".join(
        secrets.choice(_BASE36_ALPHABET) for _ in range(SESSION_SUFFIX_LENGTH)
    )
    return f"session_{int(time.time() * 1000)}_{suffix}"


class MeetingOrchestrator:
    """Run the meeting stages and reuse Understanding results per session."""

    def __init__(
        self,
        understanding: UnderstandingStage,
        action: ActionStage,
        follow_up: FollowUpStage,
        qa: QAStage,
        cache: SessionStoreProtocol,
    ) -> None:
        self.understanding = understanding
        self.action = action
        self.follow_up = follow_up
        self.qa_stage = qa
        self.cache = cache

    generate_session_id = staticmethod(generate_session_id)

    async def get_or_compute(
        self, session_id: str | None, transcript: str
    ) -> UnderstandingRecord:
        """Return the cached Understanding record, computing it on a miss."""
        if session_id:
            cached = self.cache.get(session_id)
            if cached is not None:
                logger.info("Using cached meeting understanding")
                return cached

        record = await self.understanding.run(transcript)
        if session_id:
            self.cache.set(session_id, record)
        return record

    def clear_cache(self, session_id: str | None = None) -> None:
        if session_id is None:
            removed = self.cache.clear()
            logger.info("Cleared all %d cached sessions", removed)
        else:
            self.cache.delete(session_id)
            logger.info("Cleared cached session")

    async def process(
        self, transcript: str, session_id: str | None = None
    ) -> ProcessMeetingResponse:
        """Run Understanding, Action and Follow-Up for one transcript."""
        started = time.perf_counter()
        effective_id = session_id or generate_session_id()

        logger.info("Starting meeting processing pipeline")
        understanding = await self.understanding.run(transcript)
        self.cache.set(effective_id, understanding)

        actions = await self.action.run(understanding, transcript)
        follow_ups = await self.follow_up.run(understanding, actions, transcript)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info("Meeting processing completed in %dms", elapsed_ms)

        return ProcessMeetingResponse(
            session_id=effective_id,
            processing_time=f"{elapsed_ms}ms",
            data=MeetingResults(
                summary=understanding,
                action_items=actions,
                follow_ups=follow_ups,
            ),
            metadata=MeetingMetadata(
                participant_count=len(understanding.participants),
                action_item_count=len(actions.action_items),
                follow_up_count=len(follow_ups.follow_up_actions),
                has_escalations=bool(follow_ups.escalations),
                next_meeting_recommended=follow_ups.next_meeting_suggestion.recommended,
            ),
        )

    async def summary(self, transcript: str) -> UnderstandingRecord:
        return await self.understanding.run(transcript)

    async def actions(self, transcript: str) -> ActionRecord:
        understanding = await self.understanding.run(transcript)
        return await self.action.run(understanding, transcript)

    async def followups(
        self, transcript: str, action_record: ActionRecord | None = None
    ) -> FollowUpRecord:
        """Follow-ups for a transcript; a supplied action record skips the Action stage."""
        understanding = await self.understanding.run(transcript)
        if action_record is None:
            action_record = await self.action.run(understanding, transcript)
        return await self.follow_up.run(understanding, action_record, transcript)

    async def qa(
        self, transcript: str, question: str, session_id: str | None = None
    ) -> QAAnswer:
        # Blank input fails before any generation call, even on a cache hit.
        require_text(transcript, "transcript")
        require_text(question, "question")
        understanding = await self.get_or_compute(session_id, transcript)
        answer = await self.qa_stage.run(understanding, question)
        return answer.model_copy(
            update={"suggested_questions": suggest_questions(understanding)}
        )
