"""Pipeline stages: prompt -> generation -> recovery -> defaults -> post-processing.

Every stage follows the same contract (``MeetingStage._generate_record``):

* the generation client is called once with the stage's prompt;
* the raw text goes through the recovery extractor;
* if nothing is recovered the stage returns its fully defaulted record with
  ``parse_error=True`` (soft failure, the pipeline continues);
* otherwise missing or invalid fields fall back to their schema defaults;
* stage-specific post-processing runs last.

Errors raised by the generation client are hard failures and are deliberately
not caught here.
"""

from __future__ import annotations

import logging
from abc import ABC
from collections.abc import Mapping
from typing import Any, ClassVar, Generic

from core.exceptions import MeetingValidationError
from schemas.meeting import (
    ActionRecord,
    FollowUpRecord,
    NextMeetingSuggestion,
    QAAnswer,
    UnderstandingRecord,
)
from services.ai.interfaces import GenerationClientProtocol
from services.ai.json_recovery import StructuredOutputExtractor
from services.meeting import prompts
from services.meeting.post_processing import (
    flag_unassigned_items,
    prioritize_actions,
    summarize_action_items,
)
from services.meeting.records import (
    RecordT,
    build_record,
    default_record,
    strip_item_keys,
)


logger = logging.getLogger(__name__)


def require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise MeetingValidationError(field)
    return value


class MeetingStage(ABC, Generic[RecordT]):
    """Shared generation/recovery flow for a single pipeline stage."""

    name: ClassVar[str]
    record_type: ClassVar[type[Any]]
    generation_parameters: ClassVar[Mapping[str, Any]] = {}
    # List field -> item keys the stage computes itself; model values are ignored.
    computed_item_keys: ClassVar[Mapping[str, tuple[str, ...]]] = {}

    def __init__(
        self,
        client: GenerationClientProtocol,
        extractor: StructuredOutputExtractor | None = None,
        parameters: Mapping[str, Any] | None = None,
    ) -> None:
        self.client = client
        self.extractor = extractor or StructuredOutputExtractor()
        self.parameters = {**self.generation_parameters, **(parameters or {})}

    def failure_overrides(self, raw_text: str) -> dict[str, Any]:
        """Field values that differ from the schema defaults on total failure."""
        return {}

    def post_process(self, record: RecordT) -> RecordT:
        return record

    async def _generate_record(self, prompt: str) -> RecordT:
        raw_text = await self.client.generate(prompt, self.parameters)
        recovered = self.extractor.extract(raw_text)

        if isinstance(recovered, Mapping):
            for field, keys in self.computed_item_keys.items():
                recovered = strip_item_keys(recovered, field, keys)
            record = build_record(self.record_type, recovered)
        else:
            logger.warning(
                "[%s] No structured output recovered from %d chars; using defaults",
                self.name,
                len(raw_text or ""),
            )
            record = default_record(
                self.record_type, **self.failure_overrides(raw_text or "")
            )

        return self.post_process(record)


class UnderstandingStage(MeetingStage[UnderstandingRecord]):
    """Structure a raw transcript: participants, decisions, risks, summary."""

    name = "Meeting Understanding"
    record_type = UnderstandingRecord

    def failure_overrides(self, raw_text: str) -> dict[str, Any]:
        return {"meeting_summary": "Unable to parse meeting content"}

    async def run(self, transcript: str) -> UnderstandingRecord:
        transcript = require_text(transcript, "transcript")
        logger.info("[%s] Processing transcript (%d chars)", self.name, len(transcript))
        record = await self._generate_record(prompts.understanding_prompt(transcript))
        logger.info(
            "[%s] Structured transcript with %d participants",
            self.name,
            len(record.participants),
        )
        return record


class ActionStage(MeetingStage[ActionRecord]):
    """Extract action items and flag the ones without an owner."""

    name = "Action & Ownership"
    record_type = ActionRecord
    computed_item_keys = {"actionItems": ("flagged", "flagReason")}

    def post_process(self, record: ActionRecord) -> ActionRecord:
        items = flag_unassigned_items(record.action_items)
        return record.model_copy(
            update={"action_items": items, "summary": summarize_action_items(items)}
        )

    async def run(
        self, understanding: UnderstandingRecord, transcript: str
    ) -> ActionRecord:
        transcript = require_text(transcript, "transcript")
        record = await self._generate_record(
            prompts.action_items_prompt(understanding, transcript)
        )
        logger.info(
            "[%s] Extracted %d action items (%d flagged)",
            self.name,
            record.summary.total_tasks,
            record.summary.flagged_items,
        )
        return record


class FollowUpStage(MeetingStage[FollowUpRecord]):
    """Recommend follow-ups and escalations, ordered by priority score."""

    name = "Follow-Up Orchestration"
    record_type = FollowUpRecord
    computed_item_keys = {"followUpActions": ("priorityScore",)}

    def failure_overrides(self, raw_text: str) -> dict[str, Any]:
        return {
            "next_meeting_suggestion": NextMeetingSuggestion(
                suggested_timeframe="Unable to determine"
            )
        }

    def post_process(self, record: FollowUpRecord) -> FollowUpRecord:
        return record.model_copy(
            update={"follow_up_actions": prioritize_actions(record.follow_up_actions)}
        )

    async def run(
        self,
        understanding: UnderstandingRecord,
        actions: ActionRecord | None,
        transcript: str,
    ) -> FollowUpRecord:
        transcript = require_text(transcript, "transcript")
        record = await self._generate_record(
            prompts.follow_up_prompt(understanding, actions or ActionRecord(), transcript)
        )
        logger.info(
            "[%s] Generated %d follow-up actions",
            self.name,
            len(record.follow_up_actions),
        )
        return record


class QAStage(MeetingStage[QAAnswer]):
    """Answer a question against a structured meeting summary."""

    name = "Knowledge/Q&A"
    record_type = QAAnswer
    generation_parameters = {"max_tokens": 1000}

    def failure_overrides(self, raw_text: str) -> dict[str, Any]:
        return {"answer": raw_text.strip() or "Unable to process your question."}

    async def run(self, understanding: UnderstandingRecord, question: str) -> QAAnswer:
        question = require_text(question, "question")
        logger.info("[%s] Answering question (%d chars)", self.name, len(question))
        record = await self._generate_record(prompts.qa_prompt(understanding, question))
        record = record.model_copy(update={"question": question})
        logger.info("[%s] Answered with %s confidence", self.name, record.confidence)
        return record
