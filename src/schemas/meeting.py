"""Meeting pipeline schemas.

Two families live here:

* Stage records (``UnderstandingRecord``, ``ActionRecord``, ``FollowUpRecord``,
  ``QAAnswer``) built from generation-service output. Every field has a typed
  default, so constructing a record with no arguments yields the stage's
  complete default record. Unknown keys produced by the model are kept.
* Request/response models for the HTTP layer.

Python attributes are snake_case; the JSON wire form is camelCase.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


ContentItem = str | dict[str, Any]

Confidence = Literal["high", "medium", "low"]

NO_DEADLINE = "NO_DEADLINE"


class GeneratedModel(BaseModel):
    """Base for anything whose values come from model output."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )


class StageRecord(GeneratedModel):
    """Output of one pipeline stage.

    ``parse_error`` is True when nothing could be recovered from the model
    output and every field holds its default.
    """

    parse_error: bool = False


# --- Understanding -----------------------------------------------------------


class UnderstandingRecord(StageRecord):
    participants: list[ContentItem] = Field(default_factory=list)
    key_points: list[ContentItem] = Field(default_factory=list)
    decisions: list[ContentItem] = Field(default_factory=list)
    unresolved_issues: list[ContentItem] = Field(default_factory=list)
    risks: list[ContentItem] = Field(default_factory=list)
    topics: list[ContentItem] = Field(default_factory=list)
    meeting_summary: str = "No summary available"


# --- Action & ownership ------------------------------------------------------


class ActionItem(GeneratedModel):
    id: int | str | None = None
    task: str = ""
    owner: str | None = None
    deadline: str | None = NO_DEADLINE
    priority: str | None = "medium"
    status: str | None = "pending"
    flagged: bool = False
    flag_reason: str | None = None


class ActionSummary(GeneratedModel):
    total_tasks: int = 0
    assigned_tasks: int = 0
    unassigned_tasks: int = 0
    flagged_items: int = 0


class ActionRecord(StageRecord):
    action_items: list[ActionItem] = Field(default_factory=list)
    summary: ActionSummary = Field(default_factory=ActionSummary)


# --- Follow-up ---------------------------------------------------------------


class FollowUpAction(GeneratedModel):
    id: int | str | None = None
    action: str = ""
    type: str | None = None
    urgency: str | None = None
    suggested_date: str | None = None
    involved_parties: list[ContentItem] = Field(default_factory=list)
    reason: str | None = None
    priority_score: int = 0


class Escalation(GeneratedModel):
    issue: str = ""
    escalate_to: str | None = None
    reason: str | None = None


class NextMeetingSuggestion(GeneratedModel):
    recommended: bool = False
    suggested_timeframe: str = "Not specified"
    agenda: list[ContentItem] = Field(default_factory=list)
    required_attendees: list[ContentItem] = Field(default_factory=list)


class FollowUpRecord(StageRecord):
    follow_up_actions: list[FollowUpAction] = Field(default_factory=list)
    escalations: list[Escalation] = Field(default_factory=list)
    next_meeting_suggestion: NextMeetingSuggestion = Field(
        default_factory=NextMeetingSuggestion
    )


# --- Q&A ---------------------------------------------------------------------


class QAAnswer(StageRecord):
    question: str = ""
    answer: str = (
        "Unable to find an answer to your question based on the meeting content."
    )
    confidence: Confidence = "low"
    relevant_context: list[ContentItem] = Field(default_factory=list)
    related_topics: list[ContentItem] = Field(default_factory=list)
    suggested_questions: list[str] = Field(default_factory=list)

    @field_validator("confidence", mode="before")
    @classmethod
    def _normalize_confidence(cls, v: object) -> str:
        if isinstance(v, str) and v.strip().lower() in {"high", "medium", "low"}:
            return v.strip().lower()
        return "low"


# --- HTTP requests -----------------------------------------------------------


class CamelRequest(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


class TranscriptRequest(CamelRequest):
    """Request carrying only a raw meeting transcript."""

    transcript: str = Field(..., description="Raw meeting transcript")


class ProcessMeetingRequest(TranscriptRequest):
    session_id: str | None = Field(
        default=None, description="Optional session id for Q&A reuse"
    )


class FollowUpsRequest(TranscriptRequest):
    action_items: ActionRecord | None = Field(
        default=None,
        description="Previously computed action record; skips the action stage",
    )


class QARequest(TranscriptRequest):
    question: str = Field(..., description="Question about the meeting")
    session_id: str | None = Field(
        default=None, description="Session id whose cached summary may be reused"
    )


# --- HTTP responses ----------------------------------------------------------


class CamelResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MeetingResults(CamelResponse):
    summary: UnderstandingRecord
    action_items: ActionRecord
    follow_ups: FollowUpRecord


class MeetingMetadata(CamelResponse):
    participant_count: int
    action_item_count: int
    follow_up_count: int
    has_escalations: bool
    next_meeting_recommended: bool


class ProcessMeetingResponse(CamelResponse):
    """Aggregated result of a full Understanding -> Action -> Follow-Up run."""

    success: bool = True
    session_id: str
    processing_time: str
    data: MeetingResults
    metadata: MeetingMetadata
