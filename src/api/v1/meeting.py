"""Meeting analysis endpoints.

Routes are thin: they validate the request body and delegate to the
``MeetingOrchestrator``. Blank transcripts or questions surface as
``MeetingValidationError`` (400) and generation failures as
``GenerationServiceError`` (502) through the global exception handler.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from dependencies.meeting import MeetingService
from schemas.api import ApiResponse
from schemas.meeting import (
    ActionRecord,
    FollowUpRecord,
    FollowUpsRequest,
    ProcessMeetingRequest,
    ProcessMeetingResponse,
    QAAnswer,
    QARequest,
    TranscriptRequest,
    UnderstandingRecord,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/meeting", tags=["meeting"])


@router.post("/process", response_model=ProcessMeetingResponse)
async def process_meeting(
    payload: ProcessMeetingRequest, orchestrator: MeetingService
) -> ProcessMeetingResponse:
    """Run the full Understanding -> Action -> Follow-Up pipeline."""
    return await orchestrator.process(payload.transcript, payload.session_id)


@router.post("/summary", response_model=ApiResponse[UnderstandingRecord])
async def summarize_meeting(
    payload: TranscriptRequest, orchestrator: MeetingService
) -> ApiResponse[UnderstandingRecord]:
    record = await orchestrator.summary(payload.transcript)
    return ApiResponse(data=record, message="Meeting summarized")


@router.post("/actions", response_model=ApiResponse[ActionRecord])
async def extract_action_items(
    payload: TranscriptRequest, orchestrator: MeetingService
) -> ApiResponse[ActionRecord]:
    record = await orchestrator.actions(payload.transcript)
    return ApiResponse(data=record, message="Action items extracted")


@router.post("/followups", response_model=ApiResponse[FollowUpRecord])
async def recommend_follow_ups(
    payload: FollowUpsRequest, orchestrator: MeetingService
) -> ApiResponse[FollowUpRecord]:
    """Follow-up recommendations; supplying ``actionItems`` skips the action stage."""
    record = await orchestrator.followups(payload.transcript, payload.action_items)
    return ApiResponse(data=record, message="Follow-ups generated")


@router.post("/qa", response_model=ApiResponse[QAAnswer])
async def answer_question(
    payload: QARequest, orchestrator: MeetingService
) -> ApiResponse[QAAnswer]:
    answer = await orchestrator.qa(
        payload.transcript, payload.question, payload.session_id
    )
    return ApiResponse(data=answer, message="Question answered")


@router.delete("/cache/{session_id}", response_model=ApiResponse[None])
async def clear_session(
    session_id: str, orchestrator: MeetingService
) -> ApiResponse[None]:
    orchestrator.clear_cache(session_id)
    return ApiResponse(message=f"Cache cleared for session {session_id}")


@router.delete("/cache", response_model=ApiResponse[None])
async def clear_all_sessions(orchestrator: MeetingService) -> ApiResponse[None]:
    orchestrator.clear_cache()
    return ApiResponse(message="All cache cleared")
