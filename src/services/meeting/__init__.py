"""Meeting understanding pipeline."""

from .orchestrator import MeetingOrchestrator, generate_session_id
from .session_cache import SessionCache
from .stages import ActionStage, FollowUpStage, QAStage, UnderstandingStage


__all__ = [
    "ActionStage",
    "FollowUpStage",
    "MeetingOrchestrator",
    "QAStage",
    "SessionCache",
    "UnderstandingStage",
    "generate_session_id",
]
