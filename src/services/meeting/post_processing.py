"""Deterministic post-processing applied to stage records.

All functions are pure: they return new models and never mutate inputs.
Id assignment depends only on list position, so re-running any of them on
its own output changes nothing.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from schemas.meeting import (
    ActionItem,
    ActionSummary,
    FollowUpAction,
    UnderstandingRecord,
)


UNASSIGNED_OWNER = "UNASSIGNED"
UNASSIGNED_FLAG_REASON = "No owner assigned to this task"
_UNASSIGNED_ALIASES = frozenset({"unassigned", "tbd", "unknown"})

URGENCY_WEIGHTS: dict[str, int] = {
    "high": 3,
    "medium": 2,
    "low": 1,
}

TYPE_WEIGHTS: dict[str, int] = {
    "escalation": 3,
    "meeting": 2,
    "email": 1,
    "reminder": 1,
    "review": 1,
}

DEFAULT_WEIGHT = 1
MAX_SUGGESTED_QUESTIONS = 5


def _sequential_id(current: int | str | None, index: int) -> int | str:
    if current is None or current == "":
        return index + 1
    return current


def is_unassigned(owner: str | None) -> bool:
    if owner is None or not owner.strip():
        return True
    return owner.strip().lower() in _UNASSIGNED_ALIASES


def flag_unassigned_items(items: Sequence[ActionItem]) -> list[ActionItem]:
    """Normalize ownership and flag tasks nobody owns."""
    processed: list[ActionItem] = []
    for index, item in enumerate(items):
        item_id = _sequential_id(item.id, index)
        if is_unassigned(item.owner):
            processed.append(
                item.model_copy(
                    update={
                        "id": item_id,
                        "owner": UNASSIGNED_OWNER,
                        "flagged": True,
                        "flag_reason": UNASSIGNED_FLAG_REASON,
                    }
                )
            )
        else:
            processed.append(
                item.model_copy(
                    update={"id": item_id, "flagged": False, "flag_reason": None}
                )
            )
    return processed


def summarize_action_items(items: Sequence[ActionItem]) -> ActionSummary:
    """Counts over already-flagged items."""
    unassigned = sum(1 for item in items if item.owner == UNASSIGNED_OWNER)
    return ActionSummary(
        total_tasks=len(items),
        assigned_tasks=len(items) - unassigned,
        unassigned_tasks=unassigned,
        flagged_items=sum(1 for item in items if item.flagged),
    )


def _weight(table: dict[str, int], value: str | None) -> int:
    if not isinstance(value, str):
        return DEFAULT_WEIGHT
    return table.get(value.strip().lower(), DEFAULT_WEIGHT)


def score_follow_up(action: FollowUpAction) -> int:
    """priority = urgency weight * 2 + type weight."""
    return _weight(URGENCY_WEIGHTS, action.urgency) * 2 + _weight(
        TYPE_WEIGHTS, action.type
    )


def prioritize_actions(actions: Sequence[FollowUpAction]) -> list[FollowUpAction]:
    """Score follow-ups and order them by descending score.

    ``sorted`` is stable, so equal scores keep their input order.
    """
    scored = [
        action.model_copy(
            update={
                "id": _sequential_id(action.id, index),
                "priority_score": score_follow_up(action),
            }
        )
        for index, action in enumerate(actions)
    ]
    return sorted(scored, key=lambda action: action.priority_score, reverse=True)


def _display_name(participant: Any) -> str | None:
    if isinstance(participant, str):
        return participant.strip() or None
    if isinstance(participant, dict):
        name = participant.get("name")
        return name.strip() if isinstance(name, str) and name.strip() else None
    return None


def suggest_questions(understanding: UnderstandingRecord) -> list[str]:
    """Follow-up questions a user might ask, derived from the meeting summary."""
    suggestions: list[str] = []

    if understanding.participants:
        name = _display_name(understanding.participants[0])
        if name:
            suggestions.append(f"What did {name} contribute to the meeting?")

    if understanding.decisions:
        suggestions.append("What decisions were made during the meeting?")

    if understanding.unresolved_issues:
        suggestions.append("What issues are still pending or unresolved?")

    suggestions.append("What are the action items from this meeting?")
    suggestions.append("Who is responsible for each task?")

    return suggestions[:MAX_SUGGESTED_QUESTIONS]
