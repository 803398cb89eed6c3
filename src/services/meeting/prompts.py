"""Prompt templates for the meeting stages.

Each builder returns a complete prompt string. Records are embedded as
indented camelCase JSON, the same shape the API returns.
"""

from __future__ import annotations

import json

from pydantic import BaseModel


_JSON_ONLY = (
    "[STRICT INSTRUCTION: RESPOND ONLY WITH VALID JSON. "
    "NO PREAMBLE, NO EXPLANATION, NO CONVERSATION.]"
)


def _as_json(record: BaseModel) -> str:
    return json.dumps(
        record.model_dump(mode="json", by_alias=True, exclude={"parse_error"}),
        indent=2,
    )


def understanding_prompt(transcript: str) -> str:
    return f"""{_JSON_ONLY}

You are a Meeting Understanding Agent. Analyze the meeting transcript and
extract structured information.

TRANSCRIPT:
{transcript}

INSTRUCTIONS:
1. Identify all participants mentioned in the meeting
2. Extract key discussion points
3. Identify decisions that were made
4. Note any unresolved issues or pending decisions
5. Flag any risks or concerns mentioned
6. Identify the main topics discussed

OUTPUT FORMAT (JSON):
{{
  "participants": ["participant names"],
  "keyPoints": ["main discussion points"],
  "decisions": ["decisions made"],
  "unresolvedIssues": ["pending items or unresolved topics"],
  "risks": ["risks or concerns mentioned"],
  "topics": ["main topics discussed"],
  "meetingSummary": "A brief 2-3 sentence summary of the meeting"
}}
"""


def action_items_prompt(understanding: BaseModel, transcript: str) -> str:
    return f"""{_JSON_ONLY}

You are an Action & Ownership Agent. Extract every action item from the
meeting. Use the structured summary for context and the raw transcript for
task details and ownership.

STRUCTURED SUMMARY:
{_as_json(understanding)}

RAW TRANSCRIPT:
{transcript}

INSTRUCTIONS:
1. Identify all tasks, commitments and requests ("I will", "can you",
   "responsible for", "deadline is").
2. For each task determine the owner, the deadline and a priority
   (high|medium|low).
3. Use "UNASSIGNED" when no owner is clear and "NO_DEADLINE" when no deadline
   is mentioned.

OUTPUT FORMAT (JSON):
{{
  "actionItems": [
    {{
      "id": 1,
      "task": "Description of the task",
      "owner": "Person name or UNASSIGNED",
      "deadline": "Date/time or NO_DEADLINE",
      "priority": "high|medium|low",
      "status": "pending"
    }}
  ]
}}
"""


def follow_up_prompt(
    understanding: BaseModel, actions: BaseModel, transcript: str
) -> str:
    return f"""{_JSON_ONLY}

You are a Follow-Up Orchestration Agent. Recommend follow-up actions,
escalations and whether another meeting is needed.

STRUCTURED SUMMARY:
{_as_json(understanding)}

ACTION ITEMS:
{_as_json(actions)}

RAW TRANSCRIPT:
{transcript}

INSTRUCTIONS:
1. Identify items that need escalation or further discussion.
2. Suggest a follow-up meeting if blockers or disagreements remain.
3. Recommend communication actions for specific stakeholders.
4. Flag urgent items that need immediate attention.

OUTPUT FORMAT (JSON):
{{
  "followUpActions": [
    {{
      "id": 1,
      "action": "Description of follow-up action",
      "type": "meeting|email|escalation|reminder|review",
      "urgency": "high|medium|low",
      "suggestedDate": "recommended date or timeframe",
      "involvedParties": ["people involved"],
      "reason": "Why this follow-up is needed"
    }}
  ],
  "escalations": [
    {{
      "issue": "Issue to escalate",
      "escalateTo": "Person or role",
      "reason": "Why escalation is needed"
    }}
  ],
  "nextMeetingSuggestion": {{
    "recommended": true,
    "suggestedTimeframe": "e.g. within 1 week",
    "agenda": ["agenda items"],
    "requiredAttendees": ["required attendees"]
  }}
}}
"""


def qa_prompt(understanding: BaseModel, question: str) -> str:
    return f"""{_JSON_ONLY}

You are a Knowledge/Q&A Agent. Answer the question using only the meeting
content below. If the answer is not there, say so clearly.

MEETING CONTENT:
{_as_json(understanding)}

USER QUESTION:
{question}

OUTPUT FORMAT (JSON):
{{
  "answer": "Your answer to the question",
  "confidence": "high|medium|low",
  "relevantContext": ["points from the meeting that support the answer"],
  "relatedTopics": ["related topics the user might want to know about"]
}}
"""
