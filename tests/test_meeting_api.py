"""HTTP tests for the meeting endpoints."""

from __future__ import annotations

import json

from services.ai.exceptions import GenerationServiceError


TRANSCRIPT = "Alice: I will send the report by Friday. Bob: ok."

UNDERSTANDING_JSON = json.dumps(
    {
        "participants": ["Alice", "Bob"],
        "decisions": ["Report due Friday"],
        "meetingSummary": "Alice owns the report.",
    }
)
ACTIONS_JSON = json.dumps(
    {"actionItems": [{"task": "Send the report", "owner": "Alice"}, {"task": "Book room"}]}
)
FOLLOW_UPS_JSON = json.dumps(
    {
        "followUpActions": [
            {"action": "Email recap", "type": "email", "urgency": "low"},
            {"action": "Escalate budget", "type": "escalation", "urgency": "high"},
        ],
        "escalations": [{"issue": "Budget", "escalateTo": "CFO", "reason": "Over"}],
        "nextMeetingSuggestion": {"recommended": True, "suggestedTimeframe": "1 week"},
    }
)
QA_JSON = json.dumps({"answer": "Alice sends it.", "confidence": "high"})


class TestProcessEndpoint:
    def test_full_pipeline_camel_case_response(self, meeting_api) -> None:
        client, generation = meeting_api
        generation.responses = [UNDERSTANDING_JSON, ACTIONS_JSON, FOLLOW_UPS_JSON]

        response = client.post("/api/v1/meeting/process", json={"transcript": TRANSCRIPT})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["sessionId"].startswith("session_")
        assert body["processingTime"].endswith("ms")

        data = body["data"]
        assert data["summary"]["meetingSummary"] == "Alice owns the report."
        assert data["summary"]["parseError"] is False
        items = data["actionItems"]["actionItems"]
        assert items[0]["owner"] == "Alice"
        assert items[0]["flagged"] is False
        assert items[1]["owner"] == "UNASSIGNED"
        assert items[1]["flagReason"] == "No owner assigned to this task"
        assert data["actionItems"]["summary"]["unassignedTasks"] == 1
        scores = [a["priorityScore"] for a in data["followUps"]["followUpActions"]]
        assert scores == [9, 3]

        assert body["metadata"] == {
            "participantCount": 2,
            "actionItemCount": 2,
            "followUpCount": 2,
            "hasEscalations": True,
            "nextMeetingRecommended": True,
        }

    def test_session_id_echoed(self, meeting_api) -> None:
        client, generation = meeting_api
        generation.responses = [UNDERSTANDING_JSON, ACTIONS_JSON, FOLLOW_UPS_JSON]

        response = client.post(
            "/api/v1/meeting/process",
            json={"transcript": TRANSCRIPT, "sessionId": "my-session"},
        )

        assert response.json()["sessionId"] == "my-session"

    def test_blank_transcript_is_400(self, meeting_api) -> None:
        client, generation = meeting_api

        response = client.post("/api/v1/meeting/process", json={"transcript": "  "})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Transcript is required"
        assert generation.call_count == 0

    def test_missing_transcript_is_422(self, meeting_api) -> None:
        client, _ = meeting_api

        response = client.post("/api/v1/meeting/process", json={})

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "validation_error"

    def test_generation_failure_is_502(self, meeting_api) -> None:
        client, generation = meeting_api
        generation.responses = [GenerationServiceError("Failed to generate text: X")]

        response = client.post("/api/v1/meeting/process", json={"transcript": TRANSCRIPT})

        assert response.status_code == 502
        assert response.json()["error"]["type"] == "generation_failed"


class TestStageEndpoints:
    def test_summary(self, meeting_api) -> None:
        client, generation = meeting_api
        generation.responses = ["Here: " + UNDERSTANDING_JSON + " done"]

        response = client.post("/api/v1/meeting/summary", json={"transcript": TRANSCRIPT})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["participants"] == ["Alice", "Bob"]
        assert data["unresolvedIssues"] == []

    def test_actions(self, meeting_api) -> None:
        client, generation = meeting_api
        generation.responses = [UNDERSTANDING_JSON, ACTIONS_JSON]

        response = client.post("/api/v1/meeting/actions", json={"transcript": TRANSCRIPT})

        data = response.json()["data"]
        assert data["summary"] == {
            "totalTasks": 2,
            "assignedTasks": 1,
            "unassignedTasks": 1,
            "flaggedItems": 1,
        }

    def test_followups_with_supplied_action_items(self, meeting_api) -> None:
        client, generation = meeting_api
        generation.responses = [UNDERSTANDING_JSON, FOLLOW_UPS_JSON]

        response = client.post(
            "/api/v1/meeting/followups",
            json={
                "transcript": TRANSCRIPT,
                "actionItems": {
                    "actionItems": [{"id": 1, "task": "Send the report", "owner": "Alice"}]
                },
            },
        )

        assert response.status_code == 200
        assert generation.call_count == 2
        actions = response.json()["data"]["followUpActions"]
        assert [a["action"] for a in actions] == ["Escalate budget", "Email recap"]

    def test_qa_with_session_reuse(self, meeting_api) -> None:
        client, generation = meeting_api
        generation.responses = [UNDERSTANDING_JSON, ACTIONS_JSON, FOLLOW_UPS_JSON]
        session_id = client.post(
            "/api/v1/meeting/process", json={"transcript": TRANSCRIPT}
        ).json()["sessionId"]

        generation.responses = [QA_JSON]
        response = client.post(
            "/api/v1/meeting/qa",
            json={
                "transcript": TRANSCRIPT,
                "question": "Who sends the report?",
                "sessionId": session_id,
            },
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["question"] == "Who sends the report?"
        assert data["answer"] == "Alice sends it."
        assert data["confidence"] == "high"
        assert "What did Alice contribute to the meeting?" in data["suggestedQuestions"]
        assert generation.call_count == 4

    def test_qa_blank_question_is_400(self, meeting_api) -> None:
        client, generation = meeting_api

        response = client.post(
            "/api/v1/meeting/qa", json={"transcript": TRANSCRIPT, "question": ""}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Question is required"
        assert generation.call_count == 0

    def test_qa_blank_transcript_with_cached_session_is_400(self, meeting_api) -> None:
        client, generation = meeting_api
        generation.responses = [UNDERSTANDING_JSON, QA_JSON]
        client.post(
            "/api/v1/meeting/qa",
            json={"transcript": TRANSCRIPT, "question": "Who?", "sessionId": "s1"},
        )

        response = client.post(
            "/api/v1/meeting/qa",
            json={"transcript": "", "question": "Who?", "sessionId": "s1"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Transcript is required"
        assert generation.call_count == 2

    def test_unknown_request_fields_rejected(self, meeting_api) -> None:
        client, _ = meeting_api

        response = client.post(
            "/api/v1/meeting/summary", json={"transcript": TRANSCRIPT, "extra": 1}
        )

        assert response.status_code == 422


class TestCacheEndpoints:
    def test_clear_single_session_forces_recompute(self, meeting_api) -> None:
        client, generation = meeting_api
        generation.responses = [UNDERSTANDING_JSON, QA_JSON]
        payload = {"transcript": TRANSCRIPT, "question": "Who?", "sessionId": "s1"}
        client.post("/api/v1/meeting/qa", json=payload)

        response = client.delete("/api/v1/meeting/cache/s1")
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": None,
            "message": "Cache cleared for session s1",
            "error": None,
        }

        generation.responses = [UNDERSTANDING_JSON, QA_JSON]
        client.post("/api/v1/meeting/qa", json=payload)
        assert generation.call_count == 4

    def test_clear_all(self, meeting_api) -> None:
        client, _ = meeting_api

        response = client.delete("/api/v1/meeting/cache")

        assert response.status_code == 200
        assert response.json()["message"] == "All cache cleared"
