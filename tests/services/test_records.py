"""Tests for default construction and lenient validation of stage records."""

from __future__ import annotations

from pydantic import model_validator

from schemas.meeting import ActionRecord, FollowUpRecord, StageRecord
from services.meeting.records import build_record, default_record, strip_item_keys


class WholeRecordCheck(StageRecord):
    note: str = "default note"

    @model_validator(mode="after")
    def _reject(self) -> WholeRecordCheck:
        if self.note != "default note":
            raise ValueError("record rejected as a whole")
        return self


class TestBuildRecord:
    def test_invalid_key_inside_item_takes_default(self) -> None:
        record = build_record(
            FollowUpRecord,
            {
                "followUpActions": [
                    {"action": "Sync", "involvedParties": "everyone", "urgency": "low"}
                ]
            },
        )

        [action] = record.follow_up_actions
        assert action.action == "Sync"
        assert action.urgency == "low"
        assert action.involved_parties == []
        assert record.parse_error is False

    def test_snake_case_item_keys_pruned(self) -> None:
        record = build_record(
            ActionRecord,
            {"action_items": [{"task": "Book room", "flag_reason": ["x"]}]},
        )

        [item] = record.action_items
        assert item.task == "Book room"
        assert item.flag_reason is None

    def test_non_object_item_dropped(self) -> None:
        record = build_record(
            ActionRecord, {"actionItems": [{"task": "Keep"}, 42, None]}
        )

        assert [item.task for item in record.action_items] == ["Keep"]

    def test_unattributable_error_yields_flagged_defaults(self) -> None:
        record = build_record(WholeRecordCheck, {"note": "from model"})

        assert record == default_record(WholeRecordCheck)
        assert record.parse_error is True
        assert record.note == "default note"


class TestStripItemKeys:
    def test_removes_alias_and_field_name_forms(self) -> None:
        data = {
            "actionItems": [
                {"task": "A", "flagged": None, "flagReason": "x"},
                {"task": "B", "flag_reason": "y"},
                "not an object",
            ],
            "summary": {"flagged": 3},
        }

        result = strip_item_keys(data, "actionItems", ("flagged", "flagReason"))

        assert result["actionItems"] == [{"task": "A"}, {"task": "B"}, "not an object"]
        assert result["summary"] == {"flagged": 3}
        assert data["actionItems"][0]["flagged"] is None

    def test_snake_case_list_field(self) -> None:
        result = strip_item_keys(
            {"follow_up_actions": [{"action": "A", "priority_score": "high"}]},
            "followUpActions",
            ("priorityScore",),
        )

        assert result == {"follow_up_actions": [{"action": "A"}]}

    def test_missing_field_is_noop(self) -> None:
        assert strip_item_keys({"escalations": []}, "actionItems", ("flagged",)) == {
            "escalations": []
        }
