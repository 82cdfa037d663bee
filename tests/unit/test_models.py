"""
Unit tests for BabyTracker data models.

Tests the Pydantic models including validation, serialization, and
ID generation. These tests ensure data integrity and proper validation of
user input.
"""

import re

import pytest
from pydantic import ValidationError

from src.babytracker.models.checklist import (
    ChecklistStatusUpdate,
    CustomChecklistItemRequest,
    generate_custom_item_id,
    is_custom_item_id,
    load_standard_items,
)
from src.babytracker.models.profile import BabyProfile
from src.babytracker.models.tracker_entry import (
    PAYLOAD_SCHEMAS,
    TrackerType,
    generate_entry_id,
    validate_payload,
)


class TestBabyProfile:
    """Test cases for the BabyProfile model."""

    def test_profile_creation_generates_id(self):
        profile = BabyProfile(name="Ada", birthday="2025-02-10")

        assert profile.id.startswith("baby_")
        assert profile.name == "Ada"
        assert profile.birthday == "2025-02-10"
        assert profile.createdAt.endswith("Z")
        assert profile.updatedAt is None

    def test_profile_ids_are_unique(self):
        first = BabyProfile(name="Ada", birthday="2025-02-10")
        second = BabyProfile(name="Ada", birthday="2025-02-10")

        assert first.id != second.id

    def test_name_is_stripped(self):
        profile = BabyProfile(name="  Ada  ", birthday="2025-02-10")

        assert profile.name == "Ada"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            BabyProfile(name="   ", birthday="2025-02-10")

    def test_long_name_rejected(self):
        with pytest.raises(ValidationError):
            BabyProfile(name="x" * 101, birthday="2025-02-10")

    def test_birthday_kept_verbatim(self):
        birthday = "2025-02-10T00:00:00.000Z"
        profile = BabyProfile(name="Ada", birthday=birthday)

        assert profile.birthday == birthday

    @pytest.mark.parametrize("birthday", ["", "yesterday", "2025-13-40"])
    def test_invalid_birthday_rejected(self, birthday):
        with pytest.raises(ValidationError):
            BabyProfile(name="Ada", birthday=birthday)

    def test_dynamodb_round_trip(self):
        profile = BabyProfile(name="Ada", birthday="2025-02-10")
        item = profile.to_dynamodb_item("user-1")

        assert item["userId"] == "user-1"
        assert item["babyId"] == profile.id
        assert "updatedAt" not in item

        restored = BabyProfile.from_dynamodb_item(item)
        assert restored.to_api_dict() == profile.to_api_dict()

    def test_api_dict_exposes_babyid_as_id(self):
        item = {
            "userId": "user-1",
            "babyId": "baby_abc",
            "name": "Ada",
            "birthday": "2025-02-10",
            "createdAt": "2025-01-01T00:00:00.000Z",
            "updatedAt": "2025-01-02T00:00:00.000Z",
        }

        data = BabyProfile.from_dynamodb_item(item).to_api_dict()

        assert data == {
            "id": "baby_abc",
            "name": "Ada",
            "birthday": "2025-02-10",
            "createdAt": "2025-01-01T00:00:00.000Z",
            "updatedAt": "2025-01-02T00:00:00.000Z",
        }


class TestTrackerType:
    """Test cases for the TrackerType enum."""

    def test_all_trackers_have_a_schema(self):
        assert set(PAYLOAD_SCHEMAS) == set(TrackerType)
        assert len(TrackerType) == 9

    def test_parse_is_case_insensitive(self):
        assert TrackerType.parse(" Sleep ") == TrackerType.SLEEP

    def test_parse_unknown_lists_valid_types(self):
        with pytest.raises(ValueError) as exc_info:
            TrackerType.parse("feeding")

        assert "feeding" in str(exc_info.value)
        assert "temperature" in str(exc_info.value)

    def test_parse_none_rejected(self):
        with pytest.raises(ValueError):
            TrackerType.parse(None)


class TestEntryIds:
    """Test cases for entry and checklist ID generation."""

    @pytest.mark.parametrize("tracker_type", list(TrackerType))
    def test_entry_id_format(self, tracker_type):
        entry_id = generate_entry_id(tracker_type)

        assert re.fullmatch(rf"{tracker_type.value}_\d{{13}}_[0-9a-f]{{8}}", entry_id)

    def test_entry_ids_are_unique(self):
        ids = {generate_entry_id(TrackerType.BOTTLE) for _ in range(50)}

        assert len(ids) == 50

    def test_custom_item_id_format(self):
        item_id = generate_custom_item_id()

        assert re.fullmatch(r"custom_\d{13}_[0-9a-f]{8}", item_id)
        assert is_custom_item_id(item_id)
        assert not is_custom_item_id("c12")


class TestValidatePayload:
    """Test cases for tracker payload validation."""

    def test_valid_sleep_payload_returned_verbatim(self):
        body = {
            "startDateTime": "2025-02-10T20:00:00.000Z",
            "endDateTime": "2025-02-10T22:30:00.000Z",
            "notes": "Went down easily",
            "customField": {"nested": True},
        }

        assert validate_payload(TrackerType.SLEEP, body) == body

    def test_server_fields_are_dropped(self):
        body = {
            "volume": 120,
            "babyId": "someone-else",
            "entryId": "bottle_1_deadbeef",
            "trackerType": "sleep",
            "createdAt": "1999-01-01T00:00:00Z",
        }

        assert validate_payload(TrackerType.BOTTLE, body) == {"volume": 120}

    def test_end_before_start_rejected(self):
        body = {
            "startDateTime": "2025-02-10T22:00:00Z",
            "endDateTime": "2025-02-10T20:00:00Z",
        }

        with pytest.raises(ValidationError):
            validate_payload(TrackerType.SLEEP, body)

    def test_invalid_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            validate_payload(TrackerType.DIAPER, {"startDateTime": "not a date", "type": "wet"})

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            validate_payload(TrackerType.BOTTLE, {"volume": -5})

    @pytest.mark.parametrize(
        "tracker_type,body",
        [
            (TrackerType.NURSING, {"side": "middle"}),
            (TrackerType.BOTTLE, {"unit": "cups"}),
            (TrackerType.DIAPER, {"type": "sparkly"}),
            (TrackerType.POTTY, {"type": "maybe"}),
            (TrackerType.TEMPERATURE, {"temperature": 130}),
            (TrackerType.TEMPERATURE, {"temperature": 98.6, "unit": "K"}),
        ],
    )
    def test_enumerated_fields_rejected(self, tracker_type, body):
        with pytest.raises(ValidationError):
            validate_payload(tracker_type, body)

    def test_notes_length_limited(self):
        with pytest.raises(ValidationError):
            validate_payload(TrackerType.SOLIDS, {"notes": "x" * 2001})

    def test_non_object_body_rejected(self):
        with pytest.raises(ValueError, match="JSON object"):
            validate_payload(TrackerType.SLEEP, ["not", "an", "object"])

    def test_empty_payload_allowed(self):
        assert validate_payload(TrackerType.GROWTH, {}) == {}

    @pytest.mark.parametrize(
        "body",
        [
            {"temperature": 37.1, "unit": "C"},
            {"temperature": 98.6, "unit": "F"},
            {"temperature": 37.1},
            {"temperature": 101},
        ],
    )
    def test_temperature_range_follows_unit(self, body):
        assert validate_payload(TrackerType.TEMPERATURE, body) == body

    @pytest.mark.parametrize(
        "body",
        [
            {"temperature": 98.6, "unit": "C"},
            {"temperature": 37.1, "unit": "F"},
            {"temperature": 60},
        ],
    )
    def test_temperature_outside_unit_range(self, body):
        with pytest.raises(ValidationError, match="outside"):
            validate_payload(TrackerType.TEMPERATURE, body)

    @pytest.mark.parametrize(
        "tracker_type,body",
        [
            (TrackerType.BOTTLE, {"volume": "120"}),
            (TrackerType.BOTTLE, {"volume": True}),
            (TrackerType.SLEEP, {"duration": "45"}),
            (TrackerType.TEMPERATURE, {"temperature": "98.6"}),
            (TrackerType.DIAPER, {"wet": "true"}),
            (TrackerType.POTTY, {"poop": 1}),
        ],
    )
    def test_numbers_and_flags_must_be_json_typed(self, tracker_type, body):
        with pytest.raises(ValidationError):
            validate_payload(tracker_type, body)

    def test_integers_accepted_for_quantities(self):
        assert validate_payload(TrackerType.BOTTLE, {"volume": 120}) == {"volume": 120}


class TestChecklistModels:
    """Test cases for checklist models and bundled items."""

    def test_standard_items_sorted_by_week(self):
        items = load_standard_items()
        weeks = [item.week for item in items]

        assert items
        assert weeks == sorted(weeks)
        assert all(item.itemId.startswith("c") for item in items)
        assert all(not item.completed and not item.isCustom for item in items)

    def test_standard_item_ids_unique(self):
        ids = [item.itemId for item in load_standard_items()]

        assert len(ids) == len(set(ids))

    def test_custom_request_requires_integer_week(self):
        with pytest.raises(ValidationError):
            CustomChecklistItemRequest(text="Tour hospital", week="30", profileId="baby_1")

    @pytest.mark.parametrize("week", [0, 43])
    def test_custom_request_week_bounds(self, week):
        with pytest.raises(ValidationError):
            CustomChecklistItemRequest(text="Tour hospital", week=week, profileId="baby_1")

    def test_custom_request_strips_text(self):
        request = CustomChecklistItemRequest(
            text="  Tour hospital ", week=30, profileId="baby_1"
        )

        assert request.text == "Tour hospital"
        assert request.completed is False

    def test_status_update_requires_boolean(self):
        with pytest.raises(ValidationError):
            ChecklistStatusUpdate(completed="yes")

        assert ChecklistStatusUpdate(completed=True).completed is True
