"""
Data models for the BabyTracker application.

This module contains Pydantic models for data validation and serialization
of baby profiles, tracker entry payloads and pregnancy checklist items.

Classes:
    BabyProfile: A baby or pregnancy profile
    TrackerType: Enum of the supported trackers
    TrackerPayload: Base schema for tracker entry payloads
    ChecklistItem: A standard or custom checklist item with its status
"""

from .checklist import (
    ChecklistItem,
    ChecklistStatusUpdate,
    CustomChecklistItemRequest,
    load_standard_items,
)
from .profile import BabyProfile
from .tracker_entry import (
    PAYLOAD_SCHEMAS,
    TrackerPayload,
    TrackerType,
    generate_entry_id,
    validate_payload,
)

__all__ = [
    "BabyProfile",
    "ChecklistItem",
    "ChecklistStatusUpdate",
    "CustomChecklistItemRequest",
    "load_standard_items",
    "PAYLOAD_SCHEMAS",
    "TrackerPayload",
    "TrackerType",
    "generate_entry_id",
    "validate_payload",
]
