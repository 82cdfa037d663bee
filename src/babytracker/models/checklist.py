"""
Pregnancy checklist data models for the BabyTracker application.

Standard checklist items ship with the package as JSON; users can add
their own items per profile. Both kinds carry a per-profile completion
status persisted in the ChecklistStatus table.

Classes:
    ChecklistItem: A standard or custom checklist item with its status
    CustomChecklistItemRequest: Body of POST /checklist
    ChecklistStatusUpdate: Body of PUT /checklist/status/{itemId}

Functions:
    load_standard_items: Load the bundled standard checklist items
    generate_custom_item_id: Build a new ``custom_<millis>_<hex>`` item id
"""

import json
import time
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, StrictBool, field_validator

CUSTOM_ITEM_PREFIX = "custom_"
MIN_WEEK = 1
MAX_WEEK = 42
STANDARD_ITEMS_PATH = Path(__file__).resolve().parent.parent / "data" / "checklist_items.json"


def generate_custom_item_id() -> str:
    """Generate a custom item ID in the format ``custom_<epochMillis>_<8 hex>``."""
    millis = int(time.time() * 1000)
    return f"{CUSTOM_ITEM_PREFIX}{millis}_{uuid.uuid4().hex[:8]}"


def is_custom_item_id(item_id: str) -> bool:
    return item_id.startswith(CUSTOM_ITEM_PREFIX)


class ChecklistItem(BaseModel):
    """
    A pregnancy checklist item together with its completion status.

    Attributes:
        itemId: ``c<n>`` for standard items, ``custom_...`` for custom ones
        week: Pregnancy week the task belongs to
        text: Task description
        completed: Whether the user ticked the item for this profile
        isCustom: True for user-created items
        profileId: Profile the status (and custom item) belongs to
        createdAt: Creation time of custom items
    """

    itemId: str
    week: int = Field(..., ge=MIN_WEEK, le=MAX_WEEK)
    text: str = Field(..., min_length=1, max_length=500)
    completed: bool = False
    isCustom: bool = False
    profileId: Optional[str] = None
    createdAt: Optional[str] = None

    def to_api_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class CustomChecklistItemRequest(BaseModel):
    """Request body for creating a custom checklist item."""

    text: str = Field(..., min_length=1, max_length=500)
    week: int = Field(..., ge=MIN_WEEK, le=MAX_WEEK, strict=True)
    profileId: str = Field(..., min_length=1)
    completed: bool = False

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class ChecklistStatusUpdate(BaseModel):
    """
    Request body for updating an item's completion status.

    ``profileId`` is required for standard items, whose status is kept per
    profile; custom items already belong to a profile.
    """

    completed: StrictBool
    profileId: Optional[str] = None


@lru_cache(maxsize=1)
def _standard_items() -> Tuple[Dict[str, Any], ...]:
    raw = STANDARD_ITEMS_PATH.read_text(encoding="utf-8")
    return tuple(json.loads(raw))


def load_standard_items() -> List[ChecklistItem]:
    """
    Load the standard checklist items bundled with the package.

    Returns:
        Standard items ordered by week, all marked incomplete
    """
    items = [ChecklistItem(**data) for data in _standard_items()]
    return sorted(items, key=lambda item: (item.week, item.itemId))
