"""
Baby profile data model for the BabyTracker application.

A profile is one child, or one pregnancy when its birthday lies in the
future (the birthday then doubles as the due date). Profiles are owned by a
single Cognito user and stored in the Babies table under
``(userId, babyId)``.

Classes:
    BabyProfile: Pydantic model for a baby or pregnancy profile
"""

import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.dates import parse_datetime, utc_now_iso


def generate_profile_id() -> str:
    """Generate a new profile ID in the format ``baby_<uuid4>``."""
    return f"baby_{uuid.uuid4()}"


class BabyProfile(BaseModel):
    """
    Pydantic model representing a baby profile.

    The birthday is kept as the exact string the client sent so that it
    round-trips unchanged; it only has to parse as an ISO date.

    Attributes:
        id: Unique profile identifier (``babyId`` in DynamoDB)
        name: Display name of the child
        birthday: Birth date, or due date for a pregnancy
        createdAt: When the profile was created
        updatedAt: When the profile was last edited

    Example:
        >>> profile = BabyProfile(name="Ada", birthday="2025-02-10")
        >>> profile.id.startswith("baby_")
        True
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=generate_profile_id)
    name: str = Field(..., min_length=1, max_length=100)
    birthday: str = Field(..., description="ISO date, due date for pregnancies")
    createdAt: str = Field(default_factory=utc_now_iso)
    updatedAt: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("birthday")
    @classmethod
    def validate_birthday(cls, v: str) -> str:
        """
        Validate that the birthday is an ISO 8601 date or datetime.

        Raises:
            ValueError: If the value cannot be parsed
        """
        if parse_datetime(v) is None:
            raise ValueError(f"birthday '{v}' is not a valid ISO 8601 date")
        return v

    def to_dynamodb_item(self, user_id: str) -> Dict[str, Any]:
        """
        Convert the profile to a Babies table item.

        Args:
            user_id: Cognito ``sub`` of the owning user

        Returns:
            Dictionary keyed for the Babies table
        """
        item = {
            "userId": user_id,
            "babyId": self.id,
            "name": self.name,
            "birthday": self.birthday,
            "createdAt": self.createdAt,
        }
        if self.updatedAt:
            item["updatedAt"] = self.updatedAt
        return item

    @classmethod
    def from_dynamodb_item(cls, item: Dict[str, Any]) -> "BabyProfile":
        """Create a BabyProfile from a Babies table item."""
        return cls.model_construct(
            id=item["babyId"],
            name=item.get("name", ""),
            birthday=item.get("birthday", ""),
            createdAt=item.get("createdAt", ""),
            updatedAt=item.get("updatedAt"),
        )

    def to_api_dict(self) -> Dict[str, Any]:
        """Return the JSON shape the web and mobile apps consume."""
        data = {"id": self.id, "name": self.name, "birthday": self.birthday}
        if self.createdAt:
            data["createdAt"] = self.createdAt
        if self.updatedAt:
            data["updatedAt"] = self.updatedAt
        return data
