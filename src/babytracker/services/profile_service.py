"""
Profile service for the BabyTracker application.

Business logic for baby profiles: validation, ownership lookups, derived
age/due information and cascade deletion of everything a profile owns.

Classes:
    ProfileService: Profile management on top of DynamoDBService
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from ..models.profile import BabyProfile
from ..utils.dates import calculate_pregnancy_week, calendar_date, describe_age_or_due
from ..utils.log import get_logger, log_event
from .dynamodb_service import DynamoDBService

logger = get_logger(__name__)


def _require_name_and_birthday(data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict) or not data.get("name") or not data.get("birthday"):
        raise ValueError("Missing required fields: name, birthday")
    return data


class ProfileService:
    """
    Service for baby profile management.

    Attributes:
        db_service: DynamoDB service for data persistence

    Example:
        >>> profile_service = ProfileService()
        >>> profile = profile_service.create_profile(
        ...     "cognito-sub-123", {"name": "Ada", "birthday": "2025-02-10"}
        ... )
        >>> profile.id
        'baby_2f0c...'
    """

    def __init__(self, db_service: Optional[DynamoDBService] = None):
        self.db_service = db_service or DynamoDBService()

    def list_profiles(self, user_id: str) -> List[BabyProfile]:
        """Return a user's profiles, oldest first."""
        items = self.db_service.list_profiles(user_id)
        profiles = [BabyProfile.from_dynamodb_item(item) for item in items]
        return sorted(profiles, key=lambda p: p.createdAt or "")

    def get_profile(self, user_id: str, profile_id: str) -> Optional[BabyProfile]:
        """Return a profile if it exists and belongs to the user."""
        item = self.db_service.get_profile(user_id, profile_id)
        return BabyProfile.from_dynamodb_item(item) if item else None

    def create_profile(
        self, user_id: str, data: Any, email: Optional[str] = None
    ) -> BabyProfile:
        """
        Create a new profile for a user.

        Args:
            user_id: Cognito ``sub`` of the owner
            data: Request body with ``name`` and ``birthday``
            email: Optional email claim, recorded on first use

        Returns:
            The stored profile

        Raises:
            ValueError: If required fields are missing or invalid
        """
        data = _require_name_and_birthday(data)
        profile = BabyProfile(name=data["name"], birthday=data["birthday"])

        self.db_service.put_profile(profile.to_dynamodb_item(user_id))
        if self.db_service.ensure_user(user_id, email):
            log_event(logger, "USER_REGISTERED", userId=user_id)

        log_event(logger, "PROFILE_CREATED", userId=user_id, profileId=profile.id)
        return profile

    def update_profile(
        self, user_id: str, profile_id: str, data: Any
    ) -> Optional[BabyProfile]:
        """
        Update a profile's name and birthday.

        Returns:
            The updated profile, or None if it does not exist for this user

        Raises:
            ValueError: If required fields are missing or invalid
        """
        data = _require_name_and_birthday(data)
        validated = BabyProfile(id=profile_id, name=data["name"], birthday=data["birthday"])

        attributes = self.db_service.update_profile(
            user_id, profile_id, validated.name, validated.birthday
        )
        if attributes is None:
            return None
        return BabyProfile.from_dynamodb_item(attributes)

    def delete_profile(self, user_id: str, profile_id: str) -> Optional[Dict[str, int]]:
        """
        Delete a profile together with its tracker entries and checklist rows.

        Entries go first so a failure part-way leaves the profile in place
        and the delete can simply be retried.

        Returns:
            Counts of deleted dependents, or None if the profile was not found
        """
        if self.get_profile(user_id, profile_id) is None:
            return None

        entries_deleted = self.db_service.delete_entries_for_profile(profile_id)
        checklist_deleted = self.db_service.delete_checklist_for_profile(user_id, profile_id)
        self.db_service.delete_profile(user_id, profile_id)

        log_event(
            logger,
            "PROFILE_DELETED",
            userId=user_id,
            profileId=profile_id,
            entriesDeleted=entries_deleted,
            checklistRowsDeleted=checklist_deleted,
        )
        return {
            "entriesDeleted": entries_deleted,
            "checklistItemsDeleted": checklist_deleted,
        }

    @staticmethod
    def describe_profile(
        profile: BabyProfile, today: Optional[date] = None
    ) -> Dict[str, Any]:
        """
        Return a profile's API shape plus derived age/pregnancy fields.

        ``pregnancyWeek`` is only set while the birthday (due date) is in
        the future.
        """
        data = profile.to_api_dict()
        data["ageOrDue"] = describe_age_or_due(profile.birthday, today)

        birthday = calendar_date(profile.birthday)
        reference = today or datetime.now(timezone.utc).date()
        is_pregnancy = birthday is not None and birthday > reference
        data["pregnancyWeek"] = (
            calculate_pregnancy_week(profile.birthday, today) if is_pregnancy else None
        )
        return data
