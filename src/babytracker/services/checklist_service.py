"""
Checklist service for the BabyTracker application.

Combines the bundled standard pregnancy checklist with a user's custom
items and per-profile completion status.

Status rows for standard items are keyed ``<profileId>#<itemId>`` so two
pregnancies tracked by the same user keep separate progress. Custom item
rows carry their own status.

Classes:
    ChecklistService: Checklist reads and writes on top of DynamoDBService
"""

from typing import Any, Dict, List, Optional

from ..models.checklist import (
    ChecklistItem,
    ChecklistStatusUpdate,
    CustomChecklistItemRequest,
    generate_custom_item_id,
    is_custom_item_id,
    load_standard_items,
)
from ..utils.dates import utc_now_iso
from ..utils.log import get_logger, log_event
from .dynamodb_service import DynamoDBService

logger = get_logger(__name__)


def status_key(item_id: str, profile_id: str) -> str:
    """Sort key of the status row of a standard item for one profile."""
    return f"{profile_id}#{item_id}"


class ChecklistService:
    """
    Service for the pregnancy checklist.

    Attributes:
        db_service: DynamoDB service for data persistence
    """

    def __init__(self, db_service: Optional[DynamoDBService] = None):
        self.db_service = db_service or DynamoDBService()

    def list_custom_items(self, user_id: str, profile_id: str) -> List[ChecklistItem]:
        """Return the user's custom items for a profile, ordered by week."""
        rows = self.db_service.query_checklist(user_id, profile_id, custom_only=True)
        items = [
            ChecklistItem(
                itemId=row["itemId"],
                week=row["week"],
                text=row["text"],
                completed=bool(row.get("completed", False)),
                isCustom=True,
                profileId=row.get("profileId"),
                createdAt=row.get("createdAt"),
            )
            for row in rows
        ]
        return sorted(items, key=lambda item: (item.week, item.createdAt or ""))

    def list_statuses(self, user_id: str, profile_id: str) -> List[Dict[str, Any]]:
        """
        Return completion status of every item the user has touched.

        Returns:
            List of ``{itemId, completed, profileId}`` using plain item IDs
        """
        prefix = status_key("", profile_id)
        statuses = []
        for row in self.db_service.query_checklist(user_id, profile_id):
            item_id = row["itemId"]
            if item_id.startswith(prefix):
                item_id = item_id[len(prefix):]
            statuses.append(
                {
                    "itemId": item_id,
                    "completed": bool(row.get("completed", False)),
                    "profileId": row.get("profileId"),
                }
            )
        return statuses

    def get_checklist(
        self,
        user_id: str,
        profile_id: str,
        include_standard: bool = False,
        up_to_week: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Return checklist items for a profile with their completion status.

        Args:
            user_id: Owning user
            profile_id: Profile whose checklist to read
            include_standard: Include the bundled standard items
            up_to_week: Only include items due on or before this week

        Returns:
            Items ordered by week, standard items before custom ones
        """
        completed = {
            status["itemId"]: status["completed"]
            for status in self.list_statuses(user_id, profile_id)
        }

        items: List[ChecklistItem] = []
        if include_standard:
            for item in load_standard_items():
                items.append(
                    item.model_copy(
                        update={
                            "completed": completed.get(item.itemId, False),
                            "profileId": profile_id,
                        }
                    )
                )
        items.extend(self.list_custom_items(user_id, profile_id))

        if up_to_week is not None:
            items = [item for item in items if item.week <= up_to_week]

        items.sort(key=lambda item: (item.week, item.isCustom))
        return [item.to_api_dict() for item in items]

    def add_custom_item(self, user_id: str, body: Any) -> ChecklistItem:
        """
        Create a custom checklist item.

        Raises:
            ValueError: If the body is not a valid custom item request
        """
        if not isinstance(body, dict):
            raise ValueError("Request body must be a JSON object")
        request = CustomChecklistItemRequest.model_validate(body)

        item = ChecklistItem(
            itemId=generate_custom_item_id(),
            week=request.week,
            text=request.text,
            completed=request.completed,
            isCustom=True,
            profileId=request.profileId,
            createdAt=utc_now_iso(),
        )
        self.db_service.put_checklist_item(
            {
                "userId": user_id,
                "itemId": item.itemId,
                "profileId": item.profileId,
                "week": item.week,
                "text": item.text,
                "completed": item.completed,
                "createdAt": item.createdAt,
            }
        )

        log_event(
            logger,
            "CHECKLIST_ITEM_CREATED",
            userId=user_id,
            profileId=item.profileId,
            itemId=item.itemId,
        )
        return item

    def set_status(
        self, user_id: str, item_id: str, body: Any
    ) -> Optional[Dict[str, Any]]:
        """
        Set the completion status of a standard or custom item.

        Returns:
            ``{success, itemId, completed}``, or None if the item does not exist

        Raises:
            ValueError: If the body is invalid, or ``profileId`` is missing
                for a standard item
        """
        if not isinstance(body, dict):
            raise ValueError("Request body must be a JSON object")
        update = ChecklistStatusUpdate.model_validate(body)

        if is_custom_item_id(item_id):
            updated = self.db_service.set_checklist_completed(
                user_id, item_id, update.completed, must_exist=True
            )
            if updated is None:
                return None
        else:
            if item_id not in {item.itemId for item in load_standard_items()}:
                return None
            if not update.profileId:
                raise ValueError("profileId is required for standard checklist items")
            self.db_service.set_checklist_completed(
                user_id,
                status_key(item_id, update.profileId),
                update.completed,
                profile_id=update.profileId,
            )

        log_event(
            logger,
            "CHECKLIST_STATUS_UPDATED",
            userId=user_id,
            itemId=item_id,
            completed=update.completed,
        )
        return {"success": True, "itemId": item_id, "completed": update.completed}
