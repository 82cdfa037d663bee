"""
DynamoDB service for the BabyTracker application.

This service handles all interactions with DynamoDB for storing and
retrieving profiles, tracker entries, checklist state and users. It hides
key schemas, pagination and number conversion from the business services.

Tables:
    Babies: (userId, babyId) - one item per profile
    TrackerEntries: (babyId, entryId) - one item per logged event
    ChecklistStatus: (userId, itemId) - custom items and completion status
    Users: (userId) - optional, one item per user

Classes:
    DynamoDBService: Service for DynamoDB operations and data persistence
"""

import math
import os
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from ..utils.dates import utc_now_iso
from ..utils.log import get_logger, log_event

logger = get_logger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def to_dynamodb_value(value: Any) -> Any:
    """
    Convert a JSON value into something boto3 can store.

    boto3 rejects floats, so numbers become Decimals.

    Raises:
        ValueError: If the value contains NaN or infinity
    """
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("Numeric values must be finite")
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamodb_value(v) for v in value]
    return value


def from_dynamodb_value(value: Any) -> Any:
    """Convert a value read from DynamoDB back into plain JSON types."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamodb_value(v) for k, v in value.items()}
    if isinstance(value, (list, set)):
        return [from_dynamodb_value(v) for v in value]
    return value


def _is_conditional_failure(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED


class DynamoDBService:
    """
    Service for managing BabyTracker data in DynamoDB.

    This service provides a high-level interface over the application's
    tables. Expected misses (a missing item, a failed overwrite guard) are
    reported as ``None``/``False``; every other ``ClientError`` propagates.

    Attributes:
        dynamodb: Boto3 DynamoDB resource
        babies_table: Babies table resource
        entries_table: TrackerEntries table resource
        checklist_table: ChecklistStatus table resource
        users_table: Users table resource, or None when not configured

    Example:
        >>> db_service = DynamoDBService()
        >>> db_service.list_profiles("cognito-sub-123")
        [{'userId': 'cognito-sub-123', 'babyId': 'baby_...', ...}]
    """

    def __init__(
        self,
        babies_table: Optional[str] = None,
        tracker_entries_table: Optional[str] = None,
        checklist_status_table: Optional[str] = None,
        users_table: Optional[str] = None,
    ):
        """
        Initialize the DynamoDB service.

        Table names default to the environment variables the API Lambda is
        deployed with.

        Args:
            babies_table: Override for BABIES_TABLE_NAME
            tracker_entries_table: Override for TRACKER_ENTRIES_TABLE_NAME
            checklist_status_table: Override for CHECKLIST_STATUS_TABLE_NAME
            users_table: Override for USERS_TABLE_NAME (optional table)

        Raises:
            ValueError: If a required table name is missing or a table
                does not exist
        """
        self.babies_table_name = babies_table or os.getenv("BABIES_TABLE_NAME")
        self.entries_table_name = tracker_entries_table or os.getenv(
            "TRACKER_ENTRIES_TABLE_NAME"
        )
        self.checklist_table_name = checklist_status_table or os.getenv(
            "CHECKLIST_STATUS_TABLE_NAME"
        )
        self.users_table_name = users_table or os.getenv("USERS_TABLE_NAME")

        missing = [
            env_name
            for env_name, value in (
                ("BABIES_TABLE_NAME", self.babies_table_name),
                ("TRACKER_ENTRIES_TABLE_NAME", self.entries_table_name),
                ("CHECKLIST_STATUS_TABLE_NAME", self.checklist_table_name),
            )
            if not value
        ]
        if missing:
            raise ValueError(
                "Table names must be provided either as parameters or "
                f"environment variables: {', '.join(missing)}"
            )

        self.dynamodb = boto3.resource("dynamodb")
        self.babies_table = self._load_table(self.babies_table_name)
        self.entries_table = self._load_table(self.entries_table_name)
        self.checklist_table = self._load_table(self.checklist_table_name)
        self.users_table = (
            self._load_table(self.users_table_name) if self.users_table_name else None
        )

    def _load_table(self, table_name: str):
        table = self.dynamodb.Table(table_name)
        try:
            # Verify table exists by getting its description
            table.load()
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceNotFoundException":
                raise ValueError(f"DynamoDB table '{table_name}' not found") from e
            raise
        return table

    @staticmethod
    def _query_all(table, **kwargs: Any) -> List[Dict[str, Any]]:
        """Run a query and follow LastEvaluatedKey until every page is read."""
        items: List[Dict[str, Any]] = []
        while True:
            response = table.query(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
        return [from_dynamodb_value(item) for item in items]

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def list_profiles(self, user_id: str) -> List[Dict[str, Any]]:
        """Return every profile item owned by a user."""
        return self._query_all(
            self.babies_table, KeyConditionExpression=Key("userId").eq(user_id)
        )

    def get_profile(self, user_id: str, baby_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve one profile item.

        Because the key includes ``userId``, this is also the ownership check:
        a profile owned by somebody else is simply not found.
        """
        response = self.babies_table.get_item(Key={"userId": user_id, "babyId": baby_id})
        item = response.get("Item")
        return from_dynamodb_value(item) if item else None

    def put_profile(self, item: Dict[str, Any]) -> None:
        self.babies_table.put_item(Item=to_dynamodb_value(item))

    def update_profile(
        self, user_id: str, baby_id: str, name: str, birthday: str
    ) -> Optional[Dict[str, Any]]:
        """
        Update a profile's name and birthday.

        Returns:
            The full updated item, or None if the profile does not exist
        """
        try:
            response = self.babies_table.update_item(
                Key={"userId": user_id, "babyId": baby_id},
                UpdateExpression="SET #nm = :n, birthday = :b, updatedAt = :ua",
                ConditionExpression=Attr("babyId").exists(),
                ExpressionAttributeNames={"#nm": "name"},
                ExpressionAttributeValues={
                    ":n": name,
                    ":b": birthday,
                    ":ua": utc_now_iso(),
                },
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                return None
            raise
        return from_dynamodb_value(response.get("Attributes", {}))

    def delete_profile(self, user_id: str, baby_id: str) -> bool:
        """Delete a profile item. Returns True if the item existed."""
        response = self.babies_table.delete_item(
            Key={"userId": user_id, "babyId": baby_id}, ReturnValues="ALL_OLD"
        )
        return "Attributes" in response

    # ------------------------------------------------------------------
    # Tracker entries
    # ------------------------------------------------------------------

    def put_entry(self, item: Dict[str, Any]) -> bool:
        """
        Store a new tracker entry.

        The write is guarded so an existing entry with the same key is never
        overwritten.

        Returns:
            True if stored, False if the entryId was already taken
        """
        try:
            self.entries_table.put_item(
                Item=to_dynamodb_value(item),
                ConditionExpression=Attr("entryId").not_exists(),
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                log_event(
                    logger,
                    "ENTRY_ID_CONFLICT",
                    babyId=item.get("babyId"),
                    entryId=item.get("entryId"),
                )
                return False
            raise
        return True

    def replace_entry(self, item: Dict[str, Any]) -> bool:
        """
        Overwrite an existing tracker entry.

        Returns:
            True if replaced, False if the entry no longer exists
        """
        try:
            self.entries_table.put_item(
                Item=to_dynamodb_value(item),
                ConditionExpression=Attr("entryId").exists(),
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            raise
        return True

    def get_entry(self, baby_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
        response = self.entries_table.get_item(Key={"babyId": baby_id, "entryId": entry_id})
        item = response.get("Item")
        return from_dynamodb_value(item) if item else None

    def query_entries(
        self, baby_id: str, tracker_type: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Return a profile's entries, newest entryId first.

        Entry IDs are prefixed with their tracker type, so a tracker filter
        is a sort-key prefix condition rather than a scan-side filter.

        Args:
            baby_id: Profile partition key
            tracker_type: Optional tracker type to restrict to

        Returns:
            List of entry dictionaries
        """
        key_condition = Key("babyId").eq(baby_id)
        if tracker_type:
            key_condition = key_condition & Key("entryId").begins_with(f"{tracker_type}_")

        return self._query_all(
            self.entries_table,
            KeyConditionExpression=key_condition,
            ScanIndexForward=False,
        )

    def delete_entry(self, baby_id: str, entry_id: str) -> bool:
        """Delete a tracker entry. Returns True if the entry existed."""
        response = self.entries_table.delete_item(
            Key={"babyId": baby_id, "entryId": entry_id}, ReturnValues="ALL_OLD"
        )
        return "Attributes" in response

    def delete_entries_for_profile(self, baby_id: str) -> int:
        """
        Delete every tracker entry of a profile.

        The batch writer flushes in groups of 25 and resubmits unprocessed
        items.

        Returns:
            Number of entries deleted
        """
        keys = self._query_all(
            self.entries_table,
            KeyConditionExpression=Key("babyId").eq(baby_id),
            ProjectionExpression="babyId, entryId",
        )
        with self.entries_table.batch_writer() as batch:
            for key in keys:
                batch.delete_item(Key={"babyId": key["babyId"], "entryId": key["entryId"]})
        return len(keys)

    # ------------------------------------------------------------------
    # Checklist
    # ------------------------------------------------------------------

    def query_checklist(
        self, user_id: str, profile_id: str, custom_only: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Return a user's checklist rows for one profile.

        Args:
            user_id: Owning user
            profile_id: Profile to restrict to
            custom_only: Only return custom item rows

        Returns:
            List of checklist row dictionaries
        """
        key_condition = Key("userId").eq(user_id)
        if custom_only:
            key_condition = key_condition & Key("itemId").begins_with("custom_")

        return self._query_all(
            self.checklist_table,
            KeyConditionExpression=key_condition,
            FilterExpression=Attr("profileId").eq(profile_id),
        )

    def put_checklist_item(self, item: Dict[str, Any]) -> None:
        self.checklist_table.put_item(Item=to_dynamodb_value(item))

    def set_checklist_completed(
        self,
        user_id: str,
        item_key: str,
        completed: bool,
        profile_id: Optional[str] = None,
        must_exist: bool = False,
    ) -> Optional[Dict[str, Any]]:
        """
        Set the completion flag of a checklist row, creating it if allowed.

        Args:
            user_id: Owning user
            item_key: Sort key of the status row
            completed: New completion state
            profile_id: Profile to record on the row
            must_exist: Refuse to create the row (used for custom items)

        Returns:
            Updated attributes, or None if ``must_exist`` and the row is missing
        """
        update_expression = "SET completed = :c, updatedAt = :ua"
        values: Dict[str, Any] = {":c": completed, ":ua": utc_now_iso()}
        if profile_id:
            update_expression += ", profileId = :pid"
            values[":pid"] = profile_id

        kwargs: Dict[str, Any] = {
            "Key": {"userId": user_id, "itemId": item_key},
            "UpdateExpression": update_expression,
            "ExpressionAttributeValues": values,
            "ReturnValues": "ALL_NEW",
        }
        if must_exist:
            kwargs["ConditionExpression"] = Attr("itemId").exists()

        try:
            response = self.checklist_table.update_item(**kwargs)
        except ClientError as e:
            if _is_conditional_failure(e):
                return None
            raise
        return from_dynamodb_value(response.get("Attributes", {}))

    def delete_checklist_for_profile(self, user_id: str, profile_id: str) -> int:
        """Delete a user's checklist rows for a profile. Returns the count."""
        rows = self.query_checklist(user_id, profile_id)
        with self.checklist_table.batch_writer() as batch:
            for row in rows:
                batch.delete_item(Key={"userId": user_id, "itemId": row["itemId"]})
        return len(rows)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def ensure_user(self, user_id: str, email: Optional[str] = None) -> bool:
        """
        Record a user the first time they are seen.

        Returns:
            True if a new user row was written, False if it already existed
            or no Users table is configured
        """
        if self.users_table is None:
            return False

        item = {"userId": user_id, "createdAt": utc_now_iso()}
        if email:
            item["email"] = email
        try:
            self.users_table.put_item(
                Item=item, ConditionExpression=Attr("userId").not_exists()
            )
        except ClientError as e:
            if _is_conditional_failure(e):
                return False
            raise
        return True

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def health_check(self) -> Dict[str, Any]:
        """
        Perform a health check on the configured tables.

        Returns:
            Dictionary with an overall status and per-table status
        """
        tables = {
            "babies": self.babies_table_name,
            "trackerEntries": self.entries_table_name,
            "checklistStatus": self.checklist_table_name,
        }
        if self.users_table_name:
            tables["users"] = self.users_table_name

        client = self.dynamodb.meta.client
        result: Dict[str, Any] = {"status": "healthy", "tables": {}}
        for label, table_name in tables.items():
            try:
                description = client.describe_table(TableName=table_name)
                result["tables"][label] = {
                    "name": table_name,
                    "status": description["Table"]["TableStatus"],
                }
            except ClientError as e:
                result["status"] = "unhealthy"
                result["tables"][label] = {"name": table_name, "error": str(e)}

        result["region"] = client.meta.region_name
        return result
