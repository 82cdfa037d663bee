"""
Tracker service for the BabyTracker application.

One generic, tracker-parameterized implementation of entry CRUD: the
tracker type selects the payload schema, everything else is shared. The
service also builds the notes feed, which is every entry carrying notes.

Classes:
    TrackerService: Generic tracker entry management
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..models.tracker_entry import (
    SERVER_FIELDS,
    TrackerType,
    generate_entry_id,
    validate_payload,
)
from ..utils.dates import entry_event_time, parse_datetime, utc_now_iso
from ..utils.log import get_logger, log_event
from .dynamodb_service import DynamoDBService

logger = get_logger(__name__)

MAX_ID_ATTEMPTS = 3
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class TrackerService:
    """
    Generic CRUD service for tracker entries.

    Ownership of the profile is checked by the caller before any of these
    methods run; the service only scopes by profile (``babyId``).

    Attributes:
        db_service: DynamoDB service for data persistence

    Example:
        >>> tracker_service = TrackerService()
        >>> entry = tracker_service.create_entry(
        ...     "baby_123", TrackerType.BOTTLE, {"volume": 120, "unit": "ml"}
        ... )
        >>> entry["entryId"]
        'bottle_1739175300123_9f3a1c2e'
    """

    def __init__(self, db_service: Optional[DynamoDBService] = None):
        self.db_service = db_service or DynamoDBService()

    def create_entry(
        self, profile_id: str, tracker_type: TrackerType, body: Any
    ) -> Dict[str, Any]:
        """
        Validate and store a new entry.

        Args:
            profile_id: Profile the entry belongs to
            tracker_type: Tracker the entry is logged under
            body: Decoded JSON request body

        Returns:
            The stored entry, including server-owned fields

        Raises:
            ValueError: If the body fails the tracker's schema
            RuntimeError: If no free entryId could be generated
        """
        fields = validate_payload(tracker_type, body)

        for _ in range(MAX_ID_ATTEMPTS):
            item = {
                **fields,
                "babyId": profile_id,
                "entryId": generate_entry_id(tracker_type),
                "trackerType": tracker_type.value,
                "createdAt": utc_now_iso(),
            }
            if self.db_service.put_entry(item):
                log_event(
                    logger,
                    "ENTRY_CREATED",
                    profileId=profile_id,
                    trackerType=tracker_type.value,
                    entryId=item["entryId"],
                )
                return item

        raise RuntimeError("Could not allocate a unique entry ID")

    def list_entries(
        self, profile_id: str, tracker_type: TrackerType
    ) -> List[Dict[str, Any]]:
        """Return a profile's entries for one tracker, newest first."""
        return self.db_service.query_entries(profile_id, tracker_type.value)

    def get_entry(
        self, profile_id: str, tracker_type: TrackerType, entry_id: str
    ) -> Optional[Dict[str, Any]]:
        """Return an entry if it exists under this profile and tracker."""
        item = self.db_service.get_entry(profile_id, entry_id)
        if not item or item.get("trackerType") != tracker_type.value:
            return None
        return item

    def update_entry(
        self, profile_id: str, tracker_type: TrackerType, entry_id: str, body: Any
    ) -> Optional[Dict[str, Any]]:
        """
        Merge new values into an existing entry.

        The merged record is validated as a whole, so a partial update
        cannot move ``endDateTime`` before an existing ``startDateTime``.

        Returns:
            The updated entry, or None if it does not exist

        Raises:
            ValueError: If the merged payload fails the tracker's schema
        """
        existing = self.get_entry(profile_id, tracker_type, entry_id)
        if existing is None:
            return None
        if not isinstance(body, dict):
            raise ValueError("Request body must be a JSON object")

        current = {k: v for k, v in existing.items() if k not in SERVER_FIELDS}
        fields = validate_payload(tracker_type, {**current, **body})

        item = {
            **fields,
            **{k: existing[k] for k in SERVER_FIELDS if k in existing},
            "updatedAt": utc_now_iso(),
        }
        if not self.db_service.replace_entry(item):
            return None

        log_event(
            logger,
            "ENTRY_UPDATED",
            profileId=profile_id,
            trackerType=tracker_type.value,
            entryId=entry_id,
        )
        return item

    def delete_entry(
        self, profile_id: str, tracker_type: TrackerType, entry_id: str
    ) -> bool:
        """Delete an entry. Returns False if it does not exist."""
        if self.get_entry(profile_id, tracker_type, entry_id) is None:
            return False
        return self.db_service.delete_entry(profile_id, entry_id)

    def list_notes(
        self, profile_id: str, tracker_type: Optional[TrackerType] = None
    ) -> List[Dict[str, Any]]:
        """
        Return every entry with non-blank notes, newest event first.

        Args:
            profile_id: Profile to read
            tracker_type: Optional tracker to restrict to

        Returns:
            List of note dictionaries
        """
        entries = self.db_service.query_entries(
            profile_id, tracker_type.value if tracker_type else None
        )

        notes = []
        for entry in entries:
            text = entry.get("notes")
            if not isinstance(text, str) or not text.strip():
                continue
            notes.append(
                {
                    "id": entry.get("entryId"),
                    "trackerType": entry.get("trackerType"),
                    "notes": text,
                    "profileId": entry.get("babyId"),
                    "createdAt": entry.get("createdAt"),
                    "startDateTime": entry.get("startDateTime"),
                    "startTime": entry.get("startTime"),
                }
            )

        notes.sort(
            key=lambda note: parse_datetime(entry_event_time(note)) or _OLDEST,
            reverse=True,
        )
        return notes
