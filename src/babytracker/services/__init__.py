"""
Service layer for the BabyTracker application.

This module contains business logic and AWS service integrations used by
the API Lambda. Services own validation and persistence rules; the handler
only routes requests and shapes responses.

Classes:
    DynamoDBService: DynamoDB integration for data persistence
    ProfileService: Baby profile management and cascade deletion
    TrackerService: Generic tracker entry CRUD and the notes feed
    ReportService: Time-windowed tracker summaries and chart data
    ChecklistService: Pregnancy checklist items and completion status
"""

from .checklist_service import ChecklistService
from .dynamodb_service import DynamoDBService
from .profile_service import ProfileService
from .report_service import ReportService
from .tracker_service import TrackerService

__all__ = [
    "ChecklistService",
    "DynamoDBService",
    "ProfileService",
    "ReportService",
    "TrackerService",
]
