"""
BabyTracker: Serverless baby and pregnancy tracking on AWS Lambda.

This package provides the backend of a baby-care tracker: baby profiles,
nine kinds of tracker entries (sleep, nursing, bottle, diaper, solids,
medicine, growth, potty, temperature), time-windowed reports, a notes feed
and a pregnancy checklist, stored in DynamoDB behind API Gateway.

Modules:
    lambdas: AWS Lambda function handlers for the REST API
    services: Business logic and DynamoDB persistence
    models: Data models and validation using Pydantic
    client: HTTP client for the deployed REST API
    utils: Date and logging helpers

Version: 0.1.0
"""

__version__ = "0.1.0"

from .models import BabyProfile, ChecklistItem, TrackerType
from .services import (
    ChecklistService,
    DynamoDBService,
    ProfileService,
    ReportService,
    TrackerService,
)

__all__ = [
    "BabyProfile",
    "ChecklistItem",
    "TrackerType",
    "ChecklistService",
    "DynamoDBService",
    "ProfileService",
    "ReportService",
    "TrackerService",
]
