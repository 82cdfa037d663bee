"""
Pytest configuration and shared fixtures for BabyTracker tests.

This module contains pytest configuration, shared fixtures, and test utilities
that are used across multiple test modules. It sets up mocked DynamoDB tables
matching the deployed key schemas, service instances and API Gateway events.

Fixtures:
    mock_dynamodb_tables: Mocked Babies/TrackerEntries/ChecklistStatus/Users tables
    dynamodb_service: DynamoDBService bound to the mocked tables
    profile_service, tracker_service, report_service, checklist_service
    sample_profile: A stored profile owned by TEST_USER_ID
    api_gateway_event: Factory for authenticated API Gateway proxy events
"""

import json
import os
from typing import Any, Dict, Optional

import boto3
import pytest
from moto import mock_aws

from src.babytracker.services.checklist_service import ChecklistService
from src.babytracker.services.dynamodb_service import DynamoDBService
from src.babytracker.services.profile_service import ProfileService
from src.babytracker.services.report_service import ReportService
from src.babytracker.services.tracker_service import TrackerService


# Test configuration constants
BABIES_TABLE = "test-babies"
TRACKER_ENTRIES_TABLE = "test-tracker-entries"
CHECKLIST_STATUS_TABLE = "test-checklist-status"
USERS_TABLE = "test-users"
TEST_USER_ID = "user-sub-123"
OTHER_USER_ID = "user-sub-456"
TEST_EMAIL = "parent@example.com"

TABLE_KEYS = {
    BABIES_TABLE: ("userId", "babyId"),
    TRACKER_ENTRIES_TABLE: ("babyId", "entryId"),
    CHECKLIST_STATUS_TABLE: ("userId", "itemId"),
    USERS_TABLE: ("userId", None),
}


@pytest.fixture(scope="session")
def aws_credentials():
    """
    Fixture to set up AWS credentials for testing.

    Sets environment variables for AWS credentials that are used by moto
    for mocking AWS services. These are fake credentials for testing only.
    """
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


def _create_table(dynamodb, name: str, hash_key: str, range_key: Optional[str]):
    key_schema = [{"AttributeName": hash_key, "KeyType": "HASH"}]
    attributes = [{"AttributeName": hash_key, "AttributeType": "S"}]
    if range_key:
        key_schema.append({"AttributeName": range_key, "KeyType": "RANGE"})
        attributes.append({"AttributeName": range_key, "AttributeType": "S"})

    table = dynamodb.create_table(
        TableName=name,
        KeySchema=key_schema,
        AttributeDefinitions=attributes,
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    return table


@pytest.fixture
def mock_dynamodb_tables(aws_credentials, monkeypatch):
    """
    Fixture that creates mocked DynamoDB tables for testing.

    Uses moto to create in-memory tables with the same key schema as the
    deployed stack, and points the table-name environment variables at
    them so services and the Lambda handler pick them up.

    Returns:
        Dict[str, boto3 Table]: Table resources keyed by table name
    """
    monkeypatch.setenv("BABIES_TABLE_NAME", BABIES_TABLE)
    monkeypatch.setenv("TRACKER_ENTRIES_TABLE_NAME", TRACKER_ENTRIES_TABLE)
    monkeypatch.setenv("CHECKLIST_STATUS_TABLE_NAME", CHECKLIST_STATUS_TABLE)
    monkeypatch.setenv("USERS_TABLE_NAME", USERS_TABLE)

    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        tables = {
            name: _create_table(dynamodb, name, hash_key, range_key)
            for name, (hash_key, range_key) in TABLE_KEYS.items()
        }
        yield tables


@pytest.fixture
def dynamodb_service(mock_dynamodb_tables):
    """
    Fixture that provides a DynamoDBService bound to the mocked tables.

    Returns:
        DynamoDBService: Configured service instance
    """
    return DynamoDBService()


@pytest.fixture
def profile_service(dynamodb_service):
    return ProfileService(dynamodb_service)


@pytest.fixture
def tracker_service(dynamodb_service):
    return TrackerService(dynamodb_service)


@pytest.fixture
def report_service(dynamodb_service):
    return ReportService(dynamodb_service)


@pytest.fixture
def checklist_service(dynamodb_service):
    return ChecklistService(dynamodb_service)


@pytest.fixture
def sample_profile(profile_service):
    """
    Fixture that stores a profile owned by TEST_USER_ID.

    Returns:
        BabyProfile: The stored profile
    """
    return profile_service.create_profile(
        TEST_USER_ID, {"name": "Ada", "birthday": "2025-02-10"}, TEST_EMAIL
    )


@pytest.fixture
def api_gateway_event():
    """
    Fixture that provides a factory for API Gateway proxy events.

    Events are authenticated as TEST_USER_ID unless ``user_id`` is None.
    Dict bodies are JSON-encoded; strings are passed through unchanged.

    Returns:
        Callable building API Gateway event dictionaries
    """

    def _make_event(
        method: str,
        resource: str,
        path_params: Optional[Dict[str, str]] = None,
        query: Optional[Dict[str, str]] = None,
        body: Any = None,
        user_id: Optional[str] = TEST_USER_ID,
    ) -> Dict[str, Any]:
        claims = {"sub": user_id, "email": TEST_EMAIL} if user_id else {}
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        return {
            "httpMethod": method,
            "resource": resource,
            "path": resource,
            "pathParameters": path_params,
            "queryStringParameters": query,
            "headers": {"Content-Type": "application/json"},
            "body": body,
            "requestContext": {
                "requestId": "test-request-123",
                "authorizer": {"claims": claims},
            },
        }

    return _make_event


# Pytest configuration
def pytest_configure(config):
    """
    Pytest configuration function.

    Sets up custom markers for organizing test execution.
    """
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "aws: mark test as requiring AWS services")


# Test utilities
def response_json(response: Dict[str, Any]) -> Any:
    """Decode the JSON body of a Lambda proxy response."""
    return json.loads(response["body"])
