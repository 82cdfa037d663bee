"""
API Gateway Lambda handler for the BabyTracker application.

This Lambda function provides the REST API behind the web and mobile apps:
baby profiles, generic tracker entry CRUD, reports, the notes feed and the
pregnancy checklist. Every route except ``/health`` sits behind a Cognito
authorizer, and the caller is identified by the ``sub`` claim.

Functions:
    lambda_handler: Main entry point for API Gateway events
    _handle_health_check: Handle GET /health
    _handle_*_profile(s): Handle /profiles and /profiles/{profileId}
    _handle_*_entry/entries: Handle /profiles/{profileId}/trackers/...
    _handle_get_report: Handle GET /profiles/{profileId}/reports and /reports
    _handle_get_notes: Handle GET /notes
    _handle_*_checklist*: Handle /checklist and /checklist/status
    _create_response: Create standardized HTTP responses
    _handle_cors_preflight: Handle OPTIONS requests for CORS
"""

import base64
import json
import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import unquote

from pydantic import ValidationError

from .. import __version__
from ..models.tracker_entry import TrackerType
from ..services.checklist_service import ChecklistService
from ..services.dynamodb_service import DynamoDBService
from ..services.profile_service import ProfileService
from ..services.report_service import ReportService, parse_tracker_list
from ..services.tracker_service import TrackerService
from ..utils.dates import calculate_pregnancy_week, utc_now_iso
from ..utils.log import get_logger, log_event

logger = get_logger(__name__)

STAGE_PREFIX = re.compile(r"^/(prod|dev|staging)(?=/|$)")


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler for API Gateway events.

    Routes incoming HTTP requests to the appropriate handler functions
    based on the HTTP method and resource template. Stage prefixes and
    trailing slashes are stripped before routing.

    Args:
        event: API Gateway proxy event containing HTTP request data
        context: AWS Lambda runtime context

    Returns:
        HTTP response dictionary with statusCode, headers, and body

    Event Structure:
        {
            "httpMethod": "GET|POST|PUT|DELETE|OPTIONS",
            "resource": "/profiles/{profileId}/trackers/{trackerType}",
            "pathParameters": {"profileId": "baby_...", "trackerType": "sleep"},
            "queryStringParameters": {"trackers": "sleep,bottle"},
            "requestContext": {"authorizer": {"claims": {"sub": "..."}}},
            "body": "{\"duration\": 45}"
        }
    """
    try:
        http_method = (event.get("httpMethod") or "").upper()
        resource = _normalize_path(event.get("resource") or event.get("path") or "")
        path_params = event.get("pathParameters") or {}
        query_params = event.get("queryStringParameters") or {}

        # Handle CORS preflight requests
        if http_method == "OPTIONS":
            return _handle_cors_preflight()

        if resource == "/health" and http_method == "GET":
            return _handle_health_check()

        user_id, email = _get_caller(event)
        _log_api_request(event, resource, user_id)
        if not user_id:
            return _create_error_response(
                401, "Unauthorized", "User identifier missing from authorizer claims"
            )

        try:
            body = _parse_body(event)
        except ValueError as e:
            return _create_error_response(400, "Invalid Request Body", str(e))

        try:
            db_service = DynamoDBService()
        except ValueError as e:
            _log_api_error("CONFIGURATION_ERROR", str(e), {"resource": resource})
            return _create_error_response(500, "Configuration missing", str(e))

        profiles = ProfileService(db_service)
        trackers = TrackerService(db_service)
        reports = ReportService(db_service)
        checklist = ChecklistService(db_service)

        profile_id = _path_param(path_params, "profileId")
        tracker_name = _path_param(path_params, "trackerType")
        entry_id = _path_param(path_params, "entryId")

        # Route to appropriate handler based on resource and method
        if resource == "/profiles" and http_method == "GET":
            return _handle_list_profiles(profiles, user_id)

        elif resource == "/profiles" and http_method == "POST":
            return _handle_create_profile(profiles, user_id, body, email)

        elif resource == "/profiles/{profileId}" and http_method == "GET":
            return _handle_get_profile(profiles, user_id, profile_id)

        elif resource == "/profiles/{profileId}" and http_method == "PUT":
            return _handle_update_profile(profiles, user_id, profile_id, body)

        elif resource == "/profiles/{profileId}" and http_method == "DELETE":
            return _handle_delete_profile(profiles, user_id, profile_id)

        elif resource == "/profiles/{profileId}/trackers/{trackerType}" and http_method == "GET":
            return _handle_list_entries(profiles, trackers, user_id, profile_id, tracker_name)

        elif resource == "/profiles/{profileId}/trackers/{trackerType}" and http_method == "POST":
            return _handle_create_entry(
                profiles, trackers, user_id, profile_id, tracker_name, body
            )

        elif resource == "/profiles/{profileId}/trackers/{trackerType}/{entryId}" and http_method == "GET":
            return _handle_get_entry(
                profiles, trackers, user_id, profile_id, tracker_name, entry_id
            )

        elif resource == "/profiles/{profileId}/trackers/{trackerType}/{entryId}" and http_method == "PUT":
            return _handle_update_entry(
                profiles, trackers, user_id, profile_id, tracker_name, entry_id, body
            )

        elif resource == "/profiles/{profileId}/trackers/{trackerType}/{entryId}" and http_method == "DELETE":
            return _handle_delete_entry(
                profiles, trackers, user_id, profile_id, tracker_name, entry_id
            )

        elif resource == "/profiles/{profileId}/reports" and http_method == "GET":
            return _handle_get_report(profiles, reports, user_id, profile_id, query_params)

        elif resource == "/reports" and http_method == "GET":
            return _handle_get_report(
                profiles, reports, user_id, query_params.get("profileId"), query_params
            )

        elif resource == "/notes" and http_method == "GET":
            return _handle_get_notes(profiles, trackers, user_id, query_params)

        elif resource == "/checklist" and http_method == "GET":
            return _handle_get_checklist(profiles, checklist, user_id, query_params)

        elif resource == "/checklist" and http_method == "POST":
            return _handle_create_checklist_item(profiles, checklist, user_id, body)

        elif resource == "/checklist/status" and http_method == "GET":
            return _handle_get_checklist_status(profiles, checklist, user_id, query_params)

        elif resource == "/checklist/status/{itemId}" and http_method == "PUT":
            item_id = _path_param(path_params, "itemId")
            return _handle_update_checklist_status(profiles, checklist, user_id, item_id, body)

        else:
            return _create_error_response(
                404,
                "Not Found",
                f"Resource {resource} with method {http_method} not found",
            )

    except Exception as e:
        _log_api_error("UNEXPECTED_ERROR", str(e), {"resource": event.get("resource")})
        return _create_error_response(500, "Internal Server Error", "Unexpected error occurred")


# ----------------------------------------------------------------------
# Health
# ----------------------------------------------------------------------


def _handle_health_check() -> Dict[str, Any]:
    """
    Handle GET /health endpoint for service health monitoring.

    Response Body:
        {
            "status": "healthy|unhealthy",
            "tables": {"babies": {"name": "...", "status": "ACTIVE"}, ...},
            "region": "us-east-1",
            "environment": "dev|staging|prod",
            "version": "0.1.0"
        }
    """
    try:
        health_result = DynamoDBService().health_check()
        response_data = {
            **health_result,
            "environment": ENVIRONMENT,
            "version": __version__,
        }
        status_code = 200 if health_result["status"] == "healthy" else 503
        return _create_response(status_code, response_data)

    except Exception as e:
        _log_api_error("HEALTH_CHECK_ERROR", str(e))
        return _create_error_response(503, "Health Check Failed", str(e))


# ----------------------------------------------------------------------
# Profiles
# ----------------------------------------------------------------------


def _handle_list_profiles(profiles: ProfileService, user_id: str) -> Dict[str, Any]:
    try:
        data = [profile.to_api_dict() for profile in profiles.list_profiles(user_id)]
        return _create_response(200, data)
    except Exception as e:
        _log_api_error("LIST_PROFILES_ERROR", str(e), {"userId": user_id})
        return _create_error_response(500, "Failed to retrieve profiles", str(e))


def _handle_create_profile(
    profiles: ProfileService, user_id: str, body: Any, email: Optional[str]
) -> Dict[str, Any]:
    """
    Handle POST /profiles.

    Request Body:
        {"name": "Ada", "birthday": "2025-02-10"}
    """
    try:
        profile = profiles.create_profile(user_id, body, email)
        return _create_response(201, profile.to_api_dict())
    except ValueError as e:
        return _create_validation_error(e)
    except Exception as e:
        _log_api_error("CREATE_PROFILE_ERROR", str(e), {"userId": user_id})
        return _create_error_response(500, "Failed to create profile", str(e))


def _handle_get_profile(
    profiles: ProfileService, user_id: str, profile_id: Optional[str]
) -> Dict[str, Any]:
    """Handle GET /profiles/{profileId}, including derived age/due fields."""
    try:
        profile = profiles.get_profile(user_id, profile_id) if profile_id else None
        if profile is None:
            return _profile_not_found(profile_id)
        return _create_response(200, ProfileService.describe_profile(profile))
    except Exception as e:
        _log_api_error("GET_PROFILE_ERROR", str(e), {"profileId": profile_id})
        return _create_error_response(500, "Failed to retrieve profile", str(e))


def _handle_update_profile(
    profiles: ProfileService, user_id: str, profile_id: Optional[str], body: Any
) -> Dict[str, Any]:
    try:
        if not profile_id:
            return _create_error_response(400, "Missing Profile ID", "profileId is required")
        profile = profiles.update_profile(user_id, profile_id, body)
        if profile is None:
            return _profile_not_found(profile_id)
        return _create_response(200, profile.to_api_dict())
    except ValueError as e:
        return _create_validation_error(e)
    except Exception as e:
        _log_api_error("UPDATE_PROFILE_ERROR", str(e), {"profileId": profile_id})
        return _create_error_response(500, "Failed to update profile", str(e))


def _handle_delete_profile(
    profiles: ProfileService, user_id: str, profile_id: Optional[str]
) -> Dict[str, Any]:
    """
    Handle DELETE /profiles/{profileId}.

    Deletes the profile together with its tracker entries and the caller's
    checklist rows for it.
    """
    try:
        counts = profiles.delete_profile(user_id, profile_id) if profile_id else None
        if counts is None:
            return _profile_not_found(profile_id)
        return _create_response(
            200,
            {
                "message": (
                    f"Profile {profile_id} and all related tracker entries "
                    "deleted successfully"
                ),
                **counts,
            },
        )
    except Exception as e:
        _log_api_error("DELETE_PROFILE_ERROR", str(e), {"profileId": profile_id})
        return _create_error_response(500, "Failed to delete profile", str(e))


# ----------------------------------------------------------------------
# Tracker entries
# ----------------------------------------------------------------------


def _handle_list_entries(
    profiles: ProfileService,
    trackers: TrackerService,
    user_id: str,
    profile_id: Optional[str],
    tracker_name: Optional[str],
) -> Dict[str, Any]:
    try:
        tracker_type = TrackerType.parse(tracker_name)
        if not _owns_profile(profiles, user_id, profile_id):
            return _profile_not_found(profile_id)
        return _create_response(200, trackers.list_entries(profile_id, tracker_type))
    except ValueError as e:
        return _create_error_response(400, "Invalid Tracker Type", str(e))
    except Exception as e:
        _log_api_error(
            "LIST_ENTRIES_ERROR", str(e), {"profileId": profile_id, "trackerType": tracker_name}
        )
        return _create_error_response(500, "Failed to retrieve tracker entries", str(e))


def _handle_create_entry(
    profiles: ProfileService,
    trackers: TrackerService,
    user_id: str,
    profile_id: Optional[str],
    tracker_name: Optional[str],
    body: Any,
) -> Dict[str, Any]:
    """
    Handle POST /profiles/{profileId}/trackers/{trackerType}.

    The body is validated against the tracker's schema and stored as
    submitted, alongside the server-owned fields.

    Response Body:
        {
            "babyId": "baby_...",
            "entryId": "sleep_1739175300123_9f3a1c2e",
            "trackerType": "sleep",
            "createdAt": "2025-02-10T08:15:00.123Z",
            "startDateTime": "...",
            "endDateTime": "..."
        }
    """
    try:
        tracker_type = TrackerType.parse(tracker_name)
        if not _owns_profile(profiles, user_id, profile_id):
            return _profile_not_found(profile_id)
        entry = trackers.create_entry(profile_id, tracker_type, body)
        return _create_response(201, entry)
    except ValueError as e:
        return _create_validation_error(e)
    except Exception as e:
        _log_api_error(
            "CREATE_ENTRY_ERROR", str(e), {"profileId": profile_id, "trackerType": tracker_name}
        )
        return _create_error_response(500, "Failed to create tracker entry", str(e))


def _handle_get_entry(
    profiles: ProfileService,
    trackers: TrackerService,
    user_id: str,
    profile_id: Optional[str],
    tracker_name: Optional[str],
    entry_id: Optional[str],
) -> Dict[str, Any]:
    try:
        tracker_type = TrackerType.parse(tracker_name)
        if not _owns_profile(profiles, user_id, profile_id):
            return _profile_not_found(profile_id)
        entry = trackers.get_entry(profile_id, tracker_type, entry_id) if entry_id else None
        if entry is None:
            return _entry_not_found(entry_id)
        return _create_response(200, entry)
    except ValueError as e:
        return _create_error_response(400, "Invalid Tracker Type", str(e))
    except Exception as e:
        _log_api_error("GET_ENTRY_ERROR", str(e), {"profileId": profile_id, "entryId": entry_id})
        return _create_error_response(500, "Failed to retrieve tracker entry", str(e))


def _handle_update_entry(
    profiles: ProfileService,
    trackers: TrackerService,
    user_id: str,
    profile_id: Optional[str],
    tracker_name: Optional[str],
    entry_id: Optional[str],
    body: Any,
) -> Dict[str, Any]:
    try:
        tracker_type = TrackerType.parse(tracker_name)
        if not _owns_profile(profiles, user_id, profile_id):
            return _profile_not_found(profile_id)
        entry = (
            trackers.update_entry(profile_id, tracker_type, entry_id, body) if entry_id else None
        )
        if entry is None:
            return _entry_not_found(entry_id)
        return _create_response(200, entry)
    except ValueError as e:
        return _create_validation_error(e)
    except Exception as e:
        _log_api_error(
            "UPDATE_ENTRY_ERROR", str(e), {"profileId": profile_id, "entryId": entry_id}
        )
        return _create_error_response(500, "Failed to update tracker entry", str(e))


def _handle_delete_entry(
    profiles: ProfileService,
    trackers: TrackerService,
    user_id: str,
    profile_id: Optional[str],
    tracker_name: Optional[str],
    entry_id: Optional[str],
) -> Dict[str, Any]:
    try:
        tracker_type = TrackerType.parse(tracker_name)
        if not _owns_profile(profiles, user_id, profile_id):
            return _profile_not_found(profile_id)
        if not entry_id or not trackers.delete_entry(profile_id, tracker_type, entry_id):
            return _entry_not_found(entry_id)
        return _create_response(200, {"message": "Tracker entry deleted"})
    except ValueError as e:
        return _create_error_response(400, "Invalid Tracker Type", str(e))
    except Exception as e:
        _log_api_error(
            "DELETE_ENTRY_ERROR", str(e), {"profileId": profile_id, "entryId": entry_id}
        )
        return _create_error_response(500, "Failed to delete tracker entry", str(e))


# ----------------------------------------------------------------------
# Reports and notes
# ----------------------------------------------------------------------


def _handle_get_report(
    profiles: ProfileService,
    reports: ReportService,
    user_id: str,
    profile_id: Optional[str],
    query_params: Dict[str, str],
) -> Dict[str, Any]:
    """
    Handle GET /profiles/{profileId}/reports and GET /reports.

    Query Parameters:
        - trackers: Comma separated tracker names (required)
        - timeRange: last24hours|last7days|last30days (required)
        - profileId: Profile to report on (GET /reports only)

    Response Body:
        {
            "sleepSummary": {"totalHours": 11.5, "avgDuration": 1.92, "chartData": [...]},
            "bottleSummary": {"totalBottles": 6, "avgVolume": 110.0, "chartData": [...]}
        }
    """
    try:
        raw_trackers = query_params.get("trackers")
        time_range = query_params.get("timeRange")
        if not profile_id or not raw_trackers or not time_range:
            return _create_error_response(
                400,
                "Missing Parameters",
                "Missing required parameters: profileId, trackers, or timeRange",
            )

        tracker_types = parse_tracker_list(raw_trackers)
        if not _owns_profile(profiles, user_id, profile_id):
            return _profile_not_found(profile_id)

        return _create_response(200, reports.build_report(profile_id, tracker_types, time_range))
    except ValueError as e:
        return _create_error_response(400, "Invalid Parameters", str(e))
    except Exception as e:
        _log_api_error("GET_REPORT_ERROR", str(e), {"profileId": profile_id})
        return _create_error_response(500, "Failed to build report", str(e))


def _handle_get_notes(
    profiles: ProfileService,
    trackers: TrackerService,
    user_id: str,
    query_params: Dict[str, str],
) -> Dict[str, Any]:
    """
    Handle GET /notes.

    Query Parameters:
        - profileId: Profile to read (required)
        - trackerType: Restrict to one tracker (optional)
    """
    profile_id = query_params.get("profileId")
    try:
        if not profile_id:
            return _create_error_response(
                400, "Missing Parameters", "Missing required query parameter: profileId"
            )
        tracker_name = query_params.get("trackerType")
        tracker_type = TrackerType.parse(tracker_name) if tracker_name else None
        if not _owns_profile(profiles, user_id, profile_id):
            return _profile_not_found(profile_id)

        return _create_response(200, trackers.list_notes(profile_id, tracker_type))
    except ValueError as e:
        return _create_error_response(400, "Invalid Parameters", str(e))
    except Exception as e:
        _log_api_error("GET_NOTES_ERROR", str(e), {"profileId": profile_id})
        return _create_error_response(500, "Failed to retrieve notes", str(e))


# ----------------------------------------------------------------------
# Checklist
# ----------------------------------------------------------------------


def _handle_get_checklist(
    profiles: ProfileService,
    checklist: ChecklistService,
    user_id: str,
    query_params: Dict[str, str],
) -> Dict[str, Any]:
    """
    Handle GET /checklist.

    Query Parameters:
        - profileId: Profile to read (required)
        - includeStandard: "true" to include the bundled standard items
        - upToWeek: Only items due by this week; "current" resolves to the
          profile's current pregnancy week
    """
    profile_id = query_params.get("profileId")
    try:
        if not profile_id:
            return _create_error_response(
                400, "Missing Parameters", "Missing required query parameter: profileId"
            )
        profile = profiles.get_profile(user_id, profile_id)
        if profile is None:
            return _profile_not_found(profile_id)

        include_standard = (query_params.get("includeStandard") or "").lower() == "true"
        up_to_week = _parse_up_to_week(query_params.get("upToWeek"), profile.birthday)

        items = checklist.get_checklist(user_id, profile_id, include_standard, up_to_week)
        return _create_response(200, items)
    except ValueError as e:
        return _create_error_response(400, "Invalid Parameters", str(e))
    except Exception as e:
        _log_api_error("GET_CHECKLIST_ERROR", str(e), {"profileId": profile_id})
        return _create_error_response(500, "Failed to retrieve checklist", str(e))


def _handle_create_checklist_item(
    profiles: ProfileService, checklist: ChecklistService, user_id: str, body: Any
) -> Dict[str, Any]:
    """
    Handle POST /checklist.

    Request Body:
        {"text": "Tour the birth center", "week": 30, "profileId": "baby_..."}
    """
    try:
        profile_id = body.get("profileId") if isinstance(body, dict) else None
        if isinstance(profile_id, str) and profile_id:
            if not _owns_profile(profiles, user_id, profile_id):
                return _profile_not_found(profile_id)

        item = checklist.add_custom_item(user_id, body)
        return _create_response(201, item.to_api_dict())
    except ValueError as e:
        return _create_validation_error(e)
    except Exception as e:
        _log_api_error("CREATE_CHECKLIST_ITEM_ERROR", str(e), {"userId": user_id})
        return _create_error_response(500, "Failed to create checklist item", str(e))


def _handle_get_checklist_status(
    profiles: ProfileService,
    checklist: ChecklistService,
    user_id: str,
    query_params: Dict[str, str],
) -> Dict[str, Any]:
    profile_id = query_params.get("profileId")
    try:
        if not profile_id:
            return _create_error_response(
                400, "Missing Parameters", "Missing required query parameter: profileId"
            )
        if not _owns_profile(profiles, user_id, profile_id):
            return _profile_not_found(profile_id)
        return _create_response(200, checklist.list_statuses(user_id, profile_id))
    except Exception as e:
        _log_api_error("GET_CHECKLIST_STATUS_ERROR", str(e), {"profileId": profile_id})
        return _create_error_response(500, "Failed to retrieve checklist status", str(e))


def _handle_update_checklist_status(
    profiles: ProfileService,
    checklist: ChecklistService,
    user_id: str,
    item_id: Optional[str],
    body: Any,
) -> Dict[str, Any]:
    """
    Handle PUT /checklist/status/{itemId}.

    Request Body:
        {"completed": true, "profileId": "baby_..."}
    """
    try:
        if not item_id:
            return _create_error_response(400, "Missing Item ID", "itemId is required")

        profile_id = body.get("profileId") if isinstance(body, dict) else None
        if isinstance(profile_id, str) and profile_id:
            if not _owns_profile(profiles, user_id, profile_id):
                return _profile_not_found(profile_id)

        result = checklist.set_status(user_id, item_id, body)
        if result is None:
            return _create_error_response(
                404, "Checklist Item Not Found", f"Checklist item '{item_id}' not found"
            )
        return _create_response(200, result)
    except ValueError as e:
        return _create_validation_error(e)
    except Exception as e:
        _log_api_error("UPDATE_CHECKLIST_STATUS_ERROR", str(e), {"itemId": item_id})
        return _create_error_response(500, "Failed to update checklist status", str(e))


# ----------------------------------------------------------------------
# Request helpers
# ----------------------------------------------------------------------


def _normalize_path(path: str) -> str:
    """Strip a stage prefix and a trailing slash from a request path."""
    path = STAGE_PREFIX.sub("", path) or "/"
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    return path


def _get_caller(event: Dict[str, Any]) -> Tuple[Optional[str], Optional[str]]:
    """Return the caller's ``sub`` and ``email`` claims from the authorizer."""
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = authorizer.get("claims") or {}
    return claims.get("sub"), claims.get("email")


def _parse_body(event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Decode the JSON request body.

    Returns:
        The decoded object, or None when the request has no body

    Raises:
        ValueError: If the body is not valid JSON or not a JSON object
    """
    raw = event.get("body")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw).decode("utf-8")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Request body is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def _path_param(path_params: Dict[str, str], name: str) -> Optional[str]:
    value = path_params.get(name)
    return unquote(value) if value else None


def _owns_profile(profiles: ProfileService, user_id: str, profile_id: Optional[str]) -> bool:
    return bool(profile_id) and profiles.get_profile(user_id, profile_id) is not None


def _parse_up_to_week(value: Optional[str], birthday: str) -> Optional[int]:
    """
    Parse the ``upToWeek`` query parameter.

    Raises:
        ValueError: If the value is neither an integer nor ``current``
    """
    if not value:
        return None
    if value.lower() == "current":
        return calculate_pregnancy_week(birthday)
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"upToWeek must be an integer or 'current', got '{value}'") from e


# ----------------------------------------------------------------------
# Response helpers
# ----------------------------------------------------------------------


def _handle_cors_preflight() -> Dict[str, Any]:
    """Handle OPTIONS requests for CORS preflight checks."""
    return {"statusCode": 200, "headers": _get_cors_headers(), "body": ""}


def _create_response(status_code: int, data: Union[Dict[str, Any], List[Any]]) -> Dict[str, Any]:
    """
    Create a standardized HTTP response with proper headers.

    Args:
        status_code: HTTP status code
        data: Response data to serialize as JSON

    Returns:
        HTTP response dictionary
    """
    return {
        "statusCode": status_code,
        "headers": {**_get_cors_headers(), "Content-Type": "application/json"},
        "body": json.dumps(data, indent=2, default=str),
    }


def _create_error_response(
    status_code: int, message: str, details: Union[str, List[Dict[str, str]]] = ""
) -> Dict[str, Any]:
    """
    Create a standardized error response.

    Args:
        status_code: HTTP status code
        message: High-level error message
        details: Detailed error information

    Returns:
        HTTP error response dictionary
    """
    error_data = {
        "message": message,
        "details": details,
        "timestamp": utc_now_iso(),
        "status_code": status_code,
    }
    return _create_response(status_code, error_data)


def _create_validation_error(error: ValueError) -> Dict[str, Any]:
    """Create a 400 response, listing field errors for pydantic failures."""
    if isinstance(error, ValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "body",
                "message": err["msg"],
            }
            for err in error.errors()
        ]
        return _create_error_response(400, "Validation Error", details)
    return _create_error_response(400, "Validation Error", str(error))


def _profile_not_found(profile_id: Optional[str]) -> Dict[str, Any]:
    return _create_error_response(
        404, "Profile Not Found", f"Profile '{profile_id}' not found"
    )


def _entry_not_found(entry_id: Optional[str]) -> Dict[str, Any]:
    return _create_error_response(
        404, "Tracker Entry Not Found", f"Tracker entry '{entry_id}' not found"
    )


def _get_cors_headers() -> Dict[str, str]:
    """Get CORS headers for API responses."""
    return {
        "Access-Control-Allow-Origin": os.getenv("CORS_ORIGIN", CORS_ORIGIN),
        "Access-Control-Allow-Methods": "OPTIONS,POST,GET,PUT,DELETE",
        "Access-Control-Allow-Headers": (
            "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token"
        ),
        "Access-Control-Max-Age": "86400",
    }


# ----------------------------------------------------------------------
# Logging
# ----------------------------------------------------------------------


def _log_api_request(event: Dict[str, Any], resource: str, user_id: Optional[str]) -> None:
    """
    Log API request information for monitoring.

    Request bodies are never logged.
    """
    request_context = event.get("requestContext") or {}
    log_event(
        logger,
        "API_REQUEST",
        httpMethod=event.get("httpMethod"),
        resource=resource,
        requestId=request_context.get("requestId"),
        userId=user_id,
        queryParams=event.get("queryStringParameters") or None,
    )


def _log_api_error(
    error_type: str, error_message: str, context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log API errors with context for debugging.

    Args:
        error_type: Type of error that occurred
        error_message: Detailed error message
        context: Additional context information
    """
    safe_context = None
    if context:
        safe_context = {k: v for k, v in context.items() if k not in ("body", "email")}
    log_event(
        logger,
        "API_ERROR",
        level=logging.ERROR,
        errorType=error_type,
        errorMessage=error_message,
        context=safe_context,
    )


# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "*")

log_event(logger, "LAMBDA_INITIALIZED", environment=ENVIRONMENT)
