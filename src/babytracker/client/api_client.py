"""
HTTP client for the BabyTracker REST API.

A thin synchronous wrapper over httpx that adds the Cognito ID token as a
bearer token and turns error responses into ``ApiError``. It is used by
scripts and by the integration tests that run against a deployed stage.

Classes:
    ApiError: Raised for network failures and HTTP error responses
    ApiClient: REST client with one helper per endpoint
"""

import os
from typing import Any, Dict, List, Optional, Union

import httpx

from ..utils.log import get_logger, log_event

logger = get_logger(__name__)

JsonBody = Union[Dict[str, Any], List[Any], None]


class ApiError(RuntimeError):
    """
    Error returned by the BabyTracker API.

    Attributes:
        status_code: HTTP status code, or None for network failures
        body: Decoded response body when one was returned
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        for key in ("message", "error"):
            if data.get(key):
                return str(data[key])
    return response.text or f"HTTP {response.status_code}"


class ApiClient:
    """
    Client for the deployed BabyTracker API.

    Args:
        base_url: API Gateway stage URL, defaults to BABYTRACKER_API_URL
        id_token: Cognito ID token, defaults to BABYTRACKER_ID_TOKEN
        timeout: Request timeout in seconds
        client: Optional preconfigured ``httpx.Client`` (tests pass one
            with a mock transport)

    Example:
        >>> with ApiClient("https://abc.execute-api.us-east-1.amazonaws.com/prod", token) as api:
        ...     profile = api.create_profile("Ada", "2025-02-10")
        ...     api.create_entry(profile["id"], "bottle", {"volume": 120, "unit": "ml"})
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        id_token: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or os.getenv("BABYTRACKER_API_URL") or "").rstrip("/")
        self.id_token = id_token or os.getenv("BABYTRACKER_ID_TOKEN")
        if not self.base_url:
            raise ValueError(
                "API URL must be provided either as a parameter or the "
                "BABYTRACKER_API_URL environment variable"
            )

        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.id_token:
            headers["Authorization"] = f"Bearer {self.id_token}"

        self._client = client or httpx.Client(timeout=timeout)
        self._client.base_url = self.base_url
        self._client.headers.update(headers)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: JsonBody = None,
    ) -> Any:
        """
        Send a request and decode the JSON response.

        Raises:
            ApiError: On network failures or HTTP status >= 400
        """
        params = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            response = self._client.request(method, path, params=params or None, json=json)
        except httpx.HTTPError as e:
            log_event(logger, "API_CLIENT_ERROR", method=method, path=path, error=str(e))
            raise ApiError(f"{method} {path} failed: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            log_event(
                logger,
                "API_CLIENT_ERROR",
                method=method,
                path=path,
                statusCode=response.status_code,
                error=message,
            )
            try:
                body = response.json()
            except ValueError:
                body = None
            raise ApiError(message, status_code=response.status_code, body=body)

        if not response.content:
            return None
        return response.json()

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, body: JsonBody = None) -> Any:
        return self._request("POST", path, json=body)

    def put(self, path: str, body: JsonBody = None) -> Any:
        return self._request("PUT", path, json=body)

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    # Health and profiles

    def health(self) -> Dict[str, Any]:
        return self.get("/health")

    def list_profiles(self) -> List[Dict[str, Any]]:
        return self.get("/profiles")

    def create_profile(self, name: str, birthday: str) -> Dict[str, Any]:
        return self.post("/profiles", {"name": name, "birthday": birthday})

    def get_profile(self, profile_id: str) -> Dict[str, Any]:
        return self.get(f"/profiles/{profile_id}")

    def update_profile(self, profile_id: str, name: str, birthday: str) -> Dict[str, Any]:
        return self.put(f"/profiles/{profile_id}", {"name": name, "birthday": birthday})

    def delete_profile(self, profile_id: str) -> Dict[str, Any]:
        return self.delete(f"/profiles/{profile_id}")

    # Tracker entries

    def list_entries(self, profile_id: str, tracker_type: str) -> List[Dict[str, Any]]:
        return self.get(f"/profiles/{profile_id}/trackers/{tracker_type}")

    def create_entry(
        self, profile_id: str, tracker_type: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        return self.post(f"/profiles/{profile_id}/trackers/{tracker_type}", payload)

    def get_entry(self, profile_id: str, tracker_type: str, entry_id: str) -> Dict[str, Any]:
        return self.get(f"/profiles/{profile_id}/trackers/{tracker_type}/{entry_id}")

    def update_entry(
        self, profile_id: str, tracker_type: str, entry_id: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        return self.put(f"/profiles/{profile_id}/trackers/{tracker_type}/{entry_id}", payload)

    def delete_entry(self, profile_id: str, tracker_type: str, entry_id: str) -> Dict[str, Any]:
        return self.delete(f"/profiles/{profile_id}/trackers/{tracker_type}/{entry_id}")

    # Reports and notes

    def get_report(
        self, profile_id: str, trackers: List[str], time_range: str = "last7days"
    ) -> Dict[str, Any]:
        return self.get(
            f"/profiles/{profile_id}/reports",
            {"trackers": ",".join(trackers), "timeRange": time_range},
        )

    def list_notes(
        self, profile_id: str, tracker_type: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        return self.get("/notes", {"profileId": profile_id, "trackerType": tracker_type})

    # Checklist

    def get_checklist(
        self,
        profile_id: str,
        include_standard: bool = False,
        up_to_week: Optional[Union[int, str]] = None,
    ) -> List[Dict[str, Any]]:
        return self.get(
            "/checklist",
            {
                "profileId": profile_id,
                "includeStandard": "true" if include_standard else None,
                "upToWeek": up_to_week,
            },
        )

    def add_checklist_item(
        self, profile_id: str, text: str, week: int, completed: bool = False
    ) -> Dict[str, Any]:
        return self.post(
            "/checklist",
            {"profileId": profile_id, "text": text, "week": week, "completed": completed},
        )

    def get_checklist_status(self, profile_id: str) -> List[Dict[str, Any]]:
        return self.get("/checklist/status", {"profileId": profile_id})

    def set_checklist_status(
        self, item_id: str, completed: bool, profile_id: Optional[str] = None
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"completed": completed}
        if profile_id:
            body["profileId"] = profile_id
        return self.put(f"/checklist/status/{item_id}", body)
