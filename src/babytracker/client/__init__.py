"""
HTTP client for the BabyTracker REST API.

Classes:
    ApiClient: REST client authenticating with a Cognito ID token
    ApiError: Raised for network failures and HTTP error responses
"""

from .api_client import ApiClient, ApiError

__all__ = ["ApiClient", "ApiError"]
