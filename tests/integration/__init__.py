"""
Integration tests for a deployed BabyTracker API.

These tests talk to a real API Gateway stage and are skipped unless
BABYTRACKER_API_URL and BABYTRACKER_ID_TOKEN are set.
"""
