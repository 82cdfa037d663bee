"""
Utility functions and helpers for the BabyTracker application.

This module contains shared date handling and structured logging helpers
that are used across the services, the Lambda handler and the API client.
"""

from .dates import (
    TIME_RANGE_WINDOWS,
    calculate_pregnancy_week,
    calendar_date,
    describe_age_or_due,
    entry_event_time,
    parse_datetime,
    time_range_start,
    utc_now_iso,
)
from .log import get_logger, log_event

__all__ = [
    "TIME_RANGE_WINDOWS",
    "calculate_pregnancy_week",
    "calendar_date",
    "describe_age_or_due",
    "entry_event_time",
    "parse_datetime",
    "time_range_start",
    "utc_now_iso",
    "get_logger",
    "log_event",
]
