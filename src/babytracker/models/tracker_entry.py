"""
Tracker entry data models for the BabyTracker application.

This module defines the supported tracker types and one payload schema per
tracker. Payloads are validated on write but stored as submitted: unknown
fields are allowed and echoed back, so older clients that send ``time`` or
``amount`` keep working.

Classes:
    TrackerType: Enum of the loggable baby-care event categories
    TrackerPayload: Base schema shared by every tracker
    SleepPayload .. TemperaturePayload: Per-tracker schemas

Functions:
    get_payload_schema: Look up the schema for a tracker type
    validate_payload: Validate a request body against its tracker schema
    generate_entry_id: Build a new ``<tracker>_<millis>_<hex>`` entry id
"""

import time
import uuid
from enum import Enum
from typing import Any, Dict, Literal, Optional, Type

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    field_validator,
    model_validator,
)

from ..utils.dates import parse_datetime

# Fields the server owns; client-submitted values are discarded.
SERVER_FIELDS = ("babyId", "entryId", "trackerType", "createdAt", "updatedAt")


class TrackerType(str, Enum):
    """
    Enumeration of supported tracker types.

    Each value is also the URL path segment and the ``entryId`` prefix.
    """

    SLEEP = "sleep"
    NURSING = "nursing"
    BOTTLE = "bottle"
    DIAPER = "diaper"
    SOLIDS = "solids"
    MEDICINE = "medicine"
    GROWTH = "growth"
    POTTY = "potty"
    TEMPERATURE = "temperature"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TrackerType":
        """
        Parse a tracker type from a path or query value.

        Raises:
            ValueError: If the value is not a known tracker type
        """
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(
                f"Unknown tracker type '{value}'. Must be one of: {valid}"
            ) from None


# JSON numbers only; numeric strings and booleans are rejected.
Quantity = Optional[StrictFloat]
Flag = Optional[StrictBool]

# Plausible body temperature readings per unit.
TEMPERATURE_RANGES = {"F": (80.0, 115.0), "C": (30.0, 45.0)}


class TrackerPayload(BaseModel):
    """
    Fields common to every tracker payload.

    Attributes:
        startDateTime: When the event started (ISO 8601)
        endDateTime: When the event ended (ISO 8601), not before the start
        startTime: Legacy start timestamp sent by older clients
        time: Legacy single timestamp sent by older clients
        notes: Free-text caregiver notes
    """

    model_config = ConfigDict(extra="allow")

    startDateTime: Optional[str] = None
    endDateTime: Optional[str] = None
    startTime: Optional[str] = None
    time: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)

    @field_validator("startDateTime", "endDateTime", "startTime", "time")
    @classmethod
    def validate_timestamp(cls, v: Optional[str]) -> Optional[str]:
        """Reject timestamps that are not ISO 8601 dates or datetimes."""
        if v is not None and parse_datetime(v) is None:
            raise ValueError(f"'{v}' is not a valid ISO 8601 date/time")
        return v

    @model_validator(mode="after")
    def validate_time_order(self) -> "TrackerPayload":
        start = parse_datetime(self.startDateTime)
        end = parse_datetime(self.endDateTime)
        if start and end and end < start:
            raise ValueError("endDateTime must not be earlier than startDateTime")
        return self


class SleepPayload(TrackerPayload):
    duration: Quantity = Field(None, ge=0, description="Minutes asleep")


class NursingPayload(TrackerPayload):
    duration: Quantity = Field(None, ge=0)
    durationLeft: Quantity = Field(None, ge=0)
    durationRight: Quantity = Field(None, ge=0)
    side: Optional[Literal["left", "right"]] = None
    volume: Quantity = Field(None, ge=0)


class BottlePayload(TrackerPayload):
    volume: Quantity = Field(None, ge=0)
    amount: Quantity = Field(None, ge=0)
    unit: Optional[Literal["ml", "oz"]] = None
    type: Optional[Literal["formula", "breast_milk", "other"]] = None


class DiaperPayload(TrackerPayload):
    type: Optional[Literal["wet", "dirty", "mixed", "other"]] = None
    wet: Flag = None
    dirty: Flag = None


class SolidsPayload(TrackerPayload):
    amount: Quantity = Field(None, ge=0)
    imageKey: Optional[str] = Field(None, max_length=1024)


class MedicinePayload(TrackerPayload):
    medicineName: Optional[str] = Field(None, max_length=200)
    dose: Quantity = Field(None, ge=0)
    doses: Quantity = Field(None, ge=0)


class GrowthPayload(TrackerPayload):
    weight: Quantity = Field(None, ge=0)
    height: Quantity = Field(None, ge=0)


class PottyPayload(TrackerPayload):
    type: Optional[Literal["pee", "poop", "both", "other"]] = None
    pee: Flag = None
    poop: Flag = None


class TemperaturePayload(TrackerPayload):
    temperature: Quantity = None
    unit: Optional[Literal["F", "C"]] = None

    @model_validator(mode="after")
    def validate_temperature_range(self) -> "TemperaturePayload":
        """Check the reading against its unit, or against either unit when none is given."""
        if self.temperature is None:
            return self
        units = [self.unit] if self.unit else sorted(TEMPERATURE_RANGES)
        for unit in units:
            low, high = TEMPERATURE_RANGES[unit]
            if low < self.temperature < high:
                return self
        bounds = " or ".join(
            f"{TEMPERATURE_RANGES[u][0]:g}-{TEMPERATURE_RANGES[u][1]:g} {u}" for u in units
        )
        raise ValueError(f"temperature {self.temperature:g} is outside {bounds}")


PAYLOAD_SCHEMAS: Dict[TrackerType, Type[TrackerPayload]] = {
    TrackerType.SLEEP: SleepPayload,
    TrackerType.NURSING: NursingPayload,
    TrackerType.BOTTLE: BottlePayload,
    TrackerType.DIAPER: DiaperPayload,
    TrackerType.SOLIDS: SolidsPayload,
    TrackerType.MEDICINE: MedicinePayload,
    TrackerType.GROWTH: GrowthPayload,
    TrackerType.POTTY: PottyPayload,
    TrackerType.TEMPERATURE: TemperaturePayload,
}


def get_payload_schema(tracker_type: TrackerType) -> Type[TrackerPayload]:
    """Return the payload schema registered for a tracker type."""
    return PAYLOAD_SCHEMAS[tracker_type]


def validate_payload(tracker_type: TrackerType, body: Any) -> Dict[str, Any]:
    """
    Validate a request body against the schema of its tracker.

    Validation is a gate only: the returned dictionary is the submitted
    body minus server-owned fields, so every value round-trips exactly as
    the client sent it.

    Args:
        tracker_type: Tracker the body belongs to
        body: Decoded JSON request body

    Returns:
        The client fields to persist

    Raises:
        ValueError: If the body is not an object or fails validation
            (pydantic's ValidationError is a ValueError)
    """
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")

    get_payload_schema(tracker_type).model_validate(body)
    return {k: v for k, v in body.items() if k not in SERVER_FIELDS}


def generate_entry_id(tracker_type: TrackerType) -> str:
    """
    Generate a unique entry ID.

    Creates an ID in the format ``<tracker>_<epochMillis>_<8 hex chars>``,
    which sorts chronologically within a profile's partition.

    Example:
        >>> generate_entry_id(TrackerType.BOTTLE)
        'bottle_1739175300123_9f3a1c2e'
    """
    millis = int(time.time() * 1000)
    return f"{tracker_type.value}_{millis}_{uuid.uuid4().hex[:8]}"
