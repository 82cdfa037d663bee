"""
Report service for the BabyTracker application.

Aggregates a profile's tracker entries over a time window into per-tracker
summaries with chart series. Summaries are pure functions of the entries,
so they are computed in memory after one partition query.

Functions:
    parse_tracker_list: Parse the ``trackers`` query parameter
    summarize_entries: Build the report body from a list of entries

Classes:
    ReportService: Loads entries and builds reports
"""

import math
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

from ..models.tracker_entry import TrackerType
from ..utils.dates import entry_event_time, parse_datetime, time_range_start
from ..utils.log import get_logger, log_event
from .dynamodb_service import DynamoDBService

logger = get_logger(__name__)

SUMMARY_KEYS: Dict[TrackerType, str] = {
    tracker: f"{tracker.value}Summary" for tracker in TrackerType
}


class TimedEntry(NamedTuple):
    """An entry paired with its parsed event time."""

    entry: Dict[str, Any]
    event_time: str
    at: datetime


def parse_tracker_list(raw: str) -> List[TrackerType]:
    """
    Parse a comma separated tracker list, keeping first-seen order.

    Raises:
        ValueError: If the list is empty or names an unknown tracker
    """
    trackers: List[TrackerType] = []
    for name in (part.strip() for part in raw.split(",")):
        if not name:
            continue
        tracker = TrackerType.parse(name)
        if tracker not in trackers:
            trackers.append(tracker)
    if not trackers:
        raise ValueError("At least one tracker must be requested")
    return trackers


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        # Rows written outside the API may hold numeric strings
        try:
            number = float(value)
        except ValueError:
            return None
        if not math.isfinite(number):
            return None
        return int(number) if number.is_integer() else number
    return None


def _avg(total: float, count: int) -> float:
    return round(total / count, 2) if count else 0


def _flag(entry: Dict[str, Any], field: str, types: Iterable[str]) -> int:
    return 1 if entry.get("type") in types or entry.get(field) is True else 0


def _point(timed: TimedEntry, **values: Any) -> Dict[str, Any]:
    return {"date": timed.event_time, "startDateTime": timed.event_time, **values}


def _sleep_hours(entry: Dict[str, Any]) -> float:
    start = parse_datetime(entry.get("startDateTime"))
    end = parse_datetime(entry.get("endDateTime"))
    if start and end:
        return (end - start).total_seconds() / 3600
    duration = _number(entry.get("duration"))
    return duration / 60 if duration is not None else 0


def _summarize_sleep(entries: List[TimedEntry]) -> Dict[str, Any]:
    hours = [_sleep_hours(t.entry) for t in entries]
    total = sum(hours)
    return {
        "totalHours": round(total, 2),
        "avgDuration": _avg(total, len(entries)),
        "chartData": [
            _point(t, endDateTime=t.entry.get("endDateTime"), hours=round(h, 2))
            for t, h in zip(entries, hours)
        ],
    }


def _nursing_duration(entry: Dict[str, Any]) -> float:
    duration = _number(entry.get("duration"))
    if duration is not None:
        return duration
    left = _number(entry.get("durationLeft"))
    right = _number(entry.get("durationRight"))
    if left is None and right is None:
        return 0
    return (left or 0) + (right or 0)


def _nursing_daily_totals(entries: List[TimedEntry]) -> List[Dict[str, Any]]:
    days: Dict[str, Dict[str, Any]] = OrderedDict()
    for timed in entries:
        side = timed.entry.get("side")
        if side not in ("left", "right"):
            continue
        day = timed.at.astimezone(timezone.utc).date().isoformat()
        totals = days.setdefault(
            day, {"date": day, "left": 0, "right": 0, "startDateTime": timed.event_time}
        )
        totals[side] += _nursing_duration(timed.entry)
    return [days[day] for day in sorted(days)]


def _summarize_nursing(entries: List[TimedEntry]) -> Dict[str, Any]:
    volumes = [_number(t.entry.get("volume")) or 0 for t in entries]
    return {
        "totalSessions": len(entries),
        "avgDuration": _avg(sum(_nursing_duration(t.entry) for t in entries), len(entries)),
        "avgVolume": _avg(sum(volumes), len(entries)),
        "dailyTotals": _nursing_daily_totals(entries),
        "chartData": [
            _point(
                t,
                side=t.entry["side"],
                duration=_nursing_duration(t.entry),
                volume=_number(t.entry.get("volume")),
            )
            for t in entries
            if t.entry.get("side") in ("left", "right")
        ],
    }


def _bottle_volume(entry: Dict[str, Any]) -> Optional[float]:
    volume = _number(entry.get("volume"))
    return volume if volume is not None else _number(entry.get("amount"))


def _summarize_bottle(entries: List[TimedEntry]) -> Dict[str, Any]:
    volumes = [_bottle_volume(t.entry) for t in entries]
    return {
        "totalBottles": len(entries),
        "avgVolume": _avg(sum(v or 0 for v in volumes), len(entries)),
        "chartData": [_point(t, volume=v) for t, v in zip(entries, volumes)],
    }


def _summarize_diaper(entries: List[TimedEntry]) -> Dict[str, Any]:
    chart = [
        _point(
            t,
            wet=_flag(t.entry, "wet", ("wet", "mixed")),
            dirty=_flag(t.entry, "dirty", ("dirty", "mixed")),
        )
        for t in entries
    ]
    return {
        "wetCount": sum(p["wet"] for p in chart),
        "dirtyCount": sum(p["dirty"] for p in chart),
        "chartData": chart,
    }


def _summarize_solids(entries: List[TimedEntry]) -> Dict[str, Any]:
    amounts = [_number(t.entry.get("amount")) for t in entries]
    return {
        "totalFeedings": len(entries),
        "avgAmount": _avg(sum(a or 0 for a in amounts), len(entries)),
        "chartData": [_point(t, amount=a) for t, a in zip(entries, amounts)],
    }


def _summarize_medicine(entries: List[TimedEntry]) -> Dict[str, Any]:
    chart = []
    medicines: List[str] = []
    for timed in entries:
        name = timed.entry.get("medicineName")
        doses = _number(timed.entry.get("doses"))
        chart.append(_point(timed, medicineName=name, doses=1 if doses is None else doses))
        if name and name not in medicines:
            medicines.append(name)
    return {
        "totalDoses": sum(p["doses"] for p in chart),
        "medicinesGiven": medicines,
        "chartData": chart,
    }


def _summarize_growth(entries: List[TimedEntry]) -> Dict[str, Any]:
    latest = entries[-1].entry if entries else {}
    weight = _number(latest.get("weight"))
    height = _number(latest.get("height"))
    return {
        "latestWeight": round(weight, 2) if weight is not None else None,
        "latestHeight": round(height, 2) if height is not None else None,
        "chartData": [
            _point(
                t,
                weight=_number(t.entry.get("weight")),
                height=_number(t.entry.get("height")),
            )
            for t in entries
        ],
    }


def _summarize_potty(entries: List[TimedEntry]) -> Dict[str, Any]:
    chart = [
        _point(
            t,
            pee=_flag(t.entry, "pee", ("pee", "both")),
            poop=_flag(t.entry, "poop", ("poop", "both")),
        )
        for t in entries
    ]
    return {
        "peeCount": sum(p["pee"] for p in chart),
        "poopCount": sum(p["poop"] for p in chart),
        "chartData": chart,
    }


def _summarize_temperature(entries: List[TimedEntry]) -> Dict[str, Any]:
    readings = [
        (t, _number(t.entry.get("temperature")))
        for t in entries
        if _number(t.entry.get("temperature")) is not None
    ]
    return {
        "readingsCount": len(readings),
        "avgTemp": (
            round(sum(temp for _, temp in readings) / len(readings), 2) if readings else None
        ),
        "chartData": [_point(t, temperature=temp) for t, temp in readings],
    }


SUMMARIZERS: Dict[TrackerType, Callable[[List[TimedEntry]], Dict[str, Any]]] = {
    TrackerType.SLEEP: _summarize_sleep,
    TrackerType.NURSING: _summarize_nursing,
    TrackerType.BOTTLE: _summarize_bottle,
    TrackerType.DIAPER: _summarize_diaper,
    TrackerType.SOLIDS: _summarize_solids,
    TrackerType.MEDICINE: _summarize_medicine,
    TrackerType.GROWTH: _summarize_growth,
    TrackerType.POTTY: _summarize_potty,
    TrackerType.TEMPERATURE: _summarize_temperature,
}


def summarize_entries(
    entries: Iterable[Dict[str, Any]],
    trackers: List[TrackerType],
    time_range: str,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build a report from raw entries.

    Entries are kept when their tracker was requested and their event time
    falls inside ``[now - window, now]``. Each tracker's entries are ordered
    oldest first before summarizing.

    Args:
        entries: Tracker entries of one profile
        trackers: Trackers to report on
        time_range: Time-range token (``last24hours``, ``last7days``, ...)
        now: End of the window, defaults to the current time

    Returns:
        Dictionary mapping ``<tracker>Summary`` to that tracker's summary
    """
    now = now or datetime.now(timezone.utc)
    start = time_range_start(time_range, now)
    wanted = {tracker.value for tracker in trackers}

    grouped: Dict[str, List[TimedEntry]] = {tracker.value: [] for tracker in trackers}
    for entry in entries:
        tracker = entry.get("trackerType")
        if tracker not in wanted:
            continue
        event_time = entry_event_time(entry)
        at = parse_datetime(event_time)
        if at is None or not start <= at <= now:
            continue
        grouped[tracker].append(TimedEntry(entry, event_time, at))

    report = {}
    for tracker in trackers:
        timed = sorted(grouped[tracker.value], key=lambda t: t.at)
        report[SUMMARY_KEYS[tracker]] = SUMMARIZERS[tracker](timed)
    return report


class ReportService:
    """
    Service for building tracker reports.

    Attributes:
        db_service: DynamoDB service for data persistence
    """

    def __init__(self, db_service: Optional[DynamoDBService] = None):
        self.db_service = db_service or DynamoDBService()

    def build_report(
        self,
        profile_id: str,
        trackers: List[TrackerType],
        time_range: str,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Load a profile's entries and summarize the requested trackers."""
        entries = self.db_service.query_entries(profile_id)
        report = summarize_entries(entries, trackers, time_range, now)

        log_event(
            logger,
            "REPORT_BUILT",
            profileId=profile_id,
            trackers=[t.value for t in trackers],
            timeRange=time_range,
            entriesScanned=len(entries),
        )
        return report
