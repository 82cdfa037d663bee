"""
Unit tests for report aggregation.

Most cases exercise ``summarize_entries`` directly with a fixed ``now`` so
windows are deterministic; one test goes through DynamoDB.
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.babytracker.models.tracker_entry import TrackerType
from src.babytracker.services.report_service import (
    parse_tracker_list,
    summarize_entries,
)
from src.babytracker.utils.dates import parse_datetime, utc_now_iso

NOW = datetime(2025, 3, 15, 12, 0, 0, tzinfo=timezone.utc)


def _at(hours_ago: float) -> str:
    return utc_now_iso(NOW - timedelta(hours=hours_ago))


def _entry(tracker: str, hours_ago: float, **fields):
    return {"trackerType": tracker, "startDateTime": _at(hours_ago), **fields}


def _report(entries, *trackers, time_range="last7days"):
    return summarize_entries(entries, [TrackerType(t) for t in trackers], time_range, now=NOW)


class TestParseTrackerList:
    def test_dedupes_and_keeps_order(self):
        assert parse_tracker_list("sleep, bottle,sleep,,") == [
            TrackerType.SLEEP,
            TrackerType.BOTTLE,
        ]

    def test_unknown_tracker_rejected(self):
        with pytest.raises(ValueError, match="feeding"):
            parse_tracker_list("sleep,feeding")

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            parse_tracker_list(" , ")


class TestWindowing:
    def test_entries_outside_window_dropped(self):
        entries = [
            _entry("diaper", 2, type="wet"),
            _entry("diaper", 30, type="wet"),
            _entry("diaper", -1, type="wet"),
        ]

        assert _report(entries, "diaper", time_range="last24hours")["diaperSummary"]["wetCount"] == 1
        assert _report(entries, "diaper", time_range="last7days")["diaperSummary"]["wetCount"] == 2

    def test_unknown_time_range_defaults_to_seven_days(self):
        entries = [_entry("diaper", 24 * 6, type="wet"), _entry("diaper", 24 * 8, type="wet")]

        report = _report(entries, "diaper", time_range="forever")

        assert report["diaperSummary"]["wetCount"] == 1

    def test_event_time_falls_back_to_created_at(self):
        entries = [{"trackerType": "bottle", "createdAt": _at(1), "volume": 100}]

        assert _report(entries, "bottle")["bottleSummary"]["totalBottles"] == 1

    def test_only_requested_trackers_reported(self):
        entries = [_entry("sleep", 1, duration=60), _entry("bottle", 1, volume=100)]

        report = _report(entries, "bottle")

        assert list(report) == ["bottleSummary"]

    def test_empty_report_has_zero_averages(self):
        report = _report([], "sleep", "nursing", "temperature")

        assert report["sleepSummary"] == {"totalHours": 0, "avgDuration": 0, "chartData": []}
        assert report["nursingSummary"]["avgDuration"] == 0
        assert report["temperatureSummary"]["avgTemp"] is None

    def test_chart_data_ascending(self):
        entries = [_entry("bottle", h, volume=h) for h in (1, 20, 5)]

        chart = _report(entries, "bottle")["bottleSummary"]["chartData"]
        dates = [parse_datetime(point["date"]) for point in chart]

        assert dates == sorted(dates)
        assert [point["volume"] for point in chart] == [20, 5, 1]
        assert all(point["startDateTime"] == point["date"] for point in chart)


class TestSummaries:
    def test_sleep_hours_from_times_or_duration(self):
        entries = [
            {
                "trackerType": "sleep",
                "startDateTime": _at(10),
                "endDateTime": _at(7),
            },
            _entry("sleep", 5, duration=90),
            _entry("sleep", 2),
        ]

        summary = _report(entries, "sleep")["sleepSummary"]

        assert [p["hours"] for p in summary["chartData"]] == [3, 1.5, 0]
        assert summary["totalHours"] == 4.5
        assert summary["avgDuration"] == 1.5

    def test_nursing(self):
        entries = [
            _entry("nursing", 30, side="left", duration=10, volume=20),
            _entry("nursing", 29, side="right", durationLeft=4, durationRight=6),
            _entry("nursing", 2, side="left", duration=15),
            _entry("nursing", 1),
        ]

        summary = _report(entries, "nursing")["nursingSummary"]

        assert summary["totalSessions"] == 4
        assert summary["avgDuration"] == round((10 + 10 + 15 + 0) / 4, 2)
        assert summary["avgVolume"] == 5
        assert len(summary["chartData"]) == 3
        assert summary["chartData"][0]["volume"] == 20
        assert summary["chartData"][1]["volume"] is None
        assert summary["dailyTotals"] == [
            {"date": "2025-03-14", "left": 10, "right": 10, "startDateTime": _at(30)},
            {"date": "2025-03-15", "left": 15, "right": 0, "startDateTime": _at(2)},
        ]

    def test_bottle_volume_falls_back_to_amount(self):
        entries = [_entry("bottle", 3, volume=120), _entry("bottle", 2, amount=60), _entry("bottle", 1)]

        summary = _report(entries, "bottle")["bottleSummary"]

        assert [p["volume"] for p in summary["chartData"]] == [120, 60, None]
        assert summary["totalBottles"] == 3
        assert summary["avgVolume"] == 60

    def test_numeric_strings_in_stored_rows_are_counted(self):
        entries = [
            _entry("bottle", 3, volume="120"),
            _entry("bottle", 2, volume="90.5"),
            _entry("bottle", 1, volume=True),
        ]

        summary = _report(entries, "bottle", time_range="last24hours")["bottleSummary"]

        assert [p["volume"] for p in summary["chartData"]] == [120, 90.5, None]
        assert summary["avgVolume"] == round((120 + 90.5) / 3, 2)

    def test_diaper_counts_types_and_flags(self):
        entries = [
            _entry("diaper", 4, type="wet"),
            _entry("diaper", 3, type="dirty"),
            _entry("diaper", 2, type="mixed"),
            _entry("diaper", 1, wet=True, dirty=True),
        ]

        summary = _report(entries, "diaper")["diaperSummary"]

        assert summary["wetCount"] == 3
        assert summary["dirtyCount"] == 3
        assert [(p["wet"], p["dirty"]) for p in summary["chartData"]] == [
            (1, 0),
            (0, 1),
            (1, 1),
            (1, 1),
        ]

    def test_solids(self):
        entries = [_entry("solids", 2, amount=2), _entry("solids", 1, amount=3.5)]

        summary = _report(entries, "solids")["solidsSummary"]

        assert summary["totalFeedings"] == 2
        assert summary["avgAmount"] == 2.75

    def test_medicine_doses_default_to_one(self):
        entries = [
            _entry("medicine", 3, medicineName="Vitamin D"),
            _entry("medicine", 2, medicineName="Ibuprofen", doses=2),
            _entry("medicine", 1, medicineName="Vitamin D"),
        ]

        summary = _report(entries, "medicine")["medicineSummary"]

        assert summary["totalDoses"] == 4
        assert summary["medicinesGiven"] == ["Vitamin D", "Ibuprofen"]
        assert [p["doses"] for p in summary["chartData"]] == [1, 2, 1]

    def test_growth_latest_by_event_time(self):
        entries = [
            _entry("growth", 1, weight=6.456, height=61),
            _entry("growth", 50, weight=6.1, height=60),
        ]

        summary = _report(entries, "growth")["growthSummary"]

        assert summary["latestWeight"] == 6.46
        assert summary["latestHeight"] == 61
        assert [p["weight"] for p in summary["chartData"]] == [6.1, 6.456]

    def test_potty(self):
        entries = [
            _entry("potty", 3, type="pee"),
            _entry("potty", 2, type="both"),
            _entry("potty", 1, poop=True),
        ]

        summary = _report(entries, "potty")["pottySummary"]

        assert summary["peeCount"] == 2
        assert summary["poopCount"] == 2

    def test_temperature_skips_missing_readings(self):
        entries = [
            _entry("temperature", 3, temperature=98.6),
            _entry("temperature", 2, temperature=100.1),
            _entry("temperature", 1, notes="felt warm"),
        ]

        summary = _report(entries, "temperature")["temperatureSummary"]

        assert summary["readingsCount"] == 2
        assert summary["avgTemp"] == 99.35
        assert [p["temperature"] for p in summary["chartData"]] == [98.6, 100.1]


@pytest.mark.aws
class TestReportService:
    def test_build_report_from_dynamodb(self, report_service, tracker_service, sample_profile):
        now = datetime.now(timezone.utc)
        for hours_ago, volume in ((3, 90), (1, 110.5)):
            tracker_service.create_entry(
                sample_profile.id,
                TrackerType.BOTTLE,
                {"startDateTime": utc_now_iso(now - timedelta(hours=hours_ago)), "volume": volume},
            )
        tracker_service.create_entry(
            sample_profile.id,
            TrackerType.DIAPER,
            {"startDateTime": utc_now_iso(now - timedelta(hours=2)), "type": "wet"},
        )

        report = report_service.build_report(
            sample_profile.id, [TrackerType.BOTTLE, TrackerType.DIAPER], "last24hours"
        )

        assert report["bottleSummary"]["totalBottles"] == 2
        assert report["bottleSummary"]["avgVolume"] == 100.25
        assert report["diaperSummary"]["wetCount"] == 1
        for point in report["bottleSummary"]["chartData"]:
            assert parse_datetime(point["date"]) is not None
            assert isinstance(point["volume"], (int, float))
