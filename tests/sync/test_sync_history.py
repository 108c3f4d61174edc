from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.biometric_attendance.biometric_attendance.core.exceptions import ValidationError
from src.biometric_attendance.biometric_attendance.devices.defaults import default_devices
from src.biometric_attendance.biometric_attendance.sync.history import SyncHistory
from src.biometric_attendance.biometric_attendance.sync.model import SyncResult


def _result(device_id="device-001", *, day=2, added=3, updated=0, errors=(), success=True):
    return SyncResult(
        success=success,
        records_processed=added + updated + len(errors),
        records_added=added,
        records_updated=updated,
        errors=tuple(errors),
        device_id=device_id,
        device_name="Main Gate Scanner",
        synced_at=datetime(2026, 3, day, 10, 0, tzinfo=timezone.utc),
    )


def test_history_evicts_oldest_results():
    history = SyncHistory(limit=2)
    first, second, third = _result(day=1), _result(day=2), _result(day=3)

    for r in (first, second, third):
        history.record(r)

    assert history.recent() == [second, third]
    assert history.recent(1) == [third]
    assert history.recent(0) == []

    history.clear()
    assert history.recent() == []


def test_history_limit_must_be_positive():
    with pytest.raises(ValidationError):
        SyncHistory(limit=0)


def test_daily_summary_groups_by_day_and_device():
    history = SyncHistory()
    history.record(_result(day=1, added=3))
    history.record(_result(day=2, added=1, updated=2, errors=("x",)))
    history.record(_result(day=2, added=0, updated=3))
    history.record(_result("device-002", day=2, added=3))
    history.record(SyncResult.failed("Sync failed: offline", device_id="device-001",
                                     synced_at=datetime(2026, 3, 5, tzinfo=timezone.utc)))

    rows = history.daily_summary("device-001", date(2026, 3, 2), date(2026, 3, 5))

    assert [r.to_dict() for r in rows] == [
        {"date": "2026-03-02", "total_records": 7, "successful_records": 6, "failed_records": 1},
        {"date": "2026-03-05", "total_records": 0, "successful_records": 0, "failed_records": 1},
    ]


def test_daily_summary_rejects_inverted_range():
    with pytest.raises(ValidationError):
        SyncHistory().daily_summary("device-001", date(2026, 3, 5), date(2026, 3, 1))


def test_device_summary_for_day_without_syncs_is_zero():
    summary = SyncHistory().device_summary("device-001", date(2026, 3, 2))

    assert (summary.total_records, summary.successful_records, summary.failed_records) == (0, 0, 0)


def test_build_export_describes_device_and_range(clock):
    history = SyncHistory(clock=clock)
    history.record(_result(day=2))
    device = default_devices(clock())[0]

    export = history.build_export(device, date(2026, 3, 1), date(2026, 3, 2))

    assert export["device_name"] == "Main Gate Scanner"
    assert export["export_date"] == clock().isoformat()
    assert export["date_range"] == {"start_date": "2026-03-01", "end_date": "2026-03-02"}
    assert export["records"] == [
        {"date": "2026-03-02", "total_records": 3, "successful_records": 3, "failed_records": 0}
    ]
