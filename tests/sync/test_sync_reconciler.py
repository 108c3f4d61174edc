from __future__ import annotations

import asyncio
from datetime import date, datetime, time, timezone

import pytest

from src.biometric_attendance.biometric_attendance.attendance.model import RawEvent
from src.biometric_attendance.biometric_attendance.core.constants import BIOMETRIC_REMARK
from src.biometric_attendance.biometric_attendance.core.enums import EventOutcome, LedgerStatus, SubjectKind
from src.biometric_attendance.biometric_attendance.core.exceptions import (
    DeviceNotFoundError,
    DeviceUnavailableError,
)
from src.biometric_attendance.biometric_attendance.sync.reconciler import SyncReconciler

TODAY = date(2026, 3, 2)


def _event(record_id, subject_id, kind=SubjectKind.STUDENT, outcome=EventOutcome.SUCCESS, at=time(8, 15)):
    return RawEvent(
        record_id=record_id,
        device_id="device-001",
        subject_id=subject_id,
        subject_kind=kind,
        timestamp=datetime.combine(TODAY, at, tzinfo=timezone.utc),
        outcome=outcome,
    )


class StaticFeed:
    def __init__(self, events):
        self.events = events

    async def fetch(self, device):
        return list(self.events)


class BrokenFeed:
    async def fetch(self, device):
        raise ConnectionResetError("device dropped the link")


class GatedFeed:
    def __init__(self):
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def fetch(self, device):
        self.entered.set()
        await self.release.wait()
        return []


def _assert_counts_balance(result):
    assert result.records_added + result.records_updated + len(result.errors) == result.records_processed


@pytest.mark.asyncio
async def test_sync_one_inserts_one_row_per_event(reconciler, registry, ledger, clock):
    later = clock.advance(minutes=3)

    result = await reconciler.sync_one("device-001")

    assert result.success is True
    assert result.records_processed == 3
    assert result.records_added == 3
    assert result.records_updated == 0
    assert result.errors == ()
    assert result.device_name == "Main Gate Scanner"
    _assert_counts_balance(result)

    row = ledger.get_for_subject_and_date(SubjectKind.STUDENT, "student-001", TODAY)
    assert row.status == LedgerStatus.PRESENT
    assert row.check_in_time == time(8, 30)
    assert row.remarks == BIOMETRIC_REMARK
    assert ledger.get_for_subject_and_date(SubjectKind.TEACHER, "teacher-001", TODAY).check_in_time == time(8, 0)
    assert registry.get("device-001").last_sync == later


@pytest.mark.asyncio
async def test_second_sync_updates_existing_rows(reconciler, ledger):
    await reconciler.sync_one("device-001")
    ids_before = {k: r.row_id for k, r in ledger.rows.items()}

    result = await reconciler.sync_one("device-001")

    assert result.records_added == 0
    assert result.records_updated == 3
    assert len(ledger.rows) == 3
    assert {k: r.row_id for k, r in ledger.rows.items()} == ids_before


@pytest.mark.asyncio
async def test_inactive_device_is_rejected_without_writes(reconciler, ledger):
    with pytest.raises(DeviceUnavailableError):
        await reconciler.sync_one("device-003")
    assert ledger.writes == 0


@pytest.mark.asyncio
async def test_unknown_device_is_rejected_without_writes(reconciler, ledger):
    with pytest.raises(DeviceNotFoundError):
        await reconciler.sync_one("device-404")
    assert ledger.writes == 0


@pytest.mark.asyncio
async def test_one_bad_event_does_not_abort_the_batch(reconciler, ledger):
    ledger.failing_subjects.add("student-002")

    result = await reconciler.sync_one("device-002")

    assert result.success is True
    assert result.records_processed == 3
    assert result.records_added == 2
    assert result.errors == ("Failed to process record record-002: write rejected for student-002",)
    assert ledger.get_for_subject_and_date(SubjectKind.TEACHER, "teacher-001", TODAY) is not None
    _assert_counts_balance(result)


@pytest.mark.asyncio
async def test_failed_captures_are_reported_and_not_written(registry, ledger, clock):
    feed = StaticFeed(
        [
            _event("r1", "student-010"),
            _event("r2", "student-011", outcome=EventOutcome.FAILED),
            _event("r3", "student-010", outcome=EventOutcome.DUPLICATE, at=time(8, 20)),
        ]
    )
    reconciler = SyncReconciler(registry, feed, ledger, clock=clock)

    result = await reconciler.sync_one("device-001")

    assert result.records_processed == 3
    assert result.records_added == 1
    assert result.records_updated == 1
    assert len(result.errors) == 1
    assert result.errors[0].startswith("Failed to process record r2:")
    assert ledger.get_for_subject_and_date(SubjectKind.STUDENT, "student-011", TODAY) is None
    assert ledger.get_for_subject_and_date(SubjectKind.STUDENT, "student-010", TODAY).check_in_time == time(8, 20)
    _assert_counts_balance(result)


@pytest.mark.asyncio
async def test_unknown_subject_kind_becomes_an_error_entry(registry, ledger, clock):
    feed = StaticFeed([_event("r1", "parent-001", kind="parent"), _event("r2", "student-001")])
    reconciler = SyncReconciler(registry, feed, ledger, clock=clock)

    result = await reconciler.sync_one("device-001")

    assert result.success is True
    assert result.records_added == 1
    assert len(result.errors) == 1
    _assert_counts_balance(result)


@pytest.mark.asyncio
async def test_fetch_failure_returns_failed_result(registry, ledger, history, clock):
    before = registry.get("device-001").last_sync
    clock.advance(minutes=1)
    reconciler = SyncReconciler(registry, BrokenFeed(), ledger, history=history, clock=clock)

    result = await reconciler.sync_one("device-001")

    assert result.success is False
    assert result.records_processed == 0
    assert result.errors == ("Sync failed: device dropped the link",)
    assert registry.get("device-001").last_sync == before
    assert history.recent() == [result]


@pytest.mark.asyncio
async def test_sync_all_returns_one_result_per_active_device(reconciler, ledger):
    results = await reconciler.sync_all()

    assert [r.device_id for r in results] == ["device-001", "device-002"]
    assert all(r.success for r in results)
    assert [r.records_added + r.records_updated for r in results] == [3, 3]
    assert results[0].records_added == 3
    # Same subjects on the same day: the second device rewrites the rows.
    assert results[1].records_updated == 3
    assert len(ledger.rows) == 3


@pytest.mark.asyncio
async def test_sync_all_skips_devices_disconnected_before_the_run(reconciler, registry):
    await registry.disconnect("device-001")

    results = await reconciler.sync_all()

    assert [r.device_id for r in results] == ["device-002"]


@pytest.mark.asyncio
async def test_sync_all_never_raises(reconciler, monkeypatch):
    async def explode(device_id):
        raise RuntimeError("boom")

    monkeypatch.setattr(reconciler, "sync_one", explode)

    results = await reconciler.sync_all()

    assert len(results) == 2
    assert all(r.success is False and r.records_processed == 0 for r in results)
    assert results[0].errors == ("Device Main Gate Scanner: boom",)
    assert results[1].errors == ("Device Library Scanner: boom",)


@pytest.mark.asyncio
async def test_sync_all_with_broken_feed_reports_every_device(registry, ledger, clock):
    reconciler = SyncReconciler(registry, BrokenFeed(), ledger, clock=clock)

    results = await reconciler.sync_all()

    assert [r.success for r in results] == [False, False]
    assert ledger.writes == 0


@pytest.mark.asyncio
async def test_concurrent_sync_of_same_device_is_rejected(registry, ledger, clock):
    feed = GatedFeed()
    reconciler = SyncReconciler(registry, feed, ledger, clock=clock)

    first = asyncio.create_task(reconciler.sync_one("device-001"))
    await feed.entered.wait()

    with pytest.raises(DeviceUnavailableError, match="already syncing"):
        await reconciler.sync_one("device-001")

    feed.release.set()
    result = await first
    assert result.success is True
    assert result.records_processed == 0

    # The guard is released once the first sync completes.
    assert (await reconciler.sync_one("device-001")).success is True


@pytest.mark.asyncio
async def test_results_are_recorded_in_history(reconciler, history):
    await reconciler.sync_one("device-001")
    await reconciler.sync_all()

    assert [r.device_id for r in history.recent()] == ["device-001", "device-001", "device-002"]
