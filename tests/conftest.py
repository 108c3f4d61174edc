from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

import pytest

from src.biometric_attendance.biometric_attendance.attendance.model import LedgerRow
from src.biometric_attendance.biometric_attendance.core.enums import LedgerStatus, SubjectKind
from src.biometric_attendance.biometric_attendance.core.exceptions import PersistenceError
from src.biometric_attendance.biometric_attendance.devices.defaults import default_devices
from src.biometric_attendance.biometric_attendance.devices.feed import SimulatedEventFeed
from src.biometric_attendance.biometric_attendance.devices.link import SimulatedDeviceLink
from src.biometric_attendance.biometric_attendance.devices.registry import DeviceRegistry
from src.biometric_attendance.biometric_attendance.sync.history import SyncHistory
from src.biometric_attendance.biometric_attendance.sync.reconciler import SyncReconciler


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class InMemoryLedger:
    def __init__(self):
        self.rows: dict[tuple[SubjectKind, str, date], LedgerRow] = {}
        self.failing_subjects: set[str] = set()
        self.writes = 0
        self._id = 0

    def get_for_subject_and_date(self, kind: SubjectKind, subject_id: str, attendance_date: date) -> Optional[LedgerRow]:
        return self.rows.get((kind, subject_id, attendance_date))

    def upsert(
        self,
        *,
        kind: SubjectKind,
        subject_id: str,
        attendance_date: date,
        status: LedgerStatus,
        check_in_time: Optional[time],
        remarks: Optional[str] = None,
    ) -> bool:
        if subject_id in self.failing_subjects:
            raise PersistenceError(f"write rejected for {subject_id}")
        self.writes += 1
        key = (kind, subject_id, attendance_date)
        existing = self.rows.get(key)
        if existing:
            row_id = existing.row_id
        else:
            self._id += 1
            row_id = self._id
        self.rows[key] = LedgerRow(
            row_id=row_id,
            subject_kind=kind,
            subject_id=subject_id,
            attendance_date=attendance_date,
            status=status,
            check_in_time=check_in_time,
            remarks=remarks,
        )
        return existing is None

    def list_for_date(self, kind: SubjectKind, attendance_date: date, *, remarks_marker: Optional[str] = None):
        out = []
        for r in self.rows.values():
            if r.subject_kind != kind or r.attendance_date != attendance_date:
                continue
            if remarks_marker and remarks_marker.lower() not in (r.remarks or "").lower():
                continue
            out.append(r)
        return out


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def registry(clock) -> DeviceRegistry:
    return DeviceRegistry(default_devices(clock()), SimulatedDeviceLink(delay=0), clock=clock)


@pytest.fixture
def history(clock) -> SyncHistory:
    return SyncHistory(limit=50, clock=clock)


@pytest.fixture
def reconciler(registry, ledger, history, clock) -> SyncReconciler:
    return SyncReconciler(registry, SimulatedEventFeed(clock=clock), ledger, history=history, clock=clock)
