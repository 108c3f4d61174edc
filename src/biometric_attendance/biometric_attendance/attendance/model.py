from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import EventOutcome, LedgerStatus, SubjectKind


@dataclass(frozen=True)
class RawEvent:
    """One capture record pulled from a device; never persisted as-is."""

    record_id: str
    device_id: str
    subject_id: str
    subject_kind: SubjectKind
    timestamp: datetime
    outcome: EventOutcome
    biometric_data: Optional[str] = None


@dataclass(frozen=True)
class LedgerRow:
    """Persisted attendance of one subject on one date."""

    row_id: int
    subject_kind: SubjectKind
    subject_id: str
    attendance_date: date
    status: LedgerStatus
    check_in_time: Optional[time]
    remarks: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.row_id,
            "subject_kind": self.subject_kind.value,
            "subject_id": self.subject_id,
            "attendance_date": self.attendance_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "check_in_time": self.check_in_time.strftime("%H:%M:%S") if self.check_in_time else None,
            "remarks": self.remarks,
        }
