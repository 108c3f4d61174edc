from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from ..core.enums import LedgerStatus, SubjectKind
from .model import LedgerRow


class LedgerRepository(Protocol):
    def get_for_subject_and_date(
        self, kind: SubjectKind, subject_id: str, attendance_date: date
    ) -> Optional[LedgerRow]:
        raise NotImplementedError

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
        """Write the row for (subject, date). Returns True if a new row was created."""

        raise NotImplementedError

    def list_for_date(
        self,
        kind: SubjectKind,
        attendance_date: date,
        *,
        remarks_marker: Optional[str] = None,
    ) -> Sequence[LedgerRow]:
        raise NotImplementedError
