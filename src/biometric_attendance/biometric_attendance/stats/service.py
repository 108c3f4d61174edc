from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date

from ..attendance.repository import LedgerRepository
from ..core.constants import BIOMETRIC_REMARK_MARKER
from ..core.enums import LedgerStatus, SubjectKind


@dataclass(frozen=True)
class GroupStats:
    total: int
    present: int
    percentage: float

    def to_dict(self) -> dict:
        return {"total": self.total, "present": self.present, "percentage": self.percentage}


@dataclass(frozen=True)
class DailyStats:
    date: date
    students: GroupStats
    teachers: GroupStats

    def to_dict(self) -> dict:
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "students": self.students.to_dict(),
            "teachers": self.teachers.to_dict(),
        }


class BiometricStatsService:
    """Daily presence figures over biometric-sourced ledger rows."""

    def __init__(self, ledger: LedgerRepository, *, remarks_marker: str = BIOMETRIC_REMARK_MARKER):
        self._ledger = ledger
        self._marker = remarks_marker

    async def compute_daily_stats(self, day: date) -> DailyStats:
        students = await asyncio.to_thread(self._group, SubjectKind.STUDENT, day)
        teachers = await asyncio.to_thread(self._group, SubjectKind.TEACHER, day)
        return DailyStats(date=day, students=students, teachers=teachers)

    def _group(self, kind: SubjectKind, day: date) -> GroupStats:
        rows = self._ledger.list_for_date(kind, day, remarks_marker=self._marker)
        total = len(rows)
        present = sum(1 for r in rows if r.status == LedgerStatus.PRESENT)
        percentage = (present / total) * 100 if total > 0 else 0.0
        return GroupStats(total=total, present=present, percentage=percentage)
