from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..core.enums import LedgerStatus, SubjectKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import LedgerRow
from .repository import LedgerRepository

# kind -> (table, subject column); identifiers are never taken from user input.
_TABLES = {
    SubjectKind.STUDENT: ("student_attendance", "student_id"),
    SubjectKind.TEACHER: ("teacher_attendance", "teacher_id"),
}


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_subject_and_date(
        self, kind: SubjectKind, subject_id: str, attendance_date: date
    ) -> Optional[LedgerRow]:
        table, subject_col = _TABLES[kind]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, {subject_col} AS subject_id, attendance_date, status, check_in_time, remarks
                FROM {table}
                WHERE {subject_col}=%s AND attendance_date=%s
                """,
                (subject_id, attendance_date),
            )
            r = fetchone(cur)
            return self._to_row(kind, r) if r else None

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
        table, subject_col = _TABLES[kind]
        with db_cursor(self._conn_factory) as (_, cur):
            # Relies on the UNIQUE key (subject, attendance_date): one row per subject per day.
            # Row alias syntax needs MySQL 8.0.19+.
            cur.execute(
                f"""
                INSERT INTO {table}({subject_col}, attendance_date, status, check_in_time, remarks)
                VALUES(%s,%s,%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE
                    status=new.status,
                    check_in_time=new.check_in_time,
                    remarks=new.remarks
                """,
                (subject_id, attendance_date, status.value, check_in_time, remarks),
            )
            # MySQL reports 1 for an insert, 2 for an update, 0 for an unchanged row.
            return cur.rowcount == 1

    def list_for_date(
        self,
        kind: SubjectKind,
        attendance_date: date,
        *,
        remarks_marker: Optional[str] = None,
    ) -> Sequence[LedgerRow]:
        table, subject_col = _TABLES[kind]
        clauses = ["attendance_date=%s"]
        params: list[object] = [attendance_date]

        if remarks_marker:
            clauses.append("LOWER(remarks) LIKE %s")
            params.append(f"%{remarks_marker.lower()}%")

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, {subject_col} AS subject_id, attendance_date, status, check_in_time, remarks
                FROM {table}
                WHERE {where}
                ORDER BY id ASC
                """,
                tuple(params),
            )
            return [self._to_row(kind, r) for r in fetchall(cur)]

    @staticmethod
    def _to_row(kind: SubjectKind, r: dict) -> LedgerRow:
        return LedgerRow(
            row_id=int(r["id"]),
            subject_kind=kind,
            subject_id=str(r["subject_id"]),
            attendance_date=r["attendance_date"],
            status=LedgerStatus(r["status"]),
            check_in_time=normalize_mysql_time(r.get("check_in_time")),
            remarks=r.get("remarks"),
        )
