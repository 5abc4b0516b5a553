from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import ScanMode
from ..core.exceptions import PersistenceFailure
from ..database.capabilities import SchemaCapabilities
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository

_TIME_COLUMN = {ScanMode.IN: "time_in", ScanMode.OUT: "time_out"}
_FLAG_COLUMN = {ScanMode.IN: "email_sent_in", ScanMode.OUT: "email_sent_out"}


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, capabilities: SchemaCapabilities | None = None):
        self._conn_factory = conn_factory
        self._caps = capabilities or SchemaCapabilities()

    def _select_columns(self, alias: str = "") -> str:
        p = f"{alias}." if alias else ""
        cols = [f"{p}attendance_id", f"{p}student_id", f"{p}event_id", f"{p}time_in", f"{p}time_out"]
        if self._caps.notification_flags:
            cols += [f"{p}email_sent_in", f"{p}email_sent_out"]
        return ", ".join(cols)

    @staticmethod
    def _to_record(r: dict) -> AttendanceRecord:
        return AttendanceRecord(
            attendance_id=int(r["attendance_id"]),
            student_id=int(r["student_id"]),
            event_id=int(r["event_id"]),
            time_in=r.get("time_in"),
            time_out=r.get("time_out"),
            email_sent_in=bool(r.get("email_sent_in", False)),
            email_sent_out=bool(r.get("email_sent_out", False)),
        )

    def upsert_transition(
        self,
        *,
        student_id: int,
        event_id: int,
        mode: ScanMode,
        at: datetime,
    ) -> AttendanceRecord:
        column = _TIME_COLUMN[mode]
        flag = _FLAG_COLUMN[mode]

        if self._caps.notification_flags:
            # Assignments run left to right: the flag test must see the old timestamp.
            sql = f"""
                INSERT INTO attendance_records(student_id, event_id, {column}, {flag})
                VALUES(%s,%s,%s,0)
                ON DUPLICATE KEY UPDATE
                    {flag}=IF({column} <=> %s, {flag}, 0),
                    {column}=%s
            """
            params = (int(student_id), int(event_id), at, at, at)
        else:
            sql = f"""
                INSERT INTO attendance_records(student_id, event_id, {column})
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE {column}=%s
            """
            params = (int(student_id), int(event_id), at, at)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            # Same transaction: the upsert holds the row lock until commit.
            cur.execute(
                f"""
                SELECT {self._select_columns()}
                FROM attendance_records
                WHERE student_id=%s AND event_id=%s
                """,
                (int(student_id), int(event_id)),
            )
            r = fetchone(cur)
            if not r:
                raise PersistenceFailure("Attendance record missing after upsert")
            return self._to_record(r)

    def mark_notified(self, *, attendance_id: int, mode: ScanMode, at: datetime) -> bool:
        if not self._caps.notification_flags:
            return False

        column = _TIME_COLUMN[mode]
        flag = _FLAG_COLUMN[mode]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE attendance_records
                SET {flag}=1
                WHERE attendance_id=%s AND {column} <=> %s
                """,
                (int(attendance_id), at),
            )
            return cur.rowcount > 0

    def get_for_pair(self, *, student_id: int, event_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {self._select_columns()}
                FROM attendance_records
                WHERE student_id=%s AND event_id=%s
                """,
                (int(student_id), int(event_id)),
            )
            r = fetchone(cur)
            return self._to_record(r) if r else None

    def get_report_rows(self, *, event_id: int) -> Sequence[AttendanceReportRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {self._select_columns("ar")}, s.name AS student_name, s.email AS student_email
                FROM attendance_records ar
                JOIN students s ON s.student_id = ar.student_id
                WHERE ar.event_id=%s
                ORDER BY s.name ASC
                """,
                (int(event_id),),
            )
            rows = fetchall(cur)

            return [
                AttendanceReportRow(
                    attendance_id=int(r["attendance_id"]),
                    student_id=int(r["student_id"]),
                    student_name=r["student_name"],
                    student_email=r["student_email"],
                    time_in=r.get("time_in"),
                    time_out=r.get("time_out"),
                    email_sent_in=bool(r.get("email_sent_in", False)),
                    email_sent_out=bool(r.get("email_sent_out", False)),
                )
                for r in rows
            ]
