from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.capabilities import SchemaCapabilities
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DailyLog
from .repository import DailyLogRepository


class MySQLDailyLogRepository(DailyLogRepository):
    def __init__(self, conn_factory: DatabaseConnection, capabilities: SchemaCapabilities | None = None):
        self._conn_factory = conn_factory
        self._caps = capabilities or SchemaCapabilities()

    def _columns(self) -> str:
        cols = "log_id, user_id, log_date, hours_worked, notes, created_at"
        if self._caps.log_audio_url:
            cols += ", audio_url"
        return cols

    @staticmethod
    def _to_log(r: dict) -> DailyLog:
        return DailyLog(
            log_id=int(r["log_id"]),
            user_id=int(r["user_id"]),
            log_date=r["log_date"],
            # DECIMAL comes back as Decimal
            hours_worked=float(r["hours_worked"]),
            notes=r.get("notes"),
            audio_url=r.get("audio_url"),
            created_at=r.get("created_at"),
        )

    def get_by_id(self, log_id: int) -> Optional[DailyLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {self._columns()} FROM daily_logs WHERE log_id=%s", (int(log_id),))
            r = fetchone(cur)
            return self._to_log(r) if r else None

    def get_for_user_and_date(self, *, user_id: int, log_date: date) -> Optional[DailyLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {self._columns()} FROM daily_logs WHERE user_id=%s AND log_date=%s",
                (int(user_id), log_date),
            )
            r = fetchone(cur)
            return self._to_log(r) if r else None

    def list_for_user(self, *, user_id: int, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[DailyLog]:
        where = ["user_id=%s"]
        params: list = [int(user_id)]
        if start:
            where.append("log_date >= %s")
            params.append(start)
        if end:
            where.append("log_date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {self._columns()}
                FROM daily_logs
                WHERE {' AND '.join(where)}
                ORDER BY log_date DESC
                """,
                tuple(params),
            )
            return [self._to_log(r) for r in fetchall(cur)]

    def total_hours(self, *, user_id: int, exclude_log_id: Optional[int] = None) -> float:
        sql = "SELECT COALESCE(SUM(hours_worked), 0) AS total FROM daily_logs WHERE user_id=%s"
        params: tuple = (int(user_id),)
        if exclude_log_id is not None:
            sql += " AND log_id<>%s"
            params += (int(exclude_log_id),)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            r = fetchone(cur)
            return float(r["total"]) if r else 0.0

    def create(
        self,
        *,
        user_id: int,
        log_date: date,
        hours_worked: float,
        notes: Optional[str],
        audio_url: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            if self._caps.log_audio_url:
                cur.execute(
                    """
                    INSERT INTO daily_logs(user_id, log_date, hours_worked, notes, audio_url)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(user_id), log_date, hours_worked, notes, audio_url),
                )
            else:
                cur.execute(
                    "INSERT INTO daily_logs(user_id, log_date, hours_worked, notes) VALUES(%s,%s,%s,%s)",
                    (int(user_id), log_date, hours_worked, notes),
                )
            return int(cur.lastrowid)

    def update(self, log_id: int, *, log_date: date, hours_worked: float, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE daily_logs SET log_date=%s, hours_worked=%s, notes=%s WHERE log_id=%s",
                (log_date, hours_worked, notes, int(log_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, log_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM daily_logs WHERE log_id=%s", (int(log_id),))
            return cur.rowcount > 0
