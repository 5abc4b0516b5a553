from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.exceptions import PersistenceFailure
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import WeeklyJournal
from .repository import JournalRepository

_COLUMNS = "journal_id, user_id, week_start_date, journal_text, updated_at"


def _to_journal(r: dict) -> WeeklyJournal:
    return WeeklyJournal(
        journal_id=int(r["journal_id"]),
        user_id=int(r["user_id"]),
        week_start_date=r["week_start_date"],
        journal_text=r["journal_text"],
        updated_at=r.get("updated_at"),
    )


class MySQLJournalRepository(JournalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_week(self, *, user_id: int, week_start_date: date) -> Optional[WeeklyJournal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM weekly_journals WHERE user_id=%s AND week_start_date=%s",
                (int(user_id), week_start_date),
            )
            r = fetchone(cur)
            return _to_journal(r) if r else None

    def upsert(self, *, user_id: int, week_start_date: date, journal_text: str) -> WeeklyJournal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO weekly_journals(user_id, week_start_date, journal_text)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE journal_text=%s
                """,
                (int(user_id), week_start_date, journal_text, journal_text),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM weekly_journals WHERE user_id=%s AND week_start_date=%s",
                (int(user_id), week_start_date),
            )
            r = fetchone(cur)
            if not r:
                raise PersistenceFailure("Journal missing after upsert")
            return _to_journal(r)

    def list_for_user(self, *, user_id: int) -> Sequence[WeeklyJournal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM weekly_journals WHERE user_id=%s ORDER BY week_start_date DESC",
                (int(user_id),),
            )
            return [_to_journal(r) for r in fetchall(cur)]
