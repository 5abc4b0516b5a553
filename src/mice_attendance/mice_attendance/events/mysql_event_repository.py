from __future__ import annotations

from datetime import date, time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Event
from .repository import EventRepository

_COLUMNS = "event_id, name, description, event_date, start_time, end_time, location, created_at, updated_at"


def _to_event(r: dict) -> Event:
    return Event(
        event_id=int(r["event_id"]),
        name=r["name"],
        event_date=r["event_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        description=r.get("description"),
        location=r.get("location"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: int) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events WHERE event_id=%s", (int(event_id),))
            r = fetchone(cur)
            return _to_event(r) if r else None

    def list_all(self) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events ORDER BY event_date DESC, start_time DESC")
            return [_to_event(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        name: str,
        event_date: date,
        start_time: time,
        end_time: time,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO events(name, description, event_date, start_time, end_time, location)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, description, event_date, start_time, end_time, location),
            )
            return int(cur.lastrowid)

    def delete_by_id(self, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM events WHERE event_id=%s", (int(event_id),))
            return cur.rowcount > 0
