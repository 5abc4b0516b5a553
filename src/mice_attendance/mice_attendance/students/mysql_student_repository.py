from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = "student_id, name, email, qr_code_data, created_at, updated_at"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        name=r["name"],
        email=r["email"],
        qr_code_data=r["qr_code_data"],
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return _to_student(r) if r else None

    def find_by_qr_code(self, qr_code_data: str, *, limit: int = 2) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE qr_code_data=%s LIMIT %s",
                (qr_code_data, int(limit)),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY name ASC")
            return [_to_student(r) for r in fetchall(cur)]

    def create(self, *, name: str, email: str, qr_code_data: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO students(name, email, qr_code_data) VALUES(%s,%s,%s)",
                (name, email, qr_code_data),
            )
            return int(cur.lastrowid)

    def update(self, student_id: int, *, name: str, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE students SET name=%s, email=%s WHERE student_id=%s",
                (name, email, int(student_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
