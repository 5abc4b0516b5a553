from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for students.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def find_by_qr_code(self, qr_code_data: str, *, limit: int = 2) -> Sequence[Student]:
        """Return up to ``limit`` students carrying the token (more than one is a data error)."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, *, name: str, email: str, qr_code_data: str) -> int:
        raise NotImplementedError

    def update(self, student_id: int, *, name: str, email: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError
