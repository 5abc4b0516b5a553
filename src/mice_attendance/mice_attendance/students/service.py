from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from ..common.qr import make_qr_png
from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.exceptions import AmbiguousIdentityError, IntegrityViolation, NotFoundError, ValidationError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class IdentityResolver:
    """Use case: turn a scanned QR payload into the student it was printed for."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def resolve(self, code: str) -> Student:
        code = (code or "").strip()
        if not code:
            raise ValidationError("QR code is empty")

        matches = self._students.find_by_qr_code(code, limit=2)
        if not matches:
            raise NotFoundError("Invalid QR code. Student not found.")
        if len(matches) > 1:
            logger.error(
                "Scan token %r is shared by students %s; scan tokens must be unique",
                code,
                [s.student_id for s in matches],
            )
            raise AmbiguousIdentityError("QR code matches more than one student")
        return matches[0]


class StudentService:
    """Use case: enrol and maintain students (admin)."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def list_students(self) -> Sequence[Student]:
        return self._students.list_all()

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def create_student(self, *, name: str, email: str) -> Student:
        name = require_non_empty(name, "Name")
        require_min_length(name, "Name", 2)
        email = require_email(email)

        qr_code_data = str(uuid.uuid4())
        try:
            student_id = self._students.create(name=name, email=email, qr_code_data=qr_code_data)
        except IntegrityViolation:
            raise ValidationError("A student with this email already exists.") from None

        logger.info("Enrolled student %s (%s)", student_id, email)
        return self.get_student(student_id)

    def update_student(self, student_id: int, *, name: Optional[str] = None, email: Optional[str] = None) -> Student:
        """Change name and/or email. The scan token never changes."""

        current = self.get_student(student_id)
        new_name = current.name if name is None else require_non_empty(name, "Name")
        require_min_length(new_name, "Name", 2)
        new_email = current.email if email is None else require_email(email)

        try:
            self._students.update(current.student_id, name=new_name, email=new_email)
        except IntegrityViolation:
            raise ValidationError("A student with this email already exists.") from None
        return self.get_student(current.student_id)

    def qr_png(self, student_id: int) -> bytes:
        return make_qr_png(self.get_student(student_id).qr_code_data)

    def delete_student(self, student_id: int) -> None:
        if not self._students.delete_by_id(int(student_id)):
            raise NotFoundError("Student not found")
        logger.info("Deleted student %s", student_id)
