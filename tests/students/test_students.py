from __future__ import annotations

import uuid

import pytest

from src.mice_attendance.mice_attendance.core.exceptions import AmbiguousIdentityError, NotFoundError, ValidationError
from src.mice_attendance.mice_attendance.students.model import Student
from src.mice_attendance.mice_attendance.students.service import IdentityResolver, StudentService


def test_resolve_returns_the_unique_student(students, student):
    assert IdentityResolver(students).resolve("abc123") == student


def test_resolve_strips_scanner_whitespace(students):
    assert IdentityResolver(students).resolve("  def456\n").name == "Ben Cruz"


def test_resolve_unknown_token(students):
    with pytest.raises(NotFoundError):
        IdentityResolver(students).resolve("unknown-token")


def test_resolve_empty_code(students):
    with pytest.raises(ValidationError):
        IdentityResolver(students).resolve("   ")


def test_resolve_duplicate_token_is_ambiguous(students):
    students.by_id[9] = Student(student_id=9, name="Dup", email="dup@example.com", qr_code_data="def456")

    with pytest.raises(AmbiguousIdentityError):
        IdentityResolver(students).resolve("def456")


def test_create_student_assigns_uuid_token(students):
    service = StudentService(students)

    created = service.create_student(name="  Carla Diaz ", email="Carla@Example.com")

    assert created.name == "Carla Diaz"
    assert created.email == "carla@example.com"
    assert str(uuid.UUID(created.qr_code_data)) == created.qr_code_data
    assert IdentityResolver(students).resolve(created.qr_code_data) == created


def test_create_student_duplicate_email(students):
    with pytest.raises(ValidationError):
        StudentService(students).create_student(name="Ana Again", email="ana.reyes@example.com")


@pytest.mark.parametrize("name, email", [("", "x@example.com"), ("A", "x@example.com"), ("Valid Name", "not-an-email")])
def test_create_student_validation(students, name, email):
    with pytest.raises(ValidationError):
        StudentService(students).create_student(name=name, email=email)


def test_update_keeps_scan_token(students):
    service = StudentService(students)

    updated = service.update_student(1, name="Ana M. Reyes")

    assert updated.name == "Ana M. Reyes"
    assert updated.email == "ana.reyes@example.com"
    assert updated.qr_code_data == "abc123"


def test_update_unknown_student(students):
    with pytest.raises(NotFoundError):
        StudentService(students).update_student(404, name="Nobody")


def test_delete_student(students):
    service = StudentService(students)
    service.delete_student(2)

    assert [s.name for s in service.list_students()] == ["Ana Reyes"]
    with pytest.raises(NotFoundError):
        service.delete_student(2)


def test_qr_png_is_a_png(students):
    png = StudentService(students).qr_png(1)

    assert png.startswith(b"\x89PNG\r\n\x1a\n")
