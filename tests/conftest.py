from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.mice_attendance.mice_attendance.attendance.model import AttendanceRecord, AttendanceReportRow
from src.mice_attendance.mice_attendance.container import wire
from src.mice_attendance.mice_attendance.core.enums import Role, ScanMode
from src.mice_attendance.mice_attendance.core.exceptions import IntegrityViolation, NotificationFailure, PersistenceFailure
from src.mice_attendance.mice_attendance.events.model import Event
from src.mice_attendance.mice_attendance.ojt.model import DailyLog, WeeklyJournal
from src.mice_attendance.mice_attendance.students.model import Student
from src.mice_attendance.mice_attendance.users.model import User

_TIME = {ScanMode.IN: "time_in", ScanMode.OUT: "time_out"}
_FLAG = {ScanMode.IN: "email_sent_in", ScanMode.OUT: "email_sent_out"}


class InMemoryStudents:
    def __init__(self, students=()):
        self.by_id: dict[int, Student] = {s.student_id: s for s in students}
        self._next_id = max(self.by_id, default=0) + 1

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.by_id.get(int(student_id))

    def find_by_qr_code(self, qr_code_data: str, *, limit: int = 2):
        return [s for s in self.by_id.values() if s.qr_code_data == qr_code_data][:limit]

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda s: s.name)

    def create(self, *, name: str, email: str, qr_code_data: str) -> int:
        if any(s.email == email or s.qr_code_data == qr_code_data for s in self.by_id.values()):
            raise IntegrityViolation("Duplicate entry")
        sid = self._next_id
        self._next_id += 1
        self.by_id[sid] = Student(student_id=sid, name=name, email=email, qr_code_data=qr_code_data)
        return sid

    def update(self, student_id: int, *, name: str, email: str) -> bool:
        if any(s.email == email and s.student_id != student_id for s in self.by_id.values()):
            raise IntegrityViolation("Duplicate entry")
        current = self.by_id.get(int(student_id))
        if not current:
            return False
        self.by_id[current.student_id] = replace(current, name=name, email=email)
        return True

    def delete_by_id(self, student_id: int) -> bool:
        return self.by_id.pop(int(student_id), None) is not None


class InMemoryEvents:
    def __init__(self, events=()):
        self.by_id: dict[int, Event] = {e.event_id: e for e in events}
        self._next_id = max(self.by_id, default=0) + 1

    def get_by_id(self, event_id: int) -> Optional[Event]:
        return self.by_id.get(int(event_id))

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda e: (e.event_date, e.start_time), reverse=True)

    def create(self, *, name, event_date, start_time, end_time, description=None, location=None) -> int:
        eid = self._next_id
        self._next_id += 1
        self.by_id[eid] = Event(
            event_id=eid,
            name=name,
            event_date=event_date,
            start_time=start_time,
            end_time=end_time,
            description=description,
            location=location,
        )
        return eid

    def delete_by_id(self, event_id: int) -> bool:
        return self.by_id.pop(int(event_id), None) is not None


class InMemoryAttendance:
    """Mirrors the single-statement upsert of the MySQL repository.

    The lock plays the role of the unique key + row lock.
    """

    def __init__(self, students: Optional[InMemoryStudents] = None):
        self._lock = threading.Lock()
        self._students = students
        self.by_pair: dict[tuple[int, int], AttendanceRecord] = {}
        self._next_id = 1
        self.upserts = 0
        self.fail_upsert = False
        self.fail_mark = False

    def upsert_transition(self, *, student_id, event_id, mode, at) -> AttendanceRecord:
        if self.fail_upsert:
            raise PersistenceFailure("Lost connection to MySQL server")
        key = (int(student_id), int(event_id))
        with self._lock:
            self.upserts += 1
            current = self.by_pair.get(key)
            if current is None:
                record = AttendanceRecord(
                    attendance_id=self._next_id,
                    student_id=key[0],
                    event_id=key[1],
                    time_in=None,
                    time_out=None,
                )
                self._next_id += 1
                record = replace(record, **{_TIME[mode]: at})
            else:
                same = current.timestamp_for(mode) == at
                record = replace(current, **{_TIME[mode]: at, _FLAG[mode]: current.notified(mode) if same else False})
            self.by_pair[key] = record
            return record

    def mark_notified(self, *, attendance_id, mode, at) -> bool:
        if self.fail_mark:
            raise PersistenceFailure("Lock wait timeout exceeded")
        with self._lock:
            for key, record in self.by_pair.items():
                if record.attendance_id == int(attendance_id) and record.timestamp_for(mode) == at:
                    self.by_pair[key] = replace(record, **{_FLAG[mode]: True})
                    return True
            return False

    def get_for_pair(self, *, student_id, event_id) -> Optional[AttendanceRecord]:
        return self.by_pair.get((int(student_id), int(event_id)))

    def get_report_rows(self, *, event_id):
        rows = []
        for record in self.by_pair.values():
            if record.event_id != int(event_id):
                continue
            student = self._students.get_by_id(record.student_id)
            rows.append(
                AttendanceReportRow(
                    attendance_id=record.attendance_id,
                    student_id=record.student_id,
                    student_name=student.name,
                    student_email=student.email,
                    time_in=record.time_in,
                    time_out=record.time_out,
                    email_sent_in=record.email_sent_in,
                    email_sent_out=record.email_sent_out,
                )
            )
        return sorted(rows, key=lambda r: r.student_name)


class InMemoryUsers:
    def __init__(self, users=()):
        self.by_id: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.by_id.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.username == username), None)


class InMemoryDailyLogs:
    def __init__(self):
        self.by_id: dict[int, DailyLog] = {}
        self._next_id = 1

    def get_by_id(self, log_id: int) -> Optional[DailyLog]:
        return self.by_id.get(int(log_id))

    def get_for_user_and_date(self, *, user_id, log_date) -> Optional[DailyLog]:
        return next((l for l in self.by_id.values() if l.user_id == user_id and l.log_date == log_date), None)

    def list_for_user(self, *, user_id, start=None, end=None):
        logs = [
            l
            for l in self.by_id.values()
            if l.user_id == user_id and (start is None or l.log_date >= start) and (end is None or l.log_date <= end)
        ]
        return sorted(logs, key=lambda l: l.log_date, reverse=True)

    def total_hours(self, *, user_id, exclude_log_id=None) -> float:
        return sum(l.hours_worked for l in self.by_id.values() if l.user_id == user_id and l.log_id != exclude_log_id)

    def create(self, *, user_id, log_date, hours_worked, notes, audio_url=None) -> int:
        if self.get_for_user_and_date(user_id=user_id, log_date=log_date):
            raise IntegrityViolation("Duplicate entry")
        log_id = self._next_id
        self._next_id += 1
        self.by_id[log_id] = DailyLog(
            log_id=log_id,
            user_id=user_id,
            log_date=log_date,
            hours_worked=hours_worked,
            notes=notes,
            audio_url=audio_url,
        )
        return log_id

    def update(self, log_id, *, log_date, hours_worked, notes) -> bool:
        current = self.by_id.get(int(log_id))
        if not current:
            return False
        self.by_id[current.log_id] = replace(current, log_date=log_date, hours_worked=hours_worked, notes=notes)
        return True

    def delete_by_id(self, log_id) -> bool:
        return self.by_id.pop(int(log_id), None) is not None


class InMemoryJournals:
    def __init__(self):
        self.by_key: dict[tuple[int, date], WeeklyJournal] = {}
        self._next_id = 1

    def get_for_week(self, *, user_id, week_start_date) -> Optional[WeeklyJournal]:
        return self.by_key.get((user_id, week_start_date))

    def upsert(self, *, user_id, week_start_date, journal_text) -> WeeklyJournal:
        current = self.by_key.get((user_id, week_start_date))
        if current:
            journal = replace(current, journal_text=journal_text)
        else:
            journal = WeeklyJournal(
                journal_id=self._next_id,
                user_id=user_id,
                week_start_date=week_start_date,
                journal_text=journal_text,
            )
            self._next_id += 1
        self.by_key[(user_id, week_start_date)] = journal
        return journal

    def list_for_user(self, *, user_id):
        return sorted(
            (j for j in self.by_key.values() if j.user_id == user_id),
            key=lambda j: j.week_start_date,
            reverse=True,
        )


class FakeMailTransport:
    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    def send(self, recipient: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise NotificationFailure("Mail server did not answer within 10s")
        self.sent.append((recipient, subject, html_body))

    def verify(self) -> None:
        if self.fail:
            raise NotificationFailure("Connection refused")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def student() -> Student:
    return Student(student_id=1, name="Ana Reyes", email="ana.reyes@example.com", qr_code_data="abc123")


@pytest.fixture
def event() -> Event:
    return Event(
        event_id=7,
        name="Orientation Day",
        event_date=date(2026, 3, 2),
        start_time=time(8, 0),
        end_time=time(17, 0),
        location="Main Hall",
    )


@pytest.fixture
def students(student) -> InMemoryStudents:
    return InMemoryStudents(
        [student, Student(student_id=2, name="Ben Cruz", email="ben.cruz@example.com", qr_code_data="def456")]
    )


@pytest.fixture
def events(event) -> InMemoryEvents:
    return InMemoryEvents([event])


@pytest.fixture
def attendance(students) -> InMemoryAttendance:
    return InMemoryAttendance(students)


@pytest.fixture
def mail() -> FakeMailTransport:
    return FakeMailTransport()


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers(
        [
            User(1, "Admin Demo", "admin", generate_password_hash("admin123"), Role.ADMIN),
            User(2, "Event Secretary", "secretary", generate_password_hash("secretary123"), Role.SECRETARY),
            User(3, "Former Secretary", "former", generate_password_hash("former123"), Role.SECRETARY, is_active=False),
        ]
    )


@pytest.fixture
def daily_logs() -> InMemoryDailyLogs:
    return InMemoryDailyLogs()


@pytest.fixture
def journals() -> InMemoryJournals:
    return InMemoryJournals()


@pytest.fixture
def container(users, students, events, attendance, daily_logs, journals, mail, fixed_now):
    return wire(
        users_repo=users,
        students_repo=students,
        events_repo=events,
        attendance_repo=attendance,
        daily_logs_repo=daily_logs,
        journals_repo=journals,
        mail_transport=mail,
        clock=lambda: fixed_now,
    )
