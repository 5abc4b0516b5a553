from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationOutcome, ScanMode


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's time-in/time-out for one event.

    At most one exists per (student_id, event_id).
    """

    attendance_id: int
    student_id: int
    event_id: int
    time_in: Optional[datetime]
    time_out: Optional[datetime]
    email_sent_in: bool = False
    email_sent_out: bool = False

    def timestamp_for(self, mode: ScanMode) -> Optional[datetime]:
        return self.time_in if mode == ScanMode.IN else self.time_out

    def notified(self, mode: ScanMode) -> bool:
        return self.email_sent_in if mode == ScanMode.IN else self.email_sent_out

    @property
    def is_complete(self) -> bool:
        return self.time_in is not None and self.time_out is not None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "student_id": self.student_id,
            "event_id": self.event_id,
            "time_in": _iso(self.time_in),
            "time_out": _iso(self.time_out),
            "email_sent_in": self.email_sent_in,
            "email_sent_out": self.email_sent_out,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for the per-event attendance list."""

    attendance_id: int
    student_id: int
    student_name: str
    student_email: str
    time_in: Optional[datetime]
    time_out: Optional[datetime]
    email_sent_in: bool = False
    email_sent_out: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "student_email": self.student_email,
            "time_in": _iso(self.time_in),
            "time_out": _iso(self.time_out),
            "email_sent_in": self.email_sent_in,
            "email_sent_out": self.email_sent_out,
        }


@dataclass(frozen=True)
class ScanResult:
    """What the scanner UI shows after a successful scan.

    ``notification`` is None when the confirmation for this exact
    transition had already been sent.
    """

    student_name: str
    student_email: str
    mode: ScanMode
    timestamp: datetime
    record: AttendanceRecord
    notification: Optional[NotificationOutcome]

    def to_dict(self) -> dict:
        return {
            "success": True,
            "student": {"name": self.student_name, "email": self.student_email},
            "scanMode": self.mode.value,
            "timestamp": self.timestamp.isoformat(),
            "notification": self.notification.value if self.notification else "SKIPPED",
            "record": self.record.to_dict(),
        }
