from __future__ import annotations

import logging

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..core.enums import NotificationOutcome, ScanMode
from ..core.exceptions import PersistenceFailure
from ..database.capabilities import SchemaCapabilities
from ..events.model import Event
from ..students.model import Student
from .templates import build_confirmation
from .transport import MailTransport

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Best-effort confirmation mail for a committed attendance transition.

    One delivery attempt per call. Failures are logged and reported as
    ``FAILED``; they never reach the caller as exceptions. After a
    successful send the record's notified flag is set; if that update fails
    the next identical scan may send again (at-least-once).
    """

    def __init__(
        self,
        transport: MailTransport,
        attendance: AttendanceRepository,
        capabilities: SchemaCapabilities | None = None,
    ):
        self._transport = transport
        self._attendance = attendance
        self._caps = capabilities or SchemaCapabilities()

    def notify(self, record: AttendanceRecord, student: Student, event: Event, kind: ScanMode) -> NotificationOutcome:
        at = record.timestamp_for(kind)
        message = build_confirmation(student, event, kind, at)

        try:
            self._transport.send(student.email, message.subject, message.html)
        except Exception:
            logger.warning(
                "Confirmation mail (%s) for attendance %s to %s failed",
                kind.value,
                record.attendance_id,
                student.email,
                exc_info=True,
            )
            return NotificationOutcome.FAILED

        if self._caps.notification_flags:
            try:
                self._attendance.mark_notified(attendance_id=record.attendance_id, mode=kind, at=at)
            except PersistenceFailure as exc:
                logger.warning(
                    "Mail sent but could not flag attendance %s as notified (%s): %s",
                    record.attendance_id,
                    kind.value,
                    exc,
                )

        return NotificationOutcome.SENT
