from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, to_storage_time
from ..core.enums import ScanMode
from ..core.exceptions import ValidationError
from ..events.service import EventService
from ..notifications.dispatcher import NotificationDispatcher
from ..students.service import IdentityResolver
from .model import AttendanceRecord, AttendanceReportRow, ScanResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def parse_scan_mode(value) -> ScanMode:
    if isinstance(value, ScanMode):
        return value
    try:
        return ScanMode(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError('Invalid scan mode. Must be "in" or "out".') from None


class AttendanceLedger:
    """The time-in/time-out state machine for (student, event) pairs.

    NoRecord -> EnteredOnly | ExitedOnly -> Completed. Each call overwrites
    its own half of the record (last write wins) and leaves the other half
    alone. Exit before entry is accepted and timestamps are not ordered.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def record_entry(self, student_id: int, event_id: int, at: datetime) -> AttendanceRecord:
        return self.record(ScanMode.IN, student_id, event_id, at)

    def record_exit(self, student_id: int, event_id: int, at: datetime) -> AttendanceRecord:
        return self.record(ScanMode.OUT, student_id, event_id, at)

    def record(self, mode: ScanMode, student_id: int, event_id: int, at: datetime) -> AttendanceRecord:
        if at is None:
            raise ValidationError("Scan timestamp is required")
        at = to_storage_time(at)

        record = self._attendance.upsert_transition(
            student_id=int(student_id),
            event_id=int(event_id),
            mode=mode,
            at=at,
        )
        logger.info(
            "Recorded time %s for student %s at event %s: %s",
            mode.value,
            student_id,
            event_id,
            at.isoformat(),
        )
        return record

    def report(self, event_id: int) -> Sequence[AttendanceReportRow]:
        return self._attendance.get_report_rows(event_id=int(event_id))


class ScanService:
    """Use case: one QR scan from the secretary's scanner.

    resolve code -> load event -> ledger transition -> confirmation mail.
    Resolver and ledger errors propagate; mail problems never do.
    """

    def __init__(
        self,
        resolver: IdentityResolver,
        events: EventService,
        ledger: AttendanceLedger,
        dispatcher: NotificationDispatcher,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._resolver = resolver
        self._events = events
        self._ledger = ledger
        self._dispatcher = dispatcher
        self._clock = clock

    def scan(self, code: str, event_id, mode, *, at: Optional[datetime] = None) -> ScanResult:
        mode = parse_scan_mode(mode)
        if event_id in (None, ""):
            raise ValidationError("Missing required field: eventId")
        try:
            event_id = int(event_id)
        except (TypeError, ValueError):
            raise ValidationError("eventId must be an integer") from None

        student = self._resolver.resolve(code)
        event = self._events.get_event(event_id)

        at = at or self._clock()
        record = self._ledger.record(mode, student.student_id, event.event_id, at)

        if record.notified(mode):
            logger.info(
                "Confirmation for attendance %s (%s) already sent; skipping",
                record.attendance_id,
                mode.value,
            )
            outcome = None
        else:
            outcome = self._dispatcher.notify(record, student, event, mode)

        return ScanResult(
            student_name=student.name,
            student_email=student.email,
            mode=mode,
            timestamp=record.timestamp_for(mode),
            record=record,
            notification=outcome,
        )
