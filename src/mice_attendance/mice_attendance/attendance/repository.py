from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ScanMode
from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def upsert_transition(
        self,
        *,
        student_id: int,
        event_id: int,
        mode: ScanMode,
        at: datetime,
    ) -> AttendanceRecord:
        """Write time_in (IN) or time_out (OUT) for the pair in one atomic statement.

        Creates the record when missing. Clears the matching notified flag
        unless the stored timestamp already equals ``at``. Never touches the
        other half of the record. Returns the record as committed.
        """

        raise NotImplementedError

    def mark_notified(self, *, attendance_id: int, mode: ScanMode, at: datetime) -> bool:
        """Set the notified flag, but only while the timestamp is still ``at``."""

        raise NotImplementedError

    def get_for_pair(self, *, student_id: int, event_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_report_rows(self, *, event_id: int) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
