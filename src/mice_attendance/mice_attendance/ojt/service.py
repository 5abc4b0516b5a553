from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import iter_week, week_bounds
from ..common.validators import require_hours, require_non_empty
from ..core.constants import MAX_DAILY_HOURS, OJT_REQUIRED_HOURS
from ..core.exceptions import IntegrityViolation, NotFoundError, ValidationError
from .model import DailyLog, DayBreakdown, OjtProgress, WeeklyJournal, WeeklySummary
from .repository import DailyLogRepository, JournalRepository

logger = logging.getLogger(__name__)


def _clean_notes(notes: Optional[str]) -> Optional[str]:
    return (notes or "").strip() or None


class OjtService:
    """Use case: on-the-job-training hour logs and weekly journals.

    Business rules:
    - One daily log per user per date, 0 < hours <= 24.
    - The running total never exceeds the required OJT hours.
    - One journal per user per ISO week (Monday start); saving again replaces it.
    """

    def __init__(
        self,
        logs: DailyLogRepository,
        journals: JournalRepository,
        *,
        required_hours: float = OJT_REQUIRED_HOURS,
    ):
        self._logs = logs
        self._journals = journals
        self._required = float(required_hours)

    def _check_cap(self, *, user_id: int, hours: float, exclude_log_id: Optional[int] = None) -> None:
        current = self._logs.total_hours(user_id=user_id, exclude_log_id=exclude_log_id)
        if current + hours > self._required:
            remaining = max(self._required - current, 0.0)
            raise ValidationError(
                f"This entry would exceed the {self._required:g} hour limit. "
                f"You have {remaining:g} hours remaining."
            )

    def _owned_log(self, *, user_id: int, log_id: int) -> DailyLog:
        log = self._logs.get_by_id(int(log_id))
        if not log or log.user_id != int(user_id):
            raise NotFoundError("Daily log not found")
        return log

    def log_day(
        self,
        *,
        user_id: int,
        work_date: date,
        hours,
        notes: Optional[str] = None,
        audio_url: Optional[str] = None,
    ) -> DailyLog:
        if work_date is None:
            raise ValidationError("Please enter both date and hours")
        hours = require_hours(hours, max_hours=MAX_DAILY_HOURS)

        if self._logs.get_for_user_and_date(user_id=user_id, log_date=work_date):
            raise ValidationError(
                f"You already have a log for {work_date.isoformat()}. Please edit the existing entry instead."
            )
        self._check_cap(user_id=user_id, hours=hours)

        try:
            log_id = self._logs.create(
                user_id=user_id,
                log_date=work_date,
                hours_worked=hours,
                notes=_clean_notes(notes),
                audio_url=audio_url or None,
            )
        except IntegrityViolation:
            # Lost a race with another submit for the same date.
            raise ValidationError(f"You already have a log for {work_date.isoformat()}.") from None

        logger.info("User %s logged %.2fh for %s", user_id, hours, work_date)
        return self._owned_log(user_id=user_id, log_id=log_id)

    def update_log(
        self,
        *,
        user_id: int,
        log_id: int,
        work_date: Optional[date] = None,
        hours=None,
        notes: Optional[str] = None,
    ) -> DailyLog:
        current = self._owned_log(user_id=user_id, log_id=log_id)

        new_date = work_date or current.log_date
        new_hours = current.hours_worked if hours is None else require_hours(hours, max_hours=MAX_DAILY_HOURS)
        new_notes = current.notes if notes is None else _clean_notes(notes)

        if new_date != current.log_date:
            clash = self._logs.get_for_user_and_date(user_id=user_id, log_date=new_date)
            if clash and clash.log_id != current.log_id:
                raise ValidationError(f"You already have a log for {new_date.isoformat()}.")
        self._check_cap(user_id=user_id, hours=new_hours, exclude_log_id=current.log_id)

        try:
            self._logs.update(current.log_id, log_date=new_date, hours_worked=new_hours, notes=new_notes)
        except IntegrityViolation:
            raise ValidationError(f"You already have a log for {new_date.isoformat()}.") from None
        return self._owned_log(user_id=user_id, log_id=current.log_id)

    def delete_log(self, *, user_id: int, log_id: int) -> None:
        log = self._owned_log(user_id=user_id, log_id=log_id)
        self._logs.delete_by_id(log.log_id)
        logger.info("User %s deleted log for %s", user_id, log.log_date)

    def list_logs(self, *, user_id: int) -> Sequence[DailyLog]:
        return self._logs.list_for_user(user_id=user_id)

    def total_hours(self, *, user_id: int) -> float:
        return round(self._logs.total_hours(user_id=user_id), 2)

    def progress(self, *, user_id: int) -> OjtProgress:
        return OjtProgress(total_hours=self.total_hours(user_id=user_id), required_hours=self._required)

    def save_journal(self, *, user_id: int, text: str, week_of: date) -> WeeklyJournal:
        text = require_non_empty(text, "Journal text")
        monday, _ = week_bounds(week_of)
        journal = self._journals.upsert(user_id=user_id, week_start_date=monday, journal_text=text)
        logger.info("User %s saved journal for week of %s", user_id, monday)
        return journal

    def list_journals(self, *, user_id: int) -> Sequence[WeeklyJournal]:
        return self._journals.list_for_user(user_id=user_id)

    def weekly_summary(self, *, user_id: int, week_of: date) -> WeeklySummary:
        monday, sunday = week_bounds(week_of)
        by_day = {log.log_date: log for log in self._logs.list_for_user(user_id=user_id, start=monday, end=sunday)}

        days = []
        for day in iter_week(monday):
            log = by_day.get(day)
            days.append(DayBreakdown(day=day, hours=log.hours_worked if log else 0.0, notes=log.notes if log else None))

        return WeeklySummary(
            week_start=monday,
            week_end=sunday,
            days=days,
            journal=self._journals.get_for_week(user_id=user_id, week_start_date=monday),
        )
