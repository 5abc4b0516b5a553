from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DailyLog, WeeklyJournal


class DailyLogRepository(Protocol):
    def get_by_id(self, log_id: int) -> Optional[DailyLog]:
        raise NotImplementedError

    def get_for_user_and_date(self, *, user_id: int, log_date: date) -> Optional[DailyLog]:
        raise NotImplementedError

    def list_for_user(self, *, user_id: int, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[DailyLog]:
        """Newest first; ``start``/``end`` are inclusive bounds when given."""

        raise NotImplementedError

    def total_hours(self, *, user_id: int, exclude_log_id: Optional[int] = None) -> float:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        log_date: date,
        hours_worked: float,
        notes: Optional[str],
        audio_url: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, log_id: int, *, log_date: date, hours_worked: float, notes: Optional[str]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, log_id: int) -> bool:
        raise NotImplementedError


class JournalRepository(Protocol):
    def get_for_week(self, *, user_id: int, week_start_date: date) -> Optional[WeeklyJournal]:
        raise NotImplementedError

    def upsert(self, *, user_id: int, week_start_date: date, journal_text: str) -> WeeklyJournal:
        """Insert or replace the journal for (user_id, week_start_date) in one statement."""

        raise NotImplementedError

    def list_for_user(self, *, user_id: int) -> Sequence[WeeklyJournal]:
        raise NotImplementedError
