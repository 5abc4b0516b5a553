from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


@dataclass(frozen=True)
class DailyLog:
    """One trainee's hours for one day. At most one per (user_id, log_date)."""

    log_id: int
    user_id: int
    log_date: date
    hours_worked: float
    notes: Optional[str] = None
    audio_url: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.log_id,
            "date": self.log_date.isoformat(),
            "hours_worked": self.hours_worked,
            "notes": self.notes,
            "audio_url": self.audio_url,
        }


@dataclass(frozen=True)
class WeeklyJournal:
    journal_id: int
    user_id: int
    week_start_date: date
    journal_text: str
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.journal_id,
            "week_start_date": self.week_start_date.isoformat(),
            "journal_text": self.journal_text,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class OjtProgress:
    total_hours: float
    required_hours: float

    @property
    def remaining_hours(self) -> float:
        return max(self.required_hours - self.total_hours, 0.0)

    @property
    def percent(self) -> float:
        if self.required_hours <= 0:
            return 100.0
        return round(min(self.total_hours / self.required_hours * 100, 100.0), 1)

    def to_dict(self) -> dict:
        return {
            "total_hours": self.total_hours,
            "required_hours": self.required_hours,
            "remaining_hours": self.remaining_hours,
            "percent": self.percent,
        }


@dataclass(frozen=True)
class DayBreakdown:
    day: date
    hours: float
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "day_name": self.day.strftime("%A"),
            "hours": self.hours,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class WeeklySummary:
    week_start: date
    week_end: date
    days: List[DayBreakdown] = field(default_factory=list)
    journal: Optional[WeeklyJournal] = None

    @property
    def total_hours(self) -> float:
        return round(sum(d.hours for d in self.days), 2)

    def to_dict(self) -> dict:
        return {
            "week_start": self.week_start.isoformat(),
            "week_end": self.week_end.isoformat(),
            "weekly_hours": self.total_hours,
            "days": [d.to_dict() for d in self.days],
            "journal": self.journal.to_dict() if self.journal else None,
        }
