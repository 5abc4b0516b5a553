from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional


@dataclass(frozen=True)
class Event:
    """Domain entity: an event attendance is recorded against."""

    event_id: int
    name: str
    event_date: date
    start_time: time
    end_time: time
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.event_id,
            "name": self.name,
            "description": self.description,
            "date": self.event_date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "location": self.location,
        }
