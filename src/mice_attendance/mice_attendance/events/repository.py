from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from .model import Event


class EventRepository(Protocol):
    def get_by_id(self, event_id: int) -> Optional[Event]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Event]:
        """Most recent event date first."""

        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        event_date: date,
        start_time: time,
        end_time: time,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def delete_by_id(self, event_id: int) -> bool:
        raise NotImplementedError
