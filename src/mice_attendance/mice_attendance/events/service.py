from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Event
from .repository import EventRepository

logger = logging.getLogger(__name__)


class EventService:
    """Use case: schedule and look up events (admin + scanner event picker)."""

    def __init__(self, events: EventRepository):
        self._events = events

    def list_events(self) -> Sequence[Event]:
        return self._events.list_all()

    def get_event(self, event_id: int) -> Event:
        event = self._events.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("Event not found.")
        return event

    def create_event(
        self,
        *,
        name: str,
        event_date: date,
        start_time: time,
        end_time: time,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Event:
        name = require_non_empty(name, "Event name")
        if event_date is None or start_time is None or end_time is None:
            raise ValidationError("Event date, start time and end time are required")
        if end_time <= start_time:
            raise ValidationError("End time must be after start time")

        event_id = self._events.create(
            name=name,
            event_date=event_date,
            start_time=start_time,
            end_time=end_time,
            description=(description or "").strip() or None,
            location=(location or "").strip() or None,
        )
        logger.info("Created event %s (%s on %s)", event_id, name, event_date)
        return self.get_event(event_id)

    def delete_event(self, event_id: int) -> None:
        if not self._events.delete_by_id(int(event_id)):
            raise NotFoundError("Event not found.")
        logger.info("Deleted event %s", event_id)
