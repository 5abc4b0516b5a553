from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for access control."""

    ADMIN = "admin"
    SECRETARY = "secretary"


class ScanMode(str, Enum):
    """Which half of an attendance record a scan writes."""

    IN = "in"
    OUT = "out"


class NotificationOutcome(str, Enum):
    SENT = "SENT"
    FAILED = "FAILED"
