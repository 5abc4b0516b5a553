from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from jinja2 import Environment

from ..core.enums import ScanMode
from ..events.model import Event
from ..students.model import Student

_env = Environment(autoescape=True)

_BODY = _env.from_string(
    """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; border: 1px solid #e0e0e0; border-radius: 5px;">
  <h2 style="color: #0284c7; text-align: center;">{{ heading }}</h2>
  <p>Hello {{ student.name }},</p>
  <p>{{ lead }}</p>
  <div style="background-color: #f0f9ff; padding: 15px; border-radius: 5px; margin: 15px 0;">
    <p><strong>Event:</strong> {{ event.name }}</p>
    <p><strong>Date:</strong> {{ event_date }}</p>
    <p><strong>{{ time_label }}:</strong> {{ time_text }}</p>
    <p><strong>Location:</strong> {{ event.location or "N/A" }}</p>
  </div>
  <p>Thank you for your participation.</p>
  <p style="margin-top: 30px; font-size: 12px; color: #666; text-align: center;">
    This is an automated message. Please do not reply to this email.
  </p>
</div>
"""
)


@dataclass(frozen=True)
class ConfirmationMessage:
    subject: str
    html: str


def build_confirmation(student: Student, event: Event, kind: ScanMode, at: datetime) -> ConfirmationMessage:
    if kind == ScanMode.IN:
        subject = f"Attendance Confirmation: {event.name}"
        heading, lead, time_label = (
            "Attendance Confirmation",
            "Your attendance has been recorded for the following event:",
            "Time In",
        )
    else:
        subject = f"Check-Out Confirmation: {event.name}"
        heading, lead, time_label = (
            "Check-Out Confirmation",
            "You have successfully checked out from the following event:",
            "Time Out",
        )

    html = _BODY.render(
        heading=heading,
        lead=lead,
        student=student,
        event=event,
        event_date=event.event_date.strftime("%A, %B %d, %Y"),
        time_label=time_label,
        time_text=at.strftime("%I:%M %p"),
    )
    return ConfirmationMessage(subject=subject, html=html)
