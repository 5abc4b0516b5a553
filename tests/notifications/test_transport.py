from __future__ import annotations

import smtplib
import threading

import pytest
from flask import Flask

from src.mice_attendance.mice_attendance.core.exceptions import NotificationFailure
from src.mice_attendance.mice_attendance.notifications.transport import FlaskMailTransport


class StuckMail:
    """Flask-Mail stand-in whose SMTP conversation hangs until released."""

    def __init__(self):
        self.release = threading.Event()
        self.delivered = []
        self._lock = threading.Lock()

    def send(self, msg):
        self.release.wait(5)
        with self._lock:
            self.delivered.append(msg.recipients[0])


class RefusingMail:
    def send(self, msg):
        raise smtplib.SMTPRecipientsRefused({msg.recipients[0]: (550, b"no such user")})


def _transport(mail, timeout=0.05):
    return FlaskMailTransport(Flask(__name__), mail, sender="noreply@example.com", timeout=timeout)


def test_timed_out_sends_still_queued_are_dropped():
    mail = StuckMail()
    transport = _transport(mail)

    for n in range(3):
        with pytest.raises(NotificationFailure, match="did not answer"):
            transport.send(f"guest{n}@example.com", "Attendance confirmed", "<p>hi</p>")

    mail.release.set()
    transport.close(wait=True)

    # two workers were busy; the third message never left the queue
    assert sorted(mail.delivered) == ["guest0@example.com", "guest1@example.com"]


def test_close_drops_pending_work():
    mail = StuckMail()
    transport = _transport(mail)

    with pytest.raises(NotificationFailure):
        transport.send("guest@example.com", "Attendance confirmed", "<p>hi</p>")
    transport.close()
    mail.release.set()

    with pytest.raises(RuntimeError):
        transport.send("late@example.com", "Attendance confirmed", "<p>hi</p>")


def test_smtp_error_becomes_notification_failure():
    transport = _transport(RefusingMail(), timeout=2)

    with pytest.raises(NotificationFailure, match="Mail delivery failed"):
        transport.send("nobody@example.com", "Attendance confirmed", "<p>hi</p>")

    transport.close(wait=True)
