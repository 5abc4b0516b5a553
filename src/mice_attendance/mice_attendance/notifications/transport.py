from __future__ import annotations

import logging
import smtplib
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Protocol

from flask import Flask
from flask_mail import Mail, Message

from ..core.constants import DEFAULT_MAIL_TIMEOUT_SECONDS
from ..core.exceptions import NotificationFailure

logger = logging.getLogger(__name__)


class MailTransport(Protocol):
    def send(self, recipient: str, subject: str, html_body: str) -> None:
        """Deliver one message or raise ``NotificationFailure``."""

        raise NotImplementedError

    def verify(self) -> None:
        """Open (and close) a connection to the mail server or raise ``NotificationFailure``."""

        raise NotImplementedError


class FlaskMailTransport(MailTransport):
    """SMTP delivery through Flask-Mail with a bounded wait.

    Flask-Mail has no socket timeout of its own, so each send runs on a small
    worker pool and the caller stops waiting after ``timeout`` seconds.
    """

    def __init__(self, app: Flask, mail: Mail, *, sender, timeout: float = DEFAULT_MAIL_TIMEOUT_SECONDS):
        self._app = app
        self._mail = mail
        self._sender = sender
        self._timeout = float(timeout)
        self._pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="mail")

    def _run(self, fn, *args):
        future = self._pool.submit(fn, *args)
        try:
            return future.result(timeout=self._timeout)
        except FutureTimeout:
            # Only a message still queued can be withdrawn; one already talking to SMTP finishes.
            future.cancel()
            raise NotificationFailure(f"Mail server did not answer within {self._timeout:g}s") from None
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationFailure(f"Mail delivery failed: {exc}") from exc

    def _deliver(self, recipient: str, subject: str, html_body: str) -> None:
        with self._app.app_context():
            msg = Message(subject=subject, recipients=[recipient], html=html_body, sender=self._sender)
            self._mail.send(msg)

    def _connect_only(self) -> None:
        with self._app.app_context():
            with self._mail.connect():
                pass

    def close(self, *, wait: bool = False) -> None:
        """Stop the worker pool and drop sends that have not started."""

        self._pool.shutdown(wait=wait, cancel_futures=True)

    def send(self, recipient: str, subject: str, html_body: str) -> None:
        self._run(self._deliver, recipient, subject, html_body)
        logger.info("Mail sent to %s: %s", recipient, subject)

    def verify(self) -> None:
        self._run(self._connect_only)
