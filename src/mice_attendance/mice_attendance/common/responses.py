from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import (
    AmbiguousIdentityError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    IntegrityViolation,
    NotFoundError,
    PersistenceFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Order matters: subclasses before their bases.
_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (IntegrityViolation, 409),
    (PersistenceFailure, 503),
    (AmbiguousIdentityError, 500),
)


def status_for(error: DomainError) -> int:
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(error, kind):
            return status
    return 500


def error_response(error: DomainError, *, message: str | None = None):
    """Render a domain error as the JSON body the scanner and admin UI expect."""

    status = status_for(error)
    body = {
        "success": False,
        "error": message or str(error),
        "kind": type(error).__name__,
        "retryable": isinstance(error, PersistenceFailure) and not isinstance(error, IntegrityViolation),
    }
    if message:
        body["details"] = str(error)
    if status >= 500:
        logger.error("%s: %s", type(error).__name__, error)
    return jsonify(body), status
