"""
Centralized error handling for chat/API failures.
Domain exceptions carry their HTTP status so routes stay thin; error_to_http turns any
exception into the HTTPException the API answers with.
"""
from __future__ import annotations

from fastapi import HTTPException

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_NOT_FOUND = 404
STATUS_INTERNAL_ERROR = 500

MSG_CONTENT_REQUIRED = "Message content is required"
MSG_TITLE_REQUIRED = "Session title is required"
MSG_SESSION_NOT_FOUND = "Chat session not found"


# ---------------------------------------------------------------------------
# Exception taxonomy
# ---------------------------------------------------------------------------

class GameFinderError(Exception):
    """Base class for errors the API knows how to report."""

    status_code = STATUS_INTERNAL_ERROR


class ValidationError(GameFinderError):
    """Bad input shape (missing content, empty title, ...)."""

    status_code = STATUS_BAD_REQUEST


class NotFoundError(GameFinderError):
    """Unknown session (or other entity) id."""

    status_code = STATUS_NOT_FOUND


class AIRequestError(GameFinderError):
    """The model call failed, returned nothing, or returned an unusable payload."""


class StoreError(GameFinderError):
    """A store write could not be completed."""


def error_to_http(exc: Exception, fallback_detail: str | None = None) -> HTTPException:
    """
    Map an exception from the chat service into an HTTPException.
    Known GameFinderErrors keep their status and message; anything else becomes a 500 with
    fallback_detail (or the exception message when no fallback is given).
    """
    if isinstance(exc, GameFinderError):
        return HTTPException(status_code=exc.status_code, detail=str(exc))
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=fallback_detail or str(exc))
