from __future__ import annotations

from typing import Any


class CalendarError(Exception):
    status_code = 400

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(CalendarError):
    status_code = 422


class InvalidTypeError(CalendarError):
    status_code = 400


class NotFoundError(CalendarError):
    # absent and cross-workspace rows look the same to the caller
    status_code = 404


class ForbiddenError(CalendarError):
    status_code = 403


class ConflictError(CalendarError):
    status_code = 423


class UndoExpiredError(CalendarError):
    status_code = 400
