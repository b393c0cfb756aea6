"""Error vocabulary shared by list handlers and response emitters."""

from __future__ import annotations

import copy
from enum import StrEnum
from typing import Any, ClassVar


class ErrorKind(StrEnum):
    not_found = 'not_found'
    conflict = 'conflict'
    bad_request = 'bad_request'
    internal = 'internal'


class CrudError(Exception):
    """An error with a client-facing message, an HTTP status, and optional details.

    Emitters copy ``details`` into the ``details`` field of the error envelope.
    """

    kind: ClassVar[ErrorKind]
    status_code: ClassVar[int]
    default_message: ClassVar[str]

    def __init__(self, message: str | None = None, *, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def with_details(self, details: Any) -> CrudError:
        """Return a copy of this error carrying ``details``."""
        clone = copy.copy(self)
        clone.details = details
        return clone

    def __str__(self) -> str:
        return self.message


class NotFoundError(CrudError):
    kind = ErrorKind.not_found
    status_code = 404
    default_message = 'not found'


class ConflictError(CrudError):
    kind = ErrorKind.conflict
    status_code = 409
    default_message = 'conflict'


class BadRequestError(CrudError):
    kind = ErrorKind.bad_request
    status_code = 400
    default_message = 'bad request'


class InternalError(CrudError):
    kind = ErrorKind.internal
    status_code = 500
    default_message = 'internal server error'
