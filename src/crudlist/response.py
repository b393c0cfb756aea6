"""Response payloads and the emitters that serialize them."""

from __future__ import annotations

import logging
from typing import Any, Generic, Protocol, TypeVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, Field

from crudlist.errors import CrudError, InternalError

logger = logging.getLogger(__name__)

T = TypeVar('T')

# ── Payloads ──────────────────────────────────────────────────────────────────


class PageInfo(BaseModel):
    """Pagination block echoed back with every list result."""

    total: int = Field(description='Number of items matching the query, ignoring pagination.')
    page: int = Field(description='Page number the items belong to.')
    page_size: int = Field(description='Page size used; 0 when the query is unpaginated.')


class ListResult(BaseModel, Generic[T]):
    """Success payload of a list operation."""

    items: list[T]
    pagination: PageInfo


class ErrorResponse(BaseModel):
    """Failure payload: HTTP status, a human-readable message, and optional details."""

    status: int
    message: str
    details: Any = None


# ── Emitters ──────────────────────────────────────────────────────────────────


class ResponseEmitter(Protocol):
    def respond(self, payload: Any, status_code: int) -> Response:
        """Serialize ``payload`` with ``status_code``; ``None`` gives a status-only response.

        Raises:
            TypeError, ValueError: ``payload`` can't be serialized.
        """
        ...

    def error(self, err: Exception, status_code: int) -> Response:
        """Wrap ``err`` in an :class:`ErrorResponse`. Must not raise."""
        ...


class JSONResponseEmitter:
    """Emit payloads as JSON using FastAPI's encoder."""

    media_type = 'application/json'

    def respond(self, payload: Any, status_code: int) -> Response:
        if payload is None:
            return Response(status_code=status_code, media_type=self.media_type)
        return JSONResponse(jsonable_encoder(payload), status_code=status_code)

    def error(self, err: Exception, status_code: int) -> Response:
        body = ErrorResponse(
            status=status_code,
            message=str(err),
            details=err.details if isinstance(err, CrudError) else None,
        )
        try:
            return self.respond(body, status_code)
        except (TypeError, ValueError) as exc:
            logger.error('unable to write error response (status=%s): %s', status_code, exc)
            return PlainTextResponse(InternalError.default_message, status_code=500)
