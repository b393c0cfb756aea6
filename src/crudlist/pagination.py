"""Page/page_size parameters and the offset/limit arithmetic built on them."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

MIN_PAGE = 1
MAX_PAGE_SIZE = 100


class Pagination(BaseModel):
    """A validated page request."""

    page: int = Field(ge=MIN_PAGE, description='Page number, starting from 1.')
    page_size: int = Field(ge=1, le=MAX_PAGE_SIZE, description='Number of items per page.')


@runtime_checkable
class Paginated(Protocol):
    """Capability of query types that carry a page request."""

    def get_pagination(self) -> Pagination: ...


class PaginatedQuery(BaseModel):
    """Base for query types that accept ``page`` and ``page_size``.

    Subclasses add their own filter fields; the alias of each field is the
    query-string key that feeds it.
    """

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    page: int = Field(ge=MIN_PAGE, description='Page number, starting from 1.')
    page_size: int = Field(ge=1, le=MAX_PAGE_SIZE, description='Number of items per page.')

    def get_pagination(self) -> Pagination:
        return Pagination(page=self.page, page_size=self.page_size)


def page_window(query: object) -> tuple[int, int]:
    """Return ``(offset, limit)`` for a decoded query.

    Queries without the pagination capability get ``(0, 0)``, which accessors
    read as "no limit".
    """
    if not isinstance(query, Paginated):
        return 0, 0
    pagination = query.get_pagination()
    return (pagination.page - 1) * pagination.page_size, pagination.page_size


def page_echo(offset: int, limit: int) -> tuple[int, int]:
    """Return the ``(page, page_size)`` pair reported back for an offset/limit."""
    if limit == 0:
        return 1, 0
    return offset // limit + 1, limit
