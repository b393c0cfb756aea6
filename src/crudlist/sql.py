"""Data accessor over a SQLModel table. Returns SQLModel objects — emitters handle serialization."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, func, inspect
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, select

from crudlist.accessor import ListContext

logger = logging.getLogger(__name__)

M = TypeVar('M', bound=SQLModel)
Q = TypeVar('Q')

Filters = Callable[[Q], Iterable[ColumnElement[bool]]]


class SQLModelAccessor(Generic[M, Q]):
    """List and count rows of ``model`` matching the WHERE clauses built from a query.

    ``filters`` turns a decoded query into WHERE clauses; both ``list`` and
    ``count`` apply the same clauses so totals agree with the listed window.
    Rows are ordered by ``order_by``, or by the primary key when not given,
    so repeated pages never overlap.
    """

    def __init__(
        self,
        engine: Engine,
        model: type[M],
        *,
        filters: Filters[Q] | None = None,
        order_by: Iterable[Any] | None = None,
    ) -> None:
        self.engine = engine
        self.model = model
        self.filters = filters
        self.order_by = list(order_by) if order_by is not None else list(inspect(model).primary_key)

    def _where(self, query: Q) -> list[ColumnElement[bool]]:
        if self.filters is None:
            return []
        return list(self.filters(query))

    def list(self, ctx: ListContext, query: Q, offset: int, limit: int) -> list[M]:
        """Return one window of matching rows; ``limit == 0`` returns every row after ``offset``."""
        ctx.check()
        stmt = select(self.model).where(*self._where(query)).order_by(*self.order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit:
            stmt = stmt.limit(limit)
        logger.debug('listing %s offset=%s limit=%s', self.model.__name__, offset, limit)
        with Session(self.engine) as session:
            return list(session.exec(stmt).all())

    def count(self, ctx: ListContext, query: Q) -> int:
        """Return the number of rows matching the query's filters."""
        ctx.check()
        stmt = select(func.count()).select_from(self.model).where(*self._where(query))
        with Session(self.engine) as session:
            return session.exec(stmt).one()
