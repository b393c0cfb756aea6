"""Contracts for the data sources a list operation reads from."""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

from starlette.requests import Request

T = TypeVar('T', covariant=True)
Q = TypeVar('Q', contravariant=True)


@dataclass(frozen=True)
class ListContext:
    """Per-request state handed to accessors.

    ``deadline`` is an absolute :func:`time.monotonic` timestamp. Async
    accessors are cancelled when it passes; blocking accessors running in the
    threadpool have to check it themselves.
    """

    request: Request
    deadline: float

    @classmethod
    def start(cls, request: Request, timeout: float) -> ListContext:
        return cls(request=request, deadline=time.monotonic() + timeout)

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative."""
        return max(0.0, self.deadline - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() == 0.0

    def check(self) -> None:
        """Raise :class:`TimeoutError` once the deadline has passed."""
        if self.expired:
            msg = 'list deadline exceeded'
            raise TimeoutError(msg)


class DataAccessor(Protocol[T, Q]):
    """Async source of list items.

    ``list`` returns at most ``limit`` items matching ``query`` after skipping
    ``offset`` of them; ``limit == 0`` means no limit. Repeated calls with the
    same arguments should return items in the same order. ``count`` returns
    the number of items matching ``query`` regardless of offset and limit.
    """

    async def list(self, ctx: ListContext, query: Q, offset: int, limit: int) -> Sequence[T]: ...

    async def count(self, ctx: ListContext, query: Q) -> int: ...


class SyncDataAccessor(Protocol[T, Q]):
    """Blocking variant of :class:`DataAccessor`, run in the threadpool."""

    def list(self, ctx: ListContext, query: Q, offset: int, limit: int) -> Sequence[T]: ...

    def count(self, ctx: ListContext, query: Q) -> int: ...
