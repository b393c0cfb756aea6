from __future__ import annotations

import asyncio
import time
from collections.abc import Generator, Sequence
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, ConfigDict, Field
from starlette.requests import Request

from crudlist.accessor import ListContext
from crudlist.config import get_settings
from crudlist.operation import ListOperation
from crudlist.pagination import PaginatedQuery
from crudlist.response import JSONResponseEmitter

# ── Query types ───────────────────────────────────────────────────────────────


class WidgetQuery(PaginatedQuery):
    name: str | None = None
    tags: list[str] = Field(default_factory=list, alias='tag')


class UnpagedQuery(BaseModel):
    model_config = ConfigDict(extra='ignore')

    name: str | None = None


# ── Accessors ─────────────────────────────────────────────────────────────────


class FakeAccessor:
    """Async accessor that records its calls and returns canned results."""

    def __init__(
        self,
        items: Sequence[Any] = (),
        total: int = 0,
        *,
        list_error: Exception | None = None,
        count_error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.items = items
        self.total = total
        self.list_error = list_error
        self.count_error = count_error
        self.delay = delay
        self.list_calls: list[tuple[Any, int, int]] = []
        self.count_calls: list[Any] = []
        self.contexts: list[ListContext] = []

    async def list(self, ctx: ListContext, query: Any, offset: int, limit: int) -> Sequence[Any]:
        self.contexts.append(ctx)
        self.list_calls.append((query, offset, limit))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.list_error:
            raise self.list_error
        return self.items

    async def count(self, ctx: ListContext, query: Any) -> int:
        self.count_calls.append(query)
        if self.count_error:
            raise self.count_error
        return self.total


class SyncFakeAccessor(FakeAccessor):
    """Blocking flavour of :class:`FakeAccessor`."""

    def list(self, ctx: ListContext, query: Any, offset: int, limit: int) -> Sequence[Any]:  # type: ignore[override]
        self.contexts.append(ctx)
        self.list_calls.append((query, offset, limit))
        if self.list_error:
            raise self.list_error
        return self.items

    def count(self, ctx: ListContext, query: Any) -> int:  # type: ignore[override]
        self.count_calls.append(query)
        if self.count_error:
            raise self.count_error
        return self.total


# ── Fixtures ──────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def emitter() -> JSONResponseEmitter:
    return JSONResponseEmitter()


@pytest.fixture
def accessor() -> FakeAccessor:
    return FakeAccessor(items=['item1'], total=1)


# ── Factory functions ─────────────────────────────────────────────────────────


def make_client(operation: ListOperation[Any, Any], path: str = '/widgets') -> TestClient:
    app = FastAPI()
    app.add_api_route(path, operation.handle, methods=['GET'])
    return TestClient(app)


def make_context(timeout: float = 30.0, path: str = '/') -> ListContext:
    request = Request(
        {'type': 'http', 'method': 'GET', 'path': path, 'query_string': b'', 'headers': []}
    )
    return ListContext(request=request, deadline=time.monotonic() + timeout)
