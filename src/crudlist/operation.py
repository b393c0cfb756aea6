"""Generic list endpoint: decode, validate, paginate, fetch, count, respond."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import Response

from crudlist.accessor import DataAccessor, ListContext, SyncDataAccessor
from crudlist.config import get_settings
from crudlist.errors import BadRequestError, InternalError
from crudlist.pagination import page_echo, page_window
from crudlist.query import QueryDecodeError, QueryValidationError, parse_query
from crudlist.response import ListResult, PageInfo, ResponseEmitter

logger = logging.getLogger(__name__)

T = TypeVar('T')
Q = TypeVar('Q', bound=BaseModel)


class ListOperation(Generic[T, Q]):
    """Serve paginated, filtered listings of ``T`` selected by a ``Q`` query.

    The operation holds no per-request state and can be shared by any number
    of concurrent requests. Register :meth:`handle` as a GET endpoint on any
    FastAPI router or Starlette route::

        widgets = ListOperation(WidgetQuery, WidgetAccessor(), JSONResponseEmitter())
        router.add_api_route('/widgets', widgets.handle, methods=['GET'])

    The response body is::

        {"items": [...], "pagination": {"total": n, "page": x, "page_size": y}}
    """

    def __init__(
        self,
        query_type: type[Q],
        accessor: DataAccessor[T, Q] | SyncDataAccessor[T, Q],
        emitter: ResponseEmitter,
        *,
        timeout: float | None = None,
    ) -> None:
        if not (isinstance(query_type, type) and issubclass(query_type, BaseModel)):
            msg = f'query_type must be a pydantic model class, got {query_type!r}'
            raise TypeError(msg)
        if accessor is None:
            msg = 'accessor is required'
            raise TypeError(msg)
        for method in ('list', 'count'):
            if not callable(getattr(accessor, method, None)):
                msg = f'accessor {type(accessor).__name__} has no {method}() method'
                raise TypeError(msg)
        if emitter is None:
            msg = 'emitter is required'
            raise TypeError(msg)

        if timeout is None:
            timeout = get_settings().list_timeout
        if timeout <= 0:
            msg = f'timeout must be positive, got {timeout}'
            raise ValueError(msg)

        self.query_type = query_type
        self.accessor = accessor
        self.emitter = emitter
        self.timeout = timeout

    async def handle(self, request: Request) -> Response:
        started = time.perf_counter()
        logger.debug(
            'list.start method=%s path=%s remote_addr=%s',
            request.method,
            request.url.path,
            request.client.host if request.client else None,
        )
        ctx = ListContext.start(request, self.timeout)
        params = request.query_params

        try:
            query = parse_query(self.query_type, params)
        except QueryDecodeError as exc:
            logger.error('unable to decode query params: %s', exc)
            logger.debug('query params: %s errors: %s', params, exc.errors())
            return self.emitter.error(BadRequestError(), BadRequestError.status_code)
        except QueryValidationError as exc:
            logger.error('unable to validate query params: %s', exc)
            logger.debug('query params: %s errors: %s', params, exc.errors())
            return self.emitter.error(BadRequestError(), BadRequestError.status_code)

        try:
            offset, limit = page_window(query)
        except ValidationError as exc:
            logger.error('unable to validate pagination: %s', exc)
            logger.debug('query params: %s', params)
            return self.emitter.error(BadRequestError(), BadRequestError.status_code)

        try:
            items = await self._call(ctx, self.accessor.list, ctx, query, offset, limit)
        except Exception as exc:
            logger.error('unable to list items: %r', exc)
            logger.debug('listing query=%r offset=%s limit=%s', query, offset, limit)
            return self.emitter.error(InternalError(), InternalError.status_code)

        try:
            total = await self._call(ctx, self.accessor.count, ctx, query)
        except Exception as exc:
            logger.error('unable to count items: %r', exc)
            logger.debug('counting query=%r', query)
            return self.emitter.error(InternalError(), InternalError.status_code)

        page, page_size = page_echo(offset, limit)
        try:
            result = ListResult[Any](
                items=list(items),
                pagination=PageInfo(total=total, page=page, page_size=page_size),
            )
        except (TypeError, ValueError) as exc:
            logger.error('accessor returned malformed results: %s', exc)
            logger.debug('items=%r total=%r', items, total)
            return self.emitter.error(InternalError(), InternalError.status_code)

        try:
            response = self.emitter.respond(result, 200)
        except Exception as exc:
            # Emission failed; report the status without a second error body.
            logger.error('unable to write response: %s', exc)
            logger.debug('writing response: %r', result)
            response = self.emitter.respond(None, InternalError.status_code)

        logger.debug('list.complete duration=%.3fs', time.perf_counter() - started)
        return response

    async def _call(self, ctx: ListContext, fn: Callable[..., Any], *args: Any) -> Any:
        """Run an accessor method under the request deadline."""
        async with asyncio.timeout(ctx.remaining()):
            if inspect.iscoroutinefunction(fn):
                return await fn(*args)
            result = await run_in_threadpool(fn, *args)
            if inspect.isawaitable(result):
                return await result
            return result
