from __future__ import annotations

from crudlist.accessor import DataAccessor, ListContext, SyncDataAccessor
from crudlist.config import Settings, get_settings
from crudlist.errors import (
    BadRequestError,
    ConflictError,
    CrudError,
    ErrorKind,
    InternalError,
    NotFoundError,
)
from crudlist.operation import ListOperation
from crudlist.pagination import MAX_PAGE_SIZE, Paginated, PaginatedQuery, Pagination
from crudlist.query import QueryDecodeError, QueryError, QueryValidationError, parse_query
from crudlist.response import (
    ErrorResponse,
    JSONResponseEmitter,
    ListResult,
    PageInfo,
    ResponseEmitter,
)

__all__ = [
    # Pipeline
    'ListOperation',
    'ListContext',
    'DataAccessor',
    'SyncDataAccessor',
    # Queries
    'MAX_PAGE_SIZE',
    'Paginated',
    'PaginatedQuery',
    'Pagination',
    'parse_query',
    'QueryDecodeError',
    'QueryError',
    'QueryValidationError',
    # Responses
    'ErrorResponse',
    'JSONResponseEmitter',
    'ListResult',
    'PageInfo',
    'ResponseEmitter',
    # Errors
    'BadRequestError',
    'ConflictError',
    'CrudError',
    'ErrorKind',
    'InternalError',
    'NotFoundError',
    # Settings
    'Settings',
    'get_settings',
]
