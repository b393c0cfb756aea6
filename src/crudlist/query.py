"""Decoding of query strings into caller-defined query models."""

from __future__ import annotations

import logging
import typing
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic.fields import FieldInfo
from starlette.datastructures import ImmutableMultiDict

logger = logging.getLogger(__name__)

Q = TypeVar('Q', bound=BaseModel)

# Collection annotations whose field collects every occurrence of its key.
_MULTI_VALUE_ORIGINS = (list, tuple, set, frozenset)


class QueryError(Exception):
    """Raised when a query string can't be turned into a query model."""

    def __init__(self, query_type: type[BaseModel], error: ValidationError) -> None:
        self.query_type = query_type
        self.error = error
        super().__init__(f'{query_type.__name__}: {error.error_count()} invalid field(s)')

    def errors(self) -> list[dict[str, Any]]:
        return self.error.errors(include_url=False, include_context=False)


class QueryDecodeError(QueryError):
    """A value couldn't be coerced to its field's type."""


class QueryValidationError(QueryError):
    """Values decoded but broke a declared constraint."""


def query_key(name: str, field: FieldInfo) -> str:
    """Return the query-string key that feeds a model field."""
    if isinstance(field.validation_alias, str):
        return field.validation_alias
    return field.alias or name


def _is_multi_value(annotation: Any) -> bool:
    for candidate in (annotation, *typing.get_args(annotation)):
        origin = typing.get_origin(candidate) or candidate
        if isinstance(origin, type) and issubclass(origin, _MULTI_VALUE_ORIGINS):
            return True
    return False


def extract_params(
    query_type: type[BaseModel], params: ImmutableMultiDict | Mapping[str, str]
) -> dict[str, Any]:
    """Pick the values of each declared field out of a multi-value mapping.

    Scalar fields take the first occurrence of their key, collection fields
    every occurrence. Keys no field declares are dropped.
    """
    if not isinstance(params, ImmutableMultiDict):
        params = ImmutableMultiDict(params)

    raw: dict[str, Any] = {}
    for name, field in query_type.model_fields.items():
        key = query_key(name, field)
        values = params.getlist(key)
        if not values:
            continue
        raw[key] = values if _is_multi_value(field.annotation) else values[0]
    return raw


def _is_decode_failure(error: Mapping[str, Any]) -> bool:
    kind = error['type']
    return kind.endswith('_parsing') or kind.endswith('_type')


def parse_query(query_type: type[Q], params: ImmutableMultiDict | Mapping[str, str]) -> Q:
    """Decode and validate ``params`` into a fresh ``query_type`` instance.

    Raises:
        QueryDecodeError: a value has the wrong shape for its field.
        QueryValidationError: a required field is missing or a constraint failed.
    """
    raw = extract_params(query_type, params)
    try:
        return query_type.model_validate(raw)
    except ValidationError as exc:
        if any(_is_decode_failure(error) for error in exc.errors()):
            raise QueryDecodeError(query_type, exc) from exc
        raise QueryValidationError(query_type, exc) from exc
