"""Library settings loaded from ``CRUDLIST_``-prefixed environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LIST_TIMEOUT = 30.0


class Settings(BaseSettings):
    """Defaults applied to list operations that don't override them.

    Examples:
        Give slow backends a minute::

            CRUDLIST_LIST_TIMEOUT=60 uvicorn app:app
    """

    model_config = SettingsConfigDict(env_prefix='CRUDLIST_')

    list_timeout: float = Field(
        default=DEFAULT_LIST_TIMEOUT,
        gt=0,
        description='Upper bound in seconds for the fetch and count of one request.',
    )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings()
