"""Cache configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field

from moviefetch.shared.constants import CacheConfig


class CacheSettings(BaseModel):
    """In-memory cache size limits.

    A limit of None leaves the cache unbounded.
    """

    poster_limit: int | None = Field(
        default=CacheConfig.POSTER_CACHE_LIMIT,
        gt=0,
        description="Maximum number of cached posters",
    )
    detail_limit: int | None = Field(
        default=CacheConfig.DETAIL_CACHE_LIMIT,
        gt=0,
        description="Maximum number of cached detail records",
    )


__all__ = ["CacheSettings"]
