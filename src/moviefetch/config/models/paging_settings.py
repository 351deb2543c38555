"""Paging and queue configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from moviefetch.shared.constants import PagingConfig, QueueConfig


class PagingSettings(BaseModel):
    """Backoff schedule for the paged search loop."""

    page_size: int = Field(
        default=PagingConfig.PAGE_SIZE,
        gt=0,
        description="Number of results per page returned by the service",
    )
    max_pages: int = Field(
        default=PagingConfig.MAX_PAGES,
        gt=0,
        description="Maximum number of pages fetched for one search",
    )
    high_frequency_pages: int = Field(
        default=PagingConfig.HIGH_FREQUENCY_PAGES,
        ge=0,
        description="Pages up to this number are polled at the high frequency",
    )
    high_frequency_interval: float = Field(
        default=PagingConfig.HIGH_FREQUENCY_INTERVAL,
        ge=0,
        description="Delay in seconds before a high-frequency page",
    )
    low_frequency_interval: float = Field(
        default=PagingConfig.LOW_FREQUENCY_INTERVAL,
        ge=0,
        description="Delay in seconds before a low-frequency page",
    )

    def poll_interval(self, page: int) -> float:
        """Delay to wait before requesting the given page."""
        if page <= self.high_frequency_pages:
            return self.high_frequency_interval
        return self.low_frequency_interval

    def total_backoff(self) -> float:
        """Sum of the delays before every page after the first."""
        first = PagingConfig.FIRST_PAGE
        return sum(self.poll_interval(page) for page in range(first + 1, self.max_pages + 1))


class QueueSettings(BaseModel):
    """Worker counts for the two task queues."""

    search_concurrency: int = Field(
        default=QueueConfig.SEARCH_CONCURRENCY,
        ge=1,
        le=1,
        description="Workers for searches and detail lookups; pages must not overlap",
    )
    poster_concurrency: int = Field(
        default=QueueConfig.POSTER_CONCURRENCY,
        gt=0,
        description="Workers for poster downloads",
    )


__all__ = ["PagingSettings", "QueueSettings"]
