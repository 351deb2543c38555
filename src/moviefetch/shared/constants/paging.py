"""
Paging and Queue Constants

Backoff schedule for the paged search loop and worker counts for the two
task queues.
"""

from .system import BASE_SECOND


class PagingConfig:
    """Paged search configuration constants."""

    # Number of movies in each page returned by the service
    PAGE_SIZE = 10

    # Maximum number of pages fetched automatically for one search
    MAX_PAGES = 10

    # Pages up to this number are polled at the high frequency
    HIGH_FREQUENCY_PAGES = 3

    HIGH_FREQUENCY_INTERVAL = 0.5 * BASE_SECOND
    LOW_FREQUENCY_INTERVAL = 3.0 * BASE_SECOND

    FIRST_PAGE = 1


class QueueConfig:
    """Task queue configuration constants."""

    SEARCH_QUEUE_NAME = "search"
    POSTER_QUEUE_NAME = "poster"

    # Searches and details share a strictly serial queue
    SEARCH_CONCURRENCY = 1
    POSTER_CONCURRENCY = 4

    THREAD_NAME_PREFIX = "MovieFetch"
