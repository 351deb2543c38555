"""
Cache Configuration Constants
"""


class CacheConfig:
    """Cache size limits."""

    # Posters are large; keep a bounded number of them
    POSTER_CACHE_LIMIT = 400

    # None means unbounded
    DETAIL_CACHE_LIMIT = None
