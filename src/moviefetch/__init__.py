"""
MovieFetch - OMDb movie search client

A data-fetching layer that pages through OMDb search results with adaptive
backoff, downloads details and posters on bounded worker queues and keeps
everything it fetched in memory caches.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
