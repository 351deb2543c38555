"""In-memory caches for fetched items.

Two primitives are provided:

- BoundedKeyCache: maps a string key to a serialized item with an optional
  maximum item count, evicting the least recently used entry first.
- IndexedAppendCache: an append-only ordered store with O(1) access by
  position, used to accumulate search result pages.

Items are stored as JSON bytes produced by a pydantic TypeAdapter, so a
fetched item is always a fresh copy and stored entries are never aliased.
All read-modify-write sequences are guarded by a lock.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Iterable
from typing import Any, Callable, Generic, TypeVar

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from moviefetch.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    create_cache_serialization_error,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BoundedKeyCache(Generic[T]):
    """Key-value cache with an optional item count limit.

    Args:
        item_type: Type of the cached items (any type pydantic can serialize)
        limit: Maximum number of entries, None for unbounded
    """

    def __init__(self, item_type: Any, limit: int | None = None) -> None:
        if limit is not None and limit <= 0:
            raise ApplicationError(
                code=ErrorCode.VALIDATION_ERROR,
                message=f"Cache limit must be positive or None, got: {limit}",
                context=ErrorContext(
                    operation="cache_init",
                    additional_data={"limit": limit},
                ),
            )

        self.limit = limit
        self._adapter: TypeAdapter[T] = TypeAdapter(item_type)
        self._entries: OrderedDict[str, bytes] = OrderedDict()
        self._lock = threading.Lock()

    def store(self, key: str, item: T) -> None:
        """Store an item under ``key``, replacing any existing entry.

        Raises:
            DomainError: If the item cannot be serialized
        """
        data = self._serialize(key, item)

        with self._lock:
            self._entries[key] = data
            self._entries.move_to_end(key)
            evicted = self._evict()

        if evicted:
            logger.debug("Evicted %d cache entr(ies) to respect limit %s", evicted, self.limit)

    def fetch(self, key: str) -> T | None:
        """Return the item stored under ``key``, or None.

        Raises:
            DomainError: If the stored entry cannot be decoded
        """
        with self._lock:
            data = self._entries.get(key)
            if data is None:
                return None
            self._entries.move_to_end(key)

        return self._deserialize(key, data)

    def clear_all(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.count

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def _evict(self) -> int:
        # Caller holds the lock
        if self.limit is None:
            return 0
        evicted = 0
        while len(self._entries) > self.limit:
            self._entries.popitem(last=False)
            evicted += 1
        return evicted

    def _serialize(self, key: str, item: T) -> bytes:
        try:
            return self._adapter.dump_json(item)
        except (PydanticSerializationError, ValueError, TypeError) as e:
            raise create_cache_serialization_error(
                f"Could not serialize cache item: {e}",
                key=key,
                operation="cache_store",
                original_error=e,
            ) from e

    def _deserialize(self, key: str, data: bytes) -> T:
        try:
            return self._adapter.validate_json(data)
        except ValueError as e:
            raise create_cache_serialization_error(
                f"Could not decode cache entry: {e}",
                key=key,
                operation="cache_fetch",
                original_error=e,
            ) from e


class IndexedAppendCache(Generic[T]):
    """Append-only ordered cache with random access by position.

    ``count`` only grows, except on ``clear_all()`` which resets it to zero.
    Positions ``[0, count)`` are valid as soon as ``load()`` returns.

    Args:
        item_type: Type of the cached items
    """

    def __init__(self, item_type: Any) -> None:
        self._store: BoundedKeyCache[T] = BoundedKeyCache(item_type)
        self._count = 0
        self._lock = threading.Lock()

    def load(self, items: Iterable[T], completion: Callable[[], None] | None = None) -> int:
        """Append items in order.

        Args:
            items: Items to append
            completion: Called after the items are visible

        Returns:
            The new count
        """
        items = list(items)
        with self._lock:
            for offset, item in enumerate(items):
                self._store.store(str(self._count + offset), item)
            self._count += len(items)
            count = self._count

        if completion is not None:
            completion()
        return count

    def fetch(self, index: int) -> T | None:
        """Return the item at ``index``, or None if out of range."""
        with self._lock:
            if not 0 <= index < self._count:
                return None
            return self._store.fetch(str(index))

    def __getitem__(self, index: int) -> T | None:
        return self.fetch(index)

    def clear_all(self) -> None:
        """Remove every item and reset the count to zero."""
        with self._lock:
            self._count = 0
            self._store.clear_all()

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def __len__(self) -> int:
        return self.count
