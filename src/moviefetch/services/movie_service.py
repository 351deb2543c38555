"""OMDb fetch service.

MovieService owns the two task queues and implements the paged search loop:
page 1 is requested immediately, each following page is scheduled after a
backoff delay once the previous page has been delivered. Starting a new
search invalidates everything belonging to the previous one through a
generation number.
"""

from __future__ import annotations

import logging
import threading
import time
from functools import partial
from typing import Protocol, TypeVar

import requests

from moviefetch.config import Settings, get_config
from moviefetch.services.endpoint import GetDetail, GetPoster, TitleSearch, build_url
from moviefetch.services.operation import (
    Completion,
    Decoder,
    NetworkOperation,
    NetworkOutcome,
    create_session,
    json_decoder,
)
from moviefetch.services.scheduler import ScheduledCall, Scheduler, ThreadingScheduler
from moviefetch.services.task_queue import TaskQueue
from moviefetch.shared.constants import PagingConfig, QueueConfig
from moviefetch.shared.errors import ApplicationError, NetworkError
from moviefetch.shared.models import DetailRecord, PosterAsset, SearchPage, Summary

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SearchListener(Protocol):
    """Receives the results of one paged search."""

    def on_page(self, items: list[Summary]) -> None:
        """Called with the items of each successfully fetched page."""

    def on_error(self, error: NetworkError) -> None:
        """Called once when the search fails; paging stops afterwards."""


class MovieService:
    """Fetch primitives and the paged search loop.

    Args:
        settings: Application settings, the global settings if omitted
        session: HTTP session shared by all operations
        scheduler: Source of the delays between pages
        search_queue: Serial queue for searches and detail lookups
        poster_queue: Concurrent queue for poster downloads
    """

    def __init__(
        self,
        settings: Settings | None = None,
        session: requests.Session | None = None,
        scheduler: Scheduler | None = None,
        search_queue: TaskQueue | None = None,
        poster_queue: TaskQueue | None = None,
    ) -> None:
        self.settings = settings or get_config()
        queues = self.settings.queues

        self._owns_session = session is None
        self._session = session or create_session(
            pool_size=queues.search_concurrency + queues.poster_concurrency,
        )
        self._scheduler = scheduler or ThreadingScheduler(name="moviefetch-paging")
        self._search_queue = search_queue or TaskQueue(
            QueueConfig.SEARCH_QUEUE_NAME,
            queues.search_concurrency,
        )
        self._poster_queue = poster_queue or TaskQueue(
            QueueConfig.POSTER_QUEUE_NAME,
            queues.poster_concurrency,
        )

        self._page_decoder = json_decoder(SearchPage)
        self._detail_decoder = json_decoder(DetailRecord)

        self._lock = threading.Lock()
        self._settled = threading.Condition(self._lock)
        self._generation = 0
        self._scheduled: ScheduledCall | None = None
        self._pages_in_flight = 0

    @property
    def generation(self) -> int:
        """Number of the current search; increases with every search."""
        with self._lock:
            return self._generation

    def search(self, title: str, listener: SearchListener) -> None:
        """Start a paged search, replacing any search in progress.

        Args:
            title: Title words to search for
            listener: Receives pages and the terminal error

        Raises:
            NetworkError: If the first page request cannot be built
        """
        self._search_queue.cancel_all()
        self._poster_queue.cancel_all()
        generation = self._invalidate()

        logger.info("Starting search for %r (generation %d)", title, generation)
        self._paged_search(title, PagingConfig.FIRST_PAGE, generation, listener)

    def has_more_pages(self, search_page: SearchPage, page: int) -> bool:
        """Decide whether the page after ``page`` should be requested.

        Paging continues only while the service reports a total, the pages
        fetched so far do not cover it and the page limit is not reached.
        """
        total = search_page.total_available
        if total is None:
            return False

        paging = self.settings.paging
        return page * paging.page_size < total and page + 1 <= paging.max_pages

    def poll_interval(self, page: int) -> float:
        """Delay in seconds before requesting ``page``."""
        return self.settings.paging.poll_interval(page)

    def get_details(
        self,
        external_id: str,
        completion: Completion[DetailRecord],
    ) -> NetworkOperation[DetailRecord]:
        """Fetch the full detail record for one movie on the serial queue.

        Raises:
            NetworkError: If the request cannot be built
        """
        url = build_url(GetDetail(external_id), self.settings.omdb)
        operation = self._operation(url, self._detail_decoder, completion)
        self._search_queue.add(operation)
        return operation

    def get_poster(
        self,
        external_id: str,
        path: str | None,
        completion: Completion[PosterAsset],
    ) -> NetworkOperation[PosterAsset]:
        """Download a poster image on the poster queue.

        Args:
            external_id: Movie the poster belongs to
            path: Direct poster URL; the id-based poster host is used if None
            completion: Receives the PosterAsset outcome

        Raises:
            NetworkError: If the request cannot be built
        """
        url = build_url(GetPoster(external_id=external_id, path=path), self.settings.omdb)

        def decode(data: bytes) -> PosterAsset:
            return PosterAsset(external_id=external_id, image_bytes=data)

        operation = self._operation(url, decode, completion)
        self._poster_queue.add(operation)
        return operation

    def cancel_all(self) -> None:
        """Stop the current search and cancel every queued request."""
        self._invalidate()
        self._search_queue.cancel_all()
        self._poster_queue.cancel_all()

    def wait_until_settled(self, timeout: float | None = None) -> bool:
        """Block until paging has stopped and both queues are idle.

        Returns:
            True if everything settled, False if the timeout expired
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        def remaining() -> float | None:
            if deadline is None:
                return None
            return max(0.0, deadline - time.monotonic())

        with self._settled:
            settled = self._settled.wait_for(
                lambda: self._scheduled is None and self._pages_in_flight == 0,
                timeout=remaining(),
            )
        if not settled:
            return False

        if not self._search_queue.wait_until_idle(remaining()):
            return False
        return self._poster_queue.wait_until_idle(remaining())

    def shutdown(self) -> None:
        """Cancel all work and release the queues and the session."""
        self.cancel_all()
        self._search_queue.shutdown()
        self._poster_queue.shutdown()
        if self._owns_session:
            self._session.close()

    def _invalidate(self) -> int:
        with self._settled:
            self._generation += 1
            scheduled, self._scheduled = self._scheduled, None
            self._settled.notify_all()
            generation = self._generation

        if scheduled is not None:
            scheduled.cancel()
        return generation

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _operation(
        self,
        url: str,
        decode: Decoder[T],
        completion: Completion[T],
    ) -> NetworkOperation[T]:
        return NetworkOperation(
            url,
            decode,
            completion=completion,
            session=self._session,
            timeout=self.settings.omdb.timeout,
        )

    def _paged_search(
        self,
        title: str,
        page: int,
        generation: int,
        listener: SearchListener,
    ) -> None:
        url = build_url(TitleSearch(title, page), self.settings.omdb)
        operation = self._operation(
            url,
            self._page_decoder,
            partial(self._page_fetched, title, page, generation, listener),
        )

        with self._lock:
            self._pages_in_flight += 1
        operation.add_done_callback(lambda _future: self._page_settled())
        try:
            self._search_queue.add(operation)
        except ApplicationError:
            # Releases the in-flight count through the done callback
            operation.cancel()
            raise
        logger.debug("Queued page %d of %r", page, title)

    def _page_settled(self) -> None:
        with self._settled:
            self._pages_in_flight -= 1
            self._settled.notify_all()

    def _page_fetched(
        self,
        title: str,
        page: int,
        generation: int,
        listener: SearchListener,
        outcome: NetworkOutcome[SearchPage],
    ) -> None:
        if not self._is_current(generation):
            logger.debug("Dropping page %d of stale search generation %d", page, generation)
            return

        if outcome.error is not None:
            listener.on_error(outcome.error)
            return

        search_page = outcome.unwrap()
        if not search_page.succeeded and search_page.error_message:
            logger.debug("Search for %r reported: %s", title, search_page.error_message)

        listener.on_page(search_page.items)

        if not self.has_more_pages(search_page, page):
            logger.debug("Search for %r finished after page %d", title, page)
            return

        next_page = page + 1
        delay = self.poll_interval(next_page)
        with self._settled:
            if generation != self._generation:
                return
            self._scheduled = self._scheduler.call_later(
                delay,
                partial(self._next_page, title, next_page, generation, listener),
            )
        logger.debug("Scheduled page %d of %r in %.1fs", next_page, title, delay)

    def _next_page(
        self,
        title: str,
        page: int,
        generation: int,
        listener: SearchListener,
    ) -> None:
        if not self._is_current(generation):
            return

        try:
            self._paged_search(title, page, generation, listener)
        except NetworkError as e:
            listener.on_error(e)
        finally:
            with self._settled:
                if generation == self._generation:
                    self._scheduled = None
                self._settled.notify_all()
