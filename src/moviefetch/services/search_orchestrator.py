"""Search orchestration.

The SearchOrchestrator connects the MovieService to the result, detail and
poster caches and reports every change through a SearchNotifier. It also
owns the transient error display.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from functools import partial
from typing import Any, Protocol

from moviefetch.config import Settings, get_config
from moviefetch.services.cache import BoundedKeyCache, IndexedAppendCache
from moviefetch.services.movie_service import MovieService
from moviefetch.services.operation import NetworkOutcome
from moviefetch.services.scheduler import ScheduledCall, Scheduler, ThreadingScheduler
from moviefetch.shared.constants import UIConfig, UserMessages
from moviefetch.shared.errors import MovieFetchError, NetworkError
from moviefetch.shared.logging import log_operation_error
from moviefetch.shared.models import DetailRecord, PosterAsset, Summary

logger = logging.getLogger(__name__)


class SearchNotifier(Protocol):
    """Receives state changes of a search.

    Methods are called on worker threads.
    """

    def results_updated(self) -> None: ...

    def no_results(self) -> None: ...

    def poster_available(self, external_id: str, data: bytes) -> None: ...

    def detail_available(self, external_id: str, record: DetailRecord) -> None: ...

    def detail_unavailable(self, external_id: str) -> None: ...

    def error(self, message: str) -> None: ...

    def error_dismissed(self) -> None: ...


class ErrorPresenter:
    """Shows one error message at a time and dismisses it after a delay.

    Showing a new error restarts the dismissal timer.
    """

    def __init__(
        self,
        notifier: SearchNotifier,
        scheduler: Scheduler,
        duration: float = UIConfig.ERROR_MESSAGE_DURATION,
    ) -> None:
        self._notifier = notifier
        self._scheduler = scheduler
        self.duration = duration

        self._lock = threading.Lock()
        self._shown = 0
        self._dismissal: ScheduledCall | None = None

    @property
    def is_showing(self) -> bool:
        with self._lock:
            return self._dismissal is not None

    def show_error(self, error: Exception) -> str:
        """Log ``error`` and display its user message.

        Returns:
            The message that was displayed
        """
        if isinstance(error, MovieFetchError):
            log_operation_error(logger, error, operation="show_error", level=logging.WARNING)
        else:
            logger.warning("Showing unexpected error: %s", error)

        message = error.user_message if isinstance(error, NetworkError) else None
        if message is None:
            message = UserMessages.GENERIC

        with self._lock:
            if self._dismissal is not None:
                self._dismissal.cancel()
            self._shown += 1
            self._dismissal = self._scheduler.call_later(
                self.duration,
                partial(self._dismiss, self._shown),
            )

        self._notifier.error(message)
        return message

    def cancel(self) -> None:
        """Drop a pending dismissal without notifying."""
        with self._lock:
            if self._dismissal is not None:
                self._dismissal.cancel()
                self._dismissal = None

    def _dismiss(self, shown: int) -> None:
        with self._lock:
            if shown != self._shown or self._dismissal is None:
                return
            self._dismissal = None

        self._notifier.error_dismissed()


class _SearchListener:
    """Binds service callbacks to one search started by the orchestrator."""

    def __init__(self, orchestrator: SearchOrchestrator, token: int) -> None:
        self._orchestrator = orchestrator
        self._token = token

    def on_page(self, items: list[Summary]) -> None:
        self._orchestrator._page_received(self._token, items)

    def on_error(self, error: NetworkError) -> None:
        self._orchestrator._search_failed(self._token, error)


class SearchOrchestrator:
    """Runs searches and keeps the fetched results in memory.

    Args:
        settings: Application settings, the global settings if omitted
        notifier: Receives every state change
        service: Fetch service, created from ``settings`` if omitted
        scheduler: Scheduler for error dismissal and, when the service is
            created here, for the paging delays
    """

    def __init__(
        self,
        settings: Settings | None,
        notifier: SearchNotifier,
        service: MovieService | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.settings = settings or get_config()
        self._notifier = notifier
        self._scheduler = scheduler or ThreadingScheduler(name="moviefetch-ui")
        self._service = service or MovieService(self.settings, scheduler=self._scheduler)

        cache = self.settings.cache
        self._movies: IndexedAppendCache[Summary] = IndexedAppendCache(Summary)
        self._details: BoundedKeyCache[DetailRecord] = BoundedKeyCache(
            DetailRecord,
            limit=cache.detail_limit,
        )
        self._posters: BoundedKeyCache[PosterAsset] = BoundedKeyCache(
            PosterAsset,
            limit=cache.poster_limit,
        )
        self._errors = ErrorPresenter(
            notifier,
            self._scheduler,
            duration=self.settings.ui.error_message_duration,
        )

        self._lock = threading.Lock()
        self._token = 0

    @property
    def service(self) -> MovieService:
        return self._service

    @property
    def errors(self) -> ErrorPresenter:
        return self._errors

    def start_search(self, title: str) -> None:
        """Clear the current results and search for ``title``.

        A request that cannot be built is shown as an error right away.
        """
        with self._lock:
            self._token += 1
            token = self._token
            self._movies.clear_all()

        self._notifier.results_updated()

        try:
            self._service.search(title, _SearchListener(self, token))
        except NetworkError as e:
            self._errors.show_error(e)

    def result_count(self) -> int:
        return self._movies.count

    def result_at(self, index: int) -> Summary | None:
        return self._movies.fetch(index)

    def poster_for(self, external_id: str) -> bytes | None:
        """Return cached poster bytes; never triggers a download."""
        asset = self._posters.fetch(external_id)
        return asset.image_bytes if asset is not None else None

    def detail_for(self, external_id: str) -> DetailRecord | None:
        """Return the cached detail record, or start fetching it.

        On a cache miss None is returned and the outcome is reported later
        through ``detail_available`` or ``detail_unavailable``.
        """
        record = self._details.fetch(external_id)
        if record is not None:
            return record

        try:
            operation = self._service.get_details(
                external_id,
                partial(self._detail_fetched, external_id),
            )
        except NetworkError as e:
            log_operation_error(logger, e, operation="detail_for", level=logging.WARNING)
            self._notifier.detail_unavailable(external_id)
            return None

        operation.add_done_callback(partial(self._detail_settled, external_id))
        return None

    def wait_until_settled(self, timeout: float | None = None) -> bool:
        """Block until paging has stopped and no request is outstanding."""
        return self._service.wait_until_settled(timeout)

    def shutdown(self) -> None:
        """Stop all work; the orchestrator cannot be used afterwards."""
        self._errors.cancel()
        self._service.shutdown()

    def _is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._token

    def _page_received(self, token: int, items: list[Summary]) -> None:
        with self._lock:
            if token != self._token:
                return
            if items:
                self._movies.load(items)
            empty = self._movies.count == 0

        if not items:
            if empty:
                self._notifier.no_results()
            return

        self._notifier.results_updated()
        for item in items:
            self._request_poster(token, item)

    def _search_failed(self, token: int, error: NetworkError) -> None:
        if self._is_current(token):
            self._errors.show_error(error)

    def _request_poster(self, token: int, item: Summary) -> None:
        if not item.external_id or not item.has_poster:
            return

        asset = self._posters.fetch(item.external_id)
        if asset is not None:
            self._notifier.poster_available(item.external_id, asset.image_bytes)
            return

        try:
            self._service.get_poster(
                item.external_id,
                item.poster,
                partial(self._poster_fetched, token, item.external_id),
            )
        except NetworkError as e:
            logger.debug("Skipping poster for %s: %s", item.external_id, e)

    def _poster_fetched(
        self,
        token: int,
        external_id: str,
        outcome: NetworkOutcome[PosterAsset],
    ) -> None:
        if outcome.error is not None:
            logger.debug("Poster for %s unavailable: %s", external_id, outcome.error)
            return

        asset = outcome.unwrap()
        self._posters.store(external_id, asset)
        if self._is_current(token):
            self._notifier.poster_available(external_id, asset.image_bytes)

    def _detail_settled(self, external_id: str, future: Future[Any]) -> None:
        # A new search cancels the serial queue, detail lookups included
        if future.cancelled():
            logger.debug("Detail lookup for %s was cancelled", external_id)
            self._notifier.detail_unavailable(external_id)

    def _detail_fetched(self, external_id: str, outcome: NetworkOutcome[DetailRecord]) -> None:
        if outcome.error is not None:
            self._notifier.detail_unavailable(external_id)
            return

        record = outcome.unwrap()
        self._details.store(external_id, record)
        self._notifier.detail_available(external_id, record)
