"""
Pytest configuration and shared fixtures for MovieFetch tests.

Network traffic is replaced by FakeSession, which answers requests from a
table of exact URLs, and delayed calls by ManualScheduler, which records
every delay and only runs callbacks when a test asks it to.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import Mock

import orjson
import pytest
import requests

from moviefetch.config import OMDbSettings, Settings
from moviefetch.services.endpoint import TitleSearch, build_url
from moviefetch.services.task_queue import TaskQueue

TEST_API_KEY = "test_api_key_for_ci_testing_only"  # pragma: allowlist secret

# Keep a developer's environment out of the tests
for _name in list(os.environ):
    if _name.startswith("MOVIEFETCH_"):
        del os.environ[_name]


class FakeSession:
    """Stand-in for requests.Session answering from a URL table.

    Unknown URLs are answered with a 404.
    """

    def __init__(self) -> None:
        self.requested: list[str] = []
        self.closed = False
        self._routes: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def respond(
        self,
        url: str,
        payload: Any = None,
        *,
        status: int = 200,
        content: bytes | None = None,
        error: Exception | None = None,
    ) -> None:
        if content is None and payload is not None:
            content = orjson.dumps(payload)
        self._routes[url] = {
            "status": status,
            "content": content or b"",
            "error": error,
        }

    def get(self, url: str, timeout: float | None = None) -> Mock:
        with self._lock:
            self.requested.append(url)
        route = self._routes.get(url, {"status": 404, "content": b"", "error": None})
        if route["error"] is not None:
            raise route["error"]

        response = Mock(spec=requests.Response)
        response.status_code = route["status"]
        response.content = route["content"]
        return response

    def request_count(self, url: str | None = None) -> int:
        with self._lock:
            if url is None:
                return len(self.requested)
            return self.requested.count(url)

    def close(self) -> None:
        self.closed = True


class ManualCall:
    """A delayed call recorded by ManualScheduler."""

    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.ran = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler that never fires on its own."""

    def __init__(self) -> None:
        self.calls: list[ManualCall] = []
        self._lock = threading.Lock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualCall:
        call = ManualCall(delay, callback)
        with self._lock:
            self.calls.append(call)
        return call

    @property
    def delays(self) -> list[float]:
        return [call.delay for call in self.calls]

    def pending(self) -> list[ManualCall]:
        with self._lock:
            return [call for call in self.calls if not call.cancelled and not call.ran]

    def run_pending(self) -> int:
        """Run every pending call once and return how many ran."""
        calls = self.pending()
        for call in calls:
            call.ran = True
            call.callback()
        return len(calls)


def make_summary(index: int, prefix: str = "Batman") -> dict[str, str]:
    return {
        "Title": f"{prefix} {index}",
        "Year": str(1990 + index % 30),
        "imdbID": f"tt{index:07d}",
        "Type": "movie",
        "Poster": f"http://img.example.com/posters/{index}.jpg",
    }


@pytest.fixture
def settings() -> Settings:
    """Settings with a test API key and default paging."""
    return Settings(omdb=OMDbSettings(api_key=TEST_API_KEY))


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def search_queue() -> Generator[TaskQueue, None, None]:
    queue = TaskQueue("search", 1)
    yield queue
    queue.shutdown()


@pytest.fixture
def poster_queue() -> Generator[TaskQueue, None, None]:
    queue = TaskQueue("poster", 4)
    yield queue
    queue.shutdown()


@pytest.fixture
def search_url(settings: Settings) -> Callable[[str, int], str]:
    """Build the search URL for a title and page."""

    def build(title: str, page: int = 1) -> str:
        return build_url(TitleSearch(title, page), settings.omdb)

    return build


@pytest.fixture
def search_payload() -> Callable[..., dict[str, Any]]:
    """Create a successful search response.

    The factory takes the number of items on the page, the reported total
    and the index of the first item.
    """

    def build(count: int, total: int, start: int = 0, prefix: str = "Batman") -> dict[str, Any]:
        return {
            "Search": [make_summary(start + i, prefix) for i in range(count)],
            "totalResults": str(total),
            "Response": "True",
        }

    return build


@pytest.fixture
def not_found_payload() -> dict[str, str]:
    return {"Response": "False", "Error": "Movie not found!"}


@pytest.fixture
def detail_payload() -> dict[str, str]:
    return {
        "Title": "Batman Begins",
        "Year": "2005",
        "Rated": "PG-13",
        "Released": "15 Jun 2005",
        "Runtime": "140 min",
        "Genre": "Action, Crime, Drama",
        "Director": "Christopher Nolan",
        "Writer": "Bob Kane, David S. Goyer, Christopher Nolan",
        "Actors": "Christian Bale, Michael Caine, Ken Watanabe",
        "Plot": "After training with his mentor, Batman begins his fight.",
        "Language": "English, Mandarin",
        "Country": "United States, United Kingdom",
        "Awards": "Nominated for 1 Oscar. 14 wins & 79 nominations total",
        "Metascore": "70",
        "imdbRating": "8.2",
        "imdbID": "tt0372784",
        "DVD": "N/A",
        "BoxOffice": "$206,863,479",
        "Production": "N/A",
        "Response": "True",
    }
