"""Services module for MovieFetch.

This module contains the network operation and task queue machinery, the
in-memory caches and the search orchestration built on top of them.
"""

from .cache import BoundedKeyCache, IndexedAppendCache
from .endpoint import GetDetail, GetPoster, TitleSearch, build_url
from .movie_service import MovieService, SearchListener
from .operation import NetworkOperation, NetworkOutcome, OperationState
from .scheduler import Scheduler, ThreadingScheduler
from .search_orchestrator import ErrorPresenter, SearchNotifier, SearchOrchestrator
from .task_queue import TaskQueue

__all__ = [
    "BoundedKeyCache",
    "ErrorPresenter",
    "GetDetail",
    "GetPoster",
    "IndexedAppendCache",
    "MovieService",
    "NetworkOperation",
    "NetworkOutcome",
    "OperationState",
    "Scheduler",
    "SearchListener",
    "SearchNotifier",
    "SearchOrchestrator",
    "TaskQueue",
    "ThreadingScheduler",
    "TitleSearch",
    "build_url",
]
