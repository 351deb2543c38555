"""Task queues for network operations.

A TaskQueue runs NetworkOperations on a bounded pool of worker threads.
Operations start in the order they were added; with a concurrency of 1 the
queue is strictly serial.
"""

from __future__ import annotations

import logging
import threading
import types
from concurrent.futures import ThreadPoolExecutor

from typing_extensions import Self

from moviefetch.services.operation import NetworkOperation
from moviefetch.shared.constants import QueueConfig
from moviefetch.shared.errors import ApplicationError, ErrorCode, ErrorContext
from moviefetch.shared.logging import log_operation_success

logger = logging.getLogger(__name__)


class TaskQueue:
    """Bounded worker pool admitting NetworkOperations.

    Args:
        name: Queue name, used for worker thread names and logging
        concurrency: Maximum number of operations executing at once
    """

    def __init__(self, name: str, concurrency: int) -> None:
        """Initialize the queue.

        Raises:
            ApplicationError: If concurrency is not positive
        """
        context = ErrorContext(
            operation="task_queue_init",
            additional_data={"name": name, "concurrency": concurrency},
        )
        if concurrency <= 0:
            raise ApplicationError(
                code=ErrorCode.VALIDATION_ERROR,
                message=f"Concurrency must be positive, got: {concurrency}",
                context=context,
            )

        self.name = name
        self.concurrency = concurrency
        self._executor = ThreadPoolExecutor(
            max_workers=concurrency,
            thread_name_prefix=f"{QueueConfig.THREAD_NAME_PREFIX}-{name}",
        )
        self._lock = threading.Lock()
        self._idle = threading.Condition(self._lock)
        self._operations: list[NetworkOperation] = []
        self._active_count = 0
        self._closed = False

        log_operation_success(
            logger=logger,
            operation="task_queue_init",
            duration_ms=0,
            context=context,
        )

    def add(self, operation: NetworkOperation) -> None:
        """Admit an operation; it starts once a worker is free.

        Raises:
            ApplicationError: If the queue has been shut down
        """
        # Submitting under the lock keeps shutdown() from closing the pool in between
        with self._lock:
            if self._closed:
                raise self._closed_error()
            try:
                self._executor.submit(self._run, operation)
            except RuntimeError as e:
                raise self._closed_error() from e
            self._operations.append(operation)

    def cancel_all(self) -> int:
        """Cancel every operation that has not finished yet.

        Queued operations will not execute. Executing operations complete
        their HTTP call but their results are discarded.

        Returns:
            Number of operations cancelled
        """
        with self._lock:
            operations = list(self._operations)

        for operation in operations:
            operation.cancel()

        if operations:
            logger.debug("Cancelled %d operation(s) on queue '%s'", len(operations), self.name)
        return len(operations)

    @property
    def pending_count(self) -> int:
        """Number of operations queued or executing."""
        with self._lock:
            return len(self._operations)

    @property
    def active_count(self) -> int:
        """Number of operations currently held by a worker."""
        with self._lock:
            return self._active_count

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until no operations are queued or executing.

        Returns:
            True if the queue became idle, False if the timeout expired
        """
        with self._idle:
            return self._idle.wait_for(lambda: not self._operations, timeout=timeout)

    def shutdown(self, *, wait: bool = True) -> None:
        """Cancel outstanding operations and stop the workers."""
        with self._lock:
            self._closed = True
        self.cancel_all()
        self._executor.shutdown(wait=wait)

    def _closed_error(self) -> ApplicationError:
        return ApplicationError(
            code=ErrorCode.CONCURRENCY_ERROR,
            message=f"Task queue '{self.name}' is shut down",
            context=ErrorContext(operation="task_queue_add"),
        )

    def _run(self, operation: NetworkOperation) -> None:
        with self._lock:
            self._active_count += 1
        try:
            operation.start()
        except Exception:
            # Boundary: a failing completion must not kill the worker silently
            logger.exception("Operation %r raised on queue '%s'", operation, self.name)
        finally:
            with self._idle:
                self._active_count -= 1
                self._operations.remove(operation)
                self._idle.notify_all()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        return f"TaskQueue(name={self.name!r}, concurrency={self.concurrency})"
