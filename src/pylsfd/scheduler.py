"""Worker pool that hands out a fixed list of items one at a time."""

import logging
import threading
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Generic, TypeVar

from pylsfd.errors import CollectorError, LsfdError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_NO_WORK = object()


class SchedulerState(Enum):
    """Lifecycle of a WorkScheduler run."""

    NOT_STARTED = "not started"
    PUBLISHED = "published"
    DRAINING = "draining"
    DONE = "done"


class WorkScheduler(Generic[T]):
    """
    Runs `work` over every item of a list using a fixed pool of threads.

    The list is complete before the pool starts. Workers block on a
    readiness event until the list is published, then repeatedly claim the
    next index under a short-held lock until the list is exhausted. Every
    item is claimed exactly once; completion order across workers is not
    defined. There is no per-item timeout: one stuck item holds up run().

    If `work` raises, no further items are claimed and run() re-raises the
    first error after all workers have exited.
    """

    def __init__(
        self,
        work: Callable[[T], None],
        workers: int = 1,
        name: str = "Collector",
    ) -> None:
        """
        Initialize the WorkScheduler.

        Args:
            work: Called once per item, from a worker thread.
            workers: Number of worker threads. Must be at least 1.
            name: Prefix for worker thread names.
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self._work = work
        self._workers = workers
        self._name = name
        self._items: Sequence[T] = ()
        self._cursor: int | None = None
        self._cursor_lock = threading.Lock()
        self._ready = threading.Event()
        self._error_lock = threading.Lock()
        self._error: BaseException | None = None
        self._state = SchedulerState.NOT_STARTED

    @property
    def workers(self) -> int:
        """Size of the worker pool."""
        return self._workers

    @property
    def state(self) -> SchedulerState:
        """Current lifecycle state."""
        return self._state

    def run(self, items: Sequence[T]) -> None:
        """Process every item and return once all workers have exited."""
        if self._state is not SchedulerState.NOT_STARTED:
            raise RuntimeError("a WorkScheduler can only be run once")

        threads = self._start_workers()
        self._publish(items)
        for thread in threads:
            thread.join()
        self._state = SchedulerState.DONE

        if self._error is not None:
            if isinstance(self._error, LsfdError):
                raise self._error
            raise CollectorError(f"collector failed: {self._error}") from self._error

    def _start_workers(self) -> list[threading.Thread]:
        threads: list[threading.Thread] = []
        for i in range(self._workers):
            thread = threading.Thread(
                target=self._worker_loop,
                daemon=True,
                name=f"{self._name}-{i}",
            )
            try:
                thread.start()
            except RuntimeError as e:
                # Let the workers already running see an empty, failed run.
                self._record_error(e)
                self._ready.set()
                for started in threads:
                    started.join()
                self._state = SchedulerState.DONE
                raise CollectorError("failed to create a collector thread") from e
            threads.append(thread)
        return threads

    def _publish(self, items: Sequence[T]) -> None:
        with self._cursor_lock:
            self._items = items
            self._cursor = 0
            self._state = SchedulerState.PUBLISHED
        self._ready.set()
        logger.debug("published %d items to %d workers", len(items), self._workers)

    def _claim(self) -> object:
        """Take the item at the cursor and advance it, or return _NO_WORK."""
        with self._cursor_lock:
            if self._cursor is None or self._error is not None:
                return _NO_WORK
            if self._cursor >= len(self._items):
                return _NO_WORK
            item = self._items[self._cursor]
            self._cursor += 1
            self._state = SchedulerState.DRAINING
            return item

    def _record_error(self, error: BaseException) -> None:
        with self._error_lock:
            if self._error is None:
                self._error = error

    def _worker_loop(self) -> None:
        """Main loop of a worker thread."""
        self._ready.wait()
        while True:
            item = self._claim()
            if item is _NO_WORK:
                return
            try:
                self._work(item)  # type: ignore[arg-type]
            except Exception as e:
                logger.debug("%s: work failed: %s", threading.current_thread().name, e)
                self._record_error(e)
                return
