"""Thread-pool wrapper for running independent analyses side by side.

The analysis engine holds no cross-call state, so separate batches (or
separate axes of one batch) can be evaluated concurrently.  numpy releases
the GIL inside the FFT and the large array operations, which is what makes
threads worthwhile here.

Usage::

    with WorkerPool(max_workers=4) as pool:
        results = pool.map_ordered(analyze, batches)
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_MAX_WORKERS = 4


class WorkerPool:
    """Fixed-size pool of analysis threads that counts what it ran.

    Parameters
    ----------
    max_workers:
        Thread count, at least 1.  Defaults to 4.
    thread_name_prefix:
        Prefix for worker-thread names, visible in log records and profilers.
    """

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        thread_name_prefix: str = "vibeanalysis-worker",
    ) -> None:
        self._max_workers = max(1, int(max_workers))
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix=thread_name_prefix,
        )
        self._lock = threading.Lock()
        self._submitted = 0
        self._failed = 0
        self._busy_s = 0.0
        self._closed = False

    def __enter__(self) -> WorkerPool:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def submit(self, fn: Callable[..., R], *args: Any, **kwargs: Any) -> Future[R]:
        if self._closed:
            raise RuntimeError("WorkerPool is shut down")
        with self._lock:
            self._submitted += 1
        return self._executor.submit(fn, *args, **kwargs)

    def map_ordered(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
        """Apply *fn* to every item concurrently; results follow input order.

        All tasks run to completion.  Failures are logged with their
        traceback and the earliest one (by input position) is re-raised, so
        an engine error never turns into a silently missing result.
        """
        if not items:
            return []
        started = time.monotonic()
        pending = [self.submit(fn, item) for item in items]
        results: list[R] = []
        errors: list[tuple[int, Exception]] = []
        for position, future in enumerate(pending):
            try:
                results.append(future.result())
            except Exception as exc:
                LOGGER.warning("WorkerPool task %d failed", position, exc_info=True)
                errors.append((position, exc))
        with self._lock:
            self._failed += len(errors)
            self._busy_s += time.monotonic() - started
        if errors:
            raise errors[0][1]
        return results

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work.  Calling it again is a no-op."""
        self._closed = True
        self._executor.shutdown(wait=wait)

    @property
    def max_workers(self) -> int:
        return self._max_workers

    def stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "max_workers": self._max_workers,
                "total_tasks": self._submitted,
                "failed_tasks": self._failed,
                "total_wait_s": round(self._busy_s, 4),
                "alive": not self._closed,
            }
