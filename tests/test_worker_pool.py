"""Tests for the WorkerPool thread-pool wrapper."""

from __future__ import annotations

import threading
import time

import pytest

from vibeanalysis.worker_pool import WorkerPool


def test_map_ordered_preserves_input_order() -> None:
    def slow_square(x: int) -> int:
        time.sleep(0.01 * (5 - x))
        return x * x

    with WorkerPool(max_workers=4) as pool:
        assert pool.map_ordered(slow_square, [1, 2, 3, 4]) == [1, 4, 9, 16]


def test_map_ordered_empty() -> None:
    with WorkerPool(max_workers=2) as pool:
        assert pool.map_ordered(lambda x: x, []) == []
        assert pool.stats()["total_tasks"] == 0


def test_tasks_run_on_worker_threads() -> None:
    main_thread = threading.get_ident()
    with WorkerPool(max_workers=2, thread_name_prefix="test-pool") as pool:
        names = pool.map_ordered(lambda _: threading.current_thread().name, range(4))
        idents = pool.map_ordered(lambda _: threading.get_ident(), range(4))
    assert all(name.startswith("test-pool") for name in names)
    assert main_thread not in idents


def test_first_failure_reraised_after_all_tasks(caplog: pytest.LogCaptureFixture) -> None:
    done: list[int] = []
    lock = threading.Lock()

    def task(x: int) -> int:
        if x in (1, 3):
            raise ValueError(f"bad {x}")
        with lock:
            done.append(x)
        return x

    pool = WorkerPool(max_workers=2)
    try:
        with pytest.raises(ValueError, match="bad 1"):
            pool.map_ordered(task, [0, 1, 2, 3])
        stats = pool.stats()
    finally:
        pool.shutdown()
    assert sorted(done) == [0, 2]
    assert stats["failed_tasks"] == 2
    assert stats["total_tasks"] == 4
    assert "task 1 failed" in caplog.text


def test_submit_after_shutdown_raises() -> None:
    pool = WorkerPool(max_workers=1)
    pool.shutdown()
    pool.shutdown()
    with pytest.raises(RuntimeError, match="shut down"):
        pool.submit(lambda: None)
    assert pool.stats()["alive"] is False


def test_max_workers_floor() -> None:
    with WorkerPool(max_workers=0) as pool:
        assert pool.max_workers == 1
        assert pool.submit(lambda: 42).result() == 42
