"""
Tests for fanout.py - concurrent, staggered task batches.
"""

import threading
import time

import pytest
from hop.utils.fanout import run_all


class TestRunAll:

    def test_empty(self):
        assert run_all([]) == []

    def test_results_in_submission_order(self):
        assert run_all([lambda i=i: i * 2 for i in range(5)]) == [0, 2, 4, 6, 8]

    def test_first_failure_is_raised_after_all_ran(self):
        done = []
        lock = threading.Lock()

        def ok(i):
            with lock:
                done.append(i)
            return i

        def boom():
            raise ValueError("first")

        tasks = [lambda: ok(0), boom, lambda: ok(2)]
        with pytest.raises(ValueError, match="first"):
            run_all(tasks)
        assert sorted(done) == [0, 2]

    def test_stagger_spaces_task_starts(self):
        starts = {}
        lock = threading.Lock()

        def mark(i):
            with lock:
                starts[i] = time.monotonic()

        t0 = time.monotonic()
        run_all([lambda i=i: mark(i) for i in range(6)], stagger_s=0.02, max_workers=3)
        for i, started in starts.items():
            assert started - t0 >= i * 0.02 - 0.005

    def test_stagger_does_not_accumulate_per_worker(self):
        # 40 tasks at 10ms are spread over ~0.4s, not summed per worker (~2s)
        t0 = time.monotonic()
        run_all([lambda: None] * 40, stagger_s=0.01, max_workers=4)
        elapsed = time.monotonic() - t0
        assert 0.35 <= elapsed < 1.2
