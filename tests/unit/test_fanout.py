"""Tests for the threaded fan-out helper."""

from __future__ import annotations

import threading
import time

import pytest

from gcp_resource_cleaner.client.context import Context
from gcp_resource_cleaner.client.errors import CancellationError
from gcp_resource_cleaner.core.fanout import fan_out


class Tracker:
    """Counts how many calls overlap."""

    def __init__(self, delay: float = 0.02) -> None:
        self.delay = delay
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def __call__(self, ctx: Context, item: int) -> int:
        ctx.raise_if_cancelled()
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            time.sleep(self.delay)
            return item * 10
        finally:
            with self._lock:
                self.active -= 1


class TestFanOut:
    def test_results_in_item_order(self, ctx):
        assert fan_out(ctx, [3, 1, 2], Tracker(), max_workers=3, name="t") == [30, 10, 20]

    @pytest.mark.parametrize("limit", [1, 2, 4])
    def test_worker_count_bounds_overlap(self, ctx, limit):
        tracker = Tracker()
        fan_out(ctx, list(range(10)), tracker, max_workers=limit, name="t")
        assert tracker.max_active <= limit

    def test_threads_capped_by_max_workers(self, ctx):
        seen: set[str] = set()

        def record(group: Context, item: int) -> None:
            seen.add(threading.current_thread().name)
            time.sleep(0.005)

        fan_out(ctx, list(range(40)), record, max_workers=3, name="capped")
        assert 1 <= len(seen) <= 3

    def test_empty(self, ctx):
        assert fan_out(ctx, [], Tracker(), max_workers=4, name="t") == []

    def test_first_error_cancels_siblings(self, ctx):
        started: list[int] = []

        def fn(group: Context, item: int) -> int:
            if item == 0:
                raise RuntimeError("boom")
            time.sleep(0.02)
            group.raise_if_cancelled()
            started.append(item)
            return item

        with pytest.raises(RuntimeError, match="boom"):
            fan_out(ctx, list(range(8)), fn, max_workers=1, name="t")
        assert started == []
        assert not ctx.cancelled

    def test_parent_cancellation_propagates(self):
        ctx = Context.background()
        ctx.cancel("interrupted")
        with pytest.raises(CancellationError, match="interrupted"):
            fan_out(ctx, [1, 2], Tracker(), max_workers=2, name="t")

    def test_group_context_is_released(self, ctx):
        fan_out(ctx, [1, 2, 3], Tracker(delay=0), max_workers=2, name="t")
        assert ctx._children == []
