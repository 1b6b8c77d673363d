"""Run one call per item on worker threads, keeping results in item order."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from typing import TypeVar

from gcp_resource_cleaner.client.context import Context

T = TypeVar("T")
R = TypeVar("R")


def fan_out(
    ctx: Context,
    items: Sequence[T],
    fn: Callable[[Context, T], R],
    *,
    max_workers: int,
    name: str,
) -> list[R]:
    """Call ``fn(group, item)`` for every item with at most *max_workers* threads.

    ``group`` is a child of *ctx*. The first worker to raise cancels it, so
    siblings still queued or running stop at their next check, and that
    first exception is re-raised once every worker is done.
    """
    slots: list = [None] * len(items)
    errors: list[BaseException] = []

    with ctx.with_cancel() as group:

        def work(index: int, item: T) -> None:
            try:
                slots[index] = fn(group, item)
            except BaseException as exc:
                errors.append(exc)
                group.cancel("sibling task failed")
                raise

        with ThreadPoolExecutor(
            max_workers=max(1, min(max_workers, len(items))), thread_name_prefix=name,
        ) as pool:
            wait([pool.submit(work, i, item) for i, item in enumerate(items)])

    if errors:
        raise errors[0]
    return slots
