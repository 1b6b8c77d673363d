"""Cancellation context shared by every command invocation.

A ``Context`` carries a cancellation flag and an optional deadline. Derived
contexts are cancelled together with their parent, so cancelling the root
context of a CLI run stops discovery and deletion in every worker thread.
"""

from __future__ import annotations

import threading
import time
from typing import Any

from gcp_resource_cleaner.client.errors import CancellationError


class Context:
    """Cancellable, deadline-aware context."""

    def __init__(
        self,
        parent: Context | None = None,
        deadline: float | None = None,
    ) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._children: list[Context] = []
        self._reason: str | None = None
        self._parent = parent
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline
        if parent is not None:
            parent._attach(self)

    @classmethod
    def background(cls) -> Context:
        """Return a root context that is never cancelled on its own."""
        return cls()

    def with_cancel(self) -> Context:
        return Context(parent=self)

    def with_timeout(self, seconds: float) -> Context:
        return Context(parent=self, deadline=time.monotonic() + seconds)

    def _attach(self, child: Context) -> None:
        with self._lock:
            self._children.append(child)
            reason = self._reason
        if reason is not None:
            child.cancel(reason)

    def _detach(self, child: Context) -> None:
        with self._lock:
            if child in self._children:
                self._children.remove(child)

    @property
    def deadline(self) -> float | None:
        """Monotonic deadline, or None when the context never expires."""
        return self._deadline

    def remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self, reason: str = "context cancelled") -> None:
        with self._lock:
            if self._reason is not None:
                return
            self._reason = reason
            children = list(self._children)
        self._event.set()
        for child in children:
            child.cancel(reason)
        # A cancelled child never needs its parent again
        if self._parent is not None:
            self._parent._detach(self)

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self.cancel("deadline exceeded")
            return True
        return False

    def err(self) -> CancellationError | None:
        if not self.cancelled:
            return None
        return CancellationError(self._reason or "context cancelled")

    def raise_if_cancelled(self) -> None:
        exc = self.err()
        if exc is not None:
            raise exc

    def __enter__(self) -> Context:
        return self

    def __exit__(self, *args: Any) -> None:
        self.cancel("context closed")
