"""Run external commands, optionally behind an admission gate."""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from typing import Protocol

from gcp_resource_cleaner.client.context import Context
from gcp_resource_cleaner.client.errors import CancellationError, CommandError
from gcp_resource_cleaner.config.constants import POLL_INTERVAL

logger = logging.getLogger(__name__)


class CommandExecutor(Protocol):
    """Anything that can run ``name *args`` and return its combined output."""

    def execute(self, ctx: Context, name: str, *args: str) -> bytes: ...


class GCloudExecutor:
    """Unbounded executor backed by ``subprocess``.

    stderr is merged into stdout. The process is killed when *ctx* is
    cancelled while it runs, or when *timeout* seconds pass.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def execute(self, ctx: Context, name: str, *args: str) -> bytes:
        command = [name, *args]
        ctx.raise_if_cancelled()
        deadline = time.monotonic() + self.timeout if self.timeout is not None else None
        logger.debug("Running command", extra={"command": command})
        try:
            proc = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
            )
        except OSError as exc:
            raise CommandError(command, reason=str(exc)) from exc

        with proc:
            while True:
                try:
                    out, _ = proc.communicate(timeout=POLL_INTERVAL)
                    break
                except subprocess.TimeoutExpired:
                    if ctx.cancelled:
                        proc.kill()
                        proc.communicate()
                        raise ctx.err() or CancellationError()
                    if deadline is not None and time.monotonic() >= deadline:
                        proc.kill()
                        out, _ = proc.communicate()
                        raise CommandError(
                            command, output=out, reason=f"timed out after {self.timeout}s",
                        )

        if proc.returncode != 0:
            raise CommandError(command, proc.returncode, out)
        return out


class BoundedExecutor:
    """Concurrency-limiting decorator around another executor.

    At most ``limit`` delegated calls run at once. Callers block for a slot
    until one frees up or their context is cancelled.
    """

    def __init__(self, delegate: CommandExecutor, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"Concurrency limit must be at least 1, got {limit}")
        self.delegate = delegate
        self.limit = limit
        self._slots = threading.Semaphore(limit)
        self._lock = threading.Lock()
        self._in_flight = 0
        self._peak = 0

    @property
    def in_flight(self) -> int:
        """Number of slots currently held."""
        with self._lock:
            return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        """Highest number of slots held at once since creation."""
        with self._lock:
            return self._peak

    def _acquire(self, ctx: Context) -> None:
        while True:
            ctx.raise_if_cancelled()
            timeout = POLL_INTERVAL
            remaining = ctx.remaining()
            if remaining is not None:
                timeout = min(timeout, remaining)
            if self._slots.acquire(timeout=timeout):
                if ctx.cancelled:
                    self._slots.release()
                    ctx.raise_if_cancelled()
                break
        with self._lock:
            self._in_flight += 1
            self._peak = max(self._peak, self._in_flight)

    def _release(self) -> None:
        with self._lock:
            self._in_flight -= 1
        self._slots.release()

    def execute(self, ctx: Context, name: str, *args: str) -> bytes:
        self._acquire(ctx)
        try:
            return self.delegate.execute(ctx, name, *args)
        finally:
            self._release()
