"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, Sequence, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class CleanerError(Exception):
    """Base exception for gcp-resource-cleaner."""

    exit_code: int = 1


class CommandError(CleanerError):
    """An external command exited non-zero or could not be started."""

    exit_code = 2

    def __init__(
        self,
        command: Sequence[str],
        returncode: int | None = None,
        output: bytes = b"",
        reason: str = "",
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        detail = reason or self.output_text or "no output"
        code = f" (exit {returncode})" if returncode is not None else ""
        super().__init__(f"Command '{' '.join(self.command)}' failed{code}: {detail}")

    @property
    def output_text(self) -> str:
        return self.output.decode("utf-8", errors="replace").strip()


class CancellationError(CleanerError):
    """The operation was cancelled or its deadline passed."""

    exit_code = 130

    def __init__(self, reason: str = "context cancelled") -> None:
        self.reason = reason
        super().__init__(f"Operation cancelled: {reason}")


class EmptyInputError(CleanerError):
    """A required identifier was empty."""

    exit_code = 3


class ConfigurationError(CleanerError):
    """Invalid or missing configuration."""

    exit_code = 4


class HealthCheckError(CleanerError):
    """The gcloud installation did not respond as expected."""

    exit_code = 5


class DiscoveryError(CleanerError):
    """Nothing could be discovered under the root folder."""

    exit_code = 6


class DeletionFailedError(CleanerError):
    """One or more resources could not be deleted."""

    exit_code = 7

    def __init__(self, failed: int, total: int) -> None:
        self.failed = failed
        self.total = total
        super().__init__(f"{failed} of {total} resources failed to delete")


def error_handler(func: F) -> F:
    """Decorator that catches CleanerError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except CleanerError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
