"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class EntrypointError(Exception):
    """Base exception for ignition-entrypoint.

    Every fatal condition terminates the container start with status 1;
    the subclasses only exist to tell causes apart in messages and tests.
    """

    exit_code: int = 1


class ConfigurationError(EntrypointError):
    """Invalid or conflicting environment configuration."""


class GatewayConnectionError(EntrypointError):
    """Cannot connect to the interim gateway."""


class GatewayAPIError(EntrypointError):
    """The interim gateway answered with an error status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        super().__init__(f"Gateway returned {status_code}: {detail}")


class VersionError(EntrypointError):
    """Malformed version string or unsupported downgrade."""

    def __init__(self, message: str, code: int) -> None:
        self.code = code
        super().__init__(message)


class UpgradeToolError(EntrypointError):
    """The gateway upgrader exited non-zero."""

    def __init__(self, returncode: int) -> None:
        self.returncode = returncode
        super().__init__(f"Gateway upgrader failed with exit status {returncode}")


class HealthTimeoutError(EntrypointError):
    """The interim gateway never reported RUNNING."""

    def __init__(self, phase: str, seconds: int) -> None:
        self.phase = phase
        self.seconds = seconds
        super().__init__(
            f"Failed to detect RUNNING status during {phase} after {seconds} delay."
        )


class ProcessSupervisionError(EntrypointError):
    """Spawning, restoring or stopping the interim gateway failed."""


class ModuleExtractionError(EntrypointError):
    """A module archive is missing or has unreadable metadata."""


class RowStoreError(EntrypointError):
    """The gateway configuration database rejected an operation."""


def error_handler(func: F) -> F:
    """Decorator that catches EntrypointError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except EntrypointError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
