"""Fixed-interval health polling of the gateway status endpoint."""

from __future__ import annotations

import time
from enum import Enum
from typing import Callable

from rich.console import Console

from ignition_entrypoint.client.errors import EntrypointError, HealthTimeoutError
from ignition_entrypoint.client.gateway import GatewayClient
from ignition_entrypoint.config.constants import POLL_INTERVAL, RUNNING_TOKEN


class HealthStatus(Enum):
    HEALTHY = "healthy"
    TIMEOUT = "timeout"


class HealthGate:
    """Poll once per interval until the body reports RUNNING or the deadline passes.

    A refused or failed request only means "not yet healthy". Each request
    is capped by the time left, so a stalled endpoint cannot stretch the
    wait. No backoff, no jitter.
    """

    def __init__(
        self,
        client: GatewayClient,
        *,
        interval: float = POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        console: Console | None = None,
    ) -> None:
        self.client = client
        self.interval = interval
        self.sleep = sleep
        self.clock = clock
        self.console = console or Console()

    def is_running(self, path: str, timeout: float | None = None) -> bool:
        try:
            body = self.client.status_text(
                path, timeout=self.interval if timeout is None else timeout,
            )
        except EntrypointError:
            return False
        return RUNNING_TOKEN in body

    def poll(self, path: str, max_seconds: int) -> HealthStatus:
        deadline = self.clock() + max_seconds
        while True:
            remaining = deadline - self.clock()
            if remaining <= 0:
                return HealthStatus.TIMEOUT
            if self.is_running(path, timeout=min(self.interval, remaining)):
                return HealthStatus.HEALTHY
            remaining = deadline - self.clock()
            if remaining <= 0:
                return HealthStatus.TIMEOUT
            self.sleep(min(self.interval, remaining))

    def wait(self, phase: str, path: str, max_seconds: int) -> None:
        """Block until healthy; raise HealthTimeoutError otherwise."""
        if self.poll(path, max_seconds) is HealthStatus.TIMEOUT:
            raise HealthTimeoutError(phase, max_seconds)
        self.console.print(f"[green]Gateway RUNNING[/] ({phase})")
