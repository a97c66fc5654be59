"""Commissioning wizard driver for a brand-new gateway."""

from __future__ import annotations

import hashlib
import time
from typing import Any, Callable

from pydantic import BaseModel
from rich.console import Console

from ignition_entrypoint.client.errors import EntrypointError
from ignition_entrypoint.client.gateway import GatewayClient


class StepResult(BaseModel):
    """Outcome of one wizard step. Failures are reported, not raised."""

    step: str
    ok: bool
    status_code: int | None = None
    error: str | None = None


def make_salt(now: Callable[[], float] = time.time) -> str:
    """Eight hex characters derived from the current epoch second."""
    return hashlib.sha256(str(int(now())).encode()).hexdigest()[:8]


def hash_password(password: str, salt: str) -> str:
    """Return the wizard's ``[salt]sha256(password + salt)`` form."""
    digest = hashlib.sha256(f"{password}{salt}".encode()).hexdigest()
    return f"[{salt}]{digest}"


def eula_payload() -> dict[str, Any]:
    return {"id": "license", "step": "eula", "data": {"accept": True}}


def auth_payload(username: str, hashed_password: str) -> dict[str, Any]:
    return {
        "id": "authentication",
        "step": "authSetup",
        "data": {"username": username, "password": hashed_password},
    }


def connections_payload(http_port: int, https_port: int, use_ssl: bool) -> dict[str, Any]:
    return {
        "id": "connections",
        "step": "connections",
        "data": {"http": http_port, "https": https_port, "useSSL": use_ssl},
    }


def finalize_payload(start: bool) -> dict[str, Any]:
    return {"id": "finished", "data": {"start": start}}


class CommissioningClient:
    """Run the four wizard steps in order, one POST each.

    Steps are not retried and a failed step does not stop the sequence.
    The admin password must already be resolved by the caller.
    """

    def __init__(
        self,
        client: GatewayClient,
        *,
        console: Console | None = None,
        now: Callable[[], float] = time.time,
    ) -> None:
        self.client = client
        self.console = console or Console()
        self.now = now

    def _submit(self, payload: dict[str, Any]) -> StepResult:
        name = payload["id"]
        try:
            response = self.client.post_step(payload)
        except EntrypointError as exc:
            self.console.print(f"  [yellow]Warning: commissioning step '{name}' failed: {exc}[/]")
            return StepResult(step=name, ok=False, error=str(exc))
        return StepResult(step=name, ok=True, status_code=response.status_code)

    def commission(
        self,
        *,
        username: str,
        password: str,
        http_port: int,
        https_port: int,
        use_ssl: bool,
        start: bool,
    ) -> list[StepResult]:
        hashed = hash_password(password, make_salt(self.now))
        return [
            self._submit(eula_payload()),
            self._submit(auth_payload(username, hashed)),
            self._submit(connections_payload(http_port, https_port, use_ssl)),
            self._submit(finalize_payload(start)),
        ]
