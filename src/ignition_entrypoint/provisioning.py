"""Fresh-install provisioning through an interim gateway."""

from __future__ import annotations

import secrets
import string
import time
from collections.abc import Sequence
from typing import Callable

from rich.console import Console

from ignition_entrypoint.client.commissioning import CommissioningClient, StepResult
from ignition_entrypoint.client.errors import ConfigurationError, ProcessSupervisionError
from ignition_entrypoint.client.gateway import GatewayClient
from ignition_entrypoint.client.health import HealthGate
from ignition_entrypoint.config.constants import (
    ENV_ADMIN_PASSWORD,
    ENV_RANDOM_ADMIN_PASSWORD,
    MAIN_STATUS_PATH,
    RANDOM_PASSWORD_LENGTH,
    RESTORE_SETTLE_SECONDS,
    STATUS_PATH,
)
from ignition_entrypoint.config.models import EntrypointConfig
from ignition_entrypoint.output.tables import kv_table
from ignition_entrypoint.process.supervisor import ProcessSupervisor
from ignition_entrypoint.state.markers import PersistentState


def generate_password(length: int = RANDOM_PASSWORD_LENGTH) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


class FreshProvisioner:
    """Commission a brand-new gateway and optionally stage a backup restore."""

    def __init__(
        self,
        config: EntrypointConfig,
        state: PersistentState,
        supervisor: ProcessSupervisor,
        *,
        client_factory: Callable[[], GatewayClient] = GatewayClient,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        console: Console | None = None,
    ) -> None:
        self.config = config
        self.state = state
        self.supervisor = supervisor
        self.client_factory = client_factory
        self.sleep = sleep
        self.clock = clock
        self.console = console or Console()

    def preflight(self) -> None:
        """Fail before any side effect when no admin password can be resolved."""
        if not self.config.admin.resolvable:
            raise ConfigurationError(
                "Gateway is not initialized and no password option is specified. "
                f"You need to specify either {ENV_ADMIN_PASSWORD} or "
                f"{ENV_RANDOM_ADMIN_PASSWORD}"
            )

    @property
    def restore_required(self) -> bool:
        return self.config.paths.restore_archive.is_file()

    def resolve_password(self) -> str:
        admin = self.config.admin
        if admin.random_password:
            return generate_password()
        return admin.password or ""

    def write_init_properties(self) -> int:
        return self.state.write_init_properties(self.config.init_properties())

    def provision(self, command: Sequence[str]) -> list[StepResult]:
        """Run the whole fresh-install sequence; returns the wizard step results."""
        self.preflight()
        self.state.paths.commissioned_marker.unlink(missing_ok=True)
        self.write_init_properties()

        if self.config.autoaccept_delay:
            self.supervisor.launch_autoaccept(self.config.autoaccept_delay)

        password = self.resolve_password()
        restore = self.restore_required
        paths = self.config.paths

        proc = self.supervisor.spawn(command, paths.provisioning_log)
        with self.client_factory() as client:
            gate = HealthGate(
                client, sleep=self.sleep, clock=self.clock, console=self.console,
            )
            self.console.print("Waiting for commissioning servlet to become active...")
            self.supervisor.await_health(
                proc, gate,
                phase="Commissioning Phase",
                path=STATUS_PATH,
                max_seconds=self.config.commissioning_delay,
            )

            self.console.print("Performing commissioning actions...")
            results = CommissioningClient(client, console=self.console).commission(
                username=self.config.admin.username,
                password=password,
                http_port=self.config.http_port,
                https_port=self.config.https_port,
                use_ssl=bool(self.config.use_ssl),
                start=not restore,
            )
            self.print_summary(password)

            if restore:
                self.sleep(RESTORE_SETTLE_SECONDS)
                self.console.print(
                    "Commissioning completed, awaiting initial gateway startup prior to restore..."
                )
                self.supervisor.await_health(
                    proc, gate,
                    phase="Startup",
                    path=MAIN_STATUS_PATH,
                    max_seconds=self.config.startup_delay,
                )
                try:
                    self.supervisor.restore(paths.restore_archive, cwd=paths.install_dir)
                except ProcessSupervisionError:
                    self.supervisor.abandon(proc)
                    raise

        self.supervisor.terminate(proc)
        self.state.mark_commissioned()
        return results

    def print_summary(self, password: str) -> None:
        summary: dict[str, object] = {"GATEWAY_ADMIN_USERNAME": self.config.admin.username}
        if self.config.admin.random_password:
            summary["GATEWAY_RANDOM_ADMIN_PASSWORD"] = password
        summary["GATEWAY_HTTP_PORT"] = self.config.http_port
        summary["GATEWAY_HTTPS_PORT"] = self.config.https_port
        self.console.print(kv_table(summary, title="Commissioning"))
