"""Boot classification and the upgrade/provisioning state machine."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel
from rich.console import Console

from ignition_entrypoint.client.errors import UpgradeToolError, VersionError
from ignition_entrypoint.config.constants import (
    GATEWAY_COMMAND,
    UPGRADER_CLASS,
    UPGRADER_CONFIG,
)
from ignition_entrypoint.config.models import EntrypointConfig, MemorySettings
from ignition_entrypoint.models.version import (
    Version,
    VersionComparison,
    compare_versions,
)
from ignition_entrypoint.modules.registrar import ModuleRegistrar, RegistrationReport
from ignition_entrypoint.process.supervisor import ProcessSupervisor
from ignition_entrypoint.provisioning import FreshProvisioner
from ignition_entrypoint.state.markers import PersistentState
from ignition_entrypoint.state.store import RowStore


class BootState(Enum):
    FRESH = "fresh"
    NO_CHANGE = "no-change"
    MINOR_UPGRADE = "minor-upgrade"
    MAJOR_UPGRADE = "major-upgrade"


class BootDecision(BaseModel):
    """How this container start relates to the state on the volume."""

    state: BootState
    image_version: str
    volume_version: str | None = None
    comparison: VersionComparison | None = None

    @property
    def runs_upgrader(self) -> bool:
        return self.state in (BootState.MINOR_UPGRADE, BootState.MAJOR_UPGRADE)


def is_gateway_command(command: Sequence[str]) -> bool:
    return bool(command) and command[0] == GATEWAY_COMMAND


def gateway_command(command: Sequence[str], memory: MemorySettings) -> list[str]:
    """Append wrapper memory options when launching the gateway itself."""
    cmd = list(command)
    if is_gateway_command(cmd):
        cmd.extend(memory.wrapper_options())
    return cmd


def upgrader_command(config: EntrypointConfig, image_version: str) -> list[str]:
    paths = config.paths
    return [
        "java",
        "-classpath",
        f"lib/core/common/common-{image_version}.jar",
        UPGRADER_CLASS,
        ".",
        str(paths.data_dir),
        str(paths.log_dir),
        f"file={UPGRADER_CONFIG}",
    ]


class UpgradeOrchestrator:
    """Decide what a boot needs, perform it, and always end in module registration.

    The marker is only advanced after the upgrader (or the first-boot write)
    succeeds, so an interrupted upgrade is detected again on the next start.
    """

    def __init__(
        self,
        config: EntrypointConfig,
        *,
        state: PersistentState | None = None,
        supervisor: ProcessSupervisor | None = None,
        provisioner: FreshProvisioner | None = None,
        registrar: ModuleRegistrar | None = None,
        console: Console | None = None,
    ) -> None:
        self.config = config
        self.console = console or Console()
        self.state = state or PersistentState(config.paths, console=self.console)
        self.supervisor = supervisor or ProcessSupervisor(console=self.console)
        self.provisioner = provisioner or FreshProvisioner(
            config, self.state, self.supervisor, console=self.console,
        )
        self.registrar = registrar or ModuleRegistrar(
            config.paths.module_drop_dir,
            config.paths.live_module_dir,
            RowStore(config.paths.row_store),
            relink=config.module_relink,
            console=self.console,
        )

    def classify(self) -> BootDecision:
        """Read the volume and classify this boot. Has no side effects."""
        image = self.state.image_version()
        if Version.parse(image) is None:
            raise VersionError(
                f"Unexpected version syntax found in image ({image})",
                VersionComparison.INVALID.value,
            )
        if not self.state.row_store_exists():
            return BootDecision(state=BootState.FRESH, image_version=image)

        volume = self.state.read_marker()
        comparison = compare_versions(image, volume)
        if comparison is VersionComparison.INVALID:
            raise VersionError(
                f"Unexpected version syntax found in image ({image}) "
                f"or volume ({volume or ''})",
                comparison.value,
            )
        if comparison is VersionComparison.DOWNGRADE_INVALID:
            raise VersionError(
                f"Version mismatch on existing volume ({volume}) versus image ({image}), "
                "Ignition image version must be greater or equal to volume version.",
                comparison.value,
            )
        states = {
            VersionComparison.EQUAL: BootState.NO_CHANGE,
            VersionComparison.MAJOR_UPGRADE: BootState.MAJOR_UPGRADE,
            VersionComparison.MINOR_UPGRADE: BootState.MINOR_UPGRADE,
        }
        return BootDecision(
            state=states[comparison],
            image_version=image,
            volume_version=volume,
            comparison=comparison,
        )

    def run_upgrader(self, decision: BootDecision) -> None:
        self.console.print(
            "Detected Ignition Volume from prior version "
            f"({decision.volume_version or 'unknown'}), running Upgrader"
        )
        returncode = self.supervisor.run(
            upgrader_command(self.config, decision.image_version),
            cwd=self.config.paths.install_dir,
        )
        if returncode != 0:
            raise UpgradeToolError(returncode)

    def check_for_upgrade(self) -> BootDecision:
        """Classify the boot, run the upgrader if needed, and advance the marker."""
        decision = self.classify()
        self.state.ensure_temp_dir()
        if decision.state is BootState.FRESH:
            self.provisioner.preflight()
        elif decision.runs_upgrader:
            self.run_upgrader(decision)
        if decision.state is not BootState.NO_CHANGE:
            self.state.write_marker(decision.image_version)
        return decision

    def boot(self, command: Sequence[str]) -> tuple[BootDecision, RegistrationReport]:
        """Run everything that must happen before the gateway is exec'd."""
        decision = self.check_for_upgrade()
        self.console.print(f"Boot classified as [bold]{decision.state.value}[/]")
        if decision.state is BootState.FRESH:
            self.provisioner.provision(command)
        report = self.registrar.run()
        return decision, report
