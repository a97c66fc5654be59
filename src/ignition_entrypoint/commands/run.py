"""The container entrypoint command."""

from __future__ import annotations

from typing import Annotated

import typer

from ignition_entrypoint.client.errors import error_handler
from ignition_entrypoint.commands._common import console, load_config
from ignition_entrypoint.orchestrator import (
    UpgradeOrchestrator,
    gateway_command,
    is_gateway_command,
)
from ignition_entrypoint.process.supervisor import exec_foreground


@error_handler
def run(
    command: Annotated[
        list[str],
        typer.Argument(help="Command to exec once provisioning is complete"),
    ],
) -> None:
    """Provision or upgrade the gateway volume, then exec COMMAND."""
    if is_gateway_command(command):
        config = load_config()
        command = gateway_command(command, config.memory)
        UpgradeOrchestrator(config, console=console).boot(command)
        console.print("Starting Ignition Gateway...")
    exec_foreground(command)
