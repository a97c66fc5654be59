"""Shared helpers for CLI commands: options and configuration loading."""

from __future__ import annotations

from typing import Annotated, Optional

import typer
from rich.console import Console

from ignition_entrypoint.config.manager import ConfigManager
from ignition_entrypoint.config.models import EntrypointConfig

console = Console()

# Shared Typer option type aliases
FormatOpt = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format (table, json, yaml)"),
]
RelinkOpt = Annotated[
    Optional[bool],
    typer.Option(
        "--relink/--no-relink",
        help="Replace modules that are already linked (default: GATEWAY_MODULE_RELINK)",
    ),
]


def load_config() -> EntrypointConfig:
    """Resolve the entrypoint configuration from the process environment."""
    return ConfigManager().resolve()
