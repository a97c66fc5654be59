"""Root Typer app with global options and command registration."""

from __future__ import annotations

from typing import Optional

import typer

from ignition_entrypoint import __version__
from ignition_entrypoint.commands import modules, run, state, versions

app = typer.Typer(
    name="ignition-entrypoint",
    help="First-boot and upgrade orchestrator for the Ignition gateway container.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"ignition-entrypoint {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    """Ignition container entrypoint: provision, upgrade and register modules, then exec."""


# Register commands
app.command(
    "run",
    add_help_option=False,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)(run.run)
app.command("compare-versions")(versions.compare)
app.command("register-modules")(modules.register)
app.command("state")(state.show)


def main() -> None:
    app()
