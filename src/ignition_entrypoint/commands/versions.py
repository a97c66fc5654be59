"""Version comparison command."""

from __future__ import annotations

from typing import Annotated

import typer

from ignition_entrypoint.client.errors import error_handler
from ignition_entrypoint.commands._common import FormatOpt
from ignition_entrypoint.models.version import compare_versions
from ignition_entrypoint.output.formatter import output
from ignition_entrypoint.output.tables import kv_table


@error_handler
def compare(
    image: Annotated[str, typer.Argument(help="Version shipped in the image")],
    volume: Annotated[
        str, typer.Argument(help="Version recorded on the data volume"),
    ] = "",
    fmt: FormatOpt = "table",
) -> None:
    """Classify an image version against a volume version."""
    result = compare_versions(image, volume)
    data = {
        "image": image,
        "volume": volume,
        "result": result.name.lower().replace("_", "-"),
        "code": result.value,
    }
    output(data, fmt, tables=[kv_table(data, title="Version Comparison")])
    if result.is_fatal:
        raise typer.Exit(1)
