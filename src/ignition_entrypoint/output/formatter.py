"""Output dispatcher that renders command results as tables, JSON, or YAML."""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from rich.console import Console, RenderableType

console = Console()

FORMATS = ("table", "json", "yaml")


def _plain(data: Any) -> Any:
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    return data


def output_json(data: Any) -> None:
    """Print data as formatted JSON."""
    console.print_json(json.dumps(_plain(data), indent=2, default=str))


def output_yaml(data: Any) -> None:
    """Print data as YAML."""
    import yaml

    console.print(yaml.safe_dump(_plain(data), default_flow_style=False, sort_keys=False), end="")


def output(
    data: Any,
    fmt: str = "table",
    *,
    tables: Sequence[RenderableType] = (),
) -> None:
    """Dispatch output to the appropriate formatter.

    ``tables`` are the pre-built renderables used for the table format.
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown output format '{fmt}', expected one of: {', '.join(FORMATS)}")
    if fmt == "json":
        output_json(data)
    elif fmt == "yaml":
        output_yaml(data)
    elif tables:
        for table in tables:
            console.print(table)
    else:
        console.print(_plain(data))
