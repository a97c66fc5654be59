"""Durable boot state kept on the gateway data volume."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from rich.console import Console

from ignition_entrypoint.config.models import EntrypointPaths

_VERSION_KEY = "gateway.version"


def _atomic_write(path: Path, text: str) -> None:
    """Write to a temp file, then rename over ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp = path.with_name(path.name + ".tmp")
    try:
        temp.write_text(text)
        os.replace(temp, path)
    finally:
        temp.unlink(missing_ok=True)


class PersistentState:
    """Marker files, init properties, and the row-store location."""

    def __init__(self, paths: EntrypointPaths, console: Console | None = None) -> None:
        self.paths = paths
        self.console = console or Console()

    def image_version(self) -> str:
        """Return the version the image was built with, or ``""`` when unknown."""
        try:
            lines = self.paths.install_info.read_text().splitlines()
        except FileNotFoundError:
            return ""
        for line in lines:
            key, sep, value = line.partition("=")
            if sep and key.strip() == _VERSION_KEY:
                return value.strip()
        return ""

    def row_store_exists(self) -> bool:
        return self.paths.row_store.is_file()

    def read_marker(self) -> str | None:
        try:
            return self.paths.upgrade_marker.read_text().strip()
        except FileNotFoundError:
            return None

    def write_marker(self, version: str) -> None:
        _atomic_write(self.paths.upgrade_marker, f"{version}\n")

    def is_commissioned(self) -> bool:
        return self.paths.commissioned_marker.exists()

    def mark_commissioned(self) -> None:
        self.paths.commissioned_marker.parent.mkdir(parents=True, exist_ok=True)
        self.paths.commissioned_marker.touch()

    def ensure_temp_dir(self) -> None:
        if not self.paths.temp_dir.is_dir():
            self.console.print("Creating extra temp folder within data volume")
            self.paths.temp_dir.mkdir(parents=True, exist_ok=True)

    def write_init_properties(self, properties: Iterable[tuple[str, str]]) -> int:
        """Replace init.properties with ``properties``; return the count written.

        An existing file is removed first so stale keys never survive.
        """
        target = self.paths.init_properties
        target.unlink(missing_ok=True)
        lines = []
        for key, value in properties:
            self.console.print(f"Added Init Setting {key}={value}")
            lines.append(f"{key}={value}\n")
        if lines:
            _atomic_write(target, "".join(lines))
        return len(lines)

    def read_init_properties(self) -> dict[str, str]:
        try:
            text = self.paths.init_properties.read_text()
        except FileNotFoundError:
            return {}
        props: dict[str, str] = {}
        for line in text.splitlines():
            key, sep, value = line.partition("=")
            if sep:
                props[key] = value
        return props
