"""Rich table rendering helpers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from rich.table import Table

from ignition_entrypoint.models.module import CertificateRow, EulaRow


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def make_table(
    title: str | None,
    columns: Sequence[str],
    rows: Sequence[Sequence[Any]],
) -> Table:
    """Build a Rich Table from column headers and row data."""
    table = Table(title=title)
    for col in columns:
        table.add_column(col, no_wrap=False)
    for row in rows:
        table.add_row(*(_cell(cell) for cell in row))
    return table


def kv_table(data: dict[str, Any], *, title: str | None = None) -> Table:
    """Render a key-value dict as a two-column table."""
    table = Table(title=title, show_header=False)
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, _cell(value))
    return table


def certificate_table(rows: Sequence[CertificateRow]) -> Table:
    return make_table(
        "Trusted Certificates",
        ["ID", "Thumbprint", "Subject Name"],
        [[r.id, r.thumbprint_hex, r.subject_name] for r in rows],
    )


def eula_table(rows: Sequence[EulaRow]) -> Table:
    return make_table(
        "Accepted EULAs",
        ["ID", "Module ID", "CRC"],
        [[r.id, r.module_id, r.checksum] for r in rows],
    )
