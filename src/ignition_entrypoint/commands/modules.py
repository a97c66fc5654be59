"""Module registration command."""

from __future__ import annotations

from ignition_entrypoint.client.errors import error_handler
from ignition_entrypoint.commands._common import (
    FormatOpt,
    RelinkOpt,
    console,
    load_config,
)
from ignition_entrypoint.modules.registrar import ModuleRegistrar
from ignition_entrypoint.output.formatter import output
from ignition_entrypoint.output.tables import kv_table
from ignition_entrypoint.state.store import RowStore


@error_handler
def register(
    relink: RelinkOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Link dropped modules and trust their certificates and licenses."""
    config = load_config()
    paths = config.paths
    registrar = ModuleRegistrar(
        paths.module_drop_dir,
        paths.live_module_dir,
        RowStore(paths.row_store),
        relink=config.module_relink if relink is None else relink,
        console=console,
    )
    report = registrar.run()
    summary = {
        "pruned": len(report.pruned),
        "linked": len(report.linked),
        "skipped": len(report.skipped),
        "certificates added": len(report.certificate_ids),
        "EULAs added": len(report.eula_ids),
    }
    output(report, fmt, tables=[kv_table(summary, title="Module Registration")])
