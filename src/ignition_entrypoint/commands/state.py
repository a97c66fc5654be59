"""Read-only inspection of the provisioning state on the data volume."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ignition_entrypoint.client.errors import error_handler
from ignition_entrypoint.commands._common import FormatOpt, load_config
from ignition_entrypoint.models.module import CertificateRow, EulaRow
from ignition_entrypoint.models.version import compare_versions
from ignition_entrypoint.output.formatter import output
from ignition_entrypoint.output.tables import certificate_table, eula_table, kv_table
from ignition_entrypoint.state.markers import PersistentState
from ignition_entrypoint.state.store import RowStore


class StateReport(BaseModel):
    image_version: str
    volume_version: str | None = None
    comparison: str | None = None
    commissioned: bool
    row_store: bool
    init_properties: dict[str, str] = Field(default_factory=dict)
    certificates: list[CertificateRow] = Field(default_factory=list)
    eulas: list[EulaRow] = Field(default_factory=list)


@error_handler
def show(fmt: FormatOpt = "table") -> None:
    """Show marker versions, commissioning status, and trusted modules."""
    config = load_config()
    state = PersistentState(config.paths)
    report = StateReport(
        image_version=state.image_version(),
        volume_version=state.read_marker(),
        commissioned=state.is_commissioned(),
        row_store=state.row_store_exists(),
        init_properties=state.read_init_properties(),
    )
    if report.row_store:
        report.comparison = compare_versions(
            report.image_version, report.volume_version,
        ).name.lower().replace("_", "-")
        store = RowStore(config.paths.row_store)
        report.certificates = store.certificates()
        report.eulas = store.eulas()

    summary = report.model_dump(
        include={"image_version", "volume_version", "comparison", "commissioned", "row_store"},
    )
    tables = [kv_table(summary, title="Provisioning State")]
    if report.init_properties:
        tables.append(kv_table(report.init_properties, title="init.properties"))
    if report.row_store:
        tables.append(certificate_table(report.certificates))
        tables.append(eula_table(report.eulas))
    output(report, fmt, tables=tables)
