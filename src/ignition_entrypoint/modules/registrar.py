"""Third-party module registration: symlinks plus certificate and EULA rows."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from rich.console import Console

from ignition_entrypoint.client.errors import ModuleExtractionError
from ignition_entrypoint.config.constants import MODULE_SUFFIX
from ignition_entrypoint.modules.archive import read_module
from ignition_entrypoint.state.store import RowStore


class RegistrationReport(BaseModel):
    """What a registrar run changed."""

    pruned: list[str] = Field(default_factory=list)
    linked: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    certificate_ids: list[int] = Field(default_factory=list)
    eula_ids: list[int] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.pruned or self.linked or self.certificate_ids or self.eula_ids)


class ModuleRegistrar:
    """Link dropped modules into the gateway and trust their certificates.

    Extraction and row-store errors propagate and end the run; symlinks
    and rows committed before the failure are kept.
    """

    def __init__(
        self,
        drop_dir: Path,
        live_dir: Path,
        store: RowStore,
        *,
        relink: bool = False,
        console: Console | None = None,
    ) -> None:
        self.drop_dir = drop_dir
        self.live_dir = live_dir
        self.store = store
        self.relink = relink
        self.console = console or Console()

    def prune_dangling(self) -> list[str]:
        """Remove symlinks in the live module directory whose target is gone."""
        removed: list[str] = []
        if not self.live_dir.is_dir():
            return removed
        for entry in sorted(self.live_dir.iterdir()):
            if entry.is_symlink() and not entry.exists():
                self.console.print(f"Removing invalid symlink for {entry}")
                entry.unlink()
                removed.append(entry.name)
        return removed

    def discover(self) -> list[Path]:
        return sorted(
            p for p in self.drop_dir.iterdir()
            if p.suffix == MODULE_SUFFIX and p.is_file()
        )

    def run(self) -> RegistrationReport:
        report = RegistrationReport()
        if not self.drop_dir.is_dir():
            return report
        self.console.print("Searching for third-party modules...")

        report.pruned = self.prune_dangling()
        self.live_dir.mkdir(parents=True, exist_ok=True)

        for module in self.discover():
            dest = self.live_dir / module.name
            exists = dest.is_symlink() or dest.exists()
            if exists and not self.relink:
                self.console.print(f"Skipping existing module: {module.name}")
                report.skipped.append(module.name)
                continue

            metadata = read_module(module)
            if exists:
                self.console.print(f"Relinking Module: {module.name}")
            else:
                self.console.print(f"Linking Module: {module.name}")
            try:
                if exists:
                    dest.unlink()
                dest.symlink_to(module)
            except OSError as exc:
                raise ModuleExtractionError(
                    f"Cannot link {module.name} into {self.live_dir}: {exc}"
                ) from exc
            report.linked.append(module.name)

            self.console.print(f"  Thumbprint: {metadata.thumbprint_hex}")
            self.console.print(f"  Subject Name: {metadata.subject_name}")
            cert_id = self.store.add_certificate(metadata.thumbprint, metadata.subject_name)
            if cert_id is None:
                self.console.print(
                    "  Thumbprint already found in CERTIFICATES table, skipping INSERT"
                )
            else:
                self.console.print(f"  Accepting Certificate as CERTIFICATES_ID={cert_id}")
                report.certificate_ids.append(cert_id)

            eula_id = self.store.add_eula(metadata.module_id, metadata.checksum)
            if eula_id is None:
                self.console.print(
                    "  License EULA already found in EULAS table, skipping INSERT"
                )
            else:
                self.console.print(
                    f"  Accepting License on your behalf as EULAS_ID={eula_id}"
                )
                report.eula_ids.append(eula_id)
        return report
