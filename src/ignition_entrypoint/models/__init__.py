"""Pydantic data models for versions, modules, and configuration-store rows."""

from ignition_entrypoint.models.module import CertificateRow, EulaRow, ModuleMetadata
from ignition_entrypoint.models.version import (
    Version,
    VersionComparison,
    compare_versions,
)

__all__ = [
    "CertificateRow",
    "EulaRow",
    "ModuleMetadata",
    "Version",
    "VersionComparison",
    "compare_versions",
]
