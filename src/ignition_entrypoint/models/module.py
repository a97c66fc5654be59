"""Module archive metadata and configuration-store rows."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_serializer


class ModuleMetadata(BaseModel):
    """Trust and license details extracted from a ``.modl`` archive."""

    model_config = ConfigDict(frozen=True)

    path: Path
    thumbprint: bytes
    subject_name: str
    module_id: str
    checksum: int

    @field_serializer("thumbprint")
    def serialize_thumbprint(self, value: bytes) -> str:
        return value.hex()

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def thumbprint_hex(self) -> str:
        return self.thumbprint.hex()


class CertificateRow(BaseModel):
    """A row of the CERTIFICATES table."""

    id: int
    thumbprint: bytes
    subject_name: str

    @field_serializer("thumbprint")
    def serialize_thumbprint(self, value: bytes) -> str:
        return value.hex()

    @property
    def thumbprint_hex(self) -> str:
        return self.thumbprint.hex()


class EulaRow(BaseModel):
    """A row of the EULAS table."""

    id: int
    module_id: str
    checksum: int
