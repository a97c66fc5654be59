"""Tests for .modl archive metadata extraction."""

from __future__ import annotations

import zipfile
import zlib
from pathlib import Path

import pytest
from cryptography.hazmat.primitives import hashes

from ignition_entrypoint.client.errors import ModuleExtractionError
from ignition_entrypoint.modules.archive import (
    license_checksum,
    module_identifier,
    read_module,
)


class TestReadModule:
    def test_der_bundle(self, tmp_path: Path, make_module):
        path = make_module(
            tmp_path, "Example.modl",
            module_id="com.example.alpha", common_name="Alpha Modules",
            license_text="<html>Alpha EULA</html>",
        )
        meta = read_module(path)
        cert = make_module.certificates["Alpha Modules"]
        assert meta.thumbprint == cert.fingerprint(hashes.SHA1())
        assert meta.thumbprint_hex == cert.fingerprint(hashes.SHA1()).hex()
        assert meta.subject_name == "Alpha Modules"
        assert meta.module_id == "com.example.alpha"
        assert meta.checksum == zlib.crc32(b"<html>Alpha EULA</html>")
        assert meta.filename == "Example.modl"

    def test_pem_bundle(self, tmp_path: Path, make_module):
        path = make_module(tmp_path, "Pem.modl", common_name="Pem Modules", pem=True)
        meta = read_module(path)
        assert meta.subject_name == "Pem Modules"
        assert len(meta.thumbprint) == 20

    def test_quotes_stripped_from_subject(self, tmp_path: Path, make_module):
        path = make_module(tmp_path, "Quoted.modl", common_name='"Quoted" Vendor')
        assert read_module(path).subject_name == "Quoted Vendor"

    def test_missing_entry(self, tmp_path: Path):
        path = tmp_path / "Broken.modl"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("module.xml", "<modules><module><id>x</id></module></modules>")
        with pytest.raises(ModuleExtractionError, match="missing certificates.p7b"):
            read_module(path)

    def test_not_a_zip(self, tmp_path: Path):
        path = tmp_path / "Garbage.modl"
        path.write_bytes(b"not a zip archive")
        with pytest.raises(ModuleExtractionError, match="Cannot read module"):
            read_module(path)

    def test_unparseable_certificates(self, tmp_path: Path):
        path = tmp_path / "BadCert.modl"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("certificates.p7b", b"\x00\x01\x02")
            archive.writestr("license.html", "eula")
            archive.writestr("module.xml", "<modules><module><id>x</id></module></modules>")
        with pytest.raises(ModuleExtractionError, match="Cannot parse certificates.p7b"):
            read_module(path)


class TestHelpers:
    def test_checksum_is_unsigned(self):
        value = license_checksum(b"some license text")
        assert 0 <= value <= 0xFFFFFFFF
        assert value == zlib.crc32(b"some license text")

    def test_module_identifier(self):
        xml = b"<modules><module><id>com.acme.thing</id></module></modules>"
        assert module_identifier(xml) == "com.acme.thing"

    def test_module_identifier_missing(self):
        with pytest.raises(ModuleExtractionError, match="No <id>"):
            module_identifier(b"<modules><module/></modules>")

    def test_module_identifier_malformed(self):
        with pytest.raises(ModuleExtractionError, match="Malformed"):
            module_identifier(b"<modules>")
