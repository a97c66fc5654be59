"""Shared test fixtures."""

from __future__ import annotations

import io
import sqlite3
import zipfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs7
from cryptography.x509.oid import NameOID
from rich.console import Console

from ignition_entrypoint.config.models import EntrypointConfig, EntrypointPaths

SCHEMA = """
CREATE TABLE CERTIFICATES (CERTIFICATES_ID INTEGER PRIMARY KEY, THUMBPRINT BLOB, SUBJECTNAME TEXT);
CREATE TABLE EULAS (EULAS_ID INTEGER PRIMARY KEY, MODULEID TEXT, CRC INTEGER);
CREATE TABLE SEQUENCES (name TEXT PRIMARY KEY, val INTEGER);
INSERT INTO SEQUENCES (name, val) VALUES ('CERTIFICATES_SEQ', 0);
INSERT INTO SEQUENCES (name, val) VALUES ('EULAS_SEQ', 0);
"""


@pytest.fixture
def paths(tmp_path: Path) -> EntrypointPaths:
    """Return entrypoint paths rooted in a temp directory."""
    return EntrypointPaths(
        install_dir=tmp_path / "install",
        data_dir=tmp_path / "data",
        log_dir=tmp_path / "logs",
        module_drop_dir=tmp_path / "modules",
        live_module_dir=tmp_path / "user-lib" / "modules",
        restore_archive=tmp_path / "restore.gwbk",
    )


@pytest.fixture
def config(paths: EntrypointPaths) -> EntrypointConfig:
    """A resolved config with an admin password and fast health waits."""
    return EntrypointConfig(
        paths=paths,
        admin={"username": "admin", "password": "password"},
        startup_delay=3,
        commissioning_delay=3,
    )


@pytest.fixture
def console() -> Console:
    """A console that records output instead of printing it."""
    return Console(file=io.StringIO(), width=200, record=True)


def write_image_version(paths: EntrypointPaths, version: str) -> None:
    paths.install_info.parent.mkdir(parents=True, exist_ok=True)
    paths.install_info.write_text(
        f"gateway.edition=standard\ngateway.version={version}\n"
    )


def create_row_store(db_path: Path) -> Path:
    """Create a minimal gateway configuration database."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()
    return db_path


@pytest.fixture
def row_store(paths: EntrypointPaths) -> Path:
    return create_row_store(paths.row_store)


def make_certificate(common_name: str) -> x509.Certificate:
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([
        x509.NameAttribute(NameOID.COMMON_NAME, common_name),
        x509.NameAttribute(NameOID.ORGANIZATIONAL_UNIT_NAME, "Modules"),
    ])
    now = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=365))
        .sign(key, hashes.SHA256())
    )


ModuleFactory = Callable[..., Path]


@pytest.fixture
def make_module() -> ModuleFactory:
    """Factory that writes a signed ``.modl`` archive and returns its path."""
    certs: dict[str, x509.Certificate] = {}

    def _make(
        directory: Path,
        filename: str,
        *,
        module_id: str = "com.example.module",
        common_name: str = "Example Modules",
        license_text: str = "<html>License</html>",
        pem: bool = False,
    ) -> Path:
        cert = certs.setdefault(common_name, make_certificate(common_name))
        encoding = serialization.Encoding.PEM if pem else serialization.Encoding.DER
        bundle = pkcs7.serialize_certificates([cert], encoding)
        module_xml = (
            "<?xml version='1.0'?><modules><module>"
            f"<id>{module_id}</id><name>Example</name><version>1.0.0</version>"
            "</module></modules>"
        )
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("certificates.p7b", bundle)
            archive.writestr("license.html", license_text)
            archive.writestr("module.xml", module_xml)
        return path

    _make.certificates = certs  # type: ignore[attr-defined]
    return _make


@pytest.fixture
def set_image_version(paths: EntrypointPaths) -> Callable[[str], None]:
    """Write ``lib/install-info.txt`` with the given gateway version."""
    return lambda version: write_image_version(paths, version)
