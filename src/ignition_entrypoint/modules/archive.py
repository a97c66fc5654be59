"""Read certificate and license metadata out of a ``.modl`` archive."""

from __future__ import annotations

import zipfile
import zlib
from pathlib import Path
from xml.etree import ElementTree

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.serialization import pkcs7
from cryptography.x509.oid import NameOID

from ignition_entrypoint.client.errors import ModuleExtractionError
from ignition_entrypoint.models.module import ModuleMetadata

CERTIFICATES_ENTRY = "certificates.p7b"
LICENSE_ENTRY = "license.html"
MODULE_XML_ENTRY = "module.xml"


def load_certificate_chain(data: bytes) -> list[x509.Certificate]:
    """Load a PKCS#7 bundle in either DER or PEM encoding."""
    if data.lstrip().startswith(b"-----BEGIN"):
        return pkcs7.load_pem_pkcs7_certificates(data)
    return pkcs7.load_der_pkcs7_certificates(data)


def subject_common_name(cert: x509.Certificate) -> str:
    attrs = cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attrs:
        return ""
    value = attrs[0].value
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")
    return value.replace('"', "")


def license_checksum(text: bytes) -> int:
    """CRC-32 of the license text, as an unsigned integer."""
    return zlib.crc32(text) & 0xFFFFFFFF


def module_identifier(xml: bytes) -> str:
    try:
        root = ElementTree.fromstring(xml)
    except ElementTree.ParseError as exc:
        raise ModuleExtractionError(f"Malformed {MODULE_XML_ENTRY}: {exc}") from exc
    node = root if root.tag == "id" else root.find(".//id")
    if node is None or not (node.text or "").strip():
        raise ModuleExtractionError(f"No <id> element found in {MODULE_XML_ENTRY}")
    return node.text.strip()


def read_module(path: Path) -> ModuleMetadata:
    """Extract the signing certificate and license details of a module."""
    try:
        with zipfile.ZipFile(path) as archive:
            names = set(archive.namelist())
            for entry in (CERTIFICATES_ENTRY, LICENSE_ENTRY, MODULE_XML_ENTRY):
                if entry not in names:
                    raise ModuleExtractionError(f"{path.name} is missing {entry}")
            cert_data = archive.read(CERTIFICATES_ENTRY)
            license_text = archive.read(LICENSE_ENTRY)
            module_xml = archive.read(MODULE_XML_ENTRY)
    except (zipfile.BadZipFile, OSError) as exc:
        raise ModuleExtractionError(f"Cannot read module {path.name}: {exc}") from exc

    try:
        chain = load_certificate_chain(cert_data)
    except ValueError as exc:
        raise ModuleExtractionError(
            f"Cannot parse {CERTIFICATES_ENTRY} in {path.name}: {exc}"
        ) from exc
    if not chain:
        raise ModuleExtractionError(f"{CERTIFICATES_ENTRY} in {path.name} is empty")
    leaf = chain[0]

    return ModuleMetadata(
        path=path,
        thumbprint=leaf.fingerprint(hashes.SHA1()),
        subject_name=subject_common_name(leaf),
        module_id=module_identifier(module_xml),
        checksum=license_checksum(license_text),
    )
