"""Row-store access for the gateway's embedded configuration database."""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from ignition_entrypoint.client.errors import RowStoreError
from ignition_entrypoint.models.module import CertificateRow, EulaRow

CERTIFICATES_SEQ = "CERTIFICATES_SEQ"
EULAS_SEQ = "EULAS_SEQ"


class RowStore:
    """Certificate trust and EULA bookkeeping in ``config.idb``.

    The database is owned by the gateway; this class never creates it.
    Each accepted insert and its sequence update commit together.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path

    @contextmanager
    def connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Open the existing database with automatic cleanup."""
        uri = f"{self.db_path.resolve().as_uri()}?mode=rw"
        try:
            conn = sqlite3.connect(uri, uri=True, isolation_level=None)
        except sqlite3.Error as exc:
            raise RowStoreError(
                f"Cannot open configuration database {self.db_path}: {exc}"
            ) from exc
        try:
            yield conn
        except sqlite3.Error as exc:
            raise RowStoreError(
                f"Configuration database error in {self.db_path}: {exc}"
            ) from exc
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Hold the write lock from the first read until commit."""
        with self.connection() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                conn.execute("COMMIT")
            except BaseException:
                conn.execute("ROLLBACK")
                raise

    @staticmethod
    def _advance_sequence(conn: sqlite3.Connection, name: str, value: int) -> None:
        cursor = conn.execute("UPDATE SEQUENCES SET val = ? WHERE name = ?", (value, name))
        if cursor.rowcount == 0:
            conn.execute("INSERT INTO SEQUENCES (name, val) VALUES (?, ?)", (name, value))

    def add_certificate(self, thumbprint: bytes, subject_name: str) -> int | None:
        """Trust a certificate; return its new id, or None if already trusted."""
        with self.transaction() as conn:
            exists = conn.execute(
                "SELECT 1 FROM CERTIFICATES WHERE THUMBPRINT = ?", (thumbprint,)
            ).fetchone()
            if exists:
                return None
            (next_id,) = conn.execute(
                "SELECT COALESCE(MAX(CERTIFICATES_ID) + 1, 1) FROM CERTIFICATES"
            ).fetchone()
            conn.execute(
                "INSERT INTO CERTIFICATES (CERTIFICATES_ID, THUMBPRINT, SUBJECTNAME)"
                " VALUES (?, ?, ?)",
                (next_id, thumbprint, subject_name),
            )
            self._advance_sequence(conn, CERTIFICATES_SEQ, next_id)
            return int(next_id)

    def add_eula(self, module_id: str, checksum: int) -> int | None:
        """Accept a module license; return its new id, or None if already accepted."""
        with self.transaction() as conn:
            exists = conn.execute(
                "SELECT 1 FROM EULAS WHERE MODULEID = ? AND CRC = ?",
                (module_id, checksum),
            ).fetchone()
            if exists:
                return None
            (next_id,) = conn.execute(
                "SELECT COALESCE(MAX(EULAS_ID) + 1, 1) FROM EULAS"
            ).fetchone()
            conn.execute(
                "INSERT INTO EULAS (EULAS_ID, MODULEID, CRC) VALUES (?, ?, ?)",
                (next_id, module_id, checksum),
            )
            self._advance_sequence(conn, EULAS_SEQ, next_id)
            return int(next_id)

    def certificates(self) -> list[CertificateRow]:
        with self.connection() as conn:
            rows = conn.execute(
                "SELECT CERTIFICATES_ID, THUMBPRINT, SUBJECTNAME FROM CERTIFICATES"
                " ORDER BY CERTIFICATES_ID"
            ).fetchall()
        return [
            CertificateRow(id=r[0], thumbprint=bytes(r[1]), subject_name=r[2] or "")
            for r in rows
        ]

    def eulas(self) -> list[EulaRow]:
        with self.connection() as conn:
            rows = conn.execute(
                "SELECT EULAS_ID, MODULEID, CRC FROM EULAS ORDER BY EULAS_ID"
            ).fetchall()
        return [EulaRow(id=r[0], module_id=r[1], checksum=r[2]) for r in rows]

    def sequence(self, name: str) -> int | None:
        with self.connection() as conn:
            row = conn.execute(
                "SELECT val FROM SEQUENCES WHERE name = ?", (name,)
            ).fetchone()
        return None if row is None else int(row[0])
