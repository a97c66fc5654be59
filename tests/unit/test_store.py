"""Tests for the configuration-store row access."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from ignition_entrypoint.client.errors import RowStoreError
from ignition_entrypoint.state.store import CERTIFICATES_SEQ, EULAS_SEQ, RowStore

THUMB_A = bytes.fromhex("aa" * 20)
THUMB_B = bytes.fromhex("bb" * 20)


class TestCertificates:
    def test_insert_assigns_sequential_ids(self, row_store: Path):
        store = RowStore(row_store)
        assert store.add_certificate(THUMB_A, "Vendor A") == 1
        assert store.add_certificate(THUMB_B, "Vendor B") == 2
        rows = store.certificates()
        assert [(r.id, r.thumbprint, r.subject_name) for r in rows] == [
            (1, THUMB_A, "Vendor A"),
            (2, THUMB_B, "Vendor B"),
        ]
        assert store.sequence(CERTIFICATES_SEQ) == 2

    def test_duplicate_thumbprint_skipped(self, row_store: Path):
        store = RowStore(row_store)
        assert store.add_certificate(THUMB_A, "Vendor A") == 1
        assert store.add_certificate(THUMB_A, "Vendor A again") is None
        assert len(store.certificates()) == 1
        assert store.sequence(CERTIFICATES_SEQ) == 1

    def test_continues_from_existing_max(self, row_store: Path):
        conn = sqlite3.connect(row_store)
        conn.execute(
            "INSERT INTO CERTIFICATES VALUES (7, ?, 'Existing')", (THUMB_B,)
        )
        conn.commit()
        conn.close()
        assert RowStore(row_store).add_certificate(THUMB_A, "New") == 8

    def test_missing_sequence_row_is_created(self, row_store: Path):
        conn = sqlite3.connect(row_store)
        conn.execute("DELETE FROM SEQUENCES")
        conn.commit()
        conn.close()
        store = RowStore(row_store)
        store.add_certificate(THUMB_A, "Vendor A")
        assert store.sequence(CERTIFICATES_SEQ) == 1


class TestEulas:
    def test_insert_and_dedup(self, row_store: Path):
        store = RowStore(row_store)
        assert store.add_eula("com.example.a", 1234) == 1
        assert store.add_eula("com.example.a", 1234) is None
        assert store.add_eula("com.example.a", 5678) == 2
        assert store.add_eula("com.example.b", 1234) == 3
        assert store.sequence(EULAS_SEQ) == 3
        assert [(r.module_id, r.checksum) for r in store.eulas()] == [
            ("com.example.a", 1234),
            ("com.example.a", 5678),
            ("com.example.b", 1234),
        ]


class TestAtomicity:
    def test_failed_sequence_update_rolls_back_insert(self, row_store: Path):
        conn = sqlite3.connect(row_store)
        conn.execute("DROP TABLE SEQUENCES")
        conn.commit()
        conn.close()
        store = RowStore(row_store)
        with pytest.raises(RowStoreError):
            store.add_certificate(THUMB_A, "Vendor A")
        conn = sqlite3.connect(row_store)
        count = conn.execute("SELECT COUNT(*) FROM CERTIFICATES").fetchone()[0]
        conn.close()
        assert count == 0


class TestErrors:
    def test_missing_database_is_not_created(self, tmp_path: Path):
        db = tmp_path / "db" / "config.idb"
        with pytest.raises(RowStoreError, match="Cannot open"):
            RowStore(db).add_certificate(THUMB_A, "x")
        assert not db.exists()

    def test_missing_table(self, tmp_path: Path):
        db = tmp_path / "config.idb"
        sqlite3.connect(db).close()
        with pytest.raises(RowStoreError, match="database error"):
            RowStore(db).certificates()
