"""
Database Schema and Operations for the Patch Catalog (patches.db)
SQLite database storing imported patches, their banks and the links between them.
"""

import json
import logging
import sqlite3
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional, Dict, Any

from .config import db_path as configured_db_path
from .models import PatchUpdate

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


@dataclass
class Patch:
    """Represents a single imported patch file."""
    path: str
    name: str
    checksum: str
    loved: bool = False
    category: str = ""
    tags: List[str] = field(default_factory=list)
    bank: str = ""
    library: str = ""
    custom: bool = False


@dataclass
class Bank:
    """A named group of patches discovered under one marker file."""
    name: str
    library: str
    custom: bool = False
    id: Optional[int] = None


# SQLite has no boolean type; every read and write goes through these two.
def _to_db_bool(value: bool) -> int:
    return 1 if value else 0


def _from_db_bool(value: Any) -> bool:
    return bool(value)


def _row_to_patch(row: sqlite3.Row) -> Patch:
    return Patch(
        path=row['path'],
        name=row['name'],
        checksum=row['checksum'],
        loved=_from_db_bool(row['loved']),
        category=row['category'] or "",
        tags=json.loads(row['tags'] or '[]'),
        bank=row['bank'] or "",
        library=row['library'] or "",
        custom=_from_db_bool(row['custom']),
    )


def _row_to_bank(row: sqlite3.Row) -> Bank:
    return Bank(
        id=row['id'],
        name=row['name'],
        library=row['library'],
        custom=_from_db_bool(row['custom']),
    )


class CatalogDB:
    """SQLite database manager for the patch catalog."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = str(configured_db_path(db_path))
        self.conn: Optional[sqlite3.Connection] = None

    def connect(self) -> None:
        """Open the connection and make sure the schema exists."""
        if self.conn:
            return
        if self.db_path != MEMORY_DB:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.create_schema()

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _connection(self) -> sqlite3.Connection:
        if not self.conn:
            raise RuntimeError("Database not connected")
        return self.conn

    def create_schema(self) -> None:
        """Create the patches, banks and patch_banks tables."""
        conn = self._connection()
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS patches (
                path TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                loved INTEGER NOT NULL DEFAULT 0,
                category TEXT NOT NULL DEFAULT '',
                tags TEXT NOT NULL DEFAULT '[]',
                bank TEXT NOT NULL DEFAULT '',
                library TEXT NOT NULL DEFAULT '',
                checksum TEXT NOT NULL UNIQUE,
                custom INTEGER NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS banks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                library TEXT NOT NULL,
                custom INTEGER NOT NULL DEFAULT 0,
                UNIQUE(name, library)
            );

            CREATE TABLE IF NOT EXISTS patch_banks (
                patch_path TEXT NOT NULL,
                bank_id INTEGER NOT NULL,
                PRIMARY KEY (patch_path, bank_id),
                FOREIGN KEY (patch_path) REFERENCES patches(path) ON DELETE CASCADE,
                FOREIGN KEY (bank_id) REFERENCES banks(id) ON DELETE CASCADE
            );

            CREATE INDEX IF NOT EXISTS idx_patch_banks_bank
            ON patch_banks(bank_id, patch_path);
        """)
        conn.commit()
        logger.debug(f"Schema ready in {self.db_path}")

    # ------------------------------------------------------------------
    # Patches
    # ------------------------------------------------------------------

    def _insert_patch(self, cursor: sqlite3.Cursor, patch: Patch) -> bool:
        """Insert one patch plus its bank link without committing.

        Returns False when an existing row already owns the checksum or path.
        """
        cursor.execute("SELECT 1 FROM patches WHERE checksum = ?", (patch.checksum,))
        if cursor.fetchone():
            return False

        try:
            cursor.execute("""
                INSERT INTO patches (
                    path, name, loved, category, tags, bank, library, checksum, custom
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """, (
                patch.path,
                patch.name,
                _to_db_bool(patch.loved),
                patch.category or "",
                json.dumps(list(patch.tags or [])),
                patch.bank or "",
                patch.library or "",
                patch.checksum,
                _to_db_bool(patch.custom),
            ))
        except sqlite3.IntegrityError:
            cursor.execute("SELECT 1 FROM patches WHERE path = ?", (patch.path,))
            if cursor.fetchone():
                return False
            raise

        if patch.bank:
            bank_id = self._upsert_bank(
                cursor, Bank(name=patch.bank, library=patch.library or "", custom=patch.custom)
            )
            cursor.execute(
                "INSERT OR IGNORE INTO patch_banks (patch_path, bank_id) VALUES (?, ?)",
                (patch.path, bank_id)
            )
        return True

    def save_patch(self, patch: Patch) -> bool:
        """
        Save a patch unless one with the same checksum is already stored.

        The owning bank is created on demand and linked to the patch.

        Returns:
            True if the patch was inserted, False if an existing row won
        """
        conn = self._connection()
        with conn:
            return self._insert_patch(conn.cursor(), patch)

    def save_patches(self, patches: List[Patch]) -> List[Patch]:
        """
        Save a batch of patches in a single transaction.

        Duplicates are skipped; any other error rolls back the whole batch.

        Returns:
            The patches that were actually inserted
        """
        conn = self._connection()
        inserted = []
        with conn:
            cursor = conn.cursor()
            for patch in patches:
                if self._insert_patch(cursor, patch):
                    inserted.append(patch)
        logger.debug(f"Committed {len(inserted)} of {len(patches)} patches")
        return inserted

    def load_patches(self) -> List[Patch]:
        """Get all patches in the catalog."""
        conn = self._connection()
        rows = conn.execute("SELECT * FROM patches").fetchall()
        return [_row_to_patch(row) for row in rows]

    def get_patch(self, path: str) -> Optional[Patch]:
        """Retrieve a single patch by its path."""
        conn = self._connection()
        row = conn.execute("SELECT * FROM patches WHERE path = ?", (path,)).fetchone()
        if row:
            return _row_to_patch(row)
        return None

    def patch_exists(self, checksum: str) -> bool:
        conn = self._connection()
        row = conn.execute("SELECT 1 FROM patches WHERE checksum = ?", (checksum,)).fetchone()
        return row is not None

    def update_patch_metadata(self, path: str, updates: PatchUpdate) -> bool:
        """
        Merge a partial update onto the patch stored at ``path``.

        Fields left unset on ``updates`` keep their stored values. An unknown
        path is ignored.

        Returns:
            True if a row was updated
        """
        current = self.get_patch(path)
        if current is None:
            return False

        changes = updates.model_dump(exclude_none=True)
        merged = Patch(**{**asdict(current), **changes})

        conn = self._connection()
        with conn:
            conn.execute("""
                UPDATE patches
                SET name = ?,
                    loved = ?,
                    category = ?,
                    tags = ?,
                    bank = ?,
                    library = ?
                WHERE path = ?
            """, (
                merged.name,
                _to_db_bool(merged.loved),
                merged.category,
                json.dumps(merged.tags),
                merged.bank,
                merged.library,
                path,
            ))
        return True

    def delete_patch(self, path: str) -> bool:
        """Delete a patch; its bank links go with it."""
        conn = self._connection()
        with conn:
            cursor = conn.execute("DELETE FROM patches WHERE path = ?", (path,))
        return cursor.rowcount > 0

    # ------------------------------------------------------------------
    # Banks
    # ------------------------------------------------------------------

    def _upsert_bank(self, cursor: sqlite3.Cursor, bank: Bank) -> int:
        cursor.execute("""
            INSERT OR IGNORE INTO banks (name, library, custom) VALUES (?, ?, ?)
        """, (bank.name, bank.library, _to_db_bool(bank.custom)))
        cursor.execute(
            "SELECT id FROM banks WHERE name = ? AND library = ?",
            (bank.name, bank.library)
        )
        return cursor.fetchone()['id']

    def save_bank(self, bank: Bank) -> int:
        """Create the bank if (name, library) is new. Returns the bank ID."""
        conn = self._connection()
        with conn:
            return self._upsert_bank(conn.cursor(), bank)

    def load_banks(self) -> List[Bank]:
        """Get all banks in the catalog."""
        conn = self._connection()
        rows = conn.execute("SELECT * FROM banks ORDER BY id").fetchall()
        return [_row_to_bank(row) for row in rows]

    def get_bank(self, name: str, library: str) -> Optional[Bank]:
        conn = self._connection()
        row = conn.execute(
            "SELECT * FROM banks WHERE name = ? AND library = ?",
            (name, library)
        ).fetchone()
        if row:
            return _row_to_bank(row)
        return None

    def delete_bank(self, bank_id: int) -> bool:
        """Delete a bank; its patch links go with it, the patches stay."""
        conn = self._connection()
        with conn:
            cursor = conn.execute("DELETE FROM banks WHERE id = ?", (bank_id,))
        return cursor.rowcount > 0

    def associate_patch_with_bank(self, patch_path: str, bank_id: int) -> None:
        """Link a patch to a bank. Existing links are left alone."""
        conn = self._connection()
        with conn:
            conn.execute(
                "INSERT OR IGNORE INTO patch_banks (patch_path, bank_id) VALUES (?, ?)",
                (patch_path, bank_id)
            )

    def get_patches_for_bank(self, bank_id: int) -> List[Patch]:
        """Get all patches linked to a bank."""
        conn = self._connection()
        rows = conn.execute("""
            SELECT p.*
            FROM patches p
            JOIN patch_banks pb ON p.path = pb.patch_path
            WHERE pb.bank_id = ?
        """, (bank_id,)).fetchall()
        return [_row_to_patch(row) for row in rows]

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_statistics(self) -> Dict[str, Any]:
        """Get catalog statistics."""
        conn = self._connection()
        cursor = conn.cursor()

        stats = {}

        cursor.execute("SELECT COUNT(*) as count FROM patches")
        stats['total_patches'] = cursor.fetchone()['count']

        cursor.execute("SELECT COUNT(*) as count FROM banks")
        stats['total_banks'] = cursor.fetchone()['count']

        cursor.execute("SELECT COUNT(*) as count FROM patches WHERE loved = 1")
        stats['loved_patches'] = cursor.fetchone()['count']

        cursor.execute("SELECT COUNT(*) as count FROM patches WHERE custom = 1")
        stats['custom_patches'] = cursor.fetchone()['count']

        # Patches per library
        cursor.execute("""
            SELECT library, COUNT(*) as count
            FROM patches
            GROUP BY library
        """)
        stats['by_library'] = {row['library']: row['count'] for row in cursor.fetchall()}

        # Patches per bank, through the join table
        cursor.execute("""
            SELECT b.id, b.name, b.library, COUNT(pb.patch_path) as count
            FROM banks b
            LEFT JOIN patch_banks pb ON pb.bank_id = b.id
            GROUP BY b.id
            ORDER BY b.id
        """)
        stats['by_bank'] = [
            {'id': row['id'], 'name': row['name'], 'library': row['library'], 'patches': row['count']}
            for row in cursor.fetchall()
        ]

        return stats
