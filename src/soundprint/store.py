"""Fingerprint storage.

Matching only needs two operations from a store: insert a record and scan
every record. Two implementations are provided, an in-memory list and an
SQLite table.
"""

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .config import StoreSettings
from .models import FingerprintRecord

logger = logging.getLogger(__name__)

DDL_FINGERPRINTS = """
CREATE TABLE IF NOT EXISTS audio_fingerprints (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    fingerprint TEXT NOT NULL,
    duration INTEGER NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

DDL_INDEXES = (
    "CREATE INDEX IF NOT EXISTS audio_name_idx ON audio_fingerprints (name);",
    "CREATE INDEX IF NOT EXISTS audio_fingerprint_idx ON audio_fingerprints (fingerprint);",
)


class FingerprintStore(ABC):
    """Abstract base class for fingerprint stores."""

    @abstractmethod
    def insert(self, name: str, fingerprint: str, duration: int) -> FingerprintRecord:
        """
        Store a fingerprint.

        Args:
            name: Label for the clip
            fingerprint: Encoded fingerprint string
            duration: Clip length in whole seconds

        Returns:
            The stored record, with its assigned id
        """

    @abstractmethod
    def all(self) -> List[FingerprintRecord]:
        """Return every stored record in insertion order."""

    def __len__(self) -> int:
        return len(self.all())

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class MemoryFingerprintStore(FingerprintStore):
    """List-backed store, mostly for tests and one-off comparisons."""

    def __init__(self):
        self._records: List[FingerprintRecord] = []
        self._lock = threading.Lock()

    def insert(self, name: str, fingerprint: str, duration: int) -> FingerprintRecord:
        now = datetime.now()
        with self._lock:
            record = FingerprintRecord(
                id=len(self._records) + 1,
                name=name,
                fingerprint=fingerprint,
                duration=int(duration),
                created_at=now,
                updated_at=now,
            )
            self._records.append(record)
        logger.info(f"Stored fingerprint #{record.id}: {name}")
        return record

    def all(self) -> List[FingerprintRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        return len(self._records)


class SQLiteFingerprintStore(FingerprintStore):
    """Store backed by an SQLite ``audio_fingerprints`` table."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self.path), check_same_thread=False)
        self._conn.execute(DDL_FINGERPRINTS)
        for ddl in DDL_INDEXES:
            self._conn.execute(ddl)
        self._conn.commit()
        logger.debug(f"Opened fingerprint database at {self.path}")

    def insert(self, name: str, fingerprint: str, duration: int) -> FingerprintRecord:
        now = datetime.now()
        with self._lock:
            cursor = self._conn.execute(
                """
                INSERT INTO audio_fingerprints (name, fingerprint, duration, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (name, fingerprint, int(duration), now.isoformat(), now.isoformat()),
            )
            self._conn.commit()
            record_id = cursor.lastrowid

        logger.info(f"Stored fingerprint #{record_id}: {name}")
        return FingerprintRecord(
            id=record_id,
            name=name,
            fingerprint=fingerprint,
            duration=int(duration),
            created_at=now,
            updated_at=now,
        )

    def all(self) -> List[FingerprintRecord]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT id, name, fingerprint, duration, created_at, updated_at "
                "FROM audio_fingerprints ORDER BY id"
            ).fetchall()

        return [
            FingerprintRecord(
                id=row[0],
                name=row[1],
                fingerprint=row[2],
                duration=row[3],
                created_at=datetime.fromisoformat(row[4]),
                updated_at=datetime.fromisoformat(row[5]),
            )
            for row in rows
        ]

    def __len__(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM audio_fingerprints").fetchone()[0]

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None


def open_store(settings: Optional[StoreSettings] = None) -> FingerprintStore:
    """Open the store described by settings (in-memory when no path is set)."""
    if settings is None or not settings.path:
        return MemoryFingerprintStore()
    return SQLiteFingerprintStore(settings.path)
