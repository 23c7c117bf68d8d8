from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

DB_DIR = Path.home() / ".personalcrm"
DB_PATH = Path(os.environ.get("PERSONALCRM_DB") or DB_DIR / "personalcrm.db")

SCHEMA = """\
CREATE TABLE IF NOT EXISTS local_storage (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path or DB_PATH))
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: Path | None = None) -> None:
    target = db_path or DB_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    conn = _connect(target)
    conn.executescript(SCHEMA)
    conn.close()


@contextmanager
def get_db(db_path: Path | None = None) -> Generator[sqlite3.Connection, None, None]:
    conn = _connect(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def get_item(key: str, db_path: Path | None = None) -> str | None:
    """Return the text stored under ``key``, or None if nothing is stored."""
    with get_db(db_path) as db:
        row = db.execute("SELECT value FROM local_storage WHERE key = ?", (key,)).fetchone()
    return row["value"] if row else None


def set_item(key: str, value: str, db_path: Path | None = None) -> None:
    with get_db(db_path) as db:
        db.execute(
            """INSERT INTO local_storage (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
            (key, value),
        )
