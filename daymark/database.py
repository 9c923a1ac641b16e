"""
Database layer — durable storage for the score ledger.

Uses SQLite: a file-based database built into Python.
The ledger only needs a key-value "slot": a name mapped to an opaque payload.
One table, `slots`, holds every slot. The score store itself never touches
this module; callers load once at startup and save after each toggle.
"""

import os
import sqlite3
from contextlib import closing
from typing import Optional

from daymark.config import DATA_DIR, DATABASE_FILE, SLOT_NAME
from daymark.errors import DeserializeError
from daymark.models import Score
from daymark.store import ScoreStore

CORRUPT_SUFFIX = ".corrupt"


def _get_db_path() -> str:
    """e.g., "data/daymark.db". Creates the data folder on first use."""
    os.makedirs(DATA_DIR, exist_ok=True)
    return os.path.join(DATA_DIR, DATABASE_FILE)


def _get_connection() -> sqlite3.Connection:
    conn = sqlite3.connect(_get_db_path())
    conn.row_factory = sqlite3.Row
    return conn


def _table_exists(cursor, table_name: str) -> bool:
    """Check if a table exists in the database."""
    cursor.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table_name,)
    )
    return cursor.fetchone() is not None


def initialize_database() -> None:
    """
    Create the slots table. Safe to call multiple times;
    'IF NOT EXISTS' means it won't crash if the table already exists.
    """
    with closing(_get_connection()) as conn:
        cursor = conn.cursor()
        created = not _table_exists(cursor, "slots")

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS slots (
                name        TEXT PRIMARY KEY,
                value       BLOB NOT NULL,
                updated_at  TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()

    if created:
        print(f"Database initialized: {_get_db_path()}")


# ============================================================
# Raw slots
# ============================================================

def read_slot(name: str) -> Optional[bytes]:
    """
    Payload stored under `name`, or None if nothing was ever written.
    A missing slot is not an error, it just means "start empty".
    """
    with closing(_get_connection()) as conn:
        cursor = conn.cursor()
        if not _table_exists(cursor, "slots"):
            return None
        cursor.execute("SELECT value FROM slots WHERE name = ?", (name,))
        row = cursor.fetchone()
    if row is None:
        return None
    value = row["value"]
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def write_slot(name: str, payload: bytes) -> None:
    """
    Save a payload under `name`.
    Uses INSERT OR REPLACE: writing a slot again overwrites it.
    """
    initialize_database()
    with closing(_get_connection()) as conn:
        conn.execute(
            "INSERT OR REPLACE INTO slots (name, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)",
            (name, sqlite3.Binary(payload))
        )
        conn.commit()


def delete_slot(name: str) -> bool:
    """Remove a slot. Returns True if there was something to remove."""
    with closing(_get_connection()) as conn:
        cursor = conn.cursor()
        if not _table_exists(cursor, "slots"):
            return False
        cursor.execute("DELETE FROM slots WHERE name = ?", (name,))
        removed = cursor.rowcount > 0
        conn.commit()
    return removed


def list_slots() -> list[str]:
    with closing(_get_connection()) as conn:
        cursor = conn.cursor()
        if not _table_exists(cursor, "slots"):
            return []
        cursor.execute("SELECT name FROM slots ORDER BY name ASC")
        return [row["name"] for row in cursor.fetchall()]


# ============================================================
# Score ledger persistence
# ============================================================

def load_store(name: str = SLOT_NAME) -> ScoreStore:
    """
    Load the ledger at startup.

    Returns an empty store when the slot doesn't exist yet.

    If the saved payload is corrupt, a copy goes to "<name>.corrupt" before
    DeserializeError is re-raised. The caller can then carry on with an
    empty store: the next save overwrites the slot, but the bad payload
    is still there to inspect or repair.
    """
    payload = read_slot(name)
    if payload is None:
        return ScoreStore()

    try:
        return ScoreStore.from_payload(payload)
    except DeserializeError:
        write_slot(name + CORRUPT_SUFFIX, payload)
        print(f"Unreadable payload in slot '{name}' preserved as '{name + CORRUPT_SUFFIX}'")
        raise


def save_store(store: ScoreStore, name: str = SLOT_NAME) -> None:
    """Persist the ledger. Called after every mutation."""
    write_slot(name, store.serialize())


def toggle_and_save(store: ScoreStore, key, candidate, name: str = SLOT_NAME) -> Score:
    """
    Toggle a day and persist right away.
    Nothing is written when the toggle is rejected (bad date).
    """
    result = store.toggle(key, candidate)
    save_store(store, name)
    return result
