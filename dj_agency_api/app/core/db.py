"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), a cursor context manager (``get_cursor``) and
``init_db`` which applies migrations on application start.

Table and column names follow the agency's hosted schema (``djs.artist_name``,
``events.event_name``, ``contracts.fee`` ...).  Translation to the names
exposed by the API lives in ``services.mappers``.

Applied migration versions are stored in the ``migrations`` table and
new migrations are executed in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterator

from .config import settings


logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS producers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT,
            company_name TEXT,
            cnpj TEXT,
            business_address TEXT,
            city TEXT,
            state TEXT,
            zip_code TEXT,
            contact_person TEXT,
            contact_email TEXT,
            contact_phone TEXT,
            is_active INTEGER NOT NULL DEFAULT 1,
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS profiles (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            full_name TEXT,
            password TEXT,
            role TEXT NOT NULL DEFAULT 'produtor',
            producer_id INTEGER,
            access_code TEXT,
            disabled INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(producer_id) REFERENCES producers(id) ON DELETE SET NULL
        );

        CREATE TABLE IF NOT EXISTS djs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            artist_name TEXT NOT NULL,
            real_name TEXT,
            bio TEXT,
            avatar_url TEXT,
            genres TEXT,
            phone TEXT,
            whatsapp TEXT,
            email TEXT,
            instagram TEXT,
            base_price REAL,
            status TEXT NOT NULL DEFAULT 'disponivel',
            is_active INTEGER NOT NULL DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            event_name TEXT NOT NULL,
            description TEXT,
            event_date TIMESTAMP NOT NULL,
            venue TEXT,
            address TEXT,
            state TEXT,
            fee REAL,
            expected_attendees INTEGER,
            dj_id INTEGER,
            producer_id INTEGER,
            status TEXT NOT NULL DEFAULT 'pendente',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(dj_id) REFERENCES djs(id),
            FOREIGN KEY(producer_id) REFERENCES producers(id)
        );

        CREATE TABLE IF NOT EXISTS contracts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            event_id INTEGER NOT NULL,
            dj_id INTEGER NOT NULL,
            producer_id INTEGER NOT NULL,
            fee REAL NOT NULL,
            commission_rate REAL,
            commission_amount REAL,
            payment_terms TEXT,
            cancellation_policy TEXT,
            custom_clauses TEXT,
            equipment_requirements TEXT,
            performance_duration TEXT,
            setup_time TEXT,
            dress_code TEXT,
            technical_rider TEXT,
            status TEXT NOT NULL DEFAULT 'pendente',
            is_signed_by_producer INTEGER NOT NULL DEFAULT 0,
            is_signed_by_dj INTEGER NOT NULL DEFAULT 0,
            signed_at TIMESTAMP,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(event_id) REFERENCES events(id),
            FOREIGN KEY(dj_id) REFERENCES djs(id),
            FOREIGN KEY(producer_id) REFERENCES producers(id)
        );

        CREATE TABLE IF NOT EXISTS media (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            dj_id INTEGER,
            event_id INTEGER,
            file_url TEXT NOT NULL,
            file_type TEXT NOT NULL DEFAULT 'image',
            category TEXT NOT NULL DEFAULT 'other',
            title TEXT,
            description TEXT,
            file_size TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(dj_id) REFERENCES djs(id),
            FOREIGN KEY(event_id) REFERENCES events(id)
        );

        CREATE TABLE IF NOT EXISTS audit_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER,
            action TEXT NOT NULL,
            object_type TEXT,
            object_id INTEGER,
            timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            details TEXT
        );
        """,
    ),
    # Migration 2: producer access codes and lookup indices
    (
        2,
        """
        ALTER TABLE producers ADD COLUMN access_code TEXT;
        CREATE UNIQUE INDEX IF NOT EXISTS idx_producers_access_code ON producers(access_code);
        CREATE INDEX IF NOT EXISTS idx_events_producer_id ON events(producer_id);
        CREATE INDEX IF NOT EXISTS idx_events_dj_id ON events(dj_id);
        CREATE INDEX IF NOT EXISTS idx_contracts_producer_id ON contracts(producer_id);
        CREATE INDEX IF NOT EXISTS idx_media_dj_id ON media(dj_id);
        CREATE INDEX IF NOT EXISTS idx_media_event_id ON media(event_id);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    Absolute paths in ``settings.database_url`` are used as is; relative
    paths are resolved against the ``dj_agency_api`` package directory.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # dj_agency_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` objects so columns can be
    accessed by name.  Timestamps are kept as the strings they were
    stored as.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    # Foreign keys are off by default in SQLite and must be enabled per connection.
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Yield a cursor, commit on success and always close the connection."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def insert_row(cursor: sqlite3.Cursor, table: str, columns: Dict[str, Any]) -> int:
    """Insert ``columns`` into ``table`` and return the new row id.

    ``table`` and the column names come from the service layer, never
    from request data; values are always bound as parameters.
    """
    names = ", ".join(columns)
    placeholders = ", ".join("?" for _ in columns)
    cursor.execute(
        f"INSERT INTO {table} ({names}) VALUES ({placeholders})",
        tuple(_adapt(value) for value in columns.values()),
    )
    return cursor.lastrowid


def update_row(cursor: sqlite3.Cursor, table: str, row_id: int, columns: Dict[str, Any]) -> None:
    """Update the given columns of one row and bump ``updated_at``."""
    if not columns:
        return
    assignments = ", ".join(f"{name} = ?" for name in columns)
    values = [_adapt(value) for value in columns.values()]
    values.append(row_id)
    cursor.execute(
        f"UPDATE {table} SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        tuple(values),
    )


def _adapt(value: Any) -> Any:
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if needed, reads the current schema
    version and applies every entry of ``MIGRATIONS`` with a higher
    version.  New migrations must be appended with an incremented
    version number.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying migration %s", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
