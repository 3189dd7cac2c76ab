"""
SQLite database integration and simple migration system.

The :class:`Database` object owns the location of the SQLite file and
hands out short‑lived connections (``get_connection``) or a committing
cursor context (``get_cursor``).  ``init_db`` applies migrations on
application start.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: trips with embedded reviews, users
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS trips (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            code TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            length INTEGER NOT NULL,
            start TEXT NOT NULL,
            resort TEXT NOT NULL,
            per_person REAL NOT NULL,
            image TEXT NOT NULL,
            description TEXT NOT NULL,
            -- Reviews are owned by the trip and stored as a JSON array.
            reviews TEXT NOT NULL DEFAULT '[]',
            average_rating REAL NOT NULL DEFAULT 0,
            total_reviews INTEGER NOT NULL DEFAULT 0,
            version INTEGER NOT NULL DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_trips_name ON trips(name);
        CREATE INDEX IF NOT EXISTS idx_trips_resort ON trips(resort);
        CREATE INDEX IF NOT EXISTS idx_trips_resort_price ON trips(resort, per_person);

        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT NOT NULL UNIQUE,
            name TEXT NOT NULL,
            password TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
    # Migration 2: full‑text index over trip name and description
    (
        2,
        """
        -- External content table: the index stores only tokens, the
        -- text itself stays in ``trips``.  Triggers keep both in sync.
        CREATE VIRTUAL TABLE IF NOT EXISTS trips_fts USING fts5(
            name, description, content='trips', content_rowid='id'
        );

        CREATE TRIGGER IF NOT EXISTS trips_fts_insert AFTER INSERT ON trips BEGIN
            INSERT INTO trips_fts(rowid, name, description)
            VALUES (new.id, new.name, new.description);
        END;

        CREATE TRIGGER IF NOT EXISTS trips_fts_delete AFTER DELETE ON trips BEGIN
            INSERT INTO trips_fts(trips_fts, rowid, name, description)
            VALUES ('delete', old.id, old.name, old.description);
        END;

        CREATE TRIGGER IF NOT EXISTS trips_fts_update AFTER UPDATE OF name, description ON trips BEGIN
            INSERT INTO trips_fts(trips_fts, rowid, name, description)
            VALUES ('delete', old.id, old.name, old.description);
            INSERT INTO trips_fts(rowid, name, description)
            VALUES (new.id, new.name, new.description);
        END;

        INSERT INTO trips_fts(trips_fts) VALUES ('rebuild');
        """,
    ),
]


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value else value


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are returned as is.  Relative paths are resolved
    against the project root.
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # trip_catalog_api/
    return str((base_dir / database_url).resolve())


class Database:
    """Location of the SQLite file plus connection helpers."""

    def __init__(self, database_url: str):
        self.path = resolve_database_path(database_url)

    def get_connection(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        Rows are returned as ``sqlite3.Row`` so columns can be
        accessed by name.  No type detection is enabled; timestamps
        come back as the ISO strings they were stored as.

        Each connection also registers ``casefold(text)``, a Unicode
        case fold; SQLite's own ``lower`` and ``LIKE`` fold ASCII only.
        """
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        return conn

    @contextmanager
    def get_cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success and always close the connection."""
        conn = self.get_connection()
        try:
            yield conn.cursor()
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_db(self) -> None:
        """Initialise the database and apply pending migrations.

        Creates the ``migrations`` table if it does not exist, checks
        the current schema version and applies any newer entries of
        ``MIGRATIONS``.  To change the schema append a migration with
        an incremented version number.
        """
        with self.get_cursor() as cursor:
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            cursor.execute("SELECT MAX(version) as version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    cursor.executescript(sql)
                    cursor.execute(
                        "INSERT INTO migrations (version) VALUES (?)", (version,)
                    )
                    current_version = version
