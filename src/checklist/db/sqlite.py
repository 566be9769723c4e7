"""Embedded SQLite store backing the legacy local variant."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from ..config import settings

logger = logging.getLogger(__name__)

# Columns added to the legacy tables so they carry the same fields as the
# managed backend's rows.
_COLUMN_MIGRATIONS = {
    "clients": {
        "client_type": "TEXT NOT NULL DEFAULT 'POSTO'",
    },
    "visits": {
        "client_type": "TEXT NOT NULL DEFAULT 'POSTO'",
        "details": "TEXT NOT NULL DEFAULT '{}'",
        "latitude": "REAL",
        "longitude": "REAL",
    },
}

DEMO_USERS = (
    ("Ricardo Mendes", "ricardo@visitlog.com", "VENDEDOR"),
    ("Ana Silva", "ana@visitlog.com", "GESTOR"),
    ("João Silva", "joao@visitlog.com", "ADMIN"),
)
DEMO_CLIENTS = (
    ("Supermercados Alvorada", "12.345.678/0001-01", "Belo Horizonte, MG"),
    ("Farmácia Vida Saudável", "98.765.432/0001-99", "Nova Lima, MG"),
)


def get_db_connection(path: Path | None = None) -> sqlite3.Connection:
    """Establishes and returns a connection to the SQLite database."""
    db_path = path or settings.sqlite_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row  # Allows accessing columns by name
    return conn


def initialize_database(path: Path | None = None, *, seed: bool | None = None) -> None:
    """
    Creates the database and all necessary tables if they don't already exist.
    This function is safe to run multiple times.
    """
    conn = get_db_connection(path)
    try:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                email TEXT UNIQUE NOT NULL,
                role TEXT NOT NULL,
                active INTEGER DEFAULT 1,
                phone TEXT,
                avatar_url TEXT
            );

            CREATE TABLE IF NOT EXISTS clients (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                cnpj TEXT,
                region TEXT
            );

            CREATE TABLE IF NOT EXISTS visits (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER,
                client_id INTEGER,
                date TEXT NOT NULL,
                type TEXT NOT NULL,
                result TEXT NOT NULL,
                volume REAL,
                competitor TEXT,
                summary TEXT,
                FOREIGN KEY (user_id) REFERENCES users(id),
                FOREIGN KEY (client_id) REFERENCES clients(id)
            );
            """
        )
        _migrate_legacy_tables(conn)

        should_seed = settings.sqlite_seed_demo_data if seed is None else seed
        if should_seed:
            _seed_demo_rows(conn)
        conn.commit()
    finally:
        conn.close()


def _migrate_legacy_tables(conn: sqlite3.Connection) -> None:
    for table, columns in _COLUMN_MIGRATIONS.items():
        existing = {row["name"] for row in conn.execute(f"PRAGMA table_info({table})")}
        for column, definition in columns.items():
            if column not in existing:
                logger.info(f"Adding column {table}.{column} to local store")
                conn.execute(f"ALTER TABLE {table} ADD COLUMN {column} {definition}")


def _seed_demo_rows(conn: sqlite3.Connection) -> None:
    user_count = conn.execute("SELECT COUNT(*) AS count FROM users").fetchone()["count"]
    if user_count:
        return
    logger.info("Seeding local store with demo users and clients")
    conn.executemany("INSERT INTO users (name, email, role) VALUES (?, ?, ?)", DEMO_USERS)
    conn.executemany("INSERT INTO clients (name, cnpj, region) VALUES (?, ?, ?)", DEMO_CLIENTS)
