"""Database schema initialization and data paths."""

import os
import sqlite3
from pathlib import Path


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_default_data_path(backend: str = "sqlite") -> Path:
    """Get the default data file path for a backend (XDG compliant).

    Args:
        backend: Backend name, "sqlite" or "json".

    Returns:
        Path to the data file.
    """
    filename = "fintrack.json" if backend == "json" else "fintrack.db"
    return get_xdg_data_home() / "fintrack" / filename


def database_exists(db_path: Path) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check.

    Returns:
        True if database exists, False otherwise.
    """
    return db_path.exists()


def init_database(db_path: Path) -> None:
    """Initialize the database with the required schema.

    Args:
        db_path: Path to the database file.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id TEXT PRIMARY KEY,
                position INTEGER NOT NULL,
                description TEXT NOT NULL,
                amount TEXT NOT NULL,
                category TEXT NOT NULL,
                date TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """
        )

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_position ON transactions(position)")

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
