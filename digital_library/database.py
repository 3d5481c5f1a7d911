import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from .config import settings

logger = logging.getLogger(__name__)


def get_db_connection(db_file: Optional[str] = None) -> sqlite3.Connection:
    """Establishes a connection to the SQLite database."""
    conn = sqlite3.connect(db_file or settings.db_file)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def db_session(db_file: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Open a connection, commit on success and always close it."""
    conn = get_db_connection(db_file)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def create_tables(db_file: Optional[str] = None) -> None:
    """Creates the books and users tables if they don't exist."""
    with db_session(db_file) as conn:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS books (
                isbn TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                author TEXT NOT NULL,
                publication_year INTEGER NOT NULL,
                genre TEXT NOT NULL,
                available INTEGER NOT NULL DEFAULT 1
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                registration_date TEXT NOT NULL,
                user_type TEXT NOT NULL
            )
        """)


def initialize_database(db_file: Optional[str] = None) -> None:
    """Initializes the database, creating tables if needed."""
    create_tables(db_file)


def test_connection(db_file: Optional[str] = None) -> bool:
    """Return True when the database can be opened and queried."""
    try:
        with db_session(db_file) as conn:
            conn.execute("SELECT 1").fetchone()
        logger.info(f"Connected to SQLite database {db_file or settings.db_file}")
        return True
    except sqlite3.Error as e:
        logger.error(f"Connection error: {e}")
        return False

