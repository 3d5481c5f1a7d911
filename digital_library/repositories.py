"""SQLite-backed CRUD for books and users.

Every call is best-effort: database errors are logged and the call falls back
to ``False`` for writes and ``None`` / ``[]`` for reads. The repositories are
not kept in sync with any in-memory ``Library``; callers persist explicitly.
"""

import logging
import sqlite3
from datetime import date
from typing import List, Optional

from .book import Book
from .database import db_session, initialize_database
from .users import LibraryUser, create_user

logger = logging.getLogger(__name__)


class _Repository:
    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = db_file
        try:
            initialize_database(db_file)
        except sqlite3.Error as e:
            logger.error(f"Error initializing database: {e}")


class BookRepository(_Repository):

    def insert_book(self, book: Book) -> bool:
        try:
            with db_session(self.db_file) as conn:
                affected = conn.execute(
                    "INSERT INTO books (isbn, title, author, publication_year, genre, available) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (book.isbn, book.title, book.author, book.publication_year, book.genre, int(book.available)),
                ).rowcount
        except sqlite3.Error as e:
            logger.error(f"Error inserting book: {e}")
            return False
        logger.info(f"Book inserted: {book.title}")
        return affected > 0

    def get_book_by_isbn(self, isbn: str) -> Optional[Book]:
        try:
            with db_session(self.db_file) as conn:
                row = conn.execute("SELECT * FROM books WHERE isbn = ?", (isbn,)).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Error finding book: {e}")
            return None
        return Book.from_dict(dict(row)) if row else None

    def get_all_books(self) -> List[Book]:
        try:
            with db_session(self.db_file) as conn:
                rows = conn.execute("SELECT * FROM books ORDER BY title").fetchall()
        except sqlite3.Error as e:
            logger.error(f"Error getting books: {e}")
            return []
        return [Book.from_dict(dict(row)) for row in rows]

    def update_book_availability(self, isbn: str, available: bool) -> bool:
        try:
            with db_session(self.db_file) as conn:
                affected = conn.execute("UPDATE books SET available = ? WHERE isbn = ?", (int(available), isbn)).rowcount
        except sqlite3.Error as e:
            logger.error(f"Error updating availability: {e}")
            return False
        if affected > 0:
            logger.info(f"Book ISBN={isbn} availability updated to {available}")
            return True
        logger.info(f"Book with ISBN={isbn} not found")
        return False

    def delete_book(self, isbn: str) -> bool:
        try:
            with db_session(self.db_file) as conn:
                affected = conn.execute("DELETE FROM books WHERE isbn = ?", (isbn,)).rowcount
        except sqlite3.Error as e:
            logger.error(f"Error deleting book: {e}")
            return False
        if affected > 0:
            logger.info(f"Book ISBN={isbn} deleted")
            return True
        logger.info(f"Book with ISBN={isbn} not found")
        return False


class UserRepository(_Repository):

    def insert_user(self, user: LibraryUser) -> bool:
        try:
            with db_session(self.db_file) as conn:
                affected = conn.execute(
                    "INSERT INTO users (id, name, registration_date, user_type) VALUES (?, ?, ?, ?)",
                    (user.id, user.name, user.registration_date.isoformat(), user.user_type.tag),
                ).rowcount
        except sqlite3.Error as e:
            logger.error(f"Error inserting user: {e}")
            return False
        logger.info(f"User inserted: {user.name}")
        return affected > 0

    def get_user_by_id(self, user_id: str) -> Optional[LibraryUser]:
        try:
            with db_session(self.db_file) as conn:
                row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Error finding user: {e}")
            return None
        return self._row_to_user(row) if row else None

    def get_all_users(self) -> List[LibraryUser]:
        try:
            with db_session(self.db_file) as conn:
                rows = conn.execute("SELECT * FROM users ORDER BY id").fetchall()
        except sqlite3.Error as e:
            logger.error(f"Error getting users: {e}")
            return []
        users = []
        for row in rows:
            user = self._row_to_user(row)
            if user is not None:
                users.append(user)
        return users

    def update_user_name(self, user_id: str, new_name: str) -> bool:
        try:
            with db_session(self.db_file) as conn:
                affected = conn.execute("UPDATE users SET name = ? WHERE id = ?", (new_name, user_id)).rowcount
        except sqlite3.Error as e:
            logger.error(f"Error updating name: {e}")
            return False
        if affected > 0:
            logger.info(f"User ID={user_id} name updated to {new_name}")
            return True
        logger.info(f"User with ID={user_id} not found")
        return False

    def delete_user(self, user_id: str) -> bool:
        try:
            with db_session(self.db_file) as conn:
                affected = conn.execute("DELETE FROM users WHERE id = ?", (user_id,)).rowcount
        except sqlite3.Error as e:
            logger.error(f"Error deleting user: {e}")
            return False
        if affected > 0:
            logger.info(f"User ID={user_id} deleted")
            return True
        logger.info(f"User with ID={user_id} not found")
        return False

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> Optional[LibraryUser]:
        try:
            return create_user(
                row["user_type"],
                row["id"],
                row["name"],
                date.fromisoformat(row["registration_date"]),
            )
        except ValueError as e:
            logger.warning(f"Skipping user {row['id']}: {e}")
            return None
