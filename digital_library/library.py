from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

from .book import Book
from .config import settings
from .exceptions import (
    BookNotAvailableError,
    BookNotFoundError,
    DuplicateBookError,
    DuplicateUserError,
    UserNotFoundError,
)
from .users import LibraryUser

if TYPE_CHECKING:
    from .repositories import BookRepository, UserRepository

logger = logging.getLogger(__name__)


class Library:
    """Manages the in-memory catalog and registered users."""

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name or settings.library_name
        self._books_by_isbn: Dict[str, Book] = {}
        self._users_by_id: Dict[str, LibraryUser] = {}

    @classmethod
    def load(cls, book_repository: "BookRepository", user_repository: "UserRepository",
             name: Optional[str] = None) -> "Library":
        """Build a snapshot from the database.

        Borrowed lists are not stored, so every loaded user starts with none
        and a book stored as unavailable comes back available.
        """
        lib = cls(name)
        for book in book_repository.get_all_books():
            if not book.available:
                logger.warning(f"Book ISBN={book.isbn} is stored as borrowed but has no holder; marking it available")
                book.return_book()
            lib.add_book(book)
        for user in user_repository.get_all_users():
            lib.register_user(user)
        return lib

    # ------------------------- Book operations ------------------------- #
    def add_book(self, book: Book) -> None:
        if book.isbn in self._books_by_isbn:
            raise DuplicateBookError(book.isbn)
        if not book.available:
            # a lent-out book must be reachable through its holder
            raise BookNotAvailableError(book.isbn, book.title)
        self._books_by_isbn[book.isbn] = book

    def remove_book(self, isbn: str) -> bool:
        book = self._books_by_isbn.get(isbn)
        if book is None:
            return False
        if not book.available:
            raise BookNotAvailableError(book.isbn, book.title)
        del self._books_by_isbn[isbn]
        return True

    def list_books(self) -> List[Book]:
        return list(self._books_by_isbn.values())

    def find_book_by_isbn(self, isbn: str) -> Optional[Book]:
        return self._books_by_isbn.get(isbn)

    def find_books_by_title_contains(self, fragment: str) -> List[Book]:
        lower = fragment.lower()
        return [b for b in self._books_by_isbn.values() if lower in b.title.lower()]

    def find_books_by_author(self, author: str) -> List[Book]:
        norm_author = author.lower()
        return [b for b in self._books_by_isbn.values() if b.author.lower() == norm_author]

    def get_all_available_books(self) -> List[Book]:
        return sorted((b for b in self._books_by_isbn.values() if b.available), key=lambda b: b.title)

    def get_top_newest_books(self, limit: int) -> List[Book]:
        if limit < 0:
            raise ValueError(f"limit must not be negative: {limit}")
        newest = sorted(self._books_by_isbn.values(), key=lambda b: b.publication_year, reverse=True)
        return newest[:limit]

    # ------------------------- User operations ------------------------- #
    def register_user(self, user: LibraryUser) -> None:
        if user.id in self._users_by_id:
            raise DuplicateUserError(user.id)
        self._users_by_id[user.id] = user

    def find_user(self, user_id: str) -> Optional[LibraryUser]:
        return self._users_by_id.get(user_id)

    def list_users(self) -> List[LibraryUser]:
        return list(self._users_by_id.values())

    # ------------------------- Lending ------------------------- #
    def borrow_book(self, user_id: str, isbn: str) -> Book:
        user, book = self._lookup(user_id, isbn)
        user.borrow_book(book)
        logger.debug(f"{user.id} borrowed {book.isbn}, due in {user.loan_period_days} days")
        return book

    def return_book(self, user_id: str, isbn: str) -> Book:
        user, book = self._lookup(user_id, isbn)
        user.return_book(book)
        logger.debug(f"{user.id} returned {book.isbn}")
        return book

    def find_borrower(self, isbn: str) -> Optional[LibraryUser]:
        book = self._books_by_isbn.get(isbn)
        if book is None or book.available:
            return None
        for user in self._users_by_id.values():
            if book in user.borrowed_books:
                return user
        return None

    def _lookup(self, user_id: str, isbn: str):
        user = self._users_by_id.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        book = self._books_by_isbn.get(isbn)
        if book is None:
            raise BookNotFoundError(isbn)
        return user, book
