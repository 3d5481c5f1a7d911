from __future__ import annotations

from datetime import date, timedelta
from enum import Enum
from typing import List, Optional, Tuple, Union

from .book import Book
from .exceptions import BookNotBorrowedError, QuotaExceededError


class UserType(Enum):
    """User variants and the borrowing limits that come with each one."""

    REGULAR = ("regular", 5, 14)
    PREMIUM = ("premium", 15, 30)

    def __init__(self, tag: str, max_books_allowed: int, loan_period_days: int) -> None:
        self.tag = tag
        self.max_books_allowed = max_books_allowed
        self.loan_period_days = loan_period_days

    @classmethod
    def from_tag(cls, tag: str) -> "UserType":
        norm = (tag or "").strip().lower()
        for user_type in cls:
            if user_type.tag == norm:
                return user_type
        raise ValueError(f"Unknown user type: {tag!r}")


class LibraryUser:
    """Base class for all kinds of library users."""

    user_type: UserType

    def __init__(self, id: str, name: str, registration_date: Optional[date] = None) -> None:
        if not id or not str(id).strip():
            raise ValueError("User id cannot be empty")
        if not name or not str(name).strip():
            raise ValueError("User name cannot be empty")
        self.id = str(id).strip()
        self.name = str(name).strip()
        self.registration_date = registration_date or date.today()
        self._borrowed_books: List[Book] = []

    @property
    def borrowed_books(self) -> Tuple[Book, ...]:
        return tuple(self._borrowed_books)

    @property
    def max_books_allowed(self) -> int:
        return self.user_type.max_books_allowed

    @property
    def loan_period_days(self) -> int:
        return self.user_type.loan_period_days

    def can_borrow_more(self) -> bool:
        return len(self._borrowed_books) < self.max_books_allowed

    def borrow_book(self, book: Book) -> None:
        if not self.can_borrow_more():
            raise QuotaExceededError(self.name, self.max_books_allowed)
        book.borrow()
        self._borrowed_books.append(book)

    def return_book(self, book: Book) -> None:
        if book not in self._borrowed_books:
            raise BookNotBorrowedError(self.name, book.title)
        self._borrowed_books.remove(book)
        book.return_book()

    def due_date(self, borrowed_on: date) -> date:
        """Date by which a loan started on ``borrowed_on`` must be returned."""
        return borrowed_on + timedelta(days=self.loan_period_days)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LibraryUser):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(id={self.id!r}, name={self.name!r}, "
                f"registered={self.registration_date.isoformat()}, borrowed={len(self._borrowed_books)} books)")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "registration_date": self.registration_date.isoformat(),
            "user_type": self.user_type.tag,
            "borrowed_books": [b.isbn for b in self._borrowed_books],
        }


class RegularUser(LibraryUser):
    """Regular (student/ordinary) library user."""

    user_type = UserType.REGULAR


class PremiumUser(LibraryUser):
    """Premium / faculty / researcher user with more privileges."""

    user_type = UserType.PREMIUM


_USER_CLASSES = {
    UserType.REGULAR: RegularUser,
    UserType.PREMIUM: PremiumUser,
}


def create_user(user_type: Union[UserType, str], id: str, name: str,
                registration_date: Optional[date] = None) -> LibraryUser:
    """Build the user variant matching ``user_type`` (enum member or its tag)."""
    if not isinstance(user_type, UserType):
        user_type = UserType.from_tag(user_type)
    return _USER_CLASSES[user_type](id, name, registration_date)
