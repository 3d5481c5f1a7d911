from __future__ import annotations

from .exceptions import BookNotAvailableError

DEFAULT_GENRE = "Unknown"


def _required(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{field_name} cannot be empty")
    return str(value).strip()


class Book:
    """Represents a single book in the catalog.

    Everything except ``available`` is fixed once the book is created; the
    flag is flipped only through ``borrow`` and ``return_book``.
    """

    def __init__(self, isbn: str, title: str, author: str, publication_year: int,
                 genre: str | None = None, available: bool = True) -> None:
        self.isbn = _required(isbn, "ISBN")
        self.title = _required(title, "Title")
        self.author = _required(author, "Author")
        if publication_year is None:
            raise ValueError("Publication year cannot be empty")
        self.publication_year = int(publication_year)
        self.genre = genre.strip() if genre and genre.strip() else DEFAULT_GENRE
        self.available = bool(available)

    def borrow(self) -> None:
        if not self.available:
            raise BookNotAvailableError(self.isbn, self.title)
        self.available = False

    def return_book(self) -> None:
        self.available = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.isbn == other.isbn

    def __hash__(self) -> int:
        return hash(self.isbn)

    def __repr__(self) -> str:
        return (f"Book(isbn={self.isbn!r}, title={self.title!r}, author={self.author!r}, "
                f"year={self.publication_year}, genre={self.genre!r}, available={self.available})")

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} ({self.publication_year}, ISBN: {self.isbn})"

    def to_dict(self) -> dict:
        return {
            "isbn": self.isbn,
            "title": self.title,
            "author": self.author,
            "publication_year": self.publication_year,
            "genre": self.genre,
            "available": self.available,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # SQLite stores the flag as 0/1
        available = data.get("available", True)
        if available is None:
            available = True
        return Book(
            isbn=data["isbn"],
            title=data["title"],
            author=data["author"],
            publication_year=data["publication_year"],
            genre=data.get("genre"),
            available=bool(available),
        )
