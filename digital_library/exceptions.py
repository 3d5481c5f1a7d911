"""Domain errors raised when a borrowing rule rejects an operation."""


class LibraryError(Exception):
    """Base exception for library-related errors."""


class BookNotAvailableError(LibraryError, ValueError):
    def __init__(self, isbn: str, title: str):
        self.isbn = isbn
        super().__init__(f"Book is already borrowed: {title}")


class BookNotBorrowedError(LibraryError, ValueError):
    def __init__(self, user_name: str, title: str):
        super().__init__(f"{user_name} didn't borrow book: {title}")


class QuotaExceededError(LibraryError, ValueError):
    def __init__(self, user_name: str, max_books: int):
        self.max_books = max_books
        super().__init__(f"{user_name} has reached the maximum number of books ({max_books})")


class DuplicateUserError(LibraryError, ValueError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User with id {user_id} already exists")


class DuplicateBookError(LibraryError, ValueError):
    def __init__(self, isbn: str):
        self.isbn = isbn
        super().__init__(f"Book with ISBN {isbn} already exists.")


class UserNotFoundError(LibraryError, LookupError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User with id {user_id} not found")


class BookNotFoundError(LibraryError, LookupError):
    def __init__(self, isbn: str):
        self.isbn = isbn
        super().__init__(f"Book with ISBN {isbn} not found")
