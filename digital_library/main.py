import logging
from typing import Optional, Tuple

import typer
from rich.console import Console

from . import database
from .book import Book
from .config import settings
from .exceptions import LibraryError
from .library import Library
from .repositories import BookRepository, UserRepository
from .ui_helpers import print_books, print_users, set_output_mode
from .users import PremiumUser, RegularUser, UserType, create_user

console = Console()

app = typer.Typer(help=f"{settings.app_name} CLI")


def _repositories() -> Tuple[BookRepository, UserRepository]:
    return BookRepository(), UserRepository()


def _load_library() -> Library:
    books, users = _repositories()
    return Library.load(books, users)


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Global CLI options (output mode, logging)."""
    level = logging.DEBUG if verbose or settings.debug else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if output:
        set_output_mode(output)


# ------------------------- Database ------------------------- #
@app.command("init-db")
def cli_init_db():
    """Create the books and users tables."""
    database.initialize_database()
    print(f"Database ready: {settings.db_file}")


@app.command("check-db")
def cli_check_db():
    """Check that the database can be opened."""
    if database.test_connection():
        print("Connected to database successfully")
    else:
        print("Failed to connect to database")
        raise typer.Exit(code=1)


# ------------------------- Books ------------------------- #
@app.command("add-book")
def cli_add_book(
    isbn: str,
    title: str,
    author: str,
    year: int,
    genre: Optional[str] = typer.Option(None, "--genre", "-g", help="Book genre"),
):
    """Store a new book."""
    try:
        book = Book(isbn, title, author, year, genre)
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    books, _ = _repositories()
    if books.insert_book(book):
        print(f"Book inserted: {book.title}")
    else:
        print(f"Could not insert book with ISBN {book.isbn}.")


@app.command("list-books")
def cli_list_books():
    """List all stored books ordered by title."""
    books, _ = _repositories()
    print_books(books.get_all_books())


@app.command("find-book")
def cli_find_book(isbn: str):
    """Find a book by ISBN and show its details."""
    books, _ = _repositories()
    book = books.get_book_by_isbn(isbn)
    if book:
        print("Book Found")
        print(f"Title: {book.title}")
        print(f"Author: {book.author}")
        print(f"Year: {book.publication_year}")
        print(f"Genre: {book.genre}")
        print(f"ISBN: {book.isbn}")
        print(f"Available: {'yes' if book.available else 'no'}")
    else:
        print(f"Book with ISBN {isbn} not found.")


@app.command("set-availability")
def cli_set_availability(
    isbn: str,
    available: bool = typer.Option(True, "--available/--unavailable", help="New availability"),
):
    """Update the stored availability flag of a book."""
    books, _ = _repositories()
    if books.update_book_availability(isbn, available):
        print(f"Book ISBN={isbn} availability updated to {available}")
    else:
        print(f"Book with ISBN {isbn} not found.")


@app.command("remove-book")
def cli_remove_book(isbn: str):
    """Delete a stored book by ISBN."""
    books, _ = _repositories()
    if books.delete_book(isbn):
        print(f"Book with ISBN {isbn} has been removed.")
    else:
        print(f"Book with ISBN {isbn} not found.")


# ------------------------- Users ------------------------- #
@app.command("add-user")
def cli_add_user(
    user_id: str,
    name: str,
    premium: bool = typer.Option(False, "--premium", help="Register as a premium user"),
):
    """Store a new user (regular unless --premium)."""
    user_type = UserType.PREMIUM if premium else UserType.REGULAR
    try:
        user = create_user(user_type, user_id, name)
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    _, users = _repositories()
    if users.insert_user(user):
        print(f"User inserted: {user.name} ({user_type.tag}, up to {user.max_books_allowed} books "
              f"for {user.loan_period_days} days)")
    else:
        print(f"Could not insert user with id {user.id}.")


@app.command("list-users")
def cli_list_users():
    """List all stored users ordered by id."""
    _, users = _repositories()
    print_users(users.get_all_users())


@app.command("find-user")
def cli_find_user(user_id: str):
    """Find a user by id."""
    _, users = _repositories()
    user = users.get_user_by_id(user_id)
    if user:
        print("User Found")
        print(f"Name: {user.name}")
        print(f"Type: {user.user_type.tag}")
        print(f"Registered: {user.registration_date.isoformat()}")
        print(f"Max books: {user.max_books_allowed}")
        print(f"Loan period: {user.loan_period_days} days")
    else:
        print(f"User with id {user_id} not found.")


@app.command("rename-user")
def cli_rename_user(user_id: str, name: str):
    """Change the stored name of a user."""
    _, users = _repositories()
    if users.update_user_name(user_id, name):
        print(f"User ID={user_id} name updated to {name}")
    else:
        print(f"User with id {user_id} not found.")


@app.command("remove-user")
def cli_remove_user(user_id: str):
    """Delete a stored user by id."""
    _, users = _repositories()
    if users.delete_user(user_id):
        print(f"User with id {user_id} has been removed.")
    else:
        print(f"User with id {user_id} not found.")


# ------------------------- Catalog queries ------------------------- #
@app.command("available")
def cli_available():
    """List stored books marked available, sorted by title."""
    books, _ = _repositories()
    print_books([b for b in books.get_all_books() if b.available], empty_message="No available books.")


@app.command("newest")
def cli_newest(limit: int = typer.Option(settings.newest_books_limit, "--limit", "-l", min=0,
                                         help="Maximum number of books")):
    """List the newest books by publication year."""
    print_books(_load_library().get_top_newest_books(limit), show_status=False)


@app.command("search")
def cli_search(fragment: str):
    """Find books whose title contains FRAGMENT (case-insensitive)."""
    print_books(_load_library().find_books_by_title_contains(fragment), empty_message="No matching books.",
                show_status=False)


@app.command("by-author")
def cli_by_author(author: str):
    """Find books written by AUTHOR (case-insensitive)."""
    print_books(_load_library().find_books_by_author(author), empty_message="No matching books.",
                show_status=False)


# ------------------------- Demo ------------------------- #
SAMPLE_BOOKS = [
    ("978-0132350884", "Clean Code", "Robert C. Martin", 2008, "Programming"),
    ("978-0321125217", "Refactoring", "Martin Fowler", 2018, "Programming"),
    ("978-1617294945", "Grokking Algorithms", "Aditya Bhargava", 2016, "Algorithms"),
    ("978-0553380163", "Dune", "Frank Herbert", 1965, "Science Fiction"),
]


@app.command("demo")
def cli_demo():
    """Walk through the CRUD calls and an in-memory borrow."""
    database.test_connection()
    books, users = _repositories()

    console.rule("Book CRUD Operations")
    sample = [Book(*row) for row in SAMPLE_BOOKS]
    for book in sample:
        books.insert_book(book)

    print("All Books:")
    print_books(books.get_all_books())

    found = books.get_book_by_isbn("978-0132350884")
    if found:
        print(f"Found Book: {found}")

    books.update_book_availability("978-0132350884", False)
    print("After updating availability:")
    print_books(books.get_all_books())

    books.delete_book("978-0553380163")
    print("After deleting Dune:")
    print_books(books.get_all_books())

    console.rule("User CRUD Operations")
    student = RegularUser("STU-123", "Anna Kowalska")
    professor = PremiumUser("PRF-777", "Dr. Jan Nowak")
    users.insert_user(student)
    users.insert_user(professor)

    print("All Users:")
    print_users(users.get_all_users())

    users.update_user_name("STU-123", "Anna Smith")
    print("After updating name:")
    print_users(users.get_all_users())

    users.delete_user("PRF-777")
    print("After deleting professor:")
    print_users(users.get_all_users())

    # The in-memory library is independent of what was stored above
    lib = Library()
    clean_code, dune = sample[0], sample[3]
    lib.add_book(clean_code)
    lib.add_book(dune)
    lib.register_user(student)
    lib.register_user(professor)

    lib.borrow_book(student.id, clean_code.isbn)
    # a second borrower is turned away while the student holds the book
    try:
        lib.borrow_book(professor.id, clean_code.isbn)
    except LibraryError as e:
        print(f"Error: {e}")

    print("In-memory available books:")
    print_books(lib.get_all_available_books(), empty_message="No available books.")


if __name__ == "__main__":
    app()
