import json
from datetime import date

from typer.testing import CliRunner

from digital_library.book import Book
from digital_library.main import app
from digital_library.users import PremiumUser, RegularUser

runner = CliRunner()


def test_init_and_check_db(db_file):
    result = runner.invoke(app, ["init-db"])
    assert result.exit_code == 0
    assert f"Database ready: {db_file}" in result.stdout

    result = runner.invoke(app, ["check-db"])
    assert result.exit_code == 0
    assert "Connected to database successfully" in result.stdout


def test_list_no_books(db_file):
    result = runner.invoke(app, ["list-books"])
    assert result.exit_code == 0
    assert "No books in library." in result.stdout


def test_add_and_find_book(db_file):
    result = runner.invoke(app, ["add-book", "111", "Dune", "Frank Herbert", "1965", "--genre", "Science Fiction"])
    assert result.exit_code == 0
    assert "Book inserted: Dune" in result.stdout

    result = runner.invoke(app, ["find-book", "111"])
    assert result.exit_code == 0
    assert "Book Found" in result.stdout
    assert "Title: Dune" in result.stdout
    assert "Genre: Science Fiction" in result.stdout
    assert "Available: yes" in result.stdout


def test_add_book_rejects_blank_title(db_file):
    result = runner.invoke(app, ["add-book", "111", " ", "Frank Herbert", "1965"])
    assert result.exit_code == 1
    assert "Error: Title cannot be empty" in result.stdout


def test_add_duplicate_book_reports_failure(book_repo):
    book_repo.insert_book(Book("111", "Dune", "Frank Herbert", 1965))
    result = runner.invoke(app, ["add-book", "111", "Dune", "Frank Herbert", "1965"])
    assert result.exit_code == 0
    assert "Could not insert book with ISBN 111." in result.stdout


def test_find_book_not_found(db_file):
    result = runner.invoke(app, ["find-book", "nonexistent"])
    assert result.exit_code == 0
    assert "Book with ISBN nonexistent not found." in result.stdout


def test_set_availability_and_available_listing(book_repo):
    book_repo.insert_book(Book("2", "Refactoring", "Martin Fowler", 2018))
    book_repo.insert_book(Book("1", "Dune", "Frank Herbert", 1965))

    result = runner.invoke(app, ["set-availability", "2", "--unavailable"])
    assert result.exit_code == 0
    assert "Book ISBN=2 availability updated to False" in result.stdout

    result = runner.invoke(app, ["available"])
    assert result.exit_code == 0
    assert "1 - Dune by Frank Herbert (1965) [available]" in result.stdout
    assert "Refactoring" not in result.stdout


def test_remove_book(book_repo):
    book_repo.insert_book(Book("999", "To Be Removed", "Remover", 2000))
    result = runner.invoke(app, ["remove-book", "999"])
    assert "Book with ISBN 999 has been removed." in result.stdout

    result = runner.invoke(app, ["remove-book", "999"])
    assert "Book with ISBN 999 not found." in result.stdout


def test_newest_search_and_author(book_repo):
    book_repo.insert_book(Book("1", "Dune", "Frank Herbert", 1965))
    book_repo.insert_book(Book("2", "Refactoring", "Martin Fowler", 2018))
    book_repo.insert_book(Book("3", "Clean Code", "Robert C. Martin", 2008))

    result = runner.invoke(app, ["newest", "--limit", "1"])
    assert result.exit_code == 0
    assert "Refactoring" in result.stdout
    assert "Dune" not in result.stdout

    result = runner.invoke(app, ["search", "code"])
    assert "Clean Code" in result.stdout

    result = runner.invoke(app, ["by-author", "FRANK HERBERT"])
    assert "Dune" in result.stdout

    result = runner.invoke(app, ["by-author", "Nobody"])
    assert "No matching books." in result.stdout


def test_json_output(book_repo):
    book_repo.insert_book(Book("1", "Dune", "Frank Herbert", 1965))
    result = runner.invoke(app, ["--output", "json", "list-books"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout.strip().splitlines()[-1])
    assert payload[0]["isbn"] == "1"
    assert payload[0]["available"] is True


def test_add_and_find_user(db_file):
    result = runner.invoke(app, ["add-user", "PRF-777", "Dr. Jan Nowak", "--premium"])
    assert result.exit_code == 0
    assert "User inserted: Dr. Jan Nowak (premium, up to 15 books for 30 days)" in result.stdout

    result = runner.invoke(app, ["find-user", "PRF-777"])
    assert "User Found" in result.stdout
    assert "Type: premium" in result.stdout
    assert "Loan period: 30 days" in result.stdout


def test_list_rename_and_remove_user(user_repo):
    user_repo.insert_user(RegularUser("STU-123", "Anna Kowalska"))
    user_repo.insert_user(PremiumUser("PRF-777", "Dr. Jan Nowak"))

    result = runner.invoke(app, ["list-users"])
    lines = [ln for ln in result.stdout.splitlines() if ln.strip()]
    assert lines[0].startswith("PRF-777 - Dr. Jan Nowak (premium")
    assert lines[1].startswith("STU-123 - Anna Kowalska (regular")

    result = runner.invoke(app, ["rename-user", "STU-123", "Anna Smith"])
    assert "User ID=STU-123 name updated to Anna Smith" in result.stdout

    result = runner.invoke(app, ["remove-user", "PRF-777"])
    assert "User with id PRF-777 has been removed." in result.stdout

    result = runner.invoke(app, ["find-user", "PRF-777"])
    assert "User with id PRF-777 not found." in result.stdout


def test_demo_borrows_in_memory(db_file):
    result = runner.invoke(app, ["demo"])
    assert result.exit_code == 0
    assert "After deleting Dune:" in result.stdout
    in_memory = result.stdout.split("In-memory available books:")[1]
    assert "Dune" in in_memory
    assert "Clean Code" not in in_memory


def test_rich_book_table(book_repo):
    book_repo.insert_book(Book("111", "Dune", "Frank Herbert", 1965, "Science Fiction"))
    book_repo.insert_book(Book("222", "Refactoring", "Martin Fowler", 2018, available=False))
    result = runner.invoke(app, ["--output", "rich", "list-books"])
    assert result.exit_code == 0
    assert "Books" in result.stdout
    assert "Status" in result.stdout
    assert "Dune" in result.stdout
    assert "available" in result.stdout
    assert "borrowed" in result.stdout


def test_rich_user_table_shows_quota(user_repo):
    user_repo.insert_user(PremiumUser("PRF-777", "Jan Nowak"))
    user_repo.insert_user(RegularUser("STU-123", "Anna"))
    result = runner.invoke(app, ["--output", "rich", "list-users"])
    assert result.exit_code == 0
    assert "Users" in result.stdout
    assert "Quota" in result.stdout
    assert "0/15" in result.stdout
    assert "0/5" in result.stdout


def test_json_user_listing(user_repo):
    user_repo.insert_user(PremiumUser("PRF-777", "Dr. Jan Nowak", date(2023, 9, 1)))
    result = runner.invoke(app, ["--output", "json", "list-users"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout.strip().splitlines()[-1])
    assert payload == [{
        "id": "PRF-777",
        "name": "Dr. Jan Nowak",
        "registration_date": "2023-09-01",
        "user_type": "premium",
        "borrowed_books": [],
    }]


def test_catalog_queries_leave_out_status(book_repo):
    book_repo.insert_book(Book("1", "Dune", "Frank Herbert", 1965, available=False))
    result = runner.invoke(app, ["search", "dune"])
    assert result.exit_code == 0
    assert "1 - Dune by Frank Herbert (1965)" in result.stdout
    assert "[available]" not in result.stdout
    assert "[borrowed]" not in result.stdout


def test_demo_reports_rejected_borrow(db_file):
    result = runner.invoke(app, ["demo"])
    assert result.exit_code == 0
    assert "Error: Book is already borrowed: Clean Code" in result.stdout
