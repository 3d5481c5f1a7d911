import os
import pytest

from digital_library.config import settings
from digital_library.library import Library
from digital_library.repositories import BookRepository, UserRepository


@pytest.fixture
def db_file(tmp_path, monkeypatch):
    # Unique database file per test; the CLI reads it through settings
    path = str(tmp_path / "library_test.db")
    monkeypatch.setattr(settings, "db_file", path)
    monkeypatch.setenv("LIBRARY_CLI_OUTPUT", "plain")
    yield path
    if os.path.exists(path):
        os.remove(path)


@pytest.fixture
def book_repo(db_file):
    return BookRepository(db_file)


@pytest.fixture
def user_repo(db_file):
    return UserRepository(db_file)


@pytest.fixture
def lib():
    return Library("Test Library")
