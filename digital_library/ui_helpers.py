import os
import json
from typing import List, Any, Sequence
from rich.console import Console
from rich.table import Table

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIBRARY_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def _status(book: Any) -> str:
    return "available" if book.available else "borrowed"

def print_books(books: Sequence[Any], empty_message: str = "No books in library.",
                show_status: bool = True) -> None:
    """Print books in the current output mode.
    - plain: 'ISBN - Title by Author (Year) [status]' lines, status left out when show_status is False
    - json: JSON array of book dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print(empty_message)
        return

    if mode == "json":
        payload = [b.to_dict() for b in books]
        if not show_status:
            for item in payload:
                item.pop("available")
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Year", justify="right")
        table.add_column("Genre")
        if show_status:
            table.add_column("Status")
        for b in books:
            status = "[green]available[/]" if b.available else "[red]borrowed[/]"
            cells = [b.isbn, b.title, b.author, str(b.publication_year), b.genre]
            if show_status:
                cells.append(status)
            table.add_row(*cells)
        _console.print(table)
    else:
        for b in books:
            line = f"{b.isbn} - {b.title} by {b.author} ({b.publication_year})"
            print(f"{line} [{_status(b)}]" if show_status else line)

def print_users(users: List[Any]) -> None:
    """Print users in the current output mode."""
    mode = get_output_mode()

    if not users:
        print("No users registered.")
        return

    if mode == "json":
        print(json.dumps([u.to_dict() for u in users], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="👤 Users", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Registered")
        table.add_column("Quota", justify="right")
        for u in users:
            table.add_row(u.id, u.name, u.user_type.tag, u.registration_date.isoformat(),
                          f"{len(u.borrowed_books)}/{u.max_books_allowed}")
        _console.print(table)
    else:
        for u in users:
            print(f"{u.id} - {u.name} ({u.user_type.tag}, registered {u.registration_date.isoformat()})")
