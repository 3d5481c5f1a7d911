"""Digital Library - Core Application Package

This package contains the core application modules including:
- Data models (book.py, users.py)
- Library management logic (library.py)
- Database layer (database.py, repositories.py)
- CLI interface (main.py, ui_helpers.py)
"""
