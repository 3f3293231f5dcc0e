"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the bookshelf application,
including temporary databases and sample books.
"""

import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Generator

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from bookshelf.config import reset_config
from bookshelf.db.models import Book
from bookshelf.db.schemas import BookCreate, Genre
from bookshelf.db.sqlite import Database, reset_db


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture(scope="function")
def db(temp_db_path: Path) -> Generator[Database, None, None]:
    """Create a test database instance."""
    # Reset any global state
    reset_db()
    reset_config()

    # Set environment variable for test database
    os.environ["BOOKSHELF_DB_PATH"] = str(temp_db_path)

    database = Database(str(temp_db_path))
    database.create_tables()
    yield database

    # Cleanup
    database.close()
    reset_db()
    reset_config()
    if "BOOKSHELF_DB_PATH" in os.environ:
        del os.environ["BOOKSHELF_DB_PATH"]


@pytest.fixture
def failing_commit(monkeypatch):
    """Make every session commit fail like a full or read-only disk.

    Yields the monkeypatch context; leaving it restores normal commits.
    """

    def fail(self):
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    with monkeypatch.context() as m:
        m.setattr(Session, "commit", fail)
        yield m


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def dune_data() -> BookCreate:
    """Create sample book data for testing."""
    return BookCreate(
        name="Dune",
        author="Frank Herbert",
        publication_date=date(1965, 8, 1),
        genre=Genre.SCIENCE_FICTION,
    )


@pytest.fixture
def hobbit_data() -> BookCreate:
    """Create a second sample book."""
    return BookCreate(
        name="The Hobbit",
        author="J. R. R. Tolkien",
        publication_date=date(1937, 9, 21),
        genre=Genre.FANTASY,
    )


@pytest.fixture
def created_book(db: Database, dune_data: BookCreate) -> Book:
    """Create and return a book in the database."""
    return db.create_book(dune_data)


@pytest.fixture
def multiple_books(db: Database) -> list[Book]:
    """Create multiple books in the database."""
    books_data = [
        BookCreate(
            name="Dune",
            author="Frank Herbert",
            publication_date=date(1965, 8, 1),
            genre=Genre.SCIENCE_FICTION,
        ),
        BookCreate(
            name="The Hobbit",
            author="J. R. R. Tolkien",
            publication_date=date(1937, 9, 21),
            genre=Genre.FANTASY,
        ),
        BookCreate(
            name="Murder on the Orient Express",
            author="Agatha Christie",
            publication_date=date(1934, 1, 1),
            genre=Genre.MYSTERY,
        ),
        BookCreate(
            name="Émile",
            author="Jean-Jacques Rousseau",
            publication_date=date(1762, 5, 1),
            genre=Genre.FANTASY,
        ),
    ]
    return [db.create_book(data) for data in books_data]


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()


@pytest.fixture
def cli_app():
    """Get the CLI app for testing."""
    from bookshelf.cli import app
    return app
