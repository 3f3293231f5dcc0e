"""Database module for local SQLite storage."""

from .models import Book
from .schemas import BookCreate, BookUpdate, ChangeEvent, ChangeKind, Genre
from .sqlite import Database, get_db, reset_db

__all__ = [
    "Book",
    "BookCreate",
    "BookUpdate",
    "ChangeEvent",
    "ChangeKind",
    "Genre",
    "Database",
    "get_db",
    "reset_db",
]
