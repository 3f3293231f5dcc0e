"""bookshelf - a personal book catalogue with a local SQLite store."""

__version__ = "0.1.0"
