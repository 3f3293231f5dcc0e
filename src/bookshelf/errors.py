"""Exception types raised by the catalogue.

Validation problems are reported before the store is touched; storage
problems are reported after the failed transaction has been rolled back.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError


class BookshelfError(Exception):
    """Base class for all catalogue errors."""


class ValidationError(BookshelfError):
    """User input was rejected before reaching the store."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        details = "; ".join(f"{field}: {message}" for field, message in errors.items())
        super().__init__(f"Invalid book data ({details})")

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Flatten a pydantic error into field -> message pairs."""
        errors: dict[str, str] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "book"
            errors.setdefault(field, error["msg"])
        return cls(errors)


class StorageError(BookshelfError):
    """A change could not be written to the database."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"Could not {operation} book"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class BookNotFoundError(BookshelfError):
    """The requested book does not exist (any more)."""

    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__(f"No book with id {book_id}")
