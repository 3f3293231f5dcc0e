"""Add and edit forms.

Forms hold user input until it is submitted or cancelled. Submitting
validates the input, writes it through the database (which commits
immediately) and dismisses the form; cancelling dismisses it without
touching the database.
"""

import logging
from datetime import date
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..db.models import Book
from ..db.schemas import DEFAULT_GENRE, BookCreate, BookUpdate, Genre
from ..db.sqlite import Database
from ..errors import BookNotFoundError, ValidationError

logger = logging.getLogger(__name__)


class BookForm:
    """Fields shared by the add and edit forms."""

    title = "Book"

    def __init__(
        self,
        db: Database,
        name: str = "",
        author: str = "",
        publication_date: Union[date, str, None] = None,
        genre: Union[Genre, str] = DEFAULT_GENRE,
    ):
        self.db = db
        self.name = name
        self.author = author
        self.publication_date = publication_date or date.today()
        self.genre = genre
        self.dismissed = False

    def validate(self) -> BookCreate:
        """Check the current input.

        Raises:
            ValidationError: if a required field is blank or a value is malformed
        """
        try:
            return BookCreate(
                name=self.name,
                author=self.author,
                publication_date=self.publication_date,
                genre=self.genre,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e

    def cancel(self) -> None:
        """Discard the input without touching the database."""
        self.dismissed = True


class AddBookForm(BookForm):
    """Form for adding a new book."""

    title = "Add Book"

    def submit(self) -> Book:
        """Validate, insert and dismiss.

        On StorageError the form stays open with its input intact.
        """
        data = self.validate()
        book = self.db.create_book(data)
        self.dismissed = True
        return book


class EditBookForm(BookForm):
    """Form for editing an existing book, pre-filled from its current values."""

    title = "Edit Book"

    def __init__(self, db: Database, book: Book):
        super().__init__(
            db,
            name=book.name,
            author=book.author,
            publication_date=book.get_publication_date(),
            genre=book.get_genre(),
        )
        self.book_id = book.id
        self.book: Optional[Book] = book

    def submit(self) -> Book:
        """Validate, overwrite the editable fields and dismiss.

        Raises:
            BookNotFoundError: if the book was deleted meanwhile
        """
        data = self.validate()
        update = BookUpdate(**data.model_dump())
        book = self.db.update_book(self.book_id, update)
        if book is None:
            logger.warning("Edit of missing book %s", self.book_id)
            raise BookNotFoundError(self.book_id)
        self.book = book
        self.dismissed = True
        return book
