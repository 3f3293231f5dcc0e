"""Read-only view of a single book."""

from ..db.models import Book
from ..db.sqlite import Database
from ..errors import BookNotFoundError
from .forms import EditBookForm

DATE_FORMAT = "%m/%d/%Y"


class BookDetailView:
    """Shows one book and leads to its edit form."""

    title = "Book Detail"

    def __init__(self, db: Database, book_id: str):
        self.db = db
        self.book_id = book_id
        self.book = self._load()

    def _load(self) -> Book:
        book = self.db.get_book(self.book_id)
        if book is None:
            raise BookNotFoundError(self.book_id)
        return book

    def refresh(self) -> Book:
        """Re-read the book from the database."""
        self.book = self._load()
        return self.book

    @property
    def name(self) -> str:
        return self.book.name

    @property
    def author(self) -> str:
        return self.book.author

    @property
    def genre(self) -> str:
        return self.book.get_genre().label

    @property
    def publication_date(self) -> str:
        return self.book.get_publication_date().strftime(DATE_FORMAT)

    @property
    def created_at(self) -> str:
        return self.book.get_created_at().strftime("%Y-%m-%d %H:%M UTC")

    def fields(self) -> list[tuple[str, str]]:
        """Label/value pairs in display order."""
        return [
            ("Name", self.name),
            ("Author", self.author),
            ("Genre", self.genre),
            ("Published", self.publication_date),
            ("Added", self.created_at),
        ]

    def edit_form(self) -> EditBookForm:
        return EditBookForm(self.db, self.book)
