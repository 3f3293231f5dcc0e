"""The book list screen: search, sort, delete and navigate."""

import logging
from enum import Enum
from typing import Callable, Iterable, Optional

from ..db.models import Book
from ..db.sqlite import Database
from ..query import BookQuery, LiveQuery, SortOrder
from .detail import BookDetailView
from .forms import AddBookForm

logger = logging.getLogger(__name__)

EMPTY_TITLE = "No Book"
EMPTY_MESSAGE = "No Book yet. Add a new book to get started."


class ListState(str, Enum):
    """Observable states of the list."""

    EMPTY = "empty"
    POPULATED = "populated"


class BookListView:
    """Live list of books for the current search text and sort order."""

    title = "Book"

    def __init__(
        self,
        db: Database,
        search_text: str = "",
        sort: SortOrder = SortOrder.NAME_ASC,
    ):
        self.db = db
        self.live = LiveQuery(db, BookQuery(search_text=search_text, sort=sort))

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def books(self) -> list[Book]:
        return self.live.results

    @property
    def state(self) -> ListState:
        return ListState.EMPTY if len(self.live) == 0 else ListState.POPULATED

    @property
    def rows(self) -> list[tuple[str, str]]:
        """(name, author) pairs in display order."""
        return [(book.name, book.author) for book in self.live]

    @property
    def search_text(self) -> str:
        return self.live.query.search_text

    @property
    def sort(self) -> SortOrder:
        return self.live.query.sort

    def observe(self, listener: Callable[[list[Book]], None]) -> Callable[[], None]:
        return self.live.observe(listener)

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def set_search_text(self, text: str) -> list[Book]:
        return self.live.update(search_text=text or "")

    def set_sort(self, sort: SortOrder) -> list[Book]:
        return self.live.update(sort=sort)

    def delete_at(self, indexes: Iterable[int]) -> int:
        """Delete the books at the given positions of the current list.

        Every position is checked before anything is deleted.

        Raises:
            IndexError: if a position is outside the list
        """
        current = self.live.results
        positions = sorted(set(indexes))
        for index in positions:
            if not 0 <= index < len(current):
                raise IndexError(f"No book at position {index}")

        targets = [current[index] for index in positions]
        deleted = 0
        for book in targets:
            if self.db.delete_book(book.id):
                deleted += 1
        logger.debug("Deleted %d of %d selected books", deleted, len(targets))
        return deleted

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def detail(self, index: int) -> BookDetailView:
        """Open the book at a position of the current list.

        Raises:
            IndexError: if the position is outside the list
        """
        if not 0 <= index < len(self.live):
            raise IndexError(f"No book at position {index}")
        return BookDetailView(self.db, self.live[index].id)

    def add_form(self) -> AddBookForm:
        return AddBookForm(self.db)

    def close(self) -> None:
        self.live.close()

    def __enter__(self) -> "BookListView":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
