"""Live queries: results that re-derive themselves when the store changes."""

import logging
from typing import Callable, Optional

from ..db.models import Book
from ..db.schemas import ChangeEvent
from ..db.sqlite import Database
from .engine import SortOrder
from .schemas import BookQuery

logger = logging.getLogger(__name__)

ResultListener = Callable[[list[Book]], None]


class LiveQuery:
    """A filtered, sorted view of the catalogue kept current by the store.

    The query subscribes to the database on construction. Each committed
    create, update or delete re-runs the query and passes the fresh result
    to every listener registered with :meth:`observe`.
    """

    def __init__(self, db: Database, query: Optional[BookQuery] = None):
        self.db = db
        self.query = query or BookQuery()
        self._listeners: list[ResultListener] = []
        self._results: list[Book] = []
        self._unsubscribe: Optional[Callable[[], None]] = db.subscribe(self._on_change)
        self.refresh()

    @property
    def results(self) -> list[Book]:
        return list(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __getitem__(self, index: int) -> Book:
        return self._results[index]

    def __iter__(self):
        return iter(list(self._results))

    def observe(self, listener: ResultListener) -> Callable[[], None]:
        """Register a listener for result changes. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def update(
        self,
        search_text: Optional[str] = None,
        sort: Optional[SortOrder] = None,
    ) -> list[Book]:
        """Change search text and/or sort order, then re-derive."""
        changes = {}
        if search_text is not None:
            changes["search_text"] = search_text
        if sort is not None:
            changes["sort"] = SortOrder(sort)
        if changes:
            self.query = BookQuery(**{**self.query.model_dump(), **changes})
        return self.refresh()

    def refresh(self) -> list[Book]:
        """Re-run the query and notify listeners."""
        self._results = self.db.query_books(self.query.search_text, self.query.sort)
        logger.debug(
            "Live query %r/%s -> %d books",
            self.query.search_text,
            self.query.sort.value,
            len(self._results),
        )
        for listener in list(self._listeners):
            listener(self.results)
        return self.results

    def _on_change(self, event: ChangeEvent) -> None:
        logger.debug("Store %s of %s; refreshing", event.kind.value, event.book_id)
        self.refresh()

    def close(self) -> None:
        """Stop following store changes."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def closed(self) -> bool:
        return self._unsubscribe is None

    def __enter__(self) -> "LiveQuery":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
