"""SQLite database operations.

Handles database connection, session management, CRUD operations and change
notification. Every mutating operation commits before returning; listeners
registered with :meth:`Database.subscribe` are told about each commit.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Generator, Optional, Union

from sqlalchemy import String, create_engine, event, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..errors import StorageError
from .models import Base, Book, generate_uuid, utc_now
from .schemas import BookCreate, BookUpdate, ChangeEvent, ChangeKind

logger = logging.getLogger(__name__)

ChangeListener = Callable[[ChangeEvent], None]


def _register_text_functions(dbapi_connection, connection_record) -> None:
    """Expose accent/case folding and natural ordering to SQL on each new connection."""
    from ..query.engine import compare_text, normalize_text

    dbapi_connection.create_function("fold", 1, normalize_text, deterministic=True)
    dbapi_connection.create_collation("natural_text", compare_text)


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Union[str, Path, None] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file, or ":memory:". If None,
                     uses the configured BOOKSHELF_DB_PATH.
        """
        if db_path is None:
            from ..config import get_config

            db_path = get_config().db_path

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"
        self._listeners: list[ChangeListener] = []

        if not self._is_memory:
            self._ensure_directory()

        # For in-memory databases, use StaticPool to reuse the same connection
        # so all sessions share the same database
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        event.listen(self.engine, "connect", _register_text_functions)
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    def close(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @contextmanager
    def _write(self, operation: str) -> Generator[Session, None, None]:
        """Session for a mutating operation; failures become StorageError."""
        try:
            with self.get_session() as s:
                yield s
        except SQLAlchemyError as e:
            logger.error("Failed to %s book; changes rolled back", operation, exc_info=True)
            raise StorageError(operation, e) from e

    # ========================================================================
    # Change Notification
    # ========================================================================

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener called after every committed change.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, kind: ChangeKind, book_id: str) -> None:
        change = ChangeEvent(kind=kind, book_id=book_id)
        for listener in list(self._listeners):
            # Already committed: report listener failures and keep going
            try:
                listener(change)
            except Exception:
                logger.exception("Change listener %r failed on %s", listener, kind.value)

    # ========================================================================
    # Book Operations
    # ========================================================================

    def create_book(self, book: BookCreate) -> Book:
        """Insert a new book and commit it."""
        with self._write("create") as s:
            db_book = Book(
                id=generate_uuid(),
                name=book.name,
                author=book.author,
                publication_date=book.publication_date.isoformat(),
                genre=book.genre.value,
                created_at=utc_now(),
            )
            s.add(db_book)
            s.flush()
            s.expunge(db_book)

        logger.info("Created book %s (%s)", db_book.id, db_book.name)
        self._notify(ChangeKind.CREATE, db_book.id)
        return db_book

    def get_book(self, book_id: str) -> Optional[Book]:
        """Get a book by ID."""
        with self.get_session() as s:
            book = s.get(Book, book_id)
            if book:
                s.expunge(book)
            return book

    def get_all_books(self) -> list[Book]:
        """Get all books in insertion order."""
        with self.get_session() as s:
            stmt = select(Book).order_by(Book.created_at)
            books = list(s.execute(stmt).scalars().all())
            for book in books:
                s.expunge(book)
            return books

    def count_books(self) -> int:
        """Count all books."""
        with self.get_session() as s:
            return s.execute(select(func.count()).select_from(Book)).scalar() or 0

    def query_books(self, search_text: str = "", sort=None) -> list[Book]:
        """Get a filtered, sorted snapshot of the catalogue.

        Args:
            search_text: Case- and accent-insensitive text matched against
                         name or author. Empty matches everything.
            sort: A query.SortOrder; defaults to name ascending.
        """
        from ..query.engine import SortOrder, normalize_text

        order = SortOrder(sort or SortOrder.NAME_ASC)

        with self.get_session() as s:
            stmt = select(Book)

            # Text search on folded name/author
            if search_text:
                needle = normalize_text(search_text)
                stmt = stmt.where(or_(
                    func.fold(Book.name, type_=String).contains(needle, autoescape=True),
                    func.fold(Book.author, type_=String).contains(needle, autoescape=True),
                ))

            stmt = self._apply_sort(stmt, order)
            books = list(s.execute(stmt).scalars().all())
            for book in books:
                s.expunge(book)
            return books

    def _apply_sort(self, stmt, order):
        """Apply natural ordering; ties keep insertion order."""
        column = getattr(Book, order.field).collate("natural_text")
        primary = column.desc() if order.descending else column.asc()
        return stmt.order_by(primary, Book.created_at.asc())

    def update_book(self, book_id: str, update: BookUpdate) -> Optional[Book]:
        """Overwrite the editable fields of a book and commit.

        Returns None if no book has that id.
        """
        with self._write("update") as s:
            book = s.get(Book, book_id)
            if not book:
                return None

            update_data = update.model_dump(exclude_unset=True, exclude_none=True)
            for field, value in update_data.items():
                if field == "publication_date":
                    setattr(book, field, value.isoformat())
                elif field == "genre":
                    setattr(book, field, value.value)
                else:
                    setattr(book, field, value)

            s.flush()
            s.expunge(book)

        logger.info("Updated book %s (%s)", book.id, ", ".join(update_data) or "no fields")
        self._notify(ChangeKind.UPDATE, book.id)
        return book

    def delete_book(self, book_id: str) -> bool:
        """Delete a book by ID and commit."""
        with self._write("delete") as s:
            book = s.get(Book, book_id)
            if not book:
                return False
            s.delete(book)

        logger.info("Deleted book %s", book_id)
        self._notify(ChangeKind.DELETE, book_id)
        return True


# Global database instance, used by the CLI entry point
_db: Optional[Database] = None


def get_db(db_path: Union[str, Path, None] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    if _db is not None:
        _db.close()
    _db = None
