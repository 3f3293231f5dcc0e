"""SQLAlchemy ORM models for the local SQLite database.

Tables:
- books: one row per catalogued book
"""

from datetime import date, datetime, timezone
from uuid import uuid4

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .schemas import DEFAULT_GENRE, Genre


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Book(Base):
    """Book model."""

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    publication_date: Mapped[str] = mapped_column(String(10), nullable=False)  # ISO date
    genre: Mapped[str] = mapped_column(String(50), nullable=False, default=DEFAULT_GENRE.value)

    # Write-once
    created_at: Mapped[str] = mapped_column(String(32), nullable=False, default=utc_now)

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, name='{self.name}', author='{self.author}')>"

    def get_publication_date(self) -> date:
        """Get publication_date as a date."""
        return date.fromisoformat(self.publication_date)

    def get_created_at(self) -> datetime:
        """Get created_at as an aware datetime."""
        return datetime.fromisoformat(self.created_at)

    def get_genre(self) -> Genre:
        """Get genre as enum member."""
        return Genre(self.genre)
