"""Pydantic schemas for data validation.

These schemas define the shape of book data on its way into the store
(create/update) and the change events it emits afterwards.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Genre(str, Enum):
    """Closed set of genres. Values are the display labels."""

    FANTASY = "Fantasy"
    SCIENCE_FICTION = "Science Fiction"
    MYSTERY = "Mystery"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "str | Genre") -> "Genre":
        """Parse a label or member name, case-insensitively."""
        if isinstance(value, Genre):
            return value
        text = str(value).strip()
        wanted = text.casefold()
        for genre in cls:
            if wanted in (genre.value.casefold(), genre.name.casefold()):
                return genre
        raise ValueError(
            f"Unknown genre {text!r}; expected one of: "
            + ", ".join(g.value for g in cls)
        )


class ChangeKind(str, Enum):
    """Type of change committed to the store."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


DEFAULT_GENRE = Genre.SCIENCE_FICTION


def _strip(v):
    if isinstance(v, str):
        return v.strip()
    return v


def _parse_genre(v):
    if v is None or isinstance(v, Genre):
        return v
    return Genre.parse(v)


# ============================================================================
# Book Schemas
# ============================================================================


class BookBase(BaseModel):
    """Editable book fields common to create/update operations."""

    name: str = Field(..., min_length=1, description="Book title")
    author: str = Field(..., min_length=1, description="Author name")
    publication_date: date
    genre: Genre = Field(default=DEFAULT_GENRE)

    @field_validator("name", "author", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Trim surrounding whitespace so blank input fails min_length."""
        return _strip(v)

    @field_validator("genre", mode="before")
    @classmethod
    def parse_genre(cls, v):
        return _parse_genre(v)


class BookCreate(BookBase):
    """Schema for creating a new book."""

    pass


class BookUpdate(BaseModel):
    """Schema for updating an existing book. All fields optional.

    id and created_at have no counterpart here: they never change.
    """

    name: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, min_length=1)
    publication_date: Optional[date] = None
    genre: Optional[Genre] = None

    @field_validator("name", "author", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)

    @field_validator("genre", mode="before")
    @classmethod
    def parse_genre(cls, v):
        return _parse_genre(v)


class ChangeEvent(BaseModel):
    """Notification sent to store subscribers after a commit."""

    kind: ChangeKind
    book_id: str
