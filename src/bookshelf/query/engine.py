"""Filtering and sorting of books.

Text comparison follows "standard" user-facing rules rather than byte order:
case and accents are ignored, and runs of digits compare by value.
"""

import re
import unicodedata
from enum import Enum
from typing import Iterable, Protocol


class SortOrder(str, Enum):
    """Sort order options."""

    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    AUTHOR_ASC = "author_asc"
    AUTHOR_DESC = "author_desc"

    @property
    def field(self) -> str:
        return self.value.rsplit("_", 1)[0]

    @property
    def descending(self) -> bool:
        return self.value.endswith("_desc")

    @property
    def label(self) -> str:
        return SORT_LABELS[self]


SORT_LABELS = {
    SortOrder.NAME_ASC: "Book Name A-Z",
    SortOrder.NAME_DESC: "Book Name Z-A",
    SortOrder.AUTHOR_ASC: "Author Name A-Z",
    SortOrder.AUTHOR_DESC: "Author Name Z-A",
}


class Searchable(Protocol):
    name: str
    author: str


_DIGITS = re.compile(r"(\d+)")


def normalize_text(text: str) -> str:
    """Fold case and strip accents."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def sort_key(text: str) -> tuple:
    """Natural ordering key: "Book 2" sorts before "Book 10"."""
    parts = _DIGITS.split(normalize_text(text))
    natural = tuple(int(part) if i % 2 else part for i, part in enumerate(parts))
    # Raw text breaks ties between strings that normalize the same
    return (natural, text)


def compare_text(a: str, b: str) -> int:
    """Three-way comparison on :func:`sort_key`, usable as an SQLite collation."""
    key_a, key_b = sort_key(a), sort_key(b)
    return (key_a > key_b) - (key_a < key_b)


def matches(book: Searchable, search_text: str) -> bool:
    """Check whether a book matches the search text.

    Only empty search text matches every book; whitespace is searched for
    like any other character.
    """
    if not search_text:
        return True
    needle = normalize_text(search_text)
    return needle in normalize_text(book.name) or needle in normalize_text(book.author)


def filter_books(books: Iterable[Searchable], search_text: str) -> list:
    """Keep books whose name or author contains the search text."""
    return [book for book in books if matches(book, search_text)]


def sort_books(books: Iterable[Searchable], order: SortOrder = SortOrder.NAME_ASC) -> list:
    """Sort books by a single field."""
    order = SortOrder(order)
    return sorted(
        books,
        key=lambda book: sort_key(getattr(book, order.field)),
        reverse=order.descending,
    )


def apply_query(
    books: Iterable[Searchable],
    search_text: str = "",
    order: SortOrder = SortOrder.NAME_ASC,
) -> list:
    """Filter first, then sort the filtered set."""
    return sort_books(filter_books(books, search_text), order)
