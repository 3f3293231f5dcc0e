"""Search and sort for the book list."""

from .engine import (
    SORT_LABELS,
    SortOrder,
    apply_query,
    compare_text,
    filter_books,
    matches,
    normalize_text,
    sort_books,
    sort_key,
)
from .live import LiveQuery
from .schemas import BookQuery

__all__ = [
    "BookQuery",
    "LiveQuery",
    "SORT_LABELS",
    "SortOrder",
    "apply_query",
    "compare_text",
    "filter_books",
    "matches",
    "normalize_text",
    "sort_books",
    "sort_key",
]
