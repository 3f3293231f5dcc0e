"""Screens of the catalogue, independent of how they are rendered."""

from .detail import BookDetailView
from .forms import AddBookForm, BookForm, EditBookForm
from .listing import EMPTY_MESSAGE, EMPTY_TITLE, BookListView, ListState

__all__ = [
    "AddBookForm",
    "BookDetailView",
    "BookForm",
    "BookListView",
    "EditBookForm",
    "EMPTY_MESSAGE",
    "EMPTY_TITLE",
    "ListState",
]
