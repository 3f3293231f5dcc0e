"""Tests for filtering and sorting."""

from dataclasses import dataclass

import pytest

from bookshelf.query import (
    SortOrder,
    apply_query,
    compare_text,
    filter_books,
    matches,
    normalize_text,
    sort_books,
    sort_key,
)


@dataclass
class FakeBook:
    """Minimal stand-in with the searchable fields."""

    name: str
    author: str


@pytest.fixture
def shelf() -> list[FakeBook]:
    return [
        FakeBook("Dune", "Frank Herbert"),
        FakeBook("The Hobbit", "J. R. R. Tolkien"),
        FakeBook("Murder on the Orient Express", "Agatha Christie"),
        FakeBook("Émile", "Jean-Jacques Rousseau"),
        FakeBook("Book 10", "Zed"),
        FakeBook("Book 2", "Amy"),
    ]


class TestNormalizeText:
    """Tests for normalize_text."""

    def test_case_folded(self):
        assert normalize_text("HeRbErT") == "herbert"

    def test_accents_removed(self):
        assert normalize_text("Émile Zoë") == "emile zoe"

    def test_empty(self):
        assert normalize_text("") == ""


class TestMatches:
    """Tests for the search predicate."""

    def test_empty_search_matches_everything(self, shelf):
        """Test that empty search text matches all books."""
        assert all(matches(book, "") for book in shelf)

    def test_whitespace_is_not_empty(self):
        """Test that whitespace is searched for like any other text."""
        dune = FakeBook("Dune", "Herbert")
        assert matches(dune, " ") is False
        assert matches(dune, "Dune ") is False
        assert matches(FakeBook("Dune", "Frank Herbert"), " ") is True

    def test_matches_name(self, shelf):
        assert matches(shelf[0], "dun")

    def test_matches_author(self, shelf):
        assert matches(shelf[0], "HERB")

    def test_accent_insensitive(self, shelf):
        """Test that accents are ignored on both sides."""
        assert matches(shelf[3], "emile")
        assert matches(shelf[0], "dúne")

    def test_no_match(self, shelf):
        assert not matches(shelf[0], "tolkien")

    def test_iff_substring(self, shelf):
        """Test that a book matches iff the text is in its name or author."""
        for needle in ["o", "the", "agatha", "book 1", "zz", "j. r.", " ", "dune "]:
            for book in shelf:
                expected = (
                    needle.casefold() in book.name.casefold()
                    or needle.casefold() in book.author.casefold()
                )
                assert matches(book, needle) == expected, (needle, book)


class TestSortBooks:
    """Tests for sorting."""

    def test_name_ascending(self, shelf):
        names = [b.name for b in sort_books(shelf, SortOrder.NAME_ASC)]
        assert names == [
            "Book 2",
            "Book 10",
            "Dune",
            "Émile",
            "Murder on the Orient Express",
            "The Hobbit",
        ]

    def test_name_descending_is_reverse(self, shelf):
        """Test that descending is exactly the reverse of ascending."""
        ascending = sort_books(shelf, SortOrder.NAME_ASC)
        descending = sort_books(shelf, SortOrder.NAME_DESC)
        assert descending == list(reversed(ascending))

    def test_author_orders(self, shelf):
        ascending = [b.author for b in sort_books(shelf, SortOrder.AUTHOR_ASC)]
        descending = [b.author for b in sort_books(shelf, SortOrder.AUTHOR_DESC)]
        assert ascending[0] == "Agatha Christie"
        assert ascending[-1] == "Zed"
        assert descending == list(reversed(ascending))

    def test_natural_numbers(self):
        """Test that digit runs compare by value."""
        assert sort_key("Book 2") < sort_key("Book 10")

    def test_compare_text(self):
        assert compare_text("Book 2", "book 10") == -1
        assert compare_text("Émile", "emile") != 0
        assert compare_text("Dune", "Dune") == 0
        assert compare_text("the Hobbit", "Dune") == 1

    def test_case_insensitive(self):
        books = [FakeBook("banana", "x"), FakeBook("Apple", "x"), FakeBook("cherry", "x")]
        assert [b.name for b in sort_books(books)] == ["Apple", "banana", "cherry"]

    def test_accepts_value_string(self, shelf):
        """Test that the plain option value works as a sort order."""
        assert sort_books(shelf, "author_desc") == sort_books(shelf, SortOrder.AUTHOR_DESC)


class TestSortOrder:
    """Tests for SortOrder metadata."""

    @pytest.mark.parametrize(
        "order,field,descending,label",
        [
            (SortOrder.NAME_ASC, "name", False, "Book Name A-Z"),
            (SortOrder.NAME_DESC, "name", True, "Book Name Z-A"),
            (SortOrder.AUTHOR_ASC, "author", False, "Author Name A-Z"),
            (SortOrder.AUTHOR_DESC, "author", True, "Author Name Z-A"),
        ],
    )
    def test_metadata(self, order, field, descending, label):
        assert order.field == field
        assert order.descending is descending
        assert order.label == label


class TestApplyQuery:
    """Tests for filter-then-sort."""

    def test_empty_search_returns_all(self, shelf):
        assert len(apply_query(shelf, "")) == len(shelf)

    def test_filter_then_sort(self, shelf):
        books = apply_query(shelf, "book", SortOrder.NAME_DESC)
        assert [b.name for b in books] == ["Book 10", "Book 2"]

    def test_filter_books_keeps_order(self, shelf):
        """Test that filtering alone preserves input order."""
        assert [b.name for b in filter_books(shelf, "o")] == [
            b.name for b in shelf if "o" in (b.name + b.author).casefold()
        ]

    def test_dune_hobbit_scenario(self):
        """Search narrows to Dune; author descending puts Tolkien first."""
        books = [FakeBook("Dune", "Herbert"), FakeBook("Hobbit", "Tolkien")]

        assert [b.name for b in apply_query(books, "herb")] == ["Dune"]
        assert [b.name for b in apply_query(books, "", SortOrder.AUTHOR_DESC)] == [
            "Hobbit",
            "Dune",
        ]
