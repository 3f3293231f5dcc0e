"""Command-line interface for bookshelf.

Built with Typer for commands and Rich for output. Each command is one
screen of the catalogue: list (with search and sort), add, show, edit and
delete.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import get_config
from .db import Book, Database, Genre, get_db, reset_db
from .db.schemas import DEFAULT_GENRE
from .errors import BookNotFoundError, BookshelfError, ValidationError
from .query import SortOrder
from .views import EMPTY_MESSAGE, EMPTY_TITLE, AddBookForm, BookDetailView, BookListView, ListState

logger = logging.getLogger(__name__)

# Create the main app
app = typer.Typer(
    name="bookshelf",
    help="Manage your personal book catalogue.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()

_state: dict[str, Optional[Path]] = {"db_path": None}


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def _get_db() -> Database:
    return get_db(_state["db_path"])


def _default_sort(sort: Optional[SortOrder]) -> SortOrder:
    if sort is not None:
        return sort
    try:
        return SortOrder(get_config().default_sort)
    except ValueError:
        return SortOrder.NAME_ASC


def _fail(error: BookshelfError) -> None:
    """Report a catalogue error and exit with status 1."""
    if isinstance(error, ValidationError):
        print_error("Invalid input")
        for field, message in error.errors.items():
            console.print(f"  [red]{field}[/red]: {message}")
    else:
        print_error(str(error))
    raise typer.Exit(1)


def _resolve_book(db: Database, ref: str, search: str, sort: SortOrder) -> Book:
    """Find a book by list position (1-based) or by id / unique id prefix."""
    if ref.isdigit():
        books = db.query_books(search, sort)
        position = int(ref)
        if not 1 <= position <= len(books):
            raise BookNotFoundError(ref)
        return books[position - 1]

    book = db.get_book(ref)
    if book is not None:
        return book

    candidates = [b for b in db.get_all_books() if b.id.startswith(ref)]
    if len(candidates) == 1:
        return candidates[0]
    if len(candidates) > 1:
        print_error(f"Id prefix {ref!r} matches {len(candidates)} books")
        raise typer.Exit(1)
    raise BookNotFoundError(ref)


def format_book_table(books: list[Book], title: str = "Book") -> Table:
    """Create a rich table for displaying books."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Author", style="green", max_width=30)
    table.add_column("Id", style="dim")

    for i, book in enumerate(books, 1):
        table.add_row(str(i), book.name, book.author, book.id[:8])

    return table


def show_detail(view: BookDetailView) -> None:
    """Display a book detail panel."""
    lines = [
        f"[bold]{view.name}[/bold]",
        f"[dim]{view.author}[/dim]",
        f"{view.genre}  {view.publication_date}",
        "",
        f"[dim]Added {view.created_at} - id {view.book_id}[/dim]",
    ]
    console.print(Panel("\n".join(lines), title=view.title))


SearchOption = typer.Option("", "--search", "-q", help="Match name or author")
SortOption = typer.Option(None, "--sort", "-s", help="Sort order", case_sensitive=False)


# ============================================================================
# App Callback
# ============================================================================


@app.callback()
def main_callback(
    db: Optional[Path] = typer.Option(
        None, "--db", help="Database file (default: BOOKSHELF_DB_PATH)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Manage your personal book catalogue."""
    config = get_config()
    level = logging.getLevelName(config.log_level)
    if verbose:
        level = logging.DEBUG
    elif not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for problem in config.validate():
        logger.warning(problem)

    if db != _state["db_path"]:
        reset_db()
    _state["db_path"] = db


# ============================================================================
# Book Commands
# ============================================================================


@app.command("list")
def list_books(
    search: str = SearchOption,
    sort: Optional[SortOrder] = SortOption,
) -> None:
    """List books, optionally filtered and sorted."""
    sort = _default_sort(sort)
    with BookListView(_get_db(), search_text=search, sort=sort) as view:
        if view.state is ListState.EMPTY:
            if view.live.query.is_filtered:
                print_info(f"No books found matching: {search}")
            else:
                console.print(Panel(EMPTY_MESSAGE, title=EMPTY_TITLE))
            return

        console.print(format_book_table(view.books, title=f"{view.title} ({sort.label})"))
        total = view.db.count_books()
        if len(view.books) < total:
            print_info(f"Showing {len(view.books)} of {total} books")


@app.command()
def add(
    name: str = typer.Option(..., "--name", "-n", prompt="Book name"),
    author: str = typer.Option(..., "--author", "-a", prompt="Author"),
    publication_date: Optional[str] = typer.Option(
        None, "--date", "-d", help="Publication date YYYY-MM-DD (default: today)"
    ),
    genre: str = typer.Option(
        DEFAULT_GENRE.value, "--genre", "-g", help="Fantasy, Science Fiction or Mystery"
    ),
) -> None:
    """Add a new book."""
    form = AddBookForm(
        _get_db(),
        name=name,
        author=author,
        publication_date=publication_date,
        genre=genre,
    )
    try:
        book = form.submit()
    except BookshelfError as e:
        _fail(e)
    print_success(f"Added: {book.name} by {book.author}")


@app.command()
def show(
    ref: str = typer.Argument(..., help="List position or book id"),
    search: str = SearchOption,
    sort: Optional[SortOrder] = SortOption,
) -> None:
    """Show one book."""
    db = _get_db()
    try:
        book = _resolve_book(db, ref, search, _default_sort(sort))
        view = BookDetailView(db, book.id)
    except BookshelfError as e:
        _fail(e)
    show_detail(view)


@app.command()
def edit(
    ref: str = typer.Argument(..., help="List position or book id"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="New author"),
    publication_date: Optional[str] = typer.Option(
        None, "--date", "-d", help="New publication date YYYY-MM-DD"
    ),
    genre: Optional[str] = typer.Option(None, "--genre", "-g", help="New genre"),
    search: str = SearchOption,
    sort: Optional[SortOrder] = SortOption,
) -> None:
    """Edit a book. Without options, prompts for each field."""
    db = _get_db()
    try:
        book = _resolve_book(db, ref, search, _default_sort(sort))
        form = BookDetailView(db, book.id).edit_form()
    except BookshelfError as e:
        _fail(e)

    if all(v is None for v in (name, author, publication_date, genre)):
        console.rule(form.title)
        form.name = typer.prompt("Book name", default=form.name)
        form.author = typer.prompt("Author", default=form.author)
        form.publication_date = typer.prompt(
            "Publication date", default=form.publication_date.isoformat()
        )
        form.genre = typer.prompt("Genre", default=Genre.parse(form.genre).label)
    else:
        if name is not None:
            form.name = name
        if author is not None:
            form.author = author
        if publication_date is not None:
            form.publication_date = publication_date
        if genre is not None:
            form.genre = genre

    try:
        updated = form.submit()
    except BookshelfError as e:
        _fail(e)
    print_success(f"Saved: {updated.name} by {updated.author}")


@app.command()
def delete(
    positions: Optional[list[int]] = typer.Argument(None, help="List positions to delete"),
    ids: Optional[list[str]] = typer.Option(None, "--id", help="Book id to delete"),
    search: str = SearchOption,
    sort: Optional[SortOrder] = SortOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete books by list position or id."""
    if not positions and not ids:
        print_error("Give list positions or --id")
        raise typer.Exit(1)

    db = _get_db()
    with BookListView(db, search_text=search, sort=_default_sort(sort)) as view:
        indexes = [p - 1 for p in sorted(set(positions or []))]
        try:
            targets = [view.books[i] for i in indexes if i >= 0]
            if len(targets) != len(indexes):
                raise IndexError
        except IndexError:
            print_error(f"Positions must be between 1 and {len(view.books)}")
            raise typer.Exit(1)
        try:
            targets += [_resolve_book(db, ref, search, view.sort) for ref in ids or []]
        except BookshelfError as e:
            _fail(e)

        for book in targets:
            console.print(f"  {book.name} by {book.author}")
        if not yes and not typer.confirm(f"Delete {len(targets)} book(s)?"):
            print_info("Cancelled.")
            raise typer.Exit(0)

        try:
            deleted = view.delete_at(indexes)
            for book in targets[len(indexes):]:
                if db.delete_book(book.id):
                    deleted += 1
        except BookshelfError as e:
            _fail(e)

    print_success(f"Deleted {deleted} book(s)")


@app.command()
def genres() -> None:
    """List the available genres."""
    for genre in Genre:
        console.print(genre.label)


# ============================================================================
# Version Command
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"bookshelf version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
