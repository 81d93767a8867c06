"""
Book repository: the only code that reads or writes the books table.
Handles filtering, sorting, pagination, conflicts and the transaction boundary.
"""

from typing import Awaitable, Callable, Optional, TypeVar

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.models import Book, GetBooksQuery, PagedResult
from catalog.schema import BookRow

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# SQLSTATE for unique_violation (PostgreSQL and compatible drivers)
UNIQUE_VIOLATION_SQLSTATE = "23505"


class BookConflictError(Exception):
    """A write was rejected by a uniqueness constraint on the books table."""

    def __init__(self, message: str = "Book violates a uniqueness constraint"):
        super().__init__(message)


def is_unique_violation(error: IntegrityError) -> bool:
    """
    Tell unique-constraint failures apart from other integrity errors.

    Args:
        error: Integrity error raised by SQLAlchemy

    Returns:
        True if the driver reported a duplicate key
    """
    driver_error = error.orig
    sqlstate = getattr(driver_error, "sqlstate", None) or getattr(driver_error, "pgcode", None)
    if sqlstate == UNIQUE_VIOLATION_SQLSTATE:
        return True
    message = str(driver_error)
    return "UNIQUE constraint failed" in message or "duplicate key value" in message


def _to_entity(row: BookRow) -> Book:
    return Book.model_validate(row)


class BookRepository:
    """Async repository over one request-scoped session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_books(self, query: GetBooksQuery) -> PagedResult[Book]:
        """
        Get books with filtering, sorting and pagination.

        Args:
            query: Filter and pagination parameters

        Returns:
            The requested page and the number of books matching the filter
        """
        statement = select(BookRow)

        if query.title:
            statement = statement.where(BookRow.title.contains(query.title, autoescape=True))

        if query.author:
            statement = statement.where(BookRow.author.contains(query.author, autoescape=True))

        total_count = await self.session.scalar(
            select(func.count()).select_from(statement.subquery())
        )

        page_statement = (
            statement
            .order_by(BookRow.published_date.desc(), BookRow.id.asc())
            .offset(query.offset)
            .limit(query.page_size)
        )
        rows = (await self.session.scalars(page_statement)).all()

        return PagedResult[Book](
            items=[_to_entity(row) for row in rows],
            total_count=total_count or 0,
        )

    async def get_book_by_id(self, book_id: int) -> Optional[Book]:
        """
        Get a single book by ID.

        Args:
            book_id: Book identifier

        Returns:
            Book if found, None otherwise
        """
        row = await self.session.get(BookRow, book_id)
        if row is None:
            return None
        return _to_entity(row)

    async def create_book(self, book: Book) -> Book:
        """
        Insert a book and return it with its store-assigned ID.

        Raises:
            BookConflictError: If the ISBN or the title/author pair is taken
        """
        row = BookRow(**{field: getattr(book, field) for field in BookRow.MUTABLE_FIELDS})
        self.session.add(row)
        await self._flush()
        await self.session.refresh(row)
        logger.info("Book created", book_id=row.id, isbn=row.isbn)
        return _to_entity(row)

    async def update_book(self, book: Book) -> Optional[Book]:
        """
        Overwrite every mutable field of a stored book.

        Returns:
            The updated book, or None if no book has ``book.id``

        Raises:
            BookConflictError: If the new values collide with another book
        """
        row = await self.session.get(BookRow, book.id)
        if row is None:
            return None

        for field in BookRow.MUTABLE_FIELDS:
            setattr(row, field, getattr(book, field))

        await self._flush()
        await self.session.refresh(row)
        logger.info("Book updated", book_id=row.id)
        return _to_entity(row)

    async def delete_book(self, book_id: int) -> bool:
        """
        Delete a book by ID.

        Returns:
            True if deleted, False if not found
        """
        row = await self.session.get(BookRow, book_id)
        if row is None:
            return False

        await self.session.delete(row)
        await self.session.flush()
        logger.info("Book deleted", book_id=book_id)
        return True

    async def count_books(self) -> int:
        """Count all stored books."""
        return await self.session.scalar(select(func.count()).select_from(BookRow)) or 0

    async def run_in_transaction(self, action: Callable[[], Awaitable[T]]) -> T:
        """
        Run a unit of work and commit it.

        Args:
            action: Coroutine function performing repository calls

        Returns:
            Whatever the action returned

        Raises:
            Any exception raised by the action, after rolling back
        """
        try:
            result = await action()
            await self.session.commit()
            return result
        except Exception:
            await self.session.rollback()
            logger.warning("Transaction rolled back")
            raise

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            if is_unique_violation(e):
                raise BookConflictError() from e
            raise
