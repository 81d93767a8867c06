"""
Book service: business-level orchestration on top of the repository.
"""

from typing import Optional

import structlog

from catalog.models import Book, BookUpdate, GetBooksQuery, PagedResult
from catalog.repository import BookRepository

logger = structlog.get_logger(__name__)


class BookService:
    """Combines repository calls into logical operations."""

    def __init__(self, repository: BookRepository):
        self.repository = repository

    async def list_books(self, query: GetBooksQuery) -> PagedResult[Book]:
        return await self.repository.list_books(query)

    async def get_book(self, book_id: int) -> Optional[Book]:
        return await self.repository.get_book_by_id(book_id)

    async def create_book(self, book: Book) -> Book:
        """
        Persist a new book.

        Raises:
            BookConflictError: Propagated unchanged from the repository
        """
        return await self.repository.run_in_transaction(
            lambda: self.repository.create_book(book)
        )

    async def update_book(self, book_id: int, update: BookUpdate) -> Optional[Book]:
        """
        Replace the fields of an existing book in one transaction.

        Fields the update leaves unset (only ``isbn`` may be) keep their
        stored values. A missing book is not an error: the transaction
        commits and None is returned.

        Args:
            book_id: Book identifier
            update: Replacement values

        Returns:
            The updated book, or None if it does not exist
        """
        async def apply_update() -> Optional[Book]:
            existing = await self.repository.get_book_by_id(book_id)
            if existing is None:
                logger.info("Book to update not found", book_id=book_id)
                return None

            changed = existing.model_copy(update=update.changes())
            return await self.repository.update_book(changed)

        return await self.repository.run_in_transaction(apply_update)

    async def delete_book(self, book_id: int) -> bool:
        return await self.repository.run_in_transaction(
            lambda: self.repository.delete_book(book_id)
        )
