"""
Initial catalog data loading from a CSV file.
"""

import csv
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import List, Union

import structlog

from catalog.models import Book
from catalog.repository import BookRepository

logger = structlog.get_logger(__name__)

CSV_COLUMNS = ("title", "author", "isbn", "publishedDate", "price", "quantity")


def read_books_csv(path: Union[str, Path]) -> List[Book]:
    """
    Parse books from a CSV file with a header row.

    Expected columns: title, author, isbn, publishedDate (YYYY-MM-DD),
    price, quantity.

    Args:
        path: CSV file location

    Returns:
        Validated books without identifiers

    Raises:
        ValueError: If a column is missing or a row fails validation
    """
    books = []
    with open(path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        missing = [column for column in CSV_COLUMNS if column not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"Books CSV is missing columns: {', '.join(missing)}")

        for line_number, record in enumerate(reader, start=2):
            try:
                books.append(Book(
                    title=record["title"].strip(),
                    author=record["author"].strip(),
                    isbn=record["isbn"].strip(),
                    published_date=date.fromisoformat(record["publishedDate"].strip()),
                    price=Decimal(record["price"].strip()),
                    quantity=int(record["quantity"].strip()),
                ))
            except (ValueError, ArithmeticError) as e:
                raise ValueError(f"Invalid book on line {line_number}: {e}") from e

    return books


async def seed_books_from_csv(repository: BookRepository, path: Union[str, Path]) -> int:
    """
    Load books from CSV, only when the catalog is empty.

    Args:
        repository: Book repository bound to an open session
        path: CSV file location

    Returns:
        Number of books inserted (0 when the catalog already had books)
    """
    if await repository.count_books() > 0:
        logger.info("Catalog already seeded, skipping CSV import", path=str(path))
        return 0

    books = read_books_csv(path)

    async def insert_all() -> int:
        for book in books:
            await repository.create_book(book)
        return len(books)

    inserted = await repository.run_in_transaction(insert_all)
    logger.info("Catalog seeded from CSV", path=str(path), books=inserted)
    return inserted
