"""
Tests for loading the catalog from CSV.
"""

import pytest
from datetime import date
from decimal import Decimal

from catalog.repository import BookRepository
from catalog.seed import read_books_csv, seed_books_from_csv


def test_read_books_csv(books_csv):
    books = read_books_csv(books_csv)

    assert len(books) == 7
    first = books[0]
    assert first.title == "Initial Test Book"
    assert first.isbn == "1234567890123"
    assert first.published_date == date(1920, 1, 1)
    assert first.price == Decimal("15.99")
    assert first.id is None


def test_read_books_csv_missing_column(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("title,author,isbn\nA,B,1234567890\n", encoding="utf-8")

    with pytest.raises(ValueError) as exc_info:
        read_books_csv(path)

    assert "publishedDate" in str(exc_info.value)


def test_read_books_csv_invalid_row(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(
        "title,author,isbn,publishedDate,price,quantity\n"
        "Good,A,1234567890,2020-01-01,1.00,1\n"
        "Bad,B,123,2020-01-01,1.00,1\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError) as exc_info:
        read_books_csv(path)

    assert "line 3" in str(exc_info.value)


@pytest.mark.asyncio
async def test_seed_only_when_empty(session, books_csv):
    repository = BookRepository(session)

    assert await seed_books_from_csv(repository, books_csv) == 7
    assert await seed_books_from_csv(repository, books_csv) == 0
    assert await repository.count_books() == 7
