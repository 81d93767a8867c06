"""
Unit tests for catalog models.
Tests ISBN rules, field bounds and paging arithmetic.
"""

import pytest
from datetime import date
from decimal import Decimal
from pydantic import ValidationError

from catalog.models import MAX_INT32, Book, BookUpdate, GetBooksQuery, PagedResult, validate_isbn


def make_book(**overrides):
    values = dict(
        title="Test Book",
        author="Test Author",
        isbn="1234567890123",
        published_date=date(2020, 1, 1),
        price=Decimal("19.99"),
        quantity=3,
    )
    values.update(overrides)
    return Book(**values)


class TestValidateIsbn:
    """Test cases for the ISBN length rule."""

    @pytest.mark.parametrize("isbn", ["0321125215", "9780132350884"])
    def test_accepts_ten_and_thirteen_characters(self, isbn):
        assert validate_isbn(isbn) == isbn

    @pytest.mark.parametrize("isbn", ["", "123", "12345678901", "12345678901234"])
    def test_rejects_other_lengths(self, isbn):
        with pytest.raises(ValueError) as exc_info:
            validate_isbn(isbn)

        assert "ISBN should be either 10 or 13 characters long" in str(exc_info.value)

    def test_none_passes_through(self):
        assert validate_isbn(None) is None


class TestBook:
    """Test cases for the Book entity."""

    def test_valid_book(self):
        book = make_book()

        assert book.id is None
        assert book.price == Decimal("19.99")

    def test_invalid_isbn(self):
        with pytest.raises(ValidationError) as exc_info:
            make_book(isbn="12345")

        assert "Invalid ISBN format" in str(exc_info.value)

    def test_negative_price(self):
        with pytest.raises(ValidationError) as exc_info:
            make_book(price=Decimal("-1"))

        assert "greater than or equal to 0" in str(exc_info.value)

    def test_negative_quantity(self):
        with pytest.raises(ValidationError):
            make_book(quantity=-1)

    def test_empty_title(self):
        with pytest.raises(ValidationError):
            make_book(title="")


class TestBookUpdate:
    """Test cases for replacement values."""

    def test_changes_omit_missing_isbn(self):
        update = BookUpdate(
            title="New Title",
            author="New Author",
            published_date=date(2021, 6, 1),
            price=Decimal("5.00"),
            quantity=1,
        )

        changes = update.changes()
        assert "isbn" not in changes
        assert changes["title"] == "New Title"

    def test_changes_applied_to_existing_book(self):
        book = make_book(id=4)
        update = BookUpdate(
            title="New Title",
            author="Test Author",
            published_date=date(2021, 6, 1),
            price=Decimal("5.00"),
            quantity=0,
        )

        changed = book.model_copy(update=update.changes())

        assert changed.id == 4
        assert changed.isbn == "1234567890123"
        assert changed.title == "New Title"
        assert changed.quantity == 0

    def test_invalid_isbn(self):
        with pytest.raises(ValidationError):
            BookUpdate(
                title="T",
                author="A",
                isbn="1",
                published_date=date(2021, 6, 1),
                price=Decimal("5.00"),
                quantity=1,
            )


class TestGetBooksQuery:
    """Test cases for listing parameters."""

    def test_defaults(self):
        query = GetBooksQuery()

        assert query.page_number == 1
        assert query.page_size == 10
        assert query.offset == 0

    def test_offset(self):
        assert GetBooksQuery(page_number=3, page_size=20).offset == 40

    @pytest.mark.parametrize("page_number", [0, -1])
    def test_page_number_must_be_positive(self, page_number):
        with pytest.raises(ValidationError):
            GetBooksQuery(page_number=page_number)

    def test_page_number_fits_int32(self):
        assert GetBooksQuery(page_number=MAX_INT32).page_number == MAX_INT32

        with pytest.raises(ValidationError):
            GetBooksQuery(page_number=MAX_INT32 + 1)

    @pytest.mark.parametrize("page_size", [0, 101])
    def test_page_size_bounds(self, page_size):
        with pytest.raises(ValidationError):
            GetBooksQuery(page_size=page_size)


def test_paged_result_is_immutable():
    page = PagedResult[Book](items=[make_book()], total_count=1)

    with pytest.raises(ValidationError):
        page.total_count = 2
