"""
Pydantic models for the book catalog.
Defines the Book entity, the listing query and the paged result wrapper.
"""

from datetime import date
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


ISBN_LENGTHS = (10, 13)

# Identifiers and page numbers are 32-bit signed integers
MIN_INT32 = -(2 ** 31)
MAX_INT32 = 2 ** 31 - 1

T = TypeVar("T")


def validate_isbn(value: Optional[str]) -> Optional[str]:
    """
    Check ISBN format by length only.

    Args:
        value: Candidate ISBN

    Returns:
        The unchanged value

    Raises:
        ValueError: If the value is not 10 or 13 characters long
    """
    if value is not None and len(value) not in ISBN_LENGTHS:
        raise ValueError("Invalid ISBN format. ISBN should be either 10 or 13 characters long.")
    return value


class Book(BaseModel):
    """
    The catalog entity.

    ``id`` stays None until the store assigns one on insert.
    """
    id: Optional[int] = Field(None, description="Store-assigned identifier")
    title: str = Field(..., min_length=1, description="Book title")
    author: str = Field(..., min_length=1, description="Book author")
    isbn: str = Field(..., description="ISBN-10 or ISBN-13")
    published_date: date = Field(..., description="Publication date")
    price: Decimal = Field(..., ge=0, description="Unit price")
    quantity: int = Field(..., ge=0, description="Copies in stock")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("isbn")
    @classmethod
    def check_isbn(cls, v):
        """Ensure the ISBN has a valid length."""
        return validate_isbn(v)


class BookUpdate(BaseModel):
    """
    Replacement values for an existing book.

    ``isbn`` is optional: when it is None the stored ISBN is kept.
    """
    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    published_date: date
    price: Decimal = Field(..., ge=0)
    quantity: int = Field(..., ge=0)
    isbn: Optional[str] = None

    @field_validator("isbn")
    @classmethod
    def check_isbn(cls, v):
        """Ensure the ISBN has a valid length."""
        return validate_isbn(v)

    def changes(self) -> dict:
        """Fields to copy onto the stored entity."""
        return self.model_dump(exclude_none=True)


class GetBooksQuery(BaseModel):
    """Filter and pagination parameters for the book listing."""
    title: Optional[str] = Field(None, description="Title substring")
    author: Optional[str] = Field(None, description="Author substring")
    page_number: int = Field(1, ge=1, le=MAX_INT32, description="Page number (starts from 1)")
    page_size: int = Field(10, ge=1, le=100, description="Items per page (1-100)")

    @property
    def offset(self) -> int:
        """Number of matching rows to skip."""
        return (self.page_number - 1) * self.page_size


class PagedResult(BaseModel, Generic[T]):
    """One page of items plus the number of items matching the filter."""
    items: List[T] = Field(default_factory=list)
    total_count: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True)
