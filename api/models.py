"""
API request and response models.
Property names are camelCase on the wire.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from catalog.models import validate_isbn


# Prices travel as JSON numbers, not strings
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Base model with camelCase aliases, accepting snake_case too."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CreateBookRequest(CamelModel):
    """Payload for creating a book."""
    title: str = Field(..., min_length=1, description="Book title")
    author: str = Field(..., min_length=1, description="Book author")
    isbn: str = Field(..., description="ISBN, 10 or 13 characters")
    published_date: date = Field(..., description="Publication date (YYYY-MM-DD)")
    price: Price = Field(..., ge=0, description="Unit price")
    quantity: int = Field(..., ge=0, description="Copies in stock")

    @field_validator("isbn")
    @classmethod
    def check_isbn(cls, v):
        """Ensure the ISBN has a valid length."""
        return validate_isbn(v)


class UpdateBookRequest(CamelModel):
    """Payload for replacing a book. ISBN is kept when omitted."""
    title: str = Field(..., min_length=1, description="Book title")
    author: str = Field(..., min_length=1, description="Book author")
    published_date: date = Field(..., description="Publication date (YYYY-MM-DD)")
    price: Price = Field(..., ge=0, description="Unit price")
    quantity: int = Field(..., ge=0, description="Copies in stock")
    isbn: Optional[str] = Field(None, description="New ISBN, 10 or 13 characters")

    @field_validator("isbn")
    @classmethod
    def check_isbn(cls, v):
        """Ensure the ISBN has a valid length."""
        return validate_isbn(v)


class BookResponse(CamelModel):
    """A single book as returned by the API."""
    id: Optional[int] = Field(None, description="Book identifier")
    title: str
    author: str
    isbn: str
    published_date: date
    price: Price
    quantity: int


class GetBooksResponse(CamelModel):
    """One page of the book listing with navigation links."""
    books: List[BookResponse] = Field(..., description="Books on this page")
    page_number: int = Field(..., description="Current page number")
    page_size: int = Field(..., description="Number of books per page")
    total_items: int = Field(..., description="Books matching the filter")
    next_page: Optional[str] = Field(None, description="Link to the next page")
    previous_page: Optional[str] = Field(None, description="Link to the previous page")


class LoginRequest(CamelModel):
    """Credentials for token issuance."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    """Issued bearer token."""
    token: str


class ErrorDetails(CamelModel):
    """Uniform error envelope."""
    status_code: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Error message")


class HealthResponse(CamelModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
