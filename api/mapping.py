"""
Field-by-field mapping between wire models and catalog models.
Request to entity in one direction, entity to response in the other.
"""

from typing import Optional

from api.models import BookResponse, CreateBookRequest, GetBooksResponse, UpdateBookRequest
from catalog.models import Book, BookUpdate, PagedResult


# Request -> catalog

def book_from_create_request(request: CreateBookRequest) -> Book:
    return Book(
        title=request.title,
        author=request.author,
        isbn=request.isbn,
        published_date=request.published_date,
        price=request.price,
        quantity=request.quantity,
    )


def book_update_from_request(request: UpdateBookRequest) -> BookUpdate:
    return BookUpdate(
        title=request.title,
        author=request.author,
        isbn=request.isbn,
        published_date=request.published_date,
        price=request.price,
        quantity=request.quantity,
    )


# Catalog -> response

def book_to_response(book: Book) -> BookResponse:
    return BookResponse(
        id=book.id,
        title=book.title,
        author=book.author,
        isbn=book.isbn,
        published_date=book.published_date,
        price=book.price,
        quantity=book.quantity,
    )


def books_page_to_response(
    page: PagedResult[Book],
    page_number: int,
    page_size: int,
    next_page: Optional[str] = None,
    previous_page: Optional[str] = None,
) -> GetBooksResponse:
    return GetBooksResponse(
        books=[book_to_response(book) for book in page.items],
        page_number=page_number,
        page_size=page_size,
        total_items=page.total_count,
        next_page=next_page,
        previous_page=previous_page,
    )
