"""
Books controller: HTTP routes over the book service.
Selects status codes only; no business rules live here.
"""

from typing import Annotated, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, Response, status
from pydantic import ValidationError

from api.auth import require_admin
from api.mapping import (
    book_from_create_request,
    book_to_response,
    book_update_from_request,
    books_page_to_response,
)
from api.models import (
    BookResponse,
    CreateBookRequest,
    ErrorDetails,
    GetBooksResponse,
    UpdateBookRequest,
)
from api.deps import get_book_service
from api.pagination import PageLinkBuilder
from catalog.models import MAX_INT32, MIN_INT32, GetBooksQuery
from catalog.repository import BookConflictError
from catalog.service import BookService

logger = structlog.get_logger(__name__)

CONFLICT_MESSAGE = "A book with the same ISBN or the same title and author already exists."

LIST_ROUTE_NAME = "list_books"

BookId = Annotated[int, Path(ge=MIN_INT32, le=MAX_INT32, description="Book identifier")]

router = APIRouter(prefix="/api/v1/Books", tags=["Books"])

ERROR_RESPONSES = {
    400: {"model": ErrorDetails},
    401: {"model": ErrorDetails},
    403: {"model": ErrorDetails},
    404: {"model": ErrorDetails},
    409: {"model": ErrorDetails},
}


def _not_found(book_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Book with ID '{book_id}' not found",
    )


def _conflict() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=CONFLICT_MESSAGE)


@router.get("", name=LIST_ROUTE_NAME, response_model=GetBooksResponse)
async def list_books(
    request: Request,
    title: Optional[str] = Query(None, alias="Title"),
    author: Optional[str] = Query(None, alias="Author"),
    page_number: int = Query(1, alias="PageNumber"),
    page_size: int = Query(10, alias="PageSize"),
    book_service: BookService = Depends(get_book_service),
) -> GetBooksResponse:
    """
    Get books with filtering and pagination, newest publication first.

    - **Title**: Title substring
    - **Author**: Author substring
    - **PageNumber**: Page number (starts from 1)
    - **PageSize**: Items per page (1-100)
    """
    try:
        query = GetBooksQuery(
            title=title,
            author=author,
            page_number=page_number,
            page_size=page_size,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="; ".join(_describe(error) for error in e.errors()),
        )

    page = await book_service.list_books(query)

    next_page, previous_page = PageLinkBuilder(request, LIST_ROUTE_NAME).build(
        query.page_number, query.page_size, page.total_count
    )

    return books_page_to_response(
        page,
        page_number=query.page_number,
        page_size=query.page_size,
        next_page=next_page,
        previous_page=previous_page,
    )


@router.get("/{book_id}", response_model=BookResponse, responses={404: {"model": ErrorDetails}})
async def get_book(
    book_id: BookId,
    book_service: BookService = Depends(get_book_service),
) -> BookResponse:
    """Get a single book by ID."""
    book = await book_service.get_book(book_id)
    if book is None:
        raise _not_found(book_id)
    return book_to_response(book)


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
async def create_book(
    payload: CreateBookRequest,
    request: Request,
    response: Response,
    book_service: BookService = Depends(get_book_service),
) -> BookResponse:
    """Create a book. Requires the Admin role."""
    try:
        book = await book_service.create_book(book_from_create_request(payload))
    except BookConflictError:
        logger.info("Book create conflict", isbn=payload.isbn)
        raise _conflict()

    response.headers["Location"] = str(request.url_for("get_book", book_id=str(book.id)))
    return book_to_response(book)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
async def update_book(
    book_id: BookId,
    payload: UpdateBookRequest,
    book_service: BookService = Depends(get_book_service),
) -> BookResponse:
    """Replace a book's fields. Requires the Admin role."""
    try:
        book = await book_service.update_book(book_id, book_update_from_request(payload))
    except BookConflictError:
        logger.info("Book update conflict", book_id=book_id)
        raise _conflict()

    if book is None:
        raise _not_found(book_id)
    return book_to_response(book)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin)],
)
async def delete_book(
    book_id: BookId,
    book_service: BookService = Depends(get_book_service),
) -> Response:
    """Delete a book. Requires the Admin role."""
    if not await book_service.delete_book(book_id):
        raise _not_found(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error.get('msg')}" if location else str(error.get("msg"))
