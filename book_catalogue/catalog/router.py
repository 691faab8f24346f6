"""
Route definitions for the catalogue API.

Endpoints under /api/catalog:
- GET    /books                : list every book
- GET    /books/search         : filter books (all query params optional)
- GET    /books/{isbn}         : get one book
- POST   /books                : create a book, ISBN assigned by the server
- PUT    /books/{isbn}         : replace every mutable field
- PATCH  /books/{isbn}         : change only the supplied fields
- DELETE /books/{isbn}         : delete a book
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, status

from ..models import Book
from .errors import NotFound
from .schemas import BookRequest, DeleteResult, ErrorResponse
from .search import SearchCriteria
from .service import CatalogueService


router = APIRouter(prefix="/api/catalog", tags=["catalog"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Book not found"}}
_INVALID = {422: {"model": ErrorResponse, "description": "Invalid book data"}}
_CONFLICT = {409: {"model": ErrorResponse, "description": "Duplicate title or concurrent write"}}


def get_catalogue(request: Request) -> CatalogueService:
    """Return the catalogue service created with the application."""
    return request.app.state.catalogue


@router.get("/books", response_model=List[Book])
def list_books(catalogue: CatalogueService = Depends(get_catalogue)) -> List[Book]:
    return catalogue.list_books()


@router.get("/books/search", response_model=List[Book])
def search_books(
    title: Optional[str] = Query(default=None, description="Title contains (case-insensitive)"),
    author: Optional[str] = Query(default=None, description="Author contains (case-insensitive)"),
    genre: Optional[str] = Query(default=None, description="One of the book's genres"),
    isbn: Optional[int] = Query(default=None, description="Exact ISBN"),
    rate: Optional[float] = Query(default=None, ge=1, le=5, description="Exact rate"),
    display: Optional[bool] = Query(default=None, description="Visibility flag"),
    publication_date: Optional[str] = Query(default=None, description="Exact date, YYYY-MM-DD"),
    catalogue: CatalogueService = Depends(get_catalogue),
) -> List[Book]:
    """
    Returns the books matching every supplied filter.

    An empty list is a normal answer, not an error.
    """
    criteria = SearchCriteria(
        title=title,
        author=author,
        genre=genre,
        isbn=isbn,
        rate=rate,
        display=display,
        publication_date=publication_date,
    )
    return catalogue.search(criteria)


@router.get("/books/{isbn}", response_model=Book, responses=_NOT_FOUND)
def get_book(isbn: int, catalogue: CatalogueService = Depends(get_catalogue)) -> Book:
    return catalogue.get_book(isbn)


@router.post(
    "/books",
    response_model=Book,
    status_code=status.HTTP_201_CREATED,
    responses={**_INVALID, **_CONFLICT},
)
def create_book(
    payload: BookRequest = Body(...),
    catalogue: CatalogueService = Depends(get_catalogue),
) -> Book:
    return catalogue.create_book(payload)


@router.put("/books/{isbn}", response_model=Book, responses={**_NOT_FOUND, **_INVALID, **_CONFLICT})
def update_book(
    isbn: int,
    payload: BookRequest = Body(...),
    catalogue: CatalogueService = Depends(get_catalogue),
) -> Book:
    return catalogue.update_book(isbn, payload)


@router.patch("/books/{isbn}", response_model=Book, responses={**_NOT_FOUND, **_INVALID, **_CONFLICT})
def partial_update_book(
    isbn: int,
    payload: BookRequest = Body(...),
    catalogue: CatalogueService = Depends(get_catalogue),
) -> Book:
    """Apply only the fields present in the body."""
    return catalogue.partial_update_book(isbn, payload)


@router.delete("/books/{isbn}", response_model=DeleteResult, responses=_NOT_FOUND)
def delete_book(isbn: int, catalogue: CatalogueService = Depends(get_catalogue)) -> DeleteResult:
    if not catalogue.delete_book(isbn):
        raise NotFound(isbn)
    return DeleteResult(isbn=isbn)
