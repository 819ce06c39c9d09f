"""
Books router — public catalog browsing and admin catalog management.

Public endpoints (no session needed):
  GET    /books                  — All books, newest first
  GET    /books/genres           — The list of genres
  GET    /books/genre/{genre}    — Books in one genre, newest first
  GET    /books/search?q=&genre= — Books ranked by relevance to q
  GET    /books/{book_id}        — One book

Admin endpoints (session + ADMIN role):
  POST   /books                  — Add a book
  PUT    /books/{book_id}        — Change any fields of a book
  DELETE /books/{book_id}        — Remove a book

The static paths (/genres, /genre/..., /search) are declared before
/{book_id} so they are not swallowed by the UUID path parameter.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import require_admin
from app.models.book import Genre
from app.models.user import User
from app.schemas.book import (
    BookCreateRequest,
    BookUpdateRequest,
    BookResponse,
    SearchResponse,
)
from app.services import book_service

router = APIRouter()


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=list[BookResponse],
    summary="List all books",
)
async def list_books(db: AsyncSession = Depends(get_db)):
    return await book_service.list_books(db)


@router.get(
    "/genres",
    response_model=list[str],
    summary="List genres",
)
async def list_genres():
    return book_service.list_genres()


@router.get(
    "/genre/{genre}",
    response_model=list[BookResponse],
    summary="List books in a genre",
)
async def list_books_by_genre(
    genre: str,
    db: AsyncSession = Depends(get_db),
):
    """Unknown genres are rejected with 422 rather than returning an empty list."""
    return await book_service.list_books(db, book_service.parse_genre(genre))


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Search books by relevance",
)
async def search_books(
    q: str = Query("", max_length=200, description="Free-text query"),
    genre: Genre | None = Query(None, description="Restrict to one genre"),
    db: AsyncSession = Depends(get_db),
):
    """
    Rank books against a free-text query.

    Matches are case-insensitive substrings of title, author, description
    or publication year. All books in scope are returned, best matches
    first; when nothing matches, the usual newest-first order is kept.
    Each hit carries highlight segments for title, author and description.
    """
    return await book_service.search_books(db, q, genre)


@router.get(
    "/{book_id}",
    response_model=BookResponse,
    summary="Get a book",
)
async def get_book(
    book_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await book_service.get_book(db, book_id)


# ---------------------------------------------------------------------------
# Admin endpoints
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="[Admin] Add a book",
)
async def create_book(
    request: BookCreateRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Add a book to the catalog.

    - **genre**: one of the values from GET /books/genres
    - **publication_year**: optional, 1000 to next year
    - **cover_image_url**: optional, a placeholder image is used if omitted
    """
    return await book_service.create_book(db, request, admin.id)


@router.put(
    "/{book_id}",
    response_model=BookResponse,
    summary="[Admin] Update a book",
)
async def update_book(
    book_id: uuid.UUID,
    request: BookUpdateRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Only the fields present in the body are changed."""
    return await book_service.update_book(db, book_id, request, admin.id)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="[Admin] Delete a book",
)
async def delete_book(
    book_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await book_service.delete_book(db, book_id, admin.id)
