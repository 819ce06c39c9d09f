"""
Book service — catalog reads and admin-only writes.

Reads (list, by genre, single book, search) are public. Writes are only
reachable through routes guarded by require_admin; the acting admin's id
is passed in and recorded as the book's owner_admin_id on create.

Listing order is newest first (created_at descending) everywhere.

Validation beyond the request schema:
  - publication_year must lie between 1000 and next year inclusive
  - a genre given as a raw string (path parameter) must be a known Genre
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app import search
from app.config import settings
from app.exceptions import NotFoundError, ValidationError
from app.models.book import Book, Genre
from app.schemas.book import (
    BookCreateRequest,
    BookUpdateRequest,
    BookResponse,
    BookHighlights,
    SearchHit,
    SearchResponse,
    SegmentResponse,
)

logger = logging.getLogger(__name__)

MIN_PUBLICATION_YEAR = 1000


def list_genres() -> list[str]:
    return [genre.value for genre in Genre]


def parse_genre(value: str) -> Genre:
    """
    Convert a raw genre string to a Genre.

    Raises:
        ValidationError: If the genre is not one of the catalog's genres.
    """
    try:
        return Genre(value.strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown genre '{value}'. Expected one of: {', '.join(list_genres())}"
        )


def validate_publication_year(year: int | None) -> None:
    """
    Raises:
        ValidationError: If the year is outside 1000..(current year + 1).
    """
    if year is None:
        return
    max_year = datetime.now(timezone.utc).year + 1
    if not MIN_PUBLICATION_YEAR <= year <= max_year:
        raise ValidationError(
            f"publication_year must be between {MIN_PUBLICATION_YEAR} and {max_year}"
        )


async def list_books(
    db: AsyncSession,
    genre: Genre | None = None,
) -> list[Book]:
    """List all books, or the books of one genre, newest first."""
    query = select(Book)
    if genre is not None:
        query = query.where(Book.genre == genre)
    result = await db.execute(query.order_by(Book.created_at.desc()))
    return list(result.scalars().all())


async def get_book(db: AsyncSession, book_id: uuid.UUID) -> Book:
    """
    Raises:
        NotFoundError: If the book doesn't exist.
    """
    book = await db.get(Book, book_id)
    if book is None:
        raise NotFoundError("Book", book_id)
    return book


async def create_book(
    db: AsyncSession,
    data: BookCreateRequest,
    admin_id: uuid.UUID,
) -> Book:
    """Add a book to the catalog, attributed to the acting admin."""
    validate_publication_year(data.publication_year)

    book = Book(
        title=data.title,
        author=data.author,
        genre=data.genre,
        description=data.description,
        publication_year=data.publication_year,
        cover_image_url=data.cover_image_url or settings.DEFAULT_COVER_IMAGE_URL,
        owner_admin_id=admin_id,
        created_at=datetime.now(timezone.utc),
    )
    db.add(book)
    await db.flush()

    logger.info("Admin %s added book %s", admin_id, book.id)
    return book


async def update_book(
    db: AsyncSession,
    book_id: uuid.UUID,
    data: BookUpdateRequest,
    admin_id: uuid.UUID,
) -> Book:
    """
    Change any subset of a book's fields.

    Only fields present in the request body are applied. Sending
    "publication_year": null clears the year; sending null for a
    required field is rejected.

    Raises:
        NotFoundError: If the book doesn't exist.
        ValidationError: For a null required field or an out-of-range year.
    """
    book = await get_book(db, book_id)
    changes = data.model_dump(exclude_unset=True)

    for field in ("title", "author", "genre", "description"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field} cannot be empty")

    if "publication_year" in changes:
        validate_publication_year(changes["publication_year"])
    if "cover_image_url" in changes and not changes["cover_image_url"]:
        changes["cover_image_url"] = settings.DEFAULT_COVER_IMAGE_URL

    for field, value in changes.items():
        setattr(book, field, value)
    await db.flush()

    logger.info("Admin %s updated book %s (%s)", admin_id, book.id, ", ".join(changes) or "no changes")
    return book


async def delete_book(
    db: AsyncSession,
    book_id: uuid.UUID,
    admin_id: uuid.UUID,
) -> None:
    """
    Raises:
        NotFoundError: If the book doesn't exist.
    """
    book = await get_book(db, book_id)
    await db.delete(book)
    await db.flush()
    logger.info("Admin %s deleted book %s", admin_id, book_id)


def _segments(text: str, query: str) -> list[SegmentResponse]:
    if not query.strip():
        query = ""
    return [
        SegmentResponse(text=segment.text, matched=segment.matched)
        for segment in search.highlight(text, query)
    ]


async def search_books(
    db: AsyncSession,
    query: str,
    genre: Genre | None = None,
) -> SearchResponse:
    """
    Rank the catalog (or one genre) against a free-text query.

    Every book in scope is returned; the query only changes the order.
    See app.search for the scoring and no-match rules.
    """
    books = await list_books(db, genre)
    ranked = search.rank(books, query)

    return SearchResponse(
        query=query,
        genre=genre,
        match_count=search.match_count(books, query),
        total=len(books),
        results=[
            SearchHit(
                book=BookResponse.model_validate(book),
                score=search.score(book, query),
                highlights=BookHighlights(
                    title=_segments(book.title, query),
                    author=_segments(book.author, query),
                    description=_segments(book.description, query),
                ),
            )
            for book in ranked
        ],
    )
