"""
Pydantic schemas for Book endpoints.

Field presence and basic types are checked here. The publication year
bound depends on the current date, so it is enforced in book_service
rather than with a static Field(le=...).
"""

import uuid
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from app.models.book import Genre

# Surrounding whitespace is stripped before the length check, so "   " is empty
ShortText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
LongText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class BookCreateRequest(BaseModel):
    """Request body for POST /books."""
    title: ShortText
    author: ShortText
    genre: Genre
    description: LongText
    publication_year: int | None = None
    cover_image_url: str | None = Field(default=None, max_length=1024)


class BookUpdateRequest(BaseModel):
    """
    Request body for PUT /books/{book_id}.

    Every field is optional; only the fields present in the request body
    are changed.
    """
    title: ShortText | None = None
    author: ShortText | None = None
    genre: Genre | None = None
    description: LongText | None = None
    publication_year: int | None = None
    cover_image_url: str | None = Field(default=None, max_length=1024)


class BookResponse(BaseModel):
    """Public representation of a Book."""
    id: uuid.UUID
    title: str
    author: str
    genre: Genre
    description: str
    publication_year: int | None
    cover_image_url: str
    owner_admin_id: uuid.UUID | None
    created_at: datetime

    model_config = {"from_attributes": True}


class SegmentResponse(BaseModel):
    text: str
    matched: bool


class BookHighlights(BaseModel):
    title: list[SegmentResponse]
    author: list[SegmentResponse]
    description: list[SegmentResponse]


class SearchHit(BaseModel):
    """One ranked book plus its score and highlighted fields."""
    book: BookResponse
    score: int
    highlights: BookHighlights


class SearchResponse(BaseModel):
    """Response body for GET /books/search."""
    query: str
    genre: Genre | None
    match_count: int
    total: int
    results: list[SearchHit]
