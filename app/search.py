"""
Relevance search over an in-memory list of books.

Everything here is a pure function of its arguments: no I/O, no caching,
no mutation of the caller's list, and no exceptions for any input. Books
may be ORM objects or plain mappings; a missing publication year counts
as an empty string.

Scoring (case-insensitive substring tests, bonuses stack on the base):

    title contains query            +100
      title equals query            +50
      title starts with query       +25
    author contains query           +50
      author equals query           +25
    year contains query             +40
      year equals query             +20
    description contains query      +10

An exact title match therefore scores 175.

Ranking rules:
  - a blank query leaves the list in its original order
  - if no book matches at all, the list is left in its original order
    rather than being reshuffled by a sort over all-zero scores
  - otherwise books are stably sorted by descending score
"""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")

TITLE_CONTAINS = 100
TITLE_EXACT = 50
TITLE_PREFIX = 25
AUTHOR_CONTAINS = 50
AUTHOR_EXACT = 25
YEAR_CONTAINS = 40
YEAR_EXACT = 20
DESCRIPTION_CONTAINS = 10


@dataclass(frozen=True)
class Segment:
    """A run of text, flagged if it is an occurrence of the query."""
    text: str
    matched: bool = False


def _field(book: Any, name: str) -> str:
    if isinstance(book, Mapping):
        value = book.get(name)
    else:
        value = getattr(book, name, None)
    if value is None:
        return ""
    return str(value).lower()


def _is_blank(query: str | None) -> bool:
    return not query or not query.strip()


def score(book: Any, query: str) -> int:
    """Relevance score of one book for a query; 0 when nothing matches."""
    if _is_blank(query):
        return 0

    term = query.lower()
    title = _field(book, "title")
    author = _field(book, "author")
    year = _field(book, "publication_year")
    description = _field(book, "description")

    total = 0
    if term in title:
        total += TITLE_CONTAINS
        if title == term:
            total += TITLE_EXACT
        if title.startswith(term):
            total += TITLE_PREFIX

    if term in author:
        total += AUTHOR_CONTAINS
        if author == term:
            total += AUTHOR_EXACT

    if term in year:
        total += YEAR_CONTAINS
        if year == term:
            total += YEAR_EXACT

    if term in description:
        total += DESCRIPTION_CONTAINS

    return total


def matches(book: Any, query: str) -> bool:
    """True if any searchable field contains the query."""
    if _is_blank(query):
        return False
    term = query.lower()
    return any(
        term in _field(book, name)
        for name in ("title", "author", "description", "publication_year")
    )


def match_count(books: Sequence[Any], query: str) -> int:
    """Number of books with at least one field containing the query."""
    return sum(1 for book in books if matches(book, query))


def rank(books: Sequence[T], query: str) -> list[T]:
    """
    Order books by relevance to a query.

    Always returns a new list; the input sequence is never reordered.
    """
    ordered = list(books)
    if _is_blank(query) or match_count(ordered, query) == 0:
        return ordered

    # sorted() is stable, so equal scores keep their input order
    return sorted(ordered, key=lambda book: score(book, query), reverse=True)


def highlight(text: str | None, query: str | None) -> list[Segment]:
    """
    Split text around case-insensitive, literal occurrences of query.

    Joining the segment texts gives back the original text unchanged.
    Regex metacharacters in the query are matched literally.
    """
    text = text or ""
    if not query:
        return [Segment(text)]

    parts = re.split(f"({re.escape(query)})", text, flags=re.IGNORECASE)
    if len(parts) == 1:
        return [Segment(text)]

    # re.split puts captured matches at the odd indexes
    return [
        Segment(part, matched=index % 2 == 1)
        for index, part in enumerate(parts)
        if part
    ]
