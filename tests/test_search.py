"""
Tests for the relevance search engine (app.search).

These are plain synchronous tests; the engine is pure and needs no
database or HTTP client.

These tests verify:
  - The scoring table, including stacked bonuses (exact title = 175)
  - A blank query, or a query nothing matches, leaves the order alone
  - Ranked output is in descending score order, stable on ties
  - The input list is never reordered
  - match_count covers title, author, description and year
  - highlight treats the query as a literal, case-insensitive substring
"""

from types import SimpleNamespace

from app.search import Segment, highlight, match_count, rank, score


def make_book(title, author="Anon", description="", publication_year=None):
    return {
        "title": title,
        "author": author,
        "description": description,
        "publication_year": publication_year,
    }


DUNE = make_book("Dune", "Herbert", "desert planet")
DUST = make_book("Dust", "Smith", "empty")


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

class TestScore:

    def test_exact_title_match_scores_175(self):
        assert score(DUNE, "dune") == 175

    def test_title_prefix_without_equality(self):
        assert score(DUNE, "du") == 125

    def test_title_substring_only(self):
        assert score(make_book("Children of Dune"), "dune") == 100

    def test_author_exact_and_contains(self):
        assert score(make_book("X", author="Herbert"), "herbert") == 75
        assert score(make_book("X", author="Frank Herbert"), "herbert") == 50

    def test_year_exact_and_contains(self):
        book = make_book("X", publication_year=1965)
        assert score(book, "1965") == 60
        assert score(book, "196") == 40

    def test_description_only(self):
        assert score(DUNE, "planet") == 10

    def test_bonuses_add_across_fields(self):
        book = make_book("Dune", author="Dune", description="dune")
        assert score(book, "DUNE") == 175 + 75 + 10

    def test_no_match_scores_zero(self):
        assert score(DUNE, "zzz") == 0

    def test_missing_year_is_empty_string(self):
        book = {"title": "Dune", "author": "Herbert", "description": "desert"}
        assert score(book, "19") == 0

    def test_works_with_attribute_objects(self):
        book = SimpleNamespace(
            title="Dune", author="Herbert", description="desert", publication_year=1965
        )
        assert score(book, "dune") == 175

    def test_exact_title_beats_plain_substring(self):
        exact = make_book("Dune")
        substring = make_book("The Dune Chronicles")
        assert score(exact, "dune") >= score(substring, "dune")


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

class TestRank:

    def test_blank_query_keeps_order(self):
        books = [DUST, DUNE]
        assert rank(books, "") == [DUST, DUNE]
        assert rank(books, "   ") == [DUST, DUNE]

    def test_zero_matches_keeps_order(self):
        books = [DUST, DUNE, make_book("Emma")]
        assert match_count(books, "zzz") == 0
        assert rank(books, "zzz") == books

    def test_tie_keeps_input_order(self):
        # Both titles contain and start with "du": 125 each
        assert rank([DUNE, DUST], "du") == [DUNE, DUST]
        assert rank([DUST, DUNE], "du") == [DUST, DUNE]

    def test_exact_match_ranks_first(self):
        assert rank([DUST, DUNE], "dune") == [DUNE, DUST]

    def test_end_to_end_dune_dust(self):
        books = [
            {**DUNE, "genre": "sci-fi"},
            {**DUST, "genre": "sci-fi"},
        ]
        assert match_count(books, "du") == 2
        assert [b["title"] for b in rank(books, "du")] == ["Dune", "Dust"]

        assert score(books[0], "dune") == 175
        assert score(books[1], "dune") == 0
        assert match_count(books, "dune") == 1
        assert [b["title"] for b in rank(books, "dune")] == ["Dune", "Dust"]

    def test_output_is_in_descending_score_order(self):
        books = [
            make_book("Notes", description="a dune sea"),
            make_book("Sand", author="Dune Press"),
            make_book("Children of Dune"),
            make_book("Dune"),
            make_book("Unrelated"),
        ]
        ranked = rank(books, "dune")
        scores = [score(b, "dune") for b in ranked]
        assert scores == sorted(scores, reverse=True)
        assert ranked[0]["title"] == "Dune"
        assert ranked[-1]["title"] == "Unrelated"

    def test_non_matching_books_are_kept(self):
        books = [make_book("Emma"), DUNE]
        assert rank(books, "dune") == [DUNE, make_book("Emma")]

    def test_input_is_not_mutated(self):
        books = [DUST, DUNE]
        ranked = rank(books, "dune")
        assert books == [DUST, DUNE]
        assert ranked is not books

    def test_empty_input(self):
        assert rank([], "dune") == []

    def test_year_query_ranks_by_year(self):
        old = make_book("Old", publication_year=1813)
        new = make_book("New", publication_year=2015)
        assert rank([old, new], "2015") == [new, old]


# ---------------------------------------------------------------------------
# Match counting
# ---------------------------------------------------------------------------

class TestMatchCount:

    def test_counts_each_book_once(self):
        book = make_book("Dune", author="Dune", description="Dune")
        assert match_count([book], "dune") == 1

    def test_counts_every_searchable_field(self):
        books = [
            make_book("Dune"),
            make_book("X", author="Dunham"),
            make_book("Y", description="over the dunes"),
            make_book("Z", publication_year=1965),
            make_book("W"),
        ]
        assert match_count(books, "dun") == 3
        assert match_count(books, "65") == 1

    def test_blank_query_counts_nothing(self):
        assert match_count([DUNE, DUST], " ") == 0


# ---------------------------------------------------------------------------
# Highlighting
# ---------------------------------------------------------------------------

class TestHighlight:

    def test_no_occurrence_returns_text_unchanged(self):
        assert highlight("Desert planet", "ocean") == [Segment("Desert planet")]

    def test_empty_query_returns_text_unchanged(self):
        assert highlight("Dune", "") == [Segment("Dune", matched=False)]

    def test_empty_text(self):
        assert highlight("", "dune") == [Segment("")]

    def test_marks_every_occurrence_case_insensitively(self):
        segments = highlight("Dune and dune again", "DUNE")
        assert segments == [
            Segment("Dune", matched=True),
            Segment(" and "),
            Segment("dune", matched=True),
            Segment(" again"),
        ]

    def test_segments_rebuild_original_text(self):
        text = "The Dune Chronicles: dune, DUNE."
        assert "".join(s.text for s in highlight(text, "dune")) == text

    def test_regex_characters_are_literal(self):
        segments = highlight("C++ (2nd ed.) costs $5.00", "(2nd ed.)")
        assert segments == [
            Segment("C++ "),
            Segment("(2nd ed.)", matched=True),
            Segment(" costs $5.00"),
        ]
        assert highlight("a.b", ".") == [
            Segment("a"),
            Segment(".", matched=True),
            Segment("b"),
        ]
        assert highlight("abc", ".*") == [Segment("abc")]

    def test_whole_text_match(self):
        assert highlight("Dune", "dune") == [Segment("Dune", matched=True)]
