"""Tests for catalogue filtering."""

from typing import List

import pytest

from book_catalogue.catalog.errors import ValidationError
from book_catalogue.catalog.search import SearchCriteria, search
from book_catalogue.models import Book


@pytest.fixture
def books() -> List[Book]:
    return [
        Book(
            isbn=9780441172719,
            title="Dune",
            author="Frank Herbert",
            price=9.99,
            publication_date="1965-08-01",
            genre=["SF", "Classic"],
            rate=4.5,
            display=True,
        ),
        Book(
            isbn=9780593098233,
            title="Dune Messiah",
            author="Frank Herbert",
            price=8.99,
            publication_date="1969-10-15",
            genre=["SF"],
            rate=4.0,
            display=False,
        ),
        Book(
            isbn=9780141439587,
            title="Emma",
            author="Jane Austen",
            price=7.5,
            genre=["Romance", "Classic"],
            rate=4.5,
            display=True,
        ),
    ]


def _titles(result: List[Book]) -> List[str]:
    return [b.title for b in result]


def test_no_criteria_returns_everything_in_order(books: List[Book]) -> None:
    assert search(books) == books
    assert search(books, {}) == books
    assert search(books, SearchCriteria()) == books


def test_title_is_case_insensitive_substring(books: List[Book]) -> None:
    assert _titles(search(books, {"title": "dune"})) == ["Dune", "Dune Messiah"]
    assert _titles(search(books, {"title": "MESS"})) == ["Dune Messiah"]


def test_title_subset_matches_containment(books: List[Book]) -> None:
    for fragment in ["e", "m", "un", "zz"]:
        expected = [b for b in books if fragment.lower() in b.title.lower()]
        assert search(books, {"title": fragment}) == expected


def test_author_is_case_insensitive_substring(books: List[Book]) -> None:
    assert _titles(search(books, {"author": "austen"})) == ["Emma"]
    assert _titles(search(books, {"author": "frank"})) == ["Dune", "Dune Messiah"]


def test_genre_matches_any_entry_exactly(books: List[Book]) -> None:
    assert _titles(search(books, {"genre": "classic"})) == ["Dune", "Emma"]
    assert search(books, {"genre": "clas"}) == []


def test_exact_criteria(books: List[Book]) -> None:
    assert _titles(search(books, {"isbn": 9780141439587})) == ["Emma"]
    assert _titles(search(books, {"rate": 4.5})) == ["Dune", "Emma"]
    assert _titles(search(books, {"display": False})) == ["Dune Messiah"]
    assert _titles(search(books, {"publication_date": "1965-08-01"})) == ["Dune"]


def test_criteria_combine_with_and(books: List[Book]) -> None:
    criteria = SearchCriteria(genre="Classic", rate=4.5, author="herbert")
    assert _titles(search(books, criteria)) == ["Dune"]
    assert search(books, {"title": "Emma", "display": False}) == []


def test_blank_text_criteria_are_ignored(books: List[Book]) -> None:
    assert search(books, {"title": "  ", "author": ""}) == books


def test_no_match_is_an_empty_list(books: List[Book]) -> None:
    assert search(books, {"title": "Neuromancer"}) == []
    assert search([], {"title": "Dune"}) == []


def test_misspelled_criterion_is_rejected(books: List[Book]) -> None:
    with pytest.raises(ValidationError) as exc_info:
        search(books, {"titel": "zzz"})
    assert [field for field, _ in exc_info.value.violations] == ["titel"]


def test_wrongly_typed_criterion_is_rejected(books: List[Book]) -> None:
    with pytest.raises(ValidationError) as exc_info:
        search(books, {"isbn": "abc", "display": "maybe"})
    assert sorted(field for field, _ in exc_info.value.violations) == ["display", "isbn"]


def test_criteria_values_are_coerced(books: List[Book]) -> None:
    assert _titles(search(books, {"isbn": "9780141439587"})) == ["Emma"]
