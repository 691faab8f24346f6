"""Tests for ISBN generation."""

import random

import pytest

from book_catalogue.catalog.isbn import check_digit, format_isbn, generate_isbn, is_valid_isbn


def _weighted_check(digits: str) -> int:
    total = sum(int(d) * (1 if i % 2 == 0 else 3) for i, d in enumerate(digits[:12]))
    return (10 - total % 10) % 10


@pytest.mark.parametrize(
    "isbn, expected",
    [
        ("9780306406157", 7),
        ("9781861972712", 2),
        ("9780000000002", 2),
    ],
)
def test_check_digit_known_values(isbn: str, expected: int) -> None:
    assert check_digit(isbn[:12]) == expected


def test_generated_isbns_carry_valid_check_digit() -> None:
    rng = random.Random(42)
    for _ in range(500):
        isbn = generate_isbn(rng=rng)
        text = format_isbn(isbn)
        assert len(text) == 13
        assert text.startswith("978")
        assert int(text[-1]) == _weighted_check(text)
        assert is_valid_isbn(isbn)


def test_generate_isbn_uses_prefix() -> None:
    isbn = generate_isbn("979", rng=random.Random(3))
    assert format_isbn(isbn).startswith("979")


def test_generate_isbn_is_deterministic_for_seeded_rng() -> None:
    assert generate_isbn(rng=random.Random(9)) == generate_isbn(rng=random.Random(9))


@pytest.mark.parametrize("prefix", ["97", "9780", "97a", ""])
def test_generate_isbn_rejects_bad_prefix(prefix: str) -> None:
    with pytest.raises(ValueError):
        generate_isbn(prefix)


@pytest.mark.parametrize(
    "value, expected",
    [
        (9780306406157, True),
        ("9780306406157", True),
        (" 9780306406157 ", True),
        (9780306406158, False),
        ("978030640615", False),
        ("978030640615X", False),
        (-9780306406157, False),
        (True, False),
        (None, False),
        (9780306406157.0, False),
    ],
)
def test_is_valid_isbn(value: object, expected: bool) -> None:
    assert is_valid_isbn(value) is expected
