"""
ISBN-13 generation for new catalogue entries.

Identifiers are a fixed 3-digit prefix, 9 random digits and a check
digit. Nothing here guarantees uniqueness; the catalogue service checks
the store and draws again on a collision.
"""

from __future__ import annotations

import random
from typing import Optional

DEFAULT_PREFIX = "978"
ISBN_LENGTH = 13


def check_digit(digits: str) -> int:
    """Return the ISBN-13 check digit for the first 12 ``digits``.

    Digits at even positions weigh 1, digits at odd positions weigh 3.
    """
    total = 0
    for i, ch in enumerate(digits[:12]):
        d = int(ch)
        total += d if i % 2 == 0 else d * 3
    return (10 - (total % 10)) % 10


def generate_isbn(prefix: str = DEFAULT_PREFIX, rng: Optional[random.Random] = None) -> int:
    """Generate a random 13-digit ISBN with a valid check digit.

    Parameters
    ----------
    prefix : str
        Three decimal digits placed in front of the random part.
    rng : Optional[random.Random]
        Source of randomness. Tests pass a seeded instance.

    Returns
    -------
    int
        The identifier as an integer. ``format_isbn`` renders it back to
        13 digits.
    """
    if len(prefix) != 3 or not prefix.isdigit():
        raise ValueError(f"ISBN prefix must be exactly 3 digits, got {prefix!r}")
    rng = rng or random
    body = prefix + "".join(str(rng.randint(0, 9)) for _ in range(9))
    return int(body + str(check_digit(body)))


def format_isbn(isbn: int) -> str:
    return str(isbn).zfill(ISBN_LENGTH)


def is_valid_isbn(value: object) -> bool:
    """Return True when ``value`` is a 13-digit ISBN with a correct check digit."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        if value < 0:
            return False
        text = format_isbn(value)
    elif isinstance(value, str):
        text = value.strip()
    else:
        return False
    if len(text) != ISBN_LENGTH or not text.isdigit():
        return False
    return check_digit(text) == int(text[-1])
