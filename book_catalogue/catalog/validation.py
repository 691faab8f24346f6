"""
Field rules for catalogue entries.

Two rule sets exist. The full set is applied on create and full update:
every field is checked and required fields must be present. The partial
set is applied on partial update: only the keys present in the request
are checked, each against the same constraint as in the full set.

Presence is explicit. A key in the mapping counts as supplied whatever
its value, so ``{"price": 0}`` is a price change that fails, not an
omitted price.
"""

from __future__ import annotations

import math
import re
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..models import MUTABLE_FIELDS

Violation = Tuple[str, str]

MAX_TEXT_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 5000
MAX_GENRES = 10
MIN_RATE = 1.0
MAX_RATE = 5.0

REQUIRED_FIELDS = frozenset({"title", "author", "price", "genre", "rate"})
# May be omitted but never explicitly cleared.
NON_NULLABLE_FIELDS = REQUIRED_FIELDS | {"display"}

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_url_adapter = TypeAdapter(HttpUrl)


class RuleSet(str, Enum):
    FULL = "full"
    PARTIAL = "partial"


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_text(field: str, value: Any, max_length: int) -> Optional[str]:
    if not isinstance(value, str):
        return f"{_label(field)} must be a string"
    if not value.strip():
        return f"{_label(field)} cannot be empty"
    if len(value.strip()) > max_length:
        return f"{_label(field)} must be at most {max_length} characters"
    return None


def _check_title(value: Any) -> Optional[str]:
    return _check_text("title", value, MAX_TEXT_LENGTH)


def _check_author(value: Any) -> Optional[str]:
    return _check_text("author", value, MAX_TEXT_LENGTH)


def _check_price(value: Any) -> Optional[str]:
    if not _is_number(value) or not math.isfinite(value):
        return "Price must be a number"
    if value <= 0:
        return "Price must be greater than 0"
    return None


def _check_cover(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return "Cover must be a string"
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        return "Cover must be a well-formed URL"
    return None


def _check_description(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return "Description must be a string"
    if len(value) > MAX_DESCRIPTION_LENGTH:
        return f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"
    return None


def _check_publication_date(value: Any) -> Optional[str]:
    message = "Publication date must be a valid date in YYYY-MM-DD format"
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return message
    try:
        date.fromisoformat(value)
    except ValueError:
        return message
    return None


def _check_genre(value: Any) -> Optional[str]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
        return "Genre must be a list of strings"
    if not value:
        return "Genre must contain at least one entry"
    if len(value) > MAX_GENRES:
        return f"Genre must contain at most {MAX_GENRES} entries"
    if any(not isinstance(g, str) or not g.strip() for g in value):
        return "Genre entries must be non-empty strings"
    return None


def _check_rate(value: Any) -> Optional[str]:
    if not _is_number(value) or not math.isfinite(value):
        return "Rate must be a number"
    if not MIN_RATE <= value <= MAX_RATE:
        return f"Rate must be between {MIN_RATE:g} and {MAX_RATE:g}"
    return None


def _check_display(value: Any) -> Optional[str]:
    if not isinstance(value, bool):
        return "Display must be a boolean"
    return None


# Ordered like the record so violations come back in a stable order.
FIELD_CHECKS: Dict[str, Callable[[Any], Optional[str]]] = {
    "title": _check_title,
    "author": _check_author,
    "price": _check_price,
    "cover": _check_cover,
    "description": _check_description,
    "publication_date": _check_publication_date,
    "genre": _check_genre,
    "rate": _check_rate,
    "display": _check_display,
}


def validate(candidate: Mapping[str, Any], rule_set: RuleSet = RuleSet.FULL) -> List[Violation]:
    """Check ``candidate`` against ``rule_set``.

    Parameters
    ----------
    candidate : Mapping[str, Any]
        Field name to proposed value. ``isbn`` is ignored: identity is
        never taken from input.
    rule_set : RuleSet
        ``RuleSet.FULL`` requires every required field; ``RuleSet.PARTIAL``
        only looks at the keys present.

    Returns
    -------
    List[Tuple[str, str]]
        One ``(field, message)`` pair per offending field. Empty when
        the candidate is valid.
    """
    violations: List[Violation] = []
    for field, check in FIELD_CHECKS.items():
        if field not in candidate:
            if rule_set is RuleSet.FULL and field in REQUIRED_FIELDS:
                violations.append((field, f"{_label(field)} is required"))
            continue
        value = candidate[field]
        if value is None:
            # None clears an optional field.
            if rule_set is RuleSet.FULL and field in REQUIRED_FIELDS:
                violations.append((field, f"{_label(field)} is required"))
            elif field in NON_NULLABLE_FIELDS:
                violations.append((field, f"{_label(field)} cannot be null"))
            continue
        message = check(value)
        if message:
            violations.append((field, message))

    for field in candidate:
        if field != "isbn" and field not in FIELD_CHECKS:
            violations.append((field, "unknown field"))
    return violations


def normalize(candidate: Mapping[str, Any]) -> Dict[str, Any]:
    """Return the storable form of an already validated ``candidate``.

    Text fields are stripped, numbers become floats and duplicate genres
    are collapsed keeping the first occurrence.
    """
    data: Dict[str, Any] = {}
    for field in MUTABLE_FIELDS:
        if field not in candidate:
            continue
        value = candidate[field]
        if value is not None:
            if field in ("title", "author"):
                value = value.strip()
            elif field in ("price", "rate"):
                value = float(value)
            elif field == "genre":
                value = list(dict.fromkeys(g.strip() for g in value))
        data[field] = value
    return data
