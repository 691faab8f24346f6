"""
Filtering over the catalogue.

``search()`` narrows a snapshot of the catalogue down to the books that
satisfy every supplied criterion. Text criteria are compared after
normalising case and surrounding whitespace; empty text criteria are
treated as absent. The catalogue's own order is preserved and there is
no pagination.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ..models import Book
from .errors import ValidationError


class SearchCriteria(BaseModel):
    """Independently optional filters. ``None`` means "no constraint"."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    author: Optional[str] = None
    genre: Optional[str] = None
    isbn: Optional[int] = None
    rate: Optional[float] = None
    display: Optional[bool] = None
    publication_date: Optional[str] = None

    @classmethod
    def coerce(cls, criteria: Union["SearchCriteria", Mapping[str, Any], None]) -> "SearchCriteria":
        if criteria is None:
            return cls()
        if isinstance(criteria, cls):
            return criteria
        try:
            return cls.model_validate(dict(criteria))
        except PydanticValidationError as exc:
            raise ValidationError(
                [(".".join(str(x) for x in err["loc"]), err["msg"]) for err in exc.errors()]
            ) from exc


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


def search(
    books: Iterable[Book],
    criteria: Union[SearchCriteria, Mapping[str, Any], None] = None,
) -> List[Book]:
    """Return the books matching all supplied ``criteria``.

    Parameters
    ----------
    books : Iterable[Book]
        The catalogue snapshot, in storage order.
    criteria : SearchCriteria or mapping, optional
        ``title`` and ``author`` match as case-insensitive substrings,
        ``genre`` matches any genre entry exactly (case-insensitive),
        ``isbn``, ``rate``, ``display`` and ``publication_date`` match
        exactly.

    Returns
    -------
    List[Book]
        Matching books; empty when nothing matches.
    """
    c = SearchCriteria.coerce(criteria)
    items = list(books)

    ntitle = _norm(c.title)
    nauthor = _norm(c.author)
    ngenre = _norm(c.genre)
    ndate = (c.publication_date or "").strip()

    if ntitle:
        items = [b for b in items if ntitle in _norm(b.title)]
    if nauthor:
        items = [b for b in items if nauthor in _norm(b.author)]
    if ngenre:
        items = [b for b in items if any(_norm(g) == ngenre for g in (b.genre or []))]
    if c.isbn is not None:
        items = [b for b in items if b.isbn == c.isbn]
    if c.rate is not None:
        items = [b for b in items if b.rate == c.rate]
    if c.display is not None:
        items = [b for b in items if b.display is c.display]
    if ndate:
        items = [b for b in items if b.publication_date == ndate]

    return items
