"""
Catalogue service: the operations exposed to the HTTP layer.

``CatalogueService`` validates input, enforces identity and title
uniqueness and delegates storage to a ``BookRepository`` it is given at
construction time. It holds no state of its own, so one instance can be
shared for the lifetime of the application.

Concurrent writers are not coordinated here. The service checks before
it writes and relies on the repository's unique constraints to catch a
race, which it reports as ``DuplicateTitle`` or ``Conflict``.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel

from ..models import MUTABLE_FIELDS, Book
from .errors import Conflict, DuplicateTitle, NotFound, StorageConstraintError, ValidationError
from .isbn import DEFAULT_PREFIX, generate_isbn
from .search import SearchCriteria, search as filter_books
from .validation import RuleSet, normalize, validate

if TYPE_CHECKING:
    from ..storage import BookRepository


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

BookInput = Union[Mapping[str, Any], BaseModel]


def _as_mapping(data: BookInput) -> Mapping[str, Any]:
    # Only fields the caller actually sent count as supplied.
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return data


class CatalogueService:
    """Create, read, update, delete and search catalogue entries.

    Parameters
    ----------
    repository : BookRepository
        Where books are stored.
    isbn_prefix : str
        Three digits every generated ISBN starts with.
    max_isbn_attempts : int
        How many identifiers to draw before giving up on a create when
        each one is already taken.
    rng : Optional[random.Random]
        Randomness for identifier generation.
    """

    def __init__(
        self,
        repository: "BookRepository",
        *,
        isbn_prefix: str = DEFAULT_PREFIX,
        max_isbn_attempts: int = 5,
        rng: Optional[random.Random] = None,
    ) -> None:
        if max_isbn_attempts < 1:
            raise ValueError("max_isbn_attempts must be at least 1")
        self.repository = repository
        self.isbn_prefix = isbn_prefix
        self.max_isbn_attempts = max_isbn_attempts
        self._rng = rng

    # ------------------------------------------------------------------
    # Reads

    def list_books(self) -> List[Book]:
        return self.repository.find_all()

    def get_book(self, isbn: int) -> Book:
        book = self.repository.find_by_id(isbn)
        if book is None:
            raise NotFound(isbn)
        return book

    def search(self, criteria: Union[SearchCriteria, Mapping[str, Any], None] = None) -> List[Book]:
        """Return the books matching every supplied criterion (possibly none)."""
        return filter_books(self.repository.find_all(), criteria)

    # ------------------------------------------------------------------
    # Writes

    def create_book(self, data: BookInput) -> Book:
        """Validate and store a new book under a freshly generated ISBN.

        Raises
        ------
        ValidationError
            When any field breaks the full rule set.
        DuplicateTitle
            When a stored book already has the same title, ignoring case.
        Conflict
            When no free ISBN could be drawn.
        """
        data = _as_mapping(data)
        self._check(data, RuleSet.FULL)
        fields = self._replacement(data)
        self._ensure_unique_title(fields["title"])

        book = Book(isbn=self._allocate_isbn(), **fields)
        stored = self._save(book)
        logger.info("The book %s (%r) was created successfully.", stored.isbn, stored.title)
        return stored

    def update_book(self, isbn: int, data: BookInput) -> Book:
        """Replace every mutable field of the book stored under ``isbn``.

        Fields left out of ``data`` are reset: optional ones to ``None``,
        ``display`` to ``False``. The ISBN itself never changes.
        """
        data = _as_mapping(data)
        self.get_book(isbn)
        self._check(data, RuleSet.FULL)
        fields = self._replacement(data)
        self._ensure_unique_title(fields["title"], exclude=isbn)

        stored = self._save(Book(isbn=isbn, **fields))
        logger.info("The book with ISBN %s was updated.", isbn)
        return stored

    def partial_update_book(self, isbn: int, changes: BookInput) -> Book:
        """Apply only the supplied fields to the book stored under ``isbn``.

        Every supplied field is validated first; a single violation fails
        the whole request and nothing is written.
        """
        changes = _as_mapping(changes)
        current = self.get_book(isbn)
        self._check(changes, RuleSet.PARTIAL)
        fields = normalize(changes)
        if "title" in fields:
            self._ensure_unique_title(fields["title"], exclude=isbn)

        updated = current.model_copy(update=fields)
        stored = self._save(updated)
        logger.info(
            "The book with ISBN %s was partially updated (%s).",
            isbn,
            ", ".join(sorted(fields)) or "no fields",
        )
        return stored

    def delete_book(self, isbn: int) -> bool:
        """Remove the book stored under ``isbn``; False when there is none."""
        if not self.repository.exists_by_id(isbn):
            logger.warning("No books with ISBN %s were found to delete.", isbn)
            return False
        self.repository.delete_by_id(isbn)
        logger.info("The book with ISBN %s was removed.", isbn)
        return True

    # ------------------------------------------------------------------
    # Helpers

    @staticmethod
    def _check(data: Mapping[str, Any], rule_set: RuleSet) -> None:
        violations = validate(data, rule_set)
        if violations:
            raise ValidationError(violations)

    @staticmethod
    def _replacement(data: Mapping[str, Any]) -> Dict[str, Any]:
        fields: Dict[str, Any] = dict.fromkeys(MUTABLE_FIELDS)
        fields.update(normalize(data))
        if fields["display"] is None:
            fields["display"] = False
        return fields

    def _ensure_unique_title(self, title: str, exclude: Optional[int] = None) -> None:
        key = title.strip().lower()
        for other in self.repository.find_by_title_containing(title):
            if other.isbn != exclude and other.title.strip().lower() == key:
                raise DuplicateTitle(title)

    def _allocate_isbn(self) -> int:
        for attempt in range(1, self.max_isbn_attempts + 1):
            isbn = generate_isbn(self.isbn_prefix, self._rng)
            if not self.repository.exists_by_id(isbn):
                return isbn
            logger.warning(
                "Generated ISBN %s is already taken (attempt %d of %d).",
                isbn,
                attempt,
                self.max_isbn_attempts,
            )
        raise Conflict(f"Could not allocate a free ISBN after {self.max_isbn_attempts} attempts.")

    def _save(self, book: Book) -> Book:
        try:
            return self.repository.save(book)
        except StorageConstraintError as exc:
            if exc.field == "title":
                raise DuplicateTitle(book.title) from exc
            raise Conflict(
                f"The store rejected a concurrent write to the book with ISBN {book.isbn}.",
                isbn=book.isbn,
            ) from exc
