"""
Error taxonomy of the catalogue.

Every failure the catalogue reports is a ``CatalogueError`` carrying a
machine-readable ``code``, a human-readable ``message`` and a list of
structured ``details``. The HTTP layer decides the status code; nothing
in here knows about transport.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple


class ErrorCode(str, Enum):
    """Machine-readable error codes for API consumers."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    BOOK_NOT_FOUND = "BOOK_NOT_FOUND"
    DUPLICATE_TITLE = "DUPLICATE_TITLE"
    CONFLICT = "CONFLICT"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class CatalogueError(Exception):
    """Base class for every error raised by the catalogue."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        *,
        details: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self.message = message
        self.details = details or []
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ValidationError(CatalogueError):
    """One or more fields broke a validation rule."""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, violations: Sequence[Tuple[str, str]]) -> None:
        self.violations = list(violations)
        fields = ", ".join(field for field, _ in self.violations)
        super().__init__(
            f"Invalid book data: {fields}",
            details=[{"field": f, "message": m} for f, m in self.violations],
        )


class NotFound(CatalogueError):
    code = ErrorCode.BOOK_NOT_FOUND

    def __init__(self, isbn: int) -> None:
        self.isbn = isbn
        super().__init__(f"Book not found with ISBN {isbn}", details=[{"isbn": isbn}])


class DuplicateTitle(CatalogueError):
    code = ErrorCode.DUPLICATE_TITLE

    def __init__(self, title: str) -> None:
        self.title = title
        super().__init__(
            f"A book with the title '{title}' already exists.",
            details=[{"field": "title", "value": title}],
        )


class Conflict(CatalogueError):
    """The store rejected a write because of a concurrent change.

    The caller may retry with fresh data.
    """

    code = ErrorCode.CONFLICT

    def __init__(self, message: str, isbn: Optional[int] = None) -> None:
        self.isbn = isbn
        super().__init__(message, details=[{"isbn": isbn}] if isbn is not None else None)


class StorageFailure(CatalogueError):
    code = ErrorCode.STORAGE_FAILURE


class StorageConstraintError(Exception):
    """Raised by a repository when a write breaks a unique constraint.

    ``field`` is ``"isbn"`` or ``"title"``. The catalogue service turns it
    into ``DuplicateTitle`` or ``Conflict``.
    """

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Unique constraint violated on {field}: {value!r}")
