# book_catalogue/storage.py
"""
Repositories holding the catalogue.

``BookRepository`` is the contract the catalogue service talks to: find
all, find by key, find by title fragment, save (insert or replace keyed
by ISBN), delete by key and exists by key. Two backends implement it:

* ``InMemoryBookRepository`` keeps books in an insertion-ordered dict.
* ``JsonFileBookRepository`` does the same and writes the whole catalogue
  to a JSON file after every change, so it survives restarts.

Both enforce the case-insensitive unique title constraint on ``save`` and
hand out copies, so callers never hold a reference to stored state.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .catalog.errors import StorageConstraintError, StorageFailure
from .config import Settings
from .models import Book


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def _title_key(title: str) -> str:
    return title.strip().lower()


class BookRepository(ABC):
    """Keyed store of books. ``open()`` and ``close()`` bracket its use."""

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    @abstractmethod
    def find_all(self) -> List[Book]:
        ...

    @abstractmethod
    def find_by_id(self, isbn: int) -> Optional[Book]:
        ...

    @abstractmethod
    def find_by_title_containing(self, fragment: str) -> List[Book]:
        ...

    @abstractmethod
    def save(self, book: Book) -> Book:
        ...

    @abstractmethod
    def delete_by_id(self, isbn: int) -> None:
        ...

    @abstractmethod
    def exists_by_id(self, isbn: int) -> bool:
        ...


class InMemoryBookRepository(BookRepository):
    def __init__(self, books: Optional[Iterable[Book]] = None) -> None:
        self._books: Dict[int, Book] = {}
        self._lock = threading.RLock()
        for book in books or []:
            self._books[book.isbn] = book.model_copy(deep=True)

    def find_all(self) -> List[Book]:
        with self._lock:
            self._ensure_loaded()
            return [b.model_copy(deep=True) for b in self._books.values()]

    def find_by_id(self, isbn: int) -> Optional[Book]:
        with self._lock:
            self._ensure_loaded()
            book = self._books.get(isbn)
            return book.model_copy(deep=True) if book is not None else None

    def find_by_title_containing(self, fragment: str) -> List[Book]:
        needle = _title_key(fragment)
        with self._lock:
            self._ensure_loaded()
            return [
                b.model_copy(deep=True)
                for b in self._books.values()
                if needle in _title_key(b.title)
            ]

    def save(self, book: Book) -> Book:
        stored = book.model_copy(deep=True)
        with self._lock:
            self._ensure_loaded()
            key = _title_key(stored.title)
            for isbn, other in self._books.items():
                if isbn != stored.isbn and _title_key(other.title) == key:
                    raise StorageConstraintError("title", stored.title)
            previous = self._books.get(stored.isbn)
            self._books[stored.isbn] = stored
            try:
                self._flush()
            except StorageFailure:
                if previous is None:
                    del self._books[stored.isbn]
                else:
                    self._books[stored.isbn] = previous
                raise
        return stored.model_copy(deep=True)

    def delete_by_id(self, isbn: int) -> None:
        with self._lock:
            self._ensure_loaded()
            if isbn not in self._books:
                return
            # Rebuild on rollback so the book keeps its place in storage order.
            snapshot = dict(self._books)
            del self._books[isbn]
            try:
                self._flush()
            except StorageFailure:
                self._books = snapshot
                raise

    def exists_by_id(self, isbn: int) -> bool:
        with self._lock:
            self._ensure_loaded()
            return isbn in self._books

    def _ensure_loaded(self) -> None:
        """Hook for durable subclasses, called under the lock before any access."""

    def _flush(self) -> None:
        """Hook for durable subclasses, called under the lock after a change."""


class JsonFileBookRepository(InMemoryBookRepository):
    """In-memory repository mirrored to a JSON file.

    The file holds a list of book objects. A missing file is an empty
    catalogue. Writes go to a temporary file that then replaces the
    previous one, so a crash never leaves a half-written catalogue behind.

    The file is read by ``open()``, or by the first access when nobody
    opened the repository, so a write never replaces books it has not seen.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)
        self._opened = False

    def open(self) -> None:
        with self._lock:
            self._books = {b.isbn: b for b in self._load()}
            self._opened = True
        logger.info("Loaded %d books from %s", len(self._books), self.path)

    def close(self) -> None:
        with self._lock:
            if not self._opened:
                return
            self._flush()
            self._opened = False

    def _ensure_loaded(self) -> None:
        if not self._opened:
            self.open()

    def _load(self) -> List[Book]:
        if not self.path.exists():
            return []
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageFailure(f"Cannot read catalogue file {self.path}: {exc}") from exc
        if not isinstance(raw, list):
            raise StorageFailure(f"Catalogue file {self.path} must contain a list of books")
        try:
            books = [Book.model_validate(entry) for entry in raw]
        except PydanticValidationError as exc:
            raise StorageFailure(f"Catalogue file {self.path} holds an invalid book: {exc}") from exc

        isbns = set()
        titles = set()
        for book in books:
            if book.isbn in isbns:
                raise StorageFailure(f"Catalogue file {self.path} repeats ISBN {book.isbn}")
            if _title_key(book.title) in titles:
                raise StorageFailure(f"Catalogue file {self.path} repeats title {book.title!r}")
            isbns.add(book.isbn)
            titles.add(_title_key(book.title))
        return books

    def _flush(self) -> None:
        data = [b.model_dump() for b in self._books.values()]
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as exc:
            logger.error("Error writing %s: %s", self.path, exc)
            raise StorageFailure(f"Cannot write catalogue file {self.path}: {exc}") from exc


def build_repository(settings: Settings) -> BookRepository:
    """Create the repository selected by ``settings.storage_backend``."""
    if settings.storage_backend == "json":
        return JsonFileBookRepository(settings.catalogue_file)
    return InMemoryBookRepository()
