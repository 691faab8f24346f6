"""Pytest configuration and fixtures."""

import copy
import random
from typing import Any, Dict, Iterator

import pytest
from fastapi.testclient import TestClient

from book_catalogue.catalog.service import CatalogueService
from book_catalogue.config import Settings
from book_catalogue.main import create_app
from book_catalogue.storage import InMemoryBookRepository

DUNE: Dict[str, Any] = {
    "title": "Dune",
    "author": "Herbert",
    "price": 9.99,
    "genre": ["SF"],
    "rate": 4.5,
    "display": True,
}

EMMA: Dict[str, Any] = {
    "title": "Emma",
    "author": "Jane Austen",
    "price": 7.5,
    "cover": "https://covers.example.com/emma.jpg",
    "description": "A novel about youthful hubris and romantic misunderstandings.",
    "publication_date": "1815-12-23",
    "genre": ["Romance", "Classic"],
    "rate": 4.0,
    "display": False,
}


@pytest.fixture
def dune() -> Dict[str, Any]:
    return copy.deepcopy(DUNE)


@pytest.fixture
def emma() -> Dict[str, Any]:
    return copy.deepcopy(EMMA)


@pytest.fixture
def repository() -> InMemoryBookRepository:
    return InMemoryBookRepository()


@pytest.fixture
def catalogue(repository: InMemoryBookRepository) -> CatalogueService:
    return CatalogueService(repository, rng=random.Random(1234))


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        storage_backend="memory",
        catalogue_file=tmp_path / "catalogue.json",
        log_level="DEBUG",
    )


@pytest.fixture
def client(settings: Settings, repository: InMemoryBookRepository) -> Iterator[TestClient]:
    app = create_app(settings, repository)
    with TestClient(app) as test_client:
        yield test_client
