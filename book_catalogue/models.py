# book_catalogue/models.py
from typing import List, Optional

from pydantic import BaseModel, Field


# Fields a caller may set. ``isbn`` is assigned by the catalogue and never
# taken from input.
MUTABLE_FIELDS = (
    "title",
    "author",
    "price",
    "cover",
    "description",
    "publication_date",
    "genre",
    "rate",
    "display",
)


class Book(BaseModel):
    isbn: int
    title: str
    author: str
    price: float
    cover: Optional[str] = None
    description: Optional[str] = None
    publication_date: Optional[str] = None
    genre: List[str] = Field(default_factory=list)
    rate: float
    display: bool = False
