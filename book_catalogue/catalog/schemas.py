"""
Pydantic schema definitions for the catalogue HTTP API.

Request bodies only describe the JSON shape. Every field is optional
here so that a missing title or a zero price reaches the catalogue's own
validation rules, which report all offending fields at once. Unknown
keys are rejected outright.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class BookRequest(BaseModel):
    """Body of create (POST), full update (PUT) and partial update (PATCH).

    For PATCH only the keys present in the JSON body are applied; an
    explicit ``null`` clears an optional field such as ``cover``.
    ``isbn`` is accepted so clients can send back a record they fetched,
    but it is never used: identifiers are assigned by the catalogue.
    """

    model_config = ConfigDict(extra="forbid")

    isbn: Optional[int] = None
    title: Optional[str] = None
    author: Optional[str] = None
    price: Optional[float] = None
    cover: Optional[str] = None
    description: Optional[str] = None
    publication_date: Optional[str] = None
    genre: Optional[List[str]] = None
    rate: Optional[float] = None
    display: Optional[bool] = None


class DeleteResult(BaseModel):
    status: str = "ok"
    isbn: int


class ErrorBody(BaseModel):
    code: str
    message: str
    details: List[Dict[str, Any]] = []


class ErrorResponse(BaseModel):
    """The shape of every error returned by the API."""

    error: ErrorBody
