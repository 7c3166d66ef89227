"""
Dev DB admin response schemas.

Documents are arbitrary, so they are typed as plain dicts and must be passed
through `to_jsonable` before being put in a response.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


class CollectionsResponse(BaseModel):
    """Allowlisted collections and those of them that exist."""
    db: str = Field(..., description="Database name")
    collections: list[str] = Field(..., description="Allowed collections that exist")
    allowed: list[str] = Field(..., description="Resolved allowlist")


class DocumentListResponse(BaseModel):
    """A page of documents with the normalized query echoed back."""
    db: str
    collection: str
    filter: dict[str, Any] = Field(default_factory=dict)
    sort: Optional[dict[str, Any]] = None
    projection: Optional[dict[str, Any]] = None
    limit: int
    skip: int
    total: int = Field(..., description="Matches for the filter, independent of the page")
    documents: list[dict[str, Any]]


class DocumentResponse(BaseModel):
    """A single document, as stored."""
    ok: bool = True
    db: str
    collection: str
    query: Optional[dict[str, Any]] = None
    document: Optional[dict[str, Any]] = None


class DeleteResponse(BaseModel):
    ok: bool = True
    db: str
    collection: str
    query: dict[str, Any]
