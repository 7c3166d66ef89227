"""
Dev DB admin router: generic document editing for allowlisted collections.

Security:
- requires a session token
- only enabled outside production, or with ENABLE_DEV_DB_ADMIN=true
- collections restricted by DEV_DB_ALLOWED_COLLECTIONS (CSV) or a minimal fallback
"""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from panel_api.admin.query import parse_json_parameter
from panel_api.dependencies.auth import CurrentSession
from panel_api.dependencies.services import get_document_service
from panel_api.schemas.dev_db import (
    CollectionsResponse,
    DeleteResponse,
    DocumentListResponse,
    DocumentResponse,
)
from panel_api.services.document_service import DocumentService
from panel_api.utils.encoding import to_jsonable

router = APIRouter(prefix="/api/dev-db", tags=["Dev DB"])


def _document_response(
    service: DocumentService,
    collection: str,
    document: Optional[dict[str, Any]],
    query: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    return to_jsonable({
        "ok": True,
        "db": service.db_name,
        "collection": service.collection_name(collection),
        "query": query,
        "document": document,
    })


@router.get(
    "/collections",
    response_model=CollectionsResponse,
    summary="List editable collections",
)
async def list_collections(
    session: CurrentSession,
    service: DocumentService = Depends(get_document_service),
):
    """
    List the allowlisted collections and which of them exist in the database.
    """
    return await service.list_collections()


@router.get(
    "/{collection}/documents",
    response_model=DocumentListResponse,
    summary="List documents",
)
async def list_documents(
    collection: str,
    session: CurrentSession,
    filter_: Optional[str] = Query(None, alias="filter", description='JSON filter, e.g. {"guildId":"123"}'),
    sort: Optional[str] = Query(None, description='JSON sort, e.g. {"createdAt":-1}'),
    projection: Optional[str] = Query(None, description="JSON projection"),
    limit: Optional[str] = Query(None, description="Page size (1-50, default 20)"),
    skip: Optional[str] = Query(None, description="Offset (0-100000, default 0)"),
    guild_id: Optional[str] = Query(None, alias="guildId", description="Legacy guildId filter"),
    service: DocumentService = Depends(get_document_service),
):
    """
    List a page of documents of an allowlisted collection.

    `filter`, `sort` and `projection` are JSON-encoded; keys starting with `$`
    are rejected.
    """
    page = await service.list_documents(
        collection,
        filter=parse_json_parameter(filter_),
        sort=parse_json_parameter(sort),
        projection=parse_json_parameter(projection),
        limit=limit,
        skip=skip,
        guild_id=guild_id,
    )

    return to_jsonable({
        "db": service.db_name,
        "collection": page.collection,
        "filter": page.filter,
        "sort": page.sort,
        "projection": page.projection,
        "limit": page.limit,
        "skip": page.skip,
        "total": page.total,
        "documents": page.items,
    })


@router.get(
    "/{collection}/documents/{doc_id}",
    response_model=DocumentResponse,
    summary="Get document",
)
async def get_document(
    collection: str,
    doc_id: str,
    session: CurrentSession,
    service: DocumentService = Depends(get_document_service),
):
    """Fetch one document by ObjectId (24 hex chars) or string `_id`."""
    document = await service.get_by_id(collection, doc_id)
    return _document_response(service, collection, document, {"_id": document["_id"]})


@router.post(
    "/{collection}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create document",
)
async def create_document(
    collection: str,
    session: CurrentSession,
    body: Any = Body(None),
    service: DocumentService = Depends(get_document_service),
):
    """
    Insert a document. `createdAt`/`updatedAt` are set unless provided.
    """
    document = await service.insert(collection, body)
    return _document_response(service, collection, document)


@router.patch(
    "/{collection}/documents/{doc_id}",
    response_model=DocumentResponse,
    summary="Update document fields",
)
async def patch_document(
    collection: str,
    doc_id: str,
    session: CurrentSession,
    body: Any = Body(None),
    service: DocumentService = Depends(get_document_service),
):
    """
    Merge fields into a document. `_id`, `createdAt` and `updatedAt` in the
    body are ignored; `updatedAt` is always refreshed.
    """
    document = await service.patch_by_id(collection, doc_id, body)
    return _document_response(service, collection, document, {"_id": document["_id"]})


@router.put(
    "/{collection}/documents/{doc_id}",
    response_model=DocumentResponse,
    summary="Replace document",
)
async def replace_document(
    collection: str,
    doc_id: str,
    session: CurrentSession,
    body: Any = Body(None),
    service: DocumentService = Depends(get_document_service),
):
    """
    Replace a whole document. The id in the path wins; no upsert (404 if missing).
    """
    document = await service.replace_by_id(collection, doc_id, body)
    return _document_response(service, collection, document, {"_id": document["_id"]})


@router.delete(
    "/{collection}/documents/{doc_id}",
    response_model=DeleteResponse,
    summary="Delete document",
)
async def delete_document(
    collection: str,
    doc_id: str,
    session: CurrentSession,
    service: DocumentService = Depends(get_document_service),
):
    """
    Delete a document.

    **Warning**: This action cannot be undone.
    """
    query = await service.delete_by_id(collection, doc_id)
    return to_jsonable({
        "ok": True,
        "db": service.db_name,
        "collection": service.collection_name(collection),
        "query": query,
    })


# ==================== Composite keys ====================


@router.get(
    "/{collection}/by-guild/{guild_id}",
    response_model=DocumentResponse,
    summary="Get document by guild",
)
async def get_by_guild(
    collection: str,
    guild_id: str,
    session: CurrentSession,
    service: DocumentService = Depends(get_document_service),
):
    keys = {"guildId": guild_id}
    document = await service.get_by_keys(collection, keys)
    return _document_response(service, collection, document, keys)


@router.put(
    "/{collection}/by-guild/{guild_id}",
    response_model=DocumentResponse,
    summary="Upsert document by guild",
)
async def upsert_by_guild(
    collection: str,
    guild_id: str,
    session: CurrentSession,
    body: Any = Body(None),
    service: DocumentService = Depends(get_document_service),
):
    """Merge fields into the guild's document, creating it if needed."""
    keys = {"guildId": guild_id}
    document = await service.upsert_by_keys(collection, keys, body)
    return _document_response(service, collection, document, keys)


@router.get(
    "/{collection}/by-user/{guild_id}/{user_id}",
    response_model=DocumentResponse,
    summary="Get document by guild member",
)
async def get_by_user(
    collection: str,
    guild_id: str,
    user_id: str,
    session: CurrentSession,
    service: DocumentService = Depends(get_document_service),
):
    keys = {"guildId": guild_id, "userId": user_id}
    document = await service.get_by_keys(collection, keys)
    return _document_response(service, collection, document, keys)


@router.put(
    "/{collection}/by-user/{guild_id}/{user_id}",
    response_model=DocumentResponse,
    summary="Upsert document by guild member",
)
async def upsert_by_user(
    collection: str,
    guild_id: str,
    user_id: str,
    session: CurrentSession,
    body: Any = Body(None),
    service: DocumentService = Depends(get_document_service),
):
    """Merge fields into the member's document, creating it if needed."""
    keys = {"guildId": guild_id, "userId": user_id}
    document = await service.upsert_by_keys(collection, keys, body)
    return _document_response(service, collection, document, keys)
