"""
Generic document service for the dev DB admin.

Lets an operator browse and edit arbitrary documents of allowlisted
collections. Every public operation validates the collection first, then the
id and body, and only then talks to MongoDB, so a rejected request has no
side effects. Writes are followed by a read-back so callers receive exactly
what was persisted; the two round trips are not a transaction.
"""
from dataclasses import dataclass
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from panel_api.admin.guard import AdminGuard
from panel_api.admin.identifiers import id_query, resolve_identifier_strict
from panel_api.admin.query import (
    PROTECTED_FIELDS,
    assert_no_reserved_operators,
    clamp_limit,
    clamp_skip,
    normalize_filter,
    normalize_projection,
    normalize_sort,
    sanitize_insert,
    sanitize_patch,
)
from panel_api.core.exceptions import BadRequest, NotFound
from panel_api.utils.datetime import utc_now

SORT_DIRECTIONS = {
    1: ASCENDING,
    -1: DESCENDING,
    "asc": ASCENDING,
    "desc": DESCENDING,
    "ascending": ASCENDING,
    "descending": DESCENDING,
}


@dataclass
class DocumentPage:
    """One page of a collection listing plus the normalized query."""
    collection: str
    filter: dict[str, Any]
    sort: Optional[dict[str, Any]]
    projection: Optional[dict[str, Any]]
    limit: int
    skip: int
    total: int
    items: list[dict[str, Any]]


def sort_spec(sort: Optional[dict[str, Any]]) -> Optional[list[tuple[str, int]]]:
    """Convert a `{field: direction}` mapping into the driver's key list."""
    if not sort:
        return None
    spec = []
    for key, direction in sort.items():
        if isinstance(direction, str):
            direction = direction.strip().lower()
        if (
            isinstance(direction, bool)
            or not isinstance(direction, (int, float, str))
            or direction not in SORT_DIRECTIONS
        ):
            raise BadRequest(f"Invalid sort direction for {key}")
        spec.append((key, SORT_DIRECTIONS[direction]))
    return spec


def key_query(keys: dict[str, Any]) -> dict[str, str]:
    """Build an equality filter from business keys (guildId, userId...)."""
    if not keys:
        raise BadRequest("Missing key")
    query = {}
    for field, value in keys.items():
        text = "" if value is None else str(value).strip()
        if not text:
            raise BadRequest(f"Missing {field}")
        query[field] = text
    assert_no_reserved_operators(query)
    return query


async def upsert_document_by_keys(
    collection: AsyncIOMotorCollection,
    keys: dict[str, str],
    fields: dict[str, Any],
) -> Optional[dict[str, Any]]:
    """
    Merge `fields` into the document matching `keys`, creating it if absent.

    Key fields and `createdAt` are only written on creation; `updatedAt` is
    refreshed on every call.

    Returns:
        The stored document as read back after the write
    """
    now = utc_now()
    to_set = {
        k: v for k, v in fields.items()
        if k not in keys and k not in PROTECTED_FIELDS
    }
    to_set["updatedAt"] = now

    await collection.update_one(
        keys,
        {
            "$set": to_set,
            "$setOnInsert": {**keys, "createdAt": now},
        },
        upsert=True,
    )

    return await collection.find_one(keys)


class DocumentService:
    """CRUD over allowlisted collections."""

    def __init__(self, db: AsyncIOMotorDatabase, guard: AdminGuard):
        """Initialize with the panel database and the admin guard."""
        self.db = db
        self.guard = guard

    @property
    def db_name(self) -> str:
        return self.db.name

    def collection_name(self, collection: str) -> str:
        """The trimmed name of an allowlisted collection."""
        return self.guard.assert_collection_allowed(collection)

    def _collection(self, collection: str) -> tuple[str, AsyncIOMotorCollection]:
        name = self.collection_name(collection)
        return name, self.db[name]

    # ==================== Introspection ====================

    async def list_collections(self) -> dict[str, Any]:
        """
        List the allowlisted collections that actually exist.

        The database listing is only intersected with the allowlist for
        display; it never widens it.
        """
        self.guard.assert_admin_mode_enabled()
        allowed = self.guard.resolve_allowed_collections()

        existing = set(await self.db.list_collection_names())

        return {
            "db": self.db_name,
            "collections": sorted(name for name in allowed if name in existing),
            "allowed": allowed,
        }

    # ==================== Reads ====================

    async def list_documents(
        self,
        collection: str,
        *,
        filter: Any = None,
        sort: Any = None,
        projection: Any = None,
        limit: Any = None,
        skip: Any = None,
        guild_id: Optional[str] = None,
    ) -> DocumentPage:
        """
        List a page of documents.

        Args:
            collection: Collection name (must be allowlisted)
            filter: Raw filter, `{}` when absent
            sort: Raw `{field: 1|-1}` sort
            projection: Raw projection
            limit: Page size, clamped to 1..50 (default 20)
            skip: Offset, clamped to 0..100000 (default 0)
            guild_id: Legacy shortcut; sets `guildId` in the filter, overriding any
                value the filter already has

        Returns:
            DocumentPage whose `total` counts every match, not just the page
        """
        name, col = self._collection(collection)

        query = normalize_filter(filter)
        if guild_id and guild_id.strip():
            query = {**query, "guildId": guild_id.strip()}
        sort = normalize_sort(sort)
        projection = normalize_projection(projection)
        spec = sort_spec(sort)
        limit = clamp_limit(limit)
        skip = clamp_skip(skip)

        total = await col.count_documents(query)

        cursor = col.find(query, projection or None)
        if spec:
            cursor = cursor.sort(spec)
        cursor = cursor.skip(skip).limit(limit)
        items = await cursor.to_list(length=limit)

        return DocumentPage(
            collection=name,
            filter=query,
            sort=sort,
            projection=projection,
            limit=limit,
            skip=skip,
            total=total,
            items=items,
        )

    async def get_by_id(self, collection: str, raw_id: Any) -> dict[str, Any]:
        name, col = self._collection(collection)
        query = id_query(resolve_identifier_strict(raw_id))

        doc = await col.find_one(query)
        if doc is None:
            raise NotFound()
        return doc

    async def get_by_keys(self, collection: str, keys: dict[str, Any]) -> dict[str, Any]:
        """Fetch one document by business keys, e.g. `{"guildId": ...}`."""
        name, col = self._collection(collection)
        query = key_query(keys)

        doc = await col.find_one(query)
        if doc is None:
            raise NotFound()
        return doc

    # ==================== Writes ====================

    async def insert(self, collection: str, raw_doc: Any) -> dict[str, Any]:
        """
        Insert a document and return it as stored.

        `createdAt`/`updatedAt` are stamped unless the body already carries
        them (lets a trusted operator backdate a document).
        """
        name, col = self._collection(collection)
        doc = dict(sanitize_insert(raw_doc))

        now = utc_now()
        doc["createdAt"] = doc.get("createdAt") or now
        doc["updatedAt"] = doc.get("updatedAt") or now

        result = await col.insert_one(doc)

        created = await col.find_one({"_id": result.inserted_id})
        if created is None:
            raise NotFound()
        return created

    async def patch_by_id(self, collection: str, raw_id: Any, raw_patch: Any) -> dict[str, Any]:
        """Merge a patch into an existing document. Never creates one."""
        name, col = self._collection(collection)
        query = id_query(resolve_identifier_strict(raw_id))
        fields = sanitize_patch(raw_patch)

        result = await col.update_one(
            query,
            {"$set": {**fields, "updatedAt": utc_now()}},
        )
        if result.matched_count == 0:
            raise NotFound()

        doc = await col.find_one(query)
        if doc is None:
            raise NotFound()
        return doc

    async def replace_by_id(self, collection: str, raw_id: Any, raw_doc: Any) -> dict[str, Any]:
        """
        Replace a whole document. Never upserts.

        The id from the path wins over any `_id` in the body.
        """
        name, col = self._collection(collection)
        identifier = resolve_identifier_strict(raw_id)
        query = id_query(identifier)
        replacement = dict(sanitize_insert(raw_doc))

        replacement["_id"] = identifier
        replacement["updatedAt"] = utc_now()

        result = await col.replace_one(query, replacement, upsert=False)
        if result.matched_count == 0:
            raise NotFound()

        doc = await col.find_one(query)
        if doc is None:
            raise NotFound()
        return doc

    async def upsert_by_keys(
        self,
        collection: str,
        keys: dict[str, Any],
        raw_patch: Any,
    ) -> Optional[dict[str, Any]]:
        """Merge a patch into the document matching `keys`, creating it if needed."""
        name, col = self._collection(collection)
        query = key_query(keys)
        fields = sanitize_patch(raw_patch, query)

        return await upsert_document_by_keys(col, query, fields)

    async def delete_by_id(self, collection: str, raw_id: Any) -> dict[str, Any]:
        """
        Delete one document.

        Returns:
            The filter that matched
        """
        name, col = self._collection(collection)
        query = id_query(resolve_identifier_strict(raw_id))

        result = await col.delete_one(query)
        if not result.deleted_count:
            raise NotFound()
        return query
