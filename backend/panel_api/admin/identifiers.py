"""
Document identifier resolution.

Documents in the bot's collections are keyed either by a native ObjectId or by
a caller-chosen string (a guild id, for instance). A 24-character hex string is
treated as an ObjectId, anything else as a plain string key.
"""
import re
from typing import Any, Optional, Union

from bson import ObjectId

from panel_api.core.exceptions import BadRequest

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

DocumentId = Union[ObjectId, str]


def resolve_identifier(raw: Any) -> Optional[DocumentId]:
    text = "" if raw is None else str(raw).strip()
    if not text:
        return None
    if OBJECT_ID_PATTERN.match(text):
        return ObjectId(text)
    return text


def resolve_identifier_strict(raw: Any) -> DocumentId:
    """Like `resolve_identifier` but a missing id is a BadRequest."""
    identifier = resolve_identifier(raw)
    if identifier is None:
        raise BadRequest("Missing id")
    return identifier


def id_query(identifier: DocumentId) -> dict[str, DocumentId]:
    return {"_id": identifier}
