"""
JSON encoding of raw MongoDB documents.
"""
from typing import Any

from bson import ObjectId
from fastapi.encoders import jsonable_encoder


def to_jsonable(value: Any) -> Any:
    """Render documents JSON-safe: ObjectId as hex string, datetimes as ISO 8601."""
    return jsonable_encoder(value, custom_encoder={ObjectId: str})
