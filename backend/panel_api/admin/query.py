"""
Sanitization of caller-supplied query structures.

Filters, sorts, projections and write bodies come from the browser as JSON.
Any key starting with `$` would be interpreted by MongoDB as an operator
(`$where`, `$ne`, `$or`...), so such keys are rejected at any depth. They are
never stripped: removing an operator silently changes what a query matches.
"""
import json
import math
from typing import Any, Callable, Iterable, Optional

from panel_api.core.exceptions import BadRequest

OPERATOR_PREFIX = "$"
PROTECTED_FIELDS = ("_id", "createdAt", "updatedAt")

LIMIT_MIN, LIMIT_MAX, LIMIT_DEFAULT = 1, 50, 20
SKIP_MAX, SKIP_DEFAULT = 100_000, 0
JSON_PARAM_MAX_LENGTH = 20_000


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def walk_keys(value: Any, predicate: Callable[[str], bool], path: str = "") -> Optional[str]:
    """
    Walk a JSON-like value and return the path of the first key matching `predicate`.

    Lists are walked element-wise (`path[i]`), dicts key-wise (`path.key`).
    Scalars end the walk.
    """
    if isinstance(value, list):
        for index, item in enumerate(value):
            found = walk_keys(item, predicate, f"{path}[{index}]")
            if found is not None:
                return found
        return None

    if not isinstance(value, dict):
        return None

    for key, item in value.items():
        key = str(key)
        if predicate(key):
            return _join(path, key)
        found = walk_keys(item, predicate, _join(path, key))
        if found is not None:
            return found
    return None


def is_operator_key(key: str) -> bool:
    return key.startswith(OPERATOR_PREFIX)


def assert_no_reserved_operators(value: Any, path: str = "") -> None:
    """
    Reject any `$`-prefixed key in `value`.

    Raises:
        BadRequest: Naming the offending dotted/bracketed path
    """
    offending = walk_keys(value, is_operator_key, path)
    if offending is not None:
        raise BadRequest(f"Mongo operator not allowed at {offending}")


def normalize_filter(raw: Any) -> dict[str, Any]:
    """Coerce to a dict (match-all when absent) and reject operators."""
    query = raw if isinstance(raw, dict) else {}
    assert_no_reserved_operators(query)
    return query


def normalize_sort(raw: Any) -> Optional[dict[str, Any]]:
    if raw is None or not isinstance(raw, dict):
        return None
    assert_no_reserved_operators(raw)
    return raw


def normalize_projection(raw: Any) -> Optional[dict[str, Any]]:
    if raw is None or not isinstance(raw, dict):
        return None
    assert_no_reserved_operators(raw)
    return raw


def sanitize_insert(doc: Any) -> dict[str, Any]:
    """Validate an insert/replace body. A caller-chosen `_id` is kept."""
    body = doc if isinstance(doc, dict) else {}
    assert_no_reserved_operators(body)
    return body


def sanitize_patch(patch: Any, fixed_fields: Iterable[str] = ()) -> dict[str, Any]:
    """
    Validate a patch body and drop `_id`, the timestamps and `fixed_fields`.

    `fixed_fields` names further fields the patch may not touch, such as the
    business keys of an upsert. A dotted path into a protected or fixed field
    (`updatedAt.x`, `guildId.x`) is rejected.

    Raises:
        BadRequest: On operator keys or a dotted path into a fixed field
    """
    body = patch if isinstance(patch, dict) else {}
    assert_no_reserved_operators(body)

    fixed = set(PROTECTED_FIELDS).union(fixed_fields)
    for key in body:
        root, dot, _ = str(key).partition(".")
        if dot and root in fixed:
            raise BadRequest(f"Field not writable: {key}")

    return {k: v for k, v in body.items() if k not in fixed}


def parse_bounded_int(raw: Any, minimum: int, maximum: int, default: int) -> int:
    """
    Parse a pagination number, truncate toward zero and clamp it.

    Missing, non-numeric and non-finite input yields `default`.
    """
    if raw is None or isinstance(raw, bool):
        return default
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return max(minimum, min(maximum, math.trunc(number)))


def clamp_limit(raw: Any) -> int:
    return parse_bounded_int(raw, LIMIT_MIN, LIMIT_MAX, LIMIT_DEFAULT)


def clamp_skip(raw: Any) -> int:
    return parse_bounded_int(raw, 0, SKIP_MAX, SKIP_DEFAULT)


def parse_json_parameter(
    raw: Optional[str],
    default: Any = None,
    max_length: int = JSON_PARAM_MAX_LENGTH,
) -> Any:
    """
    Decode a JSON-encoded query string parameter.

    The length check runs before parsing to bound the parse cost.

    Raises:
        BadRequest: If the value is too long or not valid JSON
    """
    if raw is None or raw == "":
        return default
    text = str(raw)
    if len(text) > max_length:
        raise BadRequest("JSON query param too large")
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        raise BadRequest("Invalid JSON in query")
