"""
Dev DB admin - guardrails for the generic collection editor.
"""
from panel_api.admin.guard import AdminGuard
from panel_api.admin.identifiers import (
    resolve_identifier,
    resolve_identifier_strict,
    id_query,
)
from panel_api.admin.query import (
    assert_no_reserved_operators,
    normalize_filter,
    normalize_sort,
    normalize_projection,
    sanitize_insert,
    sanitize_patch,
    parse_bounded_int,
    clamp_limit,
    clamp_skip,
    parse_json_parameter,
)

__all__ = [
    "AdminGuard",
    "resolve_identifier",
    "resolve_identifier_strict",
    "id_query",
    "assert_no_reserved_operators",
    "normalize_filter",
    "normalize_sort",
    "normalize_projection",
    "sanitize_insert",
    "sanitize_patch",
    "parse_bounded_int",
    "clamp_limit",
    "clamp_skip",
    "parse_json_parameter",
]
