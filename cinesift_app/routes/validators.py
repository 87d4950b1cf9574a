"""Lightweight request validation helpers."""

from typing import Any, Optional, Tuple


QUERY_REQUIRED = "Query is required"


def sanitize_string(value: Any) -> Optional[str]:
    """Trimmed string; None for non-strings and blanks."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def validate_search_payload(payload: Any) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """
    Validate a search request body.

    Args:
        payload: Parsed JSON body (may be anything, or None if unparsable)

    Returns:
        Tuple of (query, type_hint, error_or_none)
    """
    if not isinstance(payload, dict):
        return None, None, QUERY_REQUIRED

    query = sanitize_string(payload.get('query'))
    if query is None:
        return None, None, QUERY_REQUIRED

    type_hint = payload.get('type')
    if not isinstance(type_hint, str):
        type_hint = None

    return query, type_hint, None
