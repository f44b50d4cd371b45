"""Helpers shared by the resource APIs."""

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

_SEQUENCE_TYPES = (list, tuple, set, frozenset)


def _is_empty(value: Any) -> bool:
    if value is None or value == "":
        return True
    return isinstance(value, _SEQUENCE_TYPES) and len(value) == 0


def _format_value(value: Any) -> str:
    # bool must be checked before int, True is an int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, _SEQUENCE_TYPES):
        return json.dumps(list(value), separators=(",", ":"))
    return str(value)


def build_query_params(params: Mapping[str, Any]) -> str:
    """Build a URL query string from a mapping of parameters.

    Entries whose value is ``None``, an empty string or an empty sequence
    are left out. Every other entry appears exactly once, in mapping order.
    Booleans are rendered as ``true``/``false`` and sequences as compact
    JSON arrays, which is what the CDF API expects.

    Args:
        params: Query parameters keyed by their API name.

    Returns:
        The encoded query string without a leading ``?``.
    """
    pairs = [
        (key, _format_value(value))
        for key, value in params.items()
        if not _is_empty(value)
    ]
    return urlencode(pairs)


def drop_none(body: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of a request body without ``None`` entries."""
    return {key: value for key, value in body.items() if value is not None}
