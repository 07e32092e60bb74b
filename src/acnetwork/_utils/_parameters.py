"""Query string rendering for request parameters."""

import json
from typing import Any, List, Mapping, Optional, Tuple

from httpx import QueryParams


def render_value(value: Any) -> str:
    """Render a parameter value as the string that goes on the wire.

    Strings are kept as-is, booleans become ``true``/``false``, ``None`` becomes an
    empty string and mappings or sequences are rendered as compact JSON. Anything
    else uses ``str()``.

    Examples:
        >>> render_value(True)
        'true'
        >>> render_value({"a": 1})
        '{"a":1}'
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def _query_items(parameters: Mapping[str, Any]) -> List[Tuple[str, str]]:
    items: List[Tuple[str, str]] = []
    # Sorted so the same mapping always yields the same URL.
    for key in sorted(parameters, key=str):
        value = parameters[key]
        if isinstance(value, (list, tuple)):
            items.extend((str(key), render_value(item)) for item in value)
        else:
            items.append((str(key), render_value(value)))
    return items


def encode_parameters(parameters: Optional[Mapping[str, Any]]) -> str:
    """Encode ``parameters`` as a percent-encoded ``k1=v1&k2=v2`` query string.

    Keys are emitted in sorted order. Sequence values repeat their key once per item.

    Args:
        parameters: String-keyed mapping of parameter values.

    Returns:
        str: The query string, or an empty string for an empty mapping.
    """
    if not parameters:
        return ""
    return str(QueryParams(_query_items(parameters)))
