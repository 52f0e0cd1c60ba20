"""String and URL helpers shared by the resource accessors."""

import re
from typing import Any, Mapping, Optional
from urllib.parse import quote, urlencode

_VARIATION_RE = re.compile(r"\s\(\d+\)$")


def strip_variation(name: str) -> str:
    """
    Strip the trailing disambiguation number from a Discogs artist name.

    Example:
        >>> strip_variation("Nirvana (2)")
        'Nirvana'
    """
    return _VARIATION_RE.sub("", name)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """
    Turn a flat mapping into a query string, skipping None values.

    Example:
        >>> to_query_string({"page": 2, "per_page": 50})
        'page=2&per_page=50'
    """
    if not params:
        return ""
    return urlencode(
        [(key, _query_value(value)) for key, value in params.items() if value is not None]
    )


def with_query(path: str, params: Optional[Mapping[str, Any]]) -> str:
    """Append ``params`` to ``path`` as a query string when there are any."""
    query = to_query_string(params)
    return f"{path}?{query}" if query else path


def escape(value: Any) -> str:
    """
    Escape a value for use as a single URL path segment.

    Example:
        >>> escape("rick astley")
        'rick%20astley'
    """
    return quote(str(value), safe="-_.!~*'()")
