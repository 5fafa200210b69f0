"""
camelCase <-> snake_case key transforms for JSON payloads.

Free-form blobs are passed through untouched: a ``body`` key or any
``*_json`` key keeps its name and value, and the children of ``content``,
``metadata`` and ``*_json`` objects are not renamed.

System role: Wire format normalisation for the client DAL
"""

import re
from typing import Any, Callable

_CAMEL_BOUNDARY = re.compile(r"([A-Z])")
_SEPARATORS = re.compile(r"[-\s]+")
_SNAKE_BOUNDARY = re.compile(r"[_-](\w)")

OPAQUE_PARENTS = frozenset({"content", "metadata"})


def to_snake(key: str) -> str:
    """``orderIndex`` -> ``order_index``."""
    return _SEPARATORS.sub("_", _CAMEL_BOUNDARY.sub(r"_\1", key)).lower()


def to_camel(key: str) -> str:
    """``order_index`` -> ``orderIndex``."""
    return _SNAKE_BOUNDARY.sub(lambda m: m.group(1).upper(), key)


def _skip(parent_key: str | None, key: str) -> bool:
    if key == "body" or key.endswith("_json"):
        return True
    return parent_key is not None and (parent_key.endswith("_json") or parent_key in OPAQUE_PARENTS)


def transform_keys(value: Any, convert: Callable[[str], str], parent_key: str | None = None) -> Any:
    """
    Rename dictionary keys recursively with ``convert``.

    Args:
        value: Decoded JSON value
        convert: ``to_snake`` or ``to_camel``
        parent_key: Key under which ``value`` sits (already converted)

    Returns:
        Any: A transformed copy
    """
    if isinstance(value, list):
        return [transform_keys(item, convert, parent_key) for item in value]
    if not isinstance(value, dict):
        return value

    out: dict[str, Any] = {}
    for key, item in value.items():
        if _skip(parent_key, key):
            out[key] = item
            continue
        new_key = convert(key)
        out[new_key] = transform_keys(item, convert, new_key)
    return out
