"""Query-parameter helpers.

Shallow equivalence for active-state checks, the ``DEFAULT_VALUE``
sentinel, and query-string encoding/decoding for generated URLs.
"""

from collections.abc import Mapping
from typing import Any, Final
from urllib.parse import parse_qs, urlencode


class _DefaultValue:
    """Sentinel meaning "omit this parameter, use its default"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "DEFAULT_VALUE"

    def __reduce__(self) -> str:
        return "DEFAULT_VALUE"


DEFAULT_VALUE: Final = _DefaultValue()

_PRIMITIVES = (str, int, float, bool, type(None))


def _same_primitive(a: object, b: object) -> bool:
    if a is b:
        return True
    if not isinstance(a, _PRIMITIVES) or not isinstance(b, _PRIMITIVES):
        return False
    # True == 1 in Python; query values keep the distinction
    if isinstance(a, bool) is not isinstance(b, bool):
        return False
    return a == b


def _same_value(a: object, b: object) -> bool:
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(
            _same_primitive(x, y) for x, y in zip(a, b, strict=True)
        )
    return _same_primitive(a, b)


def shallow_equal(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    """Return True if two query-parameter maps are shallowly equivalent.

    Both maps must have the same keys. Values are compared as primitives;
    list and tuple values are compared element-wise, one level deep.
    Nested containers only match when they are the same object.
    Key order never matters.
    """
    if len(a) != len(b):
        return False
    for key, value in a.items():
        if key not in b:
            return False
        if not _same_value(value, b[key]):
            return False
    return True


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def encode_query(query_params: Mapping[str, Any]) -> str:
    """Encode *query_params* as a query string (without the ``?``).

    Keys whose value is ``DEFAULT_VALUE`` are left out. Sequence values
    repeat the key. Keys are written in sorted order so generated URLs
    are stable.
    """
    pairs: list[tuple[str, str]] = []
    for key in sorted(query_params):
        value = query_params[key]
        if value is DEFAULT_VALUE:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((key, _stringify(item)) for item in value)
        else:
            pairs.append((key, _stringify(value)))
    return urlencode(pairs)


def decode_query(query_string: str) -> dict[str, str | list[str]]:
    """Decode a query string into a map.

    Keys that appear once map to a string, repeated keys to a list.
    """
    parsed = parse_qs(query_string, keep_blank_values=True)
    return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


_TRUTHY = frozenset({"true", "1", "yes", "on"})


def coerce_like(value: Any, default: Any) -> Any:
    """Coerce a string query value to the type of its declared *default*.

    URL-decoded values are always strings; declared defaults carry the
    intended type. Values that are not strings, or that do not parse,
    are returned unchanged.
    """
    if isinstance(default, (list, tuple)):
        if isinstance(value, str):
            return [value]
        return value
    if not isinstance(value, str):
        return value
    if isinstance(default, bool):
        return value.lower() in _TRUTHY
    if isinstance(default, int):
        try:
            return int(value)
        except ValueError:
            return value
    if isinstance(default, float):
        try:
            return float(value)
        except ValueError:
            return value
    return value
