"""Tolerant field extraction from loosely typed CMS JSON.

Strapi returns numeric and boolean attributes as strings, numbers or booleans
depending on the content type version, so every scalar read goes through
``get_field``, which coerces between the three JSON scalar representations.
A value that is absent, null, non-scalar or not coercible is treated as
missing rather than as a zero value.
"""

import re
from typing import Any, TypeVar, overload

from volume_fetch.utils.exceptions import ValidationError

T = TypeVar("T", str, int, bool)

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
SLUG_FORBIDDEN_CHARS = ("/", "\\", "\0")


def _to_str(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return None


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value):
        return int(value)
    return None


def _to_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    return None


_COERCERS = {str: _to_str, int: _to_int, bool: _to_bool}


@overload
def get_field(obj: Any, name: str, kind: type[T]) -> T | None: ...


@overload
def get_field(obj: Any, name: str, kind: type[T], default: T) -> T: ...


def get_field(obj: Any, name: str, kind: type[T], default: T | None = None) -> T | None:
    """Read a scalar field and coerce it to ``kind``.

    Args:
        obj: Enclosing JSON object (anything that is not a dict has no fields)
        name: Field name, case-sensitive
        kind: Target type: str, int or bool
        default: Value returned when the field is missing or not coercible

    Returns:
        Coerced value, or default

    Example:
        >>> get_field({"Order": "3"}, "Order", int)
        3
        >>> get_field({"HasSummary": 1}, "HasSummary", bool) is None
        True
    """
    if not isinstance(obj, dict):
        return default
    coerced = _COERCERS[kind](obj.get(name))
    return default if coerced is None else coerced


def require_field(obj: Any, name: str, kind: type[T], entity: str | None = None) -> T:
    """Read a required scalar field.

    Args:
        obj: Enclosing JSON object
        name: Field name, case-sensitive
        kind: Target type: str, int or bool
        entity: Entity the field belongs to, used as message prefix

    Returns:
        Coerced value

    Raises:
        ValidationError: If the field is missing or not coercible
    """
    value = get_field(obj, name, kind)
    if value is None:
        message = f"missing required field '{name}' ({kind.__name__})"
        if entity:
            message = f"{entity}: {message}"
        raise ValidationError(message, path=(name,))
    return value


def require_slug(obj: Any, name: str = "Slug", entity: str | None = None) -> str:
    """Read a required slug field.

    Slugs name output files, so blank values, path separators and the
    ``.``/``..`` directory names are rejected.
    """
    slug = require_field(obj, name, str, entity)
    message = None
    if not slug.strip():
        message = f"field '{name}' must not be empty"
    elif any(separator in slug for separator in SLUG_FORBIDDEN_CHARS) or slug in (".", ".."):
        message = f"field '{name}' is not a valid slug: '{slug}'"
    if message is not None:
        if entity:
            message = f"{entity}: {message}"
        raise ValidationError(message, path=(name,))
    return slug


def get_object(obj: Any, name: str) -> dict[str, Any] | None:
    """Return a nested JSON object, or None when absent or not an object."""
    if not isinstance(obj, dict):
        return None
    value = obj.get(name)
    return value if isinstance(value, dict) else None


def get_array(obj: Any, name: str) -> list[Any] | None:
    """Return a nested JSON array, or None when absent or not an array."""
    if not isinstance(obj, dict):
        return None
    value = obj.get(name)
    return value if isinstance(value, list) else None
