"""
foreign.py

The foreign value representation: whatever ``json.loads`` produced, or
whatever arrived from an untrusted caller.

This module is the only place that looks at the runtime shape of a foreign
value. Everything above it (the codecs) goes through the typed readers
defined here, each of which returns a ``Result`` and fails with
``TypeMismatch`` carrying the offending value.

Foreign shapes:
- ``None`` (null) and ``UNDEFINED`` (absent)
- ``bool``
- number: ``int`` or ``float``, never ``bool``
- ``str`` (a one-character ``str`` is also a Char)
- array: ``list`` or ``tuple``
- object: ``dict`` with ``str`` keys

Design Invariants:
- Readers never mutate their input
- Container readers return shallow copies
- No reader raises on a well-formed Python value
"""

import json
import math
from typing import Any, Callable, Optional

from foreignkit.errors import JSONError, TypeMismatch, tag_of
from foreignkit.result import Ok, Result, fail

__all__ = [
    "Foreign",
    "UNDEFINED",
    "Undefined",
    "to_foreign",
    "type_of",
    "tag_of",
    "is_null",
    "is_undefined",
    "is_array",
    "is_object",
    "read_string",
    "read_char",
    "read_boolean",
    "read_number",
    "read_int",
    "read_array",
    "read_str_map",
    "read_null_or_undefined",
    "parse_json",
    "stringify",
]

Foreign = Any
Reader = Callable[[Foreign], Result]


# =============================================================================
# UNDEFINED
# =============================================================================

class Undefined:
    """
    The canonical "absent" foreign value.

    There is exactly one instance, ``UNDEFINED``. It is distinct from
    ``None`` (null), which is a present value.
    """

    __slots__ = ()
    _instance: Optional["Undefined"] = None

    def __new__(cls) -> "Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "undefined"

    def __reduce__(self):
        return (Undefined, ())


UNDEFINED = Undefined()


def to_foreign(value: Any) -> Foreign:
    """Lift any host value into the foreign representation (identity)."""
    return value


# =============================================================================
# Type Tests
# =============================================================================

def type_of(value: Foreign) -> str:
    """Return the lower-case JSON type name of a foreign value."""
    if value is UNDEFINED:
        return "undefined"
    tag = tag_of(value)
    if tag in ("Null", "Boolean", "Number", "String", "Array", "Object"):
        return tag.lower()
    return tag


def is_null(value: Foreign) -> bool:
    return value is None


def is_undefined(value: Foreign) -> bool:
    return value is UNDEFINED


def is_array(value: Foreign) -> bool:
    return isinstance(value, (list, tuple))


def is_object(value: Foreign) -> bool:
    return isinstance(value, dict)


# =============================================================================
# Primitive Readers
# =============================================================================

def read_string(value: Foreign) -> Result:
    if isinstance(value, str):
        return Ok(value)
    return fail(TypeMismatch("String", value))


def read_char(value: Foreign) -> Result:
    if isinstance(value, str) and len(value) == 1:
        return Ok(value)
    return fail(TypeMismatch("Char", value))


def read_boolean(value: Foreign) -> Result:
    if isinstance(value, bool):
        return Ok(value)
    return fail(TypeMismatch("Boolean", value))


def read_number(value: Foreign) -> Result:
    """Read an int or float. ``bool`` is not a number here."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Ok(value)
    return fail(TypeMismatch("Number", value))


def read_int(value: Foreign) -> Result:
    """
    Read an integer.

    Accepts an ``int`` (never ``bool``) or a ``float`` whose value is
    integral, such as ``3.0`` from a JSON parser. The result is always an
    ``int``, with no range limit beyond Python's own.
    """
    if isinstance(value, bool):
        return fail(TypeMismatch("Int", value))
    if isinstance(value, int):
        return Ok(value)
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return Ok(int(value))
    return fail(TypeMismatch("Int", value))


# =============================================================================
# Structural Readers
# =============================================================================

def read_array(value: Foreign) -> Result:
    """Read an array, returning its elements as a new ``list``."""
    if isinstance(value, (list, tuple)):
        return Ok(list(value))
    return fail(TypeMismatch("Array", value))


def read_str_map(value: Foreign) -> Result:
    """Read an object, returning its members as a new ``dict``."""
    if isinstance(value, dict) and all(isinstance(k, str) for k in value):
        return Ok(dict(value))
    return fail(TypeMismatch("Object", value))


def read_null_or_undefined(reader: Reader) -> Reader:
    """
    Wrap ``reader`` so that null or undefined reads as ``Ok(None)``.

    Any other value is handed to ``reader`` unchanged, and its result,
    including any error, is returned as is.
    """
    def read(value: Foreign) -> Result:
        if value is None or value is UNDEFINED:
            return Ok(None)
        return reader(value)
    return read


# =============================================================================
# JSON
# =============================================================================

def parse_json(text: str) -> Result:
    """Parse JSON text into a foreign value."""
    try:
        return Ok(json.loads(text))
    except (TypeError, ValueError) as e:
        return fail(JSONError(str(e)))


def _to_json_value(value: Foreign) -> Any:
    """Apply JSON.stringify's rules for absent and non-finite values."""
    if value is UNDEFINED:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_json_value(v) for k, v in value.items() if v is not UNDEFINED}
    return value


def stringify(value: Foreign, *, indent: Optional[int] = None) -> str:
    """
    Serialize a foreign value to JSON text.

    ``UNDEFINED`` object members are dropped, while ``UNDEFINED`` array
    items and non-finite floats (NaN, Infinity) become ``null``. The output
    is always strict JSON.
    """
    return json.dumps(
        _to_json_value(value), indent=indent, ensure_ascii=False, allow_nan=False
    )
