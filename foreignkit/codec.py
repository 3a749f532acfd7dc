"""
codec.py

Type-directed decode/encode between typed Python values and foreign values.

A ``Codec`` pairs a decoder ``Foreign -> Result[T]`` with a total encoder
``T -> Foreign``. The primitive codecs are module-level constants.
``optional``, ``array`` and ``str_map`` build container codecs from the
element codec, so any type assembled from primitives and containers is
supported with no extra code.

Codecs are chosen by the *target type*, never by inspecting the host
value: either pass a ``Codec`` directly or let ``codec_for`` resolve one
from a type annotation such as ``Dict[int, List[Optional[str]]]``.

Design Invariants:
- Pure functions over immutable inputs; no shared mutable state
- Container decoders are fail-fast: the first failing element or entry
  aborts the decode
- Each failing container adds exactly one path wrapper
  (``ErrorAtIndex`` / ``ErrorAtProperty``); primitives add none
- Optional is transparent: it adds no path segment
- Encoding never fails
- Bindings cannot be registered or overridden at runtime
"""

import functools
import logging
import types
from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    List,
    NewType,
    Optional,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

from foreignkit.errors import (
    CANNOT_DECODE_KEY,
    CustomError,
    ErrorAtProperty,
    UnsupportedTypeError,
    at_index,
    at_property,
    render_errors,
)
from foreignkit.foreign import (
    UNDEFINED,
    Foreign,
    parse_json,
    read_array,
    read_boolean,
    read_char,
    read_int,
    read_null_or_undefined,
    read_number,
    read_str_map,
    read_string,
    stringify,
    to_foreign,
)
from foreignkit.keys import BOOLEAN_KEY, CHAR_KEY, INT_KEY, STRING_KEY, KeyCodec
from foreignkit.result import Ok, Result, fail

logger = logging.getLogger(__name__)

T = TypeVar("T")

# A one-character string. Use as a type hint to select the CHAR codec.
Char = NewType("Char", str)


# =============================================================================
# Codec
# =============================================================================

@dataclass(frozen=True)
class Codec(Generic[T]):
    """The decoder/encoder binding for one target type."""
    name: str
    decode: Callable[[Foreign], Result]
    encode: Callable[[T], Foreign]

    def __repr__(self) -> str:
        return f"Codec({self.name})"


# =============================================================================
# Primitive Codecs
# =============================================================================

FOREIGN: Codec[Foreign] = Codec("Foreign", Ok, to_foreign)
STRING: Codec[str] = Codec("String", read_string, to_foreign)
CHAR: Codec[str] = Codec("Char", read_char, to_foreign)
BOOLEAN: Codec[bool] = Codec("Boolean", read_boolean, to_foreign)
NUMBER: Codec[float] = Codec("Number", read_number, to_foreign)
INT: Codec[int] = Codec("Int", read_int, to_foreign)


# =============================================================================
# Container Codecs
# =============================================================================

def optional(inner: Codec[T]) -> Codec:
    """
    Codec for a value that may be null, undefined or absent.

    Null and undefined decode to ``None`` without calling the inner
    decoder. Anything else goes to the inner decoder, and its errors
    propagate unchanged. ``None`` encodes to ``UNDEFINED``.
    """
    read = read_null_or_undefined(inner.decode)

    def encode(value):
        if value is None:
            return UNDEFINED
        return inner.encode(value)

    return Codec(f"Optional<{inner.name}>", read, encode)


def array(inner: Codec[T]) -> Codec:
    """
    Codec for an ordered sequence of ``T``.

    Decoding stops at the first element that fails and wraps its errors
    with ``ErrorAtIndex``. A successful decode returns a ``list`` with the
    same length and order as the input.
    """
    def decode(value: Foreign) -> Result:
        read = read_array(value)
        if not read.is_ok:
            return read
        items = []
        for index, element in enumerate(read.value):
            result = inner.decode(element)
            if not result.is_ok:
                return result.map_errors(at_index(index))
            items.append(result.value)
        return Ok(items)

    def encode(values) -> Foreign:
        return [inner.encode(v) for v in values]

    return Codec(f"Array<{inner.name}>", decode, encode)


def str_map(inner: Codec[T], key: KeyCodec = STRING_KEY) -> Codec:
    """
    Codec for a mapping from key type ``K`` to ``T``.

    Foreign objects always have string keys, so ``key`` converts them to
    and from ``K``. Entries are visited in the foreign object's iteration
    order, and decoding stops at the first failure:

    - a value that fails to decode is wrapped with ``ErrorAtProperty``
    - a key that ``key.decode_key`` rejects fails with
      ``ErrorAtProperty(key, CustomError("Cannot decode key"))``, even
      when its value decoded successfully

    If two string keys decode to the same ``K``, or two ``K`` encode to the
    same string, the later entry wins.
    """
    def decode(value: Foreign) -> Result:
        read = read_str_map(value)
        if not read.is_ok:
            return read
        entries = {}
        for name, member in read.value.items():
            result = inner.decode(member)
            if not result.is_ok:
                return result.map_errors(at_property(name))
            decoded_key = key.decode_key(name)
            if decoded_key is None:
                return fail(ErrorAtProperty(name, CustomError(CANNOT_DECODE_KEY)))
            entries[decoded_key] = result.value
        return Ok(entries)

    def encode(mapping) -> Foreign:
        return {key.encode_key(k): inner.encode(v) for k, v in mapping.items()}

    return Codec(f"StrMap<{key.name}, {inner.name}>", decode, encode)


# =============================================================================
# Type-hint Resolution
# =============================================================================

_BASE_CODECS = MappingProxyType({
    Any: FOREIGN,
    str: STRING,
    Char: CHAR,
    bool: BOOLEAN,
    float: NUMBER,
    int: INT,
})

_BASE_KEY_CODECS = MappingProxyType({
    str: STRING_KEY,
    Char: CHAR_KEY,
    bool: BOOLEAN_KEY,
    int: INT_KEY,
})

_UNION_ORIGINS = tuple(
    origin for origin in (Union, getattr(types, "UnionType", None)) if origin is not None
)


def key_codec_for(tp: Any) -> KeyCodec:
    """
    Resolve the key codec for a map key type.

    Raises:
        UnsupportedTypeError: If ``tp`` has no key codec
    """
    if isinstance(tp, KeyCodec):
        return tp
    try:
        return _BASE_KEY_CODECS[tp]
    except (KeyError, TypeError):
        raise UnsupportedTypeError(tp, "not a supported map key type") from None


@functools.lru_cache(maxsize=None)
def _resolve_type(tp: Any) -> Codec:
    if tp in _BASE_CODECS:
        return _BASE_CODECS[tp]

    origin = get_origin(tp)
    args = get_args(tp)

    if origin in _UNION_ORIGINS:
        present = [a for a in args if a is not type(None)]
        if len(present) != 1 or len(args) != 2:
            raise UnsupportedTypeError(tp, "only Optional[X] unions are supported")
        codec = optional(_resolve_type(present[0]))
    elif origin in (list, List):
        if len(args) != 1:
            raise UnsupportedTypeError(tp, "missing element type")
        codec = array(_resolve_type(args[0]))
    elif origin in (dict, Dict):
        if len(args) != 2:
            raise UnsupportedTypeError(tp, "missing key or value type")
        codec = str_map(_resolve_type(args[1]), key_codec_for(args[0]))
    else:
        raise UnsupportedTypeError(tp)

    logger.debug("Resolved %s for %r", codec, tp)
    return codec


def codec_for(tp: Any) -> Codec:
    """
    Resolve the codec for a type annotation.

    Supported: ``str``, ``Char``, ``bool``, ``float``, ``int``, ``Any``
    (the identity codec), ``Optional[X]``, ``List[X]`` and ``Dict[K, V]``
    where ``K`` is ``str``, ``int``, ``Char`` or ``bool``. A ``Codec`` is
    returned unchanged. The same annotation always resolves to the same
    codec object.

    Raises:
        UnsupportedTypeError: If no codec can be built for ``tp``
    """
    if isinstance(tp, Codec):
        return tp
    try:
        return _resolve_type(tp)
    except TypeError:
        # Unhashable annotations cannot be cached or resolved.
        raise UnsupportedTypeError(tp) from None


# =============================================================================
# Entry Points
# =============================================================================

def decode(target: Any, value: Foreign) -> Result:
    """
    Decode a foreign value as ``target`` (a ``Codec`` or a type hint).

    Never raises on bad input. Failures come back as ``Err``.
    """
    codec = codec_for(target)
    result = codec.decode(value)
    if not result.is_ok:
        logger.debug("Decode as %s failed: %s", codec.name, render_errors(result.errors))
    return result


def encode(target: Any, value: Any) -> Foreign:
    """Encode ``value`` as a foreign value using ``target``'s codec."""
    return codec_for(target).encode(value)


def decode_json(target: Any, text: str) -> Result:
    """Parse JSON text, then decode it as ``target``."""
    parsed = parse_json(text)
    if not parsed.is_ok:
        logger.debug("JSON parse failed: %s", render_errors(parsed.errors))
        return parsed
    return decode(target, parsed.value)


def encode_json(target: Any, value: Any, *, indent: Optional[int] = None) -> str:
    """Encode ``value`` with ``target``'s codec, then serialize it to JSON."""
    return stringify(encode(target, value), indent=indent)
