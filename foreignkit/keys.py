"""
keys.py

Map-key codecs.

Foreign objects always have string keys. A ``KeyCodec`` bridges those
strings and a map's key type ``K``:

- ``decode_key: str -> Optional[K]`` is partial and returns ``None`` when
  the text is not a valid ``K``
- ``encode_key: K -> str`` is total

Key codecs are used only by ``str_map``. New key types are added by
supplying both directions with ``key_codec``. There is no derivation.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

K = TypeVar("K")

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True)
class KeyCodec(Generic[K]):
    """A pair of functions bridging string keys and key type ``K``."""
    name: str
    decode_key: Callable[[str], Optional[K]]
    encode_key: Callable[[K], str]

    def __repr__(self) -> str:
        return f"KeyCodec({self.name})"


def key_codec(
    decode_key: Callable[[str], Optional[K]],
    encode_key: Callable[[K], str],
    name: str = "custom",
) -> KeyCodec[K]:
    """Build a key codec from its two directions."""
    return KeyCodec(name=name, decode_key=decode_key, encode_key=encode_key)


# =============================================================================
# Built-in Key Codecs
# =============================================================================

def _decode_string_key(text: str) -> Optional[str]:
    return text


def _decode_int_key(text: str) -> Optional[int]:
    """
    Strictly parse a decimal integer.

    Only an optional sign followed by ASCII digits is accepted: no
    whitespace, no underscores, no other numerals. Any size Python can
    convert is accepted; digit strings past the interpreter's conversion
    limit are rejected.
    """
    if _INT_PATTERN.fullmatch(text) is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def _decode_char_key(text: str) -> Optional[str]:
    return text if len(text) == 1 else None


def _decode_boolean_key(text: str) -> Optional[bool]:
    if text == "true":
        return True
    if text == "false":
        return False
    return None


def _encode_boolean_key(value: bool) -> str:
    return "true" if value else "false"


def _encode_str(value: Any) -> str:
    return str(value)


STRING_KEY: KeyCodec[str] = key_codec(_decode_string_key, _encode_str, "String")
INT_KEY: KeyCodec[int] = key_codec(_decode_int_key, _encode_str, "Int")
CHAR_KEY: KeyCodec[str] = key_codec(_decode_char_key, _encode_str, "Char")
BOOLEAN_KEY: KeyCodec[bool] = key_codec(_decode_boolean_key, _encode_boolean_key, "Boolean")
