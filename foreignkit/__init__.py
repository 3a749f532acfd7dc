"""
foreignkit — Type-directed Foreign Value Codecs
===============================================

foreignkit converts between typed Python values and untyped "foreign"
values (the output of ``json.loads``, or anything handed over by an
untrusted caller). For every supported target type it provides:

- ``decode(target, foreign) -> Result``: ``Ok(value)`` or ``Err(errors)``
- ``encode(target, value) -> Foreign``: total, never fails

A failure deep inside nested arrays and objects reports exactly where it
happened::

    from typing import Dict, List
    from foreignkit import decode, render_errors

    result = decode(List[Dict[str, int]], [{"id": 1}, {"id": "two"}])
    render_errors(result.errors)
    # "at index 1: at property 'id': expected Int but got String"

What's Public
-------------
Everything exported in ``__all__`` is public and stable:

- **Entry points**: decode, encode, decode_json, encode_json, codec_for
- **Codecs**: Codec, the primitive constants, optional, array, str_map
- **Key codecs**: KeyCodec, key_codec and the built-in key constants
- **Results**: Ok, Err, fail
- **Errors**: the ForeignError variants, rendering helpers, exceptions
- **Foreign values**: UNDEFINED and the typed readers

Any symbol prefixed with underscore (``_``) is internal.
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API
# =============================================================================

__all__ = [
    # --- Package Metadata ---
    "__version__",

    # --- Entry Points ---
    "decode",
    "encode",
    "decode_json",
    "encode_json",
    "codec_for",
    "key_codec_for",

    # --- Codecs ---
    "Codec",
    "Char",
    "FOREIGN",
    "STRING",
    "CHAR",
    "BOOLEAN",
    "NUMBER",
    "INT",
    "optional",
    "array",
    "str_map",

    # --- Key Codecs ---
    "KeyCodec",
    "key_codec",
    "STRING_KEY",
    "INT_KEY",
    "CHAR_KEY",
    "BOOLEAN_KEY",

    # --- Results ---
    "Ok",
    "Err",
    "Result",
    "fail",

    # --- Errors ---
    "ForeignError",
    "TypeMismatch",
    "ErrorAtIndex",
    "ErrorAtProperty",
    "CustomError",
    "JSONError",
    "error_path",
    "root_cause",
    "render_error",
    "render_errors",
    "ForeignDecodeError",
    "UnsupportedTypeError",
    "ForeignErrorCode",

    # --- Foreign Values ---
    "Foreign",
    "UNDEFINED",
    "type_of",
    "tag_of",
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

# =============================================================================
# IMPORTS
# =============================================================================

from foreignkit.codec import (
    BOOLEAN,
    CHAR,
    FOREIGN,
    INT,
    NUMBER,
    STRING,
    Char,
    Codec,
    array,
    codec_for,
    decode,
    decode_json,
    encode,
    encode_json,
    key_codec_for,
    optional,
    str_map,
)
from foreignkit.errors import (
    CustomError,
    ErrorAtIndex,
    ErrorAtProperty,
    ForeignDecodeError,
    ForeignError,
    ForeignErrorCode,
    JSONError,
    TypeMismatch,
    UnsupportedTypeError,
    error_path,
    render_error,
    render_errors,
    root_cause,
    tag_of,
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
    type_of,
)
from foreignkit.keys import (
    BOOLEAN_KEY,
    CHAR_KEY,
    INT_KEY,
    STRING_KEY,
    KeyCodec,
    key_codec,
)
from foreignkit.result import Err, Ok, Result, fail
