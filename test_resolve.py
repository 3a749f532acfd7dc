"""
test_resolve.py

Tests for type-hint resolution and the decode/encode entry points.

Tests prove:
- Type hints resolve to the matching codecs, composed structurally
- The same hint always yields the same codec object
- Unsupported hints are programming errors, not decode failures
- decode(encode(v)) == Ok(v) for primitives and nested containers
- JSON helpers parse, decode, encode and serialize end to end
- Decode failures are logged at DEBUG and never raised
"""

import logging
import math
import sys
from typing import Any, Dict, List, Optional, Set, Tuple, Union

import pytest

from foreignkit import (
    BOOLEAN,
    CHAR,
    FOREIGN,
    INT,
    NUMBER,
    STRING,
    UNDEFINED,
    Char,
    CustomError,
    ErrorAtIndex,
    ErrorAtProperty,
    ForeignDecodeError,
    JSONError,
    Ok,
    TypeMismatch,
    UnsupportedTypeError,
    codec_for,
    decode,
    decode_json,
    encode,
    encode_json,
    key_codec_for,
    render_errors,
    str_map,
)
from foreignkit.keys import BOOLEAN_KEY, CHAR_KEY, INT_KEY, STRING_KEY


# =============================================================================
# SECTION 1: Resolution
# =============================================================================

class TestCodecFor:
    """Test resolving codecs from type hints."""

    @pytest.mark.parametrize("tp,codec", [
        (str, STRING),
        (Char, CHAR),
        (bool, BOOLEAN),
        (float, NUMBER),
        (int, INT),
        (Any, FOREIGN),
    ])
    def test_primitives(self, tp, codec):
        """Primitive types map to the primitive codec constants."""
        assert codec_for(tp) is codec

    def test_codec_passes_through(self):
        """A Codec is its own resolution."""
        codec = str_map(INT, INT_KEY)
        assert codec_for(codec) is codec

    def test_containers_compose(self):
        """Container hints build the matching container codecs."""
        codec = codec_for(Dict[int, List[Optional[str]]])
        assert codec.name == "StrMap<Int, Array<Optional<String>>>"

    def test_memoized(self):
        """Resolving the same hint twice yields the same object."""
        assert codec_for(List[Dict[str, int]]) is codec_for(List[Dict[str, int]])

    def test_builtin_generics(self):
        """list[...] and dict[...] work like their typing aliases."""
        assert codec_for(list[int]).name == codec_for(List[int]).name
        assert codec_for(dict[str, bool]).name == codec_for(Dict[str, bool]).name

    @pytest.mark.skipif(sys.version_info < (3, 10), reason="X | None needs 3.10")
    def test_pipe_optional(self):
        """int | None is Optional[int]."""
        assert codec_for(int | None).name == "Optional<Int>"

    def test_optional_order_irrelevant(self):
        """Union[None, X] is Optional[X]."""
        assert codec_for(Union[None, int]).name == "Optional<Int>"

    @pytest.mark.parametrize("tp", [
        bytes,
        Union[int, str],
        Tuple[int, int],
        Set[int],
        List,
        Dict[float, int],
        Dict[List[int], int],
    ])
    def test_unsupported(self, tp):
        """Hints outside primitives and containers are rejected."""
        with pytest.raises(UnsupportedTypeError):
            codec_for(tp)

    def test_unhashable_hint(self):
        """Non-hint objects are rejected, not crashed on."""
        with pytest.raises(UnsupportedTypeError):
            codec_for([int])

    @pytest.mark.parametrize("tp,key", [
        (str, STRING_KEY),
        (int, INT_KEY),
        (Char, CHAR_KEY),
        (bool, BOOLEAN_KEY),
        (INT_KEY, INT_KEY),
    ])
    def test_key_codec_for(self, tp, key):
        """Key types map to the built-in key codecs."""
        assert key_codec_for(tp) is key


# =============================================================================
# SECTION 2: Entry Points
# =============================================================================

class TestEntryPoints:
    """Test decode and encode through type hints."""

    def test_decode_with_hint(self):
        """decode accepts a type hint."""
        assert decode(Dict[int, bool], {"1": True}) == Ok({1: True})

    def test_decode_with_codec(self):
        """decode accepts a codec."""
        assert decode(INT, 1) == Ok(1)

    def test_decode_never_raises(self):
        """Bad input is an Err, not an exception."""
        result = decode(List[int], "not a list")
        assert result.errors == (TypeMismatch("Array", "not a list"),)

    def test_unwrap_raises(self):
        """Callers that want exceptions get ForeignDecodeError."""
        with pytest.raises(ForeignDecodeError) as exc_info:
            decode(List[int], [1, "x"]).unwrap()
        assert "at index 1: expected Int but got String" in str(exc_info.value)

    def test_rendered_path(self):
        """A deep failure renders as a readable path."""
        result = decode(List[Dict[str, int]], [{"id": 1}, {"id": 2}, {"id": "3"}])
        assert render_errors(result.errors) == "at index 2: at property 'id': expected Int but got String"

    def test_key_failure_through_hint(self):
        """Int-keyed maps reject non-integer keys."""
        result = decode(Dict[int, str], {"x": "fine"})
        assert result.errors == (ErrorAtProperty("x", CustomError("Cannot decode key")),)

    def test_encode_with_hint(self):
        """encode accepts a type hint."""
        assert encode(Dict[int, Optional[str]], {1: None}) == {"1": UNDEFINED}

    @pytest.mark.parametrize("tp,empty,foreign", [
        (List[int], [], []),
        (Dict[int, str], {}, {}),
        (Dict[str, List[int]], {}, {}),
    ])
    def test_encode_empty_containers(self, tp, empty, foreign):
        """Empty containers encode to empty foreign containers."""
        assert encode(tp, empty) == foreign


class TestRoundTrip:
    """decode(encode(v)) == Ok(v) across supported types."""

    @pytest.mark.parametrize("tp,value", [
        (str, ""),
        (str, "naïve"),
        (Char, "z"),
        (bool, True),
        (float, -0.5),
        (int, 2 ** 31 - 1),
        (int, 2 ** 40),
        (int, -(2 ** 63)),
        (Any, {"anything": [1, None]}),
        (Optional[int], None),
        (Optional[int], 0),
        (List[str], ["b", "a", "c"]),
        (List[List[int]], [[], [1], [2, 3]]),
        (List[Optional[bool]], [True, None, False]),
        (Dict[str, int], {"x": 1, "y": 2}),
        (Dict[int, List[str]], {3: ["c"], -1: []}),
        (Dict[int, str], {2 ** 40: "x", -(2 ** 63): "y"}),
        (Dict[Char, float], {"a": 1.5}),
        (Dict[bool, int], {True: 1, False: 0}),
        (Optional[Dict[str, Optional[List[int]]]], {"a": None, "b": [1]}),
    ])
    def test_round_trip(self, tp, value):
        """Encoding then decoding gives back an equal value."""
        assert decode(tp, encode(tp, value)) == Ok(value)

    def test_round_trip_preserves_array_order(self):
        """Order is preserved exactly."""
        value = list(range(50, 0, -1))
        assert decode(List[int], encode(List[int], value)).value == value


# =============================================================================
# SECTION 3: JSON
# =============================================================================

class TestJSONHelpers:
    """Test decode_json and encode_json."""

    def test_decode_json(self):
        """JSON text decodes straight to typed values."""
        assert decode_json(Dict[int, List[float]], '{"1": [1.5, 2]}') == Ok({1: [1.5, 2]})

    def test_decode_json_integral_float_is_int(self):
        """1.0 in JSON decodes as Int 1."""
        assert decode_json(List[int], "[1.0, 2]") == Ok([1, 2])

    def test_decode_json_missing_optional(self):
        """null decodes to None for optional targets."""
        assert decode_json(Optional[str], "null") == Ok(None)

    def test_decode_json_parse_error(self):
        """Malformed text is a JSONError with no path."""
        result = decode_json(List[int], "[1,")
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], JSONError)

    def test_decode_json_path(self):
        """Decode failures inside JSON keep their path."""
        result = decode_json(List[List[int]], '[[1], ["x"]]')
        assert result.errors == (ErrorAtIndex(1, ErrorAtIndex(0, TypeMismatch("Int", "x"))),)

    def test_encode_json_drops_absent_members(self):
        """None in an optional member is omitted from the JSON."""
        text = encode_json(Dict[str, Optional[int]], {"a": 1, "b": None})
        assert text == '{"a": 1}'

    def test_encode_json_round_trip(self):
        """encode_json output decodes back to the same value."""
        value = {10: ["x", "y"], 20: []}
        text = encode_json(Dict[int, List[str]], value)
        assert decode_json(Dict[int, List[str]], text) == Ok(value)

    def test_encode_json_large_int_keys(self):
        """Int keys past 32 bits survive the JSON trip."""
        value = {2 ** 40: [2 ** 53]}
        text = encode_json(Dict[int, List[int]], value)
        assert text == '{"1099511627776": [9007199254740992]}'
        assert decode_json(Dict[int, List[int]], text) == Ok(value)

    def test_encode_json_non_finite_is_null(self):
        """NaN and Infinity are written as null, keeping the text valid JSON."""
        text = encode_json(List[float], [1.5, math.nan, math.inf])
        assert text == "[1.5, null, null]"
        assert decode_json(List[Optional[float]], text) == Ok([1.5, None, None])


# =============================================================================
# SECTION 4: Logging
# =============================================================================

class TestLogging:
    """Test diagnostic logging."""

    def test_failure_logged_at_debug(self, caplog):
        """A failed decode logs its rendered error at DEBUG."""
        with caplog.at_level(logging.DEBUG, logger="foreignkit"):
            decode(List[int], [1, "x"])
        messages = [r.getMessage() for r in caplog.records if r.name == "foreignkit.codec"]
        assert any("at index 1" in m for m in messages)
        assert all(r.levelno == logging.DEBUG for r in caplog.records)

    def test_success_not_logged(self, caplog):
        """A successful decode of a resolved type logs nothing."""
        codec_for(List[int])
        with caplog.at_level(logging.DEBUG, logger="foreignkit"):
            decode(List[int], [1, 2])
        assert caplog.records == []
