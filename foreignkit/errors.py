"""
errors.py

Path-aware error model for foreignkit.

A failed decode never raises. It returns an ``Err`` carrying one root-cause
``ForeignError`` that has been wrapped once for every container position
between the decode root and the failing value.

Design principles:
- Errors are immutable values (frozen dataclasses)
- Leaf causes come only from the foreign readers
- Each container wrapper adds exactly one path segment
- Rendering reads the wrappers outward-to-inward
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple, Union

# =============================================================================
# Error Codes
# =============================================================================

class ForeignErrorCode:
    """Error codes for exceptions raised by foreignkit."""
    DECODE_FAILED = "F001"
    UNSUPPORTED_TYPE = "F002"


CANNOT_DECODE_KEY = "Cannot decode key"


def tag_of(value: Any) -> str:
    """
    Name the runtime shape of a foreign value for error messages.

    Primitive and container shapes use their JSON names. Anything else,
    including the UNDEFINED sentinel (class ``Undefined``), falls back to
    the Python class name.
    """
    if value is None:
        return "Null"
    if isinstance(value, bool):
        return "Boolean"
    if isinstance(value, (int, float)):
        return "Number"
    if isinstance(value, str):
        return "String"
    if isinstance(value, (list, tuple)):
        return "Array"
    if isinstance(value, dict):
        return "Object"
    return type(value).__name__


# =============================================================================
# ForeignError Variants
# =============================================================================

@dataclass(frozen=True)
class TypeMismatch:
    """Leaf cause: the foreign value does not have the expected shape."""
    expected: str
    actual: Any

    def describe(self) -> str:
        return f"expected {self.expected} but got {tag_of(self.actual)}"


@dataclass(frozen=True)
class ErrorAtIndex:
    """An error raised while decoding element ``index`` of an array."""
    index: int
    inner: "ForeignError"

    def describe(self) -> str:
        return f"at index {self.index}: {self.inner.describe()}"


@dataclass(frozen=True)
class ErrorAtProperty:
    """An error raised while decoding the value or key at property ``key``."""
    key: str
    inner: "ForeignError"

    def describe(self) -> str:
        return f"at property {self.key!r}: {self.inner.describe()}"


@dataclass(frozen=True)
class CustomError:
    """A domain-specific failure, e.g. an undecodable map key."""
    message: str

    def describe(self) -> str:
        return self.message


@dataclass(frozen=True)
class JSONError:
    """Text handed to the JSON helpers was not valid JSON."""
    message: str

    def describe(self) -> str:
        return f"invalid JSON: {self.message}"


ForeignError = Union[TypeMismatch, ErrorAtIndex, ErrorAtProperty, CustomError, JSONError]


# =============================================================================
# Path Helpers
# =============================================================================

def at_index(index: int):
    """Return a transform that wraps an error with ``ErrorAtIndex(index, ·)``."""
    def wrap(error: ForeignError) -> ForeignError:
        return ErrorAtIndex(index, error)
    return wrap


def at_property(key: str):
    """Return a transform that wraps an error with ``ErrorAtProperty(key, ·)``."""
    def wrap(error: ForeignError) -> ForeignError:
        return ErrorAtProperty(key, error)
    return wrap


def error_path(error: ForeignError) -> Tuple[Union[int, str], ...]:
    """
    Return the path segments from the decode root to the failing leaf.

    Indices are ints and property names are strs, outermost first.
    """
    segments = []
    while isinstance(error, (ErrorAtIndex, ErrorAtProperty)):
        segments.append(error.index if isinstance(error, ErrorAtIndex) else error.key)
        error = error.inner
    return tuple(segments)


def root_cause(error: ForeignError) -> ForeignError:
    """Strip every path wrapper and return the leaf error."""
    while isinstance(error, (ErrorAtIndex, ErrorAtProperty)):
        error = error.inner
    return error


def render_error(error: ForeignError) -> str:
    """Render a single error chain as a human-readable path string."""
    return error.describe()


def render_errors(errors: Iterable[ForeignError]) -> str:
    """Render every error in a sequence, joined with ``"; "``."""
    return "; ".join(render_error(e) for e in errors)


# =============================================================================
# Exceptions
# =============================================================================

class ForeignDecodeError(Exception):
    """
    Raised by ``Result.unwrap()`` when the result holds errors.

    Decoders themselves never raise; this exists for call sites that
    prefer exceptions over inspecting a ``Result``.
    """

    def __init__(
        self,
        errors: Tuple[ForeignError, ...],
        *,
        error_code: str = ForeignErrorCode.DECODE_FAILED,
    ):
        self.errors = tuple(errors)
        self.message = render_errors(self.errors)
        self.error_code = error_code
        super().__init__(self.format())

    def format(self) -> str:
        """Format as human-readable error message."""
        return f"[{self.error_code}] Foreign decode failed: {self.message}"


class UnsupportedTypeError(Exception):
    """Raised when no codec can be resolved for a type annotation."""

    def __init__(self, tp: Any, reason: Optional[str] = None):
        self.tp = tp
        self.reason = reason
        self.error_code = ForeignErrorCode.UNSUPPORTED_TYPE
        super().__init__(self.format())

    def format(self) -> str:
        """Format as human-readable error message."""
        detail = f": {self.reason}" if self.reason else ""
        return f"[{self.error_code}] No codec for type {self.tp!r}{detail}"
