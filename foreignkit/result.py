"""
result.py

Decode result for foreignkit.

A ``Result`` is either ``Ok(value)`` or ``Err(errors)`` where ``errors`` is
a non-empty tuple of ``ForeignError``. Failures travel as return values so
container decoders can add path context with ``map_errors`` on the way
out, without any mutable "current path" state.

Design Invariants:
- Immutable (frozen dataclasses)
- ``Err`` is never empty
- ``map`` touches only ``Ok``; ``map_errors`` touches only ``Err``
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, Tuple, TypeVar, Union

from foreignkit.errors import ForeignDecodeError, ForeignError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful decode."""
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        return Ok(fn(self.value))

    def map_errors(self, fn: Callable[[ForeignError], ForeignError]) -> "Ok[T]":
        return self

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """A failed decode carrying a non-empty, ordered tuple of errors."""
    errors: Tuple[ForeignError, ...]

    def __post_init__(self):
        if not self.errors:
            raise ValueError("Err requires at least one ForeignError")
        # Accept any sequence but store a tuple.
        object.__setattr__(self, "errors", tuple(self.errors))

    @property
    def is_ok(self) -> bool:
        return False

    def map(self, fn: Callable[[Any], Any]) -> "Err":
        return self

    def map_errors(self, fn: Callable[[ForeignError], ForeignError]) -> "Err":
        """Apply ``fn`` to every error, preserving order."""
        return Err(tuple(fn(e) for e in self.errors))

    def unwrap(self):
        """
        Raises:
            ForeignDecodeError: Always, carrying these errors.
        """
        raise ForeignDecodeError(self.errors)


Result = Union[Ok[T], Err]


def fail(error: ForeignError) -> Err:
    """Build a single-error ``Err``."""
    return Err((error,))
