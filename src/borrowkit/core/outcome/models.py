"""Outcome type for fallible operations.

Usage:
    outcome = try_convert(300, U8)
    if outcome.is_err():
        print(outcome.error.describe())
    value = outcome.unwrap_or(U8(255))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NoReturn, Protocol, runtime_checkable


@runtime_checkable
class Describable(Protocol):
    """Minimal capability of a failure value: a human-readable description."""

    def describe(self) -> str: ...


def is_describable_failure(value: Any) -> bool:
    """Check if a value can be widened into a BoxedError.

    Args:
        value: Candidate failure value.

    Returns:
        True for exceptions and for objects implementing Describable.
    """
    return isinstance(value, BaseException) or isinstance(value, Describable)


def describe_failure(failure: Any) -> str:
    """Render a describable failure as text.

    Args:
        failure: Exception or Describable object.

    Returns:
        describe() output when available, str() otherwise.
    """
    if isinstance(failure, Describable):
        return failure.describe()
    return str(failure) or type(failure).__name__


class Propagation(Exception):
    """Early exit raised by Err.propagate(), caught by @propagates."""

    def __init__(self, error: Any) -> None:
        super().__init__(error)
        self.error = error


class UnwrapError(Exception):
    """Raised when unwrapping an Err whose failure is not an exception."""

    def __init__(self, error: Any) -> None:
        super().__init__(describe_failure(error) if is_describable_failure(error) else repr(error))
        self.error = error


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome carrying a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value

    def unwrap_or_else(self, fallback: Callable[[Any], Any]) -> T:
        return self.value

    def map[U](self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[Any], Any]) -> Ok[T]:
        return self

    def and_then(self, fn: Callable[[T], Any]) -> Any:
        return fn(self.value)

    def propagate(self) -> T:
        """Return the value; the Ok half of the error-propagation operator."""
        return self.value


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed outcome carrying a failure description."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raise the carried failure.

        Raises:
            The carried exception, or UnwrapError wrapping a non-exception failure.
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise UnwrapError(self.error)

    def unwrap_or(self, default: Any) -> Any:
        return default

    def unwrap_or_else(self, fallback: Callable[[E], Any]) -> Any:
        return fallback(self.error)

    def map(self, fn: Callable[[Any], Any]) -> Err[E]:
        return self

    def map_err[F](self, fn: Callable[[E], F]) -> Err[F]:
        return Err(fn(self.error))

    def and_then(self, fn: Callable[[Any], Any]) -> Err[E]:
        return self

    def propagate(self) -> NoReturn:
        """Exit the enclosing @propagates function with this failure."""
        raise Propagation(self.error)


type Outcome[T, E] = Ok[T] | Err[E]
"""Either Ok(value) or Err(failure); never a partial result."""
