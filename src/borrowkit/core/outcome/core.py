"""Uniform boxed error and automatic error widening.

Usage:
    @propagates()
    def parse_port(raw: int) -> Outcome[U16, BoxedError]:
        port = try_convert(raw, U16).propagate()   # TryFromIntError -> BoxedError
        return Ok(port)
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from borrowkit.core.outcome.models import (
    Err,
    Ok,
    Outcome,
    Propagation,
    describe_failure,
    is_describable_failure,
)

if TYPE_CHECKING:
    from borrowkit.core.capability.core import CapabilityRegistry

logger = logging.getLogger(__name__)


class BoxedError(Exception):
    """Uniform error wrapping any describable failure.

    Attributes:
        source: The original failure value.
    """

    def __init__(self, description: str, source: Any = None) -> None:
        super().__init__(description)
        self.source = source
        if isinstance(source, BaseException):
            self.__cause__ = source

    @classmethod
    def from_failure(cls, failure: Any) -> BoxedError:
        """Box a describable failure. Already-boxed errors pass through."""
        if isinstance(failure, BoxedError):
            return failure
        return cls(describe_failure(failure), source=failure)

    def describe(self) -> str:
        return str(self)

    def __repr__(self) -> str:
        return f"BoxedError({str(self)!r}, source={type(self.source).__name__})"


def widen(failure: Any, error_type: type, registry: CapabilityRegistry | None = None) -> Any:
    """Convert a failure into error_type through the registry's infallible conversions.

    Args:
        failure: Failure value to widen.
        error_type: Target error type.
        registry: Capability registry (defaults to the global one).

    Returns:
        The widened failure (unchanged if already an instance of error_type).

    Raises:
        NoConversionError: If no infallible conversion into error_type exists.
    """
    if isinstance(failure, error_type):
        return failure
    from borrowkit.core.capability.operations import convert

    return convert(failure, error_type, registry=registry)


def propagates[**P, T](
    error_type: type = BoxedError, registry: CapabilityRegistry | None = None
) -> Callable[[Callable[P, Outcome[T, Any]]], Callable[P, Outcome[T, Any]]]:
    """Enable outcome.propagate() inside a function returning an Outcome.

    An Err reached through propagate() ends the function early; its failure is
    widened into error_type and returned as Err.

    Args:
        error_type: Uniform error type of the decorated function's Err branch.
        registry: Capability registry used for widening.

    Returns:
        Decorator.
    """

    def decorator(fn: Callable[P, Outcome[T, Any]]) -> Callable[P, Outcome[T, Any]]:
        @functools.wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> Outcome[T, Any]:
            try:
                return fn(*args, **kwargs)
            except Propagation as early:
                widened = widen(early.error, error_type, registry)
                logger.debug(
                    "%s propagated %s as %s",
                    fn.__qualname__,
                    type(early.error).__name__,
                    type(widened).__name__,
                )
                return Err(widened)

        return wrapper

    return decorator


def register_boxed_widening(registry: CapabilityRegistry) -> None:
    """Install the blanket conversion: every describable failure -> BoxedError."""
    registry.register_blanket(is_describable_failure, BoxedError, BoxedError.from_failure)
