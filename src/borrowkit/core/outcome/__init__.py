"""Outcome type, boxed error and error widening."""

from borrowkit.core.outcome.core import BoxedError, propagates, register_boxed_widening, widen
from borrowkit.core.outcome.models import (
    Describable,
    Err,
    Ok,
    Outcome,
    Propagation,
    UnwrapError,
    describe_failure,
    is_describable_failure,
)

__all__ = [
    # Models
    "Ok",
    "Err",
    "Outcome",
    "Describable",
    "Propagation",
    "UnwrapError",
    "describe_failure",
    "is_describable_failure",
    # Core
    "BoxedError",
    "propagates",
    "widen",
    "register_boxed_widening",
]
