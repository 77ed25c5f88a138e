"""Coercion plan models.

A plan is the resolved chain of borrow declarations that turns a value of one
concrete type into a view of the parameter type a function expects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from borrowkit.core.capability.models import BorrowMeta


class CoercionError(TypeError):
    """Raised when call-site widening cannot, or must not, be resolved."""

    pass


@dataclass(slots=True, frozen=True)
class CoercionPlan:
    """Resolved borrow chain source → ... → target.

    An empty steps tuple means the value already is a target.
    """

    source: type
    target: type
    steps: tuple[BorrowMeta, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.steps)

    def apply(self, value: Any) -> Any:
        """Replay the chain on a value of the plan's source type."""
        for step in self.steps:
            value = step.fn(value)
        return value

    def describe(self) -> str:
        names = [self.source.__name__, *(step.target.__name__ for step in self.steps)]
        return " -> ".join(names)
