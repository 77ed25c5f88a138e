"""Call-site reference widening.

Usage:
    @accepts_ref(text=str)
    def shout(text: str) -> str:
        return text.upper()

    shout(Text("hi"))                 # Text borrows as str
    shout(TextSpan.of("hi"))          # TextSpan borrows as str

Resolution only happens for parameters bound to a concrete type. Requesting a
TypeVar target is rejected when the decorator is applied, so a generic
constraint can never be satisfied by a runtime search.
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections import deque
from collections.abc import Callable
from typing import Any, TypeVar

from borrowkit.config import get_settings
from borrowkit.core.capability import BorrowMeta, CapabilityRegistry, get_registry
from borrowkit.core.coercion.models import CoercionError, CoercionPlan

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def resolve_plan(
    source: type,
    target: type,
    registry: CapabilityRegistry | None = None,
    max_depth: int | None = None,
) -> CoercionPlan:
    """Find the shortest borrow chain from source to target.

    Breadth-first over shared borrow declarations, bounded by max_depth hops.
    Plans are cached per registry and hop limit until a new borrow is declared.

    Args:
        source: Concrete type of the argument.
        target: Concrete parameter type.
        registry: Registry holding borrow declarations.
        max_depth: Hop limit (defaults to settings.max_coercion_depth).

    Returns:
        Resolved plan.

    Raises:
        CoercionError: If no chain exists within the limit, or two different
            shortest chains reach the target.
    """
    registry = registry or get_registry()
    limit = max_depth if max_depth is not None else get_settings().max_coercion_depth
    cache_key = (source, target, limit)
    cached = registry.plan_cache.get(cache_key)
    if cached is not None:
        return cached

    if issubclass(source, target):
        plan = CoercionPlan(source, target)
        registry.plan_cache[cache_key] = plan
        return plan

    frontier: deque[tuple[type, tuple[BorrowMeta, ...]]] = deque([(source, ())])
    visited: set[type] = {source}
    for _ in range(limit):
        found: list[tuple[BorrowMeta, ...]] = []
        next_frontier: deque[tuple[type, tuple[BorrowMeta, ...]]] = deque()
        reached: set[type] = set()
        while frontier:
            node, path = frontier.popleft()
            for meta in registry.borrows_from(node):
                step_path = (*path, meta)
                if issubclass(meta.target, target):
                    found.append(step_path)
                elif meta.target not in visited:
                    reached.add(meta.target)
                    next_frontier.append((meta.target, step_path))
        if len(found) > 1:
            routes = ", ".join(CoercionPlan(source, target, p).describe() for p in found)
            raise CoercionError(
                f"Ambiguous coercion from {source.__name__} to {target.__name__}: {routes}"
            )
        if found:
            plan = CoercionPlan(source, target, found[0])
            registry.plan_cache[cache_key] = plan
            logger.debug("resolved coercion plan %s", plan.describe())
            return plan
        visited |= reached
        frontier = next_frontier

    raise CoercionError(
        f"Cannot coerce {source.__name__} to {target.__name__} within {limit} borrow hop(s)"
    )


def coerce(value: Any, target: type, registry: CapabilityRegistry | None = None) -> Any:
    """Widen a single value to a concrete target type through its resolved plan."""
    if isinstance(target, TypeVar):
        raise CoercionError(f"Cannot coerce to generic parameter {target!r}")
    return resolve_plan(type(value), target, registry).apply(value)


def accepts_ref(
    registry: CapabilityRegistry | None = None, **targets: type
) -> Callable[[F], F]:
    """Widen the named parameters to concrete view types on every call.

    Args:
        registry: Registry holding borrow declarations.
        **targets: Parameter name → concrete type the function expects.

    Returns:
        Decorator.

    Raises:
        CoercionError: At decoration time, if a target is a TypeVar or not a
            class, or names a parameter the function does not have.
    """
    for name, target in targets.items():
        if isinstance(target, TypeVar):
            raise CoercionError(
                f"Parameter '{name}' targets generic {target!r}: "
                "reference widening only resolves concrete parameter types"
            )
        if not isinstance(target, type):
            raise CoercionError(f"Parameter '{name}' target {target!r} is not a class")

    def decorator(fn: F) -> F:
        signature = inspect.signature(fn)
        unknown = set(targets) - set(signature.parameters)
        if unknown:
            raise CoercionError(
                f"{fn.__qualname__} has no parameter(s) {', '.join(sorted(unknown))}"
            )

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = signature.bind(*args, **kwargs)
            for name, target in targets.items():
                if name in bound.arguments:
                    bound.arguments[name] = coerce(bound.arguments[name], target, registry)
            return fn(*bound.args, **bound.kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
