"""Call-site reference widening: bounded, cached, concrete-target only."""

from borrowkit.core.coercion.core import accepts_ref, coerce, resolve_plan
from borrowkit.core.coercion.models import CoercionError, CoercionPlan

__all__ = [
    "CoercionError",
    "CoercionPlan",
    "accepts_ref",
    "coerce",
    "resolve_plan",
]
