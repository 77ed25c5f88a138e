"""Hashing collaborator: hasher, feed protocol and container strategies."""

from borrowkit.core.hashing.core import (
    PythonHashStrategy,
    StableHasher,
    StableHashStrategy,
    feed,
    stable_hash,
)
from borrowkit.core.hashing.models import Feedable, Hasher, HashStrategy

__all__ = [
    # Models
    "Hasher",
    "Feedable",
    "HashStrategy",
    # Core
    "StableHasher",
    "StableHashStrategy",
    "PythonHashStrategy",
    "feed",
    "stable_hash",
]
