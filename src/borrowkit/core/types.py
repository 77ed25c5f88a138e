"""Core type definitions for borrowkit."""

type Ref[T] = T
"""Type alias marking a borrowed view that must not be mutated or kept.

When you see `Ref[T]` in a signature, the value may be shared with its owner.
Mutating it mutates the owner; duplicate() it before storing it elsewhere.
"""

type Owned[T] = T
"""Type alias marking a value the holder owns outright.

When you see `Owned[T]` in a return type, no one else references the value;
the caller may mutate or keep it freely.
"""
