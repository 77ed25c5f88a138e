"""Configuration module using Pydantic Settings.

Usage:
    from borrowkit.config import get_settings

    depth = get_settings().max_coercion_depth
"""

from borrowkit.config.settings import BorrowkitSettings, get_settings

__all__ = [
    "BorrowkitSettings",
    "get_settings",
]
