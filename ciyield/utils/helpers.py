"""
CIYield Utility Library.

Small, dependency-free helpers for reading loosely-typed workflow documents.
"""

import math
from typing import Any, Mapping, Optional


# ─────────────────────────────────────────────────────────────
# Safe Data Access
# ─────────────────────────────────────────────────────────────

def safe_get(data: Any, *keys, default: Any = None) -> Any:
    """
    Safely traverse nested mappings and sequences.

    Usage:
        paths = safe_get(triggers, "push", "paths", default=None)
    """
    current = data
    for key in keys:
        try:
            if isinstance(current, Mapping):
                current = current[key]
            elif isinstance(current, (list, tuple)) and isinstance(key, int):
                current = current[key]
            else:
                return default
        except (KeyError, IndexError, TypeError):
            return default
    return current


def safe_number(value: Any) -> Optional[float]:
    """Parse a finite number, returning None for anything else."""
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def is_sequence(value: Any) -> bool:
    """True for list-like values, never for strings."""
    return isinstance(value, (list, tuple))


def as_list(value: Any) -> list:
    """Wrap a lone mapping in a list; None becomes []."""
    if value is None:
        return []
    if is_sequence(value):
        return list(value)
    return [value]
