"""
CIYield Utilities: shared helpers for loosely-typed workflow data.
"""

from .helpers import (
    safe_get,
    safe_number,
    is_sequence,
    as_list,
)

__all__ = [
    "safe_get",
    "safe_number",
    "is_sequence",
    "as_list",
]
