"""
CIYield Optimization: independent anti-pattern detectors and their ranking.
"""

from .strategies import (
    DEFAULT_DETECTORS,
    OptimizationEngine,
    detect_frequent_schedule,
    detect_matrix_bloat,
    detect_missing_cache,
    detect_missing_path_filters,
    summarize,
)

__all__ = [
    "DEFAULT_DETECTORS",
    "OptimizationEngine",
    "detect_frequent_schedule",
    "detect_matrix_bloat",
    "detect_missing_cache",
    "detect_missing_path_filters",
    "summarize",
]
