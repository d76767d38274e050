import math
from collections.abc import Mapping
from typing import Any, Optional

from ..core.config import DurationHeuristics
from ..utils.helpers import is_sequence, safe_get


def matrix_size(matrix: Any) -> int:
    """Number of combinations a `strategy.matrix` expands to."""
    if not isinstance(matrix, Mapping):
        return 1
    size = 1
    for values in matrix.values():
        if is_sequence(values):
            size *= len(values)
    return size


def job_matrix_size(job: Any) -> Optional[int]:
    """Matrix size of a job, or None when the job has no matrix."""
    matrix = safe_get(job, "strategy", "matrix")
    if not matrix:
        return None
    return matrix_size(matrix)


class DurationEstimator:
    """Estimate minutes per workflow run from step names and matrix fan-out."""

    def __init__(self, heuristics: Optional[DurationHeuristics] = None):
        self.heuristics = heuristics or DurationHeuristics()

    def step_minutes(self, step: Any) -> int:
        name = safe_get(step, "name")
        if isinstance(name, str) and name:
            lowered = name.lower()
            for rule in self.heuristics.step_rules:
                if rule.matches(lowered):
                    return rule.minutes
        return self.heuristics.default_step_minutes

    def job_minutes(self, job: Any) -> int:
        minutes = self.heuristics.base_job_minutes

        steps = safe_get(job, "steps")
        if is_sequence(steps):
            minutes += sum(self.step_minutes(step) for step in steps)
            minutes = min(minutes, self.heuristics.max_job_minutes)

        size = job_matrix_size(job)
        if size is not None:
            minutes *= size

        return minutes

    def estimate(self, parsed: Any) -> int:
        """Minutes per run for a parsed workflow; 0 when it has no jobs."""
        jobs = safe_get(parsed, "jobs")
        if not isinstance(jobs, Mapping) or not jobs:
            return 0
        return math.ceil(sum(self.job_minutes(job) for job in jobs.values()))
