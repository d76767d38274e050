"""
CIYield Analysis: duration, frequency and cost estimation.
"""

from .triggers import TriggerSet, normalize_triggers, triggers_of
from .cron import CronExpression, count_field_slots, estimate_runs_per_month
from .duration import DurationEstimator, matrix_size
from .frequency import RunFrequencyEstimator, commits_per_month
from .cost_analyzer import CostCalculator, team_plan_savings

__all__ = [
    "TriggerSet",
    "normalize_triggers",
    "triggers_of",
    "CronExpression",
    "count_field_slots",
    "estimate_runs_per_month",
    "DurationEstimator",
    "matrix_size",
    "RunFrequencyEstimator",
    "commits_per_month",
    "CostCalculator",
    "team_plan_savings",
]
