"""
CI cost optimization detectors.

Each detector is a pure function `(workflow, runs_per_month, config)` returning
zero or more Recommendations. OptimizationEngine runs them all, concatenates
the results and orders them by potential savings.
"""

import functools
import math
import re
from collections.abc import Mapping
from dataclasses import replace
from typing import Any, Callable, Iterable, List, Optional, Pattern, Sequence, Tuple

from ..analysis.cost_analyzer import coerce_workflows
from ..analysis.cron import estimate_runs_per_month as estimate_schedule_runs
from ..analysis.duration import DurationEstimator, job_matrix_size
from ..analysis.frequency import RunFrequencyEstimator
from ..analysis.triggers import triggers_of
from ..core.config import AnalyzerConfig, OptimizationConfig, PricingConfig
from ..core.logging import get_logger
from ..core.models import (
    Priority,
    Recommendation,
    RecommendationSummary,
    RecommendationType,
    Workflow,
)
from ..utils.helpers import is_sequence, safe_get

logger = get_logger(__name__)

Detector = Callable[[Workflow, int, OptimizationConfig], List[Recommendation]]


def _jobs(workflow: Workflow) -> List[Tuple[str, Any]]:
    jobs = workflow.parsed.get("jobs")
    if not isinstance(jobs, Mapping):
        return []
    return list(jobs.items())


@functools.lru_cache(maxsize=16)
def _compile(patterns: Tuple[str, ...]) -> Tuple[Pattern, ...]:
    return tuple(re.compile(p) for p in patterns)


def _installs_dependencies(step: Any, config: OptimizationConfig) -> bool:
    run = safe_get(step, "run")
    if not isinstance(run, str):
        return False
    return any(p.search(run) for p in _compile(config.install_patterns))


def _caches_dependencies(step: Any, config: OptimizationConfig) -> bool:
    uses = safe_get(step, "uses")
    if not isinstance(uses, str):
        return False
    if any(action in uses for action in config.cache_actions):
        return True
    if any(action in uses for action in config.setup_actions):
        return any(safe_get(step, "with", key) for key in config.cache_inputs)
    return False


# ─────────────────────────────────────────────────────────────
# Detectors
# ─────────────────────────────────────────────────────────────

def detect_missing_cache(workflow: Workflow, runs_per_month: int, config: OptimizationConfig) -> List[Recommendation]:
    recommendations = []
    for job_name, job in _jobs(workflow):
        steps = safe_get(job, "steps")
        if not is_sequence(steps):
            continue

        installs = any(_installs_dependencies(s, config) for s in steps)
        cached = any(_caches_dependencies(s, config) for s in steps)
        if not installs or cached:
            continue

        per_run = config.caching_savings_per_run
        recommendations.append(Recommendation(
            type=RecommendationType.CACHING,
            workflow=workflow.name,
            job=job_name,
            title="Add dependency caching",
            description=f'Job "{job_name}" installs dependencies but doesn\'t cache them',
            action="Add actions/cache before install step",
            potential_savings=math.ceil(per_run * runs_per_month),
            savings_per_run=per_run,
            priority=Priority.HIGH,
        ))
    return recommendations


def detect_matrix_bloat(workflow: Workflow, runs_per_month: int, config: OptimizationConfig) -> List[Recommendation]:
    recommendations = []
    duration = workflow.estimated_duration or 0
    factor = config.matrix_reduction_factor

    for job_name, job in _jobs(workflow):
        size = job_matrix_size(job)
        if size is None or size < config.matrix_min_combinations:
            continue

        high = size >= config.matrix_high_priority_combinations
        recommendations.append(Recommendation(
            type=RecommendationType.MATRIX,
            workflow=workflow.name,
            job=job_name,
            title="Reduce matrix size",
            description=f'Job "{job_name}" runs {size} matrix combinations',
            action=(
                "Consider testing only LTS + latest versions "
                f"(reduce to {math.ceil(size / 2)} combinations)"
            ),
            potential_savings=math.ceil(duration * factor * runs_per_month),
            savings_per_run=math.ceil(duration * factor),
            priority=Priority.HIGH if high else Priority.MEDIUM,
        ))
    return recommendations


def detect_frequent_schedule(workflow: Workflow, runs_per_month: int, config: OptimizationConfig) -> List[Recommendation]:
    triggers = triggers_of(workflow.parsed)
    if "schedule" not in triggers:
        return []

    scheduled = estimate_schedule_runs(triggers["schedule"])
    duration = workflow.estimated_duration or 0

    if scheduled >= config.weekly_threshold_runs:
        savings = math.ceil(duration * (scheduled - config.weekly_runs))
        high = savings > config.schedule_high_priority_savings
        action = f"Change to weekly schedule ({config.weekly_runs}x/month)"
        priority = Priority.HIGH if high else Priority.MEDIUM
    elif scheduled >= config.monthly_threshold_runs:
        savings = math.ceil(duration * (scheduled - config.monthly_runs))
        if savings <= config.monthly_min_savings:
            return []
        action = f"Change to monthly schedule ({config.monthly_runs}x/month)"
        priority = Priority.LOW
    else:
        return []

    return [Recommendation(
        type=RecommendationType.FREQUENCY,
        workflow=workflow.name,
        title="Reduce schedule frequency",
        description=f'"{workflow.name}" runs about {scheduled}x/month',
        action=action,
        potential_savings=savings,
        savings_per_run=0,
        priority=priority,
    )]


def detect_missing_path_filters(workflow: Workflow, runs_per_month: int, config: OptimizationConfig) -> List[Recommendation]:
    triggers = triggers_of(workflow.parsed)
    code_events = [e for e in ("push", "pull_request") if e in triggers]
    if not code_events:
        return []
    if any(triggers.has_path_filter(e) for e in code_events):
        return []
    if config.release_marker in workflow.name.lower():
        return []

    wasted_runs = runs_per_month * config.non_code_run_share
    savings = math.ceil((workflow.estimated_duration or 0) * wasted_runs)
    if savings <= config.path_filter_min_savings:
        return []

    return [Recommendation(
        type=RecommendationType.CONDITIONAL,
        workflow=workflow.name,
        title="Add path filters",
        description=f'"{workflow.name}" runs on all commits',
        action='Skip CI for docs-only changes (paths-ignore: ["**/*.md", "docs/**"])',
        potential_savings=savings,
        savings_per_run=0,
        priority=Priority.MEDIUM,
    )]


DEFAULT_DETECTORS: Tuple[Detector, ...] = (
    detect_missing_cache,
    detect_matrix_bloat,
    detect_frequent_schedule,
    detect_missing_path_filters,
)


# ─────────────────────────────────────────────────────────────
# Engine
# ─────────────────────────────────────────────────────────────

class OptimizationEngine:
    """Run every detector over every workflow and rank the findings."""

    def __init__(
        self,
        config: Optional[AnalyzerConfig] = None,
        detectors: Sequence[Detector] = DEFAULT_DETECTORS,
    ):
        self.config = config or AnalyzerConfig()
        self.detectors = tuple(detectors)
        self._durations = DurationEstimator(self.config.duration)
        self._frequency = RunFrequencyEstimator(self.config.estimation)

    def analyze(self, workflows: Iterable[Any], commits_per_day: float) -> List[Recommendation]:
        recommendations: List[Recommendation] = []

        for wf in coerce_workflows(workflows):
            if wf.estimated_duration is None:
                wf = replace(wf, estimated_duration=self._durations.estimate(wf.parsed))
            runs = self._frequency.estimate_for(wf.parsed, commits_per_day)

            for detector in self.detectors:
                recommendations.extend(detector(wf, runs, self.config.optimization))

        recommendations.sort(key=lambda r: r.potential_savings, reverse=True)
        logger.debug(
            f"Found {len(recommendations)} optimization opportunities",
            extra={"recommendation_count": len(recommendations)},
        )
        return recommendations


def summarize(recommendations: List[Recommendation], pricing: Optional[PricingConfig] = None) -> RecommendationSummary:
    """Totals across recommendations, priced at the overage rate."""
    pricing = pricing or PricingConfig()
    total = sum(r.potential_savings for r in recommendations)
    by_priority = {p.value: 0 for p in (Priority.HIGH, Priority.MEDIUM, Priority.LOW)}
    for r in recommendations:
        by_priority[r.priority.value] += 1

    return RecommendationSummary(
        count=len(recommendations),
        total_potential_savings=total,
        total_savings_cost=total * pricing.cost_per_minute,
        by_priority=by_priority,
    )
