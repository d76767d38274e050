"""
Orchestrator: one full cost analysis pass over already-parsed workflows.

Duration and frequency estimation feed the CostCalculator; the
OptimizationEngine runs over the same enriched workflows. No discovery,
parsing or I/O happens here.
"""

import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from ..analysis.cost_analyzer import CostCalculator
from ..optimization.strategies import OptimizationEngine, summarize
from .config import AnalyzerConfig, EstimationOptions
from .errors import InvalidOptionsError
from .logging import get_logger, get_correlation_id, TimedOperation
from .models import AnalysisResult

logger = get_logger(__name__)


class Orchestrator:
    """
    Runs cost estimation and optimization analysis with a fixed config.
    Per-call estimation overrides produce a derived config for that call only.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()

    def analyze(
        self,
        workflows: Iterable[Any],
        commits_per_day: float,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> AnalysisResult:
        if (
            isinstance(commits_per_day, bool)
            or not isinstance(commits_per_day, (int, float))
            or not math.isfinite(commits_per_day)
            or commits_per_day < 0
        ):
            raise InvalidOptionsError(
                "commits_per_day must be a finite, non-negative number",
                option="commits_per_day",
                value=commits_per_day,
            )

        config = self.config
        if overrides:
            config = replace(config, estimation=EstimationOptions.from_overrides(overrides, base=config.estimation))

        workflows = list(workflows)
        with TimedOperation(logger, "analyze_ci_costs", workflow_count=len(workflows)):
            calculator = CostCalculator(config)
            enriched = calculator.enrich(workflows, commits_per_day)
            costs = calculator.report(enriched)

            optimizations = OptimizationEngine(config).analyze(enriched, commits_per_day)
            summary = summarize(optimizations, config.pricing)

            if not costs.tiers["free"].within_limit:
                logger.warning(
                    f"Estimated usage {costs.minutes_per_month} min/month exceeds the free tier "
                    f"({costs.tiers['free'].limit} min)",
                    extra={"minutes_per_month": costs.minutes_per_month},
                )

            return AnalysisResult(
                meta={
                    "generated_at": datetime.now(timezone.utc).isoformat(),
                    "commits_per_day": commits_per_day,
                    "workflow_count": len(enriched),
                    "correlation_id": get_correlation_id(),
                },
                workflows=enriched,
                costs=costs,
                optimizations=optimizations,
                summary=summary,
            )
