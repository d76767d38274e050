import math
from dataclasses import replace
from typing import Any, Iterable, List, Optional

from ..core.config import DAYS_PER_MONTH, AnalyzerConfig
from ..core.logging import get_logger
from ..core.models import BudgetStatus, CostReport, TierUsage, Workflow, WorkflowCost
from .duration import DurationEstimator
from .frequency import RunFrequencyEstimator

logger = get_logger(__name__)


def coerce_workflows(workflows: Iterable[Any]) -> List[Workflow]:
    return [Workflow.from_record(wf, index=i) for i, wf in enumerate(workflows)]


class CostCalculator:
    """Aggregate duration x frequency into monthly minutes and tier costs."""

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()
        self._durations = DurationEstimator(self.config.duration)
        self._frequency = RunFrequencyEstimator(self.config.estimation)

    def enrich(self, workflows: Iterable[Any], commits_per_day: float) -> List[Workflow]:
        """Return copies of `workflows` carrying duration, runs and minutes per month."""
        enriched = []
        for wf in coerce_workflows(workflows):
            duration = wf.estimated_duration
            if duration is None:
                duration = self._durations.estimate(wf.parsed)

            runs = self._frequency.estimate_for(wf.parsed, commits_per_day)
            minutes = math.ceil(duration * runs)
            logger.debug(
                f"{wf.name}: {duration} min/run x {runs} runs/month = {minutes} min/month",
                extra={"workflow": wf.name, "minutes_per_month": minutes},
            )
            enriched.append(replace(
                wf,
                estimated_duration=duration,
                runs_per_month=runs,
                minutes_per_month=minutes,
            ))
        return enriched

    def report(self, enriched: List[Workflow]) -> CostReport:
        """Build the CostReport for workflows already passed through `enrich`."""
        pricing = self.config.pricing

        total_minutes = sum(wf.minutes_per_month for wf in enriched)
        total_runs = sum(wf.runs_per_month for wf in enriched)

        return CostReport(
            minutes_per_month=total_minutes,
            minutes_per_day=total_minutes / DAYS_PER_MONTH,
            workflow_runs_per_day=total_runs / DAYS_PER_MONTH,
            breakdown=[
                WorkflowCost(
                    name=wf.name,
                    minutes_per_run=wf.estimated_duration,
                    runs_per_month=wf.runs_per_month,
                    minutes_per_month=wf.minutes_per_month,
                )
                for wf in enriched
            ],
            budgets=BudgetStatus(
                target=pricing.target_budget_minutes,
                stretch=pricing.stretch_budget_minutes,
                within_target=total_minutes <= pricing.target_budget_minutes,
                within_stretch=total_minutes <= pricing.stretch_budget_minutes,
            ),
            tiers={
                "free": self._tier("free", pricing.free_tier_minutes, total_minutes),
                "team": self._tier(
                    "team",
                    pricing.team_tier_minutes,
                    total_minutes,
                    monthly_cost=pricing.team_monthly_cost,
                ),
            },
        )

    def calculate(self, workflows: Iterable[Any], commits_per_day: float) -> CostReport:
        return self.report(self.enrich(workflows, commits_per_day))

    def _tier(self, name: str, limit: int, total_minutes: int, monthly_cost: float = 0) -> TierUsage:
        overage = max(0, total_minutes - limit)
        return TierUsage(
            name=name,
            limit=limit,
            overage=overage,
            cost=overage * self.config.pricing.cost_per_minute,
            within_limit=total_minutes <= limit,
            monthly_cost=monthly_cost,
        )


def team_plan_savings(report: CostReport) -> float:
    """
    Monthly dollars saved per user by moving from free-tier overage to the
    team plan. Negative when the team plan costs more.
    """
    free, team = report.tiers["free"], report.tiers["team"]
    return free.cost - (team.monthly_cost + team.cost)
