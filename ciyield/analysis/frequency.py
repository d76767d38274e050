import math
from typing import Any, Optional

from ..core.config import DAYS_PER_MONTH, EstimationOptions
from .cron import estimate_runs_per_month as estimate_schedule_runs
from .triggers import TriggerSet, triggers_of


def commits_per_month(commits_per_day: float) -> int:
    return math.ceil(commits_per_day * DAYS_PER_MONTH)


class RunFrequencyEstimator:
    """
    Turn a workflow's triggers and the project's commit cadence into runs/month.

    Each trigger type contributes independently. Tag-only pushes, releases and
    branch/tag creation each add `release_runs_per_month`, even when several of
    them are configured on the same workflow.
    """

    def __init__(self, options: Optional[EstimationOptions] = None):
        self.options = options or EstimationOptions()

    def estimate(self, triggers: TriggerSet, commits_per_day: float) -> int:
        opts = self.options
        monthly_commits = commits_per_month(commits_per_day)

        runs = 0
        if triggers.has_commit_push:
            runs += monthly_commits
        if "pull_request" in triggers:
            runs += math.ceil(monthly_commits * opts.pull_request_factor)
        if "schedule" in triggers:
            runs += estimate_schedule_runs(triggers["schedule"])

        release_like = [triggers.has_tag_push, "release" in triggers, "create" in triggers]
        runs += opts.release_runs_per_month * sum(release_like)

        automatic = (
            triggers.has_commit_push
            or "pull_request" in triggers
            or "schedule" in triggers
            or any(release_like)
        )
        if "workflow_dispatch" in triggers and not automatic:
            runs += opts.manual_runs_per_month

        # Unknown trigger mixes (workflow_run, issues, ...) scale like commits.
        if runs == 0:
            runs = monthly_commits

        return max(1, math.ceil(runs))

    def estimate_for(self, parsed: Any, commits_per_day: float) -> int:
        """Runs/month for a parsed workflow document."""
        return self.estimate(triggers_of(parsed), commits_per_day)
