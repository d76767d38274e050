"""
CIYield Configuration.

Every tunable used by the estimators lives in an immutable dataclass that is
passed explicitly, so alternate pricing or heuristic tables never touch
process-wide state. Only logging reads the environment.
"""

import math
import os
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Tuple

from .errors import InvalidOptionsError

DAYS_PER_MONTH = 30


# ─────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    fmt: str = "json"  # "json" or "text"

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        return cls(
            level=os.environ.get("CIYIELD_LOG_LEVEL", "INFO").upper(),
            fmt=os.environ.get("CIYIELD_LOG_FORMAT", "json").lower(),
        )


# ─────────────────────────────────────────────────────────────
# Run frequency
# ─────────────────────────────────────────────────────────────

_OPTION_ALIASES = {
    "pullRequestFactor": "pull_request_factor",
    "pull_request_factor": "pull_request_factor",
    "manualRunsPerMonth": "manual_runs_per_month",
    "manual_runs_per_month": "manual_runs_per_month",
    "releaseRunsPerMonth": "release_runs_per_month",
    "release_runs_per_month": "release_runs_per_month",
}


@dataclass(frozen=True)
class EstimationOptions:
    """Tunables for turning triggers into runs/month."""

    pull_request_factor: float = 0.8
    manual_runs_per_month: float = 1
    release_runs_per_month: float = 1

    @classmethod
    def from_overrides(
        cls,
        overrides: Optional[Mapping[str, Any]] = None,
        base: Optional["EstimationOptions"] = None,
    ) -> "EstimationOptions":
        """
        Apply caller overrides on top of `base` (the defaults when omitted).

        Accepts camelCase or snake_case keys. A missing, None or zero value keeps
        the base value; negative or non-numeric values are rejected.
        """
        base = base or cls()
        if not overrides:
            return base

        values = {}
        for key, raw in overrides.items():
            name = _OPTION_ALIASES.get(key)
            if name is None:
                raise InvalidOptionsError(f"Unknown estimation option: {key}", option=key, value=raw)
            if raw is None:
                continue
            if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not math.isfinite(raw):
                raise InvalidOptionsError(f"Option {key} must be a number", option=key, value=raw)
            if raw < 0:
                raise InvalidOptionsError(f"Option {key} must not be negative", option=key, value=raw)
            if raw:
                values[name] = raw

        return replace(base, **values)


# ─────────────────────────────────────────────────────────────
# Duration heuristics
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StepRule:
    """Minutes added for a step whose name contains any of `keywords`."""

    keywords: Tuple[str, ...]
    minutes: int

    def matches(self, step_name: str) -> bool:
        return any(k in step_name for k in self.keywords)


# Evaluated in order, first match wins.
DEFAULT_STEP_RULES: Tuple[StepRule, ...] = (
    StepRule(("test", "e2e"), 10),
    StepRule(("build", "compile"), 5),
    StepRule(("deploy", "publish"), 3),
    StepRule(("install", "setup"), 2),
)


@dataclass(frozen=True)
class DurationHeuristics:
    base_job_minutes: int = 5
    max_job_minutes: int = 60
    default_step_minutes: int = 1
    step_rules: Tuple[StepRule, ...] = DEFAULT_STEP_RULES


# ─────────────────────────────────────────────────────────────
# Pricing
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PricingConfig:
    """GitHub Actions private-repo pricing (2024) and self-imposed budgets."""

    free_tier_minutes: int = 2000
    team_tier_minutes: int = 3000
    team_monthly_cost: float = 4  # $/user/month
    cost_per_minute: float = 0.008
    target_budget_minutes: int = 1000
    stretch_budget_minutes: int = 1500


# ─────────────────────────────────────────────────────────────
# Optimization rules
# ─────────────────────────────────────────────────────────────

DEFAULT_INSTALL_PATTERNS: Tuple[str, ...] = (
    r"\bpip install\b",
    r"\bnpm install\b",
    r"\bnpm ci\b",
    r"\byarn install\b",
    r"\bpnpm install\b",
    r"\bpoetry install\b",
    r"\bbundle install\b",
    r"\bcomposer install\b",
)

# Any step using one of these counts as caching.
DEFAULT_CACHE_ACTIONS: Tuple[str, ...] = (
    "actions/cache",
    "actions/setup-node",
)

# These count only when their `with:` block enables caching.
DEFAULT_SETUP_ACTIONS: Tuple[str, ...] = (
    "actions/setup-python",
    "actions/setup-java",
    "actions/setup-go",
    "ruby/setup-ruby",
)

DEFAULT_CACHE_INPUTS: Tuple[str, ...] = ("cache", "bundler-cache")


@dataclass(frozen=True)
class OptimizationConfig:
    install_patterns: Tuple[str, ...] = DEFAULT_INSTALL_PATTERNS
    cache_actions: Tuple[str, ...] = DEFAULT_CACHE_ACTIONS
    setup_actions: Tuple[str, ...] = DEFAULT_SETUP_ACTIONS
    cache_inputs: Tuple[str, ...] = DEFAULT_CACHE_INPUTS
    caching_savings_per_run: int = 3

    matrix_min_combinations: int = 6
    matrix_high_priority_combinations: int = 9
    matrix_reduction_factor: float = 0.5

    weekly_threshold_runs: int = 20
    weekly_runs: int = 4
    monthly_threshold_runs: int = 4
    monthly_runs: int = 1
    monthly_min_savings: int = 50
    schedule_high_priority_savings: int = 500

    non_code_run_share: float = 0.2
    path_filter_min_savings: int = 50
    release_marker: str = "release"


@dataclass(frozen=True)
class AnalyzerConfig:
    """Everything one analysis pass needs."""

    estimation: EstimationOptions = field(default_factory=EstimationOptions)
    duration: DurationHeuristics = field(default_factory=DurationHeuristics)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    optimization: OptimizationConfig = field(default_factory=OptimizationConfig)
