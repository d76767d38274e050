"""
CIYield Core: domain layer.

Exports the primary classes used across the application.

NOTE: Orchestrator is NOT imported here to avoid circular imports (it
depends on analysis and optimization, which depend on core). Import it
directly:
    from ciyield.core.orchestrator import Orchestrator
"""

from .models import (
    Workflow,
    Recommendation,
    RecommendationType,
    Priority,
    WorkflowCost,
    TierUsage,
    BudgetStatus,
    CostReport,
    RecommendationSummary,
    AnalysisResult,
)
from .config import (
    AnalyzerConfig,
    EstimationOptions,
    DurationHeuristics,
    StepRule,
    PricingConfig,
    OptimizationConfig,
)
from .errors import CIYieldError, InvalidWorkflowError, InvalidOptionsError
from .logging import get_logger, set_correlation_id, get_correlation_id, TimedOperation

__all__ = [
    "Workflow",
    "Recommendation",
    "RecommendationType",
    "Priority",
    "WorkflowCost",
    "TierUsage",
    "BudgetStatus",
    "CostReport",
    "RecommendationSummary",
    "AnalysisResult",
    "AnalyzerConfig",
    "EstimationOptions",
    "DurationHeuristics",
    "StepRule",
    "PricingConfig",
    "OptimizationConfig",
    "CIYieldError",
    "InvalidWorkflowError",
    "InvalidOptionsError",
    "get_logger",
    "set_correlation_id",
    "get_correlation_id",
    "TimedOperation",
]
