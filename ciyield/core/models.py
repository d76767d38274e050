import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .errors import InvalidWorkflowError


class RecommendationType(str, Enum):
    CACHING = "caching"
    MATRIX = "matrix"
    FREQUENCY = "frequency"
    CONDITIONAL = "conditional"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Workflow:
    """
    One parsed CI workflow plus the estimates attached during analysis.

    `parsed` is the already-loaded workflow document (`on`, `jobs`, ...).
    Estimates start as None and are filled by producing new instances.
    """

    name: str
    parsed: Dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None
    estimated_duration: Optional[int] = None
    runs_per_month: Optional[int] = None
    minutes_per_month: Optional[int] = None

    @classmethod
    def from_record(cls, record: Any, index: Optional[int] = None) -> "Workflow":
        """Coerce a `{name, parsed, path?, estimated_duration?}` mapping."""
        if isinstance(record, Workflow):
            return record
        if not isinstance(record, Mapping):
            raise InvalidWorkflowError("Workflow record must be a mapping", index=index)

        name = record.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidWorkflowError("Workflow record needs a non-empty string name", index=index, field="name")

        parsed = record.get("parsed")
        if parsed is None:
            parsed = {}
        if not isinstance(parsed, Mapping):
            raise InvalidWorkflowError(f"Workflow {name!r}: parsed must be a mapping", index=index, field="parsed")

        duration = record.get("estimated_duration", record.get("estimatedDuration"))
        if duration is not None and (
            isinstance(duration, bool)
            or not isinstance(duration, (int, float))
            or not math.isfinite(duration)
        ):
            raise InvalidWorkflowError(
                f"Workflow {name!r}: estimated_duration must be a finite number",
                index=index,
                field="estimated_duration",
            )

        return cls(
            name=name,
            parsed=dict(parsed),
            path=record.get("path"),
            estimated_duration=duration,
        )


@dataclass(frozen=True)
class Recommendation:
    type: RecommendationType
    workflow: str
    title: str
    description: str
    action: str
    potential_savings: int  # minutes/month
    savings_per_run: int
    priority: Priority
    job: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["type"] = self.type.value
        d["priority"] = self.priority.value
        return d


@dataclass(frozen=True)
class WorkflowCost:
    name: str
    minutes_per_run: int
    runs_per_month: int
    minutes_per_month: int


@dataclass(frozen=True)
class TierUsage:
    name: str
    limit: int
    overage: float
    cost: float
    within_limit: bool
    monthly_cost: float = 0


@dataclass(frozen=True)
class BudgetStatus:
    target: int
    stretch: int
    within_target: bool
    within_stretch: bool


@dataclass(frozen=True)
class CostReport:
    minutes_per_month: int
    minutes_per_day: float
    workflow_runs_per_day: float
    breakdown: List[WorkflowCost]
    budgets: BudgetStatus
    tiers: Dict[str, TierUsage]


@dataclass(frozen=True)
class RecommendationSummary:
    count: int
    total_potential_savings: int
    total_savings_cost: float
    by_priority: Dict[str, int]


@dataclass(frozen=True)
class AnalysisResult:
    meta: Dict[str, Any]
    workflows: List[Workflow]
    costs: CostReport
    optimizations: List[Recommendation]
    summary: RecommendationSummary
