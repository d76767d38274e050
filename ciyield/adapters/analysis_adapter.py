"""
Adapter: AnalysisResult -> plain JSON-ready dict.

The parsed workflow documents are left out; consumers get names, paths and
the estimates attached to each workflow.
"""

from dataclasses import asdict
from typing import Any, Dict

from ..analysis.cost_analyzer import team_plan_savings
from ..core.models import AnalysisResult, CostReport, Workflow


def adapt_workflow(wf: Workflow) -> Dict[str, Any]:
    return {
        "name": wf.name,
        "path": wf.path,
        "estimated_duration": wf.estimated_duration,
        "runs_per_month": wf.runs_per_month,
        "minutes_per_month": wf.minutes_per_month,
    }


def adapt_cost_report(report: CostReport) -> Dict[str, Any]:
    data = asdict(report)
    data["minutes_per_day"] = round(report.minutes_per_day, 2)
    data["workflow_runs_per_day"] = round(report.workflow_runs_per_day, 2)
    for tier in data["tiers"].values():
        tier["cost"] = round(tier["cost"], 2)
    data["team_plan_savings"] = round(team_plan_savings(report), 2)
    return data


def adapt_analysis_result(result: AnalysisResult) -> Dict[str, Any]:
    summary = asdict(result.summary)
    summary["total_savings_cost"] = round(result.summary.total_savings_cost, 2)

    return {
        "meta": dict(result.meta),
        "workflows": [adapt_workflow(wf) for wf in result.workflows],
        "costs": adapt_cost_report(result.costs),
        "optimizations": [r.to_dict() for r in result.optimizations],
        "summary": summary,
    }
