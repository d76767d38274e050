from .analysis_adapter import adapt_analysis_result, adapt_cost_report, adapt_workflow

__all__ = [
    "adapt_analysis_result",
    "adapt_cost_report",
    "adapt_workflow",
]
