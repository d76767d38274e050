import json
import sys

# Force ALL logs to stderr (never stdout), the MCP stdio transport owns stdout
from ciyield.core.logging import configure_logging, set_correlation_id
configure_logging(level="ERROR", stream=sys.stderr)

from mcp.server.fastmcp import FastMCP
from ciyield.core.errors import CIYieldError, InvalidOptionsError, InvalidWorkflowError
from ciyield.core.orchestrator import Orchestrator
from ciyield.adapters.analysis_adapter import adapt_analysis_result

mcp = FastMCP("CIYieldCosts")
_orchestrator = Orchestrator()


def _load_json(text: str, what: str, error_cls):
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise error_cls(f"{what} is not valid JSON: {e.msg}")


@mcp.tool()
def estimate_ci_costs(
    workflows_json: str,
    commits_per_day: float = 1.0,
    overrides_json: str = "",
) -> str:
    """
    Estimate monthly CI minutes, tier overage and optimization opportunities.

    workflows_json: JSON list of {"name", "parsed"} records, where "parsed" is
    an already-loaded GitHub Actions workflow document.
    overrides_json: optional JSON object with pullRequestFactor,
    manualRunsPerMonth and/or releaseRunsPerMonth.
    """
    set_correlation_id()
    try:
        workflows = _load_json(workflows_json, "workflows_json", InvalidWorkflowError)
        if not isinstance(workflows, list):
            raise InvalidWorkflowError("workflows_json must be a JSON list")

        overrides = None
        if overrides_json.strip():
            overrides = _load_json(overrides_json, "overrides_json", InvalidOptionsError)
            if not isinstance(overrides, dict):
                raise InvalidOptionsError("overrides_json must be a JSON object")

        result = _orchestrator.analyze(workflows, commits_per_day, overrides=overrides)
    except CIYieldError as e:
        return json.dumps(e.to_dict(), default=str)

    return json.dumps(adapt_analysis_result(result), default=str)


def main() -> None:
    # MCP handshake requires clean stdout
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
