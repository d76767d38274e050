"""
CIYield Test Suite: Orchestrator and MCP tool.
"""

import json
import pytest

from ciyield.core.config import AnalyzerConfig, EstimationOptions
from ciyield.core.errors import InvalidOptionsError, InvalidWorkflowError
from ciyield.core.models import RecommendationType
from ciyield.core.orchestrator import Orchestrator

WORKFLOWS = [
    {
        "name": "ci.yml",
        "path": ".github/workflows/ci.yml",
        "parsed": {
            "on": {"push": {"branches": ["main"]}, "pull_request": None},
            "jobs": {
                "test": {
                    "strategy": {"matrix": {"node": ["18", "20", "22"], "os": ["ubuntu", "windows"]}},
                    "steps": [
                        {"name": "Checkout", "uses": "actions/checkout@v4"},
                        {"name": "Install", "run": "npm ci"},
                        {"name": "Test", "run": "npm test"},
                    ],
                }
            },
        },
    },
    {
        "name": "release.yml",
        "parsed": {
            "on": {"push": {"tags": ["v*"]}},
            "jobs": {"publish": {"steps": [{"name": "Publish", "run": "npm publish"}]}},
        },
    },
]


# ─────────────────────────────────────────────────────────────
# Orchestrator
# ─────────────────────────────────────────────────────────────

class TestOrchestrator:
    def test_full_pass(self):
        result = Orchestrator().analyze(WORKFLOWS, commits_per_day=1)

        ci, release = result.workflows
        # (5 + 1 + 2 + 10) x 6 matrix combinations
        assert ci.estimated_duration == 108
        assert ci.runs_per_month == 30 + 24
        assert ci.minutes_per_month == 108 * 54
        assert release.estimated_duration == 8
        assert release.runs_per_month == 1

        assert result.costs.minutes_per_month == 108 * 54 + 8
        assert result.meta["workflow_count"] == 2
        assert result.summary.count == len(result.optimizations)

    def test_recommendations_cover_detectors(self):
        result = Orchestrator().analyze(WORKFLOWS, commits_per_day=1)
        types = {r.type for r in result.optimizations}
        assert types == {
            RecommendationType.CACHING,
            RecommendationType.MATRIX,
            RecommendationType.CONDITIONAL,
        }
        savings = [r.potential_savings for r in result.optimizations]
        assert savings == sorted(savings, reverse=True)

    def test_overrides_apply_to_call_only(self):
        orchestrator = Orchestrator()
        tuned = orchestrator.analyze(WORKFLOWS, 1, overrides={"pullRequestFactor": 0.5})
        default = orchestrator.analyze(WORKFLOWS, 1)

        assert tuned.workflows[0].runs_per_month == 30 + 15
        assert default.workflows[0].runs_per_month == 30 + 24

    def test_overrides_keep_configured_options(self):
        workflows = [{"name": "notify.yml", "estimated_duration": 2, "parsed": {"on": ["pull_request", "release"]}}]
        orchestrator = Orchestrator(AnalyzerConfig(estimation=EstimationOptions(pull_request_factor=0.5)))

        configured = orchestrator.analyze(workflows, 1)
        tuned = orchestrator.analyze(workflows, 1, overrides={"releaseRunsPerMonth": 2})

        # 15 pull request runs at the configured factor, plus release runs
        assert configured.workflows[0].runs_per_month == 16
        assert tuned.workflows[0].runs_per_month == 17

    @pytest.mark.parametrize("commits_per_day", [float("nan"), float("inf"), -1, "3", True])
    def test_invalid_commits_per_day(self, commits_per_day):
        with pytest.raises(InvalidOptionsError) as exc:
            Orchestrator().analyze(WORKFLOWS, commits_per_day)
        assert exc.value.option == "commits_per_day"

    def test_invalid_override(self):
        with pytest.raises(InvalidOptionsError):
            Orchestrator().analyze(WORKFLOWS, 1, overrides={"nightly": 2})

    def test_invalid_workflow(self):
        with pytest.raises(InvalidWorkflowError):
            Orchestrator().analyze([{"parsed": {}}], 1)

    def test_empty(self):
        result = Orchestrator().analyze([], 1)
        assert result.costs.minutes_per_month == 0
        assert result.optimizations == []


# ─────────────────────────────────────────────────────────────
# MCP tool
# ─────────────────────────────────────────────────────────────

from ciyield.mcp_stdio import estimate_ci_costs


class TestEstimateCiCostsTool:
    def test_returns_adapted_result(self):
        data = json.loads(estimate_ci_costs(json.dumps(WORKFLOWS), 1.0))

        assert data["costs"]["minutes_per_month"] == 108 * 54 + 8
        assert data["costs"]["tiers"]["free"]["within_limit"] is False
        assert [b["name"] for b in data["costs"]["breakdown"]] == ["ci.yml", "release.yml"]
        assert data["meta"]["correlation_id"]

    def test_overrides_json(self):
        data = json.loads(estimate_ci_costs(json.dumps(WORKFLOWS), 1.0, '{"pullRequestFactor": 0.5}'))
        assert data["workflows"][0]["runs_per_month"] == 45

    def test_invalid_json(self):
        data = json.loads(estimate_ci_costs("not json", 1.0))
        assert data["error"] == "INVALID_WORKFLOW"

    def test_workflows_must_be_list(self):
        data = json.loads(estimate_ci_costs('{"name": "ci.yml"}', 1.0))
        assert data["error"] == "INVALID_WORKFLOW"

    def test_non_finite_duration(self):
        data = json.loads(estimate_ci_costs('[{"name": "ci.yml", "estimated_duration": NaN}]', 1.0))
        assert data["error"] == "INVALID_WORKFLOW"
        assert data["details"]["field"] == "estimated_duration"

    def test_non_finite_commits_per_day(self):
        data = json.loads(estimate_ci_costs(json.dumps(WORKFLOWS), float("nan")))
        assert data["error"] == "INVALID_OPTIONS"
        assert data["details"]["option"] == "commits_per_day"

    def test_team_plan_savings_in_costs(self):
        data = json.loads(estimate_ci_costs(json.dumps(WORKFLOWS), 1.0))
        costs = data["costs"]
        expected = costs["tiers"]["free"]["cost"] - (costs["tiers"]["team"]["monthly_cost"] + costs["tiers"]["team"]["cost"])
        assert costs["team_plan_savings"] == pytest.approx(expected, abs=0.01)

    def test_unknown_override(self):
        data = json.loads(estimate_ci_costs(json.dumps(WORKFLOWS), 1.0, '{"bogus": 1}'))
        assert data["error"] == "INVALID_OPTIONS"
        assert data["details"]["option"] == "bogus"
