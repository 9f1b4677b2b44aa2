"""Tests for the rate-calc MCP tools and resource."""

import asyncio
import json

import pytest
import yaml

pytest.importorskip("mcp")

from ratecalc.mcp.server import calculate_rate, health_plans_resource, list_health_plans
from ratecalc.sdk.inputs import INPUT_KEYS


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Isolated config directory with no profile."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("RATE_CALC_CONFIG_PATH", str(config_dir))
    return config_dir


def run_calculate(**overrides):
    """Call the tool the way MCP does: every parameter passed, unset ones as None."""
    args = {key: None for key in INPUT_KEYS}
    args.update(overrides)
    return asyncio.run(calculate_rate(**args))


class TestCalculateRate:
    """calculate_rate tool."""

    def test_builtin_defaults(self, isolated_config):
        data = run_calculate()

        assert data["capacity"]["billable_hours"] == pytest.approx(1592)
        assert round(data["rates"]["target"], 2) == 101.37
        assert data["warnings"] == []

    def test_arguments_override_profile_defaults(self, isolated_config):
        """Profile defaults fill unset arguments; given arguments win."""
        (isolated_config / "profile.yaml").write_text(yaml.dump({
            "defaults": {"annual_salary": 120000, "pto_hours": 80},
            "health_plans": {"single": 7500},
        }))

        data = run_calculate(pto_hours=160)

        assert data["costs"]["salary"] == 120000
        assert data["costs"]["health_insurance"] == 7500
        assert data["inputs"]["pto_hours"] == 160

    def test_manual_health_insurance(self, isolated_config):
        data = run_calculate(health_insurance_plan="other", health_insurance_manual_amount=5000)
        assert data["costs"]["health_insurance"] == 5000

    def test_invalid_profile_returns_error(self, isolated_config):
        (isolated_config / "profile.yaml").write_text(yaml.dump({"health_plans": {"single": -5}}))

        data = run_calculate()

        assert "error" in data
        assert "health_plans" in data["error"]


class TestHealthPlans:
    """list_health_plans tool and the health-plans resource."""

    def test_list_with_override(self, isolated_config):
        (isolated_config / "profile.yaml").write_text(yaml.dump({"health_plans": {"family": 21000}}))

        data = asyncio.run(list_health_plans())

        assert data["count"] == 4
        costs = {p["plan_id"]: p["annual_cost"] for p in data["plans"]}
        assert costs["family"] == 21000
        assert costs["other"] is None

    def test_resource_is_json_catalog(self, isolated_config):
        data = json.loads(asyncio.run(health_plans_resource()))
        assert [p["plan_id"] for p in data["plans"]] == ["single", "employee_spouse", "family", "other"]
