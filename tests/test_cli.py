"""Tests for CLI commands."""

from __future__ import annotations

import json
from datetime import date, timedelta

import pytest
from typer.testing import CliRunner

from nutriplan.cli import app
from nutriplan.config.settings import reload_settings

runner = CliRunner()

PROFILE = ["--age", "30", "--sex", "male", "--weight", "80", "--height", "180",
           "--body-fat", "15", "--activity", "moderate"]


@pytest.fixture(autouse=True)
def default_settings(tmp_path):
    """Ignore any user config file."""
    reload_settings(tmp_path / "missing.yaml")


def invoke_json(args: list[str]) -> dict:
    result = runner.invoke(app, args + ["--json"])
    return json.loads(result.stdout)


class TestMainCommands:
    """Tests for top-level behavior."""

    def test_help(self):
        """Test that --help works."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "meal plans" in result.output.lower()

    @pytest.mark.parametrize("command", ["targets", "plan", "diets", "foods", "categorize"])
    def test_command_help(self, command: str):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0

    def test_targets_requires_profile(self):
        result = runner.invoke(app, ["targets"])
        assert result.exit_code != 0


class TestTargetsCommand:
    """Tests for the targets command."""

    def test_maintenance_json(self):
        output = invoke_json(["targets"] + PROFILE)
        assert output["success"] is True
        assert output["command"] == "targets"
        data = output["data"]
        assert data["tdee"] == 2850
        assert data["daily_calories"] == data["tdee"]
        assert data["macros"]["protein_g"] == 163.2

    def test_gain_goal_json(self):
        output = invoke_json(["targets"] + PROFILE + ["--target-weight", "82", "--days", "80"])
        data = output["data"]
        assert data["is_gain"] is True
        assert data["daily_calories"] > data["tdee"]
        assert data["goal"]["days_until_goal"] == 80

    def test_goal_date(self):
        goal_date = (date.today() + timedelta(days=60)).isoformat()
        output = invoke_json(
            ["targets"] + PROFILE + ["--target-weight", "75", "--goal-date", goal_date]
        )
        assert output["data"]["is_gain"] is False
        assert output["data"]["adjustment_pct"] < 0

    def test_past_goal_date_fails(self):
        goal_date = (date.today() - timedelta(days=3)).isoformat()
        result = runner.invoke(
            app, ["targets"] + PROFILE + ["--target-weight", "75", "--goal-date", goal_date, "--json"]
        )
        assert result.exit_code == 1
        output = json.loads(result.stdout)
        assert output["success"] is False
        assert "future" in output["errors"][0]

    def test_goal_needs_date(self):
        result = runner.invoke(app, ["targets"] + PROFILE + ["--target-weight", "75"])
        assert result.exit_code == 1

    def test_imperial(self):
        output = invoke_json([
            "targets", "--age", "30", "--sex", "male", "--weight", "176",
            "--height-ft", "5", "--height-in", "10", "--units", "imperial",
        ])
        assert output["data"]["goal"]["unit_system"] == "imperial"

    def test_invalid_sex(self):
        result = runner.invoke(
            app, ["targets", "--age", "30", "--sex", "x", "--weight", "80", "--height", "180"]
        )
        assert result.exit_code == 1

    def test_table_output(self):
        result = runner.invoke(app, ["targets"] + PROFILE)
        assert result.exit_code == 0
        assert "NUTRITION TARGETS" in result.output
        assert "Protein" in result.output


class TestPlanCommand:
    """Tests for the plan command."""

    def test_plan_json(self):
        output = invoke_json(["plan"] + PROFILE + ["--seed", "4"])
        assert output["success"] is True
        meals = output["data"]["plan"]["meals"]
        assert [m["name"] for m in meals] == ["Breakfast", "Lunch", "Dinner", "Snack"]

    def test_plan_with_diet_and_free_meal(self):
        output = invoke_json(
            ["plan"] + PROFILE + ["--diet", "vegan", "--free-meal", "400", "--seed", "4"]
        )
        plan = output["data"]["plan"]
        assert plan["diet"] == "vegan"
        assert plan["meals"][-1]["is_free"] is True
        assert plan["free_meal_calories"] == 400

    def test_regenerate(self):
        base = invoke_json(["plan"] + PROFILE + ["--seed", "4"])
        regenerated = invoke_json(["plan"] + PROFILE + ["--seed", "4", "--regenerate", "1"])
        base_meals = base["data"]["plan"]["meals"]
        new_meals = regenerated["data"]["plan"]["meals"]
        assert new_meals[0] == base_meals[0]
        assert new_meals[1]["target"] == base_meals[1]["target"]

    def test_regenerate_out_of_range(self):
        result = runner.invoke(app, ["plan"] + PROFILE + ["--seed", "4", "--regenerate", "9"])
        assert result.exit_code == 1

    def test_unknown_diet(self):
        result = runner.invoke(app, ["plan"] + PROFILE + ["--diet", "fruitarian", "--json"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["success"] is False

    def test_insufficient_catalog(self, tmp_path):
        path = tmp_path / "tiny.yaml"
        path.write_text("- {id: tofu, name: Tofu, protein: 17, carbs: 3, fat: 9}\n")
        result = runner.invoke(app, ["plan"] + PROFILE + ["--catalog", str(path)])
        assert result.exit_code == 1
        assert "variety" in result.output.lower()

    def test_table_output(self):
        result = runner.invoke(app, ["plan"] + PROFILE + ["--seed", "2"])
        assert result.exit_code == 0
        assert "DAY PLAN" in result.output
        assert "Breakfast" in result.output


class TestCatalogCommands:
    """Tests for diets, foods and categorize."""

    def test_diets_json(self):
        output = invoke_json(["diets"])
        diets = {d["name"]: d for d in output["data"]["diets"]}
        assert diets["all"]["foods"] >= diets["vegan"]["foods"] > 0
        assert "vegan" in output["data"]["available"]
        assert output["data"]["available"] == [
            d["name"] for d in output["data"]["diets"] if d["foods"] > 0
        ]

    def test_diets_table(self):
        result = runner.invoke(app, ["diets"])
        assert result.exit_code == 0
        assert "vegan" in result.output

    def test_foods_by_diet(self):
        output = invoke_json(["foods", "--diet", "vegan"])
        foods = output["data"]["foods"]
        assert foods
        assert all("vegan" in f["diet_tags"] for f in foods)

    def test_foods_unknown_diet(self):
        result = runner.invoke(app, ["foods", "--diet", "fruitarian"])
        assert result.exit_code == 1

    def test_missing_catalog(self, tmp_path):
        result = runner.invoke(app, ["foods", "--catalog", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1

    def test_categorize(self):
        output = invoke_json(["categorize", "Turkey Bacon"])
        data = output["data"]
        assert data["primary_category"] == "poultry"
        assert "vegetarian" not in data["diets"]
        assert data["diets"][0] == "all"

    def test_categorize_skips_macro_diets(self):
        diets = invoke_json(["categorize", "Grilled Salmon"])["data"]["diets"]
        assert "pescatarian" in diets
        assert not set(diets) & {"keto", "low_carb", "atkins", "high_protein"}

    def test_categorize_table(self):
        result = runner.invoke(app, ["categorize", "Shrimp Fried Rice"])
        assert result.exit_code == 0
        assert "Shellfish" in result.output
