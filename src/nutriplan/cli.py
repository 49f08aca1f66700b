"""CLI interface using Typer."""

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from nutriplan.app_logging import configure_logging
from nutriplan.config import get_settings
from nutriplan.data.catalog import FoodItem, load_catalog
from nutriplan.errors import NutriplanError
from nutriplan.export.formatters import JSONFormatter, TableFormatter
from nutriplan.profiles.body_calc import BodyProfile, UnitSystem
from nutriplan.profiles.targets import (
    GoalSpec,
    GoalType,
    NutritionTargets,
    calculate_nutrition_targets,
)

app = typer.Typer(
    help="Nutrition targets and balanced daily meal plans",
    no_args_is_help=True,
)
console = Console()
json_formatter = JSONFormatter()


# ============================================================================
# Helpers
# ============================================================================


def output_json(text: str) -> None:
    """Print a JSON document without rich markup processing."""
    print(text)


def fail(
    command: str,
    message: str,
    json_output: bool,
    suggestions: Optional[list[str]] = None,
) -> None:
    """Report an error and exit with status 1."""
    if json_output:
        output_json(json_formatter.format_error(command, [message], suggestions))
    else:
        console.print(f"[red]{message}[/red]")
        for suggestion in suggestions or []:
            console.print(f"[dim]{suggestion}[/dim]")
    raise typer.Exit(1)


def _load_foods(catalog: Optional[Path], command: str, json_output: bool) -> tuple[FoodItem, ...]:
    path = catalog or get_settings().catalog.path
    try:
        return load_catalog(path)
    except (OSError, ValueError) as e:
        fail(command, f"Could not load catalog: {e}", json_output)


def _build_profile(
    age: int,
    sex: str,
    weight: float,
    height: Optional[float],
    height_ft: Optional[float],
    height_in: Optional[float],
    units: str,
    body_fat: Optional[float],
    activity: Optional[str],
) -> BodyProfile:
    unit_system = UnitSystem(units.lower())
    if unit_system == UnitSystem.IMPERIAL:
        if height_ft is None and height_in is None:
            if height is None:
                raise ValueError("Imperial profiles need --height-ft/--height-in")
            # Bare --height is total inches
            height_value: object = (0.0, height)
        else:
            height_value = (height_ft or 0.0, height_in or 0.0)
    else:
        height_value = height
    return BodyProfile(
        age=age,
        sex=sex,
        weight=weight,
        height=height_value,
        unit_system=unit_system,
        body_fat_pct=body_fat,
        activity_level=activity or get_settings().defaults.activity_level,
    )


def _build_goal(
    target_weight: Optional[float],
    target_body_fat: Optional[float],
    goal_date: Optional[str],
    days: Optional[int],
    pace: Optional[str],
    fixed_date: bool,
    today: date,
) -> Optional[GoalSpec]:
    if target_weight is None and target_body_fat is None:
        return None
    if target_weight is not None and target_body_fat is not None:
        raise ValueError("Use either --target-weight or --target-body-fat, not both")
    if goal_date is not None:
        when = date.fromisoformat(goal_date)
    elif days is not None:
        when = today + timedelta(days=days)
    else:
        raise ValueError("A goal needs --goal-date or --days")

    if target_weight is not None:
        goal_type, value = GoalType.WEIGHT, target_weight
    else:
        goal_type, value = GoalType.BODY_FAT, target_body_fat
    return GoalSpec(
        goal_type=goal_type,
        target_value=value,
        target_date=when,
        pace=pace or get_settings().defaults.pace,
        timeline_authoritative=fixed_date,
    )


def _compute_targets(command: str, json_output: bool, **options) -> NutritionTargets:
    today = date.today()
    try:
        profile = _build_profile(
            options["age"], options["sex"], options["weight"], options["height"],
            options["height_ft"], options["height_in"], options["units"],
            options["body_fat"], options["activity"],
        )
        goal = _build_goal(
            options["target_weight"], options["target_body_fat"], options["goal_date"],
            options["days"], options["pace"], options["fixed_date"], today,
        )
        return calculate_nutrition_targets(profile, goal, today=today)
    except (NutriplanError, ValueError) as e:
        fail(command, str(e), json_output)


# Shared profile and goal options
AGE = typer.Option(..., "--age", help="Age in years")
SEX = typer.Option(..., "--sex", help="Sex (male/female)")
WEIGHT = typer.Option(..., "--weight", help="Weight in kg (metric) or lb (imperial)")
HEIGHT = typer.Option(None, "--height", help="Height in cm (metric) or total inches (imperial)")
HEIGHT_FT = typer.Option(None, "--height-ft", help="Height feet (imperial)")
HEIGHT_IN = typer.Option(None, "--height-in", help="Height inches (imperial)")
UNITS = typer.Option("metric", "--units", help="Unit system (metric/imperial)")
BODY_FAT = typer.Option(None, "--body-fat", help="Body fat percentage")
ACTIVITY = typer.Option(
    None, "--activity",
    help="Activity level (sedentary/light/moderate/active/extreme)",
)
TARGET_WEIGHT = typer.Option(None, "--target-weight", help="Goal weight (profile units)")
TARGET_BODY_FAT = typer.Option(None, "--target-body-fat", help="Goal body fat percentage")
GOAL_DATE = typer.Option(None, "--goal-date", help="Goal date (YYYY-MM-DD)")
DAYS = typer.Option(None, "--days", help="Days until the goal (alternative to --goal-date)")
PACE = typer.Option(None, "--pace", help="Pace (conservative/moderate/aggressive)")
FIXED_DATE = typer.Option(
    False, "--fixed-date",
    help="Treat the goal date as fixed even if it needs a larger surplus",
)
CATALOG = typer.Option(None, "--catalog", help="Food catalog (.yaml, .json or .csv)")
JSON_OUTPUT = typer.Option(False, "--json", help="Output as JSON")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress logs"),
) -> None:
    """Nutrition targets and balanced daily meal plans."""
    configure_logging("INFO" if verbose else get_settings().logging.level)


# ============================================================================
# Commands
# ============================================================================


@app.command()
def targets(
    age: int = AGE,
    sex: str = SEX,
    weight: float = WEIGHT,
    height: Optional[float] = HEIGHT,
    height_ft: Optional[float] = HEIGHT_FT,
    height_in: Optional[float] = HEIGHT_IN,
    units: str = UNITS,
    body_fat: Optional[float] = BODY_FAT,
    activity: Optional[str] = ACTIVITY,
    target_weight: Optional[float] = TARGET_WEIGHT,
    target_body_fat: Optional[float] = TARGET_BODY_FAT,
    goal_date: Optional[str] = GOAL_DATE,
    days: Optional[int] = DAYS,
    pace: Optional[str] = PACE,
    fixed_date: bool = FIXED_DATE,
    json_output: bool = JSON_OUTPUT,
) -> None:
    """Calculate daily calorie and macro targets."""
    result = _compute_targets(
        "targets", json_output,
        age=age, sex=sex, weight=weight, height=height, height_ft=height_ft,
        height_in=height_in, units=units, body_fat=body_fat, activity=activity,
        target_weight=target_weight, target_body_fat=target_body_fat,
        goal_date=goal_date, days=days, pace=pace, fixed_date=fixed_date,
    )

    if json_output:
        output_json(json_formatter.format("targets", result.to_dict(), result.summary()))
    else:
        TableFormatter(console).format_targets(result)


@app.command()
def plan(
    age: int = AGE,
    sex: str = SEX,
    weight: float = WEIGHT,
    height: Optional[float] = HEIGHT,
    height_ft: Optional[float] = HEIGHT_FT,
    height_in: Optional[float] = HEIGHT_IN,
    units: str = UNITS,
    body_fat: Optional[float] = BODY_FAT,
    activity: Optional[str] = ACTIVITY,
    target_weight: Optional[float] = TARGET_WEIGHT,
    target_body_fat: Optional[float] = TARGET_BODY_FAT,
    goal_date: Optional[str] = GOAL_DATE,
    days: Optional[int] = DAYS,
    pace: Optional[str] = PACE,
    fixed_date: bool = FIXED_DATE,
    diet: Optional[str] = typer.Option(None, "--diet", help="Diet pattern (see 'nutriplan diets')"),
    free_meal: Optional[float] = typer.Option(
        None, "--free-meal", help="Calories to reserve for a free meal (max 20% of the day)"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducible plans"),
    regenerate: Optional[int] = typer.Option(
        None, "--regenerate", help="Regenerate the meal at this index (0-based)"
    ),
    catalog: Optional[Path] = CATALOG,
    json_output: bool = JSON_OUTPUT,
) -> None:
    """Generate a balanced day of meals for your targets."""
    from nutriplan.planner.day_plan import DailyBudget, generate_day_plan, regenerate_meal

    settings = get_settings()
    result = _compute_targets(
        "plan", json_output,
        age=age, sex=sex, weight=weight, height=height, height_ft=height_ft,
        height_in=height_in, units=units, body_fat=body_fat, activity=activity,
        target_weight=target_weight, target_body_fat=target_body_fat,
        goal_date=goal_date, days=days, pace=pace, fixed_date=fixed_date,
    )
    foods = _load_foods(catalog, "plan", json_output)
    planner = settings.planner

    try:
        day = generate_day_plan(
            foods,
            DailyBudget.from_targets(result),
            diet=diet or settings.defaults.diet,
            free_meal_calories=free_meal,
            seed=seed,
            tolerance=planner.tolerance,
            max_iterations=planner.max_iterations,
            min_foods=planner.min_foods,
            free_meal_max_fraction=planner.free_meal_max_fraction,
            four_meal_threshold=planner.four_meal_threshold,
        )
        if regenerate is not None:
            day = regenerate_meal(
                day,
                foods,
                regenerate,
                seed=seed + 1 if seed is not None else None,
                tolerance=planner.tolerance,
                max_iterations=planner.max_iterations,
                min_foods=planner.min_foods,
            )
    except (NutriplanError, ValueError, IndexError) as e:
        fail("plan", str(e), json_output, ["Use 'nutriplan diets' to see diets with enough foods"])

    if json_output:
        output_json(json_formatter.format(
            "plan",
            {"targets": result.to_dict(), "plan": day.to_dict()},
            f"{len(day.meals)} meals, {day.calories:.0f} kcal",
        ))
    else:
        formatter = TableFormatter(console)
        formatter.format_targets(result)
        formatter.format_plan(day)


@app.command()
def diets(
    catalog: Optional[Path] = CATALOG,
    json_output: bool = JSON_OUTPUT,
) -> None:
    """List diets and how many catalog foods each admits."""
    from nutriplan.data.dietary_patterns import available_diets, diet_food_counts, list_diets

    foods = _load_foods(catalog, "diets", json_output)
    counts = diet_food_counts(foods)
    descriptions = {d["name"]: d["description"] for d in list_diets()}
    available = available_diets(foods)

    if json_output:
        output_json(json_formatter.format(
            "diets",
            {
                "diets": [
                    {"name": d.value, "foods": n, "description": descriptions[d.value]}
                    for d, n in counts.items()
                ],
                "available": [d.value for d in available],
            },
            f"{len(available)} diets have compatible foods",
        ))
    else:
        TableFormatter(console).format_diet_counts(counts, descriptions)


@app.command()
def foods(
    diet: str = typer.Option("all", "--diet", help="Only show foods compatible with this diet"),
    catalog: Optional[Path] = CATALOG,
    json_output: bool = JSON_OUTPUT,
) -> None:
    """List catalog foods, optionally filtered by diet."""
    from nutriplan.data.dietary_patterns import filter_foods_by_diet, tag_food_with_diets

    items = _load_foods(catalog, "foods", json_output)
    try:
        matches = filter_foods_by_diet(items, diet)
    except ValueError as e:
        fail("foods", str(e), json_output, ["Use 'nutriplan diets' to list diets"])

    if json_output:
        output_json(json_formatter.format(
            "foods",
            {"diet": diet, "foods": [tag_food_with_diets(f).to_dict() for f in matches]},
            f"{len(matches)} foods compatible with {diet}",
        ))
    else:
        TableFormatter(console).format_foods(matches, title=f"Foods ({diet})")


@app.command()
def categorize(
    name: str = typer.Argument(..., help="Food name to categorize"),
    json_output: bool = JSON_OUTPUT,
) -> None:
    """Infer categories and compatible diets for a food name."""
    from nutriplan.data.dietary_patterns import get_compatible_diets
    from nutriplan.data.food_categories import infer_primary_category, infer_secondary_categories

    primary = infer_primary_category(name)
    secondary = infer_secondary_categories(name, primary)
    # Macros are unknown, so diets with nutrient limits are left out
    food = FoodItem(
        id="uncatalogued", name=name, protein=0, carbs=0, fat=0, calories=0,
        primary_category=primary, secondary_categories=tuple(secondary),
    )
    compatible = get_compatible_diets(food, category_only=True)

    if json_output:
        output_json(json_formatter.format(
            "categorize",
            {
                "name": name,
                "primary_category": primary.value,
                "secondary_categories": [c.value for c in secondary],
                "diets": [d.value for d in compatible],
            },
            f"{name}: {primary.value}",
        ))
    else:
        TableFormatter(console).format_categorization(name, primary, secondary, compatible)


if __name__ == "__main__":
    app()
