"""Output formatters for nutrition targets, meal plans and catalogs."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nutriplan.data.catalog import FoodItem
from nutriplan.data.dietary_patterns import DietType
from nutriplan.data.food_categories import FoodCategory, category_display_name
from nutriplan.planner.models import DayPlan, Meal
from nutriplan.profiles.targets import NutritionTargets


class TableFormatter:
    """Format results as Rich tables for terminal display."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize the formatter.

        Args:
            console: Rich console for output. If None, creates a new one.
        """
        self.console = console or Console()

    def format_targets(self, targets: NutritionTargets) -> None:
        """Print nutrition targets."""
        if targets.is_maintenance:
            direction = "Maintenance"
        elif targets.is_gain:
            direction = f"[green]Surplus {targets.adjustment_pct:+.1f}%[/green]"
        else:
            direction = f"[yellow]Deficit {targets.adjustment_pct:+.1f}%[/yellow]"

        header_lines = [
            f"[bold]NUTRITION TARGETS[/bold] - {datetime.now().strftime('%Y-%m-%d')}",
            f"BMR: {targets.bmr:.0f} kcal | TDEE: {targets.tdee} kcal",
            f"Daily calories: [bold]{targets.daily_calories}[/bold] kcal ({direction})",
        ]
        if targets.days_until_goal is not None:
            unit = "kg" if targets.unit_system.value == "metric" else "lb"
            header_lines.append(
                f"Goal: {targets.target_weight:.1f} {unit} in {targets.days_until_goal} days"
            )
        if targets.projected_body_fat_pct is not None:
            header_lines.append(
                f"Projected body fat: {targets.projected_body_fat_pct:.1f}%"
            )
        self.console.print(Panel("\n".join(header_lines), title="Targets"))

        macro_table = Table(title="Daily Macros")
        macro_table.add_column("Macro")
        macro_table.add_column("Grams", justify="right")
        macro_table.add_column("kcal", justify="right")
        macro_table.add_row("Protein", f"{targets.macros.protein_g:.1f}", f"{targets.macros.protein_g * 4:.0f}")
        macro_table.add_row("Carbs", f"{targets.macros.carbs_g:.1f}", f"{targets.macros.carbs_g * 4:.0f}")
        macro_table.add_row("Fat", f"{targets.macros.fat_g:.1f}", f"{targets.macros.fat_g * 9:.0f}")
        self.console.print(macro_table)

        if targets.high_surplus_warning:
            self.console.print(
                "[yellow]Warning: the goal date requires a surplus above the "
                "pace standard[/yellow]"
            )
        if targets.days_required is not None:
            self.console.print(
                f"[dim]At the standard surplus this goal takes "
                f"{targets.days_required} days[/dim]"
            )

    def _meal_table(self, meal: Meal, index: int) -> Table:
        status = ""
        if meal.is_free:
            status = " [dim](free)[/dim]"
        elif meal.clamped:
            status = " [yellow](clamped)[/yellow]"
        elif not meal.converged:
            status = " [yellow](approximate)[/yellow]"

        table = Table(title=f"{index}. {meal.name}{status}")
        table.add_column("Food", style="cyan", max_width=40)
        table.add_column("Servings", justify="right")
        table.add_column("kcal", justify="right")
        table.add_column("Protein", justify="right")
        table.add_column("Carbs", justify="right")
        table.add_column("Fat", justify="right")

        for entry in meal.entries:
            table.add_row(
                entry.food.name[:40],
                f"{entry.servings:.2f} x {entry.food.serving_label}",
                f"{entry.calories:.0f}",
                f"{entry.protein:.1f}",
                f"{entry.carbs:.1f}",
                f"{entry.fat:.1f}",
            )
        table.add_row(
            "[bold]TOTAL[/bold]",
            "",
            f"[bold]{meal.calories:.0f}[/bold]",
            f"[bold]{meal.protein:.1f}[/bold]",
            f"{meal.carbs:.1f}",
            f"{meal.fat:.1f}",
        )
        table.add_row(
            "[dim]Target[/dim]",
            "",
            f"[dim]{meal.target.calories:.0f}[/dim]",
            f"[dim]{meal.target.protein:.1f}[/dim]",
            f"[dim]{meal.target.carbs:.1f}[/dim]",
            f"[dim]{meal.target.fat:.1f}[/dim]",
        )
        return table

    def format_plan(self, plan: DayPlan) -> None:
        """Print a day plan, one table per meal."""
        header_lines = [
            f"[bold]DAY PLAN[/bold] - diet: {plan.diet}",
            f"Meals: {len(plan.regular_meals)}"
            + (f" + free meal ({plan.free_meal_calories:.0f} kcal)" if plan.free_meal_calories else ""),
        ]
        if plan.seed is not None:
            header_lines.append(f"Seed: {plan.seed}")
        self.console.print(Panel("\n".join(header_lines), title="Meal Plan"))

        for index, meal in enumerate(plan.meals):
            self.console.print(self._meal_table(meal, index))

        self.console.print(
            f"[bold]Day total:[/bold] {plan.calories:.0f} kcal | "
            f"P {plan.protein:.1f}g | C {plan.carbs:.1f}g | F {plan.fat:.1f}g"
        )

    def format_foods(self, foods: Iterable[FoodItem], title: str = "Foods") -> None:
        """Print a catalog listing."""
        table = Table(title=title)
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan", max_width=40)
        table.add_column("Category")
        table.add_column("Serving")
        table.add_column("kcal", justify="right")
        table.add_column("P", justify="right")
        table.add_column("C", justify="right")
        table.add_column("F", justify="right")

        count = 0
        for food in foods:
            count += 1
            table.add_row(
                food.id,
                food.name[:40],
                category_display_name(food.primary_category),
                food.serving_label,
                f"{food.calories:.0f}",
                f"{food.protein:.1f}",
                f"{food.carbs:.1f}",
                f"{food.fat:.1f}",
            )
        self.console.print(table)
        self.console.print(f"[dim]{count} foods[/dim]")

    def format_diet_counts(self, counts: dict[DietType, int], descriptions: dict[str, str]) -> None:
        """Print compatible food counts per diet."""
        table = Table(title="Diets")
        table.add_column("Diet", style="cyan")
        table.add_column("Foods", justify="right")
        table.add_column("Description")
        for diet, count in counts.items():
            style = "" if count else "dim"
            table.add_row(diet.value, str(count), descriptions.get(diet.value, ""), style=style)
        self.console.print(table)

    def format_categorization(
        self,
        name: str,
        primary: FoodCategory,
        secondary: list[FoodCategory],
        diets: list[DietType],
    ) -> None:
        """Print inferred categories and compatible diets for a name."""
        lines = [
            f"[bold]{name}[/bold]",
            f"Primary: {category_display_name(primary)}",
            "Secondary: "
            + (", ".join(category_display_name(c) for c in secondary) if secondary else "-"),
            "Diets: " + ", ".join(d.value for d in diets),
        ]
        self.console.print(Panel("\n".join(lines), title="Categorization"))


class JSONFormatter:
    """Format results as JSON envelopes for programmatic use."""

    def format(self, command: str, data: dict, human_summary: str = "") -> str:
        """Return a success envelope.

        Args:
            command: Command that produced the data
            data: Payload
            human_summary: One-line description of the result

        Returns:
            JSON string
        """
        return json.dumps(
            {
                "success": True,
                "command": command,
                "timestamp": datetime.now().isoformat(),
                "data": data,
                "human_summary": human_summary,
            },
            indent=2,
        )

    def format_error(
        self,
        command: str,
        errors: list[str],
        suggestions: Optional[list[str]] = None,
    ) -> str:
        """Return a failure envelope."""
        return json.dumps(
            {
                "success": False,
                "command": command,
                "errors": errors,
                "suggestions": suggestions or [],
            },
            indent=2,
        )
