"""Meal balancing and day plan generation."""

from __future__ import annotations

from nutriplan.planner.balancer import build_balanced_meal
from nutriplan.planner.day_plan import DailyBudget, generate_day_plan, regenerate_meal
from nutriplan.planner.models import DayPlan, Meal, MealFoodEntry, MealTarget

__all__ = [
    "DailyBudget",
    "DayPlan",
    "Meal",
    "MealFoodEntry",
    "MealTarget",
    "build_balanced_meal",
    "generate_day_plan",
    "regenerate_meal",
]
