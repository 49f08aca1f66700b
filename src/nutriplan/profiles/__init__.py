"""Body metrics, goal pacing and nutrition targets."""

from __future__ import annotations

from nutriplan.profiles.body_calc import ActivityLevel, BodyProfile, Sex, UnitSystem
from nutriplan.profiles.goal_pace import Pace
from nutriplan.profiles.macros import MacroTargets
from nutriplan.profiles.targets import (
    GoalSpec,
    GoalType,
    NutritionTargets,
    calculate_nutrition_targets,
)

__all__ = [
    "ActivityLevel",
    "BodyProfile",
    "GoalSpec",
    "GoalType",
    "MacroTargets",
    "NutritionTargets",
    "Pace",
    "Sex",
    "UnitSystem",
    "calculate_nutrition_targets",
]
