"""Nutrition target orchestration.

Chains the metabolic model, the goal-pace calculators and the macro model
into a single NutritionTargets record for a profile and an optional goal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union

from nutriplan.errors import DegenerateTimelineError, InvalidInputError
from nutriplan.profiles.body_calc import (
    BodyProfile,
    UnitSystem,
    calculate_profile_bmr,
    calculate_tdee,
)
from nutriplan.profiles.body_fat import project_body_fat, weight_for_target_body_fat
from nutriplan.profiles.goal_pace import (
    Pace,
    calculate_weight_gain_calories,
    calculate_weight_loss_calories,
    parse_pace,
)
from nutriplan.profiles.macros import DEFAULT_BODY_FAT, MacroTargets, calculate_macros

logger = logging.getLogger(__name__)


class GoalType(Enum):
    """What the goal's target value measures."""
    WEIGHT = "weight"
    BODY_FAT = "body_fat"


@dataclass
class GoalSpec:
    """A goal: target weight or body fat by a date, at a pace.

    Attributes:
        goal_type: Whether target_value is a weight or a body fat percentage
        target_value: Target weight (profile units) or body fat percentage
        target_date: Date the goal should be reached
        pace: Rate of change preference
        timeline_authoritative: True if the user fixed the date explicitly
    """

    goal_type: GoalType
    target_value: float
    target_date: date
    pace: Pace = Pace.MODERATE
    timeline_authoritative: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.goal_type, GoalType):
            try:
                self.goal_type = GoalType(str(self.goal_type).lower().replace("-", "_"))
            except ValueError:
                raise InvalidInputError(
                    "goal_type", f"Unknown goal type '{self.goal_type}'"
                ) from None
        self.pace = parse_pace(self.pace)
        if isinstance(self.target_date, str):
            self.target_date = date.fromisoformat(self.target_date)
        if self.target_value is None or self.target_value <= 0:
            raise InvalidInputError("target_value")


@dataclass
class NutritionTargets:
    """Daily energy and macro targets derived from a profile and goal."""

    bmr: float
    tdee: int
    daily_calories: int
    macros: MacroTargets
    adjustment_pct: float          # + surplus, - deficit
    is_gain: bool
    timeline_driven: bool = False
    high_surplus_warning: bool = False
    days_until_goal: Optional[int] = None
    days_required: Optional[int] = None
    target_weight: Optional[float] = None
    projected_body_fat_pct: Optional[float] = None
    unit_system: UnitSystem = UnitSystem.METRIC

    @property
    def is_maintenance(self) -> bool:
        return self.adjustment_pct == 0 and not self.is_gain

    def to_dict(self) -> dict:
        return {
            "bmr": round(self.bmr, 1),
            "tdee": self.tdee,
            "daily_calories": self.daily_calories,
            "macros": self.macros.to_dict(),
            "adjustment_pct": round(self.adjustment_pct, 1),
            "is_gain": self.is_gain,
            "timeline_driven": self.timeline_driven,
            "high_surplus_warning": self.high_surplus_warning,
            "goal": {
                "days_until_goal": self.days_until_goal,
                "days_required": self.days_required,
                "target_weight": (
                    round(self.target_weight, 1) if self.target_weight is not None else None
                ),
                "projected_body_fat_pct": (
                    round(self.projected_body_fat_pct, 1)
                    if self.projected_body_fat_pct is not None
                    else None
                ),
                "unit_system": self.unit_system.value,
            },
        }

    def summary(self) -> str:
        """One-paragraph human readable summary."""
        if self.is_maintenance:
            direction = "maintenance"
        elif self.is_gain:
            direction = f"{self.adjustment_pct:+.1f}% surplus"
        else:
            direction = f"{self.adjustment_pct:+.1f}% deficit"
        lines = [
            f"{self.daily_calories} kcal/day ({direction}, TDEE {self.tdee})",
            f"Protein {self.macros.protein_g:.1f}g, "
            f"carbs {self.macros.carbs_g:.1f}g, fat {self.macros.fat_g:.1f}g",
        ]
        if self.high_surplus_warning:
            lines.append("Warning: surplus driven by the goal date exceeds the pace standard")
        if self.days_required is not None:
            lines.append(f"At the standard surplus the goal takes {self.days_required} days")
        return "\n".join(lines)


def _lean_mass_kg(profile: BodyProfile) -> float:
    body_fat = (
        profile.body_fat_pct
        if profile.body_fat_pct is not None
        else DEFAULT_BODY_FAT[profile.sex]
    )
    return profile.weight_kg * (1 - body_fat / 100)


def _resolve_target_weight(profile: BodyProfile, goal: GoalSpec) -> float:
    if goal.goal_type == GoalType.WEIGHT:
        return goal.target_value
    if profile.body_fat_pct is None:
        raise InvalidInputError(
            "body_fat_pct", "A body fat goal requires the current body fat percentage"
        )
    return weight_for_target_body_fat(profile.weight, profile.body_fat_pct, goal.target_value)


def calculate_nutrition_targets(
    profile: BodyProfile,
    goal: Optional[GoalSpec] = None,
    today: Optional[date] = None,
) -> NutritionTargets:
    """Calculate daily calorie and macro targets.

    Args:
        profile: Validated body metrics
        goal: Optional goal; without one the targets are for maintenance
        today: Reference date for the goal timeline (defaults to today)

    Returns:
        NutritionTargets

    Raises:
        DegenerateTimelineError: If the goal date is not in the future
        InvalidInputError: If a body fat goal is given without body fat
        InfeasibleMacroError: If the calorie target cannot cover protein and fat
    """
    bmr = calculate_profile_bmr(profile)
    tdee = calculate_tdee(bmr, profile.activity_level)
    lean_mass = _lean_mass_kg(profile)

    def maintenance(**extra) -> NutritionTargets:
        macros = calculate_macros(
            tdee, lean_mass, profile.body_fat_pct, False, profile.sex,
            goal.pace if goal else None,
        )
        return NutritionTargets(
            bmr=bmr,
            tdee=tdee,
            daily_calories=tdee,
            macros=macros,
            adjustment_pct=0.0,
            is_gain=False,
            unit_system=profile.unit_system,
            **extra,
        )

    if goal is None:
        return maintenance()

    today = today or date.today()
    days = (goal.target_date - today).days
    if days <= 0:
        raise DegenerateTimelineError(days)

    target_weight = _resolve_target_weight(profile, goal)
    projected_bf = None
    if profile.body_fat_pct is not None:
        projected_bf = project_body_fat(
            profile.weight, profile.body_fat_pct, target_weight, goal.pace
        )

    if target_weight == profile.weight:
        return maintenance(
            days_until_goal=days,
            target_weight=target_weight,
            projected_body_fat_pct=projected_bf,
        )

    is_gain = target_weight > profile.weight
    timeline_driven = False
    high_surplus_warning = False
    days_required = None

    if is_gain:
        result = calculate_weight_gain_calories(
            tdee=tdee,
            start_weight=profile.weight,
            target_weight=target_weight,
            days_until_goal=days,
            pace=goal.pace,
            body_fat_pct=profile.body_fat_pct,
            sex=profile.sex,
            unit_system=profile.unit_system,
            timeline_authoritative=goal.timeline_authoritative,
        )
        daily_calories = result.daily_calories
        adjustment_pct = result.surplus_pct
        timeline_driven = result.timeline_driven
        high_surplus_warning = result.high_surplus_warning
        days_required = result.days_required
    else:
        result = calculate_weight_loss_calories(
            tdee=tdee,
            start_weight=profile.weight,
            target_weight=target_weight,
            days_until_goal=days,
            pace=goal.pace,
            body_fat_pct=profile.body_fat_pct,
            sex=profile.sex,
            unit_system=profile.unit_system,
        )
        daily_calories = result.daily_calories
        adjustment_pct = -result.deficit_pct
        if result.floored:
            logger.info("Daily calories raised to the %d kcal floor", daily_calories)

    macros = calculate_macros(
        daily_calories, lean_mass, profile.body_fat_pct, is_gain, profile.sex, goal.pace
    )
    logger.debug(
        "Targets: tdee=%d daily=%d adjustment=%.2f%% gain=%s",
        tdee, daily_calories, adjustment_pct, is_gain,
    )

    return NutritionTargets(
        bmr=bmr,
        tdee=tdee,
        daily_calories=daily_calories,
        macros=macros,
        adjustment_pct=adjustment_pct,
        is_gain=is_gain,
        timeline_driven=timeline_driven,
        high_surplus_warning=high_surplus_warning,
        days_until_goal=days,
        days_required=days_required,
        target_weight=target_weight,
        projected_body_fat_pct=projected_bf,
        unit_system=profile.unit_system,
    )
