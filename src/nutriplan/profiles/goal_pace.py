"""Goal-paced calorie targets for weight loss and weight gain.

Converts a target weight, a deadline and a pace preference into a daily
calorie target and the realized deficit or surplus percentage.

The two directions are deliberately asymmetric:
- Loss clamps the timeline's required deficit into a pace- and body-fat
  dependent range, with an absolute floor of 1200 kcal/day.
- Gain at aggressive pace uses a fixed 20% surplus unless the user fixed
  the goal date, in which case the timeline drives the surplus.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from nutriplan.errors import DegenerateTimelineError
from nutriplan.profiles.bands import BandTable
from nutriplan.profiles.body_calc import Sex, UnitSystem, round_half_up


class Pace(Enum):
    """User-chosen rate of weight change."""
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


DEFAULT_PACE = Pace.MODERATE

# Calories stored per unit of body mass
CALORIES_PER_KG = 7700
CALORIES_PER_LB = 3500

# Never prescribe fewer calories than this, whatever the deficit
MIN_DAILY_CALORIES = 1200

# Body fat assumed for deficit caps when it is unknown
DEFAULT_LOSS_BODY_FAT = 20.0

# Maximum safe deficit (% of TDEE) by body fat
MAX_DEFICIT_BY_BODY_FAT: dict[Sex, BandTable] = {
    Sex.MALE: BandTable.below([(10, 20.0), (12, 22.0), (15, 25.0)], default=30.0),
    Sex.FEMALE: BandTable.below([(16, 20.0), (20, 22.0), (25, 25.0)], default=30.0),
}

AGGRESSIVE_DEFICIT_BONUS = 5.0
ABSOLUTE_MAX_DEFICIT = 35.0
CONSERVATIVE_DEFICIT_FLOOR = 15.0

MIN_DEFICIT_BY_PACE = {
    Pace.AGGRESSIVE: 20.0,
    Pace.MODERATE: 15.0,
    Pace.CONSERVATIVE: 10.0,
}

# Standard surplus (% of TDEE) per pace
STANDARD_SURPLUS_BY_PACE = {
    Pace.AGGRESSIVE: 20.0,
    Pace.MODERATE: 15.0,
    Pace.CONSERVATIVE: 10.0,
}

# Extra surplus headroom for leaner lifters
SURPLUS_BONUS_BY_BODY_FAT: dict[Sex, BandTable] = {
    Sex.MALE: BandTable.below([(10, 5.0), (12, 3.0), (15, 2.0)], default=0.0),
    Sex.FEMALE: BandTable.below([(16, 5.0), (20, 3.0), (25, 2.0)], default=0.0),
}

ABSOLUTE_MAX_SURPLUS = 35.0
TIMELINE_MAX_SURPLUS = 50.0


@dataclass
class WeightLossResult:
    """Daily calories for a weight loss goal."""

    daily_calories: int
    deficit_pct: float            # Realized, after the calorie floor
    target_deficit_pct: float     # Pace and body fat ceiling
    min_deficit_pct: float        # Pace floor
    required_deficit_pct: float   # What the literal timeline asks for
    floored: bool                 # True if the 1200 kcal floor kicked in


@dataclass
class WeightGainResult:
    """Daily calories for a weight gain goal."""

    daily_calories: int
    surplus_pct: float
    required_surplus_pct: float
    timeline_driven: bool
    high_surplus_warning: bool
    days_required: Optional[int] = None  # Days to goal at the standard surplus


def parse_pace(value: Union[str, Pace, None]) -> Pace:
    """Parse a pace, defaulting to moderate."""
    if isinstance(value, Pace):
        return value
    if value is None:
        return DEFAULT_PACE
    try:
        return Pace(value.lower())
    except ValueError:
        return DEFAULT_PACE


def calories_per_unit(unit_system: UnitSystem) -> int:
    """Calories per kg (metric) or per lb (imperial)."""
    return CALORIES_PER_KG if unit_system == UnitSystem.METRIC else CALORIES_PER_LB


def get_max_allowed_deficit(body_fat_pct: Optional[float], sex: Optional[Sex]) -> float:
    """Maximum safe deficit percentage based on body composition."""
    bf = body_fat_pct if body_fat_pct is not None else DEFAULT_LOSS_BODY_FAT
    table = MAX_DEFICIT_BY_BODY_FAT[Sex.FEMALE if sex == Sex.FEMALE else Sex.MALE]
    return table.lookup(bf)


def get_min_deficit_percentage(pace: Union[str, Pace, None]) -> float:
    """Minimum deficit percentage for a pace."""
    return MIN_DEFICIT_BY_PACE[parse_pace(pace)]


def calculate_target_deficit_percentage(
    pace: Union[str, Pace, None],
    body_fat_pct: Optional[float],
    sex: Optional[Sex],
) -> float:
    """Upper deficit bound from pace and body composition.

    Aggressive adds 5 points to the body fat cap (at most 35%).
    Conservative removes 10 points from caps of 25% or more, 5 otherwise,
    but never drops below 15%.
    """
    base = get_max_allowed_deficit(body_fat_pct, sex)
    pace = parse_pace(pace)

    if pace == Pace.AGGRESSIVE:
        return min(base + AGGRESSIVE_DEFICIT_BONUS, ABSOLUTE_MAX_DEFICIT)
    if pace == Pace.CONSERVATIVE:
        reduction = 10.0 if base >= 25.0 else 5.0
        return max(CONSERVATIVE_DEFICIT_FLOOR, base - reduction)
    return base


def calculate_weight_loss_calories(
    tdee: float,
    start_weight: float,
    target_weight: float,
    days_until_goal: int,
    pace: Union[str, Pace, None],
    body_fat_pct: Optional[float],
    sex: Optional[Sex],
    unit_system: UnitSystem,
) -> WeightLossResult:
    """Calculate daily calories for a weight loss goal.

    Args:
        tdee: Total Daily Energy Expenditure
        start_weight: Current weight (kg or lb per unit_system)
        target_weight: Goal weight, same units
        days_until_goal: Days left; values below 1 are treated as 1
        pace: Goal pace
        body_fat_pct: Body fat percentage, if known
        sex: Biological sex
        unit_system: Units the weights are expressed in

    Returns:
        WeightLossResult with calories and deficit details
    """
    days = max(days_until_goal, 1)
    weight_difference = abs(target_weight - start_weight)
    daily_adjustment = weight_difference * calories_per_unit(unit_system) / days
    required_pct = daily_adjustment / tdee * 100

    max_pct = calculate_target_deficit_percentage(pace, body_fat_pct, sex)
    min_pct = get_min_deficit_percentage(pace)
    clamped_pct = max(min_pct, min(max_pct, required_pct))

    daily_calories = round_half_up(tdee * (1 - clamped_pct / 100))
    floored = daily_calories < MIN_DAILY_CALORIES
    daily_calories = max(MIN_DAILY_CALORIES, daily_calories)

    return WeightLossResult(
        daily_calories=daily_calories,
        deficit_pct=(tdee - daily_calories) / tdee * 100,
        target_deficit_pct=max_pct,
        min_deficit_pct=min_pct,
        required_deficit_pct=required_pct,
        floored=floored,
    )


def calculate_max_surplus_percentage(
    pace: Union[str, Pace, None],
    body_fat_pct: Optional[float] = None,
    sex: Optional[Sex] = None,
) -> float:
    """Surplus cap for moderate and conservative gains.

    Starts from the pace's standard surplus and widens it for lower body
    fat, up to 35% of TDEE.
    """
    standard = STANDARD_SURPLUS_BY_PACE[parse_pace(pace)]
    if body_fat_pct is None:
        return standard
    table = SURPLUS_BONUS_BY_BODY_FAT[Sex.FEMALE if sex == Sex.FEMALE else Sex.MALE]
    return min(standard + table.lookup(body_fat_pct), ABSOLUTE_MAX_SURPLUS)


def calculate_weight_gain_calories(
    tdee: float,
    start_weight: float,
    target_weight: float,
    days_until_goal: int,
    pace: Union[str, Pace, None],
    body_fat_pct: Optional[float],
    sex: Optional[Sex],
    unit_system: UnitSystem,
    timeline_authoritative: bool = False,
) -> WeightGainResult:
    """Calculate daily calories for a weight gain goal.

    Args:
        tdee: Total Daily Energy Expenditure
        start_weight: Current weight (kg or lb per unit_system)
        target_weight: Goal weight, same units
        days_until_goal: Days left; must be positive
        pace: Goal pace
        body_fat_pct: Body fat percentage, if known
        sex: Biological sex
        unit_system: Units the weights are expressed in
        timeline_authoritative: True if the user fixed the goal date

    Returns:
        WeightGainResult with calories, surplus and timeline flags

    Raises:
        DegenerateTimelineError: If days_until_goal is not positive
    """
    if days_until_goal <= 0:
        raise DegenerateTimelineError(days_until_goal)

    pace = parse_pace(pace)
    total_adjustment = abs(target_weight - start_weight) * calories_per_unit(unit_system)
    required_pct = total_adjustment / days_until_goal / tdee * 100
    standard_pct = STANDARD_SURPLUS_BY_PACE[pace]

    timeline_driven = False
    high_surplus_warning = False
    days_required: Optional[int] = None

    if pace == Pace.AGGRESSIVE:
        if timeline_authoritative:
            surplus_pct = min(required_pct, TIMELINE_MAX_SURPLUS)
            if required_pct > standard_pct:
                timeline_driven = True
                high_surplus_warning = True
        else:
            surplus_pct = standard_pct
            days_required = math.ceil(total_adjustment / (tdee * standard_pct / 100))
    else:
        cap = calculate_max_surplus_percentage(pace, body_fat_pct, sex)
        surplus_pct = max(0.0, min(required_pct, cap))

    return WeightGainResult(
        daily_calories=round_half_up(tdee * (1 + surplus_pct / 100)),
        surplus_pct=surplus_pct,
        required_surplus_pct=required_pct,
        timeline_driven=timeline_driven,
        high_surplus_warning=high_surplus_warning,
        days_required=days_required,
    )
