"""Body metrics and the metabolic model.

Calculates BMR (Basal Metabolic Rate) and TDEE (Total Daily Energy
Expenditure) from body metrics and activity level.

Uses Katch-McArdle when body fat percentage is known, since it works from
lean mass directly, and Mifflin-St Jeor otherwise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from nutriplan.errors import InvalidInputError


class Sex(Enum):
    """Biological sex for BMR calculation."""
    MALE = "male"
    FEMALE = "female"


class ActivityLevel(Enum):
    """Activity level multipliers for TDEE calculation."""
    SEDENTARY = "sedentary"          # Little or no exercise
    LIGHT = "light"                  # Light exercise 1-3 days/week
    MODERATE = "moderate"            # Moderate exercise 3-5 days/week
    ACTIVE = "active"                # Hard exercise 6-7 days/week
    EXTREME = "extreme"              # Very hard exercise, physical job


class UnitSystem(Enum):
    """Unit system a profile was entered in."""
    METRIC = "metric"                # kg, cm
    IMPERIAL = "imperial"            # lb, (feet, inches)


# Activity level multipliers (Harris-Benedict activity factors)
ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.EXTREME: 1.9,
}

DEFAULT_ACTIVITY_MULTIPLIER = 1.2

LB_PER_KG = 2.20462
CM_PER_FOOT = 30.48
CM_PER_INCH = 2.54

# Height is a plain number for metric, (feet, inches) for imperial
Height = Union[float, tuple[float, float]]


def weight_to_kg(weight: float, unit_system: UnitSystem) -> float:
    """Convert a weight in the profile's units to kilograms."""
    if unit_system == UnitSystem.METRIC:
        return weight
    return weight / LB_PER_KG


def height_to_cm(height: Height, unit_system: UnitSystem) -> float:
    """Convert a height in the profile's units to centimeters.

    Args:
        height: Centimeters for metric, (feet, inches) for imperial
        unit_system: Unit system the height is expressed in

    Returns:
        Height in centimeters
    """
    if unit_system == UnitSystem.METRIC:
        return float(height)  # type: ignore[arg-type]
    feet, inches = height  # type: ignore[misc]
    return (feet or 0) * CM_PER_FOOT + (inches or 0) * CM_PER_INCH


def parse_activity_level(value: Union[str, ActivityLevel, None]) -> Optional[ActivityLevel]:
    """Parse an activity level, returning None when unrecognized."""
    if value is None or isinstance(value, ActivityLevel):
        return value
    try:
        return ActivityLevel(value.lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class BodyProfile:
    """Body metrics supplied per calculation.

    Weight is in kg (metric) or lb (imperial). Height is cm (metric) or a
    (feet, inches) tuple (imperial).
    """

    age: Optional[int]
    sex: Sex
    weight: Optional[float]
    height: Optional[Height]
    unit_system: UnitSystem = UnitSystem.METRIC
    body_fat_pct: Optional[float] = None
    activity_level: Union[ActivityLevel, str, None] = ActivityLevel.SEDENTARY

    def __post_init__(self) -> None:
        if not isinstance(self.sex, Sex):
            try:
                object.__setattr__(self, "sex", Sex(str(self.sex).lower()))
            except ValueError:
                raise InvalidInputError(
                    "sex", f"sex must be 'male' or 'female', got '{self.sex}'"
                ) from None
        if not isinstance(self.unit_system, UnitSystem):
            try:
                object.__setattr__(
                    self, "unit_system", UnitSystem(str(self.unit_system).lower())
                )
            except ValueError:
                raise InvalidInputError(
                    "unit_system",
                    f"unit_system must be 'metric' or 'imperial', got '{self.unit_system}'",
                ) from None

        if self.age is None or self.age <= 0:
            raise InvalidInputError("age")
        if self.weight is None or self.weight <= 0:
            raise InvalidInputError("weight")
        if self.height is None:
            raise InvalidInputError("height")
        if isinstance(self.height, list):
            object.__setattr__(self, "height", tuple(self.height))
        if self.unit_system == UnitSystem.IMPERIAL and not isinstance(self.height, tuple):
            raise InvalidInputError(
                "height", "imperial height must be given as (feet, inches)"
            )
        if height_to_cm(self.height, self.unit_system) <= 0:
            raise InvalidInputError("height")
        if self.body_fat_pct is not None and not 0 <= self.body_fat_pct < 100:
            raise InvalidInputError(
                "body_fat_pct",
                f"body_fat_pct must be between 0 and 100, got {self.body_fat_pct}",
            )

    @property
    def weight_kg(self) -> float:
        return weight_to_kg(self.weight, self.unit_system)

    @property
    def height_cm(self) -> float:
        return height_to_cm(self.height, self.unit_system)

    @property
    def lean_mass_kg(self) -> Optional[float]:
        """Lean body mass, or None when body fat is unknown."""
        if self.body_fat_pct is None:
            return None
        return self.weight_kg * (1 - self.body_fat_pct / 100)


def calculate_bmr(
    weight_kg: float,
    height_cm: float,
    age: int,
    sex: Sex,
    body_fat_pct: Optional[float] = None,
) -> float:
    """Calculate Basal Metabolic Rate.

    Args:
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters
        age: Age in years
        sex: Biological sex
        body_fat_pct: Body fat percentage, if known

    Returns:
        BMR in calories per day
    """
    if body_fat_pct is not None:
        # Katch-McArdle
        lean_mass = weight_kg * (1 - body_fat_pct / 100)
        return 370 + 21.6 * lean_mass

    # Mifflin-St Jeor equation
    if sex == Sex.MALE:
        return (10 * weight_kg) + (6.25 * height_cm) - (5 * age) + 5
    return (10 * weight_kg) + (6.25 * height_cm) - (5 * age) - 161


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (1978.5 -> 1979)."""
    return int(math.floor(value + 0.5))


def calculate_tdee(
    bmr: float,
    activity_level: Union[ActivityLevel, str, None],
) -> int:
    """Calculate Total Daily Energy Expenditure.

    Args:
        bmr: Basal Metabolic Rate
        activity_level: Activity level; unknown values use the sedentary factor

    Returns:
        TDEE in calories per day, rounded to the nearest integer
    """
    level = parse_activity_level(activity_level)
    multiplier = ACTIVITY_MULTIPLIERS.get(level, DEFAULT_ACTIVITY_MULTIPLIER)
    return round_half_up(bmr * multiplier)


def calculate_profile_bmr(profile: BodyProfile) -> float:
    """Calculate BMR for a validated profile."""
    return calculate_bmr(
        weight_kg=profile.weight_kg,
        height_cm=profile.height_cm,
        age=profile.age,
        sex=profile.sex,
        body_fat_pct=profile.body_fat_pct,
    )
