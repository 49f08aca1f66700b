"""Error types raised by the nutrition and meal planning engine.

Every condition here is local and recoverable: callers catch it and
report back to the user. Input problems subclass ValueError so code that
already handles bad values keeps working.
"""

from __future__ import annotations

from typing import Optional


class NutriplanError(Exception):
    """Base class for all nutriplan errors."""


class InvalidInputError(NutriplanError, ValueError):
    """A required body metric is missing or out of range."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Missing or invalid value for '{field}'")


class DegenerateTimelineError(NutriplanError, ValueError):
    """The goal date is not in the future."""

    def __init__(self, days_until_goal: int):
        self.days_until_goal = days_until_goal
        super().__init__(
            f"Goal date must be in the future (days until goal: {days_until_goal})"
        )


class InfeasibleMacroError(NutriplanError, ValueError):
    """Protein and fat needs exceed the calorie target, leaving negative carbs."""

    def __init__(self, daily_calories: float, protein_g: float, carbs_g: float, fat_g: float):
        self.daily_calories = daily_calories
        self.protein_g = protein_g
        self.carbs_g = carbs_g
        self.fat_g = fat_g
        super().__init__(
            f"Calorie target {daily_calories:.0f} kcal cannot cover "
            f"{protein_g:.1f}g protein and {fat_g:.1f}g fat "
            f"(carbs would be {carbs_g:.1f}g)"
        )


class InsufficientCatalogError(NutriplanError):
    """The food pool cannot support meal generation."""


class InsufficientVarietyError(InsufficientCatalogError):
    """Fewer distinct foods than meal generation requires."""

    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        super().__init__(
            f"Insufficient variety: {available} distinct foods available, "
            f"at least {required} required"
        )


class NoCompatibleFoodsError(InsufficientCatalogError):
    """The diet filter removed every food from the catalog."""

    def __init__(self, diet: str):
        self.diet = diet
        super().__init__(f"No foods in the catalog are compatible with the '{diet}' diet")
