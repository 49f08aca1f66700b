"""Data models for meals and day plans."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from nutriplan.data.catalog import FoodItem

MIN_SERVINGS = 0.25

# Free meal calorie split: protein / carbs / fat
FREE_MEAL_PROTEIN_SHARE = 0.20
FREE_MEAL_CARB_SHARE = 0.50
FREE_MEAL_FAT_SHARE = 0.30

FREE_MEAL_ID = "free-meal"
FREE_MEAL_NAME = "Free Meal"


@dataclass(frozen=True)
class MealTarget:
    """Calorie and macro target for one meal."""

    calories: float
    protein: float
    carbs: float
    fat: float

    def to_dict(self) -> dict:
        return {
            "calories": int(round(self.calories)),
            "protein": round(self.protein, 1),
            "carbs": round(self.carbs, 1),
            "fat": round(self.fat, 1),
        }


@dataclass(frozen=True)
class MealFoodEntry:
    """A food at a serving multiplier."""

    food: FoodItem
    servings: float

    @property
    def calories(self) -> float:
        return self.food.calories * self.servings

    @property
    def protein(self) -> float:
        return self.food.protein * self.servings

    @property
    def carbs(self) -> float:
        return self.food.carbs * self.servings

    @property
    def fat(self) -> float:
        return self.food.fat * self.servings

    def to_dict(self) -> dict:
        return {
            "food_id": self.food.id,
            "name": self.food.name,
            "servings": round(self.servings, 2),
            "serving_label": self.food.serving_label,
            "calories": int(round(self.calories)),
            "protein": round(self.protein, 1),
            "carbs": round(self.carbs, 1),
            "fat": round(self.fat, 1),
        }


@dataclass
class Meal:
    """A named meal built from food entries.

    Attributes:
        name: Meal name (e.g. "Breakfast")
        entries: Foods and servings, in selection order
        target: Target the meal was balanced against
        converged: True if the correction pass reached tolerance
        clamped: True if the final proportional shrink was applied
        iterations: Correction iterations used
        is_free: True for the free-meal placeholder
    """

    name: str
    entries: list[MealFoodEntry]
    target: MealTarget
    converged: bool = True
    clamped: bool = False
    iterations: int = 0
    is_free: bool = False
    id: Optional[str] = None

    @classmethod
    def free(cls, calories: float) -> "Meal":
        """Placeholder for calories eaten outside the plan."""
        target = MealTarget(
            calories=calories,
            protein=calories * FREE_MEAL_PROTEIN_SHARE / 4,
            carbs=calories * FREE_MEAL_CARB_SHARE / 4,
            fat=calories * FREE_MEAL_FAT_SHARE / 9,
        )
        placeholder = FoodItem(
            id=FREE_MEAL_ID,
            name="Your choice",
            protein=target.protein,
            carbs=target.carbs,
            fat=target.fat,
            calories=calories,
            serving_label="1 meal",
        )
        return cls(
            name=FREE_MEAL_NAME,
            entries=[MealFoodEntry(placeholder, 1.0)],
            target=target,
            is_free=True,
            id=FREE_MEAL_ID,
        )

    @property
    def calories(self) -> float:
        return sum(e.calories for e in self.entries)

    @property
    def protein(self) -> float:
        return sum(e.protein for e in self.entries)

    @property
    def carbs(self) -> float:
        return sum(e.carbs for e in self.entries)

    @property
    def fat(self) -> float:
        return sum(e.fat for e in self.entries)

    def within_tolerance(self, tolerance: float = 0.05) -> bool:
        """True if calories and protein are within tolerance of the target."""
        return (
            _within(self.calories, self.target.calories, tolerance)
            and _within(self.protein, self.target.protein, tolerance)
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "is_free": self.is_free,
            "foods": [e.to_dict() for e in self.entries],
            "totals": {
                "calories": int(round(self.calories)),
                "protein": round(self.protein, 1),
                "carbs": round(self.carbs, 1),
                "fat": round(self.fat, 1),
            },
            "target": self.target.to_dict(),
            "converged": self.converged,
            "clamped": self.clamped,
        }


def _within(actual: float, target: float, tolerance: float) -> bool:
    return target * (1 - tolerance) <= actual <= target * (1 + tolerance)


@dataclass
class DayPlan:
    """Ordered meals for one day; regular meals first, free meal last."""

    meals: list[Meal]
    diet: str = "all"
    free_meal_calories: float = 0.0
    seed: Optional[int] = None

    @property
    def calories(self) -> float:
        return sum(m.calories for m in self.meals)

    @property
    def protein(self) -> float:
        return sum(m.protein for m in self.meals)

    @property
    def carbs(self) -> float:
        return sum(m.carbs for m in self.meals)

    @property
    def fat(self) -> float:
        return sum(m.fat for m in self.meals)

    @property
    def regular_meals(self) -> list[Meal]:
        return [m for m in self.meals if not m.is_free]

    def to_dict(self) -> dict:
        return {
            "diet": self.diet,
            "free_meal_calories": int(round(self.free_meal_calories)),
            "meals": [m.to_dict() for m in self.meals],
            "totals": {
                "calories": int(round(self.calories)),
                "protein": round(self.protein, 1),
                "carbs": round(self.carbs, 1),
                "fat": round(self.fat, 1),
            },
        }
