"""Day-level meal plan orchestration.

Splits a day's budget into equal per-meal targets (after reserving an
optional free meal), filters the catalog by diet and balances each meal
independently. Foods may repeat across meals.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from nutriplan.data.catalog import FoodItem
from nutriplan.data.dietary_patterns import DietType, filter_foods_by_diet, parse_diet
from nutriplan.errors import InsufficientVarietyError, NoCompatibleFoodsError
from nutriplan.planner.balancer import build_balanced_meal
from nutriplan.planner.models import (
    FREE_MEAL_CARB_SHARE,
    FREE_MEAL_FAT_SHARE,
    FREE_MEAL_PROTEIN_SHARE,
    DayPlan,
    Meal,
    MealTarget,
)
from nutriplan.profiles.targets import NutritionTargets

logger = logging.getLogger(__name__)

MEAL_NAMES = ("Breakfast", "Lunch", "Dinner", "Snack")

DEFAULT_MIN_FOODS = 10
DEFAULT_FREE_MEAL_MAX_FRACTION = 0.2
DEFAULT_FOUR_MEAL_THRESHOLD = 1800


@dataclass(frozen=True)
class DailyBudget:
    """Calories and macro grams available for a day."""

    calories: float
    protein: float
    carbs: float
    fat: float

    @classmethod
    def from_targets(cls, targets: NutritionTargets) -> "DailyBudget":
        return cls(
            calories=targets.daily_calories,
            protein=targets.macros.protein_g,
            carbs=targets.macros.carbs_g,
            fat=targets.macros.fat_g,
        )


def meal_count(available_calories: float, threshold: float = DEFAULT_FOUR_MEAL_THRESHOLD) -> int:
    """Four meals above the threshold, three otherwise."""
    return 4 if available_calories > threshold else 3


def cap_free_meal(
    budget: DailyBudget,
    free_meal_calories: Optional[float],
    max_fraction: float = DEFAULT_FREE_MEAL_MAX_FRACTION,
) -> float:
    """Free meal calories limited to a fraction of the daily budget."""
    if not free_meal_calories or free_meal_calories <= 0:
        return 0.0
    return min(free_meal_calories, budget.calories * max_fraction)


def split_budget(
    budget: DailyBudget,
    free_calories: float = 0.0,
    four_meal_threshold: float = DEFAULT_FOUR_MEAL_THRESHOLD,
) -> list[MealTarget]:
    """Equal per-meal targets for what remains after the free meal.

    Args:
        budget: Daily budget
        free_calories: Calories already reserved for the free meal
        four_meal_threshold: Remaining calories above which 4 meals are planned

    Returns:
        One MealTarget per regular meal
    """
    calories = budget.calories - free_calories
    protein = max(budget.protein - free_calories * FREE_MEAL_PROTEIN_SHARE / 4, 0.0)
    carbs = max(budget.carbs - free_calories * FREE_MEAL_CARB_SHARE / 4, 0.0)
    fat = max(budget.fat - free_calories * FREE_MEAL_FAT_SHARE / 9, 0.0)

    count = meal_count(calories, four_meal_threshold)
    return [
        MealTarget(
            calories=calories / count,
            protein=protein / count,
            carbs=carbs / count,
            fat=fat / count,
        )
        for _ in range(count)
    ]


def eligible_pool(
    foods: Iterable[FoodItem],
    diet: Union[str, DietType] = DietType.ALL,
    min_foods: int = DEFAULT_MIN_FOODS,
) -> list[FoodItem]:
    """Diet-filtered, de-duplicated food pool.

    Raises:
        NoCompatibleFoodsError: If no food matches the diet
        InsufficientVarietyError: If fewer than min_foods distinct foods remain
    """
    diet = parse_diet(diet)
    matches = filter_foods_by_diet(foods, diet)
    if not matches:
        raise NoCompatibleFoodsError(diet.value)

    pool: list[FoodItem] = []
    seen: set[str] = set()
    for food in matches:
        if food.id not in seen:
            seen.add(food.id)
            pool.append(food)

    if len(pool) < min_foods:
        raise InsufficientVarietyError(len(pool), min_foods)
    return pool


def generate_day_plan(
    foods: Iterable[FoodItem],
    budget: DailyBudget,
    diet: Union[str, DietType] = DietType.ALL,
    free_meal_calories: Optional[float] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    tolerance: float = 0.05,
    max_iterations: int = 10,
    min_foods: int = DEFAULT_MIN_FOODS,
    free_meal_max_fraction: float = DEFAULT_FREE_MEAL_MAX_FRACTION,
    four_meal_threshold: float = DEFAULT_FOUR_MEAL_THRESHOLD,
) -> DayPlan:
    """Generate a full day of balanced meals.

    Args:
        foods: Food catalog
        budget: Daily calorie and macro budget
        diet: Diet the foods must satisfy
        free_meal_calories: Calories to reserve for a free meal
        rng: Random source; takes precedence over seed
        seed: Seed for a fresh random source
        tolerance: Allowed relative deviation per meal
        max_iterations: Bound on each meal's correction pass
        min_foods: Minimum distinct foods required after filtering
        free_meal_max_fraction: Cap on the free meal as a share of the day
        four_meal_threshold: Calories above which 4 meals are planned

    Returns:
        DayPlan with regular meals followed by the free meal, if any
    """
    if budget.calories <= 0:
        raise ValueError(f"Daily calorie budget must be positive, got {budget.calories}")

    diet = parse_diet(diet)
    pool = eligible_pool(foods, diet, min_foods)
    rng = rng or random.Random(seed)

    free_calories = cap_free_meal(budget, free_meal_calories, free_meal_max_fraction)
    targets = split_budget(budget, free_calories, four_meal_threshold)

    meals: list[Meal] = []
    for index, target in enumerate(targets):
        meal = build_balanced_meal(
            pool, target, MEAL_NAMES[index], rng,
            tolerance=tolerance, max_iterations=max_iterations,
        )
        meal.id = MEAL_NAMES[index].lower()
        meals.append(meal)

    if free_calories > 0:
        meals.append(Meal.free(free_calories))

    unconverged = sum(1 for m in meals if not m.converged)
    logger.info(
        "Planned %d meals from %d foods (%s diet, %d not converged)",
        len(targets), len(pool), diet.value, unconverged,
    )
    return DayPlan(meals=meals, diet=diet.value, free_meal_calories=free_calories, seed=seed)


def _meal_index(plan: DayPlan, meal: Union[int, str]) -> int:
    if isinstance(meal, int):
        if not 0 <= meal < len(plan.meals):
            raise IndexError(f"Meal index {meal} out of range (plan has {len(plan.meals)} meals)")
        return meal
    for index, candidate in enumerate(plan.meals):
        if candidate.id == meal or candidate.name.lower() == str(meal).lower():
            return index
    raise KeyError(f"No meal named '{meal}' in plan")


def regenerate_meal(
    plan: DayPlan,
    foods: Iterable[FoodItem],
    meal_index: Union[int, str],
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
    tolerance: float = 0.05,
    max_iterations: int = 10,
    min_foods: int = DEFAULT_MIN_FOODS,
) -> DayPlan:
    """Rebuild one meal against its original target.

    Args:
        plan: Existing plan (not modified)
        foods: Food catalog
        meal_index: Position or id/name of the meal to replace
        rng: Random source; takes precedence over seed
        seed: Seed for a fresh random source

    Returns:
        New DayPlan with only that meal replaced

    Raises:
        ValueError: If the selected meal is the free meal
    """
    index = _meal_index(plan, meal_index)
    old = plan.meals[index]
    if old.is_free:
        raise ValueError("The free meal cannot be regenerated")

    pool = eligible_pool(foods, plan.diet, min_foods)
    rng = rng or random.Random(seed)
    meal = build_balanced_meal(
        pool, old.target, old.name, rng,
        tolerance=tolerance, max_iterations=max_iterations,
    )
    meal.id = old.id

    meals = list(plan.meals)
    meals[index] = meal
    logger.info("Regenerated %s", old.name)
    return DayPlan(
        meals=meals,
        diet=plan.diet,
        free_meal_calories=plan.free_meal_calories,
        seed=seed if seed is not None else plan.seed,
    )
