"""Meal balancing: pick foods and serving sizes that hit a meal target.

Construction runs in phases (protein anchor, carb anchor, vegetable,
fat top-up, calorie boost), each picking from foods not yet in the meal.
A bounded correction pass then nudges servings by at most 0.25 per step
until calories and protein are within tolerance, and a proportional
safety clamp guarantees the result never overshoots.

Servings are a numpy vector; totals are servings @ macro matrix and are
never rounded between iterations.
"""

from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

import numpy as np

from nutriplan.data.catalog import FoodItem
from nutriplan.planner.models import MIN_SERVINGS, Meal, MealFoodEntry, MealTarget

logger = logging.getLogger(__name__)

# Column order of the macro matrix
CALORIES, PROTEIN, CARBS, FAT = range(4)

VEGETABLE_IDS = (
    "broccoli", "spinach", "kale", "bell_peppers",
    "cucumber", "carrots", "zucchini", "tomatoes",
)

PROTEIN_ANCHOR_MIN_PROTEIN = 10.0
PROTEIN_ANCHOR_SERVINGS = (0.5, 2.0)
CARB_ANCHOR_MIN_CARBS = 15.0
CARB_ANCHOR_SERVINGS = (0.5, 1.5)
VEGETABLE_SERVING_CHOICES = (1.0, 1.5)
FAT_TOPUP_THRESHOLD = 0.7
FAT_SOURCE_MIN_FAT = 5.0
FAT_TOPUP_SERVINGS = (0.25, 1.0)
CALORIE_BOOST_THRESHOLD = 0.85
CALORIE_BOOST_MIN_CALORIES = 50.0

CORRECTION_STEP = 0.25


def _clip(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return min(max(value, low), high)


class MealDraft:
    """Foods chosen so far and their serving multipliers."""

    def __init__(self) -> None:
        self.foods: list[FoodItem] = []
        self.servings = np.zeros(0)
        self._matrix = np.zeros((0, 4))

    def __len__(self) -> int:
        return len(self.foods)

    def add(self, food: FoodItem, servings: float) -> None:
        row = np.array([[food.calories, food.protein, food.carbs, food.fat]], dtype=float)
        self.foods.append(food)
        self.servings = np.append(self.servings, max(servings, MIN_SERVINGS))
        self._matrix = np.vstack([self._matrix, row])

    def uses(self, food: FoodItem) -> bool:
        return any(f.id == food.id for f in self.foods)

    def totals(self) -> np.ndarray:
        """[calories, protein, carbs, fat] at the current servings."""
        if not self.foods:
            return np.zeros(4)
        return self.servings @ self._matrix

    def per_serving(self, index: int) -> np.ndarray:
        return self._matrix[index]

    def to_entries(self) -> list[MealFoodEntry]:
        return [
            MealFoodEntry(food, float(s)) for food, s in zip(self.foods, self.servings)
        ]


class ToleranceBand:
    """Lower and upper bounds for calories and protein."""

    def __init__(self, target: MealTarget, tolerance: float):
        self.cal_min = target.calories * (1 - tolerance)
        self.cal_max = target.calories * (1 + tolerance)
        self.protein_min = target.protein * (1 - tolerance)
        self.protein_max = target.protein * (1 + tolerance)

    def protein_ok(self, protein: float) -> bool:
        return self.protein_min <= protein <= self.protein_max

    def calories_ok(self, calories: float) -> bool:
        return self.cal_min <= calories <= self.cal_max

    def contains(self, totals: np.ndarray) -> bool:
        return self.calories_ok(totals[CALORIES]) and self.protein_ok(totals[PROTEIN])


def _unused(pool: Sequence[FoodItem], draft: MealDraft) -> list[FoodItem]:
    return [f for f in pool if not draft.uses(f)]


def _add_protein_anchor(pool, draft, target, rng) -> None:
    candidates = [f for f in _unused(pool, draft) if f.protein > PROTEIN_ANCHOR_MIN_PROTEIN]
    if not candidates:
        return
    count = min(rng.choice((1, 2)), len(candidates))
    share = target.protein / count
    for food in rng.sample(candidates, count):
        draft.add(food, _clip(share / food.protein, PROTEIN_ANCHOR_SERVINGS))


def _add_carb_anchor(pool, draft, target, rng) -> None:
    candidates = [f for f in _unused(pool, draft) if f.carbs > CARB_ANCHOR_MIN_CARBS]
    if not candidates:
        return
    food = rng.choice(candidates)
    draft.add(food, _clip(target.carbs / food.carbs, CARB_ANCHOR_SERVINGS))


def _add_vegetable(pool, draft, rng) -> None:
    candidates = [f for f in _unused(pool, draft) if f.id in VEGETABLE_IDS]
    if not candidates:
        return
    draft.add(rng.choice(candidates), rng.choice(VEGETABLE_SERVING_CHOICES))


def _add_fat_topup(pool, draft, target, rng) -> None:
    current_fat = draft.totals()[FAT]
    if current_fat >= target.fat * FAT_TOPUP_THRESHOLD:
        return
    candidates = [f for f in _unused(pool, draft) if f.fat > FAT_SOURCE_MIN_FAT]
    if not candidates:
        return
    food = rng.choice(candidates)
    draft.add(food, _clip((target.fat - current_fat) / food.fat, FAT_TOPUP_SERVINGS))


def _add_calorie_boost(pool, draft, target, rng) -> None:
    if draft.totals()[CALORIES] >= target.calories * CALORIE_BOOST_THRESHOLD:
        return
    candidates = [
        f for f in _unused(pool, draft) if f.calories > CALORIE_BOOST_MIN_CALORIES
    ]
    if not candidates:
        return
    draft.add(rng.choice(candidates), 1.0)


def _density_order(draft: MealDraft) -> list[int]:
    """Indices sorted by protein density, ascending."""
    return sorted(range(len(draft)), key=lambda i: draft.foods[i].protein_density)


def _increase(draft: MealDraft, order: list[int], column: int, needed: float) -> bool:
    for i in order:
        per_serving = draft.per_serving(i)[column]
        if per_serving > 0:
            draft.servings[i] += min(CORRECTION_STEP, needed / per_serving)
            return True
    return False


def _decrease(draft: MealDraft, order: list[int], column: int, excess: float) -> bool:
    for i in order:
        per_serving = draft.per_serving(i)[column]
        if per_serving > 0 and draft.servings[i] > MIN_SERVINGS:
            step = min(CORRECTION_STEP, excess / per_serving)
            draft.servings[i] = max(MIN_SERVINGS, draft.servings[i] - step)
            return True
    return False


def correct_servings(
    draft: MealDraft,
    target: MealTarget,
    band: ToleranceBand,
    max_iterations: int,
) -> tuple[bool, int]:
    """Nudge servings toward the band, protein first, then calories.

    Returns:
        (converged, iterations used)
    """
    iterations = 0
    for _ in range(max_iterations):
        totals = draft.totals()
        if band.contains(totals):
            return True, iterations
        iterations += 1

        ascending = _density_order(draft)
        calories, protein = totals[CALORIES], totals[PROTEIN]
        if protein < band.protein_min:
            adjusted = _increase(draft, ascending[::-1], PROTEIN, target.protein - protein)
        elif protein > band.protein_max:
            adjusted = _decrease(draft, ascending, PROTEIN, protein - target.protein)
        elif calories < band.cal_min:
            adjusted = _increase(draft, ascending, CALORIES, target.calories - calories)
        else:
            adjusted = _decrease(draft, ascending, CALORIES, calories - target.calories)

        if not adjusted:
            break

    return band.contains(draft.totals()), iterations


def apply_safety_clamp(draft: MealDraft, band: ToleranceBand) -> bool:
    """Shrink all servings proportionally if calories or protein overshoot.

    Returns:
        True if the clamp was applied
    """
    totals = draft.totals()
    calories, protein = totals[CALORIES], totals[PROTEIN]
    if calories <= band.cal_max and protein <= band.protein_max:
        return False

    factor = 1.0
    if calories > band.cal_max:
        factor = min(factor, band.cal_max / calories)
    if protein > band.protein_max:
        factor = min(factor, band.protein_max / protein)
    draft.servings = np.maximum(MIN_SERVINGS, draft.servings * factor)
    return True


def build_balanced_meal(
    pool: Sequence[FoodItem],
    target: MealTarget,
    name: str,
    rng: Optional[random.Random] = None,
    tolerance: float = 0.05,
    max_iterations: int = 10,
) -> Meal:
    """Build one meal from a food pool.

    Args:
        pool: Eligible foods (already diet-filtered)
        target: Meal calorie and macro target
        name: Meal name
        rng: Random source for food selection
        tolerance: Allowed relative deviation for calories and protein
        max_iterations: Bound on the correction pass

    Returns:
        Meal with converged/clamped flags set

    Raises:
        ValueError: If the pool is empty or the calorie target is not positive
    """
    if not pool:
        raise ValueError("Cannot build a meal from an empty food pool")
    if target.calories <= 0:
        raise ValueError(f"Meal calorie target must be positive, got {target.calories}")
    rng = rng or random.Random()

    draft = MealDraft()
    _add_protein_anchor(pool, draft, target, rng)
    _add_carb_anchor(pool, draft, target, rng)
    _add_vegetable(pool, draft, rng)
    _add_fat_topup(pool, draft, target, rng)
    _add_calorie_boost(pool, draft, target, rng)
    if not len(draft):
        draft.add(rng.choice(list(pool)), 1.0)

    band = ToleranceBand(target, tolerance)
    converged, iterations = correct_servings(draft, target, band, max_iterations)
    clamped = apply_safety_clamp(draft, band)

    if not converged:
        totals = draft.totals()
        logger.debug(
            "%s did not converge after %d iterations (%.0f kcal, %.1fg protein; "
            "target %.0f kcal, %.1fg protein)",
            name, iterations, totals[CALORIES], totals[PROTEIN],
            target.calories, target.protein,
        )
    if clamped:
        logger.debug("%s clamped to avoid overshooting its target", name)

    return Meal(
        name=name,
        entries=draft.to_entries(),
        target=target,
        converged=converged,
        clamped=clamped,
        iterations=iterations,
    )
