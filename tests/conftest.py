"""Pytest fixtures for nutriplan tests."""

from __future__ import annotations

import random

import pytest

from nutriplan.data.catalog import FoodItem, load_catalog
from nutriplan.profiles.body_calc import BodyProfile


def make_food(
    id: str,
    protein: float = 0.0,
    carbs: float = 0.0,
    fat: float = 0.0,
    calories: float | None = None,
    name: str | None = None,
    primary_category=None,
    secondary_categories=(),
    serving_grams: float = 100.0,
) -> FoodItem:
    """Build a FoodItem with calories derived from macros when omitted."""
    if calories is None:
        calories = protein * 4 + carbs * 4 + fat * 9
    return FoodItem(
        id=id,
        name=name or id.replace("_", " ").title(),
        protein=protein,
        carbs=carbs,
        fat=fat,
        calories=calories,
        serving_grams=serving_grams,
        primary_category=primary_category,
        secondary_categories=tuple(secondary_categories),
    )


@pytest.fixture(scope="session")
def catalog():
    """The bundled food catalog."""
    return load_catalog()


@pytest.fixture
def sample_foods():
    """A small mixed pool covering every balancing phase."""
    return [
        make_food("chicken_breast", 31, 0, 3.6, 165, primary_category="poultry"),
        make_food("salmon", 25, 0, 13, 208, primary_category="fish"),
        make_food("eggs", 12.6, 1.1, 9.5, 143, primary_category="egg"),
        make_food("greek_yogurt", 17, 6, 0.7, 100, primary_category="dairy"),
        make_food("brown_rice", 5, 45, 1.8, 216, primary_category="grain"),
        make_food("oats", 5, 27, 2.8, 150, primary_category="grain"),
        make_food("lentils", 18, 40, 0.8, 230, primary_category="legume"),
        make_food("broccoli", 2.6, 6, 0.3, 31, primary_category="vegetable"),
        make_food("spinach", 1.7, 2.2, 0.2, 14, primary_category="vegetable"),
        make_food("almonds", 6, 6, 14, 164, primary_category="nut"),
        make_food("olive_oil", 0, 0, 13.5, 119, primary_category="oil"),
        make_food("banana", 1.3, 27, 0.4, 105, primary_category="fruit"),
    ]


@pytest.fixture
def rng():
    """Deterministic random source."""
    return random.Random(42)


@pytest.fixture
def male_profile():
    """Metric male profile with known body fat."""
    return BodyProfile(
        age=30,
        sex="male",
        weight=80.0,
        height=180.0,
        body_fat_pct=15.0,
        activity_level="moderate",
    )


@pytest.fixture
def female_profile():
    """Metric female profile without body fat."""
    return BodyProfile(
        age=35,
        sex="female",
        weight=65.0,
        height=165.0,
        activity_level="light",
    )


@pytest.fixture
def food_factory():
    """Factory for ad-hoc foods."""
    return make_food
