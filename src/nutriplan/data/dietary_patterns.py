"""Dietary pattern rules for category-based food filtering.

Pre-defined dietary patterns (vegetarian, vegan, pescatarian, keto, paleo,
mediterranean, regional cuisines and macro-focused styles) declare which
food categories they allow and restrict, plus an optional special-case
predicate for what categories cannot express.

Usage:
    from nutriplan.data.dietary_patterns import filter_foods_by_diet
    vegan_foods = filter_foods_by_diet(catalog, "vegan")

Compatibility is evaluated in a fixed order:
    1. Primary category restricted -> incompatible
    2. Primary category allowed?
    3. Any secondary category restricted -> incompatible
    4. Primary not allowed but a secondary explicitly allowed -> allowed
    5. Special predicate: True overrides to compatible, False vetoes,
       None keeps the category verdict
Category checks walk the hierarchy, so restricting MEAT also restricts
shellfish.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from nutriplan.data.catalog import FoodItem
from nutriplan.data.food_categories import FoodCategory, is_within, is_within_any

C = FoodCategory


class DietType(Enum):
    """Closed set of supported diets."""

    ALL = "all"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    PESCATARIAN = "pescatarian"
    MEDITERRANEAN = "mediterranean"
    PALEO = "paleo"
    KETO = "keto"
    JAPANESE = "japanese"
    KOREAN = "korean"
    MEXICAN = "mexican"
    ITALIAN = "italian"
    LOW_CARB = "low_carb"
    HIGH_PROTEIN = "high_protein"
    CARNIVORE = "carnivore"
    WHOLE30 = "whole30"
    ATKINS = "atkins"
    ZONE = "zone"


# Returns True (admit), False (reject) or None (no opinion)
SpecialRule = Callable[[FoodItem], Optional[bool]]


@dataclass(frozen=True)
class DietRule:
    """Category allow/restrict lists for one diet.

    Attributes:
        diet: Diet this rule describes
        description: Human-readable description
        allowed: Primary categories admitted
        restricted: Primary categories rejected outright
        secondary_allowed: Secondary categories that admit an otherwise
            disallowed primary
        secondary_restricted: Secondary categories that reject a food
        special: Optional final predicate
        uses_macros: Whether the predicate reads nutrient values
    """

    diet: DietType
    description: str
    allowed: frozenset[FoodCategory]
    restricted: frozenset[FoodCategory] = frozenset()
    secondary_allowed: frozenset[FoodCategory] = frozenset()
    secondary_restricted: frozenset[FoodCategory] = frozenset()
    special: Optional[SpecialRule] = field(default=None, compare=False)
    uses_macros: bool = False


def _name_has(food: FoodItem, *words: str) -> bool:
    name = food.name.lower()
    return any(word in name for word in words)


# ============================================================================
# Special-case predicates
# ============================================================================

KETO_VEGETABLES = (
    "spinach", "kale", "broccoli", "cauliflower", "asparagus", "lettuce",
    "cabbage", "cucumber", "zucchini", "avocado", "bell pepper", "mushroom",
)
KETO_FRUITS = ("avocado", "olive", "coconut", "berry", "berries", "lemon", "lime")

KETO_MAX_CARBS_PER_100G = 10.0
ATKINS_MAX_CARBS = 10.0
LOW_CARB_MAX_CARBS = 15.0
HIGH_PROTEIN_MIN_PROTEIN = 5.0


def _vegan_special(food: FoodItem) -> Optional[bool]:
    if _name_has(food, "honey"):
        return False
    return None


def _keto_special(food: FoodItem) -> Optional[bool]:
    if food.carbs_per_100g > KETO_MAX_CARBS_PER_100G:
        return False
    if food.primary_category == C.VEGETABLE:
        return _name_has(food, *KETO_VEGETABLES)
    if food.primary_category == C.FRUIT:
        return _name_has(food, *KETO_FRUITS)
    return None


def _mediterranean_special(food: FoodItem) -> Optional[bool]:
    if food.primary_category is not None and is_within(food.primary_category, C.RED_MEAT):
        return not _name_has(food, "processed")
    return None


def _paleo_special(food: FoodItem) -> Optional[bool]:
    if food.primary_category == C.SWEETENER:
        return _name_has(food, "honey")
    return None


def _high_protein_special(food: FoodItem) -> Optional[bool]:
    if food.protein < HIGH_PROTEIN_MIN_PROTEIN:
        return False
    return None


def _max_carbs(limit: float) -> SpecialRule:
    def check(food: FoodItem) -> Optional[bool]:
        if food.carbs > limit:
            return False
        return None
    return check


# ============================================================================
# Diet definitions
# ============================================================================

_PLANT_BASE = {C.GRAIN, C.LEGUME, C.VEGETABLE, C.FRUIT, C.NUT, C.SEED, C.OIL,
               C.HERB, C.SPICE, C.OTHER}

# Processed foods are never allowed as a primary here; they get in only
# through a known-safe secondary category.
_PLANT_SECONDARY = frozenset({C.GRAIN, C.LEGUME, C.VEGETABLE, C.FRUIT, C.NUT, C.SEED})

VEGETARIAN = DietRule(
    diet=DietType.VEGETARIAN,
    description="No meat or fish, includes eggs and dairy",
    allowed=frozenset(_PLANT_BASE | {C.DAIRY, C.EGG, C.SWEETENER}),
    restricted=frozenset({C.MEAT}),
    secondary_allowed=_PLANT_SECONDARY | {C.DAIRY, C.EGG},
    secondary_restricted=frozenset({C.MEAT}),
)

# Vegan must stay a subset of vegetarian: allowed sets are narrower,
# restricted sets are wider and the predicate only vetoes.
VEGAN = DietRule(
    diet=DietType.VEGAN,
    description="Plant-based only, no animal products or honey",
    allowed=frozenset(_PLANT_BASE | {C.SWEETENER}),
    restricted=frozenset({C.MEAT, C.DAIRY, C.EGG}),
    secondary_allowed=_PLANT_SECONDARY,
    secondary_restricted=frozenset({C.MEAT, C.DAIRY, C.EGG}),
    special=_vegan_special,
)

PESCATARIAN = DietRule(
    diet=DietType.PESCATARIAN,
    description="Fish and seafood plus vegetarian foods (no other meat)",
    allowed=frozenset(_PLANT_BASE | {C.FISH, C.SEAFOOD, C.DAIRY, C.EGG, C.SWEETENER}),
    restricted=frozenset({C.RED_MEAT, C.POULTRY}),
    secondary_allowed=_PLANT_SECONDARY | {C.FISH, C.SEAFOOD, C.DAIRY, C.EGG},
    secondary_restricted=frozenset({C.RED_MEAT, C.POULTRY}),
)

MEDITERRANEAN = DietRule(
    diet=DietType.MEDITERRANEAN,
    description="Fish, olive oil, vegetables, whole grains; limited red meat",
    allowed=frozenset(_PLANT_BASE | {C.FISH, C.SEAFOOD, C.POULTRY, C.EGG, C.DAIRY}),
    secondary_allowed=frozenset({C.RED_MEAT}),
    secondary_restricted=frozenset({C.PROCESSED_FOOD, C.SWEETENER}),
    special=_mediterranean_special,
)

PALEO = DietRule(
    diet=DietType.PALEO,
    description="Meat, fish, vegetables, fruits, nuts (no grains, legumes or dairy)",
    allowed=frozenset({C.MEAT, C.EGG, C.VEGETABLE, C.FRUIT, C.NUT, C.SEED, C.OIL,
                       C.HERB, C.SPICE, C.OTHER}),
    restricted=frozenset({C.DAIRY, C.GRAIN, C.LEGUME, C.PROCESSED_FOOD}),
    secondary_restricted=frozenset({C.SWEETENER}),
    special=_paleo_special,
)

KETO = DietRule(
    diet=DietType.KETO,
    description="Very low carbohydrate, high fat",
    allowed=frozenset({C.MEAT, C.DAIRY, C.EGG, C.NUT, C.SEED, C.OIL, C.HERB,
                       C.SPICE, C.OTHER}),
    restricted=frozenset({C.GRAIN, C.LEGUME, C.SWEETENER}),
    secondary_allowed=frozenset({C.VEGETABLE, C.FRUIT}),
    secondary_restricted=frozenset({C.PROCESSED_FOOD}),
    special=_keto_special,
    uses_macros=True,
)

JAPANESE = DietRule(
    diet=DietType.JAPANESE,
    description="Japanese cuisine: fish, rice, soy, vegetables",
    allowed=frozenset(_PLANT_BASE | {C.MEAT, C.EGG}),
)

KOREAN = DietRule(
    diet=DietType.KOREAN,
    description="Korean cuisine: rice, fermented vegetables, meat and fish",
    allowed=frozenset(_PLANT_BASE | {C.MEAT, C.EGG}),
)

MEXICAN = DietRule(
    diet=DietType.MEXICAN,
    description="Mexican cuisine: beans, corn, meat, vegetables",
    allowed=frozenset({C.MEAT, C.VEGETABLE, C.GRAIN, C.LEGUME, C.FRUIT, C.DAIRY,
                       C.EGG, C.OIL, C.HERB, C.SPICE, C.OTHER}),
    restricted=frozenset({C.PROCESSED_FOOD}),
)

ITALIAN = DietRule(
    diet=DietType.ITALIAN,
    description="Italian cuisine: pasta, olive oil, cheese, vegetables",
    allowed=frozenset({C.MEAT, C.VEGETABLE, C.GRAIN, C.FRUIT, C.DAIRY, C.EGG,
                       C.LEGUME, C.OIL, C.HERB, C.SPICE, C.OTHER}),
    restricted=frozenset({C.PROCESSED_FOOD}),
)

LOW_CARB = DietRule(
    diet=DietType.LOW_CARB,
    description="Reduced carbohydrate: protein, fats and non-starchy vegetables",
    allowed=frozenset({C.MEAT, C.EGG, C.DAIRY, C.NUT, C.SEED, C.OIL, C.VEGETABLE,
                       C.HERB, C.SPICE}),
    restricted=frozenset({C.GRAIN, C.LEGUME, C.FRUIT, C.SWEETENER, C.PROCESSED_FOOD}),
    special=_max_carbs(LOW_CARB_MAX_CARBS),
    uses_macros=True,
)

HIGH_PROTEIN = DietRule(
    diet=DietType.HIGH_PROTEIN,
    description="Protein-dense foods only",
    allowed=frozenset({C.MEAT, C.EGG, C.DAIRY, C.LEGUME, C.NUT, C.SEED}),
    restricted=frozenset({C.OIL, C.SWEETENER, C.PROCESSED_FOOD}),
    special=_high_protein_special,
    uses_macros=True,
)

CARNIVORE = DietRule(
    diet=DietType.CARNIVORE,
    description="Animal products only",
    allowed=frozenset({C.MEAT, C.EGG, C.DAIRY}),
    restricted=frozenset({C.GRAIN, C.VEGETABLE, C.FRUIT, C.LEGUME, C.NUT, C.SEED,
                          C.OIL, C.HERB, C.SPICE, C.SWEETENER, C.PROCESSED_FOOD}),
)

WHOLE30 = DietRule(
    diet=DietType.WHOLE30,
    description="Whole foods only: no sugar, grains, legumes or dairy",
    allowed=frozenset({C.MEAT, C.EGG, C.VEGETABLE, C.FRUIT, C.NUT, C.SEED, C.OIL,
                       C.HERB, C.SPICE}),
    restricted=frozenset({C.GRAIN, C.DAIRY, C.LEGUME, C.SWEETENER, C.PROCESSED_FOOD}),
)

ATKINS = DietRule(
    diet=DietType.ATKINS,
    description="Atkins-style carbohydrate restriction",
    allowed=frozenset({C.MEAT, C.EGG, C.DAIRY, C.NUT, C.SEED, C.OIL, C.VEGETABLE,
                       C.HERB, C.SPICE}),
    restricted=frozenset({C.GRAIN, C.LEGUME, C.FRUIT, C.SWEETENER, C.PROCESSED_FOOD}),
    special=_max_carbs(ATKINS_MAX_CARBS),
    uses_macros=True,
)

ZONE = DietRule(
    diet=DietType.ZONE,
    description="Balanced protein, carbs and fat at every meal",
    allowed=frozenset({C.MEAT, C.EGG, C.DAIRY, C.VEGETABLE, C.FRUIT, C.LEGUME,
                       C.NUT, C.SEED, C.OIL, C.HERB, C.SPICE}),
    restricted=frozenset({C.GRAIN, C.SWEETENER, C.PROCESSED_FOOD}),
)


# ============================================================================
# Rule registry and access functions
# ============================================================================

DIET_RULES: dict[DietType, DietRule] = {
    rule.diet: rule
    for rule in (
        VEGETARIAN, VEGAN, PESCATARIAN, MEDITERRANEAN, PALEO, KETO, JAPANESE,
        KOREAN, MEXICAN, ITALIAN, LOW_CARB, HIGH_PROTEIN, CARNIVORE, WHOLE30,
        ATKINS, ZONE,
    )
}


def parse_diet(name: Union[str, DietType]) -> DietType:
    """Parse a diet name (case-insensitive, hyphens and underscores equivalent).

    Raises:
        ValueError: If the name is not a known diet
    """
    if isinstance(name, DietType):
        return name
    normalized = str(name).strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return DietType(normalized)
    except ValueError:
        raise ValueError(f"Unknown diet: {name}") from None


def get_diet_rule(name: Union[str, DietType]) -> Optional[DietRule]:
    """Get the rule for a diet.

    Returns:
        DietRule if found, None for unknown names and for "all"
    """
    try:
        diet = parse_diet(name)
    except ValueError:
        return None
    return DIET_RULES.get(diet)


def list_diets() -> list[dict]:
    """List all diets with their descriptions."""
    diets = [{"name": DietType.ALL.value, "description": "Every food"}]
    diets.extend(
        {"name": rule.diet.value, "description": rule.description}
        for rule in DIET_RULES.values()
    )
    return diets


def is_food_compatible(food: FoodItem, diet: Union[str, DietType]) -> bool:
    """Check whether a food satisfies a diet.

    Args:
        food: Categorized food item
        diet: Diet name or DietType

    Returns:
        True if the food is admissible for the diet
    """
    diet = parse_diet(diet)
    if diet == DietType.ALL:
        return True

    rule = DIET_RULES[diet]
    primary = food.primary_category or C.OTHER

    if is_within_any(primary, rule.restricted):
        return False

    allowed = is_within_any(primary, rule.allowed)

    secondaries = food.secondary_categories
    if any(is_within_any(c, rule.secondary_restricted) for c in secondaries):
        return False

    if not allowed and any(is_within_any(c, rule.secondary_allowed) for c in secondaries):
        allowed = True

    if rule.special is not None:
        verdict = rule.special(food)
        if verdict is not None:
            return verdict

    return allowed


def filter_foods_by_diet(
    foods: Iterable[FoodItem],
    diet: Union[str, DietType],
) -> list[FoodItem]:
    """Foods admissible for a diet; empty when none qualify."""
    diet = parse_diet(diet)
    if diet == DietType.ALL:
        return list(foods)
    return [f for f in foods if is_food_compatible(f, diet)]


def get_compatible_diets(food: FoodItem, category_only: bool = False) -> list[DietType]:
    """Every diet the food satisfies, starting with ALL.

    Args:
        food: Categorized food item
        category_only: Skip diets whose rules read macros, for foods
            whose nutrient values are unknown
    """
    diets = [DietType.ALL]
    diets.extend(
        d for d, rule in DIET_RULES.items()
        if not (category_only and rule.uses_macros) and is_food_compatible(food, d)
    )
    return diets


def tag_food_with_diets(food: FoodItem) -> FoodItem:
    """Copy of the food with diet_tags set from its compatible diets."""
    tags = tuple(d.value for d in get_compatible_diets(food) if d != DietType.ALL)
    return replace(food, diet_tags=tags)


def diet_food_counts(foods: Iterable[FoodItem]) -> dict[DietType, int]:
    """Number of compatible foods per diet, in DietType order."""
    foods = list(foods)
    counts = {DietType.ALL: len(foods)}
    for diet in DIET_RULES:
        counts[diet] = sum(1 for f in foods if is_food_compatible(f, diet))
    return counts


def available_diets(foods: Iterable[FoodItem]) -> list[DietType]:
    """Diets with at least one compatible food in the catalog."""
    return [diet for diet, count in diet_food_counts(foods).items() if count > 0]
