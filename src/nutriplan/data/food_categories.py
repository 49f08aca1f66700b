"""Food category hierarchy and name-based category inference.

Every food has one primary category from a closed set and optional
secondary categories. Categories form a parent-pointer tree (shellfish is
seafood, seafood is meat), so "restrict meat" also restricts shellfish.

Foods loaded without a primary category are migrated once by matching
their name against ordered keyword rules; the first matching rule wins.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional, Union

if TYPE_CHECKING:
    from nutriplan.data.catalog import FoodItem


class FoodCategory(Enum):
    """Closed set of food categories."""

    MEAT = "meat"
    RED_MEAT = "red_meat"
    POULTRY = "poultry"
    FISH = "fish"
    SEAFOOD = "seafood"
    SHELLFISH = "shellfish"
    DAIRY = "dairy"
    EGG = "egg"
    GRAIN = "grain"
    LEGUME = "legume"
    VEGETABLE = "vegetable"
    FRUIT = "fruit"
    NUT = "nut"
    SEED = "seed"
    OIL = "oil"
    SWEETENER = "sweetener"
    HERB = "herb"
    SPICE = "spice"
    PROCESSED_FOOD = "processed_food"
    OTHER = "other"


# Each category points at its parent; roots are absent
CATEGORY_PARENTS: dict[FoodCategory, FoodCategory] = {
    FoodCategory.RED_MEAT: FoodCategory.MEAT,
    FoodCategory.POULTRY: FoodCategory.MEAT,
    FoodCategory.FISH: FoodCategory.MEAT,
    FoodCategory.SEAFOOD: FoodCategory.MEAT,
    FoodCategory.SHELLFISH: FoodCategory.SEAFOOD,
}

CATEGORY_DISPLAY_NAMES: dict[FoodCategory, str] = {
    FoodCategory.MEAT: "Meat",
    FoodCategory.RED_MEAT: "Red Meat",
    FoodCategory.POULTRY: "Poultry",
    FoodCategory.FISH: "Fish",
    FoodCategory.SEAFOOD: "Seafood",
    FoodCategory.SHELLFISH: "Shellfish",
    FoodCategory.DAIRY: "Dairy",
    FoodCategory.EGG: "Eggs",
    FoodCategory.GRAIN: "Grains",
    FoodCategory.LEGUME: "Legumes",
    FoodCategory.VEGETABLE: "Vegetables",
    FoodCategory.FRUIT: "Fruits",
    FoodCategory.NUT: "Nuts",
    FoodCategory.SEED: "Seeds",
    FoodCategory.OIL: "Oils",
    FoodCategory.SWEETENER: "Sweeteners",
    FoodCategory.HERB: "Herbs",
    FoodCategory.SPICE: "Spices",
    FoodCategory.PROCESSED_FOOD: "Processed Foods",
    FoodCategory.OTHER: "Other Foods",
}


def _validate_hierarchy(parents: dict[FoodCategory, FoodCategory]) -> None:
    """Reject unknown categories and cycles in the parent table."""
    for child, parent in parents.items():
        if not isinstance(child, FoodCategory) or not isinstance(parent, FoodCategory):
            raise ValueError(f"Unknown category in hierarchy: {child!r} -> {parent!r}")
        seen = {child}
        current: Optional[FoodCategory] = parent
        while current is not None:
            if current in seen:
                raise ValueError(f"Category hierarchy has a cycle through {child.value}")
            seen.add(current)
            current = parents.get(current)


_validate_hierarchy(CATEGORY_PARENTS)


def parse_category(value: Union[str, FoodCategory]) -> FoodCategory:
    """Parse a category name.

    Accepts snake_case, kebab-case, spaces and camelCase ("redMeat").

    Raises:
        ValueError: If the name is not a known category
    """
    if isinstance(value, FoodCategory):
        return value
    text = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", str(value).strip())
    normalized = text.lower().replace("-", "_").replace(" ", "_")
    try:
        return FoodCategory(normalized)
    except ValueError:
        raise ValueError(f"Unknown food category: {value}") from None


def get_parent_category(category: FoodCategory) -> Optional[FoodCategory]:
    return CATEGORY_PARENTS.get(category)


def get_ancestors(category: FoodCategory) -> list[FoodCategory]:
    """Ancestors of a category, nearest first."""
    ancestors = []
    parent = CATEGORY_PARENTS.get(category)
    while parent is not None:
        ancestors.append(parent)
        parent = CATEGORY_PARENTS.get(parent)
    return ancestors


def is_within(category: FoodCategory, ancestor: FoodCategory) -> bool:
    """True if category is ancestor or one of its descendants."""
    return category == ancestor or ancestor in get_ancestors(category)


def is_within_any(category: FoodCategory, ancestors: Iterable[FoodCategory]) -> bool:
    return any(is_within(category, a) for a in ancestors)


def food_belongs_to_category(food: "FoodItem", category: FoodCategory) -> bool:
    """Check primary and secondary categories through the hierarchy."""
    if food.primary_category is not None and is_within(food.primary_category, category):
        return True
    return any(is_within(c, category) for c in food.secondary_categories)


def category_display_name(category: Union[str, FoodCategory, None]) -> str:
    if category is None:
        return "Other"
    try:
        return CATEGORY_DISPLAY_NAMES[parse_category(category)]
    except ValueError:
        return str(category).replace("_", " ").replace("-", " ").title()


# ============================================================================
# Keyword inference
# ============================================================================


@dataclass(frozen=True)
class CategoryRule:
    """Whole-word keyword rule; exclusions are phrases that veto a match."""

    category: FoodCategory
    keywords: tuple[str, ...]
    exclusions: tuple[str, ...] = ()
    pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        alternatives = "|".join(
            re.escape(kw) for kw in sorted(self.keywords, key=len, reverse=True)
        )
        object.__setattr__(
            self, "pattern", re.compile(rf"\b(?:{alternatives})(?:s|es)?\b")
        )

    def matches(self, name: str) -> bool:
        text = name.lower()
        for phrase in self.exclusions:
            text = text.replace(phrase, " ")
        return self.pattern.search(text) is not None


# Checked in order; the first match is the primary category
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        FoodCategory.RED_MEAT,
        ("beef", "steak", "pork", "lamb", "veal", "bison", "venison", "goat",
         "ham", "bacon", "brisket", "sirloin", "tenderloin", "mutton", "jerky"),
        exclusions=("turkey bacon", "turkey ham", "chicken ham"),
    ),
    CategoryRule(
        FoodCategory.POULTRY,
        ("chicken", "turkey", "duck", "goose", "quail", "poultry"),
    ),
    CategoryRule(
        FoodCategory.FISH,
        ("fish", "salmon", "tuna", "cod", "tilapia", "halibut", "sardine",
         "anchovy", "anchovies", "mackerel", "trout", "haddock", "herring",
         "sea bass", "swordfish", "pollock"),
    ),
    CategoryRule(
        FoodCategory.SHELLFISH,
        ("shrimp", "prawn", "crab", "lobster", "clam", "mussel", "oyster",
         "scallop", "crayfish", "shellfish"),
    ),
    CategoryRule(
        FoodCategory.SEAFOOD,
        ("seafood", "squid", "calamari", "octopus", "caviar", "roe"),
    ),
    CategoryRule(
        FoodCategory.DAIRY,
        ("milk", "cheese", "yogurt", "yoghurt", "cream", "butter", "whey",
         "casein", "kefir", "ricotta", "mozzarella", "cheddar", "parmesan",
         "feta", "ghee"),
        exclusions=("peanut butter", "almond butter", "nut butter", "cashew butter",
                    "almond milk", "soy milk", "oat milk", "coconut milk",
                    "rice milk", "coconut cream", "cocoa butter"),
    ),
    CategoryRule(
        FoodCategory.EGG,
        ("egg", "omelette", "omelet"),
    ),
    CategoryRule(
        FoodCategory.GRAIN,
        ("rice", "oat", "oatmeal", "wheat", "bread", "pasta", "noodle",
         "quinoa", "barley", "bulgur", "couscous", "tortilla", "bagel",
         "cereal", "granola", "corn", "millet", "buckwheat", "spelt", "rye"),
        exclusions=("rice milk", "oat milk"),
    ),
    CategoryRule(
        FoodCategory.LEGUME,
        ("bean", "lentil", "chickpea", "pea", "hummus", "tofu", "tempeh",
         "edamame", "soybean", "dal"),
        exclusions=("green bean", "peanut", "sweet pea"),
    ),
    CategoryRule(
        FoodCategory.VEGETABLE,
        ("broccoli", "spinach", "kale", "lettuce", "cabbage", "carrot",
         "celery", "cucumber", "bell pepper", "tomato", "onion", "garlic",
         "asparagus", "zucchini", "squash", "eggplant", "mushroom",
         "cauliflower", "potato", "sweet potato", "beet", "radish",
         "arugula", "chard", "collard", "green bean", "brussels sprout",
         "bok choy", "seaweed", "vegetable"),
    ),
    CategoryRule(
        FoodCategory.FRUIT,
        ("apple", "banana", "orange", "grape", "berry", "berries",
         "strawberry", "strawberries", "blueberry", "blueberries",
         "raspberry", "raspberries", "mango", "pineapple", "peach", "pear",
         "plum", "cherry", "cherries", "melon", "watermelon", "kiwi",
         "avocado", "lemon", "lime", "olive", "coconut", "date", "fig",
         "fruit"),
        exclusions=("olive oil", "coconut oil", "coconut milk"),
    ),
    CategoryRule(
        FoodCategory.NUT,
        ("almond", "walnut", "cashew", "peanut", "pecan", "pistachio",
         "macadamia", "hazelnut", "nut"),
        exclusions=("nutmeg", "coconut"),
    ),
    CategoryRule(
        FoodCategory.SEED,
        ("chia", "flax", "flaxseed", "sunflower seed", "pumpkin seed",
         "sesame", "hemp", "seed"),
        exclusions=("sesame oil", "sunflower oil"),
    ),
    CategoryRule(
        FoodCategory.OIL,
        ("oil", "lard", "shortening", "margarine"),
    ),
    CategoryRule(
        FoodCategory.SWEETENER,
        ("sugar", "honey", "syrup", "maple syrup", "agave", "molasses",
         "stevia", "sweetener"),
    ),
    CategoryRule(
        FoodCategory.HERB,
        ("basil", "parsley", "cilantro", "mint", "rosemary", "thyme",
         "oregano", "dill", "sage", "herb"),
    ),
    CategoryRule(
        FoodCategory.SPICE,
        ("pepper", "cinnamon", "cumin", "paprika", "turmeric", "ginger",
         "nutmeg", "chili powder", "curry", "salt", "spice"),
        exclusions=("bell pepper",),
    ),
    CategoryRule(
        FoodCategory.PROCESSED_FOOD,
        ("sausage", "hot dog", "salami", "pepperoni", "nugget", "protein bar",
         "bar", "chip", "cracker", "cookie", "candy", "soda", "processed",
         "frozen meal", "deli"),
    ),
)


def infer_primary_category(name: str) -> FoodCategory:
    """Primary category for a food name; OTHER when nothing matches."""
    for rule in CATEGORY_RULES:
        if rule.matches(name):
            return rule.category
    return FoodCategory.OTHER


def infer_secondary_categories(
    name: str,
    primary: Optional[FoodCategory] = None,
) -> list[FoodCategory]:
    """Every other category whose rule matches the name, in rule order."""
    primary = primary or infer_primary_category(name)
    secondary = []
    for rule in CATEGORY_RULES:
        if rule.category != primary and rule.category not in secondary and rule.matches(name):
            secondary.append(rule.category)
    return secondary


def migrate_food(food: "FoodItem") -> "FoodItem":
    """Assign categories to an uncategorized food.

    Foods that already have a primary category are returned as-is.
    """
    if food.primary_category is not None:
        return food
    primary = infer_primary_category(food.name)
    secondary = food.secondary_categories or tuple(
        infer_secondary_categories(food.name, primary)
    )
    return dataclasses.replace(
        food, primary_category=primary, secondary_categories=tuple(secondary)
    )


def migrate_catalog(foods: Iterable["FoodItem"]) -> list["FoodItem"]:
    return [migrate_food(f) for f in foods]
