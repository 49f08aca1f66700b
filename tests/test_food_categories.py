"""Tests for the food category hierarchy and keyword inference."""

from __future__ import annotations

import pytest

from nutriplan.data.food_categories import (
    CATEGORY_DISPLAY_NAMES,
    FoodCategory,
    _validate_hierarchy,
    category_display_name,
    food_belongs_to_category,
    get_ancestors,
    get_parent_category,
    infer_primary_category,
    infer_secondary_categories,
    is_within,
    migrate_catalog,
    migrate_food,
    parse_category,
)


class TestHierarchy:
    """Tests for parent relationships."""

    def test_ancestors_nearest_first(self) -> None:
        assert get_ancestors(FoodCategory.SHELLFISH) == [FoodCategory.SEAFOOD, FoodCategory.MEAT]
        assert get_ancestors(FoodCategory.MEAT) == []

    def test_parent(self) -> None:
        assert get_parent_category(FoodCategory.POULTRY) == FoodCategory.MEAT
        assert get_parent_category(FoodCategory.DAIRY) is None

    def test_is_within(self) -> None:
        assert is_within(FoodCategory.SHELLFISH, FoodCategory.MEAT)
        assert is_within(FoodCategory.MEAT, FoodCategory.MEAT)
        assert not is_within(FoodCategory.MEAT, FoodCategory.SHELLFISH)
        assert not is_within(FoodCategory.FISH, FoodCategory.SEAFOOD)

    def test_cycle_rejected(self) -> None:
        with pytest.raises(ValueError, match="cycle"):
            _validate_hierarchy({
                FoodCategory.FISH: FoodCategory.SEAFOOD,
                FoodCategory.SEAFOOD: FoodCategory.FISH,
            })

    def test_every_category_has_display_name(self) -> None:
        assert set(CATEGORY_DISPLAY_NAMES) == set(FoodCategory)


class TestParseCategory:
    """Tests for category name parsing."""

    @pytest.mark.parametrize("value", ["red_meat", "redMeat", "red-meat", "Red Meat"])
    def test_spellings(self, value: str) -> None:
        assert parse_category(value) == FoodCategory.RED_MEAT

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            parse_category("mystery")

    def test_display_names(self) -> None:
        assert category_display_name(FoodCategory.PROCESSED_FOOD) == "Processed Foods"
        assert category_display_name("egg") == "Eggs"
        assert category_display_name(None) == "Other"
        assert category_display_name("street-food") == "Street Food"


class TestInference:
    """Tests for name-based category inference."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Grilled Chicken Breast", FoodCategory.POULTRY),
            ("Beef Sirloin", FoodCategory.RED_MEAT),
            ("Turkey Bacon", FoodCategory.POULTRY),
            ("Atlantic Salmon", FoodCategory.FISH),
            ("Shrimp Cocktail", FoodCategory.SHELLFISH),
            ("Fried Calamari", FoodCategory.SEAFOOD),
            ("Part-Skim Mozzarella Cheese", FoodCategory.DAIRY),
            ("Scrambled Eggs", FoodCategory.EGG),
            ("Steel Cut Oats", FoodCategory.GRAIN),
            ("Edamame", FoodCategory.LEGUME),
            ("Eggplant", FoodCategory.VEGETABLE),
            ("Bell Pepper", FoodCategory.VEGETABLE),
            ("Pineapple", FoodCategory.FRUIT),
            ("Peanut Butter", FoodCategory.NUT),
            ("Almond Milk", FoodCategory.NUT),
            ("Chia Seeds", FoodCategory.SEED),
            ("Extra Virgin Olive Oil", FoodCategory.OIL),
            ("Raw Honey", FoodCategory.SWEETENER),
            ("Fresh Basil", FoodCategory.HERB),
            ("Ground Cinnamon", FoodCategory.SPICE),
            ("Potato Chips", FoodCategory.VEGETABLE),
            ("Granola Bar", FoodCategory.GRAIN),
            ("Xylophone", FoodCategory.OTHER),
        ],
    )
    def test_primary(self, name: str, expected: FoodCategory) -> None:
        assert infer_primary_category(name) == expected

    def test_whole_word_matching(self) -> None:
        """Keywords inside longer words do not match."""
        assert infer_primary_category("Hamburger Bun") != FoodCategory.RED_MEAT
        assert infer_primary_category("Peach") != FoodCategory.LEGUME

    def test_secondary_categories(self) -> None:
        secondary = infer_secondary_categories("Shrimp Fried Rice")
        assert FoodCategory.GRAIN in secondary
        assert FoodCategory.SHELLFISH not in secondary

    def test_secondary_for_processed_meat(self) -> None:
        assert infer_secondary_categories("Chicken Sausage") == [FoodCategory.PROCESSED_FOOD]


class TestMigration:
    """Tests for assigning categories to uncategorized foods."""

    def test_categorized_food_unchanged(self, food_factory) -> None:
        food = food_factory("steak", 25, 0, 15, primary_category="red_meat")
        assert migrate_food(food) is food

    def test_uncategorized_food_migrated(self, food_factory) -> None:
        food = food_factory("sausage", 14, 3, 9, name="Chicken Sausage")
        migrated = migrate_food(food)
        assert migrated.primary_category == FoodCategory.POULTRY
        assert migrated.secondary_categories == (FoodCategory.PROCESSED_FOOD,)
        assert food.primary_category is None

    def test_existing_secondaries_kept(self, food_factory) -> None:
        food = food_factory(
            "bar", 20, 22, 7, name="Chicken Protein Bar", secondary_categories=["dairy"]
        )
        assert migrate_food(food).secondary_categories == (FoodCategory.DAIRY,)

    def test_migrate_catalog(self, food_factory) -> None:
        foods = [food_factory("a", name="Tofu"), food_factory("b", name="Mystery Mix")]
        migrated = migrate_catalog(foods)
        assert [f.primary_category for f in migrated] == [FoodCategory.LEGUME, FoodCategory.OTHER]

    def test_belongs_through_secondary(self, food_factory) -> None:
        food = food_factory(
            "broth", 2, 1, 0.5, primary_category="other", secondary_categories=["poultry"]
        )
        assert food_belongs_to_category(food, FoodCategory.MEAT)
        assert not food_belongs_to_category(food, FoodCategory.FISH)
