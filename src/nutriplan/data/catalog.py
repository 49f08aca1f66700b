"""Food catalog model and loaders.

Catalogs are YAML, JSON or CSV files of per-serving food records:

    - id: chicken_breast
      name: Chicken Breast
      protein: 31
      carbs: 0
      fat: 3.6
      calories: 165
      serving_label: 100 g
      serving_grams: 100
      primary_category: poultry

CSV catalogs use the same column names; multi-valued columns
(secondary_categories, diet_tags) are separated by ";".
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import pandas as pd
import yaml

from nutriplan.data.food_categories import FoodCategory, migrate_catalog, parse_category

logger = logging.getLogger(__name__)

BUNDLED_CATALOG = Path(__file__).parent / "foods.yaml"

MULTI_VALUE_SEPARATOR = ";"
MULTI_VALUE_FIELDS = ("secondary_categories", "diet_tags")

# Alternate field names accepted in catalog files
FIELD_ALIASES = {
    "fats": "fat",
    "calories_per_serving": "calories",
    "caloriesPerServing": "calories",
    "serving_size": "serving_label",
    "servingSize": "serving_label",
    "serving_size_grams": "serving_grams",
    "servingSizeGrams": "serving_grams",
    "primaryCategory": "primary_category",
    "secondaryCategories": "secondary_categories",
    "diets": "diet_tags",
}


@dataclass(frozen=True)
class FoodItem:
    """A food with per-serving macros.

    Attributes:
        id: Stable identifier
        name: Display name
        protein: Protein grams per serving
        carbs: Carbohydrate grams per serving
        fat: Fat grams per serving
        calories: Calories per serving
        serving_label: Human serving descriptor (e.g. "1 cup")
        serving_grams: Gram weight of one serving
        primary_category: Primary category; None until migrated
        secondary_categories: Additional categories for edge cases
        diet_tags: Names of diets the food is tagged with
        fiber: Fiber grams per serving
    """

    id: str
    name: str
    protein: float
    carbs: float
    fat: float
    calories: float
    serving_label: str = "1 serving"
    serving_grams: float = 100.0
    primary_category: Optional[FoodCategory] = None
    secondary_categories: tuple[FoodCategory, ...] = ()
    diet_tags: tuple[str, ...] = ()
    fiber: float = 0.0

    def __post_init__(self) -> None:
        if self.primary_category is not None and not isinstance(
            self.primary_category, FoodCategory
        ):
            object.__setattr__(
                self, "primary_category", parse_category(self.primary_category)
            )
        object.__setattr__(
            self,
            "secondary_categories",
            tuple(parse_category(c) for c in self.secondary_categories),
        )
        object.__setattr__(self, "diet_tags", tuple(self.diet_tags))

    @property
    def carbs_per_100g(self) -> float:
        if self.serving_grams <= 0:
            return self.carbs
        return self.carbs / self.serving_grams * 100

    @property
    def protein_density(self) -> float:
        """Grams of protein per calorie."""
        if self.calories <= 0:
            return 0.0
        return self.protein / self.calories

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
            "calories": self.calories,
            "serving_label": self.serving_label,
            "serving_grams": self.serving_grams,
            "primary_category": (
                self.primary_category.value if self.primary_category else None
            ),
            "secondary_categories": [c.value for c in self.secondary_categories],
            "diet_tags": list(self.diet_tags),
            "fiber": self.fiber,
        }


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _as_list(value: Any) -> list[str]:
    if _is_missing(value):
        return []
    if isinstance(value, str):
        return [v.strip() for v in value.split(MULTI_VALUE_SEPARATOR) if v.strip()]
    return [str(v) for v in value]


def _as_float(value: Any, default: float = 0.0) -> float:
    if _is_missing(value):
        return default
    return float(value)


def food_from_record(record: dict) -> Optional[FoodItem]:
    """Build a FoodItem from a raw record.

    Returns:
        FoodItem, or None when the record lacks an id or a name
    """
    data = {FIELD_ALIASES.get(k, k): v for k, v in record.items()}
    if _is_missing(data.get("id")) or _is_missing(data.get("name")):
        return None

    protein = _as_float(data.get("protein"))
    carbs = _as_float(data.get("carbs"))
    fat = _as_float(data.get("fat"))
    calories = data.get("calories")
    if _is_missing(calories):
        calories = protein * 4 + carbs * 4 + fat * 9

    primary = data.get("primary_category")
    serving_label = data.get("serving_label")
    return FoodItem(
        id=str(data["id"]).strip(),
        name=str(data["name"]).strip(),
        protein=protein,
        carbs=carbs,
        fat=fat,
        calories=float(calories),
        serving_label="1 serving" if _is_missing(serving_label) else str(serving_label),
        serving_grams=_as_float(data.get("serving_grams"), 100.0),
        primary_category=None if _is_missing(primary) else parse_category(primary),
        secondary_categories=tuple(
            parse_category(c) for c in _as_list(data.get("secondary_categories"))
        ),
        diet_tags=tuple(_as_list(data.get("diet_tags"))),
        fiber=_as_float(data.get("fiber")),
    )


def _records_from_document(data: Any, path: Path) -> list[dict]:
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("foods", [])
    if not isinstance(data, list):
        raise ValueError(f"Catalog {path} must be a list of foods or a 'foods' mapping")
    return [r for r in data if isinstance(r, dict)]


def _read_csv(path: Path) -> list[dict]:
    df = pd.read_csv(path, dtype={"id": str})
    records = []
    for _, row in df.iterrows():
        records.append({k: (None if _is_missing(v) else v) for k, v in row.items()})
    return records


def read_catalog_records(path: Path) -> list[dict]:
    """Read raw food records from a YAML, JSON or CSV file.

    Raises:
        ValueError: If the file extension is not supported
    """
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        with open(path) as f:
            return _records_from_document(yaml.safe_load(f), path)
    if suffix == ".json":
        with open(path) as f:
            return _records_from_document(json.load(f), path)
    if suffix == ".csv":
        return _read_csv(path)
    raise ValueError(f"Unsupported catalog format: {path.suffix} (use .yaml, .json or .csv)")


def build_catalog(records: Iterable[dict]) -> tuple[FoodItem, ...]:
    """Convert raw records into a migrated, read-only catalog."""
    foods = []
    skipped = 0
    for record in records:
        food = food_from_record(record)
        if food is None:
            skipped += 1
            continue
        foods.append(food)

    uncategorized = sum(1 for f in foods if f.primary_category is None)
    catalog = tuple(migrate_catalog(foods))
    if skipped:
        logger.warning("Skipped %d catalog records without id or name", skipped)
    logger.info(
        "Loaded %d foods (%d categorized by name)", len(catalog), uncategorized
    )
    return catalog


def load_catalog(path: Union[str, Path, None] = None) -> tuple[FoodItem, ...]:
    """Load a food catalog, defaulting to the bundled one.

    Args:
        path: Catalog file; None loads the bundled foods.yaml

    Returns:
        Tuple of FoodItem with primary categories assigned
    """
    path = Path(path).expanduser() if path is not None else BUNDLED_CATALOG
    return build_catalog(read_catalog_records(path))
