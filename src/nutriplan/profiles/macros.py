"""Macro distribution model.

Protein is set from lean body mass, fat is a fixed share of calories and
carbohydrates take whatever energy is left.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from nutriplan.errors import InfeasibleMacroError
from nutriplan.profiles.bands import BandTable
from nutriplan.profiles.body_calc import Sex
from nutriplan.profiles.goal_pace import Pace, parse_pace

CALORIES_PER_GRAM_PROTEIN = 4
CALORIES_PER_GRAM_CARBS = 4
CALORIES_PER_GRAM_FAT = 9

# Assumed body fat for protein bands when it is unknown
DEFAULT_BODY_FAT = {
    Sex.MALE: 18.0,
    Sex.FEMALE: 25.0,
}

# Protein g/kg of lean mass, by goal direction and sex
GAIN_PROTEIN_PER_KG: dict[Sex, BandTable] = {
    Sex.MALE: BandTable.above([(20, 2.2), (12, 2.4)], default=2.6),
    Sex.FEMALE: BandTable.above([(28, 2.2), (20, 2.4)], default=2.6),
}
LOSS_PROTEIN_PER_KG: dict[Sex, BandTable] = {
    Sex.MALE: BandTable.above([(25, 1.8), (15, 2.2)], default=2.4),
    Sex.FEMALE: BandTable.above([(32, 1.8), (23, 2.2)], default=2.4),
}
AGGRESSIVE_GAIN_PROTEIN_BONUS = 0.2

GAIN_FAT_FRACTION = 0.30
LOSS_FAT_FRACTION = 0.25


@dataclass
class MacroTargets:
    """Daily macronutrient targets in grams, kept at full precision."""

    protein_g: float
    carbs_g: float
    fat_g: float

    @property
    def calories(self) -> float:
        return macro_calories(self.protein_g, self.carbs_g, self.fat_g)["total"]

    def to_dict(self) -> dict:
        return {
            "protein_g": round(self.protein_g, 1),
            "carbs_g": round(self.carbs_g, 1),
            "fat_g": round(self.fat_g, 1),
        }


def macro_calories(protein_g: float, carbs_g: float, fat_g: float) -> dict[str, float]:
    """Calories contributed by each macro and their total."""
    protein = protein_g * CALORIES_PER_GRAM_PROTEIN
    carbs = carbs_g * CALORIES_PER_GRAM_CARBS
    fat = fat_g * CALORIES_PER_GRAM_FAT
    return {
        "protein": protein,
        "carbs": carbs,
        "fat": fat,
        "total": protein + carbs + fat,
    }


def protein_per_kg_lean_mass(
    body_fat_pct: Optional[float],
    is_gain: bool,
    sex: Sex,
    pace: Union[str, Pace, None] = None,
) -> float:
    """Protein requirement in grams per kg of lean mass."""
    bf = body_fat_pct if body_fat_pct is not None else DEFAULT_BODY_FAT[sex]
    if is_gain:
        ratio = GAIN_PROTEIN_PER_KG[sex].lookup(bf)
        if parse_pace(pace) == Pace.AGGRESSIVE:
            ratio += AGGRESSIVE_GAIN_PROTEIN_BONUS
        return ratio
    return LOSS_PROTEIN_PER_KG[sex].lookup(bf)


def calculate_macros(
    daily_calories: float,
    lean_mass_kg: float,
    body_fat_pct: Optional[float],
    is_gain: bool,
    sex: Sex,
    pace: Union[str, Pace, None] = None,
) -> MacroTargets:
    """Split a daily calorie target into protein, carbs and fat.

    Args:
        daily_calories: Daily calorie target
        lean_mass_kg: Lean body mass in kg
        body_fat_pct: Body fat percentage, if known
        is_gain: True for a weight gain goal
        sex: Biological sex
        pace: Goal pace (aggressive gains get extra protein)

    Returns:
        MacroTargets in grams

    Raises:
        InfeasibleMacroError: If protein and fat leave no room for carbs
    """
    protein_g = lean_mass_kg * protein_per_kg_lean_mass(body_fat_pct, is_gain, sex, pace)
    fat_fraction = GAIN_FAT_FRACTION if is_gain else LOSS_FAT_FRACTION
    fat_g = daily_calories * fat_fraction / CALORIES_PER_GRAM_FAT

    carb_calories = (
        daily_calories
        - protein_g * CALORIES_PER_GRAM_PROTEIN
        - fat_g * CALORIES_PER_GRAM_FAT
    )
    carbs_g = carb_calories / CALORIES_PER_GRAM_CARBS
    if carbs_g < 0:
        raise InfeasibleMacroError(daily_calories, protein_g, carbs_g, fat_g)

    return MacroTargets(protein_g=protein_g, carbs_g=carbs_g, fat_g=fat_g)
