"""Body fat projections for body composition goals."""

from __future__ import annotations

from typing import Union

from nutriplan.profiles.goal_pace import Pace, parse_pace

# Share of weight change that is lean mass
LEAN_SHARE_OF_GAIN = {
    Pace.CONSERVATIVE: 0.60,
    Pace.MODERATE: 0.45,
    Pace.AGGRESSIVE: 0.25,
}
LEAN_SHARE_OF_LOSS = {
    Pace.CONSERVATIVE: 0.05,
    Pace.MODERATE: 0.12,
    Pace.AGGRESSIVE: 0.25,
}


def weight_for_target_body_fat(
    weight: float,
    body_fat_pct: float,
    target_body_fat_pct: float,
) -> float:
    """Weight at which the current lean mass gives the target body fat.

    Args:
        weight: Current weight (any unit)
        body_fat_pct: Current body fat percentage
        target_body_fat_pct: Desired body fat percentage

    Returns:
        Target weight in the same unit as weight
    """
    if not 0 <= target_body_fat_pct < 100:
        raise ValueError(f"Target body fat must be between 0 and 100, got {target_body_fat_pct}")
    lean = weight * (1 - body_fat_pct / 100)
    return lean / (1 - target_body_fat_pct / 100)


def project_body_fat(
    weight: float,
    body_fat_pct: float,
    new_weight: float,
    pace: Union[str, Pace, None] = None,
) -> float:
    """Estimate body fat percentage after moving from weight to new_weight.

    Faster gains add proportionally more fat; faster cuts lose
    proportionally more lean mass.
    """
    pace = parse_pace(pace)
    lean = weight * (1 - body_fat_pct / 100)
    change = new_weight - weight

    if change > 0:
        lean += change * LEAN_SHARE_OF_GAIN[pace]
    elif change < 0:
        lean += change * LEAN_SHARE_OF_LOSS[pace]

    if new_weight <= 0:
        return 0.0
    fat = max(new_weight - lean, 0.0)
    return fat / new_weight * 100
