"""Tests for goal-paced calorie calculators."""

from __future__ import annotations

import math

import pytest

from nutriplan.errors import DegenerateTimelineError
from nutriplan.profiles.body_calc import Sex, UnitSystem
from nutriplan.profiles.goal_pace import (
    MIN_DAILY_CALORIES,
    Pace,
    calculate_max_surplus_percentage,
    calculate_target_deficit_percentage,
    calculate_weight_gain_calories,
    calculate_weight_loss_calories,
    get_max_allowed_deficit,
    get_min_deficit_percentage,
    parse_pace,
)

METRIC = UnitSystem.METRIC


class TestPace:
    """Tests for pace parsing."""

    def test_parse(self) -> None:
        assert parse_pace("Aggressive") == Pace.AGGRESSIVE
        assert parse_pace(Pace.CONSERVATIVE) == Pace.CONSERVATIVE

    def test_missing_or_unknown_is_moderate(self) -> None:
        assert parse_pace(None) == Pace.MODERATE
        assert parse_pace("fast") == Pace.MODERATE


class TestDeficitBounds:
    """Tests for deficit caps and floors."""

    @pytest.mark.parametrize(
        "body_fat,sex,expected",
        [
            (9, Sex.MALE, 20.0),
            (10, Sex.MALE, 22.0),
            (14.9, Sex.MALE, 25.0),
            (15, Sex.MALE, 30.0),
            (15, Sex.FEMALE, 20.0),
            (19, Sex.FEMALE, 22.0),
            (24, Sex.FEMALE, 25.0),
            (30, Sex.FEMALE, 30.0),
        ],
    )
    def test_max_allowed_deficit(self, body_fat: float, sex: Sex, expected: float) -> None:
        assert get_max_allowed_deficit(body_fat, sex) == expected

    def test_unknown_body_fat_assumes_twenty(self) -> None:
        assert get_max_allowed_deficit(None, Sex.MALE) == 30.0
        assert get_max_allowed_deficit(None, Sex.FEMALE) == 25.0

    def test_min_deficit_by_pace(self) -> None:
        assert get_min_deficit_percentage("aggressive") == 20.0
        assert get_min_deficit_percentage("moderate") == 15.0
        assert get_min_deficit_percentage("conservative") == 10.0

    def test_aggressive_adds_five_up_to_35(self) -> None:
        assert calculate_target_deficit_percentage("aggressive", 9, Sex.MALE) == 25.0
        assert calculate_target_deficit_percentage("aggressive", 20, Sex.MALE) == 35.0

    def test_conservative_reduction(self) -> None:
        # 30 -> 20 (10 off), 22 -> 17 (5 off), 20 -> 15 (floor)
        assert calculate_target_deficit_percentage("conservative", 20, Sex.MALE) == 20.0
        assert calculate_target_deficit_percentage("conservative", 10, Sex.MALE) == 17.0
        assert calculate_target_deficit_percentage("conservative", 9, Sex.MALE) == 15.0

    def test_moderate_uses_base(self) -> None:
        assert calculate_target_deficit_percentage("moderate", 12, Sex.MALE) == 25.0


class TestWeightLoss:
    """Tests for weight loss calories."""

    def test_required_deficit_clamped_to_cap(self) -> None:
        # 5 kg in 50 days needs 770 kcal/day, 30.8% of 2500
        result = calculate_weight_loss_calories(
            2500, 80, 75, 50, "moderate", 20, Sex.MALE, METRIC
        )
        assert result.required_deficit_pct == pytest.approx(30.8)
        assert result.deficit_pct == pytest.approx(30.0)
        assert result.daily_calories == 1750
        assert not result.floored

    def test_small_deficit_raised_to_pace_minimum(self) -> None:
        result = calculate_weight_loss_calories(
            2500, 80, 79, 100, "moderate", 20, Sex.MALE, METRIC
        )
        assert result.daily_calories == 2125
        assert result.deficit_pct == pytest.approx(15.0)

    def test_within_bounds_follows_timeline(self) -> None:
        # 2 kg in 40 days: 385 kcal/day, 19.25% of 2000
        result = calculate_weight_loss_calories(
            2000, 80, 78, 40, "moderate", 20, Sex.MALE, METRIC
        )
        assert result.deficit_pct == pytest.approx(19.25)
        assert result.daily_calories == 1615

    def test_calorie_floor(self) -> None:
        result = calculate_weight_loss_calories(
            1500, 80, 60, 30, "aggressive", 25, Sex.MALE, METRIC
        )
        assert result.daily_calories == MIN_DAILY_CALORIES
        assert result.floored
        # Realized deficit reflects the floor, not the 35% target
        assert result.deficit_pct == pytest.approx(20.0)
        assert result.target_deficit_pct == 35.0

    def test_zero_days_treated_as_one(self) -> None:
        result = calculate_weight_loss_calories(
            2500, 80, 75, 0, "moderate", 20, Sex.MALE, METRIC
        )
        assert result.daily_calories == 1750

    def test_imperial_uses_3500_per_lb(self) -> None:
        # 5 lb in 50 days: 350 kcal/day, 14% -> moderate floor 15%
        result = calculate_weight_loss_calories(
            2500, 180, 175, 50, "moderate", 20, Sex.MALE, UnitSystem.IMPERIAL
        )
        assert result.required_deficit_pct == pytest.approx(14.0)
        assert result.daily_calories == 2125


class TestWeightGain:
    """Tests for weight gain calories."""

    def test_moderate_follows_timeline_below_cap(self) -> None:
        # 2 kg in 100 days: 154 kcal/day, 6.16% of 2500
        result = calculate_weight_gain_calories(
            2500, 70, 72, 100, "moderate", None, Sex.MALE, METRIC
        )
        assert result.surplus_pct == pytest.approx(6.16)
        assert result.daily_calories == 2654
        assert not result.timeline_driven
        assert result.days_required is None

    def test_moderate_capped_at_standard(self) -> None:
        result = calculate_weight_gain_calories(
            2500, 70, 75, 100, "moderate", None, Sex.MALE, METRIC
        )
        assert result.required_surplus_pct == pytest.approx(15.4)
        assert result.surplus_pct == pytest.approx(15.0)
        assert result.daily_calories == 2875

    def test_lean_lifters_get_more_headroom(self) -> None:
        assert calculate_max_surplus_percentage("moderate", 11, Sex.MALE) == 18.0
        assert calculate_max_surplus_percentage("conservative", 9, Sex.MALE) == 15.0
        assert calculate_max_surplus_percentage("moderate", 30, Sex.FEMALE) == 15.0
        assert calculate_max_surplus_percentage("moderate", None, None) == 15.0

    def test_aggressive_uses_standard_surplus(self) -> None:
        """Without a fixed date the timeline is ignored and reported."""
        result = calculate_weight_gain_calories(
            2500, 70, 75, 100, "aggressive", None, Sex.MALE, METRIC
        )
        assert result.surplus_pct == 20.0
        assert result.daily_calories == 3000
        assert result.days_required == math.ceil(5 * 7700 / 500)
        assert not result.timeline_driven
        assert not result.high_surplus_warning

    def test_aggressive_fixed_date_follows_timeline(self) -> None:
        # 10 kg in 60 days needs ~51% which is capped at 50%
        result = calculate_weight_gain_calories(
            2500, 70, 80, 60, "aggressive", None, Sex.MALE, METRIC,
            timeline_authoritative=True,
        )
        assert result.surplus_pct == 50.0
        assert result.daily_calories == 3750
        assert result.timeline_driven
        assert result.high_surplus_warning
        assert result.days_required is None

    def test_half_calorie_rounds_up(self) -> None:
        # 2001 * 1.5 = 3001.5
        result = calculate_weight_gain_calories(
            2001, 70, 80, 60, "aggressive", None, Sex.MALE, METRIC,
            timeline_authoritative=True,
        )
        assert result.surplus_pct == 50.0
        assert result.daily_calories == 3002

    def test_aggressive_fixed_date_below_standard(self) -> None:
        result = calculate_weight_gain_calories(
            2500, 70, 75, 100, "aggressive", None, Sex.MALE, METRIC,
            timeline_authoritative=True,
        )
        assert result.surplus_pct == pytest.approx(15.4)
        assert result.daily_calories == pytest.approx(2885, abs=1)
        assert not result.timeline_driven
        assert not result.high_surplus_warning

    @pytest.mark.parametrize("days", [0, -5])
    def test_degenerate_timeline(self, days: int) -> None:
        with pytest.raises(DegenerateTimelineError) as exc:
            calculate_weight_gain_calories(
                2500, 70, 75, days, "moderate", None, Sex.MALE, METRIC
            )
        assert exc.value.days_until_goal == days
