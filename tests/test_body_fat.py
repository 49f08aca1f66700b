"""Tests for body fat projections."""

from __future__ import annotations

import pytest

from nutriplan.profiles.body_fat import project_body_fat, weight_for_target_body_fat


class TestWeightForTargetBodyFat:
    """Tests for target weight from a body fat goal."""

    def test_keeps_lean_mass(self) -> None:
        assert weight_for_target_body_fat(100, 20, 10) == pytest.approx(80 / 0.9)

    def test_higher_target_means_heavier(self) -> None:
        assert weight_for_target_body_fat(70, 12, 15) > 70

    @pytest.mark.parametrize("target", [-1, 100, 120])
    def test_out_of_range(self, target: float) -> None:
        with pytest.raises(ValueError):
            weight_for_target_body_fat(80, 20, target)


class TestProjectBodyFat:
    """Tests for projected body fat after a weight change."""

    def test_gain_adds_some_fat(self) -> None:
        # lean 64 + 10 * 0.45 = 68.5, fat 21.5 of 90
        assert project_body_fat(80, 20, 90, "moderate") == pytest.approx(21.5 / 90 * 100)

    def test_loss_keeps_most_lean_mass(self) -> None:
        # lean 64 - 10 * 0.12 = 62.8, fat 7.2 of 70
        assert project_body_fat(80, 20, 70, "moderate") == pytest.approx(7.2 / 70 * 100)

    def test_faster_gain_is_fatter(self) -> None:
        slow = project_body_fat(80, 15, 88, "conservative")
        fast = project_body_fat(80, 15, 88, "aggressive")
        assert fast > slow

    def test_no_change(self) -> None:
        assert project_body_fat(80, 20, 80) == pytest.approx(20.0)

    def test_never_negative(self) -> None:
        assert project_body_fat(80, 3, 60, "aggressive") == 0.0
