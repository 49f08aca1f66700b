"""Tests for settings loading and saving."""

from __future__ import annotations

from pathlib import Path

from nutriplan.config.settings import Settings, get_settings, reload_settings


class TestSettings:
    """Tests for YAML-backed settings."""

    def test_defaults_when_missing(self, tmp_path: Path) -> None:
        settings = Settings.load(tmp_path / "missing.yaml")
        assert settings.catalog.path is None
        assert settings.planner.tolerance == 0.05
        assert settings.planner.min_foods == 10
        assert settings.defaults.diet == "all"
        assert settings.logging.level == "WARNING"

    def test_partial_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "planner:\n"
            "  tolerance: 0.1\n"
            "  four_meal_threshold: 2000\n"
            "defaults:\n"
            "  diet: vegan\n"
            "logging:\n"
            "  level: debug\n"
        )
        settings = Settings.load(path)
        assert settings.planner.tolerance == 0.1
        assert settings.planner.four_meal_threshold == 2000
        assert settings.planner.max_iterations == 10
        assert settings.defaults.diet == "vegan"
        assert settings.defaults.pace == "moderate"
        assert settings.logging.level == "DEBUG"

    def test_empty_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("catalog:\nplanner:\n")
        settings = Settings.load(path)
        assert settings.catalog.path is None
        assert settings.planner.tolerance == 0.05

    def test_save_and_load(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.yaml"
        settings = Settings()
        settings.catalog.path = tmp_path / "foods.csv"
        settings.planner.min_foods = 12
        settings.defaults.activity_level = "active"
        settings.save(path)

        loaded = Settings.load(path)
        assert loaded.catalog.path == tmp_path / "foods.csv"
        assert loaded.planner.min_foods == 12
        assert loaded.defaults.activity_level == "active"

    def test_reload(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("defaults:\n  pace: aggressive\n")
        try:
            assert reload_settings(path).defaults.pace == "aggressive"
            assert get_settings().defaults.pace == "aggressive"
        finally:
            reload_settings(tmp_path / "missing.yaml")
