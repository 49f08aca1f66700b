"""Application settings and configuration management."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


def _default_config_dir() -> Path:
    """Return the default configuration directory."""
    return Path.home() / ".nutriplan"


def default_config_path() -> Path:
    return _default_config_dir() / "config.yaml"


@dataclass
class CatalogConfig:
    """Food catalog configuration."""

    path: Optional[Path] = None  # None uses the bundled catalog


@dataclass
class PlannerConfig:
    """Meal balancing configuration."""

    tolerance: float = 0.05
    max_iterations: int = 10
    min_foods: int = 10
    free_meal_max_fraction: float = 0.2
    four_meal_threshold: int = 1800


@dataclass
class DefaultsConfig:
    """Default values for various operations."""

    activity_level: str = "sedentary"
    pace: str = "moderate"
    diet: str = "all"
    output_format: str = "table"  # "table", "json"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class Settings:
    """Main application settings."""

    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from YAML file or return defaults.

        Args:
            config_path: Path to config.yaml. If None, uses ~/.nutriplan/config.yaml

        Returns:
            Settings instance
        """
        if config_path is None:
            config_path = default_config_path()

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        settings = cls()

        # Parse catalog config
        if "catalog" in data:
            cat_data = data["catalog"] or {}
            if cat_data.get("path"):
                settings.catalog.path = Path(cat_data["path"]).expanduser()

        # Parse planner config
        if "planner" in data:
            plan_data = data["planner"] or {}
            if "tolerance" in plan_data:
                settings.planner.tolerance = float(plan_data["tolerance"])
            if "max_iterations" in plan_data:
                settings.planner.max_iterations = int(plan_data["max_iterations"])
            if "min_foods" in plan_data:
                settings.planner.min_foods = int(plan_data["min_foods"])
            if "free_meal_max_fraction" in plan_data:
                settings.planner.free_meal_max_fraction = float(
                    plan_data["free_meal_max_fraction"]
                )
            if "four_meal_threshold" in plan_data:
                settings.planner.four_meal_threshold = int(
                    plan_data["four_meal_threshold"]
                )

        # Parse defaults
        if "defaults" in data:
            def_data = data["defaults"] or {}
            for key in ("activity_level", "pace", "diet", "output_format"):
                if key in def_data:
                    setattr(settings.defaults, key, str(def_data[key]))

        # Parse logging config
        if "logging" in data:
            log_data = data["logging"] or {}
            if "level" in log_data:
                settings.logging.level = str(log_data["level"]).upper()

        return settings

    def save(self, config_path: Optional[Path] = None) -> None:
        """Save current settings to YAML file.

        Args:
            config_path: Path to save config.yaml. If None, uses ~/.nutriplan/config.yaml
        """
        if config_path is None:
            config_path = default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "catalog": {
                "path": str(self.catalog.path) if self.catalog.path else None,
            },
            "planner": {
                "tolerance": self.planner.tolerance,
                "max_iterations": self.planner.max_iterations,
                "min_foods": self.planner.min_foods,
                "free_meal_max_fraction": self.planner.free_meal_max_fraction,
                "four_meal_threshold": self.planner.four_meal_threshold,
            },
            "defaults": {
                "activity_level": self.defaults.activity_level,
                "pace": self.defaults.pace,
                "diet": self.defaults.diet,
                "output_format": self.defaults.output_format,
            },
            "logging": {
                "level": self.logging.level,
            },
        }

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from disk if needed."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings(config_path: Optional[Path] = None) -> Settings:
    """Force reload settings from disk."""
    global _settings
    _settings = Settings.load(config_path)
    return _settings
