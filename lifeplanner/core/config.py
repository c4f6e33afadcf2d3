"""
Configuration management for Portfolio Life Planner
Handles loading and saving settings, default life areas and preferences
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, List, Optional

from .database import DATABASE_NAME

def get_app_home() -> Path:
    """
    Per-user directory holding config and data.

    PLANNER_HOME in the environment takes precedence over ~/.portfolio-life-planner.
    """
    env_home = os.environ.get("PLANNER_HOME")
    if env_home:
        return Path(env_home)
    return Path.home() / ".portfolio-life-planner"


class Config:
    """Configuration manager for the life planner"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to configuration directory (defaults to <app home>/config)
        """
        if config_dir is None:
            config_dir = get_app_home() / "config"

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.settings_file = self.config_dir / "settings.json"
        self.life_areas_file = self.config_dir / "life_areas.json"
        self.preferences_file = self.config_dir / "preferences.json"

        # Load configurations
        self.settings = self._load_json(self.settings_file, self._default_settings())
        self.life_areas = self._load_json(self.life_areas_file, self._default_life_areas())
        self.preferences = self._load_json(self.preferences_file, self._default_preferences())

    def _load_json(self, file_path: Path, default: Dict[str, Any]) -> Dict[str, Any]:
        """Load JSON file or return default if file doesn't exist"""
        if file_path.exists():
            with open(file_path, 'r') as f:
                loaded = json.load(f)
            # Keys added in later releases fall back to their defaults
            return {**default, **loaded}
        else:
            # Create file with defaults
            self._save_json(file_path, default)
            return default

    def _save_json(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Save data to JSON file"""
        with open(file_path, 'w') as f:
            json.dump(data, f, indent=2)

    def _default_settings(self) -> Dict[str, Any]:
        """Default system settings"""
        return {
            "data_directory": "data/database",
            "database_name": DATABASE_NAME,
            "first_day_of_week": "sunday",
            "autosave_delay_seconds": 1.0,
            "log_level": "INFO"
        }

    def _default_life_areas(self) -> Dict[str, Any]:
        """Life areas created the first time the database is opened"""
        return {
            "defaults": [
                {"name": "Health", "color": "#10B981", "order": 1},
                {"name": "Family", "color": "#3B82F6", "order": 2},
                {"name": "Finance", "color": "#F59E0B", "order": 3},
                {"name": "Learning", "color": "#8B5CF6", "order": 4},
                {"name": "Community", "color": "#EF4444", "order": 5}
            ]
        }

    def _default_preferences(self) -> Dict[str, Any]:
        """Default user preferences"""
        return {
            "default_task_priority": "medium",
            "default_mood": "good",
            "default_timeframe": "month"
        }

    def get(self, key: str, section: str = "settings", default: Any = None) -> Any:
        """
        Get configuration value

        Args:
            key: Configuration key
            section: Configuration section ('settings', 'life_areas', 'preferences')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        section_map = {
            "settings": self.settings,
            "life_areas": self.life_areas,
            "preferences": self.preferences
        }

        return section_map.get(section, {}).get(key, default)

    def set(self, key: str, value: Any, section: str = "settings") -> None:
        """
        Set configuration value and save to disk

        Args:
            key: Configuration key
            value: Value to set
            section: Configuration section ('settings', 'life_areas', 'preferences')
        """
        section_map = {
            "settings": (self.settings, self.settings_file),
            "life_areas": (self.life_areas, self.life_areas_file),
            "preferences": (self.preferences, self.preferences_file)
        }

        if section in section_map:
            config_dict, file_path = section_map[section]
            config_dict[key] = value
            self._save_json(file_path, config_dict)

    def get_default_life_areas(self) -> List[Dict[str, Any]]:
        """Seed rows for a fresh database"""
        return list(self.life_areas.get("defaults", []))

    def get_database_path(self) -> Path:
        """
        Get full path to database file.

        PLANNER_DB_PATH in the environment takes precedence.
        """
        env_path = os.environ.get("PLANNER_DB_PATH")
        if env_path:
            return Path(env_path)
        data_dir = Path(self.settings["data_directory"])
        if not data_dir.is_absolute():
            data_dir = get_app_home() / data_dir
        return data_dir / f"{self.settings['database_name']}.db"
