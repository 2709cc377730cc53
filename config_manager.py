"""
Configuration management for the fact-checking permissions service.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool
    admin_user_ids: list[str]


@dataclass
class PermissionsConfig:
    """User permissions configuration settings."""
    confirmed_user_threshold: int
    max_limit: int
    reset_hour_utc: int
    reset_enabled: bool
    limitations: Dict[str, list] = field(default_factory=dict)


@dataclass
class PathsConfig:
    """Path configuration settings."""
    user_data_dir: str


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "web_app_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        # Start with default config
        self._config = self._get_default_config()

        # Load base config from file
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    # Merge file config with defaults
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        # Override with environment variables
        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app": {
                "host": "0.0.0.0",
                "port": 4000,
                "debug": False,
                "admin_user_ids": []
            },
            "permissions": {
                "confirmed_user_threshold": 50,
                "max_limit": 100,
                "reset_hour_utc": 0,
                "reset_enabled": True,
                "limitations": {}
            },
            "paths": {
                "user_data_dir": "user_data"
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config:
                if isinstance(values, dict):
                    self._config[section].update(values)
                else:
                    self._config[section] = values
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        if os.getenv("ADMIN_USER_IDS"):
            self._config["app"]["admin_user_ids"] = [
                uid.strip() for uid in os.getenv("ADMIN_USER_IDS").split(",") if uid.strip()
            ]

        # Permissions settings
        if os.getenv("CONFIRMED_USER_THRESHOLD"):
            self._config["permissions"]["confirmed_user_threshold"] = int(os.getenv("CONFIRMED_USER_THRESHOLD"))

        if os.getenv("MAX_ACTION_LIMIT"):
            self._config["permissions"]["max_limit"] = int(os.getenv("MAX_ACTION_LIMIT"))

        if os.getenv("QUOTA_RESET_HOUR_UTC"):
            self._config["permissions"]["reset_hour_utc"] = int(os.getenv("QUOTA_RESET_HOUR_UTC"))

        if os.getenv("QUOTA_RESET_ENABLED"):
            self._config["permissions"]["reset_enabled"] = os.getenv("QUOTA_RESET_ENABLED").lower() == "true"

        # Paths
        if os.getenv("USER_DATA_DIR"):
            self._config["paths"]["user_data_dir"] = os.getenv("USER_DATA_DIR")

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"],
            admin_user_ids=[str(uid) for uid in app_config["admin_user_ids"]]
        )

    def get_permissions_config(self) -> PermissionsConfig:
        """Get user permissions configuration."""
        perm_config = self._config["permissions"]
        return PermissionsConfig(
            confirmed_user_threshold=perm_config["confirmed_user_threshold"],
            max_limit=perm_config["max_limit"],
            reset_hour_utc=perm_config["reset_hour_utc"],
            reset_enabled=perm_config["reset_enabled"],
            limitations=dict(perm_config.get("limitations") or {})
        )

    def get_paths_config(self) -> PathsConfig:
        """Get paths configuration."""
        paths_config = self._config["paths"]
        return PathsConfig(
            user_data_dir=paths_config["user_data_dir"]
        )
