"""
Configuration management for the Tsono site backend.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool
    environment: str
    admin_key: str
    log_level: str
    site_host: str

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


@dataclass
class PathsConfig:
    """Path configuration settings."""
    data_dir: str
    static_dir: str


@dataclass
class StoreConfig:
    """Record store locking settings (seconds)."""
    lock_retries: int
    lock_min_timeout: float
    lock_max_timeout: float
    lock_wait_timeout: float


@dataclass
class SecurityConfig:
    """Rate limiting and request size settings."""
    general_rate_limit: int
    form_rate_limit: int
    rate_window_seconds: int
    max_body_bytes: int


@dataclass
class AnalyticsConfig:
    """Analytics retention and reporting settings."""
    referrer_limit: int
    recent_referrers: int
    event_retention_days: int
    top_pages: int


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "site_config.json"):
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
                "port": 3000,
                "debug": False,
                "environment": "development",
                "admin_key": "",
                "log_level": "INFO",
                "site_host": "tsono.app"
            },
            "paths": {
                "data_dir": "data",
                "static_dir": "public"
            },
            "store": {
                "lock_retries": 3,
                "lock_min_timeout": 0.1,
                "lock_max_timeout": 1.0,
                "lock_wait_timeout": 10.0
            },
            "security": {
                "general_rate_limit": 200,
                "form_rate_limit": 20,
                "rate_window_seconds": 15 * 60,
                "max_body_bytes": 10 * 1024
            },
            "analytics": {
                "referrer_limit": 100,
                "recent_referrers": 20,
                "event_retention_days": 7,
                "top_pages": 10
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

        # PORT wins over APP_PORT, as on most PaaS hosts
        port = os.getenv("PORT") or os.getenv("APP_PORT")
        if port:
            self._config["app"]["port"] = int(port)

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        if os.getenv("APP_ENV"):
            self._config["app"]["environment"] = os.getenv("APP_ENV").strip().lower()

        if os.getenv("ADMIN_KEY") is not None:
            self._config["app"]["admin_key"] = os.getenv("ADMIN_KEY")

        if os.getenv("LOG_LEVEL"):
            self._config["app"]["log_level"] = os.getenv("LOG_LEVEL").upper()

        if os.getenv("SITE_HOST"):
            self._config["app"]["site_host"] = os.getenv("SITE_HOST")

        # Paths
        if os.getenv("DATA_DIR"):
            self._config["paths"]["data_dir"] = os.getenv("DATA_DIR")

        if os.getenv("STATIC_DIR"):
            self._config["paths"]["static_dir"] = os.getenv("STATIC_DIR")

        # Store settings
        if os.getenv("LOCK_RETRIES"):
            self._config["store"]["lock_retries"] = int(os.getenv("LOCK_RETRIES"))

        # Security settings
        if os.getenv("GENERAL_RATE_LIMIT"):
            self._config["security"]["general_rate_limit"] = int(os.getenv("GENERAL_RATE_LIMIT"))

        if os.getenv("FORM_RATE_LIMIT"):
            self._config["security"]["form_rate_limit"] = int(os.getenv("FORM_RATE_LIMIT"))

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"],
            environment=app_config["environment"],
            admin_key=app_config["admin_key"],
            log_level=app_config["log_level"],
            site_host=app_config["site_host"]
        )

    def get_paths_config(self) -> PathsConfig:
        """Get paths configuration."""
        paths_config = self._config["paths"]
        return PathsConfig(
            data_dir=paths_config["data_dir"],
            static_dir=paths_config["static_dir"]
        )

    def get_store_config(self) -> StoreConfig:
        """Get record store configuration."""
        store_config = self._config["store"]
        return StoreConfig(
            lock_retries=store_config["lock_retries"],
            lock_min_timeout=store_config["lock_min_timeout"],
            lock_max_timeout=store_config["lock_max_timeout"],
            lock_wait_timeout=store_config["lock_wait_timeout"]
        )

    def get_security_config(self) -> SecurityConfig:
        """Get security configuration."""
        security_config = self._config["security"]
        return SecurityConfig(
            general_rate_limit=security_config["general_rate_limit"],
            form_rate_limit=security_config["form_rate_limit"],
            rate_window_seconds=security_config["rate_window_seconds"],
            max_body_bytes=security_config["max_body_bytes"]
        )

    def get_analytics_config(self) -> AnalyticsConfig:
        """Get analytics configuration."""
        analytics_config = self._config["analytics"]
        return AnalyticsConfig(
            referrer_limit=analytics_config["referrer_limit"],
            recent_referrers=analytics_config["recent_referrers"],
            event_retention_days=analytics_config["event_retention_days"],
            top_pages=analytics_config["top_pages"]
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()

