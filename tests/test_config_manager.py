"""
Test cases for the configuration management system.
Tests config loading, validation, and access functionality.
"""

import os
import json
from unittest.mock import patch, mock_open

from config_manager import (
    ConfigManager,
    AppConfig,
    PathsConfig,
    StoreConfig,
    SecurityConfig,
    AnalyticsConfig,
    config_manager,
    get_app_config,
)


class TestConfigManager:
    """Test the ConfigManager class functionality."""

    def test_load_config_with_missing_file(self):
        """Test loading configuration when file doesn't exist."""
        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            with patch.dict(os.environ, {}, clear=True):
                manager = ConfigManager()

                # Should load default config
                for section in ("app", "paths", "store", "security", "analytics"):
                    assert section in manager._config
                assert manager._config["app"]["port"] == 3000
                assert manager._config["app"]["environment"] == "development"
                assert manager._config["paths"]["static_dir"] == "public"
                assert manager._config["security"]["max_body_bytes"] == 10 * 1024

    def test_load_config_from_file(self):
        """Test loading configuration from existing file."""
        test_config = {
            "app": {
                "host": "localhost",
                "port": 8080,
                "site_host": "example.org"
            },
            "paths": {
                "data_dir": "test_data"
            },
            "security": {
                "form_rate_limit": 5
            }
        }

        with patch('builtins.open', mock_open(read_data=json.dumps(test_config))):
            with patch('config_manager.Path') as mock_path:
                mock_path.return_value.exists.return_value = True
                with patch.dict(os.environ, {}, clear=True):
                    manager = ConfigManager()

                    assert manager._config["app"]["host"] == "localhost"
                    assert manager._config["app"]["port"] == 8080
                    assert manager._config["app"]["site_host"] == "example.org"
                    assert manager._config["paths"]["data_dir"] == "test_data"
                    assert manager._config["security"]["form_rate_limit"] == 5

                    # Keys missing from the file keep their defaults
                    assert manager._config["paths"]["static_dir"] == "public"
                    assert manager._config["security"]["general_rate_limit"] == 200

    def test_invalid_file_keeps_defaults(self, tmp_path):
        """Test that a malformed config file falls back to defaults."""
        config_file = tmp_path / "site_config.json"
        config_file.write_text("{not json", encoding="utf-8")

        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(config_file))

        assert manager.get_app_config().port == 3000

    def test_override_with_env_variables(self):
        """Test that environment variables override config file values."""
        env_vars = {
            "APP_HOST": "127.0.0.1",
            "APP_PORT": "8080",
            "APP_DEBUG": "true",
            "APP_ENV": "Production",
            "ADMIN_KEY": "env-admin-key",
            "LOG_LEVEL": "debug",
            "SITE_HOST": "tsono.example",
            "DATA_DIR": "/var/lib/tsono",
            "STATIC_DIR": "site",
            "LOCK_RETRIES": "5",
            "GENERAL_RATE_LIMIT": "50",
            "FORM_RATE_LIMIT": "3"
        }

        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            with patch.dict(os.environ, env_vars, clear=True):
                manager = ConfigManager()

                assert manager._config["app"]["host"] == "127.0.0.1"
                assert manager._config["app"]["port"] == 8080
                assert manager._config["app"]["debug"] is True
                assert manager._config["app"]["environment"] == "production"
                assert manager._config["app"]["admin_key"] == "env-admin-key"
                assert manager._config["app"]["log_level"] == "DEBUG"
                assert manager._config["app"]["site_host"] == "tsono.example"
                assert manager._config["paths"]["data_dir"] == "/var/lib/tsono"
                assert manager._config["paths"]["static_dir"] == "site"
                assert manager._config["store"]["lock_retries"] == 5
                assert manager._config["security"]["general_rate_limit"] == 50
                assert manager._config["security"]["form_rate_limit"] == 3

    def test_port_takes_precedence_over_app_port(self):
        """Test that the platform PORT variable wins."""
        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            with patch.dict(os.environ, {"PORT": "5000", "APP_PORT": "8080"}, clear=True):
                manager = ConfigManager()

                assert manager.get_app_config().port == 5000

    def test_empty_admin_key_env_clears_file_value(self):
        """Test that ADMIN_KEY set to empty overrides a key from the file."""
        test_config = {"app": {"admin_key": "from-file"}}

        with patch('builtins.open', mock_open(read_data=json.dumps(test_config))):
            with patch('config_manager.Path') as mock_path:
                mock_path.return_value.exists.return_value = True
                with patch.dict(os.environ, {"ADMIN_KEY": ""}, clear=True):
                    manager = ConfigManager()

                    assert manager.get_app_config().admin_key == ""

    def test_get_app_config(self):
        """Test getting application configuration."""
        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            with patch.dict(os.environ, {"APP_ENV": "production", "ADMIN_KEY": "k"}, clear=True):
                manager = ConfigManager()

                app_config = manager.get_app_config()

                assert isinstance(app_config, AppConfig)
                assert app_config.admin_key == "k"
                assert app_config.is_production is True

    def test_get_section_configs(self):
        """Test getting the typed section configurations."""
        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            with patch.dict(os.environ, {}, clear=True):
                manager = ConfigManager()

                paths_config = manager.get_paths_config()
                store_config = manager.get_store_config()
                security_config = manager.get_security_config()
                analytics_config = manager.get_analytics_config()

                assert isinstance(paths_config, PathsConfig)
                assert paths_config.data_dir == "data"

                assert isinstance(store_config, StoreConfig)
                assert store_config.lock_retries == 3
                assert store_config.lock_min_timeout == 0.1
                assert store_config.lock_max_timeout == 1.0

                assert isinstance(security_config, SecurityConfig)
                assert security_config.general_rate_limit == 200
                assert security_config.form_rate_limit == 20
                assert security_config.rate_window_seconds == 900

                assert isinstance(analytics_config, AnalyticsConfig)
                assert analytics_config.referrer_limit == 100
                assert analytics_config.event_retention_days == 7
                assert analytics_config.top_pages == 10

    def test_get_config(self):
        """Test getting raw configuration dictionary."""
        test_config = {"test": "value"}

        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            manager = ConfigManager()
            manager._config = test_config

            config = manager.get_config()

            assert config == test_config
            assert config is not manager._config  # Should be a copy

    def test_save_config(self):
        """Test saving configuration to file."""
        test_config = {"test": "value"}

        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            manager = ConfigManager()
            manager._config = test_config

            with patch('builtins.open', mock_open()) as mock_file:
                manager.save_config()

                mock_file.assert_called_once()
                mock_file().write.assert_called()

    def test_reload_config(self):
        """Test reloading configuration."""
        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            manager = ConfigManager()

            original_config = manager._config.copy()

            # Modify config
            manager._config["test"] = "modified"

            # Reload should restore original
            manager.reload()

            assert "test" not in manager._config
            assert manager._config == original_config


class TestConfigDataClasses:
    """Test the configuration data classes."""

    def test_app_config_production_flag(self):
        """Test AppConfig.is_production."""
        config = AppConfig(
            host="localhost",
            port=3000,
            debug=False,
            environment="development",
            admin_key="",
            log_level="INFO",
            site_host="tsono.app"
        )

        assert config.is_production is False
        config.environment = "production"
        assert config.is_production is True


class TestGlobalFunctions:
    """Test the global configuration functions."""

    def test_get_app_config_global(self):
        """Test the module-level getter reads the shared manager."""
        config = get_app_config()

        assert isinstance(config, AppConfig)
        assert config == config_manager.get_app_config()
