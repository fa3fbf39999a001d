"""
Configuration management for the Tourna system.
"""

import copy
import logging
import os
from typing import Dict, Any

import yaml

logger = logging.getLogger(__name__)

DB_PATH_ENV_VAR = "TOURNA_DB_PATH"


class ConfigManager:
    """Manages configuration loading and provides default values."""

    @staticmethod
    def load_config(config_file: str) -> Dict[str, Any]:
        """Load configuration from YAML file, merged over the defaults."""
        config = ConfigManager.get_default_config()
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning(f"Configuration file '{config_file}' not found. Using default configuration.")
            loaded = {}
        except yaml.YAMLError as e:
            logger.warning(f"Error parsing configuration file: {e}. Using default configuration.")
            loaded = {}

        if not isinstance(loaded, dict):
            logger.warning(f"Configuration file '{config_file}' is not a mapping. Using default configuration.")
            loaded = {}

        ConfigManager._merge(config, loaded)

        env_path = os.environ.get(DB_PATH_ENV_VAR)
        if env_path:
            config['database']['path'] = env_path
        return config

    @staticmethod
    def get_default_config() -> Dict[str, Any]:
        """Return default configuration if config file is not available."""
        return copy.deepcopy({
            'database': {
                'path': 'tourna.db',
                'lock_timeout': 5.0,
                'busy_timeout': 5.0,
            },
            'logging': {
                'level': 'INFO',
            },
            'reports': {
                'output_dir': 'reports',
            },
        })

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                ConfigManager._merge(base[key], value)
            else:
                base[key] = value
