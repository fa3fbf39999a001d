#!/usr/bin/env python3
"""
Test suite for configuration loading.
"""

import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

import yaml

from config.config_manager import ConfigManager, DB_PATH_ENV_VAR


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager."""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.test_config_path = os.path.join(self.test_dir, "test_config.yaml")

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_default_config_fallback(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop(DB_PATH_ENV_VAR, None)
            config = ConfigManager.load_config(os.path.join(self.test_dir, "nonexistent.yaml"))
        self.assertEqual(config, ConfigManager.get_default_config())
        self.assertEqual(config['database']['path'], 'tourna.db')

    def test_partial_config_merged_over_defaults(self):
        with open(self.test_config_path, 'w') as f:
            yaml.dump({'database': {'path': 'cup.db'}, 'logging': {'level': 'DEBUG'}}, f)

        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop(DB_PATH_ENV_VAR, None)
            config = ConfigManager.load_config(self.test_config_path)
        self.assertEqual(config['database']['path'], 'cup.db')
        self.assertEqual(config['database']['lock_timeout'], 5.0)
        self.assertEqual(config['logging']['level'], 'DEBUG')
        self.assertEqual(config['reports']['output_dir'], 'reports')

    def test_invalid_yaml_falls_back(self):
        with open(self.test_config_path, 'w') as f:
            f.write("database: [unclosed\n")

        config = ConfigManager.load_config(self.test_config_path)
        self.assertEqual(config['database']['lock_timeout'], 5.0)

    def test_non_mapping_yaml_falls_back(self):
        with open(self.test_config_path, 'w') as f:
            f.write("- just\n- a list\n")

        config = ConfigManager.load_config(self.test_config_path)
        self.assertIn('database', config)

    def test_empty_file_uses_defaults(self):
        open(self.test_config_path, 'w').close()
        config = ConfigManager.load_config(self.test_config_path)
        self.assertEqual(config['logging']['level'], 'INFO')

    def test_environment_overrides_db_path(self):
        with open(self.test_config_path, 'w') as f:
            yaml.dump({'database': {'path': 'cup.db'}}, f)

        with patch.dict(os.environ, {DB_PATH_ENV_VAR: '/tmp/override.db'}):
            config = ConfigManager.load_config(self.test_config_path)
        self.assertEqual(config['database']['path'], '/tmp/override.db')

    def test_defaults_are_independent_copies(self):
        first = ConfigManager.get_default_config()
        first['database']['path'] = 'changed.db'
        self.assertEqual(ConfigManager.get_default_config()['database']['path'], 'tourna.db')


if __name__ == '__main__':
    unittest.main()
