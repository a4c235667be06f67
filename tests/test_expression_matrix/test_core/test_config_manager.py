"""Tests for ConfigManager"""

import logging

import pytest
import yaml
from expression_matrix.core.config_manager import ConfigManager, DEFAULT_SETTINGS


class TestConfigManager:
    """Test ConfigManager configuration loading and access."""

    @pytest.fixture
    def config_dir(self, tmp_path):
        """Create config directory with a partial settings.yaml."""
        settings_config = {
            'geo': {
                'base_url': 'https://mirror.example.org/geo',
                'timeout': 5,
            },
            'global_setting': 'test_value'
        }
        with open(tmp_path / 'settings.yaml', 'w') as f:
            yaml.dump(settings_config, f)
        return tmp_path

    def test_file_values(self, config_dir):
        """Test values from settings.yaml are returned."""
        cm = ConfigManager(str(config_dir))
        assert cm.get_setting('geo.base_url') == 'https://mirror.example.org/geo'
        assert cm.get_setting('geo.timeout') == 5
        assert cm.get_setting('global_setting') == 'test_value'

    def test_defaults_fill_missing_keys(self, config_dir):
        """Test keys absent from the file fall back to DEFAULT_SETTINGS."""
        cm = ConfigManager(str(config_dir))
        assert cm.get_setting('geo.impersonate') == 'chrome'

    def test_explicit_default(self, config_dir):
        """Test unknown keys return the given default."""
        cm = ConfigManager(str(config_dir))
        assert cm.get_setting('nonexistent.key') is None
        assert cm.get_setting('nonexistent.key', 42) == 42

    def test_missing_file_warns(self, tmp_path, caplog):
        """Test a missing settings.yaml logs a warning and uses defaults."""
        with caplog.at_level(logging.WARNING):
            cm = ConfigManager(str(tmp_path))
        assert 'Config file not found' in caplog.text
        assert cm.get_setting('geo.timeout') == DEFAULT_SETTINGS['geo']['timeout']

    def test_invalid_yaml_logs_error(self, tmp_path, caplog):
        """Test invalid YAML logs an error and uses defaults."""
        (tmp_path / 'settings.yaml').write_text('geo: [unclosed')
        with caplog.at_level(logging.ERROR):
            cm = ConfigManager(str(tmp_path))
        assert 'Error loading' in caplog.text
        assert cm.get_setting('geo.base_url') == DEFAULT_SETTINGS['geo']['base_url']

    def test_empty_file(self, tmp_path):
        """Test an empty settings.yaml behaves like no settings."""
        (tmp_path / 'settings.yaml').write_text('')
        cm = ConfigManager(str(tmp_path))
        assert cm.get_setting('geo.impersonate') == 'chrome'

    def test_no_config_path(self):
        """Test None skips file loading."""
        cm = ConfigManager(None)
        assert cm.get_setting('geo.timeout') == 60

    def test_defaults_not_mutated(self):
        """Test returned dicts are copies of the defaults."""
        cm = ConfigManager(None)
        cm.get_setting('geo')['timeout'] = 1
        assert DEFAULT_SETTINGS['geo']['timeout'] == 60

    def test_repr(self, config_dir):
        """Test string representation."""
        cm = ConfigManager(str(config_dir))
        repr_str = repr(cm)
        assert 'ConfigManager' in repr_str
        assert 'geo' in repr_str
