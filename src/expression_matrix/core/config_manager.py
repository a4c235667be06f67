"""
ConfigManager - Configuration file management

Loads settings.yaml from the configuration directory. Settings cover the
GEO endpoint and HTTP behaviour of the fetcher:

    geo:
      base_url: https://ftp.ncbi.nlm.nih.gov/geo
      timeout: 60
      impersonate: chrome

Missing keys fall back to DEFAULT_SETTINGS.
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


DEFAULT_SETTINGS: Dict[str, Any] = {
    'geo': {
        'base_url': 'https://ftp.ncbi.nlm.nih.gov/geo',
        'timeout': 60,
        'impersonate': 'chrome',
    },
}


class ConfigManager:
    """Manager for the settings configuration file.

    Args:
        config_path: Path to configuration directory (default: 'config')

    Attributes:
        _settings_config: Configuration from settings.yaml
    """

    def __init__(self, config_path: Optional[str] = 'config'):
        """Initialize ConfigManager and load settings.yaml.

        Args:
            config_path: Path to configuration directory. None skips file
                loading and uses the built-in defaults only.
        """
        self._config_path = Path(config_path) if config_path is not None else None
        if self._config_path is None:
            self._settings_config: Dict[str, Any] = {}
        else:
            self._settings_config = self._load_yaml('settings.yaml')

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        """Load a YAML file, returning empty dict if not found.

        Args:
            filename: Name of YAML file to load

        Returns:
            Dictionary of configuration values, or empty dict if file not found
        """
        file_path = self._config_path / filename
        if not file_path.exists():
            logger.warning(f"Config file not found: {file_path}. Using defaults.")
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading {file_path}: {e}. Using defaults.")
            return {}

        if config is None:
            return {}
        if not isinstance(config, dict):
            logger.error(f"Expected a mapping in {file_path}, got {type(config).__name__}. Using defaults.")
            return {}
        return config

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting, falling back to DEFAULT_SETTINGS, then default.

        Args:
            key: Setting key (supports nested keys with dot notation)
            default: Value returned if the key is in neither source

        Examples:
            >>> cm.get_setting('geo.timeout')
            60
        """
        keys = key.split('.')
        for source in (self._settings_config, DEFAULT_SETTINGS):
            value = source
            for k in keys:
                if isinstance(value, dict) and k in value:
                    value = value[k]
                else:
                    break
            else:
                return copy.deepcopy(value)

        return default

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"ConfigManager("
            f"path={self._config_path}, "
            f"settings={list(self._settings_config.keys())})"
        )
