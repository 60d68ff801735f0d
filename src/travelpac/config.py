"""
Configuration Management

Loads pipeline configuration from built-in defaults, a YAML file and
environment variables.
"""

import copy
import os
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dotenv import load_dotenv

from .utils.file_utils import load_config as load_yaml_config
from .utils.logging_utils import get_logger

logger = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_CONFIG_FILE = PROJECT_ROOT / 'config' / 'pipeline_config.yaml'

DEFAULTS: Dict[str, Any] = {
    'data': {
        'input_path': 'data/raw/travelpac.xlsx',
        'sheet': 0,
        'outputs_dir': 'data/outputs'
    },
    'logging': {
        'level': 'INFO',
        'file': {'enabled': False, 'path': 'logs/travelpac.log'}
    },
    'cleaner': {
        'unknown_sex': 'D/K',
        'unknown_age': 'D/K',
        'invalid_country': '0',
        'uk_resident_label': 'UK residents'
    },
    'aggregator': {
        'top_n': 10,
        'plot_sexes': ['Male', 'Female'],
        'spend_per_night_cap': 500
    },
    'reporter': {
        'save_tables': True,
        'visualization': {'dpi': 150, 'figsize': [10, 6]}
    },
    'model': {
        'target': 'spend_per_night',
        'categorical': ['sex', 'quarter', 'age'],
        'numeric': ['uk_resident']
    },
    'verification': {
        'schema': {'known_sexes': ['Male', 'Female'], 'strict': False},
        'metrics': {'min_r2': 0.0, 'residual_mean_threshold': 0.1, 'strict': False}
    }
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base recursively, returning base."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def parse_sheet(value: str) -> Union[int, str]:
    """Sheet selectors that look like integers are indexes, others are names."""
    value = value.strip()
    return int(value) if value.lstrip('-').isdigit() else value


class Config:
    """
    Pipeline configuration manager.

    Loads configuration from:
    1. Built-in defaults
    2. YAML file (config/pipeline_config.yaml)
    3. Environment variables (.env)

    Example:
        >>> config = Config()
        >>> print(config.get('aggregator.top_n'))
        10
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to YAML config file (optional). An explicitly
                given file must exist; the default file is optional.
        """
        env_path = PROJECT_ROOT / '.env'
        if env_path.exists():
            load_dotenv(env_path)
            logger.info(f"Loaded environment variables from: {env_path}")

        self.config = copy.deepcopy(DEFAULTS)

        if config_file is not None:
            _deep_merge(self.config, load_yaml_config(config_file))
        elif DEFAULT_CONFIG_FILE.exists():
            _deep_merge(self.config, load_yaml_config(DEFAULT_CONFIG_FILE))
        else:
            logger.warning(f"Config file not found: {DEFAULT_CONFIG_FILE} - using defaults")

        self._apply_env_overrides()

    def _apply_env_overrides(self):
        """Apply environment variable overrides to config."""
        if os.getenv('TRAVELPAC_INPUT'):
            self.set('data.input_path', os.getenv('TRAVELPAC_INPUT'))

        if os.getenv('TRAVELPAC_SHEET'):
            self.set('data.sheet', parse_sheet(os.getenv('TRAVELPAC_SHEET')))

        if os.getenv('TRAVELPAC_OUTPUT_DIR'):
            self.set('data.outputs_dir', os.getenv('TRAVELPAC_OUTPUT_DIR'))

        if os.getenv('LOG_LEVEL'):
            self.set('logging.level', os.getenv('LOG_LEVEL'))

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Example:
            >>> config.get('data.sheet')
            0
            >>> config.get('nonexistent.key', 'default')
            'default'
        """
        value = self.config

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set a configuration value using dot notation."""
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            config = config.setdefault(k, {})

        config[keys[-1]] = value

    def get_stage_config(self, stage: str) -> Dict[str, Any]:
        """
        Get configuration for a specific stage.

        Args:
            stage: Section name ('cleaner', 'aggregator', 'reporter', 'model', ...)
        """
        return copy.deepcopy(self.config.get(stage, {}))

    def get_verification_config(self, verification: str) -> Dict[str, Any]:
        """Get configuration for a verification checkpoint ('schema', 'metrics')."""
        return copy.deepcopy(self.config.get('verification', {}).get(verification, {}))

    def to_dict(self) -> Dict[str, Any]:
        """Get the full configuration as a dictionary."""
        return copy.deepcopy(self.config)


# Global config instance
_global_config = None


def get_config(config_file: Optional[Union[str, Path]] = None) -> Config:
    """
    Get or create the global configuration instance.

    Args:
        config_file: Path to config file. Giving one always reloads the
            global instance from that file.
    """
    global _global_config

    if _global_config is None or config_file is not None:
        _global_config = Config(config_file)

    return _global_config
