"""
Configuration management and loading.

Handles application settings from a YAML file and environment variables.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml

from habit_tally.core.lifecycle import DEFAULT_DATE_FORMAT, Ordering
from habit_tally.storage.store import DEFAULT_DATA_FILE

CONFIG_ENV_VAR = "HABIT_TALLY_CONFIG"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class StorageConfig:
    """Where the record file lives."""
    data_file: Path = DEFAULT_DATA_FILE


@dataclass(frozen=True)
class DisplayConfig:
    """How records are dated and ordered."""
    date_format: str = DEFAULT_DATE_FORMAT
    default_ordering: Ordering = Ordering.MOST_RECENT
    
    def __post_init__(self):
        """Validate the date format is usable."""
        if not self.date_format.strip():
            raise ValueError("date_format cannot be empty")


@dataclass(frozen=True)
class LoggingConfig:
    """Log verbosity."""
    level: str = "WARNING"
    
    def __post_init__(self):
        """Validate log level name."""
        if self.level not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of: {list(_LOG_LEVELS)}")
    
    @property
    def level_number(self) -> int:
        return getattr(logging, self.level)


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    storage: StorageConfig = field(default_factory=StorageConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def default_config() -> AppConfig:
    return AppConfig()


def load_config(path: str) -> AppConfig:
    """Load and validate configuration from YAML file.
    
    Strict validation ensures a typo in a key is reported instead of
    silently falling back to a default.
    
    Args:
        path: Path to YAML configuration file
        
    Returns:
        Validated AppConfig object
        
    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")
    
    # An empty file means "all defaults"
    if raw_config is None:
        return default_config()
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")
    
    allowed_top_keys = {'storage', 'display', 'logging'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")
    
    storage_data = _section(raw_config, 'storage', {'data_file'})
    storage = StorageConfig()
    if 'data_file' in storage_data:
        data_file = storage_data['data_file']
        if not isinstance(data_file, str) or not data_file.strip():
            raise ValueError("'data_file' in storage must be a non-empty string")
        storage = StorageConfig(data_file=Path(data_file).expanduser())
    
    display_data = _section(raw_config, 'display', {'date_format', 'default_ordering'})
    date_format = display_data.get('date_format', DEFAULT_DATE_FORMAT)
    if not isinstance(date_format, str):
        raise ValueError("'date_format' in display must be a string")
    
    ordering_str = display_data.get('default_ordering', Ordering.MOST_RECENT.value)
    if not isinstance(ordering_str, str):
        raise ValueError("'default_ordering' in display must be a string")
    try:
        ordering = Ordering(ordering_str.lower())
    except ValueError:
        valid_orderings = [ordering.value for ordering in Ordering]
        raise ValueError(f"'default_ordering' in display must be one of: {valid_orderings}")
    
    display = DisplayConfig(date_format=date_format, default_ordering=ordering)
    
    logging_data = _section(raw_config, 'logging', {'level'})
    level = logging_data.get('level', 'WARNING')
    if not isinstance(level, str):
        raise ValueError("'level' in logging must be a string")
    
    return AppConfig(
        storage=storage,
        display=display,
        logging=LoggingConfig(level=level.upper())
    )


def resolve_config(path: Optional[str] = None) -> AppConfig:
    """Load config from an explicit path, the environment, or defaults.
    
    Args:
        path: Explicit config path, takes precedence over the env var
        
    Returns:
        AppConfig object
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return default_config()
    return load_config(path)


def _section(raw_config: Dict, name: str, allowed_keys: set) -> Dict:
    """Return one optional config section after validating its keys.
    
    Args:
        raw_config: Parsed top-level configuration
        name: Section name
        allowed_keys: Keys accepted in the section
        
    Returns:
        The section dictionary, empty if absent
        
    Raises:
        ValueError: If the section is not a dictionary or has unknown keys
    """
    data = raw_config.get(name)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"'{name}' must be a dictionary")
    
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown {name} keys: {unknown_keys}")
    return data
