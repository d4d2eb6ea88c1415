"""
Configuration management for the XML table editor.

Handles loading and managing configuration from files, environment variables,
and command-line options.
"""

from __future__ import annotations

import logging
import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_TRUE_VALUES = ('true', '1', 'yes', 'on')


@dataclass
class SerializationConfig:
    """How documents are written back to disk."""

    indent: int = 4
    encoding: str = "utf-8"
    xml_declaration: Optional[bool] = None  # None keeps whatever the source had


@dataclass
class EditorConfig:
    """Main configuration for the XML table editor."""

    serialization: SerializationConfig = field(default_factory=SerializationConfig)

    # Reject duplicate table names instead of shadowing them
    strict_table_names: bool = False

    # Shell behaviour
    confirm_destructive: bool = True
    max_display_rows: int = 200

    log_level: str = "WARNING"


class ConfigManager:
    """Manages editor configuration from multiple sources."""

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            env_dir = os.getenv('XML_TABLE_EDITOR_CONFIG_DIR')
            config_dir = Path(env_dir) if env_dir else Path.home() / '.xml-table-editor'
        self.config_dir = config_dir
        self.config_file = self.config_dir / 'config.yaml'
        self._config: Optional[EditorConfig] = None

    def load_config(self) -> EditorConfig:
        """Load configuration from all sources."""
        if self._config:
            return self._config

        # Start with defaults
        config = EditorConfig()

        # Load from file if it exists
        if self.config_file.exists():
            file_config = self._load_from_file()
            config = self._merge_configs(config, file_config)

        # Override with environment variables
        env_config = self._load_from_env()
        config = self._merge_configs(config, env_config)

        self._config = config
        return config

    def _load_from_file(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_file, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file {self.config_file}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {self.config_file}: expected a mapping")
            return {}
        return data

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        indent = os.getenv('XML_TABLE_EDITOR_INDENT')
        if indent:
            try:
                env_config.setdefault('serialization', {})['indent'] = int(indent)
            except ValueError:
                logger.warning(f"Ignoring non-integer XML_TABLE_EDITOR_INDENT: {indent!r}")

        encoding = os.getenv('XML_TABLE_EDITOR_ENCODING')
        if encoding:
            env_config.setdefault('serialization', {})['encoding'] = encoding

        log_level = os.getenv('XML_TABLE_EDITOR_LOG_LEVEL')
        if log_level:
            env_config['log_level'] = log_level.upper()

        # Feature flags
        for option, env_var in [
            ('strict_table_names', 'XML_TABLE_EDITOR_STRICT_TABLE_NAMES'),
            ('confirm_destructive', 'XML_TABLE_EDITOR_CONFIRM'),
        ]:
            value = os.getenv(env_var)
            if value:
                env_config[option] = value.lower() in _TRUE_VALUES

        return env_config

    def _merge_configs(self, base: EditorConfig, override: Dict[str, Any]) -> EditorConfig:
        """Merge configuration dictionaries."""
        if 'serialization' in override:
            serialization_overrides = override['serialization'] or {}
            if 'indent' in serialization_overrides:
                base.serialization.indent = int(serialization_overrides['indent'])
            if 'encoding' in serialization_overrides:
                base.serialization.encoding = serialization_overrides['encoding']
            if 'xml_declaration' in serialization_overrides:
                base.serialization.xml_declaration = serialization_overrides['xml_declaration']

        for option in ('strict_table_names', 'confirm_destructive'):
            if option in override:
                setattr(base, option, bool(override[option]))

        if 'max_display_rows' in override:
            base.max_display_rows = int(override['max_display_rows'])

        if 'log_level' in override:
            base.log_level = str(override['log_level']).upper()

        return base

    def save_config(self, config: EditorConfig) -> None:
        """Save configuration to file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)

        config_dict = {
            'serialization': {
                'indent': config.serialization.indent,
                'encoding': config.serialization.encoding,
                'xml_declaration': config.serialization.xml_declaration,
            },
            'strict_table_names': config.strict_table_names,
            'confirm_destructive': config.confirm_destructive,
            'max_display_rows': config.max_display_rows,
            'log_level': config.log_level,
        }

        try:
            with open(self.config_file, 'w') as f:
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config file {self.config_file}: {e}")

        self._config = config

    def create_default_config(self) -> Path:
        """Create a default configuration file."""
        self.save_config(EditorConfig())
        return self.config_file

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about current configuration."""
        config = self.load_config()

        return {
            'config_file': str(self.config_file),
            'config_exists': self.config_file.exists(),
            'indent': config.serialization.indent,
            'encoding': config.serialization.encoding,
            'strict_table_names': config.strict_table_names,
            'confirm_destructive': config.confirm_destructive,
            'log_level': config.log_level,
        }


# Global config manager instance
_config_manager: Optional[ConfigManager] = None

def get_config_manager() -> ConfigManager:
    """Get the global config manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager

def reset_config_manager() -> None:
    """Forget the global config manager so the next call re-reads the environment."""
    global _config_manager
    _config_manager = None

def load_config() -> EditorConfig:
    """Load the current configuration."""
    return get_config_manager().load_config()
