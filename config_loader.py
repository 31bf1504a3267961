"""
Configuration File Loader
==========================

Load theme finder configuration from external YAML or JSON files.

Lets users point the tool at a non-default editor channel or at
relocated settings / extension cache files without code changes.
"""

# ============================================================================
# MODULE OVERVIEW
# ============================================================================
# Purpose:
#   config_loader.py
#
# Connected modules (direct imports):
#   dependency_injection, editor_paths, error_handling
#
# Notes:
#   - Read-only: configuration files are never written by the tool.
# ============================================================================

import yaml
import json
import logging
import os
from pathlib import Path
from typing import Optional, Dict, Any

import editor_paths
from dependency_injection import (
    AppConfig,
    PathConfig,
    LoggingConfig
)
from error_handling import ConfigurationError, NotFoundError


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ============================================================================
# CLASSES
# ============================================================================

class ConfigLoader:
    """Load and validate configuration from files"""

    SUPPORTED_FORMATS = ('.yaml', '.yml', '.json')
    CONFIG_STEM = "theme_finder"

    @classmethod
    def load_from_file(cls, filepath: Path, channel: Optional[str] = None) -> AppConfig:
        """
        Load configuration from file

        Args:
            filepath: Path to config file (.yaml, .yml, or .json)
            channel: Editor channel overriding the file's editor.channel

        Returns:
            AppConfig instance

        Raises:
            ConfigurationError: If file not found or invalid
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise ConfigurationError(
                f"Configuration file not found: {filepath}",
                context={"filepath": str(filepath)}
            )

        if filepath.suffix not in cls.SUPPORTED_FORMATS:
            raise ConfigurationError(
                f"Unsupported config format: {filepath.suffix}. "
                f"Supported: {', '.join(cls.SUPPORTED_FORMATS)}",
                context={"filepath": str(filepath), "suffix": filepath.suffix}
            )

        try:
            with filepath.open('r', encoding='utf-8') as f:
                if filepath.suffix == '.json':
                    data = json.load(f)
                else:  # YAML
                    data = yaml.safe_load(f)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to parse config file: {e}",
                context={"filepath": str(filepath), "error": str(e)}
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config file must contain a mapping at the top level",
                context={"filepath": str(filepath)}
            )

        return cls._dict_to_config(data, channel)

    @staticmethod
    def _expand(value: Any) -> Path:
        return Path(os.path.expandvars(str(value))).expanduser()

    @classmethod
    def _dict_to_config(cls, data: Dict[str, Any], channel: Optional[str] = None) -> AppConfig:
        """Convert dictionary to AppConfig"""
        app_section = data.get('application') or {}
        editor_section = data.get('editor') or {}
        logging_section = data.get('logging') or {}

        for name, section in (('application', app_section),
                              ('editor', editor_section),
                              ('logging', logging_section)):
            if not isinstance(section, dict):
                raise ConfigurationError(
                    f"Section '{name}' must be a mapping",
                    context={"section": name}
                )

        channel = channel or editor_section.get('channel', editor_paths.DEFAULT_CHANNEL)
        platform = editor_section.get('platform')

        for name, value in (('channel', channel), ('platform', platform)):
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(
                    f"editor.{name} must be a string, got {type(value).__name__}",
                    context={"field": f"editor.{name}"}
                )

        paths = PathConfig.from_environment(channel, platform)
        if editor_section.get('settings_path'):
            paths.settings_path = cls._expand(editor_section['settings_path'])
        if editor_section.get('extensions_cache_path'):
            paths.extensions_cache_path = cls._expand(editor_section['extensions_cache_path'])

        log_path = logging_section.get('log_path')
        try:
            logging_config = LoggingConfig(
                level=str(logging_section.get('level', 'WARNING')).upper(),
                log_path=cls._expand(log_path) if log_path else None,
                max_bytes=int(logging_section.get('max_bytes', 1024 * 1024)),
                backup_count=int(logging_section.get('backup_count', 3))
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to convert logging settings: {e}",
                context={"error": str(e)}
            ) from e

        return AppConfig(
            app_name=app_section.get('name', 'VS Code Theme Finder'),
            version=str(app_section.get('version', '0.3.0')),
            paths=paths,
            logging=logging_config
        )

    @classmethod
    def find_config_file(cls, search_paths: list[Path]) -> Optional[Path]:
        """
        Search for config file in multiple locations

        Args:
            search_paths: List of directories to search

        Returns:
            Path to first config file found, or None
        """
        for search_path in search_paths:
            for ext in cls.SUPPORTED_FORMATS:
                config_file = Path(search_path) / f"{cls.CONFIG_STEM}{ext}"
                if config_file.exists():
                    return config_file

        return None

    @classmethod
    def default_search_paths(cls) -> list[Path]:
        """Working directory, then ~/.config/theme_finder style locations"""
        paths = [Path.cwd()]
        try:
            paths.append(editor_paths.config_dir() / cls.CONFIG_STEM)
        except NotFoundError as e:
            logging.getLogger("theme_finder.config").debug("No config dir: %s", e)
        return paths


class ConfigValidator:
    """Validate configuration values"""

    @staticmethod
    def validate(config: AppConfig) -> list[str]:
        """
        Validate configuration

        Args:
            config: Configuration to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if config.paths.channel not in editor_paths.EDITOR_CHANNELS:
            errors.append(f"unknown editor channel: {config.paths.channel}")

        if config.logging.level not in LOG_LEVELS:
            errors.append(f"unknown log level: {config.logging.level}")

        if config.logging.max_bytes <= 0:
            errors.append("max_bytes must be positive")

        if config.logging.backup_count < 0:
            errors.append("backup_count must not be negative")

        return errors
