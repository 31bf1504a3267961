"""
Dependency Injection System
============================

Configuration objects and wiring for the theme finder.

Benefits:
- Editor paths resolved in one place
- Easy to point at fixture files for testing
- Configuration as objects (not dicts)
"""

# ============================================================================
# IMPORTS
# ============================================================================

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Optional, Mapping
import sys
import logging

import editor_paths


# ============================================================================
# CONFIGURATION CLASSES
# ============================================================================

@dataclass
class PathConfig:
    """Editor file paths configuration"""
    settings_path: Path
    extensions_cache_path: Path
    channel: str = editor_paths.DEFAULT_CHANNEL
    platform: str = sys.platform

    @classmethod
    def from_environment(
        cls,
        channel: str = editor_paths.DEFAULT_CHANNEL,
        platform: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> 'PathConfig':
        """Create path configuration from the running platform's conventions"""
        platform = platform or sys.platform
        return cls(
            settings_path=editor_paths.settings_json_path(channel, platform, environ),
            extensions_cache_path=editor_paths.extension_user_cache_path(channel, platform, environ),
            channel=channel,
            platform=platform,
        )


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "WARNING"
    log_path: Optional[Path] = None
    max_bytes: int = 1024 * 1024
    backup_count: int = 3


@dataclass
class AppConfig:
    """Complete application configuration"""
    app_name: str
    version: str
    paths: PathConfig
    logging: LoggingConfig

    @classmethod
    def create_default(cls, channel: str = editor_paths.DEFAULT_CHANNEL) -> 'AppConfig':
        """Create default application configuration"""
        return cls(
            app_name="VS Code Theme Finder",
            version="0.3.0",
            paths=PathConfig.from_environment(channel),
            logging=LoggingConfig()
        )


# ============================================================================
# INTERFACE PROTOCOLS
# ============================================================================

class ILogger(Protocol):
    """Logger interface"""

    def log(self, message: str) -> None:
        """Log a message"""
        ...

    def error(self, message: str) -> None:
        """Log an error"""
        ...

    def info(self, message: str) -> None:
        """Log info"""
        ...


# ============================================================================
# LOGGER IMPLEMENTATIONS
# ============================================================================

class FileLogger:
    """Rotating file-based logger (log/info/error).

    Only used when a log_path is configured; the tool writes nothing
    else to disk.
    """

    def __init__(
        self,
        log_path: Path,
        *,
        max_bytes: int = 1024 * 1024,
        backup_count: int = 3,
    ):
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

        # Deterministic logger name per path to avoid duplicate handlers
        logger_name = f"theme_finder.filelogger:{str(self.log_path)}"
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(logging.INFO)
        self._logger.propagate = False

        if not self._logger.handlers:
            from logging.handlers import RotatingFileHandler

            handler = RotatingFileHandler(
                filename=str(self.log_path),
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
                delay=True,
            )
            formatter = logging.Formatter(
                fmt="[%(asctime)s] [%(levelname)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    def log(self, message: str):
        """Log a message"""
        self._logger.info(message)

    def info(self, message: str):
        """Log info"""
        self._logger.info(message)

    def error(self, message: str):
        """Log an error"""
        self._logger.error(message)

    def close(self):
        """Close and detach the file handlers"""
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)


# ============================================================================
# DEPENDENCY CONTAINER
# ============================================================================

@dataclass
class DependencyContainer:
    """
    Container for all application dependencies

    Readers receive their paths and logger from this container.
    """
    config: AppConfig
    logger: ILogger

    @classmethod
    def create(cls, config: Optional[AppConfig] = None) -> 'DependencyContainer':
        """
        Create dependency container with all dependencies

        Args:
            config: Application configuration (uses default if None)

        Returns:
            Configured dependency container
        """
        if config is None:
            config = AppConfig.create_default()

        if config.logging.log_path:
            logger = FileLogger(
                config.logging.log_path,
                max_bytes=config.logging.max_bytes,
                backup_count=config.logging.backup_count,
            )
        else:
            logger = logging.getLogger("theme_finder")
        logger.info(f"{config.app_name} v{config.version} ({config.paths.platform}/{config.paths.channel})")

        return cls(config=config, logger=logger)


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_settings_reader(container: DependencyContainer):
    """
    Factory function to create a SettingsReader for the configured editor

    Args:
        container: Dependency container

    Returns:
        Configured SettingsReader instance
    """
    from settings_reader import SettingsReader

    return SettingsReader(container.config.paths.settings_path)


def create_extension_registry(container: DependencyContainer):
    """
    Factory function to load the installed-extension registry

    Args:
        container: Dependency container

    Returns:
        Loaded ExtensionRegistry instance
    """
    from extension_cache import ExtensionRegistry

    return ExtensionRegistry.load(container.config.paths)
