"""
Editor Path Conventions
=======================

Where the host editor keeps its per-user data, as a lookup table:

    {platform -> base config dir} x {channel -> editor folder}

Paths are resolved at call time from the environment; nothing is cached.
"""

# ============================================================================
# MODULE OVERVIEW
# ============================================================================
# Purpose:
#   editor_paths.py
#
# Connected modules (direct imports):
#   error_handling
#
# Notes:
#   - Windows uses %APPDATA%, macOS ~/Library/Application Support,
#     everything else $XDG_CONFIG_HOME (~/.config).
# ============================================================================

import os
import sys
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

from error_handling import BaseDirNotFoundError, ConfigurationError


# ============================================================================
# PATH TABLES
# ============================================================================

def _home(environ: Mapping[str, str]) -> Optional[Path]:
    home = environ.get("HOME") or environ.get("USERPROFILE")
    if home:
        return Path(home)
    try:
        return Path.home()
    except RuntimeError:
        return None


def _windows_config_dir(environ: Mapping[str, str]) -> Optional[Path]:
    appdata = environ.get("APPDATA")
    if appdata:
        return Path(appdata)
    home = _home(environ)
    return home / "AppData" / "Roaming" if home else None


def _macos_config_dir(environ: Mapping[str, str]) -> Optional[Path]:
    home = _home(environ)
    return home / "Library" / "Application Support" if home else None


def _xdg_config_dir(environ: Mapping[str, str]) -> Optional[Path]:
    # XDG Base Directory rules: relative values are ignored
    xdg = environ.get("XDG_CONFIG_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    home = _home(environ)
    return home / ".config" if home else None


PLATFORM_CONFIG_DIRS: Dict[str, Callable[[Mapping[str, str]], Optional[Path]]] = {
    "win32": _windows_config_dir,
    "darwin": _macos_config_dir,
    "linux": _xdg_config_dir,
}

EDITOR_CHANNELS: Dict[str, str] = {
    "stable": "Code",
    "insiders": "Code - Insiders",
    "oss": "Code - OSS",
    "vscodium": "VSCodium",
}

DEFAULT_CHANNEL = "stable"


# ============================================================================
# RESOLUTION
# ============================================================================

def config_dir(platform: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Path:
    """
    Resolve the per-user configuration directory for a platform

    Args:
        platform: sys.platform style name (defaults to the running platform)
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Base configuration directory

    Raises:
        BaseDirNotFoundError: If no directory can be derived
    """
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ

    resolver = PLATFORM_CONFIG_DIRS.get(platform, _xdg_config_dir)
    base = resolver(environ)
    if base is None:
        raise BaseDirNotFoundError(context={"platform": platform})
    return base


def editor_dir(
    channel: str = DEFAULT_CHANNEL,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """Editor data folder for a distribution channel (e.g. ~/.config/Code)"""
    try:
        folder = EDITOR_CHANNELS[channel]
    except (KeyError, TypeError):
        raise ConfigurationError(
            f"Unknown editor channel: {channel!r}. "
            f"Supported: {', '.join(EDITOR_CHANNELS)}",
            context={"channel": channel}
        ) from None
    return config_dir(platform, environ) / folder


def settings_json_path(
    channel: str = DEFAULT_CHANNEL,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """Path of the editor's user settings.json"""
    return editor_dir(channel, platform, environ) / "User" / "settings.json"


def extension_user_cache_path(
    channel: str = DEFAULT_CHANNEL,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """Path of the editor's cached extension list for the user"""
    return editor_dir(channel, platform, environ) / "CachedExtensions" / "user"
