"""
Settings Reader
===============

Reads the editor's user settings.json and extracts the active color theme
("workbench.colorTheme").

The editor writes JSON with comments: // and /* */ comments and trailing
commas are tolerated, string contents are never touched.
"""

# ============================================================================
# IMPORTS
# ============================================================================

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from error_handling import NotFoundError, ParseError


logger = logging.getLogger("theme_finder.settings")

COLOR_THEME_KEY = "workbench.colorTheme"

# Strings are matched first so comment markers inside them survive
_COMMENT_RE = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r'"(?:\\.|[^"\\])*"|,(?=\s*[}\]])', re.DOTALL)


def _keep_strings(match: "re.Match[str]") -> str:
    token = match.group(0)
    return token if token.startswith('"') else ""


# ============================================================================
# PARSING
# ============================================================================

def parse_settings(text: str) -> Dict[str, Any]:
    """
    Parse a settings document

    Args:
        text: Raw settings.json contents

    Returns:
        Top-level settings object

    Raises:
        ParseError: If the text is not a JSON(-with-comments) object
    """
    cleaned = _COMMENT_RE.sub(_keep_strings, text)
    cleaned = _TRAILING_COMMA_RE.sub(_keep_strings, cleaned)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Invalid settings document: {e.msg} (line {e.lineno}, column {e.colno})",
            context={"line": e.lineno, "column": e.colno}
        ) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Settings document must be an object, got {type(data).__name__}",
            context={"type": type(data).__name__}
        )
    return data


def read_text(path: Path) -> str:
    """Read an editor-owned file, mapping I/O failures to typed errors"""
    try:
        return path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise NotFoundError(
            f"File not found: {path}",
            context={"path": str(path)}
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(
            f"Cannot read {path}: {e}",
            context={"path": str(path)}
        ) from e


# ============================================================================
# SETTINGS DOCUMENT
# ============================================================================

@dataclass(frozen=True)
class SettingsDocument:
    """A parsed settings.json, loaded fresh per query"""
    data: Dict[str, Any] = field(default_factory=dict)
    path: Optional[Path] = None

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'SettingsDocument':
        path = Path(path)
        text = read_text(path)
        try:
            return cls(data=parse_settings(text), path=path)
        except ParseError as e:
            e.context.setdefault("path", str(path))
            raise

    @property
    def color_theme(self) -> str:
        """The active color theme name"""
        value = self.data.get(COLOR_THEME_KEY)
        context = {"key": COLOR_THEME_KEY}
        if self.path is not None:
            context["path"] = str(self.path)

        if value is None:
            raise ParseError(f"'{COLOR_THEME_KEY}' is not set", context=context)
        if not isinstance(value, str):
            raise ParseError(
                f"'{COLOR_THEME_KEY}' must be a string, got {type(value).__name__}",
                context=context
            )
        return value


def get_current_theme_from(text: str) -> str:
    """Get the active theme name from settings.json contents"""
    return SettingsDocument(data=parse_settings(text)).color_theme


def get_current_theme_name(paths=None) -> str:
    """
    Read the user's settings.json and return the active theme name

    Args:
        paths: PathConfig to read from (platform defaults if None)

    Returns:
        Theme name, e.g. "Dracula"

    Raises:
        NotFoundError: settings.json does not exist
        ParseError: settings.json is malformed or has no theme set
    """
    if paths is None:
        from dependency_injection import PathConfig
        paths = PathConfig.from_environment()
    return SettingsReader(paths.settings_path).get_current_theme_name()


# ============================================================================
# READER
# ============================================================================

class SettingsReader:
    """Reads the active theme from one settings file; holds no state"""

    def __init__(self, settings_path: Union[str, Path]):
        self.settings_path = Path(settings_path)

    def load(self) -> SettingsDocument:
        logger.debug("Reading settings from %s", self.settings_path)
        return SettingsDocument.load(self.settings_path)

    def get_current_theme_name(self) -> str:
        theme = self.load().color_theme
        logger.info("Current theme: %s", theme)
        return theme
