"""
Extension Cache Reader
======================

Loads the editor's cached list of installed extensions
(CachedExtensions/user) and finds the extension that contributes a
given color theme.

Cache layout (only the fields used here):

    {"result": [
        {"identifier": {"id": "dracula-theme.theme-dracula"},
         "manifest": {"categories": ["Themes"],
                      "contributes": {"themes": [{"label": "Dracula"}]}}}
    ]}
"""

# ============================================================================
# IMPORTS
# ============================================================================

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from error_handling import ParseError, ThemeNotFoundError
from settings_reader import read_text


logger = logging.getLogger("theme_finder.extensions")

THEMES_CATEGORY = "Themes"
MARKETPLACE_URL = "https://marketplace.visualstudio.com/items?itemName={}"


# ============================================================================
# DATA MODELS
# ============================================================================

@dataclass(frozen=True)
class ThemeContribution:
    """One theme declared in an extension's manifest"""
    label: str
    ui_theme: Optional[str] = None
    path: Optional[str] = None


@dataclass(frozen=True)
class ExtensionRecord:
    """One installed extension"""
    identifier: str
    categories: Tuple[str, ...] = ()
    themes: Tuple[ThemeContribution, ...] = ()
    display_name: Optional[str] = None
    version: Optional[str] = None

    @property
    def theme_names(self) -> Tuple[str, ...]:
        return tuple(theme.label for theme in self.themes)

    @property
    def is_theme_extension(self) -> bool:
        return THEMES_CATEGORY in self.categories

    def contributes_theme(self, name: str) -> bool:
        return any(theme.label == name for theme in self.themes)

    @property
    def url(self) -> str:
        """Marketplace page of the extension"""
        return MARKETPLACE_URL.format(self.identifier)


@dataclass(frozen=True)
class FoundTheme:
    """Result of a theme lookup: the owning extension and the theme label"""
    record: ExtensionRecord
    variant: str

    @property
    def identifier(self) -> str:
        return self.record.identifier

    @property
    def url(self) -> str:
        return self.record.url

    def __str__(self) -> str:
        return f"'{self.variant}' from {self.url}"


# ============================================================================
# MANIFEST PARSING
# ============================================================================

def _expect(value: Any, kind: type, what: str, index: int) -> Any:
    if not isinstance(value, kind):
        raise ParseError(
            f"Extension #{index}: {what} must be {'an object' if kind is dict else 'a list'}",
            context={"index": index, "field": what}
        )
    return value


def _parse_theme(raw: Any, index: int) -> ThemeContribution:
    if not isinstance(raw, dict) or not isinstance(raw.get("label"), str):
        raise ParseError(
            f"Extension #{index}: theme entry without a string 'label'",
            context={"index": index, "field": "contributes.themes"}
        )
    return ThemeContribution(
        label=raw["label"],
        ui_theme=raw.get("uiTheme"),
        path=raw.get("path"),
    )


def parse_record(raw: Any, index: int = 0) -> ExtensionRecord:
    """
    Build an ExtensionRecord from one cache entry

    Args:
        raw: Entry from the cache's "result" list
        index: Position in the list (for error messages)

    Raises:
        ParseError: If required objects are missing or mistyped
    """
    entry = _expect(raw, dict, "entry", index)
    identifier = _expect(entry.get("identifier"), dict, "identifier", index)
    manifest = _expect(entry.get("manifest"), dict, "manifest", index)

    contributes = _expect(manifest.get("contributes") or {}, dict, "contributes", index)
    raw_themes = _expect(contributes.get("themes") or [], list, "contributes.themes", index)
    categories = _expect(manifest.get("categories") or [], list, "categories", index)

    ext_id = identifier.get("id", "")
    if not isinstance(ext_id, str):
        raise ParseError(
            f"Extension #{index}: identifier.id must be a string",
            context={"index": index, "field": "identifier.id"}
        )
    if not all(isinstance(c, str) for c in categories):
        raise ParseError(
            f"Extension #{index}: categories must be strings",
            context={"index": index, "field": "categories"}
        )

    return ExtensionRecord(
        identifier=ext_id,
        categories=tuple(categories),
        themes=tuple(_parse_theme(t, index) for t in raw_themes),
        display_name=manifest.get("displayName"),
        version=manifest.get("version"),
    )


# ============================================================================
# REGISTRY
# ============================================================================

class ExtensionRegistry:
    """
    Installed extensions in cache order.

    Usage:
        registry = ExtensionRegistry.load()
        found = registry.find(get_current_theme_name())
        print(found)   # 'Dracula' from https://marketplace...
    """

    def __init__(self, records: List[ExtensionRecord], source: Optional[Path] = None):
        self.records = list(records)
        self.source = source

    @classmethod
    def load(cls, paths=None) -> 'ExtensionRegistry':
        """
        Load the registry from the editor's extension cache

        Args:
            paths: PathConfig to read from (platform defaults if None)

        Raises:
            NotFoundError: Cache file does not exist
            ParseError: Cache content is malformed
        """
        if paths is None:
            from dependency_injection import PathConfig
            paths = PathConfig.from_environment()

        cache_path = Path(paths.extensions_cache_path)
        logger.debug("Reading extension cache from %s", cache_path)
        return cls.load_from(read_text(cache_path), source=cache_path)

    @classmethod
    def load_from(cls, text: str, source: Optional[Path] = None) -> 'ExtensionRegistry':
        """Load the registry from cache file contents"""
        context: Dict[str, Any] = {"path": str(source)} if source else {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(
                f"Cannot deserialize extension cache: {e.msg} (line {e.lineno})",
                context=context
            ) from e

        if not isinstance(data, dict) or not isinstance(data.get("result"), list):
            raise ParseError("Extension cache has no 'result' list", context=context)

        try:
            records = [parse_record(raw, i) for i, raw in enumerate(data["result"])]
        except ParseError as e:
            e.context.update(context)
            raise

        logger.info("Loaded %d extensions", len(records))
        return cls(records, source=source)

    def find(self, theme_name: str) -> FoundTheme:
        """
        Find the extension contributing a theme

        Only extensions in the "Themes" category are considered. When
        several declare the same label the first one in cache order wins.

        Raises:
            ThemeNotFoundError: No installed theme extension has this label
        """
        for record in self.records:
            if record.is_theme_extension and record.contributes_theme(theme_name):
                logger.debug("Theme %r provided by %s", theme_name, record.identifier)
                return FoundTheme(record=record, variant=theme_name)

        context = {"path": str(self.source)} if self.source else {}
        raise ThemeNotFoundError(theme_name, context=context)

    def theme_names(self) -> List[str]:
        """All labels contributed by theme extensions, in cache order"""
        return [
            name
            for record in self.records
            if record.is_theme_extension
            for name in record.theme_names
        ]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[ExtensionRecord]:
        return iter(self.records)
