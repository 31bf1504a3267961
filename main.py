# ============================================================================
# IMPORTS
# ============================================================================

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from config_loader import ConfigLoader, ConfigValidator
from dependency_injection import (
    AppConfig,
    DependencyContainer,
    create_extension_registry,
    create_settings_reader,
)
from editor_paths import DEFAULT_CHANNEL, EDITOR_CHANNELS
from error_handling import (
    ConfigurationError,
    ExceptionFormatter,
    ThemeFinderError,
)

logger = logging.getLogger("theme_finder.main")


# ============================================================================
# CONFIGURATION
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vscode-theme-finder",
        description="Show which installed extension provides your current VS Code color theme.",
    )
    parser.add_argument(
        "--channel",
        choices=sorted(EDITOR_CHANNELS),
        help=f"Editor distribution to inspect (default: {DEFAULT_CHANNEL})",
    )
    parser.add_argument("--config", type=Path, help="YAML or JSON config file")
    parser.add_argument("--theme", help="Look up this theme instead of the current one")
    parser.add_argument("--list", action="store_true", help="List all installed theme labels")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def get_config(args: argparse.Namespace) -> AppConfig:
    """
    Get application configuration.

    An explicit --config wins; otherwise theme_finder.{yaml,yml,json} is
    looked up in the working directory and the user config directory.
    """
    config_file = args.config or ConfigLoader.find_config_file(ConfigLoader.default_search_paths())

    if config_file:
        config = ConfigLoader.load_from_file(config_file, channel=args.channel)
        logger.debug("Loaded config from %s", config_file)
    else:
        config = AppConfig.create_default(args.channel or DEFAULT_CHANNEL)

    errors = ConfigValidator.validate(config)
    if errors:
        raise ConfigurationError("; ".join(errors), context={"errors": errors})
    return config


# ============================================================================
# MAIN
# ============================================================================

def run(args: argparse.Namespace) -> int:
    config = get_config(args)

    logging.getLogger().setLevel(logging.DEBUG if args.verbose else config.logging.level)
    container = DependencyContainer.create(config)

    try:
        registry = create_extension_registry(container)

        if args.list:
            for name in registry.theme_names():
                print(name)
            return 0

        theme = args.theme or create_settings_reader(container).get_current_theme_name()
        print(registry.find(theme))
        return 0
    except ThemeFinderError as e:
        # main() reports to the user
        container.logger.info(f"{e.__class__.__name__}: {e.message} {e.context}")
        raise


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        return run(args)
    except ThemeFinderError as e:
        logger.debug(ExceptionFormatter.format_for_log(e))
        print(ExceptionFormatter.format_for_user(e), file=sys.stderr)
        return 1


# ============================================================================
# ENTRYPOINT
# ============================================================================

if __name__ == "__main__":
    sys.exit(main())
