"""Command-line entry point: aggregate and print an application's configuration."""

import argparse
import logging
import sys

import yaml

from bento.core.app import BentoBox
from bento.core.config import load_config, validate_config
from bento.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Aggregate a bento configuration directory")
    parser.add_argument("config_dir", nargs="?", help="Configuration directory (default: settings)")
    parser.add_argument("--env", help="Environment section to apply")
    parser.add_argument("--log-level", help="Logging level")
    parser.add_argument("--settings", help="Path to a bento.yaml settings file")
    return parser.parse_args(argv)


def _printable(value):
    if isinstance(value, dict):
        return {str(k): _printable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_printable(v) for v in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return repr(value)


def main(argv=None) -> int:
    """Main application entry point."""
    args = parse_args(argv)

    # Load configuration
    settings = load_config(args.settings)
    if args.config_dir:
        settings.config_path = args.config_dir
    if args.env:
        settings.loader.environment = args.env
    if args.log_level:
        settings.log_level = args.log_level.upper()

    # Setup logging
    setup_logging(settings.debug_mode, settings.log_level, settings.log_dir)

    # Validate configuration
    errors = validate_config(settings)
    if errors:
        logger.error("Configuration errors:")
        for error in errors:
            logger.error(f"  - {error}")
        return 1

    bento = BentoBox(settings=settings)
    if bento.last_load_errors:
        logger.warning(f"{len(bento.last_load_errors)} files failed to load")

    yaml.safe_dump(_printable(bento.config), sys.stdout, default_flow_style=False, sort_keys=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
