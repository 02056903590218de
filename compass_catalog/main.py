"""Entry point for the compass-catalog generator."""

import argparse
import logging
import sys
from pathlib import Path

from .config import load_config
from .exceptions import CompassCatalogError
from .generator import generate

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compass-catalog",
        description="Generate EventCatalog services, domains and teams from Atlassian Compass.",
    )
    parser.add_argument(
        "project_dir",
        nargs="?",
        help="EventCatalog project directory (defaults to $PROJECT_DIR)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Generator config file (defaults to ./compass-catalog.yaml or ~/.compass-catalog/)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Log changes without writing them")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the generator once and return the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(config_path=args.config)
    except CompassCatalogError as e:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
        logger.error(str(e))
        return 2

    # Command-line flags take precedence over the config file
    updates = {}
    if args.dry_run:
        updates["dry_run"] = True
    if args.debug:
        updates["debug"] = True
    if updates:
        config = config.model_copy(update=updates)

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s" if config.debug else "%(message)s",
    )

    try:
        summary = generate(config, project_dir=args.project_dir)
    except CompassCatalogError as e:
        logger.error(str(e))
        return 2

    return 0 if summary.ok else 1


if __name__ == "__main__":
    sys.exit(main())
