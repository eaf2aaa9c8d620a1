"""
Command-line interface for wallrotate.

Usage:
    wallrotate [options] [mode]

Modes:
    change   Download a new wallpaper, fall back to the cache (default)
    init     Reuse the newest cached wallpaper, download only if none exists
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config
from .exceptions import (
    WallRotateError,
    ConfigError,
    ConfigValidationError,
    CacheError,
)
from .rotator import WallpaperRotator, RotationMode


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wallrotate",
        description="Rotate the Hyprland wallpaper and refresh the pywal palette"
    )

    parser.add_argument(
        "mode",
        nargs="?",
        default=RotationMode.CHANGE.value,
        choices=[m.value for m in RotationMode],
        help="init: reuse newest cached wallpaper; change: fetch a new one (default)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to config file"
    )
    parser.add_argument(
        "--no-init",
        action="store_true",
        help="Do not write a default config file on first run"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    # Argument errors exit here, before anything touches disk or network
    args = build_parser().parse_args(argv)

    logger = logging.getLogger(__name__)

    try:
        config = Config.load(
            config_file=args.config,
            initialize=not args.no_init
        )

        level = "DEBUG" if args.verbose else config.logging.level
        setup_logging(level)

        rotator = WallpaperRotator.from_config(config)
        outcome = rotator.rotate(RotationMode(args.mode))

        if outcome.is_noop:
            logger.info("Rotation finished without applying a wallpaper")
        else:
            logger.info(f"Rotation finished: {outcome.applied.path}")
        return 0

    except KeyboardInterrupt:
        print("\nCancelled by user", file=sys.stderr)
        return 130

    except ConfigValidationError as e:
        print(f"\nConfiguration Validation Error: {e}", file=sys.stderr)
        return 78  # EX_CONFIG

    except ConfigError as e:
        print(f"\nConfiguration Error: {e}", file=sys.stderr)
        return 78  # EX_CONFIG

    except CacheError as e:
        print(f"\nCache Error: {e}", file=sys.stderr)
        return 73  # EX_CANTCREAT

    except WallRotateError as e:
        # Catch-all for any other wallrotate errors
        print(f"\nError: {e}", file=sys.stderr)
        logger.error(str(e))
        if args.verbose:
            raise
        return 1


if __name__ == "__main__":
    sys.exit(main())
