"""Command line entry point for the program watcher."""

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from bountywatch.app import run_watch
from bountywatch.config import ConfigurationError, configure_logging, load_watcher_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Watch bug bounty program directories and report changes"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to the JSON config file (default: $BOUNTYWATCH_CONFIG or config.json)",
    )
    parser.add_argument(
        "--skip-probe",
        action="store_true",
        help="Do not probe the platform directories before reconciling",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging verbosity (default: %(default)s)",
    )
    parser.add_argument(
        "--cache-ttl",
        type=float,
        default=None,
        help="Seconds a downloaded directory may be reused from the HTTP cache",
    )
    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.getLevelNamesMapping()[parsed_args.log_level])

    try:
        if parsed_args.cache_ttl is not None and parsed_args.cache_ttl <= 0:
            raise ValueError("--cache-ttl must be positive")  # noqa: TRY301
        config = load_watcher_config(parsed_args.config)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        run_watch(
            config,
            probe=not parsed_args.skip_probe,
            cache_ttl_seconds=parsed_args.cache_ttl,
        )
    except Exception:
        log.exception("Fatal error during watch cycle")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
