"""CLI entrypoint for ecodocs."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Mapping

from .config import ConfigError, load_config
from .logging import configure_logging, get_logger
from .manifest import ManifestUnreadable
from .orchestrator import Synchronizer
from .writer import PersistenceError

ROOT_ENV_VAR = "ECODOCS_ROOT"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecodocs",
        description="Update ecosystem.json from package metadata and git revision info.",
        exit_on_error=False,
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated document instead of writing it.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help=f"Project root (defaults to ${ROOT_ENV_VAR} or the current directory).",
    )
    parser.add_argument(
        "--manifest-path",
        type=Path,
        default=None,
        help="Package manifest to read (defaults to <root>/package.json).",
    )
    parser.add_argument(
        "--output-path",
        type=Path,
        default=None,
        help="Ecosystem document to update (defaults to <root>/ecosystem.json).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration file (defaults to <root>/.ecodocs.yml when present).",
    )
    return parser


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    """CLI entrypoint; returns the process exit code."""
    parser = _build_parser()
    try:
        args, ignored = parser.parse_known_args(argv)
    except argparse.ArgumentError as exc:
        parser.print_usage(sys.stderr)
        sys.stderr.write(f"{parser.prog}: error: {exc}\n")
        return 1
    env = os.environ if environ is None else environ

    configure_logging(verbose=bool(args.verbose))
    logger = get_logger("cli")
    if ignored:
        logger.warning("Ignoring unrecognised arguments: %s", " ".join(ignored))

    root = args.root or Path(env.get(ROOT_ENV_VAR) or Path.cwd())
    try:
        config = load_config(
            root,
            manifest_path=args.manifest_path,
            document_path=args.output_path,
            dry_run=bool(args.dry_run),
            verbose=bool(args.verbose),
            config_file=args.config,
        )
        Synchronizer().run(config)
    except (ConfigError, ManifestUnreadable, PersistenceError) as exc:
        logger.error("Fatal error: %s", exc)
        return 1
    except Exception as exc:
        logger.error("Unexpected error: %s", exc)
        logger.debug("Traceback", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
