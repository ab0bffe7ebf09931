# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Command-line entry point for the permission key generator."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from permkeys.config import Settings
from permkeys.declarations import DeclarationError, discover_declarations
from permkeys.generator import PermissionKeyGenerator
from permkeys.keys.errors import KeyGenerationError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with the generate and check commands."""
    parser = argparse.ArgumentParser(
        prog="permkeys",
        description="Generate client-side permission key modules from declarations.",
    )
    parser.add_argument(
        "command",
        choices=["generate", "check"],
        default="generate",
        nargs="?",
        help="Write the output files, or only report outdated ones (default: generate).",
    )
    parser.add_argument(
        "-d",
        "--declarations",
        type=Path,
        help="Directory holding *.permissions.json and *.cs declarations.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Directory the generated modules are written to.",
    )
    parser.add_argument(
        "--root-namespace",
        help="Namespace prefix of generated modules (default: App.PermissionKeys).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log discovery and rendering details.",
    )
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Merge command-line options over environment settings."""
    overrides = {
        "declarations_directory": args.declarations,
        "output_directory": args.output,
        "root_namespace": args.root_namespace,
    }
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return Settings(**{key: value for key, value in overrides.items() if value})


def run(args: argparse.Namespace) -> int:
    """Execute a parsed command and return the process exit code."""
    try:
        settings = load_settings(args)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    if settings.output_directory is None:
        print(
            "No output directory given. Use --output or PERMKEYS_OUTPUT_DIRECTORY.",
            file=sys.stderr,
        )
        return 2

    generator = PermissionKeyGenerator(settings)
    try:
        modules = discover_declarations(settings.declarations_directory)
        if args.command == "check":
            stale = generator.check(modules)
            if stale:
                print(f"Outdated permission key files in {settings.output_directory}:")
                for name in stale:
                    print(f"- {name}")
                return 1
            print("Permission key files are up to date.")
            return 0

        result = generator.generate(modules)
    except DeclarationError as e:
        logger.error(f"Could not read declarations: {e}")
        return 1
    except KeyGenerationError as e:
        logger.error(f"Generation aborted, no files written: {e}")
        return 1

    print(
        f"Generated {len(result.files)} files in {result.output_directory} "
        f"({result.changed} changed)"
    )
    return 0


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``permkeys`` command."""
    args = build_parser().parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
