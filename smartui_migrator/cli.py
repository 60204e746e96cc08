"""Command line interface for the SmartUI migration scanner."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import load_config
from .errors import MultiplePlatformsDetectedError, PlatformNotDetectedError, ScannerError
from .log import configure_logging
from .project_scanner import scan_project
from .reporter import collect_warnings, generate_reports, render_summary

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_DETECTED = 2
EXIT_MULTIPLE = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartui-migrator",
        description="Detect the visual testing platform a project uses before migrating it to SmartUI.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser(
        "scan",
        help="Detect platform, framework and language and list the files to migrate.",
    )
    scan.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project root to scan (defaults to the current directory).",
    )
    scan.add_argument(
        "--config",
        default=None,
        help="Path to optional scanner configuration file (YAML or JSON).",
    )
    scan.add_argument(
        "--output",
        default=None,
        help="Directory to write report.json and report.md to.",
    )
    scan.add_argument(
        "--json",
        action="store_true",
        help="Print the detection result as JSON instead of a summary line.",
    )
    scan.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every detection step to stderr.",
    )

    return parser


def handle_scan(args: argparse.Namespace) -> int:
    logger = configure_logging(args.verbose)
    config = load_config(Path(args.config) if args.config else None)

    result = scan_project(Path(args.path).expanduser(), config=config, logger=logger)
    warnings = collect_warnings(result)

    if args.output:
        output_dir = Path(args.output).expanduser().resolve()
        for path in generate_reports(output_dir, result, warnings):
            logger.info("Wrote %s", path)

    if args.json:
        print(json.dumps({"detection": result.to_dict(), "warnings": warnings}, indent=2))
    else:
        print(render_summary(result))
        for warning in warnings:
            print(f"Warning: {warning}", file=sys.stderr)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "scan":
        try:
            return handle_scan(args)
        except PlatformNotDetectedError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            print(
                "This project does not appear to use Percy, Applitools or Sauce Labs Visual.",
                file=sys.stderr,
            )
            return EXIT_NOT_DETECTED
        except MultiplePlatformsDetectedError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            if exc.matches:
                found = ", ".join(exc.matches)
                where = f" in {exc.source}" if exc.source else ""
                print(f"Found{where}: {found}. Remove all but one platform and re-run.", file=sys.stderr)
            return EXIT_MULTIPLE
        except (ScannerError, OSError, ValueError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return EXIT_ERROR
    parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
