"""Main entry point for the post linter.

Provides the ``check``, ``list`` and ``rules`` commands.
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from postlint import __version__
from postlint.config import load_settings, update_from_cli_args
from postlint.display import configure_logging, render_posts, render_report, render_rules
from postlint.export import result_to_json, write_report
from postlint.linter import PostLinter
from postlint.models.errors import PostLintError
from postlint.rules import RULES
from postlint.type_definitions import LOG_LEVELS

logger = logging.getLogger("postlint")

EXIT_OK = 0
EXIT_LINT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all sub-commands."""
    parser = argparse.ArgumentParser(
        prog="postlint",
        description="Lint Jekyll-style markdown posts: front matter, code fences and links",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        type=Path,
        help="YAML configuration file (default: config/postlint.yaml if present)",
    )
    common.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Logging level (overrides POSTLINT_LOG_LEVEL)",
    )
    common.add_argument("--log-file", help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    check_parser = subparsers.add_parser(
        "check", parents=[common], help="Lint posts and report findings",
    )
    check_parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Post files or directories (default: the configured posts directory)",
    )
    check_parser.add_argument(
        "--disable",
        action="append",
        metavar="RULE",
        help="Disable a rule by id; may be given multiple times",
    )
    check_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on warnings as well as errors",
    )
    check_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format written to stdout",
    )
    check_parser.add_argument(
        "--output",
        type=Path,
        metavar="FILE",
        help="Also write the JSON report to FILE",
    )
    check_parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while linting",
    )

    list_parser = subparsers.add_parser(
        "list", parents=[common], help="List posts with their front matter metadata",
    )
    list_parser.add_argument("paths", nargs="*", type=Path, help="Post files or directories")

    subparsers.add_parser("rules", help="List available rules")

    return parser


def run_check(args: argparse.Namespace) -> int:
    settings = update_from_cli_args(args)
    linter = PostLinter(settings, show_progress=args.progress)
    result = linter.lint_paths(args.paths)

    if args.format == "json":
        sys.stdout.write(result_to_json(result) + "\n")
    else:
        render_report(result)

    if args.output:
        write_report(result, args.output)

    if result.succeeded:
        logger.success("All posts passed")
        return EXIT_OK
    return EXIT_LINT_FAILED


def run_list(args: argparse.Namespace) -> int:
    settings = update_from_cli_args(args)
    # Listing never fails on findings, so rules are irrelevant here
    linter = PostLinter(settings, disabled=RULES)
    reports = [linter.lint_file(path) for path in linter.discover(args.paths)]
    reports.sort(key=lambda r: (r.date is None, r.date.replace(tzinfo=None) if r.date else None, r.path))
    render_posts(reports)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments and execute the appropriate command.

    Returns:
        Process exit code: 0 clean, 1 lint failures, 2 usage, configuration
        or file-system errors

    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_USAGE

    if args.command == "rules":
        render_rules(RULES.values())
        return EXIT_OK

    try:
        settings = load_settings(args.config)
        configure_logging(
            args.log_level or settings.log_level,
            args.log_file or settings.log_file,
        )

        match args.command:
            case "check":
                return run_check(args)
            case "list":
                return run_list(args)
            case _:
                parser.print_help()
                return EXIT_USAGE
    except PostLintError as e:
        logger.error("%s", e.message)
        return EXIT_USAGE
    except OSError as e:
        logger.error("File system error: %s", e)
        return EXIT_USAGE


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(EXIT_LINT_FAILED)


if __name__ == "__main__":
    run()
