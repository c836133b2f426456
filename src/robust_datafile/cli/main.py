"""Main CLI entry point for the robust-datafile command-line tool.

Provides commands to reformat, inspect, query, modify and check datafiles.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from robust_datafile import __version__
from robust_datafile.api import DatafileProcessor
from robust_datafile.lexical import ScalarKind, get_coercer
from robust_datafile.shared import (
    DatafileConfig,
    DatafileError,
    DiagnosticSeverity,
    configure_logging,
    get_logger,
)
from robust_datafile.tree import Node, ParseResult

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

TYPE_CHOICES = [kind.value for kind in ScalarKind]


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self, datafile_config: Optional[DatafileConfig] = None):
        self.datafile_config = datafile_config or DatafileConfig()
        self.verbose = False
        self.quiet = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "CLIConfig":
        """Build configuration from a config file and command-line overrides.

        Raises:
            ConfigError: The config file is unreadable or invalid
        """
        base = DatafileConfig.from_file(args.config) if args.config else DatafileConfig()

        overrides: Dict[str, Any] = {}
        if args.separator is not None:
            overrides["format__list_separator"] = args.separator
        if args.indent is not None:
            overrides["format__indentation"] = parse_indent(args.indent)
        if overrides:
            base = base.override(**overrides)

        config = cls(base)
        config.verbose = args.verbose
        config.quiet = args.quiet
        return config

    @property
    def logging_level(self) -> str:
        if self.verbose:
            return "DEBUG"
        if self.quiet:
            return "ERROR"
        return self.datafile_config.global_.logging_level


def parse_indent(value: str) -> str:
    """Interpret ``--indent``: ``tab``, a number of spaces, or literal text."""
    if value.lower() == "tab":
        return "\t"
    if value.isdigit():
        return " " * int(value)
    return value


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="robust-datafile",
        description="Read, query, modify and reformat datafiles",
    )

    parser.add_argument("--version", action="version", version=__version__)

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )
    parser.add_argument(
        "--separator",
        help="List separator character (default: ',')"
    )
    parser.add_argument(
        "--indent",
        help="Indentation: 'tab', a number of spaces, or literal text (default: tab)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Format command
    format_parser = subparsers.add_parser("format", help="Rewrite datafiles in canonical form")
    format_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Datafiles to format"
    )
    format_target = format_parser.add_mutually_exclusive_group()
    format_target.add_argument(
        "--in-place", "-i",
        action="store_true",
        help="Overwrite the input files"
    )
    format_target.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (single input only, default: stdout)"
    )

    # Get command
    get_parser = subparsers.add_parser("get", help="Print values of a node")
    get_parser.add_argument("path", type=Path, help="Datafile to read")
    get_parser.add_argument("key", help="Dotted path of the node, e.g. player.name")
    get_parser.add_argument(
        "--index", "-n",
        type=int,
        default=0,
        help="Value index (default: 0)"
    )
    get_parser.add_argument(
        "--type", "-t",
        choices=TYPE_CHOICES,
        default=ScalarKind.TEXT.value,
        help="Interpret the value as this type (default: text)"
    )
    get_parser.add_argument(
        "--all", "-a",
        action="store_true",
        help="Print every value, one per line"
    )

    # Set command
    set_parser = subparsers.add_parser("set", help="Set values of a node and save")
    set_parser.add_argument("path", type=Path, help="Datafile to modify (created if missing)")
    set_parser.add_argument("key", help="Dotted path of the node")
    set_parser.add_argument("values", nargs="+", help="Values written at index 0, 1, ...")
    set_parser.add_argument(
        "--type", "-t",
        choices=TYPE_CHOICES,
        default=ScalarKind.TEXT.value,
        help="Store values as this type (default: text)"
    )

    # Dump command
    dump_parser = subparsers.add_parser("dump", help="Show the tree of a datafile")
    dump_parser.add_argument("path", type=Path, help="Datafile to read")
    dump_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="json",
        help="Output format (default: json)"
    )

    # Check command
    check_parser = subparsers.add_parser("check", help="Report irregularities in datafiles")
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Datafiles to check"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )

    return parser


def format_tree(root: Node) -> str:
    """Render a tree as an indented outline."""
    lines = []
    for depth, name, node in root.walk():
        prefix = "  " * depth
        if node.is_comment:
            lines.append(f"{prefix}{name}")
        elif node.is_container:
            lines.append(f"{prefix}{name}/")
        else:
            lines.append(f"{prefix}{name}: {list(node.values)}")
    return "\n".join(lines)


def check_report(path: Path, result: Optional[ParseResult], error: Optional[str]) -> Dict[str, Any]:
    """Summarize one checked file."""
    if result is None:
        return {"file": str(path), "valid": False, "error": error}
    return {
        "file": str(path),
        "valid": not result.has_warnings(),
        "warnings": len(result.get_diagnostics_by_severity(DiagnosticSeverity.WARNING)),
        "diagnostics": [diag.to_dict() for diag in result.diagnostics],
    }


def cmd_format(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle format command."""
    if args.output and len(args.paths) > 1:
        print("Error: --output accepts a single input file", file=sys.stderr)
        return EXIT_FAILURE

    processor = DatafileProcessor(config.datafile_config)
    failures = 0
    for path in args.paths:
        try:
            result = processor.read(path)
            if args.in_place:
                processor.write(result.root, path)
                print(f"Formatted: {path}", file=sys.stderr)
            elif args.output:
                processor.write(result.root, args.output)
                print(f"Formatted: {path} -> {args.output}", file=sys.stderr)
            else:
                sys.stdout.write(processor.serialize(result.root))
        except DatafileError as e:
            print(f"Error: {e}", file=sys.stderr)
            failures += 1

    return EXIT_OK if failures == 0 else EXIT_FAILURE


def cmd_get(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle get command."""
    processor = DatafileProcessor(config.datafile_config)
    result = processor.read(args.path)
    node = result.root.get_or_create_path(args.key)
    coercer = get_coercer(args.type)

    if args.all:
        for value in node.values:
            print(coercer.deserialize(value))
    else:
        print(coercer.deserialize(node.get_value(args.index)))
    return EXIT_OK


def cmd_set(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle set command."""
    processor = DatafileProcessor(config.datafile_config)
    if args.path.exists():
        root = processor.read(args.path).root
    else:
        root = config.datafile_config.create_root()

    node = root.get_or_create_path(args.key)
    coercer = get_coercer(args.type)
    for index, raw in enumerate(args.values):
        node.set_value(index, coercer.serialize(coercer.deserialize(raw)))

    processor.write(root, args.path)
    return EXIT_OK


def cmd_dump(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle dump command."""
    processor = DatafileProcessor(config.datafile_config)
    root = processor.read(args.path).root
    if args.format == "json":
        print(json.dumps(root.to_dict(), indent=2))
    else:
        print(format_tree(root))
    return EXIT_OK


def cmd_check(args: argparse.Namespace, config: CLIConfig) -> int:
    """Handle check command."""
    processor = DatafileProcessor(config.datafile_config)
    reports = []
    for path in args.paths:
        try:
            reports.append(check_report(path, processor.read(path), None))
        except DatafileError as e:
            reports.append(check_report(path, None, str(e)))

    if args.format == "json":
        print(json.dumps(reports, indent=2))
    else:
        valid_count = sum(1 for report in reports if report["valid"])
        print(f"Checked {len(reports)} files, {valid_count} clean")
        print("-" * 50)
        for report in reports:
            status = "OK  " if report["valid"] else "FAIL"
            print(f"{status} {report['file']}")
            if "error" in report:
                print(f"     Error: {report['error']}")
            for diag in report.get("diagnostics", []):
                line = f"line {diag['line']}: " if "line" in diag else ""
                print(f"     {diag['severity']}: {line}{diag['message']}")

    return EXIT_OK if all(report["valid"] for report in reports) else EXIT_FAILURE


COMMANDS = {
    "format": cmd_format,
    "get": cmd_get,
    "set": cmd_set,
    "dump": cmd_dump,
    "check": cmd_check,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILURE

    logger = get_logger(__name__, None, "cli")
    try:
        config = CLIConfig.from_args(args)
        configure_logging(config.logging_level)
        logger.debug("Running command", extra={"command": args.command})
        return COMMANDS[args.command](args, config)
    except DatafileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
