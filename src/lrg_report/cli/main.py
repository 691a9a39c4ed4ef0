"""Main CLI entry point for the lrg-report command-line tool.

Provides commands to reformat, query, summarise and render LRG report files.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from lrg_report import __version__
from lrg_report.api import LxmlAdapter, parse_file
from lrg_report.shared import (
    ConfigError,
    ContentMode,
    ParseResult,
    ParserConfig,
    ReportError,
)
from lrg_report.shared.logging import get_logger

PRESETS = {
    "default": ParserConfig.default,
    "legacy": ParserConfig.legacy,
}


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.parser_config = ParserConfig.default()
        self.output_format = "text"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Recognised keys are ``parser_preset`` (default or legacy), ``parser``
        (a ParserConfig dictionary, applied over the preset) and
        ``output_format``.
        """
        config = cls()
        if not config_path.exists():
            return config

        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)

            preset = data.get("parser_preset")
            if preset in PRESETS:
                config.parser_config = PRESETS[preset]()
            if "parser" in data:
                base = config.parser_config.to_dict()
                for component, values in data["parser"].items():
                    if isinstance(values, dict) and isinstance(base.get(component), dict):
                        base[component].update(values)
                    else:
                        base[component] = values
                config.parser_config = ParserConfig.from_dict(base)

            config.output_format = data.get("output_format", config.output_format)

        except (OSError, ValueError, ConfigError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


def _add_config_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    subparser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        help="Parser configuration preset"
    )
    subparser.add_argument(
        "--content-mode",
        choices=[mode.name.lower() for mode in ContentMode],
        help="How repeated text runs inside one element are stored"
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="lrg-report",
        description="Read, query, rewrite and render LRG report XML files"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    reformat_parser = subparsers.add_parser(
        "reformat", help="Parse a report and write it back out"
    )
    reformat_parser.add_argument("input", type=Path, help="Report file to read")
    reformat_parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="File to write the reformatted report to"
    )
    _add_config_arguments(reformat_parser)

    find_parser = subparsers.add_parser("find", help="Look up a node by path")
    find_parser.add_argument("input", type=Path, help="Report file to read")
    find_parser.add_argument("path", help="Node name or slash-delimited path")
    find_parser.add_argument(
        "--attr", "-a",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Required attribute value (repeatable)"
    )
    find_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        help="Output format"
    )
    _add_config_arguments(find_parser)

    summary_parser = subparsers.add_parser("summary", help="Summarise a report")
    summary_parser.add_argument("input", type=Path, help="Report file to read")
    summary_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        help="Output format"
    )
    _add_config_arguments(summary_parser)

    render_parser = subparsers.add_parser(
        "render", help="Render a report through an XSLT stylesheet"
    )
    render_parser.add_argument("input", type=Path, help="Report file to read")
    render_parser.add_argument("stylesheet", type=Path, help="XSLT stylesheet")
    render_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    _add_config_arguments(render_parser)

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def load_config(args: argparse.Namespace) -> CLIConfig:
    """Build the CLI configuration from a config file and command-line flags."""
    config = CLIConfig()
    if args.config:
        config = CLIConfig.from_file(args.config)

    if args.preset:
        config.parser_config = PRESETS[args.preset]()
    if args.content_mode:
        config.parser_config = config.parser_config.override(
            tree__content_mode=ContentMode[args.content_mode.upper()]
        )
    if getattr(args, "format", None):
        config.output_format = args.format

    return config


def parse_attribute_filters(values: List[str]) -> Dict[str, str]:
    """Turn ``KEY=VALUE`` arguments into an attribute filter."""
    filters = {}
    for value in values:
        key, sep, expected = value.partition("=")
        if not sep or not key:
            raise ValueError(f"Attribute filter must look like KEY=VALUE: {value}")
        filters[key] = expected
    return filters


def format_summary(result: ParseResult, format_type: str) -> str:
    """Format a parse summary for output."""
    summary = result.summary()
    summary["top_level"] = [node.name for node in result.document.children]
    summary["diagnostics"] = [
        {
            "severity": diag.severity.name,
            "message": diag.message,
            "offset": diag.offset,
        }
        for diag in result.diagnostics
    ]

    if format_type == "json":
        return json.dumps(summary, indent=2)

    lines = [
        f"Top-level nodes: {', '.join(summary['top_level']) or '(none)'}",
        f"Total nodes: {summary['node_count']}",
        f"Tokens: {summary['tokens_generated']}",
        f"Processing time: {summary['processing_time_ms']:.1f}ms",
    ]
    for diag in summary["diagnostics"]:
        lines.append(f"{diag['severity']}: {diag['message']}")
    return "\n".join(lines)


def format_node(node: Any, format_type: str) -> str:
    """Format a found node for output."""
    if format_type == "json":
        data = node.to_dict()
        data["path"] = node.path
        data["position"] = node.position()
        return json.dumps(data, indent=2)

    lines = [f"Path: {node.path}", f"Position: {node.position()}"]
    for key, value in node.attributes.items():
        lines.append(f"@{key}: {value}")
    if node.content is not None:
        lines.append(f"Content: {node.content}")
    lines.append(f"Children: {len(node.children)}")
    return "\n".join(lines)


def cmd_reformat(args: argparse.Namespace) -> int:
    """Handle reformat command."""
    config = load_config(args)
    result = parse_file(args.input, output_path=args.output, config=config.parser_config)
    written = result.document.write()

    if not args.quiet:
        print(
            f"Wrote {result.node_count} nodes to {written}"
            + (f" ({len(result.diagnostics)} diagnostics)" if result.diagnostics else ""),
            file=sys.stderr
        )
    return 0


def cmd_find(args: argparse.Namespace) -> int:
    """Handle find command."""
    config = load_config(args)
    try:
        filters = parse_attribute_filters(args.attr)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = parse_file(args.input, config=config.parser_config)
    node = result.document.find_node(args.path, filters or None)
    if node is None:
        print(f"No node found for {args.path}", file=sys.stderr)
        return 1

    print(format_node(node, config.output_format))
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    """Handle summary command."""
    config = load_config(args)
    result = parse_file(args.input, config=config.parser_config)
    print(format_summary(result, config.output_format))
    return 0


def cmd_render(args: argparse.Namespace) -> int:
    """Handle render command."""
    config = load_config(args)
    adapter = LxmlAdapter()
    if not adapter.is_available():
        print("Error: rendering requires lxml to be installed", file=sys.stderr)
        return 1

    result = parse_file(args.input, config=config.parser_config)
    rendered = adapter.render_html(result, args.stylesheet)
    if not rendered.success:
        for error in rendered.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 1

    if args.output:
        try:
            args.output.write_text(rendered.converted_data, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        if not args.quiet:
            print(f"Rendered report written to {args.output}", file=sys.stderr)
    else:
        print(rendered.converted_data)
    return 0


COMMANDS = {
    "reformat": cmd_reformat,
    "find": cmd_find,
    "summary": cmd_summary,
    "render": cmd_render,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    logger = get_logger(__name__, None, "cli")
    try:
        return COMMANDS[args.command](args)

    except ReportError as e:
        logger.debug("Command failed", extra={"command": args.command}, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
