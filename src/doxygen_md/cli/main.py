"""Main CLI entry point for the doxygen-md command-line tool.

Provides subcommands for the full XML-to-Markdown conversion and for
producing the intermediate index and definitions artifacts on their own.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from doxygen_md import __version__
from doxygen_md.api import DoxygenMarkdownGenerator
from doxygen_md.shared import DiagnosticEntry, DoxygenMarkdownError, GeneratorConfig, OutputError

PROG = "doxygen-md"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "xml_dir",
        nargs="?",
        type=Path,
        default=Path("xml"),
        help="Directory of Doxygen XML compound files (default: xml)"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )
    parser.add_argument(
        "--work-dir", "-d",
        type=Path,
        help="Directory for the index and definitions artifacts"
    )


def _add_resolver_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--ns",
        help="Public namespace prefix; symbols without it are left out"
    )
    parser.add_argument(
        "--header",
        help="Exact public header filename, when more than one header qualifies"
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Fall back to the first header (or none) instead of failing"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of resolver threads (default: one per CPU)"
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Convert Doxygen XML documentation into a single Markdown reference"
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only report errors"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    generate_parser = subparsers.add_parser("generate", help="Generate the Markdown reference")
    _add_common_arguments(generate_parser)
    _add_resolver_arguments(generate_parser)
    generate_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output Markdown file (default: stdout)"
    )
    generate_parser.add_argument(
        "--no-artifacts",
        action="store_true",
        help="Do not write index.json and defs.json"
    )

    index_parser = subparsers.add_parser("index", help="Write the merged compound index only")
    _add_common_arguments(index_parser)

    resolve_parser = subparsers.add_parser(
        "resolve", help="Write the index and the ordered definitions artifact"
    )
    _add_common_arguments(resolve_parser)
    _add_resolver_arguments(resolve_parser)

    return parser


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Load the configuration file (if any) and apply command-line overrides.

    Raises:
        ConfigValidationError: If the file or an override is invalid
    """
    config = GeneratorConfig.from_file(args.config) if args.config else GeneratorConfig()

    overrides: Dict[str, Any] = {}
    if getattr(args, "ns", None) is not None:
        overrides["resolver__namespace"] = args.ns
    if getattr(args, "header", None):
        overrides["resolver__header_name"] = args.header
    if getattr(args, "lenient", False):
        overrides["resolver__require_unique_header"] = False
    if getattr(args, "workers", None) is not None:
        overrides["resolver__max_workers"] = args.workers
    if args.work_dir is not None:
        overrides["output__work_dir"] = args.work_dir
    if getattr(args, "no_artifacts", False):
        overrides["output__write_artifacts"] = False
    return config.override(**overrides) if overrides else config


def _report_diagnostics(diagnostics: List[DiagnosticEntry]) -> None:
    for entry in diagnostics:
        print(f"{PROG}: {entry.severity.name.lower()}: {entry.message}", file=sys.stderr)


def cmd_generate(args: argparse.Namespace, config: GeneratorConfig) -> int:
    """Handle generate command."""
    result = DoxygenMarkdownGenerator(config).run(args.xml_dir)
    _report_diagnostics(result.diagnostics)

    if args.output:
        try:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(result.markdown, encoding="utf-8")
        except OSError as e:
            raise OutputError(f"Cannot write Markdown ({e.strerror or e})", args.output) from e
        if not args.quiet:
            print(
                f"Wrote {result.definition_count} definitions to {args.output}",
                file=sys.stderr
            )
    else:
        sys.stdout.write(result.markdown)
    return 0


def cmd_index(args: argparse.Namespace, config: GeneratorConfig) -> int:
    """Handle index command."""
    config = config.override(output__write_artifacts=True)
    generator = DoxygenMarkdownGenerator(config)
    generator.build_index(args.xml_dir)
    if not args.quiet:
        print(f"Index written to {config.output.index_path}", file=sys.stderr)
    return 0


def cmd_resolve(args: argparse.Namespace, config: GeneratorConfig) -> int:
    """Handle resolve command."""
    config = config.override(output__write_artifacts=True)
    generator = DoxygenMarkdownGenerator(config)
    diagnostics: List[DiagnosticEntry] = []
    records = generator.resolve_definitions(generator.build_index(args.xml_dir), diagnostics=diagnostics)
    _report_diagnostics(diagnostics)
    if not args.quiet:
        print(
            f"Wrote {len(records)} definitions to {config.output.definitions_path}",
            file=sys.stderr
        )
    return 0


def configure_logging(args: argparse.Namespace, config: GeneratorConfig) -> None:
    """Send package logs to stderr; -v and -q take precedence over the configured level."""
    if args.verbose:
        level = "DEBUG"
    elif args.quiet:
        level = "ERROR"
    else:
        level = config.logging_level
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("doxygen_md").setLevel(level)


COMMANDS = {
    "generate": cmd_generate,
    "index": cmd_index,
    "resolve": cmd_resolve,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = build_config(args)
        configure_logging(args, config)
        return COMMANDS[args.command](args, config)
    except (DoxygenMarkdownError, OSError) as e:
        print(f"{PROG}: error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
