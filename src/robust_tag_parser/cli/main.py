"""Main CLI entry point for the robust-tags command-line tool.

Extracts requested tags from markup files (or stdin), lists the tag tokens a
file contains, and profiles extraction runs.
"""

import argparse
import csv
import io
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from robust_tag_parser import __version__
from robust_tag_parser.api import TagParser
from robust_tag_parser.shared import (
    ConfigError,
    ExtractedRecord,
    ParserConfig,
    configure_logging,
    get_logger,
)
from robust_tag_parser.tokenization import iter_tokens
from robust_tag_parser.tools import (
    PerformanceProfiler,
    error_context,
    format_results,
    unexpected_closing_positions,
)

STDIN_PATH = "-"


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.parser_config = ParserConfig()
        self.encoding = "utf-8"
        self.output_format = self.parser_config.output.default_format
        self.include_context = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file may hold a ``parser`` object (see ``ParserConfig.from_dict``)
        plus ``encoding`` and ``output_format`` keys.
        """
        config = cls()
        if config_path.exists():
            try:
                with config_path.open() as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ConfigError(
                        f"top level must be a JSON object, got {type(data).__name__}"
                    )
                parser_config = config.parser_config
                if "parser" in data:
                    parser_config = ParserConfig.from_dict(data["parser"])
                output_format = data.get("output_format", parser_config.output.default_format)
                encoding = data.get("encoding", config.encoding)
                config.parser_config = parser_config
                config.output_format = output_format
                config.encoding = encoding
            except (OSError, ValueError, ConfigError) as e:
                print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


class ExtractionProcessor:
    """Runs extraction over files for CLI commands."""

    def __init__(self, config: CLIConfig, store_errors: bool = False):
        self.config = config
        self.store_errors = store_errors
        self.logger = get_logger(__name__, None, "cli_processor")

    def read_input(self, path: str) -> str:
        if path == STDIN_PATH:
            return sys.stdin.read()
        return Path(path).read_text(encoding=self.config.encoding, errors="replace")

    def process_single_file(self, path: str, tags: List[str]) -> Dict[str, Any]:
        """Extract ``tags`` from one file and describe the outcome."""
        try:
            text = self.read_input(path)
        except OSError as e:
            self.logger.error("Failed to read input", extra={"file": path}, exc_info=False)
            return {"file": path, "success": False, "error": str(e), "records": []}

        # A fresh parser per file keeps stored errors separated by file.
        parser = TagParser(
            display_errors=not self.store_errors,
            config=self.config.parser_config,
        )
        records = parser.parse(text, tags)
        result: Dict[str, Any] = {
            "file": path,
            "success": True,
            "record_count": len(records),
            "malformed_count": sum(1 for r in records if r.is_malformed),
            "records": [r.to_dict() for r in records],
            "errors": parser.get_errors(),
        }
        if self.config.include_context:
            result["contexts"] = [
                error_context(text, position).to_dict()
                for position in unexpected_closing_positions(records)
            ]
        return result

    def batch_process(self, paths: List[str], tags: List[str]) -> List[Dict[str, Any]]:
        return [self.process_single_file(path, tags) for path in paths]


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="robust-tags",
        description="Extract tag content from malformed markup without building a DOM"
    )

    parser.add_argument("--version", action="version", version=__version__)
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

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Extract command
    extract_parser = subparsers.add_parser("extract", help="Extract tag content")
    extract_parser.add_argument(
        "paths",
        nargs="+",
        help="Markup files to read ('-' for stdin)"
    )
    extract_parser.add_argument(
        "--tag", "-t",
        dest="tags",
        action="append",
        required=True,
        help="Tag name to extract (repeatable)"
    )
    extract_parser.add_argument(
        "--format", "-f",
        choices=["text", "json", "csv"],
        help="Output format (default: from config, else text)"
    )
    extract_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    extract_parser.add_argument(
        "--store-errors",
        action="store_true",
        help="Collect errors into the output instead of printing them as found"
    )
    extract_parser.add_argument(
        "--context",
        action="store_true",
        help="Include the markup around each unexpected closing tag"
    )
    extract_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    extract_parser.add_argument(
        "--encoding",
        help="Input file encoding (default: utf-8)"
    )

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="List the tag tokens in a file")
    scan_parser.add_argument("path", help="Markup file to scan ('-' for stdin)")
    scan_parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Input file encoding (default: utf-8)"
    )

    # Profile command
    profile_parser = subparsers.add_parser("profile", help="Profile extraction runs")
    profile_parser.add_argument("paths", nargs="+", type=Path, help="Markup files to profile")
    profile_parser.add_argument(
        "--tag", "-t",
        dest="tags",
        action="append",
        required=True,
        help="Tag name to extract (repeatable)"
    )
    profile_parser.add_argument(
        "--report",
        type=Path,
        help="Write the JSON performance report to this file"
    )

    return parser


def format_output(
    results: List[Dict[str, Any]],
    format_type: str,
    preview_length: int
) -> str:
    """Format processing results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if format_type == "csv":
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["file", "index", "tag", "content"])
        for result in results:
            for index, record in enumerate(result["records"]):
                writer.writerow([result["file"], index, record["tag"], record["content"]])
        return buffer.getvalue().rstrip("\n")

    if not results:
        return "No results to display."

    sections = []
    for result in results:
        lines = [f"File: {result['file']}"]
        if not result["success"]:
            lines.append(f"   Error: {result['error']}")
        else:
            records = [ExtractedRecord(r["tag"], r["content"]) for r in result["records"]]
            lines.append(format_results(records, preview_length, result["errors"]))
            for context in result.get("contexts", []):
                lines.append(
                    f"  Position {context['position']}: {context['verdict']} "
                    f"({context['enclosing_tag']})"
                )
        sections.append("\n".join(lines))
    return "\n\n".join(sections)


def cmd_extract(args: argparse.Namespace) -> int:
    """Handle extract command."""
    config = CLIConfig()
    if args.config and args.config.exists():
        config = CLIConfig.from_file(args.config)
    if not (args.verbose or args.quiet):
        configure_logging(config.parser_config.diagnostics.logging_level)

    if args.format:
        config.output_format = args.format
    if args.encoding:
        config.encoding = args.encoding
    config.include_context = args.context

    processor = ExtractionProcessor(config, store_errors=args.store_errors)
    results = processor.batch_process(args.paths, args.tags)

    formatted_output = format_output(
        results,
        config.output_format,
        config.parser_config.output.preview_length,
    )

    if args.output:
        try:
            args.output.write_text(formatted_output)
            print(f"Results written to {args.output}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(formatted_output)

    clean = all(r["success"] and r["malformed_count"] == 0 for r in results)
    return 0 if clean else 1


def cmd_scan(args: argparse.Namespace) -> int:
    """Handle scan command."""
    try:
        if args.path == STDIN_PATH:
            text = sys.stdin.read()
        else:
            text = Path(args.path).read_text(encoding=args.encoding, errors="replace")
    except OSError as e:
        print(f"Error reading {args.path}: {e}", file=sys.stderr)
        return 1

    for token in iter_tokens(text):
        kind = "close" if token.is_closing else "open"
        print(f"{token.start_offset}-{token.end_offset}\t{kind}\t{token.name}\t{token.raw(text)}")
    return 0


def cmd_profile(args: argparse.Namespace) -> int:
    """Handle profile command."""
    profiler = PerformanceProfiler()
    parser = TagParser(display_errors=False)

    for path in args.paths:
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
            return 1
        with profiler.profile_parsing(str(path), input_size=len(text)) as session:
            session.record_results(parser.parse(text, args.tags))
        parser.clear_errors()

    report = profiler.generate_report()
    for session in report.sessions:
        print(
            f"{session.session_id}: {session.total_duration_ms:.1f}ms, "
            f"{session.throughput_mb_per_s:.2f} MB/s, {session.record_count} records, "
            f"{session.malformed_count} malformed, memory delta {session.memory_delta} bytes"
        )
    if args.report:
        profiler.save_report(report, args.report)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")

    try:
        if args.command == "extract":
            return cmd_extract(args)
        if args.command == "scan":
            return cmd_scan(args)
        if args.command == "profile":
            return cmd_profile(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
