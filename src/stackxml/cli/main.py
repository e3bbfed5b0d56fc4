"""Main CLI entry point for the stackxml command-line tool.

Provides document checking, event dumps and canonical reformatting.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from stackxml import __version__
from stackxml.reader import (
    EndTagEvent,
    StartTagEvent,
    XmlReader,
    copy_document,
    iter_events,
)
from stackxml.shared.config import ConfigError, DocumentConfig
from stackxml.shared.errors import XmlError
from stackxml.shared.grammar import is_name
from stackxml.shared.logging import SourceLogger, get_logger
from stackxml.writer import write_xml_file

XML_SUFFIXES = {".xml"}


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.document_config = DocumentConfig()
        self.output_format = "text"
        self.verbose = False
        self.quiet = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON DocumentConfig file."""
        config = cls()
        if config_path.exists():
            try:
                config.document_config = DocumentConfig.from_json(
                    config_path.read_text(encoding="utf-8")
                )
            except (OSError, ConfigError) as e:
                print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


class DocumentProcessor:
    """Core document processing logic for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config

    def _logger_for(self, file_path: Path) -> SourceLogger:
        return get_logger(__name__, str(file_path), "cli_processor")

    def _open(self, file_path: Path) -> XmlReader:
        return XmlReader.from_file(file_path, self.config.document_config.reader)

    def check_file(self, file_path: Path) -> Dict[str, Any]:
        """Read a whole document and report whether it is well-formed."""
        element_count = 0
        max_depth = 0
        depth = 0

        try:
            reader = self._open(file_path)
            for event in iter_events(reader):
                if isinstance(event, StartTagEvent):
                    element_count += 1
                    depth += 1
                    max_depth = max(max_depth, depth)
                elif isinstance(event, EndTagEvent):
                    depth -= 1

        except XmlError as e:
            self._logger_for(file_path).warning(
                "Malformed document", extra={"kind": e.kind.name}, line=e.line
            )
            return {"file": str(file_path), "valid": False, "error": e.to_dict()}

        except OSError as e:
            self._logger_for(file_path).error("Failed to read file")
            return {
                "file": str(file_path),
                "valid": False,
                "error": {"kind": "IO_ERROR", "message": str(e), "line": 0},
            }

        return {
            "file": str(file_path),
            "valid": True,
            "doctype": reader.doctype,
            "element_count": element_count,
            "max_depth": max_depth,
        }

    def dump_file(self, file_path: Path, keep_whitespace: bool = False) -> List[Dict[str, Any]]:
        """Return the event stream of a document as dictionaries.

        Raises:
            OSError: The file could not be read
            XmlError: The document is malformed
        """
        reader = self._open(file_path)
        events = []
        depth = 0

        for event in iter_events(reader, keep_whitespace):
            if isinstance(event, StartTagEvent):
                events.append({
                    "event": "start",
                    "name": event.tag.name,
                    "line": event.tag.line,
                    "depth": depth,
                    "attributes": dict(event.tag.attributes),
                })
                depth += 1
            elif isinstance(event, EndTagEvent):
                depth -= 1
                events.append({"event": "end", "name": event.name, "depth": depth})
            else:
                events.append({
                    "event": "text",
                    "text": event.text,
                    "line": event.line,
                    "depth": depth,
                })

        return events

    def format_file(self, file_path: Path, output_path: Path) -> Dict[str, Any]:
        """Re-emit a document through the writer.

        The output file is only written if the whole document was read
        successfully.
        """
        try:
            reader = self._open(file_path)
            doctype = reader.doctype if reader.doctype and is_name(reader.doctype) else None

            output_path.parent.mkdir(parents=True, exist_ok=True)
            with write_xml_file(
                output_path, doctype, self.config.document_config.writer
            ) as writer:
                element_count = copy_document(reader, writer)

        except XmlError as e:
            self._logger_for(file_path).warning(
                "Malformed document", extra={"kind": e.kind.name}, line=e.line
            )
            return {"file": str(file_path), "success": False, "error": str(e)}

        except OSError as e:
            self._logger_for(file_path).error("Failed to format file")
            return {"file": str(file_path), "success": False, "error": str(e)}

        return {
            "file": str(file_path),
            "output": str(output_path),
            "success": True,
            "element_count": element_count,
        }

    def find_xml_files(self, path: Path, recursive: bool = False) -> Iterator[Path]:
        """Find XML files in path."""
        if path.is_dir():
            pattern = "**/*" if recursive else "*"
            for xml_file in sorted(path.glob(pattern)):
                if xml_file.is_file() and xml_file.suffix.lower() in XML_SUFFIXES:
                    yield xml_file
        else:
            # explicit files are processed whatever their suffix
            yield path

    def collect_files(self, paths: List[Path], recursive: bool = False) -> List[Path]:
        all_files: List[Path] = []
        for path in paths:
            all_files.extend(self.find_xml_files(path, recursive))
        return all_files


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="stackxml",
        description="Check, inspect and reformat stackxml documents"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check command
    check_parser = subparsers.add_parser("check", help="Check documents are well-formed")
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files or directories to check"
    )
    check_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively search directories"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )

    # Dump command
    dump_parser = subparsers.add_parser("dump", help="Print the event stream of a document")
    dump_parser.add_argument(
        "path",
        type=Path,
        help="Document to dump"
    )
    dump_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )
    dump_parser.add_argument(
        "--keep-whitespace",
        action="store_true",
        help="Include whitespace-only text"
    )

    # Format command
    format_parser = subparsers.add_parser("format", help="Rewrite documents in canonical layout")
    format_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Files or directories to format"
    )
    format_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively search directories"
    )
    format_parser.add_argument(
        "--output-dir", "-d",
        type=Path,
        help="Output directory for formatted files"
    )
    format_parser.add_argument(
        "--suffix",
        default="_formatted",
        help="Suffix for formatted files (default: _formatted)"
    )
    format_parser.add_argument(
        "--in-place", "-i",
        action="store_true",
        help="Overwrite the input files"
    )

    # Global options
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
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


def format_check_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format check results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No documents to check."

    valid_count = sum(1 for r in results if r.get("valid", False))
    lines = [f"Checked {len(results)} documents, {valid_count} valid", "-" * 50]

    for result in results:
        if result.get("valid", False):
            lines.append(
                f"OK   {result['file']} "
                f"({result['element_count']} elements, depth {result['max_depth']})"
            )
        else:
            error = result["error"]
            location = f":{error['line']}" if error.get("line") else ""
            lines.append(f"FAIL {result['file']}{location}")
            lines.append(f"     {error['kind']}: {error['message']}")

    return "\n".join(lines)


def format_events(events: List[Dict[str, Any]], format_type: str) -> str:
    """Format a dumped event stream for output."""
    if format_type == "json":
        return json.dumps(events, indent=2)

    lines = []
    for event in events:
        indent = "  " * event["depth"]
        if event["event"] == "start":
            attributes = " ".join(
                f"{name}={value!r}" for name, value in event["attributes"].items()
            )
            suffix = f" [{attributes}]" if attributes else ""
            lines.append(f"{indent}<{event['name']}> line {event['line']}{suffix}")
        elif event["event"] == "end":
            lines.append(f"{indent}</{event['name']}>")
        else:
            lines.append(f"{indent}{event['text']!r}")

    return "\n".join(lines)


def _load_config(args: argparse.Namespace) -> CLIConfig:
    config = CLIConfig()
    if args.config and args.config.exists():
        config = CLIConfig.from_file(args.config)
    config.verbose = args.verbose
    config.quiet = args.quiet

    if not (config.verbose or config.quiet):
        logging.basicConfig(level=config.document_config.logging_level)
    return config


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    config = _load_config(args)
    config.output_format = args.format

    processor = DocumentProcessor(config)
    results = [
        processor.check_file(path)
        for path in processor.collect_files(args.paths, args.recursive)
    ]

    print(format_check_results(results, args.format))

    if not results:
        return 1

    valid_count = sum(1 for r in results if r.get("valid", False))
    return 0 if valid_count == len(results) else 1


def cmd_dump(args: argparse.Namespace) -> int:
    """Handle dump command."""
    config = _load_config(args)
    config.output_format = args.format

    processor = DocumentProcessor(config)
    try:
        events = processor.dump_file(args.path, args.keep_whitespace)
    except (OSError, XmlError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_events(events, args.format))
    return 0


def cmd_format(args: argparse.Namespace) -> int:
    """Handle format command."""
    config = _load_config(args)
    processor = DocumentProcessor(config)
    failures = 0

    files = processor.collect_files(args.paths, args.recursive)
    for path in files:
        if args.in_place:
            output_path = path
        elif args.output_dir:
            output_path = args.output_dir / f"{path.stem}{args.suffix}{path.suffix}"
        else:
            output_path = path.parent / f"{path.stem}{args.suffix}{path.suffix}"

        result = processor.format_file(path, output_path)
        if result["success"]:
            if not config.quiet:
                print(f"Formatted: {path} -> {output_path}")
        else:
            failures += 1
            print(f"Failed to format {path}: {result['error']}", file=sys.stderr)

    if not config.quiet:
        print(f"Formatted {len(files) - failures} of {len(files)} files", file=sys.stderr)
    return 0 if files and failures == 0 else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    # Route to appropriate command handler
    try:
        if args.command == "check":
            return cmd_check(args)
        elif args.command == "dump":
            return cmd_dump(args)
        elif args.command == "format":
            return cmd_format(args)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
