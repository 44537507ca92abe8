"""Main CLI entry point for the scriptable-xml command-line tool.

Reads XML files, parses them into trees and prints the tree, its text, or
the elements matching a search.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from scriptable_xml import (
    Element,
    ParserConfig,
    XMLSyntaxError,
    XMLTreeParser,
    by_name,
    find_all_in_tree,
    has_attribute,
)
from scriptable_xml.shared.config import ConfigError
from scriptable_xml.shared.logging import get_logger

logger = get_logger(__name__, None, "cli")


def load_config(args: argparse.Namespace) -> ParserConfig:
    """Build the parser configuration from ``--config`` and ``--tokenizer``."""
    config = ParserConfig()
    if args.config:
        config = ParserConfig.from_json(args.config.read_text(encoding="utf-8"))
    if args.tokenizer:
        config = config.override(tokenizer=args.tokenizer)
    return config


def read_tree(parser: XMLTreeParser, path: Path) -> Optional[Element]:
    """Parse ``path``, reporting read and syntax errors on stderr."""
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Cannot read {path}: {e}", file=sys.stderr)
        return None

    try:
        return parser.parse(source)
    except XMLSyntaxError as e:
        location = f":{e.line}:{e.column}" if e.line is not None else ""
        print(f"{path}{location}: {e}", file=sys.stderr)
        return None


def parse_attribute_filter(spec: str) -> Dict[str, Optional[str]]:
    """Split ``KEY[=VALUE]`` into its parts."""
    key, sep, value = spec.partition("=")
    if not key:
        raise argparse.ArgumentTypeError(f"invalid attribute filter: {spec!r}")
    return {"name": key, "value": value if sep else None}


def format_element(element: Element, output_format: str) -> str:
    """Render one matched element."""
    if output_format == "json":
        return json.dumps(element.to_dict(), ensure_ascii=False)
    return element.inner_text


def cmd_tree(args: argparse.Namespace, parser: XMLTreeParser) -> int:
    """Handle tree command."""
    root = read_tree(parser, args.path)
    if root is None:
        return 1
    print(json.dumps(root.to_dict(), indent=args.indent, ensure_ascii=False))
    return 0


def cmd_text(args: argparse.Namespace, parser: XMLTreeParser) -> int:
    """Handle text command."""
    root = read_tree(parser, args.path)
    if root is None:
        return 1
    print(root.inner_text)
    return 0


def cmd_find(args: argparse.Namespace, parser: XMLTreeParser) -> int:
    """Handle find command."""
    root = read_tree(parser, args.path)
    if root is None:
        return 1

    filters = []
    if args.name:
        filters.append(by_name(args.name))
    for attribute in args.attr:
        filters.append(has_attribute(attribute["name"], attribute["value"]))
    if not filters:
        filters.append(lambda node: isinstance(node, Element))

    matches: List[Any] = find_all_in_tree(
        root, lambda node: all(matches_filter(node) for matches_filter in filters)
    )
    logger.debug("Search finished", extra={"match_count": len(matches)})

    if args.first:
        if not matches:
            print("No matching element", file=sys.stderr)
            return 1
        matches = matches[:1]

    for element in matches:
        print(format_element(element, args.format))
    return 0


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="scriptable-xml",
        description="Parse XML documents into trees and search them.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress all logging")
    parser.add_argument(
        "--tokenizer",
        choices=["expat", "lxml"],
        help="Tokenizer backend (default: expat)",
    )
    parser.add_argument("--config", type=Path, help="JSON parser configuration file")

    subparsers = parser.add_subparsers(dest="command")

    tree_parser = subparsers.add_parser("tree", help="Print the parsed tree as JSON")
    tree_parser.add_argument("path", type=Path, help="XML file")
    tree_parser.add_argument("--indent", type=int, default=2, help="JSON indentation")

    text_parser = subparsers.add_parser("text", help="Print the text content of the document")
    text_parser.add_argument("path", type=Path, help="XML file")

    find_parser = subparsers.add_parser("find", help="Print elements matching a search")
    find_parser.add_argument("path", type=Path, help="XML file")
    find_parser.add_argument("--name", help="Element tag name")
    find_parser.add_argument(
        "--attr",
        type=parse_attribute_filter,
        action="append",
        default=[],
        metavar="KEY[=VALUE]",
        help="Require an attribute, optionally with a value (repeatable)",
    )
    find_parser.add_argument("--first", action="store_true", help="Only print the first match")
    find_parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="text",
        help="Output format for matches",
    )

    return parser


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
        logging.basicConfig(level=logging.CRITICAL)
    else:
        # Parse failures are already printed to stderr by read_tree.
        logging.basicConfig(level=logging.ERROR)

    try:
        config = load_config(args)
    except (OSError, ConfigError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    xml_parser = XMLTreeParser(config)
    if args.command == "tree":
        return cmd_tree(args, xml_parser)
    if args.command == "text":
        return cmd_text(args, xml_parser)
    if args.command == "find":
        return cmd_find(args, xml_parser)

    print(f"Unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
