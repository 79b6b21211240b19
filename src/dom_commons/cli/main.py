"""Main CLI entry point for the dom-commons command-line tool.

Provides pretty-printing, XPath querying and XSD validation of XML files.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dom_commons import __version__
from dom_commons.api import (
    XPathResultType,
    as_xml,
    check,
    evaluate_xpath,
    load_schema,
    parse_file,
    write,
)
from dom_commons.shared.config import ConfigError, OutputOptions
from dom_commons.shared.errors import DomCommonsError
from dom_commons.shared.logging import configure_logging, get_logger
from dom_commons.tree import is_element, text_content

_QUERY_TYPES = {
    "string": XPathResultType.STRING,
    "boolean": XPathResultType.BOOLEAN,
    "number": XPathResultType.NUMBER,
    "nodes": XPathResultType.NODESET,
}


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="dom-commons",
        description="Format, query and validate XML documents"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Format command
    format_parser = subparsers.add_parser("format", help="Print a serialized XML file")
    format_parser.add_argument("file", type=Path, help="XML file to format")
    format_parser.add_argument(
        "--indent",
        dest="indent",
        action="store_true",
        default=True,
        help="Indent child elements (default)"
    )
    format_parser.add_argument(
        "--no-indent",
        dest="indent",
        action="store_false",
        help="Print without added indentation"
    )
    format_parser.add_argument(
        "--omit-declaration",
        action="store_true",
        help="Leave out the XML declaration"
    )
    format_parser.add_argument(
        "--encoding",
        default="UTF-8",
        help="Encoding named in the declaration (default: UTF-8)"
    )
    format_parser.add_argument(
        "--namespace-unaware",
        action="store_true",
        help="Strip namespaces while parsing"
    )

    # Query command
    query_parser = subparsers.add_parser("query", help="Evaluate an XPath expression")
    query_parser.add_argument("file", type=Path, help="XML file to query")
    query_parser.add_argument("xpath", help="XPath 1.0 expression")
    query_parser.add_argument(
        "--type", "-t",
        choices=list(_QUERY_TYPES),
        default="string",
        help="Result type (default: string)"
    )
    query_parser.add_argument(
        "--ns",
        action="append",
        default=[],
        metavar="PREFIX=URI",
        help="Bind a namespace prefix; may be repeated"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate XML files against an XSD")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to validate"
    )
    validate_parser.add_argument(
        "--schema", "-s",
        type=Path,
        required=True,
        help="XML Schema file"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Global options
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


def parse_namespace_bindings(bindings: List[str]) -> Dict[str, str]:
    """Turn ``PREFIX=URI`` arguments into a prefix mapping.

    Raises:
        ConfigError: If a binding has no ``=``
    """
    namespaces = {}
    for binding in bindings:
        prefix, separator, uri = binding.partition("=")
        if not separator or not prefix:
            raise ConfigError(f"Namespace binding must look like PREFIX=URI, got '{binding}'")
        namespaces[prefix] = uri
    return namespaces


def cmd_format(args: argparse.Namespace) -> int:
    """Handle format command."""
    try:
        document = parse_file(args.file, namespace_aware=not args.namespace_unaware)
        options = OutputOptions(
            indent=args.indent,
            omit_declaration=args.omit_declaration,
            encoding=args.encoding,
        )
        write(document, sys.stdout, options)
    except (FileNotFoundError, DomCommonsError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print()
    return 0


def _format_match(node: Any) -> str:
    if is_element(node):
        return as_xml(node, properties={"omit-xml-declaration": "yes"})
    return text_content(node)


def cmd_query(args: argparse.Namespace) -> int:
    """Handle query command."""
    try:
        namespaces = parse_namespace_bindings(args.ns)
        document = parse_file(args.file)
        result = evaluate_xpath(
            document, args.xpath, _QUERY_TYPES[args.type], *([namespaces] if namespaces else [])
        )
    except (FileNotFoundError, DomCommonsError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.type == "nodes":
        for node in result:
            print(_format_match(node))
        return 0 if result else 1
    if args.type == "boolean":
        print("true" if result else "false")
    elif args.type == "number":
        print(f"{result:g}")
    else:
        print(result)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    logger = get_logger(__name__, None, "cli_validate")
    try:
        schema = load_schema(args.schema)
    except (FileNotFoundError, DomCommonsError) as e:
        print(f"Error loading schema: {e}", file=sys.stderr)
        return 1

    results: List[Dict[str, Any]] = []
    for path in args.paths:
        if not path.exists():
            results.append({
                "file": str(path),
                "valid": False,
                "error": "File not found"
            })
            continue

        try:
            outcome = check(parse_file(path), schema)
        except DomCommonsError as e:
            logger.debug("File could not be parsed", extra={"file": str(path)})
            results.append({
                "file": str(path),
                "valid": False,
                "error": str(e)
            })
            continue

        results.append({
            "file": str(path),
            "valid": outcome.valid,
            "errors": outcome.error_count,
            "warnings": outcome.warning_count,
            "error_details": outcome.messages()[:5],
        })

    # Output results
    if args.format == "json":
        print(json.dumps(results, indent=2))
    else:
        valid_count = sum(1 for r in results if r["valid"])
        print(f"Validated {len(results)} files, {valid_count} valid")
        print("-" * 50)

        for result in results:
            status = "✓" if result["valid"] else "✗"
            print(f"{status} {result['file']}")

            if not result["valid"]:
                for error in result.get("error_details", [result.get("error", "")])[:3]:
                    print(f"   Error: {error}")

    valid_count = sum(1 for r in results if r["valid"])
    return 0 if valid_count == len(results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.ERROR)

    # Route to appropriate command handler
    try:
        if args.command == "format":
            return cmd_format(args)
        if args.command == "query":
            return cmd_query(args)
        if args.command == "validate":
            return cmd_validate(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
