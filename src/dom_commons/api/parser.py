"""Parsing and document creation.

``parse`` detects the kind of input and routes it to the matching
``parse_*`` function. All of them return an lxml ``_ElementTree`` and raise
InvalidInputError, chained to the underlying cause, when the input cannot be
turned into a tree.
"""

import copy
import logging
import time
from importlib import resources
from pathlib import Path
from typing import Any, BinaryIO, List, Optional, TextIO, Union

from lxml import etree

from dom_commons.api.serializer import as_xml
from dom_commons.namespace import NAMESPACE_XML
from dom_commons.shared.config import ParseOptions
from dom_commons.shared.errors import InvalidInputError
from dom_commons.shared.logging import get_logger
from dom_commons.tree.nodes import import_node, is_document, is_element, split_clark_name

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000  # Milliseconds per second conversion


def _resolve_options(namespace_aware: bool, options: Optional[ParseOptions]) -> ParseOptions:
    if options is None:
        return ParseOptions(namespace_aware=namespace_aware)
    return options


def _strip_namespaces(document: etree._ElementTree) -> None:
    """Reduce namespaced element and attribute names to their local part.

    Labels with an undeclared prefix, such as ``x:item``, carry no namespace
    and are kept as written.
    """
    for element in document.getroot().iter():
        if not is_element(element):
            continue
        element.tag = split_clark_name(element.tag)[1]
        for key in list(element.attrib):
            namespace, local = split_clark_name(key)
            if namespace is None or namespace == NAMESPACE_XML:
                continue
            value = element.attrib.pop(key)
            element.set(local, value)
    etree.cleanup_namespaces(document)


def _fatal_errors(parser: etree.XMLParser) -> List[Any]:
    """Return logged parse errors other than namespace errors."""
    return [
        entry for entry in parser.error_log
        if entry.level >= etree.ErrorLevels.ERROR
        and entry.domain != etree.ErrorDomains.NAMESPACE
    ]


def _parse_bytes(
    content: bytes,
    options: ParseOptions,
    source: str,
    correlation_id: Optional[str],
    encoding: Optional[str] = None
) -> etree._ElementTree:
    """Parse raw bytes into a document.

    Args:
        content: XML content
        options: Parser configuration
        source: Description of the input for log messages
        correlation_id: Optional correlation ID for request tracking
        encoding: Encoding of ``content``; None lets the XML declaration decide

    Returns:
        Parsed document
    """
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "parse")
    parser = options.create_parser(encoding)

    try:
        root = etree.fromstring(content, parser)
    except etree.XMLSyntaxError as e:
        logger.debug(
            "Input is not well-formed XML",
            extra={"source": source, "error": str(e)}
        )
        raise InvalidInputError(f"Unable to parse XML from {source}: {e}") from e

    # Recovering parsers return partial trees; only namespace errors are tolerated
    errors = [] if options.namespace_aware else _fatal_errors(parser)
    if root is None or errors:
        detail = errors[0].message if errors else "no root element"
        logger.debug(
            "Input is not well-formed XML",
            extra={"source": source, "error": detail}
        )
        raise InvalidInputError(f"Unable to parse XML from {source}: {detail}")

    document = root.getroottree()
    if not options.namespace_aware:
        _strip_namespaces(document)

    logger.debug(
        "Parsed document",
        extra={
            "source": source,
            "content_length": len(content),
            "namespace_aware": options.namespace_aware,
            "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
        }
    )
    return document


def parse(
    source: InputType,
    namespace_aware: bool = True,
    options: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None
) -> etree._ElementTree:
    """Parse XML from various input sources with automatic type detection.

    Args:
        source: XML content as string or bytes, a Path, or a file-like object
        namespace_aware: Keep namespaces. False accepts undeclared prefixes
            and reduces namespaced names to local names
        options: Parser configuration, taking precedence over ``namespace_aware``
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Parsed document

    Raises:
        FileNotFoundError: If a Path does not exist
        InvalidInputError: If the input cannot be parsed

    Examples:
        >>> parse("<root><item>value</item></root>").getroot().tag
        'root'
        >>> parse(b'<?xml version="1.0"?><root/>').getroot().tag
        'root'
    """
    if isinstance(source, (str, bytes)):
        return parse_string(source, namespace_aware, options, correlation_id)
    if isinstance(source, Path):
        return parse_file(source, namespace_aware, options, correlation_id)
    if hasattr(source, "read"):
        return parse_stream(source, namespace_aware, options, correlation_id)
    raise InvalidInputError(f"Unsupported input type: {type(source).__name__}")


def parse_string(
    content: Union[str, bytes],
    namespace_aware: bool = True,
    options: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None
) -> etree._ElementTree:
    """Parse XML content held in a string or bytes.

    Strings are already decoded, so the encoding named in an XML
    declaration is ignored for them.

    Example:
        >>> parse_string('<root><item id="1">Hello</item></root>').getroot()[0].get("id")
        '1'
    """
    if content is None:
        raise InvalidInputError("XML content must not be None")

    logger = get_logger(__name__, correlation_id, "parse_string")
    if logger.is_enabled_for(logging.DEBUG):
        preview = content if isinstance(content, str) else content.decode("utf-8", "replace")
        logger.debug(
            "Starting string parse operation",
            extra={
                "preview": (
                    preview[:PREVIEW_LENGTH] + "..."
                    if len(preview) > PREVIEW_LENGTH else preview
                )
            }
        )

    if isinstance(content, str):
        return _parse_bytes(
            content.encode("utf-8"),
            _resolve_options(namespace_aware, options),
            "string",
            correlation_id,
            encoding="utf-8",
        )
    return _parse_bytes(
        content, _resolve_options(namespace_aware, options), "string", correlation_id
    )


def parse_file(
    file_path: Union[str, Path],
    namespace_aware: bool = True,
    options: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None
) -> etree._ElementTree:
    """Parse an XML file.

    Raises:
        FileNotFoundError: If ``file_path`` does not name an existing file
        InvalidInputError: If the file cannot be read or parsed
    """
    path_obj = Path(file_path) if isinstance(file_path, str) else file_path
    if not path_obj.is_file():
        raise FileNotFoundError(f"File not found: {path_obj}")

    try:
        with path_obj.open("rb") as file:
            raw_data = file.read()
    except OSError as e:
        get_logger(__name__, correlation_id, "parse_file").debug(
            "File could not be read",
            extra={"file_path": str(path_obj), "error": str(e)}
        )
        raise InvalidInputError(f"Unable to read file: {path_obj}") from e

    return _parse_bytes(
        raw_data, _resolve_options(namespace_aware, options), str(path_obj), correlation_id
    )


def parse_stream(
    stream: Union[BinaryIO, TextIO],
    namespace_aware: bool = True,
    options: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None
) -> etree._ElementTree:
    """Parse XML read from a file-like object.

    The stream is read to the end but not closed. Text streams are parsed
    as decoded text, like strings in parse_string().
    """
    if stream is None:
        raise InvalidInputError("Input stream must not be None")

    try:
        data = stream.read()
    except (OSError, ValueError) as e:
        get_logger(__name__, correlation_id, "parse_stream").debug(
            "Stream could not be read",
            extra={"stream_type": type(stream).__name__, "error": str(e)}
        )
        raise InvalidInputError(f"Unable to read stream: {e}") from e

    encoding = None
    if isinstance(data, str):
        data = data.encode("utf-8")
        encoding = "utf-8"
    return _parse_bytes(
        data,
        _resolve_options(namespace_aware, options),
        "stream",
        correlation_id,
        encoding=encoding,
    )


def parse_resource(
    package: str,
    name: str,
    namespace_aware: bool = True,
    options: Optional[ParseOptions] = None,
    correlation_id: Optional[str] = None
) -> etree._ElementTree:
    """Parse an XML file shipped as a package resource.

    Args:
        package: Dotted name of the package holding the resource
        name: Resource path relative to the package

    Raises:
        InvalidInputError: If the package or resource does not exist, or the
            resource cannot be parsed
    """
    try:
        data = resources.files(package).joinpath(name).read_bytes()
    except (ImportError, OSError) as e:
        get_logger(__name__, correlation_id, "parse_resource").debug(
            "Resource could not be loaded",
            extra={"package": package, "resource": name, "error": str(e)}
        )
        raise InvalidInputError(f"Resource not found: {package}/{name}") from e

    return _parse_bytes(
        data, _resolve_options(namespace_aware, options), f"{package}/{name}", correlation_id
    )


def create_element(name: str, namespace_uri: Optional[str] = None) -> etree._Element:
    """Create a detached element.

    Args:
        name: Element name, optionally ``prefix:local``
        namespace_uri: Namespace of the element; blank means no namespace.
            The prefix of ``name`` (or the default namespace when there is
            none) is declared on the element.

    Example:
        >>> etree.tostring(create_element("x:item", "urn:example"))
        b'<x:item xmlns:x="urn:example"/>'
    """
    if not namespace_uri or not namespace_uri.strip():
        return etree.Element(name)
    prefix, _, local = name.rpartition(":")
    return etree.Element(f"{{{namespace_uri}}}{local}", nsmap={prefix or None: namespace_uri})


def create_document(
    name: Optional[str] = None,
    namespace_uri: Optional[str] = None
) -> etree._ElementTree:
    """Create a document, empty or holding a single root element.

    Example:
        >>> create_document().getroot() is None
        True
        >>> create_document("root").getroot().tag
        'root'
    """
    if name is None:
        return etree.ElementTree()
    return etree.ElementTree(create_element(name, namespace_uri))


def create_document_from(node: Any) -> etree._ElementTree:
    """Create a new document whose root is a deep copy of ``node``."""
    if is_document(node):
        return copy.deepcopy(node)
    return etree.ElementTree(import_node(node))


def clone_element(element: etree._Element) -> etree._Element:
    """Deep-copy an element by serializing and parsing it again."""
    return parse_string(as_xml(element)).getroot()


def clone_document(document: etree._ElementTree) -> etree._ElementTree:
    """Deep-copy a document by serializing and parsing it again."""
    return parse_string(as_xml(document))
