"""Serialization of trees back to XML text.

Output is assembled from an explicit XML declaration and lxml's markup for
the node. Indentation is applied to a deep copy, so serializing never alters
the whitespace of the caller's tree.
"""

import copy
import io
from typing import Any, BinaryIO, Mapping, Optional, TextIO, Union
from xml.sax.saxutils import escape

from lxml import etree

from dom_commons.shared.config import INDENT_SPACES, OutputOptions
from dom_commons.shared.errors import SerializationError
from dom_commons.shared.locks import node_lock
from dom_commons.shared.logging import get_logger
from dom_commons.tree.nodes import NodeType, node_name, node_type

OutputStream = Union[TextIO, BinaryIO]


def create_xml_declaration(options: Optional[OutputOptions] = None) -> str:
    """Build the XML declaration for the given options.

    Returns:
        The declaration, or an empty string when it is omitted

    Example:
        >>> create_xml_declaration(OutputOptions(standalone=True))
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    """
    options = options or OutputOptions()
    if options.omit_declaration:
        return ""
    declaration = f'<?xml version="{options.version}" encoding="{options.encoding}"'
    if options.standalone is not None:
        declaration += f' standalone="{"yes" if options.standalone else "no"}"'
    return declaration + "?>"


def _markup(node: Any, indent: bool) -> str:
    kind = node_type(node)
    if kind is None:
        raise TypeError(f"Not a tree node: {type(node).__name__}")
    if kind in (NodeType.TEXT, NodeType.ATTRIBUTE):
        return escape(str(node))
    if kind is NodeType.DOCUMENT and node.getroot() is None:
        return ""

    target = node
    if indent:
        target = copy.deepcopy(node)
        etree.indent(target, space=" " * INDENT_SPACES)

    if kind is NodeType.DOCUMENT:
        return etree.tostring(target, encoding="unicode").rstrip("\n")
    markup = etree.tostring(target, encoding="unicode", with_tail=False)
    return markup.rstrip("\n") if indent else markup


def _render(node: Any, options: OutputOptions) -> str:
    declaration = create_xml_declaration(options)
    markup = _markup(node, options.indent)
    if not declaration:
        return markup
    return declaration + ("\n" if options.indent else "") + markup


def as_xml(
    node: Any,
    indent: bool = False,
    properties: Optional[Mapping[str, Union[str, bool]]] = None
) -> str:
    """Serialize a node to an XML string.

    Args:
        node: Document, element or other tree node
        indent: Indent child elements by four spaces
        properties: Transformer-style output properties; they take precedence
            over ``indent``

    Returns:
        Declaration followed by the node's markup

    Raises:
        ConfigValidationError: If ``properties`` holds an unknown key
        SerializationError: If the node cannot be serialized

    Example:
        >>> from lxml import etree
        >>> as_xml(etree.fromstring("<root><a>1</a></root>"))
        '<?xml version="1.0" encoding="UTF-8"?><root><a>1</a></root>'
    """
    options = OutputOptions.from_properties(properties, indent=indent)
    stream = io.StringIO()
    write(node, stream, options)
    return stream.getvalue()


def write(node: Any, stream: OutputStream, options: Optional[OutputOptions] = None) -> None:
    """Serialize ``node`` into ``stream``.

    Text streams receive ``str``; any other stream receives bytes in
    ``options.encoding``. Characters the encoding cannot represent are written
    as character references.

    Raises:
        SerializationError: If serialization or the write fails
    """
    options = options or OutputOptions()
    logger = get_logger(__name__, component="serialize")

    with node_lock(node):
        try:
            text = _render(node, options)
            if isinstance(stream, io.TextIOBase):
                stream.write(text)
            else:
                stream.write(text.encode(options.encoding, errors="xmlcharrefreplace"))
        except (etree.LxmlError, TypeError, LookupError, UnicodeError, OSError) as e:
            logger.debug(
                "Serialization failed",
                extra={"node_type": type(node).__name__, "error": str(e)}
            )
            raise SerializationError(f"Failed to serialize node: {e}") from e

    logger.debug(
        "Serialized node",
        extra={"node": node_name(node), "indent": options.indent, "characters": len(text)}
    )


def dump(node: Any) -> None:
    """Print the indented XML of ``node`` to stdout."""
    print(as_xml(node, indent=True))
