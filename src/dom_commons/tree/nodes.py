"""Node inspection helpers for lxml trees.

lxml represents a document as ``_ElementTree`` and elements, comments and
processing instructions as ``_Element`` subclasses. Text and attribute values
only appear as nodes when selected through XPath, where lxml returns "smart
strings" that remember their parent. This module gives all of them a uniform
DOM-style view: a node kind, a qualified name and a text content.
"""

import copy
from enum import Enum
from typing import Any, List, Optional, Tuple

from lxml import etree

from dom_commons.namespace import NAMESPACE_XML
from dom_commons.shared.errors import NamespaceMixError

_STRING_VALUE = etree.XPath("string()")
_CHILD_NODES = etree.XPath("node()")


class NodeType(Enum):
    """Node kinds, numbered like their DOM counterparts."""

    ELEMENT = 1
    ATTRIBUTE = 2
    TEXT = 3
    ENTITY_REFERENCE = 5
    PROCESSING_INSTRUCTION = 7
    COMMENT = 8
    DOCUMENT = 9


def node_type(node: Any) -> Optional[NodeType]:
    """Classify a node, returning None for objects that are not tree nodes."""
    # Comment, PI and entity classes derive from _Element; test them first
    if isinstance(node, etree._ElementTree):
        return NodeType.DOCUMENT
    if isinstance(node, etree._Comment):
        return NodeType.COMMENT
    if isinstance(node, etree._ProcessingInstruction):
        return NodeType.PROCESSING_INSTRUCTION
    if isinstance(node, etree._Entity):
        return NodeType.ENTITY_REFERENCE
    if isinstance(node, etree._Element):
        return NodeType.ELEMENT
    if isinstance(node, etree._ElementUnicodeResult):
        return NodeType.ATTRIBUTE if node.is_attribute else NodeType.TEXT
    return None


def is_type(node: Any, expected: NodeType) -> bool:
    return node is not None and node_type(node) is expected


def is_element(node: Any) -> bool:
    return is_type(node, NodeType.ELEMENT)


def is_text(node: Any) -> bool:
    return is_type(node, NodeType.TEXT)


def is_attribute(node: Any) -> bool:
    return is_type(node, NodeType.ATTRIBUTE)


def is_comment(node: Any) -> bool:
    return is_type(node, NodeType.COMMENT)


def is_processing_instruction(node: Any) -> bool:
    return is_type(node, NodeType.PROCESSING_INSTRUCTION)


def is_document(node: Any) -> bool:
    return is_type(node, NodeType.DOCUMENT)


def split_clark_name(name: str) -> Tuple[Optional[str], str]:
    """Split ``{uri}local`` into ``(uri, local)``.

    Names without a namespace come back unchanged with a None URI. This
    includes ``x:item`` labels kept by namespace-unaware parsing, which
    ``etree.QName`` would reject.
    """
    if name.startswith("{"):
        uri, local = name[1:].split("}", 1)
        return uri, local
    return None, name


def _qualify(element: etree._Element, clark_name: str) -> str:
    """Turn a ``{uri}local`` attribute name into ``prefix:local``."""
    namespace, local = split_clark_name(clark_name)
    if namespace is None:
        return local
    if namespace == NAMESPACE_XML:
        return f"xml:{local}"
    for prefix, uri in element.nsmap.items():
        if prefix and uri == namespace:
            return f"{prefix}:{local}"
    return local


def _attribute_key(element: etree._Element, name: str) -> str:
    """Resolve a ``prefix:local`` attribute name to lxml's Clark notation."""
    if name.startswith("{") or ":" not in name:
        return name
    prefix, local = name.split(":", 1)
    uri = NAMESPACE_XML if prefix == "xml" else element.nsmap.get(prefix)
    if uri is None:
        return name
    return f"{{{uri}}}{local}"


def node_name(node: Any) -> str:
    """Return the DOM-style name of a node.

    Elements and attributes yield their qualified name (``prefix:local``),
    other kinds yield ``#document``, ``#comment``, ``#text``, the processing
    instruction target or the entity name.

    Raises:
        TypeError: If ``node`` is not a tree node
    """
    kind = node_type(node)
    if kind is NodeType.ELEMENT:
        local = split_clark_name(node.tag)[1]
        return f"{node.prefix}:{local}" if node.prefix else local
    if kind is NodeType.ATTRIBUTE:
        return _qualify(node.getparent(), node.attrname)
    if kind is NodeType.TEXT:
        return "#text"
    if kind is NodeType.COMMENT:
        return "#comment"
    if kind is NodeType.DOCUMENT:
        return "#document"
    if kind is NodeType.PROCESSING_INSTRUCTION:
        return node.target
    if kind is NodeType.ENTITY_REFERENCE:
        return node.name
    raise TypeError(f"Not a tree node: {type(node).__name__}")


def namespace_uri(node: Any) -> Optional[str]:
    """Return the namespace URI of an element or attribute, else None."""
    kind = node_type(node)
    if kind is NodeType.ELEMENT:
        return split_clark_name(node.tag)[0]
    if kind is NodeType.ATTRIBUTE:
        return split_clark_name(node.attrname)[0]
    return None


def has_namespace(node: Any) -> bool:
    return namespace_uri(node) is not None


def is_node_name(node: Any, name: str) -> bool:
    return node_name(node) == name


def text_content(node: Any) -> str:
    """Return the concatenated text of a node and its descendants."""
    kind = node_type(node)
    if kind in (NodeType.ELEMENT, NodeType.DOCUMENT):
        return str(_STRING_VALUE(node))
    if kind in (NodeType.TEXT, NodeType.ATTRIBUTE):
        return str(node)
    if kind in (NodeType.COMMENT, NodeType.PROCESSING_INSTRUCTION):
        return node.text or ""
    return ""


def owner_document(node: Any) -> Optional[etree._ElementTree]:
    """Return the document containing ``node`` (the node itself for documents)."""
    if node is None:
        return None
    if isinstance(node, etree._ElementTree):
        return node
    if isinstance(node, etree._ElementUnicodeResult):
        parent = node.getparent()
        return parent.getroottree() if parent is not None else None
    return node.getroottree()


def import_node(node: etree._Element) -> etree._Element:
    """Return a detached deep copy of ``node`` without its trailing text."""
    copied = copy.deepcopy(node)
    copied.tail = None
    return copied


def enforce_node_name(node: Any, name: str) -> None:
    """Raise ValueError unless ``node`` is named ``name``."""
    if not is_node_name(node, name):
        raise ValueError(f'Expecting node of type "{name}" - got "{node_name(node)}"')


def enforce_no_namespace_mixes(first: Any, second: Any) -> None:
    """Refuse to combine a namespaced node with a namespace-less one.

    Raises:
        NamespaceMixError: If exactly one of the two nodes has a namespace
    """
    if (not namespace_uri(first)) != (not namespace_uri(second)):
        raise NamespaceMixError(
            "Mixing non-namespaces-aware node with namespace-aware node not allowed"
        )


def node_has_attribute(node: etree._Element, name: str) -> bool:
    return _attribute_key(node, name) in node.attrib


def get_attribute_names(node: etree._Element) -> List[str]:
    """Return the qualified names of the attributes of ``node`` in document order."""
    return [_qualify(node, key) for key in node.attrib]


def get_attribute(node: etree._Element, name: str) -> str:
    """Return an attribute value, or an empty string when it is absent."""
    return node.get(_attribute_key(node, name), "")


def set_attribute(node: etree._Element, name: str, value: str) -> None:
    node.set(_attribute_key(node, name), value)


def select_child_nodes(node: Any) -> List[Any]:
    """Return every child node, including text, comments and PIs."""
    return list(_CHILD_NODES(node))


def children(parent: Any, kind: NodeType) -> List[Any]:
    """Return the child nodes of ``parent`` that are of the given kind."""
    return [child for child in select_child_nodes(parent) if node_type(child) is kind]


def select_children(parent: Any, name: Optional[str] = None) -> List[etree._Element]:
    """Return the element children of ``parent``, optionally only those named ``name``."""
    if isinstance(parent, etree._ElementTree):
        root = parent.getroot()
        candidates = [root] if root is not None else []
    else:
        candidates = [child for child in parent if is_element(child)]
    if name is None:
        return candidates
    return [child for child in candidates if node_name(child) == name]


def select_child(parent: Any, name: str) -> Optional[etree._Element]:
    """Return the first element child named ``name``, or None."""
    matches = select_children(parent, name)
    return matches[0] if matches else None


def select_element_before(node: etree._Element) -> Optional[etree._Element]:
    """Return the closest preceding element sibling, skipping text and comments."""
    for sibling in node.itersiblings(preceding=True):
        if is_element(sibling):
            return sibling
    return None


def select_element_after(node: etree._Element) -> Optional[etree._Element]:
    """Return the closest following element sibling, skipping text and comments."""
    for sibling in node.itersiblings():
        if is_element(sibling):
            return sibling
    return None
