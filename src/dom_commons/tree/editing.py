"""Structural edits on lxml trees.

lxml attaches the text that follows an element (its ``tail``) to the element
itself, so a plain ``remove`` or ``append`` would carry that text along. The
helpers here detach nodes the DOM way: the node moves, the text around it
stays where it was.
"""

from typing import Any, Iterable, Optional, Union

from lxml import etree

from dom_commons.api.xpath import select_nodes
from dom_commons.namespace import NamespaceContext, NamespaceContextLike
from dom_commons.shared.logging import get_logger
from dom_commons.tree.nodes import (
    NodeType,
    enforce_no_namespace_mixes,
    import_node,
    is_element,
    namespace_uri as node_namespace_uri,
    node_name,
    node_type,
    select_children,
    select_element_after,
)


def _detach(node: etree._Element) -> None:
    """Unlink ``node`` from its parent, leaving its tail text in place."""
    parent = node.getparent()
    if parent is None:
        return
    if node.tail:
        previous = node.getprevious()
        if previous is not None:
            previous.tail = (previous.tail or "") + node.tail
        else:
            parent.text = (parent.text or "") + node.tail
    node.tail = None
    parent.remove(node)


def _require_parent(node: Any) -> etree._Element:
    parent = node.getparent()
    if parent is None:
        raise ValueError(f"Node has no parent: {node_name(node)}")
    return parent


def append_element(parent: Any, child: etree._Element) -> etree._Element:
    """Move ``child`` to the end of ``parent``'s children.

    A document parent receives ``child`` as its root element.

    Raises:
        NamespaceMixError: If only one of the parent element and child has a
            namespace
        ValueError: If the document already has a root element
    """
    if isinstance(parent, etree._ElementTree):
        if parent.getroot() is not None:
            raise ValueError("Document already has a root element")
        _detach(child)
        parent._setroot(child)
        return child

    enforce_no_namespace_mixes(parent, child)
    _detach(child)
    parent.append(child)
    return child


def insert_element_as_first(parent: etree._Element, child: etree._Element) -> etree._Element:
    """Insert ``child`` before the first element child of ``parent``."""
    existing = select_children(parent)
    if not existing:
        return append_element(parent, child)
    return insert_element_before(existing[0], child)


def insert_element_before(node: etree._Element, element: etree._Element) -> etree._Element:
    """Insert ``element`` as the preceding sibling of ``node``."""
    enforce_no_namespace_mixes(_require_parent(node), element)
    _detach(element)
    node.addprevious(element)
    return element


def insert_element_after(node: etree._Element, element: etree._Element) -> etree._Element:
    """Insert ``element`` after ``node``.

    The new element lands right before the next element sibling, so comments
    and text between ``node`` and that sibling stay ahead of it. Without a
    next element sibling it is appended to the parent.
    """
    parent = _require_parent(node)
    enforce_no_namespace_mixes(parent, element)
    sibling = select_element_after(node)
    _detach(element)
    if sibling is not None:
        sibling.addprevious(element)
    else:
        parent.append(element)
    return element


def squeeze_in_element(parent: etree._Element, element: etree._Element) -> etree._Element:
    """Wrap the whole content of ``parent`` into ``element``.

    Returns:
        ``element``, now the last child of ``parent`` and holding its former content
    """
    content = [child for child in parent if child is not element]
    text = parent.text
    parent.text = None

    result = append_element(parent, element)
    if text:
        append_text(result, text)
    for child in content:
        # Moving wholesale, so each child keeps its tail
        result.append(child)
    return result


def delete(node: Any) -> None:
    """Remove a node from its parent.

    Elements, comments and PIs are unlinked, keeping the text that followed
    them. Attribute and text values selected through XPath are cleared on
    their owning element.

    Raises:
        ValueError: If the node has no parent or owning element
    """
    kind = node_type(node)
    if kind is NodeType.ATTRIBUTE:
        _require_parent(node).attrib.pop(node.attrname, None)
        return
    if kind is NodeType.TEXT:
        owner = _require_parent(node)
        if node.is_tail:
            owner.tail = None
        else:
            owner.text = None
        return
    if kind is NodeType.DOCUMENT:
        raise ValueError("A document cannot be deleted")

    _require_parent(node)
    _detach(node)


def delete_all(nodes: Iterable[Any]) -> None:
    """Remove every node in ``nodes``."""
    for node in nodes:
        delete(node)


def delete_matching(node: Any, xpath: str, *namespace_context: NamespaceContextLike) -> int:
    """Remove every node selected by ``xpath`` evaluated against ``node``.

    Returns:
        Number of deleted nodes
    """
    matches = select_nodes(node, xpath, *namespace_context)
    delete_all(matches)
    get_logger(__name__, component="delete").debug(
        "Deleted nodes matching XPath",
        extra={"xpath": xpath, "deleted": len(matches)}
    )
    return len(matches)


def rename_node(
    node: etree._Element,
    name: str,
    namespace_uri: Optional[str] = None
) -> etree._Element:
    """Rename an element in place.

    Args:
        node: Element to rename
        name: New name, optionally ``prefix:local``. With a namespace, the
            prefix is declared on the element when it is not bound to that
            namespace yet. Without one, only the local part is used.
        namespace_uri: New namespace URI. None keeps the current namespace,
            an empty string removes it

    Returns:
        The renamed element
    """
    if not is_element(node):
        raise TypeError(f"Only elements can be renamed, got {node_name(node)}")

    prefix, _, local = name.rpartition(":")
    uri = node_namespace_uri(node) if namespace_uri is None else namespace_uri
    if prefix and uri and node.nsmap.get(prefix) != uri:
        add_namespace(node, prefix, uri)
    node.tag = f"{{{uri}}}{local}" if uri else local
    return node


def rename_all(node: Any, from_name: str, to_name: str) -> None:
    """Rename every element in the subtree whose name matches ``from_name``.

    Names are compared case-insensitively.
    """
    start = node.getroot() if isinstance(node, etree._ElementTree) else node
    if start is None:
        return
    wanted = from_name.lower()
    for element in [e for e in start.iter() if is_element(e)]:
        if node_name(element).lower() == wanted:
            rename_node(element, to_name)


def copy_attributes(src: etree._Element, dest: etree._Element) -> etree._Element:
    """Copy every attribute of ``src`` onto ``dest``."""
    for key, value in src.attrib.items():
        dest.set(key, value)
    return dest


def copy_children(src: etree._Element, dest: etree._Element) -> etree._Element:
    """Append deep copies of the element children of ``src`` to ``dest``."""
    for child in select_children(src):
        append_element(dest, import_node(child))
    return dest


def append_text(parent: etree._Element, text: str) -> etree._Element:
    """Append text after the last child of ``parent``.

    Returns:
        ``parent``
    """
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text
    return parent


def append_comment(parent: etree._Element, text: str) -> etree._Comment:
    comment = etree.Comment(text)
    parent.append(comment)
    return comment


def add_namespace(
    element: etree._Element,
    alias: str,
    namespace: Union[str, NamespaceContext],
) -> etree._Element:
    """Declare ``xmlns:alias`` on ``element``.

    Args:
        element: Element receiving the declaration
        alias: Namespace prefix to declare
        namespace: Namespace URI, or a context that resolves ``alias``

    Raises:
        ValueError: If a context does not know ``alias``
    """
    uri = namespace if isinstance(namespace, str) else namespace.get_namespace_uri(alias)
    if not uri:
        raise ValueError(f"No namespace URI bound to prefix '{alias}'")

    # lxml's nsmap is read-only; cleanup_namespaces can still declare prefixes
    # on the subtree top, as long as every existing prefix is kept.
    keep = {prefix for e in element.iter() if is_element(e) for prefix in e.nsmap if prefix}
    keep.add(alias)
    etree.cleanup_namespaces(element, top_nsmap={alias: uri}, keep_ns_prefixes=sorted(keep))
    return element
