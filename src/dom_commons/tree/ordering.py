"""Insertion of elements into a parent according to a canonical sibling order.

Schemas often fix the order in which child elements must appear. Given that
order as a sequence of labels, ``insert_element`` places a new child after
every sibling that may precede it and before the first one that may not.
"""

from typing import Optional, Sequence, Set

from lxml import etree

from dom_commons.shared.logging import get_logger
from dom_commons.tree.editing import append_element, insert_element_before
from dom_commons.tree.nodes import node_name, select_children


def select_predecessors(ordered_names: Sequence[str], name: str) -> Set[str]:
    """Return the labels allowed before (or alongside) ``name``.

    Args:
        ordered_names: Canonical order of sibling labels
        name: Label of the element being placed

    Returns:
        Labels of ``ordered_names`` up to and including ``name``. Every label
        is returned when ``name`` does not occur in the order.

    Example:
        >>> sorted(select_predecessors(["a", "b", "c"], "b"))
        ['a', 'b']
    """
    predecessors = set()
    for ordered_name in ordered_names:
        predecessors.add(ordered_name)
        if ordered_name == name:
            break
    return predecessors


def select_successor_element_from_order(
    parent: etree._Element,
    ordered_names: Sequence[str],
    name: str
) -> Optional[etree._Element]:
    """Return the first child of ``parent`` that must come after ``name``.

    Children whose labels are not part of the order count as successors.
    """
    predecessors = select_predecessors(ordered_names, name)
    for child in select_children(parent):
        if node_name(child) not in predecessors:
            return child
    return None


def insert_element(
    parent: etree._Element,
    element: etree._Element,
    ordered_names: Sequence[str]
) -> etree._Element:
    """Insert ``element`` under ``parent`` at the position dictated by the order.

    An element whose label is absent from ``ordered_names`` is appended as the
    last child.

    Args:
        parent: Element receiving the new child
        element: Element to insert; it is detached from any previous parent
        ordered_names: Canonical order of sibling labels

    Returns:
        The inserted element
    """
    name = node_name(element)
    successor = None
    if name in ordered_names:
        successor = select_successor_element_from_order(parent, ordered_names, name)

    get_logger(__name__, component="ordering").debug(
        "Inserting element by order",
        extra={
            "element": name,
            "successor": node_name(successor) if successor is not None else None,
        }
    )

    if successor is None:
        return append_element(parent, element)
    return insert_element_before(successor, element)
