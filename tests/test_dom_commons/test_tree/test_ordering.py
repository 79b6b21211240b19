"""Tests for ordered sibling insertion."""

import pytest
from lxml import etree

from dom_commons.tree.nodes import node_name, select_children
from dom_commons.tree.ordering import (
    insert_element,
    select_predecessors,
    select_successor_element_from_order,
)


def child_names(parent):
    """Return the labels of the element children of ``parent``."""
    return [node_name(child) for child in select_children(parent)]


def make_parent(*names):
    """Build a parent element with one empty child per name."""
    parent = etree.Element("parent")
    for name in names:
        etree.SubElement(parent, name)
    return parent


class TestSelectPredecessors:
    """Test suite for select_predecessors."""

    def test_up_to_and_including_name(self):
        """Test the prefix of the order ending at the name."""
        assert select_predecessors(["a", "b", "c", "d"], "b") == {"a", "b"}
        assert select_predecessors(["a", "b", "c"], "a") == {"a"}

    def test_absent_name_returns_everything(self):
        """Test that an unknown name yields the whole order."""
        assert select_predecessors(["a", "b"], "z") == {"a", "b"}

    def test_empty_order(self):
        """Test an empty ordering sequence."""
        assert select_predecessors([], "a") == set()


class TestSelectSuccessor:
    """Test suite for select_successor_element_from_order."""

    def test_first_child_after_name(self):
        """Test that the first non-predecessor is returned."""
        parent = make_parent("a", "c", "d")

        successor = select_successor_element_from_order(parent, ["a", "b", "c", "d"], "b")

        assert node_name(successor) == "c"

    def test_no_successor(self):
        """Test that None is returned when every child may precede."""
        parent = make_parent("a", "b")

        assert select_successor_element_from_order(parent, ["a", "b", "c"], "c") is None

    def test_unknown_children_are_successors(self):
        """Test that labels outside the order are never skipped."""
        parent = make_parent("a", "unknown", "c")

        successor = select_successor_element_from_order(parent, ["a", "b", "c"], "b")

        assert node_name(successor) == "unknown"

    def test_ignores_non_element_children(self):
        """Test that comments and text do not count."""
        parent = etree.fromstring("<parent><a/>text<!--c--><c/></parent>")

        successor = select_successor_element_from_order(parent, ["a", "b", "c"], "b")

        assert node_name(successor) == "c"


class TestInsertElement:
    """Test suite for insert_element."""

    @pytest.mark.parametrize(
        "existing, order, new, expected",
        [
            (["a", "c"], ["a", "b", "c"], "b", ["a", "b", "c"]),
            (["a", "c"], ["a", "b", "c", "d"], "d", ["a", "c", "d"]),
            ([], ["x"], "x", ["x"]),
            (["b", "c"], ["a", "b", "c"], "a", ["a", "b", "c"]),
            (["a", "b"], ["a", "b"], "b", ["a", "b", "b"]),
        ],
    )
    def test_scenarios(self, existing, order, new, expected):
        """Test placement for typical orderings."""
        parent = make_parent(*existing)

        inserted = insert_element(parent, etree.Element(new), order)

        assert inserted.getparent() is parent
        assert child_names(parent) == expected

    def test_label_absent_from_order_is_appended(self):
        """Test that an unordered label goes last."""
        parent = make_parent("a", "b")

        insert_element(parent, etree.Element("z"), ["a", "b"])

        assert child_names(parent) == ["a", "b", "z"]

    def test_insert_before_unknown_child(self):
        """Test that unknown existing labels act as successors."""
        parent = make_parent("a", "unknown", "c")

        insert_element(parent, etree.Element("b"), ["a", "b", "c"])

        assert child_names(parent) == ["a", "b", "unknown", "c"]

    def test_element_is_moved_from_previous_parent(self):
        """Test that an attached element is detached first."""
        source = etree.fromstring("<source><b/>kept</source>")
        parent = make_parent("a", "c")
        moved = source[0]

        insert_element(parent, moved, ["a", "b", "c"])

        assert child_names(parent) == ["a", "b", "c"]
        assert select_children(source) == []
        assert source.text == "kept"

    def test_prefixed_labels(self):
        """Test ordering on qualified names."""
        parent = etree.fromstring(
            '<p:parent xmlns:p="urn:p"><p:a/><p:c/></p:parent>'
        )
        new = etree.SubElement(etree.Element("holder"), "{urn:p}b", nsmap={"p": "urn:p"})

        insert_element(parent, new, ["p:a", "p:b", "p:c"])

        assert child_names(parent) == ["p:a", "p:b", "p:c"]
