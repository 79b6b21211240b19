"""Tests for structural tree edits."""

import pytest
from lxml import etree

from dom_commons.namespace import NamespaceContext
from dom_commons.shared.errors import NamespaceMixError
from dom_commons.tree.editing import (
    add_namespace,
    append_comment,
    append_element,
    append_text,
    copy_attributes,
    copy_children,
    delete,
    delete_all,
    delete_matching,
    insert_element_after,
    insert_element_as_first,
    insert_element_before,
    rename_all,
    rename_node,
    squeeze_in_element,
)
from dom_commons.tree.nodes import is_comment, namespace_uri, node_name, select_children


def markup(element):
    """Serialize an element without tail for comparisons."""
    return etree.tostring(element, encoding="unicode", with_tail=False)


class TestAppendAndInsert:
    """Test suite for insertion helpers."""

    def test_append_moves_element_and_keeps_tail(self):
        """Test that appending detaches the node but not its trailing text."""
        root = etree.fromstring("<r><a/>tail<b/></r>")
        a, b = root[0], root[1]

        result = append_element(b, a)

        assert result is a
        assert markup(root) == "<r>tail<b><a/></b></r>"

    def test_append_to_empty_document(self):
        """Test that a document receives its root element."""
        document = etree.ElementTree()
        root = etree.Element("{urn:x}root")

        append_element(document, root)

        assert document.getroot() is root
        with pytest.raises(ValueError, match="already has a root"):
            append_element(document, etree.Element("other"))

    def test_append_refuses_namespace_mix(self):
        """Test namespace mix detection on append."""
        parent = etree.Element("{urn:x}parent")

        with pytest.raises(NamespaceMixError):
            append_element(parent, etree.Element("child"))

    def test_insert_as_first(self):
        """Test insertion before the first element child."""
        root = etree.fromstring("<r>text<a/><b/></r>")

        insert_element_as_first(root, etree.Element("x"))

        assert markup(root) == "<r>text<x/><a/><b/></r>"

    def test_insert_as_first_into_empty_parent(self):
        """Test that an empty parent simply receives the element."""
        root = etree.Element("r")

        insert_element_as_first(root, etree.Element("x"))

        assert markup(root) == "<r><x/></r>"

    def test_insert_before(self):
        """Test insertion before a reference node."""
        root = etree.fromstring("<r><a/><b/></r>")

        insert_element_before(root[1], etree.Element("x"))

        assert markup(root) == "<r><a/><x/><b/></r>"

    def test_insert_before_root_fails(self):
        """Test that a parentless reference node is refused."""
        with pytest.raises(ValueError, match="no parent"):
            insert_element_before(etree.Element("lonely"), etree.Element("x"))

    def test_insert_after_skips_comments(self):
        """Test that the element lands before the next element sibling."""
        root = etree.fromstring("<r><a/><!--c--><b/></r>")

        insert_element_after(root[0], etree.Element("x"))

        assert markup(root) == "<r><a/><!--c--><x/><b/></r>"

    def test_insert_after_last_appends(self):
        """Test insertion after the last element."""
        root = etree.fromstring("<r><a/><b/></r>")

        insert_element_after(root[1], etree.Element("x"))

        assert markup(root) == "<r><a/><b/><x/></r>"

    def test_squeeze_in_element(self):
        """Test wrapping all content of a parent."""
        root = etree.fromstring("<r>t<a/>u<b/></r>")

        wrapper = squeeze_in_element(root, etree.Element("w"))

        assert wrapper.getparent() is root
        assert markup(root) == "<r><w>t<a/>u<b/></w></r>"


class TestDelete:
    """Test suite for deletion helpers."""

    def test_delete_keeps_following_text(self):
        """Test that the tail of a deleted element stays in place."""
        root = etree.fromstring("<r><a/>x<b/>y</r>")

        delete(root[1])

        assert markup(root) == "<r><a/>xy</r>"

    def test_delete_first_child_moves_tail_to_parent_text(self):
        """Test tail handling without a previous sibling."""
        root = etree.fromstring("<r>s<a/>x</r>")

        delete(root[0])

        assert markup(root) == "<r>sx</r>"

    def test_delete_attribute_value(self):
        """Test deleting an attribute selected through XPath."""
        root = etree.fromstring("<r id='1' keep='2'/>")

        delete(root.xpath("@id")[0])

        assert markup(root) == '<r keep="2"/>'

    def test_delete_text_values(self):
        """Test deleting text and tail text selected through XPath."""
        root = etree.fromstring("<r>hello<a/>tail</r>")

        delete_all(root.xpath("text()"))

        assert markup(root) == "<r><a/></r>"

    def test_delete_comment(self):
        """Test deleting a comment."""
        root = etree.fromstring("<r><!--c--><a/></r>")

        delete(root[0])

        assert markup(root) == "<r><a/></r>"

    def test_delete_root_fails(self):
        """Test that a parentless element cannot be deleted."""
        with pytest.raises(ValueError):
            delete(etree.Element("lonely"))
        with pytest.raises(ValueError):
            delete(etree.ElementTree(etree.Element("root")))

    def test_delete_value_without_owner_fails(self):
        """Test that string values with no owning element cannot be deleted."""
        value = etree.fromstring("<r/>").xpath("concat('a', 'b')")

        assert value.getparent() is None
        with pytest.raises(ValueError, match="no parent"):
            delete(value)

    def test_delete_attribute_twice(self):
        """Test that deleting an already removed attribute is a no-op."""
        root = etree.fromstring("<r id='1'/>")
        attribute = root.xpath("@id")[0]

        delete(attribute)
        delete(attribute)

        assert root.get("id") is None

    def test_delete_matching(self):
        """Test deleting every node an XPath selects."""
        root = etree.fromstring("<r><b/><a><b/></a><c/></r>")

        deleted = delete_matching(root, "//b")

        assert deleted == 2
        assert markup(root) == "<r><a/><c/></r>"

    def test_delete_matching_with_namespaces(self):
        """Test deletion with a namespace context."""
        root = etree.fromstring('<r xmlns:x="urn:x"><x:a/><a/></r>')

        assert delete_matching(root, "x:a", {"x": "urn:x"}) == 1
        assert [e.tag for e in root] == ["a"]


class TestRename:
    """Test suite for renaming helpers."""

    def test_rename_keeps_namespace(self):
        """Test renaming with the current namespace."""
        element = etree.Element("{http://example.com}oldName")

        rename_node(element, "newElementName")

        assert namespace_uri(element) == "http://example.com"
        assert etree.QName(element).localname == "newElementName"

    def test_rename_changes_namespace(self):
        """Test renaming into another namespace."""
        element = etree.Element("{urn:old}a")

        rename_node(element, "b", "urn:new")

        assert element.tag == "{urn:new}b"

    def test_rename_removes_namespace(self):
        """Test that an empty URI drops the namespace."""
        element = etree.Element("{urn:old}a")

        rename_node(element, "p:b", "")

        assert element.tag == "b"

    def test_rename_declares_requested_prefix(self):
        """Test that the prefix of the new name is bound to the namespace."""
        element = etree.Element("a")

        rename_node(element, "p:b", "urn:p")

        assert node_name(element) == "p:b"
        assert element.tag == "{urn:p}b"
        assert etree.tostring(element) == b'<p:b xmlns:p="urn:p"/>'

    def test_rename_reuses_bound_prefix(self):
        """Test renaming with a prefix declared on an ancestor."""
        root = etree.fromstring('<r xmlns:p="urn:p"><a/></r>')

        rename_node(root[0], "p:b", "urn:p")

        assert node_name(root[0]) == "p:b"
        assert etree.tostring(root) == b'<r xmlns:p="urn:p"><p:b/></r>'

    def test_rename_rejects_comments(self):
        """Test that only elements can be renamed."""
        with pytest.raises(TypeError):
            rename_node(etree.Comment("c"), "x")

    def test_rename_all_is_case_insensitive(self):
        """Test subtree renaming."""
        root = etree.fromstring("<r><Item/><x><item/></x><other/></r>")

        rename_all(root.getroottree(), "ITEM", "entry")

        assert markup(root) == "<r><entry/><x><entry/></x><other/></r>"


class TestCopyAndContent:
    """Test suite for copy and content helpers."""

    def test_copy_attributes(self):
        """Test that all attributes are copied."""
        src = etree.fromstring('<a xmlns:p="urn:p" one="1" p:two="2"/>')
        dest = etree.Element("b")

        result = copy_attributes(src, dest)

        assert result is dest
        assert dest.get("one") == "1"
        assert dest.get("{urn:p}two") == "2"

    def test_copy_children(self):
        """Test that element children are deep-copied."""
        src = etree.fromstring("<src>text<a>1</a><b/></src>")
        dest = etree.Element("dest")

        copy_children(src, dest)

        assert markup(dest) == "<dest><a>1</a><b/></dest>"
        assert len(select_children(src)) == 2
        assert dest[0] is not src[0]

    def test_append_text(self):
        """Test appending text to empty and non-empty parents."""
        empty = etree.Element("e")
        assert append_text(empty, "one") is empty
        append_text(empty, "two")
        assert markup(empty) == "<e>onetwo</e>"

        parent = etree.fromstring("<p><a/></p>")
        append_text(parent, "after")
        assert markup(parent) == "<p><a/>after</p>"

    def test_append_comment(self):
        """Test appending a comment."""
        parent = etree.Element("p")

        comment = append_comment(parent, "note")

        assert is_comment(comment)
        assert markup(parent) == "<p><!--note--></p>"


class TestAddNamespace:
    """Test suite for namespace declarations."""

    def test_add_namespace_uri(self):
        """Test declaring a prefix from a URI."""
        element = etree.Element("root")

        add_namespace(element, "ns", "http://example.com")

        assert element.nsmap["ns"] == "http://example.com"
        assert 'xmlns:ns="http://example.com"' in markup(element)

    def test_add_namespace_from_context(self):
        """Test declaring a prefix resolved through a context."""
        element = etree.fromstring('<root xmlns:keep="urn:keep"/>')

        add_namespace(element, "ex", NamespaceContext({"ex": "urn:ex"}))

        assert element.nsmap == {"keep": "urn:keep", "ex": "urn:ex"}

    def test_unknown_alias(self):
        """Test that an unresolved prefix is refused."""
        with pytest.raises(ValueError, match="No namespace URI"):
            add_namespace(etree.Element("root"), "nope", NamespaceContext())
