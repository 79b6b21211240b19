"""Tree layer: node inspection, structural edits and ordered insertion."""

from .editing import (
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
from .nodes import (
    NodeType,
    children,
    enforce_no_namespace_mixes,
    enforce_node_name,
    get_attribute,
    get_attribute_names,
    has_namespace,
    import_node,
    is_attribute,
    is_comment,
    is_document,
    is_element,
    is_node_name,
    is_processing_instruction,
    is_text,
    is_type,
    namespace_uri,
    node_has_attribute,
    node_name,
    node_type,
    owner_document,
    select_child,
    select_child_nodes,
    select_children,
    select_element_after,
    select_element_before,
    set_attribute,
    text_content,
)
from .ordering import (
    insert_element,
    select_predecessors,
    select_successor_element_from_order,
)

__all__ = [
    # Node inspection
    "NodeType",
    "node_type",
    "is_type",
    "is_element",
    "is_text",
    "is_attribute",
    "is_comment",
    "is_processing_instruction",
    "is_document",
    "node_name",
    "namespace_uri",
    "has_namespace",
    "is_node_name",
    "text_content",
    "owner_document",
    "import_node",
    "enforce_node_name",
    "enforce_no_namespace_mixes",
    "node_has_attribute",
    "get_attribute_names",
    "get_attribute",
    "set_attribute",
    "select_child_nodes",
    "children",
    "select_children",
    "select_child",
    "select_element_before",
    "select_element_after",
    # Structural edits
    "append_element",
    "insert_element_as_first",
    "insert_element_before",
    "insert_element_after",
    "squeeze_in_element",
    "delete",
    "delete_all",
    "delete_matching",
    "rename_node",
    "rename_all",
    "copy_attributes",
    "copy_children",
    "append_text",
    "append_comment",
    "add_namespace",
    # Ordered insertion
    "select_predecessors",
    "select_successor_element_from_order",
    "insert_element",
]
