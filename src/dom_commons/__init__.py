"""DOM Commons.

Static helpers around lxml for parsing, querying, editing, serializing and
validating XML trees.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), select_string(), as_xml(), validate()
- Level 2: Tree editing - append/insert/delete/rename helpers, ordered insertion
- Level 3: Configuration - ParseOptions, OutputOptions, NamespaceContext
"""

__version__ = "0.1.0"
__author__ = "DOM Commons Team"

# Progressive API disclosure - Level 1: Simple functions
from .api import (
    XPathResultType,
    as_xml,
    check,
    clone_document,
    clone_element,
    create_document,
    create_document_from,
    create_element,
    create_xml_declaration,
    create_xpath_expression,
    dump,
    evaluate_xpath,
    exists,
    iterate,
    iterate_parameterized,
    load_schema,
    parse,
    parse_file,
    parse_resource,
    parse_stream,
    parse_string,
    select_boolean,
    select_integer,
    select_node,
    select_nodes,
    select_number,
    select_string,
    select_strings,
    validate,
    write,
)

# Configuration classes for advanced usage
from .namespace import DefaultNamespaceContext, NamespaceContext
from .shared.config import ConfigError, ConfigValidationError, OutputOptions, ParseOptions

# Exceptions and result objects
from .shared.errors import (
    AmbiguousResultError,
    DomCommonsError,
    InvalidInputError,
    NamespaceMixError,
    SerializationError,
    XPathQueryError,
)
from .shared.result import DiagnosticSeverity, ValidationIssue, ValidationResult

# Progressive API disclosure - Level 2: Tree editing
from .tree import (
    NodeType,
    add_namespace,
    append_comment,
    append_element,
    append_text,
    children,
    copy_attributes,
    copy_children,
    delete,
    delete_all,
    delete_matching,
    enforce_no_namespace_mixes,
    enforce_node_name,
    get_attribute,
    get_attribute_names,
    has_namespace,
    import_node,
    insert_element,
    insert_element_after,
    insert_element_as_first,
    insert_element_before,
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
    rename_all,
    rename_node,
    select_child,
    select_child_nodes,
    select_children,
    select_element_after,
    select_element_before,
    select_predecessors,
    select_successor_element_from_order,
    set_attribute,
    squeeze_in_element,
    text_content,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Parsing and creation
    "parse",
    "parse_string",
    "parse_file",
    "parse_stream",
    "parse_resource",
    "create_element",
    "create_document",
    "create_document_from",
    "clone_element",
    "clone_document",

    # Level 1: XPath queries
    "XPathResultType",
    "create_xpath_expression",
    "evaluate_xpath",
    "select_nodes",
    "select_node",
    "select_strings",
    "select_string",
    "select_integer",
    "select_boolean",
    "select_number",
    "exists",
    "iterate",
    "iterate_parameterized",

    # Level 1: Serialization and validation
    "create_xml_declaration",
    "as_xml",
    "write",
    "dump",
    "load_schema",
    "validate",
    "check",

    # Level 2: Node inspection
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

    # Level 2: Structural edits
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
    "select_predecessors",
    "select_successor_element_from_order",
    "insert_element",

    # Level 3: Configuration
    "ParseOptions",
    "OutputOptions",
    "NamespaceContext",
    "DefaultNamespaceContext",
    "ConfigError",
    "ConfigValidationError",

    # Exceptions and result objects
    "DomCommonsError",
    "InvalidInputError",
    "XPathQueryError",
    "AmbiguousResultError",
    "NamespaceMixError",
    "SerializationError",
    "DiagnosticSeverity",
    "ValidationIssue",
    "ValidationResult",
]
