"""Public API layer: parsing, XPath queries, serialization and validation."""

from .parser import (
    clone_document,
    clone_element,
    create_document,
    create_document_from,
    create_element,
    parse,
    parse_file,
    parse_resource,
    parse_stream,
    parse_string,
)
from .serializer import as_xml, create_xml_declaration, dump, write
from .validation import check, load_schema, validate
from .xpath import (
    XPathResultType,
    create_xpath_expression,
    evaluate_xpath,
    exists,
    iterate,
    iterate_parameterized,
    select_boolean,
    select_integer,
    select_node,
    select_nodes,
    select_number,
    select_string,
    select_strings,
)

__all__ = [
    # Parsing and creation
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
    # XPath
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
    # Serialization
    "create_xml_declaration",
    "as_xml",
    "write",
    "dump",
    # Validation
    "load_schema",
    "validate",
    "check",
]
