"""XPath 1.0 queries with typed results.

lxml returns whatever the expression produces: a list for node-sets, a float,
a bool or a string. The helpers here convert that raw value to the result
type the caller asked for, using the XPath 1.0 conversion rules, so
``select_string(node, "count(item)")`` yields ``"3"`` and not ``"3.0"``.

Namespace contexts are passed as trailing positional arguments; at most one
is accepted, either a NamespaceContext or a plain prefix to URI dict.
"""

import math
import re
from decimal import Decimal
from enum import Enum, auto
from typing import Any, Callable, List, Optional, TypeVar, Union

from lxml import etree

from dom_commons.namespace import NamespaceContextLike, from_namespace_context_list
from dom_commons.shared.errors import AmbiguousResultError, XPathQueryError
from dom_commons.shared.logging import get_logger
from dom_commons.tree.nodes import node_name, node_type, text_content

T = TypeVar("T")
P = TypeVar("P")

XPathLike = Union[str, etree.XPath]

_XPATH_NUMBER = re.compile(r"\s*-?(\d+(\.\d*)?|\.\d+)\s*")
_INTEGER = re.compile(r"[+-]?\d+")


class XPathResultType(Enum):
    """Result types an XPath evaluation can be converted to."""

    STRING = auto()
    BOOLEAN = auto()
    NUMBER = auto()
    NODE = auto()
    NODESET = auto()


def _describe(node: Any) -> str:
    return node_name(node) if node_type(node) is not None else type(node).__name__


def create_xpath_expression(xpath: str, *namespace_context: NamespaceContextLike) -> etree.XPath:
    """Compile ``xpath``, binding the prefixes of the optional namespace context.

    Raises:
        XPathQueryError: If the expression does not compile
        ConfigError: If more than one namespace context was given
    """
    context = from_namespace_context_list(*namespace_context)
    namespaces = context.to_xpath_namespaces() if context is not None else None
    try:
        return etree.XPath(xpath, namespaces=namespaces)
    except etree.XPathError as e:
        raise XPathQueryError(f"Invalid XPath expression: {xpath}: {e}", xpath=xpath) from e


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == int(value):
        return str(int(value))
    # Shortest round-tripping digits, written without an exponent
    return format(Decimal(repr(value)), "f")


def _parse_number(text: str) -> float:
    if not _XPATH_NUMBER.fullmatch(text):
        return math.nan
    return float(text)


def _to_string(raw: Any) -> str:
    if isinstance(raw, list):
        return text_content(raw[0]) if raw else ""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (int, float)):
        return _format_number(float(raw))
    return str(raw)


def _to_boolean(raw: Any) -> bool:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return raw != 0 and not math.isnan(raw)
    return bool(raw)


def _to_number(raw: Any) -> float:
    if isinstance(raw, bool):
        return 1.0 if raw else 0.0
    if isinstance(raw, (int, float)):
        return float(raw)
    return _parse_number(_to_string(raw))


def evaluate_xpath(
    node: Any,
    xpath: XPathLike,
    result_type: XPathResultType,
    *namespace_context: NamespaceContextLike
) -> Any:
    """Evaluate ``xpath`` against ``node`` and convert the result.

    Args:
        node: Document or element used as context node
        xpath: Expression text or a compiled expression
        result_type: Type the raw result is converted to
        *namespace_context: At most one prefix mapping for the expression

    Returns:
        ``str``, ``bool``, ``float``, a single node (or None) or a list of
        nodes, according to ``result_type``

    Raises:
        XPathQueryError: If evaluation fails or a node result is requested
            from an expression that does not return a node-set
    """
    expression = xpath if isinstance(xpath, etree.XPath) else create_xpath_expression(
        xpath, *namespace_context
    )
    logger = get_logger(__name__, component="xpath")

    try:
        raw = expression(node)
    except (etree.XPathError, TypeError) as e:
        # TypeError: lxml only evaluates against documents and elements
        logger.debug(
            "XPath evaluation failed",
            extra={"xpath": expression.path, "error": str(e)}
        )
        raise XPathQueryError(
            f"XPath failure on node: {_describe(node)}: {expression.path}",
            xpath=expression.path,
            node=node,
        ) from e

    logger.debug(
        "XPath evaluated",
        extra={"xpath": expression.path, "result_type": result_type.name}
    )

    if result_type is XPathResultType.STRING:
        return _to_string(raw)
    if result_type is XPathResultType.BOOLEAN:
        return _to_boolean(raw)
    if result_type is XPathResultType.NUMBER:
        return _to_number(raw)

    if not isinstance(raw, list):
        raise XPathQueryError(
            f"XPath does not select a node-set on node: {_describe(node)}: {expression.path}",
            xpath=expression.path,
            node=node,
        )
    if result_type is XPathResultType.NODE:
        return raw[0] if raw else None
    return raw


def select_nodes(node: Any, xpath: XPathLike, *namespace_context: NamespaceContextLike) -> List[Any]:
    """Return every node selected by ``xpath``."""
    return evaluate_xpath(node, xpath, XPathResultType.NODESET, *namespace_context)


def select_node(
    node: Any,
    xpath: XPathLike,
    *namespace_context: NamespaceContextLike
) -> Optional[Any]:
    """Return the only node selected by ``xpath``, or None when nothing matches.

    Raises:
        AmbiguousResultError: If more than one node matches
    """
    nodes = select_nodes(node, xpath, *namespace_context)
    if len(nodes) > 1:
        path = xpath.path if isinstance(xpath, etree.XPath) else xpath
        raise AmbiguousResultError(path, len(nodes))
    return nodes[0] if nodes else None


def select_strings(node: Any, xpath: XPathLike, *namespace_context: NamespaceContextLike) -> List[str]:
    """Return the text content of every selected node."""
    return [text_content(match) for match in select_nodes(node, xpath, *namespace_context)]


def select_string(node: Any, xpath: XPathLike, *namespace_context: NamespaceContextLike) -> str:
    return evaluate_xpath(node, xpath, XPathResultType.STRING, *namespace_context)


def select_integer(
    node: Any,
    xpath: XPathLike,
    *namespace_context: NamespaceContextLike,
    default: int = 0
) -> int:
    """Return the string result of ``xpath`` as an integer.

    Anything that is not a plain optionally signed run of digits yields
    ``default``.
    """
    value = select_string(node, xpath, *namespace_context)
    if not _INTEGER.fullmatch(value):
        return default
    return int(value)


def select_boolean(node: Any, xpath: XPathLike, *namespace_context: NamespaceContextLike) -> bool:
    return evaluate_xpath(node, xpath, XPathResultType.BOOLEAN, *namespace_context)


def select_number(node: Any, xpath: XPathLike, *namespace_context: NamespaceContextLike) -> float:
    return evaluate_xpath(node, xpath, XPathResultType.NUMBER, *namespace_context)


def exists(node: Any, xpath: XPathLike, *namespace_context: NamespaceContextLike) -> bool:
    """Return True when ``xpath`` selects at least one node."""
    return bool(select_nodes(node, xpath, *namespace_context))


def iterate(
    node: Any,
    xpath: XPathLike,
    processor: Callable[[Any], Optional[T]],
    *namespace_context: NamespaceContextLike
) -> List[T]:
    """Apply ``processor`` to each selected node, collecting non-None results."""
    results = []
    for match in select_nodes(node, xpath, *namespace_context):
        result = processor(match)
        if result is not None:
            results.append(result)
    return results


def iterate_parameterized(
    node: Any,
    xpath: XPathLike,
    processor: Callable[[Any, P], Any],
    param: P,
    *namespace_context: NamespaceContextLike
) -> P:
    """Call ``processor(match, param)`` for each selected node and return ``param``.

    Example:
        >>> from lxml import etree
        >>> root = etree.fromstring("<r><i>a</i><i>b</i></r>")
        >>> iterate_parameterized(root, "i", lambda n, acc: acc.append(n.text), [])
        ['a', 'b']
    """
    for match in select_nodes(node, xpath, *namespace_context):
        processor(match, param)
    return param
