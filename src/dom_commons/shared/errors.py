"""Exception types raised by DOM helper operations.

Every failure surfaces as one of these unchecked exception kinds, each
chaining the underlying lxml or I/O error as its cause.
"""

from typing import Any, Optional


class DomCommonsError(Exception):
    """Base exception for all DOM helper errors."""


class InvalidInputError(DomCommonsError, ValueError):
    """Input could not be parsed into a tree.

    Malformed markup and unreadable sources both end up here; inspect
    ``__cause__`` to tell them apart.
    """


class XPathQueryError(DomCommonsError):
    """XPath compilation or evaluation failed."""

    def __init__(self, message: str, xpath: Optional[str] = None,
                 node: Optional[Any] = None) -> None:
        super().__init__(message)
        self.xpath = xpath
        self.node = node


class AmbiguousResultError(DomCommonsError, ValueError):
    """A single-node query matched more than one node."""

    def __init__(self, xpath: str, size: int) -> None:
        super().__init__(
            f"XPath result is more than 1 element - xpath: '{xpath}' size: {size}"
        )
        self.xpath = xpath
        self.size = size


class NamespaceMixError(DomCommonsError, ValueError):
    """A namespace-aware node was combined with a namespace-less one."""


class SerializationError(DomCommonsError):
    """A tree could not be transformed to text."""
