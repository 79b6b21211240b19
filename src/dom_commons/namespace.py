"""Namespace prefix resolution for XPath evaluation.

A NamespaceContext maps prefixes to namespace URIs. XPath helpers accept at
most one context, either as a NamespaceContext or as a plain dict.
"""

from typing import Dict, Iterator, List, Mapping, Optional, Union

from dom_commons.shared.config import ConfigError

NAMESPACE_XS = "http://www.w3.org/2001/XMLSchema"
NAMESPACE_XML = "http://www.w3.org/XML/1998/namespace"
NAMESPACE_XMLNS = "http://www.w3.org/2000/xmlns/"
NAMESPACE_HTML = "http://www.w3.org/1999/xhtml"

NAMESPACE_ALIAS_XS = "xs"
NAMESPACE_ALIAS_XML = "xml"
NAMESPACE_ALIAS_XMLNS = "xmlns"
NAMESPACE_ALIAS_HTML = "html"

# Prefixes libxml2 binds itself; registering them for XPath is not allowed
_RESERVED_PREFIXES = (NAMESPACE_ALIAS_XML, NAMESPACE_ALIAS_XMLNS)


class NamespaceContext:
    """Prefix to namespace URI resolver."""

    def __init__(self, namespaces: Optional[Mapping[str, str]] = None) -> None:
        self._alias: Dict[str, str] = dict(namespaces or {})
        self._uri: Dict[str, List[str]] = {}
        for prefix, uri in self._alias.items():
            self._uri.setdefault(uri, []).append(prefix)

    def get_namespace_uri(self, prefix: Optional[str]) -> Optional[str]:
        """Return the URI bound to ``prefix``, or None."""
        return self._alias.get(prefix) if prefix else None

    def get_prefix(self, namespace_uri: str) -> Optional[str]:
        """Return the first prefix bound to ``namespace_uri``, or None."""
        return next(self.get_prefixes(namespace_uri), None)

    def get_prefixes(self, namespace_uri: str) -> Iterator[str]:
        """Iterate over every prefix bound to ``namespace_uri``."""
        return iter(self._uri.get(namespace_uri, ()))

    def to_xpath_namespaces(self) -> Dict[str, str]:
        """Return the mapping in the form lxml's XPath ``namespaces=`` expects."""
        return {
            prefix: uri for prefix, uri in self._alias.items()
            if prefix and prefix not in _RESERVED_PREFIXES
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._alias!r})"


class DefaultNamespaceContext(NamespaceContext):
    """Context pre-bound to the xs, xml, xmlns and html prefixes.

    The empty prefix resolves to DEFAULT_NS.
    """

    DEFAULT_NS = NAMESPACE_XMLNS

    def __init__(self, namespaces: Optional[Mapping[str, str]] = None) -> None:
        bound = {
            NAMESPACE_ALIAS_HTML: NAMESPACE_HTML,
            NAMESPACE_ALIAS_XML: NAMESPACE_XML,
            NAMESPACE_ALIAS_XMLNS: NAMESPACE_XMLNS,
            NAMESPACE_ALIAS_XS: NAMESPACE_XS,
        }
        bound.update(namespaces or {})
        super().__init__(bound)

    def get_namespace_uri(self, prefix: Optional[str]) -> Optional[str]:
        if not prefix:
            return self.DEFAULT_NS
        return super().get_namespace_uri(prefix)


NamespaceContextLike = Union[NamespaceContext, Mapping[str, str]]


def as_namespace_context(context: NamespaceContextLike) -> NamespaceContext:
    """Wrap a plain mapping into a NamespaceContext."""
    if isinstance(context, NamespaceContext):
        return context
    if isinstance(context, Mapping):
        return NamespaceContext(context)
    raise TypeError(f"Unsupported namespace context type: {type(context).__name__}")


def from_namespace_context_list(
    *namespace_contexts: NamespaceContextLike,
) -> Optional[NamespaceContext]:
    """Reduce optional namespace context varargs to a single context.

    Raises:
        ConfigError: If more than one context was supplied
    """
    contexts = [context for context in namespace_contexts if context is not None]
    if not contexts:
        return None
    if len(contexts) > 1:
        raise ConfigError(
            f"Number of namespace contexts must not exceed 1, got {len(contexts)}"
        )
    return as_namespace_context(contexts[0])
