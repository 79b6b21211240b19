"""Configuration classes for DOM helper operations.

This module provides the option objects that control how documents are parsed
and how trees are serialized back to text.
"""

import json
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Union

from lxml import etree

# Fixed indentation used whenever indented output is requested
INDENT_SPACES = 4

# Output property keys recognised by OutputOptions.from_properties
PROPERTY_INDENT = "indent"
PROPERTY_OMIT_XML_DECLARATION = "omit-xml-declaration"
PROPERTY_ENCODING = "encoding"
PROPERTY_VERSION = "version"
PROPERTY_STANDALONE = "standalone"
PROPERTY_INDENT_AMOUNT = "{http://xml.apache.org/xslt}indent-amount"

_KNOWN_PROPERTIES = (
    PROPERTY_INDENT,
    PROPERTY_OMIT_XML_DECLARATION,
    PROPERTY_ENCODING,
    PROPERTY_VERSION,
    PROPERTY_STANDALONE,
    PROPERTY_INDENT_AMOUNT,
)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


def _as_flag(key: str, value: Union[str, bool]) -> bool:
    """Interpret a transformer-style yes/no property value."""
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized == "yes":
        return True
    if normalized == "no":
        return False
    raise ConfigValidationError(
        f"Output property '{key}' must be 'yes' or 'no', got '{value}'",
        field_name=key,
    )


@dataclass(frozen=True)
class ParseOptions:
    """Configuration for building lxml parsers.

    Defaults resolve internal entities only and never touch the network, so
    untrusted input cannot pull in external resources.
    """

    namespace_aware: bool = True
    resolve_entities: Union[bool, str] = "internal"
    no_network: bool = True
    load_dtd: bool = False
    remove_blank_text: bool = False
    remove_comments: bool = False
    strip_cdata: bool = True
    huge_tree: bool = False

    def __post_init__(self) -> None:
        """Validate parse configuration."""
        if self.resolve_entities not in (True, False, "internal"):
            raise ValueError("resolve_entities must be True, False or 'internal'")

    def create_parser(self, encoding: Optional[str] = None) -> etree.XMLParser:
        """Create an lxml parser for these options.

        Args:
            encoding: Encoding of the input, overriding the XML declaration.
                Used for content that was already decoded to text.

        Returns:
            Fresh XMLParser instance (parsers are not shared between threads)
        """
        return etree.XMLParser(
            encoding=encoding,
            # Undeclared prefixes are namespace errors, which only
            # namespace-aware parsing treats as fatal
            recover=not self.namespace_aware,
            resolve_entities=self.resolve_entities,
            no_network=self.no_network,
            load_dtd=self.load_dtd,
            remove_blank_text=self.remove_blank_text,
            remove_comments=self.remove_comments,
            strip_cdata=self.strip_cdata,
            huge_tree=self.huge_tree,
        )

    def override(self, **kwargs: Any) -> "ParseOptions":
        """Create new options with specific fields replaced."""
        return replace(self, **kwargs)

    @classmethod
    def namespace_unaware(cls) -> "ParseOptions":
        """Create options that strip namespaces from parsed documents."""
        return cls(namespace_aware=False)


@dataclass(frozen=True)
class OutputOptions:
    """Recognised serialization options.

    Mirrors the output property map ``{indent, omit-declaration, encoding,
    version, standalone}``. Indentation always uses INDENT_SPACES spaces.
    """

    indent: bool = False
    omit_declaration: bool = False
    encoding: str = "UTF-8"
    version: str = "1.0"
    standalone: Optional[bool] = None

    def __post_init__(self) -> None:
        """Validate output configuration."""
        if not self.encoding or not self.encoding.strip():
            raise ValueError("encoding must not be blank")
        if not self.version or not self.version.strip():
            raise ValueError("version must not be blank")

    @classmethod
    def from_properties(
        cls,
        properties: Optional[Mapping[str, Union[str, bool]]] = None,
        indent: Optional[bool] = None,
    ) -> "OutputOptions":
        """Create options from a transformer-style property mapping.

        Args:
            properties: Mapping of output property names to values
            indent: Optional indent flag applied before the mapping

        Returns:
            OutputOptions built from the mapping

        Raises:
            ConfigValidationError: If a property is unknown or malformed

        Example:
            >>> options = OutputOptions.from_properties({"standalone": "yes"})
            >>> options.standalone
            True
        """
        values: Dict[str, Any] = {}
        if indent is not None:
            values["indent"] = indent

        for key, value in (properties or {}).items():
            if key not in _KNOWN_PROPERTIES:
                raise ConfigValidationError(
                    f"Unknown output property: '{key}'",
                    field_name=key,
                    suggestions=list(_KNOWN_PROPERTIES),
                )
            if key == PROPERTY_INDENT:
                values["indent"] = _as_flag(key, value)
            elif key == PROPERTY_OMIT_XML_DECLARATION:
                values["omit_declaration"] = _as_flag(key, value)
            elif key == PROPERTY_STANDALONE:
                values["standalone"] = _as_flag(key, value)
            elif key == PROPERTY_ENCODING:
                values["encoding"] = str(value)
            elif key == PROPERTY_VERSION:
                values["version"] = str(value)
            # indent-amount is fixed at INDENT_SPACES

        try:
            return cls(**values)
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def to_properties(self) -> Dict[str, str]:
        """Convert options back to a transformer-style property mapping."""
        properties = {
            PROPERTY_INDENT: "yes" if self.indent else "no",
            PROPERTY_OMIT_XML_DECLARATION: "yes" if self.omit_declaration else "no",
            PROPERTY_ENCODING: self.encoding,
            PROPERTY_VERSION: self.version,
        }
        if self.standalone is not None:
            properties[PROPERTY_STANDALONE] = "yes" if self.standalone else "no"
        return properties

    def override(self, **kwargs: Any) -> "OutputOptions":
        """Create new options with specific fields replaced.

        Example:
            >>> OutputOptions().override(indent=True).indent
            True
        """
        try:
            return replace(self, **kwargs)
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert options to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert options to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OutputOptions":
        """Create options from dictionary, ignoring unknown keys."""
        known = {key: value for key, value in data.items()
                 if key in cls.__dataclass_fields__}
        try:
            return cls(**known)
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "OutputOptions":
        """Create options from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def pretty(cls) -> "OutputOptions":
        """Create options for indented, human-readable output."""
        return cls(indent=True)

    @classmethod
    def compact(cls) -> "OutputOptions":
        """Create options for single-line output without declaration."""
        return cls(indent=False, omit_declaration=True)
