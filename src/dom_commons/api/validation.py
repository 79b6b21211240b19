"""XML Schema (XSD) validation.

``validate`` answers with a plain boolean and never raises, which is what most
callers want in a guard clause. ``check`` runs the same validation but keeps
every message libxml2 reported.
"""

from pathlib import Path
from typing import Any, Union

from lxml import etree

from dom_commons.api.parser import parse_file, parse_string
from dom_commons.shared.errors import InvalidInputError
from dom_commons.shared.logging import get_logger
from dom_commons.shared.result import DiagnosticSeverity, ValidationIssue, ValidationResult

SchemaSource = Union[Path, str, bytes, etree._ElementTree, etree._Element]
SchemaLike = Union[etree.XMLSchema, SchemaSource]
ValidationSource = Union[str, bytes, etree._ElementTree, etree._Element]


def load_schema(source: SchemaSource) -> etree.XMLSchema:
    """Load an XML Schema.

    Args:
        source: Path to an XSD file, XSD content, or a parsed schema document

    Raises:
        FileNotFoundError: If a Path does not exist
        InvalidInputError: If the source is not a usable schema
    """
    if isinstance(source, Path):
        document = parse_file(source)
    elif isinstance(source, (str, bytes)):
        document = parse_string(source)
    else:
        document = source

    try:
        schema = etree.XMLSchema(document)
    except (etree.XMLSchemaParseError, TypeError) as e:
        get_logger(__name__, component="load_schema").debug(
            "Schema could not be compiled",
            extra={"error": str(e)}
        )
        raise InvalidInputError(f"Invalid XML schema: {e}") from e
    return schema


def _as_schema(schema: SchemaLike) -> etree.XMLSchema:
    if isinstance(schema, etree.XMLSchema):
        return schema
    return load_schema(schema)


def check(source: ValidationSource, schema: SchemaLike) -> ValidationResult:
    """Validate ``source`` against ``schema`` and report every problem.

    Text that is not well-formed yields an invalid result with a single
    critical issue instead of an exception.

    Args:
        source: Document, element, or XML content
        schema: Compiled schema or anything load_schema() accepts

    Returns:
        ValidationResult with the outcome and the schema engine's messages

    Raises:
        FileNotFoundError: If the schema path does not exist
        InvalidInputError: If the schema cannot be loaded
    """
    compiled = _as_schema(schema)
    logger = get_logger(__name__, component="validate")

    if isinstance(source, (str, bytes)):
        try:
            source = parse_string(source)
        except InvalidInputError as e:
            cause = e.__cause__
            line, column = getattr(cause, "position", (None, None))
            return ValidationResult(False, [ValidationIssue(
                message=str(cause or e),
                severity=DiagnosticSeverity.CRITICAL,
                line=line,
                column=column,
                domain="PARSER",
            )])

    valid = compiled.validate(source)
    issues = [
        ValidationIssue(
            message=entry.message or "Schema validation error",
            severity=DiagnosticSeverity.from_level_name(entry.level_name),
            line=entry.line,
            column=entry.column,
            domain=entry.domain_name,
        )
        for entry in compiled.error_log
    ]
    logger.debug(
        "Validated document",
        extra={"valid": valid, "issues": len(issues)}
    )
    return ValidationResult(valid, issues)


def validate(source: Any, schema: SchemaLike) -> bool:
    """Return True when ``source`` is valid against ``schema``.

    Every failure, including unparseable input or an unusable schema, is
    reported as False.

    Example:
        >>> xsd = '''<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
        ...   <xs:element name="root" type="xs:string"/>
        ... </xs:schema>'''
        >>> validate("<root>text</root>", xsd)
        True
        >>> validate("<other/>", xsd)
        False
    """
    try:
        return check(source, schema).valid
    except Exception as e:
        get_logger(__name__, component="validate").debug(
            "Validation failed",
            extra={"source_type": type(source).__name__, "error": str(e)}
        )
        return False
