"""Result objects and diagnostic types for schema validation.

The boolean validate() helper discards diagnostics; these types back the
structured check() variant that keeps them.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    WARNING = auto()    # Schema warnings that do not invalidate the document
    ERROR = auto()      # Schema violations
    CRITICAL = auto()   # Input could not be read or parsed at all

    @classmethod
    def from_level_name(cls, level_name: str) -> "DiagnosticSeverity":
        """Map an lxml error-log level name onto a severity."""
        if level_name == "WARNING":
            return cls.WARNING
        if level_name == "FATAL":
            return cls.CRITICAL
        return cls.ERROR


@dataclass
class ValidationIssue:
    """Single validation problem reported by the schema engine."""

    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    line: Optional[int] = None
    column: Optional[int] = None
    domain: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate issue data."""
        if not self.message:
            raise ValueError("Validation issue message cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert issue to a JSON-friendly dictionary."""
        return {
            "message": self.message,
            "severity": self.severity.name,
            "line": self.line,
            "column": self.column,
            "domain": self.domain,
        }


@dataclass
class ValidationResult:
    """Outcome of validating one source against one schema."""

    valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.valid

    @property
    def error_count(self) -> int:
        """Count issues that invalidate the document."""
        return sum(
            1 for issue in self.issues
            if issue.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
        )

    @property
    def warning_count(self) -> int:
        """Count warning-level issues."""
        return sum(1 for issue in self.issues if issue.severity is DiagnosticSeverity.WARNING)

    def messages(self) -> List[str]:
        """Return the plain issue messages in report order."""
        return [issue.message for issue in self.issues]
