"""
Unified Exception Hierarchy for the 3GPP Guidance server.

Exception Hierarchy:
    GuidanceError (base)
    ├── ValidationError
    │   ├── EmptyQueryError
    │   └── InvalidParameterError
    ├── DataError
    │   └── NotFoundError
    └── ConfigurationError
        └── KnowledgeLoadError

Lookup misses inside the engine are never exceptions: they are ``None`` or an
empty sequence. ``NotFoundError`` is only raised at the tool boundary, where a
caller explicitly asked for one record by id.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = auto()      # Caller can fix the input and retry
    ERROR = auto()        # Request failed
    CRITICAL = auto()     # Server cannot serve requests


class ErrorCategory(Enum):
    """Categories for error classification."""
    VALIDATION = "validation"
    DATA = "data"
    CONFIGURATION = "config"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Extra information attached to an error for agent-facing messages."""
    tool_name: str | None = None
    operation: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    example: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class GuidanceError(Exception):
    """
    Base exception for all guidance server errors.

    Provides:
    - Structured error context
    - Severity classification
    - Agent-friendly formatting
    """

    __slots__ = ("context", "severity", "category", "retryable")

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.DATA,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.name.lower(),
            "retryable": self.retryable,
        }
        if self.context.tool_name:
            result["tool"] = self.context.tool_name
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        if self.context.example:
            result["example"] = self.context.example
        return result

    def to_agent_message(self) -> str:
        """Format for Agent consumption (Markdown)."""
        parts = [f"❌ **Error**: {self}"]
        if self.context.suggestion:
            parts.append(f"💡 **Suggestion**: {self.context.suggestion}")
        if self.context.example:
            parts.append(f"📝 **Example**: `{self.context.example}`")
        return "\n".join(parts)


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(GuidanceError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.VALIDATION,
            retryable=False,
        )


class EmptyQueryError(ValidationError):
    """Raised when query text is empty or whitespace only."""

    def __init__(
        self,
        query: str | None = None,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = context or ErrorContext()
        ctx = replace(
            ctx,
            input_value=query,
            suggestion=ctx.suggestion or "Provide a non-empty question about 3GPP specifications",
            example=ctx.example or 'guide_specification_search(query="explain how NAS protocol works")',
        )
        super().__init__("Query text cannot be empty", context=ctx)


class InvalidParameterError(ValidationError):
    """Raised when a parameter value is invalid."""

    def __init__(
        self,
        param_name: str,
        value: Any,
        expected: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = replace(
            context or ErrorContext(),
            input_value=value,
            suggestion=f"Expected {expected}",
        )
        super().__init__(
            f"Invalid parameter '{param_name}': {value!r} (expected {expected})",
            context=ctx,
        )
        self.param_name = param_name


# =============================================================================
# Data Errors
# =============================================================================

class DataError(GuidanceError):
    """Base class for data-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.DATA,
            retryable=False,
        )


class NotFoundError(DataError):
    """Raised when a requested record is not in the knowledge base."""

    def __init__(
        self,
        resource: str,
        identifier: str | None = None,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        msg = f"{resource} not found"
        if identifier:
            msg = f"{resource} not found: {identifier}"

        ctx = context or ErrorContext()
        ctx = replace(
            ctx,
            input_value=identifier,
            suggestion=ctx.suggestion or "Check the identifier and try again",
        )
        super().__init__(msg, context=ctx)


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(GuidanceError):
    """Raised for configuration-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            retryable=False,
        )


class KnowledgeLoadError(ConfigurationError):
    """Raised when knowledge data files are missing or malformed."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        full_msg = f"Knowledge load error: {message}"
        if source:
            full_msg = f"Knowledge load error ({source}): {message}"
        super().__init__(full_msg, context=context)
        self.source = source
