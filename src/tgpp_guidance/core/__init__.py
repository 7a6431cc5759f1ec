"""
Core module for the 3GPP Guidance server.

Provides:
- Unified exception hierarchy
"""

from .exceptions import (
    # Base
    GuidanceError,
    ErrorContext,
    ErrorSeverity,
    ErrorCategory,
    # Validation errors
    ValidationError,
    EmptyQueryError,
    InvalidParameterError,
    # Data errors
    DataError,
    NotFoundError,
    # Configuration errors
    ConfigurationError,
    KnowledgeLoadError,
)

__all__ = [
    "GuidanceError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "ValidationError",
    "EmptyQueryError",
    "InvalidParameterError",
    "DataError",
    "NotFoundError",
    "ConfigurationError",
    "KnowledgeLoadError",
]
