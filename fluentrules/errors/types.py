"""Error Types

Typed error codes and the exception hierarchy raised by the rule engine.

Validation failures are data and never travel through this module; the
exceptions here describe misconfiguration (fatal, raised at setup or on first
use) and the opt-in ``ValidationException`` raised by ``validate_and_raise``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fluentrules.validation.results import ValidationFailure


class ErrorCode(Enum):
    """Hierarchical error code taxonomy.

    E2xxx: Validation outcomes
    E7xxx: Configuration errors
    E9xxx: Internal/Unknown errors
    """
    # Validation (E2xxx)
    E2000_VALIDATION_GENERIC = 2000

    # Configuration (E7xxx)
    E7000_CONFIGURATION_GENERIC = 7000
    E7001_COMPONENTS_NOT_SUPPORTED = 7001
    E7002_MISSING_REVERSE_PROJECTION = 7002
    E7003_ASYNC_INVOKED_SYNCHRONOUSLY = 7003
    E7004_PROPERTY_NAME_UNRESOLVED = 7004

    # Internal (E9xxx)
    E9000_INTERNAL_GENERIC = 9000

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 2000 <= code < 3000:
            return "validation"
        if 7000 <= code < 8000:
            return "configuration"
        return "internal"


@dataclass(frozen=True, slots=True)
class AppError:
    """Structured description of an error.

    Carries a typed code, a human-readable message, metadata for debugging
    and an optional cause for chaining.
    """
    code: ErrorCode
    message: str
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    def with_metadata(self, **kwargs) -> AppError:
        """Create new error with additional metadata."""
        return AppError(
            code=self.code,
            message=self.message,
            metadata={**self.metadata, **kwargs},
            cause=self.cause,
        )

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message}"


class FluentRulesException(Exception):
    """Exception wrapper for AppError.

    Every exception raised by the library carries the structured error in
    ``error`` so callers can branch on ``error.code`` instead of parsing text.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class ConfigurationError(FluentRulesException):
    """A validator or rule was configured in a way the engine cannot execute."""


class ComponentsNotSupportedError(ConfigurationError):
    """A component was added to a rule structure that holds no component list."""


class MissingReverseProjectionError(ConfigurationError):
    """A message needed the rule's native value but no reverse projection was given."""


class AsyncValidatorInvokedSynchronouslyError(ConfigurationError):
    """An async-only validator or async condition was reached by a synchronous pass."""


class PropertyNameUnresolvedError(ConfigurationError):
    """A rule has neither a property name nor a display name."""


class ValidationException(FluentRulesException):
    """Raised by ``validate_and_raise`` when a pass produced failures."""

    def __init__(self, error: AppError, failures: list[ValidationFailure]):
        self.failures = failures
        super().__init__(error)

    def __str__(self) -> str:
        if not self.failures:
            return self.error.message
        lines = [f" -- {f.property_name}: {f.error_message} Severity: {f.severity.name.title()}" for f in self.failures]
        return "Validation failed: \n" + "\n".join(lines)

    @property
    def errors(self) -> list[ValidationFailure]:
        return list(self.failures)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.error.to_dict(),
            "errors": [f.to_dict() for f in self.failures],
        }
