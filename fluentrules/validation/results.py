"""Validation Outcomes

Failures are values, never exceptions. A pass collects ``ValidationFailure``
records into a ``ValidationResult``; callers that prefer exceptions use
``validate_and_raise`` on the validator.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Severity attached to a failure."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class CascadeMode(str, Enum):
    """Whether evaluation continues after the first failure."""
    CONTINUE = "continue"
    STOP = "stop"


class ApplyConditionTo(str, Enum):
    """Scope of a rule-level condition."""
    ALL_VALIDATORS = "all_validators"
    CURRENT_VALIDATOR = "current_validator"


@dataclass(slots=True)
class ValidationFailure:
    """A single failing component.

    Attributes:
        property_name: Full property path (e.g. "address.line1").
        error_message: Resolved, formatted message.
        attempted_value: Value the rule saw, in the rule's native type.
        error_code: Component override or the validator's name.
        severity: Resolved severity.
        custom_state: Value produced by the component's state provider.
        formatted_message_placeholder_values: Placeholders used to format the message.
    """
    property_name: str
    error_message: str
    attempted_value: Any = None
    error_code: str | None = None
    severity: Severity = Severity.ERROR
    custom_state: Any = None
    formatted_message_placeholder_values: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.error_message

    def to_dict(self) -> dict[str, Any]:
        result = {
            "property": self.property_name,
            "message": self.error_message,
            "code": self.error_code,
            "severity": self.severity.value,
        }
        if self.attempted_value is not None: result["value"] = self.attempted_value
        if self.custom_state is not None: result["state"] = self.custom_state
        return result


@dataclass
class ValidationResult:
    """Outcome of a validation pass."""
    errors: list[ValidationFailure] = field(default_factory=list)
    rule_sets_executed: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def field_errors(self) -> dict[str, list[ValidationFailure]]:
        """Group failures by property path."""
        result: dict[str, list[ValidationFailure]] = {}
        for failure in self.errors: result.setdefault(failure.property_name, []).append(failure)
        return result

    def get_errors_for_property(self, property_name: str) -> list[ValidationFailure]:
        return [f for f in self.errors if f.property_name == property_name]

    def to_dictionary(self) -> dict[str, list[str]]:
        """Property path -> list of messages."""
        return {name: [f.error_message for f in failures] for name, failures in self.field_errors.items()}

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.is_valid, "error_count": len(self.errors), "errors": [f.to_dict() for f in self.errors]}

    def __str__(self) -> str:
        return "\n".join(f.error_message for f in self.errors)
