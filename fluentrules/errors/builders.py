"""Error Builders

Ergonomic constructors for the library's exceptions. Each builder creates
the exception with the appropriate code, message and metadata; callers
``raise`` the returned value.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from .types import (
    AppError,
    AsyncValidatorInvokedSynchronouslyError,
    ComponentsNotSupportedError,
    ConfigurationError,
    ErrorCode,
    MissingReverseProjectionError,
    PropertyNameUnresolvedError,
    ValidationException,
)

if TYPE_CHECKING:
    from fluentrules.validation.results import ValidationFailure


# =============================================================================
# Configuration Errors (E7xxx)
# =============================================================================

def configuration_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E7000_CONFIGURATION_GENERIC,
    **metadata,
) -> ConfigurationError:
    """Create a generic configuration error."""
    return ConfigurationError(AppError(
        code=code,
        message=message,
        metadata={k: v for k, v in metadata.items() if v is not None},
    ))


def components_not_supported(rule_type: str) -> ComponentsNotSupportedError:
    return ComponentsNotSupportedError(AppError(
        code=ErrorCode.E7001_COMPONENTS_NOT_SUPPORTED,
        message="Cannot add a component to a rule that does not support components.",
        metadata={"rule_type": rule_type},
    ))


def missing_reverse_projection(property_name: str | None) -> MissingReverseProjectionError:
    return MissingReverseProjectionError(AppError(
        code=ErrorCode.E7002_MISSING_REVERSE_PROJECTION,
        message=(
            "Cannot get error message without a conversion function to the old type. "
            "Pass 'to_old' to select() when the message needs the original value."
        ),
        metadata={"property": property_name},
    ))


def async_invoked_synchronously(
    validator_name: str,
    property_name: str | None,
    *,
    condition: bool = False,
) -> AsyncValidatorInvokedSynchronouslyError:
    if condition:
        message = (
            f"Validator '{validator_name}' on property '{property_name}' has an asynchronous condition "
            "but was invoked synchronously. Use validate_async instead."
        )
    else:
        message = (
            f"Validator '{validator_name}' on property '{property_name}' can only be run asynchronously "
            "but was invoked synchronously. Use validate_async instead."
        )
    return AsyncValidatorInvokedSynchronouslyError(AppError(
        code=ErrorCode.E7003_ASYNC_INVOKED_SYNCHRONOUSLY,
        message=message,
        metadata={"validator": validator_name, "property": property_name, "condition": condition},
    ))


def property_name_unresolved(accessor: str) -> PropertyNameUnresolvedError:
    return PropertyNameUnresolvedError(AppError(
        code=ErrorCode.E7004_PROPERTY_NAME_UNRESOLVED,
        message=(
            f"Property name could not be automatically determined for accessor {accessor}. "
            "Please specify either a custom property name by calling 'with_name' or pass 'name' to rule_for."
        ),
        metadata={"accessor": accessor},
    ))


# =============================================================================
# Validation (E2xxx)
# =============================================================================

def validation_failed(failures: list[ValidationFailure]) -> ValidationException:
    """Create the exception raised by ``validate_and_raise``."""
    return ValidationException(
        AppError(
            code=ErrorCode.E2000_VALIDATION_GENERIC,
            message=f"Validation failed: {len(failures)} errors",
            metadata={"error_count": len(failures)},
        ),
        failures,
    )
