"""Error Handling

Typed error codes, structured ``AppError`` values and the exception
hierarchy used by the rule engine.

Usage:
    from fluentrules.errors import ConfigurationError, ErrorCode

    try:
        validator.validate(instance)
    except ConfigurationError as exc:
        log.error("bad_validator", code=exc.code.name)
"""
from .types import (
    AppError,
    ErrorCode,
    FluentRulesException,
    ConfigurationError,
    ComponentsNotSupportedError,
    MissingReverseProjectionError,
    AsyncValidatorInvokedSynchronouslyError,
    PropertyNameUnresolvedError,
    ValidationException,
)

from .builders import (
    configuration_error,
    components_not_supported,
    missing_reverse_projection,
    async_invoked_synchronously,
    property_name_unresolved,
    validation_failed,
)

__all__ = [
    # Core types
    "AppError",
    "ErrorCode",
    # Exceptions
    "FluentRulesException",
    "ConfigurationError",
    "ComponentsNotSupportedError",
    "MissingReverseProjectionError",
    "AsyncValidatorInvokedSynchronouslyError",
    "PropertyNameUnresolvedError",
    "ValidationException",
    # Builders
    "configuration_error",
    "components_not_supported",
    "missing_reverse_projection",
    "async_invoked_synchronously",
    "property_name_unresolved",
    "validation_failed",
]
