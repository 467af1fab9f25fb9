"""Tests for error codes, AppError and the exception builders."""
from __future__ import annotations

from fluentrules.errors import (
    AppError,
    AsyncValidatorInvokedSynchronouslyError,
    ComponentsNotSupportedError,
    ConfigurationError,
    ErrorCode,
    FluentRulesException,
    MissingReverseProjectionError,
    PropertyNameUnresolvedError,
    ValidationException,
    async_invoked_synchronously,
    components_not_supported,
    configuration_error,
    missing_reverse_projection,
    property_name_unresolved,
    validation_failed,
)
from fluentrules.validation import ValidationFailure


class TestErrorCode:
    """Tests for the code taxonomy."""

    def test_categories(self) -> None:
        assert ErrorCode.E2000_VALIDATION_GENERIC.category == "validation"
        assert ErrorCode.E7002_MISSING_REVERSE_PROJECTION.category == "configuration"
        assert ErrorCode.E9000_INTERNAL_GENERIC.category == "internal"


class TestAppError:
    """Tests for AppError."""

    def test_with_metadata_returns_new_error(self) -> None:
        error = AppError(ErrorCode.E7000_CONFIGURATION_GENERIC, "bad", {"a": 1})
        extended = error.with_metadata(b=2)
        assert extended.metadata == {"a": 1, "b": 2}
        assert error.metadata == {"a": 1}

    def test_to_dict_and_str(self) -> None:
        error = AppError(ErrorCode.E7001_COMPONENTS_NOT_SUPPORTED, "nope")
        assert error.to_dict()["error"]["code"] == "E7001_COMPONENTS_NOT_SUPPORTED"
        assert error.to_dict()["error"]["category"] == "configuration"
        assert str(error) == "[E7001_COMPONENTS_NOT_SUPPORTED] nope"


class TestBuilders:
    """Tests for the exception builders."""

    def test_configuration_error_drops_none_metadata(self) -> None:
        exc = configuration_error("bad setup", property=None, rule="x")
        assert isinstance(exc, ConfigurationError)
        assert exc.error.metadata == {"rule": "x"}
        assert exc.code is ErrorCode.E7000_CONFIGURATION_GENERIC

    def test_hierarchy(self) -> None:
        for exc, kind, code in [
            (components_not_supported("SelectValidationRule"), ComponentsNotSupportedError, ErrorCode.E7001_COMPONENTS_NOT_SUPPORTED),
            (missing_reverse_projection("age"), MissingReverseProjectionError, ErrorCode.E7002_MISSING_REVERSE_PROJECTION),
            (async_invoked_synchronously("V", "name"), AsyncValidatorInvokedSynchronouslyError, ErrorCode.E7003_ASYNC_INVOKED_SYNCHRONOUSLY),
            (property_name_unresolved("<lambda>"), PropertyNameUnresolvedError, ErrorCode.E7004_PROPERTY_NAME_UNRESOLVED),
        ]:
            assert isinstance(exc, kind)
            assert isinstance(exc, ConfigurationError)
            assert isinstance(exc, FluentRulesException)
            assert exc.code is code

    def test_async_condition_message(self) -> None:
        exc = async_invoked_synchronously("V", "name", condition=True)
        assert "asynchronous condition" in str(exc)
        assert exc.error.metadata["condition"] is True

    def test_validation_failed(self) -> None:
        failures = [ValidationFailure("name", "'Name' must not be empty.", "")]
        exc = validation_failed(failures)
        assert isinstance(exc, ValidationException)
        assert exc.error.metadata == {"error_count": 1}
        assert exc.to_dict()["errors"][0]["property"] == "name"
