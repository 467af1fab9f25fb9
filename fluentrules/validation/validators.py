"""Property Validators

Leaf predicates over a (context, value) pair. A validator is stateless or
holds only immutable configuration, so one instance is safely shared by every
concurrent validation pass.

Two capabilities:
- ``PropertyValidator.is_valid(context, value)`` (synchronous)
- ``AsyncPropertyValidator.is_valid_async(context, value, cancellation)``

A class may implement both; the engine picks the async path for
``validate_async`` and the sync path for ``validate``.

Failing validators may add placeholder arguments to
``context.message_formatter`` so their message template can report the
configured bounds.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Sized

if TYPE_CHECKING:
    from .context import CancellationToken, ValidationContext


class BasePropertyValidator(ABC):
    """Name and default message shared by sync and async validators."""

    __slots__ = ()

    @property
    def name(self) -> str:
        """Used as the default error code and for message lookup."""
        return type(self).__name__

    def get_default_message_template(self, error_code: str | None) -> str:
        return "The specified condition was not met for '{PropertyName}'."


class PropertyValidator(BasePropertyValidator):
    """Synchronous validator."""

    __slots__ = ()

    @abstractmethod
    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        """Return True when ``value`` passes."""


class AsyncPropertyValidator(BasePropertyValidator):
    """Asynchronous validator."""

    __slots__ = ()

    @abstractmethod
    async def is_valid_async(self, context: ValidationContext, value: Any, cancellation: CancellationToken) -> bool:
        """Return True when ``value`` passes."""


@lru_cache(maxsize=256)
def _compile(pattern: str, flags: int) -> re.Pattern:
    return re.compile(pattern, flags)


def _resolve_comparison(context: ValidationContext, value_to_compare: Any, member: Callable[[Any], Any] | None) -> Any:
    return member(context.instance_to_validate) if member is not None else value_to_compare


# ============================================================================
# Presence Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class NotNoneValidator(PropertyValidator):
    """Value must not be None."""

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        return value is not None

    def get_default_message_template(self, error_code: str | None) -> str:
        return "'{PropertyName}' must not be empty."


@dataclass(frozen=True, slots=True)
class NoneValidator(PropertyValidator):
    """Value must be None."""

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        return value is None

    def get_default_message_template(self, error_code: str | None) -> str:
        return "'{PropertyName}' must be empty."


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


@dataclass(frozen=True, slots=True)
class NotEmptyValidator(PropertyValidator):
    """Value must not be None, a whitespace-only string or an empty collection."""

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        return not _is_empty(value)

    def get_default_message_template(self, error_code: str | None) -> str:
        return "'{PropertyName}' must not be empty."


@dataclass(frozen=True, slots=True)
class EmptyValidator(PropertyValidator):
    """Value must be None, a whitespace-only string or an empty collection."""

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        return _is_empty(value)

    def get_default_message_template(self, error_code: str | None) -> str:
        return "'{PropertyName}' must be empty."


# ============================================================================
# String Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class LengthValidator(PropertyValidator):
    """String length within [min_length, max_length]. None passes."""
    min_length: int = 0
    max_length: int | None = None

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        if value is None:
            return True

        length = len(value)
        if length < self.min_length or (self.max_length is not None and length > self.max_length):
            context.message_formatter.append_argument("MinLength", self.min_length) \
                .append_argument("MaxLength", self.max_length) \
                .append_argument("TotalLength", length)
            return False
        return True

    def get_default_message_template(self, error_code: str | None) -> str:
        if self.max_length is None:
            return "The length of '{PropertyName}' must be at least {MinLength} characters. You entered {TotalLength} characters."
        if self.min_length == self.max_length:
            return "'{PropertyName}' must be {MaxLength} characters in length. You entered {TotalLength} characters."
        if self.min_length == 0:
            return "The length of '{PropertyName}' must be {MaxLength} characters or fewer. You entered {TotalLength} characters."
        return "'{PropertyName}' must be between {MinLength} and {MaxLength} characters. You entered {TotalLength} characters."


@dataclass(frozen=True, slots=True)
class RegularExpressionValidator(PropertyValidator):
    """String must match ``pattern`` (search semantics). None passes."""
    pattern: str
    flags: int = 0

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        if value is None:
            return True
        if not _compile(self.pattern, self.flags).search(str(value)):
            context.message_formatter.append_argument("RegularExpression", self.pattern)
            return False
        return True

    def get_default_message_template(self, error_code: str | None) -> str:
        return "'{PropertyName}' is not in the correct format."


# ============================================================================
# Comparison Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class EqualValidator(PropertyValidator):
    """Value equals a constant or a value read from the instance."""
    value_to_compare: Any = None
    member: Callable[[Any], Any] | None = None

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        comparison = _resolve_comparison(context, self.value_to_compare, self.member)
        if value != comparison:
            context.message_formatter.append_argument("ComparisonValue", comparison)
            return False
        return True

    def get_default_message_template(self, error_code: str | None) -> str:
        return "'{PropertyName}' must be equal to '{ComparisonValue}'."


@dataclass(frozen=True, slots=True)
class NotEqualValidator(PropertyValidator):
    """Value differs from a constant or a value read from the instance."""
    value_to_compare: Any = None
    member: Callable[[Any], Any] | None = None

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        comparison = _resolve_comparison(context, self.value_to_compare, self.member)
        if value == comparison:
            context.message_formatter.append_argument("ComparisonValue", comparison)
            return False
        return True

    def get_default_message_template(self, error_code: str | None) -> str:
        return "'{PropertyName}' must not be equal to '{ComparisonValue}'."


class _OrderingValidator(PropertyValidator):
    """Shared logic for ordering comparisons. None passes."""

    __slots__ = ()

    template: str = ""

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        if value is None:
            return True
        comparison = _resolve_comparison(context, self.value_to_compare, self.member)
        if not self.compare(value, comparison):
            context.message_formatter.append_argument("ComparisonValue", comparison)
            return False
        return True

    @abstractmethod
    def compare(self, value: Any, comparison: Any) -> bool:
        """Ordering test."""

    def get_default_message_template(self, error_code: str | None) -> str:
        return self.template


@dataclass(frozen=True, slots=True)
class GreaterThanValidator(_OrderingValidator):
    value_to_compare: Any = None
    member: Callable[[Any], Any] | None = None

    template = "'{PropertyName}' must be greater than '{ComparisonValue}'."

    def compare(self, value: Any, comparison: Any) -> bool:
        return value > comparison


@dataclass(frozen=True, slots=True)
class GreaterThanOrEqualValidator(_OrderingValidator):
    value_to_compare: Any = None
    member: Callable[[Any], Any] | None = None

    template = "'{PropertyName}' must be greater than or equal to '{ComparisonValue}'."

    def compare(self, value: Any, comparison: Any) -> bool:
        return value >= comparison


@dataclass(frozen=True, slots=True)
class LessThanValidator(_OrderingValidator):
    value_to_compare: Any = None
    member: Callable[[Any], Any] | None = None

    template = "'{PropertyName}' must be less than '{ComparisonValue}'."

    def compare(self, value: Any, comparison: Any) -> bool:
        return value < comparison


@dataclass(frozen=True, slots=True)
class LessThanOrEqualValidator(_OrderingValidator):
    value_to_compare: Any = None
    member: Callable[[Any], Any] | None = None

    template = "'{PropertyName}' must be less than or equal to '{ComparisonValue}'."

    def compare(self, value: Any, comparison: Any) -> bool:
        return value <= comparison


@dataclass(frozen=True, slots=True)
class InclusiveBetweenValidator(PropertyValidator):
    """from_value <= value <= to_value. None passes."""
    from_value: Any
    to_value: Any

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        if value is None:
            return True
        if value < self.from_value or value > self.to_value:
            context.message_formatter.append_argument("From", self.from_value).append_argument("To", self.to_value)
            return False
        return True

    def get_default_message_template(self, error_code: str | None) -> str:
        return "'{PropertyName}' must be between {From} and {To}. You entered {PropertyValue}."


# ============================================================================
# Custom Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class PredicateValidator(PropertyValidator):
    """Custom validator from a function.

    Usage:
        PredicateValidator(lambda instance, value, context: value % 2 == 0)
    """
    predicate: Callable[[Any, Any, ValidationContext], bool]

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        return bool(self.predicate(context.instance_to_validate, value, context))


@dataclass(frozen=True, slots=True)
class AsyncPredicateValidator(AsyncPropertyValidator):
    """Custom async validator from a coroutine function.

    Usage:
        async def unique(instance, value, context, cancellation): ...
        AsyncPredicateValidator(unique)
    """
    predicate: Callable[[Any, Any, ValidationContext, CancellationToken], Awaitable[bool]]

    async def is_valid_async(self, context: ValidationContext, value: Any, cancellation: CancellationToken) -> bool:
        return bool(await self.predicate(context.instance_to_validate, value, context, cancellation))
