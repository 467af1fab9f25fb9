"""Validator Adaptors

Wrapper validators that keep the leaf contract while changing what the inner
validator sees:

- Conditional adaptors gate the inner validator behind
  ``condition(instance, value)``; a closed gate is a pass, not a failure.
- Select adaptors project the rule's native value into the inner validator's
  value type with ``select(instance, value)``.
- ``ChildValidatorAdaptor`` runs a nested validator against the property
  value on whichever path (sync or async) the caller is on.

Every adaptor reports the wrapped validator's ``name`` so error codes and
message lookup are unaffected by wrapping.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from .validators import AsyncPropertyValidator, BasePropertyValidator, PropertyValidator

if TYPE_CHECKING:
    from .context import CancellationToken, ValidationContext
    from .validator import AbstractValidator

Condition = Callable[[Any, Any], bool]
Selector = Callable[[Any, Any], Any]


class _WrappingValidator(BasePropertyValidator):
    """Forwards name and default message to the wrapped validator."""

    __slots__ = ()

    _validator: BasePropertyValidator

    @property
    def name(self) -> str:
        return self._validator.name

    @property
    def inner_validator(self) -> BasePropertyValidator:
        return self._validator

    def get_default_message_template(self, error_code: str | None) -> str:
        return self._validator.get_default_message_template(error_code)


# ============================================================================
# Conditional
# ============================================================================

class ConditionalValidatorAdaptor(_WrappingValidator, PropertyValidator):
    __slots__ = ("_condition", "_validator")

    def __init__(self, condition: Condition, validator: PropertyValidator):
        self._condition = condition
        self._validator = validator

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        if not self._condition(context.instance_to_validate, value):
            return True
        return self._validator.is_valid(context, value)


class AsyncConditionalValidatorAdaptor(_WrappingValidator, AsyncPropertyValidator):
    __slots__ = ("_condition", "_validator")

    def __init__(self, condition: Condition, validator: AsyncPropertyValidator):
        self._condition = condition
        self._validator = validator

    async def is_valid_async(self, context: ValidationContext, value: Any, cancellation: CancellationToken) -> bool:
        # Closed gate returns before any await, so the coroutine finishes on its first step.
        if not self._condition(context.instance_to_validate, value):
            return True
        return await self._validator.is_valid_async(context, value, cancellation)


# ============================================================================
# Select (type projection)
# ============================================================================

class SelectValidatorAdaptor(_WrappingValidator, PropertyValidator):
    __slots__ = ("_select", "_validator")

    def __init__(self, select: Selector, validator: PropertyValidator):
        self._select = select
        self._validator = validator

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        new_value = self._select(context.instance_to_validate, value)
        return self._validator.is_valid(context, new_value)


class AsyncSelectValidatorAdaptor(_WrappingValidator, AsyncPropertyValidator):
    __slots__ = ("_select", "_validator")

    def __init__(self, select: Selector, validator: AsyncPropertyValidator):
        self._select = select
        self._validator = validator

    async def is_valid_async(self, context: ValidationContext, value: Any, cancellation: CancellationToken) -> bool:
        new_value = self._select(context.instance_to_validate, value)
        return await self._validator.is_valid_async(context, new_value, cancellation)


# ============================================================================
# Nested validators
# ============================================================================

class ChildValidatorAdaptor(PropertyValidator, AsyncPropertyValidator):
    """Runs a nested validator against the property value.

    Child failures go straight into the parent's failure sink with the
    parent's property path as prefix, so the adaptor itself always reports a
    pass. ``None`` values and providers returning ``None`` are skipped. A
    provider is called as ``provider(instance, value)``.
    """

    __slots__ = ("_validator", "_validator_provider", "validator_type", "rule_sets")

    def __init__(
        self,
        validator: AbstractValidator | None = None,
        *,
        validator_provider: Callable[[Any, Any], AbstractValidator | None] | None = None,
        validator_type: type | None = None,
        rule_sets: tuple[str, ...] = (),
    ):
        self._validator = validator
        self._validator_provider = validator_provider
        self.validator_type = validator_type or (type(validator) if validator is not None else None)
        self.rule_sets = tuple(rule_sets)

    @property
    def name(self) -> str:
        return "ChildValidatorAdaptor"

    def get_validator(self, context: ValidationContext, value: Any) -> AbstractValidator | None:
        if self._validator_provider is not None:
            return self._validator_provider(context.instance_to_validate, value)
        return self._validator

    def _create_child_context(self, context: ValidationContext, value: Any) -> ValidationContext:
        return context.create_child_context(value, frozenset(self.rule_sets) if self.rule_sets else None)

    def is_valid(self, context: ValidationContext, value: Any) -> bool:
        if value is None:
            return True
        validator = self.get_validator(context, value)
        if validator is None:
            return True
        validator.validate(self._create_child_context(context, value))
        return True

    async def is_valid_async(self, context: ValidationContext, value: Any, cancellation: CancellationToken) -> bool:
        if value is None:
            return True
        validator = self.get_validator(context, value)
        if validator is None:
            return True
        await validator.validate_async(self._create_child_context(context, value), cancellation=cancellation)
        return True
