"""Fluent Rule Builder

``rule_for`` returns a ``RuleBuilder``; every method mutates the underlying
rule (or its current component) and returns a builder, so configuration reads
as one chain:

    v.rule_for("email").not_empty().matches(r"@").with_message("Bad email")

``where`` and ``select`` return a builder over a decorator rule, so validators
added after them are gated or projected while the underlying rule still owns
every component.
"""
from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from fluentrules.errors import ConfigurationError, configuration_error
from fluentrules.logging import builder_logger

from .adaptors import ChildValidatorAdaptor
from .results import ApplyConditionTo, CascadeMode, Severity
from .rules import ConditionalValidationRule, SelectValidationRule
from .validators import (
    AsyncPredicateValidator,
    AsyncPropertyValidator,
    EmptyValidator,
    EqualValidator,
    GreaterThanOrEqualValidator,
    GreaterThanValidator,
    InclusiveBetweenValidator,
    LengthValidator,
    LessThanOrEqualValidator,
    LessThanValidator,
    NoneValidator,
    NotEmptyValidator,
    NotEqualValidator,
    NotNoneValidator,
    PredicateValidator,
    PropertyValidator,
    RegularExpressionValidator,
)

if TYPE_CHECKING:
    from .components import MessageBuilderContext
    from .context import CancellationToken, ValidationContext
    from .rules import PropertyRule, ValidationRuleDecorator
    from .validator import AbstractValidator

log = builder_logger()


def configuration_failure(message: str, **metadata) -> ConfigurationError:
    """Build a ``ConfigurationError`` and log it as a ``configuration_error`` event."""
    exc = configuration_error(message, **metadata)
    log.warning("configuration_error", code=exc.code.name, message=message, **exc.error.metadata)
    return exc


def _positional_arity(func: Callable) -> int | None:
    """Number of positional parameters, None for ``*args``."""
    try:
        params = inspect.signature(func).parameters.values()
    except (TypeError, ValueError):
        return None
    count = 0
    for p in params:
        if p.kind == p.VAR_POSITIONAL:
            return None
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def _adapt_predicate(predicate: Callable) -> Callable[[Any, Any, ValidationContext], Any]:
    """Accept ``f(value)``, ``f(instance, value)`` or ``f(instance, value, context)``."""
    arity = _positional_arity(predicate)
    if arity == 1:
        return lambda instance, value, context: predicate(value)
    if arity == 2:
        return lambda instance, value, context: predicate(instance, value)
    return predicate


def _adapt_async_predicate(predicate: Callable) -> Callable[..., Awaitable[bool]]:
    """Async counterpart of ``_adapt_predicate``; the four-argument form also receives the token."""
    arity = _positional_arity(predicate)
    if arity == 1:
        return lambda instance, value, context, cancellation: predicate(value)
    if arity == 2:
        return lambda instance, value, context, cancellation: predicate(instance, value)
    if arity == 3:
        return lambda instance, value, context, cancellation: predicate(instance, value, context)
    return predicate


def _adapt_condition(predicate: Callable) -> Callable[[ValidationContext], bool]:
    """``f(instance)`` or ``f(instance, context)`` as a context condition."""
    if _positional_arity(predicate) == 2:
        return lambda ctx: predicate(ctx.instance_to_validate, ctx)
    return lambda ctx: predicate(ctx.instance_to_validate)


class RuleBuilder:
    """Chainable configuration of one rule."""

    def __init__(self, rule: PropertyRule | ValidationRuleDecorator, parent_validator: AbstractValidator):
        self.rule = rule
        self.parent_validator = parent_validator

    def __repr__(self) -> str:
        return f"RuleBuilder({self.rule!r})"

    def _current(self):
        component = self.rule.current
        if component is None:
            raise configuration_failure(
                "A validator must be added before configuring its options.",
                property=self.rule.property_name,
            )
        return component

    # Validators ---------------------------------------------------------

    def set_validator(self, validator: Any, *rule_sets: str) -> RuleBuilder:
        """Add a property validator, a nested validator or an ``(instance, value)`` provider."""
        from .validator import AbstractValidator

        if validator is None:
            raise configuration_failure("Cannot pass None to set_validator.", property=self.rule.property_name)

        if isinstance(validator, AbstractValidator):
            adaptor = ChildValidatorAdaptor(validator, rule_sets=rule_sets)
            self.rule.add_async_validator(adaptor, adaptor)
        elif isinstance(validator, PropertyValidator) and isinstance(validator, AsyncPropertyValidator):
            self.rule.add_async_validator(validator, validator)
        elif isinstance(validator, AsyncPropertyValidator):
            self.rule.add_async_validator(validator)
        elif isinstance(validator, PropertyValidator):
            self.rule.add_validator(validator)
        elif callable(validator):
            adaptor = ChildValidatorAdaptor(validator_provider=validator, rule_sets=rule_sets)
            self.rule.add_async_validator(adaptor, adaptor)
        else:
            raise configuration_failure(
                f"Unsupported validator type {type(validator).__name__}.",
                property=self.rule.property_name,
            )
        return self

    def set_async_validator(self, validator: AsyncPropertyValidator) -> RuleBuilder:
        self.rule.add_async_validator(validator)
        return self

    def not_none(self) -> RuleBuilder:
        return self.set_validator(NotNoneValidator())

    def is_none(self) -> RuleBuilder:
        return self.set_validator(NoneValidator())

    def not_empty(self) -> RuleBuilder:
        return self.set_validator(NotEmptyValidator())

    def empty(self) -> RuleBuilder:
        return self.set_validator(EmptyValidator())

    def length(self, min_length: int, max_length: int | None = None) -> RuleBuilder:
        return self.set_validator(LengthValidator(min_length, max_length))

    def min_length(self, min_length: int) -> RuleBuilder:
        return self.set_validator(LengthValidator(min_length, None))

    def max_length(self, max_length: int) -> RuleBuilder:
        return self.set_validator(LengthValidator(0, max_length))

    def matches(self, pattern: str, flags: int = 0) -> RuleBuilder:
        return self.set_validator(RegularExpressionValidator(pattern, flags))

    def equal(self, value: Any = None, *, member: Callable[[Any], Any] | None = None) -> RuleBuilder:
        return self.set_validator(EqualValidator(value, member))

    def not_equal(self, value: Any = None, *, member: Callable[[Any], Any] | None = None) -> RuleBuilder:
        return self.set_validator(NotEqualValidator(value, member))

    def greater_than(self, value: Any = None, *, member: Callable[[Any], Any] | None = None) -> RuleBuilder:
        return self.set_validator(GreaterThanValidator(value, member))

    def greater_than_or_equal(self, value: Any = None, *, member: Callable[[Any], Any] | None = None) -> RuleBuilder:
        return self.set_validator(GreaterThanOrEqualValidator(value, member))

    def less_than(self, value: Any = None, *, member: Callable[[Any], Any] | None = None) -> RuleBuilder:
        return self.set_validator(LessThanValidator(value, member))

    def less_than_or_equal(self, value: Any = None, *, member: Callable[[Any], Any] | None = None) -> RuleBuilder:
        return self.set_validator(LessThanOrEqualValidator(value, member))

    def inclusive_between(self, from_value: Any, to_value: Any) -> RuleBuilder:
        return self.set_validator(InclusiveBetweenValidator(from_value, to_value))

    def must(self, predicate: Callable[..., bool]) -> RuleBuilder:
        """Custom check: ``f(value)``, ``f(instance, value)`` or ``f(instance, value, context)``."""
        return self.set_validator(PredicateValidator(_adapt_predicate(predicate)))

    def must_async(self, predicate: Callable[..., Awaitable[bool]]) -> RuleBuilder:
        """Async custom check; the four-argument form also receives the cancellation token."""
        return self.set_async_validator(AsyncPredicateValidator(_adapt_async_predicate(predicate)))

    # Component options --------------------------------------------------

    def with_message(self, message: str | Callable[[Any, Any], str]) -> RuleBuilder:
        """Literal template, or ``f(instance, value)`` returning one."""
        if callable(message):
            self._current().set_error_message(lambda ctx, value: message(ctx.instance_to_validate, value))
        else:
            self._current().set_error_message(message)
        return self

    def with_error_code(self, error_code: str) -> RuleBuilder:
        self._current().error_code = error_code
        return self

    def with_severity(self, severity: Severity | str | Callable[[Any, Any], Severity]) -> RuleBuilder:
        if callable(severity) and not isinstance(severity, Severity):
            self._current().severity_provider = lambda ctx, value: Severity(severity(ctx.instance_to_validate, value))
        else:
            fixed = Severity(severity)
            self._current().severity_provider = lambda ctx, value: fixed
        return self

    def with_state(self, provider: Callable[[Any, Any], Any]) -> RuleBuilder:
        self._current().custom_state_provider = lambda ctx, value: provider(ctx.instance_to_validate, value)
        return self

    # Rule options -------------------------------------------------------

    def with_name(self, name: str | Callable[[Any], str]) -> RuleBuilder:
        """Display name used in messages; the property path is unchanged."""
        if callable(name):
            self.rule.set_display_name(lambda ctx: name(ctx.instance_to_validate))
        else:
            self.rule.set_display_name(name)
        return self

    def override_property_name(self, property_name: str) -> RuleBuilder:
        """Replace the name used to build the property path."""
        self.rule.property_name = property_name
        return self

    def when(self, predicate: Callable[..., bool], apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> RuleBuilder:
        """Run validators only when ``predicate(instance)`` (or ``(instance, context)``) holds."""
        self.rule.apply_condition(_adapt_condition(predicate), apply_to)
        return self

    def unless(self, predicate: Callable[..., bool], apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> RuleBuilder:
        condition = _adapt_condition(predicate)
        self.rule.apply_condition(lambda ctx: not condition(ctx), apply_to)
        return self

    def when_async(
        self,
        predicate: Callable[[Any, CancellationToken], Awaitable[bool]],
        apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS,
    ) -> RuleBuilder:
        self.rule.apply_async_condition(lambda ctx, ct: predicate(ctx.instance_to_validate, ct), apply_to)
        return self

    def unless_async(
        self,
        predicate: Callable[[Any, CancellationToken], Awaitable[bool]],
        apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS,
    ) -> RuleBuilder:
        async def negated(ctx: ValidationContext, ct: CancellationToken) -> bool:
            return not await predicate(ctx.instance_to_validate, ct)

        self.rule.apply_async_condition(negated, apply_to)
        return self

    def where(self, condition: Callable[[Any, Any], bool]) -> RuleBuilder:
        """Gate every validator added after this call behind ``condition(instance, value)``."""
        return RuleBuilder(ConditionalValidationRule(self.rule, condition), self.parent_validator)

    def select(self, to_new: Callable[[Any, Any], Any], to_old: Callable[[Any, Any], Any] | None = None) -> RuleBuilder:
        """Validate ``to_new(instance, value)`` with validators added after this call."""
        return RuleBuilder(SelectValidationRule(self.rule, to_new, to_old), self.parent_validator)

    def cascade(self, mode: CascadeMode | str) -> RuleBuilder:
        self.rule.cascade_mode = CascadeMode(mode)
        return self

    def dependent_rules(self, action: Callable[[], Any]) -> RuleBuilder:
        """Rules created by ``action`` run only when this rule produced no failures."""
        captured: list = []
        with self.parent_validator.rules.capture(captured.append):
            action()

        if self.rule.rule_sets:
            for dependent in captured:
                if dependent.rule_sets is None:
                    dependent.rule_sets = self.rule.rule_sets

        self.rule.add_dependent_rules(captured)
        log.debug("dependent_rules_added", property=self.rule.property_name, count=len(captured))
        return self

    def configure(self, configurator: Callable[[PropertyRule | ValidationRuleDecorator], Any]) -> RuleBuilder:
        """Direct access to the rule for options the builder does not cover."""
        configurator(self.rule)
        return self

    def message_builder(self, builder: Callable[[MessageBuilderContext], str]) -> RuleBuilder:
        """Build every failure message of this rule with ``builder``."""
        self.rule.message_builder = builder
        return self
