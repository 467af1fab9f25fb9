"""Validation Rules and Rule Decorators

``PropertyRule`` owns the ordered components for one property path and runs
them against a context, honouring cascade mode and dependent rules.

Decorator rules wrap an existing rule by reference and forward every
structural read and the validate calls to it. They intercept only:

- ``add_validator`` / ``add_async_validator``: the validator is re-wrapped
  in a condition-gating or type-projecting adaptor before it reaches the
  inner rule;
- the ``message_builder`` setter (Select rebuilds the builder context in
  the projected type);
- ``current`` (Select exposes the component in the projected type).

Several validators added through one decorator are each wrapped
independently and land in the inner rule in call order.
"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Callable, Iterable

from fluentrules.config import settings
from fluentrules.errors import async_invoked_synchronously, components_not_supported, property_name_unresolved
from fluentrules.logging import rule_logger

from .adaptors import (
    AsyncConditionalValidatorAdaptor,
    AsyncSelectValidatorAdaptor,
    ChildValidatorAdaptor,
    ConditionalValidatorAdaptor,
    SelectValidatorAdaptor,
)
from .components import MessageBuilderContext, RuleComponent, SelectRuleComponent
from .results import ApplyConditionTo, CascadeMode, Severity, ValidationFailure

if TYPE_CHECKING:
    from .components import AsyncContextCondition, ContextCondition
    from .context import CancellationToken, ValidationContext
    from .validators import AsyncPropertyValidator, PropertyValidator

log = rule_logger()

MessageBuilder = Callable[[MessageBuilderContext], str]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def split_display_name(property_name: str | None) -> str | None:
    """Display name from a property name, e.g. first_name or firstName -> "First Name"."""
    if property_name is None:
        return None
    if not settings.DISPLAY_NAME_SPLIT_WORDS:
        return property_name
    words = _CAMEL_BOUNDARY.sub(" ", property_name.rsplit(".", 1)[-1]).replace("_", " ").split()
    return " ".join(w[:1].upper() + w[1:] for w in words)


class PropertyRule:
    """The checks attached to one property path."""

    def __init__(
        self,
        property_func: Callable[[Any], Any],
        property_name: str | None,
        *,
        cascade_mode: CascadeMode | None = None,
        accessor_description: str | None = None,
    ):
        self.property_func = property_func
        self.property_name = property_name
        self.accessor_description = accessor_description or repr(property_func)
        self.cascade_mode = cascade_mode or CascadeMode(settings.DEFAULT_RULE_LEVEL_CASCADE_MODE)
        self.rule_sets: tuple[str, ...] | None = None
        self.message_builder: MessageBuilder | None = None
        self._components: list[RuleComponent] = []
        self._dependent_rules: list[PropertyRule | ValidationRuleDecorator] = []
        self._display_name: str | None = None
        self._display_name_factory: Callable[[ValidationContext], str] | None = None

    def __repr__(self) -> str:
        return f"PropertyRule({self.property_name!r}, components={len(self._components)})"

    # Structure ----------------------------------------------------------

    @property
    def components(self) -> list[RuleComponent]:
        return self._components

    @property
    def current(self) -> RuleComponent | None:
        return self._components[-1] if self._components else None

    @property
    def dependent_rules(self) -> list[PropertyRule | ValidationRuleDecorator]:
        return self._dependent_rules

    @property
    def has_condition(self) -> bool:
        return any(c.has_condition for c in self._components)

    @property
    def has_async_condition(self) -> bool:
        return any(c.has_async_condition for c in self._components)

    def add_validator(self, validator: PropertyValidator) -> None:
        self._components.append(RuleComponent(validator))

    def add_async_validator(self, async_validator: AsyncPropertyValidator, fallback: PropertyValidator | None = None) -> None:
        self._components.append(RuleComponent(fallback, async_validator))

    def add_component(self, component: RuleComponent) -> None:
        self._components.append(component)

    def add_dependent_rules(self, rules: Iterable[PropertyRule | ValidationRuleDecorator]) -> None:
        self._dependent_rules.extend(rules)

    # Naming -------------------------------------------------------------

    def set_display_name(self, name: str | Callable[[ValidationContext], str]) -> None:
        if callable(name):
            self._display_name_factory, self._display_name = name, None
        else:
            self._display_name_factory, self._display_name = None, name

    def get_display_name(self, context: ValidationContext | None) -> str | None:
        if self._display_name_factory is not None and context is not None:
            return self._display_name_factory(context)
        return self._display_name or split_display_name(self.property_name)

    def get_property_value(self, instance: Any) -> Any:
        return self.property_func(instance)

    # Conditions ---------------------------------------------------------

    def apply_condition(self, predicate: ContextCondition, apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> None:
        if apply_to == ApplyConditionTo.ALL_VALIDATORS:
            for component in self._components:
                component.apply_condition(predicate)
            for dependent in self._dependent_rules:
                dependent.apply_condition(predicate, apply_to)
        elif self.current is not None:
            self.current.apply_condition(predicate)

    def apply_async_condition(self, predicate: AsyncContextCondition, apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> None:
        if apply_to == ApplyConditionTo.ALL_VALIDATORS:
            for component in self._components:
                component.apply_async_condition(predicate)
            for dependent in self._dependent_rules:
                dependent.apply_async_condition(predicate, apply_to)
        elif self.current is not None:
            self.current.apply_async_condition(predicate)

    def apply_shared_condition(self, condition: ContextCondition) -> None:
        """Condition from a validator-level ``when`` block."""
        self.apply_condition(condition, ApplyConditionTo.ALL_VALIDATORS)

    def apply_shared_async_condition(self, condition: AsyncContextCondition) -> None:
        self.apply_async_condition(condition, ApplyConditionTo.ALL_VALIDATORS)

    # Execution ----------------------------------------------------------

    def _prepare(self, context: ValidationContext) -> str:
        display_name = self.get_display_name(context)
        if self.property_name is None and display_name is None:
            raise property_name_unresolved(self.accessor_description)
        property_path = context.build_property_path(self.property_name or display_name)
        context.initialize_for_property_validator(property_path, self.get_display_name, self.property_name)
        return property_path

    def validate(self, context: ValidationContext) -> None:
        property_path = self._prepare(context)
        total_failures = len(context.failures)
        value, fetched = None, False

        for index, component in enumerate(self._components):
            context.message_formatter.reset()
            if not component.invoke_condition(context):
                log.debug("component_skipped", property=property_path, validator=component.validator.name)
                continue
            if component.has_async_condition:
                raise async_invoked_synchronously(component.validator.name, property_path, condition=True)

            if not fetched:
                value, fetched = self.property_func(context.instance_to_validate), True

            if not component.validate(context, value):
                context.add_failure(self._create_failure(context, value, component))

            if self.cascade_mode == CascadeMode.STOP and len(context.failures) > total_failures:
                log.debug("cascade_stopped", property=property_path, remaining=len(self._components) - index - 1)
                break

        self._run_dependent_rules(context, total_failures)

    async def validate_async(self, context: ValidationContext, cancellation: CancellationToken) -> None:
        property_path = self._prepare(context)
        total_failures = len(context.failures)
        value, fetched = None, False

        for index, component in enumerate(self._components):
            cancellation.raise_if_cancellation_requested()
            context.message_formatter.reset()
            if not component.invoke_condition(context):
                log.debug("component_skipped", property=property_path, validator=component.validator.name)
                continue
            if component.has_async_condition and not await component.invoke_async_condition(context, cancellation):
                log.debug("component_skipped", property=property_path, validator=component.validator.name)
                continue

            if not fetched:
                value, fetched = self.property_func(context.instance_to_validate), True

            if component.supports_asynchronous_validation:
                valid = await component.validate_async(context, value, cancellation)
            else:
                valid = component.validate(context, value)
            if not valid:
                context.add_failure(self._create_failure(context, value, component))

            if self.cascade_mode == CascadeMode.STOP and len(context.failures) > total_failures:
                log.debug("cascade_stopped", property=property_path, remaining=len(self._components) - index - 1)
                break

        if len(context.failures) > total_failures:
            if self._dependent_rules:
                log.debug("dependent_rules_skipped", property=property_path, count=len(self._dependent_rules))
            return
        for dependent in self._dependent_rules:
            cancellation.raise_if_cancellation_requested()
            await dependent.validate_async(context, cancellation)

    def _run_dependent_rules(self, context: ValidationContext, total_failures: int) -> None:
        if len(context.failures) > total_failures:
            if self._dependent_rules:
                log.debug("dependent_rules_skipped", property=context.property_path, count=len(self._dependent_rules))
            return
        for dependent in self._dependent_rules:
            dependent.validate(context)

    def _create_failure(self, context: ValidationContext, value: Any, component: RuleComponent) -> ValidationFailure:
        formatter = context.message_formatter
        formatter.append_property_name(context.display_name)
        formatter.append_property_value(value)
        formatter.append_argument(formatter.PROPERTY_PATH, context.property_path)

        if self.message_builder is not None:
            message = self.message_builder(MessageBuilderContext(context, value, component))
        else:
            message = component.get_error_message(context, value)

        if component.severity_provider is not None:
            severity = component.severity_provider(context, value)
        else:
            severity = Severity(settings.DEFAULT_SEVERITY)

        return ValidationFailure(
            property_name=context.property_path,
            error_message=message,
            attempted_value=value,
            error_code=component.error_code or component.validator.name,
            severity=severity,
            custom_state=component.custom_state_provider(context, value) if component.custom_state_provider else None,
            formatted_message_placeholder_values=dict(formatter.placeholder_values),
        )


class ValidationRuleDecorator:
    """Forwards everything to ``inner_rule``.

    Subclasses override only the operations they need to rewrite.
    """

    def __init__(self, rule: PropertyRule | ValidationRuleDecorator):
        self._rule = rule

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._rule!r})"

    @property
    def inner_rule(self) -> PropertyRule | ValidationRuleDecorator:
        return self._rule

    @property
    def cascade_mode(self) -> CascadeMode:
        return self._rule.cascade_mode

    @cascade_mode.setter
    def cascade_mode(self, value: CascadeMode) -> None:
        self._rule.cascade_mode = value

    @property
    def rule_sets(self) -> tuple[str, ...] | None:
        return self._rule.rule_sets

    @rule_sets.setter
    def rule_sets(self, value: tuple[str, ...] | None) -> None:
        self._rule.rule_sets = value

    @property
    def property_name(self) -> str | None:
        return self._rule.property_name

    @property_name.setter
    def property_name(self, value: str | None) -> None:
        self._rule.property_name = value

    @property
    def property_func(self) -> Callable[[Any], Any]:
        return self._rule.property_func

    @property
    def components(self) -> list[RuleComponent]:
        return self._rule.components

    @property
    def current(self) -> RuleComponent | SelectRuleComponent | None:
        return self._rule.current

    @property
    def dependent_rules(self) -> list[PropertyRule | ValidationRuleDecorator]:
        return self._rule.dependent_rules

    @property
    def has_condition(self) -> bool:
        return self._rule.has_condition

    @property
    def has_async_condition(self) -> bool:
        return self._rule.has_async_condition

    @property
    def message_builder(self) -> MessageBuilder | None:
        return self._rule.message_builder

    @message_builder.setter
    def message_builder(self, value: MessageBuilder | None) -> None:
        self._rule.message_builder = value

    def add_validator(self, validator: PropertyValidator) -> None:
        self._rule.add_validator(validator)

    def add_async_validator(self, async_validator: AsyncPropertyValidator, fallback: PropertyValidator | None = None) -> None:
        self._rule.add_async_validator(async_validator, fallback)

    def add_component(self, component: RuleComponent) -> None:
        self._rule.add_component(component)

    def add_dependent_rules(self, rules: Iterable[PropertyRule | ValidationRuleDecorator]) -> None:
        self._rule.add_dependent_rules(rules)

    def set_display_name(self, name: str | Callable[[ValidationContext], str]) -> None:
        self._rule.set_display_name(name)

    def get_display_name(self, context: ValidationContext | None) -> str | None:
        return self._rule.get_display_name(context)

    def get_property_value(self, instance: Any) -> Any:
        return self._rule.get_property_value(instance)

    def apply_condition(self, predicate: ContextCondition, apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> None:
        self._rule.apply_condition(predicate, apply_to)

    def apply_async_condition(self, predicate: AsyncContextCondition, apply_to: ApplyConditionTo = ApplyConditionTo.ALL_VALIDATORS) -> None:
        self._rule.apply_async_condition(predicate, apply_to)

    def apply_shared_condition(self, condition: ContextCondition) -> None:
        self._rule.apply_shared_condition(condition)

    def apply_shared_async_condition(self, condition: AsyncContextCondition) -> None:
        self._rule.apply_shared_async_condition(condition)

    def validate(self, context: ValidationContext) -> None:
        self._rule.validate(context)

    async def validate_async(self, context: ValidationContext, cancellation: CancellationToken) -> None:
        await self._rule.validate_async(context, cancellation)


class ConditionalValidationRule(ValidationRuleDecorator):
    """Gates every validator added through it behind ``condition(instance, value)``."""

    def __init__(self, rule: PropertyRule | ValidationRuleDecorator, condition: Callable[[Any, Any], bool]):
        super().__init__(rule)
        self._condition = condition

    def add_validator(self, validator: PropertyValidator) -> None:
        self._rule.add_validator(ConditionalValidatorAdaptor(self._condition, validator))

    def add_async_validator(self, async_validator: AsyncPropertyValidator, fallback: PropertyValidator | None = None) -> None:
        self._rule.add_async_validator(
            AsyncConditionalValidatorAdaptor(self._condition, async_validator),
            None if fallback is None else ConditionalValidatorAdaptor(self._condition, fallback),
        )


class SelectValidationRule(ValidationRuleDecorator):
    """Hosts validators of a projected value type on a rule of the native type.

    ``to_new(instance, old)`` projects forward for validators, conditions and
    callbacks. ``to_old(instance, new)`` is only needed when a message must
    be resolved from a projected value (``get_default_message`` inside a
    message builder).
    """

    def __init__(
        self,
        rule: PropertyRule | ValidationRuleDecorator,
        to_new: Callable[[Any, Any], Any],
        to_old: Callable[[Any, Any], Any] | None = None,
    ):
        super().__init__(rule)
        self._to_new = to_new
        self._to_old = to_old

    def add_validator(self, validator: PropertyValidator) -> None:
        self._rule.add_validator(SelectValidatorAdaptor(self._to_new, validator))

    def add_async_validator(self, async_validator: AsyncPropertyValidator, fallback: PropertyValidator | None = None) -> None:
        self._rule.add_async_validator(
            AsyncSelectValidatorAdaptor(self._to_new, async_validator),
            None if fallback is None else SelectValidatorAdaptor(self._to_new, fallback),
        )

    def add_component(self, component: RuleComponent) -> None:
        # Inner components live in the native value type.
        raise components_not_supported(type(self).__name__)

    @property
    def current(self) -> SelectRuleComponent | None:
        inner = self._rule.current
        return None if inner is None else SelectRuleComponent(inner, self._to_new, self._to_old)

    @property
    def message_builder(self) -> MessageBuilder | None:
        return self._rule.message_builder

    @message_builder.setter
    def message_builder(self, builder: MessageBuilder | None) -> None:
        if builder is None:
            self._rule.message_builder = None
            return
        to_new, to_old = self._to_new, self._to_old

        def build(context: MessageBuilderContext) -> str:
            new_value = to_new(context.instance_to_validate, context.property_value)
            component = SelectRuleComponent(context.component, to_new, to_old)
            return builder(MessageBuilderContext(context.parent_context, new_value, component))

        self._rule.message_builder = build


class IncludeRule(PropertyRule):
    """Runs another validator against the instance itself.

    Failures keep the including context's property chain. Selected for every
    rule-set request; the included validator applies its own selection.
    """

    def __init__(
        self,
        validator: Any,
        *,
        validator_provider: Callable[[Any, Any], Any] | None = None,
        cascade_mode: CascadeMode | None = None,
    ):
        super().__init__(lambda instance: instance, None, cascade_mode=cascade_mode, accessor_description="include")
        adaptor = ChildValidatorAdaptor(validator, validator_provider=validator_provider)
        self.add_async_validator(adaptor, adaptor)

    def _prepare(self, context: ValidationContext) -> str:
        property_path = context.build_property_path(None)
        context.initialize_for_property_validator(property_path, self.get_display_name, None)
        return property_path
