"""Validators

``AbstractValidator`` is the entry point: subclasses declare rules in
``__init__`` with ``rule_for`` and callers run them with ``validate`` or
``validate_async``.

Usage:
    class CustomerValidator(AbstractValidator):
        def __init__(self):
            super().__init__()
            self.rule_for("surname").not_empty()
            self.rule_for("discount").greater_than(0).when(lambda c: c.has_discount)
            self.when(lambda c: c.address is not None, self._address_rules)

        def _address_rules(self):
            self.rule_for("address").set_validator(AddressValidator())

    result = CustomerValidator().validate(customer)
    if not result.is_valid:
        ...

Rule-set selection:
- no sets requested: untagged rules and rules tagged "default" run;
- sets requested: rules tagged with any of them run ("default" selects
  untagged rules too);
- "*" runs every rule.
"""
from __future__ import annotations

from operator import attrgetter
from typing import Any, Awaitable, Callable, Iterable

from fluentrules.config import settings
from fluentrules.errors import validation_failed
from fluentrules.logging import validator_logger

from .builder import RuleBuilder, configuration_failure
from .collection import TrackingCollection
from .context import CancellationToken, ValidationContext
from .results import CascadeMode, ValidationResult
from .rules import IncludeRule, PropertyRule

log = validator_logger()

DEFAULT_RULE_SET = "default"
ALL_RULE_SETS = "*"


def _normalize_rule_sets(rule_sets: str | Iterable[str] | None) -> frozenset[str] | None:
    if rule_sets is None:
        return None
    if isinstance(rule_sets, str):
        rule_sets = rule_sets.split(",")
    names = frozenset(name.strip() for name in rule_sets if name and name.strip())
    return names or None


def is_rule_selected(rule: Any, requested: frozenset[str] | None) -> bool:
    if isinstance(rule, IncludeRule):
        return True
    tags = rule.rule_sets or ()
    untagged = not tags or DEFAULT_RULE_SET in tags
    if not requested:
        return untagged
    if ALL_RULE_SETS in requested:
        return True
    if DEFAULT_RULE_SET in requested and untagged:
        return True
    return any(tag in requested for tag in tags)


class ConditionOtherwise:
    """Returned by validator-level ``when``/``unless`` and their async forms.

    ``otherwise(action)`` registers the rules created by ``action`` behind the
    inverse condition.
    """

    def __init__(self, apply_inverse: Callable[[Callable[[], Any]], None]):
        self._apply_inverse = apply_inverse

    def otherwise(self, action: Callable[[], Any]) -> None:
        self._apply_inverse(action)


class AbstractValidator:
    """Base class for validators of one instance type."""

    def __init__(self) -> None:
        self.rules: TrackingCollection[PropertyRule] = TrackingCollection()
        self.class_level_cascade_mode = CascadeMode(settings.DEFAULT_CLASS_LEVEL_CASCADE_MODE)
        self.rule_level_cascade_mode = CascadeMode(settings.DEFAULT_RULE_LEVEL_CASCADE_MODE)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rules={len(self.rules)})"

    # Configuration ------------------------------------------------------

    def rule_for(self, path_or_getter: str | Callable[[Any], Any], name: str | None = None) -> RuleBuilder:
        """Start a rule for an attribute path ("address.line1") or a getter.

        A getter without ``name`` fails on first validation unless a name is
        set later with ``with_name`` or ``override_property_name``.
        """
        if isinstance(path_or_getter, str):
            getter, property_name, description = attrgetter(path_or_getter), name or path_or_getter, path_or_getter
        elif callable(path_or_getter):
            getter, property_name, description = path_or_getter, name, repr(path_or_getter)
        else:
            raise configuration_failure(
                f"rule_for expects an attribute path or a callable, got {type(path_or_getter).__name__}.",
            )

        rule = PropertyRule(
            getter,
            property_name,
            cascade_mode=self.rule_level_cascade_mode,
            accessor_description=description,
        )
        self.rules.add(rule)
        return RuleBuilder(rule, self)

    def _apply_shared(self, condition: Callable[[ValidationContext], bool], action: Callable[[], Any]) -> None:
        captured: list = []
        with self.rules.capture(captured.append):
            action()
        for rule in captured:
            rule.apply_shared_condition(condition)
            self.rules.add(rule)

    def _apply_shared_async(
        self,
        condition: Callable[[ValidationContext, CancellationToken], Awaitable[bool]],
        action: Callable[[], Any],
    ) -> None:
        captured: list = []
        with self.rules.capture(captured.append):
            action()
        for rule in captured:
            rule.apply_shared_async_condition(condition)
            self.rules.add(rule)

    def when(self, predicate: Callable[[Any], bool], action: Callable[[], Any]) -> ConditionOtherwise:
        """Rules created by ``action`` run only when ``predicate(instance)`` holds."""
        self._apply_shared(lambda ctx: predicate(ctx.instance_to_validate), action)
        return ConditionOtherwise(lambda inverse_action: self._apply_shared(
            lambda ctx: not predicate(ctx.instance_to_validate), inverse_action,
        ))

    def unless(self, predicate: Callable[[Any], bool], action: Callable[[], Any]) -> ConditionOtherwise:
        return self.when(lambda instance: not predicate(instance), action)

    def when_async(
        self,
        predicate: Callable[[Any, CancellationToken], Awaitable[bool]],
        action: Callable[[], Any],
    ) -> ConditionOtherwise:
        """Async counterpart of ``when``; only ``validate_async`` can run the captured rules."""
        async def condition(ctx: ValidationContext, ct: CancellationToken) -> bool:
            return await predicate(ctx.instance_to_validate, ct)

        async def inverse(ctx: ValidationContext, ct: CancellationToken) -> bool:
            return not await predicate(ctx.instance_to_validate, ct)

        self._apply_shared_async(condition, action)
        return ConditionOtherwise(lambda inverse_action: self._apply_shared_async(inverse, inverse_action))

    def unless_async(
        self,
        predicate: Callable[[Any, CancellationToken], Awaitable[bool]],
        action: Callable[[], Any],
    ) -> ConditionOtherwise:
        async def negated(instance: Any, ct: CancellationToken) -> bool:
            return not await predicate(instance, ct)

        return self.when_async(negated, action)

    def rule_set(self, rule_set_names: str | Iterable[str], action: Callable[[], Any]) -> None:
        """Tag every rule created by ``action`` with the given rule sets."""
        names = _normalize_rule_sets(rule_set_names)
        if not names:
            raise configuration_failure("rule_set requires at least one rule set name.")
        tags = tuple(sorted(names))
        captured: list = []

        def tag(rule: Any) -> None:
            rule.rule_sets = tags
            captured.append(rule)

        with self.rules.capture(tag):
            action()
        for rule in captured:
            self.rules.add(rule)

    def include(self, validator: AbstractValidator | Callable[[Any], AbstractValidator]) -> None:
        """Run another validator's rules against the same instance.

        ``validator`` may be a factory called with the instance on each pass.
        """
        if validator is None:
            raise configuration_failure("Cannot include None.")
        if isinstance(validator, AbstractValidator):
            rule = IncludeRule(validator, cascade_mode=self.rule_level_cascade_mode)
        else:
            rule = IncludeRule(
                None,
                validator_provider=lambda instance, value: validator(instance),
                cascade_mode=self.rule_level_cascade_mode,
            )
        self.rules.add(rule)

    # Execution ----------------------------------------------------------

    def _create_context(self, instance: Any, rule_sets: Any, is_async: bool) -> ValidationContext:
        if isinstance(instance, ValidationContext):
            instance.is_async = instance.is_async or is_async
            return instance
        return ValidationContext(instance, rule_sets=_normalize_rule_sets(rule_sets), is_async=is_async)

    def _build_result(self, context: ValidationContext) -> ValidationResult:
        return ValidationResult(
            errors=context.failures,
            rule_sets_executed=sorted(context.rule_sets) if context.rule_sets else [DEFAULT_RULE_SET],
        )

    def validate(self, instance: Any, rule_sets: str | Iterable[str] | None = None) -> ValidationResult:
        """Run the selected rules synchronously.

        Raises:
            AsyncValidatorInvokedSynchronouslyError: A selected rule needs the async path.
        """
        context = self._create_context(instance, rule_sets, is_async=False)
        start = len(context.failures)
        log.debug("validation_started", validator=type(self).__name__, rule_sets=context.rule_sets, child=context.is_child_context)

        for rule in self.rules:
            if not is_rule_selected(rule, context.rule_sets):
                continue
            rule.validate(context)
            if self.class_level_cascade_mode == CascadeMode.STOP and len(context.failures) > start:
                break

        result = self._build_result(context)
        log.debug("validation_completed", validator=type(self).__name__, valid=len(context.failures) == start, failures=len(context.failures) - start)
        return result

    async def validate_async(
        self,
        instance: Any,
        rule_sets: str | Iterable[str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ValidationResult:
        """Run the selected rules, awaiting async validators and conditions.

        Raises:
            asyncio.CancelledError: ``cancellation`` was triggered during the pass.
        """
        cancellation = cancellation or CancellationToken.none()
        context = self._create_context(instance, rule_sets, is_async=True)
        start = len(context.failures)
        log.debug("validation_started", validator=type(self).__name__, rule_sets=context.rule_sets, child=context.is_child_context)

        for rule in self.rules:
            cancellation.raise_if_cancellation_requested()
            if not is_rule_selected(rule, context.rule_sets):
                continue
            await rule.validate_async(context, cancellation)
            if self.class_level_cascade_mode == CascadeMode.STOP and len(context.failures) > start:
                break

        result = self._build_result(context)
        log.debug("validation_completed", validator=type(self).__name__, valid=len(context.failures) == start, failures=len(context.failures) - start)
        return result

    def validate_and_raise(self, instance: Any, rule_sets: str | Iterable[str] | None = None) -> ValidationResult:
        """Like ``validate`` but raises ``ValidationException`` on failure."""
        result = self.validate(instance, rule_sets)
        if not result.is_valid:
            raise validation_failed(result.errors)
        return result

    async def validate_and_raise_async(
        self,
        instance: Any,
        rule_sets: str | Iterable[str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> ValidationResult:
        result = await self.validate_async(instance, rule_sets, cancellation)
        if not result.is_valid:
            raise validation_failed(result.errors)
        return result

    def create_descriptor(self):
        from .descriptor import ValidatorDescriptor

        return ValidatorDescriptor(self)


class InlineValidator(AbstractValidator):
    """Validator configured from callables instead of a subclass.

    Usage:
        v = InlineValidator(
            lambda v: v.rule_for("name").not_empty(),
            lambda v: v.rule_for("age").greater_than(0),
        )
    """

    def __init__(self, *configurators: Callable[[InlineValidator], Any]):
        super().__init__()
        for configurator in configurators:
            self.add(configurator)

    def add(self, configurator: Callable[[InlineValidator], Any]) -> InlineValidator:
        configurator(self)
        return self
