"""Rule Components

A ``RuleComponent`` gates and describes exactly one validator inside a rule:
its conditions, error-message override, error code, severity and custom
state. ``SelectRuleComponent`` is the view of a component through a Select
decorator; it speaks the projected (new) value type while the underlying
component keeps working in the rule's native (old) type.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Awaitable, Callable

from fluentrules.errors import async_invoked_synchronously, missing_reverse_projection

from .validators import AsyncPropertyValidator, BasePropertyValidator, PropertyValidator

if TYPE_CHECKING:
    from .context import CancellationToken, MessageFormatter, ValidationContext
    from .results import Severity

ContextCondition = Callable[["ValidationContext"], bool]
AsyncContextCondition = Callable[["ValidationContext", "CancellationToken"], Awaitable[bool]]
ValueFactory = Callable[["ValidationContext", Any], Any]
MessageFactory = Callable[["ValidationContext", Any], str]


class RuleComponent:
    """One validator plus its gating and override metadata.

    Built once at configuration time and reused by every validation pass.
    """

    def __init__(
        self,
        property_validator: PropertyValidator | None = None,
        async_property_validator: AsyncPropertyValidator | None = None,
    ):
        self._property_validator = property_validator
        self._async_property_validator = async_property_validator
        self._condition: ContextCondition | None = None
        self._async_condition: AsyncContextCondition | None = None
        self._error_message: str | None = None
        self._error_message_factory: MessageFactory | None = None
        self.error_code: str | None = None
        self.custom_state_provider: ValueFactory | None = None
        self.severity_provider: Callable[[ValidationContext, Any], Severity] | None = None

    def __repr__(self) -> str:
        return f"RuleComponent({self.validator.name})"

    @property
    def validator(self) -> BasePropertyValidator:
        return self._property_validator or self._async_property_validator

    @property
    def has_condition(self) -> bool:
        return self._condition is not None

    @property
    def has_async_condition(self) -> bool:
        return self._async_condition is not None

    @property
    def supports_synchronous_validation(self) -> bool:
        return self._property_validator is not None

    @property
    def supports_asynchronous_validation(self) -> bool:
        return self._async_property_validator is not None

    # Conditions ---------------------------------------------------------

    def apply_condition(self, condition: ContextCondition) -> None:
        """Add a condition. An existing condition is combined with AND."""
        if self._condition is None:
            self._condition = condition
        else:
            original = self._condition
            self._condition = lambda ctx: condition(ctx) and original(ctx)

    def apply_async_condition(self, condition: AsyncContextCondition) -> None:
        """Add an async condition. An existing one is combined with AND."""
        if self._async_condition is None:
            self._async_condition = condition
        else:
            original = self._async_condition

            async def combined(ctx: ValidationContext, cancellation: CancellationToken) -> bool:
                return await condition(ctx, cancellation) and await original(ctx, cancellation)

            self._async_condition = combined

    def invoke_condition(self, context: ValidationContext) -> bool:
        return self._condition is None or self._condition(context)

    async def invoke_async_condition(self, context: ValidationContext, cancellation: CancellationToken) -> bool:
        if self._async_condition is not None:
            return await self._async_condition(context, cancellation)
        return self.invoke_condition(context)

    # Execution ----------------------------------------------------------

    def validate(self, context: ValidationContext, value: Any) -> bool:
        if self._property_validator is None:
            raise async_invoked_synchronously(self.validator.name, context.property_path)
        return self._property_validator.is_valid(context, value)

    async def validate_async(self, context: ValidationContext, value: Any, cancellation: CancellationToken) -> bool:
        if self._async_property_validator is not None:
            return await self._async_property_validator.is_valid_async(context, value, cancellation)
        return self._property_validator.is_valid(context, value)

    # Messages -----------------------------------------------------------

    def set_error_message(self, message: str | MessageFactory) -> None:
        """Override the message with a literal template or a ``(context, value)`` factory."""
        if callable(message):
            self._error_message_factory, self._error_message = message, None
        else:
            self._error_message_factory, self._error_message = None, message

    def get_unformatted_error_message(self) -> str:
        """Raw template, placeholders not rewritten."""
        if self._error_message_factory is not None:
            return "<message factory>"
        return self._error_message or self.validator.get_default_message_template(self.error_code)

    def get_error_message(self, context: ValidationContext | None, value: Any) -> str:
        if self._error_message_factory is not None:
            raw_template = self._error_message_factory(context, value)
        else:
            raw_template = self._error_message
        if raw_template is None:
            raw_template = self.validator.get_default_message_template(self.error_code)
        if context is None:
            return raw_template
        return context.message_formatter.build_message(raw_template)


class SelectRuleComponent:
    """Component view through a Select decorator.

    Accepts new-typed callbacks and rewrites them to old-typed callbacks on
    the underlying component with ``select``. Message resolution for a
    new-typed value needs ``to_old`` to recover the native value.
    """

    def __init__(
        self,
        component: RuleComponent | SelectRuleComponent,
        select: Callable[[Any, Any], Any],
        to_old: Callable[[Any, Any], Any] | None,
    ):
        self._component = component
        self._select = select
        self._to_old = to_old

    def __repr__(self) -> str:
        return f"SelectRuleComponent({self._component!r})"

    @property
    def inner_component(self) -> RuleComponent | SelectRuleComponent:
        return self._component

    @property
    def validator(self) -> BasePropertyValidator:
        return self._component.validator

    @property
    def has_condition(self) -> bool:
        return self._component.has_condition

    @property
    def has_async_condition(self) -> bool:
        return self._component.has_async_condition

    @property
    def error_code(self) -> str | None:
        return self._component.error_code

    @error_code.setter
    def error_code(self, value: str | None) -> None:
        self._component.error_code = value

    @property
    def custom_state_provider(self) -> ValueFactory | None:
        return self._component.custom_state_provider

    @custom_state_provider.setter
    def custom_state_provider(self, provider: ValueFactory) -> None:
        select = self._select
        self._component.custom_state_provider = lambda ctx, old: provider(ctx, select(ctx.instance_to_validate, old))

    @property
    def severity_provider(self) -> ValueFactory | None:
        return self._component.severity_provider

    @severity_provider.setter
    def severity_provider(self, provider: ValueFactory) -> None:
        select = self._select
        self._component.severity_provider = lambda ctx, old: provider(ctx, select(ctx.instance_to_validate, old))

    def apply_condition(self, condition: ContextCondition) -> None:
        self._component.apply_condition(condition)

    def apply_async_condition(self, condition: AsyncContextCondition) -> None:
        self._component.apply_async_condition(condition)

    def invoke_condition(self, context: ValidationContext) -> bool:
        return self._component.invoke_condition(context)

    async def invoke_async_condition(self, context: ValidationContext, cancellation: CancellationToken) -> bool:
        return await self._component.invoke_async_condition(context, cancellation)

    def set_error_message(self, message: str | MessageFactory) -> None:
        if callable(message):
            select = self._select
            self._component.set_error_message(lambda ctx, old: message(ctx, select(ctx.instance_to_validate, old)))
        else:
            self._component.set_error_message(message)

    def get_unformatted_error_message(self) -> str:
        return self._component.get_unformatted_error_message()

    def get_error_message(self, context: ValidationContext, value: Any) -> str:
        if self._to_old is None:
            raise missing_reverse_projection(context.property_path if context is not None else None)
        old_value = self._to_old(context.instance_to_validate, value)
        return self._component.get_error_message(context, old_value)


class MessageBuilderContext:
    """Per-failure view handed to a rule's message builder.

    ``property_value`` is in the component's value type, which for a Select
    decorator is the projected type.
    """

    __slots__ = ("_inner_context", "_value", "component")

    def __init__(self, inner_context: ValidationContext, value: Any, component: RuleComponent | SelectRuleComponent):
        self._inner_context = inner_context
        self._value = value
        self.component = component

    @property
    def property_validator(self) -> BasePropertyValidator:
        return self.component.validator

    @property
    def parent_context(self) -> ValidationContext:
        return self._inner_context

    @property
    def property_name(self) -> str | None:
        return self._inner_context.property_path

    @property
    def display_name(self) -> str | None:
        return self._inner_context.display_name

    @property
    def message_formatter(self) -> MessageFormatter:
        return self._inner_context.message_formatter

    @property
    def instance_to_validate(self) -> Any:
        return self._inner_context.instance_to_validate

    @property
    def property_value(self) -> Any:
        return self._value

    def get_default_message(self) -> str:
        return self.component.get_error_message(self._inner_context, self._value)
