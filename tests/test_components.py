"""Tests for rule components, the select component view and MessageBuilderContext."""
from __future__ import annotations

import pytest

from fluentrules.errors import AsyncValidatorInvokedSynchronouslyError, MissingReverseProjectionError
from fluentrules.validation import (
    AsyncPredicateValidator,
    CancellationToken,
    MessageBuilderContext,
    NotEmptyValidator,
    PredicateValidator,
    RuleComponent,
    SelectRuleComponent,
    Severity,
)


class TestRuleComponent:
    """Tests for RuleComponent gating and messages."""

    def test_conditions_combine_with_and(self, context) -> None:
        component = RuleComponent(NotEmptyValidator())
        component.apply_condition(lambda ctx: True)
        component.apply_condition(lambda ctx: False)
        assert component.has_condition is True
        assert component.invoke_condition(context) is False

    def test_no_condition_means_run(self, context) -> None:
        assert RuleComponent(NotEmptyValidator()).invoke_condition(context) is True

    @pytest.mark.asyncio
    async def test_async_conditions_combine_with_and(self, context) -> None:
        component = RuleComponent(NotEmptyValidator())

        async def yes(ctx, ct):
            return True

        async def no(ctx, ct):
            return False

        component.apply_async_condition(yes)
        assert await component.invoke_async_condition(context, CancellationToken.none()) is True
        component.apply_async_condition(no)
        assert await component.invoke_async_condition(context, CancellationToken.none()) is False

    def test_sync_validate_of_async_only_component_raises(self, context) -> None:
        async def predicate(instance, value, ctx, ct):
            return True

        component = RuleComponent(None, AsyncPredicateValidator(predicate))
        assert component.supports_synchronous_validation is False
        with pytest.raises(AsyncValidatorInvokedSynchronouslyError):
            component.validate(context, "x")

    @pytest.mark.asyncio
    async def test_async_validate_falls_back_to_sync(self, context) -> None:
        component = RuleComponent(NotEmptyValidator())
        assert await component.validate_async(context, "", CancellationToken.none()) is False

    def test_default_message_is_formatted(self, context) -> None:
        context.message_formatter.append_property_name("Name")
        component = RuleComponent(NotEmptyValidator())
        assert component.get_error_message(context, "") == "'Name' must not be empty."

    def test_literal_message_override(self, context) -> None:
        context.message_formatter.append_property_name("Name")
        component = RuleComponent(NotEmptyValidator())
        component.set_error_message("{PropertyName} is required")
        assert component.get_error_message(context, "") == "Name is required"
        assert component.get_unformatted_error_message() == "{PropertyName} is required"

    def test_message_factory(self, context) -> None:
        component = RuleComponent(NotEmptyValidator())
        component.set_error_message(lambda ctx, value: f"got {value!r}")
        assert component.get_error_message(context, "") == "got ''"

    def test_message_without_context_is_raw(self) -> None:
        component = RuleComponent(NotEmptyValidator())
        assert component.get_error_message(None, "") == "'{PropertyName}' must not be empty."


class TestSelectRuleComponent:
    """Tests for the projected view of a component."""

    def _component(self) -> RuleComponent:
        return RuleComponent(PredicateValidator(lambda i, v, c: False))

    def test_error_code_forwards(self) -> None:
        inner = self._component()
        view = SelectRuleComponent(inner, lambda i, v: v, None)
        view.error_code = "E1"
        assert inner.error_code == "E1"
        assert view.error_code == "E1"

    def test_state_provider_is_projected(self, context) -> None:
        inner = self._component()
        view = SelectRuleComponent(inner, lambda i, v: v * 2, None)
        view.custom_state_provider = lambda ctx, new: new + 1
        assert inner.custom_state_provider(context, 5) == 11

    def test_severity_provider_is_projected(self, context) -> None:
        inner = self._component()
        view = SelectRuleComponent(inner, lambda i, v: str(v), None)
        view.severity_provider = lambda ctx, new: Severity.WARNING if new == "1" else Severity.ERROR
        assert inner.severity_provider(context, 1) is Severity.WARNING

    def test_message_factory_is_projected(self, context) -> None:
        inner = self._component()
        view = SelectRuleComponent(inner, lambda i, v: str(v), None)
        view.set_error_message(lambda ctx, new: f"new={new!r}")
        assert inner.get_error_message(context, 7) == "new='7'"

    def test_get_error_message_reverse_projects(self, context) -> None:
        inner = self._component()
        inner.set_error_message(lambda ctx, old: f"old={old!r}")
        view = SelectRuleComponent(inner, lambda i, v: str(v), lambda i, new: int(new))
        assert view.get_error_message(context, "7") == "old=7"

    def test_get_error_message_without_reverse_projection_raises(self, context) -> None:
        view = SelectRuleComponent(self._component(), lambda i, v: str(v), None)
        with pytest.raises(MissingReverseProjectionError):
            view.get_error_message(context, "7")

    def test_conditions_forward(self, context) -> None:
        inner = self._component()
        view = SelectRuleComponent(inner, lambda i, v: v, None)
        view.apply_condition(lambda ctx: False)
        assert inner.invoke_condition(context) is False


class TestMessageBuilderContext:
    """Tests for MessageBuilderContext."""

    def test_exposes_context_and_component(self, context, person) -> None:
        component = RuleComponent(NotEmptyValidator())
        context.message_formatter.append_property_name("Name")
        builder_context = MessageBuilderContext(context, "", component)
        assert builder_context.property_name == "name"
        assert builder_context.display_name == "Name"
        assert builder_context.instance_to_validate is person
        assert builder_context.property_value == ""
        assert builder_context.property_validator.name == "NotEmptyValidator"
        assert builder_context.parent_context is context
        assert builder_context.get_default_message() == "'Name' must not be empty."
