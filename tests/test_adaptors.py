"""Tests for conditional, select and child validator adaptors."""
from __future__ import annotations

import pytest
from conftest import Address, Person, CallRecorder

from fluentrules.validation import (
    AbstractValidator,
    AsyncConditionalValidatorAdaptor,
    AsyncPredicateValidator,
    AsyncSelectValidatorAdaptor,
    CancellationToken,
    ChildValidatorAdaptor,
    ConditionalValidatorAdaptor,
    LengthValidator,
    NotEmptyValidator,
    PredicateValidator,
    SelectValidatorAdaptor,
    ValidationContext,
)


class AddressValidator(AbstractValidator):
    def __init__(self):
        super().__init__()
        self.rule_for("line1").not_empty()


class TestConditionalValidatorAdaptor:
    """Tests for the sync and async condition gates."""

    def test_closed_gate_passes_without_invoking_inner(self, context) -> None:
        recorder = CallRecorder(result=False)
        adaptor = ConditionalValidatorAdaptor(lambda i, v: False, PredicateValidator(lambda i, v, c: recorder(v)))
        assert adaptor.is_valid(context, "x") is True
        assert recorder.calls == []

    def test_open_gate_delegates(self, context) -> None:
        adaptor = ConditionalValidatorAdaptor(lambda i, v: True, NotEmptyValidator())
        assert adaptor.is_valid(context, "") is False

    def test_reports_inner_name_and_template(self) -> None:
        adaptor = ConditionalValidatorAdaptor(lambda i, v: True, NotEmptyValidator())
        assert adaptor.name == "NotEmptyValidator"
        assert adaptor.get_default_message_template(None) == "'{PropertyName}' must not be empty."

    def test_async_closed_gate_completes_without_suspending(self, context) -> None:
        recorder = CallRecorder()

        async def inner(instance, value, ctx, ct):
            recorder(value)
            return False

        adaptor = AsyncConditionalValidatorAdaptor(lambda i, v: False, AsyncPredicateValidator(inner))
        coro = adaptor.is_valid_async(context, "x", CancellationToken.none())
        with pytest.raises(StopIteration) as finished:
            coro.send(None)
        assert finished.value.value is True
        assert recorder.calls == []

    @pytest.mark.asyncio
    async def test_async_open_gate_delegates(self, context) -> None:
        async def inner(instance, value, ctx, ct):
            return value == "ok"

        adaptor = AsyncConditionalValidatorAdaptor(lambda i, v: True, AsyncPredicateValidator(inner))
        assert await adaptor.is_valid_async(context, "ok", CancellationToken.none()) is True
        assert await adaptor.is_valid_async(context, "no", CancellationToken.none()) is False


class TestSelectValidatorAdaptor:
    """Tests for value projection."""

    def test_inner_sees_projected_value(self, context) -> None:
        adaptor = SelectValidatorAdaptor(lambda i, v: str(v), LengthValidator(0, 2))
        assert adaptor.is_valid(context, 12) is True
        assert adaptor.is_valid(context, 123) is False
        assert adaptor.name == "LengthValidator"

    def test_selector_receives_instance(self, context, person) -> None:
        seen = []
        adaptor = SelectValidatorAdaptor(lambda i, v: seen.append(i) or v, NotEmptyValidator())
        adaptor.is_valid(context, "x")
        assert seen == [person]

    @pytest.mark.asyncio
    async def test_async_inner_sees_projected_value(self, context) -> None:
        async def inner(instance, value, ctx, ct):
            return value == "5"

        adaptor = AsyncSelectValidatorAdaptor(lambda i, v: str(v), AsyncPredicateValidator(inner))
        assert await adaptor.is_valid_async(context, 5, CancellationToken.none()) is True


class TestChildValidatorAdaptor:
    """Tests for nested validators."""

    def _context(self, person: Person) -> ValidationContext:
        ctx = ValidationContext(person)
        ctx.initialize_for_property_validator("address", lambda _: "Address", "address")
        return ctx

    def test_child_failures_use_parent_path(self) -> None:
        person = Person(address=Address(line1=""))
        ctx = self._context(person)
        adaptor = ChildValidatorAdaptor(AddressValidator())
        assert adaptor.is_valid(ctx, person.address) is True
        assert [f.property_name for f in ctx.failures] == ["address.line1"]

    def test_none_value_is_skipped(self) -> None:
        ctx = self._context(Person())
        assert ChildValidatorAdaptor(AddressValidator()).is_valid(ctx, None) is True
        assert ctx.failures == []

    def test_provider_returning_none_is_skipped(self) -> None:
        seen = []
        person = Person(address=Address(line1=""))
        ctx = self._context(person)
        adaptor = ChildValidatorAdaptor(validator_provider=lambda instance, value: seen.append((instance, value)))
        assert adaptor.is_valid(ctx, person.address) is True
        assert ctx.failures == []
        assert seen == [(person, person.address)]

    def test_provider_selects_validator_from_instance(self) -> None:
        person = Person(is_company=True, address=Address(line1=""))
        ctx = self._context(person)
        adaptor = ChildValidatorAdaptor(
            validator_provider=lambda instance, value: AddressValidator() if instance.is_company else None,
        )
        adaptor.is_valid(ctx, person.address)
        assert [f.property_name for f in ctx.failures] == ["address.line1"]

    @pytest.mark.asyncio
    async def test_async_path(self) -> None:
        person = Person(address=Address(line1=""))
        ctx = self._context(person)
        adaptor = ChildValidatorAdaptor(AddressValidator())
        assert await adaptor.is_valid_async(ctx, person.address, CancellationToken.none()) is True
        assert len(ctx.failures) == 1
