"""Validation Context

Per-call state for one validation pass: the instance under validation, the
property path being validated, the failure sink and the message formatter.
A context is created fresh for every ``validate``/``validate_async`` call and
is never shared between calls; nested validators get a child context that
writes into the parent's failure list.
"""
from __future__ import annotations

import asyncio
import re
from typing import Any, Callable, Generic, TypeVar

from .results import ValidationFailure

T = TypeVar("T")

_PLACEHOLDER = re.compile(r"\{([^{}:]+)(?::([^{}]+))?\}")


class MessageFormatter:
    """Replaces ``{Placeholder}`` and ``{Placeholder:format}`` tokens in templates.

    Unknown placeholders are left untouched so templates can be composed in
    several steps.
    """

    __slots__ = ("placeholder_values",)

    PROPERTY_NAME = "PropertyName"
    PROPERTY_VALUE = "PropertyValue"
    PROPERTY_PATH = "PropertyPath"

    def __init__(self) -> None:
        self.placeholder_values: dict[str, Any] = {}

    def append_argument(self, name: str, value: Any) -> MessageFormatter:
        self.placeholder_values[name] = value
        return self

    def append_property_name(self, name: str | None) -> MessageFormatter:
        return self.append_argument(self.PROPERTY_NAME, name)

    def append_property_value(self, value: Any) -> MessageFormatter:
        return self.append_argument(self.PROPERTY_VALUE, value)

    def build_message(self, message_template: str) -> str:
        def _replace(match: re.Match) -> str:
            key, fmt = match.group(1), match.group(2)
            if key not in self.placeholder_values:
                return match.group(0)
            value = self.placeholder_values[key]
            if fmt:
                try: return format(value, fmt)
                except (TypeError, ValueError): return str(value)
            return "" if value is None else str(value)

        return _PLACEHOLDER.sub(_replace, message_template)

    def reset(self) -> None:
        self.placeholder_values.clear()


class CancellationToken:
    """Cooperative cancellation signal for asynchronous validation.

    The engine checks the token before each rule and component; async
    validators and conditions receive it and may check it before awaiting.
    A cancelled pass raises ``asyncio.CancelledError``.
    """

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def raise_if_cancellation_requested(self) -> None:
        if self._cancelled:
            raise asyncio.CancelledError("Validation was cancelled")

    @classmethod
    def none(cls) -> CancellationToken:
        """A token that is never cancelled."""
        return cls()


class ValidationContext(Generic[T]):
    """State for one validation pass over ``instance_to_validate``."""

    def __init__(
        self,
        instance_to_validate: T,
        *,
        property_chain: tuple[str, ...] = (),
        failures: list[ValidationFailure] | None = None,
        rule_sets: frozenset[str] | None = None,
        is_async: bool = False,
        root_context_data: dict[str, Any] | None = None,
        parent_context: ValidationContext | None = None,
    ):
        self.instance_to_validate = instance_to_validate
        self.property_chain = property_chain
        self.failures: list[ValidationFailure] = failures if failures is not None else []
        self.rule_sets = rule_sets
        self.is_async = is_async
        self.root_context_data: dict[str, Any] = root_context_data if root_context_data is not None else {}
        self.parent_context = parent_context
        self.message_formatter = MessageFormatter()
        self.property_path: str | None = None
        self.raw_property_name: str | None = None
        self._display_name_func: Callable[[ValidationContext], str | None] | None = None

    @property
    def is_child_context(self) -> bool:
        return self.parent_context is not None

    @property
    def display_name(self) -> str | None:
        return self._display_name_func(self) if self._display_name_func else None

    def build_property_path(self, property_name: str | None) -> str:
        parts = [*self.property_chain, property_name] if property_name else list(self.property_chain)
        return ".".join(parts)

    def initialize_for_property_validator(
        self,
        property_path: str,
        display_name_func: Callable[[ValidationContext], str | None],
        raw_property_name: str | None,
    ) -> None:
        """Point the context at the rule about to run."""
        self.property_path = property_path
        self._display_name_func = display_name_func
        self.raw_property_name = raw_property_name

    def create_child_context(self, instance: Any, rule_sets: frozenset[str] | None = None) -> ValidationContext:
        """Context for a nested validator.

        Shares the failure sink and root data; the current property path
        becomes the prefix of every path the child produces.
        """
        chain = (self.property_path,) if self.property_path else self.property_chain
        return ValidationContext(
            instance,
            property_chain=chain,
            failures=self.failures,
            rule_sets=rule_sets if rule_sets is not None else self.rule_sets,
            is_async=self.is_async,
            root_context_data=self.root_context_data,
            parent_context=self,
        )

    def add_failure(self, failure: ValidationFailure) -> None:
        self.failures.append(failure)
