"""Read-only view of a validator's configuration, for documentation and tooling."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .context import ValidationContext
from .rules import split_display_name

if TYPE_CHECKING:
    from .components import RuleComponent
    from .validator import AbstractValidator
    from .validators import BasePropertyValidator


class ValidatorDescriptor:
    """Describes which validators are attached to which members."""

    def __init__(self, validator: AbstractValidator):
        self._validator = validator

    @property
    def rules(self) -> list:
        return list(self._validator.rules)

    def get_name(self, property_name: str) -> str | None:
        """Display name of the first rule for ``property_name``."""
        for rule in self.get_rules_for_member(property_name):
            return rule.get_display_name(None)
        return split_display_name(property_name)

    def get_members_with_validators(self) -> dict[str, list[tuple[BasePropertyValidator, RuleComponent]]]:
        members: dict[str, list[tuple[BasePropertyValidator, RuleComponent]]] = {}
        for rule in self.rules:
            if rule.property_name is None:
                continue
            entries = members.setdefault(rule.property_name, [])
            entries.extend((component.validator, component) for component in rule.components)
        return members

    def get_validators_for_member(self, name: str) -> list[tuple[BasePropertyValidator, RuleComponent]]:
        return self.get_members_with_validators().get(name, [])

    def get_rules_for_member(self, name: str) -> list:
        return [rule for rule in self.rules if rule.property_name == name]

    def create_context(self, instance: Any) -> ValidationContext:
        return ValidationContext(instance)
