"""Rule Composition Engine

Validators declare ordered rules per property. Each rule holds components
(one validator plus conditions and message overrides); decorator rules gate
or project the validators added through them.

Key Features:
- Fluent rule builder with conditions, cascade modes and dependent rules
- Conditional (``where``) and type-projecting (``select``) decorator rules
- Nested validators, ``include`` and rule sets
- Synchronous and asynchronous validation with cooperative cancellation
- Failures as data, exceptions only for misconfiguration

Usage:
    from fluentrules.validation import AbstractValidator, CascadeMode

    class UserValidator(AbstractValidator):
        def __init__(self):
            super().__init__()
            self.rule_for("email").cascade(CascadeMode.STOP).not_empty().matches(r"@")
            self.rule_for("age").greater_than_or_equal(18).with_message("Adults only")

    result = UserValidator().validate(user)
    if not result.is_valid:
        print(result.to_dictionary())
"""

# Outcomes
from .results import (
    ApplyConditionTo,
    CascadeMode,
    Severity,
    ValidationFailure,
    ValidationResult,
)

# Context
from .context import (
    CancellationToken,
    MessageFormatter,
    ValidationContext,
)

# Leaf validators
from .validators import (
    BasePropertyValidator,
    PropertyValidator,
    AsyncPropertyValidator,
    NotNoneValidator,
    NoneValidator,
    NotEmptyValidator,
    EmptyValidator,
    LengthValidator,
    RegularExpressionValidator,
    EqualValidator,
    NotEqualValidator,
    GreaterThanValidator,
    GreaterThanOrEqualValidator,
    LessThanValidator,
    LessThanOrEqualValidator,
    InclusiveBetweenValidator,
    PredicateValidator,
    AsyncPredicateValidator,
)

# Adaptors
from .adaptors import (
    ConditionalValidatorAdaptor,
    AsyncConditionalValidatorAdaptor,
    SelectValidatorAdaptor,
    AsyncSelectValidatorAdaptor,
    ChildValidatorAdaptor,
)

# Rules and components
from .components import (
    RuleComponent,
    SelectRuleComponent,
    MessageBuilderContext,
)
from .rules import (
    PropertyRule,
    IncludeRule,
    ValidationRuleDecorator,
    ConditionalValidationRule,
    SelectValidationRule,
)
from .collection import TrackingCollection

# Validators and configuration
from .builder import RuleBuilder
from .validator import AbstractValidator, InlineValidator, ConditionOtherwise
from .descriptor import ValidatorDescriptor

__all__ = [
    # Outcomes
    "ApplyConditionTo",
    "CascadeMode",
    "Severity",
    "ValidationFailure",
    "ValidationResult",
    # Context
    "CancellationToken",
    "MessageFormatter",
    "ValidationContext",
    # Leaf validators
    "BasePropertyValidator",
    "PropertyValidator",
    "AsyncPropertyValidator",
    "NotNoneValidator",
    "NoneValidator",
    "NotEmptyValidator",
    "EmptyValidator",
    "LengthValidator",
    "RegularExpressionValidator",
    "EqualValidator",
    "NotEqualValidator",
    "GreaterThanValidator",
    "GreaterThanOrEqualValidator",
    "LessThanValidator",
    "LessThanOrEqualValidator",
    "InclusiveBetweenValidator",
    "PredicateValidator",
    "AsyncPredicateValidator",
    # Adaptors
    "ConditionalValidatorAdaptor",
    "AsyncConditionalValidatorAdaptor",
    "SelectValidatorAdaptor",
    "AsyncSelectValidatorAdaptor",
    "ChildValidatorAdaptor",
    # Rules
    "RuleComponent",
    "SelectRuleComponent",
    "MessageBuilderContext",
    "PropertyRule",
    "IncludeRule",
    "ValidationRuleDecorator",
    "ConditionalValidationRule",
    "SelectValidationRule",
    "TrackingCollection",
    # Validators
    "RuleBuilder",
    "AbstractValidator",
    "InlineValidator",
    "ConditionOtherwise",
    "ValidatorDescriptor",
]
