# Package exports
from fluentrules.config import settings, get_settings
from fluentrules.logging import (
    configure_logging,
    configure_from_settings,
    get_logger,
    bind_context,
    clear_context,
    unbind_context,
    rule_logger,
    validator_logger,
    builder_logger,
)
from fluentrules.errors import (
    ConfigurationError,
    FluentRulesException,
    ValidationException,
)
from fluentrules.validation import (
    AbstractValidator,
    InlineValidator,
    CancellationToken,
    CascadeMode,
    Severity,
    ValidationFailure,
    ValidationResult,
)

__version__ = "0.1.0"
