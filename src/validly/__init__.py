"""validly - Form validation with scoped rules and localized messages."""

from validly.api import (
    FieldHandle,
    FormValidator,
    SimpleValidator,
    create_form_validator,
    create_simple_validator,
    create_validator,
)
from validly.batch import FrameValidationResult, validate_frame
from validly.config import ValidationSchema, ValidatorConfig, load_schema
from validly.core import Validator, ValidatorState
from validly.engine import FieldResult, ValidationEngine
from validly.errors import ErrorBag, FieldError
from validly.exceptions import (
    AsyncRuleError,
    ConfigError,
    RegexValidationError,
    RuleDefinitionError,
    UnknownRuleError,
    ValidlyError,
)
from validly.forms import FormManager, RuleManager
from validly.helpers import PATTERNS, DataValidationResult, checks, create_rules, validate_data
from validly.i18n import I18nManager, MessageCatalog
from validly.registry import RuleRegistry
from validly.report import ValidationReport
from validly.rules import Rule, ValueRule
from validly.universal import (
    get_global_validator,
    reset_global_validator,
    set_global_validator,
    validator,
)

# Version: single source of truth from pyproject.toml
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("validly")
except PackageNotFoundError:
    __version__ = "0.0.0.dev"

__all__ = [
    # Core
    "Validator",
    "ValidatorState",
    "ValidatorConfig",
    "ValidationEngine",
    "FieldResult",
    "ErrorBag",
    "FieldError",
    "FormManager",
    "RuleManager",
    "RuleRegistry",
    "Rule",
    "ValueRule",
    # i18n
    "I18nManager",
    "MessageCatalog",
    # Factories
    "create_validator",
    "create_form_validator",
    "create_simple_validator",
    "FormValidator",
    "FieldHandle",
    "SimpleValidator",
    # Global validator
    "validator",
    "get_global_validator",
    "set_global_validator",
    "reset_global_validator",
    # Helpers
    "checks",
    "create_rules",
    "validate_data",
    "DataValidationResult",
    "PATTERNS",
    # Tabular data
    "validate_frame",
    "FrameValidationResult",
    "ValidationReport",
    "ValidationSchema",
    "load_schema",
    # Exceptions
    "ValidlyError",
    "UnknownRuleError",
    "RuleDefinitionError",
    "RegexValidationError",
    "AsyncRuleError",
    "ConfigError",
]
