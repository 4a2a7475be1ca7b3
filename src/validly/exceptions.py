"""Exception types raised by validly."""

from __future__ import annotations

from typing import Iterable


class ValidlyError(Exception):
    """Base class for all validly errors."""


class UnknownRuleError(ValidlyError, ValueError):
    """Raised in strict mode when a rule name is not registered."""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = sorted(available)
        message = f"Unknown validation rule: {name}"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class RuleDefinitionError(ValidlyError, ValueError):
    """Raised when a rule definition cannot be parsed or bound."""


class RegexValidationError(RuleDefinitionError):
    """Raised when a regex pattern is invalid or unsafe."""

    def __init__(self, pattern: str, error: str):
        self.pattern = pattern
        self.error = error
        super().__init__(f"Invalid regex pattern '{pattern}': {error}")


class AsyncRuleError(ValidlyError, RuntimeError):
    """Raised when an async rule is evaluated on the synchronous path."""

    def __init__(self, rule_name: str, field: str):
        self.rule_name = rule_name
        self.field = field
        super().__init__(
            f"Rule '{rule_name}' on field '{field}' returned an awaitable; "
            "use avalidate() or avalidate_field() for async rules"
        )


class ConfigError(ValidlyError):
    """Raised for invalid configuration or unreadable schema files."""
