"""Base classes for validation rules.

Features:
- Named parameter binding from positional or keyword params
- Template rule for value-only checks that pass on empty input
- ReDoS protection for regex patterns
- Wrapping of plain callables into rules
"""

from __future__ import annotations

import inspect
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, ClassVar, Mapping, Sequence

from validly.exceptions import RegexValidationError, RuleDefinitionError
from validly.types import is_empty


# ============================================================================
# Logging
# ============================================================================

def _get_logger(name: str) -> logging.Logger:
    """Get a logger for the given rule name."""
    return logging.getLogger(f"validly.rules.{name}")


# ============================================================================
# ReDoS Protection
# ============================================================================

class RegexSafetyChecker:
    """Detects ReDoS vulnerabilities in regex patterns.

    Checks for common dangerous patterns that could cause exponential backtracking.
    """

    REDOS_PATTERNS = [
        r"\([^)]*[+*]\)[+*]",     # Nested quantifiers: (a+)+, (a*)*
        r"\([^)]*[+*]\)\{\d+,\}",  # Nested with unbounded repetition
        r"\(.+\|.+\)[+*]",        # Alternation in quantified group
    ]

    MAX_PATTERN_LENGTH = 1000

    @classmethod
    def check_pattern(cls, pattern: str) -> tuple[bool, str | None]:
        """Check if a pattern is potentially vulnerable to ReDoS."""
        if len(pattern) > cls.MAX_PATTERN_LENGTH:
            return False, f"Pattern too long ({len(pattern)} > {cls.MAX_PATTERN_LENGTH})"

        for redos_pattern in cls.REDOS_PATTERNS:
            if re.search(redos_pattern, pattern):
                return False, f"Potentially vulnerable to ReDoS: matches {redos_pattern}"

        return True, None


class RegexRuleMixin:
    """Mixin for rules that compile user-supplied regex patterns."""

    @staticmethod
    def compile_pattern(pattern: str | re.Pattern[str], flags: int = 0) -> re.Pattern[str]:
        """Validate and compile a regex pattern with ReDoS check.

        Pre-compiled patterns are trusted and returned unchanged.
        """
        if isinstance(pattern, re.Pattern):
            return pattern
        if pattern is None:
            raise RegexValidationError("None", "Pattern cannot be None")
        if not isinstance(pattern, str):
            raise RegexValidationError(repr(pattern), "Pattern must be a string")

        is_safe, warning = RegexSafetyChecker.check_pattern(pattern)
        if not is_safe:
            raise RegexValidationError(pattern, f"ReDoS risk: {warning}")

        try:
            return re.compile(pattern, flags)
        except re.error as e:
            raise RegexValidationError(pattern, str(e)) from e


# ============================================================================
# Base Rule
# ============================================================================

class Rule(ABC):
    """Abstract base class for all validation rules.

    Class Attributes:
        name: Rule name, used for registry lookup and message keys
        param_names: Names bound, in order, to positional params
        param_defaults: Defaults for optional params
        variadic: Collect all positional params into ``params["values"]``
        raw_param: Keep everything after the first ``:`` of a string
            definition as a single param (used by regex rules)
        message: Fallback message used when no catalog has one

    Example:
        class EvenRule(Rule):
            name = "even"

            def validate(self, value, field, all_values):
                return int(value) % 2 == 0
    """

    name: ClassVar[str] = "rule"
    param_names: ClassVar[tuple[str, ...]] = ()
    param_defaults: ClassVar[Mapping[str, Any]] = {}
    variadic: ClassVar[bool] = False
    raw_param: ClassVar[bool] = False
    message: ClassVar[str | None] = None

    def __init__(self, *args: Any, **kwargs: Any):
        self.params: dict[str, Any] = self._bind_params(args, kwargs)
        self.logger = _get_logger(self.name)

    def _bind_params(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
        if self.variadic:
            values = list(args)
            if "values" in kwargs:
                extra = kwargs.pop("values")
                values.extend(extra if isinstance(extra, (list, tuple, set)) else [extra])
            return {"values": values, **kwargs}

        if len(args) > len(self.param_names):
            raise RuleDefinitionError(
                f"Rule '{self.name}' takes at most {len(self.param_names)} "
                f"params, got {len(args)}"
            )

        params = dict(self.param_defaults)
        params.update(zip(self.param_names, args))
        params.update(kwargs)

        missing = [p for p in self.param_names if p not in params]
        if missing:
            raise RuleDefinitionError(
                f"Rule '{self.name}' is missing params: {', '.join(missing)}"
            )
        return params

    @abstractmethod
    def validate(
        self, value: Any, field: str, all_values: Mapping[str, Any]
    ) -> bool | Awaitable[bool]:
        """Validate a value. Return True when valid."""

    def should_apply(self, value: Any, field: str, all_values: Mapping[str, Any]) -> bool:
        """Check whether this rule applies (conditional validation hook)."""
        return True

    def bind(self, siblings: Sequence["Rule"]) -> None:
        """Called with all rules of the field once they are set."""

    def get_param(self, key: str, default: Any = None) -> Any:
        """Get a bound param with fallback."""
        return self.params.get(key, default)

    def __repr__(self) -> str:
        if not self.params:
            return f"{type(self).__name__}()"
        args = ", ".join(f"{k}={v!r}" for k, v in self.params.items())
        return f"{type(self).__name__}({args})"


class ValueRule(Rule):
    """Template for rules that only look at the value.

    Empty values pass so that presence stays the job of ``required``.
    """

    @abstractmethod
    def check(self, value: Any) -> bool:
        """Check a non-empty value. Implement in subclass."""

    def validate(self, value: Any, field: str, all_values: Mapping[str, Any]) -> bool:
        if is_empty(value):
            return True
        return self.check(value)


# ============================================================================
# Callable Rules
# ============================================================================

class CallableRule(Rule):
    """Rule backed by a plain function registered through ``extend``.

    The function receives as many of ``(value, field, all_values)`` as it
    accepts positionally, plus ``params=`` when it declares that parameter.
    Positional params beyond ``param_names`` are kept under ``params["args"]``.
    """

    func: ClassVar[Callable[..., Any]]
    arity: ClassVar[int] = 1
    wants_params: ClassVar[bool] = False

    def _bind_params(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
        params = dict(self.param_defaults)
        params.update(zip(self.param_names, args))
        leftover = args[len(self.param_names):]
        if leftover:
            params["args"] = list(leftover)
        params.update(kwargs)
        return params

    def validate(
        self, value: Any, field: str, all_values: Mapping[str, Any]
    ) -> bool | Awaitable[bool]:
        call_args = (value, field, all_values)[: self.arity]
        if self.wants_params:
            return type(self).func(*call_args, params=self.params)
        return type(self).func(*call_args)


def _inspect_callable(func: Callable[..., Any]) -> tuple[int, bool]:
    """Return (positional arity capped at 3, accepts ``params`` keyword)."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return 3, False

    arity = 0
    wants_params = False
    for param in signature.parameters.values():
        if param.name == "params" and param.kind in (
            param.KEYWORD_ONLY,
            param.POSITIONAL_OR_KEYWORD,
        ):
            wants_params = True
        elif param.kind is param.VAR_POSITIONAL:
            arity = 3
        elif param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            arity += 1
        elif param.kind is param.VAR_KEYWORD:
            wants_params = True
    return min(max(arity, 1), 3), wants_params


def make_callable_rule(
    name: str,
    func: Callable[..., Any],
    message: str | None = None,
    param_names: Sequence[str] = (),
) -> type[CallableRule]:
    """Build a rule class around a plain validation function."""
    arity, wants_params = _inspect_callable(func)
    class_name = "".join(part.capitalize() for part in re.split(r"[_\-\s]+", name)) + "Rule"
    return type(
        class_name,
        (CallableRule,),
        {
            "name": name,
            "func": staticmethod(func),
            "arity": arity,
            "wants_params": wants_params,
            "param_names": tuple(param_names),
            "message": message or "The {field} field is invalid.",
            "__module__": getattr(func, "__module__", __name__),
        },
    )


def is_rule_class(obj: Any) -> bool:
    """Check if an object is a Rule subclass (not an instance)."""
    return isinstance(obj, type) and issubclass(obj, Rule)


# ============================================================================
# Built-in registration
# ============================================================================

BUILTIN_RULES: dict[str, type[Rule]] = {}


def register_rule(cls: type[Rule]) -> type[Rule]:
    """Decorator to register a built-in rule class."""
    BUILTIN_RULES[cls.name] = cls
    return cls
