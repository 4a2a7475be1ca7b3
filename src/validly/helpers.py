"""Standalone checks and lightweight data validation.

These helpers work without a ``Validator``: plain predicates for one-off
checks, and ``validate_data`` for validating a mapping against check names.

Example:
    from validly.helpers import checks, validate_data

    checks.email("ana@example.com")  # True
    result = validate_data(
        {"name": "", "age": "17"},
        {"name": "required", "age": ["required", {"min_value": 18}]},
    )
    result.errors  # {"name": ["name is invalid"], "age": ["age is invalid"]}
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from validly.registry import parse_parameter
from validly.rules.base import RegexRuleMixin
from validly.rules.core import EMAIL_PATTERN
from validly.types import is_empty, to_number

logger = logging.getLogger(__name__)

PATTERNS: dict[str, re.Pattern[str]] = {
    "email": EMAIL_PATTERN,
    "phone": re.compile(r"^\+?[0-9\s\-()]+$"),
    "url": re.compile(r"^https?://.+"),
    "alphanumeric": re.compile(r"^[a-zA-Z0-9]+$"),
    "alphabetic": re.compile(r"^[a-zA-Z]+$"),
    "numeric": re.compile(r"^[0-9]+$"),
    "decimal": re.compile(r"^[0-9]+\.?[0-9]*$"),
    "slug": re.compile(r"^[a-z0-9\-]+$"),
    "uuid": re.compile(
        r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
        re.IGNORECASE,
    ),
}


class Checks:
    """Quick predicates. All but ``required`` and ``confirmed`` pass on empty input."""

    @staticmethod
    def email(value: Any) -> bool:
        return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None

    @staticmethod
    def required(value: Any) -> bool:
        return not is_empty(value)

    @staticmethod
    def min_length(value: Any, minimum: int) -> bool:
        if is_empty(value):
            return True
        return hasattr(value, "__len__") and len(value) >= int(minimum)

    @staticmethod
    def max_length(value: Any, maximum: int) -> bool:
        if is_empty(value):
            return True
        return hasattr(value, "__len__") and len(value) <= int(maximum)

    @staticmethod
    def numeric(value: Any) -> bool:
        if is_empty(value):
            return True
        return to_number(value) is not None

    @staticmethod
    def min_value(value: Any, minimum: float) -> bool:
        if is_empty(value):
            return True
        number = to_number(value)
        return number is not None and number >= float(minimum)

    @staticmethod
    def max_value(value: Any, maximum: float) -> bool:
        if is_empty(value):
            return True
        number = to_number(value)
        return number is not None and number <= float(maximum)

    @staticmethod
    def pattern(value: Any, pattern: str | re.Pattern[str]) -> bool:
        if is_empty(value) or not isinstance(value, str):
            return True
        return RegexRuleMixin.compile_pattern(pattern).search(value) is not None

    @staticmethod
    def confirmed(value: Any, confirm_value: Any) -> bool:
        return value == confirm_value

    def get(self, name: str) -> Callable[..., bool] | None:
        if name.startswith("_") or name == "get":
            return None
        return getattr(self, name, None)


checks = Checks()


def create_rules(rules: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize pipe strings into lists of names and single-entry mappings.

    Example:
        create_rules({"email": "required|email|min_length:5"})
        # {"email": ["required", "email", {"min_length": 5}]}
    """
    normalized: dict[str, Any] = {}
    for field_name, field_rules in rules.items():
        if isinstance(field_rules, str):
            items: list[Any] = []
            for part in field_rules.split("|"):
                part = part.strip()
                if not part:
                    continue
                name, sep, value = part.partition(":")
                items.append({name: parse_parameter(value)} if sep else name)
            normalized[field_name] = items
        else:
            normalized[field_name] = field_rules
    return normalized


@dataclass
class DataValidationResult:
    """Result of ``validate_data``."""

    is_valid: bool
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return not self.is_valid


def validate_data(data: Mapping[str, Any], rules: Mapping[str, Any]) -> DataValidationResult:
    """Validate ``data`` against check names, stopping at each field's first failure.

    Unknown check names are ignored.
    """
    errors: dict[str, list[str]] = {}
    for field_name, field_rules in create_rules(rules).items():
        value = data.get(field_name)
        items = field_rules if isinstance(field_rules, (list, tuple)) else [field_rules]
        for item in items:
            if isinstance(item, Mapping):
                name, param = next(iter(item.items()))
                args: tuple[Any, ...] = (value, param)
            else:
                name, args = str(item), (value,)

            check = checks.get(name)
            if check is None:
                logger.debug("Ignoring unknown check '%s' on field '%s'", name, field_name)
                continue
            if not check(*args):
                errors.setdefault(field_name, []).append(f"{field_name} is invalid")
                break

    return DataValidationResult(is_valid=not errors, errors=errors)
