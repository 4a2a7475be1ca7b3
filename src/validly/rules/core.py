"""Presence, equality and pattern rules."""

from __future__ import annotations

import re
from typing import Any, Mapping

from validly.rules.base import RegexRuleMixin, Rule, ValueRule, register_rule
from validly.types import is_empty, is_number

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@register_rule
class RequiredRule(Rule):
    """Fails on None, blank strings and empty collections."""

    name = "required"

    def validate(self, value: Any, field: str, all_values: Mapping[str, Any]) -> bool:
        return not is_empty(value)


@register_rule
class EmailRule(ValueRule):
    name = "email"

    def check(self, value: Any) -> bool:
        return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


@register_rule
class PatternRule(ValueRule, RegexRuleMixin):
    """Matches the value against a regex with ``re.search``.

    Numbers are matched through their string form, since tabular sources
    often infer numeric types for codes such as zip or card numbers.
    """

    name = "pattern"
    param_names = ("pattern",)
    raw_param = True

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.regex = self.compile_pattern(self.params["pattern"])
        # Message placeholders render the source, not the Pattern repr
        self.params["pattern"] = self.regex.pattern

    def check(self, value: Any) -> bool:
        if is_number(value):
            value = str(value)
        if not isinstance(value, str):
            return False
        return self.regex.search(value) is not None


@register_rule
class ConfirmedRule(Rule):
    """Requires the value to equal another field's value.

    Without a target, ``password_confirmation`` or ``passwordConfirmation``
    confirm ``password``.
    """

    name = "confirmed"
    param_names = ("target",)
    param_defaults = {"target": None}

    def target_field(self, field: str) -> str:
        target = self.get_param("target")
        if target:
            return str(target)
        for suffix in ("_confirmation", "Confirmation"):
            if field.endswith(suffix) and len(field) > len(suffix):
                return field[: -len(suffix)]
        return field

    def validate(self, value: Any, field: str, all_values: Mapping[str, Any]) -> bool:
        if is_empty(value):
            return True
        other = all_values.get(self.target_field(field))
        if isinstance(other, str):
            other = other.strip()
        return value == other
