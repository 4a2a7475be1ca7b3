"""Size rules: min, max, between, length.

Size means numeric value for real numbers, length for strings and
collections. When a field also carries a numeric-typed rule, numeric
strings are compared by value as well.
"""

from __future__ import annotations

from typing import Any, Sequence

from validly.exceptions import RuleDefinitionError
from validly.rules.base import Rule, ValueRule, register_rule
from validly.types import is_number, to_number

NUMERIC_RULE_NAMES = frozenset({"numeric", "integer", "decimal"})

_SIZED_TYPES = (str, list, tuple, set, frozenset, dict)


def numeric_param(rule: Rule, key: str) -> float:
    bound = to_number(rule.params.get(key))
    if bound is None:
        raise RuleDefinitionError(
            f"Rule '{rule.name}' needs a numeric '{key}', got {rule.params.get(key)!r}"
        )
    return bound


class SizeRule(ValueRule):
    """Template for rules comparing the size of a value."""

    numeric: bool = False

    def bind(self, siblings: Sequence[Rule]) -> None:
        self.numeric = any(s.name in NUMERIC_RULE_NAMES for s in siblings)

    def size(self, value: Any) -> float | None:
        if is_number(value):
            return float(value)
        if self.numeric:
            number = to_number(value)
            if number is not None:
                return number
        if isinstance(value, _SIZED_TYPES):
            return float(len(value))
        return None


@register_rule
class MinRule(SizeRule):
    name = "min"
    param_names = ("min",)

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.minimum = numeric_param(self, "min")

    def check(self, value: Any) -> bool:
        size = self.size(value)
        return size is not None and size >= self.minimum


@register_rule
class MaxRule(SizeRule):
    name = "max"
    param_names = ("max",)

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.maximum = numeric_param(self, "max")

    def check(self, value: Any) -> bool:
        size = self.size(value)
        return size is not None and size <= self.maximum


@register_rule
class BetweenRule(SizeRule):
    name = "between"
    param_names = ("min", "max")

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.minimum = numeric_param(self, "min")
        self.maximum = numeric_param(self, "max")
        if self.minimum > self.maximum:
            raise RuleDefinitionError(
                f"Rule 'between' has min {self.minimum} greater than max {self.maximum}"
            )

    def check(self, value: Any) -> bool:
        size = self.size(value)
        return size is not None and self.minimum <= size <= self.maximum


@register_rule
class LengthRule(ValueRule):
    """Exact length of a string or collection."""

    name = "length"
    param_names = ("length",)

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.expected = int(numeric_param(self, "length"))

    def check(self, value: Any) -> bool:
        return isinstance(value, _SIZED_TYPES) and len(value) == self.expected
