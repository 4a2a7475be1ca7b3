"""Numeric rules."""

from __future__ import annotations

import re
from typing import Any

from validly.rules.base import ValueRule, register_rule
from validly.rules.size import numeric_param
from validly.types import is_number, to_number

DECIMAL_PATTERN = re.compile(r"^-?[0-9]*\.?[0-9]+$")
DIGITS_PATTERN = re.compile(r"^[0-9]+$")


@register_rule
class NumericRule(ValueRule):
    """Finite numbers and strings that parse as finite floats."""

    name = "numeric"

    def check(self, value: Any) -> bool:
        return to_number(value) is not None


@register_rule
class IntegerRule(ValueRule):
    name = "integer"

    def check(self, value: Any) -> bool:
        number = to_number(value)
        return number is not None and number.is_integer()


@register_rule
class DecimalRule(ValueRule):
    name = "decimal"

    def check(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        return DECIMAL_PATTERN.match(str(value)) is not None


@register_rule
class DigitsRule(ValueRule):
    """Only digits, exactly ``length`` of them."""

    name = "digits"
    param_names = ("length",)

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.expected = int(numeric_param(self, "length"))

    def check(self, value: Any) -> bool:
        if isinstance(value, bool) or not (isinstance(value, str) or is_number(value)):
            return False
        text = str(value)
        return DIGITS_PATTERN.match(text) is not None and len(text) == self.expected


@register_rule
class MinValueRule(ValueRule):
    name = "min_value"
    param_names = ("min",)

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.minimum = numeric_param(self, "min")

    def check(self, value: Any) -> bool:
        number = to_number(value)
        return number is not None and number >= self.minimum


@register_rule
class MaxValueRule(ValueRule):
    name = "max_value"
    param_names = ("max",)

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.maximum = numeric_param(self, "max")

    def check(self, value: Any) -> bool:
        number = to_number(value)
        return number is not None and number <= self.maximum
