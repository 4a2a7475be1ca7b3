"""Built-in validation rules.

Importing this package registers every built-in rule in ``BUILTIN_RULES``.
"""

from validly.rules.base import (
    BUILTIN_RULES,
    CallableRule,
    RegexRuleMixin,
    RegexSafetyChecker,
    Rule,
    ValueRule,
    is_rule_class,
    make_callable_rule,
    register_rule,
)
from validly.rules.core import ConfirmedRule, EmailRule, PatternRule, RequiredRule
from validly.rules.format import (
    AlphaDashRule,
    AlphaNumRule,
    AlphaRule,
    AlphaSpacesRule,
    IpRule,
    JsonRule,
    OneOfRule,
    UrlRule,
)
from validly.rules.numeric import (
    DecimalRule,
    DigitsRule,
    IntegerRule,
    MaxValueRule,
    MinValueRule,
    NumericRule,
)
from validly.rules.size import BetweenRule, LengthRule, MaxRule, MinRule, SizeRule

__all__ = [
    "BUILTIN_RULES",
    "CallableRule",
    "RegexRuleMixin",
    "RegexSafetyChecker",
    "Rule",
    "ValueRule",
    "SizeRule",
    "is_rule_class",
    "make_callable_rule",
    "register_rule",
    # Presence / equality / pattern
    "RequiredRule",
    "EmailRule",
    "PatternRule",
    "ConfirmedRule",
    # Size
    "MinRule",
    "MaxRule",
    "BetweenRule",
    "LengthRule",
    # Numeric
    "NumericRule",
    "IntegerRule",
    "DecimalRule",
    "DigitsRule",
    "MinValueRule",
    "MaxValueRule",
    # Format
    "AlphaRule",
    "AlphaNumRule",
    "AlphaDashRule",
    "AlphaSpacesRule",
    "UrlRule",
    "OneOfRule",
    "IpRule",
    "JsonRule",
]
