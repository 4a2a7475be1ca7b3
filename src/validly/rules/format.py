"""Character-class and format rules."""

from __future__ import annotations

import ipaddress
import json
import re
from typing import Any

from validly.rules.base import ValueRule, register_rule

URL_PATTERN = re.compile(r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)/?$", re.IGNORECASE)


class CharacterClassRule(ValueRule):
    """Template for rules matching the whole value against a character class."""

    regex: re.Pattern[str]

    def check(self, value: Any) -> bool:
        if isinstance(value, bool):
            return False
        return self.regex.match(str(value)) is not None


@register_rule
class AlphaRule(CharacterClassRule):
    name = "alpha"
    regex = re.compile(r"^[a-zA-Z]+$")


@register_rule
class AlphaNumRule(CharacterClassRule):
    name = "alpha_num"
    regex = re.compile(r"^[a-zA-Z0-9]+$")


@register_rule
class AlphaDashRule(CharacterClassRule):
    name = "alpha_dash"
    regex = re.compile(r"^[a-zA-Z0-9_-]+$")


@register_rule
class AlphaSpacesRule(CharacterClassRule):
    name = "alpha_spaces"
    regex = re.compile(r"^[a-zA-Z ]+$")


@register_rule
class UrlRule(CharacterClassRule):
    name = "url"
    regex = URL_PATTERN


@register_rule
class OneOfRule(ValueRule):
    """Value must be one of the params.

    String definitions such as ``one_of:1:2`` yield numbers, so the check
    also compares string forms.
    """

    name = "one_of"
    variadic = True

    def check(self, value: Any) -> bool:
        values = self.params["values"]
        if value in values:
            return True
        return str(value) in {str(v) for v in values}


@register_rule
class IpRule(ValueRule):
    name = "ip"

    def check(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            ipaddress.ip_address(value)
        except ValueError:
            return False
        return True


@register_rule
class JsonRule(ValueRule):
    name = "json"

    def check(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            json.loads(value)
        except ValueError:
            return False
        return True
