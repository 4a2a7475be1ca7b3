"""Rule registry and rule-definition parsing."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Iterator, Mapping, Sequence

from validly.exceptions import RuleDefinitionError, UnknownRuleError
from validly.rules import BUILTIN_RULES, Rule, is_rule_class, make_callable_rule
from validly.types import RuleDefinition

logger = logging.getLogger(__name__)

_INT_PARAM = re.compile(r"^-?[0-9]+$")
_FLOAT_PARAM = re.compile(r"^-?([0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)([eE][-+]?[0-9]+)?$")


def parse_parameter(param: str) -> Any:
    """Convert a string parameter to int or float when it looks numeric."""
    text = param.strip()
    if _INT_PARAM.match(text):
        return int(text)
    if _FLOAT_PARAM.match(text):
        return float(text)
    return param


class RuleRegistry:
    """Registry of rule classes, seeded with the built-in rules.

    Unlike a process-wide singleton, each validator owns its registry so that
    custom rules registered through ``extend`` do not leak between instances.

    Example:
        registry = RuleRegistry()
        registry.register("even", lambda value: int(value) % 2 == 0)
        rules = registry.parse_rules("required|numeric|even")
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._rules: dict[str, type[Rule]] = dict(BUILTIN_RULES)
        self._custom: set[str] = set()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        rule: type[Rule] | Callable[..., Any],
        message: str | None = None,
        param_names: Sequence[str] = (),
    ) -> type[Rule]:
        """Register a rule class or a plain validation function under ``name``."""
        if not name:
            raise RuleDefinitionError("Rule name cannot be empty")

        if is_rule_class(rule):
            rule_cls = rule
            if rule_cls.name != name or (message and rule_cls.message != message):
                attrs: dict[str, Any] = {"name": name}
                if message:
                    attrs["message"] = message
                rule_cls = type(rule_cls.__name__, (rule_cls,), attrs)
        elif callable(rule):
            rule_cls = make_callable_rule(name, rule, message, param_names)
        else:
            raise RuleDefinitionError(
                f"Rule '{name}' must be a Rule subclass or a callable, got {type(rule).__name__}"
            )

        self._rules[name] = rule_cls
        self._custom.add(name)
        logger.debug("Registered rule '%s' (%s)", name, rule_cls.__name__)
        return rule_cls

    def remove(self, name: str) -> bool:
        """Remove a rule. Removed built-ins are not restored until ``clear``."""
        self._custom.discard(name)
        return self._rules.pop(name, None) is not None

    def clear_custom(self) -> None:
        """Drop custom rules and restore any built-in they replaced."""
        for name in self._custom:
            if name in BUILTIN_RULES:
                self._rules[name] = BUILTIN_RULES[name]
            else:
                self._rules.pop(name, None)
        self._custom.clear()

    def clear(self) -> None:
        """Reset to the built-in rules only."""
        self._rules = dict(BUILTIN_RULES)
        self._custom.clear()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def has(self, name: str) -> bool:
        return name in self._rules

    def get(self, name: str) -> type[Rule] | None:
        return self._rules.get(name)

    def names(self) -> list[str]:
        return list(self._rules)

    def is_custom(self, name: str) -> bool:
        return name in self._custom

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._rules))

    def __len__(self) -> int:
        return len(self._rules)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(self, name: str, params: Any = None) -> Rule | None:
        """Instantiate a rule by name.

        Args:
            name: Registered rule name
            params: None, a single param, a list/tuple of positional params,
                or a mapping of named params

        Returns:
            The rule instance, or None for unknown rules outside strict mode
        """
        rule_cls = self._rules.get(name)
        if rule_cls is None:
            if self.strict:
                raise UnknownRuleError(name, self._rules)
            logger.warning("Unknown validation rule: %s. This rule will be ignored.", name)
            return None

        if params is None or params is True:
            return rule_cls()
        if isinstance(params, Mapping):
            return rule_cls(**params)
        if isinstance(params, (list, tuple)):
            return rule_cls(*params)
        return rule_cls(params)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse_rules(self, rules: RuleDefinition) -> list[Rule]:
        """Parse any supported rule definition into rule instances.

        Accepts ``"required|min:3"``, ``{"required": True, "min": 3}``, or a
        sequence of strings, single-entry mappings, rules and callables.
        """
        if not rules:
            return []
        if isinstance(rules, str):
            parsed = [self.parse_string_rule(part) for part in rules.split("|") if part.strip()]
        elif isinstance(rules, Mapping):
            parsed = self._parse_mapping(rules)
        elif isinstance(rules, (Rule,)) or is_rule_class(rules) or callable(rules):
            parsed = [self._parse_item(rules)]
        elif isinstance(rules, (list, tuple)):
            parsed = []
            for item in rules:
                if isinstance(item, Mapping):
                    parsed.extend(self._parse_mapping(item))
                else:
                    parsed.append(self._parse_item(item))
        else:
            raise RuleDefinitionError(f"Unsupported rule definition: {rules!r}")
        return [rule for rule in parsed if rule is not None]

    def parse_string_rule(self, definition: str) -> Rule | None:
        """Parse ``name`` or ``name:param[:param...]``."""
        name, _, rest = definition.strip().partition(":")
        if not rest:
            return self.create(name)

        rule_cls = self._rules.get(name)
        if rule_cls is not None and rule_cls.raw_param:
            return self.create(name, rest)

        params = [parse_parameter(p) for p in rest.split(":")]
        return self.create(name, params if len(params) > 1 else params[0])

    def _parse_mapping(self, rules: Mapping[str, Any]) -> list[Rule | None]:
        parsed: list[Rule | None] = []
        for name, value in rules.items():
            if value is False or value is None:
                continue
            if isinstance(value, str) and not self._takes_raw(name):
                value = parse_parameter(value)
            parsed.append(self.create(name, value))
        return parsed

    def _parse_item(self, item: Any) -> Rule | None:
        if isinstance(item, str):
            return self.parse_string_rule(item)
        if isinstance(item, Rule):
            return item
        if is_rule_class(item):
            return item()
        if callable(item):
            name = getattr(item, "__name__", "custom")
            if name == "<lambda>":
                name = "custom"
            return make_callable_rule(name, item)()
        raise RuleDefinitionError(f"Unsupported rule definition: {item!r}")

    def _takes_raw(self, name: str) -> bool:
        rule_cls = self._rules.get(name)
        return rule_cls is not None and rule_cls.raw_param

    def __repr__(self) -> str:
        return f"RuleRegistry(rules={len(self._rules)}, custom={sorted(self._custom)})"
