"""Per-scope form data and rule bookkeeping."""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Mapping

from validly.registry import RuleRegistry
from validly.rules import Rule
from validly.types import (
    ALL_SCOPES,
    DEFAULT_SCOPE,
    FormData,
    Listener,
    RuleDefinition,
    Unsubscribe,
)

logger = logging.getLogger(__name__)


class _Observable:
    """Listener list shared by the managers."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.warning("%s listener %r failed", type(self).__name__, listener, exc_info=True)


# ============================================================================
# Form data
# ============================================================================

class FormManager(_Observable):
    """Holds form data and field states per scope."""

    def __init__(self) -> None:
        super().__init__()
        self._data: dict[str, FormData] = {}
        self._states: dict[str, dict[str, dict[str, Any]]] = {}

    def get_form_data(self, scope: str = DEFAULT_SCOPE) -> FormData:
        """Return the live data mapping for a scope, creating it if needed."""
        return self._data.setdefault(scope, {})

    def get_all_form_data(self, scope: str = DEFAULT_SCOPE) -> FormData:
        """Return a copy of a scope's data."""
        return dict(self._data.get(scope, {}))

    def set_form_data(self, data: Mapping[str, Any], scope: str = DEFAULT_SCOPE) -> None:
        """Merge values into a scope's data."""
        self.get_form_data(scope).update(data)
        self._notify()

    def set_field_value(self, field: str, value: Any, scope: str = DEFAULT_SCOPE) -> None:
        self.get_form_data(scope)[field] = value
        self._notify()

    def get_field_value(self, field: str, scope: str = DEFAULT_SCOPE, default: Any = None) -> Any:
        return self._data.get(scope, {}).get(field, default)

    def set_field_state(self, field: str, state: Mapping[str, Any], scope: str = DEFAULT_SCOPE) -> None:
        """Merge state flags (e.g. ``touched``, ``dirty``) into a field's state."""
        self._states.setdefault(scope, {}).setdefault(field, {}).update(state)
        self._notify()

    def get_field_state(self, field: str, scope: str = DEFAULT_SCOPE) -> dict[str, Any]:
        return dict(self._states.get(scope, {}).get(field, {}))

    def get_field_states(self, scope: str = DEFAULT_SCOPE) -> dict[str, dict[str, Any]]:
        return {field: dict(state) for field, state in self._states.get(scope, {}).items()}

    def clear_form_data(self, scope: str = DEFAULT_SCOPE) -> None:
        """Drop data and states of a scope, or of every scope with ``"all"``."""
        if scope == ALL_SCOPES:
            self._data.clear()
            self._states.clear()
        else:
            self._data.pop(scope, None)
            self._states.pop(scope, None)
        self._notify()

    def reset_form(self, scope: str = DEFAULT_SCOPE) -> None:
        """Empty a scope's values and states, keeping the scope itself."""
        self._data[scope] = {}
        self._states[scope] = {}
        self._notify()

    def scopes(self) -> list[str]:
        return list(self._data)


# ============================================================================
# Rules, labels and custom messages
# ============================================================================

def normalize_messages(
    messages: Mapping[str, Any] | None,
    fields: Iterable[str],
) -> dict[str, dict[str, str]]:
    """Group custom messages by field.

    Accepts ``{field: {rule: message}}``, ``{"field.rule": message}`` and
    ``{rule: message}`` (applied to every field in ``fields``).
    """
    fields = list(fields)
    grouped: dict[str, dict[str, str]] = {}
    for key, value in (messages or {}).items():
        if isinstance(value, Mapping):
            grouped.setdefault(key, {}).update({rule: str(msg) for rule, msg in value.items()})
        elif "." in key:
            field, _, rule = key.rpartition(".")
            grouped.setdefault(field, {})[rule] = str(value)
        else:
            for field in fields:
                grouped.setdefault(field, {}).setdefault(key, str(value))
    return grouped


class RuleManager(_Observable):
    """Holds parsed rules, labels and custom messages per scope and field."""

    def __init__(self, registry: RuleRegistry):
        super().__init__()
        self.registry = registry
        self._rules: dict[str, dict[str, list[Rule]]] = {}
        self._labels: dict[str, dict[str, str]] = {}
        self._messages: dict[str, dict[str, dict[str, str]]] = {}

    def set_field_rules(
        self,
        field: str,
        rules: RuleDefinition,
        scope: str = DEFAULT_SCOPE,
        messages: Mapping[str, Any] | None = None,
    ) -> list[Rule]:
        """Parse and store a field's rules, replacing previous ones."""
        parsed = self._store(field, rules, scope, messages)
        self._notify()
        return parsed

    def set_multiple_field_rules(
        self,
        rules: Mapping[str, RuleDefinition],
        scope: str = DEFAULT_SCOPE,
        messages: Mapping[str, Any] | None = None,
    ) -> None:
        grouped = normalize_messages(messages, rules.keys())
        for field, definition in rules.items():
            self._store(field, definition, scope, grouped.get(field))
        self._notify()

    def _store(
        self,
        field: str,
        rules: RuleDefinition,
        scope: str,
        messages: Mapping[str, Any] | None,
    ) -> list[Rule]:
        parsed = [copy.copy(rule) for rule in self.registry.parse_rules(rules)]
        for rule in parsed:
            rule.bind(parsed)
        self._rules.setdefault(scope, {})[field] = parsed

        if messages:
            field_messages = normalize_messages(messages, [field])
            # Plain {rule: message} lands under the field itself
            custom = field_messages.get(field, {})
            self._messages.setdefault(scope, {})[field] = custom
        else:
            self._messages.get(scope, {}).pop(field, None)
        return parsed

    def get_field_rules(self, field: str, scope: str = DEFAULT_SCOPE) -> list[Rule]:
        return list(self._rules.get(scope, {}).get(field, []))

    def has_field_rules(self, field: str, scope: str = DEFAULT_SCOPE) -> bool:
        return bool(self._rules.get(scope, {}).get(field))

    def remove_field_rules(self, field: str, scope: str = DEFAULT_SCOPE) -> None:
        self._rules.get(scope, {}).pop(field, None)
        self._messages.get(scope, {}).pop(field, None)
        self._notify()

    def get_fields_with_rules(self, scope: str = DEFAULT_SCOPE) -> list[str]:
        return [field for field, rules in self._rules.get(scope, {}).items() if rules]

    def get_field_messages(self, field: str, scope: str = DEFAULT_SCOPE) -> dict[str, str]:
        return dict(self._messages.get(scope, {}).get(field, {}))

    def set_field_label(self, field: str, label: str, scope: str = DEFAULT_SCOPE) -> None:
        self._labels.setdefault(scope, {})[field] = label
        self._notify()

    def get_field_label(self, field: str, scope: str = DEFAULT_SCOPE) -> str | None:
        return self._labels.get(scope, {}).get(field)

    def clear_rules(self, scope: str = DEFAULT_SCOPE) -> None:
        """Drop rules, labels and messages of a scope, or all with ``"all"``."""
        if scope == ALL_SCOPES:
            self._rules.clear()
            self._labels.clear()
            self._messages.clear()
        else:
            self._rules.pop(scope, None)
            self._labels.pop(scope, None)
            self._messages.pop(scope, None)
        self._notify()

    def scopes(self) -> list[str]:
        return list(self._rules)
