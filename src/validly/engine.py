"""Validation engine: runs a field's rules and renders failures."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator, Mapping, Sequence

from validly.errors import FieldError
from validly.exceptions import AsyncRuleError
from validly.rules import Rule
from validly.types import DEFAULT_SCOPE, is_empty, scoped_key

if TYPE_CHECKING:
    from validly.config import ValidatorConfig
    from validly.i18n import I18nManager

logger = logging.getLogger(__name__)


@dataclass
class FieldResult:
    """Outcome of validating one field."""

    field: str
    scope: str = DEFAULT_SCOPE
    errors: list[FieldError] = field(default_factory=list)

    @property
    def key(self) -> str:
        return scoped_key(self.field, self.scope)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]

    @property
    def failed_rules(self) -> list[str]:
        return [error.rule for error in self.errors if error.rule]


def normalize_value(value: Any) -> Any:
    """Trim strings before validation."""
    if isinstance(value, str):
        return value.strip()
    return value


class ValidationEngine:
    """Executes rules against field values.

    Rules on a field run in order. A failing ``required`` always stops the
    field; with ``stop_on_first_failure`` any failure does. Non-required
    rules are skipped for empty values of optional fields unless
    ``validate_empty_fields`` is on.
    """

    def __init__(self, config: "ValidatorConfig", i18n: "I18nManager"):
        self.config = config
        self.i18n = i18n

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------

    def validate_field(
        self,
        field_name: str,
        value: Any,
        rules: Sequence[Rule],
        all_values: Mapping[str, Any] | None = None,
        *,
        scope: str = DEFAULT_SCOPE,
        label: str | None = None,
        messages: Mapping[str, str] | None = None,
    ) -> FieldResult:
        """Validate a value against rules, synchronously.

        Raises:
            AsyncRuleError: If a rule returns an awaitable
        """
        result = FieldResult(field=field_name, scope=scope)
        all_values = all_values or {}
        value = normalize_value(value)

        for rule in self._applicable(rules, value):
            try:
                if not rule.should_apply(value, field_name, all_values):
                    continue
                outcome = rule.validate(value, field_name, all_values)
                if inspect.isawaitable(outcome):
                    if inspect.iscoroutine(outcome):
                        outcome.close()
                    raise AsyncRuleError(rule.name, field_name)
                error = None
            except AsyncRuleError:
                raise
            except Exception as e:
                self._log_rule_failure(rule, field_name, e)
                outcome, error = False, e

            if not outcome and self._record(result, rule, label, messages, error):
                break

        return result

    # ------------------------------------------------------------------
    # Async
    # ------------------------------------------------------------------

    async def avalidate_field(
        self,
        field_name: str,
        value: Any,
        rules: Sequence[Rule],
        all_values: Mapping[str, Any] | None = None,
        *,
        scope: str = DEFAULT_SCOPE,
        label: str | None = None,
        messages: Mapping[str, str] | None = None,
    ) -> FieldResult:
        """Validate a value against rules, awaiting async rules."""
        result = FieldResult(field=field_name, scope=scope)
        all_values = all_values or {}
        value = normalize_value(value)

        for rule in self._applicable(rules, value):
            try:
                if not rule.should_apply(value, field_name, all_values):
                    continue
                outcome = rule.validate(value, field_name, all_values)
                if inspect.isawaitable(outcome):
                    outcome = await outcome
                error = None
            except Exception as e:
                self._log_rule_failure(rule, field_name, e)
                outcome, error = False, e

            if not outcome and self._record(result, rule, label, messages, error):
                break

        return result

    # ------------------------------------------------------------------
    # Shared steps
    # ------------------------------------------------------------------

    def _applicable(
        self,
        rules: Sequence[Rule],
        value: Any,
    ) -> Iterator[Rule]:
        if not rules:
            return
        has_required = any(rule.name == "required" for rule in rules)
        skip_empty = (
            not has_required
            and not self.config.validate_empty_fields
            and is_empty(value)
        )
        for rule in rules:
            if skip_empty and rule.name != "required":
                continue
            yield rule

    def _record(
        self,
        result: FieldResult,
        rule: Rule,
        label: str | None,
        messages: Mapping[str, str] | None,
        error: BaseException | None,
    ) -> bool:
        """Add the failure to ``result``; return True when the field should stop."""
        params = dict(rule.params)
        result.errors.append(
            FieldError(
                key=result.key,
                field=result.field,
                scope=result.scope,
                rule=rule.name,
                message=self.render_message(rule.name, result.field, params, label, messages, rule.message),
                params=params,
                exception=error,
                fallback_message=rule.message,
            )
        )
        return self.config.stop_on_first_failure or rule.name == "required"

    def render_message(
        self,
        rule_name: str,
        field_name: str,
        params: Mapping[str, Any],
        label: str | None = None,
        messages: Mapping[str, str] | None = None,
        fallback_message: str | None = None,
    ) -> str:
        """Render a failure message, preferring a custom per-field message."""
        custom = (messages or {}).get(rule_name)
        if custom:
            return self.i18n.format_message(custom, field_name, params, label=label)
        return self.i18n.get_message(
            rule_name,
            field_name,
            params,
            fallback_message=fallback_message,
            label=label,
        )

    def _log_rule_failure(self, rule: Rule, field_name: str, error: Exception) -> None:
        if self.config.log_errors:
            logger.exception(
                "Rule '%s' raised on field '%s': %s", rule.name, field_name, error
            )
