"""Validator facade tying rules, data, messages and errors together."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from validly.config import ValidatorConfig
from validly.engine import FieldResult, ValidationEngine
from validly.errors import ErrorBag, FieldError
from validly.forms import FormManager, RuleManager
from validly.i18n import I18nManager, MessageCatalog
from validly.registry import RuleRegistry
from validly.rules import Rule
from validly.types import (
    ALL_SCOPES,
    DEFAULT_SCOPE,
    FormData,
    Listener,
    RuleDefinition,
    Unsubscribe,
    scoped_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidatorState:
    """Snapshot of a validator for one scope."""

    scope: str
    is_valid: bool
    is_validating: bool
    locale: str
    data: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, list[str]] = field(default_factory=dict)
    fields: list[str] = field(default_factory=list)
    labels: dict[str, str] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return not self.is_valid


class Validator:
    """Form validator with scoped rules, localized messages and an error bag.

    Every mutator returns the validator, so calls can be chained.

    Example:
        v = Validator(locale="pt-BR")
        v.set_multiple_rules({
            "email": "required|email",
            "password": "required|min:8",
            "password_confirmation": "required|confirmed",
        })
        if not v.validate({"email": "x", "password": "secret"}):
            print(v.errors().all_by_field())
    """

    def __init__(self, config: ValidatorConfig | None = None, **options: Any):
        config = config or ValidatorConfig()
        if options:
            config = ValidatorConfig.from_kwargs(**{**config.to_dict(), **options})
        self.config = config

        self.registry = RuleRegistry(strict=config.strict_rules)
        self.i18n = I18nManager(config.locale, config.fallback_locale)
        self.error_bag = ErrorBag()
        self.form_manager = FormManager()
        self.rule_manager = RuleManager(self.registry)
        self.engine = ValidationEngine(config, self.i18n)

        self._is_validating = False
        self._listeners: list[Listener] = []
        for component in (self.error_bag, self.i18n, self.form_manager, self.rule_manager):
            component.subscribe(self._notify)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def set_rules(
        self,
        field_name: str,
        rules: RuleDefinition,
        messages: Mapping[str, Any] | None = None,
        scope: str = DEFAULT_SCOPE,
    ) -> "Validator":
        """Set rules for a field.

        Args:
            field_name: Field name
            rules: ``"required|min:3"``, a mapping, or a sequence of definitions
            messages: Custom messages, ``{rule: message}``
            scope: Form scope
        """
        self.rule_manager.set_field_rules(field_name, rules, scope, messages)
        return self

    def set_multiple_rules(
        self,
        rules: Mapping[str, RuleDefinition],
        messages: Mapping[str, Any] | None = None,
        scope: str = DEFAULT_SCOPE,
    ) -> "Validator":
        """Set rules for several fields.

        ``messages`` is ``{field: {rule: message}}`` or ``{"field.rule": message}``.
        """
        self.rule_manager.set_multiple_field_rules(rules, scope, messages)
        return self

    def remove_rules(self, field_name: str, scope: str = DEFAULT_SCOPE) -> "Validator":
        self.rule_manager.remove_field_rules(field_name, scope)
        self.error_bag.remove(scoped_key(field_name, scope))
        return self

    def get_rules(self, field_name: str, scope: str = DEFAULT_SCOPE) -> list[Rule]:
        return self.rule_manager.get_field_rules(field_name, scope)

    def has_rules(self, field_name: str, scope: str = DEFAULT_SCOPE) -> bool:
        return self.rule_manager.has_field_rules(field_name, scope)

    def set_field_label(self, field_name: str, label: str, scope: str = DEFAULT_SCOPE) -> "Validator":
        self.rule_manager.set_field_label(field_name, label, scope)
        return self

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def set_data(self, data: Mapping[str, Any], scope: str = DEFAULT_SCOPE) -> "Validator":
        self.form_manager.set_form_data(data, scope)
        return self

    def set_value(self, field_name: str, value: Any, scope: str = DEFAULT_SCOPE) -> "Validator":
        self.form_manager.set_field_value(field_name, value, scope)
        return self

    def get_value(self, field_name: str, scope: str = DEFAULT_SCOPE) -> Any:
        return self.form_manager.get_field_value(field_name, scope)

    def get_data(self, scope: str = DEFAULT_SCOPE) -> FormData:
        return self.form_manager.get_all_form_data(scope)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(
        self,
        scope: str | Mapping[str, Any] = DEFAULT_SCOPE,
        data: Mapping[str, Any] | None = None,
    ) -> bool:
        """Validate every field with rules in a scope.

        Args:
            scope: Form scope, or the data itself for the default scope
            data: Values merged into the scope before validating

        Returns:
            True if every field passed
        """
        scope, data = self._resolve_call(scope, data)
        values = self._prepare(scope, data)
        self._is_validating = True
        try:
            results = [
                self.engine.validate_field(field_name, values.get(field_name), **kwargs)
                for field_name, kwargs in self._field_jobs(scope, values)
            ]
        finally:
            self._is_validating = False
        return self._collect(results)

    async def avalidate(
        self,
        scope: str | Mapping[str, Any] = DEFAULT_SCOPE,
        data: Mapping[str, Any] | None = None,
    ) -> bool:
        """Async ``validate``: fields run concurrently, async rules are awaited."""
        scope, data = self._resolve_call(scope, data)
        values = self._prepare(scope, data)
        self._is_validating = True
        try:
            results = await asyncio.gather(*(
                self.engine.avalidate_field(field_name, values.get(field_name), **kwargs)
                for field_name, kwargs in self._field_jobs(scope, values)
            ))
        finally:
            self._is_validating = False
        return self._collect(results)

    def validate_field(self, field_name: str, scope: str = DEFAULT_SCOPE) -> bool:
        """Validate one field against the scope's current data."""
        self.error_bag.remove(scoped_key(field_name, scope))
        values = self.form_manager.get_all_form_data(scope)
        result = self.engine.validate_field(
            field_name, values.get(field_name), **self._field_kwargs(field_name, scope, values)
        )
        return self._collect([result])

    async def avalidate_field(self, field_name: str, scope: str = DEFAULT_SCOPE) -> bool:
        self.error_bag.remove(scoped_key(field_name, scope))
        values = self.form_manager.get_all_form_data(scope)
        result = await self.engine.avalidate_field(
            field_name, values.get(field_name), **self._field_kwargs(field_name, scope, values)
        )
        return self._collect([result])

    def check_values(
        self,
        values: Mapping[str, Any],
        scope: str = DEFAULT_SCOPE,
    ) -> list[FieldResult]:
        """Validate a mapping against a scope's rules without storing data or errors."""
        values = dict(values)
        return [
            self.engine.validate_field(field_name, values.get(field_name), **kwargs)
            for field_name, kwargs in self._field_jobs(scope, values)
        ]

    @staticmethod
    def _resolve_call(
        scope: str | Mapping[str, Any],
        data: Mapping[str, Any] | None,
    ) -> tuple[str, Mapping[str, Any] | None]:
        if isinstance(scope, Mapping):
            return DEFAULT_SCOPE, scope
        return scope or DEFAULT_SCOPE, data

    def _prepare(self, scope: str, data: Mapping[str, Any] | None) -> FormData:
        if data:
            self.form_manager.set_form_data(data, scope)
        self.error_bag.remove_scope(scope)
        return self.form_manager.get_all_form_data(scope)

    def _field_jobs(self, scope: str, values: FormData):
        for field_name in self.rule_manager.get_fields_with_rules(scope):
            yield field_name, self._field_kwargs(field_name, scope, values)

    def _field_kwargs(self, field_name: str, scope: str, values: FormData) -> dict[str, Any]:
        return {
            "rules": self.rule_manager.get_field_rules(field_name, scope),
            "all_values": values,
            "scope": scope,
            "label": self.rule_manager.get_field_label(field_name, scope),
            "messages": self.rule_manager.get_field_messages(field_name, scope),
        }

    def _collect(self, results: list[FieldResult]) -> bool:
        for result in results:
            for error in result.errors:
                self.error_bag.add_error(error)
        return all(result.is_valid for result in results)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def is_valid(self) -> bool:
        return not self.error_bag.any()

    def has_errors(self) -> bool:
        return self.error_bag.any()

    def errors(self) -> ErrorBag:
        return self.error_bag

    def get_errors(self) -> dict[str, list[str]]:
        return self.error_bag.all_by_field()

    @property
    def is_validating(self) -> bool:
        return self._is_validating

    def get_state(self, scope: str = DEFAULT_SCOPE) -> ValidatorState:
        fields = self.rule_manager.get_fields_with_rules(scope)
        labels = {
            name: label
            for name in fields
            if (label := self.rule_manager.get_field_label(name, scope)) is not None
        }
        keys = set(self.error_bag.scope_keys(scope))
        return ValidatorState(
            scope=scope,
            is_valid=not keys,
            is_validating=self._is_validating,
            locale=self.get_locale(),
            data=self.get_data(scope),
            errors={k: v for k, v in self.error_bag.all_by_field().items() if k in keys},
            fields=fields,
            labels=labels,
        )

    def reset(self, scope: str = ALL_SCOPES) -> "Validator":
        """Clear errors and data of a scope, or of everything with ``"all"``."""
        if scope == ALL_SCOPES:
            self.error_bag.clear()
            self.form_manager.clear_form_data(ALL_SCOPES)
        else:
            self.error_bag.remove_scope(scope)
            self.form_manager.reset_form(scope)
        return self

    # ------------------------------------------------------------------
    # Custom rules and i18n
    # ------------------------------------------------------------------

    def extend(
        self,
        name: str,
        rule: type[Rule] | Callable[..., Any],
        message: str | None = None,
    ) -> "Validator":
        """Register a custom rule, optionally with its message.

        Example:
            v.extend("cpf", lambda value: CPF.match(value) is not None,
                     "The {field} field must be a valid CPF.")
        """
        self.registry.register(name, rule, message)
        if message:
            self.i18n.add_messages(self.i18n.get_locale(), {name: message})
        return self

    def set_locale(self, locale: str) -> "Validator":
        """Switch locale and re-render existing error messages in it."""
        self.i18n.set_locale(locale)
        if self.error_bag.any():
            self.error_bag.rerender(self._render_error)
        return self

    def get_locale(self) -> str:
        return self.i18n.get_locale()

    def add_messages(self, locale: str, messages: Mapping[str, Any] | MessageCatalog) -> "Validator":
        self.i18n.add_messages(locale, messages)
        return self

    def set_messages(
        self,
        locale: str,
        messages: Mapping[str, Any] | MessageCatalog,
        merge: bool = True,
    ) -> "Validator":
        self.i18n.set_messages(locale, messages, merge=merge)
        return self

    def load_translations(
        self,
        translations: Mapping[str, Any] | MessageCatalog | None,
        overrides: Mapping[str, Any] | None = None,
        locale: str | None = None,
    ) -> "Validator":
        """Load a translation dictionary, then overrides, into a locale.

        Example:
            v.load_translations(pt_br_messages, {"phone.pattern": "Telefone inválido"})
        """
        self.i18n.load_translations(translations, overrides, locale)
        return self

    def _render_error(self, error: FieldError) -> str:
        if error.rule is None:
            return error.message
        fallback = error.fallback_message
        if fallback is None:
            rule_cls = self.registry.get(error.rule)
            fallback = rule_cls.message if rule_cls is not None else None
        return self.engine.render_message(
            error.rule,
            error.field,
            error.params,
            label=self.rule_manager.get_field_label(error.field, error.scope),
            messages=self.rule_manager.get_field_messages(error.field, error.scope),
            fallback_message=fallback,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def get_global_config(self) -> ValidatorConfig:
        return self.config

    def set_global_config(self, **changes: Any) -> "Validator":
        """Replace the config; locale changes are applied immediately."""
        previous = self.config
        self.config = previous.replace(**changes)
        self.engine.config = self.config
        self.registry.strict = self.config.strict_rules
        if self.config.fallback_locale != previous.fallback_locale:
            self.i18n.set_fallback_locale(self.config.fallback_locale)
        if self.config.locale != previous.locale:
            self.set_locale(self.config.locale)
        return self

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register a change listener; returns a function that removes it."""
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
                logger.warning("Validator listener %r failed", listener, exc_info=True)

    def __repr__(self) -> str:
        return (
            f"Validator(locale={self.get_locale()!r}, "
            f"scopes={self.rule_manager.scopes()}, errors={self.error_bag.count()})"
        )
