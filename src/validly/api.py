"""Factory functions for common validation setups."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from validly.config import ValidatorConfig
from validly.core import Validator
from validly.errors import ErrorBag
from validly.types import DEFAULT_SCOPE, RuleDefinition, scoped_key

SIMPLE_FIELD = "value"


def create_validator(config: ValidatorConfig | None = None, **options: Any) -> Validator:
    """Create a validator.

    Example:
        v = create_validator(locale="pt-BR", stop_on_first_failure=True)
    """
    return Validator(config, **options)


class FieldHandle:
    """Shortcut bound to one field of a form validator."""

    def __init__(self, form: "FormValidator", name: str):
        self.form = form
        self.name = name

    @property
    def key(self) -> str:
        return scoped_key(self.name, self.form.scope)

    def validate(self) -> bool:
        return self.form.validate_field(self.name, self.form.scope)

    def set_value(self, value: Any) -> "FieldHandle":
        self.form.set_value(self.name, value, self.form.scope)
        return self

    def get_value(self) -> Any:
        return self.form.get_value(self.name, self.form.scope)

    def has_error(self) -> bool:
        return self.form.errors().has(self.key)

    def get_error(self) -> str | None:
        return self.form.errors().first(self.key)

    def set_label(self, label: str) -> "FieldHandle":
        self.form.set_field_label(self.name, label, self.form.scope)
        return self


class FormValidator(Validator):
    """Validator bound to one form scope, with submit handling."""

    def __init__(
        self,
        config: ValidatorConfig | None = None,
        scope: str = DEFAULT_SCOPE,
        **options: Any,
    ):
        super().__init__(config, **options)
        self.scope = scope

    def submit(
        self,
        on_success: Callable[[dict[str, Any]], Any] | None = None,
        on_error: Callable[[dict[str, list[str]]], Any] | None = None,
    ) -> bool:
        """Validate the form, then call ``on_success(data)`` or ``on_error(errors)``."""
        return self._finish(self.validate(self.scope), on_success, on_error)

    async def asubmit(
        self,
        on_success: Callable[[dict[str, Any]], Any] | None = None,
        on_error: Callable[[dict[str, list[str]]], Any] | None = None,
    ) -> bool:
        return self._finish(await self.avalidate(self.scope), on_success, on_error)

    def _finish(
        self,
        valid: bool,
        on_success: Callable[[dict[str, Any]], Any] | None,
        on_error: Callable[[dict[str, list[str]]], Any] | None,
    ) -> bool:
        if valid:
            if on_success is not None:
                on_success(self.get_data(self.scope))
        elif on_error is not None:
            on_error(self.get_state(self.scope).errors)
        return valid

    def field(self, name: str) -> FieldHandle:
        return FieldHandle(self, name)


def create_form_validator(
    rules: Mapping[str, RuleDefinition] | None = None,
    initial_data: Mapping[str, Any] | None = None,
    scope: str = DEFAULT_SCOPE,
    messages: Mapping[str, Any] | None = None,
    config: ValidatorConfig | None = None,
    **options: Any,
) -> FormValidator:
    """Create a form validator with rules and initial data.

    Example:
        form = create_form_validator(
            {"email": "required|email", "password": "required|min:8"},
            initial_data={"email": ""},
        )
        form.field("email").set_value("ana@example.com")
        form.submit(on_success=save, on_error=show)
    """
    form = FormValidator(config, scope=scope, **options)
    if initial_data:
        form.set_data(initial_data, scope)
    if rules:
        form.set_multiple_rules(rules, messages, scope)
    return form


class SimpleValidator:
    """Validates one value, or one mapping, against a fixed rule set."""

    def __init__(
        self,
        rules: RuleDefinition | Mapping[str, RuleDefinition],
        config: ValidatorConfig | None = None,
        **options: Any,
    ):
        self.validator = Validator(config, **options)
        self.single = isinstance(rules, (str, list, tuple))
        if self.single:
            self.validator.set_rules(SIMPLE_FIELD, rules)
        else:
            self.validator.set_multiple_rules(rules)

    def validate(self, data: Any) -> bool:
        """Validate ``data``.

        For a single rule set a non-mapping ``data`` is the value itself;
        a mapping is read for its ``value`` key.
        """
        self.validator.reset()
        if self.single:
            if isinstance(data, Mapping):
                self.validator.set_data(data)
            else:
                self.validator.set_value(SIMPLE_FIELD, data)
            return self.validator.validate_field(SIMPLE_FIELD)
        return self.validator.validate(dict(data or {}))

    def errors(self) -> ErrorBag:
        return self.validator.errors()

    def is_valid(self) -> bool:
        return self.validator.is_valid()


def create_simple_validator(
    rules: RuleDefinition | Mapping[str, RuleDefinition],
    config: ValidatorConfig | None = None,
    **options: Any,
) -> SimpleValidator:
    """Create a validator for quick checks.

    Example:
        is_adult = create_simple_validator("required|integer|min_value:18")
        is_adult.validate("21")  # True
    """
    return SimpleValidator(rules, config, **options)
