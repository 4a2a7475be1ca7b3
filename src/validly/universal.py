"""Process-wide validator and the ``validator`` proxy.

Example:
    from validly import validator

    validator.set_multiple_rules({"email": "required|email"}, scope="signup")
    validator.validate("signup", {"email": "ana@example.com"})
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Mapping

from validly.core import Validator
from validly.errors import ErrorBag
from validly.i18n import MessageCatalog
from validly.rules import Rule
from validly.types import ALL_SCOPES, DEFAULT_SCOPE, FormData, RuleDefinition

_global_validator: Validator | None = None
_lock = threading.Lock()


def get_global_validator() -> Validator:
    """Return the global validator, creating it on first use."""
    global _global_validator
    if _global_validator is None:
        with _lock:
            if _global_validator is None:
                _global_validator = Validator()
    return _global_validator


def set_global_validator(instance: Validator) -> Validator:
    global _global_validator
    with _lock:
        _global_validator = instance
    return instance


def reset_global_validator() -> None:
    """Drop the global validator; the next access creates a fresh one."""
    global _global_validator
    with _lock:
        _global_validator = None


class GlobalValidatorProxy:
    """Forwards calls to whichever validator is currently global."""

    @property
    def instance(self) -> Validator:
        return get_global_validator()

    def validate(
        self,
        scope_or_data: str | Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> bool:
        return self.instance.validate(scope_or_data or DEFAULT_SCOPE, data)

    async def avalidate(
        self,
        scope_or_data: str | Mapping[str, Any] | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> bool:
        return await self.instance.avalidate(scope_or_data or DEFAULT_SCOPE, data)

    def set_rules(
        self,
        field_name: str,
        rules: RuleDefinition,
        messages: Mapping[str, Any] | None = None,
        scope: str = DEFAULT_SCOPE,
    ) -> Validator:
        return self.instance.set_rules(field_name, rules, messages, scope)

    def set_multiple_rules(
        self,
        rules: Mapping[str, RuleDefinition],
        messages: Mapping[str, Any] | None = None,
        scope: str = DEFAULT_SCOPE,
    ) -> Validator:
        return self.instance.set_multiple_rules(rules, messages, scope)

    def get_data(self, scope: str = DEFAULT_SCOPE) -> FormData:
        return self.instance.get_data(scope)

    def get_errors(self) -> dict[str, list[str]]:
        return self.instance.get_errors()

    def errors(self) -> ErrorBag:
        return self.instance.errors()

    def is_valid(self) -> bool:
        return self.instance.is_valid()

    def reset(self, scope: str | None = None) -> Validator:
        return self.instance.reset(scope or ALL_SCOPES)

    def set_locale(self, locale: str) -> Validator:
        return self.instance.set_locale(locale)

    def get_locale(self) -> str:
        return self.instance.get_locale()

    def load_translations(
        self,
        translations: Mapping[str, Any] | MessageCatalog | None,
        overrides: Mapping[str, Any] | None = None,
        locale: str | None = None,
    ) -> Validator:
        return self.instance.load_translations(translations, overrides, locale)

    def set_messages(
        self,
        locale: str,
        messages: Mapping[str, Any] | MessageCatalog,
        merge: bool = True,
    ) -> Validator:
        return self.instance.set_messages(locale, messages, merge)

    def add_messages(self, locale: str, messages: Mapping[str, Any] | MessageCatalog) -> Validator:
        return self.instance.add_messages(locale, messages)

    def extend(
        self,
        name: str,
        rule: type[Rule] | Callable[..., Any],
        message: str | None = None,
    ) -> Validator:
        return self.instance.extend(name, rule, message)

    def __repr__(self) -> str:
        return f"<global {self.instance!r}>"


validator = GlobalValidatorProxy()
