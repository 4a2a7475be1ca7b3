"""Localized validation messages.

This module holds the built-in message catalogs and the ``I18nManager``
that resolves and formats messages per locale.

Resolution order for ``get_message(rule, field)``:
1. Target locale, then its base language: ``field.rule``, then ``rule``
2. The rule's registered fallback message
3. Fallback locale: ``field.rule``, then ``rule``
4. ``DEFAULT_MESSAGE``
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Any, Mapping

from validly.exceptions import ConfigError
from validly.i18n.catalogs import MessageCatalog
from validly.types import Listener, Unsubscribe

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "The {field} field is invalid."

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

# Default English messages
_ENGLISH_MESSAGES: dict[str, str] = {
    # Basic
    "required": "The {field} field is required.",
    "email": "The {field} field must be a valid email address.",
    "confirmed": "The {field} field confirmation does not match.",

    # Size
    "min": "The {field} field must be at least {min} characters.",
    "max": "The {field} field may not be greater than {max} characters.",
    "between": "The {field} field must be between {min} and {max}.",
    "length": "The {field} field must be {length} characters long.",

    # Numeric
    "numeric": "The {field} field must be a number.",
    "integer": "The {field} field must be an integer.",
    "decimal": "The {field} field must be a valid decimal number.",
    "digits": "The {field} field must be {length} digits.",
    "min_value": "The {field} field must be at least {min}.",
    "max_value": "The {field} field may not be greater than {max}.",

    # Format
    "pattern": "The {field} field format is invalid.",
    "alpha": "The {field} field may only contain letters.",
    "alpha_num": "The {field} field may only contain letters and numbers.",
    "alpha_dash": "The {field} field may only contain letters, numbers, dashes and underscores.",
    "alpha_spaces": "The {field} field may only contain letters and spaces.",
    "url": "The {field} field must be a valid URL.",
    "one_of": "The {field} field must be one of: {values}.",
    "ip": "The {field} field must be a valid IP address.",
    "json": "The {field} field must be a valid JSON string.",
}

# Brazilian Portuguese messages
_PORTUGUESE_BR_MESSAGES: dict[str, str] = {
    "required": "O campo {field} é obrigatório.",
    "email": "O campo {field} deve ser um endereço de email válido.",
    "confirmed": "A confirmação do campo {field} não confere.",

    "min": "O campo {field} deve ter pelo menos {min} caracteres.",
    "max": "O campo {field} não pode exceder {max} caracteres.",
    "between": "O campo {field} deve estar entre {min} e {max}.",
    "length": "O campo {field} deve ter {length} caracteres.",

    "numeric": "O campo {field} deve ser um número.",
    "integer": "O campo {field} deve ser um número inteiro.",
    "decimal": "O campo {field} deve ser um número decimal válido.",
    "digits": "O campo {field} deve ter {length} dígitos.",
    "min_value": "O campo {field} deve ser no mínimo {min}.",
    "max_value": "O campo {field} não pode ser maior que {max}.",

    "pattern": "O formato do campo {field} é inválido.",
    "alpha": "O campo {field} pode conter apenas letras.",
    "alpha_num": "O campo {field} pode conter apenas letras e números.",
    "alpha_dash": "O campo {field} pode conter apenas letras, números, traços e underscores.",
    "alpha_spaces": "O campo {field} pode conter apenas letras e espaços.",
    "url": "O campo {field} deve ser uma URL válida.",
    "one_of": "O campo {field} deve ser um dos seguintes valores: {values}.",
    "ip": "O campo {field} deve ser um endereço IP válido.",
    "json": "O campo {field} deve ser uma string JSON válida.",
}

# Spanish messages
_SPANISH_MESSAGES: dict[str, str] = {
    "required": "El campo {field} es obligatorio.",
    "email": "El campo {field} debe ser una dirección de correo válida.",
    "confirmed": "La confirmación del campo {field} no coincide.",

    "min": "El campo {field} debe tener al menos {min} caracteres.",
    "max": "El campo {field} no puede tener más de {max} caracteres.",
    "between": "El campo {field} debe estar entre {min} y {max}.",
    "length": "El campo {field} debe tener {length} caracteres.",

    "numeric": "El campo {field} debe ser un número.",
    "integer": "El campo {field} debe ser un número entero.",
    "decimal": "El campo {field} debe ser un número decimal válido.",
    "digits": "El campo {field} debe tener {length} dígitos.",
    "min_value": "El campo {field} debe ser al menos {min}.",
    "max_value": "El campo {field} no puede ser mayor que {max}.",

    "pattern": "El formato del campo {field} no es válido.",
    "alpha": "El campo {field} solo puede contener letras.",
    "alpha_num": "El campo {field} solo puede contener letras y números.",
    "alpha_dash": "El campo {field} solo puede contener letras, números, guiones y guiones bajos.",
    "alpha_spaces": "El campo {field} solo puede contener letras y espacios.",
    "url": "El campo {field} debe ser una URL válida.",
    "one_of": "El campo {field} debe ser uno de: {values}.",
    "ip": "El campo {field} debe ser una dirección IP válida.",
    "json": "El campo {field} debe ser una cadena JSON válida.",
}

BUILTIN_CATALOGS: dict[str, dict[str, str]] = {
    "en": _ENGLISH_MESSAGES,
    "pt-BR": _PORTUGUESE_BR_MESSAGES,
    "es": _SPANISH_MESSAGES,
}

# Short codes that resolve to a regional catalog
LOCALE_ALIASES: dict[str, str] = {
    "pt": "pt-br",
}


def normalize_locale(locale_code: str) -> str:
    """Normalize a locale code: ``pt_BR`` and ``PT-br`` both become ``pt-br``."""
    return locale_code.strip().replace("_", "-").lower()


def format_field_name(field: str) -> str:
    """Turn a field name into a readable label.

    Example:
        format_field_name("confirmPassword")  # "Confirm password"
        format_field_name("first_name")       # "First name"
    """
    if not field:
        return ""
    words = re.sub(r"(?<=[a-z0-9])([A-Z])", r" \1", field)
    words = re.sub(r"[_\-.]+", " ", words).strip().lower()
    return words[:1].upper() + words[1:]


def _render(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple, set, frozenset)):
        return ", ".join(_render(v) for v in value)
    return str(value)


class I18nManager:
    """Per-validator message catalogs with locale resolution.

    Catalog mutation is guarded by a lock. Listeners are notified after every
    locale or catalog change.

    Example:
        i18n = I18nManager()
        i18n.set_locale("pt-BR")
        i18n.get_message("required", "email")
        # "O campo Email é obrigatório."
    """

    def __init__(self, locale: str = "en", fallback_locale: str = "en"):
        self._lock = threading.RLock()
        self._catalogs: dict[str, dict[str, str]] = {}
        self._display: dict[str, str] = {}
        self._listeners: list[Listener] = []
        self._load_builtin_catalogs()
        self._locale = normalize_locale(locale)
        self._fallback_locale = normalize_locale(fallback_locale)

    def _load_builtin_catalogs(self) -> None:
        for locale_code, messages in BUILTIN_CATALOGS.items():
            key = normalize_locale(locale_code)
            self._catalogs[key] = dict(messages)
            self._display.setdefault(key, locale_code)

    # ------------------------------------------------------------------
    # Locale
    # ------------------------------------------------------------------

    def set_locale(self, locale_code: str) -> None:
        """Set the active locale.

        Args:
            locale_code: Locale code (e.g., "en", "pt-BR", "pt_br")
        """
        key = self._checked_locale(locale_code)
        with self._lock:
            self._locale = key
        self._notify()

    def get_locale(self) -> str:
        """Get the active locale in its display form (e.g., "pt-BR")."""
        return self._display.get(self._locale, self._locale)

    def set_fallback_locale(self, locale_code: str) -> None:
        key = self._checked_locale(locale_code)
        with self._lock:
            self._fallback_locale = key
        self._notify()

    def get_fallback_locale(self) -> str:
        return self._display.get(self._fallback_locale, self._fallback_locale)

    def has_locale(self, locale_code: str) -> bool:
        if not isinstance(locale_code, str) or not locale_code.strip():
            return False
        return any(key in self._catalogs for key in self._candidates(normalize_locale(locale_code)))

    def available_locales(self) -> list[str]:
        return [self._display.get(key, key) for key in self._catalogs]

    @staticmethod
    def _checked_locale(locale_code: Any) -> str:
        if not isinstance(locale_code, str) or not locale_code.strip():
            raise ConfigError(f"Locale must be a non-empty string, got {locale_code!r}")
        return normalize_locale(locale_code)

    def _candidates(self, key: str) -> list[str]:
        """Locales to search for ``key``: itself, base language, alias."""
        candidates = [key]
        if "-" in key:
            candidates.append(key.split("-", 1)[0])
        alias = LOCALE_ALIASES.get(key)
        if alias:
            candidates.append(alias)
        return candidates

    # ------------------------------------------------------------------
    # Catalog mutation
    # ------------------------------------------------------------------

    def add_messages(self, locale_code: str, messages: Mapping[str, Any] | MessageCatalog) -> None:
        """Merge messages into a locale's catalog, creating it if needed."""
        self._store(locale_code, messages, merge=True)
        self._notify()

    def set_messages(
        self,
        locale_code: str,
        messages: Mapping[str, Any] | MessageCatalog,
        merge: bool = True,
    ) -> None:
        """Set messages for a locale; ``merge=False`` replaces the catalog."""
        self._store(locale_code, messages, merge=merge)
        self._notify()

    def load_translations(
        self,
        translations: Mapping[str, Any] | MessageCatalog | None,
        overrides: Mapping[str, Any] | None = None,
        locale: str | None = None,
    ) -> None:
        """Load translations, then overrides, into one locale.

        The target is ``locale``, else the catalog's own locale for a
        ``MessageCatalog``, else the active locale.
        """
        if locale is None:
            if isinstance(translations, MessageCatalog):
                locale = translations.locale
            else:
                locale = self.get_locale()

        if translations:
            self._store(locale, translations, merge=True)
        if overrides:
            self._store(locale, overrides, merge=True)
        self._notify()

    def _store(
        self,
        locale_code: str,
        messages: Mapping[str, Any] | MessageCatalog,
        merge: bool,
    ) -> None:
        key = self._checked_locale(locale_code)
        if isinstance(messages, MessageCatalog):
            flat = dict(messages.messages)
        else:
            flat = MessageCatalog.from_dict(locale_code, messages or {}).messages

        with self._lock:
            self._display.setdefault(key, locale_code.strip())
            if merge and key in self._catalogs:
                self._catalogs[key].update(flat)
            else:
                self._catalogs[key] = flat
        logger.debug("Stored %d messages for locale '%s'", len(flat), locale_code)

    def clear(self) -> None:
        """Drop all custom messages and reload the built-in catalogs."""
        with self._lock:
            self._catalogs.clear()
            self._display.clear()
            self._load_builtin_catalogs()
        self._notify()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_messages(self, locale_code: str | None = None) -> dict[str, str]:
        """Return a copy of a locale's catalog (active locale by default)."""
        key = normalize_locale(locale_code) if locale_code else self._locale
        for candidate in self._candidates(key):
            if candidate in self._catalogs:
                return dict(self._catalogs[candidate])
        return {}

    def get_catalog(self, locale_code: str | None = None) -> MessageCatalog:
        locale_code = locale_code or self.get_locale()
        return MessageCatalog.from_dict(locale_code, self.get_messages(locale_code))

    def get_message(
        self,
        rule: str,
        field: str,
        params: Mapping[str, Any] | None = None,
        locale: str | None = None,
        fallback_message: str | None = None,
        label: str | None = None,
    ) -> str:
        """Resolve and format the message for a failed rule.

        Args:
            rule: Rule name
            field: Field name
            params: Values for ``{placeholder}`` interpolation
            locale: Locale override (active locale by default)
            fallback_message: The rule's registered fallback message
            label: Display name used for ``{field}``

        Returns:
            Formatted message
        """
        target = normalize_locale(locale) if locale else self._locale
        template = self._lookup(target, rule, field)
        if template is None:
            template = fallback_message
        if template is None:
            template = self._lookup(self._fallback_locale, rule, field)
        if template is None:
            template = DEFAULT_MESSAGE
        return self.format_message(template, field, params, label=label)

    def _lookup(self, key: str, rule: str, field: str) -> str | None:
        with self._lock:
            for candidate in self._candidates(key):
                catalog = self._catalogs.get(candidate)
                if not catalog:
                    continue
                template = catalog.get(f"{field}.{rule}") or catalog.get(rule)
                if template:
                    return template
        return None

    def format_message(
        self,
        template: str,
        field: str,
        params: Mapping[str, Any] | None = None,
        label: str | None = None,
    ) -> str:
        """Replace ``{name}`` placeholders; unknown placeholders are kept."""
        replacements: dict[str, Any] = dict(params or {})
        replacements["field"] = label or format_field_name(field)

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name not in replacements or replacements[name] is None:
                return match.group(0)
            return _render(replacements[name])

        return _PLACEHOLDER.sub(substitute, template)

    format_field_name = staticmethod(format_field_name)

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
                logger.warning("i18n listener %r failed", listener, exc_info=True)

    def __repr__(self) -> str:
        return f"I18nManager(locale={self.get_locale()!r}, locales={self.available_locales()})"
