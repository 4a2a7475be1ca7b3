"""Internationalized validation messages.

Example:
    from validly.i18n import I18nManager, MessageCatalog

    i18n = I18nManager()
    i18n.load_translations(MessageCatalog.from_dict("pt-BR", {
        "phone.pattern": "Telefone deve estar no formato (00) 00000-0000",
    }))
    i18n.set_locale("pt-BR")
"""

from validly.i18n.catalogs import MessageCatalog
from validly.i18n.messages import (
    BUILTIN_CATALOGS,
    DEFAULT_MESSAGE,
    LOCALE_ALIASES,
    I18nManager,
    format_field_name,
    normalize_locale,
)

__all__ = [
    "BUILTIN_CATALOGS",
    "DEFAULT_MESSAGE",
    "LOCALE_ALIASES",
    "I18nManager",
    "MessageCatalog",
    "format_field_name",
    "normalize_locale",
]
