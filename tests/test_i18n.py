"""Tests for message catalogs and locale resolution."""

from __future__ import annotations

import json

import pytest
import yaml

from validly.exceptions import ConfigError
from validly.i18n import (
    DEFAULT_MESSAGE,
    I18nManager,
    MessageCatalog,
    format_field_name,
    normalize_locale,
)
from validly.i18n.messages import BUILTIN_CATALOGS


@pytest.fixture
def i18n() -> I18nManager:
    return I18nManager()


# =============================================================================
# Helpers
# =============================================================================


class TestFormatFieldName:
    @pytest.mark.parametrize("field,expected", [
        ("confirmPassword", "Confirm password"),
        ("first_name", "First name"),
        ("email", "Email"),
        ("zip-code", "Zip code"),
        ("", ""),
    ])
    def test_formats(self, field, expected):
        assert format_field_name(field) == expected


class TestNormalizeLocale:
    def test_normalizes(self):
        assert normalize_locale("pt_BR") == "pt-br"
        assert normalize_locale(" PT-br ") == "pt-br"


class TestBuiltinCatalogs:
    def test_every_locale_covers_english_keys(self):
        english = set(BUILTIN_CATALOGS["en"])
        for locale, messages in BUILTIN_CATALOGS.items():
            assert set(messages) == english, locale


# =============================================================================
# MessageCatalog
# =============================================================================


class TestMessageCatalog:
    def test_from_dict_flattens_nested(self):
        catalog = MessageCatalog.from_dict("en", {"email": {"required": "Need it"}, "min": "Short"})
        assert catalog["email.required"] == "Need it"
        assert "min" in catalog
        assert len(catalog) == 2

    def test_merge_and_extend(self):
        base = MessageCatalog.from_dict("en", {"a": "1", "b": "2"})
        merged = base.merge(MessageCatalog.from_dict("en", {"b": "3"}))
        assert merged.get("b") == "3"
        extended = base.extend({"c": "4"})
        assert extended.keys() == ["a", "b", "c"]
        assert "c" not in base

    def test_json_file(self, tmp_path):
        path = tmp_path / "pt-BR.json"
        MessageCatalog.from_dict("pt-BR", {"required": "Obrigatório"}, {"author": "qa"}).to_json(path)
        loaded = MessageCatalog.from_file(path)
        assert loaded.locale == "pt-BR"
        assert loaded["required"] == "Obrigatório"
        assert loaded.metadata == {"author": "qa"}

    def test_flat_yaml_file_uses_stem_as_locale(self, tmp_path):
        path = tmp_path / "es.yaml"
        path.write_text(yaml.dump({"phone": {"pattern": "Formato inválido"}}), encoding="utf-8")
        loaded = MessageCatalog.from_file(path)
        assert loaded.locale == "es"
        assert loaded["phone.pattern"] == "Formato inválido"

    def test_unsupported_suffix(self, tmp_path):
        with pytest.raises(ConfigError, match="Unsupported"):
            MessageCatalog.from_file(tmp_path / "messages.txt")

    def test_bad_content(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            MessageCatalog.from_json(path)

    def test_to_json_returns_text(self):
        text = MessageCatalog.from_dict("en", {"a": "b"}).to_json()
        assert json.loads(text)["messages"] == {"a": "b"}


# =============================================================================
# I18nManager
# =============================================================================


class TestLocales:
    def test_defaults(self, i18n):
        assert i18n.get_locale() == "en"
        assert i18n.get_fallback_locale() == "en"
        assert {"en", "pt-BR", "es"} <= set(i18n.available_locales())

    def test_set_locale_keeps_display_form(self, i18n):
        i18n.set_locale("pt_br")
        assert i18n.get_locale() == "pt-BR"

    def test_invalid_locale(self, i18n):
        with pytest.raises(ConfigError):
            i18n.set_locale("")
        with pytest.raises(ConfigError):
            i18n.set_locale(None)

    def test_has_locale(self, i18n):
        assert i18n.has_locale("PT-BR")
        assert i18n.has_locale("pt")
        assert i18n.has_locale("es-MX")
        assert not i18n.has_locale("fr")
        assert not i18n.has_locale("")


class TestGetMessage:
    def test_default_english(self, i18n):
        assert i18n.get_message("required", "email") == "The Email field is required."

    def test_params_interpolated(self, i18n):
        assert i18n.get_message("min", "password", {"min": 8}) == (
            "The Password field must be at least 8 characters."
        )

    def test_whole_floats_rendered_as_integers(self, i18n):
        message = i18n.get_message("between", "age", {"min": 1.0, "max": 2.5})
        assert message == "The Age field must be between 1 and 2.5."

    def test_list_params_joined(self, i18n):
        message = i18n.get_message("one_of", "color", {"values": ["red", "blue"]})
        assert message == "The Color field must be one of: red, blue."

    def test_label_overrides_field(self, i18n):
        assert i18n.get_message("required", "email", label="E-mail") == "The E-mail field is required."

    def test_target_locale(self, i18n):
        i18n.set_locale("pt-BR")
        assert i18n.get_message("required", "email") == "O campo Email é obrigatório."

    def test_locale_argument(self, i18n):
        assert i18n.get_message("required", "nome", locale="es") == "El campo Nome es obligatorio."

    def test_base_language_and_alias(self, i18n):
        i18n.set_locale("es-MX")
        assert i18n.get_message("required", "x").startswith("El campo")
        i18n.set_locale("pt")
        assert i18n.get_message("required", "x").startswith("O campo")

    def test_field_specific_key_wins(self, i18n, pt_br_translations):
        i18n.add_messages("pt-BR", pt_br_translations)
        i18n.set_locale("pt-BR")
        assert i18n.get_message("required", "email") == "Informe seu e-mail"
        assert i18n.get_message("required", "name") == "O campo Name é obrigatório."

    def test_rule_fallback_before_fallback_locale(self, i18n):
        i18n.set_locale("pt-BR")
        message = i18n.get_message("cpf", "doc", fallback_message="CPF {field} inválido")
        assert message == "CPF Doc inválido"

    def test_fallback_locale_used_when_target_missing(self, i18n):
        i18n.add_messages("en", {"cpf": "Bad CPF in {field}"})
        i18n.set_locale("fr")
        assert i18n.get_message("cpf", "doc") == "Bad CPF in Doc"

    def test_default_message(self, i18n):
        assert i18n.get_message("unknown", "doc") == DEFAULT_MESSAGE.format(field="Doc")

    def test_unknown_placeholders_kept(self, i18n):
        assert i18n.format_message("{field} needs {thing}", "x") == "X needs {thing}"


class TestCatalogMutation:
    def test_add_messages_creates_locale(self, i18n):
        i18n.add_messages("fr", {"required": "Le champ {field} est obligatoire."})
        assert i18n.has_locale("fr")
        assert i18n.get_message("required", "nom", locale="fr") == "Le champ Nom est obligatoire."

    def test_set_messages_replace(self, i18n):
        i18n.set_messages("es", {"required": "Falta {field}"}, merge=False)
        assert i18n.get_messages("es") == {"required": "Falta {field}"}

    def test_load_translations_with_overrides(self, i18n, pt_br_translations):
        i18n.set_locale("pt-BR")
        i18n.load_translations(pt_br_translations, {"email.required": "E-mail obrigatório"})
        messages = i18n.get_messages()
        assert messages["cpf"] == pt_br_translations["cpf"]
        assert messages["email.required"] == "E-mail obrigatório"
        assert messages["required"] == "O campo {field} é obrigatório."

    def test_load_translations_from_catalog(self, i18n):
        i18n.load_translations(MessageCatalog.from_dict("es", {"cpf": "CPF inválido"}))
        assert i18n.get_messages("es")["cpf"] == "CPF inválido"
        assert "cpf" not in i18n.get_messages("en")

    def test_clear_restores_builtins(self, i18n):
        i18n.add_messages("en", {"required": "changed"})
        i18n.add_messages("fr", {"required": "x"})
        i18n.clear()
        assert i18n.get_messages("en")["required"] == "The {field} field is required."
        assert not i18n.has_locale("fr")

    def test_get_catalog(self, i18n):
        catalog = i18n.get_catalog("pt-BR")
        assert catalog.locale == "pt-BR"
        assert "required" in catalog

    def test_managers_are_independent(self):
        first, second = I18nManager(), I18nManager()
        first.add_messages("en", {"required": "changed"})
        assert second.get_messages("en")["required"] != "changed"


class TestListeners:
    def test_notified_on_change(self, i18n):
        calls = []
        unsubscribe = i18n.subscribe(lambda: calls.append(1))
        i18n.set_locale("es")
        i18n.add_messages("es", {"a": "b"})
        unsubscribe()
        i18n.set_locale("en")
        assert len(calls) == 2

    def test_failing_listener_is_logged(self, i18n, caplog):
        def broken():
            raise RuntimeError("boom")

        i18n.subscribe(broken)
        i18n.set_locale("es")
        assert i18n.get_locale() == "es"
        assert "listener" in caplog.text
