"""Tests for validator configuration and schema files."""

from __future__ import annotations

import json

import pytest
import yaml

from validly import ValidationSchema, ValidatorConfig, load_schema
from validly.exceptions import ConfigError

SCHEMA = {
    "locale": "pt-BR",
    "scope": "signup",
    "config": {"stop_on_first_failure": True},
    "rules": {
        "email": "required|email",
        "age": {"required": True, "integer": True, "min_value": 18},
    },
    "messages": {"email": {"required": "Informe seu e-mail"}},
    "labels": {"age": "Idade"},
    "translations": {"pt-BR": {"age.min_value": "Você precisa ter pelo menos {min} anos"}},
}


class TestValidatorConfig:
    def test_defaults(self):
        config = ValidatorConfig()
        assert config.locale == "en"
        assert config.log_errors is True
        assert config.stop_on_first_failure is False

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ValidatorConfig().locale = "es"

    def test_replace(self):
        config = ValidatorConfig().replace(locale="es")
        assert config.locale == "es"

    def test_from_kwargs_ignores_unknown(self):
        config = ValidatorConfig.from_kwargs(strict_rules=True, colour="blue")
        assert config.strict_rules is True

    @pytest.mark.parametrize("locale", ["", "  ", None, 3])
    def test_invalid_locale(self, locale):
        with pytest.raises(ConfigError):
            ValidatorConfig(locale=locale)

    def test_to_dict(self):
        assert ValidatorConfig().to_dict()["fallback_locale"] == "en"


class TestValidationSchema:
    def test_from_dict(self):
        schema = ValidationSchema.from_dict(SCHEMA)
        assert schema.scope == "signup"
        assert "email" in schema
        assert schema.get_field_names() == ["email", "age"]

    @pytest.mark.parametrize("data", [
        [],
        {},
        {"rules": {}},
        {"rules": "required"},
        {"rules": {"a": "required"}, "labels": ["x"]},
    ])
    def test_invalid(self, data):
        with pytest.raises(ConfigError):
            ValidationSchema.from_dict(data)

    def test_build_validator(self):
        validator = ValidationSchema.from_dict(SCHEMA).build_validator()
        assert validator.get_locale() == "pt-BR"
        assert validator.get_global_config().stop_on_first_failure is True

        validator.validate("signup", {"email": "", "age": "16"})
        errors = validator.get_state("signup").errors
        assert errors["signup.email"] == ["Informe seu e-mail"]
        assert errors["signup.age"] == ["Você precisa ter pelo menos 18 anos"]

    def test_build_validator_override(self):
        validator = ValidationSchema.from_dict(SCHEMA).build_validator(locale="es")
        assert validator.get_global_config().locale == "es"
        assert validator.get_locale() == "es"

    def test_to_dict_round_trip(self):
        schema = ValidationSchema.from_dict(SCHEMA)
        assert ValidationSchema.from_dict(schema.to_dict()) == schema


class TestSchemaFiles:
    def test_yaml(self, tmp_path):
        path = tmp_path / "schema.yaml"
        path.write_text(yaml.dump(SCHEMA, allow_unicode=True), encoding="utf-8")
        schema = load_schema(path)
        assert schema.locale == "pt-BR"
        assert schema.labels == {"age": "Idade"}

    def test_json(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps(SCHEMA), encoding="utf-8")
        assert load_schema(path).rules == SCHEMA["rules"]

    def test_save_and_load(self, tmp_path):
        schema = ValidationSchema.from_dict(SCHEMA)
        for name in ("schema.yml", "schema.json"):
            schema.save(tmp_path / name)
            assert load_schema(tmp_path / name) == schema

    def test_missing(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_schema(tmp_path / "missing.yaml")

    def test_unparsable(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("rules: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError, match="Cannot read"):
            load_schema(path)
