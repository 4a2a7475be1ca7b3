"""Validator configuration and declarative validation schemas.

A schema file describes rules, messages, labels and translations for a set
of fields, in YAML or JSON:

    locale: pt-BR
    config:
      stop_on_first_failure: true
    rules:
      email: required|email
      age: {required: true, integer: true, min_value: 18}
    messages:
      email:
        required: Informe seu e-mail
    labels:
      email: E-mail
    translations:
      pt-BR:
        age.min_value: Você precisa ter pelo menos {min} anos
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from validly.exceptions import ConfigError
from validly.types import DEFAULT_SCOPE

if TYPE_CHECKING:
    from validly.core import Validator


@dataclass(frozen=True)
class ValidatorConfig:
    """Immutable configuration for validators.

    Attributes:
        locale: Active message locale
        fallback_locale: Locale searched when the active one has no message
        stop_on_first_failure: Stop a field after its first failing rule
        validate_empty_fields: Run non-required rules on empty optional fields
        strict_rules: Raise UnknownRuleError instead of ignoring unknown rules
        log_errors: Log exceptions raised by rules
    """

    locale: str = "en"
    fallback_locale: str = "en"
    stop_on_first_failure: bool = False
    validate_empty_fields: bool = False
    strict_rules: bool = False
    log_errors: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        for name in ("locale", "fallback_locale"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"{name} must be a non-empty string, got {value!r}")

    def replace(self, **kwargs: Any) -> "ValidatorConfig":
        """Create a new config with updated values."""
        current = asdict(self)
        current.update(kwargs)
        return ValidatorConfig(**current)

    @classmethod
    def from_kwargs(cls, **kwargs: Any) -> "ValidatorConfig":
        """Create config from kwargs, ignoring unknown keys."""
        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in kwargs.items() if k in valid_fields}
        return cls(**filtered)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ValidationSchema:
    """Rules, messages, labels and translations for a set of fields."""

    rules: dict[str, Any] = field(default_factory=dict)
    messages: dict[str, Any] = field(default_factory=dict)
    labels: dict[str, str] = field(default_factory=dict)
    translations: dict[str, dict[str, Any]] = field(default_factory=dict)
    locale: str | None = None
    scope: str = DEFAULT_SCOPE
    config: dict[str, Any] = field(default_factory=dict)

    def __contains__(self, field_name: str) -> bool:
        return field_name in self.rules

    def __iter__(self):
        return iter(self.rules)

    def get_field_names(self) -> list[str]:
        return list(self.rules.keys())

    def validator_config(self, **overrides: Any) -> ValidatorConfig:
        options = {**self.config, **overrides}
        if self.locale and "locale" not in overrides:
            options["locale"] = self.locale
        return ValidatorConfig.from_kwargs(**options)

    def apply(self, validator: "Validator") -> "Validator":
        """Load translations, locale, labels and rules into a validator."""
        for locale_code, catalog in self.translations.items():
            validator.add_messages(locale_code, catalog)
        if self.locale:
            validator.set_locale(self.locale)
        for field_name, label in self.labels.items():
            validator.set_field_label(field_name, label, scope=self.scope)
        validator.set_multiple_rules(self.rules, self.messages or None, scope=self.scope)
        return validator

    def build_validator(self, **overrides: Any) -> "Validator":
        """Create a new validator configured from this schema."""
        from validly.core import Validator

        validator = self.apply(Validator(self.validator_config(**overrides)))
        # An explicit locale beats the schema's
        if overrides.get("locale"):
            validator.set_locale(overrides["locale"])
        return validator

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"scope": self.scope, "rules": self.rules}
        if self.locale:
            result["locale"] = self.locale
        for name in ("config", "messages", "labels", "translations"):
            value = getattr(self, name)
            if value:
                result[name] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ValidationSchema":
        if not isinstance(data, dict):
            raise ConfigError("Validation schema must be a mapping")
        rules = data.get("rules")
        if not isinstance(rules, dict) or not rules:
            raise ConfigError("Validation schema needs a non-empty 'rules' mapping")
        for name in ("messages", "labels", "translations", "config"):
            if not isinstance(data.get(name) or {}, dict):
                raise ConfigError(f"Validation schema '{name}' must be a mapping")
        return cls(
            rules=rules,
            messages=data.get("messages") or {},
            labels=data.get("labels") or {},
            translations=data.get("translations") or {},
            locale=data.get("locale"),
            scope=data.get("scope") or DEFAULT_SCOPE,
            config=data.get("config") or {},
        )

    def save(self, path: str | Path) -> None:
        """Save schema to a YAML or JSON file, chosen by suffix."""
        path = Path(path)
        data = self.to_dict()
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                json.dump(data, f, ensure_ascii=False, indent=2)
            else:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_schema(path: str | Path) -> ValidationSchema:
    """Load a validation schema from a YAML or JSON file.

    Raises:
        ConfigError: If the file is missing, unparsable or malformed
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Schema file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read schema {path}: {e}") from e

    return ValidationSchema.from_dict(data)
