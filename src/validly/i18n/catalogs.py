"""Message catalogs.

A catalog maps message keys to templates for one locale. Keys are either a
rule name (``required``) or a field-specific key (``email.required``).

Catalogs can be:
- Built from dictionaries
- Loaded from JSON or YAML files
- Merged or extended into new catalogs
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml

from validly.exceptions import ConfigError


@dataclass
class MessageCatalog:
    """A collection of validation messages for a specific locale.

    Example:
        catalog = MessageCatalog.from_dict("pt-BR", {
            "required": "O campo {field} é obrigatório.",
            "cpf.pattern": "CPF deve estar no formato 000.000.000-00",
        })

        catalog = MessageCatalog.from_file(Path("messages/pt-BR.yaml"))
    """

    locale: str
    messages: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.messages.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self.messages[key]

    def __contains__(self, key: object) -> bool:
        return key in self.messages

    def __len__(self) -> int:
        return len(self.messages)

    def __iter__(self) -> Iterator[str]:
        return iter(self.messages)

    def keys(self) -> list[str]:
        return list(self.messages.keys())

    def items(self) -> list[tuple[str, str]]:
        return list(self.messages.items())

    def merge(self, other: "MessageCatalog") -> "MessageCatalog":
        """Merge with another catalog (other takes precedence).

        Args:
            other: Another catalog to merge with

        Returns:
            New merged catalog
        """
        return MessageCatalog(
            locale=self.locale,
            messages={**self.messages, **other.messages},
            metadata={**self.metadata, **other.metadata},
        )

    def extend(self, messages: Mapping[str, str]) -> "MessageCatalog":
        """Return a new catalog with additional messages."""
        return MessageCatalog(
            locale=self.locale,
            messages={**self.messages, **messages},
            metadata=self.metadata.copy(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "locale": self.locale,
            "messages": self.messages.copy(),
            "metadata": self.metadata.copy(),
        }

    def to_json(self, path: Path | str | None = None) -> str:
        """Serialize the catalog, writing it to ``path`` when given."""
        text = json.dumps(self.to_dict(), ensure_ascii=False, indent=2)
        if path is not None:
            Path(path).write_text(text, encoding="utf-8")
        return text

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(
        cls,
        locale: str,
        messages: Mapping[str, Any],
        metadata: Mapping[str, Any] | None = None,
    ) -> "MessageCatalog":
        """Create a catalog from a flat dictionary.

        Nested dictionaries are flattened into dotted keys, so
        ``{"email": {"required": "..."}}`` becomes ``email.required``.
        """
        return cls(
            locale=locale,
            messages=_flatten(messages),
            metadata=dict(metadata or {}),
        )

    @classmethod
    def from_json(cls, path: Path | str, locale: str | None = None) -> "MessageCatalog":
        """Load a catalog from a JSON file."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot read message catalog {path}: {e}") from e
        return cls._from_data(data, locale, path)

    @classmethod
    def from_yaml(cls, path: Path | str, locale: str | None = None) -> "MessageCatalog":
        """Load a catalog from a YAML file."""
        path = Path(path)
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read message catalog {path}: {e}") from e
        return cls._from_data(data, locale, path)

    @classmethod
    def from_file(cls, path: Path | str, locale: str | None = None) -> "MessageCatalog":
        """Load a catalog from a JSON or YAML file, chosen by suffix."""
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix in (".yaml", ".yml"):
            return cls.from_yaml(path, locale)
        if suffix == ".json":
            return cls.from_json(path, locale)
        raise ConfigError(f"Unsupported catalog format: {suffix or path.name}")

    @classmethod
    def _from_data(cls, data: Any, locale: str | None, path: Path) -> "MessageCatalog":
        if not isinstance(data, dict):
            raise ConfigError(f"Message catalog {path} must contain a mapping")

        # Both a flat message dict and the full catalog format are accepted
        if isinstance(data.get("messages"), dict):
            messages = data["messages"]
            metadata = data.get("metadata") or {}
            locale = locale or data.get("locale")
        else:
            messages = data
            metadata = {}

        return cls.from_dict(locale or path.stem, messages, metadata)


def _flatten(messages: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in messages.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, f"{full_key}."))
        else:
            flat[full_key] = str(value)
    return flat
