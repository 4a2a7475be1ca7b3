"""Error bag holding validation failures per field key."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterator

from validly.types import DEFAULT_SCOPE, Listener, Unsubscribe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldError:
    """A single failed rule on a field.

    Attributes:
        key: Error-bag key (``field``, or ``scope.field`` outside the default scope)
        field: Field name
        scope: Scope the field belongs to
        rule: Name of the failing rule, None for manually added errors
        message: Rendered message
        params: Rule params used to render the message
        exception: Exception raised by the rule, if any
        fallback_message: The rule's own message, used when no catalog has one
    """

    key: str
    field: str
    scope: str
    rule: str | None
    message: str
    params: dict[str, Any] = field(default_factory=dict)
    exception: BaseException | None = None
    fallback_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "key": self.key,
            "field": self.field,
            "scope": self.scope,
            "rule": self.rule,
            "message": self.message,
        }
        if self.params:
            result["params"] = {k: _jsonable(v) for k, v in self.params.items()}
        if self.exception is not None:
            result["exception"] = repr(self.exception)
        return result


def _jsonable(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(v) for v in value]
    return str(value)


class ErrorBag:
    """Ordered store of validation errors keyed by field key.

    Example:
        bag = ErrorBag()
        bag.add("email", "The Email field is required.", "required")
        bag.first("email")   # "The Email field is required."
        bag.all_by_field()   # {"email": ["The Email field is required."]}
    """

    def __init__(self) -> None:
        self._errors: dict[str, list[FieldError]] = {}
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(
        self,
        key: str,
        message: str,
        rule: str | None = None,
        *,
        field: str | None = None,
        scope: str | None = None,
        params: dict[str, Any] | None = None,
        exception: BaseException | None = None,
    ) -> FieldError:
        """Add an error message for a key."""
        error = FieldError(
            key=key,
            field=field or key,
            scope=scope or DEFAULT_SCOPE,
            rule=rule,
            message=message,
            params=dict(params or {}),
            exception=exception,
        )
        self._errors.setdefault(key, []).append(error)
        self._notify()
        return error

    def add_error(self, error: FieldError) -> None:
        self._errors.setdefault(error.key, []).append(error)
        self._notify()

    def remove(self, key: str) -> None:
        """Remove all errors for a key."""
        if self._errors.pop(key, None) is not None:
            self._notify()

    def remove_scope(self, scope: str) -> None:
        """Remove all errors recorded for fields of a scope."""
        keys = self.scope_keys(scope)
        for key in keys:
            del self._errors[key]
        if keys:
            self._notify()

    def clear(self) -> None:
        if self._errors:
            self._errors.clear()
            self._notify()

    def rerender(self, render: Callable[[FieldError], str]) -> None:
        """Replace every message with ``render(error)``, keeping order."""
        self._errors = {
            key: [replace(error, message=render(error)) for error in errors]
            for key, errors in self._errors.items()
        }
        self._notify()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, key: str) -> list[str]:
        return [error.message for error in self._errors.get(key, [])]

    def first(self, key: str) -> str | None:
        errors = self._errors.get(key)
        return errors[0].message if errors else None

    def has(self, key: str) -> bool:
        return bool(self._errors.get(key))

    def all(self) -> list[str]:
        return [error.message for errors in self._errors.values() for error in errors]

    def all_by_field(self) -> dict[str, list[str]]:
        return {key: [error.message for error in errors] for key, errors in self._errors.items()}

    def details(self, key: str | None = None) -> list[FieldError]:
        if key is not None:
            return list(self._errors.get(key, []))
        return [error for errors in self._errors.values() for error in errors]

    def rules(self, key: str) -> list[str]:
        """Names of the failing rules for a key."""
        return [error.rule for error in self._errors.get(key, []) if error.rule]

    def any(self) -> bool:
        return any(self._errors.values())

    def count(self) -> int:
        return sum(len(errors) for errors in self._errors.values())

    def keys(self) -> list[str]:
        return [key for key, errors in self._errors.items() if errors]

    def scope_keys(self, scope: str) -> list[str]:
        return [
            key
            for key, errors in self._errors.items()
            if errors and errors[0].scope == scope
        ]

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            key: [error.to_dict() for error in errors]
            for key, errors in self._errors.items()
        }

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __bool__(self) -> bool:
        return self.any()

    def __repr__(self) -> str:
        return f"ErrorBag(count={self.count()}, keys={self.keys()})"

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Unsubscribe:
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
                logger.warning("Error bag listener %r failed", listener, exc_info=True)
