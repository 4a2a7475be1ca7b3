"""Type definitions shared across validly."""

from __future__ import annotations

import math
from typing import Any, Callable, Mapping, Sequence, Union

DEFAULT_SCOPE = "default"
ALL_SCOPES = "all"

FormData = dict[str, Any]
Listener = Callable[[], None]
Unsubscribe = Callable[[], None]

# A rule definition as accepted by set_rules(): "required|min:3", a mapping of
# rule name to params, or a sequence mixing strings, mappings, rules and callables.
RuleDefinition = Union[str, Mapping[str, Any], Sequence[Any], None]


def is_empty(value: Any) -> bool:
    """Check whether a value counts as empty for validation purposes.

    None, blank strings (after trimming) and empty collections are empty.
    Numbers, including zero, and booleans never are.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def is_number(value: Any) -> bool:
    """Check for a real, finite int or float (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def to_number(value: Any) -> float | None:
    """Coerce a number or numeric string to float, or return None."""
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text.isascii():
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def scoped_key(field: str, scope: str = DEFAULT_SCOPE) -> str:
    """Build the error-bag key for a field within a scope."""
    if scope == DEFAULT_SCOPE:
        return field
    return f"{scope}.{field}"
