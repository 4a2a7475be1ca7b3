"""Row-by-row validation of tabular data.

Each row of a Polars frame is validated as one form submission. Failures
are collected into a Polars frame for reporting and aggregation.

Example:
    result = validate_frame(
        pl.read_csv("signups.csv", infer_schema_length=0),
        {"email": "required|email", "age": "required|integer|min_value:18"},
    )
    result.summary()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import polars as pl

from validly.adapters import to_dataframe
from validly.core import Validator
from validly.types import RuleDefinition

logger = logging.getLogger(__name__)

BATCH_SCOPE = "__batch__"

ERRORS_SCHEMA = {
    "row": pl.Int64,
    "field": pl.Utf8,
    "rule": pl.Utf8,
    "message": pl.Utf8,
}


@dataclass
class FrameValidationResult:
    """Failures of a frame validation, one row per failed rule."""

    errors: pl.DataFrame
    total_rows: int
    invalid_rows: int
    locale: str = "en"

    @property
    def is_valid(self) -> bool:
        return self.invalid_rows == 0

    @property
    def valid_rows(self) -> int:
        return self.total_rows - self.invalid_rows

    def summary(self) -> pl.DataFrame:
        """Failure counts per field and rule, most frequent first."""
        if self.errors.is_empty():
            return pl.DataFrame(schema={"field": pl.Utf8, "rule": pl.Utf8, "count": pl.UInt32})
        return (
            self.errors.group_by(["field", "rule"])
            .agg(pl.len().alias("count"))
            .sort(["count", "field", "rule"], descending=[True, False, False])
        )

    def to_dicts(self) -> list[dict[str, Any]]:
        return self.errors.to_dicts()

    def __repr__(self) -> str:
        return (
            f"FrameValidationResult(total_rows={self.total_rows}, "
            f"invalid_rows={self.invalid_rows}, errors={self.errors.height})"
        )


def validate_frame(
    frame: Any,
    rules: Mapping[str, RuleDefinition] | None = None,
    *,
    validator: Validator | None = None,
    messages: Mapping[str, Any] | None = None,
    labels: Mapping[str, str] | None = None,
    scope: str = BATCH_SCOPE,
) -> FrameValidationResult:
    """Validate every row of a frame.

    Args:
        frame: Anything ``to_dataframe`` accepts
        rules: Field rules; may be omitted when ``validator`` already has
            rules in ``scope``
        validator: Validator providing custom rules, locale and messages
        messages: Custom messages, as for ``set_multiple_rules``
        labels: Field display labels
        scope: Scope the rules are stored in

    Returns:
        FrameValidationResult with ``row`` indexes starting at 0
    """
    df = to_dataframe(frame)
    validator = validator or Validator()
    if rules:
        validator.set_multiple_rules(rules, messages, scope)
    for field_name, label in (labels or {}).items():
        validator.set_field_label(field_name, label, scope)

    fields = validator.rule_manager.get_fields_with_rules(scope)
    missing = [name for name in fields if name not in df.columns]
    if missing:
        logger.warning("Columns missing from frame, validated as empty: %s", ", ".join(missing))

    logger.debug("Validating %d rows against %d fields", df.height, len(fields))

    records: list[dict[str, Any]] = []
    invalid_rows = 0
    for index, row in enumerate(df.iter_rows(named=True)):
        row_failed = False
        for result in validator.check_values(row, scope):
            for error in result.errors:
                records.append({
                    "row": index,
                    "field": error.field,
                    "rule": error.rule,
                    "message": error.message,
                })
                row_failed = True
        invalid_rows += row_failed

    errors = pl.DataFrame(records, schema=ERRORS_SCHEMA)
    logger.debug("Found %d errors in %d of %d rows", errors.height, invalid_rows, df.height)

    return FrameValidationResult(
        errors=errors,
        total_rows=df.height,
        invalid_rows=invalid_rows,
        locale=validator.get_locale(),
    )
