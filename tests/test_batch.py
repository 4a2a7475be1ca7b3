"""Tests for row-by-row frame validation."""

from __future__ import annotations

import logging

import polars as pl
import pytest

from validly import Validator, validate_frame
from validly.batch import BATCH_SCOPE

RULES = {
    "email": "required|email",
    "age": "required|integer|min_value:18",
}


@pytest.fixture
def signups() -> pl.DataFrame:
    return pl.DataFrame({
        "email": ["ana@example.com", "bad", "", "bruno@example.com"],
        "age": ["30", "17", "", "21"],
    })


class TestValidateFrame:
    def test_counts(self, signups):
        result = validate_frame(signups, RULES)
        assert result.total_rows == 4
        assert result.invalid_rows == 2
        assert result.valid_rows == 2
        assert not result.is_valid

    def test_errors_frame(self, signups):
        result = validate_frame(signups, RULES)
        assert result.errors.columns == ["row", "field", "rule", "message"]
        assert result.to_dicts()[:2] == [
            {"row": 1, "field": "email", "rule": "email",
             "message": "The Email field must be a valid email address."},
            {"row": 1, "field": "age", "rule": "min_value",
             "message": "The Age field must be at least 18."},
        ]
        assert result.errors.filter(pl.col("row") == 2)["rule"].to_list() == [
            "required", "required",
        ]

    def test_summary(self, signups):
        summary = validate_frame(signups, RULES).summary()
        assert summary.columns == ["field", "rule", "count"]
        assert summary.height == 4
        assert summary["count"].to_list() == [1, 1, 1, 1]

    def test_summary_sorted_by_count(self):
        frame = {"email": ["x", "y", ""]}
        summary = validate_frame(frame, {"email": "required|email"}).summary()
        assert summary.row(0) == ("email", "email", 2)

    def test_valid_frame(self):
        result = validate_frame([{"email": "ana@example.com", "age": 30}], RULES)
        assert result.is_valid
        assert result.errors.is_empty()
        assert result.summary().is_empty()

    def test_validator_locale_and_custom_rules(self, cpf_check):
        validator = Validator(locale="pt-BR")
        validator.extend("cpf", cpf_check, "CPF inválido em {field}")
        result = validate_frame(
            {"doc": ["123.456.789-09", "123"]},
            {"doc": "required|cpf"},
            validator=validator,
        )
        assert result.locale == "pt-BR"
        assert result.to_dicts() == [
            {"row": 1, "field": "doc", "rule": "cpf", "message": "CPF inválido em Doc"},
        ]

    def test_labels_and_messages(self):
        result = validate_frame(
            {"email": [""]},
            {"email": "required"},
            messages={"email.required": "Sem {field}"},
            labels={"email": "E-mail"},
        )
        assert result.to_dicts()[0]["message"] == "Sem E-mail"

    def test_validator_state_untouched(self, signups):
        validator = Validator()
        validate_frame(signups, RULES, validator=validator)
        assert validator.is_valid()
        assert validator.get_data(BATCH_SCOPE) == {}

    def test_missing_columns_warned(self, caplog):
        with caplog.at_level(logging.WARNING, logger="validly.batch"):
            result = validate_frame({"email": ["ana@example.com"]}, RULES)
        assert "age" in caplog.text
        assert result.to_dicts()[0]["rule"] == "required"
