"""Tests for the command-line interface."""

from __future__ import annotations

import json

import pytest
import yaml
from typer.testing import CliRunner

from validly.cli import app

runner = CliRunner()

SCHEMA = {
    "rules": {
        "email": "required|email",
        "age": "required|integer|min_value:18",
    },
    "labels": {"age": "Idade"},
}


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "schema.yaml"
    path.write_text(yaml.dump(SCHEMA, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "signups.csv"
    path.write_text(
        "email,age\nana@example.com,30\nbad,17\nbruno@example.com,21\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def clean_file(tmp_path):
    path = tmp_path / "clean.csv"
    path.write_text("email,age\nana@example.com,30\n", encoding="utf-8")
    return path


class TestCheckCommand:
    def test_console_report(self, data_file, schema_file):
        result = runner.invoke(app, ["check", str(data_file), "--schema", str(schema_file)])
        assert result.exit_code == 0
        assert "Validation Report" in result.stdout

    def test_json_report(self, data_file, schema_file):
        result = runner.invoke(
            app, ["check", str(data_file), "-s", str(schema_file), "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["total_rows"] == 3
        assert data["invalid_rows"] == 1
        assert [e["rule"] for e in data["errors"]] == ["email", "min_value"]
        assert data["errors"][1]["message"] == "The Idade field must be at least 18."

    def test_locale_option(self, data_file, schema_file):
        result = runner.invoke(
            app, ["check", str(data_file), "-s", str(schema_file), "-f", "json", "-l", "pt-BR"]
        )
        data = json.loads(result.stdout)
        assert data["locale"] == "pt-BR"
        assert data["errors"][1]["message"] == "O campo Idade deve ser no mínimo 18."

    def test_output_file(self, data_file, schema_file, tmp_path):
        output = tmp_path / "report.json"
        result = runner.invoke(
            app, ["check", str(data_file), "-s", str(schema_file), "-f", "json", "-o", str(output)]
        )
        assert result.exit_code == 0
        assert json.loads(output.read_text(encoding="utf-8"))["error_count"] == 2

    def test_strict(self, data_file, clean_file, schema_file):
        failing = runner.invoke(app, ["check", str(data_file), "-s", str(schema_file), "--strict"])
        assert failing.exit_code == 1
        passing = runner.invoke(app, ["check", str(clean_file), "-s", str(schema_file), "--strict"])
        assert passing.exit_code == 0

    def test_missing_file(self, schema_file, tmp_path):
        result = runner.invoke(app, ["check", str(tmp_path / "nope.csv"), "-s", str(schema_file)])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_missing_schema(self, data_file, tmp_path):
        result = runner.invoke(app, ["check", str(data_file), "-s", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "Schema file not found" in result.output

    def test_bad_format(self, data_file, schema_file):
        result = runner.invoke(app, ["check", str(data_file), "-s", str(schema_file), "-f", "xml"])
        assert result.exit_code == 1
        assert "Unsupported format" in result.output

    def test_invalid_schema(self, data_file, tmp_path):
        schema = tmp_path / "schema.yaml"
        schema.write_text("rules: {}\n", encoding="utf-8")
        result = runner.invoke(app, ["check", str(data_file), "-s", str(schema)])
        assert result.exit_code == 1
        assert "rules" in result.output


class TestRulesCommand:
    def test_lists_rules(self):
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        assert "required" in result.stdout
        assert "email" in result.stdout


class TestMessagesCommand:
    def test_json(self):
        result = runner.invoke(app, ["messages", "--locale", "pt-BR", "--format", "json"])
        assert result.exit_code == 0
        messages = json.loads(result.stdout)
        assert messages["required"] == "O campo {field} é obrigatório."

    def test_console(self):
        result = runner.invoke(app, ["messages", "-l", "es"])
        assert result.exit_code == 0
        assert "required" in result.stdout

    def test_unknown_locale(self):
        result = runner.invoke(app, ["messages", "--locale", "fr"])
        assert result.exit_code == 1
        assert "Unknown locale: fr" in result.output
