"""Command-line interface for validly."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from validly.adapters import to_dataframe
from validly.batch import validate_frame
from validly.config import load_schema
from validly.core import Validator
from validly.report import ValidationReport

app = typer.Typer(
    name="validly",
    help="Validate form-like data with localized messages",
    add_completion=False,
)


@app.command(name="check")
def check_cmd(
    file: Annotated[Path, typer.Argument(help="Path to the data file (CSV, JSON, NDJSON, Parquet)")],
    schema_file: Annotated[
        Path,
        typer.Option("--schema", "-s", help="Validation schema file (YAML or JSON)"),
    ],
    locale: Annotated[
        Optional[str],
        typer.Option("--locale", "-l", help="Message locale, overriding the schema's"),
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (console, json)"),
    ] = "console",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file path"),
    ] = None,
    infer_types: Annotated[
        bool,
        typer.Option("--infer-types", help="Infer CSV column types instead of reading text"),
    ] = False,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit with code 1 if errors are found"),
    ] = False,
) -> None:
    """Validate every row of a data file against a schema."""
    if not file.exists():
        typer.echo(f"Error: File not found: {file}", err=True)
        raise typer.Exit(1)

    if not schema_file.exists():
        typer.echo(f"Error: Schema file not found: {schema_file}", err=True)
        raise typer.Exit(1)

    if format not in ("console", "json"):
        typer.echo(f"Error: Unsupported format: {format}", err=True)
        raise typer.Exit(1)

    try:
        schema = load_schema(schema_file)
        overrides = {"locale": locale} if locale else {}
        validator = schema.build_validator(**overrides)
        frame = to_dataframe(file, infer_types=infer_types)
        result = validate_frame(frame, validator=validator, scope=schema.scope)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    report = ValidationReport.from_frame_result(result, source=file.name)

    if format == "json":
        text = report.to_json()
        if output:
            output.write_text(text, encoding="utf-8")
            typer.echo(f"Report written to {output}")
        else:
            typer.echo(text)
    else:
        report.print()
        if output:
            output.write_text(str(report), encoding="utf-8")
            typer.echo(f"Report written to {output}")

    if strict and report.has_errors:
        raise typer.Exit(1)


@app.command(name="rules")
def rules_cmd() -> None:
    """List the built-in validation rules."""
    validator = Validator()
    table = Table(show_header=True, header_style="bold")
    table.add_column("Rule", style="cyan")
    table.add_column("Params", style="white")
    table.add_column("Message", style="dim")

    for name in sorted(validator.registry):
        rule_cls = validator.registry.get(name)
        params = "*values" if rule_cls.variadic else ", ".join(rule_cls.param_names)
        table.add_row(name, params or "-", validator.i18n.get_messages().get(name, ""))

    Console().print(table)


@app.command(name="messages")
def messages_cmd(
    locale: Annotated[
        str,
        typer.Option("--locale", "-l", help="Locale to dump"),
    ] = "en",
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (console, json)"),
    ] = "console",
) -> None:
    """Show the message catalog of a locale."""
    validator = Validator()
    if not validator.i18n.has_locale(locale):
        available = ", ".join(validator.i18n.available_locales())
        typer.echo(f"Error: Unknown locale: {locale}. Available: {available}", err=True)
        raise typer.Exit(1)

    catalog = validator.i18n.get_catalog(locale)

    if format == "json":
        typer.echo(json.dumps(catalog.messages, ensure_ascii=False, indent=2))
        return

    table = Table(show_header=True, header_style="bold", title=f"Messages ({catalog.locale})")
    table.add_column("Key", style="cyan")
    table.add_column("Template", style="white")
    for key, template in sorted(catalog.items()):
        table.add_row(key, template)
    Console().print(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
