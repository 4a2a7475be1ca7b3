"""Report generation for validation results."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from rich.console import Console
from rich.table import Table

from validly.batch import FrameValidationResult
from validly.core import Validator


@dataclass
class ValidationReport:
    """Validation report listing every failed rule.

    Each error is a dict with ``field``, ``rule`` and ``message``, plus
    ``row`` for tabular sources.
    """

    errors: list[dict[str, Any]] = field(default_factory=list)
    source: str = "form"
    total_rows: int = 1
    invalid_rows: int = 0
    locale: str = "en"

    @classmethod
    def from_validator(cls, validator: Validator, source: str = "form") -> "ValidationReport":
        errors = [
            {"field": e.key, "rule": e.rule, "message": e.message}
            for e in validator.errors().details()
        ]
        return cls(
            errors=errors,
            source=source,
            total_rows=1,
            invalid_rows=1 if errors else 0,
            locale=validator.get_locale(),
        )

    @classmethod
    def from_frame_result(cls, result: FrameValidationResult, source: str = "data") -> "ValidationReport":
        return cls(
            errors=result.to_dicts(),
            source=source,
            total_rows=result.total_rows,
            invalid_rows=result.invalid_rows,
            locale=result.locale,
        )

    def __str__(self) -> str:
        """Return a formatted string representation using Rich."""
        console = Console(force_terminal=True, width=100)
        with console.capture() as capture:
            self._print_to_console(console)
        return capture.get()

    def _print_to_console(self, console: Console) -> None:
        console.print()
        console.print(f"[bold]Validation Report[/bold] [dim]({self.source}, locale {self.locale})[/dim]")
        console.print("━" * 52)

        if not self.errors:
            console.print(f"[green]✓ All {self.total_rows:,} rows passed[/green]")
            console.print()
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Field", style="cyan")
        table.add_column("Rule", style="magenta")
        table.add_column("Count", justify="right")
        table.add_column("Message", style="white")

        for entry in self._grouped():
            table.add_row(
                entry["field"],
                entry["rule"] or "-",
                f"{entry['count']:,}",
                entry["message"],
            )

        console.print(table)
        console.print()

        fields = len({e["field"] for e in self.errors})
        console.print(
            f"Summary: {len(self.errors):,} errors in {fields} fields, "
            f"[red]{self.invalid_rows:,}[/red] of {self.total_rows:,} rows invalid"
        )
        console.print()

    def _grouped(self) -> list[dict[str, Any]]:
        """Errors grouped by field and rule, most frequent first."""
        groups: dict[tuple[str, str | None], dict[str, Any]] = {}
        for error in self.errors:
            key = (error["field"], error.get("rule"))
            if key not in groups:
                groups[key] = {
                    "field": error["field"],
                    "rule": error.get("rule"),
                    "count": 0,
                    "message": error["message"],
                }
            groups[key]["count"] += 1
        return sorted(groups.values(), key=lambda g: -g["count"])

    def print(self) -> None:
        """Print the report to stdout."""
        console = Console()
        self._print_to_console(console)

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "locale": self.locale,
            "total_rows": self.total_rows,
            "invalid_rows": self.invalid_rows,
            "error_count": len(self.errors),
            "errors": self.errors,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0
