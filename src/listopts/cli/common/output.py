"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def _fmt(value: Any) -> str:
    if value is None:
        return "[meta]unset[/]"
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return escape(str(value))


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def json(self, data: Any) -> None:
        """Print data as JSON without Rich markup processing."""
        console.print_json(json.dumps(data, default=str))

    def options_table(self, options: Any, title: str = "List options") -> None:
        """
        Expects a ListOptions (see listopts.core.models).
        Label requirements are listed in a separate table.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Field", style="ok", no_wrap=True)
        t.add_column("Value")

        t.add_row("namespace", _fmt(options.namespace))
        t.add_row("name_prefix", _fmt(options.name_prefix))
        t.add_row("name", _fmt(f"{options.name_operator}{options.name}"))
        t.add_row("limit", str(options.limit))
        t.add_row("offset", str(options.offset))
        t.add_row("min_started_at", _fmt(options.min_started_at))
        t.add_row("max_started_at", _fmt(options.max_started_at))
        t.add_row("started_at_ascending", str(options.started_at_ascending))
        t.add_row("show_remaining_item_count", str(options.show_remaining_item_count))

        console.print(t)

        if options.label_requirements:
            self.requirements_table(options.label_requirements)

    def requirements_table(
        self, requirements: Iterable[Any], title: str = "Label requirements"
    ) -> None:
        """
        Expects objects with .key .operator .values
        (like listopts.core.labels.Requirement)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Key", style="ok", no_wrap=True)
        t.add_column("Operator")
        t.add_column("Values", style="meta")

        for r in requirements:
            operator = r.operator.value if hasattr(r.operator, "value") else str(r.operator)
            t.add_row(r.key, operator, _fmt(", ".join(r.values)))

        console.print(t)

    def split_table(self, term: str, result: tuple[str, str, bool]) -> None:
        """Render the result of splitting one selector term."""
        operator, rhs, found = result
        t = Table(title=f"Split of {escape(repr(term))}", show_lines=False)
        t.add_column("Operator", style="ok")
        t.add_column("Right-hand side")
        t.add_column("Found")
        t.add_row(operator, _fmt(rhs), "[ok]yes[/]" if found else "[err]no[/]")

        console.print(t)


out = Out()
