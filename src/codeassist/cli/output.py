"""Rich output formatting for the codeassist CLI."""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table

from codeassist.core.validation import ConfigurationSeverity, ValidationResult

console = Console()
err_console = Console(stderr=True)

SEVERITY_COLORS: dict[ConfigurationSeverity, str] = {
    ConfigurationSeverity.ERROR: "red",
    ConfigurationSeverity.WARNING: "yellow",
}


def mask_secret(value: str) -> str:
    """Show only the last four characters of a credential."""
    if not value:
        return "(not set)"
    if len(value) <= 8:
        return "****"
    return f"****{value[-4:]}"


def create_issues_table(result: ValidationResult) -> Table:
    table = Table(title="Configuration Issues")
    table.add_column("Severity", style="bold")
    table.add_column("Field", style="cyan")
    table.add_column("Message")
    for issue in result.issues:
        color = SEVERITY_COLORS[issue.severity]
        table.add_row(f"[{color}]{issue.severity.value}[/{color}]", issue.field, issue.message)
    return table


def create_settings_table(data: dict[str, Any], prefix: str = "") -> Table:
    """Flatten nested settings into a two-column table."""
    table = Table(title="Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in _flatten(data, prefix):
        table.add_row(key, str(value))
    return table


def _flatten(data: dict[str, Any], prefix: str) -> list[tuple[str, Any]]:
    rows: list[tuple[str, Any]] = []
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            rows.extend(_flatten(value, f"{dotted}."))
        else:
            rows.append((dotted, value))
    return rows
