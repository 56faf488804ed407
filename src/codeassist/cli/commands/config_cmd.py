"""Configuration commands.

Subcommands:
- ``codeassist config show``: display the current settings
- ``codeassist config set FIELD VALUE``: update one setting (dotted keys
  such as ``cache.enabled`` address nested sections)
"""

from __future__ import annotations

from typing import Any

import typer
from rich.markup import escape

from codeassist.core.config import AssistantConfig

from ..helpers import EXIT_FAILURE, create_store
from ..output import console, create_settings_table, mask_secret

config_app = typer.Typer(
    name="config",
    help="Show or change assistant settings.",
    invoke_without_command=True,
)


def _coerce_value(raw: str) -> Any:
    """Coerce a string value to the appropriate Python type."""
    lowered = raw.lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    if lowered in ("null", "none", "~"):
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    return raw


def _set_nested(data: dict[str, Any], keys: list[str], value: Any) -> None:
    current = data
    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            raise KeyError(key)
        current = current[key]
    if keys[-1] not in current:
        raise KeyError(keys[-1])
    current[keys[-1]] = value


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context) -> None:
    """Show or change assistant settings."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


@config_app.command()
def show() -> None:
    """Display the current settings."""
    store = create_store()
    data = store.get_snapshot().model_dump(mode="json")
    data["api_key"] = mask_secret(data["api_key"])
    console.print(f"[dim]{escape(str(store.path))}[/dim]")
    console.print(create_settings_table(data))


@config_app.command(name="set")
def set_value(
    field: str = typer.Argument(..., help="Setting name, e.g. model or cache.enabled"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Update one setting and save it."""
    store = create_store()
    keys = field.split(".")
    top = keys[0]
    if top not in AssistantConfig.model_fields:
        console.print(f"[red]Unknown setting:[/red] {escape(field)}")
        raise typer.Exit(EXIT_FAILURE)

    coerced = _coerce_value(value) if top != "api_key" else value
    if len(keys) > 1:
        section = store.get_snapshot().model_dump()[top]
        try:
            _set_nested(section, keys[1:], coerced)
        except (KeyError, TypeError):
            console.print(f"[red]Unknown setting:[/red] {escape(field)}")
            raise typer.Exit(EXIT_FAILURE) from None
        coerced = section

    try:
        store.update(top, coerced)
    except ValueError as e:
        console.print(f"[red]Invalid value for {escape(field)}:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE) from None

    shown = mask_secret(value) if top == "api_key" else value
    console.print(f"[green]Set {escape(field)} = {escape(shown)}[/green]")
    result = store.validate()
    for issue in result.issues:
        console.print(f"[yellow]{escape(issue.format_short())}[/yellow]")
