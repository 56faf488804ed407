"""``codeassist validate``: check the settings without sending anything."""

from __future__ import annotations

import typer

from ..helpers import EXIT_FAILURE, create_store
from ..output import console, create_issues_table


def validate() -> None:
    """Validate the configuration file and credential."""
    store = create_store()
    result = store.validate()

    if result.issues:
        console.print(create_issues_table(result))
    if not result.is_valid:
        console.print(f"[red]Configuration is invalid[/red] ({len(result.errors)} error(s))")
        raise typer.Exit(EXIT_FAILURE)
    console.print("[green]Configuration is valid.[/green]")
