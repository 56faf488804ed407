"""Assistant commands: ``complete``, ``explain``, ``refactor`` and ``ping``.

Each command builds a ``RequestOrchestrator`` over the configured store and
runs one operation. Results go to stdout; alerts and errors go to stderr.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import typer
from rich.markup import escape

from codeassist.core.constants import DEFAULT_COMPLETION_SUGGESTIONS
from codeassist.core.errors import ConfigurationInvalidError, RequestError
from codeassist.execution.orchestrator import RequestOrchestrator
from codeassist.prompts import (
    CompletionRequest,
    ExplanationRequest,
    RefactorRequest,
)
from codeassist.prompts.templating import REFACTOR_INSTRUCTIONS

from ..helpers import EXIT_BAD_INPUT, EXIT_FAILURE, create_orchestrator, create_store, read_source
from ..output import console, err_console

T = TypeVar("T")

_SOURCE_ARGUMENT = typer.Argument(..., allow_dash=True, help="Source file, or - to read stdin")


def _run(operation: Callable[[RequestOrchestrator], Awaitable[T]]) -> T:
    """Run one orchestrator operation, turning failures into exit codes."""
    store = create_store()

    async def _main() -> T:
        async with create_orchestrator(store, err_console) as orchestrator:
            return await operation(orchestrator)

    try:
        return asyncio.run(_main())
    except ConfigurationInvalidError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(EXIT_FAILURE) from None
    except RequestError as e:
        err_console.print(f"[red]Request failed:[/red] {escape(e.message)}")
        raise typer.Exit(EXIT_FAILURE) from None


def complete(
    file: Path = _SOURCE_ARGUMENT,
    language: str = typer.Option("python", "--language", "-l", help="Source language"),
    max_suggestions: int = typer.Option(
        DEFAULT_COMPLETION_SUGGESTIONS,
        "--max-suggestions",
        "-n",
        min=1,
        help="Number of suggestions to ask for",
    ),
) -> None:
    """Suggest completions for the end of FILE."""
    context = read_source(file, err_console)
    request = CompletionRequest(context=context, language=language, max_suggestions=max_suggestions)
    suggestions = _run(lambda orchestrator: orchestrator.generate_completion(request))
    if not suggestions:
        err_console.print("[dim]No suggestions.[/dim]")
        return
    for suggestion in suggestions:
        console.print(suggestion, markup=False, highlight=False)


def explain(
    file: Path = _SOURCE_ARGUMENT,
    language: str = typer.Option("python", "--language", "-l", help="Source language"),
    examples: bool = typer.Option(False, "--examples", help="Ask for usage examples"),
) -> None:
    """Explain the code in FILE."""
    code = read_source(file, err_console)
    request = ExplanationRequest(code=code, language=language, include_examples=examples)
    explanation = _run(lambda orchestrator: orchestrator.explain_code(request))
    console.print(explanation, markup=False, highlight=False)


def refactor(
    file: Path = _SOURCE_ARGUMENT,
    language: str = typer.Option("python", "--language", "-l", help="Source language"),
    refactor_type: str = typer.Option(
        "readability",
        "--type",
        "-t",
        help=f"Refactoring goal: {', '.join(REFACTOR_INSTRUCTIONS)}",
    ),
) -> None:
    """Suggest a refactoring of the code in FILE."""
    if refactor_type not in REFACTOR_INSTRUCTIONS:
        err_console.print(
            f"[red]Unknown refactoring type:[/red] {refactor_type} "
            f"(choose from {', '.join(REFACTOR_INSTRUCTIONS)})"
        )
        raise typer.Exit(EXIT_BAD_INPUT)
    code = read_source(file, err_console)
    request = RefactorRequest(code=code, language=language, refactor_type=refactor_type)  # type: ignore[arg-type]
    suggestion = _run(lambda orchestrator: orchestrator.refactor_code(request))
    console.print(suggestion, markup=False, highlight=False)


def ping() -> None:
    """Check that the service accepts the configured credential."""
    ok = _run(lambda orchestrator: orchestrator.test_connection())
    if not ok:
        err_console.print("[red]Connection test failed.[/red]")
        raise typer.Exit(EXIT_FAILURE)
    console.print("[green]Connection successful.[/green]")
