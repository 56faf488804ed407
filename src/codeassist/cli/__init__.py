"""codeassist CLI.

Typer app assembly: global options (version, config file, logging) are
handled by the callback, commands live in ``cli/commands``.

Package structure:
    cli/
    ├── __init__.py       # app assembly
    ├── helpers.py        # shared state, store construction, input reading
    ├── output.py         # Rich consoles and tables
    └── commands/
        ├── assist.py     # complete, explain, refactor, ping
        ├── validate.py   # validate
        └── config_cmd.py # config show / config set
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from codeassist import __version__
from codeassist.core.constants import CONFIG_PATH_ENV_VAR

from .commands import complete, config_app, explain, ping, refactor, validate
from .helpers import (
    configure_global_logging,
    set_config_path,
    set_log_file,
    set_log_format,
    set_log_level,
)
from .output import console, err_console

app = typer.Typer(
    name="codeassist",
    help="LLM coding assistant: completions, explanations and refactorings",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"codeassist v{__version__}")
        raise typer.Exit()


def config_callback(value: Path | None) -> Path | None:
    set_config_path(value)
    return value


def log_level_callback(value: str | None) -> str | None:
    if value:
        set_log_level(value)
    return value


def log_file_callback(value: Path | None) -> Path | None:
    if value:
        set_log_file(value)
    return value


def log_format_callback(value: str | None) -> str | None:
    if value:
        set_log_format(value)
    return value


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            callback=config_callback,
            help="Settings file (YAML)",
            envvar=CONFIG_PATH_ENV_VAR,
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            "-L",
            callback=log_level_callback,
            help="Logging level (DEBUG, INFO, WARNING, ERROR)",
            envvar="CODEASSIST_LOG_LEVEL",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            callback=log_file_callback,
            help="Path for log file output",
        ),
    ] = None,
    log_format: Annotated[
        str | None,
        typer.Option(
            "--log-format",
            callback=log_format_callback,
            help="Log format: json or console",
        ),
    ] = None,
) -> None:
    """codeassist - LLM coding assistant for the terminal."""
    configure_global_logging(err_console)


app.command()(complete)
app.command()(explain)
app.command()(refactor)
app.command()(ping)
app.command()(validate)
app.add_typer(config_app)


__all__ = ["app", "console", "main"]
