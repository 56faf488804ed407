"""Shared utilities for codeassist CLI commands.

- Logging options collected by the global callbacks
- Config path resolution and store/orchestrator construction
- Source input reading (file or stdin)
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import typer
import yaml
from rich.console import Console
from rich.markup import escape

from codeassist.core.constants import CONFIG_PATH_ENV_VAR
from codeassist.core.logging import configure_logging, get_logger
from codeassist.core.store import ConfigurationStore
from codeassist.execution.orchestrator import RequestOrchestrator
from codeassist.notifications import ConsoleNotifier, ErrorReporter

from .output import err_console

_logger = get_logger("cli")

DEFAULT_CONFIG_FILE = Path("~/.codeassist/config.yaml")

EXIT_FAILURE = 1
EXIT_BAD_INPUT = 2


@dataclass
class CliLoggingConfig:
    """Logging options gathered from the global CLI flags."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file: Path | None = None
    format: Literal["json", "console"] = "console"
    configured: bool = False


_log_config = CliLoggingConfig()
_config_path: Path | None = None


def set_log_level(level: str) -> None:
    _log_config.level = level.upper()  # type: ignore[assignment]


def set_log_file(path: Path | None) -> None:
    _log_config.file = path


def set_log_format(fmt: str) -> None:
    _log_config.format = fmt  # type: ignore[assignment]


def set_config_path(path: Path | None) -> None:
    global _config_path
    _config_path = path


def resolve_config_path() -> Path:
    """Config file from ``--config``, then the environment, then the default."""
    if _config_path is not None:
        return _config_path.expanduser()
    env_path = os.environ.get(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE.expanduser()


def configure_global_logging(console: Console) -> None:
    """Apply the logging flags once per session.

    Raises:
        typer.Exit: If the options are rejected.
    """
    if _log_config.configured:
        return
    try:
        configure_logging(
            level=_log_config.level,
            format=_log_config.format,
            file_path=_log_config.file,
        )
    except (AttributeError, ValueError) as e:
        console.print(f"[red]Logging configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_FAILURE) from None
    _log_config.configured = True


def reset_cli_state() -> None:
    """Forget flags from a previous invocation (used by tests)."""
    global _log_config, _config_path
    _log_config = CliLoggingConfig()
    _config_path = None


def create_store() -> ConfigurationStore:
    """Store over the resolved config file.

    Raises:
        typer.Exit: If the file cannot be parsed.
    """
    path = resolve_config_path()
    try:
        return ConfigurationStore(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        _logger.error("config_load_failed", path=str(path), error=str(e))
        err_console.print(
            f"[red]Error loading config {escape(str(path))}:[/red] {escape(str(e))}"
        )
        raise typer.Exit(EXIT_FAILURE) from None


def create_orchestrator(store: ConfigurationStore, console: Console) -> RequestOrchestrator:
    """Orchestrator whose alerts are printed to ``console``."""
    reporter = ErrorReporter(ConsoleNotifier(console))
    return RequestOrchestrator(store, reporter=reporter)


def read_source(file: Path, console: Console) -> str:
    """Read code from ``file``, or from stdin when it is ``-``.

    Raises:
        typer.Exit: With code 2 when the input cannot be read.
    """
    try:
        if str(file) == "-":
            return sys.stdin.read()
        return file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _logger.warning("input_unreadable", path=str(file), error=str(e))
        console.print(f"[red]Cannot read {escape(str(file))}:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_BAD_INPUT) from None

