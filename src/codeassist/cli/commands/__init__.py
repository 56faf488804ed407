"""CLI command implementations."""

from .assist import complete, explain, ping, refactor
from .config_cmd import config_app
from .validate import validate

__all__ = ["complete", "config_app", "explain", "ping", "refactor", "validate"]
