"""Configuration validation.

Pure checks over an ``AssistantConfig`` snapshot. Every rule runs; none
short-circuits another, so a single pass reports every problem:

- ConfigurationSeverity: error/warning classification
- ConfigurationIssue: a single issue found in the settings
- ValidationResult: ordered errors and warnings plus ``is_valid``
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from codeassist.core.config import AssistantConfig
from codeassist.core.constants import SUPPORTED_MODELS

MIN_MAX_TOKENS = 100
MAX_MAX_TOKENS = 8192
HIGH_MAX_TOKENS = 4096
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0
API_KEY_MIN_LENGTH = 20
API_KEY_PREFIX = "sk-"


class ConfigurationSeverity(str, Enum):
    """Severity of a configuration issue.

    - ERROR: blocks every request until fixed
    - WARNING: reported, never blocks
    """

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ConfigurationIssue:
    """A single problem found in the settings.

    Attributes:
        field: Settings name of the offending field (e.g. ``maxTokens``).
        message: Human-readable description.
        severity: ERROR or WARNING.
    """

    field: str
    message: str
    severity: ConfigurationSeverity

    def format_short(self) -> str:
        return f"[{self.severity.value}] {self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Outcome of validating one settings snapshot."""

    errors: list[ConfigurationIssue] = field(default_factory=list)
    warnings: list[ConfigurationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def issues(self) -> list[ConfigurationIssue]:
        """Errors followed by warnings."""
        return [*self.errors, *self.warnings]


def is_valid_api_key_format(api_key: str) -> bool:
    """Basic credential shape check: long enough and ``sk-`` prefixed."""
    return len(api_key) >= API_KEY_MIN_LENGTH and api_key.startswith(API_KEY_PREFIX)


def validate_configuration(config: AssistantConfig) -> ValidationResult:
    """Validate a settings snapshot.

    Args:
        config: Snapshot to check. Not modified.

    Returns:
        ValidationResult; ``is_valid`` is False iff any error was found.
    """
    issues: list[ConfigurationIssue] = []

    def error(name: str, message: str) -> None:
        issues.append(ConfigurationIssue(name, message, ConfigurationSeverity.ERROR))

    def warning(name: str, message: str) -> None:
        issues.append(ConfigurationIssue(name, message, ConfigurationSeverity.WARNING))

    if not config.api_key.strip():
        error("apiKey", "API Key is required")
    elif not is_valid_api_key_format(config.api_key):
        warning("apiKey", "API Key format appears invalid")

    if config.model not in SUPPORTED_MODELS:
        error("model", "Invalid model selected")

    if not MIN_MAX_TOKENS <= config.max_tokens <= MAX_MAX_TOKENS:
        error(
            "maxTokens",
            f"Max tokens must be between {MIN_MAX_TOKENS} and {MAX_MAX_TOKENS}",
        )

    if not MIN_TEMPERATURE <= config.temperature <= MAX_TEMPERATURE:
        error("temperature", "Temperature must be between 0 and 2")

    if config.max_tokens > HIGH_MAX_TOKENS:
        warning("maxTokens", "High token count may impact performance")

    return ValidationResult(
        errors=[i for i in issues if i.severity is ConfigurationSeverity.ERROR],
        warnings=[i for i in issues if i.severity is ConfigurationSeverity.WARNING],
    )


__all__ = [
    "ConfigurationIssue",
    "ConfigurationSeverity",
    "ValidationResult",
    "is_valid_api_key_format",
    "validate_configuration",
]
