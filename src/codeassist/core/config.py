"""Configuration models for codeassist.

Pydantic models for the assistant settings. Field types are enforced here;
value ranges are checked by ``codeassist.core.validation``, so an out-of-range
setting still loads and is reported as a validation issue.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

from codeassist.core.constants import DEFAULT_BASE_URL


class _Snapshot(BaseModel):
    """Base for immutable settings models."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class CompletionSettings(_Snapshot):
    """Inline code completion settings."""

    enabled: bool = Field(default=True, description="Offer inline completions")
    trigger_characters: tuple[str, ...] = Field(
        default=(".", "(", " "),
        description="Characters that trigger a completion request",
    )
    debounce_ms: int = Field(default=300, description="Delay before requesting completions")


class HoverSettings(_Snapshot):
    """Hover explanation settings."""

    enabled: bool = True
    show_on_hover: bool = True


class ChatSettings(_Snapshot):
    """Chat panel settings."""

    enabled: bool = True
    history_limit: int = Field(default=50, description="Messages kept in chat history")


class CodeActionSettings(_Snapshot):
    """Refactoring code-action settings."""

    enabled: bool = True
    auto_suggest: bool = False


class CacheSettings(_Snapshot):
    """Response cache settings."""

    enabled: bool = True
    ttl_seconds: int = Field(default=3600, description="Lifetime of a cached response")
    max_entries: int = Field(default=1000, description="Entries kept before LRU eviction")


class LogConfig(_Snapshot):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level to capture",
    )
    format: Literal["json", "console"] = Field(
        default="console",
        description="Output format: json for structured, console for human-readable",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path for log file output (stderr when unset)",
    )


class AssistantConfig(_Snapshot):
    """Immutable snapshot of the assistant settings.

    Example YAML:
        api_key: "sk-..."
        model: deepseek-coder
        max_tokens: 2048
        temperature: 0.1
        completion:
          enabled: true
          debounce_ms: 300
        cache:
          ttl_seconds: 3600
    """

    api_key: str = Field(default="", description="Bearer credential for the remote service")
    model: str = Field(default="deepseek-coder", description="Model identifier")
    max_tokens: int = Field(default=2048, description="Maximum tokens per response")
    temperature: float = Field(default=0.1, description="Sampling temperature")
    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the chat-completion service",
    )
    completion: CompletionSettings = Field(default_factory=CompletionSettings)
    hover: HoverSettings = Field(default_factory=HoverSettings)
    chat: ChatSettings = Field(default_factory=ChatSettings)
    code_actions: CodeActionSettings = Field(default_factory=CodeActionSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> AssistantConfig:
        """Load settings from a YAML file. A missing or empty file yields defaults."""
        if not path.exists():
            return cls()
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        return cls.model_validate(data)

    def to_yaml(self, path: Path) -> None:
        """Write settings to a YAML file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        data: dict[str, Any] = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)


__all__ = [
    "AssistantConfig",
    "CacheSettings",
    "ChatSettings",
    "CodeActionSettings",
    "CompletionSettings",
    "HoverSettings",
    "LogConfig",
]
