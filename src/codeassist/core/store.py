"""Configuration store.

Holds the current ``AssistantConfig`` snapshot, applies explicit updates,
persists them to the backing YAML file and notifies listeners whenever the
snapshot is replaced. Consumers that must honor a rotated credential mid-call
(the retry engine) read through ``get`` instead of keeping a snapshot.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from codeassist.core.config import AssistantConfig
from codeassist.core.constants import API_KEY_ENV_VAR
from codeassist.core.logging import get_logger
from codeassist.core.validation import ValidationResult, validate_configuration

_logger = get_logger("config")

ConfigListener = Callable[[AssistantConfig], None]


class ConfigurationStore:
    """Owner of the assistant settings.

    Example:
        store = ConfigurationStore(Path("~/.codeassist.yaml").expanduser())
        unsubscribe = store.on_change(lambda cfg: print(cfg.model))
        store.update("model", "deepseek-chat")
        unsubscribe()
    """

    def __init__(
        self,
        path: Path | None = None,
        *,
        config: AssistantConfig | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            path: Backing YAML file. Updates are persisted there when set.
            config: Initial snapshot; loaded from ``path`` when omitted.
            env: Environment used for the credential fallback.
        """
        self.path = path
        self._env = env if env is not None else os.environ
        self._listeners: list[ConfigListener] = []
        self._env_api_key: str | None = None
        self._config = config if config is not None else self._load()

    def _load(self) -> AssistantConfig:
        self._env_api_key = None
        config = AssistantConfig.from_yaml(self.path) if self.path else AssistantConfig()
        if not config.api_key:
            env_key = self._env.get(API_KEY_ENV_VAR, "")
            if env_key:
                self._env_api_key = env_key
                config = config.model_copy(update={"api_key": env_key})
        return config

    def get_snapshot(self) -> AssistantConfig:
        """Current immutable snapshot."""
        return self._config

    def get(self, field: str) -> Any:
        """Current value of a top-level field."""
        if field not in AssistantConfig.model_fields:
            raise KeyError(f"Unknown configuration field: {field}")
        return getattr(self._config, field)

    def update(self, field: str, value: Any) -> AssistantConfig:
        """Replace one top-level field and notify listeners.

        The new snapshot is re-validated by pydantic (types only); range
        problems are left to ``validate()``.

        Raises:
            KeyError: ``field`` is not a settings field.
            ValueError: ``value`` has the wrong type for the field.
        """
        if field not in AssistantConfig.model_fields:
            raise KeyError(f"Unknown configuration field: {field}")

        data = self._config.model_dump()
        data[field] = value
        try:
            new_config = AssistantConfig.model_validate(data)
        except ValidationError as e:
            _logger.error("config_update_rejected", field=field, error=str(e))
            raise ValueError(f"Failed to update configuration {field}: {e}") from e

        if self.path is not None:
            self._persist(new_config, self.path)

        self._config = new_config
        # "value" is not a sensitive key, so the log sanitizer won't catch it
        shown = "[REDACTED]" if field == "api_key" else value
        _logger.info("config_updated", field=field, value=shown)
        self._notify()
        return new_config

    def reload(self) -> AssistantConfig:
        """Re-read the backing file and notify listeners."""
        self._config = self._load()
        _logger.info("config_reloaded", path=str(self.path) if self.path else None)
        self._notify()
        return self._config

    def on_change(self, listener: ConfigListener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def validate(self) -> ValidationResult:
        """Validate the current snapshot."""
        return validate_configuration(self._config)

    def _persist(self, config: AssistantConfig, path: Path) -> None:
        # a key taken from the environment stays out of the file
        if self._env_api_key and config.api_key == self._env_api_key:
            config = config.model_copy(update={"api_key": ""})
        config.to_yaml(path)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._config)


__all__ = ["ConfigListener", "ConfigurationStore"]
