"""Pytest fixtures for codeassist tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from codeassist.core.config import AssistantConfig
from codeassist.core.store import ConfigurationStore
from tests.helpers import VALID_API_KEY, FakeClock, RecordingSleep


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Reset structlog, root handlers and CLI flags around each test."""
    from codeassist.cli import helpers as cli_helpers

    cli_helpers.reset_cli_state()
    structlog.reset_defaults()

    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    for handler in original_handlers:
        root_logger.removeHandler(handler)

    yield

    cli_helpers.reset_cli_state()
    structlog.reset_defaults()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def valid_config() -> AssistantConfig:
    """Settings that pass validation without warnings."""
    return AssistantConfig(api_key=VALID_API_KEY)


@pytest.fixture
def store(valid_config: AssistantConfig) -> ConfigurationStore:
    """In-memory store holding valid settings."""
    return ConfigurationStore(config=valid_config, env={})


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """YAML settings file with a valid credential."""
    path = tmp_path / "config.yaml"
    AssistantConfig(api_key=VALID_API_KEY).to_yaml(path)
    return path
