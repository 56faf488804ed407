"""Tests for codeassist.core.validation."""

from __future__ import annotations

import pytest

from codeassist.core.config import AssistantConfig
from codeassist.core.validation import (
    ConfigurationSeverity,
    is_valid_api_key_format,
    validate_configuration,
)
from tests.helpers import VALID_API_KEY


def _fields(issues) -> list[str]:
    return [issue.field for issue in issues]


class TestApiKeyFormat:
    """Tests for the credential shape check."""

    def test_valid_key(self) -> None:
        assert is_valid_api_key_format(VALID_API_KEY)

    def test_wrong_prefix(self) -> None:
        assert not is_valid_api_key_format("pk-0123456789abcdef0123456789")

    def test_too_short(self) -> None:
        """19 characters is one short of the minimum."""
        assert not is_valid_api_key_format("sk-" + "a" * 16)
        assert is_valid_api_key_format("sk-" + "a" * 17)


class TestValidateConfiguration:
    """Tests for validate_configuration."""

    def test_valid_settings(self) -> None:
        result = validate_configuration(AssistantConfig(api_key=VALID_API_KEY))
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_empty_key_is_error(self) -> None:
        result = validate_configuration(AssistantConfig(api_key=""))
        assert not result.is_valid
        assert result.errors[0].field == "apiKey"
        assert result.errors[0].message == "API Key is required"

    def test_whitespace_key_is_error(self) -> None:
        result = validate_configuration(AssistantConfig(api_key="   "))
        assert _fields(result.errors) == ["apiKey"]

    def test_short_key_is_warning_only(self) -> None:
        """A malformed key still lets requests through."""
        result = validate_configuration(AssistantConfig(api_key="sk-short"))
        assert result.is_valid
        assert result.warnings[0].field == "apiKey"
        assert result.warnings[0].message == "API Key format appears invalid"
        assert result.warnings[0].severity is ConfigurationSeverity.WARNING

    def test_unknown_model(self) -> None:
        result = validate_configuration(
            AssistantConfig(api_key=VALID_API_KEY, model="gpt-4")
        )
        assert not result.is_valid
        assert result.errors[0].message == "Invalid model selected"

    @pytest.mark.parametrize("model", ["deepseek-coder", "deepseek-chat"])
    def test_supported_models(self, model: str) -> None:
        result = validate_configuration(AssistantConfig(api_key=VALID_API_KEY, model=model))
        assert result.is_valid

    @pytest.mark.parametrize("max_tokens", [99, 8193, 0, -1])
    def test_max_tokens_out_of_range(self, max_tokens: int) -> None:
        result = validate_configuration(
            AssistantConfig(api_key=VALID_API_KEY, max_tokens=max_tokens)
        )
        assert "maxTokens" in _fields(result.errors)
        assert result.errors[0].message == "Max tokens must be between 100 and 8192"

    @pytest.mark.parametrize("max_tokens", [100, 4096, 8192])
    def test_max_tokens_bounds_inclusive(self, max_tokens: int) -> None:
        result = validate_configuration(
            AssistantConfig(api_key=VALID_API_KEY, max_tokens=max_tokens)
        )
        assert result.is_valid

    def test_high_max_tokens_warns(self) -> None:
        """4097 is valid but slow."""
        result = validate_configuration(AssistantConfig(api_key=VALID_API_KEY, max_tokens=4097))
        assert result.is_valid
        assert _fields(result.warnings) == ["maxTokens"]
        assert result.warnings[0].message == "High token count may impact performance"

    def test_max_tokens_4096_does_not_warn(self) -> None:
        result = validate_configuration(AssistantConfig(api_key=VALID_API_KEY, max_tokens=4096))
        assert result.warnings == []

    @pytest.mark.parametrize("temperature", [-0.1, 2.1])
    def test_temperature_out_of_range(self, temperature: float) -> None:
        result = validate_configuration(
            AssistantConfig(api_key=VALID_API_KEY, temperature=temperature)
        )
        assert _fields(result.errors) == ["temperature"]
        assert result.errors[0].message == "Temperature must be between 0 and 2"

    @pytest.mark.parametrize("temperature", [0.0, 2.0])
    def test_temperature_bounds_inclusive(self, temperature: float) -> None:
        result = validate_configuration(
            AssistantConfig(api_key=VALID_API_KEY, temperature=temperature)
        )
        assert result.is_valid

    def test_collects_every_issue(self) -> None:
        """Validation does not stop at the first problem."""
        result = validate_configuration(
            AssistantConfig(api_key="", model="nope", max_tokens=50, temperature=3.0)
        )
        assert _fields(result.errors) == ["apiKey", "model", "maxTokens", "temperature"]

    def test_does_not_modify_input(self) -> None:
        config = AssistantConfig(api_key="", max_tokens=50)
        before = config.model_dump()
        validate_configuration(config)
        assert config.model_dump() == before

    def test_issues_lists_errors_then_warnings(self) -> None:
        result = validate_configuration(AssistantConfig(api_key="sk-short", model="nope"))
        assert [i.severity for i in result.issues] == [
            ConfigurationSeverity.ERROR,
            ConfigurationSeverity.WARNING,
        ]

    def test_format_short(self) -> None:
        result = validate_configuration(AssistantConfig(api_key=""))
        assert result.errors[0].format_short() == "[error] apiKey: API Key is required"
