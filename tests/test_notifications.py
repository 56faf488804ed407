"""Tests for codeassist.notifications."""

from __future__ import annotations

import io
from unittest.mock import AsyncMock

import pytest
from rich.console import Console

from codeassist.core.config import AssistantConfig
from codeassist.core.errors import AuthenticationError, NetworkError, TransportError
from codeassist.core.validation import validate_configuration
from codeassist.execution.throttle import NotificationThrottle
from codeassist.notifications import (
    Alert,
    AlertSeverity,
    ConsoleNotifier,
    ErrorReporter,
    Notifier,
)
from codeassist.notifications.reporter import (
    AUTH_ALERT,
    NETWORK_ALERT,
    RATE_LIMIT_ALERT,
)
from tests.helpers import FakeClock


@pytest.fixture
def notifier() -> AsyncMock:
    mock = AsyncMock()
    mock.notify.return_value = None
    return mock


@pytest.fixture
def reporter(notifier: AsyncMock, fake_clock: FakeClock) -> ErrorReporter:
    return ErrorReporter(notifier, NotificationThrottle(fake_clock))


def _sent_alert(notifier: AsyncMock) -> Alert:
    return notifier.notify.await_args.args[0]


class TestErrorReporterAlerts:
    """Tests for classification-specific alerts."""

    @pytest.mark.asyncio
    async def test_network_alert(self, reporter: ErrorReporter, notifier: AsyncMock) -> None:
        await reporter.report(TransportError("refused", code="ECONNREFUSED"), "complete")
        alert = _sent_alert(notifier)
        assert alert.severity is AlertSeverity.ERROR
        assert alert.message == NETWORK_ALERT
        assert alert.actions == ("Retry", "Check Settings")
        assert alert.context == "complete"

    @pytest.mark.asyncio
    async def test_authentication_alert(
        self, reporter: ErrorReporter, notifier: AsyncMock
    ) -> None:
        await reporter.report(TransportError("no", status=401), "explain")
        alert = _sent_alert(notifier)
        assert alert.message == AUTH_ALERT
        assert alert.actions == ("Open Settings", "Help")

    @pytest.mark.asyncio
    async def test_rate_limit_alert(self, reporter: ErrorReporter, notifier: AsyncMock) -> None:
        await reporter.report({"status": 429, "message": "slow"}, "refactor")
        alert = _sent_alert(notifier)
        assert alert.severity is AlertSeverity.WARNING
        assert alert.message == RATE_LIMIT_ALERT
        assert alert.actions == ("OK",)

    @pytest.mark.asyncio
    async def test_generic_alert(self, reporter: ErrorReporter, notifier: AsyncMock) -> None:
        await reporter.report(TransportError("bad", status=400), "complete")
        alert = _sent_alert(notifier)
        assert alert.severity is AlertSeverity.WARNING
        assert alert.message == "Error in complete: bad"
        assert alert.actions == ()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failure", [TypeError("x is None"), "FATAL: disk gone"])
    async def test_critical_alert(
        self, reporter: ErrorReporter, notifier: AsyncMock, failure: object
    ) -> None:
        await reporter.report(failure, "complete")
        alert = _sent_alert(notifier)
        assert alert.severity is AlertSeverity.ERROR
        assert alert.actions == ("Show Logs",)

    @pytest.mark.asyncio
    async def test_request_error_uses_its_classification(
        self, reporter: ErrorReporter, notifier: AsyncMock
    ) -> None:
        await reporter.report(AuthenticationError("Invalid API key."), "complete")
        assert _sent_alert(notifier).message == AUTH_ALERT

        await reporter.report(NetworkError("Network error."), "explain")
        assert _sent_alert(notifier).message == NETWORK_ALERT

    @pytest.mark.asyncio
    async def test_returns_chosen_action(
        self, reporter: ErrorReporter, notifier: AsyncMock
    ) -> None:
        notifier.notify.return_value = "Retry"
        action = await reporter.report(TransportError("x", code="ETIMEDOUT"), "complete")
        assert action == "Retry"


class TestErrorReporterThrottling:
    """Tests for deduplication of alerts."""

    @pytest.mark.asyncio
    async def test_sixth_duplicate_suppressed(
        self, reporter: ErrorReporter, notifier: AsyncMock
    ) -> None:
        for _ in range(7):
            await reporter.report("same problem", "complete")
        assert notifier.notify.await_count == 5

    @pytest.mark.asyncio
    async def test_show_user_false_counts_silently(
        self, reporter: ErrorReporter, notifier: AsyncMock
    ) -> None:
        await reporter.report("quiet", "complete", show_user=False)
        notifier.notify.assert_not_awaited()
        assert reporter.throttle.stats() == {"complete:quiet": 1}

    @pytest.mark.asyncio
    async def test_allowed_again_after_window(
        self, reporter: ErrorReporter, notifier: AsyncMock, fake_clock: FakeClock
    ) -> None:
        for _ in range(6):
            await reporter.report("same", "complete")
        fake_clock.advance(300)
        await reporter.report("same", "complete")
        assert notifier.notify.await_count == 6


class TestConfigurationErrorReport:
    """Tests for report_configuration_error."""

    @pytest.mark.asyncio
    async def test_surfaces_errors(self, reporter: ErrorReporter, notifier: AsyncMock) -> None:
        result = validate_configuration(AssistantConfig(api_key="", model="nope"))
        await reporter.report_configuration_error(result)
        alert = _sent_alert(notifier)
        assert alert.message == "Configuration Error: API Key is required; Invalid model selected"
        assert alert.actions == ("Open Settings",)

    @pytest.mark.asyncio
    async def test_never_throttled(self, reporter: ErrorReporter, notifier: AsyncMock) -> None:
        result = validate_configuration(AssistantConfig(api_key=""))
        for _ in range(8):
            await reporter.report_configuration_error(result)
        assert notifier.notify.await_count == 8

    @pytest.mark.asyncio
    async def test_valid_result_is_silent(
        self, reporter: ErrorReporter, notifier: AsyncMock
    ) -> None:
        result = validate_configuration(AssistantConfig(api_key="sk-0123456789abcdef0123"))
        assert await reporter.report_configuration_error(result) is None
        notifier.notify.assert_not_awaited()


class TestConsoleNotifier:
    """Tests for the Rich console notifier."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(ConsoleNotifier(), Notifier)

    @pytest.mark.asyncio
    async def test_prints_message_and_actions(self) -> None:
        buffer = io.StringIO()
        notifier = ConsoleNotifier(Console(file=buffer, width=120, color_system=None))

        action = await notifier.notify(
            Alert(AlertSeverity.ERROR, "Something broke", ("Retry", "Check Settings"))
        )

        output = buffer.getvalue()
        assert action is None
        assert "Something broke" in output
        assert "Retry, Check Settings" in output
        assert "ERROR" in output
