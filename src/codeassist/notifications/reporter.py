"""Error reporting.

Combines the classifier, the notification throttle and a ``Notifier``: every
reported failure is logged and counted, and alerts reach the user only while
the throttle allows it. The alert text and offered actions depend on the
failure's classification.
"""

from __future__ import annotations

from codeassist.core.errors import (
    ErrorClassification,
    FailureInfo,
    RequestError,
    classify_info,
    describe_failure,
)
from codeassist.core.logging import get_logger
from codeassist.core.validation import ValidationResult
from codeassist.execution.throttle import NotificationThrottle
from codeassist.notifications.base import (
    ACTION_CHECK_SETTINGS,
    ACTION_HELP,
    ACTION_OK,
    ACTION_OPEN_SETTINGS,
    ACTION_RETRY,
    ACTION_SHOW_LOGS,
    Alert,
    AlertSeverity,
    Notifier,
)

_logger = get_logger("reporter")

NETWORK_ALERT = "Network error occurred. Please check your internet connection."
AUTH_ALERT = "API authentication failed. Please check your API key."
RATE_LIMIT_ALERT = "API rate limit exceeded. Please wait a moment before trying again."


def is_critical(failure: object, info: FailureInfo) -> bool:
    """Programming errors and explicitly fatal messages."""
    if isinstance(failure, (TypeError, NameError)):
        return True
    return info.message is not None and "FATAL" in info.message


class ErrorReporter:
    """Surfaces failures to the user without flooding them."""

    def __init__(
        self,
        notifier: Notifier,
        throttle: NotificationThrottle | None = None,
    ) -> None:
        self.notifier = notifier
        self.throttle = throttle or NotificationThrottle()

    def classify(self, failure: object) -> ErrorClassification:
        if isinstance(failure, RequestError):
            return failure.classification
        return classify_info(describe_failure(failure))

    def build_alert(self, failure: object, context: str) -> Alert:
        """Alert for ``failure`` according to its classification."""
        info = describe_failure(failure)
        classification = self.classify(failure)

        if classification is ErrorClassification.NETWORK:
            return Alert(
                AlertSeverity.ERROR,
                NETWORK_ALERT,
                (ACTION_RETRY, ACTION_CHECK_SETTINGS),
                context,
            )
        if classification is ErrorClassification.AUTHENTICATION:
            return Alert(
                AlertSeverity.ERROR,
                AUTH_ALERT,
                (ACTION_OPEN_SETTINGS, ACTION_HELP),
                context,
            )
        if classification is ErrorClassification.RATE_LIMIT:
            return Alert(AlertSeverity.WARNING, RATE_LIMIT_ALERT, (ACTION_OK,), context)

        message = f"Error in {context}: {info.display_message}"
        if is_critical(failure, info):
            return Alert(AlertSeverity.ERROR, message, (ACTION_SHOW_LOGS,), context)
        return Alert(AlertSeverity.WARNING, message, (), context)

    async def report(
        self,
        failure: object,
        context: str,
        *,
        show_user: bool = True,
    ) -> str | None:
        """Log a failure and alert the user if the throttle allows.

        Args:
            failure: Anything that went wrong (exception, string, mapping).
            context: Operation name, part of the deduplication key.
            show_user: When False the failure is only logged and counted.

        Returns:
            The action the user picked, or None.
        """
        classification = self.classify(failure)
        info = describe_failure(failure)
        log = (
            _logger.warning
            if classification is ErrorClassification.RATE_LIMIT
            else _logger.error
        )
        log(
            "error_reported",
            context=context,
            classification=classification.value,
            error_message=info.display_message,
            status=info.status,
        )

        allowed = self.throttle.record(failure, context)
        if not show_user or not allowed:
            return None
        return await self.notifier.notify(self.build_alert(failure, context))

    async def report_configuration_error(self, result: ValidationResult) -> str | None:
        """Alert on invalid settings. Never throttled."""
        if result.is_valid:
            return None
        for issue in result.errors:
            _logger.error("configuration_error", field=issue.field, error_message=issue.message)
        details = "; ".join(issue.message for issue in result.errors)
        return await self.notifier.notify(
            Alert(
                AlertSeverity.ERROR,
                f"Configuration Error: {details}",
                (ACTION_OPEN_SETTINGS,),
                "configuration",
            )
        )


__all__ = ["ErrorReporter", "is_critical"]
