"""User-facing alerts."""

from codeassist.notifications.base import Alert, AlertSeverity, Notifier
from codeassist.notifications.console import ConsoleNotifier
from codeassist.notifications.reporter import ErrorReporter

__all__ = ["Alert", "AlertSeverity", "ConsoleNotifier", "ErrorReporter", "Notifier"]
