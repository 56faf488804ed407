"""Notification types and protocol.

Provides the seam between the assistant and whatever shows alerts to the
user (an editor, a terminal):
- AlertSeverity enum for alert levels
- Alert dataclass carrying message and offered actions
- Notifier protocol for alert presenters
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol, runtime_checkable

from codeassist.utils.time import utc_now

ACTION_RETRY = "Retry"
ACTION_CHECK_SETTINGS = "Check Settings"
ACTION_OPEN_SETTINGS = "Open Settings"
ACTION_HELP = "Help"
ACTION_OK = "OK"
ACTION_SHOW_LOGS = "Show Logs"


class AlertSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Alert:
    """A user-facing alert."""

    severity: AlertSeverity
    """How prominently the alert should be shown."""

    message: str
    """Text shown to the user."""

    actions: tuple[str, ...] = ()
    """Buttons/choices offered alongside the message."""

    context: str | None = None
    """Operation the alert originates from."""

    timestamp: datetime = field(default_factory=utc_now)


@runtime_checkable
class Notifier(Protocol):
    """Protocol for alert presenters.

    Implementations present the alert and report back which action the
    user picked. Presentation failures should be logged, not raised.
    """

    async def notify(self, alert: Alert) -> str | None:
        """Present an alert.

        Returns:
            The chosen action, or None if the user dismissed it or the
            presenter is non-interactive.
        """
        ...
