"""Terminal notifier using Rich."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from codeassist.notifications.base import Alert, AlertSeverity

_STYLES: dict[AlertSeverity, str] = {
    AlertSeverity.ERROR: "red",
    AlertSeverity.WARNING: "yellow",
    AlertSeverity.INFO: "blue",
}


class ConsoleNotifier:
    """Prints alerts as Rich panels on stderr.

    Non-interactive: offered actions are listed as hints and no action is
    ever reported back.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    async def notify(self, alert: Alert) -> str | None:
        style = _STYLES[alert.severity]
        body = escape(alert.message)
        if alert.actions:
            body += f"\n[dim]Actions: {escape(', '.join(alert.actions))}[/dim]"
        self.console.print(
            Panel(body, title=alert.severity.value.upper(), border_style=style, expand=False)
        )
        return None
