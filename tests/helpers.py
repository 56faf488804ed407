"""Shared test helpers for codeassist tests."""

from __future__ import annotations

from codeassist.backends.models import ChatChoice, ChatMessage, ChatResponse

VALID_API_KEY = "sk-0123456789abcdef0123456789"


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_response(content: str | None) -> ChatResponse:
    """Chat response with one choice, or none when ``content`` is None."""
    if content is None:
        return ChatResponse(id="resp-empty", choices=[])
    return ChatResponse(
        id="resp-1",
        model="deepseek-coder",
        choices=[ChatChoice(message=ChatMessage(role="assistant", content=content))],
    )
