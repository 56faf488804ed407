"""Abstract base for chat-completion backends."""

from abc import ABC, abstractmethod

from codeassist.backends.models import ChatRequest, ChatResponse


class ChatBackend(ABC):
    """Performs exactly one chat-completion attempt per call.

    Backends never retry; the retry engine decides whether another attempt
    is made. Failures are raised as ``TransportError``.
    """

    @abstractmethod
    async def send_chat(self, request: ChatRequest, api_key: str) -> ChatResponse:
        """Send one request.

        Args:
            request: Chat-completion request body.
            api_key: Credential to present for this attempt.

        Returns:
            Parsed ChatResponse.

        Raises:
            TransportError: On any network, HTTP or decoding failure.
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable backend name."""
        ...

    async def close(self) -> None:
        """Release any held connections."""
        return None
