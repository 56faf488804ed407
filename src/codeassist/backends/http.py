"""HTTP chat-completion backend.

Talks to a DeepSeek-compatible ``/chat/completions`` endpoint with
``httpx.AsyncClient``. One call is one attempt: every failure (connection,
timeout, HTTP status, undecodable body) is raised as a ``TransportError`` with
enough structure (status, transport code, JSON error body) for the classifier.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
from pydantic import ValidationError

from codeassist import __version__
from codeassist.backends.base import ChatBackend
from codeassist.backends.models import ApiErrorBody, ChatRequest, ChatResponse
from codeassist.core.constants import (
    CHAT_COMPLETIONS_PATH,
    DEFAULT_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)
from codeassist.core.errors import TransportError
from codeassist.core.logging import get_logger

_logger = get_logger("backend.http")

_DNS_FAILURE_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo",
    "no address associated",
    "temporary failure in name resolution",
)


def _connect_error_code(exc: httpx.ConnectError) -> str:
    text = str(exc).lower()
    if any(marker in text for marker in _DNS_FAILURE_MARKERS):
        return "ENOTFOUND"
    if "unreachable" in text:
        return "ENETUNREACH"
    return "ECONNREFUSED"


def _decode_error_body(response: httpx.Response) -> dict[str, Any] | None:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


class HttpChatBackend(ChatBackend):
    """Execute chat completions over HTTPS.

    The client is created lazily so construction never needs an event loop.
    The bearer credential is passed per call, not baked into the client, so a
    rotated key takes effect on the very next attempt.

    Attributes:
        base_url: Service base URL (e.g. ``https://api.deepseek.com/v1``).
        timeout: Upper bound for one attempt, in seconds.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP backend.

        Args:
            base_url: Service base URL; a trailing slash is stripped.
            timeout: Per-attempt timeout in seconds.
            transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "http"

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": f"codeassist/{__version__}",
                },
            )
        return self._client

    async def send_chat(self, request: ChatRequest, api_key: str) -> ChatResponse:
        """POST one chat-completion request.

        Raises:
            TransportError: ``code`` is set when no response was received
                (``ETIMEDOUT``, ``ECONNREFUSED``, ``ENOTFOUND`` ...),
                ``status`` when the service answered with an error.
        """
        start_time = time.monotonic()
        _logger.debug(
            "api_request",
            method="POST",
            url=f"{self.base_url}{CHAT_COMPLETIONS_PATH}",
            model=request.model,
            max_tokens=request.max_tokens,
        )

        client = await self._get_client()
        try:
            response = await client.post(
                CHAT_COMPLETIONS_PATH,
                json=request.to_payload(),
                headers={"Authorization": f"Bearer {api_key}"},
            )
        except httpx.TimeoutException as e:
            _logger.warning("request_timeout", timeout_seconds=self.timeout)
            raise TransportError(
                f"Request timed out after {self.timeout}s", code="ETIMEDOUT"
            ) from e
        except httpx.ConnectError as e:
            code = _connect_error_code(e)
            _logger.warning("connection_error", code=code, error_message=str(e))
            raise TransportError(f"Network error: {e}", code=code) from e
        except (httpx.NetworkError, httpx.ProtocolError) as e:
            _logger.warning("connection_error", code="ECONNRESET", error_message=str(e))
            raise TransportError(f"Network error: {e}", code="ECONNRESET") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request error: {e}") from e

        duration = time.monotonic() - start_time

        if response.status_code >= 400:
            body = _decode_error_body(response)
            detail = response.text[:200]
            if body is not None:
                try:
                    detail = ApiErrorBody.model_validate(body).error.message or detail
                except ValidationError:
                    pass
            _logger.error(
                "api_error_response",
                status_code=response.status_code,
                duration_seconds=round(duration, 3),
                detail=detail,
            )
            raise TransportError(
                f"HTTP {response.status_code}: {detail}",
                status=response.status_code,
                body=body,
            )

        try:
            parsed = ChatResponse.model_validate(response.json())
        except ValueError as e:
            raise TransportError(
                f"Malformed response body: {e}", status=response.status_code
            ) from e

        _logger.debug(
            "api_response",
            status_code=response.status_code,
            duration_seconds=round(duration, 3),
            choices=len(parsed.choices),
            total_tokens=parsed.usage.total_tokens if parsed.usage else None,
        )
        return parsed

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = ["HttpChatBackend"]
