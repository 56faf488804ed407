"""Request orchestration.

``RequestOrchestrator`` is the entry point for the assistant operations. Each
operation:

1. validates the current settings and refuses to send anything when they are
   invalid;
2. renders the operation's prompt;
3. runs one logical call through the ``RetryEngine``;
4. parses the first choice of the response.

Terminal failures leave as a ``RequestError`` subclass carrying a fixed
user-facing message; the original failure is chained as ``__cause__``.
"""

from __future__ import annotations

import hashlib
import json
from types import TracebackType
from typing import TYPE_CHECKING, Any

from codeassist.backends.base import ChatBackend
from codeassist.backends.http import HttpChatBackend
from codeassist.backends.models import ChatMessage, ChatRequest, ChatResponse
from codeassist.core.config import AssistantConfig
from codeassist.core.constants import (
    CHAT_COMPLETIONS_PATH,
    COMPLETION_MAX_TOKENS_CAP,
    MAX_COMPLETION_SUGGESTIONS,
    NO_EXPLANATION_AVAILABLE,
    NO_REFACTOR_AVAILABLE,
    PROBE_MAX_TOKENS,
)
from codeassist.core.errors import (
    AuthenticationError,
    ClientError,
    ConfigurationInvalidError,
    ErrorClassification,
    NetworkError,
    RateLimitError,
    RequestError,
    ServerError,
    UnknownRequestError,
    classify_info,
    describe_failure,
)
from codeassist.core.logging import RequestContext, get_logger, with_context
from codeassist.core.store import ConfigurationStore
from codeassist.execution.cache import ResponseCache
from codeassist.execution.retry import RequestDescriptor, RetryEngine
from codeassist.prompts.templating import (
    CompletionRequest,
    ExplanationRequest,
    PromptBuilder,
    RefactorRequest,
)
from codeassist.utils.time import Clock

if TYPE_CHECKING:
    from codeassist.notifications.reporter import ErrorReporter

_logger = get_logger("orchestrator")

AUTH_FAILED_MESSAGE = "Invalid API key. Please check your configuration."
RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please try again later."
SERVER_FAILED_MESSAGE = "API server error. Please try again later."
NETWORK_FAILED_MESSAGE = "Network error. Please check your internet connection."

_ERROR_TYPES: dict[ErrorClassification, tuple[type[RequestError], str | None]] = {
    ErrorClassification.AUTHENTICATION: (AuthenticationError, AUTH_FAILED_MESSAGE),
    ErrorClassification.RATE_LIMIT: (RateLimitError, RATE_LIMITED_MESSAGE),
    ErrorClassification.SERVER_FAULT: (ServerError, SERVER_FAILED_MESSAGE),
    ErrorClassification.NETWORK: (NetworkError, NETWORK_FAILED_MESSAGE),
    ErrorClassification.CLIENT_FAULT: (ClientError, None),
    ErrorClassification.UNKNOWN: (UnknownRequestError, None),
}


def to_request_error(failure: object) -> RequestError:
    """Map a terminal failure to its user-facing ``RequestError``."""
    info = describe_failure(failure)
    error_type, message = _ERROR_TYPES[classify_info(info)]
    if message is None:
        message = f"API Error: {info.display_message}"
    return error_type(message, status=info.status)


def parse_completion_response(response: ChatResponse) -> list[str]:
    """Suggestions from the first choice: one per non-blank line, at most 5."""
    content = response.first_content
    if not content:
        return []
    lines = (line.strip() for line in content.split("\n"))
    return [line for line in lines if line][:MAX_COMPLETION_SUGGESTIONS]


def parse_explanation_response(response: ChatResponse) -> str:
    if not response.choices:
        return NO_EXPLANATION_AVAILABLE
    return (response.first_content or "").strip()


def parse_refactor_response(response: ChatResponse) -> str:
    if not response.choices:
        return NO_REFACTOR_AVAILABLE
    return (response.first_content or "").strip()


def _cache_key(operation: str, request: ChatRequest) -> str:
    blob = json.dumps(request.to_payload(), sort_keys=True)
    return hashlib.sha256(f"{operation}\0{blob}".encode()).hexdigest()


class RequestOrchestrator:
    """Runs assistant operations against the chat-completion service.

    Example:
        async with RequestOrchestrator(store) as orchestrator:
            suggestions = await orchestrator.generate_completion(
                CompletionRequest(context="def add(a, b):\\n    ret", language="python")
            )
    """

    def __init__(
        self,
        store: ConfigurationStore,
        backend: ChatBackend | None = None,
        *,
        engine: RetryEngine | None = None,
        cache: ResponseCache | None = None,
        prompt_builder: PromptBuilder | None = None,
        reporter: ErrorReporter | None = None,
        clock: Clock | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            store: Settings owner. The credential is re-read before every
                attempt and cache limits follow its change notifications.
            backend: Chat transport; an ``HttpChatBackend`` on the configured
                base URL by default.
            engine: Retry engine; built over ``store`` by default.
            cache: Response cache; sized from the settings by default.
            prompt_builder: Prompt renderer.
            reporter: When set, terminal failures and invalid settings are
                also surfaced to the user through it.
            clock: Clock for the default cache.
        """
        config = store.get_snapshot()
        self.store = store
        self.backend = backend or HttpChatBackend(base_url=config.base_url)
        self.engine = engine or RetryEngine(lambda: str(store.get("api_key")))
        self.cache = cache or ResponseCache(
            ttl_seconds=config.cache.ttl_seconds,
            max_entries=config.cache.max_entries,
            clock=clock,
        )
        self.prompts = prompt_builder or PromptBuilder()
        self.reporter = reporter
        self._unsubscribe = store.on_change(self._on_config_change)

    def _on_config_change(self, config: AssistantConfig) -> None:
        self.cache.clear()
        self.cache.configure(config.cache.ttl_seconds, config.cache.max_entries)
        _logger.debug("cache_reset", reason="config_changed")

    async def _require_valid_config(self) -> AssistantConfig:
        result = self.store.validate()
        if not result.is_valid:
            _logger.warning(
                "configuration_invalid",
                fields=[issue.field for issue in result.errors],
            )
            if self.reporter is not None:
                await self.reporter.report_configuration_error(result)
            raise ConfigurationInvalidError(result)
        return self.store.get_snapshot()

    async def _send(self, operation: str, request: ChatRequest) -> ChatResponse:
        descriptor = RequestDescriptor(endpoint=CHAT_COMPLETIONS_PATH, payload=request)

        async def attempt(desc: RequestDescriptor[ChatRequest], api_key: str) -> ChatResponse:
            return await self.backend.send_chat(desc.payload, api_key)

        with with_context(
            RequestContext(operation=operation, request_id=descriptor.id, model=request.model)
        ):
            return await self.engine.execute(descriptor, attempt)

    def _build_request(
        self, messages: list[ChatMessage], config: AssistantConfig, max_tokens: int
    ) -> ChatRequest:
        return ChatRequest(
            model=config.model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=config.temperature,
        )

    async def _run(self, operation: str, request: ChatRequest) -> ChatResponse:
        try:
            return await self._send(operation, request)
        except Exception as exc:
            error = to_request_error(exc)
            if self.reporter is not None:
                await self.reporter.report(error, operation)
            raise error from exc

    def _cached(self, operation: str, request: ChatRequest) -> Any | None:
        if not self.store.get_snapshot().cache.enabled:
            return None
        value = self.cache.get(_cache_key(operation, request))
        if value is not None:
            _logger.debug("cache_hit", operation=operation)
        return value

    def _remember(self, operation: str, request: ChatRequest, value: Any) -> None:
        if self.store.get_snapshot().cache.enabled:
            self.cache.set(_cache_key(operation, request), value)

    async def generate_completion(self, request: CompletionRequest) -> list[str]:
        """Code suggestions for the cursor position at the end of the context.

        Raises:
            ConfigurationInvalidError: The settings are invalid; nothing was sent.
            RequestError: The call failed terminally.
        """
        config = await self._require_valid_config()
        if not config.completion.enabled:
            return []

        messages = self.prompts.completion_messages(request)
        max_tokens = min(config.max_tokens, COMPLETION_MAX_TOKENS_CAP)
        request_body = self._build_request(messages, config, max_tokens)
        cached = self._cached("complete", request_body)
        if cached is not None:
            return list(cached)

        response = await self._run("complete", request_body)
        suggestions = parse_completion_response(response)
        self._remember("complete", request_body, tuple(suggestions))
        _logger.info("completion_generated", suggestions=len(suggestions))
        return suggestions

    async def explain_code(self, request: ExplanationRequest) -> str:
        """Natural-language explanation of the given code.

        Raises:
            ConfigurationInvalidError: The settings are invalid; nothing was sent.
            RequestError: The call failed terminally.
        """
        config = await self._require_valid_config()
        messages = self.prompts.explanation_messages(request)
        request_body = self._build_request(messages, config, config.max_tokens)
        cached = self._cached("explain", request_body)
        if cached is not None:
            return str(cached)

        response = await self._run("explain", request_body)
        explanation = parse_explanation_response(response)
        self._remember("explain", request_body, explanation)
        return explanation

    async def refactor_code(self, request: RefactorRequest) -> str:
        """Refactored code with comments describing the improvements.

        Raises:
            ConfigurationInvalidError: The settings are invalid; nothing was sent.
            RequestError: The call failed terminally.
        """
        config = await self._require_valid_config()
        messages = self.prompts.refactor_messages(request)
        request_body = self._build_request(messages, config, config.max_tokens)
        cached = self._cached("refactor", request_body)
        if cached is not None:
            return str(cached)

        response = await self._run("refactor", request_body)
        suggestion = parse_refactor_response(response)
        self._remember("refactor", request_body, suggestion)
        return suggestion

    async def test_connection(self) -> bool:
        """Send a tiny probe request. Never raises for request failures."""
        result = self.store.validate()
        if not result.is_valid:
            _logger.warning("connection_test_skipped", reason="invalid_configuration")
            return False

        config = self.store.get_snapshot()
        request = ChatRequest(
            model=config.model,
            messages=self.prompts.connection_test_messages(),
            max_tokens=PROBE_MAX_TOKENS,
            temperature=0,
        )
        try:
            await self._send("test_connection", request)
        except Exception as exc:
            info = describe_failure(exc)
            _logger.warning(
                "connection_test_failed",
                classification=classify_info(info).value,
                error_message=info.display_message,
            )
            if self.reporter is not None:
                await self.reporter.report(exc, "test_connection", show_user=False)
            return False
        _logger.info("connection_test_succeeded", model=config.model)
        return True

    def clear_cache(self) -> None:
        self.cache.clear()

    async def close(self) -> None:
        """Release the transport and stop following settings changes."""
        self._unsubscribe()
        await self.backend.close()

    async def __aenter__(self) -> RequestOrchestrator:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


__all__ = [
    "RequestOrchestrator",
    "parse_completion_response",
    "parse_explanation_response",
    "parse_refactor_response",
    "to_request_error",
]
