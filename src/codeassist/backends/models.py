"""Chat-completion wire models.

Pydantic models for the request and response bodies exchanged with the
remote service:

    POST /chat/completions
    {"model": ..., "messages": [{"role": ..., "content": ...}], "max_tokens": ...}

    200 {"id": ..., "choices": [{"index": 0, "message": {...}, "finish_reason": ...}],
         "usage": {...}}
    4xx/5xx {"error": {"message": ..., "type": ..., "code": ...}}
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """One role-tagged message."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class ChatRequest(BaseModel):
    """Request body for the chat-completion endpoint."""

    model_config = ConfigDict(frozen=True)

    model: str
    messages: list[ChatMessage]
    max_tokens: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    stream: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body with unset optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)


class ChatChoice(BaseModel):
    index: int = 0
    message: ChatMessage
    finish_reason: str | None = None


class ChatUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatResponse(BaseModel):
    """Successful chat-completion response."""

    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[ChatChoice] = Field(default_factory=list)
    usage: ChatUsage | None = None

    @property
    def first_content(self) -> str | None:
        """Content of the first choice, None when the service returned none."""
        if not self.choices:
            return None
        return self.choices[0].message.content


class ApiErrorDetail(BaseModel):
    message: str = ""
    type: str | None = None
    code: str | int | None = None


class ApiErrorBody(BaseModel):
    """Failure body returned with 4xx/5xx responses."""

    error: ApiErrorDetail


__all__ = [
    "ApiErrorBody",
    "ApiErrorDetail",
    "ChatChoice",
    "ChatMessage",
    "ChatRequest",
    "ChatResponse",
    "ChatUsage",
    "Role",
]
