"""Prompt templating for codeassist operations.

Builds the role-tagged message sequence sent for each operation from Jinja2
templates. Each operation has a fixed system instruction and a user template
rendered from the operation's request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import jinja2

from codeassist.backends.models import ChatMessage
from codeassist.core.constants import DEFAULT_COMPLETION_SUGGESTIONS

RefactorType = Literal["optimize", "readability", "performance", "security"]

REFACTOR_INSTRUCTIONS: dict[str, str] = {
    "optimize": "Optimize this code for better performance",
    "readability": "Improve code readability and maintainability",
    "performance": "Optimize this code for maximum performance",
    "security": "Improve code security and fix potential vulnerabilities",
}

SYSTEM_PROMPTS: dict[str, str] = {
    "complete": (
        "You are a helpful coding assistant. "
        "Provide code completions based on the context."
    ),
    "explain": "You are a helpful coding assistant. Explain code clearly and concisely.",
    "refactor": (
        "You are a helpful coding assistant. "
        "Refactor code to improve quality while maintaining functionality."
    ),
}

CONNECTION_TEST_PROMPT = "Hello, this is a connection test."

_TEMPLATES: dict[str, str] = {
    "complete": """\
Language: {{ language }}

Context:
```{{ language }}
{{ context }}
```

Please provide {{ max_suggestions }} relevant code completion suggestions for \
the cursor position at the end of the context. Return only the code \
suggestions, one per line.""",
    "explain": """\
Language: {{ language }}

Code to explain:
```{{ language }}
{{ code }}
```

Please provide a clear and concise explanation of what this code does\
{% if include_examples %}, including examples if helpful{% endif %}.""",
    "refactor": """\
Language: {{ language }}

Current code:
```{{ language }}
{{ code }}
```

Task: {{ instruction }}

Please provide the refactored code with comments explaining the improvements made.""",
}


@dataclass(frozen=True)
class CompletionRequest:
    """Complete code at the end of ``context``."""

    context: str
    language: str
    max_suggestions: int = DEFAULT_COMPLETION_SUGGESTIONS

    def to_dict(self) -> dict[str, Any]:
        return {
            "context": self.context,
            "language": self.language,
            "max_suggestions": self.max_suggestions,
        }


@dataclass(frozen=True)
class ExplanationRequest:
    """Explain ``code`` in natural language."""

    code: str
    language: str
    include_examples: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "language": self.language,
            "include_examples": self.include_examples,
        }


@dataclass(frozen=True)
class RefactorRequest:
    """Rewrite ``code`` towards one refactoring goal."""

    code: str
    language: str
    refactor_type: RefactorType = "readability"

    def __post_init__(self) -> None:
        if self.refactor_type not in REFACTOR_INSTRUCTIONS:
            raise ValueError(
                f"refactor_type must be one of {sorted(REFACTOR_INSTRUCTIONS)}, "
                f"got {self.refactor_type!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "language": self.language,
            "instruction": REFACTOR_INSTRUCTIONS[self.refactor_type],
        }


class PromptBuilder:
    """Renders operation requests into chat messages."""

    def __init__(self, jinja_env: jinja2.Environment | None = None) -> None:
        self.env = jinja_env or jinja2.Environment(
            undefined=jinja2.StrictUndefined,
            autoescape=False,
            keep_trailing_newline=False,
        )
        self._templates = {
            name: self.env.from_string(source) for name, source in _TEMPLATES.items()
        }

    def render(self, operation: str, variables: dict[str, Any]) -> str:
        """Render the user prompt of ``operation``."""
        return self._templates[operation].render(**variables)

    def _messages(self, operation: str, variables: dict[str, Any]) -> list[ChatMessage]:
        return [
            ChatMessage(role="system", content=SYSTEM_PROMPTS[operation]),
            ChatMessage(role="user", content=self.render(operation, variables)),
        ]

    def completion_messages(self, request: CompletionRequest) -> list[ChatMessage]:
        return self._messages("complete", request.to_dict())

    def explanation_messages(self, request: ExplanationRequest) -> list[ChatMessage]:
        return self._messages("explain", request.to_dict())

    def refactor_messages(self, request: RefactorRequest) -> list[ChatMessage]:
        return self._messages("refactor", request.to_dict())

    def connection_test_messages(self) -> list[ChatMessage]:
        return [ChatMessage(role="user", content=CONNECTION_TEST_PROMPT)]


__all__ = [
    "CONNECTION_TEST_PROMPT",
    "CompletionRequest",
    "ExplanationRequest",
    "PromptBuilder",
    "REFACTOR_INSTRUCTIONS",
    "RefactorRequest",
    "RefactorType",
]
