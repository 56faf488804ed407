"""Prompt templates for assistant operations."""

from codeassist.prompts.templating import (
    CompletionRequest,
    ExplanationRequest,
    PromptBuilder,
    RefactorRequest,
)

__all__ = ["CompletionRequest", "ExplanationRequest", "PromptBuilder", "RefactorRequest"]
