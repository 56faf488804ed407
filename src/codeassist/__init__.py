"""codeassist - resilient LLM request orchestration for editor assistants."""

__version__ = "0.1.0"
