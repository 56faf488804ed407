"""Chat-completion backends."""

from codeassist.backends.base import ChatBackend
from codeassist.backends.http import HttpChatBackend

__all__ = ["ChatBackend", "HttpChatBackend"]
