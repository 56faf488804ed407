"""Global constants for codeassist.

Centralizes magic numbers used throughout the codebase,
making them discoverable, consistent, and easy to modify.
"""

# =============================================================================
# Remote service
# =============================================================================

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
"""Base URL of the chat-completion service."""

CHAT_COMPLETIONS_PATH = "/chat/completions"
"""Path of the chat-completion endpoint, relative to the base URL."""

DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
"""Upper bound for a single network attempt."""

API_KEY_ENV_VAR = "DEEPSEEK_API_KEY"
"""Environment variable consulted when the settings file has no credential."""

CONFIG_PATH_ENV_VAR = "CODEASSIST_CONFIG"
"""Environment variable naming the default settings file."""

SUPPORTED_MODELS = ("deepseek-coder", "deepseek-chat")
"""Model identifiers accepted by the validator."""

# =============================================================================
# Retry / Backoff
# =============================================================================

MAX_RETRIES = 3
"""Retries allowed after the first attempt of a logical call."""

BACKOFF_BASE_SECONDS = 2.0
"""Delay before retry N is ``BACKOFF_BASE_SECONDS ** N`` (1s, 2s, 4s)."""

# =============================================================================
# Notification throttling
# =============================================================================

NOTIFY_MAX_PER_KEY = 5
"""Alerts allowed per error key inside one window."""

NOTIFY_WINDOW_SECONDS = 5 * 60
"""Fixed lifetime of an error record, measured from its creation."""

ERROR_KEY_MESSAGE_CHARS = 50
"""Characters of the extracted message that go into an error key."""

FALLBACK_ERROR_MESSAGE = "An unexpected error occurred"
"""Message used when nothing can be extracted from a failure."""

# =============================================================================
# Request shaping
# =============================================================================

COMPLETION_MAX_TOKENS_CAP = 1024
"""Completions never request more tokens than this, whatever the settings say."""

MAX_COMPLETION_SUGGESTIONS = 5
"""Maximum suggestions returned from one completion response."""

DEFAULT_COMPLETION_SUGGESTIONS = 3
"""Suggestions asked for when the caller does not say."""

PROBE_MAX_TOKENS = 10
"""Token budget of the connectivity probe."""

NO_EXPLANATION_AVAILABLE = "No explanation available."
NO_REFACTOR_AVAILABLE = "No refactoring suggestions available."
