"""Request execution: retries, throttling, caching and orchestration."""

from codeassist.execution.cache import ResponseCache
from codeassist.execution.orchestrator import RequestOrchestrator
from codeassist.execution.retry import RequestDescriptor, RequestState, RetryEngine, RetryPolicy
from codeassist.execution.throttle import NotificationThrottle

__all__ = [
    "NotificationThrottle",
    "RequestDescriptor",
    "RequestOrchestrator",
    "RequestState",
    "ResponseCache",
    "RetryEngine",
    "RetryPolicy",
]
