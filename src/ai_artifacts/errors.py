"""
ai-artifacts error types.

Every failure the orchestrator can surface is an ArtifactsError with a stable
``code`` so callers can branch on it without matching on subclasses.
"""

from typing import Any, Optional


class ArtifactsError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class AuthDeferred(ArtifactsError):
    """No signed-in user. Not a failure: the submission waits for a resubmit."""

    def __init__(self, message: str = "Sign in to continue"):
        super().__init__("auth_deferred", message)


class AuthError(ArtifactsError):
    def __init__(self, message: str, code: str = "auth_error"):
        super().__init__(code, message)


class TransportError(ArtifactsError):
    def __init__(self, message: str, code: str = "transport_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class RateLimitError(TransportError):
    def __init__(self, message: str, retry_after: Optional[str] = None):
        super().__init__(message, code="rate_limited", details={"retry_after": retry_after} if retry_after else None)


class SchemaMismatch(ArtifactsError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("schema_mismatch", message, details)


class ExecutionError(ArtifactsError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("execution_error", message, details)


class MessageStoreError(ArtifactsError):
    def __init__(self, message: str):
        super().__init__("message_store_error", message)
