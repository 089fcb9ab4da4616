"""
ai-artifacts: turn a chat request into a running code artifact.

Streams a structured completion, keeps the conversation in sync with the
partial artifact as it arrives, then executes the finished artifact in a
sandbox.
"""

from ai_artifacts.client import Artifacts, AsyncArtifacts
from ai_artifacts.orchestrator import SubmissionOrchestrator
from ai_artifacts.errors import (
    ArtifactsError,
    AuthDeferred,
    AuthError,
    ExecutionError,
    MessageStoreError,
    RateLimitError,
    SchemaMismatch,
    TransportError,
)
from ai_artifacts.models import Artifact, ExecutionResult, Message, PartialArtifact
from ai_artifacts.ui_state import State, Tab, UIState

__version__ = "0.1.0"
__all__ = [
    "Artifacts",
    "AsyncArtifacts",
    "SubmissionOrchestrator",
    "ArtifactsError",
    "AuthDeferred",
    "AuthError",
    "ExecutionError",
    "MessageStoreError",
    "RateLimitError",
    "SchemaMismatch",
    "TransportError",
    "Artifact",
    "ExecutionResult",
    "Message",
    "PartialArtifact",
    "State",
    "Tab",
    "UIState",
]
