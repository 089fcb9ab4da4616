"""
UI-state projection: a read-only view derived from the orchestrator.

``project`` never changes anything; the active tab is whatever the last
transition set it to.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from pydantic import BaseModel

from ai_artifacts.models.artifact import Artifact, PartialArtifact
from ai_artifacts.models.message import Message
from ai_artifacts.models.result import ExecutionResult

if TYPE_CHECKING:
    from ai_artifacts.orchestrator import SubmissionOrchestrator


class State(str, Enum):
    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    AWAITING_AUTH = "awaiting_auth"
    GENERATING = "generating"
    DISPATCHING = "dispatching"
    DONE = "done"
    FAILED = "failed"


class Tab(str, Enum):
    CODE = "code"
    ARTIFACT = "artifact"


LOADING_STATES = frozenset({State.AUTHENTICATING, State.GENERATING, State.DISPATCHING})


class UIState(BaseModel):
    state: State
    is_loading: bool
    active_tab: Tab
    displayed_error: Optional[str] = None
    error_code: Optional[str] = None
    auth_prompt: bool = False
    artifact: Optional[Union[Artifact, PartialArtifact]] = None
    result: Optional[ExecutionResult] = None
    messages: tuple[Message, ...] = ()
    selected_template: str = "auto"
    chat_input: str = ""

    model_config = {"frozen": True}


def project(orchestrator: SubmissionOrchestrator) -> UIState:
    error = orchestrator.error
    return UIState(
        state=orchestrator.state,
        is_loading=orchestrator.state in LOADING_STATES,
        active_tab=orchestrator.current_tab,
        displayed_error=str(error) if error is not None else None,
        error_code=error.code if error is not None else None,
        auth_prompt=orchestrator.auth_prompt,
        artifact=orchestrator.artifact,
        result=orchestrator.result,
        messages=orchestrator.messages.snapshot(),
        selected_template=orchestrator.selected_template,
        chat_input=orchestrator.chat_input,
    )
