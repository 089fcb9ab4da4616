"""
SubmissionOrchestrator: turns a submit into generate, then execute.

  submit -> (auth check) -> GENERATING -> partials... -> complete
         -> validate -> DISPATCHING -> DONE | FAILED

Only one generation and one dispatch are ever in flight; a new submit cancels
both first. Everything runs on one event loop and this class is the only
writer of the message history.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from ai_artifacts.analytics import CHAT_SUBMIT, EXTERNAL_LINK_CLICK, Analytics, LoggingAnalytics, safe_capture
from ai_artifacts.auth import Identity
from ai_artifacts.catalog import AUTO_TEMPLATE, ModelCatalog, TemplateCatalog
from ai_artifacts.errors import ArtifactsError, SchemaMismatch
from ai_artifacts.execution import ExecutionDispatcher
from ai_artifacts.messages import MessageStore
from ai_artifacts.models.artifact import Artifact, PartialArtifact
from ai_artifacts.models.message import MessageMeta
from ai_artifacts.models.request import GenerationRequest, LLMModelConfig
from ai_artifacts.models.result import ExecutionResult
from ai_artifacts.preferences import PreferenceStore
from ai_artifacts.schema import validate_artifact
from ai_artifacts.streaming import SessionHandle, StreamingObjectClient
from ai_artifacts.ui_state import LOADING_STATES, State, Tab, UIState, project

logger = logging.getLogger(__name__)

GENERATING_COMMENTARY = "Generating artifact..."

Listener = Callable[[UIState], None]


class SubmissionOrchestrator:
    def __init__(
        self,
        identity: Identity,
        streams: StreamingObjectClient,
        dispatcher: ExecutionDispatcher,
        *,
        templates: Optional[TemplateCatalog] = None,
        models: Optional[ModelCatalog] = None,
        preferences: Optional[PreferenceStore] = None,
        analytics: Optional[Analytics] = None,
        strict_templates: bool = False,
    ):
        self._identity = identity
        self._streams = streams
        self._dispatcher = dispatcher
        self.templates = templates if templates is not None else TemplateCatalog()
        self.models = models if models is not None else ModelCatalog()
        self._preferences = preferences if preferences is not None else PreferenceStore()
        self._analytics = analytics if analytics is not None else LoggingAnalytics()
        self._strict_templates = strict_templates

        self.messages = MessageStore()
        self._state = State.IDLE
        self._current_tab = Tab.CODE
        self._artifact: Optional[Any] = None
        self._result: Optional[ExecutionResult] = None
        self._error: Optional[ArtifactsError] = None
        self._auth_prompt = False
        self._selected_template = AUTO_TEMPLATE

        self._generation = 0
        self._session: Optional[SessionHandle] = None
        self._assistant_index: Optional[int] = None
        self._submitter_id: Optional[str] = None
        self._dispatch_task: Optional[asyncio.Task[None]] = None
        self._listeners: list[Listener] = []

    # -- read-only state --------------------------------------------------

    @property
    def state(self) -> State:
        return self._state

    @property
    def current_tab(self) -> Tab:
        return self._current_tab

    @property
    def artifact(self) -> Optional[Any]:
        """Latest partial while streaming; the validated Artifact afterwards."""
        return self._artifact

    @property
    def result(self) -> Optional[ExecutionResult]:
        return self._result

    @property
    def error(self) -> Optional[ArtifactsError]:
        return self._error

    @property
    def auth_prompt(self) -> bool:
        return self._auth_prompt

    @property
    def selected_template(self) -> str:
        return self._selected_template

    @property
    def chat_input(self) -> str:
        return self._preferences.chat_input

    @property
    def language_model(self) -> LLMModelConfig:
        return self._preferences.language_model

    @property
    def is_busy(self) -> bool:
        return self._state in LOADING_STATES

    @property
    def active_session(self) -> Optional[SessionHandle]:
        return self._session

    @property
    def view(self) -> UIState:
        return project(self)

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the new view after every change. Returns a cleanup function."""
        self._listeners.append(listener)

        def remove() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass
        return remove

    # -- user actions -----------------------------------------------------

    def set_chat_input(self, text: str) -> None:
        self._preferences.chat_input = text

    def select_template(self, template_id: str) -> None:
        if template_id != AUTO_TEMPLATE and template_id not in self.templates:
            raise KeyError(f"Unknown template: {template_id}")
        self._selected_template = template_id
        self._notify()

    def update_language_model(self, **changes: Any) -> LLMModelConfig:
        config = self.language_model.merged(**changes)
        self._preferences.language_model = config
        return config

    def dismiss_auth_prompt(self) -> None:
        self._auth_prompt = False
        if self._state is State.AWAITING_AUTH:
            self._state = State.IDLE
        self._notify()

    def sign_out(self) -> None:
        self._identity.sign_out()

    def open_external(self, url: str) -> str:
        """Record the click and hand back ``url`` for the caller to open."""
        safe_capture(self._analytics, EXTERNAL_LINK_CLICK, {"url": url})
        return url

    async def submit(self, content: Optional[str] = None) -> UIState:
        """Start a generation for ``content`` (or the pending chat input).

        Without a signed-in user nothing is appended or started and the input
        is kept for the resubmit.
        """
        if content is not None:
            self.set_chat_input(content)
        text = self.chat_input

        if not self.is_busy:
            self._state = State.AUTHENTICATING
        user = self._identity.current_user()
        if user is None:
            logger.info("Submission deferred until sign-in")
            self._auth_prompt = True
            if self._state is State.AUTHENTICATING:
                self._state = State.AWAITING_AUTH
            self._notify()
            return self.view
        self._auth_prompt = False

        self._cancel_inflight()
        self._generation += 1
        token = self._generation
        self._submitter_id = user.id

        self.messages.append_user(text)
        request = self._build_request(user.id)
        self._assistant_index = self.messages.open_assistant(GENERATING_COMMENTARY)
        self._artifact = None
        self._error = None
        self.set_chat_input("")
        self._current_tab = Tab.CODE
        self._state = State.GENERATING
        safe_capture(self._analytics, CHAT_SUBMIT, {
            "template": self._selected_template,
            "model": request.config.model,
        })
        self._notify()

        try:
            handle = await self._streams.start(
                request, on_partial=self.apply_partial, on_complete=self._on_stream_complete,
            )
        except ArtifactsError as e:
            if token == self._generation:
                self._fail(e)
            return self.view

        if token != self._generation:
            # superseded or stopped while the stream was opening
            self._streams.cancel(handle)
            return self.view
        self._session = handle
        return self.view

    def stop(self) -> None:
        """Cancel the generation in flight. A no-op when nothing is generating."""
        if self._state is not State.GENERATING:
            return
        self._generation += 1
        self._streams.cancel(self._session)
        self._session = None
        self.messages.seal()
        self._state = State.IDLE
        self._notify()

    async def wait(self) -> UIState:
        """Wait until no generation or dispatch is in flight."""
        while True:
            pending = [
                t for t in (self._session.task if self._session else None, self._dispatch_task)
                if t is not None and not t.done()
            ]
            if not pending:
                return self.view
            await asyncio.wait(pending)

    # -- stream callbacks -------------------------------------------------

    def apply_partial(self, session_id: str, snapshot: PartialArtifact) -> bool:
        """Replace the live artifact and rewrite the placeholder message.

        Returns False, changing nothing, when ``session_id`` is not the
        active session.
        """
        if not self._is_active(session_id) or self._state is not State.GENERATING:
            logger.debug("Dropping partial from inactive session %s", session_id)
            return False
        self._artifact = snapshot
        self.messages.update(
            self._assistant_index,  # type: ignore[arg-type]
            content=snapshot.text("code"),
            commentary=snapshot.text("commentary"),
            meta=MessageMeta(
                title=snapshot.text("title") or None,
                description=snapshot.text("description") or None,
            ),
        )
        self._notify()
        return True

    def _on_stream_complete(
        self, session_id: str, final: Optional[PartialArtifact], error: Optional[ArtifactsError],
    ) -> None:
        if not self._is_active(session_id):
            return
        self._session = None
        if error is not None:
            self._fail(error)
            return
        try:
            artifact = validate_artifact(final, templates=self.templates if self._strict_templates else None)
        except SchemaMismatch as e:
            self._fail(e)
            return

        self._artifact = artifact
        self._state = State.DISPATCHING
        self._notify()
        self._dispatch_task = asyncio.create_task(self._dispatch(self._generation, artifact))

    async def _dispatch(self, token: int, artifact: Artifact) -> None:
        try:
            result = await self._dispatcher.execute(
                artifact, self._submitter_id or "", self._identity.api_key(),
            )
        except ArtifactsError as e:
            if token == self._generation:
                self._fail(e)
            return
        if token != self._generation:
            logger.debug("Discarding execution result of superseded submission")
            return
        self._result = result
        self._current_tab = Tab.ARTIFACT
        self._state = State.DONE
        self._notify()

    # -- internals --------------------------------------------------------

    def _is_active(self, session_id: str) -> bool:
        return self._session is not None and self._session.id == session_id

    def _build_request(self, user_id: str) -> GenerationRequest:
        config = self.language_model
        model = self.models.get(config.model)
        return GenerationRequest(
            user_id=user_id,
            messages=self.messages.for_request(),
            template=self.templates.select(self._selected_template),
            model=model.model_dump(by_alias=True) if model else None,
            config=config,
        )

    def _cancel_inflight(self) -> None:
        if self._session is not None:
            self._streams.cancel(self._session)
            self._session = None
        if self._dispatch_task is not None and not self._dispatch_task.done():
            self._dispatch_task.cancel()
        self._dispatch_task = None

    def _fail(self, error: ArtifactsError) -> None:
        logger.warning("Submission failed [%s]: %s", error.code, error)
        self._error = error
        self._state = State.FAILED
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        view = self.view
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception as e:
                logger.warning("Listener %r failed on %s: %s", listener, view.state.value, e)
