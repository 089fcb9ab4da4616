"""
AsyncArtifacts / Artifacts: main clients.
"""

import asyncio
from typing import Any, Optional

import httpx

from ai_artifacts.analytics import Analytics
from ai_artifacts.auth import Identity, StoredIdentity
from ai_artifacts.catalog import ModelCatalog, TemplateCatalog
from ai_artifacts.config import preferences_file, resolve_base_url
from ai_artifacts.errors import AuthDeferred
from ai_artifacts.execution import ExecutionDispatcher
from ai_artifacts.orchestrator import SubmissionOrchestrator
from ai_artifacts.preferences import PreferenceStore
from ai_artifacts.streaming import StreamingObjectClient
from ai_artifacts.transport.http import DEFAULT_TIMEOUT_S, HttpClient
from ai_artifacts.ui_state import UIState


class AsyncArtifacts:
    """Async client (primary). One instance holds one conversation."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        identity: Optional[Identity] = None,
        preferences: Optional[PreferenceStore] = None,
        analytics: Optional[Analytics] = None,
        templates: Optional[TemplateCatalog] = None,
        models: Optional[ModelCatalog] = None,
        stream_format: str = "text",
        strict_templates: bool = False,
        timeout: float = DEFAULT_TIMEOUT_S,
        idle_timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.http = HttpClient(base_url=resolve_base_url(base_url), timeout=timeout, transport=transport)
        self.streams = StreamingObjectClient(self.http, stream_format=stream_format, idle_timeout=idle_timeout)
        self.dispatcher = ExecutionDispatcher(self.http)
        self.orchestrator = SubmissionOrchestrator(
            identity if identity is not None else StoredIdentity(),
            self.streams,
            self.dispatcher,
            templates=templates,
            models=models,
            preferences=preferences if preferences is not None else PreferenceStore(preferences_file()),
            analytics=analytics,
            strict_templates=strict_templates,
        )

    @property
    def view(self) -> UIState:
        return self.orchestrator.view

    async def generate(self, prompt: Optional[str] = None, template: Optional[str] = None) -> UIState:
        """Submit and wait for the generate-then-execute cycle to finish.

        Raises AuthDeferred when nobody is signed in; other failures are
        reported on the returned view.
        """
        if template is not None:
            self.orchestrator.select_template(template)
        view = await self.orchestrator.submit(prompt)
        if view.auth_prompt and not view.is_loading:
            raise AuthDeferred()
        return await self.orchestrator.wait()

    def stop(self) -> None:
        self.orchestrator.stop()

    async def close(self) -> None:
        self.orchestrator.stop()
        await self.orchestrator.wait()
        await self.http.close()

    async def __aenter__(self) -> "AsyncArtifacts":
        return self

    async def __aexit__(self, *_exc: Any) -> None:
        await self.close()


class Artifacts:
    """Sync wrapper around AsyncArtifacts. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncArtifacts(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def orchestrator(self) -> SubmissionOrchestrator:
        return self._async.orchestrator

    @property
    def view(self) -> UIState:
        return self._async.view

    def generate(self, prompt: Optional[str] = None, template: Optional[str] = None) -> UIState:
        return self._run(self._async.generate(prompt, template=template))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
