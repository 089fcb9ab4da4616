"""
StreamingObjectClient: one structured-completion session at a time.

Stream delivery:
- ``start`` waits for the response status, then hands the body to a task.
- every distinct snapshot goes to ``on_partial`` in stream order
- ``on_complete`` fires exactly once, unless the session is cancelled first
"""

import asyncio
import logging
import uuid
from typing import AsyncGenerator, Callable, Optional

import httpx

from ai_artifacts.errors import ArtifactsError, TransportError
from ai_artifacts.models.artifact import PartialArtifact
from ai_artifacts.models.request import GenerationRequest
from ai_artifacts.transport.http import HttpClient
from ai_artifacts.transport.partial_json import SnapshotDecoder, decode_line

logger = logging.getLogger(__name__)

GENERATION_PATH = "/chat"
STREAM_FORMATS = ("text", "ndjson")

PartialCallback = Callable[[str, PartialArtifact], None]
CompleteCallback = Callable[[str, Optional[PartialArtifact], Optional[ArtifactsError]], None]


class SessionHandle:
    __slots__ = ("id", "task", "cancelled", "completed")

    def __init__(self, id: str):
        self.id = id
        self.task: Optional[asyncio.Task[None]] = None
        self.cancelled = False
        self.completed = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.completed)

    def __repr__(self) -> str:
        return f"SessionHandle(id={self.id!r}, active={self.active})"


class StreamingObjectClient:
    def __init__(
        self,
        http: HttpClient,
        path: str = GENERATION_PATH,
        stream_format: str = "text",
        idle_timeout: Optional[float] = None,
    ):
        if stream_format not in STREAM_FORMATS:
            raise ValueError(f"stream_format must be one of {STREAM_FORMATS}, got {stream_format!r}")
        self._http = http
        self._path = path
        self._stream_format = stream_format
        self._idle_timeout = idle_timeout

    async def start(
        self,
        request: GenerationRequest,
        on_partial: PartialCallback,
        on_complete: CompleteCallback,
    ) -> SessionHandle:
        """Open the stream. Raises TransportError, AuthError or RateLimitError if it cannot start."""
        response = await self._http.open_stream(self._path, request.to_wire(), read_timeout=self._idle_timeout)
        handle = SessionHandle(str(uuid.uuid4()))
        handle.task = asyncio.create_task(self._run(handle, response, on_partial, on_complete))
        logger.debug("Generation session %s started", handle.id)
        return handle

    def cancel(self, handle: Optional[SessionHandle]) -> None:
        """Stop delivery for ``handle``. Safe to call any number of times."""
        if handle is None or not handle.active:
            return
        handle.cancelled = True
        if handle.task is not None and not handle.task.done():
            handle.task.cancel()
        logger.debug("Generation session %s cancelled", handle.id)

    async def iter_partials(self, response: httpx.Response) -> AsyncGenerator[PartialArtifact, None]:
        """Snapshots of one response body. Finite and not restartable."""
        if self._stream_format == "ndjson":
            async for line in response.aiter_lines():
                if not line.strip():
                    continue
                value = decode_line(line)
                if isinstance(value, dict) and set(value) == {"error"}:
                    raise TransportError(str(value["error"]), code="stream_error")
                yield PartialArtifact.from_snapshot(value)
            return

        decoder = SnapshotDecoder()
        async for chunk in response.aiter_text():
            value = decoder.feed(chunk)
            if value is not None:
                yield PartialArtifact.from_snapshot(value)
        final = decoder.finish()
        if final != decoder.last:
            yield PartialArtifact.from_snapshot(final)

    async def _run(
        self,
        handle: SessionHandle,
        response: httpx.Response,
        on_partial: PartialCallback,
        on_complete: CompleteCallback,
    ) -> None:
        last: Optional[PartialArtifact] = None
        error: Optional[ArtifactsError] = None
        try:
            async for snapshot in self.iter_partials(response):
                if handle.cancelled:
                    return
                last = snapshot
                on_partial(handle.id, snapshot)
        except ArtifactsError as e:
            error = e
        except httpx.HTTPError as e:
            logger.error("Generation stream %s interrupted: %s", handle.id, e)
            error = TransportError(f"Generation stream interrupted: {e}")
        finally:
            await response.aclose()

        if handle.cancelled:
            return
        handle.completed = True
        on_complete(handle.id, last, error)
