import asyncio
import json
from typing import Any, Callable, Union

import httpx
import pytest
import pytest_asyncio

from ai_artifacts.analytics import NullAnalytics
from ai_artifacts.auth import StaticIdentity
from ai_artifacts.client import AsyncArtifacts
from ai_artifacts.preferences import PreferenceStore

COUNTER_ARTIFACT = {
    "commentary": "A single React component holding the count in state.",
    "template": "react",
    "title": "Counter",
    "description": "A button that increments a counter.",
    "code": "export default function Counter() { return <button>0</button> }",
}

Chunk = Union[str, asyncio.Event, Exception]


def streamed(chunks: list[Chunk], status: int = 200) -> Callable[[], httpx.Response]:
    """Response factory whose body yields ``chunks``; Events pause it, exceptions break it."""

    async def body():
        for chunk in chunks:
            if isinstance(chunk, asyncio.Event):
                await chunk.wait()
            elif isinstance(chunk, Exception):
                raise chunk
            else:
                yield chunk.encode()

    return lambda: httpx.Response(status, content=body())


def json_response(data: Any, status: int = 200) -> Callable[[], httpx.Response]:
    return lambda: httpx.Response(status, json=data)


def text_deltas(obj: dict[str, Any], size: int = 24) -> list[str]:
    text = json.dumps(obj)
    return [text[i:i + size] for i in range(0, len(text), size)]


class RecordingAnalytics:
    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def capture(self, event: str, properties: Any = None) -> None:
        self.events.append((event, properties))


class FakeBackend:
    """Stands in for the app server: /api/chat streams, /api/sandbox executes."""

    def __init__(self) -> None:
        self.chat_bodies: list[dict[str, Any]] = []
        self.sandbox_bodies: list[dict[str, Any]] = []
        self.chat_responses: list[Any] = []
        self.sandbox_responses: list[Any] = []
        self.default_sandbox = json_response({"stdout": "", "exitCode": 0})

    def queue_stream(self, chunks: list[Chunk], status: int = 200) -> None:
        self.chat_responses.append(streamed(chunks, status))

    def queue_artifact(self, artifact: dict[str, Any] = COUNTER_ARTIFACT) -> None:
        self.queue_stream(text_deltas(artifact))

    def queue_held_open(self, opened: asyncio.Event, artifact: dict[str, Any] = COUNTER_ARTIFACT) -> None:
        """The response headers only arrive once ``opened`` is set."""
        respond = streamed(text_deltas(artifact))

        async def held():
            await opened.wait()
            return respond()

        self.chat_responses.append(held)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if request.url.path == "/api/chat":
            self.chat_bodies.append(body)
            response = self.chat_responses.pop(0)()
            if asyncio.iscoroutine(response):
                response = await response
            return response
        if request.url.path == "/api/sandbox":
            self.sandbox_bodies.append(body)
            responder = self.sandbox_responses.pop(0) if self.sandbox_responses else self.default_sandbox
            response = responder()
            if asyncio.iscoroutine(response):
                response = await response
            return response
        return httpx.Response(404, text="not found")


async def until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async def poll() -> None:
        while not predicate():
            await asyncio.sleep(0.005)
    await asyncio.wait_for(poll(), timeout)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def identity() -> StaticIdentity:
    return StaticIdentity(user_id="user-1", api_key="e2b-key")


@pytest.fixture
def analytics() -> RecordingAnalytics:
    return RecordingAnalytics()


@pytest.fixture
def make_client(backend, identity):
    def factory(**kwargs: Any) -> AsyncArtifacts:
        kwargs.setdefault("identity", identity)
        kwargs.setdefault("preferences", PreferenceStore())
        kwargs.setdefault("analytics", NullAnalytics())
        client = AsyncArtifacts(
            base_url="http://artifacts.test",
            transport=httpx.MockTransport(backend.handler),
            **kwargs,
        )
        return client

    return factory


@pytest_asyncio.fixture
async def client(make_client):
    c = make_client()
    yield c
    await c.close()
