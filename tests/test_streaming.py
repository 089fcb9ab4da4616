import asyncio

import httpx
import pytest
import pytest_asyncio

from ai_artifacts.errors import AuthError, RateLimitError, SchemaMismatch, TransportError
from ai_artifacts.models.request import GenerationRequest, RequestMessage
from ai_artifacts.streaming import StreamingObjectClient
from ai_artifacts.transport.http import HttpClient

from conftest import until

REQUEST = GenerationRequest(
    user_id="user-1",
    messages=[RequestMessage(role="user", content="build a counter app")],
    template={},
)


class Recorder:
    def __init__(self) -> None:
        self.partials = []
        self.completions = []

    def on_partial(self, session_id, snapshot):
        self.partials.append((session_id, snapshot))

    def on_complete(self, session_id, final, error):
        self.completions.append((session_id, final, error))

    @property
    def codes(self):
        return [snapshot.code for _, snapshot in self.partials]


@pytest_asyncio.fixture
async def http(backend):
    client = HttpClient("http://artifacts.test", transport=httpx.MockTransport(backend.handler))
    yield client
    await client.close()


async def run_session(streams, recorder):
    handle = await streams.start(REQUEST, recorder.on_partial, recorder.on_complete)
    await handle.task
    return handle


@pytest.mark.asyncio
async def test_text_stream_delivers_snapshots_in_order(http, backend):
    backend.queue_stream(['{"title": "Counter", "code": "a', "bc", '"}'])
    recorder = Recorder()
    handle = await run_session(StreamingObjectClient(http), recorder)

    assert recorder.codes == ["a", "abc"]
    assert {sid for sid, _ in recorder.partials} == {handle.id}
    assert len(recorder.completions) == 1
    _, final, error = recorder.completions[0]
    assert error is None
    assert final.title == "Counter" and final.code == "abc"
    assert handle.completed and not handle.active
    assert backend.chat_bodies[0]["userID"] == "user-1"
    assert backend.chat_bodies[0]["messages"] == [{"role": "user", "content": "build a counter app"}]


@pytest.mark.asyncio
async def test_ndjson_snapshots_replace_each_other(http, backend):
    backend.queue_stream(['{"code": "a"}\n', "\n", '{"code": "xyz"}\n{"code": "q"}\n'])
    recorder = Recorder()
    await run_session(StreamingObjectClient(http, stream_format="ndjson"), recorder)

    assert recorder.codes == ["a", "xyz", "q"]
    assert recorder.completions[0][1].code == "q"


@pytest.mark.asyncio
async def test_ndjson_error_line_ends_the_stream(http, backend):
    backend.queue_stream(['{"code": "a"}\n', '{"error": "model overloaded"}\n', '{"code": "b"}\n'])
    recorder = Recorder()
    await run_session(StreamingObjectClient(http, stream_format="ndjson"), recorder)

    assert recorder.codes == ["a"]
    _, final, error = recorder.completions[0]
    assert isinstance(error, TransportError)
    assert error.code == "stream_error"
    assert final.code == "a"


@pytest.mark.asyncio
async def test_truncated_body_completes_with_schema_mismatch(http, backend):
    backend.queue_stream(['{"title": "Counter", "code": "never', " closed"])
    recorder = Recorder()
    await run_session(StreamingObjectClient(http), recorder)

    _, final, error = recorder.completions[0]
    assert isinstance(error, SchemaMismatch)
    assert final.code == "never closed"


@pytest.mark.asyncio
async def test_interrupted_body_completes_with_transport_error(http, backend):
    backend.queue_stream(['{"code": "par', httpx.ReadError("connection reset")])
    recorder = Recorder()
    await run_session(StreamingObjectClient(http), recorder)

    assert recorder.codes == ["par"]
    _, final, error = recorder.completions[0]
    assert isinstance(error, TransportError)
    assert final.code == "par"


@pytest.mark.asyncio
@pytest.mark.parametrize("status,error_cls", [(401, AuthError), (403, AuthError), (429, RateLimitError), (502, TransportError)])
async def test_start_maps_status_codes(http, backend, status, error_cls):
    backend.queue_stream(["nope"], status=status)
    recorder = Recorder()
    with pytest.raises(error_cls):
        await StreamingObjectClient(http).start(REQUEST, recorder.on_partial, recorder.on_complete)
    assert recorder.partials == [] and recorder.completions == []


@pytest.mark.asyncio
async def test_unreachable_backend_is_a_transport_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    http = HttpClient("http://artifacts.test", transport=httpx.MockTransport(refuse))
    recorder = Recorder()
    with pytest.raises(TransportError) as exc:
        await StreamingObjectClient(http).start(REQUEST, recorder.on_partial, recorder.on_complete)
    assert not isinstance(exc.value, RateLimitError)
    await http.close()


@pytest.mark.asyncio
async def test_cancel_suppresses_later_callbacks(http, backend):
    gate = asyncio.Event()
    backend.queue_stream(['{"code": "first', gate, ' and more"}'])
    recorder = Recorder()
    streams = StreamingObjectClient(http)
    handle = await streams.start(REQUEST, recorder.on_partial, recorder.on_complete)
    await until(lambda: len(recorder.partials) == 1)

    streams.cancel(handle)
    streams.cancel(handle)
    gate.set()
    await asyncio.sleep(0.05)

    assert handle.cancelled
    assert handle.task.done()
    assert recorder.codes == ["first"]
    assert recorder.completions == []


def test_rejects_unknown_stream_format():
    with pytest.raises(ValueError):
        StreamingObjectClient(HttpClient("http://artifacts.test"), stream_format="sse")
