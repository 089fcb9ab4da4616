import pytest

from ai_artifacts.errors import SchemaMismatch
from ai_artifacts.transport.partial_json import SnapshotDecoder, decode_line


def test_snapshots_grow_with_deltas():
    decoder = SnapshotDecoder()
    assert decoder.feed("  ") is None
    assert decoder.feed('{"title": "Counter", "code": "exp') == {"title": "Counter", "code": "exp"}
    assert decoder.feed("ort default") == {"title": "Counter", "code": "export default"}
    assert decoder.feed('"}') is None
    assert decoder.finish() == {"title": "Counter", "code": "export default"}


def test_unchanged_snapshot_is_not_repeated():
    decoder = SnapshotDecoder()
    first = decoder.feed('{"title": "A"')
    assert first == {"title": "A"}
    assert decoder.feed("   ") is None


def test_truncated_body_fails_on_finish():
    decoder = SnapshotDecoder()
    decoder.feed('{"title": "Counter", "code": "never closed')
    with pytest.raises(SchemaMismatch, match="incomplete JSON"):
        decoder.finish()


def test_empty_body_fails_on_finish():
    with pytest.raises(SchemaMismatch, match="empty"):
        SnapshotDecoder().finish()


def test_decode_line():
    assert decode_line('{"code": "x"}') == {"code": "x"}
    with pytest.raises(SchemaMismatch):
        decode_line('{"code": ')
