"""
Incremental JSON decoding for streamed objects.

The generation endpoint streams one JSON object as raw text deltas. After each
delta the accumulated text is parsed leniently (unterminated strings, arrays
and objects are closed) so every step yields a self-contained snapshot.
"""

from typing import Any, Optional

from pydantic_core import from_json

from ai_artifacts.errors import SchemaMismatch

_UNSET = object()


class SnapshotDecoder:
    def __init__(self) -> None:
        self._buffer = ""
        self._last: Any = _UNSET

    @property
    def last(self) -> Any:
        return None if self._last is _UNSET else self._last

    def feed(self, delta: str) -> Optional[Any]:
        """Add a text delta; return the new snapshot, or None if nothing changed."""
        self._buffer += delta
        text = self._buffer.strip()
        if not text:
            return None
        try:
            value = from_json(text, allow_partial="trailing-strings")
        except ValueError:
            return None
        if value == self._last:
            return None
        self._last = value
        return value

    def finish(self) -> Any:
        """Strict parse of the whole body. Raises SchemaMismatch if it never closed."""
        text = self._buffer.strip()
        if not text:
            raise SchemaMismatch("Generation stream was empty")
        try:
            return from_json(text)
        except ValueError as e:
            raise SchemaMismatch(f"Generation stream ended with incomplete JSON: {e}")


def decode_line(line: str) -> Any:
    """Parse one complete snapshot line of an NDJSON stream."""
    try:
        return from_json(line)
    except ValueError as e:
        raise SchemaMismatch(f"Unparsable snapshot line: {e}", details={"line": line[:200]})
