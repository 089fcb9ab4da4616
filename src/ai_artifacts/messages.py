"""
MessageStore: ordered conversation history.

History is an arena addressed by index. Exactly one slot may be open for
in-place rewrites: the placeholder assistant message of the generation in
flight. Appending a user message seals it.
"""

from typing import Any, Iterator, Optional

from ai_artifacts.errors import MessageStoreError
from ai_artifacts.models.message import Message, MessageMeta
from ai_artifacts.models.request import RequestMessage

MUTABLE_FIELDS = {"content", "commentary", "meta"}


class MessageStore:
    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._open_index: Optional[int] = None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]

    @property
    def open_index(self) -> Optional[int]:
        return self._open_index

    def snapshot(self) -> tuple[Message, ...]:
        """Immutable copy of the history for read-only consumers."""
        return tuple(m.model_copy(deep=True) for m in self._messages)

    def last(self) -> Optional[Message]:
        return self._messages[-1] if self._messages else None

    def append_user(self, content: str) -> int:
        self.seal()
        self._messages.append(Message(role="user", content=content))
        return len(self._messages) - 1

    def open_assistant(self, commentary: str = "") -> int:
        """Append the placeholder assistant message and make it the open slot."""
        self._messages.append(Message(role="assistant", content="", commentary=commentary))
        self._open_index = len(self._messages) - 1
        return self._open_index

    def update(self, index: int, **fields: Any) -> Message:
        if index != self._open_index:
            raise MessageStoreError(f"Message {index} is not open for updates")
        unknown = set(fields) - MUTABLE_FIELDS
        if unknown:
            raise MessageStoreError(f"Cannot update message fields: {', '.join(sorted(unknown))}")
        if isinstance(fields.get("meta"), dict):
            fields["meta"] = MessageMeta(**fields["meta"])
        updated = self._messages[index].model_copy(update=fields)
        self._messages[index] = updated
        return updated

    def seal(self) -> None:
        self._open_index = None

    def for_request(self) -> list[RequestMessage]:
        """Role and content only; commentary and meta never go to the model."""
        return [RequestMessage(role=m.role, content=m.content) for m in self._messages]
