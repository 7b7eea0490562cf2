from __future__ import annotations

import itertools
import time
from dataclasses import dataclass
from typing import Callable, Iterator, Literal


MessageKind = Literal["chat", "system", "guess"]

SYSTEM_AUTHOR_ID = "system"
SYSTEM_AUTHOR_NAME = "System"


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Message:
    id: str
    room_id: str
    author_id: str
    author_name: str
    text: str
    created_at_ms: int
    kind: MessageKind

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "roomId": self.room_id,
            "authorId": self.author_id,
            "authorName": self.author_name,
            "text": self.text,
            "createdAtMs": self.created_at_ms,
            "kind": self.kind,
        }


class MessageLog:
    """Append-only, ordered record of a room's chat, guess and system lines.

    Entries are never removed or reordered; insertion order is display order.
    Listeners registered with ``subscribe`` are called with every new entry.
    """

    def __init__(self, room_id: str, clock: Callable[[], int] = now_ms) -> None:
        self.room_id = room_id
        self._clock = clock
        self._seq = itertools.count(1)
        self._entries: list[Message] = []
        self._listeners: list[Callable[[Message], None]] = []

    def subscribe(self, listener: Callable[[Message], None]) -> None:
        self._listeners.append(listener)

    def append(self, author_id: str, author_name: str, text: str, kind: MessageKind) -> Message:
        created = self._clock()
        msg = Message(
            id=f"{created}-{next(self._seq)}",
            room_id=self.room_id,
            author_id=author_id,
            author_name=author_name,
            text=text,
            created_at_ms=created,
            kind=kind,
        )
        self._entries.append(msg)
        for listener in list(self._listeners):
            listener(msg)
        return msg

    def system(self, text: str) -> Message:
        return self.append(SYSTEM_AUTHOR_ID, SYSTEM_AUTHOR_NAME, text, "system")

    def entries(self) -> list[Message]:
        return list(self._entries)

    def to_list(self) -> list[dict]:
        return [m.to_dict() for m in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._entries))
