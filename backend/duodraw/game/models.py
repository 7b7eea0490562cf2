from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from .messages import MessageLog, now_ms


RoomState = Literal["waiting", "playing", "round_end"]
Role = Literal["drawer", "guesser"]
DrawingAction = Literal["start", "draw", "end", "clear"]

DRAWING_ACTIONS = ("start", "draw", "end", "clear")


@dataclass
class Participant:
    id: str
    name: str
    role: Role
    score: int = 0
    connected: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "isDrawer": self.role == "drawer",
            "score": self.score,
            "connected": self.connected,
        }


@dataclass(frozen=True)
class DrawingEvent:
    """A drawing payload as the drawer sent it.

    Only the envelope is checked (``action`` known, ``points`` a list). Points
    are opaque and go out exactly as received.
    """

    payload: dict

    @classmethod
    def from_payload(cls, payload: Any, default_room_id: str = "") -> DrawingEvent:
        """Check the envelope; raises ValueError when the shape is wrong."""
        if not isinstance(payload, dict):
            raise ValueError("drawing event must be an object")

        action = payload.get("action")
        if action not in DRAWING_ACTIONS:
            raise ValueError(f"unknown action: {action!r}")

        points = payload.get("points", [])
        if points is not None and not isinstance(points, list):
            raise ValueError("points must be a list")

        forwarded = dict(payload)
        if not forwarded.get("roomId") and default_room_id:
            forwarded["roomId"] = default_room_id
        return cls(payload=forwarded)

    @property
    def room_id(self) -> str:
        return str(self.payload.get("roomId") or "")

    @property
    def action(self) -> DrawingAction:
        return self.payload["action"]

    @property
    def points(self) -> list:
        return self.payload.get("points") or []

    def to_dict(self) -> dict:
        return self.payload



@dataclass
class Room:
    id: str
    state: RoomState = "waiting"
    round: int = 0
    secret_word: str = ""
    drawer_id: str | None = None
    guesser_id: str | None = None
    participants: dict[str, Participant] = field(default_factory=dict)
    created_at_ms: int = field(default_factory=now_ms)
    messages: MessageLog = field(init=False)

    def __post_init__(self) -> None:
        self.messages = MessageLog(self.id)

    def reset(self) -> None:
        self.state = "waiting"
        self.round = 0
        self.secret_word = ""
        self.drawer_id = None
        self.guesser_id = None
        self.participants = {}
        self.messages = MessageLog(self.id)
