from __future__ import annotations

from typing import Any

from flask_socketio import SocketIO


# Inbound (client -> server)
JOIN = "join"
DRAWING_EVENT = "drawing-event"
SEND_GUESS = "send-guess"
CLEAR_CANVAS = "clear-canvas"
SEND_MESSAGE = "send-message"

# Outbound errors raised by the transport itself
ROOM_FULL = "room-full"
ERROR = "error"


class SocketIOBroadcaster:
    """Delivers coordinator events to a single Socket.IO connection.

    Every connection sits in a room named after its sid, so ``to=sid`` works
    from handlers and from background tasks alike.
    """

    def __init__(self, socketio: SocketIO, namespace: str = "/") -> None:
        self._socketio = socketio
        self._namespace = namespace

    def send(self, sid: str, event: str, payload: Any) -> None:
        self._socketio.emit(event, payload, to=sid, namespace=self._namespace)
