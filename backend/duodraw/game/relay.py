from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .models import DrawingEvent

if TYPE_CHECKING:
    from .service import SessionCoordinator


logger = logging.getLogger(__name__)


class DrawingRelay:
    """Single-writer relay: only the current drawer's events go out.

    Events are forwarded as-is to everyone but the sender. Nothing is
    buffered or kept, so a late joiner never sees earlier strokes.
    """

    def __init__(self, coordinator: SessionCoordinator) -> None:
        self._coordinator = coordinator

    def relay(self, sid: str, event: DrawingEvent) -> bool:
        room = self._coordinator.room
        if room.state != "playing" or not self._coordinator.is_drawer(sid):
            logger.debug("Dropped drawing event from %s (state=%s)", sid, room.state)
            return False

        self._coordinator.broadcast("update-canvas", event.to_dict(), exclude=sid)
        return True

    def clear(self, sid: str) -> bool:
        if not self._coordinator.is_drawer(sid):
            logger.debug("Dropped clear-canvas from %s", sid)
            return False

        room = self._coordinator.room
        self._coordinator.broadcast("clear-canvas", {"roomId": room.id}, exclude=sid)
        return True
